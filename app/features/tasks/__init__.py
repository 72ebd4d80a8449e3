"""Tasks feature module"""
