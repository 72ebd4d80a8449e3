"""Auth feature module"""
