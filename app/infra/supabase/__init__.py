"""Supabase infrastructure module"""
from .client import create_request_client

__all__ = ['create_request_client']
