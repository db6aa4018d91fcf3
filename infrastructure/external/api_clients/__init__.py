"""
API client module

Base client for integrating with outbound REST APIs
"""
from .base import BaseAPIClient, APIResponse, APIError

__all__ = [
    "BaseAPIClient",
    "APIResponse",
    "APIError"
]
