"""Services for esdoc_uploader."""
from .api_client import APIError, APIResponse, HTTPAPIClient
from .resolver import RepositoryResolver, build_locator

__all__ = [
    "APIError",
    "APIResponse",
    "HTTPAPIClient",
    "RepositoryResolver",
    "build_locator",
]
