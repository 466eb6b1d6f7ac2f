"""
esdoc_uploader - trigger and follow documentation builds on doc.esdoc.org.

Usage:
    from esdoc_uploader import ESDocUploader

    # Repository taken from ./package.json
    uploader = ESDocUploader()
    if uploader.can_upload():
        result = await uploader.upload()

    # Explicit repository
    uploader = ESDocUploader("git@github.com:author/repository.git")
    result = await uploader.upload(lambda success, url=None: print(success, url))
"""
from .orchestrator import ESDocUploader
from .models import ApiEndpoints, Message, UploadConfig, UploadResult, UploadStatus
from .services import APIError, APIResponse, HTTPAPIClient, RepositoryResolver

__version__ = "1.0.0"
__all__ = [
    # Main
    "ESDocUploader",
    # Models
    "ApiEndpoints",
    "Message",
    "UploadConfig",
    "UploadResult",
    "UploadStatus",
    # Services
    "APIError",
    "APIResponse",
    "HTTPAPIClient",
    "RepositoryResolver",
]
