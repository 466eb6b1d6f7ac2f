"""
Models for esdoc_uploader.

Configuration and results are immutable dataclasses; the endpoint table is the
only mutable record and belongs to the orchestrator.
"""
import os
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


class Message(Enum):
    """User-facing messages, keyed by the symbolic name used in diagnostics."""
    INVALID_URL = "The repository url is invalid"
    INVALID_PACKAGE_URL = (
        "The repository url is invalid. There is likely additional logging output above"
    )
    UPLOADING = "The documentation is already being uploaded"
    UNEXPECTED = "Unexpected error, please try again"
    NO_PACKAGE = "There's no package.json in this directory"
    NO_REPOSITORY = "There's no repository information in the package.json"
    INVALID_FORMAT = (
        "The repository from the package.json it's not valid. "
        'Expected format "[author]/[repository]"'
    )
    ONLY_GITHUB = "ESDoc only supports Github repositories"
    SUCCESS = "The documentation was successfully uploaded:"
    POLL_LIMIT = "The documentation wasn't ready after the maximum number of checks"


class UploadStatus(Enum):
    """Upload operation status."""
    SUCCESS = "success"
    FAILED = "failed"


@dataclass(frozen=True)
class UploadResult:
    """Immutable result of an upload operation."""
    status: UploadStatus
    url: Optional[str] = None
    error: Optional[str] = None

    @property
    def success(self) -> bool:
        return self.status == UploadStatus.SUCCESS

    @classmethod
    def ok(cls, url: str):
        return cls(status=UploadStatus.SUCCESS, url=url)

    @classmethod
    def fail(cls, error: str):
        return cls(status=UploadStatus.FAILED, error=error)


def _env_float(name: str, default: float) -> float:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    return float(value)


def _env_int(name: str, default: Optional[int]) -> Optional[int]:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    return int(value)


@dataclass(frozen=True)
class UploadConfig:
    """Immutable configuration for upload operations."""
    host: str = "doc.esdoc.org"
    create_path: str = "/api/create"
    finish_file: str = "/.finish.json"
    poll_interval: float = 4.0
    max_polls: Optional[int] = None  # None polls until the API decides
    indicator_interval: float = 0.5
    indicator_text: str = "Uploading"
    manifest_path: str = "package.json"
    timeout: float = 60.0

    @classmethod
    def from_env(cls, **overrides) -> "UploadConfig":
        """
        Build a config from ESDOC_* environment variables.

        Keyword overrides set to None are ignored so CLI flags can be passed
        through untouched.
        """
        defaults = cls()
        values = {
            "host": os.getenv("ESDOC_API_HOST") or defaults.host,
            "poll_interval": _env_float("ESDOC_POLL_INTERVAL", defaults.poll_interval),
            "max_polls": _env_int("ESDOC_MAX_POLLS", defaults.max_polls),
            "manifest_path": os.getenv("ESDOC_MANIFEST") or defaults.manifest_path,
            "timeout": _env_float("ESDOC_TIMEOUT", defaults.timeout),
        }
        values.update({key: value for key, value in overrides.items() if value is not None})
        return cls(**values)


@dataclass
class ApiEndpoints:
    """Paths on the documentation API; `path` is assigned by the create response."""
    host: str
    create_path: str
    path: Optional[str] = None
    status_path: Optional[str] = None
    finish_file: str = field(default="/.finish.json", repr=False)

    def set_endpoint(self, path: str) -> None:
        """Record the path returned by the API and derive the status path from it."""
        self.path = path
        self.status_path = f"{path}{self.finish_file}"

    def url_for(self, path: str) -> str:
        return f"https://{self.host}{path}"
