"""
Models for dogeup module.

Immutable dataclasses following Single Responsibility Principle.
"""
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional
from enum import Enum


DEFAULT_API_BASE_URL = "https://api.dogecloud.com"
TOKEN_PATH = "/auth/tmp_token.json"
UPLOAD_CHANNEL = "OSS_UPLOAD"


class RunState(Enum):
    """State of an upload run."""
    VALIDATING_INPUT = "validating_input"
    FETCHING_CREDENTIAL = "fetching_credential"
    BUILDING_CLIENT = "building_client"
    ENUMERATING = "enumerating"
    UPLOADING = "uploading"
    DONE = "done"
    FAILED = "failed"


@dataclass(frozen=True)
class InputParameters:
    """Immutable inputs of a single run, supplied by the CLI."""
    access_key: str
    secret_key: str = field(repr=False)
    bucket_name: str
    local_path: str
    remote_path_prefix: Optional[str] = None


@dataclass(frozen=True)
class TemporaryCredential:
    """Short-lived credential issued by the token endpoint for one run."""
    access_key_id: str
    secret_access_key: str = field(repr=False)
    session_token: Optional[str] = field(default=None, repr=False)
    target_bucket: Optional[str] = None
    target_endpoint: Optional[str] = None

    @property
    def has_destination(self) -> bool:
        return bool(self.target_bucket) and bool(self.target_endpoint)


@dataclass(frozen=True)
class UploadTask:
    """Single put request derived from a discovered file."""
    bucket: str
    object_key: str
    path: Path
    content_type: str = "application/octet-stream"


@dataclass(frozen=True)
class UploadOutcome:
    """Successful upload of one object."""
    object_key: str
    attempts: int = 1
    size: int = 0


@dataclass(frozen=True)
class UploadConfig:
    """Immutable configuration for upload operations."""
    api_base_url: str = DEFAULT_API_BASE_URL
    token_path: str = TOKEN_PATH
    channel: str = UPLOAD_CHANNEL
    api_timeout: float = 60.0
    # Storage client
    region: str = "auto"
    read_timeout: int = 10 * 60
    connect_timeout: int = 30
    transport_max_attempts: int = 5
    # Application-level retry
    max_attempts: int = 3
    backoff_step: float = 2.0
    backoff_cap: float = 8.0

    def get_backoff(self, attempt: int) -> float:
        """Seconds to wait after failed attempt number `attempt` (1-based)."""
        return min(self.backoff_step * attempt, self.backoff_cap)
