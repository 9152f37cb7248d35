"""
Error taxonomy for upload runs.

Every failure a run can report derives from UploaderError, so the
orchestrator and CLI can catch the whole family at a single point.
"""
from pathlib import Path
from typing import Optional, Union


class UploaderError(Exception):
    """Base class for all errors reported by an upload run."""


# Local filesystem

class PathNotFoundError(UploaderError):
    """Local path does not exist or cannot be accessed."""

    def __init__(self, path: Union[str, Path], detail: Optional[str] = None):
        self.path = str(path)
        message = f"local path does not exist or is not accessible: {self.path}"
        if detail:
            message = f"{message} ({detail})"
        super().__init__(message)


class UnsupportedPathTypeError(UploaderError):
    """Local path is neither a regular file nor a directory."""

    def __init__(self, path: Union[str, Path]):
        self.path = str(path)
        super().__init__(f"local path is neither a file nor a directory: {self.path}")


# Credential exchange

class UpstreamError(UploaderError):
    """Token endpoint answered with an HTTP or application-level failure."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        reason: Optional[str] = None,
    ):
        self.status_code = status_code
        self.reason = reason
        super().__init__(message)

    @classmethod
    def from_status(cls, status_code: int, reason: str) -> "UpstreamError":
        return cls(f"{status_code} {reason}".strip(), status_code=status_code, reason=reason)


class CredentialError(UploaderError):
    """Token endpoint answered but no usable id/secret pair could be read."""

    def __init__(self, message: str = "no usable credential obtained"):
        super().__init__(message)


class ConfigurationError(UploaderError):
    """Upload destination (bucket alias or endpoint) is missing or invalid."""


# Object upload

class FatalUploadError(UploaderError):
    """Put request failed for good: non-retryable, or retries exhausted."""

    def __init__(self, object_key: str, reason: str, attempts: int = 1):
        self.object_key = object_key
        self.reason = reason
        self.attempts = attempts
        super().__init__(f"failed to upload {object_key} after {attempts} attempt(s): {reason}")
