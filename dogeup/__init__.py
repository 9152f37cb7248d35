"""
dogeup - Upload a file or directory tree to DogeCloud object storage.

A run exchanges the account AccessKey/SecretKey for a temporary credential
through an HMAC-signed API call, then puts every file into the bucket alias
returned by the API, retrying transient failures.

Usage:
    from dogeup import UploadOrchestrator, InputParameters

    params = InputParameters(
        access_key="...",
        secret_key="...",
        bucket_name="my-bucket",
        local_path="dist",
        remote_path_prefix="assets",
    )
    result = await UploadOrchestrator(params).run()
    if not result.success:
        raise SystemExit(result.message)
"""
from .errors import (
    ConfigurationError,
    CredentialError,
    FatalUploadError,
    PathNotFoundError,
    UnsupportedPathTypeError,
    UploaderError,
    UpstreamError,
)
from .models import InputParameters, RunState, TemporaryCredential, UploadConfig, UploadOutcome, UploadTask
from .orchestrator import FileEntry, RunResult, UploadOrchestrator, derive_key

__version__ = "0.1.0"
__all__ = [
    # Main
    "UploadOrchestrator",
    "RunResult",
    # Models
    "InputParameters",
    "RunState",
    "TemporaryCredential",
    "UploadConfig",
    "UploadOutcome",
    "UploadTask",
    "FileEntry",
    "derive_key",
    # Errors
    "UploaderError",
    "PathNotFoundError",
    "UnsupportedPathTypeError",
    "UpstreamError",
    "CredentialError",
    "ConfigurationError",
    "FatalUploadError",
]
