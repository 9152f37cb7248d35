"""
Uploader - Single Responsibility: put one file into the bucket.

Reads the file, infers its content type and retries transient put failures
with a linear, capped backoff.
"""
import asyncio
import logging
import mimetypes
from pathlib import Path
from typing import Awaitable, Callable, Optional, Union

from botocore.exceptions import (
    ClientError,
    ConnectionClosedError,
    ConnectTimeoutError,
    EndpointConnectionError,
    ReadTimeoutError,
)

from ..errors import FatalUploadError
from ..models import UploadConfig, UploadOutcome, UploadTask
from ..protocols import IObjectStorageClient
from ..utils.events import EventEmitter

logger = logging.getLogger(__name__)

DEFAULT_CONTENT_TYPE = "application/octet-stream"

_FALLBACK_MIMES = {
    ".js": "application/javascript",
    ".mjs": "application/javascript",
    ".map": "application/json",
    ".md": "text/markdown",
    ".webp": "image/webp",
    ".woff": "font/woff",
    ".woff2": "font/woff2",
    ".wasm": "application/wasm",
}

_TIMEOUT_ERRORS = (asyncio.TimeoutError, ReadTimeoutError, ConnectTimeoutError)
_CONNECTION_ERRORS = (EndpointConnectionError, ConnectionClosedError)

_RETRYABLE_ERROR_CODES = {
    "RequestTimeout",
    "RequestTimeoutException",
    "Throttling",
    "ThrottlingException",
    "SlowDown",
    "InternalError",
    "ServiceUnavailable",
    "503",
}


def guess_content_type(path: Union[str, Path]) -> str:
    path = Path(path)
    mimetype, _ = mimetypes.guess_type(path.name)
    if not mimetype:
        mimetype = _FALLBACK_MIMES.get(path.suffix.lower(), DEFAULT_CONTENT_TYPE)
    return mimetype


def is_timeout_error(error: BaseException) -> bool:
    if isinstance(error, _TIMEOUT_ERRORS):
        return True
    if isinstance(error, ClientError):
        return error.response.get("Error", {}).get("Code") in ("RequestTimeout", "RequestTimeoutException")
    return False


def is_transient_error(error: BaseException) -> bool:
    """Timeouts and failures the transport marks as retryable."""
    if is_timeout_error(error) or isinstance(error, _CONNECTION_ERRORS):
        return True
    if isinstance(error, ClientError):
        code = error.response.get("Error", {}).get("Code")
        status = error.response.get("ResponseMetadata", {}).get("HTTPStatusCode", 0) or 0
        return code in _RETRYABLE_ERROR_CODES or status == 429 or status >= 500
    return bool(getattr(error, "retryable", False))


def describe_error(error: BaseException) -> str:
    if isinstance(error, ClientError):
        err = error.response.get("Error", {})
        code = err.get("Code", "Unknown")
        message = err.get("Message")
        return f"{code}: {message}" if message else code
    return str(error) or type(error).__name__


class ObjectUploader:
    """Uploads files one at a time with bounded retry."""

    def __init__(
        self,
        client: IObjectStorageClient,
        config: Optional[UploadConfig] = None,
        events: Optional[EventEmitter] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        """
        Initialize uploader.

        Args:
            client: Open S3 client, shared read-only for the whole run
            config: Upload configuration (attempt budget, backoff)
            events: Optional emitter receiving ``file_retry`` events
            sleep: Awaitable used between attempts
        """
        self._client = client
        self._config = config or UploadConfig()
        self._events = events
        self._sleep = sleep

    def build_task(self, bucket: str, object_key: str, path: Path) -> UploadTask:
        return UploadTask(
            bucket=bucket,
            object_key=object_key,
            path=Path(path),
            content_type=guess_content_type(path),
        )

    async def upload(self, task: UploadTask) -> UploadOutcome:
        """
        Put a single object.

        Args:
            task: Upload task (bucket, key, local path, content type)

        Returns:
            UploadOutcome on success

        Raises:
            FatalUploadError: Non-retryable failure or attempts exhausted
        """
        try:
            body = await asyncio.to_thread(task.path.read_bytes)
        except OSError as exc:
            raise FatalUploadError(task.object_key, f"cannot read {task.path}: {exc}") from exc

        max_attempts = self._config.max_attempts
        for attempt in range(1, max_attempts + 1):
            try:
                await self._client.put_object(
                    Bucket=task.bucket,
                    Key=task.object_key,
                    Body=body,
                    ContentType=task.content_type,
                )
                return UploadOutcome(object_key=task.object_key, attempts=attempt, size=len(body))
            except Exception as exc:
                reason = describe_error(exc)
                if not is_transient_error(exc):
                    raise FatalUploadError(task.object_key, reason, attempt) from exc
                if attempt == max_attempts:
                    raise FatalUploadError(task.object_key, reason, attempt) from exc

                logger.info(
                    "Upload retry (%d/%d): %s, reason: %s",
                    attempt,
                    max_attempts,
                    task.object_key,
                    reason,
                )
                if self._events is not None:
                    await self._events.emit("file_retry", task.object_key, attempt, reason)
                await self._sleep(self._config.get_backoff(attempt))

        raise FatalUploadError(task.object_key, "no upload attempt was made", 0)
