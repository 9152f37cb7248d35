"""
Storage Service - Single Responsibility: build object storage clients.

Clients are bound to the endpoint and temporary credential returned by the
token endpoint; they are opened once per run and reused for every put.
"""
import logging
from typing import AsyncContextManager, Optional
from urllib.parse import urlparse

import aioboto3
from botocore.config import Config

from ..errors import ConfigurationError
from ..models import TemporaryCredential, UploadConfig
from ..protocols import IObjectStorageClient

logger = logging.getLogger(__name__)


def validate_endpoint(endpoint: str) -> str:
    """Return endpoint unchanged if it is an absolute http(s) URL."""
    if not isinstance(endpoint, str):
        raise ConfigurationError(f"invalid storage endpoint: {endpoint!r}")
    parsed = urlparse(endpoint)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise ConfigurationError(f"invalid storage endpoint: {endpoint!r}")
    return endpoint


class StorageClientFactory:
    """
    Factory for S3 clients talking to a custom endpoint.

    Implements IStorageClientFactory protocol.
    """

    def __init__(self, config: Optional[UploadConfig] = None, session=None):
        """
        Initialize factory.

        Args:
            config: Upload configuration (timeouts, retry budget, region)
            session: aioboto3 session; a fresh one is created if omitted
        """
        self._config = config or UploadConfig()
        self._session = session or aioboto3.Session()

    def build_config(self) -> Config:
        """botocore config: path-style, fixed timeouts, transport retry budget."""
        return Config(
            region_name=self._config.region,
            connect_timeout=self._config.connect_timeout,
            read_timeout=self._config.read_timeout,
            retries={
                "total_max_attempts": self._config.transport_max_attempts,
                "mode": "standard",
            },
            s3={"addressing_style": "path"},
        )

    def create(
        self, endpoint: str, credential: TemporaryCredential
    ) -> AsyncContextManager[IObjectStorageClient]:
        endpoint = validate_endpoint(endpoint)
        logger.debug("Creating storage client for %s", endpoint)
        return self._session.client(
            "s3",
            endpoint_url=endpoint,
            region_name=self._config.region,
            aws_access_key_id=credential.access_key_id,
            aws_secret_access_key=credential.secret_access_key,
            aws_session_token=credential.session_token,
            config=self.build_config(),
        )
