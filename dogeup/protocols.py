"""
Protocols (Interfaces) for Dependency Inversion.

Following Interface Segregation Principle - small, focused interfaces.
"""
from pathlib import Path
from typing import Any, AsyncContextManager, List, Mapping, Optional, Protocol, Tuple, runtime_checkable

from .models import TemporaryCredential


@runtime_checkable
class IObjectStorageClient(Protocol):
    """Interface for the subset of the S3 client used by uploads."""

    async def put_object(self, **params: Any) -> Mapping[str, Any]:
        """Store one object."""
        ...


@runtime_checkable
class IAPIClient(Protocol):
    """Interface for API operations, used as an async context manager."""

    async def __aenter__(self) -> "IAPIClient":
        ...

    async def __aexit__(self, *args: Any) -> Any:
        ...

    async def post(self, endpoint: str, content: bytes, headers: Mapping[str, str]) -> Any:
        """POST request to API."""
        ...


@runtime_checkable
class ICredentialBroker(Protocol):
    """Interface for temporary credential issuance."""

    async def fetch(self, access_key: str, secret_key: str, bucket_name: str) -> TemporaryCredential:
        """Exchange account keys for a temporary credential."""
        ...


@runtime_checkable
class IStorageClientFactory(Protocol):
    """Interface for storage client construction."""

    def create(
        self, endpoint: str, credential: TemporaryCredential
    ) -> AsyncContextManager[IObjectStorageClient]:
        """Build a client bound to endpoint and credential."""
        ...


@runtime_checkable
class IFileCollector(Protocol):
    """Interface for local path resolution and enumeration."""

    def resolve_path(self, local_path: str, workspace: Optional[Path] = None) -> Path:
        ...

    def collect(self, path: Path) -> Tuple[Path, List[Any]]:
        ...
