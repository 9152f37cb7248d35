"""Services for dogeup module."""
from .api_client import HTTPAPIClient
from .credentials import CredentialBroker, normalize_credentials
from .signer import SignedRequest, sign
from .storage import StorageClientFactory
from .uploader import ObjectUploader, guess_content_type, is_transient_error

__all__ = [
    "HTTPAPIClient",
    "CredentialBroker",
    "normalize_credentials",
    "SignedRequest",
    "sign",
    "StorageClientFactory",
    "ObjectUploader",
    "guess_content_type",
    "is_transient_error",
]
