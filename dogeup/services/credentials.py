"""
Credential Broker - Single Responsibility: obtain a temporary credential.

Signs a token request, posts it to the token endpoint and maps the loosely
typed answer onto TemporaryCredential.
"""
import logging
from typing import Any, Callable, Mapping, Optional, Sequence, Tuple

import httpx

from ..errors import CredentialError, UpstreamError
from ..models import TemporaryCredential, UploadConfig
from ..protocols import IAPIClient
from .api_client import HTTPAPIClient
from .signer import SignedRequest

logger = logging.getLogger(__name__)

SUCCESS_CODE = 200

# Tried in order; the first truthy value wins.
CREDENTIAL_CONTAINER_KEYS = ("Credentials", "credentials", "credential")
ACCESS_KEY_ID_ALIASES = ("accessKeyId", "AccessKeyId", "AccessKey", "ak", "AK")
SECRET_ACCESS_KEY_ALIASES = ("secretAccessKey", "SecretAccessKey", "SecretKey", "sk", "SK")
SESSION_TOKEN_ALIASES = ("sessionToken", "SessionToken", "token", "Token")


def _first_present(raw: Mapping[str, Any], aliases: Sequence[str]) -> Optional[Any]:
    for alias in aliases:
        value = raw.get(alias)
        if value:
            return value
    return None


def normalize_credentials(data: Mapping[str, Any]) -> Tuple[str, str, Optional[str]]:
    """
    Extract (access_key_id, secret_access_key, session_token) from response data.

    Args:
        data: The ``data`` object of the token response

    Returns:
        Canonical credential triple

    Raises:
        CredentialError: If id or secret cannot be found under any alias
    """
    container = _first_present(data, CREDENTIAL_CONTAINER_KEYS) or data
    if not isinstance(container, Mapping):
        raise CredentialError()

    access_key_id = _first_present(container, ACCESS_KEY_ID_ALIASES)
    secret_access_key = _first_present(container, SECRET_ACCESS_KEY_ALIASES)
    session_token = _first_present(container, SESSION_TOKEN_ALIASES)

    if not access_key_id or not secret_access_key:
        raise CredentialError()

    return str(access_key_id), str(secret_access_key), str(session_token) if session_token else None


def extract_destination(data: Mapping[str, Any]) -> Tuple[Optional[str], Optional[str]]:
    """Return (s3Bucket, s3Endpoint) of the first bucket entry, if any."""
    buckets = data.get("Buckets")
    if not isinstance(buckets, list) or not buckets:
        return None, None
    if len(buckets) > 1:
        logger.debug("Token response lists %d buckets, using the first", len(buckets))

    first = buckets[0]
    if not isinstance(first, Mapping):
        return None, None
    return _text_field(first, "s3Bucket"), _text_field(first, "s3Endpoint")


def _text_field(entry: Mapping[str, Any], name: str) -> Optional[str]:
    value = entry.get(name)
    if not isinstance(value, str) or not value.strip():
        if value is not None:
            logger.debug("Ignoring non-text %s in token response: %r", name, value)
        return None
    return value


def build_payload(bucket_name: str, channel: str) -> dict:
    return {"channel": channel, "scopes": [f"{bucket_name}:*"]}


class CredentialBroker:
    """
    Service for fetching temporary upload credentials.

    Implements ICredentialBroker protocol.
    """

    def __init__(
        self,
        config: Optional[UploadConfig] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        api_client_factory: Optional[Callable[[], IAPIClient]] = None,
    ):
        """
        Initialize credential broker.

        Args:
            config: Upload configuration (API URL, token path, timeout)
            transport: Optional httpx transport for the default API client
            api_client_factory: Builds the API client used per fetch
                (default: HTTPAPIClient against config.api_base_url)
        """
        self._config = config or UploadConfig()
        self._transport = transport
        self._api_client_factory = api_client_factory or self._default_api_client

    def _default_api_client(self) -> IAPIClient:
        return HTTPAPIClient(
            self._config.api_base_url,
            timeout=self._config.api_timeout,
            transport=self._transport,
        )

    async def fetch(self, access_key: str, secret_key: str, bucket_name: str) -> TemporaryCredential:
        request = SignedRequest.create(
            access_key,
            secret_key,
            self._config.token_path,
            build_payload(bucket_name, self._config.channel),
        )

        async with self._api_client_factory() as api:
            response = await api.post(request.path, request.content, request.headers)

        body = self._parse_body(response)
        data = body.get("data") or {}
        if not isinstance(data, Mapping):
            raise CredentialError()

        access_key_id, secret_access_key, session_token = normalize_credentials(data)
        target_bucket, target_endpoint = extract_destination(data)

        logger.info("Temporary credential obtained for bucket %s", bucket_name)
        return TemporaryCredential(
            access_key_id=access_key_id,
            secret_access_key=secret_access_key,
            session_token=session_token,
            target_bucket=target_bucket,
            target_endpoint=target_endpoint,
        )

    @staticmethod
    def _parse_body(response: httpx.Response) -> Mapping[str, Any]:
        try:
            body = response.json()
        except ValueError as exc:
            raise UpstreamError("token endpoint returned a non-JSON body") from exc

        if not isinstance(body, Mapping):
            raise UpstreamError("token endpoint returned an unexpected body")

        if body.get("code") != SUCCESS_CODE:
            message = body.get("msg") or f"token endpoint returned code {body.get('code')}"
            raise UpstreamError(str(message))

        return body
