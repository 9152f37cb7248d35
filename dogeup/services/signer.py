"""
Signer - Single Responsibility: authorize API requests with HMAC-SHA1.

The token endpoint authenticates a request by the hex digest of
``path + "\\n" + body`` keyed with the account secret.
"""
import hashlib
import hmac
import json
from dataclasses import dataclass, field
from typing import Any, Mapping


def sign(secret_key: str, path: str, body: str) -> str:
    """Return the lowercase hex HMAC-SHA1 of ``path\\nbody``."""
    message = f"{path}\n{body}".encode("utf-8")
    return hmac.new(secret_key.encode("utf-8"), message, hashlib.sha1).hexdigest()


def authorization_header(access_key: str, signature: str) -> str:
    return f"TOKEN {access_key}:{signature}"


def serialize_body(payload: Mapping[str, Any]) -> str:
    """Compact JSON; the signed string and the sent body must be identical."""
    return json.dumps(payload, separators=(",", ":"), ensure_ascii=False)


@dataclass(frozen=True)
class SignedRequest:
    """API request body together with its authorization header value."""
    path: str
    json_body: str
    authorization: str = field(repr=False)

    @classmethod
    def create(
        cls,
        access_key: str,
        secret_key: str,
        path: str,
        payload: Mapping[str, Any],
    ) -> "SignedRequest":
        body = serialize_body(payload)
        signature = sign(secret_key, path, body)
        return cls(path=path, json_body=body, authorization=authorization_header(access_key, signature))

    @property
    def headers(self) -> dict:
        return {
            "Content-Type": "application/json",
            "Authorization": self.authorization,
        }

    @property
    def content(self) -> bytes:
        return self.json_body.encode("utf-8")
