"""Tests for request signing."""
import hashlib
import hmac
import json

from dogeup.services.signer import SignedRequest, authorization_header, serialize_body, sign

PATH = "/auth/tmp_token.json"
BODY = '{"channel":"OSS_UPLOAD","scopes":["my-bucket:*"]}'


def test_sign_matches_hmac_sha1_of_path_and_body():
    expected = hmac.new(b"secret", f"{PATH}\n{BODY}".encode(), hashlib.sha1).hexdigest()
    assert sign("secret", PATH, BODY) == expected


def test_sign_is_lowercase_hex():
    signature = sign("secret", PATH, BODY)
    assert len(signature) == 40
    assert signature == signature.lower()
    int(signature, 16)


def test_sign_is_deterministic():
    assert sign("secret", PATH, BODY) == sign("secret", PATH, BODY)


def test_sign_changes_with_any_input():
    base = sign("secret", PATH, BODY)
    assert sign("secret2", PATH, BODY) != base
    assert sign("secret", "/auth/other.json", BODY) != base
    assert sign("secret", PATH, BODY.replace("my-bucket", "other")) != base


def test_authorization_header_format():
    assert authorization_header("AK", "abc123") == "TOKEN AK:abc123"


def test_serialize_body_is_compact():
    body = serialize_body({"channel": "OSS_UPLOAD", "scopes": ["my-bucket:*"]})
    assert body == BODY


def test_signed_request_signs_sent_bytes():
    payload = {"channel": "OSS_UPLOAD", "scopes": ["my-bucket:*"]}
    request = SignedRequest.create("AK", "secret", PATH, payload)

    assert json.loads(request.content) == payload
    assert request.headers["Content-Type"] == "application/json"
    assert request.headers["Authorization"] == f"TOKEN AK:{sign('secret', PATH, request.json_body)}"
    assert "TOKEN" not in repr(request)
