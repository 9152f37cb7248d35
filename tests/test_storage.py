"""Tests for the storage client factory."""
from unittest.mock import Mock, sentinel

import pytest

from dogeup.errors import ConfigurationError
from dogeup.models import TemporaryCredential, UploadConfig
from dogeup.services.storage import StorageClientFactory, validate_endpoint


@pytest.fixture
def credential():
    return TemporaryCredential(
        access_key_id="tmp-id",
        secret_access_key="tmp-secret",
        session_token="tmp-token",
        target_bucket="s-gz-1234",
        target_endpoint="https://cos.example.com",
    )


class TestStorageClientFactory:
    def test_build_config(self):
        config = StorageClientFactory(session=Mock()).build_config()

        assert config.region_name == "auto"
        assert config.connect_timeout == 30
        assert config.read_timeout == 600
        assert config.retries == {"total_max_attempts": 5, "mode": "standard"}
        assert config.s3 == {"addressing_style": "path"}

    def test_build_config_follows_upload_config(self):
        factory = StorageClientFactory(UploadConfig(connect_timeout=5, transport_max_attempts=2), session=Mock())
        config = factory.build_config()

        assert config.connect_timeout == 5
        assert config.retries["total_max_attempts"] == 2

    def test_create_binds_endpoint_and_credential(self, credential):
        session = Mock()
        session.client.return_value = sentinel.client_context

        factory = StorageClientFactory(session=session)
        context = factory.create("https://cos.example.com", credential)

        assert context is sentinel.client_context
        args, kwargs = session.client.call_args
        assert args == ("s3",)
        assert kwargs["endpoint_url"] == "https://cos.example.com"
        assert kwargs["region_name"] == "auto"
        assert kwargs["aws_access_key_id"] == "tmp-id"
        assert kwargs["aws_secret_access_key"] == "tmp-secret"
        assert kwargs["aws_session_token"] == "tmp-token"
        assert kwargs["config"].s3 == {"addressing_style": "path"}

    @pytest.mark.parametrize(
        "endpoint", ["", None, 12345, "cos.example.com", "ftp://cos.example.com", "https://"]
    )
    def test_invalid_endpoint(self, credential, endpoint):
        session = Mock()
        factory = StorageClientFactory(session=session)

        with pytest.raises(ConfigurationError, match="invalid storage endpoint"):
            factory.create(endpoint, credential)

        session.client.assert_not_called()


def test_validate_endpoint_accepts_http_and_https():
    assert validate_endpoint("http://127.0.0.1:9000") == "http://127.0.0.1:9000"
    assert validate_endpoint("https://cos.example.com") == "https://cos.example.com"
