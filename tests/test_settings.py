"""Tests for the environment record."""

import os
from pathlib import Path
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from scribe_mi.settings import Environment, settings


class TestEnvironment:
    """Test the environment record."""

    @patch.dict(
        os.environ,
        {
            "API_URL": "api.example.com",
            "USER_POOL_ID": "eu-west-2_abc",
            "CLIENT_ID": "client",
            "IDENTITY_POOL_ID": "eu-west-2:pool",
            "REGION": "eu-west-1",
            "UNRELATED": "ignored",
        },
    )
    def test_env_variable_loading(self):
        """Test fields load from environment variables and extras are ignored."""
        env = Environment()
        assert env.api_url == "api.example.com"
        assert env.user_pool_id == "eu-west-2_abc"
        assert env.client_id == "client"
        assert env.identity_pool_id == "eu-west-2:pool"
        assert env.region == "eu-west-1"
        assert not hasattr(env, "unrelated")

    def test_base_url(self):
        """Test the base URL is the API host over HTTPS."""
        assert Environment(api_url="api.example.com").base_url == "https://api.example.com"

    def test_signs_requests(self):
        """Test signing is chosen only when an identity pool is configured."""
        assert Environment(identity_pool_id="eu-west-2:pool").signs_requests
        assert not Environment(identity_pool_id="").signs_requests

    def test_frozen(self):
        """Test the record cannot be mutated."""
        env = Environment(api_url="api.example.com")
        with pytest.raises(ValidationError):
            env.api_url = "other"  # type: ignore[misc]

    def test_env_file_loading(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test fields load from a .env file in the working directory."""
        (tmp_path / ".env").write_text("API_URL=from-file.example.com\nCLIENT_ID=file-client\n")
        monkeypatch.chdir(tmp_path)
        monkeypatch.delenv("API_URL", raising=False)
        monkeypatch.delenv("CLIENT_ID", raising=False)

        env = Environment()

        assert env.api_url == "from-file.example.com"
        assert env.client_id == "file-client"

    def test_settings_singleton(self):
        """Test the module-level settings instance is shared."""
        from scribe_mi.settings import settings as settings2

        assert isinstance(settings, Environment)
        assert settings is settings2
