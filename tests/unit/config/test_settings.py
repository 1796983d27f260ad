"""Tests for configuration settings.

Tests the Config class and environment variable handling.
"""

import os
import pytest
from pathlib import Path
from unittest.mock import patch

from auditstream.common.config.settings import (
    Config,
    Environment,
    LogLevel,
    StateBackend,
    get_config,
    reset_config,
)
from auditstream.common.exceptions import ConfigurationError
from auditstream.state import FileStateStore, create_state_store


class TestEnums:
    """Tests for configuration enums."""
    
    def test_environment_values(self):
        assert Environment.DEVELOPMENT.value == "development"
        assert Environment.PRODUCTION.value == "production"
    
    def test_log_level_from_string(self):
        assert LogLevel("DEBUG") == LogLevel.DEBUG
    
    def test_state_backend_values(self):
        assert StateBackend.LOCAL.value == "local"
        assert StateBackend.S3.value == "s3"


class TestConfig:
    """Tests for Config class."""
    
    def test_default_config(self):
        with patch.dict(os.environ, {}, clear=True):
            config = Config()
            
            assert config.environment == Environment.DEVELOPMENT
            assert config.log_level == LogLevel.INFO
            assert config.api_url == "https://api.github.com"
            assert config.api_version == "2022-11-28"
            assert config.github_token is None
            assert config.http_timeout == 30.0
            assert config.state_backend == StateBackend.LOCAL
    
    def test_token_falls_back_to_github_token(self):
        with patch.dict(os.environ, {"GITHUB_TOKEN": "ghp_fallback"}, clear=True):
            assert Config().github_token == "ghp_fallback"
    
    def test_prefixed_token_wins(self):
        env = {"GITHUB_TOKEN": "ghp_fallback", "AUDITSTREAM_GITHUB_TOKEN": "ghp_own"}
        with patch.dict(os.environ, env, clear=True):
            assert Config().github_token == "ghp_own"
    
    def test_token_not_in_repr(self):
        with patch.dict(os.environ, {"AUDITSTREAM_GITHUB_TOKEN": "ghp_secret"}, clear=True):
            assert "ghp_secret" not in repr(Config())
    
    def test_invalid_environment(self):
        with patch.dict(os.environ, {"AUDITSTREAM_ENVIRONMENT": "moon"}, clear=True):
            with pytest.raises(ConfigurationError, match="AUDITSTREAM_ENVIRONMENT"):
                Config()
    
    @pytest.mark.parametrize("value", ["abc", "0", "-1"])
    def test_invalid_timeout(self, value):
        with patch.dict(os.environ, {"AUDITSTREAM_HTTP_TIMEOUT": value}, clear=True):
            with pytest.raises(ConfigurationError):
                Config()
    
    def test_s3_backend_requires_bucket(self):
        with patch.dict(os.environ, {"AUDITSTREAM_STATE_BACKEND": "s3"}, clear=True):
            with pytest.raises(ConfigurationError, match="AUDITSTREAM_STATE_S3_BUCKET"):
                Config()
    
    def test_api_url_must_be_http(self):
        with patch.dict(os.environ, {"AUDITSTREAM_API_URL": "ftp://x"}, clear=True):
            with pytest.raises(ConfigurationError):
                Config()
    
    def test_plain_http_warns_in_production(self):
        env = {
            "AUDITSTREAM_ENVIRONMENT": "production",
            "AUDITSTREAM_API_URL": "http://ghe.internal/api/v3",
        }
        with patch.dict(os.environ, env, clear=True):
            with pytest.warns(RuntimeWarning, match="plain http"):
                config = Config()
        assert config.is_production
    
    def test_plain_http_allowed_in_development(self, recwarn):
        with patch.dict(os.environ, {"AUDITSTREAM_API_URL": "http://localhost:8080"}, clear=True):
            config = Config()
        assert not config.is_production
        assert not [w for w in recwarn if issubclass(w.category, RuntimeWarning)]


class TestGlobalConfig:
    """Tests for the configuration singleton."""
    
    def test_get_config_is_cached(self):
        reset_config()
        try:
            assert get_config() is get_config()
        finally:
            reset_config()


class TestCreateStateStore:
    """Tests for the state store factory."""
    
    def test_local_backend(self, temp_state_dir):
        with patch.dict(os.environ, {"AUDITSTREAM_STATE_DIR": temp_state_dir}, clear=True):
            store = create_state_store(Config())
        
        assert isinstance(store, FileStateStore)
        assert store.state_dir == Path(temp_state_dir)
    
    def test_s3_backend(self):
        env = {
            "AUDITSTREAM_STATE_BACKEND": "s3",
            "AUDITSTREAM_STATE_S3_BUCKET": "state-bucket",
        }
        with patch.dict(os.environ, env, clear=True):
            config = Config()
        with patch("auditstream.state.s3_store.boto3") as mock_boto3:
            store = create_state_store(config)
        
        assert store.bucket_name == "state-bucket"
        mock_boto3.client.assert_called_once_with("s3", region_name="us-east-1")
