"""
Unit tests for configuration loading.
"""

import json

import pytest

from apig_client import ConfigurationError, ExchangeRateClient, config_from_env, load_config


class TestLoadConfig:
    """Test JSON file configuration."""

    def write(self, tmp_path, data):
        path = tmp_path / "apig.json"
        path.write_text(json.dumps(data), encoding="utf-8")
        return str(path)

    def test_load_config(self, tmp_path):
        """Test camelCase keys map to client arguments."""
        path = self.write(tmp_path, {
            "accessKey": "ak",
            "secretKey": "sk",
            "exchangeRateUrl": "https://api.example.com/rate",
        })

        config = load_config(path)

        assert config == {
            "access_key": "ak",
            "secret_key": "sk",
            "exchange_rate_url": "https://api.example.com/rate",
        }
        client = ExchangeRateClient(**config)
        assert client.config['timeout'] == 10

    def test_load_config_timeout(self, tmp_path):
        path = self.write(tmp_path, {
            "accessKey": "ak",
            "secretKey": "sk",
            "exchangeRateUrl": "https://api.example.com/rate",
            "timeout": 3,
        })

        assert load_config(path)["timeout"] == 3.0

    def test_load_config_missing_key(self, tmp_path):
        path = self.write(tmp_path, {"accessKey": "ak", "exchangeRateUrl": "https://x"})

        with pytest.raises(ConfigurationError, match="secretKey"):
            load_config(path)

    def test_load_config_invalid_json(self, tmp_path):
        path = tmp_path / "apig.json"
        path.write_text("{not json", encoding="utf-8")

        with pytest.raises(ConfigurationError):
            load_config(str(path))

    def test_load_config_not_object(self, tmp_path):
        with pytest.raises(ConfigurationError):
            load_config(self.write(tmp_path, ["accessKey"]))

    def test_load_config_missing_file(self, tmp_path):
        with pytest.raises(ConfigurationError):
            load_config(str(tmp_path / "missing.json"))


class TestConfigFromEnv:
    """Test environment configuration."""

    def test_config_from_env(self):
        environ = {
            "APIG_ACCESS_KEY": "ak",
            "APIG_SECRET_KEY": "sk",
            "APIG_EXCHANGE_RATE_URL": "https://api.example.com/rate",
            "APIG_TIMEOUT": "5",
        }

        assert config_from_env(environ) == {
            "access_key": "ak",
            "secret_key": "sk",
            "exchange_rate_url": "https://api.example.com/rate",
            "timeout": 5.0,
        }

    def test_config_from_os_environ(self, monkeypatch):
        monkeypatch.setenv("APIG_ACCESS_KEY", "ak")
        monkeypatch.setenv("APIG_SECRET_KEY", "sk")
        monkeypatch.setenv("APIG_EXCHANGE_RATE_URL", "https://api.example.com/rate")
        monkeypatch.delenv("APIG_TIMEOUT", raising=False)

        assert config_from_env()["access_key"] == "ak"

    def test_config_from_env_missing(self):
        with pytest.raises(ConfigurationError, match="APIG_SECRET_KEY"):
            config_from_env({"APIG_ACCESS_KEY": "ak", "APIG_EXCHANGE_RATE_URL": "https://x"})

    def test_config_from_env_bad_timeout(self):
        environ = {
            "APIG_ACCESS_KEY": "ak",
            "APIG_SECRET_KEY": "sk",
            "APIG_EXCHANGE_RATE_URL": "https://x",
            "APIG_TIMEOUT": "soon",
        }

        with pytest.raises(ConfigurationError):
            config_from_env(environ)
