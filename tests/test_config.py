"""Tests for VerifierConfig."""

import pytest

from yubico_verifier.config import DEFAULT_API_SERVERS, VerifierConfig
from yubico_verifier.exceptions import ConfigurationError


class TestVerifierConfig:
    """Tests for VerifierConfig validation."""

    def test_defaults(self, client_id, secret):
        """Server list and timeouts have defaults."""
        config = VerifierConfig(client_id=client_id, secret=secret)
        assert config.api_servers == DEFAULT_API_SERVERS
        assert config.sl is None
        assert config.timeout is None
        assert config.timeout_s == 5.0

    def test_servers_normalized_to_tuple(self, client_id, secret):
        """A list of servers is stored as a tuple."""
        config = VerifierConfig(client_id=client_id, secret=secret, api_servers=["a", "b"])
        assert config.api_servers == ("a", "b")

    @pytest.mark.parametrize("sl, expected", [
        (0, 0),
        (100, 100),
        ("50", 50),
        ("fast", "fast"),
        ("secure", "secure"),
    ])
    def test_sync_levels(self, client_id, secret, sl, expected):
        """Percentages and named levels are accepted."""
        assert VerifierConfig(client_id=client_id, secret=secret, sl=sl).sl == expected

    @pytest.mark.parametrize("sl", [101, -1, "slow", "12.5"])
    def test_invalid_sync_level(self, client_id, secret, sl):
        """Out of range or unknown sync levels are rejected."""
        with pytest.raises(ConfigurationError):
            VerifierConfig(client_id=client_id, secret=secret, sl=sl)

    def test_missing_client_id(self, secret):
        with pytest.raises(ConfigurationError, match="client_id"):
            VerifierConfig(client_id="", secret=secret)

    def test_missing_secret(self, client_id):
        with pytest.raises(ConfigurationError, match="secret"):
            VerifierConfig(client_id=client_id, secret="")

    def test_secret_not_base64(self, client_id):
        """The secret must decode as base64."""
        with pytest.raises(ConfigurationError, match="base64"):
            VerifierConfig(client_id=client_id, secret="%%%")

    def test_empty_server_list(self, client_id, secret):
        with pytest.raises(ConfigurationError, match="API server"):
            VerifierConfig(client_id=client_id, secret=secret, api_servers=())

    def test_invalid_timeouts(self, client_id, secret):
        with pytest.raises(ConfigurationError):
            VerifierConfig(client_id=client_id, secret=secret, timeout=0)
        with pytest.raises(ConfigurationError):
            VerifierConfig(client_id=client_id, secret=secret, timeout_s=0)

    def test_configuration_error_is_value_error(self, client_id):
        """ConfigurationError can be caught as ValueError."""
        with pytest.raises(ValueError):
            VerifierConfig(client_id=client_id, secret="")


class TestFromEnv:
    """Tests for VerifierConfig.from_env."""

    def test_all_variables(self, client_id, secret):
        """Every YUBICO_* variable is read."""
        config = VerifierConfig.from_env({
            "YUBICO_CLIENT_ID": client_id,
            "YUBICO_SECRET": secret,
            "YUBICO_SL": "secure",
            "YUBICO_TIMEOUT": "10",
            "YUBICO_API_SERVERS": "one.example.com, two.example.com,",
        })
        assert config.client_id == client_id
        assert config.secret == secret
        assert config.sl == "secure"
        assert config.timeout == 10
        assert config.api_servers == ("one.example.com", "two.example.com")

    def test_minimal(self, client_id, secret):
        """Only client id and secret are required."""
        config = VerifierConfig.from_env({"YUBICO_CLIENT_ID": client_id, "YUBICO_SECRET": secret})
        assert config.api_servers == DEFAULT_API_SERVERS
        assert config.sl is None
        assert config.timeout is None

    def test_numeric_sync_level(self, client_id, secret):
        """A numeric YUBICO_SL becomes an int."""
        config = VerifierConfig.from_env({
            "YUBICO_CLIENT_ID": client_id,
            "YUBICO_SECRET": secret,
            "YUBICO_SL": "75",
        })
        assert config.sl == 75

    def test_missing_client_id(self, secret):
        with pytest.raises(ConfigurationError, match="YUBICO_CLIENT_ID"):
            VerifierConfig.from_env({"YUBICO_SECRET": secret})

    def test_missing_secret(self, client_id):
        with pytest.raises(ConfigurationError, match="YUBICO_SECRET"):
            VerifierConfig.from_env({"YUBICO_CLIENT_ID": client_id})

    def test_bad_timeout(self, client_id, secret):
        with pytest.raises(ConfigurationError, match="YUBICO_TIMEOUT"):
            VerifierConfig.from_env({
                "YUBICO_CLIENT_ID": client_id,
                "YUBICO_SECRET": secret,
                "YUBICO_TIMEOUT": "soon",
            })

    def test_reads_process_environment(self, monkeypatch, client_id, secret):
        """Without a mapping, os.environ is read."""
        monkeypatch.setenv("YUBICO_CLIENT_ID", client_id)
        monkeypatch.setenv("YUBICO_SECRET", secret)
        monkeypatch.delenv("YUBICO_SL", raising=False)
        monkeypatch.delenv("YUBICO_TIMEOUT", raising=False)
        monkeypatch.delenv("YUBICO_API_SERVERS", raising=False)
        assert VerifierConfig.from_env().client_id == client_id
