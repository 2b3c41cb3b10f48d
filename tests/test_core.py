"""Tests for core module."""

import json

import pytest
from pathlib import Path

from massping.core.config import Config, SweepConfig, get_config, set_config
from massping.core.exceptions import (
    MassPingError,
    PermissionError,
    ScanError,
    TimeoutError,
    ValidationError,
)
from massping.core.utils import (
    validate_ip,
    validate_network,
    validate_timeout,
)


class TestConfig:
    """Test configuration management."""

    def test_default_config(self):
        """Test default configuration values."""
        config = Config()
        assert config.results_dir == Path("./results")
        assert config.verbose is False

    def test_sweep_config_defaults(self):
        """Test default sweep configuration."""
        config = SweepConfig()
        assert config.timeout == 0.05
        assert config.max_in_flight == 256
        assert config.sweep_deadline is None

    def test_from_missing_file(self, tmp_path):
        """Test missing config file falls back to defaults."""
        config = Config.from_file(tmp_path / "absent.json")
        assert config.sweep.timeout == 0.05

    def test_save_and_load(self, tmp_path):
        """Test saving and reloading configuration."""
        path = tmp_path / "conf" / "massping.json"
        config = Config(results_dir="out", verbose=True)
        config.sweep.timeout = 0.25
        config.sweep.sweep_deadline = 10.0
        config.save(path)

        loaded = Config.from_file(path)
        assert loaded.results_dir == Path("out")
        assert loaded.verbose is True
        assert loaded.sweep.timeout == 0.25
        assert loaded.sweep.sweep_deadline == 10.0

    def test_unknown_keys_ignored(self, tmp_path):
        """Test unknown sweep keys are skipped."""
        path = tmp_path / "massping.json"
        path.write_text(json.dumps({"sweep": {"timeout": 1.0, "retries": 3}}))
        config = Config.from_file(path)
        assert config.sweep.timeout == 1.0
        assert not hasattr(config.sweep, "retries")

    def test_set_config(self):
        """Test overriding the global configuration."""
        config = Config(verbose=True)
        set_config(config)
        assert get_config() is config


class TestValidation:
    """Test input validation functions."""

    def test_validate_ip_valid(self):
        """Test valid IP addresses."""
        assert str(validate_ip("192.168.1.1")) == "192.168.1.1"
        assert str(validate_ip("127.0.0.1")) == "127.0.0.1"

    def test_validate_ip_invalid(self):
        """Test invalid IP addresses."""
        with pytest.raises(ValidationError):
            validate_ip("256.1.1.1")
        with pytest.raises(ValidationError):
            validate_ip("not.an.ip")
        with pytest.raises(ValidationError):
            validate_ip("")

    def test_validate_ip_rejects_ipv6(self):
        """Test IPv6 is refused."""
        with pytest.raises(ValidationError, match="IPv6"):
            validate_ip("::1")

    def test_validate_network(self):
        """Test network CIDR parsing."""
        assert str(validate_network("192.168.1.0/24")) == "192.168.1.0/24"
        with pytest.raises(ValidationError):
            validate_network("192.168.1.0/33")
        with pytest.raises(ValidationError):
            validate_network("fe80::/64")

    def test_validate_timeout(self):
        """Test timeout validation."""
        assert validate_timeout(0.05) == 0.05
        assert validate_timeout("2") == 2.0
        with pytest.raises(ValidationError):
            validate_timeout(0)
        with pytest.raises(ValidationError):
            validate_timeout(-1)
        with pytest.raises(ValidationError):
            validate_timeout("soon")


class TestExceptions:
    """Test custom exceptions."""

    def test_base_exception(self):
        """Test base MassPingError."""
        err = MassPingError("Test error", "Details")
        assert str(err) == "Test error: Details"

    def test_scan_error(self):
        """Test ScanError."""
        err = ScanError("Cannot ping 10.0.0.1", "queue already joined")
        assert "Cannot ping" in str(err)
        assert isinstance(err, MassPingError)

    def test_permission_error(self):
        """Test PermissionError message."""
        err = PermissionError("raw ICMP socket", "Are you root?")
        assert str(err) == "Insufficient permissions for raw ICMP socket: Are you root?"
        assert err.operation == "raw ICMP socket"

    def test_timeout_error(self):
        """Test TimeoutError message."""
        err = TimeoutError("ICMP receive", 0.05)
        assert str(err) == "ICMP receive timed out after 0.05s"
        assert err.timeout == 0.05
