"""Unit tests for configuration module."""

import logging

import pytest

from paced_queue.config import Config, EnvVars, get_config_value, get_env_value, parse_delay
from paced_queue.queue import MANUAL
from paced_queue.utils.logging import JSONFormatter, TextFormatter


class TestConfig:
    """Test configuration defaults and overrides."""

    def test_default_config_values(self):
        """Test default configuration values."""
        config = Config()

        assert config.delay_ms == 100
        assert config.batch_size == 1
        assert config.paused is False
        assert config.name == "default"
        assert config.metrics_enabled is True
        assert config.log_level == "INFO"
        assert config.log_format == "json"

    def test_config_custom_values(self):
        """Test configuration with custom values."""
        config = Config(delay_ms=MANUAL, batch_size=10, paused=True, name="jobs")

        assert config.delay_ms == MANUAL
        assert config.batch_size == 10
        assert config.paused is True
        assert config.name == "jobs"

    def test_config_dataclass_behavior(self):
        """Test that Config behaves as a dataclass."""
        assert Config(batch_size=3) == Config(batch_size=3)
        assert Config(batch_size=3) != Config(batch_size=4)

        config_str = str(Config(name="jobs"))
        assert "Config" in config_str
        assert "name=jobs" in config_str

    def test_to_options(self):
        """Test conversion to validated scheduler options."""
        callback = lambda scheduler, item: None  # noqa: E731
        options = Config(delay_ms=250, batch_size=4).to_options(callback=callback)

        assert options.delay_ms == 250
        assert options.batch_size == 4
        assert options.callback is callback
        assert options.complete is None

    def test_to_options_validates(self):
        """Test invalid config values surface when building options."""
        with pytest.raises(ValueError):
            Config(batch_size=0).to_options()


class TestConfigFromEnv:
    """Test environment variable resolution."""

    def test_defaults_without_env(self, clean_env):
        """Test from_env falls back to defaults."""
        assert Config.from_env() == Config()

    def test_env_values(self, clean_env):
        """Test environment variables are parsed."""
        clean_env.setenv(EnvVars.DELAY_MS, "250")
        clean_env.setenv(EnvVars.BATCH_SIZE, "5")
        clean_env.setenv(EnvVars.PAUSED, "yes")
        clean_env.setenv(EnvVars.NAME, "mailer")
        clean_env.setenv(EnvVars.METRICS_ENABLED, "false")
        clean_env.setenv(EnvVars.LOG_LEVEL, "debug")
        clean_env.setenv(EnvVars.LOG_FORMAT, "TEXT")

        config = Config.from_env()

        assert config.delay_ms == 250.0
        assert config.batch_size == 5
        assert config.paused is True
        assert config.name == "mailer"
        assert config.metrics_enabled is False
        assert config.log_level == "DEBUG"
        assert config.log_format == "text"

    def test_manual_delay_from_env(self, clean_env):
        """Test the manual sentinel is recognised in any case."""
        clean_env.setenv(EnvVars.DELAY_MS, "Manual")
        assert Config.from_env().delay_ms == MANUAL

    def test_arguments_override_env(self, clean_env):
        """Test explicit arguments take priority over the environment."""
        clean_env.setenv(EnvVars.BATCH_SIZE, "5")
        clean_env.setenv(EnvVars.PAUSED, "true")

        config = Config.from_env(batch_size=2, paused=False)

        assert config.batch_size == 2
        assert config.paused is False

    def test_invalid_batch_size_env(self, clean_env):
        """Test a non-numeric batch size is rejected."""
        clean_env.setenv(EnvVars.BATCH_SIZE, "many")
        with pytest.raises(ValueError):
            Config.from_env()


class TestConfigHelpers:
    """Test resolution helpers."""

    def test_parse_delay(self):
        assert parse_delay("manual") == MANUAL
        assert parse_delay(" MANUAL ") == MANUAL
        assert parse_delay("0") == 0.0
        assert parse_delay("12.5") == 12.5
        assert parse_delay(40) == 40.0

    def test_parse_delay_invalid(self):
        with pytest.raises(ValueError):
            parse_delay("soon")

    def test_get_env_value_converts(self, clean_env):
        """Test the raw string is converted, and unset variables give the default."""
        clean_env.setenv(EnvVars.BATCH_SIZE, "7")
        assert get_env_value(EnvVars.BATCH_SIZE, 1, int) == 7
        assert get_env_value(EnvVars.NAME, "default") == "default"

    def test_get_env_value_bool(self, clean_env):
        """Test boolean parsing accepts the usual spellings."""
        for raw, expected in [("1", True), ("on", True), ("TRUE", True), ("no", False)]:
            clean_env.setenv(EnvVars.PAUSED, raw)
            assert get_env_value(EnvVars.PAUSED, False, bool) is expected

    def test_get_config_value_priority(self, clean_env):
        """Test explicit > environment > default."""
        clean_env.setenv(EnvVars.NAME, "from-env")
        assert get_config_value("explicit", EnvVars.NAME, "default") == "explicit"
        assert get_config_value(None, EnvVars.NAME, "default") == "from-env"
        clean_env.delenv(EnvVars.NAME)
        assert get_config_value(None, EnvVars.NAME, "default") == "default"


class TestConfigLogging:
    """Test logging setup from a Config."""

    def test_setup_logging_uses_level_and_format(self, restore_root_logger):
        """Test the configured level and format reach the root logger."""
        Config(log_level="DEBUG", log_format="text").setup_logging()
        assert restore_root_logger.level == logging.DEBUG
        assert isinstance(restore_root_logger.handlers[0].formatter, TextFormatter)

    def test_setup_logging_from_env(self, clean_env, restore_root_logger):
        """Test environment-driven logging settings are applied."""
        clean_env.setenv(EnvVars.LOG_LEVEL, "warning")
        clean_env.setenv(EnvVars.LOG_FORMAT, "json")
        Config.from_env().setup_logging()
        assert restore_root_logger.level == logging.WARNING
        assert isinstance(restore_root_logger.handlers[0].formatter, JSONFormatter)
