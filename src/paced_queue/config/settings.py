"""Queue configuration with explicit values, environment variables, and defaults."""

from dataclasses import dataclass
from typing import Any, Callable, Optional, Union

from ..queue.models import QueueOptions
from ..utils.logging import setup_logging as configure_logging
from .base import EnvVars, get_bool_config_value, get_config_value, parse_delay


@dataclass
class Config:
    """Queue configuration."""

    # === Scheduling ===
    delay_ms: Union[float, str] = 100
    batch_size: int = 1
    paused: bool = False
    name: str = "default"

    # === Prometheus ===
    metrics_enabled: bool = True

    # === Logging ===
    log_level: str = "INFO"
    log_format: str = "json"  # json|text

    @classmethod
    def from_env(
        cls,
        delay_ms: Optional[Union[float, str]] = None,
        batch_size: Optional[int] = None,
        paused: Optional[bool] = None,
        name: Optional[str] = None,
        metrics_enabled: Optional[bool] = None,
        log_level: Optional[str] = None,
        log_format: Optional[str] = None,
    ) -> "Config":
        """
        Load configuration from arguments, environment variables, and defaults.

        Priority: arguments > environment variables > defaults

        Returns:
            Config instance
        """
        return cls(
            delay_ms=get_config_value(delay_ms, EnvVars.DELAY_MS, cls.delay_ms, parse_delay),
            batch_size=get_config_value(batch_size, EnvVars.BATCH_SIZE, cls.batch_size, int),
            paused=get_bool_config_value(paused, EnvVars.PAUSED, cls.paused),
            name=get_config_value(name, EnvVars.NAME, cls.name),
            metrics_enabled=get_bool_config_value(
                metrics_enabled, EnvVars.METRICS_ENABLED, cls.metrics_enabled
            ),
            log_level=get_config_value(log_level, EnvVars.LOG_LEVEL, cls.log_level).upper(),
            log_format=get_config_value(log_format, EnvVars.LOG_FORMAT, cls.log_format).lower(),
        )

    def to_options(
        self,
        callback: Optional[Callable[..., Any]] = None,
        complete: Optional[Callable[..., Any]] = None,
    ) -> QueueOptions:
        """Build validated scheduler options from this config."""
        return QueueOptions(
            delay_ms=self.delay_ms,
            batch_size=self.batch_size,
            callback=callback,
            complete=complete,
        )

    def setup_logging(self) -> None:
        """Configure root logging from log_level and log_format."""
        configure_logging(self.log_level, self.log_format)

    def __str__(self) -> str:
        """String representation of config."""
        return (
            f"Config(name={self.name}, delay_ms={self.delay_ms}, "
            f"batch_size={self.batch_size}, paused={self.paused}, "
            f"metrics={self.metrics_enabled}, log_level={self.log_level})"
        )
