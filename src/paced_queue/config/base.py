"""Shared configuration utilities and constants.

Values resolve with priority: explicit argument > environment variable > default.
"""

import os
from typing import Any, Callable, Optional, TypeVar, Union

from ..queue.models import MANUAL

# Type variable for config values
T = TypeVar("T")

# === Environment Variable Prefix ===

ENV_PREFIX = "PACED_QUEUE_"


class EnvVars:
    """Centralized environment variable names for consistent access."""

    # === Scheduling ===
    DELAY_MS = f"{ENV_PREFIX}DELAY_MS"
    BATCH_SIZE = f"{ENV_PREFIX}BATCH_SIZE"
    PAUSED = f"{ENV_PREFIX}PAUSED"
    NAME = f"{ENV_PREFIX}NAME"

    # === Metrics ===
    METRICS_ENABLED = f"{ENV_PREFIX}METRICS_ENABLED"

    # === Logging ===
    LOG_LEVEL = f"{ENV_PREFIX}LOG_LEVEL"
    LOG_FORMAT = f"{ENV_PREFIX}LOG_FORMAT"


def parse_delay(value: Union[str, float, int]) -> Union[str, float]:
    """
    Parse a delay setting.

    Args:
        value: "manual" (any case) or a number of milliseconds

    Returns:
        MANUAL or the delay as a float

    Raises:
        ValueError: If the value is neither
    """
    if isinstance(value, str):
        text = value.strip()
        if text.lower() == MANUAL:
            return MANUAL
        return float(text)
    return float(value)


def get_env_value(
    env_var: str,
    default: T,
    type_converter: Callable[[str], Any] = str,
) -> T:
    """
    Get a value from an environment variable with type conversion.

    Args:
        env_var: Environment variable name
        default: Default value if not found
        type_converter: Callable converting the raw string (str, int, float, bool, parse_delay)

    Returns:
        The environment value converted to the specified type, or the default
    """
    env_value = os.getenv(env_var)

    if env_value is not None:
        if type_converter is bool:
            return env_value.lower() in ("true", "1", "yes", "on")  # type: ignore
        return type_converter(env_value)

    return default


def get_config_value(
    explicit: Optional[Any],
    env_var: str,
    default: T,
    type_converter: Callable[[str], Any] = str,
) -> T:
    """
    Get a configuration value with priority: explicit > environment > default.

    Args:
        explicit: Value passed by the caller (highest priority)
        env_var: Environment variable name
        default: Default value (lowest priority)
        type_converter: Callable converting the raw environment string

    Returns:
        The resolved configuration value
    """
    if explicit is not None:
        return explicit

    return get_env_value(env_var, default, type_converter)


def get_bool_config_value(
    explicit: Optional[bool],
    env_var: str,
    default: bool,
) -> bool:
    """
    Get a boolean configuration value.

    An explicit False wins over the environment, unlike a missing value.
    """
    if explicit is not None:
        return bool(explicit)

    return get_env_value(env_var, default, bool)
