"""Configuration module for Paced Queue.

Usage:
    from paced_queue.config import Config
    config = Config.from_env(batch_size=10)

Environment variables use the PACED_QUEUE_ prefix (see EnvVars).
"""

from .base import (
    ENV_PREFIX,
    EnvVars,
    get_bool_config_value,
    get_config_value,
    get_env_value,
    parse_delay,
)
from .settings import Config

__all__ = [
    "Config",
    "EnvVars",
    "get_config_value",
    "get_env_value",
    "get_bool_config_value",
    "parse_delay",
    "ENV_PREFIX",
]
