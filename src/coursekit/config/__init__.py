"""
Configuration.

`load_config()` merges model defaults, an optional YAML file and
COURSEKIT_* environment variables into a validated CoursekitConfig;
`get_config()` returns the cached result.
"""

from coursekit.config.environment import ensure_dotenv_loaded, reset_environment
from coursekit.config.loader import (
    CONFIG_ENV_VAR,
    DEFAULT_CONFIG_PATHS,
    ENV_VAR_OVERRIDES,
    ConfigLoader,
    get_config,
    load_config,
    reset_config,
)
from coursekit.config.models import (
    CourseConfig,
    CoursekitConfig,
    LoggingConfig,
    LogLevel,
    OutputConfig,
    VerificationConfig,
)
from coursekit.errors import ConfigurationError

__all__ = [
    "CoursekitConfig",
    "CourseConfig",
    "VerificationConfig",
    "OutputConfig",
    "LoggingConfig",
    "LogLevel",
    "ConfigLoader",
    "ConfigurationError",
    "load_config",
    "get_config",
    "reset_config",
    "CONFIG_ENV_VAR",
    "DEFAULT_CONFIG_PATHS",
    "ENV_VAR_OVERRIDES",
    "ensure_dotenv_loaded",
    "reset_environment",
]
