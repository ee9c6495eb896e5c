"""
Configuration Loader.

Settings are layered, lowest precedence first:

1. defaults declared on the pydantic models
2. a YAML file, where ${VAR} and ${VAR:-default} references are expanded
3. COURSEKIT_* environment variables (a .env file is read first)

The merged mapping is validated into a CoursekitConfig.
"""

import logging
import os
import re
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from coursekit.config.environment import ensure_dotenv_loaded
from coursekit.config.models import CoursekitConfig
from coursekit.errors import ConfigurationError

logger = logging.getLogger(__name__)

# Searched in the working directory, in order
DEFAULT_CONFIG_PATHS = ("coursekit.yaml", "coursekit.yml", ".coursekit.yaml", ".coursekit.yml")

CONFIG_ENV_VAR = "COURSEKIT_CONFIG"

# Environment variable -> dotted setting
ENV_VAR_OVERRIDES = {
    "COURSEKIT_COURSE_ROOT": "course.root",
    "COURSEKIT_LESSON_PATTERN": "course.pattern",
    "COURSEKIT_STRICT": "verification.strict_languages",
    "COURSEKIT_FAIL_ON_WARNINGS": "verification.fail_on_warnings",
    "COURSEKIT_SAMPLES_DIR": "output.samples_dir",
    "COURSEKIT_LOG_LEVEL": "logging.level",
    "COURSEKIT_LOG_FILE": "logging.file",
    "COURSEKIT_DEBUG": "debug",
}

# Paths and globs: never coerced to numbers or booleans
_STRING_SETTINGS = {"course.root", "course.pattern", "output.samples_dir", "logging.file"}

_REFERENCE = re.compile(r"\$\{(?P<name>\w+)(?::-?(?P<default>[^}]*))?\}")
_BOOLEANS = {"true": True, "yes": True, "on": True, "false": False, "no": False, "off": False}


def coerce_value(text: str) -> Any:
    """Interpret an environment string as None, bool, int, float or str."""
    if not text:
        return None
    if text.lower() in _BOOLEANS:
        return _BOOLEANS[text.lower()]
    for convert in (int, float):
        try:
            return convert(text)
        except ValueError:
            continue
    return text


def _expand_string(text: str) -> Any:
    whole = _REFERENCE.fullmatch(text)
    if whole:
        value = os.environ.get(whole["name"], whole["default"])
        # An unset variable without default stays as written
        return text if value is None else coerce_value(value)

    def lookup(match: re.Match[str]) -> str:
        value = os.environ.get(match["name"], match["default"])
        return match.group(0) if value is None else value

    return _REFERENCE.sub(lookup, text)


def expand_references(data: Any) -> Any:
    """Replace ${VAR} references in every string of a YAML document."""
    if isinstance(data, Mapping):
        return {key: expand_references(value) for key, value in data.items()}
    if isinstance(data, list):
        return [expand_references(item) for item in data]
    if isinstance(data, str):
        return _expand_string(data)
    return data


def drop_none(data: Any) -> Any:
    """Remove None entries so model defaults apply (YAML reads `key:` as None)."""
    if isinstance(data, Mapping):
        return {key: drop_none(value) for key, value in data.items() if value is not None}
    if isinstance(data, list):
        return [drop_none(item) for item in data]
    return data


def _assign(settings: dict[str, Any], dotted: str, value: Any) -> None:
    *parents, leaf = dotted.split(".")
    node = settings
    for name in parents:
        child = node.get(name)
        if not isinstance(child, dict):
            child = node[name] = {}
        node = child
    node[leaf] = value


def apply_env_overrides(settings: dict[str, Any]) -> dict[str, Any]:
    """Overlay COURSEKIT_* variables on a settings mapping, in place."""
    for variable, dotted in ENV_VAR_OVERRIDES.items():
        raw = os.environ.get(variable)
        if raw is None:
            continue
        value = (raw or None) if dotted in _STRING_SETTINGS else coerce_value(raw)
        logger.debug("%s overrides %s", variable, dotted)
        _assign(settings, dotted, value)
    return settings


def read_yaml(path: Path) -> dict[str, Any]:
    """Read a YAML config file into a mapping.

    Raises:
        FileNotFoundError: If path does not exist
        ConfigurationError: If the file is not YAML or not a mapping
    """
    if not path.is_file():
        raise FileNotFoundError(f"Config file not found: {path}")
    try:
        document = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML: {e}", path=path)
    if document is None:
        return {}
    if not isinstance(document, dict):
        raise ConfigurationError(
            f"Configuration must be a mapping, not {type(document).__name__}", path=path
        )
    return document


class ConfigLoader:
    """Builds a validated CoursekitConfig.

    Usage:
        config = ConfigLoader("coursekit.yaml").load()

        # COURSEKIT_CONFIG, then the default file names, then defaults
        config = ConfigLoader().load_from_env()

    Attributes:
        config_path: File to read, if any
        source: File the last load() actually read (None for defaults)
        config: Result of the last load()
    """

    def __init__(
        self,
        config_path: str | Path | None = None,
        env_file: str = ".env",
    ) -> None:
        self.config_path = Path(config_path) if config_path else None
        self.env_file = env_file
        self.source: Path | None = None
        self.config: CoursekitConfig | None = None

    def load(self, path: str | Path | None = None) -> CoursekitConfig:
        """Read, merge and validate the configuration.

        Args:
            path: Config file, replacing the one given to __init__

        Raises:
            FileNotFoundError: If the config file does not exist
            ConfigurationError: If the file or the merged settings are invalid
        """
        if path is not None:
            self.config_path = Path(path)
        ensure_dotenv_loaded(self.env_file)

        self.source = self.config_path
        settings = expand_references(read_yaml(self.config_path)) if self.config_path else {}
        settings = drop_none(apply_env_overrides(settings))

        try:
            self.config = CoursekitConfig.model_validate(settings)
        except ValidationError as e:
            raise ConfigurationError(
                f"Configuration validation failed: {e.error_count()} errors",
                errors=e.errors(),
                path=self.source,
            )
        logger.debug("Configuration loaded from %s", self.source or "defaults")
        return self.config

    def load_from_env(self) -> CoursekitConfig:
        """Locate the config file, then load it.

        Raises:
            FileNotFoundError: If COURSEKIT_CONFIG names a missing file
            ConfigurationError: If the configuration is invalid
        """
        ensure_dotenv_loaded(self.env_file)

        named = os.environ.get(CONFIG_ENV_VAR)
        if named:
            if not Path(named).is_file():
                raise FileNotFoundError(f"{CONFIG_ENV_VAR} points to a missing file: {named}")
            return self.load(named)

        found = next((Path(name) for name in DEFAULT_CONFIG_PATHS if Path(name).is_file()), None)
        self.config_path = found
        return self.load()

    def save(self, path: str | Path | None = None) -> Path:
        """Write the loaded configuration as YAML.

        Returns:
            The file written

        Raises:
            ValueError: If nothing was loaded or there is nowhere to write
        """
        if self.config is None:
            raise ValueError("Nothing to save: load() has not been called")
        target = Path(path) if path else self.config_path
        if target is None:
            raise ValueError("No path to save the configuration to")
        target.write_text(
            yaml.safe_dump(self.config.to_yaml_dict(), sort_keys=False),
            encoding="utf-8",
        )
        return target


_global_config: CoursekitConfig | None = None


def load_config(
    config_path: str | Path | None = None,
    env_file: str = ".env",
) -> CoursekitConfig:
    """Load the configuration and keep it for get_config().

    Without config_path the file is located as in ConfigLoader.load_from_env.
    """
    global _global_config

    loader = ConfigLoader(config_path, env_file)
    _global_config = loader.load() if config_path else loader.load_from_env()
    return _global_config


def get_config() -> CoursekitConfig:
    """The configuration loaded last, loading it now if needed."""
    return _global_config if _global_config is not None else load_config()


def reset_config() -> None:
    """Forget the loaded configuration."""
    global _global_config
    _global_config = None
