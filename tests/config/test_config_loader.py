"""Tests for configuration loader."""

from pathlib import Path

import pytest
import yaml

from coursekit.config import (
    CONFIG_ENV_VAR,
    ConfigLoader,
    ConfigurationError,
    CoursekitConfig,
    LogLevel,
    get_config,
    load_config,
    reset_config,
)
from coursekit.models import CheckType


@pytest.fixture(autouse=True)
def isolated(clean_env, monkeypatch, tmp_path):
    """Run each test in an empty directory with no COURSEKIT_* variables."""
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def full_config_dict():
    """Configuration dictionary with every section."""
    return {
        "course": {"root": "./course", "pattern": "**/*.md"},
        "verification": {
            "enabled_checks": ["internal_links", "code_syntax"],
            "strict_languages": True,
            "allowed_schemes": ["HTTPS://", "mailto:"],
        },
        "output": {"samples_dir": "./out", "create_dirs": False},
        "logging": {"level": "debug", "file": "coursekit.log"},
        "debug": True,
    }


def write_yaml(path: Path, data) -> Path:
    path.write_text(yaml.safe_dump(data), encoding="utf-8")
    return path


class TestConfigLoaderLoad:
    """Tests for ConfigLoader.load."""

    def test_defaults_without_file(self):
        config = ConfigLoader().load()
        assert isinstance(config, CoursekitConfig)
        assert config.course.root is None
        assert config.verification.enabled_checks == list(CheckType)
        assert config.logging.level == LogLevel.WARNING

    def test_full_config(self, tmp_path, full_config_dict):
        path = write_yaml(tmp_path / "coursekit.yaml", full_config_dict)
        loader = ConfigLoader(path)
        config = loader.load()

        assert loader.source == path
        assert config.course.pattern == "**/*.md"
        assert config.verification.enabled_checks == [CheckType.INTERNAL_LINKS, CheckType.CODE_SYNTAX]
        assert config.verification.allowed_schemes == ["https", "mailto"]
        assert config.output.create_dirs is False
        assert config.logging.level == LogLevel.DEBUG
        assert config.debug is True

    def test_empty_sections_use_defaults(self, tmp_path):
        path = tmp_path / "coursekit.yaml"
        path.write_text("course:\nverification:\n", encoding="utf-8")
        config = ConfigLoader(path).load()
        assert config.course.pattern == "**/lesson*/README.md"

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            ConfigLoader(tmp_path / "missing.yaml").load()

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "coursekit.yaml"
        path.write_text("course: [unclosed\n", encoding="utf-8")
        with pytest.raises(ConfigurationError) as exc_info:
            ConfigLoader(path).load()
        assert exc_info.value.path == path

    def test_validation_error(self, tmp_path):
        path = write_yaml(
            tmp_path / "coursekit.yaml",
            {"verification": {"enabled_checks": ["spelling"]}, "logging": {"level": "loud"}},
        )
        with pytest.raises(ConfigurationError) as exc_info:
            ConfigLoader(path).load()
        error = exc_info.value
        assert len(error.errors) == 2
        assert "verification.enabled_checks.0" in str(error)
        assert str(path) in str(error)

    def test_not_a_mapping(self, tmp_path):
        path = tmp_path / "coursekit.yaml"
        path.write_text("- just\n- a list\n", encoding="utf-8")
        with pytest.raises(ConfigurationError):
            ConfigLoader(path).load()


class TestEnvSubstitution:
    """Tests for ${VAR} substitution."""

    def test_substitutes_variable(self, tmp_path, monkeypatch):
        monkeypatch.setenv("LESSONS_DIR", "/srv/lessons")
        path = write_yaml(tmp_path / "c.yaml", {"course": {"root": "${LESSONS_DIR}"}})
        assert ConfigLoader(path).load().course.root == "/srv/lessons"

    def test_default_value(self, tmp_path):
        path = write_yaml(tmp_path / "c.yaml", {"output": {"samples_dir": "${SAMPLES:-./listings}"}})
        assert ConfigLoader(path).load().output.samples_dir == "./listings"

    def test_embedded_reference(self, tmp_path, monkeypatch):
        monkeypatch.setenv("UNIT", "unit2")
        path = write_yaml(tmp_path / "c.yaml", {"course": {"pattern": "${UNIT}/lesson*/README.md"}})
        assert ConfigLoader(path).load().course.pattern == "unit2/lesson*/README.md"

    def test_full_reference_is_coerced(self, tmp_path, monkeypatch):
        monkeypatch.setenv("STRICT", "yes")
        path = write_yaml(tmp_path / "c.yaml", {"verification": {"strict_languages": "${STRICT}"}})
        assert ConfigLoader(path).load().verification.strict_languages is True


class TestEnvOverrides:
    """Tests for COURSEKIT_* overrides."""

    def test_overrides_file(self, tmp_path, monkeypatch, full_config_dict):
        monkeypatch.setenv("COURSEKIT_COURSE_ROOT", "/override")
        monkeypatch.setenv("COURSEKIT_FAIL_ON_WARNINGS", "true")
        monkeypatch.setenv("COURSEKIT_LOG_LEVEL", "error")
        path = write_yaml(tmp_path / "c.yaml", full_config_dict)

        config = ConfigLoader(path).load()
        assert config.course.root == "/override"
        assert config.verification.fail_on_warnings is True
        assert config.logging.level == LogLevel.ERROR

    def test_string_settings_are_not_coerced(self, monkeypatch):
        monkeypatch.setenv("COURSEKIT_SAMPLES_DIR", "2024")
        assert ConfigLoader().load().output.samples_dir == "2024"

    def test_empty_string_clears_setting(self, monkeypatch):
        monkeypatch.setenv("COURSEKIT_LOG_FILE", "")
        assert ConfigLoader().load().logging.file is None

    def test_invalid_override(self, monkeypatch):
        monkeypatch.setenv("COURSEKIT_STRICT", "sometimes")
        with pytest.raises(ConfigurationError):
            ConfigLoader().load()


class TestLoadFromEnv:
    def test_config_env_var(self, tmp_path, monkeypatch):
        path = write_yaml(tmp_path / "custom.yaml", {"debug": True})
        monkeypatch.setenv(CONFIG_ENV_VAR, str(path))
        assert ConfigLoader().load_from_env().debug is True

    def test_config_env_var_missing_file(self, tmp_path, monkeypatch):
        monkeypatch.setenv(CONFIG_ENV_VAR, str(tmp_path / "missing.yaml"))
        with pytest.raises(FileNotFoundError):
            ConfigLoader().load_from_env()

    def test_default_location(self, tmp_path):
        write_yaml(tmp_path / ".coursekit.yml", {"output": {"samples_dir": "found"}})
        assert ConfigLoader().load_from_env().output.samples_dir == "found"

    def test_builtin_defaults(self):
        loader = ConfigLoader()
        config = loader.load_from_env()
        assert loader.source is None
        assert config == CoursekitConfig()


class TestGlobalConfig:
    def test_load_and_get(self, tmp_path):
        path = write_yaml(tmp_path / "c.yaml", {"debug": True})
        config = load_config(path)
        assert get_config() is config

    def test_reset(self):
        first = get_config()
        reset_config()
        assert get_config() is not first


class TestSave:
    def test_round_trip(self, tmp_path, full_config_dict):
        source = write_yaml(tmp_path / "c.yaml", full_config_dict)
        loader = ConfigLoader(source)
        original = loader.load()

        target = tmp_path / "saved.yaml"
        loader.save(target)
        assert ConfigLoader(target).load() == original

    def test_save_without_load(self, tmp_path):
        with pytest.raises(ValueError):
            ConfigLoader().save(tmp_path / "x.yaml")
