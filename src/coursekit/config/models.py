"""
Configuration models.

One pydantic model per section of coursekit.yaml. Every field has a
default, so an empty file (or none at all) is a valid configuration.
"""

from enum import Enum
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, field_validator

from coursekit.models.base import CheckType


class LogLevel(str, Enum):
    """Logging levels accepted in configuration."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"


class CourseConfig(BaseModel):
    """Where the course lives.

    Attributes:
        root: Course root directory (None = bundled course)
        pattern: Glob, relative to the root, that finds lesson files
    """

    root: str | None = Field(
        default=None,
        description="Course root directory",
        examples=["./course", "/srv/lessons"],
    )
    pattern: str = Field(
        default="**/lesson*/README.md",
        description="Lesson file glob",
    )

    @field_validator("pattern")
    @classmethod
    def validate_pattern(cls, v: str) -> str:
        """Validate that the pattern is not empty."""
        if not v.strip():
            raise ValueError("Lesson pattern cannot be empty")
        return v

    def resolve_root(self) -> Path:
        """Resolve the course root, falling back to the bundled course."""
        if self.root:
            return Path(self.root).expanduser().resolve()
        from coursekit.course.catalog import bundled_course_root

        return bundled_course_root()


class VerificationConfig(BaseModel):
    """Configuration for lesson checks.

    Attributes:
        enabled_checks: Checks to run
        strict_languages: Treat code blocks in unvalidated languages as warnings
        fail_on_warnings: A lesson with warnings fails verification
        allowed_schemes: URL schemes accepted for external links
        require_url_path: External URLs must carry a path
        allow_outside_root: Internal links may leave the course root
    """

    enabled_checks: list[CheckType] = Field(
        default_factory=lambda: list(CheckType),
        description="Checks to run",
    )
    strict_languages: bool = Field(
        default=False,
        description="Warn on code blocks that cannot be validated",
    )
    fail_on_warnings: bool = Field(
        default=False,
        description="Fail lessons that only have warnings",
    )
    allowed_schemes: list[str] = Field(
        default_factory=lambda: ["http", "https"],
        description="Accepted URL schemes",
    )
    require_url_path: bool = Field(
        default=True,
        description="External URLs must have a path",
    )
    allow_outside_root: bool = Field(
        default=False,
        description="Allow internal links outside the course root",
    )

    @field_validator("allowed_schemes")
    @classmethod
    def normalize_schemes(cls, v: list[str]) -> list[str]:
        """Lowercase schemes and drop a trailing ':' or '://'."""
        schemes = [s.strip().lower().removesuffix("://").removesuffix(":") for s in v]
        if not any(schemes):
            raise ValueError("At least one URL scheme must be allowed")
        return [s for s in schemes if s]


class OutputConfig(BaseModel):
    """Configuration for exported files.

    Attributes:
        samples_dir: Directory code samples are exported to
        create_dirs: Create samples_dir when it is missing
    """

    samples_dir: str = Field(
        default="./samples",
        description="Code sample export directory",
    )
    create_dirs: bool = Field(
        default=True,
        description="Create output directories",
    )


class LoggingConfig(BaseModel):
    """Logging configuration.

    Attributes:
        level: Level for the coursekit loggers
        format: Format of file log records
        file: Optional log file
    """

    level: LogLevel = Field(default=LogLevel.WARNING, description="Log level")
    format: str = Field(
        default="%(asctime)s %(levelname)s %(name)s: %(message)s",
        description="File log format",
    )
    file: str | None = Field(default=None, description="Log file path")

    @field_validator("level", mode="before")
    @classmethod
    def upper_level(cls, v: Any) -> Any:
        """Accept lowercase level names."""
        return v.upper() if isinstance(v, str) else v


class CoursekitConfig(BaseModel):
    """Root configuration.

    Attributes:
        course: Course location
        verification: Lesson checks
        output: Export paths
        logging: Logging setup
        debug: Log at INFO level or below, as with --verbose
    """

    course: CourseConfig = Field(
        default_factory=CourseConfig,
        description="Course location",
    )
    verification: VerificationConfig = Field(
        default_factory=VerificationConfig,
        description="Verification settings",
    )
    output: OutputConfig = Field(
        default_factory=OutputConfig,
        description="Export settings",
    )
    logging: LoggingConfig = Field(
        default_factory=LoggingConfig,
        description="Logging configuration",
    )
    debug: bool = Field(
        default=False,
        description="Verbose logging",
    )

    def to_yaml_dict(self) -> dict[str, Any]:
        """Convert to YAML-friendly dictionary.

        Returns:
            Dict suitable for YAML serialization
        """
        return self.model_dump(mode="json", exclude_none=True)
