"""
Exception hierarchy.

Verification problems found in lesson content are reported as findings,
not raised. These exceptions cover the cases where coursekit itself
cannot proceed: bad configuration, unreadable lessons, unknown lesson ids.
"""

from pathlib import Path


class CoursekitError(Exception):
    """Base class for all coursekit errors."""


class LessonNotFoundError(CoursekitError, KeyError):
    """Raised when a lesson id is not part of the course."""

    def __init__(self, lesson_id: str, available: list[str] | None = None) -> None:
        self.lesson_id = lesson_id
        self.available = available or []
        super().__init__(lesson_id)

    def __str__(self) -> str:
        msg = f"Unknown lesson: {self.lesson_id}"
        if self.available:
            msg = f"{msg} (available: {', '.join(self.available)})"
        return msg


class LessonParseError(CoursekitError):
    """Raised when a lesson file cannot be read."""

    def __init__(self, message: str, path: Path | None = None) -> None:
        super().__init__(message)
        self.path = path

    def __str__(self) -> str:
        msg = super().__str__()
        if self.path:
            msg = f"{msg} (file: {self.path})"
        return msg


class ConfigurationError(CoursekitError):
    """Raised when configuration cannot be read or fails validation.

    Attributes:
        errors: pydantic error dicts, if validation failed
        path: Config file involved, if any
    """

    MAX_DETAILS = 5

    def __init__(
        self,
        message: str,
        errors: list[dict] | None = None,
        path: Path | None = None,
    ) -> None:
        super().__init__(message)
        self.errors = list(errors or [])
        self.path = path

    def __str__(self) -> str:
        head = super().__str__()
        if self.path:
            head = f"{head} (file: {self.path})"
        lines = [head]
        for err in self.errors[: self.MAX_DETAILS]:
            where = ".".join(str(part) for part in err.get("loc", ())) or "<root>"
            lines.append(f"  - {where}: {err.get('msg', 'invalid value')}")
        hidden = len(self.errors) - self.MAX_DETAILS
        if hidden > 0:
            lines.append(f"  ... {hidden} more")
        return "\n".join(lines)
