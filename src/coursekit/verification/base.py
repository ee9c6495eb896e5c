"""
Lesson Verification - Base Classes.

Every structural property a lesson must have is verified by one
LessonCheck. A check examines a single parsed lesson and returns a
CheckResult; problems in the lesson are findings, not exceptions.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path

from coursekit.config.models import VerificationConfig
from coursekit.errors import LessonParseError
from coursekit.models.base import CheckType, Severity
from coursekit.models.document import LessonDocument
from coursekit.models.findings import CheckResult, Finding
from coursekit.parsing.markdown import load_lesson
from coursekit.verification.syntax import SyntaxValidatorRegistry

logger = logging.getLogger(__name__)


@dataclass
class CheckContext:
    """Shared state for checks run over one course.

    Attributes:
        config: Verification settings
        course_root: Root directory of the course, if known
        syntax: Code block validators by language
    """

    config: VerificationConfig = field(default_factory=VerificationConfig)
    course_root: Path | None = None
    syntax: SyntaxValidatorRegistry = field(default_factory=SyntaxValidatorRegistry.with_defaults)
    _documents: dict[Path, LessonDocument | None] = field(default_factory=dict, repr=False)

    def register_document(self, document: LessonDocument) -> None:
        """Make an already parsed lesson available to cross-document checks."""
        if document.source_path is not None:
            self._documents[document.source_path.resolve()] = document

    def load_document(self, path: Path) -> LessonDocument | None:
        """Load a linked Markdown document once, or None if unreadable."""
        key = path.resolve()
        if key not in self._documents:
            try:
                self._documents[key] = load_lesson(key)
            except LessonParseError as e:
                logger.debug("Cannot load linked document: %s", e)
                self._documents[key] = None
        return self._documents[key]

    def is_inside_root(self, path: Path) -> bool:
        """True if path lies under the course root (or no root is known)."""
        if self.course_root is None:
            return True
        return path.resolve().is_relative_to(self.course_root.resolve())


class LessonCheck(ABC):
    """Abstract base class for lesson checks."""

    @property
    @abstractmethod
    def check_type(self) -> CheckType:
        """The check this class implements."""
        ...

    @property
    def description(self) -> str:
        """One-line description shown in listings."""
        return (self.__doc__ or self.check_type.value).strip().splitlines()[0]

    @abstractmethod
    def run(self, document: LessonDocument, context: CheckContext) -> CheckResult:
        """Examine a lesson.

        Args:
            document: Parsed lesson
            context: Course-wide settings and caches

        Returns:
            Result with any findings
        """
        ...

    def finding(
        self,
        severity: Severity,
        message: str,
        line: int | None = None,
        target: str | None = None,
    ) -> Finding:
        """Create a finding attributed to this check."""
        return Finding(
            check_type=self.check_type,
            severity=severity,
            message=message,
            line=line,
            target=target,
        )
