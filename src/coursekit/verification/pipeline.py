"""
Lesson Verification Pipeline.

Runs the enabled checks over one lesson or over every lesson of a course
and collects the results into LessonReport / CourseReport models.
"""

import logging
from pathlib import Path

from coursekit.config.models import VerificationConfig
from coursekit.course.catalog import Course
from coursekit.models.base import CheckStatus, Severity
from coursekit.models.document import LessonDocument
from coursekit.models.findings import CheckResult, CourseReport, Finding, LessonReport
from coursekit.parsing.markdown import load_lesson
from coursekit.verification.base import CheckContext, LessonCheck
from coursekit.verification.registry import CheckRegistry, get_registry
from coursekit.verification.syntax import SyntaxValidatorRegistry

logger = logging.getLogger(__name__)


class VerificationPipeline:
    """Runs lesson checks.

    Usage:
        pipeline = VerificationPipeline(config.verification)
        report = pipeline.verify_course(Course.load())
        if not report.passed:
            ...
    """

    def __init__(
        self,
        config: VerificationConfig | None = None,
        registry: CheckRegistry | None = None,
        syntax: SyntaxValidatorRegistry | None = None,
    ) -> None:
        """Initialize the pipeline.

        Args:
            config: Verification settings (defaults if omitted)
            registry: Check registry (global registry if omitted)
            syntax: Code block validators (built-ins if omitted)
        """
        self.config = config or VerificationConfig()
        self._registry = registry or get_registry()
        self._syntax = syntax or SyntaxValidatorRegistry.with_defaults()
        self._checks = self._build_checks()

    @property
    def checks(self) -> list[LessonCheck]:
        return list(self._checks)

    def _build_checks(self) -> list[LessonCheck]:
        checks = []
        for check_type in dict.fromkeys(self.config.enabled_checks):
            if not self._registry.is_registered(check_type):
                logger.warning("Check %s is enabled but not registered", check_type.value)
                continue
            checks.append(self._registry.get(check_type))
        return checks

    def create_context(self, course_root: Path | None = None) -> CheckContext:
        return CheckContext(config=self.config, course_root=course_root, syntax=self._syntax)

    def verify_lesson(
        self,
        document: LessonDocument,
        context: CheckContext | None = None,
    ) -> LessonReport:
        """Run every enabled check over one lesson.

        Args:
            document: Parsed lesson
            context: Shared context; without one, links are not confined
                to a course root

        Returns:
            Report with one result per check
        """
        if context is None:
            context = self.create_context()
        context.register_document(document)

        results = [self._run_check(check, document, context) for check in self._checks]
        report = LessonReport(
            lesson_id=document.lesson_id,
            title=document.title,
            source_path=document.source_path,
            results=results,
            fail_on_warnings=self.config.fail_on_warnings,
        )
        logger.info(
            "Verified %s: %d errors, %d warnings",
            document.lesson_id,
            report.error_count,
            report.warning_count,
        )
        return report

    def verify_course(self, course: Course) -> CourseReport:
        """Run every enabled check over every lesson of a course."""
        context = self.create_context(course.root)
        for lesson in course:
            context.register_document(lesson)
        lessons = [self.verify_lesson(lesson, context) for lesson in course]
        return CourseReport(course_root=course.root, lessons=lessons)

    def verify_path(self, path: str | Path, pattern: str | None = None) -> CourseReport:
        """Verify a single lesson file or a course directory.

        Raises:
            FileNotFoundError: If path does not exist
        """
        target = Path(path).resolve()
        if not target.exists():
            raise FileNotFoundError(f"No such lesson or course: {path}")
        if target.is_dir():
            course = Course.load(target, pattern) if pattern else Course.load(target)
            return self.verify_course(course)

        document = load_lesson(target)
        report = self.verify_lesson(document)
        return CourseReport(course_root=target.parent, lessons=[report])

    def _run_check(
        self,
        check: LessonCheck,
        document: LessonDocument,
        context: CheckContext,
    ) -> CheckResult:
        """Run one check, recording a crash as a failed result."""
        try:
            return check.run(document, context)
        except Exception as e:
            logger.exception("Check %s crashed on %s", check.check_type.value, document.lesson_id)
            return CheckResult(
                check_type=check.check_type,
                status=CheckStatus.FAIL,
                findings=[
                    Finding(
                        check_type=check.check_type,
                        severity=Severity.ERROR,
                        message=f"Check crashed: {e}",
                    )
                ],
            )

