"""
Verification result models.

A check examines one lesson and produces a CheckResult holding its
findings. Results are grouped per lesson (LessonReport) and per course
(CourseReport).
"""

from datetime import UTC, datetime
from pathlib import Path

from pydantic import BaseModel, Field, computed_field

from coursekit.models.base import CheckStatus, CheckType, Severity


class Finding(BaseModel):
    """One problem (or note) reported by a check.

    Attributes:
        check_type: Check that produced the finding
        severity: How serious the finding is
        message: Human-readable description
        line: 1-based source line, if known
        target: Link, image path or language the finding is about
    """

    check_type: CheckType
    severity: Severity
    message: str
    line: int | None = Field(default=None, ge=1)
    target: str | None = None

    def location(self, path: Path | None = None) -> str:
        """Format as path:line for display."""
        name = str(path) if path else "<lesson>"
        return f"{name}:{self.line}" if self.line else name


class CheckResult(BaseModel):
    """Result of running one check over one lesson.

    Attributes:
        check_type: Which check ran
        status: Overall outcome
        findings: Problems and notes found
        items_checked: Number of links, blocks or headings examined
    """

    check_type: CheckType
    status: CheckStatus = CheckStatus.PASS
    findings: list[Finding] = Field(default_factory=list)
    items_checked: int = Field(default=0, ge=0)

    @computed_field
    @property
    def error_count(self) -> int:
        return sum(1 for f in self.findings if f.severity == Severity.ERROR)

    @computed_field
    @property
    def warning_count(self) -> int:
        return sum(1 for f in self.findings if f.severity == Severity.WARNING)

    @classmethod
    def from_findings(
        cls,
        check_type: CheckType,
        findings: list[Finding],
        items_checked: int,
    ) -> "CheckResult":
        """Build a result whose status follows from the worst finding."""
        if any(f.severity == Severity.ERROR for f in findings):
            status = CheckStatus.FAIL
        elif any(f.severity == Severity.WARNING for f in findings):
            status = CheckStatus.WARNING
        elif items_checked == 0:
            status = CheckStatus.SKIPPED
        else:
            status = CheckStatus.PASS
        return cls(
            check_type=check_type,
            status=status,
            findings=findings,
            items_checked=items_checked,
        )


class LessonReport(BaseModel):
    """All check results for one lesson."""

    lesson_id: str
    title: str = ""
    source_path: Path | None = None
    results: list[CheckResult] = Field(default_factory=list)
    fail_on_warnings: bool = False

    @computed_field
    @property
    def error_count(self) -> int:
        return sum(r.error_count for r in self.results)

    @computed_field
    @property
    def warning_count(self) -> int:
        return sum(r.warning_count for r in self.results)

    @computed_field
    @property
    def passed(self) -> bool:
        """True if there are no errors (nor warnings, when they count)."""
        if self.error_count:
            return False
        return not (self.fail_on_warnings and self.warning_count)

    @property
    def findings(self) -> list[Finding]:
        return [f for r in self.results for f in r.findings]

    def get_result(self, check_type: CheckType) -> CheckResult | None:
        for result in self.results:
            if result.check_type == check_type:
                return result
        return None


class CourseReport(BaseModel):
    """Verification results for every lesson of a course."""

    course_root: Path | None = None
    lessons: list[LessonReport] = Field(default_factory=list)
    timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC))

    @computed_field
    @property
    def passed(self) -> bool:
        return all(lesson.passed for lesson in self.lessons)

    @computed_field
    @property
    def error_count(self) -> int:
        return sum(lesson.error_count for lesson in self.lessons)

    @computed_field
    @property
    def warning_count(self) -> int:
        return sum(lesson.warning_count for lesson in self.lessons)

    def get_lesson(self, lesson_id: str) -> LessonReport | None:
        for lesson in self.lessons:
            if lesson.lesson_id == lesson_id:
                return lesson
        return None

    def to_summary_dict(self) -> dict:
        """Summarize the report as plain data.

        Returns:
            Dict suitable for JSON serialization
        """
        return {
            "course_root": str(self.course_root) if self.course_root else None,
            "timestamp": self.timestamp.isoformat(),
            "passed": self.passed,
            "errors": self.error_count,
            "warnings": self.warning_count,
            "lessons": [
                {
                    "lesson_id": lesson.lesson_id,
                    "title": lesson.title,
                    "passed": lesson.passed,
                    "checks": {r.check_type.value: r.status.value for r in lesson.results},
                    "findings": [
                        f.model_dump(mode="json", exclude_none=True) for f in lesson.findings
                    ],
                }
                for lesson in self.lessons
            ],
        }

    def to_markdown(self) -> str:
        """Generate markdown report.

        Returns:
            Markdown formatted report string
        """
        lines = [
            "# Course Verification Report",
            "",
            f"**Generated:** {self.timestamp.isoformat()}",
            "",
            f"- **Status:** {'PASSED' if self.passed else 'FAILED'}",
            f"- **Lessons:** {len(self.lessons)}",
            f"- **Errors:** {self.error_count}",
            f"- **Warnings:** {self.warning_count}",
            "",
            "## Lessons",
            "",
            "| Lesson | Title | Errors | Warnings | Status |",
            "|--------|-------|--------|----------|--------|",
        ]
        for lesson in self.lessons:
            status = "PASS" if lesson.passed else "FAIL"
            lines.append(
                f"| {lesson.lesson_id} | {lesson.title} | {lesson.error_count} "
                f"| {lesson.warning_count} | {status} |"
            )

        problems = [
            (lesson, finding)
            for lesson in self.lessons
            for finding in lesson.findings
            if finding.severity != Severity.INFO
        ]
        if problems:
            lines.extend(["", "## Findings", ""])
            for lesson, finding in problems:
                lines.append(
                    f"- `{finding.location(lesson.source_path)}` "
                    f"[{finding.severity.value}] {finding.check_type.value}: {finding.message}"
                )

        lines.append("")
        return "\n".join(lines)
