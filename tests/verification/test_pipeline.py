"""Tests for the verification pipeline."""

import logging

import pytest

from coursekit.config import VerificationConfig
from coursekit.course import Course
from coursekit.models import CheckResult, CheckStatus, CheckType, Severity
from coursekit.parsing import load_lesson
from coursekit.verification import CheckRegistry, LessonCheck, VerificationPipeline, get_registry


class CrashingCheck(LessonCheck):
    """Always raises."""

    @property
    def check_type(self) -> CheckType:
        return CheckType.ANCHORS

    def run(self, document, context) -> CheckResult:
        raise RuntimeError("boom")


@pytest.fixture
def restore_registry():
    yield
    CheckRegistry().clear()
    get_registry()


class TestVerifyCourse:
    """Tests for whole-course verification."""

    def test_valid_course_passes(self, course_dir):
        report = VerificationPipeline().verify_course(Course.load(course_dir))
        assert report.passed, report.to_markdown()
        assert [lesson.lesson_id for lesson in report.lessons] == ["lesson1", "lesson2"]
        assert report.course_root == course_dir.resolve()

    def test_one_result_per_enabled_check(self, course_dir):
        report = VerificationPipeline().verify_course(Course.load(course_dir))
        lesson2 = report.get_lesson("lesson2")
        assert {r.check_type for r in lesson2.results} == set(CheckType)
        assert lesson2.get_result(CheckType.IMAGES).status == CheckStatus.PASS
        assert lesson2.get_result(CheckType.ANCHORS).items_checked == 2

    def test_broken_lesson_fails(self, course_dir):
        (course_dir / "lesson2" / "images" / "results.svg").unlink()
        report = VerificationPipeline().verify_course(Course.load(course_dir))
        assert not report.passed
        assert report.get_lesson("lesson1").passed
        lesson2 = report.get_lesson("lesson2")
        assert lesson2.get_result(CheckType.IMAGES).status == CheckStatus.FAIL
        assert lesson2.error_count == 1

    def test_enabled_checks_subset(self, course_dir):
        config = VerificationConfig(enabled_checks=[CheckType.CODE_SYNTAX, CheckType.CODE_SYNTAX])
        pipeline = VerificationPipeline(config)
        assert [c.check_type for c in pipeline.checks] == [CheckType.CODE_SYNTAX]
        report = pipeline.verify_course(Course.load(course_dir))
        assert all(len(lesson.results) == 1 for lesson in report.lessons)

    def test_fail_on_warnings(self, write_course):
        root = write_course({"lesson1/README.md": "# Lesson\n\n```\nuntagged\n```\n"})
        lenient = VerificationPipeline().verify_course(Course.load(root))
        strict = VerificationPipeline(VerificationConfig(fail_on_warnings=True)).verify_course(Course.load(root))
        assert lenient.passed
        assert lenient.warning_count == 1
        assert not strict.passed


class TestVerifyPath:
    def test_directory(self, course_dir):
        report = VerificationPipeline().verify_path(course_dir)
        assert len(report.lessons) == 2

    def test_single_file(self, course_dir):
        report = VerificationPipeline().verify_path(course_dir / "lesson2" / "README.md")
        assert report.course_root == (course_dir / "lesson2").resolve()
        assert [lesson.lesson_id for lesson in report.lessons] == ["lesson2"]
        # links to sibling lessons still resolve
        assert report.passed, report.to_markdown()

    def test_missing_path(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            VerificationPipeline().verify_path(tmp_path / "nope")

    def test_custom_pattern(self, write_course):
        root = write_course({"intro.md": "# Intro\n", "lesson1/README.md": "# One\n"})
        report = VerificationPipeline().verify_path(root, pattern="*.md")
        assert [lesson.lesson_id for lesson in report.lessons] == ["intro"]


class TestVerifyLesson:
    def test_without_context(self, course_dir):
        document = load_lesson(course_dir / "lesson1" / "README.md")
        report = VerificationPipeline().verify_lesson(document)
        assert report.passed
        assert report.title == "Lesson 1 - Getting started"

    def test_logs_summary(self, course_dir, caplog):
        document = load_lesson(course_dir / "lesson1" / "README.md")
        with caplog.at_level(logging.INFO, logger="coursekit"):
            VerificationPipeline().verify_lesson(document)
        assert "Verified lesson1: 0 errors, 0 warnings" in caplog.text

    def test_crashing_check_is_recorded(self, course_dir, restore_registry, caplog):
        registry = CheckRegistry()
        registry.register(CheckType.ANCHORS, CrashingCheck)
        pipeline = VerificationPipeline(VerificationConfig(enabled_checks=[CheckType.ANCHORS]), registry=registry)
        document = load_lesson(course_dir / "lesson1" / "README.md")

        with caplog.at_level(logging.ERROR, logger="coursekit"):
            report = pipeline.verify_lesson(document)

        result = report.get_result(CheckType.ANCHORS)
        assert result.status == CheckStatus.FAIL
        assert result.findings[0].severity == Severity.ERROR
        assert result.findings[0].message == "Check crashed: boom"
        assert "crashed" in caplog.text

    def test_unregistered_check_is_skipped(self, restore_registry, caplog):
        registry = CheckRegistry()
        registry.unregister(CheckType.IMAGES)
        with caplog.at_level(logging.WARNING, logger="coursekit"):
            pipeline = VerificationPipeline(registry=registry)
        assert CheckType.IMAGES not in [c.check_type for c in pipeline.checks]
        assert "images is enabled but not registered" in caplog.text
