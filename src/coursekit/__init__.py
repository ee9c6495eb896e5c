"""
coursekit: Document database indexing course.

Ships the lessons of the indexing unit (static, Map-Reduce and full-text
indexes) as Markdown, and the tooling to read them in a terminal, pull the
Python listings out into files, and verify that every lesson is well formed:
links resolve, images exist, listings parse and headings nest properly.

Example:
    from coursekit import Course, VerificationPipeline

    course = Course.load()
    report = VerificationPipeline().verify_course(course)
    print(report.passed)
"""

from coursekit.course import Course, bundled_course_root
from coursekit.parsing import load_lesson, parse_markdown
from coursekit.verification import VerificationPipeline
from coursekit.version import __version__

__all__ = [
    "__version__",
    "Course",
    "bundled_course_root",
    "load_lesson",
    "parse_markdown",
    "VerificationPipeline",
]
