"""
Course loading, navigation and sample export.
"""

from coursekit.course.catalog import (
    DEFAULT_PATTERN,
    Course,
    bundled_course_root,
    lesson_sort_key,
)
from coursekit.course.export import export_samples, sample_extension

__all__ = [
    "DEFAULT_PATTERN",
    "Course",
    "bundled_course_root",
    "lesson_sort_key",
    "export_samples",
    "sample_extension",
]
