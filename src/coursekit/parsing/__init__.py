"""
Lesson parsing.

Turns lesson Markdown into LessonDocument models.
"""

from coursekit.parsing.markdown import (
    classify_target,
    load_lesson,
    parse_markdown,
    slugify,
)

__all__ = [
    "classify_target",
    "load_lesson",
    "parse_markdown",
    "slugify",
]
