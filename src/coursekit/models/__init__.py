"""
Data models for lessons and verification results.

- base: shared enumerations
- document: the parsed lesson (headings, prose, code samples, links, images)
- findings: check results and per-lesson / per-course reports
"""

from coursekit.models.base import (
    BlockType,
    CheckStatus,
    CheckType,
    LinkKind,
    Severity,
)
from coursekit.models.document import (
    Block,
    CodeSample,
    CrossReference,
    Heading,
    Image,
    LessonDocument,
    ListItem,
    Paragraph,
)
from coursekit.models.findings import (
    CheckResult,
    CourseReport,
    Finding,
    LessonReport,
)

__all__ = [
    # Enums
    "BlockType",
    "CheckStatus",
    "CheckType",
    "LinkKind",
    "Severity",
    # Document
    "Block",
    "CodeSample",
    "CrossReference",
    "Heading",
    "Image",
    "LessonDocument",
    "ListItem",
    "Paragraph",
    # Findings
    "CheckResult",
    "CourseReport",
    "Finding",
    "LessonReport",
]
