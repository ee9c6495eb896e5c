"""
Base enumerations used throughout the data models.

These enums provide type-safe values for categorical fields of the lesson
document and of verification results.
"""

from enum import Enum


class BlockType(str, Enum):
    """Kind of top-level block in a lesson document."""

    HEADING = "heading"
    PARAGRAPH = "paragraph"
    CODE = "code"
    LIST_ITEM = "list_item"


class LinkKind(str, Enum):
    """Classification of a link target.

    Determines which check is responsible for the link.
    """

    INTERNAL = "internal"  # Relative path to a file in the course
    ANCHOR = "anchor"  # Fragment within the same document
    EXTERNAL = "external"  # Absolute URL


class Severity(str, Enum):
    """Severity of a verification finding."""

    ERROR = "error"  # Lesson is broken
    WARNING = "warning"  # Lesson is usable but should be fixed
    INFO = "info"  # Informational, e.g. a block that was not validated


class CheckStatus(str, Enum):
    """Outcome of a single check over one lesson."""

    PASS = "pass"
    FAIL = "fail"
    WARNING = "warning"
    SKIPPED = "skipped"


class CheckType(str, Enum):
    """Available lesson checks."""

    INTERNAL_LINKS = "internal_links"
    CODE_SYNTAX = "code_syntax"
    IMAGES = "images"
    EXTERNAL_URLS = "external_urls"
    HEADING_STRUCTURE = "heading_structure"
    ANCHORS = "anchors"
