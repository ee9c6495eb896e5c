"""
Lesson Verification

Checks that a lesson is well formed without executing anything:

- internal links and images resolve to files in the course
- fenced code blocks parse in their declared language
- external URLs have a protocol, host and path
- headings form one titled, properly nested outline
- '#fragment' links match a heading
"""

from coursekit.verification.base import CheckContext, LessonCheck
from coursekit.verification.checks import (
    BUILTIN_CHECKS,
    AnchorCheck,
    CodeSyntaxCheck,
    ExternalUrlCheck,
    HeadingStructureCheck,
    ImageCheck,
    InternalLinkCheck,
    validate_url,
)
from coursekit.verification.pipeline import VerificationPipeline
from coursekit.verification.registry import CheckRegistry, get_registry
from coursekit.verification.syntax import (
    SyntaxIssue,
    SyntaxValidatorRegistry,
)

__all__ = [
    # Base
    "CheckContext",
    "LessonCheck",
    # Checks
    "BUILTIN_CHECKS",
    "AnchorCheck",
    "CodeSyntaxCheck",
    "ExternalUrlCheck",
    "HeadingStructureCheck",
    "ImageCheck",
    "InternalLinkCheck",
    "validate_url",
    # Pipeline
    "VerificationPipeline",
    "CheckRegistry",
    "get_registry",
    # Syntax
    "SyntaxIssue",
    "SyntaxValidatorRegistry",
]
