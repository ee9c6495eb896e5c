"""
Lesson Checks.

One check per structural property of a lesson:

- InternalLinkCheck: relative links point at files that exist
- CodeSyntaxCheck: fenced code blocks parse in their declared language
- ImageCheck: referenced images exist
- ExternalUrlCheck: absolute URLs are well formed
- HeadingStructureCheck: one title, no skipped heading levels
- AnchorCheck: '#fragment' links match a heading

None of the checks touch the network.
"""

import re
from pathlib import Path
from urllib.parse import unquote, urlsplit

from coursekit.models.base import CheckType, LinkKind, Severity
from coursekit.models.document import LessonDocument
from coursekit.models.findings import CheckResult, Finding
from coursekit.verification.base import CheckContext, LessonCheck

HOSTNAME = re.compile(r"^(?=.{1,253}$)[a-z0-9](?:[a-z0-9-]{0,61}[a-z0-9])?(?:\.[a-z0-9](?:[a-z0-9-]{0,61}[a-z0-9])?)*$")


def validate_url(url: str, allowed_schemes: list[str], require_path: bool = True) -> str | None:
    """Check that a URL has a protocol, a host and (optionally) a path.

    Args:
        url: Absolute URL
        allowed_schemes: Accepted schemes, lowercase
        require_path: Reject URLs whose path is empty or just '/'

    Returns:
        None if the URL is well formed, otherwise the reason it is not
    """
    if any(ch.isspace() for ch in url):
        return "URL contains whitespace"
    try:
        parts = urlsplit(url)
    except ValueError as e:
        return f"URL cannot be parsed: {e}"

    scheme = parts.scheme.lower()
    if not scheme:
        return "URL has no scheme"
    if scheme not in allowed_schemes:
        return f"URL scheme '{scheme}' is not allowed"
    if scheme == "mailto":
        return None if parts.path else "mailto link has no address"

    host = parts.hostname
    if not host:
        return "URL has no host"
    if not (HOSTNAME.match(host) or ":" in host):
        return f"URL host '{host}' is not a valid hostname"
    try:
        parts.port
    except ValueError:
        return "URL has an invalid port"
    if require_path and not parts.path.strip("/"):
        return "URL has no path"
    return None


def _resolve_local(document: LessonDocument, target: str) -> Path:
    return (document.base_dir / unquote(target)).resolve()


class InternalLinkCheck(LessonCheck):
    """Relative links resolve to files in the course."""

    @property
    def check_type(self) -> CheckType:
        return CheckType.INTERNAL_LINKS

    def run(self, document: LessonDocument, context: CheckContext) -> CheckResult:
        findings: list[Finding] = []
        links = document.internal_links
        for link in links:
            if not link.path_part:
                continue
            target = _resolve_local(document, link.path_part)
            if not context.config.allow_outside_root and not context.is_inside_root(target):
                findings.append(
                    self.finding(
                        Severity.ERROR,
                        f"Link '{link.target}' points outside the course",
                        line=link.line,
                        target=link.target,
                    )
                )
            elif not target.exists():
                findings.append(
                    self.finding(
                        Severity.ERROR,
                        f"Link target '{link.target}' does not exist",
                        line=link.line,
                        target=link.target,
                    )
                )
        return CheckResult.from_findings(self.check_type, findings, len(links))


class CodeSyntaxCheck(LessonCheck):
    """Fenced code blocks parse in their declared language."""

    @property
    def check_type(self) -> CheckType:
        return CheckType.CODE_SYNTAX

    def run(self, document: LessonDocument, context: CheckContext) -> CheckResult:
        findings: list[Finding] = []
        samples = document.code_samples
        for sample in samples:
            if sample.unterminated:
                findings.append(
                    self.finding(
                        Severity.ERROR,
                        "Code block is never closed",
                        line=sample.line,
                        target=sample.language or None,
                    )
                )
                continue
            if not sample.language:
                findings.append(
                    self.finding(
                        Severity.WARNING,
                        "Code block has no language tag",
                        line=sample.line,
                    )
                )
                continue

            validator = context.syntax.get(sample.language)
            if validator is None:
                severity = Severity.WARNING if context.config.strict_languages else Severity.INFO
                findings.append(
                    self.finding(
                        severity,
                        f"No syntax validator for '{sample.language}'",
                        line=sample.line,
                        target=sample.language,
                    )
                )
                continue

            issue = validator(sample.code)
            if issue is not None:
                findings.append(
                    self.finding(
                        Severity.ERROR,
                        f"Invalid {sample.language}: {issue.message}",
                        line=sample.line + issue.line,
                        target=sample.language,
                    )
                )
        return CheckResult.from_findings(self.check_type, findings, len(samples))


class ImageCheck(LessonCheck):
    """Referenced images exist."""

    @property
    def check_type(self) -> CheckType:
        return CheckType.IMAGES

    def run(self, document: LessonDocument, context: CheckContext) -> CheckResult:
        findings: list[Finding] = []
        for image in document.images:
            if not image.alt.strip():
                findings.append(
                    self.finding(
                        Severity.WARNING,
                        "Image has no alt text",
                        line=image.line,
                        target=image.target,
                    )
                )
            if image.is_remote:
                problem = validate_url(
                    image.target,
                    context.config.allowed_schemes,
                    require_path=True,
                )
                if problem:
                    findings.append(
                        self.finding(Severity.ERROR, problem, line=image.line, target=image.target)
                    )
                continue

            path = _resolve_local(document, image.target.split("?", 1)[0].split("#", 1)[0])
            if not context.config.allow_outside_root and not context.is_inside_root(path):
                findings.append(
                    self.finding(
                        Severity.ERROR,
                        f"Image '{image.target}' is outside the course",
                        line=image.line,
                        target=image.target,
                    )
                )
            elif not path.is_file():
                findings.append(
                    self.finding(
                        Severity.ERROR,
                        f"Image '{image.target}' does not exist",
                        line=image.line,
                        target=image.target,
                    )
                )
        return CheckResult.from_findings(self.check_type, findings, len(document.images))


class ExternalUrlCheck(LessonCheck):
    """Absolute URLs are well formed."""

    @property
    def check_type(self) -> CheckType:
        return CheckType.EXTERNAL_URLS

    def run(self, document: LessonDocument, context: CheckContext) -> CheckResult:
        findings: list[Finding] = []
        links = document.external_links
        for link in links:
            problem = validate_url(
                link.target,
                context.config.allowed_schemes,
                require_path=context.config.require_url_path,
            )
            if problem:
                findings.append(
                    self.finding(Severity.ERROR, problem, line=link.line, target=link.target)
                )
        return CheckResult.from_findings(self.check_type, findings, len(links))


class HeadingStructureCheck(LessonCheck):
    """One top-level title and no skipped heading levels."""

    @property
    def check_type(self) -> CheckType:
        return CheckType.HEADING_STRUCTURE

    def run(self, document: LessonDocument, context: CheckContext) -> CheckResult:
        findings: list[Finding] = []
        headings = document.headings
        if not headings:
            findings.append(self.finding(Severity.ERROR, "Lesson has no title heading"))
            return CheckResult.from_findings(self.check_type, findings, 0)

        titles = [h for h in headings if h.level == 1]
        if not titles:
            findings.append(self.finding(Severity.ERROR, "Lesson has no level-1 title"))
        for extra in titles[1:]:
            findings.append(
                self.finding(
                    Severity.ERROR,
                    f"Second level-1 heading '{extra.text}'",
                    line=extra.line,
                )
            )
        if headings[0].level != 1:
            findings.append(
                self.finding(
                    Severity.ERROR,
                    f"First heading is level {headings[0].level}, expected the level-1 title",
                    line=headings[0].line,
                )
            )

        for previous, current in zip(headings, headings[1:]):
            if current.level > previous.level + 1:
                findings.append(
                    self.finding(
                        Severity.ERROR,
                        f"Heading level jumps from {previous.level} to {current.level}",
                        line=current.line,
                    )
                )

        for heading in headings:
            if not heading.text:
                findings.append(self.finding(Severity.WARNING, "Empty heading", line=heading.line))

        return CheckResult.from_findings(self.check_type, findings, len(headings))


class AnchorCheck(LessonCheck):
    """'#fragment' links match a heading of the target document."""

    @property
    def check_type(self) -> CheckType:
        return CheckType.ANCHORS

    def run(self, document: LessonDocument, context: CheckContext) -> CheckResult:
        findings: list[Finding] = []
        checked = 0
        for link in document.links:
            if not link.fragment or link.kind == LinkKind.EXTERNAL:
                continue

            if link.path_part:
                path = _resolve_local(document, link.path_part)
                if path.suffix.lower() not in (".md", ".markdown") or not path.is_file():
                    continue  # missing files are reported by the link check
                target_doc = context.load_document(path)
                if target_doc is None:
                    continue
            else:
                target_doc = document

            checked += 1
            if unquote(link.fragment).lower() not in target_doc.anchors:
                findings.append(
                    self.finding(
                        Severity.ERROR,
                        f"No heading matches anchor '#{link.fragment}'",
                        line=link.line,
                        target=link.target,
                    )
                )
        return CheckResult.from_findings(self.check_type, findings, checked)


BUILTIN_CHECKS: list[type[LessonCheck]] = [
    HeadingStructureCheck,
    InternalLinkCheck,
    AnchorCheck,
    ImageCheck,
    ExternalUrlCheck,
    CodeSyntaxCheck,
]
