"""
Markdown Lesson Parser.

Lessons are tokenized with markdown-it-py, the CommonMark parser rich uses
to render them in the terminal, so the checks see the same structure the
reader does. The block tokens are folded into a LessonDocument: headings
(ATX and setext), paragraphs, list items (continuation lines included),
code blocks, plus the links and images of every inline run. Each element
records its 1-based source line.
"""

import logging
import re
from pathlib import Path

from markdown_it import MarkdownIt
from markdown_it.token import Token

from coursekit.errors import LessonParseError
from coursekit.models.base import LinkKind
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

logger = logging.getLogger(__name__)

# Same flavour rich.markdown renders with
_markdown = MarkdownIt("commonmark").enable(["table", "strikethrough"])

SCHEME = re.compile(r"^[a-zA-Z][a-zA-Z0-9+.-]*:")
_TEXT_TOKENS = {"text", "text_special", "code_inline"}
_LINE_BREAKS = {"softbreak", "hardbreak"}


def _plain_text(children: list[Token]) -> str:
    parts = []
    for child in children:
        if child.type in _TEXT_TOKENS:
            parts.append(child.content)
        elif child.type in _LINE_BREAKS:
            parts.append(" ")
    return "".join(parts)


def _anchor_slug(plain: str) -> str:
    plain = plain.strip().lower()
    plain = re.sub(r"[^\w\- ]", "", plain)
    return plain.replace(" ", "-")


def slugify(text: str) -> str:
    """Compute the GitHub-style anchor slug of a heading.

    Args:
        text: Heading text, possibly with inline markup

    Returns:
        Lowercase slug with punctuation removed and spaces turned into '-'
    """
    tokens = _markdown.parseInline(text)
    children = tokens[0].children if tokens and tokens[0].children else []
    return _anchor_slug(_plain_text(children))


def classify_target(target: str) -> LinkKind:
    """Decide whether a link points inside the document, the course, or the web."""
    if target.startswith("#"):
        return LinkKind.ANCHOR
    if target.startswith("//") or SCHEME.match(target):
        return LinkKind.EXTERNAL
    return LinkKind.INTERNAL


def _is_closing_fence(line: str, markup: str) -> bool:
    stripped = line.lstrip(" \t>").rstrip()
    return len(stripped) >= len(markup) and set(stripped) == {markup[0]}


class _DocumentBuilder:
    """Folds the markdown-it token stream into blocks, links and images."""

    def __init__(self, lines: list[str]) -> None:
        self.lines = lines
        self.blocks: list[Block] = []
        self.links: list[CrossReference] = []
        self.images: list[Image] = []
        self._anchor_counts: dict[str, int] = {}
        self._ordered: list[bool] = []
        self._item_line: int | None = None
        self._pending: tuple[str, int, int] | None = None
        self._last_line = 1

    def _line(self, token: Token) -> int:
        if token.map:
            self._last_line = token.map[0] + 1
        return self._last_line

    def feed(self, tokens: list[Token]) -> None:
        for token in tokens:
            kind = token.type
            if kind in ("bullet_list_open", "ordered_list_open"):
                self._ordered.append(kind == "ordered_list_open")
            elif kind in ("bullet_list_close", "ordered_list_close"):
                self._ordered.pop()
            elif kind == "list_item_open":
                self._flush_item("")
                self._item_line = self._line(token)
            elif kind == "list_item_close":
                self._flush_item("")
            elif kind == "heading_open":
                self._pending = ("heading", int(token.tag[1:]), self._line(token))
            elif kind == "paragraph_open":
                self._pending = ("paragraph", 0, self._line(token))
            elif kind == "inline":
                self._add_inline(token)
            elif kind in ("fence", "code_block"):
                self._flush_item("")
                self._add_code(token)

    def _flush_item(self, text: str) -> None:
        if self._item_line is not None:
            ordered = self._ordered[-1] if self._ordered else False
            self.blocks.append(ListItem(text=text, ordered=ordered, line=self._item_line))
            self._item_line = None

    def _add_inline(self, token: Token) -> None:
        line = self._line(token)
        pending, self._pending = self._pending, None
        text = " ".join(part.strip() for part in token.content.splitlines())
        if pending is not None and pending[0] == "heading":
            self._add_heading(pending[1], _plain_text(token.children or []), pending[2])
        elif self._item_line is not None:
            self._flush_item(text)
        elif pending is not None:
            self.blocks.append(Paragraph(text=text, line=pending[2]))
        self._scan_inline(token.children or [], line)

    def _add_heading(self, level: int, text: str, line: int) -> None:
        base = _anchor_slug(text)
        seen = self._anchor_counts.get(base, 0)
        self._anchor_counts[base] = seen + 1
        anchor = base if seen == 0 else f"{base}-{seen}"
        self.blocks.append(Heading(level=level, text=text.strip(), anchor=anchor, line=line))

    def _add_code(self, token: Token) -> None:
        start, end = token.map or (self._last_line - 1, self._last_line)
        code = token.content[:-1] if token.content.endswith("\n") else token.content
        if token.type == "code_block":
            self.blocks.append(CodeSample(language="", code=code, line=start + 1))
            return
        info = token.info.strip()
        closed = end - start >= 2 and _is_closing_fence(self.lines[end - 1], token.markup)
        if not closed:
            logger.debug("Unterminated code fence opened at line %d", start + 1)
        self.blocks.append(
            CodeSample(
                language=info.split()[0].lower() if info else "",
                code=code,
                line=start + 1,
                unterminated=not closed,
            )
        )

    def _scan_inline(self, children: list[Token], line: int) -> None:
        """Record the links and images of one inline run, tracking line breaks."""
        link: tuple[str, int, list[str]] | None = None
        for child in children:
            if child.type in _LINE_BREAKS:
                line += 1
                if link is not None:
                    link[2].append(" ")
            elif child.type == "link_open":
                link = (str(child.attrGet("href") or ""), line, [])
            elif child.type == "link_close" and link is not None:
                target, start, parts = link
                self.links.append(
                    CrossReference(
                        text="".join(parts),
                        target=target,
                        kind=classify_target(target),
                        line=start,
                    )
                )
                link = None
            elif child.type == "image":
                self.images.append(
                    Image(alt=child.content, target=str(child.attrGet("src") or ""), line=line)
                )
            elif link is not None and child.type in _TEXT_TOKENS:
                link[2].append(child.content)


def parse_markdown(text: str, source_path: Path | None = None) -> LessonDocument:
    """Parse lesson Markdown into a LessonDocument.

    Args:
        text: Markdown source
        source_path: File the text came from, used to resolve relative links

    Returns:
        Parsed document
    """
    source = text.lstrip("\ufeff").replace("\r\n", "\n").replace("\r", "\n")
    builder = _DocumentBuilder(source.split("\n"))
    builder.feed(_markdown.parse(source))

    document = LessonDocument(
        source_path=source_path,
        blocks=builder.blocks,
        links=builder.links,
        images=builder.images,
    )
    logger.debug(
        "Parsed %s: %d blocks, %d links, %d images",
        source_path or "<text>",
        len(document.blocks),
        len(document.links),
        len(document.images),
    )
    return document


def load_lesson(path: str | Path) -> LessonDocument:
    """Read and parse a lesson file.

    Args:
        path: Path to a Markdown file

    Returns:
        Parsed document with source_path set to the resolved path

    Raises:
        LessonParseError: If the file cannot be read or is not UTF-8
    """
    lesson_path = Path(path).resolve()
    try:
        text = lesson_path.read_text(encoding="utf-8-sig")
    except FileNotFoundError:
        raise LessonParseError("Lesson file not found", path=lesson_path)
    except (OSError, UnicodeDecodeError) as e:
        raise LessonParseError(f"Cannot read lesson: {e}", path=lesson_path)
    return parse_markdown(text, source_path=lesson_path)
