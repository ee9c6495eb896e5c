"""
Lesson document models.

A lesson is parsed once into a LessonDocument: an ordered sequence of
blocks (headings, paragraphs, code samples, list items) together with the
links and images found in its prose. Documents are read-only after parsing.
"""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, computed_field

from coursekit.models.base import BlockType, LinkKind


class Heading(BaseModel):
    """ATX heading.

    Attributes:
        level: Heading level, 1 to 6
        text: Heading text without the leading hashes
        anchor: GitHub-style anchor slug, unique within the document
        line: 1-based source line
    """

    block_type: Literal[BlockType.HEADING] = BlockType.HEADING
    level: int = Field(..., ge=1, le=6, description="Heading level")
    text: str = Field(..., description="Heading text")
    anchor: str = Field(default="", description="Anchor slug")
    line: int = Field(..., ge=1, description="Source line")


class Paragraph(BaseModel):
    """Run of consecutive prose lines."""

    block_type: Literal[BlockType.PARAGRAPH] = BlockType.PARAGRAPH
    text: str
    line: int = Field(..., ge=1)


class ListItem(BaseModel):
    """Bulleted or numbered list item."""

    block_type: Literal[BlockType.LIST_ITEM] = BlockType.LIST_ITEM
    text: str
    ordered: bool = False
    line: int = Field(..., ge=1)


class CodeSample(BaseModel):
    """Fenced code block.

    The code is inert: it illustrates API usage and is never executed.

    Attributes:
        language: First word of the fence info string, lowercased ("" if absent)
        code: Block contents without the fences
        line: 1-based line of the opening fence
        unterminated: True when the file ended before a closing fence
    """

    block_type: Literal[BlockType.CODE] = BlockType.CODE
    language: str = Field(default="", description="Declared language tag")
    code: str = Field(default="", description="Block contents")
    line: int = Field(..., ge=1, description="Line of the opening fence")
    unterminated: bool = Field(default=False, description="Missing closing fence")

    @property
    def first_code_line(self) -> int:
        """Source line of the first line inside the fences."""
        return self.line + 1


class CrossReference(BaseModel):
    """Link found in lesson prose.

    Attributes:
        text: Link text
        target: Raw link target as written
        kind: Internal path, same-document anchor or external URL
        line: 1-based source line
    """

    text: str
    target: str
    kind: LinkKind
    line: int = Field(..., ge=1)

    @property
    def path_part(self) -> str:
        """Target with any fragment and query removed."""
        return self.target.split("#", 1)[0].split("?", 1)[0]

    @property
    def fragment(self) -> str:
        """Fragment of the target, without the leading '#'."""
        return self.target.split("#", 1)[1] if "#" in self.target else ""


class Image(BaseModel):
    """Image reference found in lesson prose."""

    alt: str
    target: str
    line: int = Field(..., ge=1)

    @property
    def is_remote(self) -> bool:
        """True if the image is referenced by absolute URL."""
        return "://" in self.target


Block = Heading | Paragraph | CodeSample | ListItem


class LessonDocument(BaseModel):
    """A parsed lesson.

    Attributes:
        source_path: File the lesson was read from, if any
        blocks: Blocks in document order
        links: Links in document order
        images: Images in document order
        qualified_id: Course-relative id, set when the short id is ambiguous
    """

    source_path: Path | None = Field(default=None, description="Lesson file")
    blocks: list[Block] = Field(default_factory=list)
    links: list[CrossReference] = Field(default_factory=list)
    images: list[Image] = Field(default_factory=list)
    qualified_id: str | None = Field(default=None, description="Course-relative lesson id")

    @computed_field
    @property
    def lesson_id(self) -> str:
        """Name of the directory holding the lesson, or the file stem."""
        if self.qualified_id:
            return self.qualified_id
        if self.source_path is None:
            return "untitled"
        if self.source_path.stem.lower() == "readme" and self.source_path.parent.name:
            return self.source_path.parent.name
        return self.source_path.stem

    @computed_field
    @property
    def title(self) -> str:
        """Text of the first level-1 heading."""
        for heading in self.headings:
            if heading.level == 1:
                return heading.text
        return self.lesson_id

    @property
    def headings(self) -> list[Heading]:
        return [b for b in self.blocks if isinstance(b, Heading)]

    @property
    def code_samples(self) -> list[CodeSample]:
        return [b for b in self.blocks if isinstance(b, CodeSample)]

    @property
    def internal_links(self) -> list[CrossReference]:
        return [link for link in self.links if link.kind == LinkKind.INTERNAL]

    @property
    def external_links(self) -> list[CrossReference]:
        return [link for link in self.links if link.kind == LinkKind.EXTERNAL]

    @property
    def anchor_links(self) -> list[CrossReference]:
        return [link for link in self.links if link.kind == LinkKind.ANCHOR]

    @property
    def anchors(self) -> set[str]:
        """Anchor slugs of every heading."""
        return {h.anchor for h in self.headings}

    @property
    def base_dir(self) -> Path:
        """Directory relative links are resolved against."""
        if self.source_path is None:
            return Path.cwd()
        return self.source_path.parent
