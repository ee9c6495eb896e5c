"""Unit tests for coursekit.models.document."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from coursekit.models import (
    BlockType,
    CodeSample,
    CrossReference,
    Heading,
    Image,
    LessonDocument,
    LinkKind,
    Paragraph,
)


class TestHeading:
    """Tests for the Heading model."""

    def test_block_type(self):
        heading = Heading(level=2, text="Section", anchor="section", line=3)
        assert heading.block_type == BlockType.HEADING

    @pytest.mark.parametrize("level", [0, 7])
    def test_level_out_of_range(self, level):
        with pytest.raises(ValidationError):
            Heading(level=level, text="x", line=1)

    def test_line_is_one_based(self):
        with pytest.raises(ValidationError):
            Heading(level=1, text="x", line=0)


class TestCrossReference:
    """Tests for link targets."""

    def test_plain_path(self):
        link = CrossReference(text="a", target="../lesson5/README.md", kind=LinkKind.INTERNAL, line=1)
        assert link.path_part == "../lesson5/README.md"
        assert link.fragment == ""

    def test_query_and_fragment(self):
        link = CrossReference(text="a", target="page.md?x=1#part", kind=LinkKind.INTERNAL, line=1)
        assert link.path_part == "page.md"
        assert link.fragment == "part"

    def test_anchor_only(self):
        link = CrossReference(text="a", target="#top", kind=LinkKind.ANCHOR, line=1)
        assert link.path_part == ""
        assert link.fragment == "top"


class TestImage:
    def test_local_image(self):
        assert not Image(alt="x", target="images/a.svg", line=1).is_remote

    def test_remote_image(self):
        assert Image(alt="x", target="https://example.com/a.png", line=1).is_remote


class TestLessonDocument:
    """Tests for LessonDocument accessors."""

    @pytest.fixture
    def document(self) -> LessonDocument:
        return LessonDocument(
            source_path=Path("/course/unit2/lesson4/README.md"),
            blocks=[
                Heading(level=1, text="Map-Reduce", anchor="map-reduce", line=1),
                Paragraph(text="Intro", line=3),
                CodeSample(language="python", code="x = 1", line=5),
                Heading(level=2, text="Exercise", anchor="exercise", line=9),
            ],
            links=[
                CrossReference(text="prev", target="../lesson3/README.md", kind=LinkKind.INTERNAL, line=11),
                CrossReference(text="docs", target="https://ravendb.net/docs", kind=LinkKind.EXTERNAL, line=12),
                CrossReference(text="up", target="#map-reduce", kind=LinkKind.ANCHOR, line=13),
            ],
        )

    def test_lesson_id_from_directory(self, document):
        assert document.lesson_id == "lesson4"

    def test_lesson_id_from_file_stem(self):
        doc = LessonDocument(source_path=Path("/course/intro.md"))
        assert doc.lesson_id == "intro"

    def test_lesson_id_without_path(self):
        assert LessonDocument().lesson_id == "untitled"

    def test_qualified_id_wins(self, document):
        qualified = document.model_copy(update={"qualified_id": "unit2/lesson4"})
        assert qualified.lesson_id == "unit2/lesson4"
        assert qualified.model_dump()["lesson_id"] == "unit2/lesson4"

    def test_title(self, document):
        assert document.title == "Map-Reduce"

    def test_block_views(self, document):
        assert [h.text for h in document.headings] == ["Map-Reduce", "Exercise"]
        assert [s.code for s in document.code_samples] == ["x = 1"]
        assert document.anchors == {"map-reduce", "exercise"}

    def test_link_views(self, document):
        assert [l.text for l in document.internal_links] == ["prev"]
        assert [l.text for l in document.external_links] == ["docs"]
        assert [l.text for l in document.anchor_links] == ["up"]

    def test_base_dir(self, document):
        assert document.base_dir == Path("/course/unit2/lesson4")

    def test_serializes_computed_fields(self, document):
        data = document.model_dump(mode="json")
        assert data["lesson_id"] == "lesson4"
        assert data["title"] == "Map-Reduce"
        assert data["blocks"][2]["block_type"] == "code"
