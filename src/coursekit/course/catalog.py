"""
Course Catalog.

A course is a directory tree of lessons, one README.md per lesson
directory (lesson1/, lesson2/, ...), optionally grouped into units
(unit1/, unit2/, ...). Lessons are ordered by path with numbers compared
numerically, which also defines previous/next navigation.

A lesson is identified by its directory name. When two units both hold a
lesson of that name, each of them is identified by its path relative to
the course root instead, e.g. unit2/lesson1.
"""

import logging
import re
from collections import Counter
from collections.abc import Iterator
from pathlib import Path

from coursekit.errors import LessonNotFoundError
from coursekit.models.document import LessonDocument
from coursekit.parsing.markdown import load_lesson

logger = logging.getLogger(__name__)

DEFAULT_PATTERN = "**/lesson*/README.md"
NUMBER = re.compile(r"(\d+)")


def bundled_course_root() -> Path:
    """Directory of the course shipped with the package."""
    return Path(__file__).resolve().parent.parent / "content"


def lesson_sort_key(path: Path) -> tuple[tuple[str | int, ...], ...]:
    """Natural sort key: path parts compared in order, digit runs as numbers.

    unit1/lesson2 sorts before unit1/lesson10, which sorts before unit2/lesson1.
    """
    return tuple(
        tuple(int(chunk) if chunk.isdigit() else chunk.casefold() for chunk in NUMBER.split(part))
        for part in path.parts
    )


def _qualified_id(root: Path, lesson: LessonDocument) -> str:
    path = lesson.source_path
    if path is None:
        return lesson.lesson_id
    relative = path.relative_to(root) if path.is_relative_to(root) else path
    if relative.stem.lower() == "readme" and len(relative.parts) > 1:
        return relative.parent.as_posix()
    return relative.with_suffix("").as_posix()


class Course:
    """Ordered collection of parsed lessons.

    Usage:
        course = Course.load()              # bundled course
        lesson = course.get("lesson4")
        upcoming = course.next("lesson4")
    """

    def __init__(self, root: Path, lessons: list[LessonDocument]) -> None:
        self.root = root
        counts = Counter(lesson.lesson_id for lesson in lessons)
        self._lessons: list[LessonDocument] = []
        for lesson in lessons:
            if counts[lesson.lesson_id] > 1:
                qualified = _qualified_id(root, lesson)
                logger.info("Lesson id %s is ambiguous, using %s", lesson.lesson_id, qualified)
                lesson = lesson.model_copy(update={"qualified_id": qualified})
            self._lessons.append(lesson)
        self._by_id = {lesson.lesson_id: lesson for lesson in self._lessons}

    @classmethod
    def load(cls, root: str | Path | None = None, pattern: str = DEFAULT_PATTERN) -> "Course":
        """Discover and parse every lesson under root.

        Args:
            root: Course directory (bundled course if omitted)
            pattern: Glob relative to root that matches lesson files

        Returns:
            Course with lessons in order

        Raises:
            FileNotFoundError: If root is not a directory
            LessonParseError: If a lesson cannot be read
        """
        course_root = Path(root).expanduser().resolve() if root else bundled_course_root()
        if not course_root.is_dir():
            raise FileNotFoundError(f"Course directory not found: {course_root}")

        paths = sorted(
            (p for p in course_root.glob(pattern) if p.is_file()),
            key=lesson_sort_key,
        )
        lessons = [load_lesson(path) for path in paths]
        logger.info("Loaded %d lessons from %s", len(lessons), course_root)
        return cls(course_root, lessons)

    def __iter__(self) -> Iterator[LessonDocument]:
        return iter(self._lessons)

    def __len__(self) -> int:
        return len(self._lessons)

    def __contains__(self, lesson_id: object) -> bool:
        return lesson_id in self._by_id

    @property
    def lesson_ids(self) -> list[str]:
        return [lesson.lesson_id for lesson in self._lessons]

    def get(self, lesson_id: str) -> LessonDocument:
        """Look up a lesson.

        Raises:
            LessonNotFoundError: If the course has no such lesson
        """
        try:
            return self._by_id[lesson_id]
        except KeyError:
            raise LessonNotFoundError(lesson_id, self.lesson_ids) from None

    def _position(self, lesson_id: str) -> int:
        lesson = self.get(lesson_id)
        return next(i for i, item in enumerate(self._lessons) if item is lesson)

    def previous(self, lesson_id: str) -> LessonDocument | None:
        """Lesson before lesson_id, or None for the first lesson."""
        position = self._position(lesson_id)
        return self._lessons[position - 1] if position > 0 else None

    def next(self, lesson_id: str) -> LessonDocument | None:
        """Lesson after lesson_id, or None for the last lesson."""
        position = self._position(lesson_id)
        return self._lessons[position + 1] if position + 1 < len(self._lessons) else None
