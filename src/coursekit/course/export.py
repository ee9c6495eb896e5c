"""
Code Sample Export.

Writes the listings of a lesson to individual files so a reader can copy
them into their own project.
"""

import logging
import re
from pathlib import Path

from coursekit.models.document import LessonDocument

logger = logging.getLogger(__name__)

EXTENSIONS = {
    "python": ".py",
    "py": ".py",
    "python3": ".py",
    "json": ".json",
    "yaml": ".yaml",
    "yml": ".yaml",
    "toml": ".toml",
    "bash": ".sh",
    "sh": ".sh",
    "shell": ".sh",
    "console": ".txt",
    "csharp": ".cs",
    "cs": ".cs",
    "c#": ".cs",
    "rql": ".rql",
    "sql": ".sql",
}


def sample_extension(language: str) -> str:
    """File extension for a code block language, '.txt' if unknown."""
    return EXTENSIONS.get(language.lower(), ".txt")


def export_samples(
    document: LessonDocument,
    output_dir: str | Path,
    languages: list[str] | None = None,
    create_dirs: bool = True,
) -> list[Path]:
    """Write each code sample of a lesson to its own file.

    Files are named <lesson_id>_sample<NN><ext>, numbered by position in
    the lesson (so numbering is stable when filtering by language). A
    qualified id such as unit2/lesson1 becomes unit2_lesson1.

    Args:
        document: Parsed lesson
        output_dir: Destination directory
        languages: Only export samples in these languages (all if None)
        create_dirs: Create output_dir if missing

    Returns:
        Paths written, in lesson order

    Raises:
        FileNotFoundError: If output_dir is missing and create_dirs is False
    """
    target = Path(output_dir)
    if not target.is_dir():
        if not create_dirs:
            raise FileNotFoundError(f"Output directory not found: {target}")
        target.mkdir(parents=True, exist_ok=True)

    prefix = re.sub(r"[^\w.-]", "_", document.lesson_id)
    wanted = {lang.lower() for lang in languages} if languages else None
    written: list[Path] = []
    for number, sample in enumerate(document.code_samples, start=1):
        if wanted is not None and sample.language not in wanted:
            continue
        path = target / f"{prefix}_sample{number:02d}{sample_extension(sample.language)}"
        code = sample.code if sample.code.endswith("\n") else sample.code + "\n"
        path.write_text(code, encoding="utf-8")
        written.append(path)

    logger.info("Exported %d samples from %s to %s", len(written), document.lesson_id, target)
    return written
