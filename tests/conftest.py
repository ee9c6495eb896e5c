"""
coursekit Test Configuration and Fixtures

Fixture Categories:
- Paths: project root and the bundled course
- Course trees: small lesson directories written to tmp_path
- Environment: isolation from COURSEKIT_* variables and .env files
"""

from collections.abc import Callable
from pathlib import Path

import pytest

from coursekit.config import ENV_VAR_OVERRIDES, CONFIG_ENV_VAR, reset_config, reset_environment
from coursekit.course import bundled_course_root

# =============================================================================
# Path Fixtures
# =============================================================================


@pytest.fixture
def project_root() -> Path:
    """Return the project root directory."""
    return Path(__file__).parent.parent


@pytest.fixture
def bundled_root() -> Path:
    """Return the directory of the course shipped with the package."""
    return bundled_course_root()


# =============================================================================
# Course Tree Fixtures
# =============================================================================

LESSON_ONE = """\
# Lesson 1 - Getting started

Install the client first.

```bash
pip install ravendb
```

## Connecting

```python
from ravendb import DocumentStore

store = DocumentStore(urls=["http://localhost:8080"], database="Northwind")
store.initialize()
```

See [the documentation](https://ravendb.net/docs/article-page/6.0/python/start/getting-started).

**Next: [Lesson 2](../lesson2/README.md)**
"""

LESSON_TWO = """\
# Lesson 2 - Querying

![Query results](images/results.svg)

## Querying a collection

```python
with store.open_session() as session:
    orders = list(session.query_collection("Orders"))
```

Jump to [the query section](#querying-a-collection).

Previous: [Lesson 1](../lesson1/README.md#connecting)
"""


@pytest.fixture
def write_course(tmp_path: Path) -> Callable[[dict[str, str]], Path]:
    """Factory that writes {relative_path: content} under a course root.

    Usage:
        root = write_course({"lesson1/README.md": "# Title"})
    """

    def _write(files: dict[str, str]) -> Path:
        root = tmp_path / "course"
        for relative, content in files.items():
            path = root / relative
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content, encoding="utf-8")
        root.mkdir(parents=True, exist_ok=True)
        return root

    return _write


@pytest.fixture
def course_dir(write_course) -> Path:
    """A valid two-lesson course."""
    return write_course(
        {
            "lesson1/README.md": LESSON_ONE,
            "lesson2/README.md": LESSON_TWO,
            "lesson2/images/results.svg": "<svg xmlns='http://www.w3.org/2000/svg'/>",
        }
    )


# =============================================================================
# Environment Fixtures
# =============================================================================


@pytest.fixture
def clean_env(monkeypatch):
    """Isolate a test from COURSEKIT_* variables, .env files and cached config."""
    import coursekit.config.environment as env_module

    reset_config()
    reset_environment()
    for var in [CONFIG_ENV_VAR, *ENV_VAR_OVERRIDES]:
        monkeypatch.delenv(var, raising=False)
    # Prevent a developer's .env from leaking into tests
    monkeypatch.setattr(env_module, "_dotenv_loaded", True)

    yield

    reset_config()
    reset_environment()
