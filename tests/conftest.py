"""Shared pytest fixtures for Folio tests.

Fixtures are organized by category:
- Path fixtures: Fixture collections on disk
- Content fixtures: Source text for parser tests
- Configuration fixtures: Test configs for various scenarios
"""

from pathlib import Path
from typing import Any

import pytest

from tests.fixtures import BROKEN_CONTENT_PATH, SAMPLE_CONTENT_PATH

# =============================================================================
# Path Fixtures
# =============================================================================


@pytest.fixture
def sample_content_dir() -> Path:
    """Return the directory holding the shipped sample posts."""
    return SAMPLE_CONTENT_PATH


@pytest.fixture
def broken_content_dir() -> Path:
    """Return the fixture collection that breaks every rule."""
    return BROKEN_CONTENT_PATH


# =============================================================================
# Content Fixtures
# =============================================================================


@pytest.fixture
def single_post() -> str:
    """Return the source of one well-formed post."""
    return """---
id: 7
title: Testing With Pytest
summary: Fixtures, parametrization and plugins.
date: May 1, 2024
category: Testing
readTime: 5 min read
image: images/pytest.png
slug: testing-with-pytest
---

Pytest discovers tests by name.

```python
def test_answer():
    assert 42 == 42
```
"""


@pytest.fixture
def two_posts(single_post: str) -> str:
    """Return the source of two posts sharing one file."""
    second = """---
id: 8
title: Typing Python
summary: Gradual typing in practice.
date: May 8, 2024
category: Python
readTime: 6 min read
image: images/typing.png
slug: typing-python
---

Annotations are optional.
"""
    return f"{single_post}---8<---\n{second}"


@pytest.fixture
def write_content(tmp_path: Path):
    """Return a helper that writes a content file under tmp_path/content."""
    content_dir = tmp_path / "content"
    content_dir.mkdir()

    def _write(name: str, text: str) -> Path:
        path = content_dir / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
        return path

    return _write


# =============================================================================
# Configuration Fixtures
# =============================================================================


@pytest.fixture
def minimal_config() -> dict[str, Any]:
    """Return a minimal valid Folio configuration."""
    return {
        "content": {
            "paths": ["content"],
        }
    }


@pytest.fixture
def full_config() -> dict[str, Any]:
    """Return a complete Folio configuration with all options."""
    return {
        "content": {
            "paths": ["posts", "drafts"],
            "patterns": ["*.md"],
        },
        "format": {
            "metadata_marker": "+++",
            "document_separator": "<!-- next -->",
        },
        "checks": {
            "required_fields": ["id", "title", "slug"],
            "slug_pattern": "^[a-z0-9-]+$",
            "date_formats": ["%Y-%m-%d"],
            "assets_dir": "public",
            "read_time_tolerance": 2,
            "words_per_minute": 250,
            "disabled": ["unknown-fields"],
            "severity": {"date-format": "error"},
        },
        "report": {
            "path": "reports/content.md",
        },
        "ci": {
            "fail_on_warning": True,
            "json_output": False,
        },
    }
