"""Test fixtures for Folio.

Content Collections:
- content/broken: documents that break every rule, plus a file that fails to parse
- ../../content: the shipped sample posts (clean)
"""

from pathlib import Path

# Path to fixtures directory
FIXTURES_DIR = Path(__file__).parent

# Path to fixture collections
CONTENT_FIXTURES_DIR = FIXTURES_DIR / "content"

BROKEN_CONTENT_PATH = CONTENT_FIXTURES_DIR / "broken"

# Sample posts shipped at the repository root
SAMPLE_CONTENT_PATH = FIXTURES_DIR.parent.parent / "content"


def get_fixture_collection(name: str) -> Path:
    """Get path to a fixture collection.

    Raises:
        ValueError: If the collection doesn't exist
    """
    path = CONTENT_FIXTURES_DIR / name
    if not path.exists():
        raise ValueError(f"Fixture collection not found: {name}")
    return path
