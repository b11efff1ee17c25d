"""Content file parser.

A content source holds one or more documents. Each document is a metadata
block followed by a Markdown body:

    ---
    id: 1
    title: React Performance Optimization
    slug: react-performance-optimization
    ---

    Body text with ```fenced``` samples...
    ---8<---
    ---
    id: 2
    ...

The metadata block is delimited by the metadata marker (``---``); documents
sharing a source are separated by a line holding only the document separator
(``---8<---``). Both markers are configurable.
"""

import logging
from dataclasses import dataclass
from pathlib import Path

from folio.config import (
    DEFAULT_DOCUMENT_SEPARATOR,
    DEFAULT_METADATA_MARKER,
    ContentConfig,
    FolioConfig,
    FormatConfig,
)
from folio.models.document import Collection, Document, LoadError

logger = logging.getLogger(__name__)


class ContentParseError(Exception):
    """Raised when a content source does not follow the file format."""

    def __init__(
        self,
        message: str,
        source: Path | None = None,
        line: int | None = None,
    ) -> None:
        self.message = message
        self.source = source
        self.line = line

        location = str(source) if source is not None else "<string>"
        if line is not None:
            location = f"{location}:{line}"
        super().__init__(f"{location}: {message}")


@dataclass
class Chunk:
    """Raw text of one document within a source.

    Attributes:
        text: Document text (metadata block and body)
        start_line: 1-based line in the source where the chunk begins
    """

    text: str
    start_line: int = 1


def normalize_text(text: str) -> str:
    """Strip a leading byte-order mark and normalise line endings."""
    if text.startswith("\ufeff"):
        text = text[1:]
    return text.replace("\r\n", "\n").replace("\r", "\n")


def split_documents(text: str, separator: str = DEFAULT_DOCUMENT_SEPARATOR) -> list[Chunk]:
    """Split a source into per-document chunks.

    Args:
        text: Source text
        separator: Document separator marker

    Returns:
        Non-blank chunks in source order
    """
    text = normalize_text(text)
    separator = separator.strip()

    chunks: list[Chunk] = []
    current: list[str] = []
    start = 1

    for number, line in enumerate(text.split("\n"), start=1):
        if line.strip() == separator:
            chunks.append(Chunk("\n".join(current), start))
            current = []
            start = number + 1
            continue
        current.append(line)

    chunks.append(Chunk("\n".join(current), start))

    return [chunk for chunk in chunks if chunk.text.strip()]


def _unquote(value: str) -> str:
    if len(value) >= 2 and value[0] == value[-1] and value[0] in {'"', "'"}:
        return value[1:-1]
    return value


def parse_metadata(
    lines: list[str],
    source: Path | None = None,
    start_line: int = 1,
) -> dict[str, str]:
    """Parse ``key: value`` metadata lines.

    The key is everything before the first colon; the value is the stripped
    remainder, unquoted when wrapped in matching quotes. Blank lines and
    ``#`` comments are skipped. On duplicate keys the last value wins.

    Args:
        lines: Lines between the metadata markers
        source: Originating file (for error messages)
        start_line: Source line number of the first entry in ``lines``

    Returns:
        Metadata in file order

    Raises:
        ContentParseError: If a line is not a ``key: value`` pair
    """
    metadata: dict[str, str] = {}

    for offset, line in enumerate(lines):
        stripped = line.strip()
        if not stripped or stripped.startswith("#"):
            continue

        line_number = start_line + offset
        key, sep, value = stripped.partition(":")
        key = key.strip()

        if not sep:
            raise ContentParseError(
                f"Expected 'key: value' in metadata block, got {stripped!r}",
                source,
                line_number,
            )
        if not key:
            raise ContentParseError("Metadata entry has an empty key", source, line_number)

        if key in metadata:
            logger.warning(
                "Duplicate metadata key %r at %s:%d (last value wins)",
                key,
                source or "<string>",
                line_number,
            )

        metadata[key] = _unquote(value.strip())

    return metadata


def parse_document(
    text: str,
    *,
    source: Path | None = None,
    start_line: int = 1,
    marker: str = DEFAULT_METADATA_MARKER,
) -> Document:
    """Parse a single document.

    Args:
        text: Document text (one chunk, no separators)
        source: Originating file
        start_line: Source line number of the first line of ``text``
        marker: Metadata block marker

    Returns:
        Parsed document

    Raises:
        ContentParseError: If the metadata block is missing or malformed
    """
    lines = normalize_text(text).split("\n")
    marker = marker.strip()

    index = 0
    while index < len(lines) and not lines[index].strip():
        index += 1

    if index == len(lines):
        raise ContentParseError("Empty document", source, start_line)

    if lines[index].strip() != marker:
        raise ContentParseError(
            f"Document must start with metadata marker {marker!r}",
            source,
            start_line + index,
        )

    opening = index
    closing = None
    for candidate in range(opening + 1, len(lines)):
        if lines[candidate].strip() == marker:
            closing = candidate
            break

    if closing is None:
        raise ContentParseError(
            f"Metadata block opened here is never closed with {marker!r}",
            source,
            start_line + opening,
        )

    metadata = parse_metadata(
        lines[opening + 1 : closing],
        source=source,
        start_line=start_line + opening + 1,
    )

    body_lines = lines[closing + 1 :]
    body_start = start_line + closing + 1
    if body_lines and not body_lines[0].strip():
        body_lines = body_lines[1:]
        body_start += 1
    body = "\n".join(body_lines).rstrip()

    return Document.from_metadata(
        metadata,
        body=body,
        source=source,
        line=start_line + opening,
        body_line=body_start,
    )


def parse_documents(
    text: str,
    *,
    source: Path | None = None,
    marker: str = DEFAULT_METADATA_MARKER,
    separator: str = DEFAULT_DOCUMENT_SEPARATOR,
) -> list[Document]:
    """Parse every document in a source.

    Returns:
        Documents in source order (empty for a blank source)

    Raises:
        ContentParseError: On the first malformed document
    """
    return [
        parse_document(chunk.text, source=source, start_line=chunk.start_line, marker=marker)
        for chunk in split_documents(text, separator)
    ]


def load_file(
    path: Path,
    *,
    marker: str = DEFAULT_METADATA_MARKER,
    separator: str = DEFAULT_DOCUMENT_SEPARATOR,
) -> list[Document]:
    """Read and parse a content file.

    Raises:
        OSError: If the file cannot be read
        ContentParseError: If the file is malformed or not valid UTF-8
    """
    try:
        text = path.read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        raise ContentParseError(f"File is not valid UTF-8: {e.reason}", path) from e

    return parse_documents(text, source=path, marker=marker, separator=separator)


def _is_hidden(path: Path, root: Path) -> bool:
    return any(part.startswith(".") for part in path.relative_to(root).parts)


def discover_files(paths: list[Path], patterns: list[str]) -> list[Path]:
    """Expand files and directories into a sorted list of content files.

    Directories are searched recursively for names matching any pattern,
    skipping hidden files and directories. Explicit file paths are always
    included.

    Raises:
        FileNotFoundError: If a path does not exist
    """
    found: set[Path] = set()

    for path in paths:
        if not path.exists():
            raise FileNotFoundError(f"Content path not found: {path}")

        if path.is_file():
            found.add(path)
            continue

        for pattern in patterns:
            for candidate in path.rglob(pattern):
                if candidate.is_file() and not _is_hidden(candidate, path):
                    found.add(candidate)

    return sorted(found)


class ContentLoader:
    """Loads content collections using the configured markers and patterns.

    Usage:
        loader = ContentLoader(config)
        collection = loader.load([Path("content")])
    """

    def __init__(self, config: FolioConfig | None = None) -> None:
        """Initialize the loader.

        Args:
            config: Folio configuration (defaults when None)
        """
        self.config = config or FolioConfig()

    def default_paths(self) -> list[Path]:
        """Content paths from config, resolved against the project root."""
        return [self.config.resolve(p) for p in self.config.content.paths]

    def load(self, paths: list[Path] | None = None) -> Collection:
        """Load every document under the given paths.

        Files that fail to parse are recorded as load errors; the remaining
        files still load.

        Args:
            paths: Files or directories (config paths when None or empty)

        Returns:
            Collection with documents, files read, and load errors

        Raises:
            FileNotFoundError: If a path does not exist
        """
        files = discover_files(paths or self.default_paths(), self.config.content.patterns)
        collection = Collection(files=files)

        for path in files:
            try:
                documents = load_file(
                    path,
                    marker=self.config.format.metadata_marker,
                    separator=self.config.format.document_separator,
                )
            except ContentParseError as e:
                # Reported as a parse issue by the check run
                logger.info("Failed to parse %s", e)
                collection.load_errors.append(LoadError(path, e.message, e.line))
                continue
            except OSError as e:
                logger.warning("Failed to read %s: %s", path, e)
                collection.load_errors.append(LoadError(path, str(e)))
                continue

            logger.debug("Loaded %d document(s) from %s", len(documents), path)
            collection.documents.extend(documents)

        logger.info(
            "Loaded %d document(s) from %d file(s)",
            len(collection.documents),
            len(files),
        )
        return collection


def load_collection(
    paths: Path | list[Path],
    patterns: list[str] | None = None,
    *,
    marker: str = DEFAULT_METADATA_MARKER,
    separator: str = DEFAULT_DOCUMENT_SEPARATOR,
) -> Collection:
    """Load a collection without a config object.

    Args:
        paths: A file or directory, or a list of them
        patterns: File name glob patterns for directories
        marker: Metadata block marker
        separator: Document separator marker

    Returns:
        Loaded collection
    """
    if isinstance(paths, Path):
        paths = [paths]

    config = FolioConfig(
        content=ContentConfig(patterns=patterns) if patterns else ContentConfig(),
        format=FormatConfig(metadata_marker=marker, document_separator=separator),
    )
    return ContentLoader(config).load(paths)
