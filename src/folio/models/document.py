"""Content entities.

This module contains the entities loaded from content files:
- Document: A single blog post (metadata header plus Markdown body)
- Collection: Ordered set of documents with lookup helpers
- LoadError: Non-fatal failure to load one content file
"""

import re
from collections.abc import Iterator
from dataclasses import dataclass, field
import datetime as dt
from pathlib import Path

# Header keys as they appear on disk, in canonical order
KNOWN_FIELDS: tuple[str, ...] = (
    "id",
    "title",
    "summary",
    "date",
    "category",
    "readTime",
    "image",
    "slug",
)

# On-disk key -> Document attribute
FIELD_ATTRIBUTES: dict[str, str] = {
    "id": "raw_id",
    "title": "title",
    "summary": "summary",
    "date": "date",
    "category": "category",
    "readTime": "read_time",
    "image": "image",
    "slug": "slug",
}

DEFAULT_DATE_FORMATS: tuple[str, ...] = (
    "%B %d, %Y",
    "%b %d, %Y",
    "%Y-%m-%d",
    "%d %B %Y",
)

_INTEGER_RE = re.compile(r"^[0-9]+$")


def parse_id(text: str) -> int | None:
    """Convert an id header value to an integer.

    Args:
        text: Raw header text

    Returns:
        Integer id, or None if the text is not a base-10 integer
    """
    text = text.strip()
    if not _INTEGER_RE.match(text):
        return None
    return int(text)


@dataclass(frozen=True)
class Document:
    """A single blog post.

    Attributes:
        id: Numeric id (None when the header value is not an integer)
        title: Post title
        summary: Short free-text summary
        date: Human-readable publication date, kept verbatim
        category: Taxonomy label
        read_time: Estimated reading duration, free text (e.g. "8 min read")
        image: Relative resource path of the cover image
        slug: URL-safe unique identifier
        body: Markdown body text
        raw_id: The id header exactly as written
        source: File the document was loaded from
        line: 1-based line in the source where the document starts
        body_line: 1-based line in the source where the body starts
        extra: Header keys outside KNOWN_FIELDS, in file order (compared for
            equality but left out of the hash)

    Missing header fields are empty strings so that checks can report them.
    """

    id: int | None
    title: str = ""
    summary: str = ""
    date: str = ""
    category: str = ""
    read_time: str = ""
    image: str = ""
    slug: str = ""
    body: str = ""
    raw_id: str = ""
    source: Path | None = None
    line: int = 1
    body_line: int | None = None
    extra: dict[str, str] = field(default_factory=dict, hash=False)

    @classmethod
    def from_metadata(
        cls,
        metadata: dict[str, str],
        body: str = "",
        source: Path | None = None,
        line: int = 1,
        body_line: int | None = None,
    ) -> "Document":
        """Build a document from a parsed metadata header.

        Args:
            metadata: Header key/value pairs using on-disk key names
            body: Markdown body
            source: Originating file
            line: Line where the document starts
            body_line: Line where the body starts

        Returns:
            Document instance
        """
        values = {
            attribute: metadata.get(key, "")
            for key, attribute in FIELD_ATTRIBUTES.items()
        }
        extra = {k: v for k, v in metadata.items() if k not in FIELD_ATTRIBUTES}

        return cls(
            id=parse_id(values["raw_id"]),
            body=body,
            source=source,
            line=line,
            body_line=body_line,
            extra=extra,
            **values,
        )

    def metadata(self) -> dict[str, str]:
        """Return the header as written, using on-disk key names."""
        header = {key: getattr(self, attribute) for key, attribute in FIELD_ATTRIBUTES.items()}
        header.update(self.extra)
        return header

    def parsed_date(
        self,
        formats: tuple[str, ...] | list[str] = DEFAULT_DATE_FORMATS,
    ) -> dt.date | None:
        """Parse the date text with the first matching format.

        Returns:
            Calendar date, or None if no format matches
        """
        text = self.date.strip()
        for fmt in formats:
            try:
                return dt.datetime.strptime(text, fmt).date()
            except ValueError:
                continue
        return None

    @property
    def location(self) -> str:
        """Human-readable location, e.g. ``posts.md:12``."""
        if self.source is None:
            return f"<string>:{self.line}"
        return f"{self.source}:{self.line}"

    def to_dict(self, include_body: bool = False) -> dict[str, object]:
        """Convert to dictionary for serialization."""
        data: dict[str, object] = {
            "id": self.id,
            "title": self.title,
            "summary": self.summary,
            "date": self.date,
            "category": self.category,
            "readTime": self.read_time,
            "image": self.image,
            "slug": self.slug,
            "source": str(self.source) if self.source else None,
            "line": self.line,
        }
        if self.extra:
            data["extra"] = dict(self.extra)
        if include_body:
            data["body"] = self.body
        return data


@dataclass
class LoadError:
    """Non-fatal failure to load a content file.

    Attributes:
        source: File that failed to load
        message: Error description
        line: 1-based line of the problem (if known)
    """

    source: Path
    message: str
    line: int | None = None

    def to_dict(self) -> dict[str, object]:
        """Convert to dictionary for serialization."""
        return {
            "source": str(self.source),
            "message": self.message,
            "line": self.line,
        }


@dataclass
class Collection:
    """Ordered collection of documents.

    Lookups on duplicated keys return the first document in collection order;
    uniqueness is reported by checks, never enforced here.

    Attributes:
        documents: Documents in load order
        files: Source files that were read (including ones that failed)
        load_errors: Files that could not be parsed
    """

    documents: list[Document] = field(default_factory=list)
    files: list[Path] = field(default_factory=list)
    load_errors: list[LoadError] = field(default_factory=list)

    def __iter__(self) -> Iterator[Document]:
        return iter(self.documents)

    def __len__(self) -> int:
        return len(self.documents)

    def by_slug(self, slug: str) -> Document | None:
        """Find a document by slug."""
        for document in self.documents:
            if document.slug == slug:
                return document
        return None

    def by_id(self, doc_id: int) -> Document | None:
        """Find a document by numeric id."""
        for document in self.documents:
            if document.id == doc_id:
                return document
        return None

    def categories(self) -> list[str]:
        """Sorted distinct non-empty category labels."""
        return sorted({d.category for d in self.documents if d.category})

    def sources(self) -> list[Path]:
        """Distinct source files in load order."""
        seen: dict[Path, None] = {}
        for document in self.documents:
            if document.source is not None:
                seen.setdefault(document.source, None)
        return list(seen)

    def filter(self, category: str | None = None) -> "Collection":
        """Return a new collection restricted to a category (case-insensitive).

        Files read and load errors carry over, so a filtered collection still
        reports parse failures.
        """
        documents = list(self.documents)
        if category is not None:
            wanted = category.casefold()
            documents = [d for d in documents if d.category.casefold() == wanted]
        return Collection(documents, list(self.files), list(self.load_errors))
