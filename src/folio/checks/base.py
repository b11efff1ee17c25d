"""Abstract base classes for content checks.

Every check has a stable rule id, a default severity, and a one-line
description. Document checks look at one document at a time; collection
checks see the whole collection (uniqueness rules). Checks never raise for
content problems: problems are yielded as Issues.
"""

from abc import ABC, abstractmethod
from collections.abc import Iterator
from pathlib import Path
from typing import ClassVar

from folio.config import ChecksConfig
from folio.models.document import Collection, Document
from folio.models.report import Issue, Severity


class Check(ABC):
    """Interface for pluggable content checks.

    Attributes:
        rule: Rule id (e.g. "unique-slug")
        description: One-line description shown by ``folio rules``
        default_severity: Severity when not overridden in config
    """

    rule: ClassVar[str]
    description: ClassVar[str]
    default_severity: ClassVar[Severity] = Severity.ERROR

    def __init__(
        self,
        config: ChecksConfig | None = None,
        severity: Severity | None = None,
        base_dir: Path | None = None,
    ) -> None:
        """Initialize the check.

        Args:
            config: Check settings (defaults when None)
            severity: Severity override
            base_dir: Directory config-relative paths resolve against
        """
        self.config = config or ChecksConfig()
        self.severity = severity or self.default_severity
        self.base_dir = base_dir or Path.cwd()

    @abstractmethod
    def run(self, collection: Collection) -> Iterator[Issue]:
        """Yield issues found in the collection."""

    def issue(self, document: Document, message: str, line: int | None = None) -> Issue:
        """Build an issue for a document at this check's severity."""
        return Issue(
            rule=self.rule,
            severity=self.severity,
            message=message,
            source=document.source,
            line=line if line is not None else document.line,
            slug=document.slug or None,
            doc_id=document.raw_id or None,
        )


class DocumentCheck(Check):
    """Check that examines documents independently."""

    def run(self, collection: Collection) -> Iterator[Issue]:
        for document in collection:
            yield from self.check_document(document)

    @abstractmethod
    def check_document(self, document: Document) -> Iterator[Issue]:
        """Yield issues for a single document."""


class CollectionCheck(Check):
    """Check that needs the whole collection."""

    def run(self, collection: Collection) -> Iterator[Issue]:
        yield from self.check_collection(collection)

    @abstractmethod
    def check_collection(self, collection: Collection) -> Iterator[Issue]:
        """Yield issues for the collection."""
