"""Validation result entities.

- Severity: How serious an issue is
- Issue: A single problem found in the content
- ValidationReport: Aggregated issues for a collection
"""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from pathlib import Path
from typing import Any


class Severity(Enum):
    """Severity of a reported issue."""

    ERROR = "error"
    WARNING = "warning"

    @classmethod
    def parse(cls, value: "str | Severity") -> "Severity":
        """Coerce a config string to a Severity.

        Raises:
            ValueError: If the value is not a known severity
        """
        if isinstance(value, Severity):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            valid = [s.value for s in cls]
            raise ValueError(f"Invalid severity: {value}. Valid: {valid}") from None


@dataclass
class Issue:
    """A problem found in the content.

    Attributes:
        rule: Rule id of the check that raised it (e.g. "unique-slug")
        severity: Error or warning
        message: Human-readable description
        source: File the problem was found in (if known)
        line: 1-based line in the source (if known)
        slug: Slug of the affected document (if any)
        doc_id: Raw id text of the affected document (if any)
    """

    rule: str
    severity: Severity
    message: str
    source: Path | None = None
    line: int | None = None
    slug: str | None = None
    doc_id: str | None = None

    @property
    def location(self) -> str:
        """Location string such as ``content/posts.md:3``."""
        if self.source is None:
            return "<unknown>"
        if self.line is None:
            return str(self.source)
        return f"{self.source}:{self.line}"

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "rule": self.rule,
            "severity": self.severity.value,
            "message": self.message,
            "source": str(self.source) if self.source else None,
            "line": self.line,
            "slug": self.slug,
            "id": self.doc_id,
        }


@dataclass
class ValidationReport:
    """Issues found while checking a collection.

    Attributes:
        issues: Issues in the order checks produced them
        documents_checked: Number of documents examined
        files_checked: Number of source files loaded (including failures)
        rules: Rule ids that were run
        timestamp: When the check ran (UTC)
    """

    issues: list[Issue] = field(default_factory=list)
    documents_checked: int = 0
    files_checked: int = 0
    rules: list[str] = field(default_factory=list)
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))

    def add(self, issue: Issue) -> None:
        """Append an issue."""
        self.issues.append(issue)

    @property
    def errors(self) -> list[Issue]:
        """Issues with error severity."""
        return [i for i in self.issues if i.severity == Severity.ERROR]

    @property
    def warnings(self) -> list[Issue]:
        """Issues with warning severity."""
        return [i for i in self.issues if i.severity == Severity.WARNING]

    @property
    def success(self) -> bool:
        """True when no errors were found."""
        return not self.errors

    def by_rule(self, rule: str) -> list[Issue]:
        """Issues raised by a single rule."""
        return [i for i in self.issues if i.rule == rule]

    def exit_code(self, fail_on_warning: bool = False) -> int:
        """Process exit code for this report.

        Returns:
            0 if clean, 1 on errors (or warnings with fail_on_warning),
            2 if only warnings were found
        """
        if self.errors:
            return 1
        if self.warnings:
            return 1 if fail_on_warning else 2
        return 0

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "success": self.success,
            "timestamp": self.timestamp.isoformat(),
            "documents_checked": self.documents_checked,
            "files_checked": self.files_checked,
            "rules": list(self.rules),
            "error_count": len(self.errors),
            "warning_count": len(self.warnings),
            "issues": [issue.to_dict() for issue in self.issues],
        }
