"""Folio data models.

This module exports all core entities used throughout the application:
- Document: A single blog post
- Collection: Ordered set of documents
- LoadError: A content file that failed to parse
- Issue: A problem found by a check
- Severity: Error or warning
- ValidationReport: Aggregated issues for a collection
"""

from folio.models.document import (
    DEFAULT_DATE_FORMATS,
    KNOWN_FIELDS,
    Collection,
    Document,
    LoadError,
)
from folio.models.report import Issue, Severity, ValidationReport

__all__ = [
    "Document",
    "Collection",
    "LoadError",
    "Issue",
    "Severity",
    "ValidationReport",
    "KNOWN_FIELDS",
    "DEFAULT_DATE_FORMATS",
]
