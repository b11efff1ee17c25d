"""Folio content checks.

- base: Check interfaces (DocumentCheck, CollectionCheck)
- rules: Built-in rules (required fields, uniqueness, slug and fence checks, ...)
- registry: Rule registry that runs the enabled checks over a collection
"""

from folio.checks.base import Check, CollectionCheck, DocumentCheck
from folio.checks.registry import PARSE_RULE, CheckRegistry, default_registry

__all__ = [
    "Check",
    "DocumentCheck",
    "CollectionCheck",
    "CheckRegistry",
    "PARSE_RULE",
    "default_registry",
]
