"""Check registry for pluggable content checks.

The registry maps rule ids to check classes. Which rules run, and at what
severity, is configured in YAML, not hardcoded:

    checks:
      disabled: [unknown-fields]
      severity:
        date-format: error
"""

import logging
from pathlib import Path

from folio.checks.base import Check
from folio.checks.rules import BUILTIN_CHECKS
from folio.config import ChecksConfig
from folio.models.document import Collection
from folio.models.report import Issue, Severity, ValidationReport
from folio.utils.logging import get_logger

logger = get_logger(__name__)

# Emitted by the registry for files the loader could not parse
PARSE_RULE = "parse"


class CheckRegistry:
    """Registry of available checks by rule id.

    Adding a new check:
        1. Subclass DocumentCheck or CollectionCheck
        2. Give it a unique ``rule`` id and a ``description``
        3. Register it here (or on a custom registry)
    """

    def __init__(self) -> None:
        """Initialize empty registry."""
        self._checks: dict[str, type[Check]] = {}

    # =========================================================================
    # Registration
    # =========================================================================

    def register(self, check_class: type[Check]) -> None:
        """Register a check class.

        Raises:
            ValueError: If the rule id is already registered or reserved
        """
        rule = check_class.rule
        if rule == PARSE_RULE or rule in self._checks:
            raise ValueError(f"Rule already registered: {rule}")
        self._checks[rule] = check_class

    # =========================================================================
    # Retrieval
    # =========================================================================

    def get(self, rule: str) -> type[Check]:
        """Get a check class by rule id.

        Raises:
            ValueError: If the rule is not registered
        """
        if rule not in self._checks:
            raise ValueError(f"Unknown rule: {rule}. Available: {self.list_rules()}")
        return self._checks[rule]

    def list_rules(self) -> list[str]:
        """Registered rule ids in registration order."""
        return list(self._checks)

    def describe(self) -> list[dict[str, str]]:
        """Rule metadata for listing."""
        rules = [
            {
                "rule": PARSE_RULE,
                "severity": Severity.ERROR.value,
                "description": "Content files follow the metadata/body file format",
            }
        ]
        for rule, check_class in self._checks.items():
            rules.append(
                {
                    "rule": rule,
                    "severity": check_class.default_severity.value,
                    "description": check_class.description,
                }
            )
        return rules

    # =========================================================================
    # Execution
    # =========================================================================

    def _validate_rule_ids(self, rules: list[str]) -> None:
        known = {PARSE_RULE, *self._checks}
        unknown = sorted(set(rules) - known)
        if unknown:
            raise ValueError(f"Unknown rule(s) in config: {unknown}. Available: {sorted(known)}")

    def create_checks(
        self,
        config: ChecksConfig | None = None,
        base_dir: Path | None = None,
        disabled: list[str] | None = None,
    ) -> list[Check]:
        """Instantiate the enabled checks.

        Args:
            config: Check settings
            base_dir: Directory config-relative paths resolve against
            disabled: Extra rule ids to skip (e.g. from the CLI)

        Returns:
            Check instances in registration order

        Raises:
            ValueError: If config names an unknown rule
        """
        config = config or ChecksConfig()
        skipped = set(config.disabled) | set(disabled or [])
        self._validate_rule_ids([*skipped, *config.severity])

        return [
            check_class(config, config.severity.get(rule), base_dir)
            for rule, check_class in self._checks.items()
            if rule not in skipped
        ]

    def run(
        self,
        collection: Collection,
        config: ChecksConfig | None = None,
        base_dir: Path | None = None,
        disabled: list[str] | None = None,
    ) -> ValidationReport:
        """Run the enabled checks over a collection.

        Load errors recorded on the collection become ``parse`` issues.

        Returns:
            Report with issues sorted by location
        """
        config = config or ChecksConfig()
        checks = self.create_checks(config, base_dir, disabled)
        skipped = set(config.disabled) | set(disabled or [])

        report = ValidationReport(
            documents_checked=len(collection),
            files_checked=len(collection.files),
            rules=[check.rule for check in checks],
        )

        if PARSE_RULE not in skipped:
            report.rules.insert(0, PARSE_RULE)
            severity = config.severity.get(PARSE_RULE, Severity.ERROR)
            for error in collection.load_errors:
                report.add(
                    Issue(
                        rule=PARSE_RULE,
                        severity=severity,
                        message=error.message,
                        source=error.source,
                        line=error.line,
                    )
                )

        for check in checks:
            found = list(check.run(collection))
            logger.debug("Rule %s: %d issue(s)", check.rule, len(found))
            for issue in found:
                report.add(issue)

        report.issues.sort(key=lambda i: (str(i.source or ""), i.line or 0))

        logger.structured(
            logging.INFO,
            f"Checked {report.documents_checked} document(s): "
            f"{len(report.errors)} error(s), {len(report.warnings)} warning(s)",
            documents=report.documents_checked,
            errors=len(report.errors),
            warnings=len(report.warnings),
        )
        return report


def default_registry() -> CheckRegistry:
    """Create a registry with all built-in checks."""
    registry = CheckRegistry()
    for check_class in BUILTIN_CHECKS:
        registry.register(check_class)
    return registry
