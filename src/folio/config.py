"""Folio configuration system.

Configuration is primarily YAML-based with minimal CLI overrides (paths, --json, --ci).
Supports environment variable substitution (${VAR}) in config files.

Configuration file discovery (in priority order):
1. CLI --config argument
2. ./.folio/config.yaml
3. ./folio.yaml
"""

import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from folio.models.document import DEFAULT_DATE_FORMATS, KNOWN_FIELDS
from folio.models.report import Severity

DEFAULT_METADATA_MARKER = "---"
DEFAULT_DOCUMENT_SEPARATOR = "---8<---"
DEFAULT_SLUG_PATTERN = r"^[a-z0-9]+(?:-[a-z0-9]+)*$"

# =============================================================================
# Configuration Dataclasses
# =============================================================================


@dataclass
class ContentConfig:
    """Where content lives.

    Attributes:
        paths: Files or directories to load (directories are walked recursively)
        patterns: Glob patterns matched against file names inside directories
    """

    paths: list[str] = field(default_factory=lambda: ["content"])
    patterns: list[str] = field(default_factory=lambda: ["*.md", "*.markdown", "*.txt"])

    def __post_init__(self) -> None:
        """Validate content configuration."""
        if not self.patterns:
            raise ValueError("At least one content pattern is required")


@dataclass
class FormatConfig:
    """File format markers.

    Attributes:
        metadata_marker: Line that opens and closes the metadata block
        document_separator: Line that separates concatenated documents
    """

    metadata_marker: str = DEFAULT_METADATA_MARKER
    document_separator: str = DEFAULT_DOCUMENT_SEPARATOR

    def __post_init__(self) -> None:
        """Validate format markers."""
        self.metadata_marker = self.metadata_marker.strip()
        self.document_separator = self.document_separator.strip()

        if not self.metadata_marker:
            raise ValueError("metadata_marker must not be empty")
        if not self.document_separator:
            raise ValueError("document_separator must not be empty")
        if self.metadata_marker == self.document_separator:
            raise ValueError(
                f"metadata_marker and document_separator must differ (both {self.metadata_marker!r})"
            )


@dataclass
class ChecksConfig:
    """Content check settings.

    Attributes:
        required_fields: Header fields that must be present and non-empty
        slug_pattern: Regex a slug must fully match
        date_formats: strptime formats accepted for the date field
        assets_dir: Directory image paths are resolved against (None skips the
            existence check)
        read_time_tolerance: Allowed difference in minutes between the stated
            and estimated read time (None skips the comparison)
        words_per_minute: Reading speed used for estimates
        disabled: Rule ids that are not run
        severity: Per-rule severity overrides
    """

    required_fields: list[str] = field(default_factory=lambda: list(KNOWN_FIELDS))
    slug_pattern: str = DEFAULT_SLUG_PATTERN
    date_formats: list[str] = field(default_factory=lambda: list(DEFAULT_DATE_FORMATS))
    assets_dir: str | None = None
    read_time_tolerance: int | None = None
    words_per_minute: int = 200
    disabled: list[str] = field(default_factory=list)
    severity: dict[str, Severity] = field(default_factory=dict)

    def __post_init__(self) -> None:
        """Validate check configuration."""
        unknown = [f for f in self.required_fields if f not in KNOWN_FIELDS]
        if unknown:
            raise ValueError(f"Unknown required fields: {unknown}. Valid: {list(KNOWN_FIELDS)}")

        try:
            re.compile(self.slug_pattern)
        except re.error as e:
            raise ValueError(f"Invalid slug_pattern {self.slug_pattern!r}: {e}") from e

        if not self.date_formats:
            raise ValueError("At least one date format is required")

        if self.words_per_minute <= 0:
            raise ValueError(f"words_per_minute must be positive (got {self.words_per_minute})")

        if self.read_time_tolerance is not None and self.read_time_tolerance < 0:
            raise ValueError(
                f"read_time_tolerance must not be negative (got {self.read_time_tolerance})"
            )

        self.severity = {rule: Severity.parse(value) for rule, value in self.severity.items()}


@dataclass
class ReportConfig:
    """Markdown report output.

    Attributes:
        path: Output file path
    """

    path: str = "content-report.md"


@dataclass
class CIConfig:
    """CI/CD-specific configuration.

    Attributes:
        fail_on_warning: Exit with error if warnings occur
        json_output: Use JSON output format
    """

    fail_on_warning: bool = False
    json_output: bool = False


@dataclass
class FolioConfig:
    """Top-level Folio configuration.

    Attributes:
        content: Content locations
        format: File format markers
        checks: Check settings
        report: Report output
        ci: CI/CD settings
    """

    content: ContentConfig = field(default_factory=ContentConfig)
    format: FormatConfig = field(default_factory=FormatConfig)
    checks: ChecksConfig = field(default_factory=ChecksConfig)
    report: ReportConfig = field(default_factory=ReportConfig)
    ci: CIConfig = field(default_factory=CIConfig)

    # Runtime overrides (set by CLI)
    _config_path: Path | None = field(default=None, repr=False)

    @property
    def config_path(self) -> Path | None:
        """Get the path to the config file that was loaded."""
        return self._config_path

    @property
    def base_dir(self) -> Path:
        """Directory relative config paths resolve against.

        The project root for a discovered config (``.folio/config.yaml`` lives
        one level down), otherwise the current working directory.
        """
        if self._config_path is None:
            return Path.cwd()
        parent = self._config_path.resolve().parent
        if parent.name == ".folio":
            return parent.parent
        return parent

    def resolve(self, path: str | Path) -> Path:
        """Resolve a config-relative path."""
        path = Path(path)
        if path.is_absolute():
            return path
        return self.base_dir / path


# =============================================================================
# Environment Variable Substitution
# =============================================================================


def substitute_env_vars(value: Any) -> Any:
    """Substitute environment variables in config values.

    Supports ${VAR} syntax for environment variable substitution.
    Example: ${CONTENT_DIR} -> value of CONTENT_DIR

    Args:
        value: Config value (string, dict, list, or other)

    Returns:
        Value with environment variables substituted
    """
    if isinstance(value, str):
        pattern = re.compile(r"\$\{([^}]+)\}")

        def replace_var(match: re.Match[str]) -> str:
            var_name = match.group(1)
            env_value = os.environ.get(var_name)
            if env_value is None:
                raise ValueError(f"Environment variable not set: {var_name}")
            return env_value

        return pattern.sub(replace_var, value)

    elif isinstance(value, dict):
        return {k: substitute_env_vars(v) for k, v in value.items()}

    elif isinstance(value, list):
        return [substitute_env_vars(v) for v in value]

    return value


# =============================================================================
# Config File Discovery
# =============================================================================


def find_config_file(start_path: Path | None = None) -> Path | None:
    """Find configuration file in standard locations.

    Search order:
    1. ./.folio/config.yaml
    2. ./folio.yaml

    Args:
        start_path: Starting directory for search (defaults to cwd)

    Returns:
        Path to config file if found, None otherwise
    """
    if start_path is None:
        start_path = Path.cwd()

    start_path = start_path.resolve()

    candidates = [
        start_path / ".folio" / "config.yaml",
        start_path / "folio.yaml",
    ]

    for candidate in candidates:
        if candidate.exists():
            return candidate

    return None


# =============================================================================
# Config Loading
# =============================================================================


def _as_list(value: Any, name: str) -> list[str]:
    if isinstance(value, str):
        return [value]
    if not isinstance(value, list):
        raise ValueError(f"{name} must be a list (got {type(value).__name__})")
    return [str(v) for v in value]


def _as_int(value: Any, name: str) -> int:
    if isinstance(value, bool):
        raise ValueError(f"{name} must be an integer (got {value!r})")
    try:
        return int(value)
    except (TypeError, ValueError) as e:
        raise ValueError(f"{name} must be an integer (got {value!r})") from e


def _as_bool(value: Any, name: str) -> bool:
    # Values substituted from ${VAR} arrive as strings
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in ("true", "yes", "on", "1"):
        return True
    if text in ("false", "no", "off", "0", ""):
        return False
    raise ValueError(f"{name} must be a boolean (got {value!r})")


def load_config_from_dict(data: dict[str, Any]) -> FolioConfig:
    """Load configuration from a dictionary.

    Args:
        data: Configuration dictionary

    Returns:
        FolioConfig instance
    """
    data = substitute_env_vars(data)

    config = FolioConfig()

    if "content" in data:
        content_data = data["content"] or {}
        config.content = ContentConfig(
            paths=_as_list(content_data.get("paths", config.content.paths), "content.paths"),
            patterns=_as_list(
                content_data.get("patterns", config.content.patterns), "content.patterns"
            ),
        )

    if "format" in data:
        format_data = data["format"] or {}
        config.format = FormatConfig(
            metadata_marker=str(format_data.get("metadata_marker", DEFAULT_METADATA_MARKER)),
            document_separator=str(
                format_data.get("document_separator", DEFAULT_DOCUMENT_SEPARATOR)
            ),
        )

    if "checks" in data:
        checks_data = data["checks"] or {}
        defaults = ChecksConfig()
        tolerance = checks_data.get("read_time_tolerance")
        config.checks = ChecksConfig(
            required_fields=_as_list(
                checks_data.get("required_fields", defaults.required_fields),
                "checks.required_fields",
            ),
            slug_pattern=str(checks_data.get("slug_pattern", defaults.slug_pattern)),
            date_formats=_as_list(
                checks_data.get("date_formats", defaults.date_formats), "checks.date_formats"
            ),
            assets_dir=checks_data.get("assets_dir"),
            read_time_tolerance=(
                _as_int(tolerance, "checks.read_time_tolerance")
                if tolerance is not None
                else None
            ),
            words_per_minute=_as_int(
                checks_data.get("words_per_minute", defaults.words_per_minute),
                "checks.words_per_minute",
            ),
            disabled=_as_list(checks_data.get("disabled") or [], "checks.disabled"),
            severity=dict(checks_data.get("severity") or {}),
        )

    if "report" in data:
        report_data = data["report"] or {}
        config.report = ReportConfig(
            path=report_data.get("path", config.report.path),
        )

    if "ci" in data:
        ci_data = data["ci"] or {}
        config.ci = CIConfig(
            fail_on_warning=_as_bool(ci_data.get("fail_on_warning", False), "ci.fail_on_warning"),
            json_output=_as_bool(ci_data.get("json_output", False), "ci.json_output"),
        )

    return config


def load_config(
    config_path: Path | None = None,
    auto_discover: bool = True,
) -> FolioConfig:
    """Load configuration from file.

    Args:
        config_path: Explicit path to config file
        auto_discover: Whether to search for config file if not specified

    Returns:
        FolioConfig instance

    Raises:
        FileNotFoundError: If config_path specified but doesn't exist
        ValueError: If the file is not a YAML mapping or holds invalid values
    """
    if config_path is not None:
        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")
        found_path = config_path
    elif auto_discover:
        found_path = find_config_file()
    else:
        found_path = None

    if found_path is not None:
        with open(found_path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        if not isinstance(data, dict):
            raise ValueError(f"Config file must contain a mapping: {found_path}")
        config = load_config_from_dict(data)
        config._config_path = found_path
    else:
        config = FolioConfig()

    return config


def create_default_config() -> str:
    """Create default configuration YAML content.

    Returns:
        YAML string with default configuration and comments
    """
    return '''# Folio Configuration

# Content locations (directories are searched recursively)
content:
  paths:
    - "content"
  patterns: ["*.md", "*.markdown", "*.txt"]

# File format markers
format:
  metadata_marker: "---"        # opens and closes each metadata block
  document_separator: "---8<---"  # separates documents sharing one file

# Content checks (run `folio rules` for the full list)
checks:
  required_fields: [id, title, summary, date, category, readTime, image, slug]
  slug_pattern: "^[a-z0-9]+(?:-[a-z0-9]+)*$"
  date_formats: ["%B %d, %Y", "%b %d, %Y", "%Y-%m-%d", "%d %B %Y"]
  # assets_dir: "public"        # verify image paths exist under this directory
  # read_time_tolerance: 3      # minutes between stated and estimated read time
  words_per_minute: 200
  disabled: []
  # severity:
  #   date-format: error

# Markdown QA report
report:
  path: "content-report.md"

# CI/CD settings
ci:
  fail_on_warning: false
  json_output: false
'''
