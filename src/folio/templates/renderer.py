"""Markdown QA report renderer.

Renders a ValidationReport and the collection it came from to Markdown using
Jinja2 templates. Output is deterministic apart from the report timestamp.
"""

import logging
from collections import Counter
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from jinja2 import Environment, PackageLoader, TemplateNotFound, select_autoescape

from folio.config import FolioConfig
from folio.markdown import code_languages, word_count
from folio.models.document import Collection
from folio.models.report import ValidationReport

logger = logging.getLogger(__name__)

DEFAULT_TEMPLATE = "report.md.j2"


def format_datetime(dt: datetime | str | None) -> str:
    """Format datetime for display in reports.

    Args:
        dt: Datetime object or ISO string

    Returns:
        Formatted date string
    """
    if dt is None:
        return "N/A"

    if isinstance(dt, str):
        try:
            dt = datetime.fromisoformat(dt)
        except ValueError:
            return dt

    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=UTC)

    return dt.astimezone(UTC).strftime("%Y-%m-%d %H:%M:%S UTC")


def table_cell(value: Any) -> str:
    """Make a value safe for a Markdown table cell."""
    if value is None or value == "":
        return "-"
    text = " ".join(str(value).split())
    return text.replace("|", "\\|")


class ReportRenderer:
    """Renders content QA reports to Markdown.

    Usage:
        renderer = ReportRenderer(config)
        markdown = renderer.render(collection, report)
    """

    def __init__(self, config: FolioConfig | None = None) -> None:
        """Initialize the report renderer.

        Args:
            config: Folio configuration
        """
        self.config = config or FolioConfig()

        self._env = Environment(
            loader=PackageLoader("folio", "templates"),
            autoescape=select_autoescape(["html", "xml"]),
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
        )

        self._env.filters["format_datetime"] = format_datetime
        self._env.filters["cell"] = table_cell

    def render(
        self,
        collection: Collection,
        report: ValidationReport,
        template_name: str = DEFAULT_TEMPLATE,
    ) -> str:
        """Render a report to Markdown.

        Raises:
            ValueError: If the template is missing or fails to render
        """
        try:
            template = self._env.get_template(template_name)
        except TemplateNotFound as e:
            raise ValueError(f"Template not found: {template_name}") from e

        context = self._build_context(collection, report)

        try:
            rendered = template.render(**context)
        except Exception as e:
            logger.error("Template rendering failed: %s", e)
            raise ValueError(f"Template rendering failed: {e}") from e

        logger.debug("Rendered report (%d characters)", len(rendered))
        return rendered

    def _build_context(
        self,
        collection: Collection,
        report: ValidationReport,
    ) -> dict[str, Any]:
        """Build the template rendering context."""
        categories = Counter(d.category for d in collection if d.category)
        languages: Counter[str] = Counter()
        documents = []

        for document in collection:
            doc_languages = code_languages(document.body)
            languages.update(doc_languages)
            documents.append(
                {
                    **document.to_dict(),
                    "words": word_count(document.body),
                    "languages": doc_languages,
                }
            )

        rule_counts = Counter(issue.rule for issue in report.issues)

        return {
            "timestamp": report.timestamp,
            "success": report.success,
            "documents_checked": report.documents_checked,
            "files_checked": report.files_checked,
            "error_count": len(report.errors),
            "warning_count": len(report.warnings),
            "rules": report.rules,
            "rule_counts": sorted(rule_counts.items()),
            "issues": [issue.to_dict() | {"location": issue.location} for issue in report.issues],
            "documents": documents,
            "categories": sorted(categories.items()),
            "languages": sorted(languages.items()),
        }

    def render_to_file(
        self,
        collection: Collection,
        report: ValidationReport,
        output_path: Path,
        template_name: str = DEFAULT_TEMPLATE,
    ) -> Path:
        """Render a report and write it to a file.

        Returns:
            Path to written file
        """
        content = self.render(collection, report, template_name)

        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(content, encoding="utf-8")
        logger.info("Wrote report to %s", output_path)

        return output_path

    def preview(
        self,
        collection: Collection,
        report: ValidationReport,
        max_lines: int = 50,
    ) -> str:
        """Render a truncated preview of the report."""
        full_content = self.render(collection, report)
        lines = full_content.split("\n")

        if len(lines) <= max_lines:
            return full_content

        preview_lines = lines[:max_lines]
        preview_lines.append(f"\n... [{len(lines) - max_lines} more lines] ...")

        return "\n".join(preview_lines)
