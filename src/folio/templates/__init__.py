"""Folio report rendering.

Jinja2-based rendering of content QA reports to Markdown.
"""

from folio.templates.renderer import ReportRenderer

__all__ = ["ReportRenderer"]
