"""Folio - parser and editorial QA checks for blog-post collections.

Folio reads the content files that accompany a blog: each document is a
metadata header (id, title, summary, date, category, read time, image, slug)
followed by a Markdown body. It loads a whole collection and reports
editorial problems before an external site generator consumes the files.

Core principles:
- Read-only: content is never rewritten, only parsed and checked
- Report, don't enforce: uniqueness and format rules become issues, not crashes
- CI/CD Compatibility: No interactive prompts, meaningful exit codes
"""

__version__ = "0.1.0"
__author__ = "Folio Contributors"
