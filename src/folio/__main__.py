"""Entry point for running Folio as a module.

Usage:
    python -m folio [command] [options]

Example:
    python -m folio check content/
    python -m folio report --output content-report.md
"""

from folio.cli import app

if __name__ == "__main__":
    app()
