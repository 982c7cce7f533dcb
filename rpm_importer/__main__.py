"""CLI entry point: python -m rpm_importer."""
from __future__ import annotations

from rpm_importer.cli import main

if __name__ == "__main__":
    main()
