# =============================================================================
# src/cli/__main__.py: Package Entry Point
# =============================================================================
#
# Enables `python -m src.cli`, which delegates to the archive scrape CLI.
# =============================================================================

"""Allow ``python -m src.cli`` execution."""

from src.cli.scrape_archive import main

main()
