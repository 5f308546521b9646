# =============================================================================
# src/cli/__init__.py: CLI Module Overview
# =============================================================================
#
# Command-line tools for the archive scraper, run via
# `python -m src.cli.<module>`.
#
#   SCRAPE ARCHIVE (scrape_archive.py)
#      Refreshes the season-by-season episode catalog, scrapes game
#      transcripts into per-game JSON files (single game, next-game chain,
#      or a catalogued season), extracts saved pages offline, and reports
#      scrape coverage.
#
# Architecture Notes:
#   - argparse for argument parsing (not Click/Typer).
#   - Service imports are deferred inside handlers so `--help` stays fast.
#   - Each handler constructs its own provider and services; the CLI runs
#     as a one-shot script, not a long-lived server.
# =============================================================================

"""CLI tools for the archive scraper.

- ``python -m src.cli.scrape_archive``: catalog refresh, game scraping,
  offline transcript parsing and status.
"""
