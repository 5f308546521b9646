"""structlog setup for scrape runs.

Scrape runs are long and chatty: one event per season or game
(``season_scraped``, ``game_scraped``, ``game_scrape_failed``) plus the
extractor's ``round_layout_mismatch`` warnings.  Everything goes to
**stderr** so that ``scrape_archive parse`` can print a clean JSON record on
stdout.

Interactive runs get the console renderer (colours only on a TTY);
unattended runs (``--json-logs`` or ``APP_ENV=production``) get one JSON
object per line, which is easy to grep for failed game ids afterwards.
httpx logs through stdlib ``logging`` and is routed into the same renderer.
"""

import logging
import os
import sys

import structlog


def configure_logging(
    log_level: str = "INFO",
    json_output: bool = False,
    cache_loggers: bool = True,
) -> structlog.BoundLogger:
    """Configure structlog for the scraper.

    Args:
        log_level: Minimum level to emit (DEBUG, INFO, WARNING, ERROR).
        json_output: Emit JSON lines regardless of ``APP_ENV``.
        cache_loggers: Freeze each module logger's configuration on first
            use.  Tests turn this off so ``structlog.testing.capture_logs``
            can intercept module-level loggers.

    Returns:
        The root structlog logger.
    """
    use_json = json_output or os.environ.get("APP_ENV", "development") == "production"

    processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.dev.set_exc_info,
        structlog.processors.TimeStamper(fmt="iso"),
    ]
    if use_json:
        renderer: structlog.types.Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())

    structlog.configure(
        processors=[*processors, renderer],
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.getLevelName(log_level.upper())
        ),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=cache_loggers,
    )

    # httpx request lines share the scraper's format.
    stdlib_handler = logging.StreamHandler(sys.stderr)
    stdlib_handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                *processors,
                renderer,
            ],
        )
    )
    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(stdlib_handler)
    root.setLevel(log_level.upper())

    return structlog.get_logger()


def get_logger(name: str) -> structlog.BoundLogger:
    """Return a logger bound to *name*, configuring defaults on first call."""
    if not structlog.is_configured():
        configure_logging()
    return structlog.get_logger(logger_name=name)
