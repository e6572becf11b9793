"""Observability utilities: logging setup.

This module configures standard logging and, if available, integrates
`structlog` for structured logs. The dependency on `structlog` is optional to
keep the base runtime lightweight.
"""

from __future__ import annotations

import importlib
import logging

CACHE_LOGGERS = (
    "lru_cache",
    "lru_cache.cache.controller",
    "lru_cache.registry",
)


def setup_logging(level: str = "INFO", debug_evictions: bool = False) -> None:
    """Configure application logging.

    Parameters
    ----------
    level: str
        Logging level name (e.g., "DEBUG", "INFO"). Defaults to "INFO".
    debug_evictions: bool
        Force DEBUG on the cache loggers so every eviction is logged,
        independently of ``level``.

    Behavior
    --------
    - Initializes Python's logging with the requested level.
    - Sets the same level on the ``lru_cache`` logger, which takes effect even
      when the host application already configured the root logger.
    - If `structlog` is installed, configures it with a filtering bound logger.
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(
        level=numeric_level,
        format=("%(asctime)s %(levelname)s %(name)s - %(message)s"),
        datefmt="%Y-%m-%dT%H:%M:%S",
    )

    logging.getLogger("lru_cache").setLevel(numeric_level)
    if debug_evictions:
        for logger_name in CACHE_LOGGERS:
            logging.getLogger(logger_name).setLevel(logging.DEBUG)

    try:  # optional structlog
        structlog = importlib.import_module("structlog")
        structlog.configure(
            wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        )
    except ModuleNotFoundError:  # pragma: no cover
        pass
