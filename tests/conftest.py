"""Pytest configuration for test suite.

Ensures the project root is on ``sys.path`` so imports like
``import lru_cache`` resolve correctly regardless of the working directory
pytest chooses.
"""

from __future__ import annotations

import sys
from pathlib import Path

import pytest


def _ensure_project_root_on_syspath() -> None:
    project_root = Path(__file__).resolve().parents[1]
    project_root_str = str(project_root)
    if project_root_str not in sys.path:
        # Prepend to prefer local sources over site-packages
        sys.path.insert(0, project_root_str)


_ensure_project_root_on_syspath()


@pytest.fixture(autouse=True)
def reset_cache_registry():
    """Start each test with an empty cache registry."""
    from lru_cache.registry import reset_registry

    reset_registry()
    yield
    reset_registry()


@pytest.fixture
def evictions():
    """Eviction callback that records ``(key, value)`` pairs in order."""

    class _Recorder(list):
        def __call__(self, key, value):
            self.append((key, value))

    return _Recorder()


@pytest.fixture(autouse=True)
def restore_cache_log_levels():
    """Undo logger levels set by ``setup_logging`` during a test."""
    import logging

    from lru_cache.observability import CACHE_LOGGERS

    yield
    for logger_name in CACHE_LOGGERS:
        logging.getLogger(logger_name).setLevel(logging.NOTSET)
