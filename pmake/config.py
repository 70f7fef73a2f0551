"""
Runtime configuration for pmake.

Single source of truth for where templates live and how logging is set up.
"""

from __future__ import annotations

import logging
import os
import sys
from pathlib import Path
from typing import Optional

# Templates folder name next to the installed program
TEMPLATES_DIR = "pmake-templates"
INFO_FILE = "pmake-info.yaml"
FEATURES_DIR = "features"
COMMON_DIR = "common"

# Environment overrides
TEMPLATES_ENV = "PMAKE_TEMPLATES"
DEBUG_ENV = "PMAKE_DEBUG"

_LOG = logging.getLogger("pmake")


def program_root_dir() -> Path:
    """Directory of the running program (the script or console entry point)."""
    return Path(sys.argv[0]).resolve().parent


def templates_root(explicit: Optional[Path] = None) -> Path:
    """
    Resolve the templates folder.

    Priority: explicit path (--templates) > $PMAKE_TEMPLATES > <program dir>/pmake-templates.
    """
    if explicit is not None:
        return explicit.expanduser().resolve()
    env = os.environ.get(TEMPLATES_ENV)
    if env:
        return Path(env).expanduser().resolve()
    return program_root_dir() / TEMPLATES_DIR


def setup_logging(verbose: bool = False) -> None:
    """
    Attach a single stderr handler to the ``pmake`` logger.

    DEBUG when ``verbose`` or $PMAKE_DEBUG is set, WARNING otherwise.
    Safe to call more than once.
    """
    level = logging.DEBUG if verbose or os.environ.get(DEBUG_ENV) else logging.WARNING
    _LOG.setLevel(level)
    if not _LOG.handlers:
        h = logging.StreamHandler()
        h.setFormatter(logging.Formatter("[%(levelname)s] %(message)s"))
        _LOG.addHandler(h)


__all__ = [
    "TEMPLATES_DIR",
    "INFO_FILE",
    "FEATURES_DIR",
    "COMMON_DIR",
    "TEMPLATES_ENV",
    "DEBUG_ENV",
    "program_root_dir",
    "templates_root",
    "setup_logging",
]
