"""
Unified test infrastructure for pmake.

Modules:
- file_utils: Utilities for creating files and directories
- catalog_builders: Builders for templates folders (pmake-info.yaml, templates, features)
- cli_utils: Running the pmake CLI in a subprocess
"""

from .file_utils import write, read, tree
from .catalog_builders import create_info_yaml, create_basic_catalog
from .cli_utils import run_cli

__all__ = [
    # File utilities
    "write", "read", "tree",

    # Catalog builders
    "create_info_yaml", "create_basic_catalog",

    # CLI utilities
    "run_cli",
]
