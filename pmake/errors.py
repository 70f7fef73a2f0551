"""
Base exception for user-facing errors.

All expected errors that should be displayed to the user
as clean messages (without stack traces) must inherit from PmakeUserError.

Programming errors and bugs should NOT inherit from PmakeUserError;
they will propagate with full tracebacks.
"""

from __future__ import annotations


class PmakeUserError(Exception):
    """
    Base class for all user-facing errors in pmake.

    These errors indicate problems that the user can fix:
    a broken template, a missing catalog entry, an unreadable file, etc.
    """
    pass


__all__ = ["PmakeUserError"]
