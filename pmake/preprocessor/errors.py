"""
Error taxonomy of the template preprocessor.

Every error carries the template file and, where it is known,
the 1-based line/column of the marker that caused it, so the message
can be shown to the user as is.
"""

from __future__ import annotations

import enum
from pathlib import Path
from typing import Optional, Union

from ..errors import PmakeUserError

FileRef = Union[str, Path]


class PreprocessorError(PmakeUserError):
    """Base class for all preprocessor failures."""

    def __init__(
        self,
        reason: str,
        *,
        file: Optional[FileRef] = None,
        line: Optional[int] = None,
        column: Optional[int] = None,
    ):
        self.reason = reason
        self.file = str(file) if file is not None else None
        self.line = line
        self.column = column
        super().__init__(self._format())

    def _format(self) -> str:
        where = self.file or "<template>"
        if self.line is not None:
            where += f":{self.line}"
            if self.column is not None:
                where += f":{self.column}"
        return f"{where}: {self.reason}"

    def __str__(self) -> str:
        return self._format()


class LexError(PreprocessorError):
    """Malformed marker in template text."""
    pass


class ParseErrorKind(enum.Enum):
    UNTERMINATED_CONDITIONAL = "unterminated conditional"
    UNMATCHED_CLOSE = "unmatched close"
    DUPLICATE_ELSE = "duplicate else"
    UNEXPECTED_ELIF_AFTER_ELSE = "elif after else"
    UNEXPECTED_BRANCH = "branch outside conditional"
    INVALID_CONDITION = "invalid condition"


class ParseError(PreprocessorError):
    """Structural error in the directive tree or in a condition expression."""

    def __init__(
        self,
        kind: ParseErrorKind,
        reason: str,
        *,
        file: Optional[FileRef] = None,
        line: Optional[int] = None,
        column: Optional[int] = None,
    ):
        self.kind = kind
        super().__init__(reason, file=file, line=line, column=column)


class EvaluationErrorKind(enum.Enum):
    UNDEFINED_VARIABLE = "undefined variable"
    TYPE_MISMATCH = "type mismatch"


class EvaluationError(PreprocessorError):
    """
    Rendering failure.

    Raised without position by the condition evaluator; the renderer
    re-raises it with the file and marker position attached.
    """

    def __init__(
        self,
        kind: EvaluationErrorKind,
        reason: str,
        *,
        name: Optional[str] = None,
        file: Optional[FileRef] = None,
        line: Optional[int] = None,
        column: Optional[int] = None,
    ):
        self.kind = kind
        self.name = name
        super().__init__(reason, file=file, line=line, column=column)

    def located(self, file: Optional[FileRef], line: int, column: int) -> "EvaluationError":
        """Copy of this error bound to a template position."""
        return EvaluationError(
            self.kind, self.reason, name=self.name, file=file, line=line, column=column
        )


def undefined_variable(name: str) -> EvaluationError:
    return EvaluationError(
        EvaluationErrorKind.UNDEFINED_VARIABLE,
        f"undefined variable '{name}'",
        name=name,
    )


class TemplateIOError(PreprocessorError):
    """Template file could not be read, decoded or written back."""
    pass


__all__ = [
    "PreprocessorError",
    "LexError",
    "ParseError",
    "ParseErrorKind",
    "EvaluationError",
    "EvaluationErrorKind",
    "TemplateIOError",
    "undefined_variable",
]
