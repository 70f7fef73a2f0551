"""
Template preprocessor.

Evaluates ``{% if %}`` / ``{% elif %}`` / ``{% else %}`` / ``{% endif %}``
directives and ``{{ NAME }}`` references in template files against
an immutable variable context.
"""

from .context import (
    ENV_NAMESPACE,
    LIST_SEPARATOR,
    InterpreterContext,
    Value,
    env_key,
    render_value,
    split_list,
)
from .driver import build_exclude_spec, process, process_all, process_text
from .errors import (
    EvaluationError,
    EvaluationErrorKind,
    LexError,
    ParseError,
    ParseErrorKind,
    PreprocessorError,
    TemplateIOError,
)

__all__ = [
    # Контекст
    "InterpreterContext",
    "Value",
    "LIST_SEPARATOR",
    "ENV_NAMESPACE",
    "env_key",
    "render_value",
    "split_list",

    # Основные функции
    "process_text",
    "process",
    "process_all",
    "build_exclude_spec",

    # Исключения
    "PreprocessorError",
    "LexError",
    "ParseError",
    "ParseErrorKind",
    "EvaluationError",
    "EvaluationErrorKind",
    "TemplateIOError",
]
