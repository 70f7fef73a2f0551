"""
Preprocessing driver.

``process`` runs scanner -> parser -> renderer over one file and returns
the text without touching the disk. ``process_all`` applies it to every
regular file of a directory tree in a fixed order and rewrites the files
in place. The first failing file stops the walk; files rewritten before
it stay rewritten.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Iterable, List, Optional, Union

import pathspec

from .context import InterpreterContext
from .errors import TemplateIOError
from .evaluator import TemplateEvaluator
from .lexer import tokenize_template
from .parser import TemplateParser

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


def process_text(
    text: str,
    context: InterpreterContext,
    *,
    file: Optional[PathLike] = None,
    trim_blocks: bool = True,
) -> str:
    """
    Preprocess template text.

    Args:
        text: Template source
        context: Variables for this generation run
        file: Name used in diagnostics
        trim_blocks: Drop lines that hold nothing but a directive or comment

    Returns:
        Rendered text

    Raises:
        LexError, ParseError, EvaluationError
    """
    name = str(file) if file is not None else "<string>"
    tokens = tokenize_template(text, name, trim_blocks=trim_blocks)
    ast = TemplateParser(tokens, name).parse()
    return TemplateEvaluator(context, name).render(ast)


def process(
    path: PathLike,
    context: InterpreterContext,
    *,
    encoding: str = "utf-8",
    trim_blocks: bool = True,
) -> str:
    """
    Preprocess one file and return its new content. Nothing is written.
    """
    path = Path(path)
    return process_text(read_template(path, encoding), context, file=path, trim_blocks=trim_blocks)


def process_all(
    root: PathLike,
    context: InterpreterContext,
    *,
    exclude: Optional[pathspec.PathSpec] = None,
    encoding: str = "utf-8",
    trim_blocks: bool = True,
) -> List[Path]:
    """
    Preprocess every regular file under ``root`` and overwrite it with the result.

    Args:
        root: Directory to walk recursively
        context: Variables shared by all files
        exclude: Paths (relative to root, POSIX) to leave untouched, e.g. binary assets

    Returns:
        Rewritten files in processing order

    Raises:
        PreprocessorError: from the first file that fails; no rollback is attempted
    """
    root = Path(root)
    if not root.is_dir():
        raise TemplateIOError("not a directory", file=root)

    written: List[Path] = []
    for path in iter_template_files(root, exclude=exclude):
        logger.debug("Preprocessing %s", path)
        text = process(path, context, encoding=encoding, trim_blocks=trim_blocks)
        write_template(path, text, encoding)
        written.append(path)

    logger.info("Preprocessed %d file(s) under %s", len(written), root)
    return written


def iter_template_files(root: Path, *, exclude: Optional[pathspec.PathSpec] = None) -> List[Path]:
    """
    Regular files under ``root`` sorted by full POSIX path.
    Symlinks are skipped and symlinked directories are not entered.
    """
    files: List[Path] = []
    for dirpath, _dirnames, filenames in os.walk(root):
        for fn in filenames:
            p = Path(dirpath, fn)
            if p.is_symlink() or not p.is_file():
                continue
            if exclude is not None and exclude.match_file(p.relative_to(root).as_posix()):
                logger.debug("Skipping excluded %s", p)
                continue
            files.append(p)
    files.sort(key=lambda p: p.as_posix())
    return files


def build_exclude_spec(patterns: Iterable[str]) -> Optional[pathspec.PathSpec]:
    """
    Build PathSpec from gitignore-style patterns. Return None if there are none.
    """
    lines = [ln.strip() for ln in patterns if ln.strip() and not ln.strip().startswith("#")]
    if not lines:
        return None
    return pathspec.PathSpec.from_lines("gitwildmatch", lines)


def read_template(path: Path, encoding: str = "utf-8") -> str:
    # newline="" keeps CRLF/LF exactly as stored
    try:
        with path.open("r", encoding=encoding, newline="") as f:
            return f.read()
    except UnicodeDecodeError as e:
        raise TemplateIOError(f"cannot decode file as {encoding}: {e.reason}", file=path) from e
    except OSError as e:
        raise TemplateIOError(f"cannot read file: {e.strerror or e}", file=path) from e


def write_template(path: Path, text: str, encoding: str = "utf-8") -> None:
    try:
        with path.open("w", encoding=encoding, newline="") as f:
            f.write(text)
    except OSError as e:
        raise TemplateIOError(f"cannot write file: {e.strerror or e}", file=path) from e


__all__ = [
    "process_text",
    "process",
    "process_all",
    "iter_template_files",
    "build_exclude_spec",
    "read_template",
    "write_template",
]
