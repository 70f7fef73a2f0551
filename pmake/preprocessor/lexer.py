"""
Scanner for template files.

Splits raw text into literal spans and marker tokens:

    {{ NAME }}            variable reference
    {% if COND %}         conditional open
    {% elif COND %}       next branch
    {% else %}            else branch
    {% endif %}           conditional close
    {# ... #}             comment
    {% raw %}...{% endraw %}  verbatim region

Concatenating ``Token.source`` of the result always reproduces the input.
"""

from __future__ import annotations

import re
from dataclasses import replace
from pathlib import Path
from typing import List, NoReturn, Optional, Set, Union

from .errors import LexError
from .tokens import STANDALONE_TYPES, Token, TokenType

NAME_PATTERN = r"[A-Za-z_][A-Za-z0-9_-]*(?::[A-Za-z_][A-Za-z0-9_-]*)*"


class TemplateLexer:
    """
    Лексический анализатор шаблонов.

    Текст вне маркеров не анализируется и выдаётся одним TEXT-токеном
    до следующего маркера. Парность if/endif не проверяется
    (это задача парсера), но глубина вложенности отслеживается счётчиком.
    """

    _MARKER_START = re.compile(r"\{[{%#]")
    _VARIABLE = re.compile(r"\{\{\s*(" + NAME_PATTERN + r")\s*\}\}")
    _DIRECTIVE_BODY = re.compile(r"\s*([A-Za-z_]+)(.*)", re.DOTALL)
    _ENDRAW = re.compile(r"\{%\s*endraw\s*%\}")

    _KEYWORDS = {
        "if": TokenType.IF,
        "elif": TokenType.ELIF,
        "else": TokenType.ELSE,
        "endif": TokenType.ENDIF,
        "raw": TokenType.RAW_START,
        "endraw": TokenType.RAW_END,
    }

    def __init__(self, text: str, file: Optional[Union[str, Path]] = None):
        self.text = text
        self.file = str(file) if file is not None else None
        self.length = len(text)
        self.position = 0
        self.line = 1
        self.column = 1
        self.depth = 0

    def tokenize(self) -> List[Token]:
        """
        Токенизирует весь исходный текст.

        Raises:
            LexError: При некорректном маркере; частичный результат не возвращается
        """
        tokens: List[Token] = []

        while self.position < self.length:
            match = self._MARKER_START.search(self.text, self.position)
            text_end = match.start() if match else self.length

            if text_end > self.position:
                chunk = self.text[self.position:text_end]
                tokens.append(self._emit(TokenType.TEXT, chunk, chunk))

            if match is None:
                break

            opener = match.group(0)
            if opener == "{{":
                tokens.append(self._scan_variable())
            elif opener == "{#":
                tokens.append(self._scan_comment())
            else:
                tokens.extend(self._scan_directive())

        return tokens

    # ---- markers ----

    def _scan_variable(self) -> Token:
        match = self._VARIABLE.match(self.text, self.position)
        if match is None:
            if self.text.find("}}", self.position + 2) == -1:
                self._fail("unterminated variable reference, expected '}}'")
            snippet = self.text[self.position:self.text.find("}}", self.position + 2) + 2]
            self._fail(f"malformed variable reference {snippet!r}")
        return self._emit(TokenType.VARIABLE, match.group(1), match.group(0))

    def _scan_comment(self) -> Token:
        end = self.text.find("#}", self.position + 2)
        if end == -1:
            self._fail("unterminated comment, expected '#}'")
        source = self.text[self.position:end + 2]
        return self._emit(TokenType.COMMENT, source[2:-2], source)

    def _scan_directive(self) -> List[Token]:
        end = self.text.find("%}", self.position + 2)
        if end == -1:
            self._fail("unterminated directive, expected '%}'")

        source = self.text[self.position:end + 2]
        body = self._DIRECTIVE_BODY.fullmatch(source[2:-2])
        if body is None:
            self._fail(f"malformed directive {source!r}")

        keyword = body.group(1).lower()
        argument = body.group(2).strip()
        token_type = self._KEYWORDS.get(keyword)
        if token_type is None:
            self._fail(f"unknown directive '{body.group(1)}'")

        if token_type in (TokenType.IF, TokenType.ELIF):
            if token_type is TokenType.IF:
                token = self._emit(token_type, argument, source, depth=self.depth)
                self.depth += 1
                return [token]
            return [self._emit(token_type, argument, source, depth=self.depth - 1)]

        if argument:
            self._fail(f"'{keyword}' takes no arguments")

        if token_type is TokenType.ELSE:
            return [self._emit(token_type, "", source, depth=self.depth - 1)]
        if token_type is TokenType.ENDIF:
            self.depth -= 1
            return [self._emit(token_type, "", source, depth=self.depth)]
        if token_type is TokenType.RAW_END:
            self._fail("'endraw' without 'raw'")
        return self._scan_raw(source)

    def _scan_raw(self, opener: str) -> List[Token]:
        closer = self._ENDRAW.search(self.text, self.position + len(opener))
        if closer is None:
            self._fail("unterminated raw block, expected '{% endraw %}'")

        tokens = [self._emit(TokenType.RAW_START, "", opener, depth=self.depth)]
        content = self.text[self.position:closer.start()]
        if content:
            tokens.append(self._emit(TokenType.TEXT, content, content))
        tokens.append(self._emit(TokenType.RAW_END, "", closer.group(0), depth=self.depth))
        return tokens

    # ---- position bookkeeping ----

    def _emit(self, token_type: TokenType, value: str, source: str, *, depth: Optional[int] = None) -> Token:
        token = Token(
            type=token_type,
            value=value,
            source=source,
            position=self.position,
            line=self.line,
            column=self.column,
            depth=self.depth if depth is None else depth,
            file=self.file,
        )
        self._advance(len(source))
        return token

    def _advance(self, count: int) -> None:
        chunk = self.text[self.position:self.position + count]
        newlines = chunk.count("\n")
        if newlines:
            self.line += newlines
            self.column = count - chunk.rfind("\n")
        else:
            self.column += count
        self.position += count

    def _fail(self, reason: str) -> NoReturn:
        raise LexError(reason, file=self.file, line=self.line, column=self.column)


# ---- standalone lines ----

_LINE_BREAK_HEAD = re.compile(r"[ \t]*(?:\r\n|\n|\r)")


def _starts_line(tokens: List[Token], index: int, trimmed: Set[int]) -> bool:
    if index == 0:
        return True
    prev = tokens[index - 1]
    if prev.type is not TokenType.TEXT:
        return (index - 1) in trimmed
    tail_start = max(prev.value.rfind("\n"), prev.value.rfind("\r")) + 1
    if prev.value[tail_start:].strip(" \t"):
        return False
    if tail_start > 0:
        return True
    return index - 1 == 0 or (index - 2) in trimmed


def _line_break_head(tokens: List[Token], index: int) -> Optional[str]:
    if index >= len(tokens):
        return ""
    nxt = tokens[index]
    if nxt.type is not TokenType.TEXT:
        return None
    match = _LINE_BREAK_HEAD.match(nxt.value)
    if match:
        return match.group(0)
    if index == len(tokens) - 1 and not nxt.value.strip(" \t"):
        return nxt.value
    return None


def trim_standalone_lines(tokens: List[Token]) -> List[Token]:
    """
    Убирает строки, на которых нет ничего, кроме директивы или комментария.

    Отступ перед маркером и перевод строки после него вырезаются
    из ``value`` соседних TEXT-токенов; ``source`` не меняется.
    """
    out = list(tokens)
    trimmed: Set[int] = set()

    for i, token in enumerate(out):
        if token.type not in STANDALONE_TYPES:
            continue
        if not _starts_line(out, i, trimmed):
            continue
        head = _line_break_head(out, i + 1)
        if head is None:
            continue

        if i > 0 and out[i - 1].type is TokenType.TEXT:
            prev = out[i - 1]
            tail_start = max(prev.value.rfind("\n"), prev.value.rfind("\r")) + 1
            out[i - 1] = replace(prev, value=prev.value[:tail_start])
        if head:
            nxt = out[i + 1]
            out[i + 1] = replace(nxt, value=nxt.value[len(head):])
        trimmed.add(i)

    return out


def tokenize_template(
    text: str,
    file: Optional[Union[str, Path]] = None,
    *,
    trim_blocks: bool = True,
) -> List[Token]:
    """
    Удобная функция для токенизации шаблона.

    Args:
        text: Исходный текст шаблона
        file: Путь к файлу (для диагностики)
        trim_blocks: Убирать строки, занятые только директивами

    Returns:
        Список токенов в порядке следования в тексте
    """
    tokens = TemplateLexer(text, file).tokenize()
    if trim_blocks:
        tokens = trim_standalone_lines(tokens)
    return tokens


__all__ = [
    "NAME_PATTERN",
    "TemplateLexer",
    "trim_standalone_lines",
    "tokenize_template",
]
