"""
Parser for template token streams.

Builds the template AST with an explicit stack of open conditional
frames instead of recursive descent, so the depth of nested
``{% if %}`` blocks does not affect the Python call stack.
"""

from __future__ import annotations

from typing import List, NoReturn, Optional, Tuple

from .conditions.lexer import ConditionSyntaxError
from .conditions.model import Condition
from .conditions.parser import ConditionParser
from .errors import ParseError, ParseErrorKind
from .nodes import Branch, ConditionalNode, TemplateAST, TemplateNode, TextNode, VariableNode
from .tokens import Token, TokenType


class _Frame:
    """Conditional block under construction."""

    def __init__(self, opener: Token, condition: Condition):
        self.opener = opener
        self.branches: List[Branch] = []
        self.else_token: Optional[Token] = None
        self.body: List[TemplateNode] = []
        self._branch: Tuple[Token, Condition] = (opener, condition)

    def next_branch(self, token: Token, condition: Condition) -> None:
        self._close_branch()
        self._branch = (token, condition)

    def open_else(self, token: Token) -> None:
        self._close_branch()
        self.else_token = token

    def finish(self) -> ConditionalNode:
        if self.else_token is None:
            self._close_branch()
            return ConditionalNode(branches=tuple(self.branches), else_body=None)
        return ConditionalNode(branches=tuple(self.branches), else_body=tuple(self.body))

    def _close_branch(self) -> None:
        token, condition = self._branch
        self.branches.append(Branch(
            condition_text=token.value,
            condition=condition,
            body=tuple(self.body),
            line=token.line,
            column=token.column,
        ))
        self.body = []


class TemplateParser:
    """
    Turns a token list into a tree of ``TextNode``, ``VariableNode``
    and ``ConditionalNode``.

    State machine: Root (empty stack) or InsideFrame(depth = len(stack)).
    Accepting state is end of stream with an empty stack.
    """

    def __init__(self, tokens: List[Token], file: Optional[str] = None):
        self.tokens = tokens
        self.file = file
        self._conditions = ConditionParser()

    def parse(self) -> TemplateAST:
        """
        Raises:
            ParseError: on any structural error or malformed condition
        """
        root: List[TemplateNode] = []
        stack: List[_Frame] = []

        for token in self.tokens:
            body = stack[-1].body if stack else root

            if token.type is TokenType.TEXT:
                if token.value:
                    body.append(TextNode(text=token.value))

            elif token.type is TokenType.VARIABLE:
                body.append(VariableNode(name=token.value, line=token.line, column=token.column))

            elif token.type is TokenType.IF:
                stack.append(_Frame(token, self._parse_condition(token)))

            elif token.type is TokenType.ELIF:
                frame = self._innermost(stack, token, "elif")
                if frame.else_token is not None:
                    self._fail(
                        ParseErrorKind.UNEXPECTED_ELIF_AFTER_ELSE,
                        f"'elif' after 'else' (else at {frame.else_token.line}:{frame.else_token.column})",
                        token,
                    )
                frame.next_branch(token, self._parse_condition(token))

            elif token.type is TokenType.ELSE:
                frame = self._innermost(stack, token, "else")
                if frame.else_token is not None:
                    self._fail(
                        ParseErrorKind.DUPLICATE_ELSE,
                        f"second 'else' in one block (first at {frame.else_token.line}:{frame.else_token.column})",
                        token,
                    )
                frame.open_else(token)

            elif token.type is TokenType.ENDIF:
                if not stack:
                    self._fail(ParseErrorKind.UNMATCHED_CLOSE, "'endif' without matching 'if'", token)
                node = stack.pop().finish()
                (stack[-1].body if stack else root).append(node)

            # COMMENT, RAW_START and RAW_END produce no nodes

        if stack:
            opener = stack[-1].opener
            self._fail(
                ParseErrorKind.UNTERMINATED_CONDITIONAL,
                f"'if {opener.value}' is never closed, expected '{{% endif %}}'",
                opener,
            )

        return tuple(root)

    def _innermost(self, stack: List[_Frame], token: Token, keyword: str) -> _Frame:
        if not stack:
            self._fail(ParseErrorKind.UNEXPECTED_BRANCH, f"'{keyword}' without matching 'if'", token)
        return stack[-1]

    def _parse_condition(self, token: Token) -> Condition:
        try:
            return self._conditions.parse(token.value)
        except ConditionSyntaxError as e:
            keyword = "if" if token.type is TokenType.IF else "elif"
            self._fail(
                ParseErrorKind.INVALID_CONDITION,
                f"invalid condition in '{keyword}': {e.message} (condition offset {e.position})",
                token,
            )

    def _fail(self, kind: ParseErrorKind, reason: str, token: Token) -> NoReturn:
        raise ParseError(kind, reason, file=token.file or self.file, line=token.line, column=token.column)


def parse_template(tokens: List[Token], file: Optional[str] = None) -> TemplateAST:
    """Convenience wrapper around ``TemplateParser``."""
    return TemplateParser(tokens, file).parse()


__all__ = ["TemplateParser", "parse_template"]
