"""
Парсер условных выражений с рекурсивным спуском.

Строит абстрактное синтаксическое дерево (AST) из последовательности токенов.
Поддерживает приоритеты операторов и группировку в скобках.

Грамматика:
expression     → or_expression
or_expression  → and_expression ("or" and_expression)*
and_expression → not_expression ("and" not_expression)*
not_expression → "not"* primary
primary        → "(" expression ")" | membership | variable_test

membership     → STRING "in" IDENTIFIER
variable_test  → IDENTIFIER [ ("==" | "!=") STRING | "has" STRING ]
"""

from __future__ import annotations

from typing import List

from .lexer import ConditionLexer, ConditionSyntaxError, Token
from .model import (
    BinaryCondition,
    ComparisonCondition,
    Condition,
    ConditionType,
    GroupCondition,
    MembershipCondition,
    NotCondition,
    VariableCondition,
)


class ConditionParser:
    """
    Парсер условных выражений с рекурсивным спуском.

    Рекурсия идёт только по скобкам: цепочки not, and и or разбираются
    циклами. Слишком глубокие скобки дают ConditionSyntaxError.
    """

    def __init__(self):
        self.lexer = ConditionLexer()
        self._tokens: List[Token] = []
        self._position = 0

    def parse(self, condition_str: str) -> Condition:
        """
        Парсит строку условия в AST.

        Args:
            condition_str: Строка условного выражения

        Returns:
            Корневой узел AST

        Raises:
            ConditionSyntaxError: При лексической или синтаксической ошибке
        """
        self._tokens = self.lexer.tokenize(condition_str)
        self._position = 0

        if len(self._tokens) == 1:
            raise ConditionSyntaxError("Empty condition", 0)

        try:
            result = self._parse_or_expression()
        except RecursionError:
            raise ConditionSyntaxError("Expression is nested too deeply", 0) from None

        if not self._is_at_end():
            current = self._current_token()
            if current.type == 'SYMBOL' and current.value == ')':
                raise ConditionSyntaxError("Unbalanced ')'", current.position)
            raise ConditionSyntaxError(f"Unexpected token '{current.value}'", current.position)

        return result

    def _parse_or_expression(self) -> Condition:
        """Парсит выражение с оператором or (низший приоритет)."""
        left = self._parse_and_expression()

        while self._match_keyword("or"):
            right = self._parse_and_expression()
            left = BinaryCondition(left=left, right=right, operator=ConditionType.OR)

        return left

    def _parse_and_expression(self) -> Condition:
        """Парсит выражение с оператором and (средний приоритет)."""
        left = self._parse_not_expression()

        while self._match_keyword("and"):
            right = self._parse_not_expression()
            left = BinaryCondition(left=left, right=right, operator=ConditionType.AND)

        return left

    def _parse_not_expression(self) -> Condition:
        """Парсит выражение с оператором not (высокий приоритет)."""
        negations = 0
        while self._match_keyword("not"):
            negations += 1

        condition = self._parse_primary()
        for _ in range(negations):
            condition = NotCondition(condition=condition)
        return condition

    def _parse_primary(self) -> Condition:
        """Парсит первичное выражение (атомарные условия и группы в скобках)."""
        if self._match_symbol("("):
            opening = self._tokens[self._position - 1]
            expr = self._parse_or_expression()
            if not self._match_symbol(")"):
                raise ConditionSyntaxError("Unbalanced '(', expected ')'", opening.position)
            return GroupCondition(condition=expr)

        current = self._current_token()

        # "item" in NAME
        if current.type == 'STRING':
            self._advance()
            if not self._match_keyword("in"):
                raise ConditionSyntaxError("Expected 'in' after string literal", self._current_position())
            name_token = self._consume('IDENTIFIER', "Expected variable name after 'in'")
            return MembershipCondition(name=name_token.value, item=current.value, operator="in")

        if current.type == 'IDENTIFIER':
            self._advance()
            return self._parse_variable_test(current)

        if current.type == 'EOF':
            raise ConditionSyntaxError("Unexpected end of expression", current.position)
        raise ConditionSyntaxError(f"Unexpected token '{current.value}'", current.position)

    def _parse_variable_test(self, name_token: Token) -> Condition:
        """Парсит NAME, NAME == "x", NAME != "x", NAME has "x"."""
        current = self._current_token()

        if current.type == 'OPERATOR':
            self._advance()
            value_token = self._consume('STRING', f"Expected string literal after '{current.value}'")
            operator = ConditionType.EQUALS if current.value == "==" else ConditionType.NOT_EQUALS
            return ComparisonCondition(name=name_token.value, value=value_token.value, operator=operator)

        if self._match_keyword("has"):
            item_token = self._consume('STRING', "Expected string literal after 'has'")
            return MembershipCondition(name=name_token.value, item=item_token.value)

        return VariableCondition(name=name_token.value)

    # Вспомогательные методы для работы с токенами

    def _current_token(self) -> Token:
        """Возвращает текущий токен без продвижения позиции."""
        return self._tokens[min(self._position, len(self._tokens) - 1)]

    def _current_position(self) -> int:
        return self._current_token().position

    def _is_at_end(self) -> bool:
        return self._current_token().type == 'EOF'

    def _advance(self) -> Token:
        """Продвигает позицию и возвращает предыдущий токен."""
        token = self._current_token()
        if not self._is_at_end():
            self._position += 1
        return token

    def _match_keyword(self, keyword: str) -> bool:
        """Проверяет и потребляет ключевое слово."""
        current = self._current_token()
        if current.type == 'KEYWORD' and current.value == keyword:
            self._advance()
            return True
        return False

    def _match_symbol(self, symbol: str) -> bool:
        """Проверяет и потребляет символ."""
        current = self._current_token()
        if current.type == 'SYMBOL' and current.value == symbol:
            self._advance()
            return True
        return False

    def _consume(self, token_type: str, error_message: str) -> Token:
        """Потребляет токен заданного типа или выбрасывает ошибку."""
        current = self._current_token()
        if current.type == token_type:
            return self._advance()
        raise ConditionSyntaxError(error_message, current.position)


def parse_condition(condition_str: str) -> Condition:
    """Удобная функция для разбора одной строки условия."""
    return ConditionParser().parse(condition_str)


__all__ = ["ConditionParser", "parse_condition"]
