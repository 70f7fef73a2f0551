"""
Лексер для разбора условных выражений.

Выполняет токенизацию строки условия, разбивая её на значимые элементы:
- Ключевые слова (and, or, not, has, in; в нижнем или верхнем регистре)
- Идентификаторы (имена переменных, в том числе с пространством имён: ENV:LANGUAGE)
- Строковые литералы в двойных или одинарных кавычках
- Операторы сравнения (==, !=) и скобки
- Пробелы (игнорируются)
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import List


class ConditionSyntaxError(Exception):
    """Ошибка разбора условного выражения."""

    def __init__(self, message: str, position: int):
        self.message = message
        self.position = position
        super().__init__(f"{message} at position {position}")


@dataclass
class Token:
    """
    Токен для парсинга условий.

    Attributes:
        type: Тип токена (KEYWORD, IDENTIFIER, STRING, OPERATOR, SYMBOL, EOF)
        value: Значение токена (для STRING уже без кавычек и экранирования)
        position: Позиция в исходной строке
    """
    type: str
    value: str
    position: int

    def __repr__(self):
        return f"Token({self.type}, '{self.value}', pos={self.position})"


class ConditionLexer:
    """
    Лексер для разбиения строки условия на токены.
    """

    # Спецификация токенов: (regex_pattern, token_type, ignore_flag)
    TOKEN_SPECS = [
        # Пробелы, табуляция и переводы строк (игнорируем)
        (r'\s+', 'WHITESPACE', True),

        # Строки с поддержкой экранирования кавычки и обратного слеша
        (r'"(?:[^"\\]|\\.)*"', 'STRING', False),
        (r"'(?:[^'\\]|\\.)*'", 'STRING', False),

        # Операторы сравнения
        (r'==|!=', 'OPERATOR', False),

        # Скобки
        (r'\(', 'SYMBOL', False),
        (r'\)', 'SYMBOL', False),

        # Идентификаторы с необязательными сегментами пространства имён
        (r'[A-Za-z_][A-Za-z0-9_-]*(?::[A-Za-z_][A-Za-z0-9_-]*)*', 'IDENTIFIER', False),

        # Неизвестный символ (ошибка)
        (r'.', 'UNKNOWN', False),
    ]

    KEYWORDS = {'and', 'or', 'not', 'has', 'in'}

    _ESCAPE = re.compile(r'\\(.)', re.DOTALL)

    def __init__(self):
        self._compiled_patterns = [
            (re.compile(pattern, re.DOTALL), token_type, ignore)
            for pattern, token_type, ignore in self.TOKEN_SPECS
        ]

    def tokenize(self, text: str) -> List[Token]:
        """
        Разбивает строку на токены.

        Args:
            text: Строка условия для разбора

        Returns:
            Список токенов, включая EOF в конце

        Raises:
            ConditionSyntaxError: При обнаружении неизвестного символа
                или незакрытой строки
        """
        tokens: List[Token] = []
        position = 0

        while position < len(text):
            for pattern, token_type, ignore in self._compiled_patterns:
                match = pattern.match(text, position)
                if not match:
                    continue

                value = match.group(0)
                if not ignore:
                    tokens.append(self._make_token(token_type, value, position))
                position = match.end()
                break

        tokens.append(Token(type='EOF', value='', position=position))
        return tokens

    def _make_token(self, token_type: str, value: str, position: int) -> Token:
        if token_type == 'UNKNOWN':
            if value in ('"', "'"):
                raise ConditionSyntaxError("Unterminated string literal", position)
            if value in ('=', '!', '<', '>'):
                raise ConditionSyntaxError(f"Unknown operator '{value}'", position)
            raise ConditionSyntaxError(f"Unexpected character '{value}'", position)

        if token_type == 'STRING':
            return Token(type='STRING', value=self._ESCAPE.sub(r'\1', value[1:-1]), position=position)

        # Ключевые слова допускаются только целиком в одном регистре: and / AND
        if token_type == 'IDENTIFIER':
            lowered = value.lower()
            if lowered in self.KEYWORDS and value in (lowered, value.upper()):
                return Token(type='KEYWORD', value=lowered, position=position)

        return Token(type=token_type, value=value, position=position)


__all__ = ["ConditionLexer", "ConditionSyntaxError", "Token"]
