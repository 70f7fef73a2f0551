"""
Лексические типы препроцессора шаблонов.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Optional


class TokenType(enum.Enum):
    """Типы токенов в шаблоне."""

    # Текстовый контент
    TEXT = "TEXT"

    # Ссылка на переменную {{ NAME }}
    VARIABLE = "VARIABLE"

    # Директивы {% ... %}
    IF = "IF"
    ELIF = "ELIF"
    ELSE = "ELSE"
    ENDIF = "ENDIF"
    RAW_START = "RAW_START"
    RAW_END = "RAW_END"

    # Комментарий {# ... #}
    COMMENT = "COMMENT"


# Токены, которые считаются самостоятельной строкой, если стоят на ней одни
STANDALONE_TYPES = frozenset({
    TokenType.IF,
    TokenType.ELIF,
    TokenType.ELSE,
    TokenType.ENDIF,
    TokenType.RAW_START,
    TokenType.RAW_END,
    TokenType.COMMENT,
})


@dataclass(frozen=True)
class Token:
    """
    Токен с позиционной информацией для точной диагностики ошибок.

    ``source`` всегда хранит точный фрагмент исходного текста,
    а ``value`` хранит полезную нагрузку: выводимый текст для TEXT,
    имя для VARIABLE, текст условия для IF/ELIF.
    """
    type: TokenType
    value: str
    source: str
    position: int        # Позиция в исходном тексте
    line: int            # Номер строки (начиная с 1)
    column: int          # Номер колонки (начиная с 1)
    depth: int = 0       # Глубина вложенности условных блоков
    file: Optional[str] = None

    def __repr__(self) -> str:
        return f"Token({self.type.name}, {self.value!r}, {self.line}:{self.column})"


__all__ = ["TokenType", "Token", "STANDALONE_TYPES"]
