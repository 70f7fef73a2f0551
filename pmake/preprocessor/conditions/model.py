"""
Модели данных для системы условий.

Содержит классы для представления условий в директивах {% if %} / {% elif %}.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Union


class ConditionType(Enum):
    """Типы условий в системе."""
    VARIABLE = "variable"
    EQUALS = "equals"
    NOT_EQUALS = "not_equals"
    CONTAINS = "contains"
    AND = "and"
    OR = "or"
    NOT = "not"
    GROUP = "group"  # для явной группировки в скобках


def _quote(value: str) -> str:
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


@dataclass(frozen=True)
class Condition(ABC):
    """Базовый абстрактный класс для всех условий."""

    @abstractmethod
    def get_type(self) -> ConditionType:
        """Возвращает тип условия."""
        pass

    def __str__(self) -> str:
        """Строковое представление условия."""
        return self._to_string()

    @abstractmethod
    def _to_string(self) -> str:
        """Внутренний метод для создания строкового представления."""
        pass


@dataclass(frozen=True)
class VariableCondition(Condition):
    """
    Истинность переменной: NAME

    Скаляр ложен, если он пуст или равен false/0/no/off,
    список ложен, если он пуст.
    """
    name: str

    def get_type(self) -> ConditionType:
        return ConditionType.VARIABLE

    def _to_string(self) -> str:
        return self.name


@dataclass(frozen=True)
class ComparisonCondition(Condition):
    """
    Сравнение скалярной переменной со строкой: NAME == "value" / NAME != "value"
    """
    name: str
    value: str
    operator: ConditionType  # EQUALS или NOT_EQUALS

    def get_type(self) -> ConditionType:
        return self.operator

    def _to_string(self) -> str:
        op_str = "==" if self.operator == ConditionType.EQUALS else "!="
        return f"{self.name} {op_str} {_quote(self.value)}"


@dataclass(frozen=True)
class MembershipCondition(Condition):
    """
    Проверка вхождения строки в список: NAME has "item" / "item" in NAME

    Сравнение точное, без поиска подстрок. Обе формы равны,
    operator хранит написание для сообщений и __str__.
    """
    name: str
    item: str
    operator: str = field(default="has", compare=False)  # "has" или "in"

    def get_type(self) -> ConditionType:
        return ConditionType.CONTAINS

    def _to_string(self) -> str:
        if self.operator == "in":
            return f"{_quote(self.item)} in {self.name}"
        return f"{self.name} has {_quote(self.item)}"


@dataclass(frozen=True)
class GroupCondition(Condition):
    """
    Группа условий в скобках: (condition)
    """
    condition: Condition

    def get_type(self) -> ConditionType:
        return ConditionType.GROUP

    def _to_string(self) -> str:
        return f"({self.condition})"


@dataclass(frozen=True)
class NotCondition(Condition):
    """
    Отрицание условия: not condition
    """
    condition: Condition

    def get_type(self) -> ConditionType:
        return ConditionType.NOT

    def _to_string(self) -> str:
        negations = 0
        inner: Condition = self
        while isinstance(inner, NotCondition):
            negations += 1
            inner = inner.condition
        return "not " * negations + str(inner)


@dataclass(frozen=True)
class BinaryCondition(Condition):
    """
    Бинарная операция: left op right

    Поддерживаемые операторы:
    - AND: истинно, если оба операнда истинны
    - OR: истинно, если хотя бы один операнд истинен
    """
    left: Condition
    right: Condition
    operator: ConditionType  # AND или OR

    def get_type(self) -> ConditionType:
        return self.operator

    def _to_string(self) -> str:
        op_str = "and" if self.operator == ConditionType.AND else "or"
        # левоассоциативная цепочка собирается без рекурсии
        parts = []
        node: Condition = self
        while isinstance(node, BinaryCondition) and node.operator == self.operator:
            parts.append(str(node.right))
            node = node.left
        parts.append(str(node))
        return f" {op_str} ".join(reversed(parts))


# Объединенный тип для всех условий
AnyCondition = Union[
    VariableCondition,
    ComparisonCondition,
    MembershipCondition,
    GroupCondition,
    NotCondition,
    BinaryCondition,
]

__all__ = [
    "Condition",
    "ConditionType",
    "VariableCondition",
    "ComparisonCondition",
    "MembershipCondition",
    "GroupCondition",
    "NotCondition",
    "BinaryCondition",
    "AnyCondition",
]
