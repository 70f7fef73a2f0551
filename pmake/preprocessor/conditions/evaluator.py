"""
Вычислитель условных выражений.

Проходит по AST условий и вычисляет их значения в контексте переменных.
"""

from __future__ import annotations

from typing import List, Union, cast

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
from ..context import InterpreterContext, ListValue, Scalar, Value
from ..errors import EvaluationError, EvaluationErrorKind, undefined_variable

# Скалярные значения, которые считаются ложными в проверке истинности
FALSE_LITERALS = frozenset({"", "false", "0", "no", "off"})


class ConditionEvaluator:
    """
    Вычислитель условных выражений.

    Принимает AST условия и контекст переменных, возвращает булево значение.
    Побочных эффектов нет: один и тот же контекст даёт один и тот же результат.
    """

    def __init__(self, context: InterpreterContext):
        self.context = context

    def evaluate(self, condition: Condition) -> bool:
        """
        Вычисляет значение условия.

        Raises:
            EvaluationError: Неизвестная переменная или несовпадение типа
                (список там, где ожидается скаляр, и наоборот)
        """
        # not и скобки снимаются циклом, длинная цепочка not не растит стек
        negate = False
        while condition.get_type() in (ConditionType.NOT, ConditionType.GROUP):
            if condition.get_type() == ConditionType.NOT:
                negate = not negate
            condition = cast(Union[NotCondition, GroupCondition], condition).condition

        return self._evaluate_operand(condition) != negate

    def _evaluate_operand(self, condition: Condition) -> bool:
        condition_type = condition.get_type()

        if condition_type == ConditionType.VARIABLE:
            return self._evaluate_variable(cast(VariableCondition, condition))
        elif condition_type in (ConditionType.EQUALS, ConditionType.NOT_EQUALS):
            return self._evaluate_comparison(cast(ComparisonCondition, condition))
        elif condition_type == ConditionType.CONTAINS:
            return self._evaluate_membership(cast(MembershipCondition, condition))
        elif condition_type in (ConditionType.AND, ConditionType.OR):
            return self._evaluate_chain(cast(BinaryCondition, condition))
        else:
            raise TypeError(f"Unknown condition type: {condition_type}")

    def _resolve(self, name: str) -> Value:
        value = self.context.lookup(name)
        if value is None:
            raise undefined_variable(name)
        return value

    def _resolve_scalar(self, name: str, operator: str) -> Scalar:
        value = self._resolve(name)
        if isinstance(value, tuple):
            raise EvaluationError(
                EvaluationErrorKind.TYPE_MISMATCH,
                f"'{operator}' expects a scalar, but '{name}' is a list",
                name=name,
            )
        return value

    def _resolve_list(self, name: str, operator: str) -> ListValue:
        value = self._resolve(name)
        if not isinstance(value, tuple):
            raise EvaluationError(
                EvaluationErrorKind.TYPE_MISMATCH,
                f"'{operator}' expects a list, but '{name}' is a scalar",
                name=name,
            )
        return value

    def _evaluate_variable(self, condition: VariableCondition) -> bool:
        value = self._resolve(condition.name)
        if isinstance(value, tuple):
            return bool(value)
        return value.strip().lower() not in FALSE_LITERALS

    def _evaluate_comparison(self, condition: ComparisonCondition) -> bool:
        if condition.operator == ConditionType.EQUALS:
            return self._resolve_scalar(condition.name, "==") == condition.value
        return self._resolve_scalar(condition.name, "!=") != condition.value

    def _evaluate_membership(self, condition: MembershipCondition) -> bool:
        return condition.item in self._resolve_list(condition.name, condition.operator)

    def _evaluate_chain(self, condition: BinaryCondition) -> bool:
        """
        Цепочка a and b and c (или a or b or c) с коротким вычислением:
        операнды после решающего не вычисляются (и не могут упасть).

        Парсер строит такие цепочки левоассоциативно, поэтому они
        разворачиваются в список операндов без рекурсии.
        """
        operator = condition.operator
        operands: List[Condition] = []
        node: Condition = condition
        while node.get_type() == operator:
            chain = cast(BinaryCondition, node)
            operands.append(chain.right)
            node = chain.left
        operands.append(node)

        # and останавливается на первом ложном операнде, or на первом истинном
        stop_on = operator == ConditionType.OR
        for operand in reversed(operands):
            if self.evaluate(operand) == stop_on:
                return stop_on
        return not stop_on


def evaluate_condition_string(condition_str: str, context: InterpreterContext) -> bool:
    """
    Удобная функция для вычисления условия из строки.

    Raises:
        ConditionSyntaxError: При ошибке парсинга
        EvaluationError: При ошибке вычисления
    """
    from .parser import ConditionParser

    ast = ConditionParser().parse(condition_str)
    return ConditionEvaluator(context).evaluate(ast)


__all__ = ["ConditionEvaluator", "evaluate_condition_string", "FALSE_LITERALS"]
