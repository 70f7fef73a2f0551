"""
Условные выражения директив {% if %} / {% elif %}.
"""

from .evaluator import ConditionEvaluator, evaluate_condition_string
from .lexer import ConditionLexer, ConditionSyntaxError
from .model import Condition, ConditionType
from .parser import ConditionParser, parse_condition

__all__ = [
    "Condition",
    "ConditionType",
    "ConditionLexer",
    "ConditionParser",
    "ConditionEvaluator",
    "ConditionSyntaxError",
    "parse_condition",
    "evaluate_condition_string",
]
