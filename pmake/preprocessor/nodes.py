"""
AST-узлы шаблона.

Закрытый набор узлов: текст, ссылка на переменную и условный блок
с цепочкой веток if/elif и необязательной веткой else.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple, Union

from .conditions.model import Condition


@dataclass(frozen=True)
class TextNode:
    """Статический текст, выводится как есть."""
    text: str


@dataclass(frozen=True)
class VariableNode:
    """Ссылка {{ NAME }}; позиция нужна для диагностики."""
    name: str
    line: int
    column: int


@dataclass(frozen=True)
class Branch:
    """
    Одна ветка условного блока ({% if %} или {% elif %}).

    Ветки проверяются в порядке следования в исходном тексте.
    """
    condition_text: str  # Исходный текст условия
    condition: Condition
    body: Tuple["TemplateNode", ...]
    line: int
    column: int


@dataclass(frozen=True)
class ConditionalNode:
    """
    Условный блок {% if %}...{% elif %}...{% else %}...{% endif %}.

    Строится парсером только из согласованной цепочки директив.
    """
    branches: Tuple[Branch, ...]
    else_body: Optional[Tuple["TemplateNode", ...]] = None


TemplateNode = Union[TextNode, VariableNode, ConditionalNode]

# Тип для корня шаблона
TemplateAST = Tuple[TemplateNode, ...]


def format_ast_tree(ast: TemplateAST, indent: int = 0) -> str:
    """Форматирует AST как дерево для отладки."""
    lines = []
    prefix = "  " * indent

    for node in ast:
        if isinstance(node, TextNode):
            text_preview = repr(node.text[:50] + "..." if len(node.text) > 50 else node.text)
            lines.append(f"{prefix}TextNode({text_preview})")
        elif isinstance(node, VariableNode):
            lines.append(f"{prefix}VariableNode({node.name})")
        elif isinstance(node, ConditionalNode):
            for i, branch in enumerate(node.branches):
                keyword = "if" if i == 0 else "elif"
                lines.append(f"{prefix}{keyword} {branch.condition}:")
                if branch.body:
                    lines.append(format_ast_tree(branch.body, indent + 1))
            if node.else_body is not None:
                lines.append(f"{prefix}else:")
                if node.else_body:
                    lines.append(format_ast_tree(node.else_body, indent + 1))

    return "\n".join(lines)


__all__ = [
    "TextNode",
    "VariableNode",
    "Branch",
    "ConditionalNode",
    "TemplateNode",
    "TemplateAST",
    "format_ast_tree",
]
