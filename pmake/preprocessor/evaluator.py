"""
Renderer for the template AST.

Walks the nodes in order against a read-only ``InterpreterContext``:
text is copied, variables are substituted, and for every conditional
block only the first branch whose condition holds is rendered.
Conditions of later branches are not evaluated at all.
"""

from __future__ import annotations

from typing import Iterator, List, Optional

from .conditions.evaluator import ConditionEvaluator
from .context import InterpreterContext, render_value
from .errors import EvaluationError, undefined_variable
from .nodes import ConditionalNode, TemplateAST, TemplateNode, TextNode, VariableNode


class TemplateEvaluator:
    """
    Produces the output text of one template.

    Nested bodies are walked with an explicit stack of iterators, matching
    the parser, so rendering depth is independent of template nesting.
    """

    def __init__(self, context: InterpreterContext, file: Optional[str] = None):
        self.context = context
        self.file = file
        self._conditions = ConditionEvaluator(context)

    def render(self, ast: TemplateAST) -> str:
        """
        Raises:
            EvaluationError: undefined variable or operator/value type mismatch,
                located at the offending marker
        """
        parts: List[str] = []
        stack: List[Iterator[TemplateNode]] = [iter(ast)]

        while stack:
            node = next(stack[-1], None)
            if node is None:
                stack.pop()
                continue

            if isinstance(node, TextNode):
                parts.append(node.text)
            elif isinstance(node, VariableNode):
                parts.append(self._render_variable(node))
            elif isinstance(node, ConditionalNode):
                body = self._select_body(node)
                if body:
                    stack.append(iter(body))
            else:
                raise TypeError(f"Unknown node type: {type(node).__name__}")

        return "".join(parts)

    def _render_variable(self, node: VariableNode) -> str:
        value = self.context.lookup(node.name)
        if value is None:
            raise undefined_variable(node.name).located(self.file, node.line, node.column)
        return render_value(value)

    def _select_body(self, node: ConditionalNode) -> TemplateAST:
        for branch in node.branches:
            try:
                matched = self._conditions.evaluate(branch.condition)
            except EvaluationError as e:
                raise e.located(self.file, branch.line, branch.column) from None
            if matched:
                return branch.body

        if node.else_body is not None:
            return node.else_body
        return ()


def render_template(ast: TemplateAST, context: InterpreterContext, file: Optional[str] = None) -> str:
    """Convenience wrapper around ``TemplateEvaluator``."""
    return TemplateEvaluator(context, file).render(ast)


__all__ = ["TemplateEvaluator", "render_template"]
