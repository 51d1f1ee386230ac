"""
Expression Evaluator: constant folding of embedded expressions.

Turns an expression node into the value it statically denotes:
    - Literals, arrays, objects and template strings are built directly
    - Operators are applied with the host's coercion rules
    - Identifiers degrade to their own name (bindings are never resolved)
    - Markup in expression position is handed back to the node converter

Anything else is reported to the diagnostic sink and returned unevaluated.
Evaluation never raises.
"""

from __future__ import annotations

from operator import itemgetter
from typing import Any, Callable, Dict, Optional

from .coercion import BINARY_OPERATORS, UNARY_OPERATORS, to_string
from .diagnostics import DiagnosticSink, ignore
from .expressions import (
    UNDEFINED,
    ArrayLiteral,
    BinaryExpression,
    Expression,
    ExpressionContainer,
    Identifier,
    Literal,
    MarkupExpression,
    ObjectLiteral,
    TemplateLiteral,
    UnaryExpression,
    Unrecognized,
)


class ExpressionEvaluator:
    """
    Evaluates expression nodes.

    Args:
        convert_markup: Callback used for markup in expression position
                        (normally ``NodeConverter.convert_node``)
        on_diagnostic: Sink for unsupported constructs
    """

    def __init__(
        self,
        convert_markup: Callable[[Any], Any],
        on_diagnostic: Optional[DiagnosticSink] = None,
    ) -> None:
        self._convert_markup = convert_markup
        self._report = on_diagnostic or ignore

    def evaluate(self, node: Optional[Expression]) -> Any:
        """
        Return the value of ``node``.

        ``None`` stands for an attribute written without a value and
        evaluates to ``True``.
        """
        if node is None:
            return True

        if isinstance(node, Literal):
            return node.value

        if isinstance(node, ExpressionContainer):
            return self.evaluate(node.expression)

        if isinstance(node, ArrayLiteral):
            return [
                UNDEFINED if element is None else self.evaluate(element)
                for element in node.elements
            ]

        if isinstance(node, TemplateLiteral):
            return self._evaluate_template(node)

        if isinstance(node, ObjectLiteral):
            return self._evaluate_object(node)

        if isinstance(node, Identifier):
            return node.name

        if isinstance(node, BinaryExpression):
            return self._evaluate_binary(node)

        if isinstance(node, UnaryExpression):
            return self._evaluate_unary(node)

        if isinstance(node, MarkupExpression):
            return self._convert_markup(node.element)

        if isinstance(node, Unrecognized):
            self._report(f"{node.kind} is not supported")
        else:
            self._report(f"{type(node).__name__} is not supported")
        return node

    def _evaluate_template(self, node: TemplateLiteral) -> str:
        parts = [(quasi.start, quasi.raw) for quasi in node.quasis]
        parts.extend(
            (expression.start, to_string(self.evaluate(expression)))
            for expression in node.expressions
        )
        parts.sort(key=itemgetter(0))
        return "".join(text for _, text in parts)

    def _evaluate_object(self, node: ObjectLiteral) -> Dict[str, Any]:
        entries: Dict[str, Any] = {}
        for prop in node.properties:
            key = self.evaluate(prop.key)
            # an unfolded key (spread, method, ...) has already been reported
            if key is UNDEFINED or isinstance(key, Expression):
                continue
            value = self.evaluate(prop.value)
            if value is UNDEFINED:
                continue
            entries[to_string(key)] = value
        return entries

    def _evaluate_binary(self, node: BinaryExpression) -> Any:
        apply = BINARY_OPERATORS.get(node.operator)
        if apply is None:
            self._report(f'BinaryExpression with "{node.operator}" is not supported')
            return node
        left = self.evaluate(node.left)
        right = self.evaluate(node.right)
        try:
            return apply(left, right)
        except ArithmeticError as e:
            self._report(f'BinaryExpression with "{node.operator}" failed: {e}')
            return node

    def _evaluate_unary(self, node: UnaryExpression) -> Any:
        apply = UNARY_OPERATORS.get(node.operator)
        if apply is None:
            self._report(f'UnaryExpression with "{node.operator}" is not supported')
            return node.operand
        operand = self.evaluate(node.operand)
        try:
            return apply(operand)
        except ArithmeticError as e:
            self._report(f'UnaryExpression with "{node.operator}" failed: {e}')
            return node


__all__ = ["ExpressionEvaluator"]
