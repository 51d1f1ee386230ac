"""
Serialization helpers for output trees.

Output trees are plain data except for ``UNDEFINED`` (array holes),
numbers JSON cannot spell (NaN, the infinities, negative zero) and
fallback nodes (constructs that were left unevaluated). ``tree_to_data``
replaces those with JSON-clean equivalents the way ``JSON.stringify``
does, so a tree can always be written as strict JSON or YAML.
"""
from __future__ import annotations

import json
import math
from typing import Any, Dict

import yaml

from jsx2json.expressions import (
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
from jsx2json.markup import (
    Element,
    Fragment,
    MarkupNode,
    Text,
    UnrecognizedMarkup,
)


def expr_to_dict(expr: Expression | None) -> Any:
    if expr is None:
        return None
    if isinstance(expr, Literal):
        return {"type": "Literal", "value": expr.value}
    if isinstance(expr, ExpressionContainer):
        return {"type": "ExpressionContainer", "expression": expr_to_dict(expr.expression)}
    if isinstance(expr, ArrayLiteral):
        return {"type": "ArrayLiteral", "elements": [expr_to_dict(e) for e in expr.elements]}
    if isinstance(expr, TemplateLiteral):
        return {
            "type": "TemplateLiteral",
            "expressions": [expr_to_dict(e) for e in expr.expressions],
            "quasis": [q.raw for q in expr.quasis],
        }
    if isinstance(expr, ObjectLiteral):
        return {
            "type": "ObjectLiteral",
            "properties": [
                {"key": expr_to_dict(p.key), "value": expr_to_dict(p.value)}
                for p in expr.properties
            ],
        }
    if isinstance(expr, Identifier):
        return {"type": "Identifier", "name": expr.name}
    if isinstance(expr, BinaryExpression):
        return {
            "type": "BinaryExpression",
            "operator": expr.operator,
            "left": expr_to_dict(expr.left),
            "right": expr_to_dict(expr.right),
        }
    if isinstance(expr, UnaryExpression):
        return {
            "type": "UnaryExpression",
            "operator": expr.operator,
            "operand": expr_to_dict(expr.operand),
        }
    if isinstance(expr, MarkupExpression):
        return {"type": "MarkupExpression", "element": markup_to_dict(expr.element)}
    if isinstance(expr, Unrecognized):
        return {"type": "Unrecognized", "kind": expr.kind, "raw": expr.raw}
    raise TypeError(f"Unsupported Expression type: {type(expr)}")


def markup_to_dict(node: MarkupNode) -> Dict[str, Any]:
    if isinstance(node, Element):
        return {
            "type": "Element",
            "tag_name": node.tag_name,
            "attributes": [
                {"name": a.name, "value": expr_to_dict(a.value)} for a in node.attributes
            ],
            "children": [markup_to_dict(c) for c in node.children],
        }
    if isinstance(node, Fragment):
        return {"type": "Fragment", "children": [markup_to_dict(c) for c in node.children]}
    if isinstance(node, Text):
        return {"type": "Text", "raw": node.raw}
    if isinstance(node, UnrecognizedMarkup):
        return {"type": "UnrecognizedMarkup", "kind": node.kind, "raw": node.raw}
    raise TypeError(f"Unsupported MarkupNode type: {type(node)}")


def tree_to_data(tree: Any) -> Any:
    """Replace UNDEFINED, non-finite numbers and fallback nodes so the tree is JSON-clean."""
    if tree is UNDEFINED:
        return None
    if isinstance(tree, float):
        if not math.isfinite(tree):
            return None
        if tree == 0:
            return 0
    if isinstance(tree, Expression):
        return expr_to_dict(tree)
    if isinstance(tree, MarkupNode):
        return markup_to_dict(tree)
    if isinstance(tree, list):
        return [tree_to_data(item) for item in tree]
    if isinstance(tree, dict):
        return {key: tree_to_data(value) for key, value in tree.items()}
    return tree


def tree_to_json(tree: Any, indent: int | None = None) -> str:
    return json.dumps(tree_to_data(tree), indent=indent, ensure_ascii=False, allow_nan=False)


def tree_to_yaml(tree: Any) -> str:
    return yaml.safe_dump(tree_to_data(tree), allow_unicode=True, sort_keys=False)
