"""
Expression nodes for jsx2json

Embedded expressions (attribute values, template interpolations, nested
markup in expression position) are adapted from the parser's tree into
these immutable nodes before anything evaluates them.

ARCHITECTURAL RULE:
    Nodes are structure only.
    Folding constants belongs to the evaluator.
    Reading parser objects belongs to the parser adapter.
"""

from __future__ import annotations

from abc import ABC
from dataclasses import dataclass, field
from typing import Any, Optional, Tuple


class _Undefined:
    """
    The host language's ``undefined`` value.

    Distinct from ``None`` (which stands for ``null``). There is exactly
    one instance, ``UNDEFINED``.
    """

    _instance: Optional["_Undefined"] = None

    def __new__(cls) -> "_Undefined":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNDEFINED"

    def __bool__(self) -> bool:
        return False


UNDEFINED = _Undefined()


@dataclass(frozen=True)
class Expression(ABC):
    """
    Base class for all expression nodes.

    Properties:
        start: Source offset of the node. Only used to order template
               segments, so it does not take part in equality.
    """

    start: int = field(default=0, kw_only=True, compare=False)


@dataclass(frozen=True)
class Literal(Expression):
    """
    A literal constant: string, number, boolean or null (``None``).

    Example:
        title="Hello"   ->  Literal("Hello")
        {42}            ->  ExpressionContainer(Literal(42))
    """

    value: Any


@dataclass(frozen=True)
class ExpressionContainer(Expression):
    """The braces around an embedded expression: ``{expression}``."""

    expression: Expression


@dataclass(frozen=True)
class ArrayLiteral(Expression):
    """
    An array literal.

    A hole (``[1, , 2]``) is stored as ``None`` in ``elements``.
    """

    elements: Tuple[Optional[Expression], ...] = ()


@dataclass(frozen=True)
class TemplateElement:
    """One literal text segment of a template literal."""

    raw: str
    start: int = 0


@dataclass(frozen=True)
class TemplateLiteral(Expression):
    """
    A template literal such as `a${1 + 1}b`.

    Properties:
        expressions: Interpolated expressions, in source order
        quasis: Literal text segments, in source order

    Segments and expressions are interleaved by their ``start`` offsets.
    """

    expressions: Tuple[Expression, ...] = ()
    quasis: Tuple[TemplateElement, ...] = ()


@dataclass(frozen=True)
class Property:
    """A ``key: value`` member of an object literal."""

    key: Expression
    value: Expression


@dataclass(frozen=True)
class ObjectLiteral(Expression):
    """An object literal ``{a: 1, "b": 2, [c]: 3}``."""

    properties: Tuple[Property, ...] = ()


@dataclass(frozen=True)
class Identifier(Expression):
    """
    A bare name.

    IMPORTANT:
        Bindings are never resolved. An identifier evaluates to its
        own name as text.
    """

    name: str


@dataclass(frozen=True)
class BinaryExpression(Expression):
    """
    A binary operator application.

    Example:
        1 + 2

    Becomes:
        BinaryExpression(operator="+", left=Literal(1), right=Literal(2))
    """

    operator: str
    left: Expression
    right: Expression


@dataclass(frozen=True)
class UnaryExpression(Expression):
    """A prefix operator application, e.g. ``-x`` or ``~3``."""

    operator: str
    operand: Expression


@dataclass(frozen=True)
class MarkupExpression(Expression):
    """Markup in expression position, e.g. ``icon={<Icon />}``."""

    element: Any


@dataclass(frozen=True)
class Unrecognized(Expression):
    """
    Any construct outside the supported subset (calls, member access,
    arrow functions, ...).

    Properties:
        kind: Parser node type
        raw: Source text of the construct
    """

    kind: str
    raw: str = ""
