"""
Markup nodes for jsx2json

Defines the structural side of a parsed document:
    - Elements (tag, attributes, children)
    - Fragments (``<>...</>``)
    - Text spans
    - Anything else the parser produced (kept for diagnostics)

These are pure data classes. Converting them to the output tree is the
job of ``jsx2json.converter``.
"""

from __future__ import annotations

from abc import ABC
from dataclasses import dataclass
from typing import Optional, Tuple

from .expressions import Expression


class MarkupNode(ABC):
    """Base class for all markup nodes."""
    pass


@dataclass(frozen=True)
class Attribute:
    """
    One attribute as written on an element.

    Properties:
        name: Attribute name exactly as written (case preserved)
        value: Value expression, or None for an attribute written
               without a value (``<input disabled />``)
    """

    name: str
    value: Optional[Expression] = None


@dataclass(frozen=True)
class Element(MarkupNode):
    """
    A markup element.

    Example:
        <div id="a">hi</div>

    Becomes:
        Element(
            tag_name="div",
            attributes=(Attribute("id", Literal("a")),),
            children=(Text("hi"),)
        )

    Self-closing elements have no children.
    """

    tag_name: str
    attributes: Tuple[Attribute, ...] = ()
    children: Tuple[MarkupNode, ...] = ()


@dataclass(frozen=True)
class Fragment(MarkupNode):
    """A fragment ``<>...</>``: children without a wrapping element."""

    children: Tuple[MarkupNode, ...] = ()


@dataclass(frozen=True)
class Text(MarkupNode):
    """Literal text between tags, whitespace kept verbatim."""

    raw: str


@dataclass(frozen=True)
class UnrecognizedMarkup(MarkupNode):
    """
    A child the converter does not handle, such as an expression
    container between tags (``<p>{count}</p>``).
    """

    kind: str
    raw: str = ""


@dataclass(frozen=True)
class Program:
    """
    Top level of a parsed source.

    Properties:
        body: One expression per top-level statement, in order
    """

    body: Tuple[Expression, ...] = ()
