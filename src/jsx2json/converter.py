"""
Node Converter and entry point.

Converts markup into plain, JSON-serializable trees:

    <div className="a" id={1 + 2}>hi</div>

Becomes:

    ["div", {"className": "a", "id": 3}, "hi"]

Elements become ``[tag, attributes, *children]``, fragments
``["Fragment", None, *children]`` and text stays a string. Attribute
values are folded by the expression evaluator.
"""

from __future__ import annotations

import json
from typing import Any, Callable, Dict, List, Optional

from .diagnostics import DiagnosticSink, ignore
from .evaluator import ExpressionEvaluator
from .expressions import UNDEFINED, MarkupExpression
from .jsx_parser import MarkupParseError, parse_program
from .markup import Element, Fragment, MarkupNode, Text
from .styles import parse_style
from .tables import is_html_or_svg_tag, standard_attribute_name

ROOT_TAG = "root"
FRAGMENT_TAG = "Fragment"


class InvalidArgumentError(TypeError):
    """Raised when the input to ``convert`` is not a string."""
    pass


class JSXSyntaxError(SyntaxError):
    """
    Raised when the input cannot be parsed.

    The message is a JSON document so callers can recover the position
    programmatically:

        {"location": {"line": 1, "column": 5},
         "validationError": "Could not parse \\"<div>\\""}

    The location points into the text passed to ``convert``, not into the
    ``<root>``-wrapped text handed to the parser: the wrapper's prefix is
    subtracted, so an error on the first line reports the column a caller
    sees in its own input.

    Properties:
        location: {"line": 1-based, "column": 0-based} or None
        validation_error: Human-readable message
        payload: The decoded message as a dict
    """

    def __init__(self, location: Optional[Dict[str, int]], validation_error: str) -> None:
        self.location = location
        self.validation_error = validation_error
        self.payload = {"location": location, "validationError": validation_error}
        super().__init__(json.dumps(self.payload))


class NodeConverter:
    """
    Converts markup nodes into output trees.

    Args:
        parse_style: Converts a style string into a mapping
        is_known_tag: Decides (for a lowercased tag) whether attribute
                      names get normalized
        standard_name: Maps a lowercased attribute name to its canonical
                       name, or returns None
        on_diagnostic: Sink for unsupported constructs (default: ignore)
    """

    def __init__(
        self,
        parse_style: Callable[[str], Dict[str, str]] = parse_style,
        is_known_tag: Callable[[str], bool] = is_html_or_svg_tag,
        standard_name: Callable[[str], Optional[str]] = standard_attribute_name,
        on_diagnostic: Optional[DiagnosticSink] = None,
    ) -> None:
        self._parse_style = parse_style
        self._is_known_tag = is_known_tag
        self._standard_name = standard_name
        self._report = on_diagnostic or ignore
        self.evaluator = ExpressionEvaluator(self.convert_node, on_diagnostic=self._report)

    def convert_node(self, node: MarkupNode) -> Any:
        if isinstance(node, Fragment):
            return [FRAGMENT_TAG, None] + [self.convert_node(child) for child in node.children]

        if isinstance(node, Element):
            return [node.tag_name, self._attributes(node)] + [
                self.convert_node(child) for child in node.children
            ]

        if isinstance(node, Text):
            return node.raw

        kind = getattr(node, "kind", type(node).__name__)
        self._report(f"{kind} is not supported")
        return node

    def _attributes(self, element: Element) -> Dict[str, Any]:
        normalize = self._is_known_tag(element.tag_name.lower())
        attributes: Dict[str, Any] = {}
        for attribute in element.attributes:
            name = attribute.name
            if normalize:
                name = self._standard_name(name.lower()) or name

            value = self.evaluator.evaluate(attribute.value)
            if value is UNDEFINED:
                continue
            if name == "style" and isinstance(value, str):
                value = self._parse_style(value)

            # later duplicates overwrite earlier ones
            attributes[name] = value
        return attributes


def _location(source: str, offset: Optional[int]) -> Optional[Dict[str, int]]:
    """Line (1-based) and column (0-based) of ``offset`` within ``source``."""
    if offset is None:
        return None
    offset = max(0, min(len(source), offset))
    before = source[:offset]
    line = before.count("\n") + 1
    column = offset - (before.rfind("\n") + 1)
    return {"line": line, "column": column}


def convert(
    source: str,
    on_diagnostic: Optional[DiagnosticSink] = None,
    converter: Optional[NodeConverter] = None,
) -> List[Any]:
    """
    Convert markup source into a list of output trees.

    Args:
        source: Markup text, e.g. '<p class="x">Hi</p>'
        on_diagnostic: Sink for unsupported constructs
                       (ignored when ``converter`` is given)
        converter: Preconfigured NodeConverter

    Returns:
        One output tree per top-level node, falsy results removed

    Raises:
        InvalidArgumentError: If source is not a string
        JSXSyntaxError: If source cannot be parsed
    """
    if not isinstance(source, str):
        raise InvalidArgumentError("Expected a string")

    prefix = f"<{ROOT_TAG}>"
    try:
        program = parse_program(f"{prefix}{source}</{ROOT_TAG}>")
    except MarkupParseError as e:
        offset = None if e.offset is None else e.offset - len(prefix)
        raise JSXSyntaxError(
            location=_location(source, offset),
            validation_error=f'Could not parse "{source}"',
        ) from e

    if not program.body:
        return []

    root = program.body[0]
    if not isinstance(root, MarkupExpression) or not isinstance(root.element, Element):
        return []

    if converter is None:
        converter = NodeConverter(on_diagnostic=on_diagnostic)
    children = (converter.convert_node(child) for child in root.element.children)
    return [child for child in children if child]


__all__ = [
    "FRAGMENT_TAG",
    "InvalidArgumentError",
    "JSXSyntaxError",
    "NodeConverter",
    "convert",
]
