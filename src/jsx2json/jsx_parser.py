"""
JSX Parser for jsx2json (Layer 1: Source Text -> Node Model).

Parses source text with tree-sitter's JavaScript grammar (which understands
JSX) and adapts the concrete syntax tree into the immutable nodes of
``jsx2json.expressions`` and ``jsx2json.markup``.

Adaptation Notes:
    - Text between tags is taken verbatim from the source, with HTML
      character references decoded
    - JSX attribute strings are entity-decoded; JS strings are unescaped
    - Parentheses are dropped; spread attributes are skipped
    - Anything outside the supported subset becomes ``Unrecognized``
      (expressions) or ``UnrecognizedMarkup`` (children)
    - Mismatched opening/closing tag names are syntax errors
"""

from __future__ import annotations

import html
import re
from typing import List, Optional

from tree_sitter_language_pack import get_parser

from jsx2json.coercion import js_number
from jsx2json.expressions import (
    ArrayLiteral,
    BinaryExpression,
    Expression,
    ExpressionContainer,
    Identifier,
    Literal,
    MarkupExpression,
    ObjectLiteral,
    Property,
    TemplateElement,
    TemplateLiteral,
    UnaryExpression,
    Unrecognized,
)
from jsx2json.markup import (
    Attribute,
    Element,
    Fragment,
    MarkupNode,
    Program,
    Text,
    UnrecognizedMarkup,
)

LANGUAGE = "javascript"

MARKUP_NODE_TYPES = ("jsx_element", "jsx_self_closing_element", "jsx_fragment")
TEXT_NODE_TYPES = ("jsx_text", "html_character_reference")

_ESCAPE_RE = re.compile(r"\\(u\{[0-9a-fA-F]+\}|u[0-9a-fA-F]{4}|x[0-9a-fA-F]{2}|\r\n|[\s\S])")
_SIMPLE_ESCAPES = {
    "n": "\n",
    "t": "\t",
    "r": "\r",
    "b": "\b",
    "f": "\f",
    "v": "\v",
    "0": "\0",
}
_LINE_CONTINUATIONS = ("\n", "\r", "\r\n", "\u2028", "\u2029")
_LEGACY_OCTAL_RE = re.compile(r"^0[0-7]+$")


class MarkupParseError(Exception):
    """
    Raised when source text is not valid markup.

    Properties:
        offset: Character offset of the first error in the parsed text
    """

    def __init__(self, message: str, offset: Optional[int] = None) -> None:
        super().__init__(message)
        self.offset = offset


def unescape_string(raw: str) -> str:
    """
    Resolve JavaScript escape sequences in the body of a string literal.

    Examples:
        'a\\nb'      ->  'a<newline>b'
        '\\u00e9'    ->  'é'
        '\\q'        ->  'q'
    """
    def replace(match: re.Match) -> str:
        sequence = match.group(1)
        if sequence.startswith("u{"):
            return chr(int(sequence[2:-1], 16))
        if len(sequence) > 1 and sequence[0] in "ux":
            return chr(int(sequence[1:], 16))
        if sequence in _LINE_CONTINUATIONS:
            return ""
        return _SIMPLE_ESCAPES.get(sequence, sequence)

    return _ESCAPE_RE.sub(replace, raw)


def parse_number(text: str):
    """
    Parse a numeric literal.

    Handles decimal and exponent forms, 0x/0o/0b prefixes, numeric
    separators, legacy octal (017) and the BigInt suffix (10n).
    Numbers are doubles: integral values within the safe-integer range
    are returned as ``int``, larger ones as ``float``. BigInts stay exact.
    """
    text = text.replace("_", "")
    if text.endswith("n"):
        return int(text[:-1], 0)
    if text[:2].lower() in ("0x", "0o", "0b"):
        return js_number(int(text, 0))
    if _LEGACY_OCTAL_RE.match(text):
        return js_number(int(text, 8))
    if text.isdigit():
        return js_number(int(text))
    return js_number(float(text))


def _named(node) -> List:
    """Named children, without comments."""
    return [child for child in node.named_children if child.type != "comment"]


def _first_named(node):
    children = _named(node)
    return children[0] if children else None


def _first_error(node):
    """Depth-first search for the first ERROR or MISSING node."""
    if node.is_error or node.is_missing:
        return node
    for child in node.children:
        found = _first_error(child)
        if found is not None:
            return found
    return None


class _TreeAdapter:
    """Adapts one tree-sitter tree over ``source`` bytes into the node model."""

    def __init__(self, source: bytes) -> None:
        self._source = source

    def text(self, node) -> str:
        return self.slice(node.start_byte, node.end_byte)

    def slice(self, start: int, end: int) -> str:
        return self._source[start:end].decode("utf-8")

    def offset(self, byte_offset: int) -> int:
        """Character offset for a byte offset."""
        return len(self._source[:byte_offset].decode("utf-8", errors="ignore"))

    def error(self, node, message: str) -> MarkupParseError:
        return MarkupParseError(message, offset=self.offset(node.start_byte))

    # =========================================================================
    # PROGRAM
    # =========================================================================

    def program(self, root) -> Program:
        if root.has_error:
            bad = _first_error(root) or root
            if bad.is_missing:
                raise self.error(bad, f'Missing "{bad.type}"')
            raise self.error(bad, f"Unexpected {self.text(bad)[:40]!r}")

        body = []
        for statement in _named(root):
            if statement.type == "expression_statement":
                expression = _first_named(statement)
                if expression is not None:
                    body.append(self.expression(expression))
                    continue
            body.append(Unrecognized(statement.type, self.text(statement), start=statement.start_byte))
        return Program(body=tuple(body))

    # =========================================================================
    # EXPRESSIONS
    # =========================================================================

    def expression(self, node) -> Expression:
        kind = node.type
        start = node.start_byte

        if kind == "parenthesized_expression":
            inner = _first_named(node)
            if inner is not None:
                return self.expression(inner)

        elif kind == "number":
            return Literal(parse_number(self.text(node)), start=start)

        elif kind == "string":
            return Literal(unescape_string(self.text(node)[1:-1]), start=start)

        elif kind in ("true", "false"):
            return Literal(kind == "true", start=start)

        elif kind == "null":
            return Literal(None, start=start)

        elif kind in ("identifier", "undefined"):
            return Identifier(self.text(node), start=start)

        elif kind == "template_string":
            return self._template(node)

        elif kind == "array":
            return self._array(node)

        elif kind == "object":
            return self._object(node)

        elif kind == "binary_expression":
            return BinaryExpression(
                operator=node.child_by_field_name("operator").type,
                left=self.expression(node.child_by_field_name("left")),
                right=self.expression(node.child_by_field_name("right")),
                start=start,
            )

        elif kind == "unary_expression":
            return UnaryExpression(
                operator=node.child_by_field_name("operator").type,
                operand=self.expression(node.child_by_field_name("argument")),
                start=start,
            )

        elif kind == "jsx_expression":
            inner = _first_named(node)
            if inner is None:
                contents = Unrecognized("jsx_empty_expression", self.text(node), start=start + 1)
            else:
                contents = self.expression(inner)
            return ExpressionContainer(contents, start=start)

        elif kind in MARKUP_NODE_TYPES:
            return MarkupExpression(self.markup(node), start=start)

        return Unrecognized(kind, self.text(node), start=start)

    def _template(self, node) -> TemplateLiteral:
        expressions = []
        quasis = []
        cursor = node.start_byte + 1
        for child in node.children:
            if child.type != "template_substitution":
                continue
            quasis.append(TemplateElement(self.slice(cursor, child.start_byte), start=cursor))
            inner = _first_named(child)
            if inner is None:
                expressions.append(Unrecognized("template_substitution", self.text(child), start=child.start_byte + 2))
            else:
                expressions.append(self.expression(inner))
            cursor = child.end_byte
        quasis.append(TemplateElement(self.slice(cursor, node.end_byte - 1), start=cursor))
        return TemplateLiteral(
            expressions=tuple(expressions),
            quasis=tuple(quasis),
            start=node.start_byte,
        )

    def _array(self, node) -> ArrayLiteral:
        elements: List[Optional[Expression]] = []
        expecting_element = True
        for child in node.children:
            if child.type in ("[", "]", "comment"):
                continue
            if child.type == ",":
                if expecting_element:
                    elements.append(None)
                expecting_element = True
            else:
                elements.append(self.expression(child))
                expecting_element = False
        return ArrayLiteral(elements=tuple(elements), start=node.start_byte)

    def _object(self, node) -> ObjectLiteral:
        properties = []
        for child in _named(node):
            start = child.start_byte
            if child.type == "pair":
                key = self._property_key(child.child_by_field_name("key"))
                value = self.expression(child.child_by_field_name("value"))
            elif child.type == "shorthand_property_identifier":
                name = self.text(child)
                key = Identifier(name, start=start)
                value = Identifier(name, start=start)
            else:
                key = value = Unrecognized(child.type, self.text(child), start=start)
            properties.append(Property(key=key, value=value))
        return ObjectLiteral(properties=tuple(properties), start=node.start_byte)

    def _property_key(self, node) -> Expression:
        if node.type == "property_identifier":
            return Identifier(self.text(node), start=node.start_byte)
        if node.type == "computed_property_name":
            inner = _first_named(node)
            if inner is not None:
                return self.expression(inner)
        if node.type in ("string", "number"):
            return self.expression(node)
        return Unrecognized(node.type, self.text(node), start=node.start_byte)

    # =========================================================================
    # MARKUP
    # =========================================================================

    def markup(self, node) -> MarkupNode:
        if node.type == "jsx_self_closing_element":
            return Element(
                tag_name=self.text(node.child_by_field_name("name")),
                attributes=self._attributes(node),
            )

        if node.type == "jsx_element":
            opening = next(c for c in node.children if c.type == "jsx_opening_element")
            closing = [c for c in node.children if c.type == "jsx_closing_element"][-1]
            name = opening.child_by_field_name("name")
            closing_name = closing.child_by_field_name("name")
            tag_name = self.text(name) if name is not None else ""
            closing_tag = self.text(closing_name) if closing_name is not None else ""
            if tag_name != closing_tag:
                raise self.error(closing, f"Expected corresponding closing tag for <{tag_name}>")

            children = self._children(node, opening.end_byte, closing.start_byte)
            if name is None:
                return Fragment(children=children)
            return Element(
                tag_name=tag_name,
                attributes=self._attributes(opening),
                children=children,
            )

        if node.type == "jsx_fragment":
            # older grammars spell fragments out as tokens: < > ... < / >
            tokens = [c for c in node.children if not c.is_named]
            return Fragment(children=self._children(node, tokens[1].end_byte, tokens[-3].start_byte))

        if node.type in TEXT_NODE_TYPES:
            return Text(html.unescape(self.text(node)))

        return UnrecognizedMarkup(node.type, self.text(node))

    def _attributes(self, node) -> tuple:
        return tuple(
            self._attribute(child)
            for child in node.named_children
            if child.type == "jsx_attribute"
        )

    def _attribute(self, node) -> Attribute:
        parts = _named(node)
        name = self.text(parts[0])
        if len(parts) < 2:
            return Attribute(name=name)

        value_node = parts[1]
        if value_node.type == "string":
            # JSX attribute strings have no escapes, only character references
            value = Literal(html.unescape(self.text(value_node)[1:-1]), start=value_node.start_byte)
        else:
            value = self.expression(value_node)
        return Attribute(name=name, value=value)

    def _children(self, node, start: int, end: int) -> tuple:
        """
        Children between byte offsets ``start`` and ``end``.

        Text is whatever source lies between structural children, so
        whitespace survives exactly as written.
        """
        children: List[MarkupNode] = []
        cursor = start

        def flush(until: int) -> None:
            raw = self.slice(cursor, until)
            if raw:
                children.append(Text(html.unescape(raw)))

        for child in node.named_children:
            if child.type in ("jsx_opening_element", "jsx_closing_element", "comment"):
                continue
            if child.type in TEXT_NODE_TYPES:
                continue
            flush(child.start_byte)
            children.append(self.markup(child))
            cursor = child.end_byte
        flush(end)
        return tuple(children)


def parse_program(source: str) -> Program:
    """
    Parse source text into a Program.

    Args:
        source: JavaScript/JSX source text

    Returns:
        Program with one expression per top-level statement

    Raises:
        MarkupParseError: If the source is not valid
    """
    data = source.encode("utf-8")
    tree = get_parser(LANGUAGE).parse(data)
    return _TreeAdapter(data).program(tree.root_node)


__all__ = [
    "MarkupParseError",
    "parse_number",
    "parse_program",
    "unescape_string",
]
