"""
jsx2json

Converts JSX markup into plain, JSON-serializable trees:

    convert('<p class="x">Hi {name}</p>')

Each element becomes ``[tagName, attributes, *children]``. Simple embedded
expressions (literals, operators, arrays, objects, template strings) are
folded into concrete values; anything else is left as a fallback node and
reported to the diagnostic sink.

Nothing is executed and no bindings are resolved.
"""

from jsx2json.converter import InvalidArgumentError, JSXSyntaxError, NodeConverter, convert

__version__ = "0.1.0"

__all__ = ["InvalidArgumentError", "JSXSyntaxError", "NodeConverter", "convert"]
