"""
Diagnostic sinks.

Unsupported constructs never abort a conversion; they are reported to a
sink (any callable taking one message string) and degrade to a fallback
value. The library default is ``ignore``; ``warn`` surfaces them through
the standard ``warnings`` machinery.
"""

import warnings
from typing import Callable, List, Tuple

DiagnosticSink = Callable[[str], None]


class ConversionWarning(UserWarning):
    """A construct was left unevaluated during conversion."""
    pass


def ignore(message: str) -> None:
    pass


def warn(message: str) -> None:
    warnings.warn(message, ConversionWarning, stacklevel=2)


def collect() -> Tuple[List[str], DiagnosticSink]:
    """
    Return a list and a sink that appends to it.

    Example:
        messages, sink = collect()
        convert("<a href={f()} />", on_diagnostic=sink)
        messages  ->  ['call_expression is not supported']
    """
    messages: List[str] = []
    return messages, messages.append


__all__ = ["ConversionWarning", "DiagnosticSink", "collect", "ignore", "warn"]
