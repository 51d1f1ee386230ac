"""
Host value semantics for constant folding.

Embedded expressions are written in JavaScript, so folding them must follow
its rules: numbers are IEEE-754 doubles, bitwise operators work on 32-bit
integers, ``+`` concatenates as soon as either side is a string, and
comparisons coerce their operands.

Values are represented as:
    string     -> str
    number     -> int (integral, within the safe range) or float
    boolean    -> bool
    null       -> None
    undefined  -> UNDEFINED
    array      -> list
    object     -> dict
Anything else (markup trees are lists; fallback nodes) counts as an object.
"""

from __future__ import annotations

import math
import re
from typing import Any, Callable, Dict

from .expressions import UNDEFINED

NAN = float("nan")
MAX_SAFE_INTEGER = 2 ** 53 - 1

_DECIMAL_RE = re.compile(r"^[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?$")
_RADIX_RE = re.compile(r"^0([xXoObB])([0-9a-fA-F]+)$")
_RADIXES = {"x": 16, "o": 8, "b": 2}


def type_of(value: Any) -> str:
    """Classify a value the way strict equality does."""
    if value is UNDEFINED:
        return "undefined"
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    return "object"


def js_number(value: Any) -> Any:
    """
    Normalize a numeric result: integral doubles become ``int``.

    Negative zero stays a float so its sign survives division.
    """
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        if abs(value) > MAX_SAFE_INTEGER:
            return float(value)
        return value
    if value == 0 and math.copysign(1.0, value) < 0:
        return value
    if math.isfinite(value) and value.is_integer() and abs(value) <= MAX_SAFE_INTEGER:
        return int(value)
    return value


def _number_to_string(value: Any) -> str:
    """
    Shortest round-tripping text for a number, laid out like the host does.

    Positional notation is used from 1e-6 up to (not including) 1e21,
    exponent notation outside that range:

        0.00001  ->  '0.00001'
        1e-7     ->  '1e-7'
        1.5e+21  ->  '1.5e+21'
    """
    if isinstance(value, int):
        return str(value)
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    if value == 0:
        return "0"

    sign = "-" if value < 0 else ""
    mantissa, _, exponent = repr(abs(value)).partition("e")
    whole, _, fraction = mantissa.partition(".")
    written = whole + fraction
    digits = written.lstrip("0")
    # value == 0.<digits> * 10 ** point
    point = len(whole) + int(exponent or 0) - (len(written) - len(digits))
    digits = digits.rstrip("0")
    k = len(digits)

    if k <= point <= 21:
        text = digits + "0" * (point - k)
    elif 0 < point <= 21:
        text = f"{digits[:point]}.{digits[point:]}"
    elif -6 < point <= 0:
        text = "0." + "0" * -point + digits
    else:
        magnitude = point - 1
        text = digits[0] + (f".{digits[1:]}" if k > 1 else "")
        text += f"e{'+' if magnitude >= 0 else '-'}{abs(magnitude)}"
    return sign + text


def to_string(value: Any) -> str:
    """Convert a value to its textual form."""
    kind = type_of(value)
    if kind == "string":
        return value
    if kind == "undefined":
        return "undefined"
    if kind == "null":
        return "null"
    if kind == "boolean":
        return "true" if value else "false"
    if kind == "number":
        return _number_to_string(value)
    if isinstance(value, list):
        return ",".join(
            "" if item is None or item is UNDEFINED else to_string(item)
            for item in value
        )
    return "[object Object]"


def to_primitive(value: Any) -> Any:
    """Objects collapse to their string form; primitives are unchanged."""
    if type_of(value) == "object":
        return to_string(value)
    return value


def _string_to_number(text: str) -> Any:
    text = text.strip()
    if not text:
        return 0
    if _DECIMAL_RE.match(text):
        return js_number(float(text))
    match = _RADIX_RE.match(text)
    if match:
        try:
            return js_number(int(match.group(2), _RADIXES[match.group(1).lower()]))
        except ValueError:
            return NAN
    if text in ("Infinity", "+Infinity"):
        return math.inf
    if text == "-Infinity":
        return -math.inf
    return NAN


def to_number(value: Any) -> Any:
    """Convert a value to a number (``int`` or ``float``)."""
    kind = type_of(value)
    if kind == "number":
        return js_number(value)
    if kind == "boolean":
        return int(value)
    if kind == "null":
        return 0
    if kind == "undefined":
        return NAN
    if kind == "string":
        return _string_to_number(value)
    if isinstance(value, list):
        return _string_to_number(to_string(value))
    return NAN


def to_uint32(value: Any) -> int:
    number = to_number(value)
    if isinstance(number, float) and not math.isfinite(number):
        return 0
    return int(number) % 2 ** 32


def to_int32(value: Any) -> int:
    number = to_uint32(value)
    if number >= 2 ** 31:
        number -= 2 ** 32
    return number


def strict_equals(left: Any, right: Any) -> bool:
    kind = type_of(left)
    if kind != type_of(right):
        return False
    if kind == "object":
        return left is right
    return left == right


def loose_equals(left: Any, right: Any) -> bool:
    left_kind, right_kind = type_of(left), type_of(right)
    if left_kind == right_kind:
        return strict_equals(left, right)
    nullish = ("null", "undefined")
    if left_kind in nullish or right_kind in nullish:
        return left_kind in nullish and right_kind in nullish
    if left_kind == "boolean":
        return loose_equals(int(left), right)
    if right_kind == "boolean":
        return loose_equals(left, int(right))
    if left_kind == "number" and right_kind == "string":
        return left == to_number(right)
    if left_kind == "string" and right_kind == "number":
        return to_number(left) == right
    if left_kind == "object":
        return loose_equals(to_primitive(left), right)
    if right_kind == "object":
        return loose_equals(left, to_primitive(right))
    return False


# =========================================================================
# ARITHMETIC
# =========================================================================

def add(left: Any, right: Any) -> Any:
    left, right = to_primitive(left), to_primitive(right)
    if isinstance(left, str) or isinstance(right, str):
        return to_string(left) + to_string(right)
    return js_number(to_number(left) + to_number(right))


def subtract(left: Any, right: Any) -> Any:
    return js_number(to_number(left) - to_number(right))


def multiply(left: Any, right: Any) -> Any:
    return js_number(to_number(left) * to_number(right))


def divide(left: Any, right: Any) -> Any:
    dividend, divisor = to_number(left), to_number(right)
    if divisor == 0:
        if dividend == 0 or math.isnan(dividend):
            return NAN
        negative = (dividend < 0) != (math.copysign(1.0, divisor) < 0)
        return -math.inf if negative else math.inf
    return js_number(dividend / divisor)


def remainder(left: Any, right: Any) -> Any:
    dividend, divisor = to_number(left), to_number(right)
    if divisor == 0 or math.isnan(divisor) or math.isnan(dividend) or math.isinf(dividend):
        return NAN
    if math.isinf(divisor):
        return dividend
    return js_number(math.fmod(dividend, divisor))


def _is_odd_integer(value: Any) -> bool:
    return math.isfinite(value) and float(value).is_integer() and int(value) % 2 == 1


def power(left: Any, right: Any) -> Any:
    base, exponent = to_number(left), to_number(right)
    if math.isnan(exponent):
        return NAN
    if exponent == 0:
        return 1
    if math.isnan(base) or (abs(base) == 1 and math.isinf(exponent)):
        return NAN
    if base == 0 and exponent < 0:
        negative_zero = math.copysign(1.0, base) < 0
        return -math.inf if negative_zero and _is_odd_integer(exponent) else math.inf
    try:
        return js_number(math.pow(base, exponent))
    except ValueError:
        return NAN
    except OverflowError:
        return -math.inf if base < 0 and _is_odd_integer(exponent) else math.inf


def negate(operand: Any) -> Any:
    number = to_number(operand)
    if number == 0:
        # -0 is kept as a float, and -(-0) is 0
        return 0 if math.copysign(1.0, number) < 0 else -0.0
    return js_number(-number)


# =========================================================================
# COMPARISON
# =========================================================================

def _relational(compare: Callable[[Any, Any], bool]) -> Callable[[Any, Any], bool]:
    def apply(left: Any, right: Any) -> bool:
        left, right = to_primitive(left), to_primitive(right)
        if isinstance(left, str) and isinstance(right, str):
            return compare(left, right)
        return compare(to_number(left), to_number(right))
    return apply


less_than = _relational(lambda a, b: a < b)
less_equal = _relational(lambda a, b: a <= b)
greater_than = _relational(lambda a, b: a > b)
greater_equal = _relational(lambda a, b: a >= b)


# =========================================================================
# BITWISE
# =========================================================================

def shift_left(left: Any, right: Any) -> int:
    return to_int32(to_int32(left) << (to_uint32(right) & 31))


def shift_right(left: Any, right: Any) -> int:
    return to_int32(left) >> (to_uint32(right) & 31)


def shift_right_unsigned(left: Any, right: Any) -> int:
    return to_uint32(left) >> (to_uint32(right) & 31)


def bitwise_or(left: Any, right: Any) -> int:
    return to_int32(left) | to_int32(right)


def bitwise_and(left: Any, right: Any) -> int:
    return to_int32(left) & to_int32(right)


def bitwise_xor(left: Any, right: Any) -> int:
    return to_int32(left) ^ to_int32(right)


BINARY_OPERATORS: Dict[str, Callable[[Any, Any], Any]] = {
    "+": add,
    "-": subtract,
    "*": multiply,
    "**": power,
    "/": divide,
    "%": remainder,
    "==": loose_equals,
    "===": strict_equals,
    "!=": lambda left, right: not loose_equals(left, right),
    "!==": lambda left, right: not strict_equals(left, right),
    "<": less_than,
    "<=": less_equal,
    ">": greater_than,
    ">=": greater_equal,
    "<<": shift_left,
    ">>": shift_right,
    ">>>": shift_right_unsigned,
    "|": bitwise_or,
    "&": bitwise_and,
    "^": bitwise_xor,
}

UNARY_OPERATORS: Dict[str, Callable[[Any], Any]] = {
    "+": to_number,
    "-": negate,
    "~": lambda operand: ~to_int32(operand),
}
