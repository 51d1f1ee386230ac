"""
Tests for host value semantics used during constant folding.

Covers string/number conversion, equality, arithmetic edge cases and
32-bit bitwise behaviour.
"""

import math

import pytest
from jsx2json.coercion import (
    BINARY_OPERATORS,
    UNARY_OPERATORS,
    js_number,
    loose_equals,
    strict_equals,
    to_int32,
    to_number,
    to_string,
    to_uint32,
)
from jsx2json.expressions import UNDEFINED


def apply(operator, left, right):
    return BINARY_OPERATORS[operator](left, right)


def is_negative_zero(value):
    return isinstance(value, float) and value == 0 and math.copysign(1.0, value) < 0


class TestToString:
    """Test conversion to text."""

    @pytest.mark.parametrize("value, expected", [
        ("a", "a"),
        (1, "1"),
        (1.5, "1.5"),
        (2.0, "2"),
        (-0.0, "0"),
        (True, "true"),
        (False, "false"),
        (None, "null"),
        (UNDEFINED, "undefined"),
        (float("nan"), "NaN"),
        (math.inf, "Infinity"),
        (-math.inf, "-Infinity"),
        ([1, None, "b"], "1,,b"),
        ({"a": 1}, "[object Object]"),
    ])
    def test_to_string(self, value, expected):
        """Each kind of value has one textual form."""
        assert to_string(value) == expected

    @pytest.mark.parametrize("value, expected", [
        (0.1, "0.1"),
        (0.00001, "0.00001"),
        (0.000001, "0.000001"),
        (1.23e-5, "0.0000123"),
        (-0.00025, "-0.00025"),
        (1e-7, "1e-7"),
        (1.5e-10, "1.5e-10"),
        (123.456, "123.456"),
        (1e20, "100000000000000000000"),
        (1e21, "1e+21"),
        (1.5e300, "1.5e+300"),
    ])
    def test_number_layout(self, value, expected):
        """Positional notation from 1e-6 up to 1e21, exponent notation outside."""
        assert to_string(value) == expected


class TestToNumber:
    """Test conversion to numbers."""

    @pytest.mark.parametrize("value, expected", [
        ("42", 42),
        ("  3.5 ", 3.5),
        ("", 0),
        ("0x1f", 31),
        (True, 1),
        (None, 0),
        ([7], 7),
        ([], 0),
    ])
    def test_to_number(self, value, expected):
        """Primitives and single-element arrays coerce to numbers."""
        assert to_number(value) == expected

    @pytest.mark.parametrize("value", ["abc", UNDEFINED, {"a": 1}, [1, 2], "1_000"])
    def test_not_a_number(self, value):
        """Values without a numeric reading become NaN."""
        assert math.isnan(to_number(value))

    def test_integral_results_are_ints(self):
        """Integral doubles collapse to int."""
        assert js_number(4.0) == 4
        assert isinstance(js_number(4.0), int)
        assert isinstance(js_number(2 ** 60), float)

    def test_negative_zero_is_kept(self):
        """Negative zero keeps its sign."""
        assert is_negative_zero(js_number(-0.0))
        assert is_negative_zero(to_number("-0"))


class TestInt32:
    """Test 32-bit integer conversion."""

    def test_wraps_around(self):
        """Values wrap modulo 2**32."""
        assert to_int32(2 ** 31) == -(2 ** 31)
        assert to_uint32(-1) == 2 ** 32 - 1

    def test_non_finite_is_zero(self):
        """NaN and the infinities convert to 0."""
        assert to_int32(math.inf) == 0
        assert to_int32("abc") == 0

    def test_truncates(self):
        """Fractions are truncated toward zero."""
        assert to_int32(-3.7) == -3


class TestEquality:
    """Test strict and loose equality."""

    def test_strict_requires_same_type(self):
        """Strict equality never coerces."""
        assert strict_equals(1, 1.0)
        assert not strict_equals(1, "1")
        assert not strict_equals(1, True)

    def test_strict_nan(self):
        """NaN is not equal to itself."""
        assert not strict_equals(float("nan"), float("nan"))

    def test_loose_coerces(self):
        """Loose equality coerces across types."""
        assert loose_equals(1, "1")
        assert loose_equals(True, 1)
        assert loose_equals(None, UNDEFINED)
        assert not loose_equals(None, 0)
        assert loose_equals([1], "1")

    def test_objects_compare_by_identity(self):
        """Arrays are equal only to themselves."""
        a = [1]
        assert strict_equals(a, a)
        assert not strict_equals([1], [1])


class TestArithmetic:
    """Test arithmetic operators."""

    def test_addition(self):
        """Numbers add."""
        assert apply("+", 1, 2) == 3

    def test_string_concatenation(self):
        """A string on either side turns + into concatenation."""
        assert apply("+", "a", 1) == "a1"
        assert apply("+", 1, "a") == "1a"
        assert apply("+", [1, 2], 3) == "1,23"

    def test_concatenation_uses_positional_notation(self):
        """Small fractions are concatenated without an exponent."""
        assert apply("+", "x", 0.00001) == "x0.00001"

    def test_boolean_addition(self):
        """Booleans count as 0 and 1."""
        assert apply("+", True, 1) == 2

    def test_division(self):
        """Division yields an int when the quotient is integral."""
        assert apply("/", 7, 2) == 3.5
        assert apply("/", 4, 2) == 2

    def test_division_by_zero(self):
        """Division by zero gives infinities or NaN instead of raising."""
        assert apply("/", 1, 0) == math.inf
        assert apply("/", -1, 0) == -math.inf
        assert math.isnan(apply("/", 0, 0))

    def test_division_by_negative_zero(self):
        """The sign of a zero divisor is honoured."""
        assert apply("/", 1, UNARY_OPERATORS["-"](0)) == -math.inf
        assert apply("/", -1, -0.0) == math.inf

    def test_remainder_sign_follows_dividend(self):
        """Remainder takes the sign of the dividend."""
        assert apply("%", -5, 3) == -2
        assert math.isnan(apply("%", 5, 0))

    def test_power(self):
        """Exponentiation follows IEEE-754 edge cases."""
        assert apply("**", 2, 10) == 1024
        assert math.isnan(apply("**", -8, 1 / 3))
        assert math.isnan(apply("**", 1, float("nan")))
        assert apply("**", 10, 400) == math.inf

    def test_power_of_zero_with_negative_exponent(self):
        """Zero raised to a negative power is infinite."""
        assert apply("**", 0, -1) == math.inf
        assert apply("**", 0, -2) == math.inf
        assert apply("**", -0.0, -3) == -math.inf
        assert apply("**", -0.0, -2) == math.inf

    def test_subtraction_coerces_strings(self):
        """Subtraction always works on numbers."""
        assert apply("-", "5", 2) == 3


class TestComparison:
    """Test relational operators."""

    def test_numbers(self):
        """Numbers compare numerically."""
        assert apply("<", 1, 2)
        assert apply(">=", 2, 2)

    def test_strings_compare_lexically(self):
        """Two strings compare by code point, mixed operands numerically."""
        assert apply("<", "10", "9")
        assert not apply("<", 10, "9")

    def test_nan_is_never_ordered(self):
        """Comparisons involving NaN are false."""
        assert not apply("<", "a", 1)
        assert not apply(">=", "a", 1)

    def test_inequality(self):
        """!= and !== negate their equality counterparts."""
        assert apply("!=", 1, 2)
        assert apply("!==", 1, "1")
        assert not apply("!=", 1, "1")


class TestBitwise:
    """Test shift and bitwise operators."""

    def test_shifts(self):
        """Shift counts are taken modulo 32."""
        assert apply("<<", 1, 31) == -(2 ** 31)
        assert apply(">>", -8, 1) == -4
        assert apply(">>>", -1, 0) == 2 ** 32 - 1
        assert apply("<<", 1, 33) == 2

    def test_logic(self):
        """Bitwise operators work on 32-bit integers."""
        assert apply("|", 5, 2) == 7
        assert apply("&", 6, 3) == 2
        assert apply("^", 6, 3) == 5


class TestUnary:
    """Test unary operators."""

    def test_operators(self):
        """Unary operators coerce their operand to a number."""
        assert UNARY_OPERATORS["~"](5) == -6
        assert UNARY_OPERATORS["-"]("3") == -3
        assert UNARY_OPERATORS["+"]("4") == 4

    def test_negating_zero(self):
        """-0 is negative zero and -(-0) is zero again."""
        assert is_negative_zero(UNARY_OPERATORS["-"](0))
        assert UNARY_OPERATORS["-"](-0.0) == 0
        assert not is_negative_zero(UNARY_OPERATORS["-"](-0.0))
