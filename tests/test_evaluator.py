"""
Tests for the Expression Evaluator.

Nodes are built by hand so the folding rules are exercised without
going through the parser.
"""

import pytest
from jsx2json.diagnostics import collect
from jsx2json.evaluator import ExpressionEvaluator
from jsx2json.expressions import (
    UNDEFINED,
    ArrayLiteral,
    BinaryExpression,
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
from jsx2json.markup import Element


@pytest.fixture
def diagnostics():
    return collect()


@pytest.fixture
def evaluator(diagnostics):
    _, sink = diagnostics
    return ExpressionEvaluator(lambda node: ["converted", node.tag_name], on_diagnostic=sink)


class TestSimpleValues:
    """Test literals, containers and identifiers."""

    def test_missing_value_is_true(self, evaluator):
        """An attribute without a value is an implicit boolean flag."""
        assert evaluator.evaluate(None) is True

    @pytest.mark.parametrize("value", ["text", 3, 2.5, True, False, None])
    def test_literal(self, evaluator, value):
        """Literals evaluate to their value."""
        assert evaluator.evaluate(Literal(value)) == value

    def test_container_unwraps(self, evaluator):
        """Containers evaluate to their contents."""
        assert evaluator.evaluate(ExpressionContainer(Literal(7))) == 7

    def test_identifier_degrades_to_name(self, evaluator):
        """Bindings are not resolved."""
        assert evaluator.evaluate(Identifier("count")) == "count"


class TestCollections:
    """Test arrays and objects."""

    def test_array_preserves_order(self, evaluator):
        """Array elements keep their order."""
        node = ArrayLiteral((Literal(1), Identifier("b"), Literal("c")))
        assert evaluator.evaluate(node) == [1, "b", "c"]

    def test_array_hole_is_undefined(self, evaluator):
        """Holes evaluate to UNDEFINED."""
        result = evaluator.evaluate(ArrayLiteral((Literal(1), None, Literal(2))))
        assert len(result) == 3
        assert result[1] is UNDEFINED

    def test_object(self, evaluator):
        """Object literals become dicts."""
        node = ObjectLiteral((
            Property(Identifier("a"), Literal(1)),
            Property(Literal("b-c"), ArrayLiteral((Literal(2),))),
        ))
        assert evaluator.evaluate(node) == {"a": 1, "b-c": [2]}

    def test_object_later_key_wins(self, evaluator):
        """A repeated key keeps its first position and its last value."""
        node = ObjectLiteral((
            Property(Identifier("a"), Literal(1)),
            Property(Identifier("b"), Literal(2)),
            Property(Literal("a"), Literal(3)),
        ))
        result = evaluator.evaluate(node)
        assert result == {"a": 3, "b": 2}
        assert list(result) == ["a", "b"]

    def test_object_numeric_key_becomes_text(self, evaluator):
        """Computed keys are stringified."""
        node = ObjectLiteral((Property(BinaryExpression("+", Literal(1), Literal(1)), Literal("x")),))
        assert evaluator.evaluate(node) == {"2": "x"}

    def test_hole_coerces_like_an_empty_array(self, evaluator):
        """+[ , ] folds to 0."""
        node = ObjectLiteral((
            Property(Identifier("b"), UnaryExpression("+", ArrayLiteral((None,)))),
        ))
        assert evaluator.evaluate(node) == {"b": 0}

    def test_object_skips_undefined_value(self):
        """Properties whose value evaluates to UNDEFINED are left out."""
        evaluator = ExpressionEvaluator(lambda node: UNDEFINED)
        node = ObjectLiteral((
            Property(Identifier("a"), Literal(1)),
            Property(Identifier("b"), MarkupExpression(Element("Vanish"))),
            Property(Identifier("c"), ArrayLiteral((None,))),
        ))
        result = evaluator.evaluate(node)
        assert result == {"a": 1, "c": [UNDEFINED]}
        assert "b" not in result

    def test_object_skips_unfoldable_key(self, evaluator, diagnostics):
        """Properties with unfoldable keys are reported once and skipped."""
        messages, _ = diagnostics
        spread = Unrecognized("spread_element", "...rest")
        node = ObjectLiteral((Property(spread, spread), Property(Identifier("a"), Literal(1))))
        assert evaluator.evaluate(node) == {"a": 1}
        assert messages == ["spread_element is not supported"]


class TestTemplateLiteral:
    """Test template concatenation."""

    def test_interleaves_by_position(self, evaluator):
        """Segments and values are joined in source order."""
        node = TemplateLiteral(
            expressions=(BinaryExpression("+", Literal(1), Literal(1), start=4),),
            quasis=(TemplateElement("a", start=1), TemplateElement("b", start=10)),
        )
        assert evaluator.evaluate(node) == "a2b"

    def test_order_comes_from_offsets_not_lists(self, evaluator):
        """Source offsets decide the order."""
        node = TemplateLiteral(
            expressions=(Literal("x", start=1), Literal("y", start=5)),
            quasis=(TemplateElement("-", start=3),),
        )
        assert evaluator.evaluate(node) == "x-y"

    def test_values_are_stringified(self, evaluator):
        """Interpolated values are converted to text."""
        node = TemplateLiteral(
            expressions=(Literal(True, start=2), Literal(None, start=6)),
            quasis=(TemplateElement("", start=1), TemplateElement(" ", start=4), TemplateElement("", start=8)),
        )
        assert evaluator.evaluate(node) == "true null"

    def test_small_fraction_is_positional(self, evaluator):
        """Small fractions are interpolated without an exponent."""
        node = TemplateLiteral(
            expressions=(Literal(0.00001, start=2),),
            quasis=(TemplateElement("", start=1), TemplateElement("", start=9)),
        )
        assert evaluator.evaluate(node) == "0.00001"


class TestOperators:
    """Test operator folding."""

    @pytest.mark.parametrize("operator, left, right, expected", [
        ("+", 1, 2, 3),
        ("-", 5, 7, -2),
        ("*", 3, 4, 12),
        ("**", 2, 8, 256),
        ("/", 1, 4, 0.25),
        ("%", 7, 4, 3),
        ("==", 1, "1", True),
        ("===", 1, "1", False),
        ("!=", 1, 2, True),
        ("!==", 1, 1, False),
        ("<", 1, 2, True),
        ("<=", 2, 2, True),
        (">", 1, 2, False),
        (">=", 3, 2, True),
        ("<<", 1, 4, 16),
        (">>", 16, 2, 4),
        (">>>", 16, 2, 4),
        ("|", 1, 2, 3),
        ("&", 3, 1, 1),
        ("^", 3, 1, 2),
    ])
    def test_binary(self, evaluator, operator, left, right, expected):
        """Supported binary operators are folded."""
        node = BinaryExpression(operator, Literal(left), Literal(right))
        assert evaluator.evaluate(node) == expected

    def test_nested(self, evaluator):
        """Nested operators fold bottom-up."""
        node = BinaryExpression("*", BinaryExpression("+", Literal(1), Literal(2)), Literal(3))
        assert evaluator.evaluate(node) == 9

    def test_negative_zero_divisor(self, evaluator):
        """1 / -0 folds to negative infinity."""
        node = BinaryExpression("/", Literal(1), UnaryExpression("-", Literal(0)))
        assert evaluator.evaluate(node) == float("-inf")

    def test_zero_to_negative_power(self, evaluator):
        """0 ** -1 folds to infinity."""
        node = BinaryExpression("**", Literal(0), UnaryExpression("-", Literal(1)))
        assert evaluator.evaluate(node) == float("inf")

    def test_string_concatenation_with_identifier(self, evaluator):
        """Identifiers concatenate as their names."""
        node = BinaryExpression("+", Literal("item-"), Identifier("id"))
        assert evaluator.evaluate(node) == "item-id"

    def test_unsupported_binary_returns_node(self, evaluator, diagnostics):
        """An unsupported binary operator yields the whole node."""
        messages, _ = diagnostics
        node = BinaryExpression("&&", Literal(1), Literal(2))
        assert evaluator.evaluate(node) is node
        assert messages == ['BinaryExpression with "&&" is not supported']

    @pytest.mark.parametrize("operator, operand, expected", [
        ("+", "5", 5),
        ("-", 5, -5),
        ("~", 0, -1),
    ])
    def test_unary(self, evaluator, operator, operand, expected):
        """Supported unary operators are folded."""
        assert evaluator.evaluate(UnaryExpression(operator, Literal(operand))) == expected

    def test_unsupported_unary_returns_operand(self, evaluator, diagnostics):
        """An unsupported unary operator yields its operand."""
        messages, _ = diagnostics
        operand = Identifier("visible")
        assert evaluator.evaluate(UnaryExpression("!", operand)) is operand
        assert messages == ['UnaryExpression with "!" is not supported']


class TestFallbacks:
    """Test markup delegation and the fallback path."""

    def test_markup_is_delegated(self, evaluator):
        """Markup is handed to the converter callback."""
        assert evaluator.evaluate(MarkupExpression(Element("b"))) == ["converted", "b"]

    def test_unrecognized_returns_node(self, evaluator, diagnostics):
        """Unrecognized nodes are reported and returned."""
        messages, _ = diagnostics
        node = Unrecognized("call_expression", "foo()")
        assert evaluator.evaluate(node) is node
        assert messages == ["call_expression is not supported"]

    def test_foreign_object_returns_itself(self, evaluator, diagnostics):
        """Foreign objects are reported by type name."""
        messages, _ = diagnostics
        marker = object()
        assert evaluator.evaluate(marker) is marker
        assert messages == ["object is not supported"]

    def test_default_sink_is_silent(self):
        """Without a sink nothing is reported."""
        evaluator = ExpressionEvaluator(lambda node: node)
        node = Unrecognized("this", "this")
        assert evaluator.evaluate(node) is node
