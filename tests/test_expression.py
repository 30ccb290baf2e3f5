import dataclasses
import math

import numpy as np
import pytest

from fourier_lab import EvaluationError, ParseError, parse
from fourier_lab.expression import BinaryOp, Constant, FunctionCall, UnaryOp, Variable, tokenize


def test_sin_at_zero_and_half_pi():
    f = parse("sin(x)")
    assert f(0.0) == pytest.approx(0.0, abs=1e-12)
    assert f(math.pi / 2) == pytest.approx(1.0)


@pytest.mark.parametrize("text, x, expected", [
    ("1 + 2*3", 0.0, 7.0),
    ("(1 + 2) * 3", 0.0, 9.0),
    ("10 - 4 - 3", 0.0, 3.0),
    ("8 / 4 / 2", 0.0, 1.0),
    ("2^3^2", 0.0, 512.0),
    ("x**2", 3.0, 9.0),
    ("-x^2", 3.0, -9.0),
    ("2^-1", 0.0, 0.5),
    ("--x", 2.0, 2.0),
    ("+x", 2.0, 2.0),
    ("2x", 3.0, 6.0),
    ("3sin(x)", math.pi / 2, 3.0),
    ("2(x + 1)", 1.0, 4.0),
    ("2x^2", 3.0, 18.0),
    ("pi", 0.0, math.pi),
    ("π", 0.0, math.pi),
    ("e", 0.0, math.e),
    ("1.5e2", 0.0, 150.0),
    (".5", 0.0, 0.5),
    ("cos(x)", 0.0, 1.0),
    ("exp(x)", 1.0, math.e),
    ("sqrt(x)", 16.0, 4.0),
    ("log(e)", 0.0, 1.0),
    ("abs(x)", -2.5, 2.5),
    ("tan(x)", math.pi / 4, 1.0),
    ("sinh(x)", 1.0, math.sinh(1.0)),
    ("cosh(x)", 1.0, math.cosh(1.0)),
    ("tanh(x)", 1.0, math.tanh(1.0)),
    ("sign(x)", -3.0, -1.0),
    ("square(x)", 1.0, 1.0),
    ("square(x)", -1.0, -1.0),
    ("square(x, 0.2)", 1.0, 1.0),
    ("sawtooth(x)", 0.0, -1.0),
    ("sawtooth(x)", math.pi, 0.0),
    ("sawtooth(x, 0.5)", math.pi / 2, 0.0),
    ("sin(x)^2 + cos(x)^2", 0.7, 1.0),
])
def test_evaluates(text, x, expected):
    assert parse(text)(x) == pytest.approx(expected, abs=1e-9)


@pytest.mark.parametrize("text", [
    "",
    "   ",
    "sin(",
    "sin x",
    "(x + 1",
    "x + 1)",
    "1 +",
    "1 + * 2",
    "1 2",
    "()",
    "y",
    "foo(x)",
    "pi(x)",
    "sin(x, 2)",
    "square(x, 0.5, 1)",
    "square()",
    "2 $ 3",
    "x,",
])
def test_rejects_malformed_text(text):
    with pytest.raises(ParseError):
        parse(text)


def test_rejects_non_text():
    with pytest.raises(ParseError):
        parse(None)


def test_parse_error_reports_position():
    with pytest.raises(ParseError) as excinfo:
        parse("1 + * 2")
    assert excinfo.value.position == 4
    assert "position 4" in str(excinfo.value)


def test_parse_error_is_value_error():
    with pytest.raises(ValueError):
        parse("sin(")


def test_unknown_name_message():
    with pytest.raises(ParseError, match="unknown name 'foo'"):
        parse("foo(x)")


def test_tree_shape():
    tree = parse("-x + 2 * sin(x)").tree
    assert tree == BinaryOp(
        "+",
        UnaryOp("-", Variable()),
        BinaryOp("*", Constant(2.0), FunctionCall("sin", (Variable(),))),
    )


def test_tree_is_immutable():
    f = parse("x + 1")
    with pytest.raises(dataclasses.FrozenInstanceError):
        f.tree.left = Constant(3.0)
    with pytest.raises(dataclasses.FrozenInstanceError):
        f.text = "x"


def test_tokenize_normalizes_double_star():
    kinds = [(t.kind, t.text) for t in tokenize("x**2")]
    assert kinds == [("NAME", "x"), ("OP", "^"), ("NUMBER", "2"), ("END", "")]


@pytest.mark.parametrize("text, x", [
    ("sqrt(x)", -1.0),
    ("1/x", 0.0),
    ("log(x)", 0.0),
    ("log(x)", -2.0),
    ("exp(x)", 1000.0),
    ("x^-1", 0.0),
    ("1/(1/x)", 0.0),
    ("exp(-1/x^2)", 0.0),
    ("0 * log(x)", 0.0),
    ("sin(sqrt(x))^0", -1.0),
])
def test_domain_violation_raises_evaluation_error(text, x):
    f = parse(text)
    with pytest.raises(EvaluationError) as excinfo:
        f(x)
    assert excinfo.value.x == x


def test_evaluation_error_is_arithmetic_error():
    with pytest.raises(ArithmeticError):
        parse("1/x")(0.0)


def test_array_evaluation_marks_failures():
    values, valid = parse("1/x").evaluate([-1.0, 0.0, 1.0])
    assert valid.tolist() == [True, False, True]
    assert values[0] == -1.0
    assert values[2] == 1.0


def test_intermediate_failures_stay_marked():
    xs = [-1.0, 0.0, 1.0]
    _, valid = parse("1/(1/x)").evaluate(xs)
    assert valid.tolist() == [True, False, True]
    values, valid = parse("exp(-1/x^2)").evaluate(xs)
    assert valid.tolist() == [True, False, True]
    assert values[0] == pytest.approx(math.exp(-1.0))


def test_small_but_finite_results_stay_valid():
    values, valid = parse("exp(-1/x^2)").evaluate([0.1, 0.5])
    assert valid.all()
    assert values[0] == pytest.approx(math.exp(-100.0))


def test_constant_expression_broadcasts():
    values, valid = parse("2 * pi").evaluate(np.zeros(3))
    assert values.shape == (3,)
    assert np.allclose(values, 2 * math.pi)
    assert valid.all()


def test_str_uses_source_text():
    assert str(parse("  sin(x) ")) == "sin(x)"
