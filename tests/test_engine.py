import pytest

import engine
from contracts import ArgumentCountMismatch, DivisionByZero, OutOfRange
from engine import add, binop, bounds, div, evaluate, lit, mul, sub, var, variable_count


@pytest.fixture
def formula():
    x = var(-5, 5, "x")
    y = var(10, 30, "y")
    z = var(45, 65, "z")
    return div(add(x, mul(sub(y, lit(2)), sub(z, lit(3)))), lit(2))


@pytest.mark.parametrize(
    "inputs, expected",
    [((3, 29, 50), 636), ((-2, 20, 62), 530), ((0, 12, 47), 220)],
)
def test_multi_variable_positional_binding(formula, inputs, expected):
    assert evaluate(formula, inputs) == expected


def test_multi_variable_bounds(formula):
    assert bounds(formula) == (165, 870)
    assert variable_count(formula) == 3


def test_multi_variable_argument_count_mismatch(formula):
    with pytest.raises(ArgumentCountMismatch):
        evaluate(formula, [3, 29])


def test_multi_variable_out_of_range_names_value(formula):
    with pytest.raises(OutOfRange) as exc_info:
        evaluate(formula, [3, 31, 50])

    assert exc_info.value.value == 31


def test_single_bounded_variable_formulas():
    x = var(-5, 5, "x")
    f1 = add(x, mul(sub(x, lit(2)), sub(x, lit(3))))
    f2 = div(x, lit(2))
    f3 = mul(add(x, lit(3)), add(x, lit(5)))

    assert bounds(f1) == (-29, 61)
    assert bounds(f2) == (-2, 2)
    assert bounds(f3) == (-20, 80)
    # ta sama zmienna, ale każde wystąpienie to osobny slot
    assert variable_count(f1) == 3
    assert evaluate(f1, [4, 4, 4]) == 6
    assert evaluate(f2, [-5]) == -2
    assert evaluate(f3, [3, 3]) == 48


def test_literal_only_tree_needs_no_inputs():
    assert evaluate(div(lit(-7), lit(2))) == -3
    with pytest.raises(DivisionByZero):
        evaluate(div(lit(5), lit(0)))


def test_binop_accepts_operator_names():
    assert bounds(binop("sub", lit(3), var(0, 2))) == (1, 3)


def test_module_exposes_builders_and_queries():
    for name in ("lit", "var", "add", "sub", "mul", "div", "bounds", "evaluate", "variable_count"):
        assert callable(getattr(engine, name))
