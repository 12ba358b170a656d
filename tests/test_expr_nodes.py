import pytest
from pydantic import ValidationError

from adapters.expr_tree.fold import iter_variables, render, variable_count
from contracts import INT_MAX, BinOpKind, BinOpNode, Interval, LiteralNode, VariableNode
from engine import add, div, lit, mul, sub, var


def _multi_formula():
    x = var(-5, 5, "x")
    y = var(10, 30, "y")
    z = var(45, 65, "z")
    return div(add(x, mul(sub(y, lit(2)), sub(z, lit(3)))), lit(2))


def test_literal_has_singleton_bounds_and_no_variables():
    node = lit(42)

    assert node.bounds == Interval(lower=42, upper=42)
    assert node.variable_count == 0


def test_variable_bounds_are_declared_bounds():
    node = var(-5, 5)

    assert node.bounds == Interval(lower=-5, upper=5)
    assert node.variable_count == 1


def test_binop_bounds_are_computed_once_at_construction():
    tree = _multi_formula()

    assert tree.bounds is tree.bounds
    assert tree.bounds == Interval(lower=165, upper=870)


def test_binop_exposes_children():
    left, right = lit(1), var(0, 3)
    node = add(left, right)

    assert node.op is BinOpKind.ADD
    assert node.left is left
    assert node.right is right


def test_shared_subtree_keeps_its_bounds():
    x = var(-5, 5, "x")
    shifted = add(x, lit(3))

    squared = mul(shifted, shifted)

    assert shifted.bounds == Interval(lower=-2, upper=8)
    assert squared.bounds == Interval(lower=-16, upper=64)
    assert squared.variable_count == 2


def test_nodes_are_frozen():
    node = lit(1)

    with pytest.raises(ValidationError):
        node.value = 2


def test_variable_with_inverted_bounds_is_rejected():
    with pytest.raises(ValidationError):
        var(5, 1)


def test_literal_outside_int_range_is_rejected():
    with pytest.raises(ValidationError):
        lit(INT_MAX + 1)


def test_unknown_operator_is_rejected():
    with pytest.raises(ValueError):
        BinOpNode(op="pow", left=lit(1), right=lit(2))


def test_tree_can_be_validated_from_plain_data():
    node = BinOpNode.model_validate({
        "op": "add",
        "left": {"node_type": "literal", "value": 2},
        "right": {"node_type": "variable", "allowed": {"lower": 0, "upper": 3}},
    })

    assert isinstance(node.left, LiteralNode)
    assert isinstance(node.right, VariableNode)
    assert node.bounds == Interval(lower=2, upper=5)
    assert node.variable_count == 1


def test_variable_count_resolver_matches_cached_count():
    tree = _multi_formula()

    assert variable_count(tree) == tree.variable_count == 3
    assert variable_count(lit(7)) == 0


def test_iter_variables_follows_left_to_right_order():
    tree = _multi_formula()

    assert [v.name for v in iter_variables(tree)] == ["x", "y", "z"]


def test_render_uses_names_and_positions():
    assert render(_multi_formula()) == "(x + ((y - 2) * (z - 3))) / 2"
    assert render(sub(var(0, 1), mul(lit(3), var(0, 1)))) == "v0 - (3 * v1)"


def test_copy_with_update_recomputes_cached_bounds():
    tree = add(var(0, 5), lit(1))

    copied = tree.model_copy(update={"right": lit(100)})
    fresh = add(var(0, 5), lit(100))

    assert copied.bounds == fresh.bounds == Interval(lower=100, upper=105)
    assert copied.variable_count == fresh.variable_count == 1
    assert tree.bounds == Interval(lower=1, upper=6)


def test_copy_with_update_changes_variable_count():
    tree = add(lit(1), lit(2))

    copied = tree.model_copy(update={"left": var(-3, 3)})

    assert copied.variable_count == 1
    assert copied.bounds == Interval(lower=-1, upper=5)


def test_copy_with_invalid_update_is_rejected():
    with pytest.raises(ValidationError):
        var(0, 5).model_copy(update={"allowed": {"lower": 9, "upper": 1}})
