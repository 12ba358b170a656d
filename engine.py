"""
engine.py — publiczne API silnika wyrażeń.

Budowanie drzewa:
    lit(7), var(-5, 5, "x"), add(l, r), sub(l, r), mul(l, r), div(l, r)

Zapytania:
    bounds(tree)          -> (lower, upper), bez wejść, O(1)
    variable_count(tree)  -> wymagana długość inputs
    evaluate(tree, inputs) -> int albo EvalError

Przykład:
    x, y = var(-5, 5, "x"), var(10, 30, "y")
    tree = div(add(x, y), lit(2))
    bounds(tree)             # (2, 17)
    evaluate(tree, [3, 29])  # 16
"""
from __future__ import annotations

from typing import Optional, Sequence

from adapters.evaluator.ast_evaluator import ASTEvaluator
from contracts import (
    BinOpKind,
    BinOpNode,
    ExprAST,
    Interval,
    LiteralNode,
    VariableNode,
)

_EVALUATOR = ASTEvaluator()


# -- budowanie drzewa ------------------------------------------------------

def lit(value: int) -> LiteralNode:
    return LiteralNode(value=value)


def var(lower: int, upper: int, name: Optional[str] = None) -> VariableNode:
    return VariableNode(allowed=Interval.of(lower, upper), name=name)


def binop(kind: BinOpKind | str, left: ExprAST, right: ExprAST) -> BinOpNode:
    return BinOpNode(op=BinOpKind(kind), left=left, right=right)


def add(left: ExprAST, right: ExprAST) -> BinOpNode:
    return binop(BinOpKind.ADD, left, right)


def sub(left: ExprAST, right: ExprAST) -> BinOpNode:
    return binop(BinOpKind.SUB, left, right)


def mul(left: ExprAST, right: ExprAST) -> BinOpNode:
    return binop(BinOpKind.MUL, left, right)


def div(left: ExprAST, right: ExprAST) -> BinOpNode:
    return binop(BinOpKind.DIV, left, right)


# -- zapytania -------------------------------------------------------------

def bounds(tree: ExprAST) -> tuple[int, int]:
    return tree.bounds.as_tuple()


def variable_count(tree: ExprAST) -> int:
    return tree.variable_count


def evaluate(tree: ExprAST, inputs: Sequence[int] = ()) -> int:
    return _EVALUATOR.evaluate(tree, inputs)
