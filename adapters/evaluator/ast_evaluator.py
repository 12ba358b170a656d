"""
Adapter: ASTEvaluator
Implementuje port Evaluator — rekurencyjne przejście ExprAST z pozycyjnym
wiązaniem zmiennych.

Płaska lista wejść dzielona jest między poddrzewa: lewe dostaje pierwsze
variable_count(left) wartości, prawe resztę. Dzięki temu VariableNode zawsze
czyta pierwszy element swojego wycinka.

evaluate()  — zwraca int albo rzuca EvalError
eval_expr() — zwraca EvalResult (wartość + kroki, albo opis błędu)
"""
from __future__ import annotations

import logging
from typing import Optional, Sequence

from pydantic import StrictInt, TypeAdapter, ValidationError

from adapters.expr_tree.fold import ExprFolder, variable_label
from contracts import (
    ArgumentCountMismatch,
    BinOpKind,
    BinOpNode,
    DivisionByZero,
    EvalError,
    EvalResult,
    ExprAST,
    IntegerOverflow,
    InvalidInput,
    LiteralNode,
    OutOfRange,
    VariableNode,
    fits_int,
    trunc_div,
)

logger = logging.getLogger("expr_bounds.evaluator")

# bool to podklasa int, ale StrictInt go odrzuca
_INPUTS = TypeAdapter(tuple[StrictInt, ...])


def _apply(op: BinOpKind, a: int, b: int) -> int:
    if op is BinOpKind.ADD:
        return a + b
    if op is BinOpKind.SUB:
        return a - b
    if op is BinOpKind.MUL:
        return a * b
    if op is BinOpKind.DIV:
        if b == 0:
            raise DivisionByZero()
        return trunc_div(a, b)
    raise ValueError(f"Nieznany operator: {op!r}")


class _Evaluation(ExprFolder[int]):
    """Jedna ewaluacja; ctx = (offset, wycinek wejść)."""

    def __init__(self, steps: Optional[list[str]] = None):
        self.steps = steps

    def split(self, node: BinOpNode, ctx):
        offset, values = ctx
        n_left = node.left.variable_count
        left_values = values[:n_left]
        right_values = values[n_left:]
        return (offset, left_values), (offset + n_left, right_values)

    def literal(self, node: LiteralNode, ctx) -> int:
        return node.value

    def variable(self, node: VariableNode, ctx) -> int:
        offset, values = ctx
        value = values[0]
        if not node.allowed.contains(value):
            raise OutOfRange(value, node.allowed)
        if self.steps is not None:
            self.steps.append(f"{variable_label(node, offset)} = {value}")
        return value

    def binop(self, node: BinOpNode, left: int, right: int) -> int:
        result = _apply(node.op, left, right)
        if not fits_int(result):
            raise IntegerOverflow(result)
        if self.steps is not None:
            self.steps.append(f"{left} {node.op.symbol} {right} = {result}")
        return result


class ASTEvaluator:
    """Ewaluator wyrażeń całkowitoliczbowych z pozycyjnym wiązaniem zmiennych."""

    # -- Evaluator protocol ------------------------------------------------

    def evaluate(self, ast: ExprAST, inputs: Sequence[int]) -> int:
        values = self._check_inputs(ast, inputs)
        return _Evaluation().fold(ast, (0, values))

    def eval_expr(self, ast: ExprAST, inputs: Sequence[int]) -> EvalResult:
        steps: list[str] = []
        try:
            values = self._check_inputs(ast, inputs)
            value = _Evaluation(steps).fold(ast, (0, values))
        except EvalError as exc:
            logger.debug("Ewaluacja przerwana (%s): %s", exc.code, exc)
            return EvalResult(error=exc.info(), steps=steps)
        return EvalResult(value=value, steps=steps)

    # -- Prywatne ----------------------------------------------------------

    @staticmethod
    def _check_inputs(ast: ExprAST, inputs: Sequence[int]) -> tuple[int, ...]:
        values = tuple(inputs)
        expected = ast.variable_count
        if len(values) != expected:
            raise ArgumentCountMismatch(expected, len(values))
        try:
            return _INPUTS.validate_python(values)
        except ValidationError as exc:
            position = exc.errors()[0]["loc"][0]
            raise InvalidInput(position, values[position]) from None
