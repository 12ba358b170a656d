"""
Port: Evaluator
Odpowiedzialność: deterministyczne liczenie wyrażeń ExprAST dla płaskiej listy wejść.
"""
from typing import Protocol, Sequence, runtime_checkable

from contracts import EvalResult, ExprAST


@runtime_checkable
class Evaluator(Protocol):
    def evaluate(self, ast: ExprAST, inputs: Sequence[int]) -> int:
        """
        Evaluates an expression tree against positional inputs.
        inputs: one value per VariableNode, in left-to-right depth-first order;
                len(inputs) must equal the tree's variable count.
        Division truncates toward zero.
        Raises ArgumentCountMismatch, InvalidInput (non-int value), OutOfRange,
        DivisionByZero or IntegerOverflow (all EvalError subclasses);
        evaluation stops at the first error.
        """
        ...

    def eval_expr(self, ast: ExprAST, inputs: Sequence[int]) -> EvalResult:
        """
        Same as evaluate(), but never raises EvalError.
        Returns EvalResult with either:
          - value: int and steps: human-readable computation steps
          - error: EvalErrorInfo describing the first failure
        """
        ...
