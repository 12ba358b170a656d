"""
Adapter: IntervalInferencer
Implementuje port BoundsInferencer — abstrakcyjna interpretacja ExprAST
w dziedzinie przedziałów.

bounds()          — odczyt cache węzła (liczony przy konstrukcji)
infer()           — ponowne liczenie przez fold, bez cache
check_soundness() — losowe próbkowanie wejść i porównanie z bounds()
"""
from __future__ import annotations

import logging
import random
from typing import Any, Optional

from adapters.evaluator.ast_evaluator import ASTEvaluator
from adapters.expr_tree.fold import ExprFolder, iter_variables
from contracts import (
    BinOpNode,
    DivisionByZero,
    EvalError,
    ExprAST,
    IntegerOverflow,
    Interval,
    LiteralNode,
    SoundnessReport,
    SoundnessViolation,
    VariableNode,
    apply_interval_op,
)

logger = logging.getLogger("expr_bounds.inferencer")

# Szansa wylosowania końca przedziału zamiast wartości z wnętrza
_EDGE_PROBABILITY = 0.25


class _BoundsFold(ExprFolder[Interval]):
    def literal(self, node: LiteralNode, ctx: Any) -> Interval:
        return Interval.point(node.value)

    def variable(self, node: VariableNode, ctx: Any) -> Interval:
        return node.allowed

    def binop(self, node: BinOpNode, left: Interval, right: Interval) -> Interval:
        return apply_interval_op(node.op, left, right)


class IntervalInferencer:
    """Statyczne przedziały wartości + empiryczna kontrola poprawności."""

    def __init__(self, evaluator: Optional[ASTEvaluator] = None):
        self._evaluator = evaluator or ASTEvaluator()

    # -- BoundsInferencer protocol -----------------------------------------

    def bounds(self, ast: ExprAST) -> Interval:
        return ast.bounds

    def infer(self, ast: ExprAST) -> Interval:
        return _BoundsFold().fold(ast)

    def check_soundness(
        self,
        ast: ExprAST,
        samples: int,
        seed: Optional[int] = None,
    ) -> SoundnessReport:
        rng = random.Random(seed)
        variables = [v.allowed for v in iter_variables(ast)]
        report = SoundnessReport(bounds=ast.bounds, samples=samples)

        for i in range(samples):
            inputs = self._sample_inputs(variables, rng, i)
            try:
                value = self._evaluator.evaluate(ast, inputs)
            except (DivisionByZero, IntegerOverflow) as exc:
                report.failed[exc.code] = report.failed.get(exc.code, 0) + 1
                continue
            except EvalError:
                # próbki są zawsze w zakresie, więc inny błąd to bug
                logger.error("Nieoczekiwany błąd ewaluacji dla %r", inputs)
                raise

            report.evaluated += 1
            if report.observed_min is None or value < report.observed_min:
                report.observed_min = value
            if report.observed_max is None or value > report.observed_max:
                report.observed_max = value
            if not ast.bounds.contains(value):
                logger.warning(
                    "Wynik %d poza przedziałem %s dla wejść %r", value, ast.bounds, inputs
                )
                report.violations.append(
                    SoundnessViolation(inputs=inputs, value=value, bounds=ast.bounds)
                )

        logger.info(
            "Sprawdzono %d próbek: %d policzonych, %d naruszeń",
            samples, report.evaluated, len(report.violations),
        )
        return report

    # -- Prywatne ----------------------------------------------------------

    @staticmethod
    def _sample_inputs(variables: list[Interval], rng: random.Random, i: int) -> list[int]:
        # dwie pierwsze próbki to narożniki: same dolne i same górne końce
        if i == 0:
            return [iv.lower for iv in variables]
        if i == 1:
            return [iv.upper for iv in variables]
        inputs = []
        for iv in variables:
            if rng.random() < _EDGE_PROBABILITY:
                inputs.append(rng.choice((iv.lower, iv.upper)))
            else:
                inputs.append(rng.randint(iv.lower, iv.upper))
        return inputs
