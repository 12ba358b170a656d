"""
Port: BoundsInferencer
Odpowiedzialność: statyczne (bez wejść) wyznaczanie przedziału wartości wyrażenia.
"""
from typing import Optional, Protocol, runtime_checkable

from contracts import ExprAST, Interval, SoundnessReport


@runtime_checkable
class BoundsInferencer(Protocol):
    def bounds(self, ast: ExprAST) -> Interval:
        """
        Returns the sound enclosing Interval of every value evaluate() can
        produce for inputs inside each variable's declared bounds.
        O(1): the Interval is computed once when the node is built.
        """
        ...

    def infer(self, ast: ExprAST) -> Interval:
        """
        Recomputes the Interval bottom-up without using per-node caches.
        Must always equal bounds(ast).
        """
        ...

    def check_soundness(
        self,
        ast: ExprAST,
        samples: int,
        seed: Optional[int] = None,
    ) -> SoundnessReport:
        """
        Evaluates the tree on random in-bounds inputs and reports every result
        that falls outside bounds(ast). Evaluations failing with
        DivisionByZero or IntegerOverflow are counted, not reported.
        """
        ...
