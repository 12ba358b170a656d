"""
Adapter: ExprFolder
Wspólne przejście strukturalne po ExprAST (post-order, lewe przed prawym).

Z tego samego folda korzystają:
  - ewaluator         (kontekst = wycinek wejść)
  - inferencja bounds (bez kontekstu)
  - VariableCounter   — ile VariableNode w poddrzewie
  - render()          — czytelny zapis wyrażenia z nazwami zmiennych

Kontekst dzielony jest między lewe i prawe poddrzewo przez split();
domyślnie oba dostają ten sam.
"""
from __future__ import annotations

from typing import Any, Generic, Iterator, TypeVar

from contracts import BinOpNode, ExprAST, LiteralNode, VariableNode

T = TypeVar("T")


class ExprFolder(Generic[T]):
    """Bazowy fold; podklasy nadpisują literal/variable/binop."""

    def fold(self, node: ExprAST, ctx: Any = None) -> T:
        if isinstance(node, LiteralNode):
            return self.literal(node, ctx)
        if isinstance(node, VariableNode):
            return self.variable(node, ctx)
        if isinstance(node, BinOpNode):
            left_ctx, right_ctx = self.split(node, ctx)
            left = self.fold(node.left, left_ctx)
            right = self.fold(node.right, right_ctx)
            return self.binop(node, left, right)
        raise TypeError(f"Nieznany typ węzła AST: {type(node)}")

    def split(self, node: BinOpNode, ctx: Any) -> tuple[Any, Any]:
        return ctx, ctx

    def literal(self, node: LiteralNode, ctx: Any) -> T:
        raise NotImplementedError

    def variable(self, node: VariableNode, ctx: Any) -> T:
        raise NotImplementedError

    def binop(self, node: BinOpNode, left: T, right: T) -> T:
        raise NotImplementedError


class VariableCounter(ExprFolder[int]):
    def literal(self, node: LiteralNode, ctx: Any) -> int:
        return 0

    def variable(self, node: VariableNode, ctx: Any) -> int:
        return 1

    def binop(self, node: BinOpNode, left: int, right: int) -> int:
        return left + right


def variable_count(node: ExprAST) -> int:
    """Liczba zmiennych w poddrzewie (bez korzystania z cache węzła)."""
    return VariableCounter().fold(node)


def iter_variables(node: ExprAST) -> Iterator[VariableNode]:
    """Zmienne w kolejności wiązania: od lewej do prawej, w głąb."""
    if isinstance(node, VariableNode):
        yield node
    elif isinstance(node, BinOpNode):
        yield from iter_variables(node.left)
        yield from iter_variables(node.right)


def variable_label(node: VariableNode, position: int) -> str:
    return node.name or f"v{position}"


class _Renderer(ExprFolder[str]):
    # ctx = pozycja pierwszej zmiennej poddrzewa
    def split(self, node: BinOpNode, ctx: int) -> tuple[int, int]:
        return ctx, ctx + node.left.variable_count

    def literal(self, node: LiteralNode, ctx: int) -> str:
        return str(node.value)

    def variable(self, node: VariableNode, ctx: int) -> str:
        return variable_label(node, ctx)

    def binop(self, node: BinOpNode, left: str, right: str) -> str:
        if isinstance(node.left, BinOpNode):
            left = f"({left})"
        if isinstance(node.right, BinOpNode):
            right = f"({right})"
        return f"{left} {node.op.symbol} {right}"


def render(node: ExprAST) -> str:
    return _Renderer().fold(node, 0)
