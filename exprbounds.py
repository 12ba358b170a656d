#!/usr/bin/env python3
"""
exprbounds.py — CLI narzędzie ExprBounds.

Buduje przykładowe wyrażenia, wypisuje ich statyczne przedziały wartości
i wyniki ewaluacji. Działa całkowicie lokalnie, bez I/O poza konsolą.

Konfiguracja: zmienne środowiskowe z prefiksem EXPR_BOUNDS_
lub plik .env (np. EXPR_BOUNDS_CHECK_SAMPLES=5000).

Podkomendy:
    formulas — x bez ograniczeń: x + (x-2)*(x-3) oraz x / (x-7)
    bounded  — x w [-5, 5]: trzy formuły z przedziałami
    multi    — x, y, z: (x + (y-2)*(z-3)) / 2 dla trzech wektorów testowych
    check    — losowa kontrola poprawności przedziałów wszystkich formuł

Użycie:
    python exprbounds.py formulas 4
    python exprbounds.py bounded -3
    python exprbounds.py multi
    python exprbounds.py check --samples 5000 --seed 7
"""
from __future__ import annotations

import argparse
import logging
import sys
from typing import Any, Optional, Sequence

from rich import box
from rich.console import Console
from rich.table import Table

from adapters.bounds.interval_inferencer import IntervalInferencer
from adapters.evaluator.ast_evaluator import ASTEvaluator
from adapters.expr_tree.fold import iter_variables, render, variable_label
from contracts import ExprAST, Interval
from engine import add, div, lit, mul, sub, var

logger = logging.getLogger("expr_bounds.cli")


# -- helpers ---------------------------------------------------------------

_CONSOLE: Console | None = None


def _console() -> Console:
    global _CONSOLE
    if _CONSOLE is None:
        _CONSOLE = Console(highlight=False)
    return _CONSOLE


def _err(message: str) -> None:
    print(message, file=sys.stderr)


def _print_kv_table(title: str, rows: list[tuple[str, Any]]) -> None:
    table = Table(title=title, box=box.ASCII, show_header=False, pad_edge=False)
    table.add_column("Key", no_wrap=True, style="bold cyan")
    table.add_column("Value")
    for key, value in rows:
        table.add_row(str(key), str(value))
    _console().print(table)


def _fmt_bounds(tree: ExprAST) -> str:
    return f"{tree.bounds.lower} <= f <= {tree.bounds.upper}"


def _print_formula_table(title: str, formulas: list[tuple[str, ExprAST]], x: int) -> int:
    """Wypisuje formuły z przedziałami i wartościami; zwraca liczbę błędów.

    Każde wystąpienie x to osobny slot wejścia, więc x jest powielany.
    """
    evaluator = ASTEvaluator()
    failures = 0
    table = Table(title=title, box=box.ASCII)
    table.add_column("Name", no_wrap=True, style="cyan")
    table.add_column("Formula")
    table.add_column("Bounds", no_wrap=True)
    table.add_column("Value", justify="right", no_wrap=True)
    for name, tree in formulas:
        result = evaluator.eval_expr(tree, [x] * tree.variable_count)
        if result.ok:
            value = str(result.value)
        else:
            failures += 1
            value = f"ERROR {result.error.code}"
            _err(f"{name}: {result.error.message}")
        table.add_row(name, render(tree), _fmt_bounds(tree), value)
    _console().print(table)
    return failures


# -- formuły przykładowe ---------------------------------------------------

def single_variable_formulas() -> list[tuple[str, ExprAST]]:
    x = var(*Interval.full().as_tuple(), "x")
    return [
        ("f1", add(x, mul(sub(x, lit(2)), sub(x, lit(3))))),
        ("f2", div(x, sub(x, lit(7)))),
    ]


BOUNDED_X = (-5, 5)


def bounded_formulas() -> list[tuple[str, ExprAST]]:
    x = var(*BOUNDED_X, "x")
    return [
        ("f1", add(x, mul(sub(x, lit(2)), sub(x, lit(3))))),
        ("f2", div(x, lit(2))),
        ("f3", mul(add(x, lit(3)), add(x, lit(5)))),
    ]


MULTI_CASES = [
    ((3, 29, 50), 636),
    ((-2, 20, 62), 530),
    ((0, 12, 47), 220),
]


def multi_variable_formula() -> ExprAST:
    x = var(-5, 5, "x")
    y = var(10, 30, "y")
    z = var(45, 65, "z")
    return div(add(x, mul(sub(y, lit(2)), sub(z, lit(3)))), lit(2))


# -- podkomendy ------------------------------------------------------------

def _formulas(args: argparse.Namespace) -> int:
    _print_kv_table("Input", [("x", args.x)])
    failures = _print_formula_table(
        "Single variable formulas", single_variable_formulas(), args.x
    )
    return 1 if failures else 0


def _bounded(args: argparse.Namespace) -> int:
    lower, upper = BOUNDED_X
    _print_kv_table("Input", [("x", args.x), ("allowed", f"{lower} <= x <= {upper}")])
    failures = _print_formula_table("Bounded formulas", bounded_formulas(), args.x)
    return 1 if failures else 0


def _multi(args: argparse.Namespace) -> int:
    tree = multi_variable_formula()
    evaluator = ASTEvaluator()
    variables = list(iter_variables(tree))
    names = [variable_label(v, i) for i, v in enumerate(variables)]

    rows: list[tuple[str, Any]] = [("f", render(tree))]
    for name, v in zip(names, variables):
        rows.append((name, f"{v.allowed.lower} <= {name} <= {v.allowed.upper}"))
    rows.append(("bounds", _fmt_bounds(tree)))
    _print_kv_table("Info", rows)

    table = Table(title="Test cases", box=box.ASCII)
    table.add_column("#", justify="right", no_wrap=True)
    table.add_column("Inputs")
    table.add_column("Expected", justify="right")
    table.add_column("Actual", justify="right")
    table.add_column("Correct", no_wrap=True)
    failures = 0
    for i, (inputs, expected) in enumerate(MULTI_CASES):
        result = evaluator.eval_expr(tree, inputs)
        actual = str(result.value) if result.ok else f"ERROR {result.error.code}"
        correct = result.ok and result.value == expected
        if not correct:
            failures += 1
        table.add_row(
            str(i),
            ", ".join(f"{n}={v}" for n, v in zip(names, inputs)),
            str(expected),
            actual,
            "YES" if correct else "NO",
        )
    _console().print(table)
    return 1 if failures else 0


def _check(args: argparse.Namespace) -> int:
    from config import Settings

    settings = Settings()
    samples = args.samples if args.samples is not None else settings.check_samples
    seed = args.seed if args.seed is not None else settings.check_seed

    inferencer = IntervalInferencer()
    formulas = [
        *(("single " + n, t) for n, t in single_variable_formulas()),
        *(("bounded " + n, t) for n, t in bounded_formulas()),
        ("multi f", multi_variable_formula()),
    ]

    table = Table(title=f"Soundness check [{samples} samples]", box=box.ASCII)
    table.add_column("Name", no_wrap=True, style="cyan")
    table.add_column("Bounds")
    table.add_column("Observed")
    table.add_column("Evaluated", justify="right")
    table.add_column("Failed", justify="right")
    table.add_column("Violations", justify="right")
    unsound = 0
    for name, tree in formulas:
        report = inferencer.check_soundness(tree, samples, seed)
        if not report.sound:
            unsound += 1
        observed = (
            "-" if report.observed_min is None
            else f"[{report.observed_min}, {report.observed_max}]"
        )
        table.add_row(
            name,
            str(report.bounds),
            observed,
            str(report.evaluated),
            str(sum(report.failed.values())),
            str(len(report.violations)),
        )
    _console().print(table)
    return 1 if unsound else 0


# -- main ------------------------------------------------------------------

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="exprbounds",
        description="ExprBounds — statyczne przedziały i ewaluacja wyrażeń całkowitych",
    )
    sub_parsers = parser.add_subparsers(dest="command", required=True)

    # formulas
    p = sub_parsers.add_parser("formulas", help="x bez ograniczeń: dwie formuły")
    p.add_argument("x", type=int, help="Wartość zmiennej x")

    # bounded
    p = sub_parsers.add_parser("bounded", help="x w [-5, 5]: trzy formuły z przedziałami")
    p.add_argument("x", type=int, help="Wartość zmiennej x")

    # multi
    sub_parsers.add_parser("multi", help="Trzy zmienne, trzy wektory testowe")

    # check
    p = sub_parsers.add_parser("check", help="Losowa kontrola poprawności przedziałów")
    p.add_argument("--samples", type=int, default=None, metavar="N")
    p.add_argument("--seed", type=int, default=None)

    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    from pydantic import ValidationError

    from config import Settings

    args = build_parser().parse_args(argv)
    try:
        settings = Settings()
    except ValidationError as e:
        _err(f"Błędna konfiguracja EXPR_BOUNDS_*: {e}")
        return 2
    logging.basicConfig(level=settings.log_level)

    cmds = {
        "formulas": _formulas,
        "bounded":  _bounded,
        "multi":    _multi,
        "check":    _check,
    }
    logger.debug("Komenda: %s", args.command)
    return cmds[args.command](args)


if __name__ == "__main__":
    sys.exit(main())
