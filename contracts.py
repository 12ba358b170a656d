"""
contracts.py — Jedyne źródło prawdy dla typów danych w ExprBounds.
Wszystkie moduły importują WYŁĄCZNIE stąd. Nie modyfikować bez versioning.

Zawiera:
  - Interval     — domknięty przedział liczb całkowitych + arytmetyka przedziałowa
  - ExprAST      — niemutowalne drzewo wyrażenia (LiteralNode, VariableNode, BinOpNode)
  - EvalResult   — wynik ewaluacji w postaci obiektu (port Evaluator)
  - EvalError    — hierarchia błędów ewaluacji
"""
from __future__ import annotations

from enum import Enum
from fractions import Fraction
from typing import Any, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr, model_validator

CONTRACTS_VERSION = "1.0.0"

# Silnik liczy na 32-bitowym int ze znakiem.
INT_BITS = 32
INT_MIN = -(2 ** (INT_BITS - 1))
INT_MAX = 2 ** (INT_BITS - 1) - 1

# "Nieskończoności" w odwrotności dzielnika.
NEG_INF = INT_MIN
POS_INF = INT_MAX


# ─────────────────────────── Helpers ─────────────────────────────────────

def saturate(value: int) -> int:
    """Przycina wartość do zakresu [INT_MIN, INT_MAX] zamiast zawijać."""
    if value < INT_MIN:
        return INT_MIN
    if value > INT_MAX:
        return INT_MAX
    return value


def fits_int(value: int) -> bool:
    return INT_MIN <= value <= INT_MAX


def trunc_div(a: int, b: int) -> int:
    """Dzielenie całkowite obcinane w stronę zera (nie floor)."""
    q = abs(a) // abs(b)
    return q if (a < 0) == (b < 0) else -q


# ─────────────────────────── Interval ────────────────────────────────────

class DivisionCase(int, Enum):
    OUTSIDE = 0      # 0 poza przedziałem
    UPPER_ZERO = 1   # upper == 0, lower != 0
    LOWER_ZERO = 2   # lower == 0, upper != 0
    STRADDLES = 3    # lower < 0 < upper albo [0, 0]


class Interval(BaseModel):
    """
    Closed integer range [lower, upper].

    Arithmetic follows standard interval arithmetic: both operands are treated
    as independent sets, so `x - x` is not proven to be [0, 0]. Every operator
    saturates at INT_MIN / INT_MAX instead of overflowing.
    """
    model_config = ConfigDict(frozen=True)

    lower: int = Field(ge=INT_MIN, le=INT_MAX)
    upper: int = Field(ge=INT_MIN, le=INT_MAX)

    @model_validator(mode="after")
    def _check_order(self) -> Interval:
        if self.lower > self.upper:
            raise ValueError(
                f"Odwrócony przedział: lower={self.lower} > upper={self.upper}"
            )
        return self

    @classmethod
    def of(cls, lower: int, upper: int) -> Interval:
        return cls(lower=lower, upper=upper)

    @classmethod
    def point(cls, value: int) -> Interval:
        return cls(lower=value, upper=value)

    @classmethod
    def full(cls) -> Interval:
        return cls(lower=INT_MIN, upper=INT_MAX)

    def contains(self, value: int) -> bool:
        return self.lower <= value <= self.upper

    def as_tuple(self) -> tuple[int, int]:
        return (self.lower, self.upper)

    @property
    def unbounded_below(self) -> bool:
        return self.lower == NEG_INF

    @property
    def unbounded_above(self) -> bool:
        return self.upper == POS_INF

    # -- arytmetyka przedziałowa -------------------------------------------

    def __add__(self, other: Interval) -> Interval:
        return Interval(
            lower=saturate(self.lower + other.lower),
            upper=saturate(self.upper + other.upper),
        )

    def __sub__(self, other: Interval) -> Interval:
        return Interval(
            lower=saturate(self.lower - other.upper),
            upper=saturate(self.upper - other.lower),
        )

    def __mul__(self, other: Interval) -> Interval:
        products = _pairwise_products(self.lower, self.upper, other.lower, other.upper)
        return Interval(lower=saturate(min(products)), upper=saturate(max(products)))

    def __truediv__(self, other: Interval) -> Interval:
        """a / b liczone jako a * (1/b); odwrotność z `reciprocal()`."""
        rhs_lower, rhs_upper = other.reciprocal()
        products = _pairwise_products(self.lower, self.upper, rhs_lower, rhs_upper)
        # int(Fraction) obcina w stronę zera, tak jak dzielenie w ewaluatorze
        return Interval(
            lower=saturate(int(min(products))),
            upper=saturate(int(max(products))),
        )

    def division_case(self) -> DivisionCase:
        if self.lower > 0 or self.upper < 0:
            return DivisionCase.OUTSIDE
        if self.upper == 0 and self.lower != 0:
            return DivisionCase.UPPER_ZERO
        if self.lower == 0 and self.upper != 0:
            return DivisionCase.LOWER_ZERO
        return DivisionCase.STRADDLES

    def reciprocal(self) -> tuple[Fraction, Fraction]:
        """
        Dokładna odwrotność przedziału (Fraction, bez float).
        Końce nieograniczone to NEG_INF / POS_INF.
        """
        case = self.division_case()
        if case in (DivisionCase.OUTSIDE, DivisionCase.LOWER_ZERO):
            lower = Fraction(1, self.upper)
        else:
            lower = Fraction(NEG_INF)
        if case in (DivisionCase.OUTSIDE, DivisionCase.UPPER_ZERO):
            upper = Fraction(1, self.lower)
        else:
            upper = Fraction(POS_INF)
        return lower, upper

    def __str__(self) -> str:
        return f"[{self.lower}, {self.upper}]"


def _pairwise_products(a_lo, a_hi, b_lo, b_hi) -> tuple:
    return (a_lo * b_lo, a_lo * b_hi, a_hi * b_lo, a_hi * b_hi)


# ─────────────────────────── Expression AST ──────────────────────────────

class BinOpKind(str, Enum):
    ADD = "add"
    SUB = "sub"
    MUL = "mul"
    DIV = "div"

    @property
    def symbol(self) -> str:
        return _OP_SYMBOLS[self]


_OP_SYMBOLS = {
    BinOpKind.ADD: "+",
    BinOpKind.SUB: "-",
    BinOpKind.MUL: "*",
    BinOpKind.DIV: "/",
}


class _Node(BaseModel):
    # Węzeł jest niemutowalny; bounds i variable_count liczone raz w model_post_init
    model_config = ConfigDict(frozen=True)

    _bounds: Interval = PrivateAttr()
    _variable_count: int = PrivateAttr(default=0)

    @property
    def bounds(self) -> Interval:
        return self._bounds

    @property
    def variable_count(self) -> int:
        return self._variable_count

    def model_copy(self, *, update: Optional[dict[str, Any]] = None, deep: bool = False):
        # kopia przechodzi walidację, żeby cache liczył się od nowa
        copied = super().model_copy(update=update, deep=deep)
        return type(self).model_validate(dict(copied))


class LiteralNode(_Node):
    node_type: Literal["literal"] = "literal"
    value: int = Field(ge=INT_MIN, le=INT_MAX)

    def model_post_init(self, __context: Any) -> None:
        self._bounds = Interval.point(self.value)
        self._variable_count = 0


class VariableNode(_Node):
    node_type: Literal["variable"] = "variable"
    allowed: Interval
    name: Optional[str] = None   # tylko etykieta; wiązanie jest pozycyjne

    def model_post_init(self, __context: Any) -> None:
        self._bounds = self.allowed
        self._variable_count = 1


class BinOpNode(_Node):
    node_type: Literal["binop"] = "binop"
    op: BinOpKind
    left: "ExprAST"
    right: "ExprAST"

    def model_post_init(self, __context: Any) -> None:
        self._bounds = apply_interval_op(self.op, self.left.bounds, self.right.bounds)
        self._variable_count = self.left.variable_count + self.right.variable_count


ExprAST = Union[LiteralNode, VariableNode, BinOpNode]
BinOpNode.model_rebuild()


def apply_interval_op(op: BinOpKind, a: Interval, b: Interval) -> Interval:
    if op is BinOpKind.ADD:
        return a + b
    if op is BinOpKind.SUB:
        return a - b
    if op is BinOpKind.MUL:
        return a * b
    if op is BinOpKind.DIV:
        return a / b
    raise ValueError(f"Nieznany operator: {op!r}")


# ─────────────────────────── Errors ──────────────────────────────────────

class EvalError(Exception):
    """Bazowy błąd ewaluacji. Ewaluacja przerywana jest natychmiast."""
    code = "EVAL_ERROR"

    def info(self) -> EvalErrorInfo:
        return EvalErrorInfo(code=self.code, message=str(self), details=self.details())

    def details(self) -> dict[str, Any]:
        return {}


class OutOfRange(EvalError):
    code = "OUT_OF_RANGE"

    def __init__(self, value: int, allowed: Interval):
        self.value = value
        self.allowed = allowed
        super().__init__(
            f"Value {value} for the variable is outside of the allowed range {allowed}"
        )

    def details(self) -> dict[str, Any]:
        return {"value": self.value, "lower": self.allowed.lower, "upper": self.allowed.upper}


class DivisionByZero(EvalError):
    code = "DIVISION_BY_ZERO"

    def __init__(self):
        super().__init__("Division by zero is undefined")


class ArgumentCountMismatch(EvalError):
    code = "ARGUMENT_COUNT_MISMATCH"

    def __init__(self, expected: int, actual: int):
        self.expected = expected
        self.actual = actual
        super().__init__(f"Expected {expected} input value(s), got {actual}")

    def details(self) -> dict[str, Any]:
        return {"expected": self.expected, "actual": self.actual}


class IntegerOverflow(EvalError):
    code = "INTEGER_OVERFLOW"

    def __init__(self, value: int):
        self.value = value
        super().__init__(f"Result {value} does not fit a {INT_BITS}-bit signed integer")

    def details(self) -> dict[str, Any]:
        return {"value": self.value}


class InvalidInput(EvalError):
    code = "INVALID_INPUT"

    def __init__(self, position: int, value: Any):
        self.position = position
        self.value = value
        super().__init__(f"Input #{position} must be an integer, got {value!r}")

    def details(self) -> dict[str, Any]:
        return {"position": self.position, "value": repr(self.value)}


# ─────────────────────────── Evaluator ───────────────────────────────────

class EvalErrorInfo(BaseModel):
    code: str      # np. "OUT_OF_RANGE", "DIVISION_BY_ZERO"
    message: str
    details: dict[str, Any] = Field(default_factory=dict)


class EvalResult(BaseModel):
    value: Optional[int] = None
    error: Optional[EvalErrorInfo] = None
    steps: list[str] = Field(default_factory=list)  # czytelne kroki

    @property
    def ok(self) -> bool:
        return self.error is None


# ─────────────────────────── Bounds check ────────────────────────────────

class SoundnessViolation(BaseModel):
    inputs: list[int]
    value: int
    bounds: Interval


class SoundnessReport(BaseModel):
    bounds: Interval
    samples: int
    evaluated: int = 0
    failed: dict[str, int] = Field(default_factory=dict)  # code -> liczba
    violations: list[SoundnessViolation] = Field(default_factory=list)
    observed_min: Optional[int] = None
    observed_max: Optional[int] = None

    @property
    def sound(self) -> bool:
        return not self.violations
