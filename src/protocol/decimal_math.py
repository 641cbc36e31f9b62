"""Decimal context and helpers shared by the simulation engine.

Engine arithmetic runs in a context with no traps: a division by zero
yields ``Infinity`` and an invalid operation yields ``NaN`` instead of
raising, so malformed-but-numeric inputs degrade instead of crashing.
"""

from __future__ import annotations

from contextlib import contextmanager
from decimal import ROUND_HALF_EVEN, Context, Decimal, localcontext
from typing import Iterator

ENGINE_PRECISION = 34

ENGINE_CONTEXT = Context(
    prec=ENGINE_PRECISION,
    rounding=ROUND_HALF_EVEN,
    traps=[],
)

ZERO = Decimal(0)
ONE = Decimal(1)
HUNDRED = Decimal(100)
INFINITY = Decimal("Infinity")

DecimalLike = Decimal | int | float | str


@contextmanager
def engine_context() -> Iterator[Context]:
    """Run a block under the engine's trap-free decimal context."""
    with localcontext(ENGINE_CONTEXT) as ctx:
        yield ctx


def to_decimal(value: DecimalLike) -> Decimal:
    """Convert ``value`` to Decimal.

    Floats go through ``repr`` so ``0.8`` becomes ``Decimal("0.8")`` rather
    than its binary expansion.
    """
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        return Decimal(repr(value))
    return Decimal(value)


def quantize(value: Decimal, places: int) -> Decimal:
    """Round a finite value to ``places`` decimals; non-finite values pass through.

    Precision is widened to hold every integer digit plus ``places`` and a
    rounding carry, so large amounts are rounded rather than turned into NaN.
    """
    if not value.is_finite():
        return value
    ctx = ENGINE_CONTEXT.copy()
    ctx.prec = max(ENGINE_PRECISION, value.adjusted() + places + 2)
    with localcontext(ctx):
        return value.quantize(Decimal(1).scaleb(-places))


def decimal_to_str(value: Decimal, places: int | None = None) -> str:
    """Serialize a Decimal for JSON output (``"Infinity"`` for the sentinel)."""
    if places is not None:
        value = quantize(value, places)
    return str(value)
