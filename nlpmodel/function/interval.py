"""
Intervals bounding scalar quantities.

An interval is a ``(lower, upper)`` pair with ``lower <= upper``. Either end
may be the infinite sentinel :data:`INFINITY` (negated for the lower end),
which makes the interval one-sided or unbounded. Intervals are used both for
argument bounds and for the bounds of every scalar constraint output.
"""

from __future__ import annotations

import math
import numbers
from typing import Iterable, List, NamedTuple, Sequence, Tuple, Union

from nlpmodel.errors import InvariantViolation

INFINITY = float("inf")


class Interval(NamedTuple):
    """Closed interval ``[lower, upper]``."""

    lower: float
    upper: float


IntervalLike = Union[Interval, Tuple[float, float], Sequence[float]]


def infinity() -> float:
    """Return the value used to represent an unbounded end."""
    return INFINITY


def make_interval(lower: float, upper: float) -> Interval:
    """
    Build an interval, checking that its ends are ordered.

    Raises:
        InvariantViolation: If an end is NaN or ``lower > upper``.
    """
    lower = float(lower)
    upper = float(upper)
    if math.isnan(lower) or math.isnan(upper):
        raise InvariantViolation(f"Interval ends must not be NaN, got ({lower}, {upper})")
    if lower > upper:
        raise InvariantViolation(
            f"Invalid interval: lower bound {lower} is greater than upper bound {upper}"
        )
    return Interval(lower, upper)


def make_infinite_interval() -> Interval:
    return Interval(-INFINITY, INFINITY)


def make_lower_interval(lower: float) -> Interval:
    """Interval ``[lower, +inf)``."""
    return make_interval(lower, INFINITY)


def make_upper_interval(upper: float) -> Interval:
    """Interval ``(-inf, upper]``."""
    return make_interval(-INFINITY, upper)


def as_interval(value: IntervalLike) -> Interval:
    """
    Convert a 2-sequence into a checked :class:`Interval`.

    ``None`` at either end stands for a free bound and becomes the matching
    infinity.
    """
    if isinstance(value, Interval):
        return make_interval(value.lower, value.upper)
    try:
        lower, upper = value
    except (TypeError, ValueError) as exc:
        raise TypeError(f"Expected a (lower, upper) pair, got {value!r}") from exc
    lower = -INFINITY if lower is None else lower
    upper = INFINITY if upper is None else upper
    return make_interval(lower, upper)


def is_interval_like(value: object) -> bool:
    """Return True if ``value`` looks like one ``(lower, upper)`` pair of scalars."""
    if isinstance(value, Interval):
        return True
    if isinstance(value, (str, bytes)):
        return False
    try:
        items = list(value)  # type: ignore[arg-type]
    except TypeError:
        return False
    return len(items) == 2 and all(
        item is None or isinstance(item, numbers.Real) for item in items
    )


def get_lower_bound(interval: IntervalLike) -> float:
    return float(interval[0])


def get_upper_bound(interval: IntervalLike) -> float:
    return float(interval[1])


def contains(interval: IntervalLike, value: float, tol: float = 0.0) -> bool:
    """Return True if ``value`` lies in the interval, widened by ``tol``."""
    return get_lower_bound(interval) - tol <= value <= get_upper_bound(interval) + tol


def distance_outside(interval: IntervalLike, value: float) -> float:
    """Distance from ``value`` to the interval (0 when inside)."""
    lower = get_lower_bound(interval)
    upper = get_upper_bound(interval)
    if value < lower:
        return lower - value
    if value > upper:
        return value - upper
    return 0.0


def format_scalar(value: float) -> str:
    if math.isinf(value):
        return "inf" if value > 0 else "-inf"
    return f"{value:g}"


def format_interval(interval: IntervalLike) -> str:
    return f"({format_scalar(get_lower_bound(interval))}, {format_scalar(get_upper_bound(interval))})"


def format_intervals(intervals: Iterable[IntervalLike]) -> str:
    return ", ".join(format_interval(interval) for interval in intervals)


def infinite_intervals(count: int) -> List[Interval]:
    return [make_infinite_interval() for _ in range(count)]


__all__ = [
    "INFINITY",
    "Interval",
    "IntervalLike",
    "infinity",
    "make_interval",
    "make_infinite_interval",
    "make_lower_interval",
    "make_upper_interval",
    "as_interval",
    "is_interval_like",
    "get_lower_bound",
    "get_upper_bound",
    "contains",
    "distance_outside",
    "format_scalar",
    "format_interval",
    "format_intervals",
    "infinite_intervals",
]
