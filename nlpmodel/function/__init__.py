"""Function hierarchy: generic contracts, affine functions and autograd-backed functions."""

from .autograd import AutogradFunction
from .core import (
    DifferentiableFunction,
    Function,
    MatrixKind,
    TwiceDifferentiableFunction,
)
from .interval import (
    INFINITY,
    Interval,
    as_interval,
    contains,
    format_interval,
    get_lower_bound,
    get_upper_bound,
    infinity,
    make_infinite_interval,
    make_interval,
    make_lower_interval,
    make_upper_interval,
)
from .linear import AffineFunction, LinearFunction, NumericLinearFunction

__all__ = [
    # Contracts
    "MatrixKind",
    "Function",
    "DifferentiableFunction",
    "TwiceDifferentiableFunction",
    # Concrete kinds
    "LinearFunction",
    "NumericLinearFunction",
    "AffineFunction",
    "AutogradFunction",
    # Intervals
    "INFINITY",
    "Interval",
    "infinity",
    "make_interval",
    "make_infinite_interval",
    "make_lower_interval",
    "make_upper_interval",
    "as_interval",
    "get_lower_bound",
    "get_upper_bound",
    "contains",
    "format_interval",
]
