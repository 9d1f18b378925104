"""Diagnostics and debugging utilities for nlpmodel."""

from .core import (
    assert_jacobian,
    check_jacobian,
    constraint_values,
    constraint_violations,
    finite_difference_jacobian,
    is_feasible,
    jacobian_error,
)
from .debug_mode import (
    debug_context,
    is_debug_enabled,
    set_debug_enabled,
)

__all__ = [
    "finite_difference_jacobian",
    "jacobian_error",
    "check_jacobian",
    "assert_jacobian",
    "constraint_values",
    "constraint_violations",
    "is_feasible",
    "is_debug_enabled",
    "set_debug_enabled",
    "debug_context",
]
