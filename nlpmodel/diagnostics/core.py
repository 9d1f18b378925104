"""Diagnostic helpers for functions and assembled problems.

These helpers only read functions and problems; they never modify them.
Finite differences use central differences and are meant for checking
analytic derivatives on small problems.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np
from scipy import sparse

from nlpmodel.function.interval import contains, distance_outside

if TYPE_CHECKING:
    from nlpmodel.function.core import DifferentiableFunction, Function
    from nlpmodel.problem.core import BaseProblem

Array = np.ndarray


def finite_difference_jacobian(function: "Function", x, eps: float = 1e-6) -> Array:
    """Approximate the jacobian of ``function`` at ``x`` by central differences.

    Parameters
    ----------
    function:
        Any function; only ``compute`` is used.
    x:
        Point of size ``function.input_size``.
    eps:
        Perturbation size.

    Returns
    -------
    ndarray
        Dense matrix of shape ``(output_size, input_size)``.
    """
    if eps <= 0:
        raise ValueError("eps must be positive")
    x = np.asarray(x, dtype=float).reshape(-1).copy()
    jac = np.zeros((function.output_size, x.size), dtype=float)
    for i in range(x.size):
        ei = np.zeros_like(x)
        ei[i] = eps
        f_plus = function.compute(x + ei)
        f_minus = function.compute(x - ei)
        jac[:, i] = (f_plus - f_minus) / (2.0 * eps)
    return jac


def jacobian_error(function: "DifferentiableFunction", x, eps: float = 1e-6) -> float:
    """Largest absolute difference between the analytic and finite-difference jacobians."""
    analytic = function.jacobian(x)
    if sparse.issparse(analytic):
        analytic = analytic.toarray()
    approx = finite_difference_jacobian(function, x, eps=eps)
    if approx.size == 0:
        return 0.0
    return float(np.max(np.abs(np.asarray(analytic) - approx)))


def check_jacobian(
    function: "DifferentiableFunction", x, eps: float = 1e-6, atol: float = 1e-4
) -> bool:
    """Return True if the analytic jacobian matches finite differences within ``atol``."""
    return jacobian_error(function, x, eps=eps) <= atol


def assert_jacobian(
    function: "DifferentiableFunction", x, eps: float = 1e-6, atol: float = 1e-4
) -> None:
    """Raise ``ValueError`` if the analytic jacobian disagrees with finite differences."""
    error = jacobian_error(function, x, eps=eps)
    if error > atol:
        raise ValueError(
            f"Jacobian of function '{function.name}' does not match finite differences: "
            f"max deviation {error:.3e} exceeds tolerance {atol}"
        )


def constraint_values(problem: "BaseProblem", x) -> Array:
    """Concatenate the constraint outputs at ``x``, aligned with ``problem.bounds``."""
    parts = [entry.function.compute(x) for entry in problem.constraints]
    if not parts:
        return np.zeros(0, dtype=float)
    return np.concatenate(parts)


def constraint_violations(problem: "BaseProblem", x) -> Array:
    """Distance of each constraint output from its bound (0 where satisfied)."""
    values = constraint_values(problem, x)
    return np.array(
        [distance_outside(bound, value) for bound, value in zip(problem.bounds, values)],
        dtype=float,
    )


def is_feasible(problem: "BaseProblem", x, tol: float = 0.0) -> bool:
    """Return True if ``x`` satisfies the argument bounds and every constraint bound."""
    x = np.asarray(x, dtype=float).reshape(-1)
    if x.size != problem.function.input_size:
        raise ValueError(
            f"Point has size {x.size}, expected {problem.function.input_size}"
        )
    for bound, value in zip(problem.argument_bounds, x):
        if not contains(bound, value, tol):
            return False
    values = constraint_values(problem, x)
    return all(contains(bound, value, tol) for bound, value in zip(problem.bounds, values))


__all__ = [
    "finite_difference_jacobian",
    "jacobian_error",
    "check_jacobian",
    "assert_jacobian",
    "constraint_values",
    "constraint_violations",
    "is_feasible",
]
