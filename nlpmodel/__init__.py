"""nlpmodel - modeling layer for nonlinear optimization problems."""

__version__ = "0.1.0"

# Diagnostics
from .diagnostics import (
    assert_jacobian,
    check_jacobian,
    constraint_values,
    constraint_violations,
    debug_context,
    finite_difference_jacobian,
    is_debug_enabled,
    is_feasible,
    set_debug_enabled,
)

# Errors
from .errors import InvariantViolation, ProblemError

# Functions
from .function import (
    INFINITY,
    AffineFunction,
    AutogradFunction,
    DifferentiableFunction,
    Function,
    Interval,
    LinearFunction,
    MatrixKind,
    NumericLinearFunction,
    TwiceDifferentiableFunction,
    infinity,
    make_infinite_interval,
    make_interval,
    make_lower_interval,
    make_upper_interval,
)

# Problems
from .problem import (
    BaseProblem,
    ConstraintEntry,
    Problem,
    UnconstrainedProblem,
    describe_constraint,
)

# Visualization
from .visualization import Command, Gnuplot, plot_jacobian

__all__ = [
    # Version
    "__version__",
    # Errors
    "ProblemError",
    "InvariantViolation",
    # Functions
    "MatrixKind",
    "Function",
    "DifferentiableFunction",
    "TwiceDifferentiableFunction",
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
    # Problems
    "BaseProblem",
    "ConstraintEntry",
    "Problem",
    "UnconstrainedProblem",
    "describe_constraint",
    # Diagnostics
    "finite_difference_jacobian",
    "check_jacobian",
    "assert_jacobian",
    "constraint_values",
    "constraint_violations",
    "is_feasible",
    "is_debug_enabled",
    "set_debug_enabled",
    "debug_context",
    # Visualization
    "Command",
    "Gnuplot",
    "plot_jacobian",
]
