"""Problem containers: objective, constraints, bounds, scales and starting point."""

from .core import (
    BaseProblem,
    ConstraintEntry,
    ConstraintKinds,
    Problem,
    UnconstrainedProblem,
)
from .printing import IndentWriter, describe_constraint

__all__ = [
    "BaseProblem",
    "ConstraintEntry",
    "ConstraintKinds",
    "Problem",
    "UnconstrainedProblem",
    "IndentWriter",
    "describe_constraint",
]
