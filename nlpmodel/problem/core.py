"""
Optimization problem containers.

A problem is built around a scalar objective function. Constraints are
added one function at a time, each with its bounds and scale; the problem
checks every addition against the objective's input size and keeps the
per-output bound and scale sequences aligned with the constraint list:

    len(problem.bounds) == len(problem.scales)
                        == sum(entry.output_size for entry in problem.constraints)

The set of admissible constraint function types is fixed when the problem is
created (``constraint_kinds``). Each stored constraint is tagged with the
kind it was accepted as, so solver backends can dispatch on
``entry.kind`` without inspecting concrete classes.

Example
-------
>>> import numpy as np
>>> from nlpmodel.function import NumericLinearFunction
>>> cost = NumericLinearFunction(np.array([[1.0, 1.0]]), np.zeros(1), "cost")
>>> problem = Problem(cost, constraint_kinds=(NumericLinearFunction,))
>>> entry = problem.add_constraint(
...     NumericLinearFunction(np.array([[1.0, -1.0]]), np.zeros(1)), (0.0, 10.0)
... )
>>> problem.bounds
(Interval(lower=0.0, upper=10.0),)
"""

from __future__ import annotations

import io
import numbers
import sys
from dataclasses import dataclass
from typing import IO, Iterable, List, Optional, Sequence, Tuple, Type, Union

import numpy as np

from nlpmodel.errors import InvariantViolation, ProblemError
from nlpmodel.function.core import DifferentiableFunction, Function
from nlpmodel.function.interval import (
    INFINITY,
    Interval,
    IntervalLike,
    as_interval,
    format_intervals,
    format_scalar,
    infinite_intervals,
    is_interval_like,
)
from nlpmodel.logging import get_logger

from .printing import IndentWriter, describe_constraint, format_vector

logger = get_logger(__name__)

ConstraintKinds = Tuple[Type[Function], ...]
ScaleLike = Union[float, Sequence[float]]


@dataclass(frozen=True)
class ConstraintEntry:
    """
    A stored constraint.

    Attributes:
        kind: Admissible function type the constraint was accepted as.
        function: The constraint itself. The reference is shared with the
            caller; the problem never copies it.
    """

    kind: Type[Function]
    function: Function

    @property
    def input_size(self) -> int:
        return self.function.input_size

    @property
    def output_size(self) -> int:
        return self.function.output_size


def _normalize_kinds(constraint_kinds) -> ConstraintKinds:
    if isinstance(constraint_kinds, type):
        constraint_kinds = (constraint_kinds,)
    kinds = tuple(constraint_kinds)
    for kind in kinds:
        if not (isinstance(kind, type) and issubclass(kind, Function)):
            raise TypeError(f"Constraint kinds must be Function subclasses, got {kind!r}")
    return kinds


class BaseProblem:
    """
    State shared by every problem: objective, argument bounds and scales,
    and the optional starting point.
    """

    def __init__(self, function: Function) -> None:
        if function is None:
            raise InvariantViolation("Problem objective must not be None")
        if not isinstance(function, Function):
            raise TypeError(f"Objective must be a Function, got {type(function).__name__}")
        if function.output_size != 1:
            raise InvariantViolation(
                f"Objective must be scalar-valued (R^n -> R), got output size {function.output_size}"
            )
        self._function = function
        self._argument_bounds: List[Interval] = infinite_intervals(function.input_size)
        self._argument_scales: List[float] = [1.0] * function.input_size
        self._starting_point: Optional[np.ndarray] = None

    @property
    def function(self) -> Function:
        return self._function

    @property
    def argument_bounds(self) -> List[Interval]:
        """
        Mutable per-argument bounds, one interval per input dimension.

        The list is returned by reference. Item assignment and ``append`` on
        it are not validated; assign a whole sequence to go through the
        ordering and length checks.
        """
        return self._argument_bounds

    @argument_bounds.setter
    def argument_bounds(self, bounds: Iterable[IntervalLike]) -> None:
        intervals = [as_interval(bound) for bound in bounds]
        if len(intervals) != self._function.input_size:
            raise ProblemError(
                f"Invalid argument bounds (got {len(intervals)}, "
                f"expected {self._function.input_size})"
            )
        self._argument_bounds = intervals

    @property
    def argument_scales(self) -> List[float]:
        """
        Mutable per-argument scales, one value per input dimension.

        Returned by reference like :attr:`argument_bounds`; only whole
        assignment checks the length.
        """
        return self._argument_scales

    @argument_scales.setter
    def argument_scales(self, scales: Iterable[float]) -> None:
        values = [float(scale) for scale in scales]
        if len(values) != self._function.input_size:
            raise ProblemError(
                f"Invalid argument scales (got {len(values)}, "
                f"expected {self._function.input_size})"
            )
        self._argument_scales = values

    def _check_starting_point(self, point: np.ndarray) -> None:
        if point.size != self._function.input_size:
            raise ProblemError("Invalid starting point (wrong size)")

    @property
    def starting_point(self) -> Optional[np.ndarray]:
        """Initial argument handed to solvers, or None."""
        if self._starting_point is not None:
            self._check_starting_point(self._starting_point)
        return self._starting_point

    @starting_point.setter
    def starting_point(self, point) -> None:
        if point is None:
            self._starting_point = None
            return
        candidate = np.array(point, dtype=float).reshape(-1)
        self._check_starting_point(candidate)
        self._starting_point = candidate

    @property
    def constraints(self) -> Tuple[ConstraintEntry, ...]:
        return ()

    @property
    def bounds(self) -> Tuple[Interval, ...]:
        return ()

    @property
    def scales(self) -> Tuple[float, ...]:
        return ()

    @property
    def number_of_constraints(self) -> int:
        """Number of scalar constraint outputs."""
        return len(self.bounds)

    def _copy_base_into(self, other: "BaseProblem") -> None:
        other._argument_bounds = list(self._argument_bounds)
        other._argument_scales = list(self._argument_scales)
        if self._starting_point is not None:
            other._starting_point = self._starting_point.copy()

    def _print_header(self, writer: IndentWriter) -> None:
        writer.line(self._function.describe())
        writer.line("Argument's bounds: " + format_intervals(self._argument_bounds))
        writer.line("Argument's scales: " + ", ".join(format_scalar(s) for s in self._argument_scales))

    def _print_constraints(self, writer: IndentWriter) -> None:
        """Unconstrained problems have nothing to list."""

    def _print_footer(self, writer: IndentWriter) -> None:
        starting_point = self.starting_point
        if starting_point is not None:
            writer.line("Starting point: " + format_vector(starting_point))
            writer.line("Starting value: " + format_vector(self._function(starting_point)))
        else:
            writer.line("No starting point.")
        writer.line("Infinity value (for all functions): " + format_scalar(INFINITY))

    def print(self, stream: Optional[IO[str]] = None) -> IO[str]:
        """Write a description of the problem to ``stream`` (default stdout) and return it."""
        if stream is None:
            stream = sys.stdout
        writer = IndentWriter(stream)
        writer.line("Problem:")
        with writer.indented():
            self._print_header(writer)
            self._print_constraints(writer)
            self._print_footer(writer)
        return stream

    def __str__(self) -> str:
        buffer = io.StringIO()
        self.print(buffer)
        return buffer.getvalue()


class UnconstrainedProblem(BaseProblem):
    """
    Problem without constraint storage.

    Used when the set of admissible constraint kinds is empty. The
    ``constraints``, ``bounds`` and ``scales`` accessors return empty tuples
    so that solvers can read every problem the same way.
    """

    constraint_kinds: ConstraintKinds = ()

    def copy(self) -> "UnconstrainedProblem":
        clone = UnconstrainedProblem(self._function)
        self._copy_base_into(clone)
        return clone

    def __repr__(self) -> str:
        return f"UnconstrainedProblem(function={self._function!r})"


class Problem(BaseProblem):
    """
    Problem with an objective and constraints of a declared set of kinds.

    Parameters
    ----------
    function:
        Scalar objective ``R^n -> R``.
    constraint_kinds:
        Function types accepted as constraints (a type or a tuple of types).
        Must not be empty; see :class:`UnconstrainedProblem` or
        :meth:`Problem.create` for the constraint-free case.

    Raises
    ------
    InvariantViolation
        If the objective is missing or not scalar-valued.
    TypeError
        If a constraint kind is not a :class:`Function` subclass, or the set
        is empty.
    """

    def __init__(
        self,
        function: Function,
        constraint_kinds=(DifferentiableFunction,),
    ) -> None:
        super().__init__(function)
        kinds = _normalize_kinds(constraint_kinds)
        if not kinds:
            raise TypeError(
                "Problem requires at least one constraint kind; use UnconstrainedProblem instead"
            )
        self._constraint_kinds: ConstraintKinds = kinds
        self._constraints: List[ConstraintEntry] = []
        self._bounds: List[Interval] = []
        self._scales: List[float] = []

    @staticmethod
    def create(function: Function, constraint_kinds=(DifferentiableFunction,)) -> BaseProblem:
        """Build a :class:`Problem`, or an :class:`UnconstrainedProblem` when no kind is declared."""
        if not _normalize_kinds(constraint_kinds):
            return UnconstrainedProblem(function)
        return Problem(function, constraint_kinds)

    @property
    def constraint_kinds(self) -> ConstraintKinds:
        return self._constraint_kinds

    @property
    def constraints(self) -> Tuple[ConstraintEntry, ...]:
        return tuple(self._constraints)

    @property
    def bounds(self) -> Tuple[Interval, ...]:
        """Bounds of every scalar constraint output, in constraint order."""
        return tuple(self._bounds)

    @property
    def scales(self) -> Tuple[float, ...]:
        """Scales of every scalar constraint output, aligned with :attr:`bounds`."""
        return tuple(self._scales)

    def admissible_kind(self, function: Function) -> Type[Function]:
        """
        Return the first declared kind ``function`` is an instance of.

        Raises:
            TypeError: If no declared kind matches.
        """
        for kind in self._constraint_kinds:
            if isinstance(function, kind):
                return kind
        names = ", ".join(kind.__name__ for kind in self._constraint_kinds)
        raise TypeError(
            f"Constraint of type {type(function).__name__} is not one of the admissible kinds ({names})"
        )

    def _rejected(self, error: type, message: str) -> Exception:
        logger.debug("Rejected constraint: %s", message)
        return error(message)

    @staticmethod
    def _expand_scales(scales: ScaleLike, count: int) -> List[float]:
        if isinstance(scales, numbers.Real):
            return [float(scales)] * count
        values = [float(scale) for scale in np.asarray(scales, dtype=float).reshape(-1)]
        if len(values) != count:
            raise ProblemError(
                f"Invalid constraint scales (got {len(values)}, expected {count})"
            )
        return values

    def add_constraint(
        self,
        function: Function,
        bounds: Union[IntervalLike, Sequence[IntervalLike]],
        scales: ScaleLike = 1.0,
    ) -> ConstraintEntry:
        """
        Append a constraint with its bounds and scale.

        ``bounds`` is either one interval, for a function with a single
        output, or a list holding one interval per output. ``scales`` is a
        single value applied to every output, or one value per output.
        Either everything is appended or nothing is: a rejected call leaves
        the problem unchanged.

        Returns:
            The stored :class:`ConstraintEntry`.

        Raises:
            InvariantViolation: If ``function`` is None or a bound has its
                lower end above its upper end.
            TypeError: If ``function`` is not of an admissible kind.
            ProblemError: If the input size differs from the objective's,
                or the number of bounds or scales differs from the output
                size.
        """
        if function is None:
            raise self._rejected(InvariantViolation, "Invalid constraint (null function)")
        kind = self.admissible_kind(function)

        if function.input_size != self._function.input_size:
            raise self._rejected(ProblemError, "Invalid constraint (wrong input size)")

        if not isinstance(bounds, (tuple, list, np.ndarray)):
            bounds = list(bounds)
        if is_interval_like(bounds):
            if function.output_size != 1:
                raise self._rejected(
                    ProblemError, "Invalid constraint (output size is not equal to one)"
                )
            new_bounds = [as_interval(bounds)]
        else:
            bound_list = list(bounds)
            if function.output_size != len(bound_list):
                raise self._rejected(
                    ProblemError,
                    f"Invalid constraint (output size {function.output_size} does not "
                    f"match the {len(bound_list)} bounds given)",
                )
            new_bounds = [as_interval(bound) for bound in bound_list]

        new_scales = self._expand_scales(scales, len(new_bounds))

        entry = ConstraintEntry(kind, function)
        self._constraints.append(entry)
        self._bounds.extend(new_bounds)
        self._scales.extend(new_scales)
        logger.debug(
            "Added constraint %d (%s, %d output(s))",
            len(self._constraints) - 1,
            kind.__name__,
            function.output_size,
        )
        return entry

    def copy(self) -> "Problem":
        """Copy the problem; constraint functions are shared, sequences are not."""
        return self.convert(self._constraint_kinds)

    def convert(self, constraint_kinds) -> "Problem":
        """
        Copy the problem into one accepting ``constraint_kinds``.

        Raises:
            TypeError: If a stored constraint is not admissible under the
                new kind set.
        """
        clone = Problem(self._function, constraint_kinds)
        clone._constraints = [
            ConstraintEntry(clone.admissible_kind(entry.function), entry.function)
            for entry in self._constraints
        ]
        clone._bounds = list(self._bounds)
        clone._scales = list(self._scales)
        self._copy_base_into(clone)
        return clone

    def _print_constraints(self, writer: IndentWriter) -> None:
        if not self._constraints:
            writer.line("No constraints.")
            return
        writer.line(f"Number of constraints: {self.number_of_constraints}")
        bound_index = 0
        for constraint_index, entry in enumerate(self._constraints):
            describe_constraint(entry.function, writer, self, constraint_index, bound_index)
            bound_index += entry.output_size

    def __repr__(self) -> str:
        return (
            f"Problem(function={self._function!r}, "
            f"constraints={len(self._constraints)}, outputs={len(self._bounds)})"
        )


__all__ = [
    "ConstraintEntry",
    "ConstraintKinds",
    "BaseProblem",
    "UnconstrainedProblem",
    "Problem",
]
