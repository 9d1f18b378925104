"""
Human-readable rendering of problems.

Constraint blocks are produced by :func:`describe_constraint`, a
``functools.singledispatch`` visitor keyed on the constraint's function
type. The problem only walks its constraint list; each registered overload
decides how its kind of function is shown. Register an overload to
customize the rendering of a new function type::

    @describe_constraint.register(MyFunction)
    def _(function, writer, problem, constraint_index, bound_index):
        ...
"""

from __future__ import annotations

from contextlib import contextmanager
from functools import singledispatch
from typing import IO, Iterable, Iterator

import numpy as np

from nlpmodel.function.core import Function
from nlpmodel.function.interval import contains, format_interval, format_scalar
from nlpmodel.function.linear import LinearFunction


class IndentWriter:
    """Line-oriented writer that prefixes every line with the current indentation."""

    def __init__(self, stream: IO[str], step: str = "  ") -> None:
        self._stream = stream
        self._step = step
        self._level = 0

    @property
    def level(self) -> int:
        return self._level

    def line(self, text: str = "") -> None:
        prefix = self._step * self._level
        for part in str(text).split("\n"):
            self._stream.write(prefix + part + "\n")

    @contextmanager
    def indented(self) -> Iterator[None]:
        self._level += 1
        try:
            yield
        finally:
            self._level -= 1


def format_vector(values: Iterable[float]) -> str:
    return "[" + ", ".join(format_scalar(float(v)) for v in np.asarray(values).reshape(-1)) + "]"


def _write_constraint_block(
    label: str,
    function: Function,
    writer: IndentWriter,
    problem,
    bound_index: int,
) -> None:
    count = function.output_size
    bounds = problem.bounds[bound_index:bound_index + count]
    scales = problem.scales[bound_index:bound_index + count]

    writer.line(label)
    with writer.indented():
        writer.line(function.describe())
        writer.line("Bounds: " + "".join(format_interval(b) for b in bounds))
        writer.line("Scales: " + "  ".join(format_scalar(s) for s in scales))

        starting_point = problem.starting_point
        if starting_point is not None:
            values = function(starting_point)
            text = "Initial value: " + format_vector(values)
            for value, bound in zip(values, bounds):
                if not contains(bound, value):
                    text += " (constraint not satisfied)"
            writer.line(text)


@singledispatch
def describe_constraint(
    function: Function,
    writer: IndentWriter,
    problem,
    constraint_index: int,
    bound_index: int,
) -> None:
    """
    Write the block describing one stored constraint.

    Parameters
    ----------
    function:
        Constraint function; selects the overload.
    writer:
        Destination.
    problem:
        Problem owning the constraint (read for bounds, scales and the
        starting point).
    constraint_index:
        Position of the constraint in ``problem.constraints``.
    bound_index:
        Position of the constraint's first output in ``problem.bounds``.
    """
    _write_constraint_block(f"Constraint {constraint_index}", function, writer, problem, bound_index)


@describe_constraint.register(LinearFunction)
def _describe_linear_constraint(
    function: LinearFunction,
    writer: IndentWriter,
    problem,
    constraint_index: int,
    bound_index: int,
) -> None:
    _write_constraint_block(
        f"Constraint {constraint_index} (linear)", function, writer, problem, bound_index
    )


__all__ = ["IndentWriter", "describe_constraint", "format_vector"]
