"""
Gnuplot script generation.

Scripts are assembled from :class:`Command` objects pushed into a
:class:`Gnuplot` script. :func:`plot_jacobian` renders the sparsity pattern
of a jacobian: every entry is normalized to 0 (exact zero) or 1 (anything
else) and drawn as a white/blue image, one pixel per matrix entry.

Example
-------
>>> script = Gnuplot.make_interactive_gnuplot()
>>> script << plot_jacobian(f, x)
>>> print(script)
"""

from __future__ import annotations

from typing import List, Optional

import numpy as np

from nlpmodel.function.core import DifferentiableFunction, MatrixKind
from nlpmodel.logging import get_logger

logger = get_logger(__name__)


class Command:
    """One or more gnuplot statements."""

    def __init__(self, text: str) -> None:
        self._text = str(text)

    @property
    def command(self) -> str:
        return self._text

    def __str__(self) -> str:
        return self._text

    def __repr__(self) -> str:
        return f"Command({self._text!r})"

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Command) and other._text == self._text

    def __hash__(self) -> int:
        return hash(self._text)


class Gnuplot:
    """Ordered gnuplot script."""

    def __init__(self, commands: Optional[List[Command]] = None) -> None:
        self._commands: List[Command] = list(commands or [])

    @classmethod
    def make_gnuplot(cls) -> "Gnuplot":
        return cls()

    @classmethod
    def make_interactive_gnuplot(cls) -> "Gnuplot":
        """Script opening a persistent interactive window."""
        return cls([set_command("terminal", "wxt persist")])

    @property
    def commands(self) -> List[Command]:
        return list(self._commands)

    def push(self, command: Command) -> "Gnuplot":
        if not isinstance(command, Command):
            raise TypeError(f"Expected a Command, got {type(command).__name__}")
        self._commands.append(command)
        return self

    def __lshift__(self, command: Command) -> "Gnuplot":
        return self.push(command)

    def __str__(self) -> str:
        parts = []
        for command in self._commands:
            text = str(command)
            parts.append(text if text.endswith("\n") else text + "\n")
        return "".join(parts)


def comment(text: str) -> Command:
    return Command(f"# {text}")


def set_command(var: str, value: str = "") -> Command:
    return Command(f"set {var} {value}" if value else f"set {var}")


def unset_command(var: str) -> Command:
    return Command(f"unset {var}")


def clear() -> Command:
    return Command("clear")


def replot() -> Command:
    return Command("replot")


def normalize(value: float) -> float:
    """Map exact zeros to 0 and every other value to 1."""
    return 0.0 if value == 0 else 1.0


def _format_range_end(value: int) -> str:
    # same text as a float streamed with default precision: 3.0 -> "3"
    return f"{float(value):.9g}"


def plot_jacobian(function: DifferentiableFunction, x) -> Command:
    """
    Plot the binary sparsity pattern of ``function.jacobian(x)``.

    Raises
    ------
    NotImplementedError
        For sparse functions; gnuplot has no sparse matrix image support.
    """
    if function.matrix_kind is MatrixKind.SPARSE:
        raise NotImplementedError("plot_jacobian does not support sparse functions")

    jac = np.asarray(function.jacobian(x), dtype=float)
    rows, cols = jac.shape
    logger.debug("Plotting %dx%d jacobian of '%s'", rows, cols, function.name)

    text = f"set title 'jacobian({function.get_name()})'\n"
    # White = 0, Blue = non zero
    text += "set palette defined(0 \"white\",1 \"blue\")\n"
    text += "set grid front\n"
    text += f"set xrange [0:{_format_range_end(cols)}]\n"
    text += f"set yrange [0:{_format_range_end(rows)}] reverse\n"
    text += "set size ratio -1\n"
    text += "unset colorbox\n"
    # pixels are centered on integer coordinates
    text += "plot '-' using ($1+0.5):($2+0.5):($3 == 0 ? 0 : 1) "
    text += "matrix with image notitle\n"
    for i in range(rows if cols else 0):
        text += " ".join("%1.2f" % normalize(jac[i, j]) for j in range(cols)) + "\n"
    text += "e\n"
    return Command(text)


__all__ = [
    "Command",
    "Gnuplot",
    "comment",
    "set_command",
    "unset_command",
    "clear",
    "replot",
    "normalize",
    "plot_jacobian",
]
