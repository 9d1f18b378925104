"""Visualization helpers: gnuplot scripts and optional matplotlib plots."""

from .gnuplot import (
    Command,
    Gnuplot,
    clear,
    comment,
    normalize,
    plot_jacobian,
    replot,
    set_command,
    unset_command,
)
from .matplotlib_backends import jacobian_pattern, plot_jacobian_pattern

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
    "jacobian_pattern",
    "plot_jacobian_pattern",
]
