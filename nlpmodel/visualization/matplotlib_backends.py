"""Optional matplotlib rendering of jacobian sparsity patterns.

Matplotlib is an optional dependency (``pip install nlpmodel[viz]``).
"""

from __future__ import annotations

import numpy as np

from nlpmodel.function.core import DifferentiableFunction, MatrixKind

from .gnuplot import normalize

try:
    from matplotlib import pyplot as plt
    from matplotlib.axes import Axes
    from matplotlib.colors import ListedColormap
    HAS_MATPLOTLIB = True
except ImportError:
    HAS_MATPLOTLIB = False
    if False:
        from matplotlib.axes import Axes


def jacobian_pattern(function: DifferentiableFunction, x) -> np.ndarray:
    """Return the jacobian at ``x`` with every entry mapped to 0 or 1."""
    if function.matrix_kind is MatrixKind.SPARSE:
        raise NotImplementedError("jacobian_pattern does not support sparse functions")
    jac = np.asarray(function.jacobian(x), dtype=float)
    return np.vectorize(normalize, otypes=[float])(jac) if jac.size else jac


def plot_jacobian_pattern(function: DifferentiableFunction, x, ax: "Axes | None" = None) -> "Axes":
    """
    Draw the binary sparsity pattern of ``function.jacobian(x)``.

    Zero entries are white, non-zero entries blue, matching the gnuplot
    script produced by :func:`nlpmodel.visualization.gnuplot.plot_jacobian`.

    Parameters
    ----------
    function:
        Dense differentiable function.
    x:
        Evaluation point.
    ax:
        Axes to draw on. A new figure is created if None.

    Returns
    -------
    matplotlib.axes.Axes

    Raises
    ------
    RuntimeError
        If matplotlib is not installed.
    NotImplementedError
        For sparse functions.
    """
    if not HAS_MATPLOTLIB:
        raise RuntimeError(
            "matplotlib required for plotting; install with pip install matplotlib"
        )

    pattern = jacobian_pattern(function, x)
    if ax is None:
        _, ax = plt.subplots()
    ax.imshow(
        pattern,
        cmap=ListedColormap(["white", "blue"]),
        vmin=0.0,
        vmax=1.0,
        interpolation="nearest",
    )
    ax.set_title(f"jacobian({function.get_name()})")
    ax.set_xlabel("argument")
    ax.set_ylabel("output")
    ax.grid(True, alpha=0.3)
    return ax


__all__ = ["HAS_MATPLOTLIB", "jacobian_pattern", "plot_jacobian_pattern"]
