"""
Function hierarchy shared by objectives and constraints.

A :class:`Function` maps ``R^n`` to ``R^m`` where ``n`` (``input_size``) and
``m`` (``output_size``) are fixed at construction. Subclasses implement the
``impl_*`` hooks; the public methods (:meth:`Function.compute`,
:meth:`DifferentiableFunction.gradient`,
:meth:`DifferentiableFunction.jacobian`,
:meth:`TwiceDifferentiableFunction.hessian`) validate argument sizes and,
in debug mode, the shape and finiteness of what the hooks return.

Derivative matrices are dense NumPy arrays unless the function declares
``matrix_kind = MatrixKind.SPARSE``, in which case jacobians are returned as
``scipy.sparse.csr_matrix``. Gradients and hessians are always dense.
"""

from __future__ import annotations

import io
import sys
from abc import ABC, abstractmethod
from enum import Enum
from typing import IO, Optional, Tuple, Union

import numpy as np
from scipy import sparse

from nlpmodel.diagnostics.debug_mode import is_debug_enabled
from nlpmodel.errors import InvariantViolation

Array = np.ndarray
Matrix = Union[np.ndarray, sparse.spmatrix]


class MatrixKind(Enum):
    """Storage used for derivative matrices."""

    DENSE = "dense"
    SPARSE = "sparse"


def _check_result(value: Matrix, shape: Tuple[int, ...], what: str, name: str) -> None:
    """Debug-mode postcondition on values produced by ``impl_*`` hooks."""
    if not is_debug_enabled():
        return
    if value.shape != shape:
        raise InvariantViolation(
            f"{what} of function '{name}' has shape {value.shape}, expected {shape}"
        )
    data = value.data if sparse.issparse(value) else value
    if not np.all(np.isfinite(data)):
        raise InvariantViolation(f"{what} of function '{name}' contains non-finite values")


class Function(ABC):
    """
    Mathematical function ``f: R^n -> R^m``.

    Parameters
    ----------
    input_size:
        Dimension ``n`` of the argument.
    output_size:
        Dimension ``m`` of the result.
    name:
        Optional label used in diagnostics.
    """

    matrix_kind: MatrixKind = MatrixKind.DENSE
    display_kind: str = "Function"

    def __init__(self, input_size: int, output_size: int, name: str = "") -> None:
        if int(input_size) < 0 or int(output_size) < 0:
            raise ValueError(
                f"Function sizes must be non-negative, got input_size={input_size}, "
                f"output_size={output_size}"
            )
        self._input_size = int(input_size)
        self._output_size = int(output_size)
        self._name = str(name) if name is not None else ""

    @property
    def input_size(self) -> int:
        return self._input_size

    @property
    def output_size(self) -> int:
        return self._output_size

    @property
    def name(self) -> str:
        return self._name

    def get_name(self) -> str:
        return self._name

    def _as_argument(self, x) -> Array:
        """Return ``x`` as a 1-D float array of size ``input_size``."""
        arg = np.asarray(x, dtype=float).reshape(-1)
        if arg.size != self._input_size:
            raise ValueError(
                f"Argument of function '{self._name}' has size {arg.size}, "
                f"expected {self._input_size}"
            )
        return arg

    def compute(self, x) -> Array:
        """Evaluate the function at ``x`` and return a vector of size ``output_size``."""
        arg = self._as_argument(x)
        result = np.atleast_1d(np.asarray(self.impl_compute(arg), dtype=float))
        _check_result(result, (self._output_size,), "Result", self._name)
        return result.reshape(-1)

    def __call__(self, x) -> Array:
        return self.compute(x)

    @abstractmethod
    def impl_compute(self, x: Array) -> Array:
        """Compute ``f(x)``; ``x`` has already been validated."""

    def describe(self) -> str:
        """Return a human-readable, possibly multi-line description."""
        label = f"{self.display_kind} (input size: {self._input_size}, output size: {self._output_size})"
        if self._name:
            return f"{self._name}: {label}"
        return label

    def print(self, stream: Optional[IO[str]] = None) -> IO[str]:
        """Write :meth:`describe` to ``stream`` (default ``sys.stdout``) and return it."""
        if stream is None:
            stream = sys.stdout
        stream.write(self.describe())
        return stream

    def __str__(self) -> str:
        buffer = io.StringIO()
        self.print(buffer)
        return buffer.getvalue()

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(input_size={self._input_size}, "
            f"output_size={self._output_size}, name={self._name!r})"
        )


class DifferentiableFunction(Function):
    """Function exposing first derivatives."""

    display_kind = "Differentiable function"

    def _check_output_index(self, output_index: int) -> int:
        index = int(output_index)
        if not 0 <= index < self._output_size:
            raise ValueError(
                f"Output index {output_index} out of range for function '{self._name}' "
                f"with output size {self._output_size}"
            )
        return index

    def gradient(self, x, output_index: int = 0) -> Array:
        """Return the gradient of output ``output_index`` at ``x`` (size ``input_size``)."""
        arg = self._as_argument(x)
        index = self._check_output_index(output_index)
        grad = self.impl_gradient(arg, index)
        if sparse.issparse(grad):
            grad = grad.toarray()
        grad = np.asarray(grad, dtype=float)
        _check_result(grad.reshape(-1), (self._input_size,), "Gradient", self._name)
        return grad.reshape(-1)

    def jacobian(self, x) -> Matrix:
        """
        Return the ``(output_size, input_size)`` jacobian at ``x``.

        Row ``i`` equals ``gradient(x, i)``. Sparse functions return a
        ``scipy.sparse.csr_matrix``.
        """
        arg = self._as_argument(x)
        jac = self.impl_jacobian(arg)
        if self.matrix_kind is MatrixKind.SPARSE:
            jac = sparse.csr_matrix(jac, dtype=float)
        else:
            if sparse.issparse(jac):
                jac = jac.toarray()
            jac = np.asarray(jac, dtype=float)
        _check_result(jac, (self._output_size, self._input_size), "Jacobian", self._name)
        return jac

    @abstractmethod
    def impl_gradient(self, x: Array, output_index: int) -> Array:
        """Gradient of output ``output_index``; arguments already validated."""

    def impl_jacobian(self, x: Array) -> Matrix:
        """Default jacobian: stack one gradient per output."""
        jac = np.zeros((self._output_size, self._input_size), dtype=float)
        for i in range(self._output_size):
            grad = self.impl_gradient(x, i)
            if sparse.issparse(grad):
                grad = grad.toarray()
            jac[i, :] = np.asarray(grad, dtype=float).reshape(-1)
        return jac


class TwiceDifferentiableFunction(DifferentiableFunction):
    """Differentiable function that also exposes hessians."""

    display_kind = "Twice differentiable function"

    def hessian(self, x, output_index: int = 0) -> Array:
        """Return the ``(input_size, input_size)`` hessian of output ``output_index``."""
        arg = self._as_argument(x)
        index = self._check_output_index(output_index)
        hess = self.impl_hessian(arg, index)
        if sparse.issparse(hess):
            hess = hess.toarray()
        hess = np.asarray(hess, dtype=float)
        _check_result(hess, (self._input_size, self._input_size), "Hessian", self._name)
        return hess

    @abstractmethod
    def impl_hessian(self, x: Array, output_index: int) -> Array:
        """Hessian of output ``output_index``; arguments already validated."""


__all__ = [
    "Array",
    "Matrix",
    "MatrixKind",
    "Function",
    "DifferentiableFunction",
    "TwiceDifferentiableFunction",
]
