"""
Linear and affine functions.

:class:`NumericLinearFunction` implements

    f(x) = A x + b

with ``A`` of shape ``(m, n)`` and ``b`` of size ``m``. Its derivatives do
not depend on ``x``: the gradient of output ``i`` is row ``i`` of ``A``, the
jacobian is ``A`` and every hessian is zero. ``A`` may be given as a dense
array or as a ``scipy.sparse`` matrix; the latter makes the function sparse
(jacobians are returned in CSR format).
"""

from __future__ import annotations

import numpy as np
from scipy import sparse

from .core import Array, Matrix, MatrixKind, TwiceDifferentiableFunction


class LinearFunction(TwiceDifferentiableFunction):
    """Function whose second derivatives are identically zero."""

    display_kind = "Linear function"

    def impl_hessian(self, x: Array, output_index: int) -> Array:
        return np.zeros((self.input_size, self.input_size), dtype=float)


class NumericLinearFunction(LinearFunction):
    """
    Affine function built from a matrix ``A`` and a vector ``b``.

    Parameters
    ----------
    A:
        Matrix of shape ``(output_size, input_size)``, dense or sparse.
    b:
        Offset vector of size ``output_size``.
    name:
        Optional label.

    Raises
    ------
    ValueError
        If ``A`` is not two-dimensional or ``b`` does not have one entry per
        row of ``A``.

    Example
    -------
    >>> f = NumericLinearFunction(np.eye(2), np.zeros(2), "identity")
    >>> f([3.0, 4.0])
    array([3., 4.])
    """

    display_kind = "Numeric linear function"

    def __init__(self, A, b, name: str = "") -> None:
        if sparse.issparse(A):
            a_mat = sparse.csr_matrix(A, dtype=float, copy=True)
            kind = MatrixKind.SPARSE
        else:
            a_mat = np.array(A, dtype=float, copy=True)
            kind = MatrixKind.DENSE
        if a_mat.ndim != 2:
            raise ValueError(f"A must be a 2-D matrix, got shape {a_mat.shape}")

        b_vec = np.array(b, dtype=float, copy=True).reshape(-1)
        if b_vec.size != a_mat.shape[0]:
            raise ValueError(
                f"b has size {b_vec.size} but A has {a_mat.shape[0]} rows"
            )

        super().__init__(a_mat.shape[1], a_mat.shape[0], name)
        self.matrix_kind = kind
        self._a = a_mat
        self._b = b_vec

    @classmethod
    def from_function(cls, function: LinearFunction, name: str | None = None) -> "NumericLinearFunction":
        """
        Convert a linear function that already stores its ``(A, b)`` pair.

        This is a change of representation, not a linearization: functions
        without ``A`` and ``b`` attributes are rejected.

        Raises
        ------
        TypeError
            If ``function`` is not a :class:`LinearFunction` holding ``A``
            and ``b``.
        """
        if not isinstance(function, LinearFunction):
            raise TypeError(
                f"Cannot convert {type(function).__name__} to a numeric linear function"
            )
        a_mat = getattr(function, "A", None)
        b_vec = getattr(function, "b", None)
        if a_mat is None or b_vec is None:
            raise TypeError(
                f"{type(function).__name__} does not expose its (A, b) representation"
            )
        return cls(a_mat, b_vec, function.name if name is None else name)

    @property
    def A(self) -> Matrix:
        return self._a

    @property
    def b(self) -> Array:
        return self._b

    def impl_compute(self, x: Array) -> Array:
        return np.asarray(self._a @ x, dtype=float).reshape(-1) + self._b

    def impl_gradient(self, x: Array, output_index: int) -> Array:
        if self.matrix_kind is MatrixKind.SPARSE:
            return self._a[[output_index], :].toarray().reshape(-1)
        return self._a[output_index, :].copy()

    def impl_jacobian(self, x: Array) -> Matrix:
        return self._a.copy()

    def describe(self) -> str:
        lines = [super().describe()]
        if self.matrix_kind is MatrixKind.SPARSE:
            lines.append(f"A = sparse {self._a.shape[0]}x{self._a.shape[1]} ({self._a.nnz} non-zeros)")
        else:
            lines.append("A = " + np.array2string(self._a, separator=", "))
        lines.append("b = " + np.array2string(self._b, separator=", "))
        return "\n".join(lines)


AffineFunction = NumericLinearFunction


__all__ = ["LinearFunction", "NumericLinearFunction", "AffineFunction"]
