"""
Nonlinear functions differentiated with PyTorch autograd.

:class:`AutogradFunction` wraps any callable written with ``torch``
operations. Values are computed in float64 by default and converted back to
NumPy at the boundary, so an :class:`AutogradFunction` can be stored in a
problem next to affine functions.
"""

from __future__ import annotations

from typing import Callable

import numpy as np
import torch

from .core import Array, TwiceDifferentiableFunction

TensorFn = Callable[[torch.Tensor], torch.Tensor]


class AutogradFunction(TwiceDifferentiableFunction):
    """
    Twice-differentiable function backed by a torch callable.

    Parameters
    ----------
    fn:
        Callable taking a 1-D tensor of size ``input_size`` and returning a
        tensor with ``output_size`` elements (a 0-D tensor is accepted when
        ``output_size == 1``).
    input_size, output_size:
        Domain and codomain dimensions.
    name:
        Optional label.
    dtype:
        Torch dtype used for evaluation.

    Example
    -------
    >>> circle = AutogradFunction(lambda x: (x**2).sum(), 2, 1, "circle")
    >>> circle.gradient([1.0, 2.0])
    array([2., 4.])
    """

    display_kind = "Autograd function"

    def __init__(
        self,
        fn: TensorFn,
        input_size: int,
        output_size: int,
        name: str = "",
        dtype: torch.dtype = torch.float64,
    ) -> None:
        if not callable(fn):
            raise TypeError("fn must be callable")
        super().__init__(input_size, output_size, name)
        self._fn = fn
        self._dtype = dtype

    def _to_tensor(self, x: Array) -> torch.Tensor:
        return torch.as_tensor(np.asarray(x, dtype=float), dtype=self._dtype)

    def _flat(self, t: torch.Tensor) -> torch.Tensor:
        out = self._fn(t)
        if not isinstance(out, torch.Tensor):
            out = torch.as_tensor(out, dtype=self._dtype)
        out = out.reshape(-1)
        if out.numel() != self.output_size:
            raise ValueError(
                f"Function '{self.name}' returned {out.numel()} values, "
                f"expected {self.output_size}"
            )
        return out

    def impl_compute(self, x: Array) -> Array:
        with torch.no_grad():
            value = self._flat(self._to_tensor(x))
        return value.detach().cpu().numpy().astype(float)

    def impl_gradient(self, x: Array, output_index: int) -> Array:
        params = self._to_tensor(x).clone().requires_grad_(True)
        value = self._flat(params)[output_index]
        if not value.requires_grad:
            # output built without the argument, e.g. a constant tensor
            return np.zeros(self.input_size, dtype=float)
        (grad,) = torch.autograd.grad(value, params, allow_unused=True)
        if grad is None:
            return np.zeros(self.input_size, dtype=float)
        return grad.detach().cpu().numpy().astype(float)

    def impl_jacobian(self, x: Array) -> Array:
        jac = torch.autograd.functional.jacobian(self._flat, self._to_tensor(x))
        return jac.detach().cpu().numpy().reshape(self.output_size, self.input_size).astype(float)

    def impl_hessian(self, x: Array, output_index: int) -> Array:
        hess = torch.autograd.functional.hessian(
            lambda t: self._flat(t)[output_index], self._to_tensor(x)
        )
        return hess.detach().cpu().numpy().reshape(self.input_size, self.input_size).astype(float)


__all__ = ["AutogradFunction", "TensorFn"]
