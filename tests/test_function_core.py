"""Tests for the generic function contracts."""

import io

import numpy as np
import pytest

from nlpmodel.function import DifferentiableFunction, Function, TwiceDifferentiableFunction


class Square(DifferentiableFunction):
    """f(x) = [x0^2, x0 * x1]; gradients only, jacobian from the default."""

    def __init__(self) -> None:
        super().__init__(2, 2, "square")

    def impl_compute(self, x):
        return np.array([x[0] ** 2, x[0] * x[1]])

    def impl_gradient(self, x, output_index):
        if output_index == 0:
            return np.array([2 * x[0], 0.0])
        return np.array([x[1], x[0]])


class Constant(Function):
    def __init__(self, value: float) -> None:
        super().__init__(3, 1)
        self._value = value

    def impl_compute(self, x):
        return self._value


def test_sizes_are_read_only():
    f = Square()
    assert (f.input_size, f.output_size) == (2, 2)
    with pytest.raises(AttributeError):
        f.input_size = 3  # type: ignore[misc]


class Sized(Function):
    def impl_compute(self, x):
        return np.zeros(self.output_size)


def test_negative_sizes_rejected():
    with pytest.raises(ValueError, match="non-negative"):
        Sized(-1, 1)


def test_scalar_result_is_promoted_to_vector():
    f = Constant(2.5)
    value = f([0.0, 0.0, 0.0])
    assert value.shape == (1,)
    assert value[0] == 2.5


def test_default_jacobian_stacks_gradients():
    f = Square()
    x = np.array([3.0, -1.0])
    jac = f.jacobian(x)
    np.testing.assert_allclose(jac, [[6.0, 0.0], [-1.0, 3.0]])
    for i in range(2):
        np.testing.assert_allclose(jac[i], f.gradient(x, i))


def test_argument_is_flattened():
    f = Square()
    np.testing.assert_allclose(f(np.array([[2.0], [1.0]])), [4.0, 2.0])


def test_abstract_hooks_required():
    with pytest.raises(TypeError):
        Function(1, 1)  # type: ignore[abstract]
    with pytest.raises(TypeError):
        TwiceDifferentiableFunction(1, 1)  # type: ignore[abstract]


def test_print_and_repr():
    f = Square()
    stream = io.StringIO()
    assert f.print(stream) is stream
    assert stream.getvalue() == "square: Differentiable function (input size: 2, output size: 2)"
    assert str(Constant(1.0)) == "Function (input size: 3, output size: 1)"
    assert "Square(input_size=2" in repr(f)
    assert f.get_name() == "square"
