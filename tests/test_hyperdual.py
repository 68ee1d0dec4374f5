from dualnum import DimensionMismatch, DivisionByZero, DomainError, HyperDual, hessian, sin, exp
from dualnum.config import ATOL, RTOL
import numpy as np
import pytest


def test_hyperdual():
    x = HyperDual.diff(4.0)
    y = 5
    assert x + x == HyperDual(8, 2, 2, 0)
    assert x + y == HyperDual(9, 1, 1, 0)
    assert y - x == HyperDual(1, -1, -1, 0)
    assert x * x == HyperDual(16, 8, 8, 2)
    assert x * y == HyperDual(20, 5, 5, 0)
    assert x.recip() == HyperDual(0.25, -1 / 16, -1 / 16, 1 / 32)
    assert y / x == HyperDual(1.25, -5 / 16, -5 / 16, 5 / 32)
    assert np.log(x) == HyperDual(np.log(4), 0.25, 0.25, -1 / 16)
    assert np.exp(x) == HyperDual(np.exp(4), np.exp(4), np.exp(4), np.exp(4))
    assert np.sqrt(x) == HyperDual(2, 0.25, 0.25, -1 / 32)


def test_hessian():
    value, grad, hess = hessian(lambda v: v[0] * v[0] * v[1], [2.0, 3.0])
    assert value == 12.0
    assert np.all(grad == np.array([12.0, 4.0]))
    assert np.all(hess == np.array([[6.0, 4.0], [4.0, 0.0]]))


def test_hessian_transcendental():
    x, y = 0.4, -1.2
    value, grad, hess = hessian(lambda v: sin(v[0]) * exp(v[1]) / v[1], [x, y])
    g = np.exp(y) / y
    dg = np.exp(y) * (y - 1) / y**2
    d2g = np.exp(y) * (y**2 - 2 * y + 2) / y**3
    assert np.isclose(value, np.sin(x) * g, rtol=RTOL, atol=ATOL)
    assert np.allclose(grad, [np.cos(x) * g, np.sin(x) * dg], rtol=RTOL, atol=ATOL)
    expected = [
        [-np.sin(x) * g, np.cos(x) * dg],
        [np.cos(x) * dg, np.sin(x) * d2g],
    ]
    assert np.allclose(hess, expected, rtol=RTOL, atol=ATOL)
    assert np.allclose(hess, hess.T, rtol=RTOL, atol=ATOL)


def test_hessian_constant():
    value, grad, hess = hessian(lambda v: 3.0, [1.0, 2.0])
    assert value == 3.0
    assert np.all(grad == 0)
    assert np.all(hess == 0)


def test_unary_and_comparison():
    x = HyperDual.diff(-1.0)
    assert +x == x
    assert abs(x) == HyperDual(1.0, -1.0, -1.0, 0.0)
    assert x <= -1.0 and x >= -1.0
    assert x < 0.0 and x > -2.0
    assert not x <= HyperDual.diff(-3.0)

    value, grad, hess = hessian(lambda v: abs(v[0] * v[1]), [-2.0, 3.0])
    assert value == 6.0
    assert np.all(grad == np.array([-3.0, 2.0]))
    assert np.all(hess == np.array([[0.0, -1.0], [-1.0, 0.0]]))


def test_errors():
    a, b = HyperDual.variables([1.0, 2.0])
    c = HyperDual.diff(1.0)
    with pytest.raises(DimensionMismatch):
        a + c
    with pytest.raises(DivisionByZero):
        a / HyperDual(0.0, np.ones(2), np.ones(2), np.zeros((2, 2)))
    with pytest.raises(DomainError):
        (-a).log()
    with pytest.raises(TypeError):
        hessian(lambda v: "nope", [1.0])
    with pytest.raises(DomainError):
        abs(HyperDual.diff(0.0))
