from dualnum import (
    DimensionMismatch,
    Dual,
    constant,
    gradient,
    jacobian,
    jacobian_tensor,
    jvp,
    sin,
)
from dualnum.config import ATOL, RTOL
import numpy as np
import pytest


def f(v):
    x, y = v
    return [x**2 * sin(y), x * y]


def f_jacobian(x, y):
    return np.array([[2 * x * np.sin(y), x**2 * np.cos(y)], [y, x]])


def test_jacobian_equivalence():
    point = [1.5, 0.7]
    value, jac_columns = jacobian(f, point, mode="columns")
    value_simultaneous, jac_simultaneous = jacobian(f, point, mode="simultaneous")
    assert jac_columns.shape == (2, 2)
    assert np.allclose(jac_columns, jac_simultaneous, rtol=RTOL, atol=ATOL)
    assert np.allclose(jac_columns, f_jacobian(*point), rtol=RTOL, atol=ATOL)
    assert np.all(value == value_simultaneous)
    assert np.allclose(value, [1.5**2 * np.sin(0.7), 1.05], rtol=RTOL)


def test_jvp():
    point = [1.5, 0.7]
    jac = f_jacobian(*point)

    _, tangent = jvp(f, point, [1.0, 0.0])
    assert np.allclose(tangent, jac[:, 0], rtol=RTOL, atol=ATOL)

    v = np.array([0.3, -2.0])
    _, tangent = jvp(f, point, v)
    assert np.allclose(tangent, jac @ v, rtol=RTOL, atol=ATOL)

    seeds = np.array([[1.0, 0.3, 2.0], [0.0, -2.0, 1.0]])
    _, tangent = jvp(f, point, seeds)
    assert tangent.shape == (2, 3)
    assert np.allclose(tangent, jac @ seeds, rtol=RTOL, atol=ATOL)


def test_scalar_function():
    value, tangent = jvp(lambda v: v[0] ** 2, [3.0], [1.0])
    assert value == 9.0
    assert tangent == 6.0

    value, grad = gradient(lambda v: v[0] * v[1] + v[0], [2.0, 3.0])
    assert value == 8.0
    assert np.all(grad == np.array([4.0, 2.0]))

    value, jac = jacobian(lambda v: v[0] * v[1], [2.0, 3.0], mode="columns")
    assert jac.shape == (1, 2)
    assert np.all(jac == np.array([[3.0, 2.0]]))


def test_constant_output():
    value, jac = jacobian(lambda v: [v[0] * v[1], 2.0], [2.0, 3.0])
    assert np.all(value == np.array([6.0, 2.0]))
    assert np.all(jac == np.array([[3.0, 2.0], [0.0, 0.0]]))


def test_constant_term():
    def g(v):
        return [v[0] * v[1] + constant(2.0), v[0]]

    point = [2.0, 3.0]
    expected = np.array([[3.0, 2.0], [1.0, 0.0]])
    value, jac_columns = jacobian(g, point, mode="columns")
    value_simultaneous, jac_simultaneous = jacobian(g, point, mode="simultaneous")
    assert np.all(value == np.array([8.0, 2.0]))
    assert np.all(value_simultaneous == value)
    assert np.all(jac_columns == expected)
    assert np.all(jac_simultaneous == expected)

    _, jac = jacobian(lambda v: [v[0] * v[1] + 2.0, v[0]], point)
    assert np.all(jac == jac_simultaneous)

    _, jac = jacobian(lambda v: [v[0] * v[1] + constant(2.0, 2), v[0]], point)
    assert np.all(jac == expected)

    for mode in ("columns", "simultaneous"):
        value, jac = jacobian(lambda v: [v[0] * v[1], constant(2.0)], point, mode=mode)
        assert np.all(value == np.array([6.0, 2.0]))
        assert np.all(jac == np.array([[3.0, 2.0], [0.0, 0.0]]))

    with pytest.raises(DimensionMismatch):
        jacobian(lambda v: [v[0], Dual(1.0, np.ones(3))], point)


def test_jacobian_tensor():
    def g(x):
        return (x * x).sin() + 2 * x

    value, jac = jacobian_tensor(g, [0.5, -1.0, 2.0])
    x = np.array([0.5, -1.0, 2.0])
    assert np.allclose(value.numpy(), np.sin(x * x) + 2 * x, rtol=RTOL)
    expected = np.diag(2 * x * np.cos(x * x) + 2)
    assert np.allclose(jac.numpy(), expected, rtol=RTOL, atol=ATOL)

    value, jac = jacobian_tensor(lambda x: (x * x).sum(), [1.0, 2.0])
    assert jac.shape == (1, 2)
    assert np.allclose(jac.numpy(), [[2.0, 4.0]])


def test_errors():
    with pytest.raises(DimensionMismatch):
        jvp(f, [1.0, 2.0], [1.0, 0.0, 0.0])
    with pytest.raises(DimensionMismatch):
        jvp(f, [1.0, 2.0], np.ones((3, 2)))
    with pytest.raises(DimensionMismatch):
        jvp(f, [[1.0, 2.0]], [1.0, 0.0])
    with pytest.raises(DimensionMismatch):
        gradient(f, [1.0, 2.0])
    with pytest.raises(DimensionMismatch):
        jacobian(f, [[1.0, 2.0]])
    with pytest.raises(DimensionMismatch):
        jacobian(f, 1.0)
    with pytest.raises(ValueError):
        jacobian(f, [1.0, 2.0], mode="rows")
    with pytest.raises(TypeError):
        jacobian(lambda v: [v[0], "x"], [1.0])
