"""Derivative drivers.

``f`` receives a list with one entry per input and returns a scalar or a
sequence of scalars. During differentiation the entries are dual numbers, so
``f`` has to be written with operators and the functions of
``dualnum.primitives`` (or the methods of the dual types).
"""
import logging
from numbers import Real

import numpy as np
import torch

from .config import DTYPE, TORCH_DTYPE
from .dual import Dual, seed_all, zero_tangent
from .dual_torch import DualTensor
from .errors import DimensionMismatch
from .hyperdual import HyperDual
from .taylor import Taylor

logger = logging.getLogger(__name__)


def _point(x):
    x = np.asarray(x, dtype=DTYPE)
    if x.ndim != 1:
        raise DimensionMismatch(f"evaluation point must be a vector, got shape {x.shape}")
    return [float(xi) for xi in x]


def _outputs(y):
    if isinstance(y, np.ndarray):
        return list(y.ravel()), y.ndim == 0
    if isinstance(y, (list, tuple)):
        return list(y), False
    return [y], True


def _tangent(eps, shape):
    if np.shape(eps) == tuple(shape):
        return np.asarray(eps, dtype=DTYPE)
    if zero_tangent(eps):
        return np.zeros(shape, dtype=DTYPE)
    raise DimensionMismatch(
        f"output tangent of shape {np.shape(eps)} does not match {tuple(shape)}"
    )


def _collect(y, shape):
    items, scalar = _outputs(y)
    values, tangents = [], []
    for item in items:
        if isinstance(item, Dual):
            values.append(item.re)
            tangents.append(_tangent(item.eps, shape))
        elif isinstance(item, (Real, np.number)):
            values.append(item)
            tangents.append(np.zeros(shape, dtype=DTYPE))
        else:
            raise TypeError(f"cannot read a derivative off {type(item).__name__}")
    if scalar:
        return float(values[0]), tangents[0]
    return np.array(values, dtype=DTYPE), np.array(tangents, dtype=DTYPE)


def jvp(f, x, v):
    """Value of ``f`` at ``x`` and the Jacobian applied to ``v``.

    ``v`` is a direction of length n or a seed matrix of shape (n, m), in
    which case the tangent is ``J @ v``.
    """
    x = _point(x)
    v = np.asarray(v, dtype=DTYPE)
    if v.ndim not in (1, 2) or v.shape[0] != len(x):
        raise DimensionMismatch(
            f"{len(x)} inputs cannot be seeded with directions of shape {v.shape}"
        )
    logger.debug("jvp: %d inputs, seed shape %s", len(x), v.shape)
    if v.ndim == 1:
        inputs = [Dual(xi, float(vi)) for xi, vi in zip(x, v)]
    else:
        inputs = seed_all(x, v)
    value, tangent = _collect(f(inputs), v.shape[1:])
    if np.ndim(tangent) == 0:
        tangent = float(tangent)
    return value, tangent


def jacobian(f, x, mode="simultaneous"):
    """Value of ``f`` at ``x`` and its Jacobian with shape (outputs, inputs).

    ``mode="simultaneous"`` evaluates ``f`` once with n-wide tangents,
    ``mode="columns"`` evaluates it n times, once per basis direction.
    """
    x = _point(x)
    n = len(x)
    logger.debug("jacobian: %d inputs, mode %s", n, mode)
    seeds = np.eye(n, dtype=DTYPE)
    if mode == "simultaneous":
        value, jac = jvp(f, x, seeds)
        return value, np.atleast_2d(jac)
    if mode == "columns":
        columns = []
        for direction in seeds:
            value, column = jvp(f, x, direction)
            columns.append(column)
        return value, np.column_stack(columns)
    raise ValueError(f"unknown mode {mode!r}, expected 'simultaneous' or 'columns'")


def gradient(f, x):
    value, jac = jacobian(f, x)
    if np.ndim(value) != 0:
        raise DimensionMismatch(f"gradient needs a scalar function, got {np.shape(value)} outputs")
    return value, jac[0]


def hessian(f, x):
    """Value, gradient and Hessian of a scalar function in a single pass."""
    x = _point(x)
    n = len(x)
    logger.debug("hessian: %d inputs", n)
    y = f(HyperDual.variables(x))
    if isinstance(y, HyperDual):
        return float(y.re), np.asarray(y.eps1, dtype=DTYPE), np.asarray(y.eps1eps2, dtype=DTYPE)
    if isinstance(y, (Real, np.number)):
        return float(y), np.zeros(n, dtype=DTYPE), np.zeros((n, n), dtype=DTYPE)
    raise TypeError(f"cannot read a Hessian off {type(y).__name__}")


def derivatives(f, x, order):
    """``[f(x), f'(x), ..., f^(order)(x)]`` for a univariate ``f``."""
    logger.debug("derivatives: order %d", order)
    y = f(Taylor.diff(float(x), order))
    if isinstance(y, Taylor):
        return y.derivatives()
    if isinstance(y, (Real, np.number)):
        return Taylor.constant(y, order).derivatives()
    raise TypeError(f"cannot read derivatives off {type(y).__name__}")


def jacobian_tensor(f, x):
    """Value and Jacobian of ``f`` applied to a DualTensor seeded at ``x``."""
    x = torch.as_tensor(x, dtype=TORCH_DTYPE)
    logger.debug("jacobian_tensor: %d inputs", len(x))
    y = f(DualTensor.diff(x))
    if isinstance(y, DualTensor):
        return y.re, y.eps
    if isinstance(y, Dual):
        return y.re, torch.as_tensor(y.eps, dtype=TORCH_DTYPE)[None]
    raise TypeError(f"cannot read a Jacobian off {type(y).__name__}")
