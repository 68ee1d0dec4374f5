"""Arithmetic on truncated Taylor coefficient sequences.

A sequence ``a = [a0, a1, ..., ak]`` stands for ``a0 + a1 t + ... + ak t^k``
with every term of degree larger than ``k`` discarded. All functions return a
new array with the same length as their input. Primitive functions are
computed with the usual recurrences obtained from ``b' = g(a) a'``, so the
cost is quadratic in ``k`` and no derivative has to be known beyond the first.
"""
import math

import numpy as np

from .config import DTYPE
from .errors import DomainError


def coefficients(a):
    return np.array(a, dtype=DTYPE, ndmin=1)


def mul(a, b):
    k = len(a)
    return np.convolve(a, b)[:k]


def div(a, b):
    k = len(a)
    c = np.zeros(k, dtype=DTYPE)
    for n in range(k):
        j = np.arange(1, n + 1)
        c[n] = (a[n] - np.dot(b[j], c[n - j])) / b[0]
    return c


def recip(b):
    one = np.zeros(len(b), dtype=DTYPE)
    one[0] = 1.0
    return div(one, b)


def _weighted(a, b, n):
    # sum_{j=1}^{n} j a_j b_{n-j}
    j = np.arange(1, n + 1)
    return np.dot(j * a[1 : n + 1], b[n - j])


def exp(a):
    k = len(a)
    b = np.zeros(k, dtype=DTYPE)
    b[0] = math.exp(a[0])
    for n in range(1, k):
        b[n] = _weighted(a, b, n) / n
    return b


def log(a):
    k = len(a)
    b = np.zeros(k, dtype=DTYPE)
    b[0] = math.log(a[0])
    for n in range(1, k):
        j = np.arange(1, n)
        b[n] = (a[n] - np.dot(j * b[1:n], a[n - j]) / n) / a[0]
    return b


def sin_cos(a):
    k = len(a)
    s = np.zeros(k, dtype=DTYPE)
    c = np.zeros(k, dtype=DTYPE)
    s[0] = math.sin(a[0])
    c[0] = math.cos(a[0])
    for n in range(1, k):
        s[n] = _weighted(a, c, n) / n
        c[n] = -_weighted(a, s, n) / n
    return s, c


def sin(a):
    return sin_cos(a)[0]


def cos(a):
    return sin_cos(a)[1]


def _riccati(a, t0, sign):
    # t' = (1 + sign t^2) a'
    k = len(a)
    t = np.zeros(k, dtype=DTYPE)
    s = np.zeros(k, dtype=DTYPE)
    t[0] = t0
    s[0] = 1.0 + sign * t0 * t0
    for n in range(1, k):
        t[n] = _weighted(a, s, n) / n
        s[n] = sign * np.dot(t[: n + 1], t[n::-1])
    return t


def tan(a):
    return _riccati(a, math.tan(a[0]), 1.0)


def tanh(a):
    return _riccati(a, math.tanh(a[0]), -1.0)


def power(a, r):
    k = len(a)
    if a[0] == 0:
        if float(r).is_integer() and r >= 0:
            b = np.zeros(k, dtype=DTYPE)
            b[0] = 1.0
            for _ in range(int(r)):
                b = mul(b, a)
            return b
        raise DomainError(f"x**{r} has no Taylor expansion around 0")
    b = np.zeros(k, dtype=DTYPE)
    b[0] = a[0] ** r
    for n in range(1, k):
        j = np.arange(1, n + 1)
        b[n] = np.dot(((r + 1) * j - n) * a[1 : n + 1], b[n - j]) / (n * a[0])
    return b


def sqrt(a):
    return power(a, 0.5)
