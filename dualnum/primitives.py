"""Registry of primitive functions and their derivative rules.

A primitive is evaluated on dual numbers through ``x.apply(rule)``; every
dual type knows how to push its tangent(s) through the rule. Plain numbers,
numpy arrays and torch tensors are evaluated directly. Functions that are not
registered are differentiated by writing them in terms of operators and
registered primitives.
"""
import logging

import numpy as np
from torch import Tensor
import torch

from . import series
from .errors import DivisionByZero, DomainError

logger = logging.getLogger(__name__)


def _backend(name):
    def f(x):
        if isinstance(x, Tensor):
            return getattr(torch, name)(x)
        return getattr(np, name)(x)

    f.__name__ = name
    return f


def all_of(mask):
    if isinstance(mask, Tensor):
        return bool(mask.all())
    return bool(np.all(mask))


def _require(name, mask, x, condition):
    if not all_of(mask):
        raise DomainError(f"{name}({x}) is undefined, requires {condition}")


def check_nonzero(x):
    if not all_of(x != 0):
        raise DivisionByZero(f"division by zero, denominator {x}")


class PrimitiveRule:
    """Forward function together with its derivatives.

    ``domain(x, differentiated)`` raises if ``x`` lies outside of the real
    domain of the function. ``series(a)`` maps truncated Taylor coefficients
    of the argument to those of the result and is only needed for expansions
    beyond second order.
    """

    def __init__(self, name, f, df, d2f=None, domain=None, series=None):
        self.name = name
        self.f = f
        self.df = df
        self.d2f = d2f
        self.domain = domain
        self.series = series

    def __repr__(self):
        return f"PrimitiveRule({self.name!r})"

    def check(self, x, differentiated=False):
        if self.domain is not None:
            self.domain(x, differentiated)

    def __call__(self, x):
        self.check(x)
        return self.f(x)


_REGISTRY = {}


def register(rule):
    if rule.name in _REGISTRY:
        logger.debug("replacing primitive %s", rule.name)
    else:
        logger.debug("registering primitive %s", rule.name)
    _REGISTRY[rule.name] = rule
    return rule


def register_primitive(name, f, df, d2f=None, domain=None, series=None):
    return register(PrimitiveRule(name, f, df, d2f, domain, series))


def get_primitive(name):
    try:
        return _REGISTRY[name]
    except KeyError:
        raise KeyError(f"no primitive registered under {name!r}") from None


def registered():
    return sorted(_REGISTRY)


def evaluate(name, x):
    rule = get_primitive(name)
    if hasattr(x, "apply"):
        return x.apply(rule)
    return rule(x)


_sin = _backend("sin")
_cos = _backend("cos")
_tan = _backend("tan")
_exp = _backend("exp")
_log = _backend("log")
_sqrt = _backend("sqrt")
_tanh = _backend("tanh")


def _log_domain(x, differentiated):
    _require("log", x > 0, x, "x > 0")


def _sqrt_domain(x, differentiated):
    if differentiated:
        _require("sqrt", x > 0, x, "x > 0 for a derivative")
    else:
        _require("sqrt", x >= 0, x, "x >= 0")


def _tanh_d1(x):
    t = _tanh(x)
    return 1 - t * t


def _tanh_d2(x):
    t = _tanh(x)
    return -2 * t * (1 - t * t)


def _tan_d1(x):
    c = _cos(x)
    return 1 / (c * c)


def _tan_d2(x):
    c = _cos(x)
    return 2 * _tan(x) / (c * c)


SIN = register(
    PrimitiveRule("sin", _sin, _cos, lambda x: -_sin(x), series=series.sin)
)
COS = register(
    PrimitiveRule(
        "cos", _cos, lambda x: -_sin(x), lambda x: -_cos(x), series=series.cos
    )
)
TAN = register(
    PrimitiveRule("tan", _tan, _tan_d1, _tan_d2, series=series.tan)
)
EXP = register(PrimitiveRule("exp", _exp, _exp, _exp, series=series.exp))
LOG = register(
    PrimitiveRule(
        "log", _log, lambda x: 1 / x, lambda x: -1 / (x * x), _log_domain, series.log
    )
)
SQRT = register(
    PrimitiveRule(
        "sqrt",
        _sqrt,
        lambda x: 0.5 / _sqrt(x),
        lambda x: -0.25 / (x * _sqrt(x)),
        _sqrt_domain,
        series.sqrt,
    )
)
TANH = register(
    PrimitiveRule("tanh", _tanh, _tanh_d1, _tanh_d2, series=series.tanh)
)


def power_rule(n):
    """Rule for ``x**n`` with a constant real exponent ``n``."""
    integer = float(n).is_integer()

    def domain(x, differentiated):
        if not integer:
            _require(f"x**{n}", x >= 0, x, "x >= 0 for a fractional exponent")
        if n < 0 and not all_of(x != 0):
            raise DivisionByZero(f"0.0 cannot be raised to the negative power {n}")
        if differentiated and 0 < n < 1:
            _require(f"x**{n}", x > 0, x, "x > 0 for a derivative")

    def df(x):
        if n == 0:
            return 0 * x
        return n * x ** (n - 1)

    def d2f(x):
        if n == 0 or n == 1:
            return 0 * x
        return n * (n - 1) * x ** (n - 2)

    return PrimitiveRule(
        f"pow{n}", lambda x: x**n, df, d2f, domain, lambda a: series.power(a, n)
    )


def sin(x):
    return evaluate("sin", x)


def cos(x):
    return evaluate("cos", x)


def tan(x):
    return evaluate("tan", x)


def exp(x):
    return evaluate("exp", x)


def log(x):
    return evaluate("log", x)


def sqrt(x):
    return evaluate("sqrt", x)


def tanh(x):
    return evaluate("tanh", x)


def power(x, n):
    if hasattr(x, "apply") or hasattr(n, "apply"):
        return x**n
    return power_rule(n)(x)

