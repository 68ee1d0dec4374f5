import math

import numpy as np

from . import series
from .config import ATOL, DEFAULT_DEGREE, DTYPE, RTOL
from .errors import DimensionMismatch, DomainError
from .primitives import COS, EXP, LOG, SIN, SQRT, TAN, TANH, check_nonzero, power_rule


class Taylor:
    """Truncated Taylor polynomial ``c0 + c1 t + ... + ck t^k``.

    Products are convolutions truncated at degree ``k``. With
    ``Taylor.diff(x, k)`` the coefficient of ``t^j`` in ``f(Taylor.diff(x, k))``
    is ``f^(j)(x) / j!``.
    """

    __array_priority__ = 100

    def __init__(self, coeffs):
        self.coeffs = series.coefficients(coeffs)

    @classmethod
    def diff(cls, x, degree=DEFAULT_DEGREE):
        coeffs = np.zeros(degree + 1, dtype=DTYPE)
        coeffs[0] = x
        if degree > 0:
            coeffs[1] = 1.0
        return cls(coeffs)

    @classmethod
    def constant(cls, c, degree=DEFAULT_DEGREE):
        coeffs = np.zeros(degree + 1, dtype=DTYPE)
        coeffs[0] = c
        return cls(coeffs)

    @property
    def degree(self):
        return len(self.coeffs) - 1

    @property
    def re(self):
        return self.coeffs[0]

    def derivative(self, order):
        if order > self.degree:
            raise DimensionMismatch(
                f"derivative of order {order} needs an expansion of at least that degree, "
                f"got {self.degree}"
            )
        return math.factorial(order) * self.coeffs[order]

    def derivatives(self):
        factorials = [math.factorial(j) for j in range(self.degree + 1)]
        return self.coeffs * np.array(factorials, dtype=DTYPE)

    def __repr__(self):
        return " + ".join(f"{c}t^{j}" for j, c in enumerate(self.coeffs))

    def _lift(self, other):
        if isinstance(other, Taylor):
            if other.degree != self.degree:
                raise DimensionMismatch(
                    f"cannot combine expansions of degree {self.degree} and {other.degree}"
                )
            return other
        return Taylor.constant(other, self.degree)

    def __eq__(self, other):
        if isinstance(other, Taylor):
            return np.array_equal(self.coeffs, other.coeffs)
        return False

    __hash__ = None

    def isclose(self, other, rtol=RTOL, atol=ATOL):
        other = self._lift(other)
        return np.allclose(self.coeffs, other.coeffs, rtol=rtol, atol=atol)

    def __lt__(self, other):
        return self.re < self._lift(other).re

    def __le__(self, other):
        return self.re <= self._lift(other).re

    def __gt__(self, other):
        return self.re > self._lift(other).re

    def __ge__(self, other):
        return self.re >= self._lift(other).re

    def __add__(self, other):
        return Taylor(self.coeffs + self._lift(other).coeffs)

    def __neg__(self):
        return Taylor(-self.coeffs)

    def __pos__(self):
        return self

    def __sub__(self, other):
        return Taylor(self.coeffs - self._lift(other).coeffs)

    def __rsub__(self, other):
        return other + (-self)

    def __mul__(self, other):
        if isinstance(other, Taylor):
            return Taylor(series.mul(self.coeffs, self._lift(other).coeffs))
        return Taylor(self.coeffs * other)

    def chain_rule(self, f0, f1, f2):
        # second order only: f(a0 + h) = f0 + f1 h + f2 h^2 / 2
        a = self.coeffs
        coeffs = np.zeros_like(a)
        coeffs[0] = f0
        if self.degree > 0:
            coeffs[1] = f1 * a[1]
        if self.degree > 1:
            coeffs[2] = f1 * a[2] + 0.5 * f2 * a[1] ** 2
        return Taylor(coeffs)

    def apply(self, rule):
        rule.check(self.re, differentiated=self.degree > 0)
        if rule.series is not None:
            return Taylor(rule.series(self.coeffs))
        re = self.re
        if self.degree <= 1:
            return self.chain_rule(rule.f(re), rule.df(re), 0.0)
        if self.degree == 2 and rule.d2f is not None:
            return self.chain_rule(rule.f(re), rule.df(re), rule.d2f(re))
        raise NotImplementedError(
            f"primitive {rule.name!r} has no series rule for degree {self.degree}"
        )

    def recip(self):
        check_nonzero(self.re)
        return Taylor(series.recip(self.coeffs))

    def __truediv__(self, other):
        other = self._lift(other)
        check_nonzero(other.re)
        return Taylor(series.div(self.coeffs, other.coeffs))

    def __rtruediv__(self, other):
        return self._lift(other) / self

    def __pow__(self, other):
        if isinstance(other, Taylor):
            return (other * self.log()).exp()
        return self.apply(power_rule(other))

    def __rpow__(self, other):
        return (self * LOG(other)).exp()

    def __abs__(self):
        if self.re == 0:
            raise DomainError(f"abs is not differentiable at {self.re}")
        return Taylor(np.sign(self.re) * self.coeffs)

    def sin(self):
        return self.apply(SIN)

    def cos(self):
        return self.apply(COS)

    def tan(self):
        return self.apply(TAN)

    def exp(self):
        return self.apply(EXP)

    def log(self):
        return self.apply(LOG)

    def sqrt(self):
        return self.apply(SQRT)

    def tanh(self):
        return self.apply(TANH)


Taylor.__radd__ = Taylor.__add__
Taylor.__rmul__ = Taylor.__mul__
