import numpy as np

from .config import ATOL, DTYPE, RTOL
from .errors import DimensionMismatch, DomainError
from .primitives import COS, EXP, LOG, SIN, SQRT, TAN, TANH, check_nonzero, power_rule


class HyperDual:
    """Number ``re + eps1 e1 + eps2 e2 + eps1eps2 e1e2`` with ``e1**2 = e2**2 = 0``.

    When every input ``x_i`` is seeded with ``eps1 = eps2 = e_i``, ``eps1``
    holds the gradient and ``eps1eps2`` the Hessian of the result.
    """

    __array_priority__ = 100

    def __init__(self, re, eps1, eps2, eps1eps2):
        self.re = re
        self.eps1 = eps1
        self.eps2 = eps2
        self.eps1eps2 = eps1eps2

    @classmethod
    def variables(cls, x):
        n = len(x)
        eye = np.eye(n, dtype=DTYPE)
        zero = np.zeros((n, n), dtype=DTYPE)
        return [cls(xi, eye[i], eye[i], zero) for i, xi in enumerate(x)]

    @classmethod
    def diff(cls, re):
        return cls(re, 1.0, 1.0, 0.0)

    def __repr__(self):
        return f"{self.re} + {self.eps1}eps1 + {self.eps2}eps2 + {self.eps1eps2}eps1eps2"

    def _check(self, other):
        if np.shape(self.eps1) != np.shape(other.eps1) or np.shape(
            self.eps2
        ) != np.shape(other.eps2):
            raise DimensionMismatch(
                f"cannot combine hyper-dual numbers with {np.shape(self.eps1)} "
                f"and {np.shape(other.eps1)} directions"
            )

    def __eq__(self, other):
        if isinstance(other, HyperDual):
            return (
                self.re == other.re
                and np.array_equal(self.eps1, other.eps1)
                and np.array_equal(self.eps2, other.eps2)
                and np.array_equal(self.eps1eps2, other.eps1eps2)
            )
        return False

    __hash__ = None

    def isclose(self, other, rtol=RTOL, atol=ATOL):
        return all(
            np.allclose(a, b, rtol=rtol, atol=atol)
            for a, b in [
                (self.re, other.re),
                (self.eps1, other.eps1),
                (self.eps2, other.eps2),
                (self.eps1eps2, other.eps1eps2),
            ]
        )

    def __lt__(self, other):
        return self.re < (other.re if isinstance(other, HyperDual) else other)

    def __le__(self, other):
        return self.re <= (other.re if isinstance(other, HyperDual) else other)

    def __gt__(self, other):
        return self.re > (other.re if isinstance(other, HyperDual) else other)

    def __ge__(self, other):
        return self.re >= (other.re if isinstance(other, HyperDual) else other)

    def __add__(self, other):
        if isinstance(other, HyperDual):
            self._check(other)
            return HyperDual(
                self.re + other.re,
                self.eps1 + other.eps1,
                self.eps2 + other.eps2,
                self.eps1eps2 + other.eps1eps2,
            )
        return HyperDual(self.re + other, self.eps1, self.eps2, self.eps1eps2)

    def __neg__(self):
        return HyperDual(-self.re, -self.eps1, -self.eps2, -self.eps1eps2)

    def __pos__(self):
        return self

    def __sub__(self, other):
        if isinstance(other, HyperDual):
            self._check(other)
            return HyperDual(
                self.re - other.re,
                self.eps1 - other.eps1,
                self.eps2 - other.eps2,
                self.eps1eps2 - other.eps1eps2,
            )
        return HyperDual(self.re - other, self.eps1, self.eps2, self.eps1eps2)

    def __rsub__(self, other):
        return other + (-self)

    def __mul__(self, other):
        if isinstance(other, HyperDual):
            self._check(other)
            re = self.re * other.re
            eps1 = self.re * other.eps1 + other.re * self.eps1
            eps2 = self.re * other.eps2 + other.re * self.eps2
            eps1eps2 = (
                self.re * other.eps1eps2
                + np.multiply.outer(self.eps1, other.eps2)
                + np.multiply.outer(other.eps1, self.eps2)
                + self.eps1eps2 * other.re
            )
            return HyperDual(re, eps1, eps2, eps1eps2)
        return HyperDual(
            self.re * other, self.eps1 * other, self.eps2 * other, self.eps1eps2 * other
        )

    def chain_rule(self, f0, f1, f2):
        return HyperDual(
            f0,
            f1 * self.eps1,
            f1 * self.eps2,
            f1 * self.eps1eps2 + f2 * np.multiply.outer(self.eps1, self.eps2),
        )

    def apply(self, rule):
        if rule.d2f is None:
            raise NotImplementedError(
                f"primitive {rule.name!r} has no second derivative registered"
            )
        rule.check(self.re, differentiated=True)
        re = self.re
        return self.chain_rule(rule.f(re), rule.df(re), rule.d2f(re))

    def recip(self):
        check_nonzero(self.re)
        rec = 1 / self.re
        return self.chain_rule(rec, -rec * rec, 2 * rec * rec * rec)

    def __truediv__(self, other):
        if isinstance(other, HyperDual):
            return self * other.recip()
        check_nonzero(other)
        return HyperDual(
            self.re / other, self.eps1 / other, self.eps2 / other, self.eps1eps2 / other
        )

    def __rtruediv__(self, other):
        return other * self.recip()

    def __pow__(self, other):
        if isinstance(other, HyperDual):
            return (other * self.log()).exp()
        return self.apply(power_rule(other))

    def __rpow__(self, other):
        return (self * LOG(other)).exp()

    def __abs__(self):
        if self.re == 0:
            raise DomainError(f"abs is not differentiable at {self.re}")
        return self.chain_rule(abs(self.re), np.sign(self.re), 0.0)

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


HyperDual.__radd__ = HyperDual.__add__
HyperDual.__rmul__ = HyperDual.__mul__
