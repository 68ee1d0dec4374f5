import numpy as np
from torch import Tensor

from .config import ATOL, DTYPE, RTOL
from .errors import DimensionMismatch, DomainError
from .primitives import (
    COS,
    EXP,
    LOG,
    SIN,
    SQRT,
    TAN,
    TANH,
    all_of,
    check_nonzero,
    power_rule,
)


def zero_tangent(eps):
    """A scalar zero tangent, as made by ``constant(c)``, fits any direction count."""
    return np.ndim(eps) == 0 and not all_of(eps != 0)


class Dual:
    """First order dual number ``re + eps * e`` with ``e**2 = 0``.

    ``eps`` is either a scalar (one direction) or a 1-D array holding one
    partial derivative per seed direction. Every operation returns a new
    instance.
    """

    __array_priority__ = 100

    def __init__(self, re, eps=0.0):
        self.re = re
        self.eps = eps

    @classmethod
    def diff(cls, re):
        return cls(re, 1.0)

    @classmethod
    def variables(cls, x):
        """Seed every entry of ``x`` with its own basis direction."""
        eye = np.eye(len(x), dtype=DTYPE)
        return [cls(xi, eye[i]) for i, xi in enumerate(x)]

    def __repr__(self):
        return f"{self.re} + {self.eps}eps"

    def _check(self, other):
        if np.shape(self.eps) != np.shape(other.eps) and not (
            zero_tangent(self.eps) or zero_tangent(other.eps)
        ):
            raise DimensionMismatch(
                f"cannot combine tangents of shape {np.shape(self.eps)} "
                f"and {np.shape(other.eps)}"
            )

    def __eq__(self, other):
        if isinstance(other, Dual):
            return (
                np.shape(self.eps) == np.shape(other.eps)
                and all_of(self.re == other.re)
                and all_of(self.eps == other.eps)
            )
        return False

    __hash__ = None

    def isclose(self, other, rtol=RTOL, atol=ATOL):
        return (
            np.shape(self.eps) == np.shape(other.eps)
            and np.allclose(self.re, other.re, rtol=rtol, atol=atol)
            and np.allclose(self.eps, other.eps, rtol=rtol, atol=atol)
        )

    def __lt__(self, other):
        return self.re < (other.re if isinstance(other, Dual) else other)

    def __le__(self, other):
        return self.re <= (other.re if isinstance(other, Dual) else other)

    def __gt__(self, other):
        return self.re > (other.re if isinstance(other, Dual) else other)

    def __ge__(self, other):
        return self.re >= (other.re if isinstance(other, Dual) else other)

    def __add__(self, other):
        if isinstance(other, Dual):
            self._check(other)
            return Dual(self.re + other.re, self.eps + other.eps)
        return Dual(self.re + other, self.eps)

    def __neg__(self):
        return Dual(-self.re, -self.eps)

    def __pos__(self):
        return self

    def __sub__(self, other):
        if isinstance(other, Dual):
            self._check(other)
            return Dual(self.re - other.re, self.eps - other.eps)
        return Dual(self.re - other, self.eps)

    def __rsub__(self, other):
        return other + (-self)

    def __mul__(self, other):
        if isinstance(other, Dual):
            self._check(other)
            return Dual(self.re * other.re, self.re * other.eps + other.re * self.eps)
        return Dual(self.re * other, self.eps * other)

    def chain_rule(self, f0, f1):
        return Dual(f0, f1 * self.eps)

    def apply(self, rule):
        rule.check(self.re, differentiated=True)
        return self.chain_rule(rule.f(self.re), rule.df(self.re))

    def recip(self):
        check_nonzero(self.re)
        rec = 1 / self.re
        return self.chain_rule(rec, -rec * rec)

    def __truediv__(self, other):
        if isinstance(other, Dual):
            self._check(other)
            check_nonzero(other.re)
            re = self.re / other.re
            eps = (self.eps * other.re - self.re * other.eps) / (other.re * other.re)
            return Dual(re, eps)
        check_nonzero(other)
        return Dual(self.re / other, self.eps / other)

    def __rtruediv__(self, other):
        return other * self.recip()

    def __pow__(self, other):
        if isinstance(other, Dual):
            return (other * self.log()).exp()
        return self.apply(power_rule(other))

    def __rpow__(self, other):
        return (self * LOG(other)).exp()

    def __abs__(self):
        if not all_of(self.re != 0):
            raise DomainError(f"abs is not differentiable at {self.re}")
        sign = self.re.sign() if isinstance(self.re, Tensor) else np.sign(self.re)
        return self.chain_rule(abs(self.re), sign)

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


Dual.__radd__ = Dual.__add__
Dual.__rmul__ = Dual.__mul__


def constant(c, m=None):
    """Dual number without sensitivity to any of ``m`` directions."""
    if m is None:
        return Dual(c, 0.0)
    return Dual(c, np.zeros(m, dtype=DTYPE))


def _direction(direction):
    if isinstance(direction, Tensor):
        return direction
    if np.ndim(direction) == 0:
        return float(direction)
    direction = np.asarray(direction, dtype=DTYPE)
    if direction.ndim != 1:
        raise DimensionMismatch(
            f"seed direction must be a scalar or a vector, got shape {direction.shape}"
        )
    return direction


def seed(x, direction=1.0):
    return Dual(x, _direction(direction))


def seed_all(x, seeds):
    """Seed ``x[i]`` with row ``i`` of the seed matrix ``seeds``."""
    if not isinstance(seeds, Tensor):
        seeds = np.asarray(seeds, dtype=DTYPE)
    if seeds.ndim == 0 or seeds.shape[0] != len(x):
        raise DimensionMismatch(
            f"{len(x)} inputs cannot be seeded with directions of shape {tuple(seeds.shape)}"
        )
    return [seed(xi, si) for xi, si in zip(x, seeds)]

