import numpy as np
import torch

from .config import TORCH_DTYPE
from .dual import Dual, zero_tangent
from .errors import DimensionMismatch, DomainError
from .primitives import COS, EXP, LOG, SIN, SQRT, TAN, TANH, all_of, check_nonzero, power_rule


class DualTensor:
    """Vector of values ``re`` (n,) with a tangent matrix ``eps`` (n, m).

    Column ``j`` of ``eps`` is the derivative of ``re`` along seed direction
    ``j``. Applying a vector function multiplies ``eps`` from the left with
    the Jacobian of that function.
    """

    __array_priority__ = 100

    def __init__(self, re, eps):
        if eps.dim() != 2 or eps.shape[0] != re.shape[0]:
            raise DimensionMismatch(
                f"tangent of shape {tuple(eps.shape)} does not fit value of shape {tuple(re.shape)}"
            )
        self.re = re
        self.eps = eps

    @classmethod
    def diff(cls, re):
        re = torch.as_tensor(re, dtype=TORCH_DTYPE)
        return cls(re, torch.eye(len(re), dtype=re.dtype))

    @classmethod
    def seeded(cls, re, seeds):
        re = torch.as_tensor(re, dtype=TORCH_DTYPE)
        return cls(re, torch.as_tensor(seeds, dtype=re.dtype))

    @classmethod
    def stack(cls, items):
        """Assemble scalar duals (or constants) into a DualTensor."""
        duals = [d for d in items if isinstance(d, Dual) and not zero_tangent(d.eps)]
        if not duals:
            raise TypeError("stack needs at least one seeded Dual to infer the tangent shape")
        shape = tuple(np.shape(duals[0].eps))
        re, eps = [], []
        for d in items:
            if isinstance(d, Dual):
                re.append(torch.as_tensor(d.re, dtype=TORCH_DTYPE))
                if zero_tangent(d.eps):
                    eps.append(torch.zeros(shape, dtype=TORCH_DTYPE))
                    continue
                if tuple(np.shape(d.eps)) != shape:
                    raise DimensionMismatch(
                        f"cannot stack tangents of shape {np.shape(d.eps)} and {shape}"
                    )
                eps.append(torch.as_tensor(d.eps, dtype=TORCH_DTYPE))
            else:
                re.append(torch.as_tensor(d, dtype=TORCH_DTYPE))
                eps.append(torch.zeros(shape, dtype=TORCH_DTYPE))
        return cls(torch.stack(re), torch.stack(eps).reshape(len(items), -1))

    def __repr__(self):
        return f"re: {self.re}\neps: {self.eps}"

    def __getitem__(self, key):
        if isinstance(key, int):
            return Dual(self.re[key], self.eps[key])
        return DualTensor(self.re[key], self.eps[key])

    def __len__(self):
        return self.re.__len__()

    @property
    def shape(self):
        return tuple(self.eps.shape)

    def sum(self):
        return Dual(self.re.sum(), self.eps.sum(0))

    def _check(self, other):
        if self.eps.shape != other.eps.shape:
            raise DimensionMismatch(
                f"cannot combine tangents of shape {tuple(self.eps.shape)} "
                f"and {tuple(other.eps.shape)}"
            )

    def __eq__(self, other):
        if isinstance(other, DualTensor):
            return (
                self.eps.shape == other.eps.shape
                and torch.all(self.re == other.re)
                and torch.all(self.eps == other.eps)
            )
        return False

    __hash__ = None

    def __lt__(self, other):
        return self.re < (other.re if isinstance(other, DualTensor) else other)

    def __le__(self, other):
        return self.re <= (other.re if isinstance(other, DualTensor) else other)

    def __gt__(self, other):
        return self.re > (other.re if isinstance(other, DualTensor) else other)

    def __ge__(self, other):
        return self.re >= (other.re if isinstance(other, DualTensor) else other)

    def __add__(self, other):
        if isinstance(other, DualTensor):
            self._check(other)
            return DualTensor(self.re + other.re, self.eps + other.eps)
        return DualTensor(self.re + other, self.eps)

    def __neg__(self):
        return DualTensor(-self.re, -self.eps)

    def __pos__(self):
        return self

    def __sub__(self, other):
        if isinstance(other, DualTensor):
            self._check(other)
            return DualTensor(self.re - other.re, self.eps - other.eps)
        return self + (-other)

    def __rsub__(self, other):
        return other + (-self)

    def __mul__(self, other):
        if isinstance(other, DualTensor):
            self._check(other)
            re = self.re * other.re
            eps = self.re[:, None] * other.eps + other.re[:, None] * self.eps
            return DualTensor(re, eps)

        if isinstance(other, torch.Tensor):
            return DualTensor(self.re * other, self.eps * other[..., None])

        return DualTensor(self.re * other, self.eps * other)

    def chain_rule(self, f0, f1):
        return DualTensor(f0, f1[:, None] * self.eps)

    def apply(self, rule):
        rule.check(self.re, differentiated=True)
        return self.chain_rule(rule.f(self.re), rule.df(self.re))

    def map(self, f, jacobian):
        """Apply ``f: R^n -> R^k`` whose Jacobian at ``re`` is ``jacobian(re)``."""
        jac = jacobian(self.re)
        if jac.dim() != 2 or jac.shape[1] != self.re.shape[0]:
            raise DimensionMismatch(
                f"Jacobian of shape {tuple(jac.shape)} does not act on {self.re.shape[0]} inputs"
            )
        return DualTensor(f(self.re), jac @ self.eps)

    def linear(self, matrix):
        """``matrix @ self`` for a constant matrix."""
        return DualTensor(matrix @ self.re, matrix @ self.eps)

    def recip(self):
        check_nonzero(self.re)
        rec = 1 / self.re
        return self.chain_rule(rec, -rec * rec)

    def __truediv__(self, other):
        if isinstance(other, DualTensor):
            return self * other.recip()

        check_nonzero(other)
        if isinstance(other, torch.Tensor):
            return DualTensor(self.re / other, self.eps / other[..., None])

        return DualTensor(self.re / other, self.eps / other)

    def __rtruediv__(self, other):
        return other * self.recip()

    def __pow__(self, other):
        if isinstance(other, DualTensor):
            return (other * self.log()).exp()
        return self.apply(power_rule(other))

    def __rpow__(self, other):
        return (self * LOG(other)).exp()

    def __abs__(self):
        if not all_of(self.re != 0):
            raise DomainError(f"abs is not differentiable at {self.re}")
        return self.chain_rule(self.re.abs(), self.re.sign())

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


DualTensor.__radd__ = DualTensor.__add__
DualTensor.__rmul__ = DualTensor.__mul__
