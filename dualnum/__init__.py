from .errors import DimensionMismatch, DivisionByZero, DomainError, DualError
from .primitives import (
    PrimitiveRule,
    cos,
    evaluate,
    exp,
    get_primitive,
    log,
    power,
    registered,
    register,
    register_primitive,
    sin,
    sqrt,
    tan,
    tanh,
)
from .dual import Dual, constant, seed, seed_all
from .dual_torch import DualTensor
from .hyperdual import HyperDual
from .taylor import Taylor
from .jacobian import derivatives, gradient, hessian, jacobian, jacobian_tensor, jvp

__version__ = "0.1.0"
