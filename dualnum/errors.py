class DualError(Exception):
    """Base class for errors raised while propagating dual numbers."""


class DivisionByZero(DualError, ZeroDivisionError):
    """Division by a value, or a real part, equal to zero."""


class DomainError(DualError, ValueError):
    """A primitive was evaluated outside of its real-valued domain."""


class DimensionMismatch(DualError, ValueError):
    """Tangents of different shape were combined."""
