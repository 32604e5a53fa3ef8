"""
Domain-level contracts for tapegrad.

- `Function`            : abstract differentiable operation
- `IParameter`          : trainable parameter protocol
- `ShapeMismatchError`  : operand shapes violate an operation's preconditions
- `TapeScopeError`      : a recording scope is already active
"""

from ._errors import ShapeMismatchError, TapeScopeError
from ._function import Function
from ._parameter import IParameter

__all__ = [
    ShapeMismatchError.__name__,
    TapeScopeError.__name__,
    Function.__name__,
    IParameter.__name__,
]
