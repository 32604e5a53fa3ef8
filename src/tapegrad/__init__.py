"""
tapegrad: a small reverse-mode autodiff engine over row-major float64 arrays.

Differentiable operations record a backward context on an explicit `Tape`;
leaving the tape's scope replays the contexts in reverse and accumulates
gradients into the operands. Parameters carry their own update rules, and a
`Model` ties the two together into a single training step.
"""

from .domain import ShapeMismatchError, TapeScopeError
from .infrastructure import (
    AdamParameter,
    History,
    Model,
    NdArray,
    Parameter,
    SGDParameter,
    Tape,
    Tensor,
    accuracy,
    adam,
    dot,
    gather,
    idx_max,
    relu,
    sgd,
    softmax_cross_entropy,
    transpose,
    view,
)

__version__ = "0.1.0"

__all__ = [
    "ShapeMismatchError",
    "TapeScopeError",
    "AdamParameter",
    "History",
    "Model",
    "NdArray",
    "Parameter",
    "SGDParameter",
    "Tape",
    "Tensor",
    "accuracy",
    "adam",
    "dot",
    "gather",
    "idx_max",
    "relu",
    "sgd",
    "softmax_cross_entropy",
    "transpose",
    "view",
]
