"""
Concrete tapegrad runtime: array engine, tape, operations and training.
"""

from .ndarray import NdArray
from ._tensor import Tensor
from ._context import Context
from ._tape import Tape
from ._function import dot, gather, relu, transpose, view
from ._losses import softmax_cross_entropy
from ._metrics import accuracy, idx_max
from ._parameter import Parameter
from .optimizers import AdamParameter, SGDParameter, adam, sgd
from .models import History, Model

__all__ = [
    NdArray.__name__,
    Tensor.__name__,
    Context.__name__,
    Tape.__name__,
    dot.__name__,
    gather.__name__,
    relu.__name__,
    transpose.__name__,
    view.__name__,
    softmax_cross_entropy.__name__,
    accuracy.__name__,
    idx_max.__name__,
    Parameter.__name__,
    AdamParameter.__name__,
    SGDParameter.__name__,
    adam.__name__,
    sgd.__name__,
    History.__name__,
    Model.__name__,
]
