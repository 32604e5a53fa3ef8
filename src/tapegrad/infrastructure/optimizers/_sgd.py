"""
Stochastic Gradient Descent (SGD) parameter implementation.

This module provides `SGDParameter`, a `Parameter` whose update rule is plain
gradient descent with a fixed learning rate.

Design notes
------------
- The update reads the accumulated gradient from `grad` and writes directly
  into `data`; it holds no per-element state.
- Momentum, Nesterov, weight decay and other SGD variants are intentionally
  omitted to keep the rule minimal and easy to reason about.
"""

from __future__ import annotations

from .._parameter import Parameter
from ..ndarray import NdArray


def check_lr(lr: float) -> float:
    """
    Validate and normalize a learning rate.

    Raises
    ------
    ValueError
        If ``lr <= 0``.
    """
    lr = float(lr)
    if lr <= 0.0:
        raise ValueError(f"lr must be > 0, got {lr}")
    return lr


class SGDParameter(Parameter):
    """
    Parameter updated by plain gradient descent.

    Update rule
    -----------
    For data ``p`` with gradient ``g``:

        p <- p - lr * g

    Parameters
    ----------
    data : NdArray
        Initial value.
    lr : float, optional
        Learning rate. Must be positive. Defaults to 1e-3.
    """

    def __init__(self, data: NdArray, *, lr: float = 1e-3) -> None:
        super().__init__(data)
        self.lr = check_lr(lr)

    def update(self) -> None:
        """
        Apply one SGD step in-place.
        """
        lr = self.lr
        self.data.map2_(self.grad, lambda p, g: p - lr * g)
