"""
Adam parameter implementation (without bias correction).

This module provides `AdamParameter`, a `Parameter` whose update rule is the
Adam algorithm without its bias-correction terms: the raw moment estimates are
used directly, so early step sizes differ from textbook Adam.

Design notes
------------
- The first and second moments are per-element arrays of the same shape as
  the data, created at construction and updated in place.
- Both moments are fully updated before they are used for the data step.
"""

from __future__ import annotations

from typing import Tuple

import numpy as np

from .._parameter import Parameter
from ..ndarray import NdArray
from ._sgd import check_lr


def check_adam_hyperparams(
    lr: float, betas: Tuple[float, float], eps: float
) -> Tuple[float, Tuple[float, float], float]:
    """
    Validate and normalize Adam hyperparameters.

    Raises
    ------
    ValueError
        If ``lr <= 0``, either beta is outside (0, 1), or ``eps <= 0``.
    """
    lr = check_lr(lr)
    b1, b2 = float(betas[0]), float(betas[1])
    if not (0.0 < b1 < 1.0) or not (0.0 < b2 < 1.0):
        raise ValueError(f"betas must be in (0,1), got {(b1, b2)}")
    eps = float(eps)
    if eps <= 0.0:
        raise ValueError(f"eps must be > 0, got {eps}")
    return lr, (b1, b2), eps


class AdamParameter(Parameter):
    """
    Parameter updated by Adam without bias correction.

    Update rule
    -----------
    Let ``g`` be the accumulated gradient:

        m <- beta1 * m + (1 - beta1) * g
        v <- beta2 * v + (1 - beta2) * g**2
        p <- p - lr * m / (sqrt(v) + eps)

    Parameters
    ----------
    data : NdArray
        Initial value.
    lr : float, optional
        Learning rate. Must be positive. Defaults to 1e-3.
    betas : tuple[float, float], optional
        Decay rates for the first and second moments, each in (0, 1).
        Defaults to (0.9, 0.999).
    eps : float, optional
        Added to the denominator. Must be positive. Defaults to 1e-8.

    Attributes
    ----------
    momentum : NdArray
        First moment estimate ``m``.
    variance : NdArray
        Second moment estimate ``v``.
    """

    def __init__(
        self,
        data: NdArray,
        *,
        lr: float = 1e-3,
        betas: Tuple[float, float] = (0.9, 0.999),
        eps: float = 1e-8,
    ) -> None:
        super().__init__(data)
        self.lr, self.betas, self.eps = check_adam_hyperparams(lr, betas, eps)
        self.momentum = NdArray(data.shape)
        self.variance = NdArray(data.shape)

    def update(self) -> None:
        """
        Apply one Adam step in-place.
        """
        b1, b2 = self.betas
        lr, eps = self.lr, self.eps

        self.momentum.map2_(self.grad, lambda m, g: b1 * m + (1.0 - b1) * g)
        self.variance.map2_(self.grad, lambda v, g: b2 * v + (1.0 - b2) * g * g)

        denom = self.variance.map(lambda v: np.sqrt(v) + eps)
        step = self.momentum.map2(denom, lambda m, d: lr * m / d)
        self.data.map2_(step, np.subtract)
