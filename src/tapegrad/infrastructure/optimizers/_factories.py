"""
Parameter factories.

A `ParameterFactory` builds a freshly initialized parameter from a shape and
an initialization scale. Models hold a single factory and build every
parameter through it, so all parameters of one model share the same update
rule and hyperparameters.

Initialization draws from U[-scale, scale); a scale of 0 gives an all-zero
initial value (used for output layers).
"""

from __future__ import annotations

from typing import Callable, Optional, Sequence, Tuple

import numpy as np

from .._parameter import Parameter
from ..ndarray import NdArray
from ._adam import AdamParameter, check_adam_hyperparams
from ._sgd import SGDParameter, check_lr

ParameterFactory = Callable[[Sequence[int], float], Parameter]


def init_uniform(
    shape: Sequence[int], scale: float, rng: Optional[np.random.Generator] = None
) -> NdArray:
    """
    Return an array of `shape` drawn from U[-scale, scale).
    """
    return NdArray(shape).rand_(-scale, scale, rng=rng)


def sgd(
    lr: float = 1e-3, *, rng: Optional[np.random.Generator] = None
) -> ParameterFactory:
    """
    Build a factory of `SGDParameter`s sharing learning rate `lr`.

    Raises
    ------
    ValueError
        If `lr` is not positive.
    """
    lr = check_lr(lr)

    def factory(shape: Sequence[int], scale: float) -> Parameter:
        return SGDParameter(init_uniform(shape, scale, rng), lr=lr)

    return factory


def adam(
    lr: float = 1e-3,
    betas: Tuple[float, float] = (0.9, 0.999),
    eps: float = 1e-8,
    *,
    rng: Optional[np.random.Generator] = None,
) -> ParameterFactory:
    """
    Build a factory of `AdamParameter`s sharing the given hyperparameters.

    Raises
    ------
    ValueError
        If any hyperparameter is outside its valid range.
    """
    lr, betas, eps = check_adam_hyperparams(lr, betas, eps)

    def factory(shape: Sequence[int], scale: float) -> Parameter:
        return AdamParameter(init_uniform(shape, scale, rng), lr=lr, betas=betas, eps=eps)

    return factory
