"""
Loss function primitives for tapegrad.

Currently implemented losses:
- SoftmaxCrossEntropyFn : per-row cross entropy of integer class targets
  against raw logits, computed through a max-shifted log-softmax.

Design notes
------------
- Losses are `Function` subclasses, like every other differentiable
  operation, and are recorded on the tape in the same way.
- The loss is *not* reduced: one value per row is returned (shape
  ``(batch, 1)``). Callers seed the output gradient themselves (typically
  ``loss.grad.fill_(1)``) and may reduce the values with `mean()` for
  reporting.
- Backward avoids broadcasting: the per-row seed is expanded to the logits
  shape with an explicit engine `gather`.
"""

from __future__ import annotations

from typing import Optional, Tuple

import numpy as np

from ..domain._errors import ShapeMismatchError
from ..domain._function import Function
from ._function import apply
from ._tape import Tape
from ._tensor import Tensor
from .ndarray import NdArray


class SoftmaxCrossEntropyFn(Function):
    """
    Softmax cross entropy over the last axis with integer targets.

    Implements, for each row ``r`` with target class ``y_r``:

        loss_r = -log_softmax(logits_r)[y_r]

    Backward, with ``s_r`` the seed gradient of ``loss_r``:

        grad_logits_r[i] = s_r * (softmax(logits_r)[i] - 1{i == y_r})

    Notes
    -----
    Each row's contribution is scaled by its own seed, so non-uniform
    per-row seeds (e.g. sample weights) are honoured row by row.
    """

    @staticmethod
    def forward(ctx, logits: Tensor, target: NdArray) -> Tensor:
        if logits.ndim != 2:
            raise ShapeMismatchError(
                "softmax_cross_entropy",
                "logits must have shape (batch, classes)",
                "ndim 2",
                logits.shape,
            )
        batch = logits.shape[0]
        if target.shape != (batch, 1):
            raise ShapeMismatchError(
                "softmax_cross_entropy",
                "target must hold one class index per row",
                (batch, 1),
                target.shape,
            )
        log_probs = logits.data.clone().log_softmax_()
        losses = log_probs.gather(target).map_(np.negative)

        ctx.save_for_backward(log_probs, target.clone())
        return Tensor(losses)

    @staticmethod
    def backward(ctx, grad_out: NdArray) -> Tuple[Optional[NdArray], ...]:
        log_probs, target = ctx.saved_arrays
        batch, n_classes = log_probs.shape

        one_hot = NdArray((batch, n_classes)).scatter_write_(
            NdArray.full((batch, 1), 1.0), target
        )
        row_seed = grad_out.gather(NdArray((batch, n_classes)))

        grad = log_probs.map(np.exp).map2_(one_hot, np.subtract)
        return (grad.map2_(row_seed, np.multiply),)


def softmax_cross_entropy(
    tape: Optional[Tape], logits: Tensor, target: NdArray
) -> Tensor:
    """
    Per-row softmax cross entropy with autograd support.

    Parameters
    ----------
    tape : Tape | None
        Recording tape, or None to skip recording.
    logits : Tensor
        Raw class scores of shape ``(batch, classes)``.
    target : NdArray
        Integer class index per row, shape ``(batch, 1)``.

    Returns
    -------
    Tensor
        Losses of shape ``(batch, 1)``.

    Raises
    ------
    TypeError
        If `target` is not an NdArray.
    ShapeMismatchError
        If `logits` is not 2-D or `target` is not ``(batch, 1)``.
    """
    if not isinstance(target, NdArray):
        raise TypeError(
            f"softmax_cross_entropy expects an NdArray target, got {type(target).__name__}"
        )
    return apply(tape, SoftmaxCrossEntropyFn, (logits,), target)
