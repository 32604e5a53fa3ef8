"""
Classification metrics.

These helpers are not differentiable and never touch the tape.
"""

from __future__ import annotations

from typing import Sequence, Union

import numpy as np

from ..domain._errors import ShapeMismatchError
from .ndarray import NdArray


def idx_max(values: Union[Sequence[float], np.ndarray], start: int, end: int) -> int:
    """
    Return the index of the largest value in ``values[start:end]``.

    Ties are broken by first occurrence (lowest index). The returned index is
    relative to `values`, not to the slice.

    Raises
    ------
    ValueError
        If the range is empty.
    """
    if end <= start:
        raise ValueError(f"idx_max needs a non-empty range, got [{start}, {end})")
    return start + int(np.argmax(np.asarray(values[start:end], dtype=np.float64)))


def accuracy(logits: NdArray, targets: NdArray) -> NdArray:
    """
    Per-row 0/1 indicator that the arg-max class equals the target.

    Parameters
    ----------
    logits : NdArray
        Class scores, shape ``(batch, classes)``.
    targets : NdArray
        Integer class per row, shape ``(batch, 1)``.

    Returns
    -------
    NdArray
        Shape ``(batch, 1)``; 1.0 where the prediction is correct.
    """
    if logits.ndim != 2:
        raise ShapeMismatchError(
            "accuracy", "logits must have shape (batch, classes)", "ndim 2", logits.shape
        )
    batch, n_classes = logits.shape
    if targets.shape != (batch, 1):
        raise ShapeMismatchError(
            "accuracy", "targets must hold one class per row", (batch, 1), targets.shape
        )
    flat = logits.tolist()
    hits = [
        float(idx_max(flat, i * n_classes, (i + 1) * n_classes) - i * n_classes == t)
        for i, t in enumerate(targets.tolist())
    ]
    return NdArray((batch, 1), hits)
