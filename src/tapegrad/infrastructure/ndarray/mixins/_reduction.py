"""
NdArray reduction and matrix-product mixin.

- `mean`          : scalar mean over all elements
- `log_softmax_`  : max-shifted log-softmax over the final axis, in-place
- `dot`           : batched matrix product with leading group dimensions
"""

from __future__ import annotations

from abc import ABC
from typing import TypeVar

import numpy as np

from ....domain._errors import ShapeMismatchError

A = TypeVar("A", bound="NdArrayReductionMixin")


class NdArrayReductionMixin(ABC):
    """
    Mixin providing `mean`, `log_softmax_` and `dot`.
    """

    def mean(self: A) -> A:
        """
        Return a scalar (shape ``()``) array holding the arithmetic mean.

        The mean of an empty array is NaN.
        """
        n = self._data.size
        value = float(self._data.sum()) / n if n else float("nan")
        return self.__class__((), [value])

    def log_softmax_(self: A) -> A:
        """
        Replace every row along the final axis with its log-softmax, in-place.

        Each row ``x`` of length ``shape[-1]`` becomes
        ``x - max(x) - log(sum(exp(x - max(x))))``.

        Raises
        ------
        ShapeMismatchError
            If the array is a scalar (no final axis).
        """
        if self.ndim < 1:
            raise ShapeMismatchError(
                "log_softmax_", "needs at least 1 dimension", ">= 1", self.ndim
            )
        if self._data.size == 0:
            return self
        rows = self._data.reshape(-1, self._shape[-1])
        row_max = rows.max(axis=1, keepdims=True)
        log_sum_exp = np.log(np.exp(rows - row_max).sum(axis=1, keepdims=True))
        rows -= row_max + log_sum_exp
        return self

    def dot(self: A, rhs: A) -> A:
        """
        Batched matrix product ``(*g, m, k) @ (*g, k, n) -> (*g, m, n)``.

        Group dimensions must match exactly; there is no broadcasting.

        Raises
        ------
        ShapeMismatchError
            If either operand has fewer than 2 dimensions, the group
            dimensions differ, or the contraction dimensions differ.
        """
        if self.ndim < 2 or rhs.ndim < 2:
            raise ShapeMismatchError(
                "dot",
                "operands need at least 2 dimensions",
                "(>= 2, >= 2)",
                (self.ndim, rhs.ndim),
            )
        if self._shape[:-2] != rhs._shape[:-2]:
            raise ShapeMismatchError(
                "dot",
                "group dimensions must match",
                self._shape[:-2],
                rhs._shape[:-2],
            )
        if self._shape[-1] != rhs._shape[-2]:
            raise ShapeMismatchError(
                "dot",
                "contraction dimensions must match (..., m, k) @ (..., k, n)",
                self._shape[-1],
                rhs._shape[-2],
            )
        out = np.matmul(self._data.reshape(self._shape), rhs._data.reshape(rhs._shape))
        return self.__class__._wrap(out.shape, out.reshape(-1))
