"""
NdArray elementwise mixin.

Elementwise transforms over the flat buffer. The callables passed to `map_`
and `map2_` are vectorized (NumPy ufunc style): they receive the whole
flat buffer as a read-only array and return one value per element.
"""

from __future__ import annotations

from abc import ABC
from typing import Callable, TypeVar

import numpy as np

from ....domain._errors import ShapeMismatchError
from .._shape import check_same_shape

A = TypeVar("A", bound="NdArrayElementwiseMixin")

UnaryFn = Callable[[np.ndarray], np.ndarray]
BinaryFn = Callable[[np.ndarray, np.ndarray], np.ndarray]


def _readonly(buf: np.ndarray) -> np.ndarray:
    view = buf.view()
    view.flags.writeable = False
    return view


class NdArrayElementwiseMixin(ABC):
    """
    Mixin providing `map_`, `map`, `map2_`, `map2` and `add_`.
    """

    def _assign(self, op: str, values) -> None:
        out = np.asarray(values, dtype=self._data.dtype)
        if out.shape not in (self._data.shape, ()):
            raise ShapeMismatchError(
                op, "fn must return one value per element", self._data.shape, out.shape
            )
        self._data[...] = out

    def map_(self: A, fn: UnaryFn) -> A:
        """
        Apply `fn` elementwise in-place.

        Parameters
        ----------
        fn : Callable[[np.ndarray], np.ndarray]
            Vectorized transform, e.g. ``np.exp`` or ``lambda x: 2 * x``. It is
            called once with the whole flat buffer, never per element, so
            scalar-only callables are not supported: ``math.exp`` raises
            `TypeError` and ``lambda x: max(x, 0.0)`` raises `ValueError`
            (ambiguous truth value). Use the NumPy equivalent instead
            (``np.exp``, ``lambda x: np.maximum(x, 0.0)``).

        Returns
        -------
        NdArray
            `self`, for chaining.
        """
        self._assign("map_", fn(_readonly(self._data)))
        return self

    def map(self: A, fn: UnaryFn) -> A:
        """
        Return a new array with `fn` applied elementwise.

        `fn` must be vectorized, as for `map_`.
        """
        return self.clone().map_(fn)

    def map2_(self: A, rhs: A, fn: BinaryFn) -> A:
        """
        Apply binary `fn(self, rhs)` elementwise in-place.

        Raises
        ------
        ShapeMismatchError
            If ``rhs.shape != self.shape``.
        """
        check_same_shape("map2_", self._shape, rhs._shape)
        self._assign("map2_", fn(_readonly(self._data), _readonly(rhs._data)))
        return self

    def map2(self: A, rhs: A, fn: BinaryFn) -> A:
        """
        Return a new array holding `fn(self, rhs)` elementwise.
        """
        check_same_shape("map2", self._shape, rhs._shape)
        return self.clone().map2_(rhs, fn)

    def add_(self: A, rhs: A) -> A:
        """
        Elementwise in-place sum ``self += rhs``.

        Raises
        ------
        ShapeMismatchError
            If ``rhs.shape != self.shape``.
        """
        check_same_shape("add_", self._shape, rhs._shape)
        self._data += rhs._data
        return self
