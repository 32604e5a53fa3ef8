"""
NdArray memory / construction mixin.

This module defines `NdArrayMemoryMixin`, which provides factory constructors
(`zeros`, `full`, `from_numpy`), copying (`clone`), in-place initialization
(`fill_`, `rand_`) and the read-out helpers (`to_numpy`, `tolist`, `item`).

Design intent
-------------
- Keep buffer creation and copying centralized so that the ownership rule
  holds everywhere: a fresh NdArray always owns a fresh buffer, and the raw
  buffer never leaves the array. Read-outs return copies.
- New arrays are built via `cls` / `self.__class__` so this mixin does not
  import the concrete `NdArray` class.
"""

from __future__ import annotations

from abc import ABC
from typing import Any, List, Optional, Sequence, Union

import numpy as np
from typing_extensions import Self

Number = Union[int, float]


class NdArrayMemoryMixin(ABC):
    """
    Mixin that implements construction and memory-management helpers.

    The host class must provide `_data` (flat float64 buffer), `_shape`
    (tuple) and a `_wrap(shape, buffer)` classmethod that adopts a buffer
    without copying.
    """

    @classmethod
    def zeros(cls, shape: Sequence[int]) -> Self:
        """
        Create a zero-filled array of the given shape.
        """
        return cls(shape)

    @classmethod
    def full(cls, shape: Sequence[int], value: Number) -> Self:
        """
        Create an array of the given shape filled with `value`.
        """
        return cls(shape).fill_(value)

    @classmethod
    def from_numpy(cls, arr: Any) -> Self:
        """
        Create an array from a NumPy array (or nested sequence), keeping its
        shape. The data is copied.

        Parameters
        ----------
        arr : array-like
            Source values.

        Returns
        -------
        NdArray
            New array with ``shape == np.shape(arr)``.
        """
        src = np.asarray(arr)
        return cls(src.shape, src)

    def clone(self) -> Self:
        """
        Return a deep copy of this array (shape and buffer).
        """
        return self.__class__._wrap(self._shape, self._data.copy())

    def fill_(self, value: Number) -> Self:
        """
        Fill every element with `value` in-place.

        Returns
        -------
        NdArray
            `self`, for chaining.
        """
        self._data.fill(float(value))
        return self

    def rand_(
        self,
        low: Number = 0.0,
        high: Number = 1.0,
        rng: Optional[np.random.Generator] = None,
    ) -> Self:
        """
        Fill the array in-place with independent samples from U[low, high).

        Parameters
        ----------
        low, high : float
            Bounds of the uniform distribution.
        rng : numpy.random.Generator, optional
            Generator to draw from. When omitted the global NumPy RNG is used,
            so `np.random.seed(...)` makes initialization reproducible.

        Returns
        -------
        NdArray
            `self`, for chaining.
        """
        n = self._data.size
        if rng is None:
            samples = np.random.uniform(low, high, size=n)
        else:
            samples = rng.uniform(low, high, size=n)
        self._data[...] = samples
        return self

    def to_numpy(self) -> np.ndarray:
        """
        Return a copy of the values as an n-dimensional NumPy array.
        """
        return self._data.reshape(self._shape).copy()

    def tolist(self) -> List[float]:
        """
        Return the values as a flat Python list in row-major order.
        """
        return self._data.tolist()

    def item(self, index: int = 0) -> float:
        """
        Return a single element (by flat row-major index) as a Python float.
        """
        return float(self._data[int(index)])
