"""
Concrete NdArray implementation (NumPy CPU buffer).

`NdArray` is a C-contiguous n-dimensional array that owns a flat float64
buffer plus its shape. The operation surface is split across cohesive mixins
(see `mixins/`); this module holds the storage, the construction invariant
and the basic metadata accessors.

Invariant
---------
``buffer.size == product(shape)`` at all times. The constructor rejects
violations with `ShapeMismatchError`, and every method that changes the
shape checks the element count first.
"""

from __future__ import annotations

from typing import Any, Optional, Sequence, Tuple

import numpy as np

from ...domain._errors import ShapeMismatchError
from ._shape import as_shape, shape_size, strides
from .mixins import (
    NdArrayElementwiseMixin,
    NdArrayMemoryMixin,
    NdArrayReductionMixin,
    NdArrayShapeAndIndexingMixin,
)

DTYPE = np.float64


class NdArray(
    NdArrayMemoryMixin,
    NdArrayElementwiseMixin,
    NdArrayShapeAndIndexingMixin,
    NdArrayReductionMixin,
):
    """
    Row-major multidimensional array that owns its data buffer.

    Parameters
    ----------
    shape : Sequence[int]
        Array shape. ``()`` denotes a scalar.
    data : array-like, optional
        Initial values in row-major order (any nesting is flattened). The
        values are copied. When omitted the array is zero-filled.

    Raises
    ------
    ShapeMismatchError
        If `data` does not hold exactly ``product(shape)`` values.

    Notes
    -----
    - Methods with a trailing underscore mutate the receiver and return it;
      every other operation returns a fresh array, except `view` which
      shares the receiver's buffer.
    - Index arrays used by `gather`/`scatter` are ordinary NdArrays holding
      integral values.
    """

    def __init__(self, shape: Sequence[int], data: Optional[Any] = None) -> None:
        shape_t = as_shape(shape)
        n = shape_size(shape_t)
        if data is None:
            buf = np.zeros(n, dtype=DTYPE)
        else:
            buf = np.array(data, dtype=DTYPE).reshape(-1)
            if buf.size != n:
                raise ShapeMismatchError(
                    "NdArray",
                    f"data length must equal the element count of shape {shape_t}",
                    n,
                    buf.size,
                )
        self._shape: Tuple[int, ...] = shape_t
        self._data: np.ndarray = buf

    @classmethod
    def _wrap(cls, shape: Sequence[int], buffer: np.ndarray) -> "NdArray":
        """
        Adopt `buffer` without copying. Internal use only.
        """
        obj = cls.__new__(cls)
        obj._shape = as_shape(shape)
        obj._data = np.ascontiguousarray(buffer, dtype=DTYPE).reshape(-1)
        if obj._data.size != shape_size(obj._shape):
            raise ShapeMismatchError(
                "NdArray",
                "buffer size must equal the element count",
                shape_size(obj._shape),
                obj._data.size,
            )
        return obj

    @property
    def shape(self) -> Tuple[int, ...]:
        """
        Return the shape of the array.
        """
        return self._shape

    @property
    def ndim(self) -> int:
        """
        Return the number of dimensions.
        """
        return len(self._shape)

    @property
    def size(self) -> int:
        """
        Return the number of elements.
        """
        return self._data.size

    def strides(self) -> Tuple[int, ...]:
        """
        Return the row-major strides of this array, in elements.
        """
        return strides(self._shape)

    def __repr__(self) -> str:
        return f"NdArray(shape={self._shape}, data={self._data.tolist()})"
