"""
NdArray shape, transpose and gather/scatter mixin.

This module defines `NdArrayShapeAndIndexingMixin`, which implements the
structural operations of the array engine:

- `view_` / `view`      : reinterpret the buffer under a new shape
- `transpose` / `untranspose` / `t` : physical axis permutation
- `gather`              : index-selected read
- `scatter`             : accumulating index-selected write (fresh array)
- `scatter_write_`      : overwriting index-selected write (in-place)

Gather/scatter semantics
------------------------
All three indexing operations are grouped on the leading dimensions of the
index array and broadcast over the trailing dimensions of the data array.
For an index array of rank ``k``:

- axes ``[0, k-1)`` of the data are "group" axes and must equal
  ``indices.shape[:-1]``,
- axis ``k-1`` of the data is the table axis selected by the index values,
- axes ``[k, ndim)`` of the data form a row that is copied whole.

For example ``{shape: (2, 3, 4)}.gather({shape: (2, 5)})`` has shape
``(2, 5, 4)``, and ``{shape: (2, 5, 4)}.scatter({shape: (2, 5)}, 3)`` has
shape ``(2, 3, 4)``.
"""

from __future__ import annotations

from abc import ABC
from typing import Sequence, Tuple, TypeVar

import numpy as np

from ....domain._errors import ShapeMismatchError
from .._shape import (
    as_shape,
    check_permutation,
    inverse_permutation,
    shape_size,
)

A = TypeVar("A", bound="NdArrayShapeAndIndexingMixin")


def _index_values(op: str, indices, bound: int) -> np.ndarray:
    """
    Convert an index array's float buffer into validated int64 indices.

    Raises
    ------
    ValueError
        If any value is not integral.
    IndexError
        If any value falls outside ``[0, bound)``.
    """
    raw = indices._data
    idx = raw.astype(np.int64)
    if not np.array_equal(idx, raw):
        raise ValueError(f"{op}: indices must hold integral values")
    if idx.size and (idx.min() < 0 or idx.max() >= bound):
        raise IndexError(
            f"{op}: index out of range for axis of size {bound} "
            f"(min={int(idx.min())}, max={int(idx.max())})"
        )
    return idx


def _check_index_rank(op: str, indices, ndim: int) -> int:
    k = indices.ndim
    if k < 1 or k > ndim:
        raise ShapeMismatchError(
            op, "indices rank must be between 1 and the array rank", f"1..{ndim}", k
        )
    return k


class NdArrayShapeAndIndexingMixin(ABC):
    """
    Shape and indexing operations for the concrete NdArray implementation.

    Notes
    -----
    - Only `view` aliases the receiver's buffer. `transpose`, `t`, `gather`
      and `scatter` always return physically reordered fresh arrays.
    - Every precondition is checked before any buffer is touched.
    """

    # ------------------------------------------------------------------
    # views
    # ------------------------------------------------------------------
    def _check_view(self, op: str, shape: Sequence[int]) -> Tuple[int, ...]:
        shape_t = as_shape(shape)
        if shape_size(shape_t) != self._data.size:
            raise ShapeMismatchError(
                op,
                "view shape must keep the same element count",
                self._data.size,
                f"{shape_size(shape_t)} for shape {shape_t}",
            )
        return shape_t

    def view_(self: A, shape: Sequence[int]) -> A:
        """
        Reinterpret this array under `shape` in-place (no data movement).

        Raises
        ------
        ShapeMismatchError
            If the element count would change.
        """
        self._shape = self._check_view("view_", shape)
        return self

    def view(self: A, shape: Sequence[int]) -> A:
        """
        Return a new NdArray over the *same* buffer under `shape`.

        Writes through either array are visible in both. This is the only
        engine operation that aliases a buffer.

        Raises
        ------
        ShapeMismatchError
            If the element count would change.
        """
        return self.__class__._wrap(self._check_view("view", shape), self._data)

    # ------------------------------------------------------------------
    # transposition
    # ------------------------------------------------------------------
    def transpose(self: A, dims: Sequence[int]) -> A:
        """
        Permute axes; `dims` maps each result axis to a source axis.

        ``result.shape[d] == self.shape[dims[d]]``. The data is physically
        reordered into a fresh row-major buffer.

        Raises
        ------
        ShapeMismatchError
            If `dims` is not a permutation of ``range(ndim)``.
        """
        dims_t = check_permutation("transpose", dims, self.ndim)
        out = np.ascontiguousarray(self._data.reshape(self._shape).transpose(dims_t))
        return self.__class__._wrap(out.shape, out.reshape(-1))

    def untranspose(self: A, dims: Sequence[int]) -> A:
        """
        Undo ``transpose(dims)``: ``a.transpose(dims).untranspose(dims) == a``.
        """
        dims_t = check_permutation("untranspose", dims, self.ndim)
        return self.transpose(inverse_permutation(dims_t))

    def t(self: A) -> A:
        """
        Transpose the last two axes (batched matrix transpose).
        """
        if self.ndim < 2:
            raise ShapeMismatchError(
                "t", "matrix transpose needs at least 2 dimensions", ">= 2", self.ndim
            )
        n = self.ndim
        return self.transpose(tuple(range(n - 2)) + (n - 1, n - 2))

    # ------------------------------------------------------------------
    # gather / scatter
    # ------------------------------------------------------------------
    def gather(self: A, indices: A) -> A:
        """
        Index-selected read along axis ``indices.ndim - 1``.

        Parameters
        ----------
        indices : NdArray
            Integral index values. ``indices.shape[:-1]`` must equal
            ``self.shape[:indices.ndim - 1]``.

        Returns
        -------
        NdArray
            Array of shape ``indices.shape + self.shape[indices.ndim:]``.
        """
        k = _check_index_rank("gather", indices, self.ndim)
        lead = indices.shape[:-1]
        if lead != self._shape[: k - 1]:
            raise ShapeMismatchError(
                "gather",
                "leading dimensions of indices must match the array shape",
                self._shape[: k - 1],
                lead,
            )
        table = self._shape[k - 1]
        row_shape = self._shape[k:]
        groups, n, row = shape_size(lead), indices.shape[-1], shape_size(row_shape)

        idx = _index_values("gather", indices, table).reshape(groups, n)
        src = self._data.reshape(groups, table, row)
        out = src[np.arange(groups)[:, None], idx]
        return self.__class__._wrap(indices.shape + row_shape, out.reshape(-1))

    def scatter(self: A, indices: A, size: int) -> A:
        """
        Accumulating inverse of `gather`.

        Each row of `self` is added into slot ``indices[...]`` of a fresh
        zero array whose table axis has length `size`. Rows sent to the same
        slot are summed.

        Parameters
        ----------
        indices : NdArray
            Integral index values with ``indices.shape == self.shape[:indices.ndim]``.
        size : int
            Length of the table axis of the result.

        Returns
        -------
        NdArray
            Array of shape
            ``indices.shape[:-1] + (size,) + self.shape[indices.ndim:]``.
        """
        k = _check_index_rank("scatter", indices, self.ndim)
        if indices.shape != self._shape[:k]:
            raise ShapeMismatchError(
                "scatter",
                "indices shape must match the leading dimensions of the array",
                self._shape[:k],
                indices.shape,
            )
        size = int(size)
        row_shape = self._shape[k:]
        groups, n, row = (
            shape_size(indices.shape[:-1]),
            indices.shape[-1],
            shape_size(row_shape),
        )

        idx = _index_values("scatter", indices, size).reshape(groups, n)
        out = np.zeros((groups, size, row), dtype=self._data.dtype)
        np.add.at(
            out,
            (np.arange(groups)[:, None], idx),
            self._data.reshape(groups, n, row),
        )
        return self.__class__._wrap(
            indices.shape[:-1] + (size,) + row_shape, out.reshape(-1)
        )

    def scatter_write_(self: A, src: A, indices: A) -> A:
        """
        Overwrite rows of `self` with rows of `src` at index-selected slots.

        Rows are written in row-major index order, so when several indices
        name the same slot the last one wins.

        Parameters
        ----------
        src : NdArray
            Source rows; ``src.shape[:indices.ndim] == indices.shape`` and
            ``src.shape[indices.ndim:] == self.shape[indices.ndim:]``.
        indices : NdArray
            Integral index values; ``indices.shape[:-1]`` must equal
            ``self.shape[:indices.ndim - 1]``.

        Returns
        -------
        NdArray
            `self`, for chaining.
        """
        k = _check_index_rank("scatter_write_", indices, min(self.ndim, src.ndim))
        if src.shape[:k] != indices.shape:
            raise ShapeMismatchError(
                "scatter_write_",
                "leading dimensions of src must match indices shape",
                indices.shape,
                src.shape[:k],
            )
        if indices.shape[:-1] != self._shape[: k - 1]:
            raise ShapeMismatchError(
                "scatter_write_",
                "leading dimensions of indices must match the array shape",
                self._shape[: k - 1],
                indices.shape[:-1],
            )
        row_shape = src.shape[k:]
        if self._shape[k:] != row_shape:
            raise ShapeMismatchError(
                "scatter_write_",
                "trailing dimensions of src must match the array shape",
                self._shape[k:],
                row_shape,
            )
        size = self._shape[k - 1]
        groups, n, row = (
            shape_size(indices.shape[:-1]),
            indices.shape[-1],
            shape_size(row_shape),
        )

        idx = _index_values("scatter_write_", indices, size).reshape(groups, n)
        dst = self._data.reshape(groups, size, row)
        values = src._data.reshape(groups, n, row)
        g = np.arange(groups)
        for j in range(n):
            dst[g, idx[:, j]] = values[:, j]
        return self
