"""
Shape algebra helpers for the row-major NdArray engine.

These helpers are pure functions over shape tuples. They are shared by the
NdArray mixins and by the differentiable operations that need to reason about
shapes without touching buffers.
"""

from __future__ import annotations

from typing import Any, Iterable, Sequence, Tuple

from ...domain._errors import ShapeMismatchError

Shape = Tuple[int, ...]


def as_shape(shape: Iterable[int]) -> Shape:
    """
    Normalize a shape-like iterable into a tuple of non-negative ints.

    Parameters
    ----------
    shape : Iterable[int]
        Shape entries.

    Returns
    -------
    tuple[int, ...]
        Normalized shape.

    Raises
    ------
    ShapeMismatchError
        If any entry is negative.
    """
    out = tuple(int(s) for s in shape)
    if any(s < 0 for s in out):
        raise ShapeMismatchError(
            "shape", "entries must be non-negative", "all >= 0", out
        )
    return out


def shape_size(shape: Sequence[int]) -> int:
    """
    Return the number of elements described by `shape`.

    The empty shape describes a scalar and therefore has one element.
    """
    n = 1
    for s in shape:
        n *= int(s)
    return n


def strides(shape: Sequence[int]) -> Shape:
    """
    Compute row-major (C-contiguous) strides, measured in elements.

    The stride of dimension ``i`` is the product of all shape entries strictly
    after ``i``; the last dimension is contiguous.

    Examples
    --------
    >>> strides((1, 2, 3))
    (6, 3, 1)
    """
    out = [0] * len(shape)
    stride = 1
    for i in range(len(shape) - 1, -1, -1):
        out[i] = stride
        stride *= int(shape[i])
    return tuple(out)


def check_same_shape(op: str, expected: Shape, actual: Shape) -> None:
    """
    Raise `ShapeMismatchError` unless two shapes are identical.
    """
    if tuple(expected) != tuple(actual):
        raise ShapeMismatchError(op, "shapes must match exactly", expected, actual)


def check_permutation(op: str, dims: Sequence[Any], ndim: int) -> Tuple[int, ...]:
    """
    Validate that `dims` is a permutation of ``range(ndim)``.

    Returns
    -------
    tuple[int, ...]
        `dims` normalized to a tuple of ints.
    """
    dims_t = tuple(int(d) for d in dims)
    if sorted(dims_t) != list(range(ndim)):
        raise ShapeMismatchError(
            op,
            "dims must be a permutation of every axis index",
            tuple(range(ndim)),
            dims_t,
        )
    return dims_t


def inverse_permutation(dims: Sequence[int]) -> Tuple[int, ...]:
    """
    Invert a permutation: ``out[dims[i]] = i``.
    """
    out = [0] * len(dims)
    for i, d in enumerate(dims):
        out[int(d)] = i
    return tuple(out)
