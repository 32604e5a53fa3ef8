"""
Differentiable tensor value.

A `Tensor` pairs an owned `data` array with an owned `grad` array of the same
shape. Gradients are accumulated into `grad` by tape replay and are never
overwritten; callers reset them with `zero_grad()` between cycles.
"""

from __future__ import annotations

from typing import Any, Tuple

from .ndarray import NdArray


class Tensor:
    """
    Differentiable value: `data` plus an accumulating `grad`.

    Parameters
    ----------
    data : NdArray
        Forward value. The tensor takes ownership of the array.

    Attributes
    ----------
    data : NdArray
        Forward value.
    grad : NdArray
        Accumulated gradient, zeros at construction.
    """

    def __init__(self, data: NdArray) -> None:
        if not isinstance(data, NdArray):
            raise TypeError(f"Tensor expects an NdArray, got {type(data).__name__}")
        self.data = data
        self.grad = NdArray(data.shape)

    @classmethod
    def from_numpy(cls, arr: Any) -> "Tensor":
        """
        Build a tensor from an array-like, keeping its shape.
        """
        return cls(NdArray.from_numpy(arr))

    @property
    def shape(self) -> Tuple[int, ...]:
        """
        Return the shape of the tensor's data.
        """
        return self.data.shape

    @property
    def ndim(self) -> int:
        """
        Return the number of dimensions of the tensor's data.
        """
        return self.data.ndim

    def zero_grad(self) -> None:
        """
        Reset the accumulated gradient to zeros.
        """
        self.grad.fill_(0.0)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(shape={self.shape})"
