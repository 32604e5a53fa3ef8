from ._shape import shape_size, strides
from ._ndarray import NdArray

__all__ = [
    NdArray.__name__,
    shape_size.__name__,
    strides.__name__,
]
