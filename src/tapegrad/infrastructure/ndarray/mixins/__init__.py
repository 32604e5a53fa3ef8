"""
NdArray operation mixins.

Each mixin groups one family of NdArray methods; the concrete `NdArray`
class composes all of them.
"""

from ._memory import NdArrayMemoryMixin
from ._elementwise import NdArrayElementwiseMixin
from ._shape_and_indexing import NdArrayShapeAndIndexingMixin
from ._reduction import NdArrayReductionMixin

__all__ = [
    NdArrayMemoryMixin.__name__,
    NdArrayElementwiseMixin.__name__,
    NdArrayShapeAndIndexingMixin.__name__,
    NdArrayReductionMixin.__name__,
]
