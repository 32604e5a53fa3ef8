"""
Concrete trainable parameter base class.

This module defines `Parameter`, an infrastructure-level implementation of the
domain contract `IParameter`. A `Parameter` is a `Tensor` that also owns the
rule used to update it from its accumulated gradient.

Design notes
------------
- `Parameter` subclasses `Tensor` to reuse its `data`/`grad` storage.
- The update rule lives on the parameter itself (see `optimizers/`), so a
  model that builds all of its parameters through one factory gives every
  parameter the same optimizer configuration.
- Parameters are created once at model construction and mutated in place
  for the rest of the process lifetime.
"""

from __future__ import annotations

from abc import abstractmethod

from ..domain._parameter import IParameter
from ._tensor import Tensor


class Parameter(Tensor, IParameter):
    """
    Trainable tensor with an in-place update rule.

    Parameters
    ----------
    data : NdArray
        Initial value. The parameter takes ownership of the array.

    Notes
    -----
    - `grad` starts at zeros and is reset by `zero_grad()`.
    - Subclasses implement `update()`, which reads `grad` and mutates `data`.
      Calling it with a zero gradient is harmless: SGD leaves the data
      unchanged, Adam applies whatever momentum it has accumulated.
    """

    @abstractmethod
    def update(self) -> None:
        """
        Apply one optimization update in-place using `grad`.
        """
        ...
