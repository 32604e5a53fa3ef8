"""
Trainable parameter interface definitions.

This module defines the domain-level interface for trainable parameters. In
tapegrad a parameter owns its own update rule: the optimizer is not a
separate object holding references to parameters, it is the parameter's
`update()` method together with whatever state (moments, learning rate) the
rule needs.
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class IParameter(Protocol):
    """
    Domain-level interface for trainable parameters.

    An `IParameter` is a tensor-like object that accumulates a gradient
    during backward replay and consumes it in `update()`.

    Notes
    -----
    - `grad` always exists and has the same shape as the data; it is reset
      to zeros by `zero_grad()` rather than cleared to None.
    - `update()` is meant to run after a backward replay in the same step.
      A zero gradient does not imply unchanged data: SGD leaves the data
      as is, but Adam still applies the momentum it has accumulated.
    """

    # Gradient buffer (NdArray) with the same shape as the parameter data.
    grad: Any

    def zero_grad(self) -> None:
        """
        Reset the accumulated gradient to zeros.
        """
        ...

    def update(self) -> None:
        """
        Apply one optimization update in-place using the accumulated gradient.
        """
        ...
