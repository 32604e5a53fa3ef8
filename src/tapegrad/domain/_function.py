"""
Autograd function interface definitions.

This module defines the abstract base class for differentiable operations
used by the tape-based automatic differentiation system. Concrete subclasses
of `Function` implement both the forward computation and its corresponding
backward gradient computation.

Each call of a differentiable operation produces one `Context` record on the
tape. The record names the `Function` subclass that produced it, so replaying
the tape is a dispatch on that class rather than a call into a captured
closure.
"""

from abc import ABC, abstractmethod
from typing import Any, Optional, Sequence


class Function(ABC):
    """
    Abstract base class for differentiable operations.

    A `Function` represents a single recorded step of the forward pass and
    encapsulates both:
    - the forward computation
    - the backward (gradient) computation

    Subclasses must implement both `forward` and `backward` as static methods.
    Any intermediate values required for gradient computation should be stored
    on the provided `ctx` object during the forward pass.

    Notes
    -----
    - Methods are declared as `@staticmethod` to avoid implicit state on the
      function object itself.
    - The `ctx` argument acts as a per-invocation context, allowing safe reuse
      of `Function` classes across many forward passes.
    """

    @staticmethod
    @abstractmethod
    def forward(ctx, *inputs: Any) -> Any:
        """
        Perform the forward computation.

        Parameters
        ----------
        ctx : Context
            A mutable context object used to store intermediate values
            required for gradient computation.
        *inputs : Tensor | Any
            Input tensor(s) and non-differentiable arguments.

        Returns
        -------
        Tensor
            The output tensor resulting from the forward computation.
        """
        ...

    @staticmethod
    @abstractmethod
    def backward(ctx, grad_out: Any) -> Sequence[Optional[Any]]:
        """
        Compute gradient contributions for the input tensors.

        Parameters
        ----------
        ctx : Context
            The context object populated during the forward pass.
        grad_out : NdArray
            Gradient accumulated on the output tensor.

        Returns
        -------
        tuple[NdArray | None, ...]
            One gradient contribution per entry of `ctx.parents`, in order.
            Entries may be None for parents that receive no gradient (e.g.
            index tensors).
        """
        ...
