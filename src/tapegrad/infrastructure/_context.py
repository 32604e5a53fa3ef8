from typing import Any, Optional, Sequence, Type
from dataclasses import dataclass, field

from ..domain._function import Function
from .ndarray import NdArray


@dataclass
class Context:
    """
    Backward record produced by one call of a differentiable operation.

    A `Context` is the tape's unit of work: it names the `Function` subclass
    whose `backward` computes the gradient contributions, and carries
    everything that computation needs.

    Attributes
    ----------
    fn : Type[Function]
        The operation that produced `out`. Replay dispatches on it.
    parents : Sequence[Tensor]
        The operand tensors. Gradient contributions returned by
        `fn.backward` are accumulated into their `grad`, in the same order.
    out : Optional[Tensor]
        The output tensor; its `grad` is the `grad_out` handed to
        `fn.backward` during replay. Set right after the forward pass.
    saved_arrays : list[NdArray]
        Arrays explicitly saved during the forward pass (masks,
        log-probabilities, ...).
    saved_meta : dict[str, Any]
        Non-array metadata required for backward (shapes, dims, sizes).
    """

    fn: Type[Function]
    parents: Sequence[Any]
    out: Optional[Any] = None
    saved_arrays: list[NdArray] = field(default_factory=list)
    saved_meta: dict[str, Any] = field(default_factory=dict)

    def save_for_backward(self, *arrays: NdArray) -> None:
        """
        Save arrays for use during the backward computation.

        Parameters
        ----------
        *arrays : NdArray
            Any number of arrays to be stored in `saved_arrays`.
        """
        self.saved_arrays.extend(arrays)
