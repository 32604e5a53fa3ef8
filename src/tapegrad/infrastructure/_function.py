"""
Core differentiable operations.

This module contains the structural and linear-algebra operations of the
autodiff layer, expressed in a function-style autograd API:

- Each differentiable operation is implemented as a `Function` subclass
  with `forward(ctx, ...)` and `backward(ctx, grad_out)` static methods.
- A `Context` instance stores the arrays and metadata required for the
  backward computation (`save_for_backward`, `saved_meta`).
- Public functional wrappers (`view`, `gather`, `transpose`, `dot`, `relu`)
  take the recording `Tape` as their first argument. They validate inputs,
  construct the `Context`, invoke `forward`, and record the context on the
  tape. Passing ``tape=None`` computes the forward value without recording,
  which is what inference paths do.

Notes
-----
- Every forward value comes from the NdArray engine; shape preconditions
  are therefore enforced (and reported) by the engine itself.
- Backward methods return one contribution per parent; the tape adds them
  into the parents' `grad` arrays, so gradients from several consumers of
  the same tensor accumulate.
"""

from __future__ import annotations

from typing import Any, Optional, Sequence, Tuple, Type

import numpy as np

from ..domain._function import Function
from ._context import Context
from ._tape import Tape
from ._tensor import Tensor
from .ndarray import NdArray


def apply(
    tape: Optional[Tape],
    fn: Type[Function],
    parents: Tuple[Tensor, ...],
    *args: Any,
) -> Tensor:
    """
    Run `fn.forward` on `parents` and record the backward context on `tape`.

    Parameters
    ----------
    tape : Tape | None
        Recording tape, or None to skip recording.
    fn : Type[Function]
        Operation to apply.
    parents : tuple[Tensor, ...]
        Differentiable operands.
    *args
        Extra non-differentiable arguments forwarded to `fn.forward`.

    Returns
    -------
    Tensor
        The forward result.
    """
    for p in parents:
        if not isinstance(p, Tensor):
            raise TypeError(
                f"{fn.__name__} expects Tensor operands, got {type(p).__name__}"
            )
    ctx = Context(fn=fn, parents=parents)
    out = fn.forward(ctx, *parents, *args)
    ctx.out = out
    if tape is not None:
        tape.record(ctx)
    return out


class ViewFn(Function):
    """
    Reshape without data movement.

    Backward reinterprets the output gradient under the input shape.
    """

    @staticmethod
    def forward(ctx, x: Tensor, shape: Sequence[int]) -> Tensor:
        ctx.saved_meta["input_shape"] = x.shape
        return Tensor(x.data.view(shape))

    @staticmethod
    def backward(ctx, grad_out: NdArray) -> Tuple[Optional[NdArray], ...]:
        return (grad_out.view(ctx.saved_meta["input_shape"]),)


def view(tape: Optional[Tape], x: Tensor, shape: Sequence[int]) -> Tensor:
    """
    Differentiable `view`: same values under `shape`.

    The result's data aliases `x.data`'s buffer; its gradient is separate.
    """
    return apply(tape, ViewFn, (x,), shape)


class GatherFn(Function):
    """
    Index-selected read.

    Implements:

        out = x.gather(indices)

    Backward:

        grad_x = grad_out.scatter(indices, x.shape[indices.ndim - 1])

    Rows gathered more than once receive the sum of their gradients. The
    index tensor receives no gradient.
    """

    @staticmethod
    def forward(ctx, x: Tensor, indices: Tensor) -> Tensor:
        out = Tensor(x.data.gather(indices.data))
        ctx.saved_meta["table_size"] = x.shape[indices.ndim - 1]
        return out

    @staticmethod
    def backward(ctx, grad_out: NdArray) -> Tuple[Optional[NdArray], ...]:
        _, indices = ctx.parents
        grad_x = grad_out.scatter(indices.data, ctx.saved_meta["table_size"])
        return (grad_x, None)


def gather(tape: Optional[Tape], x: Tensor, indices: Tensor) -> Tensor:
    """
    Differentiable `gather` of rows of `x` selected by `indices`.
    """
    return apply(tape, GatherFn, (x, indices))


class TransposeFn(Function):
    """
    Axis permutation.

    Backward applies the inverse permutation to the output gradient.
    """

    @staticmethod
    def forward(ctx, x: Tensor, dims: Sequence[int]) -> Tensor:
        ctx.saved_meta["dims"] = tuple(dims)
        return Tensor(x.data.transpose(dims))

    @staticmethod
    def backward(ctx, grad_out: NdArray) -> Tuple[Optional[NdArray], ...]:
        return (grad_out.untranspose(ctx.saved_meta["dims"]),)


def transpose(tape: Optional[Tape], x: Tensor, dims: Sequence[int]) -> Tensor:
    """
    Differentiable `transpose`; `dims` maps result axes to source axes.
    """
    return apply(tape, TransposeFn, (x,), dims)


class DotFn(Function):
    """
    Batched matrix product.

    Implements:

        out = a @ b        (*g, m, k) @ (*g, k, n) -> (*g, m, n)

    Backward:

        grad_a = grad_out @ b^T
        grad_b = a^T @ grad_out

    where ``^T`` swaps the last two axes.
    """

    @staticmethod
    def forward(ctx, a: Tensor, b: Tensor) -> Tensor:
        return Tensor(a.data.dot(b.data))

    @staticmethod
    def backward(ctx, grad_out: NdArray) -> Tuple[Optional[NdArray], ...]:
        a, b = ctx.parents
        return (grad_out.dot(b.data.t()), a.data.t().dot(grad_out))


def dot(tape: Optional[Tape], a: Tensor, b: Tensor) -> Tensor:
    """
    Differentiable batched matrix product.
    """
    return apply(tape, DotFn, (a, b))


class ReLUFn(Function):
    """
    ReLU activation function.

    Implements:

        relu(x) = max(x, 0)

    Backward:

        grad_x = grad_out * (x >= 0)

    Notes
    -----
    The mask is computed once in forward and saved, so later in-place
    updates of `x.data` cannot affect the backward pass. At exactly zero the
    gradient is passed through.
    """

    @staticmethod
    def forward(ctx, x: Tensor) -> Tensor:
        mask = x.data.map(lambda v: (v >= 0.0).astype(np.float64))
        ctx.save_for_backward(mask)
        return Tensor(x.data.map(lambda v: np.maximum(v, 0.0)))

    @staticmethod
    def backward(ctx, grad_out: NdArray) -> Tuple[Optional[NdArray], ...]:
        (mask,) = ctx.saved_arrays
        return (grad_out.map2(mask, np.multiply),)


def relu(tape: Optional[Tape], x: Tensor) -> Tensor:
    """
    Differentiable elementwise ``max(x, 0)``.
    """
    return apply(tape, ReLUFn, (x,))
