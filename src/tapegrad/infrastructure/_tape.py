"""
Differentiation tape.

The tape is the record/replay engine of tapegrad's reverse-mode autodiff.
During a forward pass every differentiable operation appends one `Context`
to the tape; when the recording scope exits, the contexts are replayed in
strict reverse insertion order and each one's gradient contributions are
added into its parents' `grad` arrays.

Reverse insertion order is a valid reverse topological order as long as
operations are called in forward dependency order: an operation's record is
appended strictly after the records of the operations that produced its
inputs.

The tape is an explicit object owned by the caller (normally a `Model`) and
passed into every differentiable operation. There is no process-wide state.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Callable, Iterator, List, TypeVar

from typing_extensions import Self

from ..domain._errors import TapeScopeError
from ._context import Context

R = TypeVar("R")


class Tape:
    """
    Ordered record of backward contexts for one forward/backward cycle.

    Notes
    -----
    - Exactly one scope may be active at a time; opening a second one
      raises `TapeScopeError`.
    - Recording while no scope is active is allowed: the contexts stay on
      the tape until `replay()` is called or the next scope clears them.
    """

    def __init__(self) -> None:
        self._records: List[Context] = []
        self._active = False

    @property
    def active(self) -> bool:
        """
        Whether a recording scope is currently open.
        """
        return self._active

    def __len__(self) -> int:
        return len(self._records)

    def record(self, ctx: Context) -> None:
        """
        Append a backward context. Called by differentiable operations.
        """
        self._records.append(ctx)

    def replay(self) -> None:
        """
        Drain the tape, running every recorded backward in reverse order.

        Each context's `fn.backward(ctx, ctx.out.grad)` returns one gradient
        contribution per parent (or None); contributions are accumulated into
        the parents' `grad` arrays.
        """
        records, self._records = self._records, []
        for ctx in reversed(records):
            grads = ctx.fn.backward(ctx, ctx.out.grad)
            if len(grads) != len(ctx.parents):
                raise RuntimeError(
                    f"{ctx.fn.__name__}.backward returned {len(grads)} gradients "
                    f"for {len(ctx.parents)} parents"
                )
            for parent, g in zip(ctx.parents, grads):
                if g is not None:
                    parent.grad.add_(g)

    @contextmanager
    def scope(self) -> Iterator[Self]:
        """
        Open a recording scope.

        On entry the tape is cleared. When the body finishes normally the
        tape is replayed; if the body raises, nothing is replayed and the
        exception propagates. Either way the tape is left empty and inactive.

        Raises
        ------
        TapeScopeError
            If a scope is already active on this tape.
        """
        if self._active:
            raise TapeScopeError()
        self._records = []
        self._active = True
        try:
            yield self
            self.replay()
        finally:
            self._active = False
            self._records = []

    def with_scope(self, fn: Callable[["Tape"], R]) -> R:
        """
        Run `fn(tape)` inside `scope()` and return its result.

        The result is returned after the backward replay has completed, so
        every gradient it may depend on is already accumulated.
        """
        with self.scope():
            return fn(self)
