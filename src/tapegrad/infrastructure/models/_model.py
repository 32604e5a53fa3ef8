"""
Model runtime.

This module defines `Model`, the owner of a set of trainable parameters and
of the tape used to train them. It drives the whole training-step protocol:

1. zero every parameter's gradient,
2. run the caller's forward function inside a fresh tape scope,
3. replay the tape (on scope exit) to accumulate gradients,
4. apply every parameter's update rule.

There is no other mutation path for parameters.

The forward function receives the model's tape and must pass it to every
differentiable operation. It must also seed the gradient of its output
tensor (typically ``loss.grad.fill_(1)``) before returning; nothing seeds the
final gradient automatically.
"""

from __future__ import annotations

from typing import Any, Callable, List, Mapping, Optional, Sequence, TypeVar

from ...domain._errors import TapeScopeError
from .._parameter import Parameter
from .._tape import Tape
from ..optimizers import ParameterFactory
from ._history import History

R = TypeVar("R")


class Model:
    """
    Container of parameters plus the per-step training protocol.

    Parameters
    ----------
    parameter_factory : ParameterFactory
        Callable ``(shape, scale) -> Parameter`` used by `add_parameter`, so
        that all parameters share one optimizer configuration.
    tape : Tape, optional
        Tape used for training steps. A new one is created when omitted.

    Notes
    -----
    `step` is not re-entrant: calling it from inside a forward function
    raises `TapeScopeError`.
    """

    def __init__(
        self, parameter_factory: ParameterFactory, *, tape: Optional[Tape] = None
    ) -> None:
        self.parameter_factory = parameter_factory
        self.parameters: List[Parameter] = []
        self.tape = tape if tape is not None else Tape()

    def add_parameter(self, shape: Sequence[int], scale: float) -> Parameter:
        """
        Create a parameter through the factory and register it.

        Parameters
        ----------
        shape : Sequence[int]
            Parameter shape.
        scale : float
            Initialization scale; data is drawn from U[-scale, scale).

        Returns
        -------
        Parameter
            The registered parameter, for the caller to wire into its forward
            computation.
        """
        parameter = self.parameter_factory(shape, scale)
        self.parameters.append(parameter)
        return parameter

    def zero_grad(self) -> None:
        """
        Reset the gradient of every registered parameter.
        """
        for p in self.parameters:
            p.zero_grad()

    def step(self, forward_fn: Callable[[Tape], R]) -> R:
        """
        Run one training step.

        Parameters
        ----------
        forward_fn : Callable[[Tape], R]
            Performs the forward pass with the given tape and seeds the output
            gradient.

        Returns
        -------
        R
            Whatever `forward_fn` returned.

        Raises
        ------
        TapeScopeError
            If a step is already running on this model's tape. Gradients
            are left untouched.
        """
        if self.tape.active:
            raise TapeScopeError()
        self.zero_grad()
        result = self.tape.with_scope(forward_fn)
        for p in self.parameters:
            p.update()
        return result

    def train_steps(
        self,
        forward_fn: Callable[[Tape], Mapping[str, Any]],
        steps: int,
        *,
        verbose: int = 0,
    ) -> History:
        """
        Run `steps` training steps and record their logs.

        Parameters
        ----------
        forward_fn : Callable[[Tape], Mapping[str, Any]]
            Forward function for `step`; it returns a mapping of scalar logs
            (e.g. ``{"loss": ..., "accuracy": ...}``).
        steps : int
            Number of steps to run. Must be >= 1.
        verbose : int, optional
            If non-zero, prints a one-line summary every `verbose` steps and
            after the last step. Default is 0 (silent).

        Returns
        -------
        History
            Per-step logs.

        Raises
        ------
        ValueError
            If ``steps < 1``.
        """
        if steps < 1:
            raise ValueError("steps must be >= 1")

        hist = History()
        for step_idx in range(steps):
            logs = self.step(forward_fn)
            hist.append_step(step_idx, logs)

            if verbose and ((step_idx + 1) % verbose == 0 or step_idx + 1 == steps):
                parts = [f"Step {step_idx + 1}/{steps}"]
                for k, v in hist.last().items():
                    parts.append(f"{k}: {v:.6f}")
                print(" - ".join(parts))

        return hist
