"""
Shape- and tape-related exceptions for tapegrad.

This module defines the custom errors raised by the array engine and the
differentiation tape. Every precondition violation in the numeric core is
detected eagerly, before any buffer is mutated, and reported through one of
these types so that the failing operation and the offending shapes can be
diagnosed from the message alone.

The core never catches these errors itself; they always propagate to the
caller.
"""

from typing import Any


class ShapeMismatchError(ValueError):
    """
    Raised when an operation's operand shapes violate its preconditions.

    This covers element-count mismatches on construction and `view`, shape
    mismatches on elementwise/binary operations, mismatched group or
    contraction dimensions on `dot`, non-permutation arguments to
    `transpose`, and index/shape-prefix mismatches on gather/scatter.

    Attributes
    ----------
    op : str
        The name of the operation that was attempted (e.g., "dot", "gather").
    expected : Any
        The expected shape (or shape fragment / value).
    actual : Any
        The shape (or shape fragment / value) that was actually supplied.
    """

    def __init__(self, op: str, detail: str, expected: Any, actual: Any) -> None:
        """
        Initialize the ShapeMismatchError.

        Parameters
        ----------
        op : str
            The operation name that rejected its operands.
        detail : str
            Short description of the violated precondition.
        expected : Any
            Expected shape or value.
        actual : Any
            Actual shape or value.
        """
        super().__init__(f"{op}: {detail}; expected {expected}, got {actual}")
        self.op = op
        self.expected = expected
        self.actual = actual


class TapeScopeError(RuntimeError):
    """
    Raised when a recording scope is opened on a tape that is already active.

    A tape supports exactly one forward/backward cycle at a time. Opening a
    second scope while the first is still recording would interleave two
    gradient passes, so it is rejected instead.
    """

    def __init__(self) -> None:
        super().__init__(
            "Tape scope is already active; nested or re-entrant scopes are not supported."
        )
