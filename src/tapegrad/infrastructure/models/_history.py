"""
Training history utilities.

This module defines a lightweight record of per-step training metrics, in a
manner similar to Keras' `History` object. It is returned by
`Model.train_steps()` and kept by the imitation agent across its training
calls.

Design goals
------------
- Minimal surface area: no dependency on arrays, tensors or the tape
- Deterministic ordering and explicit step indexing
"""

from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Union


Number = Union[int, float]


@dataclass
class History:
    """
    Container for per-step training metrics.

    Attributes
    ----------
    history : Dict[str, List[float]]
        Mapping from metric name to a list of per-step values, ordered by
        step index.
    step : List[int]
        Step indices (0-based) corresponding to entries in `history`.

    Notes
    -----
    - All metric values are stored as Python `float`.
    - This object is passive: it performs no aggregation beyond appending
      values supplied by the training loop.
    """

    history: Dict[str, List[float]] = field(default_factory=dict)
    step: List[int] = field(default_factory=list)

    def append_step(self, step_idx: int, logs: Mapping[str, Number]) -> None:
        """
        Append metrics for a completed step.

        Parameters
        ----------
        step_idx : int
            Zero-based index of the completed step.
        logs : Mapping[str, Number]
            Mapping from metric name to its value for that step.
        """
        self.step.append(int(step_idx))
        for k, v in logs.items():
            self.history.setdefault(k, []).append(float(v))

    def last(self) -> Dict[str, float]:
        """
        Return metrics from the most recent step.

        Metrics with no recorded values are omitted.
        """
        return {k: float(vs[-1]) for k, vs in self.history.items() if vs}

    def __len__(self) -> int:
        return len(self.step)
