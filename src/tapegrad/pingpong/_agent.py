"""
Imitation-learning agent for ping-pong.

The agent watches a player (usually the scripted `simple_agent`) and learns
to predict where that player keeps its paddle for a given game state. At play
time it moves its own paddle towards the predicted position.

Pipeline
--------
1. `observe()` writes a random subset of (state, paddle x) pairs into a
   fixed-capacity replay buffer.
2. `train()` samples a batch from the buffer, quantizes the paddle positions
   into `n_buckets` classes and takes one Adam step on the softmax cross
   entropy of the predicted bucket.
3. `act()` runs an unrecorded forward pass and steers towards the arg-max
   bucket.

Every state component is quantized with the same `bucketise` rule and looked
up in a per-component embedding table; the concatenated embeddings go
through a two-layer ReLU network.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

import numpy as np

from ..infrastructure._function import dot, gather, relu, transpose, view
from ..infrastructure._losses import softmax_cross_entropy
from ..infrastructure._metrics import accuracy, idx_max
from ..infrastructure._tape import Tape
from ..infrastructure._tensor import Tensor
from ..infrastructure.models import History, Model
from ..infrastructure.ndarray import NdArray
from ..infrastructure.optimizers import adam
from ..infrastructure.optimizers._adam import check_adam_hyperparams
from ._game import Game

STATE_SIZE = 4


def get_state(game: Game, player: int) -> List[float]:
    """
    Return the game state as seen by `player`.

    The state is ``[ball_x, ball_y, vx, vy]`` with the velocity normalized to
    unit length. For player 1 the vertical components are mirrored, so both
    players see themselves defending the positive-y edge.
    """
    vx, vy = game.ball_v
    speed = float(np.hypot(vx, vy))
    flip = 1 - 2 * player
    return [
        game.ball[0],
        game.ball[1] * flip,
        vx / speed,
        vy / speed * flip,
    ]


@dataclass(frozen=True)
class AgentSettings:
    """
    Hyperparameters of `ImitationAgent`.

    Attributes
    ----------
    buffer_capacity : int
        Number of slots in the replay buffer.
    write_probability : float
        Probability that an observation is written to the buffer.
    buffer_min_for_training : int
        Minimum number of stored observations before `train()` steps.
    n_buckets : int
        Number of quantization buckets (and output classes).
    hidden_size : int
        Embedding and hidden layer width.
    batch_size : int
        Observations sampled per training step.
    lr, betas, eps : float, tuple[float, float], float
        Adam hyperparameters.
    """

    buffer_capacity: int = 1000
    write_probability: float = 0.1
    buffer_min_for_training: int = 100
    n_buckets: int = 40
    hidden_size: int = 128
    batch_size: int = 20
    lr: float = 0.001
    betas: Tuple[float, float] = (0.9, 0.999)
    eps: float = 1e-8

    def __post_init__(self) -> None:
        for name in ("buffer_capacity", "n_buckets", "hidden_size", "batch_size"):
            if getattr(self, name) < 1:
                raise ValueError(f"{name} must be >= 1, got {getattr(self, name)}")
        if not (0.0 < self.write_probability <= 1.0):
            raise ValueError(
                f"write_probability must be in (0, 1], got {self.write_probability}"
            )
        if not (1 <= self.buffer_min_for_training <= self.buffer_capacity):
            raise ValueError(
                "buffer_min_for_training must be in [1, buffer_capacity], "
                f"got {self.buffer_min_for_training}"
            )
        check_adam_hyperparams(self.lr, self.betas, self.eps)


class ReplayBuffer:
    """
    Fixed-capacity store of observed (state, paddle position) pairs.

    Writes are stochastic: each `update` stores its observation with
    probability `write_probability`. Until the buffer is full observations
    fill the next free slot; afterwards they replace a uniformly chosen one.

    Parameters
    ----------
    capacity : int
        Number of slots.
    write_probability : float
        Probability that an observation is stored.
    rng : numpy.random.Generator, optional
        Random source; the global NumPy RNG is used when omitted.
    """

    def __init__(
        self,
        capacity: int,
        write_probability: float,
        rng: Optional[np.random.Generator] = None,
    ) -> None:
        self.state = np.zeros((capacity, STATE_SIZE), dtype=np.float64)
        self.position = np.zeros(capacity, dtype=np.float64)
        self.length = 0
        self.write_probability = write_probability
        self._rng = rng

    @property
    def capacity(self) -> int:
        return self.state.shape[0]

    def __len__(self) -> int:
        return self.length

    def _uniform(self) -> float:
        if self._rng is None:
            return float(np.random.uniform())
        return float(self._rng.uniform())

    def _integers(self, high: int, size: Optional[int] = None):
        if self._rng is None:
            return np.random.randint(0, high, size=size)
        return self._rng.integers(0, high, size=size)

    def update(self, game: Game, player: int, control: int) -> None:
        """
        Possibly store the current state and `player`'s paddle position.
        """
        if self._uniform() >= self.write_probability:
            return
        if self.length < self.capacity:
            idx = self.length
            self.length += 1
        else:
            idx = int(self._integers(self.length))
        self.state[idx] = get_state(game, player)
        self.position[idx] = game.paddles[player][0]

    def sample(self, batch_size: int) -> Tuple[NdArray, NdArray]:
        """
        Draw `batch_size` stored observations uniformly with replacement.

        Returns
        -------
        tuple[NdArray, NdArray]
            States of shape ``(batch_size, 4)`` and paddle positions of shape
            ``(batch_size, 1)``.

        Raises
        ------
        ValueError
            If the buffer is empty.
        """
        if self.length == 0:
            raise ValueError("cannot sample from an empty replay buffer")
        idx = self._integers(self.length, size=batch_size)
        return (
            NdArray((batch_size, STATE_SIZE), self.state[idx]),
            NdArray((batch_size, 1), self.position[idx]),
        )


class ImitationAgent(Model):
    """
    Ping-pong agent trained to imitate an observed player.

    Parameters
    ----------
    settings : AgentSettings, optional
        Hyperparameters. Defaults to `AgentSettings()`.
    rng : numpy.random.Generator, optional
        Random source for parameter initialization and the replay buffer.
    tape : Tape, optional
        Tape used for training steps.

    Attributes
    ----------
    buffer : ReplayBuffer
        Observations collected by `observe()`.
    embed : Parameter
        Embedding table of shape ``(4, n_buckets, hidden_size)``.
    W0 : Parameter
        Hidden layer weights, ``(4 * hidden_size, hidden_size)``.
    W1 : Parameter
        Output layer weights, ``(hidden_size, n_buckets)``; starts at zero.
    history : History
        Loss and accuracy of every training step taken so far.
    """

    def __init__(
        self,
        settings: Optional[AgentSettings] = None,
        *,
        rng: Optional[np.random.Generator] = None,
        tape: Optional[Tape] = None,
    ) -> None:
        self.settings = settings if settings is not None else AgentSettings()
        s = self.settings
        super().__init__(adam(s.lr, s.betas, s.eps, rng=rng), tape=tape)

        self.buffer = ReplayBuffer(s.buffer_capacity, s.write_probability, rng=rng)
        self.embed = self.add_parameter((STATE_SIZE, s.n_buckets, s.hidden_size), 1.0)
        self.W0 = self.add_parameter(
            (STATE_SIZE * s.hidden_size, s.hidden_size), s.hidden_size**-0.5
        )
        self.W1 = self.add_parameter((s.hidden_size, s.n_buckets), 0.0)
        self.history = History()

    def bucketise(self, values: NdArray) -> NdArray:
        """
        Quantize values in ``[-1, 1]`` into ``{0, ..., n_buckets - 1}``.

        Computes ``clip(round((v + 1) * n / 2), 0, n - 1)`` elementwise, with
        halves rounded up. Returns a fresh array.
        """
        n = self.settings.n_buckets
        return values.map(
            lambda v: np.clip(np.floor((v + 1.0) * n / 2.0 + 0.5), 0, n - 1)
        )

    def logits(self, tape: Optional[Tape], state: NdArray) -> Tensor:
        """
        Forward pass: bucket scores of shape ``(batch, n_buckets)``.

        Parameters
        ----------
        tape : Tape | None
            Recording tape, or None for inference.
        state : NdArray
            Game states, shape ``(batch, 4)``.
        """
        batch = state.shape[0]
        buckets = Tensor(self.bucketise(state))
        hidden = gather(tape, self.embed, transpose(tape, buckets, (1, 0)))
        hidden = transpose(tape, hidden, (1, 0, 2))
        hidden = view(tape, hidden, (batch, STATE_SIZE * self.settings.hidden_size))
        hidden = relu(tape, dot(tape, hidden, self.W0))
        return dot(tape, hidden, self.W1)

    def observe(self, game: Game, player: int, control: int) -> None:
        """
        Record what `player` is doing in the replay buffer.
        """
        self.buffer.update(game, player, control)

    def train(self) -> Optional[Dict[str, float]]:
        """
        Take one training step if the buffer holds enough observations.

        Returns
        -------
        dict[str, float] | None
            ``{"loss": ..., "accuracy": ...}`` for the step, or None if the
            buffer is still too small.
        """
        s = self.settings
        if len(self.buffer) < s.buffer_min_for_training:
            return None

        def forward(tape: Tape) -> Dict[str, float]:
            state, position = self.buffer.sample(s.batch_size)
            targets = self.bucketise(position)
            logits = self.logits(tape, state)
            losses = softmax_cross_entropy(tape, logits, targets)
            losses.grad.fill_(1.0)
            return {
                "loss": losses.data.mean().item(),
                "accuracy": accuracy(logits.data, targets).mean().item(),
            }

        logs = self.step(forward)
        self.history.append_step(len(self.history), logs)
        return logs

    def act(self, game: Game, player: int, debug: bool = False) -> int:
        """
        Choose a control value for `player`'s paddle.

        Returns
        -------
        int
            -1, 0 or 1: the direction from the paddle's current bucket to
            the predicted bucket.
        """
        n = self.settings.n_buckets
        state = NdArray((1, STATE_SIZE), get_state(game, player))
        logits = self.logits(None, state)
        target_bucket = idx_max(logits.data.tolist(), 0, n)
        current_bucket = int(
            self.bucketise(NdArray((), [game.paddles[player][0]])).item()
        )
        if debug:
            print(f"agent.buffer.length {len(self.buffer)}")
            print(f"agent.logits {logits.data.tolist()}")
            print(f"agent.current_bucket {current_bucket}")
            print(f"agent.target_bucket {target_bucket}")
        return int(np.sign(target_bucket - current_bucket))
