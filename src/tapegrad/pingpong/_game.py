"""
Headless two-player ping-pong simulation.

The court spans ``[left, right]`` horizontally and ``[top, bottom]``
vertically. Player 0 defends the bottom edge and player 1 the top edge; each
controls the horizontal position of a paddle with a control value in
``{-1, 0, 1}``.

The simulation advances in fixed time steps. The ball speeds up by
`bounce_acceleration` (as a fraction of its current speed along the bounce
axis) every time it bounces off a wall or a paddle, so rallies cannot last
forever.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Sequence

import numpy as np


@dataclass(frozen=True)
class PingPongSettings:
    """
    Physical constants of the simulation.

    Attributes
    ----------
    dt : float
        Time step per `Game.update` call.
    left, right, top, bottom : float
        Court bounds. ``top`` is player 1's edge and ``bottom`` player 0's.
    paddle_speed : float
        Paddle displacement per unit time at full control.
    paddle_width : float
        Paddle width; a ball is returned if it lands within half a width of
        the paddle centre.
    bounce_acceleration : float
        Extra speed gained along the bounce axis on every bounce.
    """

    dt: float = 0.01
    left: float = -0.5
    right: float = 0.5
    top: float = -1.0
    bottom: float = 1.0
    paddle_speed: float = 1.75
    paddle_width: float = 0.2
    bounce_acceleration: float = 0.1


def _clip(x: float, low: float, high: float) -> float:
    return min(max(x, low), high)


def _uniform(rng: Optional[np.random.Generator]) -> float:
    if rng is None:
        return float(np.random.uniform())
    return float(rng.uniform())


class Game:
    """
    Mutable state of one ping-pong game.

    Parameters
    ----------
    settings : PingPongSettings, optional
        Physical constants. Defaults to `PingPongSettings()`.
    rng : numpy.random.Generator, optional
        Source of the initial ball velocity. The global NumPy RNG is used
        when omitted.

    Attributes
    ----------
    ball : list[float]
        Ball position ``[x, y]``; starts at the court centre.
    ball_v : list[float]
        Ball velocity ``[vx, vy]``; ``vx`` is uniform in ``[-1, 1)`` and
        ``vy`` is ``+1`` or ``-1``.
    paddles : list[list[float]]
        Paddle positions ``[x, y]`` for players 0 and 1.
    """

    def __init__(
        self,
        settings: Optional[PingPongSettings] = None,
        rng: Optional[np.random.Generator] = None,
    ) -> None:
        self.settings = settings if settings is not None else PingPongSettings()
        s = self.settings
        self.ball: List[float] = [0.0, 0.0]
        self.ball_v: List[float] = [
            2.0 * (_uniform(rng) - 0.5),
            float(np.sign(_uniform(rng) - 0.5)),
        ]
        self.paddles: List[List[float]] = [[0.0, s.bottom], [0.0, s.top]]

    def update(self, control: Sequence[int]) -> Optional[int]:
        """
        Advance the simulation by one time step.

        Parameters
        ----------
        control : Sequence[int]
            Control value per player, each in ``{-1, 0, 1}``.

        Returns
        -------
        int | None
            The winning player if the ball got past a paddle this step,
            otherwise None.
        """
        s = self.settings
        half_width = s.paddle_width / 2

        for paddle, c in zip(self.paddles, control):
            paddle[0] = _clip(
                paddle[0] + s.dt * s.paddle_speed * c,
                s.left + half_width,
                s.right - half_width,
            )

        self.ball[0] += s.dt * self.ball_v[0]
        self.ball[1] += s.dt * self.ball_v[1]
        bounce = -1.0 - s.bounce_acceleration

        if self.ball[0] < s.left or s.right < self.ball[0]:
            self.ball_v[0] *= bounce
        if self.ball[1] < s.top:
            if abs(self.paddles[1][0] - self.ball[0]) > half_width:
                return 0
            self.ball_v[1] *= bounce
        if self.ball[1] > s.bottom:
            if abs(self.paddles[0][0] - self.ball[0]) > half_width:
                return 1
            self.ball_v[1] *= bounce

        self.ball = [
            _clip(self.ball[0], s.left, s.right),
            _clip(self.ball[1], s.top, s.bottom),
        ]
        return None


def simple_agent(game: Game, player: int) -> int:
    """
    Scripted policy: move the paddle towards the ball's x position.

    Returns 0 when the ball is within a quarter paddle width of the paddle
    centre, otherwise the sign of the offset.
    """
    dx = game.ball[0] - game.paddles[player][0]
    if abs(dx) < game.settings.paddle_width / 4:
        return 0
    return int(np.sign(dx))
