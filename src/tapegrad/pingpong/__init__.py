"""
Ping-pong simulation and an imitation-learning agent built on tapegrad.
"""

from ._game import Game, PingPongSettings, simple_agent
from ._agent import (
    STATE_SIZE,
    AgentSettings,
    ImitationAgent,
    ReplayBuffer,
    get_state,
)

__all__ = [
    Game.__name__,
    PingPongSettings.__name__,
    simple_agent.__name__,
    "STATE_SIZE",
    AgentSettings.__name__,
    ImitationAgent.__name__,
    ReplayBuffer.__name__,
    get_state.__name__,
]
