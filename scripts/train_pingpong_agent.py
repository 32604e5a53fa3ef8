#!/usr/bin/env python3
"""
Train an imitation agent on headless ping-pong games.

Player 0 is the scripted `simple_agent`; the imitation agent watches it,
takes a training step after every simulation step, and controls player 1
once it has trained for `--warmup-steps` steps (until then player 1 is
scripted too). A one-line summary is printed after every game.

Usage
-----
    python scripts/train_pingpong_agent.py --games 20 --seed 0
"""

import os
import sys

# Ensure repo_root/src is importable when running this file directly:
# repo_root/
#   src/tapegrad/...
#   scripts/train_pingpong_agent.py
THIS_DIR = os.path.dirname(os.path.abspath(__file__))
ROOT_DIR = os.path.abspath(os.path.join(THIS_DIR, ".."))
SRC_DIR = os.path.join(ROOT_DIR, "src")

if SRC_DIR not in sys.path:
    sys.path.insert(0, SRC_DIR)

import argparse
import time
from typing import Optional

import numpy as np

from tapegrad.pingpong import AgentSettings, Game, ImitationAgent, simple_agent


def play_game(
    agent: ImitationAgent,
    rng: np.random.Generator,
    *,
    max_steps: int,
    warmup_steps: int,
    debug: bool,
) -> tuple[Optional[int], int]:
    """
    Play one game; return (winner or None on timeout, steps played).
    """
    game = Game(rng=rng)
    for step in range(1, max_steps + 1):
        c0 = simple_agent(game, 0)
        agent.observe(game, 0, c0)
        agent.train()

        if len(agent.history) >= warmup_steps:
            c1 = agent.act(game, 1, debug=debug)
        else:
            c1 = simple_agent(game, 1)

        winner = game.update([c0, c1])
        if winner is not None:
            return winner, step
    return None, max_steps


def main() -> None:
    ap = argparse.ArgumentParser()
    ap.add_argument("--games", type=int, default=20, help="games to play")
    ap.add_argument(
        "--max-steps", type=int, default=5000, help="simulation steps per game"
    )
    ap.add_argument(
        "--warmup-steps",
        type=int,
        default=200,
        help="training steps before the agent takes over player 1",
    )
    ap.add_argument("--seed", type=int, default=0)
    ap.add_argument(
        "--hidden", type=int, default=128, help="agent embedding/hidden width"
    )
    ap.add_argument("--lr", type=float, default=0.001)
    ap.add_argument(
        "--verbose",
        type=int,
        default=1,
        help="0 = silent, 1 = per-game summary, 2 = also per-step agent diagnostics",
    )
    args = ap.parse_args()

    if args.games < 1 or args.max_steps < 1:
        ap.error("--games and --max-steps must be >= 1")

    rng = np.random.default_rng(args.seed)
    agent = ImitationAgent(
        AgentSettings(hidden_size=args.hidden, lr=args.lr),
        rng=rng,
    )

    wins = [0, 0]
    t0 = time.perf_counter()
    for game_idx in range(1, args.games + 1):
        winner, steps = play_game(
            agent,
            rng,
            max_steps=args.max_steps,
            warmup_steps=args.warmup_steps,
            debug=args.verbose >= 2,
        )
        if winner is not None:
            wins[winner] += 1

        if args.verbose:
            last = agent.history.last()
            loss = f"{last['loss']:.4f}" if "loss" in last else "n/a"
            acc = f"{last['accuracy']:.3f}" if "accuracy" in last else "n/a"
            outcome = "timeout" if winner is None else f"player {winner} wins"
            print(
                f"Game {game_idx}/{args.games} - {outcome} after {steps} steps"
                f" - train steps: {len(agent.history)} - loss: {loss} - accuracy: {acc}"
            )

    elapsed = time.perf_counter() - t0
    print(
        f"Done: {args.games} games in {elapsed:.1f}s"
        f" - scripted wins: {wins[0]} - agent-side wins: {wins[1]}"
    )


if __name__ == "__main__":
    main()
