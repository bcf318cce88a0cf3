"""
Tiny CLI to run all-AI Pilotta matches.

Usage (from project root, after installing in editable mode):
    python -m pilotta.play_match --rounds 3 --policy mcts --time-budget-ms 500
"""
from __future__ import annotations

import argparse
import logging
import random

from .agents import PlayPolicy
from .game import DEFAULT_SEATS, Controller, MatchConfig, MatchResult, SeatConfig, run_match
from .mcts import MCTSConfig


def setup_logging(level: int = logging.INFO) -> None:
    """Attach one stream handler to the package logger."""
    logger = logging.getLogger("pilotta")
    if logger.hasHandlers():
        return
    logger.setLevel(level)
    shandle = logging.StreamHandler()
    shandle.setFormatter(
        logging.Formatter(
            '[%(levelname)s:%(process)d %(module)s:%(lineno)d %(asctime)s] '
            '%(message)s'))
    logger.addHandler(shandle)


def ai_seats(policy: PlayPolicy) -> tuple[SeatConfig, ...]:
    """Default table with every seat automated and playing ``policy``."""
    return tuple(
        SeatConfig(Controller.AI, s.personality, policy, s.name) for s in DEFAULT_SEATS
    )


def run_ai_match(
    rounds: int | None,
    target: int,
    seed: int,
    policy: PlayPolicy,
    time_budget_ms: int,
) -> MatchResult:
    config = MatchConfig(
        target_score=target,
        max_rounds=rounds,
        mcts=MCTSConfig(time_budget_ms=time_budget_ms),
    )
    result = run_match(ai_seats(policy), config, rng=random.Random(seed))

    for i, score in enumerate(result.rounds, start=1):
        made = "made" if score.contract_made else "down"
        print(f"Round {i}: {score.contract} {made} -> A {score.final[0]}, B {score.final[1]}")
    print(f"Final: A {result.scores[0]}, B {result.scores[1]} after {len(result.rounds)} rounds")
    return result


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Run an all-AI Pilotta match.")
    parser.add_argument(
        "--rounds",
        type=int,
        default=None,
        help="Stop after this many scored rounds (default: play to the target).",
    )
    parser.add_argument(
        "--target",
        type=int,
        default=151,
        help="Match target score.",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=42,
        help="Random seed for reproducibility.",
    )
    parser.add_argument(
        "--policy",
        choices=[p.value for p in PlayPolicy],
        default=PlayPolicy.HEURISTIC.value,
        help="Card-play policy for every seat.",
    )
    parser.add_argument(
        "--time-budget-ms",
        type=int,
        default=2000,
        help="MCTS time budget per decision.",
    )
    parser.add_argument("--verbose", action="store_true", help="Debug logging.")
    args = parser.parse_args(argv)

    setup_logging(logging.DEBUG if args.verbose else logging.INFO)
    run_ai_match(args.rounds, args.target, args.seed, PlayPolicy(args.policy), args.time_budget_ms)


if __name__ == "__main__":
    main()
