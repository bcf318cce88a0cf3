"""
Card-play policies and the automated decision entry points.

The small ``CardPolicy`` protocol is what the flow controller calls for an
automated seat: ``choose(info, legal) -> card``. Three implementations:
- RandomPolicy: uniform over legal cards (baseline, rollouts, tests)
- HeuristicPolicy: lead / follow heuristics
- MCTSPolicy: determinized tree search
"""
from __future__ import annotations

import random
import threading
from dataclasses import dataclass, field
from enum import Enum
from typing import Protocol, Sequence

from .bidding import Contract
from .deck import Card
from .infoset import InformationSet
from .mcts import MCTSConfig, choose_card
from .play import legal_plays
from .strategy import (
    BidContext,
    BidDecision,
    Personality,
    PlayerProfile,
    choose_heuristic_card,
    decide_bid,
)


class PlayPolicy(str, Enum):
    HEURISTIC = "heuristic"
    MCTS = "mcts"
    RANDOM = "random"


class CardPolicy(Protocol):
    """Decision policy for the card-play phase."""

    def choose(self, info: InformationSet, legal: Sequence[Card]) -> Card:
        """
        Choose a card from ``legal`` for ``info.seat``.

        Implementations must only return members of ``legal``.
        """


@dataclass
class RandomPolicy:
    """
    Samples uniformly among legal cards.

    Usage:
        policy = RandomPolicy(seed=42)
        card = policy.choose(info, legal)
    """

    seed: int | None = None

    def __post_init__(self) -> None:
        self._rng = random.Random(self.seed)

    def choose(self, info: InformationSet, legal: Sequence[Card]) -> Card:
        if not legal:
            raise ValueError("No legal cards available for RandomPolicy")
        return self._rng.choice(list(legal))


@dataclass
class HeuristicPolicy:
    def choose(self, info: InformationSet, legal: Sequence[Card]) -> Card:
        return choose_heuristic_card(info, legal)


@dataclass
class MCTSPolicy:
    config: MCTSConfig = field(default_factory=MCTSConfig)
    seed: int | None = None
    cancel: threading.Event | None = None

    def __post_init__(self) -> None:
        self._rng = random.Random(self.seed)

    def choose(self, info: InformationSet, legal: Sequence[Card]) -> Card:
        card = choose_card(info, self.config, self._rng, self.cancel)
        return card if card in legal else list(legal)[0]


def policy_for(
    policy: PlayPolicy,
    config: MCTSConfig | None = None,
    seed: int | None = None,
) -> CardPolicy:
    """Build a policy object for a seat."""
    if policy == PlayPolicy.MCTS:
        return MCTSPolicy(config=config or MCTSConfig(), seed=seed)
    if policy == PlayPolicy.RANDOM:
        return RandomPolicy(seed=seed)
    return HeuristicPolicy()


def choose_ai_bid(
    hand: Sequence[Card],
    current: Contract | None,
    personality: Personality = Personality.BALANCED,
    context: BidContext | None = None,
    profile: PlayerProfile | None = None,
) -> BidDecision:
    """Bid or pass for an automated seat."""
    return decide_bid(hand, current, personality, context, profile)


def choose_ai_card(
    info: InformationSet,
    policy: PlayPolicy = PlayPolicy.HEURISTIC,
    config: MCTSConfig | None = None,
    rng: random.Random | None = None,
    cancel: threading.Event | None = None,
) -> Card:
    """Card for ``info.seat`` under the requested policy; always legal."""
    legal = legal_plays(info.hand, info.current_trick, info.trump)
    if not legal:
        raise ValueError(f"Seat {info.seat} has no card to play")
    if policy == PlayPolicy.MCTS:
        return choose_card(info, config, rng, cancel)
    if policy == PlayPolicy.RANDOM:
        return (rng or random.Random()).choice(legal)
    return choose_heuristic_card(info, legal)


__all__ = [
    "PlayPolicy",
    "CardPolicy",
    "RandomPolicy",
    "HeuristicPolicy",
    "MCTSPolicy",
    "policy_for",
    "choose_ai_bid",
    "choose_ai_card",
]
