"""
Information set: what one seat may legitimately observe during play.

Used by both the heuristic card player and the search engine; built from a
full game state by ``pilotta.game.information_set``.
"""
from __future__ import annotations

from dataclasses import dataclass

from .bidding import Contract
from .deal import team_of
from .deck import Card, Suit, make_deck_32
from .play import CompletedTrick


@dataclass(frozen=True)
class InformationSet:
    seat: int
    hand: tuple[Card, ...]
    contract: Contract
    current_trick: tuple[tuple[int, Card], ...] = ()
    completed_tricks: tuple[CompletedTrick, ...] = ()
    round_points: tuple[int, int] = (0, 0)
    hand_sizes: tuple[int, int, int, int] = (8, 8, 8, 8)
    scores: tuple[int, int] = (0, 0)

    @property
    def trump(self) -> Suit:
        return self.contract.trump

    @property
    def team(self) -> int:
        return team_of(self.seat)

    @property
    def trick_number(self) -> int:
        """1-based number of the trick in progress."""
        return len(self.completed_tricks) + 1

    @property
    def is_contract_team(self) -> bool:
        return self.team == self.contract.team

    def played_cards(self) -> list[Card]:
        cards = [c for t in self.completed_tricks for _, c in t.cards]
        cards.extend(c for _, c in self.current_trick)
        return cards

    def unseen_cards(self) -> list[Card]:
        """Deck minus own hand minus everything already played."""
        known = set(self.hand)
        known.update(self.played_cards())
        return [c for c in make_deck_32() if c not in known]

    def points_needed(self) -> int:
        """Card points the contracting team still lacks for its contract."""
        return self.contract.value - self.round_points[self.contract.team]


__all__ = ["InformationSet"]
