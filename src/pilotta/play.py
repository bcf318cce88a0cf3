"""
Trick-taking: legal moves with forced overtrump, trick winner, trick points.
A trick is a list of (seat, card) in the order played.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from .deck import Card, Suit, card_strength, card_value, compare_cards
from .errors import MalformedState

TrickCards = Sequence[tuple[int, Card]]


@dataclass(frozen=True)
class CompletedTrick:
    """A sealed trick: 4 (seat, card) pairs, its winner and card points."""

    cards: tuple[tuple[int, Card], ...]
    winner: int
    points: int

    @property
    def lead_suit(self) -> Suit:
        return self.cards[0][1].suit


def lead_suit(trick: TrickCards) -> Suit | None:
    return trick[0][1].suit if trick else None


def has_suit(hand: Sequence[Card], suit: Suit) -> bool:
    return any(c.suit == suit for c in hand)


def highest_trump(trick: TrickCards, trump: Suit) -> Card | None:
    """Strongest trump already in the trick, if any."""
    best: Card | None = None
    for _, c in trick:
        if c.suit == trump and (best is None or card_strength(c, True) > card_strength(best, True)):
            best = c
    return best


def legal_plays(hand: Sequence[Card], trick: TrickCards, trump: Suit) -> list[Card]:
    """
    Cards that may be played from ``hand`` on ``trick``, in hand order.
    1. Empty trick: anything.
    2. Holding the lead suit: lead suit only.
    3. Void in lead suit, holding trump: trump, and it must beat the highest
       trump already in the trick when some held trump can.
    4. Otherwise anything.
    Never empty for a non-empty hand.
    """
    if not trick:
        return list(hand)

    led = trick[0][1].suit
    following = [c for c in hand if c.suit == led]
    if following:
        return following

    trumps = [c for c in hand if c.suit == trump]
    if trumps:
        top = highest_trump(trick, trump)
        if top is None:
            return trumps
        over = [c for c in trumps if card_strength(c, True) > card_strength(top, True)]
        return over or trumps

    return list(hand)


def trick_winner(trick: TrickCards, trump: Suit) -> int:
    """
    Seat currently winning the trick (works on partial tricks too).
    Only trumps and lead-suit cards can win, so the result does not depend on
    the order in which cards are compared.
    """
    if not trick:
        raise MalformedState("Cannot determine the winner of an empty trick")
    led = trick[0][1].suit
    best_seat, best_card = trick[0]
    for seat, card in trick[1:]:
        if compare_cards(card, best_card, trump, led) > 0:
            best_seat, best_card = seat, card
    return best_seat


def winning_card(trick: TrickCards, trump: Suit) -> Card | None:
    if not trick:
        return None
    seat = trick_winner(trick, trump)
    return next(c for s, c in trick if s == seat)


def trick_points(trick: TrickCards, trump: Suit) -> int:
    """Sum of card values (no last-trick bonus)."""
    return sum(card_value(c, c.suit == trump) for _, c in trick)


def seal_trick(trick: TrickCards, trump: Suit) -> CompletedTrick:
    """Turn a full trick into a CompletedTrick. Needs 4 distinct seats."""
    seats = {s for s, _ in trick}
    if len(trick) != 4 or len(seats) != 4:
        raise MalformedState(f"A trick needs 4 distinct seats, got {[s for s, _ in trick]}")
    return CompletedTrick(
        cards=tuple(trick),
        winner=trick_winner(trick, trump),
        points=trick_points(trick, trump),
    )


__all__ = [
    "TrickCards",
    "CompletedTrick",
    "lead_suit",
    "has_suit",
    "highest_trump",
    "legal_plays",
    "trick_winner",
    "winning_card",
    "trick_points",
    "seal_trick",
]
