"""
Distribution (deal) for 4 players: 3-2-3 per player, 32 cards, no kitty.
Seats 0..3 in play order; team A = seats 0 and 2, team B = seats 1 and 3.
"""
from __future__ import annotations

import random
from typing import NamedTuple

from .deck import Card, make_deck_32, shuffle_deck

NUM_SEATS = 4
HAND_SIZE = 8
DEAL_PATTERN = (3, 2, 3)


class Deal4P(NamedTuple):
    """Result of a deal. Hands are lists indexed by seat."""
    hands: tuple[list[Card], list[Card], list[Card], list[Card]]
    dealer: int


def team_of(seat: int) -> int:
    """0 = team A (seats 0, 2), 1 = team B (seats 1, 3)."""
    return seat % 2


def partner_of(seat: int) -> int:
    return (seat + 2) % NUM_SEATS


def seats_of_team(team: int) -> tuple[int, int]:
    return (team, team + 2)


def next_seat(seat: int) -> int:
    return (seat + 1) % NUM_SEATS


def next_dealer(dealer: int) -> int:
    """Dealer rotates in play direction (0 -> 1 -> 2 -> 3 -> 0)."""
    return (dealer + 1) % NUM_SEATS


def first_to_bid(dealer: int) -> int:
    """The seat after the dealer speaks first."""
    return (dealer + 1) % NUM_SEATS


def deal_4p(
    deck: list[Card] | None = None,
    rng: random.Random | None = None,
    dealer: int = 0,
) -> Deal4P:
    """
    Shuffle and deal 3-2-3: for each packet size, every seat from the one after
    the dealer receives that many cards off the top.
    """
    if deck is None:
        deck = make_deck_32()
    if len(deck) != NUM_SEATS * HAND_SIZE:
        raise ValueError(f"Deck must hold {NUM_SEATS * HAND_SIZE} cards, got {len(deck)}")
    cards = shuffle_deck(deck, rng)

    hands: list[list[Card]] = [[], [], [], []]
    pos = 0
    for packet in DEAL_PATTERN:
        for k in range(NUM_SEATS):
            seat = (dealer + 1 + k) % NUM_SEATS
            hands[seat].extend(cards[pos:pos + packet])
            pos += packet

    return Deal4P(hands=(hands[0], hands[1], hands[2], hands[3]), dealer=dealer)


__all__ = [
    "NUM_SEATS",
    "HAND_SIZE",
    "DEAL_PATTERN",
    "Deal4P",
    "team_of",
    "partner_of",
    "seats_of_team",
    "next_seat",
    "next_dealer",
    "first_to_bid",
    "deal_4p",
]
