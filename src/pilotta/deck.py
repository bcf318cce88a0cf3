"""
Pilotta deck: 32 cards (4 suits x 8 ranks, 7 to Ace).
Trump-aware point values and strength orders.
"""
from __future__ import annotations

import random
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Iterable


class Suit(IntEnum):
    """Hearts, Diamonds, Clubs, Spades. Order is only used for sorting."""
    HEARTS = 0
    DIAMONDS = 1
    CLUBS = 2
    SPADES = 3


class Rank(IntEnum):
    """Ranks in natural (sequence) order: 7 < 8 < ... < K < A."""
    SEVEN = 7
    EIGHT = 8
    NINE = 9
    TEN = 10
    JACK = 11
    QUEEN = 12
    KING = 13
    ACE = 14


# Strongest first
TRUMP_ORDER = (Rank.JACK, Rank.NINE, Rank.ACE, Rank.TEN, Rank.KING, Rank.QUEEN, Rank.EIGHT, Rank.SEVEN)
PLAIN_ORDER = (Rank.ACE, Rank.TEN, Rank.KING, Rank.QUEEN, Rank.JACK, Rank.NINE, Rank.EIGHT, Rank.SEVEN)

TRUMP_VALUES = {
    Rank.JACK: 20, Rank.NINE: 14, Rank.ACE: 11, Rank.TEN: 10,
    Rank.KING: 4, Rank.QUEEN: 3, Rank.EIGHT: 0, Rank.SEVEN: 0,
}
PLAIN_VALUES = {
    Rank.ACE: 11, Rank.TEN: 10, Rank.KING: 4, Rank.QUEEN: 3,
    Rank.JACK: 2, Rank.NINE: 0, Rank.EIGHT: 0, Rank.SEVEN: 0,
}

# 152 in cards + 10 for the last trick
CARD_POINTS_TOTAL = 152
LAST_TRICK_BONUS = 10
ROUND_POINTS_TOTAL = CARD_POINTS_TOTAL + LAST_TRICK_BONUS

_SUIT_CHARS = "♥♦♣♠"
_SUIT_LETTERS = "HDCS"
_RANK_LABELS = {
    Rank.SEVEN: "7", Rank.EIGHT: "8", Rank.NINE: "9", Rank.TEN: "10",
    Rank.JACK: "J", Rank.QUEEN: "Q", Rank.KING: "K", Rank.ACE: "A",
}


@dataclass(frozen=True)
class Card:
    """
    A single card. Equality and hashing use (suit, rank) only; ``uid`` is an
    opaque instance id that tells apart copies made for simulations.
    """

    suit: Suit
    rank: Rank
    uid: int = field(default=0, compare=False)

    def __post_init__(self) -> None:
        assert isinstance(self.suit, Suit), self.suit
        assert isinstance(self.rank, Rank), self.rank

    def same(self, other: Card) -> bool:
        return self.suit == other.suit and self.rank == other.rank

    def is_trump(self, trump: Suit | None) -> bool:
        return trump is not None and self.suit == trump

    def value(self, trump: Suit | None) -> int:
        return card_value(self, self.is_trump(trump))

    def __str__(self) -> str:
        return f"{_RANK_LABELS[self.rank]}{_SUIT_CHARS[self.suit]}"

    def __repr__(self) -> str:
        return str(self)


def card_value(card: Card, is_trump: bool) -> int:
    """Points of a card: trump table or plain table."""
    return TRUMP_VALUES[card.rank] if is_trump else PLAIN_VALUES[card.rank]


def card_strength(card: Card, is_trump: bool) -> int:
    """Strength within its suit, 8 (strongest) down to 1."""
    order = TRUMP_ORDER if is_trump else PLAIN_ORDER
    return len(order) - order.index(card.rank)


def compare_cards(a: Card, b: Card, trump: Suit, lead: Suit) -> int:
    """
    Signed comparison of two cards inside a trick.
    > 0 if a beats b, < 0 if b beats a, 0 if neither can beat the other
    (two off-suit non-trumps).
    """
    a_trump = a.suit == trump
    b_trump = b.suit == trump
    if a_trump and not b_trump:
        return 1
    if b_trump and not a_trump:
        return -1
    if a_trump and b_trump:
        return card_strength(a, True) - card_strength(b, True)
    a_lead = a.suit == lead
    b_lead = b.suit == lead
    if a_lead and not b_lead:
        return 1
    if b_lead and not a_lead:
        return -1
    if a_lead and b_lead:
        return card_strength(a, False) - card_strength(b, False)
    return 0


def card_index(card: Card) -> int:
    """Dense index 0..31 (suit-major, natural rank order)."""
    return int(card.suit) * 8 + (int(card.rank) - int(Rank.SEVEN))


def card_from_index(idx: int) -> Card:
    assert 0 <= idx < 32
    return Card(Suit(idx // 8), Rank(idx % 8 + int(Rank.SEVEN)), uid=idx)


def make_deck_32() -> list[Card]:
    """Build a full 32-card deck in suit-major order; uids are 0..31."""
    deck: list[Card] = []
    for s in Suit:
        for r in Rank:
            deck.append(Card(s, r, uid=len(deck)))
    return deck


def shuffle_deck(deck: Iterable[Card], rng: random.Random | None = None) -> list[Card]:
    """Uniform Fisher-Yates permutation; returns a new list."""
    if rng is None:
        rng = random.Random()
    cards = list(deck)
    for i in range(len(cards) - 1, 0, -1):
        j = rng.randint(0, i)
        cards[i], cards[j] = cards[j], cards[i]
    return cards


def card_from_str(text: str) -> Card:
    """
    Parse "JH", "10♥", "as", "7s". Rank first, suit last (letter or symbol).
    """
    s = text.strip().upper()
    if len(s) < 2:
        raise ValueError(f"Cannot parse card: {text!r}")
    rank_part, suit_part = s[:-1], s[-1]
    if suit_part in _SUIT_LETTERS:
        suit = Suit(_SUIT_LETTERS.index(suit_part))
    elif suit_part in _SUIT_CHARS:
        suit = Suit(_SUIT_CHARS.index(suit_part))
    else:
        raise ValueError(f"Unknown suit in card: {text!r}")
    by_label = {label: rank for rank, label in _RANK_LABELS.items()}
    if rank_part == "T":
        rank_part = "10"
    if rank_part not in by_label:
        raise ValueError(f"Unknown rank in card: {text!r}")
    rank = by_label[rank_part]
    return Card(suit, rank, uid=int(suit) * 8 + int(rank) - int(Rank.SEVEN))


def cards_from_str(text: str) -> list[Card]:
    """Space-separated list, e.g. "JH 9H AS"."""
    return [card_from_str(tok) for tok in text.split()]


def sort_cards(cards: Iterable[Card], trump: Suit | None = None) -> list[Card]:
    """Display order: trumps first (strongest first), then by suit and strength."""

    def key(c: Card) -> tuple[int, int, int]:
        is_t = c.is_trump(trump)
        return (0 if is_t else 1, int(c.suit), -card_strength(c, is_t))

    return sorted(cards, key=key)


def cards_point_total(cards: Iterable[Card], trump: Suit | None) -> int:
    return sum(c.value(trump) for c in cards)


__all__ = [
    "Suit",
    "Rank",
    "Card",
    "TRUMP_ORDER",
    "PLAIN_ORDER",
    "TRUMP_VALUES",
    "PLAIN_VALUES",
    "CARD_POINTS_TOTAL",
    "LAST_TRICK_BONUS",
    "ROUND_POINTS_TOTAL",
    "card_value",
    "card_strength",
    "compare_cards",
    "card_index",
    "card_from_index",
    "make_deck_32",
    "shuffle_deck",
    "card_from_str",
    "cards_from_str",
    "sort_cards",
    "cards_point_total",
]
