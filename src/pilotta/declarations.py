"""
Declarations: sequences (tierce 20, quarte 50, quinte 100), four of a kind
(J 200, 9 150, A/10/K/Q 100) and belote (trump K + Q, 20).

Sequences and four-of-a-kinds are facts about a dealt hand; whether they score
depends on the declare / show tracking kept by the flow controller. Belote is
scored once both cards have been played (belote, then rebelote).
"""
from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Sequence

from .deal import team_of
from .deck import Card, Rank, Suit


class DeclarationKind(str, Enum):
    TIERCE = "tierce"
    QUARTE = "quarte"
    QUINTE = "quinte"
    CARRE = "carre"
    BELOTE = "belote"


SEQUENCE_POINTS = {3: 20, 4: 50, 5: 100}
CARRE_POINTS = {
    Rank.JACK: 200,
    Rank.NINE: 150,
    Rank.ACE: 100,
    Rank.TEN: 100,
    Rank.KING: 100,
    Rank.QUEEN: 100,
}
BELOTE_POINTS = 20

_SEQUENCE_KINDS = {3: DeclarationKind.TIERCE, 4: DeclarationKind.QUARTE, 5: DeclarationKind.QUINTE}


@dataclass(frozen=True)
class Declaration:
    kind: DeclarationKind
    cards: tuple[Card, ...]
    points: int
    seat: int

    @property
    def team(self) -> int:
        return team_of(self.seat)

    @property
    def is_sequence(self) -> bool:
        return self.kind in (DeclarationKind.TIERCE, DeclarationKind.QUARTE, DeclarationKind.QUINTE)

    def __str__(self) -> str:
        return f"{self.kind.value}({' '.join(str(c) for c in self.cards)}) {self.points} by seat {self.seat}"


@dataclass(frozen=True)
class DeclarationTracking:
    """Per-seat declare / show record."""

    has_declared: bool = False
    has_shown: bool = False
    can_show: bool = False


@dataclass(frozen=True)
class BeloteState:
    """
    Belote announcements for the seat that held trump K and Q.
    announcement is "belote" after the first card, "rebelote" after the second.
    """

    seat: int
    king_played: bool = False
    queen_played: bool = False
    announcement: str = "belote"

    @property
    def team(self) -> int:
        return team_of(self.seat)

    @property
    def complete(self) -> bool:
        return self.announcement == "rebelote"


def find_sequences(hand: Sequence[Card], seat: int = 0) -> list[Declaration]:
    """Maximal runs of >= 3 consecutive ranks per suit; runs of 5+ count as quinte."""
    out: list[Declaration] = []
    for suit in Suit:
        ranked = sorted((c for c in hand if c.suit == suit), key=lambda c: c.rank)
        if len(ranked) < 3:
            continue
        start = 0
        for i in range(1, len(ranked) + 1):
            if i < len(ranked) and ranked[i].rank == ranked[i - 1].rank + 1:
                continue
            length = i - start
            if length >= 3:
                size = min(length, 5)
                out.append(Declaration(
                    kind=_SEQUENCE_KINDS[size],
                    cards=tuple(ranked[start:i]),
                    points=SEQUENCE_POINTS[size],
                    seat=seat,
                ))
            start = i
    return out


def find_four_of_a_kind(hand: Sequence[Card], seat: int = 0) -> list[Declaration]:
    """Four cards of one rank; sevens and eights do not count."""
    out: list[Declaration] = []
    for rank in Rank:
        same = [c for c in hand if c.rank == rank]
        if len(same) == 4 and rank in CARRE_POINTS:
            out.append(Declaration(DeclarationKind.CARRE, tuple(same), CARRE_POINTS[rank], seat))
    return out


def find_all_declarations(hand: Sequence[Card], seat: int = 0) -> list[Declaration]:
    return find_sequences(hand, seat) + find_four_of_a_kind(hand, seat)


def check_belote(hand: Sequence[Card], trump: Suit | None) -> bool:
    """True if the hand holds both King and Queen of trump."""
    if trump is None:
        return False
    ranks = {c.rank for c in hand if c.suit == trump}
    return Rank.KING in ranks and Rank.QUEEN in ranks


def compare_declarations(a: Declaration, b: Declaration, trump: Suit | None) -> int:
    """
    > 0 if a outranks b. Four of a kind beats any sequence; two four-of-a-kinds
    compare by points; sequences by length, then top rank, then trump suit.
    """
    a_carre = a.kind == DeclarationKind.CARRE
    b_carre = b.kind == DeclarationKind.CARRE
    if a_carre != b_carre:
        return 1 if a_carre else -1
    if a_carre:
        return a.points - b.points
    if len(a.cards) != len(b.cards):
        return len(a.cards) - len(b.cards)
    top_a = max(c.rank for c in a.cards)
    top_b = max(c.rank for c in b.cards)
    if top_a != top_b:
        return int(top_a) - int(top_b)
    a_trump = trump is not None and a.cards[0].suit == trump
    b_trump = trump is not None and b.cards[0].suit == trump
    if a_trump != b_trump:
        return 1 if a_trump else -1
    return 0


def best_declaration(decls: Sequence[Declaration], trump: Suit | None) -> Declaration | None:
    best: Declaration | None = None
    for d in decls:
        if best is None or compare_declarations(d, best, trump) > 0:
            best = d
    return best


def declaration_winner(
    team_a: Sequence[Declaration],
    team_b: Sequence[Declaration],
    trump: Suit | None,
) -> int | None:
    """0 (team A), 1 (team B) or None (nobody declared, or a true tie)."""
    best_a = best_declaration(team_a, trump)
    best_b = best_declaration(team_b, trump)
    if best_a is None and best_b is None:
        return None
    if best_a is None:
        return 1
    if best_b is None:
        return 0
    cmp = compare_declarations(best_a, best_b, trump)
    if cmp > 0:
        return 0
    if cmp < 0:
        return 1
    return None


def declaration_total(decls: Sequence[Declaration]) -> int:
    return sum(d.points for d in decls)


def update_belote(
    belote: BeloteState | None,
    seat: int,
    card: Card,
    hand_after: Sequence[Card],
    trump: Suit,
) -> tuple[BeloteState | None, str | None]:
    """
    Advance the belote state after ``seat`` played ``card``.
    Returns (new state, announcement or None).
    """
    if card.suit != trump or card.rank not in (Rank.KING, Rank.QUEEN):
        return belote, None
    is_king = card.rank == Rank.KING
    other = Rank.QUEEN if is_king else Rank.KING
    if belote is None:
        if any(c.suit == trump and c.rank == other for c in hand_after):
            return BeloteState(seat=seat, king_played=is_king, queen_played=not is_king), "belote"
        return None, None
    if belote.seat != seat or belote.complete:
        return belote, None
    new = replace(
        belote,
        king_played=belote.king_played or is_king,
        queen_played=belote.queen_played or not is_king,
        announcement="rebelote",
    )
    return new, "rebelote"


__all__ = [
    "DeclarationKind",
    "SEQUENCE_POINTS",
    "CARRE_POINTS",
    "BELOTE_POINTS",
    "Declaration",
    "DeclarationTracking",
    "BeloteState",
    "find_sequences",
    "find_four_of_a_kind",
    "find_all_declarations",
    "check_belote",
    "compare_declarations",
    "best_declaration",
    "declaration_winner",
    "declaration_total",
    "update_belote",
]
