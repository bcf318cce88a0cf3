"""
Heuristic strategy: hand evaluation, bid / pass, double / redouble, declare,
lead and follow card selection, and adaptive player profiles.

Personalities are a closed enum; ``personality_params`` maps each one to the
thresholds and multipliers the decision functions consume.
"""
from __future__ import annotations

import math
from dataclasses import dataclass, replace
from enum import Enum
from typing import NamedTuple, Sequence

from .bidding import (
    CAPOT_BID,
    MAX_NORMAL_BID,
    MIN_BID,
    Contract,
    is_valid_bid,
    minimum_bid,
)
from .deal import team_of
from .deck import (
    CARD_POINTS_TOTAL,
    LAST_TRICK_BONUS,
    Card,
    Rank,
    Suit,
    card_strength,
    card_value,
    compare_cards,
)
from .declarations import Declaration, check_belote, declaration_total, find_all_declarations
from .infoset import InformationSet
from .play import legal_plays, trick_points, trick_winner, winning_card
from .scoring import TRICKS_PER_ROUND


class Personality(str, Enum):
    CONSERVATIVE = "conservative"
    AGGRESSIVE = "aggressive"
    BALANCED = "balanced"
    ADAPTIVE = "adaptive"


@dataclass(frozen=True)
class PersonalityParams:
    """Behaviour parameters for one personality."""

    min_confidence: float
    bid_offset: int
    confidence_factor: float
    declare_min_points: int
    double_strength: float
    double_min_value: int
    redouble_strength: float
    uses_profile: bool = False


_PARAMS = {
    Personality.CONSERVATIVE: PersonalityParams(0.6, -20, 0.8, 50, 0.8, 120, 0.9),
    Personality.AGGRESSIVE: PersonalityParams(0.4, 20, 1.2, 0, 0.6, 100, 0.7),
    Personality.BALANCED: PersonalityParams(0.6, 0, 1.0, 0, 0.7, 110, 0.8),
    Personality.ADAPTIVE: PersonalityParams(0.6, 0, 1.0, 0, 0.7, 110, 0.8, uses_profile=True),
}


def personality_params(personality: Personality) -> PersonalityParams:
    return _PARAMS[personality]


def _js_round(x: float) -> int:
    # half-up, not banker's rounding
    return int(math.floor(x + 0.5))


# ---------------------------------------------------------------------------
# Profiles
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class PlayerProfile:
    """Learned tendencies of a seat, updated after bids and rounds."""

    bid_aggressiveness: float = 0.5
    trump_preferences: tuple[float, float, float, float] = (0.25, 0.25, 0.25, 0.25)
    average_bid_value: float = 100.0
    risk_tolerance: float = 0.5
    declaration_frequency: float = 0.3
    play_style: str = "balanced"
    games_played: int = 0


PROFILE_ALPHA = 0.3


def record_bid(profile: PlayerProfile, value: int) -> PlayerProfile:
    """Exponential moving average of aggressiveness and bid value."""
    aggressiveness = (value - 100) / 150
    aggr = PROFILE_ALPHA * aggressiveness + (1 - PROFILE_ALPHA) * profile.bid_aggressiveness
    avg = (1 - PROFILE_ALPHA) * profile.average_bid_value + PROFILE_ALPHA * value
    return replace(profile, bid_aggressiveness=min(1.0, max(0.0, aggr)), average_bid_value=avg)


def record_round(profile: PlayerProfile, contract: Contract | None, seat: int) -> PlayerProfile:
    """Count a finished round; reinforce the trump this seat chose as bidder."""
    games = profile.games_played + 1
    prefs = list(profile.trump_preferences)
    if contract is not None and contract.bidder == seat:
        t = int(contract.trump)
        prefs[t] = (prefs[t] * games + 1) / (games + 1)
        total = sum(prefs)
        prefs = [p / total for p in prefs]
    if profile.bid_aggressiveness > 0.6:
        style = "aggressive"
    elif profile.bid_aggressiveness < 0.4:
        style = "conservative"
    else:
        style = "balanced"
    return replace(
        profile,
        games_played=games,
        trump_preferences=(prefs[0], prefs[1], prefs[2], prefs[3]),
        play_style=style,
    )


# ---------------------------------------------------------------------------
# Bidding
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class HandEvaluation:
    suit_strengths: dict[Suit, int]
    best_suit: Suit
    best_suit_score: int
    total_high_cards: int
    declaration_bonus: int
    suggested_bid: int
    confidence: float


@dataclass(frozen=True)
class BidContext:
    """Match situation from the bidder's side."""

    team_score: int = 0
    opponent_score: int = 0
    target_score: int = 151


@dataclass(frozen=True)
class BidDecision:
    """value None is a pass."""

    value: int | None = None
    trump: Suit | None = None

    @property
    def is_pass(self) -> bool:
        return self.value is None


PASS = BidDecision()


def suit_score(hand: Sequence[Card], suit: Suit) -> int:
    """Strength of ``suit`` as a candidate trump."""
    cards = [c for c in hand if c.suit == suit]
    score = 0
    for c in cards:
        score += card_value(c, True)
        if c.rank == Rank.JACK:
            score += 10
        elif c.rank == Rank.NINE:
            score += 5
    if len(cards) >= 4:
        score += (len(cards) - 3) * 5
    if len(cards) >= 6:
        score += 10
    if check_belote(cards, suit):
        score += 20
    return score


def evaluate_hand_for_bidding(
    hand: Sequence[Card],
    personality: Personality = Personality.BALANCED,
    profile: PlayerProfile | None = None,
) -> HandEvaluation:
    strengths = {s: suit_score(hand, s) for s in Suit}
    high = sum(11 if c.rank == Rank.ACE else 10 for c in hand if c.rank in (Rank.ACE, Rank.TEN))

    best_suit, best_score = Suit.HEARTS, 0
    for s, score in strengths.items():
        if score > best_score:
            best_suit, best_score = s, score

    decl_bonus = declaration_total(find_all_declarations(hand))
    params = personality_params(personality)

    base = int(math.floor((best_score + high / 2 + decl_bonus) / 10)) * 10
    confidence = best_score / 60 * params.confidence_factor
    base += params.bid_offset
    if params.uses_profile and profile is not None:
        base = _js_round(base * (1 + profile.bid_aggressiveness - 0.5))
    base = max(MIN_BID, min(MAX_NORMAL_BID, _js_round(base / 10) * 10))

    if best_score > 80 and decl_bonus > 100:
        base = CAPOT_BID
        confidence = 0.9

    return HandEvaluation(
        suit_strengths=strengths,
        best_suit=best_suit,
        best_suit_score=best_score,
        total_high_cards=high,
        declaration_bonus=decl_bonus,
        suggested_bid=base,
        confidence=min(1.0, confidence),
    )


def context_factor(context: BidContext | None) -> float:
    """Behind: bolder. Ahead or near the target: more careful."""
    if context is None:
        return 1.0
    diff = context.team_score - context.opponent_score
    close = context.team_score > context.target_score * 0.8
    if diff < -50 and not close:
        return 1.2
    if diff > 50 or close:
        return 0.8
    return 1.0


def decide_bid(
    hand: Sequence[Card],
    current: Contract | None,
    personality: Personality = Personality.BALANCED,
    context: BidContext | None = None,
    profile: PlayerProfile | None = None,
) -> BidDecision:
    """Bid or pass. Never returns a bid that ``is_valid_bid`` rejects."""
    if current is not None and current.doubled:
        return PASS
    ev = evaluate_hand_for_bidding(hand, personality, profile)
    confidence = ev.confidence * context_factor(context)
    params = personality_params(personality)
    if confidence < params.min_confidence:
        return PASS

    if current is None:
        return BidDecision(ev.suggested_bid, ev.best_suit)

    required = minimum_bid(current)
    if not is_valid_bid(required, current):
        return PASS
    if ev.suggested_bid >= required:
        return BidDecision(required, ev.best_suit)

    if personality == Personality.AGGRESSIVE and confidence > 0.7:
        for s, score in ev.suit_strengths.items():
            if s != ev.best_suit and score > 40:
                return BidDecision(required, s)
    return PASS


def defensive_strength(hand: Sequence[Card], trump: Suit) -> float:
    strength = 0.0
    trumps = 0
    high = 0
    for c in hand:
        if c.suit == trump:
            trumps += 1
            if c.rank in (Rank.JACK, Rank.NINE):
                strength += 0.2
        elif c.rank in (Rank.ACE, Rank.TEN):
            high += 1
            strength += 0.1
    if trumps <= 2:
        strength += 0.2
    strength += high * 0.1
    return min(1.0, strength)


def offensive_strength(hand: Sequence[Card], trump: Suit) -> float:
    trump_cards = [c for c in hand if c.suit == trump]
    strength = 0.0
    if len(trump_cards) >= 4:
        strength += 0.3
    if len(trump_cards) >= 5:
        strength += 0.2
    bonus = {Rank.JACK: 0.3, Rank.NINE: 0.2, Rank.ACE: 0.15}
    strength += sum(bonus.get(c.rank, 0.0) for c in trump_cards)
    return min(1.0, strength)


def should_double(hand: Sequence[Card], contract: Contract, personality: Personality) -> bool:
    p = personality_params(personality)
    return defensive_strength(hand, contract.trump) > p.double_strength and contract.value >= p.double_min_value


def should_redouble(hand: Sequence[Card], contract: Contract, personality: Personality) -> bool:
    p = personality_params(personality)
    return offensive_strength(hand, contract.trump) > p.redouble_strength


def should_declare(personality: Personality, declarations: Sequence[Declaration]) -> bool:
    if not declarations:
        return False
    return declaration_total(declarations) >= personality_params(personality).declare_min_points


# ---------------------------------------------------------------------------
# Card play
# ---------------------------------------------------------------------------

CLOSE_TO_CONTRACT = 30
FAR_FROM_CONTRACT = 50
DEFENCE_ALARM = 20
VALUABLE_TRICK = 10


class ContractSituation(NamedTuple):
    """
    Contract arithmetic from one seat's point of view.
    - points_needed: contract value minus the contracting team's card points
    - points_remaining: card points not yet in a trick, plus the last-trick bonus
    - trick_value: card points already in the current trick
    - must_win: losing this trick would sink our contract (contract team), or
      the trick is valuable and the contract is still open (defenders)
    """

    is_contract_team: bool
    points_needed: int
    points_remaining: int
    trick_value: int
    must_win: bool


def contract_situation(info: InformationSet) -> ContractSituation:
    trump = info.trump
    trick_value = trick_points(info.current_trick, trump) if info.current_trick else 0
    played = info.round_points[0] + info.round_points[1] + trick_value
    remaining = CARD_POINTS_TOTAL - played + LAST_TRICK_BONUS
    needed = info.points_needed()
    if info.is_contract_team:
        # losing the last trick also loses its bonus
        if_lost = remaining - (LAST_TRICK_BONUS if info.trick_number == TRICKS_PER_ROUND else 0)
        must_win = info.round_points[info.team] + if_lost < info.contract.value
    else:
        must_win = trick_value >= VALUABLE_TRICK and needed <= remaining
    return ContractSituation(info.is_contract_team, needed, remaining, trick_value, must_win)


def _low_key(card: Card, trump: Suit) -> tuple[int, int, int]:
    is_t = card.suit == trump
    return (int(is_t), card_value(card, is_t), card_strength(card, is_t))


def _strength_key(card: Card, trump: Suit) -> tuple[int, int]:
    is_t = card.suit == trump
    return (int(is_t), card_strength(card, is_t))


def lowest_card(cards: Sequence[Card], trump: Suit) -> Card:
    """Cheapest card: non-trump before trump, then by points, then strength."""
    return min(cards, key=lambda c: _low_key(c, trump))


def _choose_lead(info: InformationSet, legal: list[Card]) -> Card:
    trump = info.trump
    situation = contract_situation(info)
    if situation.is_contract_team:
        trumps = [c for c in legal if c.suit == trump]
        strong = [c for c in trumps if c.rank in (Rank.JACK, Rank.NINE, Rank.ACE)]
        outstanding = any(c.suit == trump for c in info.unseen_cards())
        if strong and (outstanding or situation.points_needed <= CLOSE_TO_CONTRACT):
            return max(trumps, key=lambda c: card_strength(c, True))
        if trumps and situation.points_needed > FAR_FROM_CONTRACT:
            # probe with the smallest trump
            return min(trumps, key=lambda c: card_strength(c, True))
    elif situation.points_needed <= DEFENCE_ALARM:
        high = [
            c for c in legal
            if c.rank in (Rank.ACE, Rank.TEN)
            or (c.suit == trump and c.rank in (Rank.JACK, Rank.NINE))
        ]
        if high:
            return max(high, key=lambda c: card_value(c, c.suit == trump))

    aces = [c for c in legal if c.rank == Rank.ACE and c.suit != trump]
    if aces:
        return aces[0]

    counts: dict[Suit, int] = {}
    for c in info.hand:
        if c.suit != trump:
            counts[c.suit] = counts.get(c.suit, 0) + 1
    longest: Suit | None = None
    for s, n in counts.items():
        if longest is None or n > counts[longest]:
            longest = s
    if longest is not None:
        in_suit = [c for c in legal if c.suit == longest]
        if in_suit:
            return min(in_suit, key=lambda c: card_strength(c, False))

    return lowest_card(legal, trump)


def _choose_follow(info: InformationSet, legal: list[Card]) -> Card:
    trump = info.trump
    trick = info.current_trick
    situation = contract_situation(info)
    leader = trick_winner(trick, trump)
    if team_of(leader) == info.team:
        # partner holds the trick
        if len(trick) == 3 and situation.is_contract_team and situation.points_needed > 0:
            for c in legal:
                value = card_value(c, c.suit == trump)
                if value >= VALUABLE_TRICK and situation.trick_value + value <= situation.points_needed:
                    return c
        return lowest_card(legal, trump)

    best = winning_card(trick, trump)
    led = trick[0][1].suit
    winners = [c for c in legal if compare_cards(c, best, trump, led) > 0]
    if winners:
        if situation.must_win:
            return max(winners, key=lambda c: _strength_key(c, trump))
        return min(winners, key=lambda c: _strength_key(c, trump))
    return lowest_card(legal, trump)


def choose_heuristic_card(info: InformationSet, legal: Sequence[Card] | None = None) -> Card:
    """Lead / follow heuristic over the legal moves of ``info``."""
    if legal is None:
        legal = legal_plays(info.hand, info.current_trick, info.trump)
    legal = list(legal)
    if not legal:
        raise ValueError("No legal card to play")
    if len(legal) == 1:
        return legal[0]
    if not info.current_trick:
        return _choose_lead(info, legal)
    return _choose_follow(info, legal)


__all__ = [
    "Personality",
    "PersonalityParams",
    "personality_params",
    "PlayerProfile",
    "record_bid",
    "record_round",
    "HandEvaluation",
    "BidContext",
    "BidDecision",
    "PASS",
    "suit_score",
    "evaluate_hand_for_bidding",
    "context_factor",
    "decide_bid",
    "defensive_strength",
    "offensive_strength",
    "should_double",
    "should_redouble",
    "should_declare",
    "ContractSituation",
    "contract_situation",
    "lowest_card",
    "choose_heuristic_card",
]
