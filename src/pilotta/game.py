"""
Round and match orchestration: deal → bid → declare → play → score.

The game state is a frozen value. Every operation takes a state and returns a
new one, or raises a ``RuleViolation`` and leaves the caller's state untouched.
``try_apply`` turns the raise into a returned rejection. Seat-indexed data
(hands, declarations, declare/show tracking, profiles) are 4-tuples.
"""
from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Callable, NamedTuple, Sequence

from .agents import CardPolicy, PlayPolicy, choose_ai_bid, choose_ai_card, policy_for
from .bidding import (
    CAPOT_BID,
    BidEntry,
    Contract,
    can_double,
    can_redouble,
    doubled,
    is_valid_bid,
    redoubled,
)
from .deal import (
    NUM_SEATS,
    deal_4p,
    first_to_bid,
    next_dealer,
    next_seat,
    seats_of_team,
    team_of,
)
from .deck import LAST_TRICK_BONUS, ROUND_POINTS_TOTAL, Card, Suit
from .declarations import (
    BELOTE_POINTS,
    BeloteState,
    Declaration,
    DeclarationTracking,
    check_belote,
    declaration_total,
    declaration_winner,
    find_all_declarations,
    update_belote,
)
from .errors import (
    IllegalMove,
    InvalidBid,
    InvalidDoubleRedouble,
    MalformedState,
    OutOfTurn,
    RuleViolation,
)
from .infoset import InformationSet
from .mcts import MCTSConfig
from .play import CompletedTrick, legal_plays, seal_trick
from .scoring import TRICKS_PER_ROUND, RoundScore, round_score
from .strategy import (
    BidContext,
    Personality,
    PlayerProfile,
    record_bid,
    record_round,
    should_declare,
    should_double,
    should_redouble,
)

logger = logging.getLogger(__name__)

EARLY_CHECK_MIN_TRICKS = 4
MAX_TRICK_POINTS = 33


class GamePhase(str, Enum):
    DEALING = "dealing"
    BIDDING = "bidding"
    DECLARING = "declaring"
    PLAYING = "playing"
    SCORING = "scoring"
    GAME_OVER = "game_over"


class Controller(str, Enum):
    HUMAN = "human"
    AI = "ai"


@dataclass(frozen=True)
class SeatConfig:
    controller: Controller = Controller.AI
    personality: Personality = Personality.BALANCED
    policy: PlayPolicy = PlayPolicy.HEURISTIC
    name: str = ""


DEFAULT_SEATS = (
    SeatConfig(Controller.HUMAN, Personality.BALANCED, name="You"),
    SeatConfig(Controller.AI, Personality.AGGRESSIVE, name="West"),
    SeatConfig(Controller.AI, Personality.CONSERVATIVE, name="Partner"),
    SeatConfig(Controller.AI, Personality.BALANCED, name="East"),
)


@dataclass
class MatchConfig:
    """Match settings; max_rounds None plays until the target score."""

    target_score: int = 151
    dealer: int = 0
    max_rounds: int | None = None
    mcts: MCTSConfig = field(default_factory=MCTSConfig)


_EMPTY_HANDS: tuple[tuple[Card, ...], ...] = ((), (), (), ())
_NO_DECLARATIONS: tuple[tuple[Declaration, ...], ...] = ((), (), (), ())
_FRESH_TRACKING = (DeclarationTracking(),) * NUM_SEATS


@dataclass(frozen=True)
class GameState:
    seats: tuple[SeatConfig, ...] = DEFAULT_SEATS
    phase: GamePhase = GamePhase.DEALING
    round_number: int = 1
    target_score: int = 151
    dealer: int = 0
    current_seat: int = 1
    hands: tuple[tuple[Card, ...], ...] = _EMPTY_HANDS
    contract: Contract | None = None
    bidding_history: tuple[BidEntry, ...] = ()
    consecutive_passes: int = 0
    current_trick: tuple[tuple[int, Card], ...] = ()
    completed_tricks: tuple[CompletedTrick, ...] = ()
    round_points: tuple[int, int] = (0, 0)
    declarations: tuple[tuple[Declaration, ...], ...] = _NO_DECLARATIONS
    tracking: tuple[DeclarationTracking, ...] = _FRESH_TRACKING
    belote: BeloteState | None = None
    announcement: str | None = None
    early_terminated: bool = False
    remainder_team: int | None = None
    scores: tuple[int, int] = (0, 0)
    round_history: tuple[RoundScore, ...] = ()
    profiles: tuple[PlayerProfile, ...] = (PlayerProfile(),) * NUM_SEATS

    @property
    def trump(self) -> Suit | None:
        return self.contract.trump if self.contract is not None else None

    @property
    def trick_number(self) -> int:
        """1-based number of the trick in progress."""
        return len(self.completed_tricks) + 1

    def tricks_won(self) -> tuple[int, int]:
        won = [0, 0]
        for t in self.completed_tricks:
            won[team_of(t.winner)] += 1
        return (won[0], won[1])

    def legal_cards(self, seat: int | None = None) -> list[Card]:
        if self.phase != GamePhase.PLAYING or self.contract is None:
            return []
        seat = self.current_seat if seat is None else seat
        return legal_plays(self.hands[seat], self.current_trick, self.contract.trump)

    def all_cards(self) -> list[Card]:
        """Hands + current trick + completed tricks (32 cards during a round)."""
        cards = [c for h in self.hands for c in h]
        cards.extend(c for _, c in self.current_trick)
        cards.extend(c for t in self.completed_tricks for _, c in t.cards)
        return cards


def _set(seq: tuple, idx: int, value) -> tuple:
    items = list(seq)
    items[idx] = value
    return tuple(items)


def _reset_round(state: GameState, **changes) -> GameState:
    fields = dict(
        hands=_EMPTY_HANDS,
        contract=None,
        bidding_history=(),
        consecutive_passes=0,
        current_trick=(),
        completed_tricks=(),
        round_points=(0, 0),
        declarations=_NO_DECLARATIONS,
        tracking=_FRESH_TRACKING,
        belote=None,
        announcement=None,
        early_terminated=False,
        remainder_team=None,
    )
    fields.update(changes)
    return replace(state, **fields)


def try_apply(
    operation: Callable[..., GameState],
    state: GameState,
    *args,
    **kwargs,
) -> tuple[GameState, RuleViolation | None]:
    """
    Run ``operation(state, *args)``; on a rule violation return the unchanged
    state together with the rejection instead of raising.
    """
    try:
        return operation(state, *args, **kwargs), None
    except RuleViolation as exc:
        logger.debug("Rejected %s: %s", getattr(operation, "__name__", operation), exc)
        return state, exc


# ---------------------------------------------------------------------------
# Dealing
# ---------------------------------------------------------------------------


def new_game(
    seats: Sequence[SeatConfig] | None = None,
    config: MatchConfig | None = None,
) -> GameState:
    """Fresh match in the Dealing phase."""
    if config is None:
        config = MatchConfig()
    seats = tuple(seats) if seats is not None else DEFAULT_SEATS
    if len(seats) != NUM_SEATS:
        raise ValueError(f"Need {NUM_SEATS} seats, got {len(seats)}")
    return GameState(
        seats=seats,
        target_score=config.target_score,
        dealer=config.dealer,
        current_seat=first_to_bid(config.dealer),
    )


def deal_round(
    state: GameState,
    rng: random.Random | None = None,
    deck: list[Card] | None = None,
) -> GameState:
    """Dealing → Bidding: shuffle, deal 3-2-3, reset per-round data."""
    if state.phase != GamePhase.DEALING:
        raise RuleViolation(f"Cannot deal during {state.phase.value}")
    deal = deal_4p(deck=deck, rng=rng, dealer=state.dealer)
    logger.debug("Round %d dealt by seat %d", state.round_number, state.dealer)
    return _reset_round(
        state,
        phase=GamePhase.BIDDING,
        hands=tuple(tuple(h) for h in deal.hands),
        current_seat=first_to_bid(state.dealer),
    )


def new_round(
    seats: Sequence[SeatConfig] | None = None,
    rng: random.Random | None = None,
    config: MatchConfig | None = None,
) -> GameState:
    """A freshly dealt state, ready for bidding."""
    return deal_round(new_game(seats, config), rng)


# ---------------------------------------------------------------------------
# Bidding
# ---------------------------------------------------------------------------


def apply_bid(
    state: GameState,
    seat: int,
    value: int | None,
    trump: Suit | None = None,
) -> GameState:
    """
    Bid ``value`` in ``trump`` or pass (value None).
    Four passes with no contract: redeal with the next dealer.
    Three passes after a contract: bidding closes, Declaring.
    """
    if state.phase != GamePhase.BIDDING:
        raise OutOfTurn(f"No bidding during {state.phase.value}")
    if seat != state.current_seat:
        raise OutOfTurn(f"Seat {seat} bid out of turn (seat {state.current_seat} to speak)")

    if value is None:
        passes = state.consecutive_passes + 1
        history = state.bidding_history + (BidEntry(seat, action="pass"),)
        if state.contract is None and passes >= NUM_SEATS:
            logger.debug("Everyone passed; redeal")
            return _reset_round(
                state,
                phase=GamePhase.DEALING,
                dealer=next_dealer(state.dealer),
                current_seat=first_to_bid(next_dealer(state.dealer)),
            )
        if state.contract is not None and passes >= NUM_SEATS - 1:
            logger.debug("Bidding closed: %s", state.contract)
            return replace(
                state,
                phase=GamePhase.DECLARING,
                bidding_history=history,
                consecutive_passes=passes,
                current_seat=state.contract.bidder,
            )
        return replace(
            state,
            bidding_history=history,
            consecutive_passes=passes,
            current_seat=next_seat(seat),
        )

    if trump is None:
        raise InvalidBid("A bid needs a trump suit")
    try:
        trump = Suit(trump)
    except ValueError as exc:
        raise InvalidBid(f"Unknown trump suit {trump!r}") from exc
    if state.contract is not None and state.contract.doubled:
        raise InvalidBid("The contract is doubled; only passes remain")
    if not is_valid_bid(value, state.contract):
        raise InvalidBid(f"Invalid bid {value} over {state.contract}")

    contract = Contract(bidder=seat, value=value, trump=trump)
    return replace(
        state,
        contract=contract,
        bidding_history=state.bidding_history + (BidEntry(seat, value, contract.trump),),
        consecutive_passes=0,
        current_seat=next_seat(seat),
        profiles=_set(state.profiles, seat, record_bid(state.profiles[seat], value)),
    )


def apply_double(state: GameState, seat: int) -> GameState:
    """Defending team doubles the contract. Does not consume a turn."""
    if state.phase != GamePhase.BIDDING or not can_double(state.contract, seat):
        raise InvalidDoubleRedouble(f"Seat {seat} cannot double {state.contract}")
    return replace(
        state,
        contract=doubled(state.contract),
        bidding_history=state.bidding_history + (BidEntry(seat, action="double"),),
        consecutive_passes=0,
    )


def apply_redouble(state: GameState, seat: int) -> GameState:
    """Contracting team redoubles a doubled contract. Does not consume a turn."""
    if state.phase != GamePhase.BIDDING or not can_redouble(state.contract, seat):
        raise InvalidDoubleRedouble(f"Seat {seat} cannot redouble {state.contract}")
    return replace(
        state,
        contract=redoubled(state.contract),
        bidding_history=state.bidding_history + (BidEntry(seat, action="redouble"),),
        consecutive_passes=0,
    )


# ---------------------------------------------------------------------------
# Declarations
# ---------------------------------------------------------------------------


def start_play(state: GameState) -> GameState:
    """Declaring → Playing: find each hand's declarations; the bidder leads."""
    if state.phase != GamePhase.DECLARING or state.contract is None:
        raise RuleViolation(f"Cannot start play during {state.phase.value}")
    decls = tuple(tuple(find_all_declarations(state.hands[s], s)) for s in range(NUM_SEATS))
    return replace(
        state,
        phase=GamePhase.PLAYING,
        declarations=decls,
        tracking=_FRESH_TRACKING,
        current_seat=state.contract.bidder,
    )


def _require_turn(state: GameState, seat: int) -> None:
    if state.phase != GamePhase.PLAYING:
        raise OutOfTurn(f"No play during {state.phase.value}")
    if seat != state.current_seat:
        raise OutOfTurn(f"Seat {seat} acted out of turn (seat {state.current_seat} to play)")


def apply_declare(state: GameState, seat: int) -> GameState:
    """Announce the seat's declarations during the first trick."""
    _require_turn(state, seat)
    track = state.tracking[seat]
    if state.trick_number != 1:
        raise RuleViolation("Declarations are announced during the first trick")
    if not state.declarations[seat] or track.has_declared:
        raise RuleViolation(f"Seat {seat} has nothing to declare")
    return replace(
        state,
        tracking=_set(state.tracking, seat, replace(track, has_declared=True, can_show=True)),
    )


def apply_show(state: GameState, seat: int) -> GameState:
    """Show declared cards during the second (or, by fallback, third) trick."""
    _require_turn(state, seat)
    track = state.tracking[seat]
    if state.trick_number not in (2, 3):
        raise RuleViolation("Declarations are shown during the second or third trick")
    if not track.can_show or track.has_shown or not state.declarations[seat]:
        raise RuleViolation(f"Seat {seat} may not show")
    return replace(state, tracking=_set(state.tracking, seat, replace(track, has_shown=True)))


def _declared(state: GameState, team: int, flag: str) -> list[Declaration]:
    out: list[Declaration] = []
    for s in seats_of_team(team):
        if getattr(state.tracking[s], flag):
            out.extend(state.declarations[s])
    return out


def _resolve_show_rights(state: GameState) -> tuple[DeclarationTracking, ...]:
    """Start of trick 2: with both teams declared, only the better team may show."""
    a = _declared(state, 0, "has_declared")
    b = _declared(state, 1, "has_declared")
    if not a or not b:
        return state.tracking
    winner = declaration_winner(a, b, state.trump)
    if winner is None:
        return state.tracking
    tracking = state.tracking
    for s in seats_of_team(1 - winner):
        tracking = _set(tracking, s, replace(tracking[s], can_show=False))
    return tracking


def _fallback_show_rights(state: GameState) -> tuple[DeclarationTracking, ...]:
    """Start of trick 3: if the entitled team did not show, the other team may."""
    if any(t.has_shown for t in state.tracking):
        return state.tracking
    entitled = {team_of(s) for s in range(NUM_SEATS) if state.tracking[s].can_show}
    if len(entitled) != 1:
        return state.tracking
    team = entitled.pop()
    tracking = state.tracking
    for s in seats_of_team(team):
        tracking = _set(tracking, s, replace(tracking[s], can_show=False))
    for s in seats_of_team(1 - team):
        if state.declarations[s]:
            tracking = _set(tracking, s, replace(tracking[s], can_show=True))
    logger.debug("Showing rights pass to team %d", 1 - team)
    return tracking


def scored_declarations(state: GameState) -> tuple[int, int]:
    """Shown declarations; only the team with the better shown set scores."""
    a = _declared(state, 0, "has_shown")
    b = _declared(state, 1, "has_shown")
    winner = declaration_winner(a, b, state.trump)
    if winner is None:
        return (0, 0)
    pts = declaration_total(a if winner == 0 else b)
    return (pts, 0) if winner == 0 else (0, pts)


def belote_points(state: GameState) -> tuple[int, int]:
    if state.belote is None or not state.belote.complete:
        return (0, 0)
    return (BELOTE_POINTS, 0) if state.belote.team == 0 else (0, BELOTE_POINTS)


# ---------------------------------------------------------------------------
# Playing
# ---------------------------------------------------------------------------


def _belote_reach(state: GameState, team: int) -> int:
    """Belote points ``team`` has announced or can still announce."""
    if state.belote is not None:
        return BELOTE_POINTS if state.belote.team == team else 0
    if any(check_belote(state.hands[s], state.trump) for s in seats_of_team(team)):
        return BELOTE_POINTS
    return 0


def early_termination(state: GameState) -> tuple[int, int] | None:
    """
    Final card points (last-trick bonus included) if the round is already
    decided, else None.
    Checked once at least 4 tricks are complete and the contracting team has
    won a trick.
    (a) the contract is out of reach even counting every remaining card point,
        the shown declarations and a reachable belote: remaining points go to
        the defenders
    (b) one team holds every point and capot is no longer possible: remaining
        points go to that team
    """
    contract = state.contract
    done = len(state.completed_tricks)
    remaining = TRICKS_PER_ROUND - done
    if contract is None or done < EARLY_CHECK_MIN_TRICKS or remaining <= 0:
        return None
    won = state.tricks_won()
    team = contract.team
    if won[team] == 0:
        return None

    pts = list(state.round_points)
    left = ROUND_POINTS_TOTAL - pts[0] - pts[1]
    best_case = (
        pts[team]
        + remaining * MAX_TRICK_POINTS + LAST_TRICK_BONUS
        + scored_declarations(state)[team]
        + _belote_reach(state, team)
    )
    capot_alive = contract.value >= CAPOT_BID and won[1 - team] == 0
    if best_case < contract.value and not capot_alive:
        pts[1 - team] += left
        return (pts[0], pts[1])
    if won[1 - team] > 0:
        for t in (0, 1):
            if pts[1 - t] == 0 and pts[t] > 0:
                pts[t] += left
                return (pts[0], pts[1])
    return None


def apply_play(state: GameState, seat: int, card: Card) -> GameState:
    """Play ``card``; a 4th card seals the trick and may end the round."""
    _require_turn(state, seat)
    contract = state.contract
    if contract is None:
        raise MalformedState("Playing without a contract")
    hand = state.hands[seat]
    held = next((c for c in hand if c == card), None)
    if held is None:
        raise IllegalMove(f"Seat {seat} does not hold {card}")
    if held not in legal_plays(hand, state.current_trick, contract.trump):
        raise IllegalMove(f"{card} is not a legal play for seat {seat}")

    new_hand = tuple(c for c in hand if c != held)
    belote, announcement = update_belote(state.belote, seat, held, new_hand, contract.trump)
    trick = state.current_trick + ((seat, held),)
    state = replace(
        state,
        hands=_set(state.hands, seat, new_hand),
        belote=belote,
        announcement=announcement,
    )
    if len(trick) < NUM_SEATS:
        return replace(state, current_trick=trick, current_seat=next_seat(seat))

    sealed = seal_trick(trick, contract.trump)
    pts = list(state.round_points)
    pts[team_of(sealed.winner)] += sealed.points
    state = replace(
        state,
        current_trick=(),
        completed_tricks=state.completed_tricks + (sealed,),
        round_points=(pts[0], pts[1]),
        current_seat=sealed.winner,
    )
    logger.debug("Trick %d to seat %d for %d", len(state.completed_tricks), sealed.winner, sealed.points)

    done = len(state.completed_tricks)
    if done == TRICKS_PER_ROUND:
        return replace(state, phase=GamePhase.SCORING)
    if done == 1:
        state = replace(state, tracking=_resolve_show_rights(state))
    elif done == 2:
        state = replace(state, tracking=_fallback_show_rights(state))

    final = early_termination(state)
    if final is not None:
        logger.debug("Round decided after %d tricks; points %s", done, final)
        # the remainder carries the last-trick bonus; scoring credits it separately
        gainer = 0 if final[0] > pts[0] else 1
        card_pts = list(final)
        card_pts[gainer] -= LAST_TRICK_BONUS
        return replace(
            state,
            phase=GamePhase.SCORING,
            round_points=(card_pts[0], card_pts[1]),
            early_terminated=True,
            remainder_team=gainer,
        )
    return state


# ---------------------------------------------------------------------------
# Scoring
# ---------------------------------------------------------------------------


def compute_round_score(state: GameState) -> RoundScore:
    if state.phase != GamePhase.SCORING:
        raise MalformedState(f"Cannot score during {state.phase.value}")
    if state.contract is None:
        raise MalformedState("Scoring without a contract")
    if len(state.completed_tricks) != TRICKS_PER_ROUND and not state.early_terminated:
        raise MalformedState(f"Round reached scoring with {len(state.completed_tricks)} tricks")
    if state.early_terminated:
        last_team = state.remainder_team
    else:
        last_team = team_of(state.completed_tricks[-1].winner)
    return round_score(
        state.contract,
        state.round_points,
        declaration_points=scored_declarations(state),
        belote_points=belote_points(state),
        last_trick_team=last_team,
        tricks_won=state.tricks_won(),
        early_terminated=state.early_terminated,
    )


def complete_round(state: GameState, score: RoundScore | None = None) -> GameState:
    """Scoring → Dealing (dealer rotated) or GameOver."""
    if score is None:
        score = compute_round_score(state)
    scores = (state.scores[0] + score.final[0], state.scores[1] + score.final[1])
    profiles = tuple(record_round(p, state.contract, s) for s, p in enumerate(state.profiles))
    history = state.round_history + (score,)
    logger.debug("Round %d scored %s; match %s", state.round_number, score.final, scores)
    if max(scores) >= state.target_score:
        return replace(state, phase=GamePhase.GAME_OVER, scores=scores, round_history=history, profiles=profiles)
    dealer = next_dealer(state.dealer)
    return _reset_round(
        state,
        phase=GamePhase.DEALING,
        scores=scores,
        round_history=history,
        profiles=profiles,
        round_number=state.round_number + 1,
        dealer=dealer,
        current_seat=first_to_bid(dealer),
    )


def winning_team(state: GameState) -> int | None:
    if state.phase != GamePhase.GAME_OVER or state.scores[0] == state.scores[1]:
        return None
    return 0 if state.scores[0] > state.scores[1] else 1


# ---------------------------------------------------------------------------
# Driving
# ---------------------------------------------------------------------------


def advance(state: GameState, rng: random.Random | None = None) -> GameState:
    """Run the automatic transition of the current phase, if there is one."""
    if state.phase == GamePhase.DEALING:
        return deal_round(state, rng)
    if state.phase == GamePhase.DECLARING:
        return start_play(state)
    if state.phase == GamePhase.SCORING:
        return complete_round(state)
    return state


def needs_decision(state: GameState) -> bool:
    return state.phase in (GamePhase.BIDDING, GamePhase.PLAYING)


def information_set(state: GameState, seat: int) -> InformationSet:
    if state.contract is None:
        raise MalformedState("No information set before a contract exists")
    sizes = tuple(len(h) for h in state.hands)
    return InformationSet(
        seat=seat,
        hand=state.hands[seat],
        contract=state.contract,
        current_trick=state.current_trick,
        completed_tricks=state.completed_tricks,
        round_points=state.round_points,
        hand_sizes=(sizes[0], sizes[1], sizes[2], sizes[3]),
        scores=state.scores,
    )


def bid_context(state: GameState, seat: int) -> BidContext:
    team = team_of(seat)
    return BidContext(
        team_score=state.scores[team],
        opponent_score=state.scores[1 - team],
        target_score=state.target_score,
    )


def automated_action(
    state: GameState,
    rng: random.Random | None = None,
    mcts_config: MCTSConfig | None = None,
    policy: CardPolicy | None = None,
) -> GameState:
    """
    One automated decision for the active seat: a bid (after any double or
    redouble it wants), or a card (after any declare / show it wants).
    """
    seat = state.current_seat
    cfg = state.seats[seat]
    if state.phase == GamePhase.BIDDING:
        hand = state.hands[seat]
        if can_double(state.contract, seat) and should_double(hand, state.contract, cfg.personality):
            state = apply_double(state, seat)
        elif can_redouble(state.contract, seat) and should_redouble(hand, state.contract, cfg.personality):
            state = apply_redouble(state, seat)
        decision = choose_ai_bid(hand, state.contract, cfg.personality, bid_context(state, seat), state.profiles[seat])
        return apply_bid(state, seat, decision.value, decision.trump)

    if state.phase == GamePhase.PLAYING:
        track = state.tracking[seat]
        decls = state.declarations[seat]
        if state.trick_number == 1 and not track.has_declared and should_declare(cfg.personality, decls):
            state = apply_declare(state, seat)
        elif state.trick_number in (2, 3) and track.can_show and not track.has_shown and decls:
            state = apply_show(state, seat)
        info = information_set(state, seat)
        if policy is not None:
            card = policy.choose(info, state.legal_cards(seat))
        else:
            card = choose_ai_card(info, cfg.policy, mcts_config, rng)
        return apply_play(state, seat, card)

    raise RuleViolation(f"No decision to make during {state.phase.value}")


class MatchResult(NamedTuple):
    scores: tuple[int, int]
    rounds: list[RoundScore]
    state: GameState


def run_match(
    seats: Sequence[SeatConfig] | None = None,
    config: MatchConfig | None = None,
    rng: random.Random | None = None,
    get_bid: Callable[[GameState, int], tuple[int | None, Suit | None]] | None = None,
    get_play: Callable[[GameState, int], Card] | None = None,
) -> MatchResult:
    """
    Play a match until a team reaches the target (or max_rounds rounds).
    Human seats use get_bid / get_play when given, automated play otherwise.
    Redeals do not count as rounds.
    """
    if config is None:
        config = MatchConfig()
    if rng is None:
        rng = random.Random()
    state = new_game(seats, config)
    policies = [
        policy_for(s.policy, config.mcts, seed=rng.getrandbits(32)) for s in state.seats
    ]

    while state.phase != GamePhase.GAME_OVER:
        if config.max_rounds is not None and len(state.round_history) >= config.max_rounds:
            break
        if not needs_decision(state):
            state = advance(state, rng)
            continue
        seat = state.current_seat
        human = state.seats[seat].controller == Controller.HUMAN
        if state.phase == GamePhase.BIDDING and human and get_bid is not None:
            value, trump = get_bid(state, seat)
            state = apply_bid(state, seat, value, trump)
        elif state.phase == GamePhase.PLAYING and human and get_play is not None:
            state = apply_play(state, seat, get_play(state, seat))
        else:
            state = automated_action(state, rng, config.mcts, policies[seat])

    return MatchResult(scores=state.scores, rounds=list(state.round_history), state=state)


__all__ = [
    "GamePhase",
    "Controller",
    "SeatConfig",
    "DEFAULT_SEATS",
    "MatchConfig",
    "GameState",
    "try_apply",
    "new_game",
    "deal_round",
    "new_round",
    "apply_bid",
    "apply_double",
    "apply_redouble",
    "start_play",
    "apply_declare",
    "apply_show",
    "scored_declarations",
    "belote_points",
    "early_termination",
    "apply_play",
    "compute_round_score",
    "complete_round",
    "winning_team",
    "advance",
    "needs_decision",
    "information_set",
    "bid_context",
    "automated_action",
    "MatchResult",
    "run_match",
]
