import random

import pytest

from pilotta.agents import PlayPolicy
from pilotta.bidding import Contract
from pilotta.deck import Suit, card_from_str, card_index, cards_from_str
from pilotta.declarations import BeloteState, DeclarationTracking, find_all_declarations
from pilotta.errors import IllegalMove, InvalidBid, InvalidDoubleRedouble, MalformedState, OutOfTurn, RuleViolation
from pilotta.game import (
    Controller,
    GamePhase,
    GameState,
    MatchConfig,
    SeatConfig,
    advance,
    apply_bid,
    apply_declare,
    apply_double,
    apply_play,
    apply_redouble,
    apply_show,
    automated_action,
    compute_round_score,
    early_termination,
    new_round,
    run_match,
    scored_declarations,
    start_play,
    try_apply,
    winning_team,
)
from pilotta.mcts import MCTSConfig
from pilotta.play import CompletedTrick

AI_SEATS = tuple(SeatConfig(Controller.AI, name=f"AI {i}") for i in range(4))

# seat 0: quarte in spades + tierce in hearts; seat 3: quinte in clubs
CRAFTED_HANDS = (
    tuple(cards_from_str("7S 8S 9S 10S JH 9H AH 10H")),
    tuple(cards_from_str("QD KD AD 7H 8H 7C 8C JS")),
    tuple(cards_from_str("QS KS AS 7D 8D 9D QH KH")),
    tuple(cards_from_str("10D JD 9C 10C JC QC KC AC")),
)


def _crafted_play_state() -> GameState:
    state = GameState(
        seats=AI_SEATS,
        phase=GamePhase.DECLARING,
        hands=CRAFTED_HANDS,
        contract=Contract(bidder=0, value=80, trump=Suit.HEARTS),
        current_seat=0,
    )
    return start_play(state)


def _play_first_legal(state: GameState) -> GameState:
    return apply_play(state, state.current_seat, state.legal_cards()[0])


def _assert_cards_conserved(state: GameState) -> None:
    assert sorted(card_index(c) for c in state.all_cards()) == list(range(32))


def test_new_round_is_dealt_and_bidding():
    state = new_round(AI_SEATS, random.Random(1))
    assert state.phase == GamePhase.BIDDING
    assert [len(h) for h in state.hands] == [8, 8, 8, 8]
    assert state.current_seat == 1
    _assert_cards_conserved(state)


def test_bid_out_of_turn_is_rejected():
    state = new_round(AI_SEATS, random.Random(1))
    with pytest.raises(OutOfTurn):
        apply_bid(state, 2, 80, Suit.HEARTS)

    same, error = try_apply(apply_bid, state, 2, 80, Suit.HEARTS)
    assert same is state
    assert isinstance(error, OutOfTurn)


def test_invalid_bids_are_rejected():
    state = new_round(AI_SEATS, random.Random(1))
    with pytest.raises(InvalidBid):
        apply_bid(state, 1, 85, Suit.HEARTS)
    with pytest.raises(InvalidBid):
        apply_bid(state, 1, 90)
    state = apply_bid(state, 1, 100, Suit.CLUBS)
    with pytest.raises(InvalidBid):
        apply_bid(state, 2, 100, Suit.SPADES)
    state, error = try_apply(apply_bid, state, 2, 110, Suit.SPADES)
    assert error is None
    assert state.contract == Contract(bidder=2, value=110, trump=Suit.SPADES)


def test_four_passes_redeal_with_next_dealer():
    state = new_round(AI_SEATS, random.Random(2))
    for seat in (1, 2, 3, 0):
        state = apply_bid(state, seat, None)
    assert state.phase == GamePhase.DEALING
    assert state.dealer == 1
    assert state.current_seat == 2
    assert state.hands == ((), (), (), ())

    state = advance(state, random.Random(3))
    assert state.phase == GamePhase.BIDDING
    assert state.current_seat == 2


def test_three_passes_close_bidding_and_bidder_leads():
    state = new_round(AI_SEATS, random.Random(2))
    state = apply_bid(state, 1, 90, Suit.SPADES)
    for seat in (2, 3, 0):
        state = apply_bid(state, seat, None)
    assert state.phase == GamePhase.DECLARING
    assert state.contract == Contract(bidder=1, value=90, trump=Suit.SPADES)

    state = start_play(state)
    assert state.phase == GamePhase.PLAYING
    assert state.current_seat == 1
    assert state.legal_cards() == list(state.hands[1])


def test_double_and_redouble_keep_the_turn():
    state = new_round(AI_SEATS, random.Random(4))
    state = apply_bid(state, 1, 90, Suit.SPADES)

    with pytest.raises(InvalidDoubleRedouble):
        apply_double(state, 3)  # own team
    with pytest.raises(InvalidDoubleRedouble):
        apply_redouble(state, 3)  # not doubled yet

    state = apply_double(state, 2)
    assert state.contract.doubled
    assert state.current_seat == 2
    with pytest.raises(InvalidBid):
        apply_bid(state, 2, 100, Suit.HEARTS)
    with pytest.raises(InvalidDoubleRedouble):
        apply_redouble(state, 2)

    state = apply_redouble(state, 3)
    assert state.contract.redoubled
    assert state.contract.multiplier == 4
    assert state.current_seat == 2
    assert [e.action for e in state.bidding_history] == ["bid", "double", "redouble"]


def test_illegal_plays_are_rejected():
    state = _crafted_play_state()
    state = apply_play(state, 0, card_from_str("7S"))
    with pytest.raises(IllegalMove):
        apply_play(state, 1, card_from_str("QD"))  # must follow spades
    with pytest.raises(IllegalMove):
        apply_play(state, 1, card_from_str("AS"))  # not held
    with pytest.raises(OutOfTurn):
        apply_play(state, 2, card_from_str("QS"))
    state = apply_play(state, 1, card_from_str("JS"))
    assert state.current_seat == 2


def test_scoring_before_round_end_is_malformed():
    state = _crafted_play_state()
    with pytest.raises(MalformedState):
        compute_round_score(state)


def test_declared_and_shown_sets_score():
    state = _crafted_play_state()
    state = apply_declare(state, 0)
    with pytest.raises(RuleViolation):
        apply_show(state, 0)  # showing waits for the second trick
    while not (state.trick_number == 2 and state.current_seat == 0):
        state = _play_first_legal(state)
    assert scored_declarations(state) == (0, 0)
    state = apply_show(state, 0)
    assert scored_declarations(state) == (70, 0)


def test_showing_rights_fall_back_to_other_team():
    state = _crafted_play_state()
    state = apply_declare(state, 0)
    while state.current_seat != 3:
        state = _play_first_legal(state)
    state = apply_declare(state, 3)
    state = _play_first_legal(state)

    # the quinte beats the quarte: only seat 3 may show
    assert state.trick_number == 2
    assert not state.tracking[0].can_show
    assert state.tracking[3].can_show

    while state.trick_number == 2:
        if state.current_seat == 0:
            with pytest.raises(RuleViolation):
                apply_show(state, 0)
        state = _play_first_legal(state)

    # seat 3 never showed, so the right passes to seats 0 and 2
    assert not state.tracking[3].can_show
    assert state.tracking[0].can_show
    while state.current_seat != 0:
        state = _play_first_legal(state)
    state = apply_show(state, 0)
    assert scored_declarations(state) == (70, 0)


def test_belote_announced_on_king_then_queen():
    state = _crafted_play_state()
    # seat 2 holds KH and QH; play out until it runs out of other options
    seen = []
    while state.phase == GamePhase.PLAYING:
        state = _play_first_legal(state)
        if state.announcement:
            seen.append(state.announcement)
    assert seen == ["belote", "rebelote"]
    assert state.belote.seat == 2


def _tricks(*winners: int) -> tuple[CompletedTrick, ...]:
    return tuple(CompletedTrick(cards=(), winner=w, points=0) for w in winners)


def test_early_termination_when_contract_out_of_reach():
    state = GameState(
        phase=GamePhase.PLAYING,
        contract=Contract(bidder=0, value=160, trump=Suit.HEARTS),
        completed_tricks=_tricks(0, 1, 3, 1),
        round_points=(10, 100),
    )
    assert early_termination(state) == (10, 152)


def test_no_early_termination_before_contract_team_wins_a_trick():
    state = GameState(
        phase=GamePhase.PLAYING,
        contract=Contract(bidder=0, value=160, trump=Suit.HEARTS),
        completed_tricks=_tricks(1, 1, 3, 1),
        round_points=(0, 110),
    )
    assert early_termination(state) is None


def test_no_early_termination_before_fourth_trick():
    state = GameState(
        phase=GamePhase.PLAYING,
        contract=Contract(bidder=0, value=160, trump=Suit.HEARTS),
        completed_tricks=_tricks(0, 1, 1),
        round_points=(10, 90),
    )
    assert early_termination(state) is None


def test_early_termination_when_one_team_holds_every_point():
    state = GameState(
        phase=GamePhase.PLAYING,
        contract=Contract(bidder=0, value=80, trump=Suit.HEARTS),
        completed_tricks=_tricks(0, 2, 1, 0),
        round_points=(100, 0),
    )
    assert early_termination(state) == (162, 0)


def test_capot_bid_keeps_playing_while_all_tricks_won():
    state = GameState(
        phase=GamePhase.PLAYING,
        contract=Contract(bidder=0, value=250, trump=Suit.HEARTS),
        completed_tricks=_tricks(0, 2, 0, 2),
        round_points=(100, 0),
    )
    assert early_termination(state) is None


def test_automated_round_conserves_cards_and_scores():
    rng = random.Random(11)
    state = new_round(AI_SEATS, rng)
    steps = 0
    while not state.round_history:
        steps += 1
        assert steps < 500
        if state.phase == GamePhase.PLAYING:
            _assert_cards_conserved(state)
        if state.phase in (GamePhase.BIDDING, GamePhase.PLAYING):
            state = automated_action(state, rng)
        else:
            state = advance(state, rng)
    score = state.round_history[0]
    assert state.scores == score.final
    assert state.phase in (GamePhase.DEALING, GamePhase.GAME_OVER)


def test_run_match_reaches_target():
    result = run_match(AI_SEATS, MatchConfig(target_score=151), random.Random(7))
    assert result.state.phase == GamePhase.GAME_OVER
    assert max(result.scores) >= 151
    assert sum(r.final[0] for r in result.rounds) == result.scores[0]
    assert sum(r.final[1] for r in result.rounds) == result.scores[1]
    if result.scores[0] != result.scores[1]:
        assert winning_team(result.state) in (0, 1)


def test_run_match_respects_max_rounds():
    result = run_match(AI_SEATS, MatchConfig(target_score=10_000, max_rounds=1), random.Random(8))
    assert len(result.rounds) == 1
    assert result.state.phase != GamePhase.GAME_OVER


def test_human_callbacks_drive_human_seat():
    seats = (SeatConfig(Controller.HUMAN, name="You"),) + AI_SEATS[1:]
    asked = {"bid": 0, "play": 0}

    def get_bid(state, seat):
        asked["bid"] += 1
        return None, None

    def get_play(state, seat):
        asked["play"] += 1
        return state.legal_cards(seat)[-1]

    run_match(seats, MatchConfig(max_rounds=1), random.Random(5), get_bid, get_play)
    assert asked["bid"] > 0


def test_mcts_seats_play_a_round():
    seats = tuple(SeatConfig(Controller.AI, policy=PlayPolicy.MCTS) for _ in range(4))
    cfg = MatchConfig(
        max_rounds=1,
        mcts=MCTSConfig(time_budget_ms=10_000, determinizations=2, max_iterations=10),
    )
    result = run_match(seats, cfg, random.Random(6))
    assert len(result.rounds) == 1


def test_unknown_trump_is_an_invalid_bid():
    state = new_round(AI_SEATS, random.Random(1))
    for trump in (9, "hearts"):
        same, error = try_apply(apply_bid, state, 1, 80, trump)
        assert same is state
        assert isinstance(error, InvalidBid)


def _late_round(**changes) -> GameState:
    fields = dict(
        phase=GamePhase.PLAYING,
        contract=Contract(bidder=0, value=160, trump=Suit.HEARTS),
        completed_tricks=_tricks(0, 1, 1, 1, 1),
        round_points=(40, 50),
    )
    fields.update(changes)
    return GameState(**fields)


def test_shown_declarations_keep_contract_alive():
    assert early_termination(_late_round()) == (40, 122)

    quinte = tuple(find_all_declarations(cards_from_str("9C 10C JC QC KC"), 0))
    shown = DeclarationTracking(has_declared=True, has_shown=True, can_show=True)
    state = _late_round(
        declarations=(quinte, (), (), ()),
        tracking=(shown,) + (DeclarationTracking(),) * 3,
    )
    assert scored_declarations(state) == (100, 0)
    assert early_termination(state) is None


def test_reachable_belote_keeps_contract_alive():
    started = BeloteState(seat=2, king_played=True, queen_played=False)
    assert early_termination(_late_round(belote=started)) is None

    held = ((), (), tuple(cards_from_str("KH QH")), ())
    assert early_termination(_late_round(hands=held)) is None

    theirs = BeloteState(seat=1, king_played=True, queen_played=False)
    assert early_termination(_late_round(belote=theirs)) == (40, 122)


def test_early_termination_credits_last_trick_bonus():
    state = GameState(
        seats=AI_SEATS,
        phase=GamePhase.PLAYING,
        contract=Contract(bidder=0, value=160, trump=Suit.HEARTS),
        completed_tricks=_tricks(0, 1, 1),
        round_points=(10, 90),
        current_trick=((0, card_from_str("7D")), (1, card_from_str("AD")), (2, card_from_str("8D"))),
        current_seat=3,
        hands=((), (), (), (card_from_str("9D"),)),
    )
    state = apply_play(state, 3, card_from_str("9D"))
    assert state.phase == GamePhase.SCORING
    assert state.early_terminated
    assert state.remainder_team == 1
    assert state.round_points == (10, 142)

    score = compute_round_score(state)
    assert score.bonuses == (0, 10)
    assert score.trick_points == (10, 152)
    assert not score.contract_made
