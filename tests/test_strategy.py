"""Tests for the heuristic bidder, card player and profile updates."""
import pytest

from pilotta.bidding import Contract
from pilotta.deck import Suit, cards_from_str
from pilotta.infoset import InformationSet
from pilotta.strategy import (
    BidContext,
    Personality,
    PlayerProfile,
    choose_heuristic_card,
    context_factor,
    contract_situation,
    decide_bid,
    evaluate_hand_for_bidding,
    personality_params,
    record_bid,
    record_round,
    should_declare,
    should_double,
    should_redouble,
    suit_score,
)
from pilotta.declarations import find_all_declarations

STRONG = cards_from_str("JH 9H AH 10H KH QH AS 10S")
WEAK = cards_from_str("7S 8D 7C 8C 9D 7D 8S QC")


def test_suit_score_components():
    # 62 card points + 10 jack + 5 nine + 15 length + 10 long suit + 20 belote
    assert suit_score(STRONG, Suit.HEARTS) == 122
    assert suit_score(STRONG, Suit.CLUBS) == 0


def test_evaluate_strong_hand():
    ev = evaluate_hand_for_bidding(STRONG)
    assert ev.best_suit == Suit.HEARTS
    assert ev.total_high_cards == 42
    assert ev.declaration_bonus == 100
    assert ev.suggested_bid == 160
    assert ev.confidence == 1.0


def test_evaluate_weak_hand():
    ev = evaluate_hand_for_bidding(WEAK)
    assert ev.best_suit == Suit.DIAMONDS
    assert ev.confidence < 0.6
    assert 80 <= ev.suggested_bid <= 160


def test_decide_bid_opens_and_raises():
    assert decide_bid(STRONG, None).value == 160
    assert decide_bid(STRONG, None).trump == Suit.HEARTS
    raised = decide_bid(STRONG, Contract(bidder=1, value=100, trump=Suit.CLUBS))
    assert (raised.value, raised.trump) == (110, Suit.HEARTS)


def test_decide_bid_passes():
    assert decide_bid(WEAK, None).is_pass
    assert decide_bid(STRONG, Contract(1, 100, Suit.CLUBS, doubled=True)).is_pass
    assert decide_bid(STRONG, Contract(1, 160, Suit.CLUBS)).is_pass


def test_personality_params():
    assert personality_params(Personality.AGGRESSIVE).min_confidence == 0.4
    assert personality_params(Personality.CONSERVATIVE).confidence_factor == 0.8
    assert personality_params(Personality.ADAPTIVE).uses_profile


def test_context_factor():
    assert context_factor(None) == 1.0
    assert context_factor(BidContext(team_score=10, opponent_score=90)) == 1.2
    assert context_factor(BidContext(team_score=130, opponent_score=120)) == 0.8
    assert context_factor(BidContext(team_score=60, opponent_score=0)) == 0.8


def test_adaptive_profile_scales_bid():
    hand = cards_from_str("JH 9H AH 7S 8D AC 7C 8C")
    timid = PlayerProfile(bid_aggressiveness=0.0)
    bold = PlayerProfile(bid_aggressiveness=1.0)
    low = evaluate_hand_for_bidding(hand, Personality.ADAPTIVE, timid).suggested_bid
    high = evaluate_hand_for_bidding(hand, Personality.ADAPTIVE, bold).suggested_bid
    assert low < high


def test_double_and_redouble_decisions():
    contract = Contract(bidder=1, value=120, trump=Suit.HEARTS)
    defence = cards_from_str("JH 9H AS 10S AD 10D AC 7C")
    assert should_double(defence, contract, Personality.AGGRESSIVE)
    assert not should_double(WEAK, contract, Personality.AGGRESSIVE)
    assert should_redouble(STRONG, contract, Personality.BALANCED)
    assert not should_redouble(WEAK, contract, Personality.AGGRESSIVE)


def test_should_declare():
    tierce = find_all_declarations(cards_from_str("7S 8S 9S"))
    quarte = find_all_declarations(cards_from_str("7S 8S 9S 10S"))
    assert should_declare(Personality.BALANCED, tierce)
    assert not should_declare(Personality.CONSERVATIVE, tierce)
    assert should_declare(Personality.CONSERVATIVE, quarte)
    assert not should_declare(Personality.AGGRESSIVE, [])


def test_record_bid_moving_average():
    p = record_bid(PlayerProfile(), 160)
    assert p.bid_aggressiveness == pytest.approx(0.47)
    assert p.average_bid_value == pytest.approx(118.0)


def test_record_round_updates_preferences():
    contract = Contract(bidder=0, value=100, trump=Suit.HEARTS)
    p = record_round(PlayerProfile(), contract, 0)
    assert p.games_played == 1
    assert sum(p.trump_preferences) == pytest.approx(1.0)
    assert p.trump_preferences[Suit.HEARTS] > 0.25
    other = record_round(PlayerProfile(), contract, 1)
    assert other.trump_preferences == (0.25, 0.25, 0.25, 0.25)
    assert record_round(PlayerProfile(bid_aggressiveness=0.7), None, 0).play_style == "aggressive"


def _info(seat, hand, trick=(), bidder=0, trump=Suit.HEARTS, value=90, points=(0, 0)):
    return InformationSet(
        seat=seat,
        hand=tuple(cards_from_str(hand)),
        contract=Contract(bidder=bidder, value=value, trump=trump),
        current_trick=tuple((s, c) for s, c in trick),
        round_points=points,
    )


def test_lead_strong_trump_as_contract_team():
    info = _info(0, "7H JH AS 8D")
    assert str(choose_heuristic_card(info)) == "J♥"


def test_defender_leads_side_ace():
    info = _info(1, "7H AS 8D 9D")
    assert str(choose_heuristic_card(info)) == "A♠"


def test_lead_low_from_longest_side_suit():
    info = _info(1, "7H KS 8D 9D QD")
    assert str(choose_heuristic_card(info)) == "8♦"


def test_follow_low_when_partner_wins():
    trick = [(0, cards_from_str("7S")[0]), (1, cards_from_str("AS")[0]), (2, cards_from_str("8S")[0])]
    info = _info(3, "10S KS 7D", trick)
    assert str(choose_heuristic_card(info)) == "K♠"


def test_follow_cheapest_winner_against_opponent():
    trick = [(0, cards_from_str("KS")[0])]
    info = _info(1, "AS 10S 7S 8H", trick)
    assert str(choose_heuristic_card(info)) == "10♠"


def test_follow_low_when_cannot_win():
    trick = [(0, cards_from_str("AS")[0])]
    info = _info(1, "7S 10S 8H", trick)
    assert str(choose_heuristic_card(info)) == "7♠"


def _card(text):
    return cards_from_str(text)[0]


def test_contract_situation_from_both_sides():
    trick = [(3, _card("AS"))]
    taker = contract_situation(_info(0, "7S 8D", trick, value=160, points=(40, 60)))
    assert taker.is_contract_team
    assert taker.trick_value == 11
    assert taker.points_remaining == 152 - 111 + 10
    assert taker.points_needed == 120
    assert taker.must_win

    defender = contract_situation(_info(1, "7S 8D", trick, value=160, points=(40, 60)))
    assert not defender.is_contract_team
    assert defender.points_needed == 120
    assert not defender.must_win


def test_lead_low_trump_when_far_from_contract():
    info = _info(0, "7H 8H AS 8D")
    assert str(choose_heuristic_card(info)) == "7♥"


def test_defender_leads_high_when_contract_nearly_made():
    info = _info(1, "7H 10S 8D 9D", points=(80, 0))
    assert str(choose_heuristic_card(info)) == "10♠"


def test_last_seat_feeds_points_to_winning_partner():
    trick = [(3, _card("7S")), (0, _card("AS")), (1, _card("8S"))]
    assert str(choose_heuristic_card(_info(2, "10S KS 7D", trick))) == "10♠"
    # contract nearly made: no need to spend the ten
    assert str(choose_heuristic_card(_info(2, "10S KS 7D", trick, points=(85, 0)))) == "K♠"


def test_defender_takes_valuable_trick_with_strongest_winner():
    info = _info(1, "JH 8H 7D", [(0, _card("AS"))])
    assert str(choose_heuristic_card(info)) == "J♥"


def test_contract_team_plays_strongest_winner_when_trick_is_vital():
    info = _info(0, "AS KS 7D", [(3, _card("8S"))], value=160, points=(20, 100))
    assert contract_situation(info).must_win
    assert str(choose_heuristic_card(info)) == "A♠"
