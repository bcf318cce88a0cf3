"""Tests for legal moves (forced overtrump) and trick resolution."""
import itertools
import random

import pytest

from pilotta.deck import Suit, cards_from_str, make_deck_32
from pilotta.errors import MalformedState
from pilotta.play import legal_plays, seal_trick, trick_points, trick_winner


def _trick(text: str, first_seat: int = 0):
    return [((first_seat + i) % 4, c) for i, c in enumerate(cards_from_str(text))]


def test_empty_trick_everything_legal():
    hand = cards_from_str("7H 8S AC")
    assert legal_plays(hand, [], Suit.HEARTS) == hand


def test_must_follow_lead_suit():
    hand = cards_from_str("7S KS JH AC")
    assert legal_plays(hand, _trick("AS"), Suit.HEARTS) == cards_from_str("7S KS")


def test_following_trump_lead_does_not_force_overtrump():
    hand = cards_from_str("7H JH AC")
    assert legal_plays(hand, _trick("9H"), Suit.HEARTS) == cards_from_str("7H JH")


def test_void_must_trump():
    hand = cards_from_str("7H QH AC 8D")
    assert legal_plays(hand, _trick("AS"), Suit.HEARTS) == cards_from_str("7H QH")


def test_forced_overtrump():
    hand = cards_from_str("7H AH JH 8D")
    # 9H already in the trick; only the jack beats it
    assert legal_plays(hand, _trick("AS 9H"), Suit.HEARTS) == cards_from_str("JH")


def test_any_trump_when_unable_to_overtrump():
    hand = cards_from_str("7H 8H AD")
    assert legal_plays(hand, _trick("AS JH"), Suit.HEARTS) == cards_from_str("7H 8H")


def test_overtrump_required_even_when_partner_wins():
    hand = cards_from_str("7H AH KD")
    # seat 2 is partner of seat 0 and played the 10 of trump
    trick = [(0, cards_from_str("AS")[0]), (1, cards_from_str("7S")[0]), (2, cards_from_str("10H")[0])]
    assert legal_plays(hand, trick, Suit.HEARTS) == cards_from_str("AH")


def test_no_lead_no_trump_anything():
    hand = cards_from_str("7D 8C")
    assert legal_plays(hand, _trick("AS JH"), Suit.HEARTS) == hand


def test_legal_plays_never_empty():
    rng = random.Random(5)
    deck = make_deck_32()
    for _ in range(500):
        rng.shuffle(deck)
        trump = rng.choice(list(Suit))
        n = rng.randint(1, 8)
        hand = deck[:n]
        trick = [(i, c) for i, c in enumerate(deck[n:n + rng.randint(0, 3)])]
        legal = legal_plays(hand, trick, trump)
        assert legal
        assert all(c in hand for c in legal)


def test_trick_winner_trump():
    trick = _trick("AS 7H KS 10S", first_seat=1)
    assert trick_winner(trick, Suit.HEARTS) == 2


def test_trick_winner_lead_suit():
    trick = _trick("10S AC AS 7D", first_seat=3)
    assert trick_winner(trick, Suit.HEARTS) == 1


def test_trick_winner_order_invariant():
    rng = random.Random(11)
    deck = make_deck_32()
    for _ in range(200):
        rng.shuffle(deck)
        trump = rng.choice(list(Suit))
        trick = [(s, deck[s]) for s in range(4)]
        expected = trick_winner(trick, trump)
        lead = trick[0]
        for rest in itertools.permutations(trick[1:]):
            assert trick_winner([lead, *rest], trump) == expected
        assert expected in range(4)


def test_trick_points_and_seal():
    trick = _trick("JH 9H AS 10S")
    assert trick_points(trick, Suit.HEARTS) == 20 + 14 + 11 + 10
    sealed = seal_trick(trick, Suit.HEARTS)
    assert sealed.winner == 0
    assert sealed.points == 55


def test_seal_rejects_malformed_trick():
    with pytest.raises(MalformedState):
        seal_trick(_trick("JH 9H AS"), Suit.HEARTS)
    dup = [(0, c) for c in cards_from_str("JH 9H AS 10S")]
    with pytest.raises(MalformedState):
        seal_trick(dup, Suit.HEARTS)
