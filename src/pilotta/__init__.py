"""Pilotta (Belote contrée) game engine: rules, scoring, heuristic and MCTS players."""

__version__ = "0.1.0"

from .deck import Card, Rank, Suit, make_deck_32, card_value, card_strength, compare_cards
from .deal import deal_4p, Deal4P, team_of, partner_of, next_dealer, first_to_bid
from .bidding import Contract, is_valid_bid, minimum_bid, valid_bids
from .play import legal_plays, trick_winner, trick_points, CompletedTrick
from .declarations import (
    Declaration,
    DeclarationKind,
    find_all_declarations,
    check_belote,
    compare_declarations,
    declaration_winner,
)
from .scoring import RoundScore, round_score
from .strategy import Personality, PlayerProfile, BidContext, BidDecision, decide_bid
from .infoset import InformationSet
from .mcts import MCTSConfig
from .agents import PlayPolicy, choose_ai_bid, choose_ai_card
from .errors import (
    PilottaError,
    RuleViolation,
    IllegalMove,
    InvalidBid,
    OutOfTurn,
    InvalidDoubleRedouble,
    MalformedState,
)
from .game import (
    GamePhase,
    GameState,
    SeatConfig,
    Controller,
    MatchConfig,
    new_game,
    new_round,
    apply_bid,
    apply_double,
    apply_redouble,
    apply_play,
    compute_round_score,
    run_match,
    try_apply,
)
