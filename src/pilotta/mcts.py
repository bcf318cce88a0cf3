"""
Determinized Monte Carlo Tree Search (ISMCTS-style) for card play.

For each determinization the unseen cards are dealt to the other seats according
to their real remaining hand sizes, and a plain UCB1 tree is grown over that
fully-observable deal. Root statistics are summed per physical card across all
determinizations; the most visited legal card is played.

Trees are stored as arenas: parallel lists for structure and numpy arrays for
visit / reward statistics, linked by integer node indices.
"""
from __future__ import annotations

import logging
import math
import random
import threading
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Sequence

import numpy as np

from .deal import NUM_SEATS, next_seat, team_of
from .deck import LAST_TRICK_BONUS, Card, Suit, card_index
from .infoset import InformationSet
from .play import legal_plays, trick_points, trick_winner

logger = logging.getLogger(__name__)

TRICKS_PER_ROUND = 8
REWARD_SCALE = 50.0


@dataclass
class MCTSConfig:
    """
    Search settings.
    - time_budget_ms: wall-clock budget shared by all determinizations
    - max_iterations: per-determinization cap (None = budget only); set it
      for reproducible seeded runs
    - workers: determinizations searched concurrently
    """

    time_budget_ms: int = 2000
    exploration: float = math.sqrt(2)
    simulation_depth: int = 8
    determinizations: int = 10
    max_iterations: int | None = None
    workers: int = 1


@dataclass
class SearchResult:
    card: Card
    visits: dict[Card, int] = field(default_factory=dict)
    iterations: int = 0
    fallback: bool = False


class SimState:
    """Fully-observable simplified round used inside one determinization."""

    __slots__ = ("hands", "trick", "tricks_played", "points", "current", "trump")

    def __init__(
        self,
        hands: list[list[Card]],
        trick: list[tuple[int, Card]],
        tricks_played: int,
        points: list[int],
        current: int,
        trump: Suit,
    ) -> None:
        self.hands = hands
        self.trick = trick
        self.tricks_played = tricks_played
        self.points = points
        self.current = current
        self.trump = trump

    def clone(self) -> SimState:
        return SimState(
            [list(h) for h in self.hands],
            list(self.trick),
            self.tricks_played,
            list(self.points),
            self.current,
            self.trump,
        )

    def is_terminal(self) -> bool:
        return self.tricks_played >= TRICKS_PER_ROUND

    def legal(self) -> list[Card]:
        if self.is_terminal():
            return []
        return legal_plays(self.hands[self.current], self.trick, self.trump)

    def play(self, card: Card) -> None:
        """Same transition as the flow controller: remove, append, seal at 4."""
        self.hands[self.current].remove(card)
        self.trick.append((self.current, card))
        if len(self.trick) < NUM_SEATS:
            self.current = next_seat(self.current)
            return
        winner = trick_winner(self.trick, self.trump)
        pts = trick_points(self.trick, self.trump)
        self.tricks_played += 1
        if self.tricks_played == TRICKS_PER_ROUND:
            pts += LAST_TRICK_BONUS
        self.points[team_of(winner)] += pts
        self.trick = []
        self.current = winner

    def reward(self, team: int) -> float:
        """Sigmoid of the point difference, from ``team``'s side."""
        diff = self.points[team] - self.points[1 - team]
        return 1.0 / (1.0 + math.exp(-diff / REWARD_SCALE))


class _Tree:
    """Arena of search nodes. Node 0 is the root."""

    def __init__(self, capacity: int = 256) -> None:
        self.parent: list[int] = []
        self.move: list[Card | None] = []
        self.mover: list[int] = []
        self.children: list[list[int]] = []
        self.untried: list[list[Card]] = []
        self.visits = np.zeros(capacity, dtype=np.float64)
        self.totals = np.zeros(capacity, dtype=np.float64)

    def __len__(self) -> int:
        return len(self.parent)

    def add(self, parent: int, move: Card | None, mover: int, untried: list[Card]) -> int:
        idx = len(self.parent)
        if idx >= self.visits.shape[0]:
            self.visits = np.concatenate([self.visits, np.zeros_like(self.visits)])
            self.totals = np.concatenate([self.totals, np.zeros_like(self.totals)])
        self.parent.append(parent)
        self.move.append(move)
        self.mover.append(mover)
        self.children.append([])
        self.untried.append(untried)
        if parent >= 0:
            self.children[parent].append(idx)
        return idx

    def select(self, node: int, exploration: float) -> int:
        """UCB1 over the (all visited) children of ``node``."""
        kids = np.asarray(self.children[node], dtype=np.int64)
        v = self.visits[kids]
        ucb = self.totals[kids] / v + exploration * np.sqrt(math.log(self.visits[node]) / v)
        return int(kids[int(np.argmax(ucb))])

    def backpropagate(self, node: int, reward: float, team: int) -> None:
        """Each node is credited from the side of the seat that moved into it."""
        while node >= 0:
            self.visits[node] += 1.0
            mover = self.mover[node]
            if mover < 0 or team_of(mover) == team:
                self.totals[node] += reward
            else:
                self.totals[node] += 1.0 - reward
            node = self.parent[node]


def determinize(info: InformationSet, rng: random.Random) -> SimState | None:
    """
    Deal the unseen cards to the other seats at their true hand sizes.
    None if the observed hand sizes do not add up to the unseen cards.
    """
    unseen = info.unseen_cards()
    rng.shuffle(unseen)
    others = [s for s in range(NUM_SEATS) if s != info.seat]
    if sum(info.hand_sizes[s] for s in others) != len(unseen):
        return None
    hands: list[list[Card]] = [[] for _ in range(NUM_SEATS)]
    hands[info.seat] = list(info.hand)
    pos = 0
    for s in others:
        n = info.hand_sizes[s]
        hands[s] = unseen[pos:pos + n]
        pos += n
    return SimState(
        hands=hands,
        trick=list(info.current_trick),
        tricks_played=len(info.completed_tricks),
        points=list(info.round_points),
        current=info.seat,
        trump=info.trump,
    )


def _rollout(state: SimState, rng: random.Random, depth: int) -> None:
    stop_at = state.tricks_played + depth
    while not state.is_terminal() and state.tricks_played < stop_at:
        state.play(rng.choice(state.legal()))


def search_tree(
    root: SimState,
    team: int,
    config: MCTSConfig,
    rng: random.Random,
    deadline: float,
    cancel: threading.Event | None = None,
) -> tuple[_Tree, int]:
    """Grow one UCB1 tree until the deadline, the iteration cap or cancel."""
    tree = _Tree()
    tree.add(-1, None, -1, root.legal())
    iterations = 0
    while True:
        if config.max_iterations is not None and iterations >= config.max_iterations:
            break
        if cancel is not None and cancel.is_set():
            break
        if time.perf_counter() >= deadline:
            break

        node = 0
        state = root.clone()
        # selection
        while not tree.untried[node] and tree.children[node]:
            node = tree.select(node, config.exploration)
            state.play(tree.move[node])
        # expansion
        untried = tree.untried[node]
        if untried:
            card = untried.pop(rng.randrange(len(untried)))
            mover = state.current
            state.play(card)
            node = tree.add(node, card, mover, state.legal())
        # simulation
        _rollout(state, rng, config.simulation_depth)
        tree.backpropagate(node, state.reward(team), team)
        iterations += 1
    return tree, iterations


def _search_one(
    info: InformationSet,
    config: MCTSConfig,
    seed: int,
    budget_s: float,
    cancel: threading.Event | None,
) -> tuple[_Tree | None, int]:
    rng = random.Random(seed)
    root = determinize(info, rng)
    if root is None:
        return None, 0
    deadline = time.perf_counter() + budget_s
    return search_tree(root, info.team, config, rng, deadline, cancel)


def search(
    info: InformationSet,
    config: MCTSConfig | None = None,
    rng: random.Random | None = None,
    cancel: threading.Event | None = None,
    legal: Sequence[Card] | None = None,
) -> SearchResult:
    """
    Run all determinizations and aggregate root visits per card.
    Each determinization draws its own seed from ``rng`` up front, so the
    result does not depend on ``config.workers``.
    """
    if config is None:
        config = MCTSConfig()
    if rng is None:
        rng = random.Random()
    if legal is None:
        legal = legal_plays(info.hand, info.current_trick, info.trump)
    legal = list(legal)
    if not legal:
        raise ValueError("No legal card to play")
    if len(legal) == 1:
        return SearchResult(card=legal[0], visits={legal[0]: 0})

    n = max(1, config.determinizations)
    seeds = [rng.getrandbits(32) for _ in range(n)]
    workers = max(1, min(config.workers, n))
    budget_s = config.time_budget_ms / 1000.0 * workers / n

    if workers == 1:
        results = [_search_one(info, config, s, budget_s, cancel) for s in seeds]
    else:
        with ThreadPoolExecutor(max_workers=workers) as pool:
            results = list(pool.map(lambda s: _search_one(info, config, s, budget_s, cancel), seeds))

    visits = np.zeros(32, dtype=np.float64)
    totals = np.zeros(32, dtype=np.float64)
    iterations = 0
    for tree, its in results:
        iterations += its
        if tree is None:
            continue
        for child in tree.children[0]:
            idx = card_index(tree.move[child])
            visits[idx] += tree.visits[child]
            totals[idx] += tree.totals[child]

    idxs = np.asarray([card_index(c) for c in legal], dtype=np.int64)
    legal_visits = visits[idxs]
    logger.debug("MCTS seat %d: %d iterations over %d determinizations", info.seat, iterations, n)
    if legal_visits.max() <= 0:
        logger.warning("MCTS produced no statistics for seat %d; playing first legal card", info.seat)
        return SearchResult(card=legal[0], iterations=iterations, fallback=True)

    best = legal[int(np.argmax(legal_visits))]
    return SearchResult(
        card=best,
        visits={c: int(visits[card_index(c)]) for c in legal},
        iterations=iterations,
    )


def choose_card(
    info: InformationSet,
    config: MCTSConfig | None = None,
    rng: random.Random | None = None,
    cancel: threading.Event | None = None,
) -> Card:
    """Pick a card for ``info.seat``; always a legal one."""
    return search(info, config, rng, cancel).card


__all__ = [
    "MCTSConfig",
    "SearchResult",
    "SimState",
    "determinize",
    "search_tree",
    "search",
    "choose_card",
]
