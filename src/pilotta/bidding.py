"""
Bidding rules: contract values, minimum raise, double / redouble gating.

Regular bids run 80..160 in steps of 10; 250 announces capot. A bid must be
strictly above the current contract. Doubling belongs to the defending team,
redoubling to the contracting team, and a doubled contract cannot be outbid.
"""
from __future__ import annotations

from dataclasses import dataclass, replace

from .deal import team_of
from .deck import Suit

MIN_BID = 80
MAX_NORMAL_BID = 160
BID_INCREMENT = 10
CAPOT_BID = 250


@dataclass(frozen=True)
class Contract:
    """The active contract of a round."""

    bidder: int
    value: int
    trump: Suit
    doubled: bool = False
    redoubled: bool = False

    @property
    def team(self) -> int:
        return team_of(self.bidder)

    @property
    def multiplier(self) -> int:
        return contract_multiplier(self)

    def __str__(self) -> str:
        tag = " x4" if self.redoubled else (" x2" if self.doubled else "")
        return f"{self.value} {self.trump.name.title()} by seat {self.bidder}{tag}"


@dataclass(frozen=True)
class BidEntry:
    """One line of the auction history. value None means pass."""

    seat: int
    value: int | None = None
    trump: Suit | None = None
    action: str = "bid"  # "bid" | "pass" | "double" | "redouble"


def is_valid_bid(value: int, current: Contract | None = None) -> bool:
    """True if ``value`` may be announced over ``current``."""
    current_value = current.value if current is not None else 0
    if value == CAPOT_BID:
        return value > current_value
    if value < MIN_BID or value > MAX_NORMAL_BID:
        return False
    if value % BID_INCREMENT != 0:
        return False
    return value > current_value


def minimum_bid(current: Contract | None = None) -> int:
    """Smallest legal bid over the current contract."""
    if current is None:
        return MIN_BID
    if current.value >= MAX_NORMAL_BID:
        return CAPOT_BID
    return current.value + BID_INCREMENT


def valid_bids(current: Contract | None = None) -> list[int]:
    """All legal bid values over the current contract, capot included."""
    values = [v for v in range(MIN_BID, MAX_NORMAL_BID + 1, BID_INCREMENT) if is_valid_bid(v, current)]
    if is_valid_bid(CAPOT_BID, current):
        values.append(CAPOT_BID)
    return values


def can_double(contract: Contract | None, seat: int) -> bool:
    return (
        contract is not None
        and not contract.doubled
        and team_of(seat) != contract.team
    )


def can_redouble(contract: Contract | None, seat: int) -> bool:
    return (
        contract is not None
        and contract.doubled
        and not contract.redoubled
        and team_of(seat) == contract.team
    )


def doubled(contract: Contract) -> Contract:
    return replace(contract, doubled=True)


def redoubled(contract: Contract) -> Contract:
    return replace(contract, redoubled=True)


def contract_multiplier(contract: Contract) -> int:
    """1 plain, 2 doubled, 4 redoubled."""
    if contract.redoubled:
        return 4
    if contract.doubled:
        return 2
    return 1


__all__ = [
    "MIN_BID",
    "MAX_NORMAL_BID",
    "BID_INCREMENT",
    "CAPOT_BID",
    "Contract",
    "BidEntry",
    "is_valid_bid",
    "minimum_bid",
    "valid_bids",
    "can_double",
    "can_redouble",
    "doubled",
    "redoubled",
    "contract_multiplier",
]
