"""
Round settlement: capot, last-trick bonus, declarations, contract success or
failure, double / redouble multipliers and the remainder-based rounding.

Team values are (team A, team B) tuples throughout.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass

from .bidding import Contract, contract_multiplier
from .deck import LAST_TRICK_BONUS

logger = logging.getLogger(__name__)

CAPOT_POINTS = 250
TRICKS_PER_ROUND = 8

# Team that rounds up when remainders and trick points are both equal.
OPEN_TIE_ROUNDS_UP = 1

TeamPoints = tuple[int, int]


@dataclass(frozen=True)
class RoundScore:
    """
    Settlement of one round.
    - trick_points: card points incl. last-trick bonus (capot: 250 / 0)
    - raw: totals before division by 10 (after multiplier / failure award)
    - final: rounded totals added to the match score
    """

    contract: Contract
    trick_points: TeamPoints
    declaration_points: TeamPoints
    belote_points: TeamPoints
    bonuses: TeamPoints
    capot_team: int | None
    contract_made: bool
    raw: TeamPoints
    final: TeamPoints
    early_terminated: bool = False


def _pair(values: list[int]) -> TeamPoints:
    return (values[0], values[1])


def round_to_tens(raw: TeamPoints, trick_points: TeamPoints) -> TeamPoints:
    """
    Divide by 10 rounding down, except the team with the strictly larger
    remainder rounds up. Equal non-zero remainders: more trick points rounds up.
    """
    rem = [raw[0] % 10, raw[1] % 10]
    final = [raw[0] // 10, raw[1] // 10]
    if rem[0] > rem[1]:
        final[0] += 1
    elif rem[1] > rem[0]:
        final[1] += 1
    elif rem[0] > 0:
        if trick_points[0] > trick_points[1]:
            final[0] += 1
        elif trick_points[1] > trick_points[0]:
            final[1] += 1
        else:
            logger.warning(
                "Open rounding tie (raw %s, trick points %s); team %d rounds up",
                raw, trick_points, OPEN_TIE_ROUNDS_UP,
            )
            final[OPEN_TIE_ROUNDS_UP] += 1
    return _pair(final)


def round_score(
    contract: Contract,
    trick_points: TeamPoints,
    declaration_points: TeamPoints = (0, 0),
    belote_points: TeamPoints = (0, 0),
    last_trick_team: int | None = None,
    tricks_won: TeamPoints | None = None,
    early_terminated: bool = False,
) -> RoundScore:
    """
    Pure settlement of a round.

    trick_points are card points before the last-trick bonus. The bonus goes to
    last_trick_team (after an early termination, the team that took the
    remainder; None when it is already folded into trick_points). tricks_won
    detects capot.
    """
    team = contract.team
    defenders = 1 - team
    bonuses = [0, 0]
    capot_team: int | None = None

    if tricks_won is not None and TRICKS_PER_ROUND in tricks_won:
        capot_team = tricks_won.index(TRICKS_PER_ROUND)
        base = [0, 0]
        base[capot_team] = CAPOT_POINTS
    else:
        base = list(trick_points)
        if last_trick_team is not None:
            base[last_trick_team] += LAST_TRICK_BONUS
            bonuses[last_trick_team] += LAST_TRICK_BONUS
    # tie-break uses trick points including the bonus
    taken = _pair(base) if capot_team is None else trick_points

    total = [
        base[0] + declaration_points[0] + belote_points[0],
        base[1] + declaration_points[1] + belote_points[1],
    ]
    made = total[team] >= contract.value
    mult = contract_multiplier(contract)

    if not made:
        award = contract.value * mult + total[0] + total[1]
        total[team] = 0
        total[defenders] = award
    elif mult > 1:
        total = [total[0] * mult, total[1] * mult]

    raw = _pair(total)
    final = list(round_to_tens(raw, taken))
    if not made:
        final[team] = 0

    return RoundScore(
        contract=contract,
        trick_points=_pair(base),
        declaration_points=declaration_points,
        belote_points=belote_points,
        bonuses=_pair(bonuses),
        capot_team=capot_team,
        contract_made=made,
        raw=raw,
        final=_pair(final),
        early_terminated=early_terminated,
    )


__all__ = [
    "CAPOT_POINTS",
    "TRICKS_PER_ROUND",
    "OPEN_TIE_ROUNDS_UP",
    "TeamPoints",
    "RoundScore",
    "round_to_tens",
    "round_score",
]
