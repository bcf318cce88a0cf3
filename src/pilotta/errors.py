"""
Error taxonomy for the game engine.

Rule violations are raised by the flow controller when an action does not fit
the current state. States are frozen values, so a raised action never leaves a
partial update behind; use ``pilotta.game.try_apply`` to receive the rejection
as a value instead.
"""
from __future__ import annotations


class PilottaError(Exception):
    """Base class for engine errors."""


class RuleViolation(PilottaError, ValueError):
    """An action that is inconsistent with the current state."""


class IllegalMove(RuleViolation):
    """Card not in the current legal set (or not in the hand)."""


class InvalidBid(RuleViolation):
    """Bid below minimum, off the 10-point grid, or not above the current contract."""


class OutOfTurn(RuleViolation):
    """Action from a seat that is not the active player."""


class InvalidDoubleRedouble(RuleViolation):
    """Double/redouble from the wrong team or in the wrong contract state."""


class MalformedState(PilottaError, RuntimeError):
    """A structural invariant is broken. Never recoverable."""


__all__ = [
    "PilottaError",
    "RuleViolation",
    "IllegalMove",
    "InvalidBid",
    "OutOfTurn",
    "InvalidDoubleRedouble",
    "MalformedState",
]
