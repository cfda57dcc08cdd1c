"""Domain errors raised by the game model.

All of them derive from ValueError so callers that only care about
"the request was malformed" can catch a single type.
"""
from __future__ import annotations


class GameError(ValueError):
    """Base class for errors raised by game operations."""


class GameStructureError(GameError):
    """The operation would violate a tree or information-set invariant."""


class InvalidReferenceError(GameError):
    """A handle does not name a live entity of this game."""

    def __init__(self, kind: str, handle: object) -> None:
        super().__init__(f"{kind} not found in game: {handle}")
        self.kind = kind
        self.handle = handle


class StrategyError(GameError):
    """Misuse of the strategic-form layer (foreign strategy, invalid profile)."""
