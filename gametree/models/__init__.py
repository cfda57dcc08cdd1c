"""Game models: the editable tree and its strategic form."""

from gametree.models.errors import (
    GameError,
    GameStructureError,
    InvalidReferenceError,
    StrategyError,
)
from gametree.models.extensive_form import (
    CHANCE,
    Action,
    ExtensiveFormGame,
    Infoset,
    Node,
    NodeKind,
    Outcome,
    Player,
)
from gametree.models.normal_form import (
    Contingency,
    NfgOutcome,
    NormalFormGame,
    Strategy,
    Support,
)

__all__ = [
    "CHANCE",
    "Action",
    "Contingency",
    "ExtensiveFormGame",
    "GameError",
    "GameStructureError",
    "Infoset",
    "InvalidReferenceError",
    "NfgOutcome",
    "Node",
    "NodeKind",
    "NormalFormGame",
    "Outcome",
    "Player",
    "Strategy",
    "StrategyError",
    "Support",
]
