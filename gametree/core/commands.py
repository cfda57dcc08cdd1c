"""Editing commands accepted by the HTTP API.

Each command is a pydantic model tagged by ``op`` and knows how to apply
itself to an :class:`ExtensiveFormGame`. ``apply`` returns whatever the
underlying operation returns (a new handle, a count, or None).
"""
from __future__ import annotations

from abc import abstractmethod
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field

from gametree.config import TreeConfig
from gametree.models.extensive_form import ExtensiveFormGame

PayoffValue = float | str


class _Command(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    @abstractmethod
    def apply(self, game: ExtensiveFormGame) -> Any:
        """Run the command against ``game``."""


class AddMove(_Command):
    op: Literal["add_move"] = "add_move"
    node: int
    infoset: int | None = None
    player: int | None = None
    actions: int | list[str] = TreeConfig.DEFAULT_NUM_ACTIONS

    def apply(self, game: ExtensiveFormGame) -> int:
        return game.add_move(self.node, self.infoset, player=self.player, actions=self.actions)


class InsertMove(_Command):
    op: Literal["insert_move"] = "insert_move"
    node: int
    infoset: int | None = None
    player: int | None = None
    actions: int | list[str] = TreeConfig.DEFAULT_NUM_ACTIONS

    def apply(self, game: ExtensiveFormGame) -> int:
        return game.insert_move(self.node, self.infoset, player=self.player, actions=self.actions)


class DeleteMove(_Command):
    op: Literal["delete_move"] = "delete_move"
    node: int
    keep: int

    def apply(self, game: ExtensiveFormGame) -> int:
        return game.delete_move(self.node, self.keep)


class DeleteTree(_Command):
    op: Literal["delete_tree"] = "delete_tree"
    node: int

    def apply(self, game: ExtensiveFormGame) -> None:
        game.delete_tree(self.node)


class DeleteEmptyInfosets(_Command):
    op: Literal["delete_empty_infosets"] = "delete_empty_infosets"

    def apply(self, game: ExtensiveFormGame) -> int:
        return game.delete_empty_infosets()


class CopyTree(_Command):
    op: Literal["copy_tree"] = "copy_tree"
    src: int
    dest: int

    def apply(self, game: ExtensiveFormGame) -> None:
        game.copy_tree(self.src, self.dest)


class MoveTree(_Command):
    op: Literal["move_tree"] = "move_tree"
    src: int
    dest: int

    def apply(self, game: ExtensiveFormGame) -> None:
        game.move_tree(self.src, self.dest)


class NewInfoset(_Command):
    op: Literal["new_infoset"] = "new_infoset"
    player: int
    actions: int | list[str] = TreeConfig.DEFAULT_NUM_ACTIONS
    name: str = ""

    def apply(self, game: ExtensiveFormGame) -> int:
        return game.new_infoset(self.player, self.actions, self.name)


class MergeInfoset(_Command):
    op: Literal["merge_infoset"] = "merge_infoset"
    target: int
    source: int

    def apply(self, game: ExtensiveFormGame) -> None:
        game.merge_infoset(self.target, self.source)


class SplitInfoset(_Command):
    op: Literal["split_infoset"] = "split_infoset"
    node: int

    def apply(self, game: ExtensiveFormGame) -> int:
        return game.split_infoset(self.node)


class JoinInfoset(_Command):
    op: Literal["join_infoset"] = "join_infoset"
    node: int
    infoset: int

    def apply(self, game: ExtensiveFormGame) -> None:
        game.join_infoset(self.node, self.infoset)


class SetInfosetPlayer(_Command):
    op: Literal["set_infoset_player"] = "set_infoset_player"
    infoset: int
    player: int

    def apply(self, game: ExtensiveFormGame) -> None:
        game.set_infoset_player(self.infoset, self.player)


class InsertAction(_Command):
    op: Literal["insert_action"] = "insert_action"
    infoset: int
    position: int | None = None
    label: str = ""

    def apply(self, game: ExtensiveFormGame) -> None:
        game.insert_action(self.infoset, self.position, self.label)


class DeleteAction(_Command):
    op: Literal["delete_action"] = "delete_action"
    infoset: int
    action: int

    def apply(self, game: ExtensiveFormGame) -> None:
        game.delete_action(self.infoset, self.action)


class ReorderActions(_Command):
    op: Literal["reorder_actions"] = "reorder_actions"
    infoset: int
    order: list[int]

    def apply(self, game: ExtensiveFormGame) -> None:
        game.reorder_actions(self.infoset, self.order)


class SetChanceProbs(_Command):
    op: Literal["set_chance_probs"] = "set_chance_probs"
    infoset: int
    probs: list[PayoffValue]

    def apply(self, game: ExtensiveFormGame) -> None:
        game.set_chance_probs(self.infoset, self.probs)


class MarkSubgame(_Command):
    op: Literal["mark_subgame"] = "mark_subgame"
    node: int

    def apply(self, game: ExtensiveFormGame) -> None:
        game.mark_subgame(self.node)


class UnmarkSubgame(_Command):
    op: Literal["unmark_subgame"] = "unmark_subgame"
    node: int

    def apply(self, game: ExtensiveFormGame) -> None:
        game.unmark_subgame(self.node)


class MarkSubgames(_Command):
    """Mark the given nodes, or every legal subgame root when ``nodes`` is omitted."""

    op: Literal["mark_subgames"] = "mark_subgames"
    nodes: list[int] | None = None

    def apply(self, game: ExtensiveFormGame) -> list[int]:
        roots = game.legal_subgame_roots() if self.nodes is None else self.nodes
        game.mark_subgames(roots)
        return list(roots)


class UnmarkSubgames(_Command):
    op: Literal["unmark_subgames"] = "unmark_subgames"
    node: int | None = None

    def apply(self, game: ExtensiveFormGame) -> None:
        game.unmark_subgames(self.node)


class NewPlayer(_Command):
    op: Literal["new_player"] = "new_player"
    name: str

    def apply(self, game: ExtensiveFormGame) -> int:
        return game.new_player(self.name)


class NewOutcome(_Command):
    op: Literal["new_outcome"] = "new_outcome"
    payoffs: dict[int, PayoffValue] = Field(default_factory=dict)
    label: str = ""

    def apply(self, game: ExtensiveFormGame) -> int:
        return game.new_outcome(self.payoffs, self.label)


class SetPayoff(_Command):
    op: Literal["set_payoff"] = "set_payoff"
    outcome: int
    player: int
    value: PayoffValue

    def apply(self, game: ExtensiveFormGame) -> None:
        game.set_payoff(self.outcome, self.player, self.value)


class SetOutcome(_Command):
    op: Literal["set_outcome"] = "set_outcome"
    node: int
    outcome: int | None = None

    def apply(self, game: ExtensiveFormGame) -> None:
        game.set_outcome(self.node, self.outcome)


class DeleteOutcome(_Command):
    op: Literal["delete_outcome"] = "delete_outcome"
    outcome: int

    def apply(self, game: ExtensiveFormGame) -> None:
        game.delete_outcome(self.outcome)


class Rename(_Command):
    """Relabel a node, information set, player or outcome."""

    op: Literal["rename"] = "rename"
    target: Literal["node", "infoset", "player", "outcome"]
    id: int
    name: str

    def apply(self, game: ExtensiveFormGame) -> None:
        setters = {
            "node": game.set_node_name,
            "infoset": game.set_infoset_name,
            "player": game.set_player_name,
            "outcome": game.set_outcome_label,
        }
        setters[self.target](self.id, self.name)


class SetActionLabel(_Command):
    op: Literal["set_action_label"] = "set_action_label"
    infoset: int
    action: int
    label: str

    def apply(self, game: ExtensiveFormGame) -> None:
        game.set_action_label(self.infoset, self.action, self.label)


EditCommand = Annotated[
    Union[
        AddMove,
        InsertMove,
        DeleteMove,
        DeleteTree,
        DeleteEmptyInfosets,
        CopyTree,
        MoveTree,
        NewInfoset,
        MergeInfoset,
        SplitInfoset,
        JoinInfoset,
        SetInfosetPlayer,
        InsertAction,
        DeleteAction,
        ReorderActions,
        SetChanceProbs,
        MarkSubgame,
        UnmarkSubgame,
        MarkSubgames,
        UnmarkSubgames,
        NewPlayer,
        NewOutcome,
        SetPayoff,
        SetOutcome,
        DeleteOutcome,
        Rename,
        SetActionLabel,
    ],
    Field(discriminator="op"),
]
