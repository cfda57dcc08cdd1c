"""Read-only JSON snapshots of games and their strategic form.

The mutable arena records are plain dataclasses; these frozen pydantic
models are what leaves the process. Payoffs and probabilities are
rendered with :func:`to_json_number`, so rational games keep exact
``"p/q"`` strings.
"""
from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from gametree.models.extensive_form import ExtensiveFormGame
from gametree.models.normal_form import Contingency, NormalFormGame, Strategy
from gametree.models.numbers import NumberTypeName, number_type_name, to_json_number

JsonNumber = float | str


class ActionView(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    label: str
    probability: JsonNumber | None = Field(default=None, description="Chance probability")


class NodeView(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    id: int
    name: str = ""
    kind: Literal["terminal", "decision", "chance"]
    parent: int | None = None
    children: list[int] = Field(default_factory=list)
    infoset: int | None = None
    outcome: int | None = None
    subgame_root: bool = False


class InfosetView(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    id: int
    name: str = ""
    player: int
    actions: list[ActionView]
    members: list[int]


class PlayerView(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    id: int
    name: str
    infosets: list[int]


class OutcomeView(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    id: int
    label: str = ""
    payoffs: dict[int, JsonNumber]


class GameView(BaseModel):
    """Full snapshot of an extensive-form game; nodes are listed in preorder."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    id: str
    title: str
    number_type: NumberTypeName
    revision: int
    root: int
    players: list[PlayerView]
    infosets: list[InfosetView]
    nodes: list[NodeView]
    outcomes: list[OutcomeView]
    format_name: Literal["extensive"] = "extensive"

    @classmethod
    def from_game(cls, game_id: str, game: ExtensiveFormGame) -> GameView:
        return cls(
            id=game_id,
            title=game.title,
            number_type=number_type_name(game.number_type),
            revision=game.revision,
            root=game.root,
            players=[
                PlayerView(id=pl.id, name=pl.name, infosets=list(pl.infosets))
                for pl in game.players()
            ],
            infosets=[
                InfosetView(
                    id=iset.id,
                    name=iset.name,
                    player=iset.player,
                    actions=[
                        ActionView(
                            label=a.label,
                            probability=None if a.probability is None else to_json_number(a.probability),
                        )
                        for a in iset.actions
                    ],
                    members=list(iset.members),
                )
                for iset in game.infosets()
            ],
            nodes=[
                NodeView(
                    id=n,
                    name=game.node(n).name,
                    kind=game.node_kind(n).value,
                    parent=game.node(n).parent,
                    children=list(game.node(n).children),
                    infoset=game.node(n).infoset,
                    outcome=game.node(n).outcome,
                    subgame_root=game.node(n).subgame_root,
                )
                for n in game.nodes()
            ],
            outcomes=[
                OutcomeView(
                    id=o.id,
                    label=o.label,
                    payoffs={pl: to_json_number(v) for pl, v in o.payoffs.items()},
                )
                for o in game.outcomes()
            ],
        )


class GameSummary(BaseModel):
    """Lightweight game summary for listings."""

    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    players: list[str]
    number_type: NumberTypeName
    revision: int
    num_nodes: int
    profile_count: int
    warnings: list[str] = Field(default_factory=list)


class StrategyView(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    index: int
    label: str
    choices: dict[int, int] = Field(description="Information set -> action index")

    @classmethod
    def from_strategy(cls, strategy: Strategy) -> StrategyView:
        return cls(index=strategy.index, label=strategy.label, choices=strategy.behavior)


class PlayerStrategiesView(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    player: int
    name: str
    stride: int
    strategies: list[StrategyView]


class StrategicFormView(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    game_id: str
    revision: int
    profile_count: int
    detached: bool
    players: list[PlayerStrategiesView]

    @classmethod
    def from_normal_form(cls, game_id: str, nfg: NormalFormGame) -> StrategicFormView:
        return cls(
            game_id=game_id,
            revision=nfg.efg.revision,
            profile_count=nfg.profile_count,
            detached=nfg.detached,
            players=[
                PlayerStrategiesView(
                    player=pl,
                    name=nfg.player_name(pl),
                    stride=nfg.stride(pl),
                    strategies=[StrategyView.from_strategy(s) for s in nfg.strategies(pl)],
                )
                for pl in nfg.players
            ],
        )


class ContingencyView(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    index: int
    strategies: dict[int, int] = Field(description="Player -> strategy index")
    labels: dict[int, str]
    payoffs: dict[int, JsonNumber]

    @classmethod
    def from_contingency(cls, contingency: Contingency) -> ContingencyView:
        profile = contingency.profile()
        return cls(
            index=contingency.index,
            strategies={pl: s.index for pl, s in profile.items() if s is not None},
            labels={pl: s.label for pl, s in profile.items() if s is not None},
            payoffs={pl: to_json_number(v) for pl, v in contingency.payoffs().items()},
        )


class SupportView(BaseModel):
    """Contingencies enumerated inside a support, in index order."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    game_id: str
    label: str = ""
    num_strats: dict[int, int]
    contingencies: list[ContingencyView]


class SubgamesView(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    game_id: str
    legal: list[int] = Field(description="Legal subgame roots in preorder")
    marked: list[int]


class EditResult(BaseModel):
    """Return value of one edit command plus the game after it."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    result: int | list[int] | None = None
    game: GameView
