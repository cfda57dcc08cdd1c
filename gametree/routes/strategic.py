"""Strategic-form queries: strategies, profile payoffs and supports."""
from __future__ import annotations

import logging
from math import prod

from fastapi import APIRouter
from pydantic import BaseModel, ConfigDict, Field

from gametree.config import NormalFormConfig
from gametree.core.errors import bad_request, from_game_error, too_many_profiles
from gametree.dependencies import GameStoreDep
from gametree.models.errors import GameError
from gametree.models.extensive_form import ExtensiveFormGame
from gametree.models.normal_form import NormalFormGame, Support
from gametree.models.views import (
    ContingencyView,
    StrategicFormView,
    SupportView,
)

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api", tags=["strategic"])


class ProfileRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    strategies: dict[int, int] = Field(description="Player -> strategy index, for every player")


class SupportRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    strategies: dict[int, list[int]] = Field(
        default_factory=dict,
        description="Player -> strategy indices to keep; unlisted players keep all",
    )
    label: str = ""
    materialize: bool = Field(default=False, description="Build the full outcome table first")


@router.get("/games/{game_id}/strategies", response_model=StrategicFormView)
def get_strategies(game_id: str, store: GameStoreDep) -> StrategicFormView:
    """Pure strategies of every personal player with their index strides."""
    try:
        return store.inspect(
            game_id, lambda _game, nfg: StrategicFormView.from_normal_form(game_id, nfg)
        )
    except GameError as e:
        raise from_game_error(e) from e


@router.post("/games/{game_id}/payoffs", response_model=ContingencyView)
def get_profile_payoffs(
    game_id: str, request: ProfileRequest, store: GameStoreDep
) -> ContingencyView:
    """Payoffs of one pure-strategy profile."""

    def evaluate(_game: ExtensiveFormGame, nfg: NormalFormGame) -> ContingencyView:
        missing = [pl for pl in nfg.players if pl not in request.strategies]
        if missing:
            raise bad_request(f"Profile has no strategy for players {missing}")
        contingency = nfg.contingency()
        for pl, k in request.strategies.items():
            strategies = nfg.strategies(pl)
            if not 0 <= k < len(strategies):
                raise bad_request(f"Player {pl} has no strategy {k}")
            contingency.set(pl, strategies[k])
        return ContingencyView.from_contingency(contingency)

    try:
        return store.inspect(game_id, evaluate)
    except GameError as e:
        raise from_game_error(e) from e


@router.post("/games/{game_id}/support", response_model=SupportView)
def enumerate_support(
    game_id: str, request: SupportRequest, store: GameStoreDep
) -> SupportView:
    """Enumerate every contingency inside a support, with payoffs."""

    def enumerate_(_game: ExtensiveFormGame, nfg: NormalFormGame) -> SupportView:
        support = Support(nfg, request.label)
        for pl, keep in request.strategies.items():
            strategies = nfg.strategies(pl)
            bad = [k for k in keep if not 0 <= k < len(strategies)]
            if bad:
                raise bad_request(f"Player {pl} has no strategies {bad}")
            for k, strategy in enumerate(strategies):
                if k not in keep:
                    support.remove_strategy(strategy)
        if not support.is_valid():
            raise bad_request("Every player needs at least one strategy in the support")
        counts = support.num_strats_by_player()
        total = prod(counts.values())
        if total > NormalFormConfig.ENUMERATION_LIMIT:
            raise too_many_profiles(total, NormalFormConfig.ENUMERATION_LIMIT)
        if request.materialize:
            # The table covers the whole game, not just the support
            if nfg.profile_count > NormalFormConfig.ENUMERATION_LIMIT:
                raise too_many_profiles(nfg.profile_count, NormalFormConfig.ENUMERATION_LIMIT)
            nfg.materialize()
        logger.debug("Enumerating %d contingencies of game %s", total, game_id)
        return SupportView(
            game_id=game_id,
            label=support.label,
            num_strats=counts,
            contingencies=[ContingencyView.from_contingency(c) for c in support.contingencies()],
        )

    try:
        return store.inspect(game_id, enumerate_)
    except GameError as e:
        raise from_game_error(e) from e
