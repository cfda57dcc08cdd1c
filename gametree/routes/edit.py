from __future__ import annotations

import logging

from fastapi import APIRouter
from pydantic import BaseModel, ConfigDict

from gametree.core.commands import EditCommand
from gametree.core.errors import from_game_error
from gametree.dependencies import GameStoreDep
from gametree.models.errors import GameError
from gametree.models.extensive_form import ExtensiveFormGame
from gametree.models.views import EditResult, GameView, SubgamesView

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api", tags=["edit"])


class EditRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    command: EditCommand


@router.post("/games/{game_id}/edit", response_model=EditResult)
def edit_game(game_id: str, request: EditRequest, store: GameStoreDep) -> EditResult:
    """Apply one editing command to a game.

    A rejected command leaves the game unchanged. Unknown handles give 404,
    any other rejection 400.
    """
    command = request.command

    def apply(game: ExtensiveFormGame) -> EditResult:
        result = command.apply(game)
        return EditResult(result=result, game=GameView.from_game(game_id, game))

    try:
        return store.edit(game_id, apply)
    except GameError as e:
        logger.info("Rejected %s on game %s: %s", command.op, game_id, e)
        raise from_game_error(e) from e


@router.get("/games/{game_id}/subgames", response_model=SubgamesView)
def get_subgames(game_id: str, store: GameStoreDep) -> SubgamesView:
    """Legal and currently marked subgame roots, both in preorder."""

    def collect(game: ExtensiveFormGame) -> SubgamesView:
        return SubgamesView(
            game_id=game_id,
            legal=game.legal_subgame_roots(),
            marked=[n for n in game.nodes() if game.node(n).subgame_root],
        )

    try:
        return store.read(game_id, collect)
    except GameError as e:
        raise from_game_error(e) from e
