from __future__ import annotations

import logging

from fastapi import APIRouter
from pydantic import BaseModel, ConfigDict, Field

from gametree.core.errors import bad_request, from_game_error, not_found
from gametree.dependencies import GameStoreDep
from gametree.models.errors import GameError
from gametree.models.extensive_form import ExtensiveFormGame
from gametree.models.numbers import NumberTypeName, number_type_from_name
from gametree.models.views import GameSummary, GameView

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api", tags=["games"])


class CreateGameRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    title: str = "Untitled game"
    players: list[str] = Field(default_factory=lambda: ["Player 1", "Player 2"])
    number_type: NumberTypeName = "float"
    id: str | None = Field(default=None, description="Game ID; generated when omitted")


@router.get("/games", response_model=list[GameSummary])
def list_games(store: GameStoreDep) -> list[GameSummary]:
    """List all loaded games."""
    return store.list()


@router.post("/games", response_model=GameView)
def create_game(request: CreateGameRequest, store: GameStoreDep) -> GameView:
    """Create a game whose tree is a single terminal root."""
    if request.id is not None and request.id in store:
        raise bad_request(f"Game already exists: {request.id}")
    game = ExtensiveFormGame(
        request.players,
        title=request.title,
        number_type=number_type_from_name(request.number_type),
    )
    game_id = store.add(game, request.id)
    return store.read(game_id, lambda g: GameView.from_game(game_id, g))


@router.get("/games/{game_id}", response_model=GameView)
def get_game(game_id: str, store: GameStoreDep) -> GameView:
    try:
        return store.read(game_id, lambda g: GameView.from_game(game_id, g))
    except GameError as e:
        raise from_game_error(e) from e


@router.get("/games/{game_id}/summary", response_model=GameSummary)
def get_game_summary(game_id: str, store: GameStoreDep) -> GameSummary:
    """Get game summary, including strategy profile count and warnings."""
    summary = store.get_summary(game_id)
    if summary is None:
        raise not_found("Game", game_id)
    return summary


@router.delete("/games/{game_id}")
def delete_game(game_id: str, store: GameStoreDep) -> dict:
    """Delete a game."""
    if not store.remove(game_id):
        raise not_found("Game", game_id)
    logger.info("Deleted game: %s", game_id)
    return {"status": "deleted", "id": game_id}
