"""FastAPI dependency injection factories and shared type aliases.

Usage in routes:
    from gametree.dependencies import GameStoreDep

    @router.get("/games")
    def list_games(store: GameStoreDep) -> list[GameSummary]:
        return store.list()

Usage in tests:
    app.dependency_overrides[get_game_store] = lambda: GameStore()
"""

from __future__ import annotations

from functools import lru_cache
from typing import Annotated

from fastapi import Depends

from gametree.core.store import GameStore


@lru_cache(maxsize=1)
def get_game_store() -> GameStore:
    """Get the game store singleton."""
    return GameStore()


def reset_dependencies() -> None:
    """Reset all cached dependencies.

    Call this in test fixtures to ensure fresh instances between tests.
    """
    get_game_store.cache_clear()


GameStoreDep = Annotated[GameStore, Depends(get_game_store)]
