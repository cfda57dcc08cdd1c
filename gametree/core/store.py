"""In-memory store for editable games."""
from __future__ import annotations

import logging
import uuid
from collections.abc import Callable
from threading import Lock
from typing import TypeVar

from gametree.config import NormalFormConfig, StoreConfig
from gametree.models.errors import InvalidReferenceError
from gametree.models.extensive_form import ExtensiveFormGame
from gametree.models.normal_form import NormalFormGame, count_profiles
from gametree.models.numbers import number_type_name
from gametree.models.views import GameSummary

logger = logging.getLogger(__name__)

T = TypeVar("T")


class GameStore:
    """Thread-safe in-memory store of editable games.

    Every game is paired with a lazily built strategic form. The strategic
    form watches the game's revision counter and re-derives itself after
    edits, so the store never has to invalidate it by hand.

    All access to a game goes through :meth:`edit` or :meth:`inspect`, which
    hold the store lock for the duration of the callback.
    """

    def __init__(self) -> None:
        self._games: dict[str, ExtensiveFormGame] = {}
        self._normal_forms: dict[str, NormalFormGame] = {}
        self._lock = Lock()

    def add(self, game: ExtensiveFormGame, game_id: str | None = None) -> str:
        """Add a game to the store. Returns game ID."""
        game_id = game_id or uuid.uuid4().hex[: StoreConfig.GAME_ID_LENGTH]
        with self._lock:
            self._games[game_id] = game
            self._normal_forms.pop(game_id, None)
        logger.info("Added game: %s (%s)", game.title, game_id)
        return game_id

    def _game_unlocked(self, game_id: str) -> ExtensiveFormGame:
        game = self._games.get(game_id)
        if game is None:
            raise InvalidReferenceError("Game", game_id)
        return game

    def _normal_form_unlocked(self, game_id: str) -> NormalFormGame:
        nfg = self._normal_forms.get(game_id)
        if nfg is None or nfg.detached:
            nfg = NormalFormGame(self._games[game_id])
            self._normal_forms[game_id] = nfg
        return nfg

    def read(self, game_id: str, operation: Callable[[ExtensiveFormGame], T]) -> T:
        """Run a read-only ``operation`` on the game while holding the store lock."""
        with self._lock:
            return operation(self._game_unlocked(game_id))

    def edit(self, game_id: str, operation: Callable[[ExtensiveFormGame], T]) -> T:
        """Run ``operation`` on the game while holding the store lock.

        Raises:
            InvalidReferenceError: If no game has this ID.
        """
        with self._lock:
            game = self._game_unlocked(game_id)
            before = game.revision
            result = operation(game)
            after = game.revision
        if after != before:
            logger.debug("Edited game %s: revision %d -> %d", game_id, before, after)
        return result

    def inspect(
        self, game_id: str, operation: Callable[[ExtensiveFormGame, NormalFormGame], T]
    ) -> T:
        """Run ``operation`` on the game and its strategic form under the store lock."""
        with self._lock:
            game = self._game_unlocked(game_id)
            return operation(game, self._normal_form_unlocked(game_id))

    def get(self, game_id: str) -> ExtensiveFormGame | None:
        """Get a game by ID."""
        with self._lock:
            return self._games.get(game_id)

    def _summarize(self, game_id: str, game: ExtensiveFormGame) -> GameSummary:
        profiles = count_profiles(game)
        warnings = []
        if profiles > NormalFormConfig.PROFILE_COUNT_WARNING_THRESHOLD:
            warnings.append(f"Large strategic form: {profiles:,} strategy profiles")
        return GameSummary(
            id=game_id,
            title=game.title,
            players=[pl.name for pl in game.personal_players()],
            number_type=number_type_name(game.number_type),
            revision=game.revision,
            num_nodes=sum(1 for _ in game.nodes()),
            profile_count=profiles,
            warnings=warnings,
        )

    def list(self) -> list[GameSummary]:
        """List all games as lightweight summaries."""
        with self._lock:
            return [self._summarize(gid, game) for gid, game in self._games.items()]

    def get_summary(self, game_id: str) -> GameSummary | None:
        with self._lock:
            game = self._games.get(game_id)
            if game is None:
                return None
            return self._summarize(game_id, game)

    def remove(self, game_id: str) -> bool:
        """Remove a game. Returns True if game existed."""
        with self._lock:
            if game_id in self._games:
                del self._games[game_id]
                self._normal_forms.pop(game_id, None)
                return True
            return False

    def clear(self) -> None:
        """Remove all games."""
        with self._lock:
            self._games.clear()
            self._normal_forms.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._games)

    def __contains__(self, game_id: str) -> bool:
        with self._lock:
            return game_id in self._games
