"""Tests for the in-memory game store."""
from __future__ import annotations

import pytest

from gametree.config import NormalFormConfig, StoreConfig
from gametree.core.samples import SAMPLE_GAMES, load_sample_games, matching_pennies
from gametree.core.store import GameStore
from gametree.models import InvalidReferenceError


class TestGameStore:
    def test_add_and_get(self, store: GameStore):
        game = matching_pennies()
        game_id = store.add(game)
        assert len(game_id) == StoreConfig.GAME_ID_LENGTH
        assert store.get(game_id) is game
        assert game_id in store
        assert len(store) == 1

    def test_add_with_id(self, store: GameStore):
        assert store.add(matching_pennies(), "pennies") == "pennies"
        assert store.get("pennies") is not None

    def test_remove(self, store: GameStore):
        store.add(matching_pennies(), "pennies")
        assert store.remove("pennies")
        assert not store.remove("pennies")
        assert store.get("pennies") is None

    def test_summary(self, store: GameStore):
        store.add(matching_pennies(), "pennies")
        summary = store.get_summary("pennies")
        assert summary.title == "Matching Pennies"
        assert summary.players == ["Player 1", "Player 2"]
        assert summary.number_type == "float"
        assert summary.num_nodes == 7
        assert summary.profile_count == 4
        assert summary.warnings == []
        assert store.get_summary("missing") is None

    def test_summary_warns_on_large_games(self, store: GameStore, monkeypatch):
        monkeypatch.setattr(NormalFormConfig, "PROFILE_COUNT_WARNING_THRESHOLD", 3)
        store.add(matching_pennies(), "pennies")
        assert store.get_summary("pennies").warnings

    def test_edit(self, store: GameStore):
        store.add(matching_pennies(), "pennies")
        revision = store.get("pennies").revision
        outcome = store.edit("pennies", lambda g: g.new_outcome([1, 1]))
        assert store.get("pennies").outcome(outcome).payoffs == {1: 1, 2: 1}
        assert store.get("pennies").revision == revision + 1

    def test_unknown_game(self, store: GameStore):
        with pytest.raises(InvalidReferenceError):
            store.edit("missing", lambda g: None)
        with pytest.raises(InvalidReferenceError):
            store.inspect("missing", lambda g, nfg: None)
        with pytest.raises(InvalidReferenceError):
            store.read("missing", lambda g: None)

    def test_normal_form_is_cached(self, store: GameStore):
        store.add(matching_pennies(), "pennies")
        first = store.inspect("pennies", lambda g, nfg: nfg)
        assert store.inspect("pennies", lambda g, nfg: nfg) is first
        store.edit("pennies", lambda g: g.split_infoset(g.children(g.root)[1]))
        assert store.inspect("pennies", lambda g, nfg: nfg.profile_count) == 8

    def test_detached_normal_form_is_replaced(self, store: GameStore):
        store.add(matching_pennies(), "pennies")
        first = store.inspect("pennies", lambda g, nfg: nfg)
        first.set_outcome(0, {1: 9})
        second = store.inspect("pennies", lambda g, nfg: nfg)
        assert second is not first
        assert second.payoffs(0) == {1: 1, 2: 0}

    def test_clear(self, store: GameStore):
        load_sample_games(store)
        assert len(store) == len(SAMPLE_GAMES)
        assert {s.id for s in store.list()} == set(SAMPLE_GAMES)
        store.clear()
        assert store.list() == []
