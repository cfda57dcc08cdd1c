"""Shared test fixtures for the game tree package."""
from __future__ import annotations

from fractions import Fraction

import pytest
from fastapi.testclient import TestClient

from gametree.core.samples import biased_coin, matching_pennies, trust_game
from gametree.core.store import GameStore
from gametree.dependencies import reset_dependencies
from gametree.main import app
from gametree.models import ExtensiveFormGame


@pytest.fixture
def pennies() -> ExtensiveFormGame:
    """Matching pennies: payoffs (1,0), (0,1), (0,1), (1,0) left to right."""
    return matching_pennies()


@pytest.fixture
def rational_pennies() -> ExtensiveFormGame:
    return matching_pennies(Fraction)


@pytest.fixture
def trust() -> ExtensiveFormGame:
    return trust_game()


@pytest.fixture
def coin() -> ExtensiveFormGame:
    return biased_coin()


@pytest.fixture
def sequential() -> ExtensiveFormGame:
    """Player 1 picks L or R, then player 2 (who sees it) picks l or r.

    Each of player 2's nodes is in its own information set.
    """
    game = ExtensiveFormGame(["Alice", "Bob"], title="Sequential")
    game.add_move(game.root, player=1, actions=["L", "R"])
    for node in game.children(game.root):
        game.add_move(node, player=2, actions=["l", "r"])
    return game


@pytest.fixture
def store() -> GameStore:
    return GameStore()


@pytest.fixture
def client():
    reset_dependencies()
    with TestClient(app) as c:
        yield c
    reset_dependencies()
