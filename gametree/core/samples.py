"""Built-in sample games, loaded into the store at startup."""
from __future__ import annotations

import logging
from collections.abc import Callable
from fractions import Fraction

from gametree.core.store import GameStore
from gametree.models.extensive_form import CHANCE, ExtensiveFormGame

logger = logging.getLogger(__name__)


def matching_pennies(number_type: type = float) -> ExtensiveFormGame:
    """Player 2 moves without seeing player 1's coin.

    Terminal payoffs, left to right: (1, 0), (0, 1), (0, 1), (1, 0).
    """
    game = ExtensiveFormGame(
        ["Player 1", "Player 2"], title="Matching Pennies", number_type=number_type
    )
    game.add_move(game.root, player=1, actions=["Heads", "Tails"])
    left, right = game.children(game.root)
    guess = game.add_move(left, player=2, actions=["Heads", "Tails"])
    game.add_move(right, guess)
    match = game.new_outcome([1, 0], "Match")
    mismatch = game.new_outcome([0, 1], "Mismatch")
    for node, outcome in zip(game.terminal_nodes(), [match, mismatch, mismatch, match], strict=True):
        game.set_outcome(node, outcome)
    return game


def trust_game() -> ExtensiveFormGame:
    """Investor trusts or not; a trusted trustee honors or betrays."""
    game = ExtensiveFormGame(["Investor", "Trustee"], title="Trust Game")
    game.add_move(game.root, player=1, actions=["Trust", "Distrust"])
    trust, distrust = game.children(game.root)
    game.add_move(trust, player=2, actions=["Honor", "Betray"])
    honor, betray = game.children(trust)
    game.set_outcome(honor, game.new_outcome([2, 2], "Honored"))
    game.set_outcome(betray, game.new_outcome([-1, 3], "Betrayed"))
    game.set_outcome(distrust, game.new_outcome([0, 0], "No deal"))
    return game


def biased_coin() -> ExtensiveFormGame:
    """A 2/3-heads coin is tossed; the guesser does not see it. Exact payoffs."""
    game = ExtensiveFormGame(["Guesser", "Tosser"], title="Biased Coin", number_type=Fraction)
    toss = game.add_move(game.root, player=CHANCE, actions=["Heads", "Tails"])
    game.set_chance_probs(toss, ["2/3", "1/3"])
    heads, tails = game.children(game.root)
    guess = game.add_move(heads, player=1, actions=["Heads", "Tails"])
    game.add_move(tails, guess)
    right = game.new_outcome([1, -1], "Right")
    wrong = game.new_outcome([-1, 1], "Wrong")
    for node, outcome in zip(game.terminal_nodes(), [right, wrong, wrong, right], strict=True):
        game.set_outcome(node, outcome)
    return game


SAMPLE_GAMES: dict[str, Callable[[], ExtensiveFormGame]] = {
    "matching-pennies": matching_pennies,
    "trust-game": trust_game,
    "biased-coin": biased_coin,
}


def load_sample_games(store: GameStore) -> None:
    for game_id, build in SAMPLE_GAMES.items():
        store.add(build(), game_id)
    logger.info("Loaded %d sample games", len(SAMPLE_GAMES))
