"""Strategic (normal) form derived from an extensive-form game.

A :class:`NormalFormGame` enumerates every personal player's pure
strategies and lays the profiles out in a mixed-radix index space: player
k has stride equal to the product of the strategy counts of players
1..k-1, and a profile's index is the sum of ``strategy.index * stride``.

Payoffs are read from a materialized outcome table when one exists and
otherwise by tracing the profile through the tree. Writing an outcome
into a cell detaches the normal form from its tree for good: from then on
only the table is consulted.
"""
from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping, Sequence
from dataclasses import dataclass, field
from itertools import product
from typing import Generic

from gametree.config import NormalFormConfig
from gametree.models.errors import StrategyError
from gametree.models.extensive_form import CHANCE, ExtensiveFormGame, payoff_vector
from gametree.models.numbers import Number, zero

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Strategy:
    """A pure strategy: one action index for each information set of a player."""

    player: int
    index: int
    label: str
    choices: tuple[tuple[int, int], ...] = ()

    @property
    def behavior(self) -> dict[int, int]:
        """Map from information set handle to the chosen action index."""
        return dict(self.choices)

    def action_at(self, infoset: int) -> int:
        for iset, action in self.choices:
            if iset == infoset:
                return action
        raise StrategyError(f"Strategy {self.label} has no choice at information set {infoset}")


@dataclass
class NfgOutcome(Generic[Number]):
    """A cell of the materialized outcome table."""

    payoffs: dict[int, Number]
    label: str = ""


def enumerate_strategies(game: ExtensiveFormGame, player: int) -> list[Strategy]:
    """Enumerate all pure strategies of ``player``.

    Information sets without members are ignored: they can never be
    reached, so choosing there would only duplicate strategies. A player
    without (reachable) information sets has a single empty strategy.
    The last information set varies fastest.
    """
    pl = game.player(player)
    if pl.is_chance:
        raise StrategyError("The chance player has no strategies")
    infosets = [game.infoset(i) for i in pl.infosets if game.infoset(i).members]

    strategies: list[Strategy] = []
    for index, combo in enumerate(product(*(range(iset.num_actions) for iset in infosets))):
        labels = [
            iset.actions[action].label or str(action + 1)
            for iset, action in zip(infosets, combo, strict=True)
        ]
        strategies.append(
            Strategy(
                player=pl.id,
                index=index,
                label="/".join(labels) if labels else "∅",
                choices=tuple((iset.id, action) for iset, action in zip(infosets, combo, strict=True)),
            )
        )
    return strategies


def count_profiles(game: ExtensiveFormGame) -> int:
    """Number of pure-strategy profiles, computed WITHOUT enumerating them."""
    total = 1
    for pl in game.personal_players():
        for i in pl.infosets:
            iset = game.infoset(i)
            if iset.members:
                total *= iset.num_actions
    return total


def trace_payoffs(
    game: ExtensiveFormGame, behavior: Mapping[int, Mapping[int, int]]
) -> dict[int, Number]:
    """Expected payoffs of a pure profile, found by walking the tree.

    Outcomes attached to every visited node add up along the path. Personal
    nodes follow the action chosen at their information set; chance nodes
    weight each child by its probability.

    Args:
        game: The extensive-form game.
        behavior: Maps player id -> (infoset handle -> action index).

    Raises:
        StrategyError: If the profile has no choice at a reached information set.
    """
    one = game.number_type(1)
    totals = payoff_vector(game, None)
    stack: list[tuple[int, Number]] = [(game.root, one)]
    while stack:
        node_id, weight = stack.pop()
        node = game.node(node_id)
        if node.outcome is not None:
            for pl, value in game.payoff(node.outcome).items():
                totals[pl] += weight * value
        if node.infoset is None:
            continue
        iset = game.infoset(node.infoset)
        if iset.player == CHANCE:
            for action, child in zip(iset.actions, node.children, strict=True):
                if action.probability:
                    stack.append((child, weight * action.probability))
            continue
        try:
            action = behavior[iset.player][iset.id]
        except KeyError:
            msg = f"Profile has no action for player {iset.player} at information set {iset.id}"
            raise StrategyError(msg) from None
        stack.append((node.children[action], weight))
    return totals


class NormalFormGame(Generic[Number]):
    """Strategic form of an extensive-form game.

    The strategy lists are derived from the game as it was at construction
    (or at the last :meth:`refresh`). While linked to the tree, any access
    notices a changed :attr:`ExtensiveFormGame.revision` and re-derives,
    invalidating older contingencies and supports.
    """

    def __init__(self, efg: ExtensiveFormGame[Number]) -> None:
        self._efg = efg
        self._detached = False
        self._generation = 0
        self._table: list[NfgOutcome[Number] | None] | None = None
        self._derive()

    def _derive(self) -> None:
        efg = self._efg
        self._players = [pl.id for pl in efg.personal_players()]
        self._strategies = {pl: enumerate_strategies(efg, pl) for pl in self._players}
        self._strides: dict[int, int] = {}
        stride = 1
        for pl in self._players:
            self._strides[pl] = stride
            stride *= len(self._strategies[pl])
        self._profile_count = stride
        self._revision = efg.revision
        self._table = None
        self._generation += 1
        logger.debug(
            "Derived normal form of %r: %d profiles (revision %d)",
            efg.title,
            self._profile_count,
            self._revision,
        )

    # ------------------------------------------------------------------
    # Cache state
    # ------------------------------------------------------------------

    @property
    def efg(self) -> ExtensiveFormGame[Number]:
        return self._efg

    @property
    def number_type(self) -> type:
        return self._efg.number_type

    @property
    def detached(self) -> bool:
        """True once an outcome was written directly; the tree is no longer consulted."""
        return self._detached

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def is_stale(self) -> bool:
        return not self._detached and self._efg.revision != self._revision

    @property
    def is_materialized(self) -> bool:
        return self._table is not None

    def refresh(self) -> bool:
        """Re-derive from the tree if it changed. Returns True if it did."""
        if not self.is_stale:
            return False
        self._derive()
        return True

    # ------------------------------------------------------------------
    # Strategies and index space
    # ------------------------------------------------------------------

    @property
    def players(self) -> list[int]:
        self.refresh()
        return list(self._players)

    def player_name(self, player: int) -> str:
        return self._efg.player(player).name

    def strategies(self, player: int) -> list[Strategy]:
        self.refresh()
        try:
            return list(self._strategies[player])
        except KeyError:
            raise StrategyError(f"No such player in the normal form: {player}") from None

    def num_strats(self, player: int) -> int:
        return len(self.strategies(player))

    def stride(self, player: int) -> int:
        self.refresh()
        return self._strides[player]

    @property
    def profile_count(self) -> int:
        """Size of the index space: the product of all strategy counts."""
        self.refresh()
        return self._profile_count

    def check_strategy(self, strategy: Strategy) -> None:
        """Raise StrategyError unless ``strategy`` belongs to the current derivation."""
        self.refresh()
        own = self._strategies.get(strategy.player)
        if own is None or not 0 <= strategy.index < len(own) or own[strategy.index] is not strategy:
            raise StrategyError(f"Strategy {strategy.label!r} does not belong to this normal form")

    def encode(self, profile: Mapping[int, Strategy]) -> int:
        """Flattened index of a complete profile, computed from scratch."""
        self.refresh()
        index = 0
        for pl in self._players:
            if pl not in profile:
                raise StrategyError(f"Profile has no strategy for player {pl}")
            self.check_strategy(profile[pl])
            index += profile[pl].index * self._strides[pl]
        return index

    def decode(self, index: int) -> dict[int, Strategy]:
        self.refresh()
        if not 0 <= index < self._profile_count:
            raise StrategyError(f"Profile index out of range: {index}")
        return {
            pl: self._strategies[pl][(index // self._strides[pl]) % len(self._strategies[pl])]
            for pl in self._players
        }

    def contingency(self, index: int = 0) -> Contingency:
        return Contingency.from_index(self, index)

    def contingencies(self) -> Iterator[Contingency]:
        """All profiles, in index order."""
        return Support(self).contingencies()

    # ------------------------------------------------------------------
    # Outcome table
    # ------------------------------------------------------------------

    def materialize(self) -> None:
        """Compute the outcome of every profile by tracing and keep the table.

        Raises:
            StrategyError: If the table would exceed the configured size limit.
        """
        if self._detached:
            return
        self.refresh()
        if self._profile_count > NormalFormConfig.MATERIALIZE_LIMIT:
            msg = (
                f"Too many strategy profiles ({self._profile_count:,}) to materialize; "
                f"limit is {NormalFormConfig.MATERIALIZE_LIMIT:,}"
            )
            raise StrategyError(msg)
        table: list[NfgOutcome[Number] | None] = []
        for index in range(self._profile_count):
            table.append(NfgOutcome(payoffs=self._trace(self.decode(index))))
        self._table = table
        logger.debug("Materialized %d outcomes for %r", len(table), self._efg.title)

    def _trace(self, profile: Mapping[int, Strategy]) -> dict[int, Number]:
        return trace_payoffs(self._efg, {pl: s.behavior for pl, s in profile.items()})

    def _check_index(self, index: int) -> None:
        if not 0 <= index < self._profile_count:
            raise StrategyError(f"Profile index out of range: {index}")

    def _zeros(self) -> dict[int, Number]:
        return {pl: zero(self.number_type) for pl in self._players}

    def get_outcome(self, index: int) -> NfgOutcome[Number] | None:
        """The table cell at ``index``; None when there is no table or no outcome."""
        self.refresh()
        self._check_index(index)
        if self._table is None:
            return None
        return self._table[index]

    def set_outcome(
        self, index: int, outcome: NfgOutcome[Number] | Mapping[int, object] | None
    ) -> None:
        """Write a cell directly. This detaches the normal form from the tree."""
        self.refresh()
        self._check_index(index)
        if outcome is not None and not isinstance(outcome, NfgOutcome):
            payoffs = self._zeros()
            for pl, value in outcome.items():
                if pl not in payoffs:
                    raise StrategyError(f"No such player in the normal form: {pl}")
                payoffs[pl] = self._efg.coerce(value)
            outcome = NfgOutcome(payoffs=payoffs)
        if self._table is None:
            self._table = [None] * self._profile_count
        self._table[index] = outcome
        if not self._detached:
            self._detached = True
            logger.debug("Normal form of %r detached from its tree", self._efg.title)

    def payoffs(self, index: int) -> dict[int, Number]:
        """Payoffs of the profile at ``index`` for every personal player."""
        self.refresh()
        self._check_index(index)
        if self._table is not None:
            cell = self._table[index]
            return dict(cell.payoffs) if cell is not None else self._zeros()
        return self._trace(self.decode(index))


class Contingency(Generic[Number]):
    """A pure-strategy profile, kept both as per-player strategies and as a flat index.

    Changing one player's strategy updates the index in constant time.
    """

    def __init__(self, nfg: NormalFormGame[Number]) -> None:
        nfg.refresh()
        self._nfg = nfg
        self._generation = nfg.generation
        self._profile: dict[int, Strategy | None] = {
            pl: nfg.strategies(pl)[0] for pl in nfg.players
        }
        self._index = 0

    @classmethod
    def from_index(cls, nfg: NormalFormGame[Number], index: int) -> Contingency[Number]:
        contingency = cls(nfg)
        for pl, strategy in nfg.decode(index).items():
            contingency.set(pl, strategy)
        return contingency

    @property
    def game(self) -> NormalFormGame[Number]:
        return self._nfg

    @property
    def index(self) -> int:
        self._check_current()
        return self._index

    def _check_current(self) -> None:
        self._nfg.refresh()
        if self._nfg.generation != self._generation:
            raise StrategyError("The game changed since this contingency was created")

    def _check_player(self, player: int) -> None:
        if player not in self._profile:
            raise StrategyError(f"No such player in the normal form: {player}")

    def _contribution(self, strategy: Strategy | None) -> int:
        if strategy is None:
            return 0
        return strategy.index * self._nfg.stride(strategy.player)

    def get(self, player: int) -> Strategy | None:
        self._check_current()
        self._check_player(player)
        return self._profile[player]

    def __getitem__(self, player: int) -> Strategy | None:
        return self.get(player)

    def set(self, player: int, strategy: Strategy) -> None:
        self._check_current()
        self._check_player(player)
        self._nfg.check_strategy(strategy)
        if strategy.player != player:
            raise StrategyError(f"Strategy {strategy.label!r} belongs to player {strategy.player}")
        self._index += self._contribution(strategy) - self._contribution(self._profile[player])
        self._profile[player] = strategy

    def clear(self, player: int) -> None:
        """Leave ``player``'s slot empty; the contingency becomes invalid."""
        self._check_current()
        self._check_player(player)
        self._index -= self._contribution(self._profile[player])
        self._profile[player] = None

    def is_valid(self) -> bool:
        self._check_current()
        return all(s is not None for s in self._profile.values())

    def profile(self) -> dict[int, Strategy | None]:
        self._check_current()
        return dict(self._profile)

    def _require_valid(self) -> None:
        self._check_current()
        if not self.is_valid():
            empty = [pl for pl, s in self._profile.items() if s is None]
            raise StrategyError(f"Contingency has no strategy for players {empty}")

    def get_outcome(self) -> NfgOutcome[Number] | None:
        self._require_valid()
        return self._nfg.get_outcome(self._index)

    def set_outcome(self, outcome: NfgOutcome[Number] | Mapping[int, object] | None) -> None:
        self._require_valid()
        self._nfg.set_outcome(self._index, outcome)

    def payoffs(self) -> dict[int, Number]:
        self._require_valid()
        return self._nfg.payoffs(self._index)

    def payoff(self, player: int) -> Number:
        self._check_player(player)
        return self.payoffs()[player]

    def __repr__(self) -> str:
        labels = {pl: (s.label if s else None) for pl, s in self._profile.items()}
        return f"Contingency(index={self._index}, profile={labels})"


@dataclass
class Support:
    """A restriction of each player's strategies to a subset.

    A new support contains every strategy.
    """

    nfg: NormalFormGame
    label: str = ""
    _flags: dict[int, list[bool]] = field(default_factory=dict, init=False, repr=False)
    _generation: int = field(default=0, init=False, repr=False)

    def __post_init__(self) -> None:
        self.nfg.refresh()
        self._generation = self.nfg.generation
        self._flags = {pl: [True] * self.nfg.num_strats(pl) for pl in self.nfg.players}

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Support):
            return NotImplemented
        if self.nfg is not other.nfg:
            return False
        self._check_current()
        other._check_current()
        return self._flags == other._flags

    def copy(self, label: str | None = None) -> Support:
        self._check_current()
        clone = Support(self.nfg, self.label if label is None else label)
        clone._flags = {pl: list(flags) for pl, flags in self._flags.items()}
        clone._generation = self._generation
        return clone

    def _check_current(self) -> None:
        self.nfg.refresh()
        if self.nfg.generation != self._generation:
            raise StrategyError("The game changed since this support was created")

    def _flags_for(self, player: int) -> list[bool]:
        self._check_current()
        try:
            return self._flags[player]
        except KeyError:
            raise StrategyError(f"No such player in the normal form: {player}") from None

    def add_strategy(self, strategy: Strategy) -> None:
        self.nfg.check_strategy(strategy)
        self._flags_for(strategy.player)[strategy.index] = True

    def remove_strategy(self, strategy: Strategy) -> None:
        self.nfg.check_strategy(strategy)
        self._flags_for(strategy.player)[strategy.index] = False

    def contains(self, strategy: Strategy) -> bool:
        self.nfg.check_strategy(strategy)
        return self._flags_for(strategy.player)[strategy.index]

    def __contains__(self, strategy: Strategy) -> bool:
        return self.contains(strategy)

    def num_strats(self, player: int) -> int:
        return sum(self._flags_for(player))

    def num_strats_by_player(self) -> dict[int, int]:
        self._check_current()
        return {pl: sum(flags) for pl, flags in self._flags.items()}

    def profile_length(self) -> int:
        """Total number of strategies in the support, over all players."""
        self._check_current()
        return sum(sum(flags) for flags in self._flags.values())

    def strategies(self, player: int) -> list[Strategy]:
        all_strats = self.nfg.strategies(player)
        return [s for s, flag in zip(all_strats, self._flags_for(player), strict=True) if flag]

    def get_strategy(self, player: int, k: int) -> Strategy:
        """The ``k``-th (0-based) strategy of ``player`` in the support."""
        found = -1
        for strategy, flag in zip(self.nfg.strategies(player), self._flags_for(player), strict=True):
            if flag:
                found += 1
                if found == k:
                    return strategy
        raise StrategyError(f"Player {player} has no strategy {k} in the support")

    def index_of(self, strategy: Strategy) -> int:
        """Position of ``strategy`` among its player's strategies in the support."""
        for k, s in enumerate(self.strategies(strategy.player)):
            if s is strategy:
                return k
        raise StrategyError(f"Strategy {strategy.label!r} is not in the support")

    def is_subset(self, other: Support) -> bool:
        """True if every strategy in this support is also in ``other`` (same game only)."""
        if self.nfg is not other.nfg:
            return False
        self._check_current()
        other._check_current()
        for pl, flags in self._flags.items():
            theirs = other._flags.get(pl, [])
            if len(theirs) != len(flags):
                return False
            if any(mine and not their for mine, their in zip(flags, theirs, strict=True)):
                return False
        return True

    def is_valid(self) -> bool:
        """True if every player keeps at least one strategy."""
        self._check_current()
        return all(any(flags) for flags in self._flags.values())

    def contingencies(self) -> Iterator[Contingency]:
        """Enumerate the contingencies inside the support, in index order."""
        self._check_current()
        players = self.nfg.players
        per_player: Sequence[list[Strategy]] = [self.strategies(pl) for pl in reversed(players)]
        for combo in product(*per_player):
            contingency = Contingency(self.nfg)
            for strategy in combo:
                contingency.set(strategy.player, strategy)
            yield contingency
