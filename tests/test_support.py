"""Tests for strategy supports."""
from __future__ import annotations

import pytest

from gametree.models import ExtensiveFormGame, NormalFormGame, StrategyError, Support


@pytest.fixture
def nfg(pennies: ExtensiveFormGame) -> NormalFormGame:
    return NormalFormGame(pennies)


class TestSupport:
    def test_full_support(self, nfg: NormalFormGame):
        support = Support(nfg, "all")
        assert support.label == "all"
        assert support.num_strats(1) == 2
        assert support.num_strats_by_player() == {1: 2, 2: 2}
        assert support.profile_length() == 4
        assert all(s in support for pl in nfg.players for s in nfg.strategies(pl))
        assert support.is_valid()

    def test_enumeration_in_index_order(self, nfg: NormalFormGame):
        assert [c.index for c in Support(nfg).contingencies()] == [0, 1, 2, 3]

    def test_removing_a_strategy_shrinks_enumeration(self, nfg: NormalFormGame):
        support = Support(nfg)
        support.remove_strategy(nfg.strategies(1)[1])
        contingencies = list(support.contingencies())
        assert [c.index for c in contingencies] == [0, 2]
        assert [c.payoffs() for c in contingencies] == [{1: 1, 2: 0}, {1: 0, 2: 1}]
        assert all(c.get(1) is nfg.strategies(1)[0] for c in contingencies)

    def test_add_back(self, nfg: NormalFormGame):
        support = Support(nfg)
        tails = nfg.strategies(2)[1]
        support.remove_strategy(tails)
        assert not support.contains(tails)
        support.add_strategy(tails)
        assert support.contains(tails)

    def test_get_strategy_and_index_of(self, nfg: NormalFormGame):
        support = Support(nfg)
        heads, tails = nfg.strategies(1)
        support.remove_strategy(heads)
        assert support.get_strategy(1, 0) is tails
        assert support.index_of(tails) == 0
        assert support.strategies(1) == [tails]
        with pytest.raises(StrategyError):
            support.get_strategy(1, 1)
        with pytest.raises(StrategyError):
            support.index_of(heads)

    def test_empty_player_is_invalid(self, nfg: NormalFormGame):
        support = Support(nfg)
        for strategy in nfg.strategies(2):
            support.remove_strategy(strategy)
        assert not support.is_valid()
        assert support.num_strats(2) == 0
        assert list(support.contingencies()) == []

    def test_unknown_player(self, nfg: NormalFormGame):
        with pytest.raises(StrategyError):
            Support(nfg).num_strats(5)

    def test_stale_after_edit(self, pennies: ExtensiveFormGame, nfg: NormalFormGame):
        support = Support(nfg)
        strategy = nfg.strategies(1)[0]
        pennies.split_infoset(pennies.children(pennies.root)[1])
        with pytest.raises(StrategyError):
            support.num_strats(1)
        with pytest.raises(StrategyError):
            support.contains(strategy)

    def test_every_query_refuses_when_stale(
        self, pennies: ExtensiveFormGame, nfg: NormalFormGame
    ):
        support = Support(nfg)
        before = support.copy()
        pennies.split_infoset(pennies.children(pennies.root)[1])
        after = Support(nfg)
        stale_calls = [
            support.num_strats_by_player,
            support.profile_length,
            support.is_valid,
            support.copy,
            lambda: support.is_subset(after),
            lambda: after.is_subset(support),
            lambda: support.is_subset(before),
            lambda: support == after,
            lambda: after == support,
            lambda: list(support.contingencies()),
        ]
        for call in stale_calls:
            with pytest.raises(StrategyError):
                call()
        assert after.num_strats_by_player() == {1: 2, 2: 4}
        assert after.is_valid()


class TestSubsetAndEquality:
    def test_subset_law(self, nfg: NormalFormGame):
        full = Support(nfg)
        smaller = full.copy()
        smaller.remove_strategy(nfg.strategies(2)[0])
        assert smaller.is_subset(full)
        assert not full.is_subset(smaller)
        assert full.is_subset(full)

    def test_disjoint_supports(self, nfg: NormalFormGame):
        a, b = Support(nfg), Support(nfg)
        a.remove_strategy(nfg.strategies(1)[0])
        b.remove_strategy(nfg.strategies(1)[1])
        assert not a.is_subset(b)
        assert not b.is_subset(a)

    def test_different_games_never_subsets(self, pennies: ExtensiveFormGame, nfg: NormalFormGame):
        other = NormalFormGame(pennies)
        assert not Support(nfg).is_subset(Support(other))
        assert Support(nfg) != Support(other)

    def test_equality(self, nfg: NormalFormGame):
        a = Support(nfg, "a")
        b = a.copy("b")
        assert a == b
        b.remove_strategy(nfg.strategies(1)[0])
        assert a != b

    def test_copy_is_independent(self, nfg: NormalFormGame):
        a = Support(nfg)
        b = a.copy()
        b.remove_strategy(nfg.strategies(1)[0])
        assert a.num_strats(1) == 2
        assert b.label == a.label
