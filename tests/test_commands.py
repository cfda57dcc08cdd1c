"""Tests for the editing command models."""
from __future__ import annotations

import inspect
from typing import Literal, get_args

import pytest
from pydantic import TypeAdapter, ValidationError

from gametree.core.commands import EditCommand, MarkSubgames, Rename, _Command
from gametree.models import ExtensiveFormGame


def _command_classes() -> tuple[type[_Command], ...]:
    union = get_args(EditCommand)[0]
    return get_args(union)


class TestCommandUnion:
    @pytest.mark.parametrize("command", _command_classes(), ids=lambda c: c.__name__)
    def test_every_command_applies(self, command: type[_Command]):
        assert not inspect.isabstract(command)
        assert command.apply is not _Command.apply

    def test_ops_are_unique(self):
        ops = [c.model_fields["op"].default for c in _command_classes()]
        assert len(ops) == len(set(ops))

    def test_command_without_apply_cannot_be_built(self):
        class Unfinished(_Command):
            op: Literal["unfinished"] = "unfinished"

        with pytest.raises(TypeError):
            Unfinished()

    def test_parse_by_op(self):
        adapter = TypeAdapter(EditCommand)
        command = adapter.validate_python({"op": "mark_subgames"})
        assert isinstance(command, MarkSubgames)
        with pytest.raises(ValidationError):
            adapter.validate_python({"op": "mark_subgames", "extra": 1})


class TestApply:
    def test_mark_all_subgames(self, trust: ExtensiveFormGame):
        marked = MarkSubgames().apply(trust)
        assert marked == trust.legal_subgame_roots()

    def test_rename_player(self, trust: ExtensiveFormGame):
        Rename(target="player", id=1, name="Lender").apply(trust)
        assert trust.player(1).name == "Lender"
