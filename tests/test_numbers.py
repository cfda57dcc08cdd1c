"""Tests for payoff number coercion."""
from __future__ import annotations

from fractions import Fraction

import pytest

from gametree.models.errors import GameError
from gametree.models.numbers import (
    coerce,
    number_type_from_name,
    number_type_name,
    sums_to_one,
    to_json_number,
)


class TestCoerce:
    @pytest.mark.parametrize(
        ("value", "expected"),
        [(1, Fraction(1)), ("1/3", Fraction(1, 3)), (0.1, Fraction(1, 10)), (" 2 ", Fraction(2))],
    )
    def test_rational(self, value, expected):
        result = coerce(value, Fraction)
        assert result == expected
        assert isinstance(result, Fraction)

    @pytest.mark.parametrize(("value", "expected"), [(1, 1.0), ("0.25", 0.25), (Fraction(1, 2), 0.5)])
    def test_float(self, value, expected):
        result = coerce(value, float)
        assert result == expected
        assert isinstance(result, float)

    @pytest.mark.parametrize("value", [True, "abc", "1/0", None, [1]])
    def test_rejects_non_numbers(self, value):
        with pytest.raises(GameError):
            coerce(value, float)

    def test_rejects_infinity_for_rationals(self):
        with pytest.raises(GameError):
            coerce(float("inf"), Fraction)


class TestHelpers:
    def test_type_names(self):
        assert number_type_from_name("rational") is Fraction
        assert number_type_name(float) == "float"
        with pytest.raises(GameError):
            number_type_from_name("complex")

    def test_sums_to_one(self):
        assert sums_to_one([Fraction(1, 3)] * 3, Fraction)
        assert not sums_to_one([Fraction(1, 3)] * 2, Fraction)
        assert sums_to_one([0.1] * 10, float)

    def test_to_json_number(self):
        assert to_json_number(Fraction(2, 4)) == "1/2"
        assert to_json_number(Fraction(3)) == "3"
        assert to_json_number(0.5) == 0.5
