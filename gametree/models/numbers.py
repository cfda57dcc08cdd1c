"""Numeric types usable for payoffs and chance probabilities.

A game is built over exactly one of them: ``float`` for approximate
arithmetic or ``fractions.Fraction`` for exact rational arithmetic.
"""
from __future__ import annotations

import math
from collections.abc import Iterable
from fractions import Fraction
from typing import Literal, TypeVar, Union

from gametree.models.errors import GameError

Number = TypeVar("Number", float, Fraction)
AnyNumber = Union[float, Fraction]
NumberTypeName = Literal["float", "rational"]

NUMBER_TYPES: dict[str, type] = {
    "float": float,
    "rational": Fraction,
}


def number_type_from_name(name: str) -> type:
    """Return the numeric type registered under ``name``."""
    try:
        return NUMBER_TYPES[name]
    except KeyError:
        msg = f"Unknown number type: {name}. Available: {sorted(NUMBER_TYPES)}"
        raise GameError(msg) from None


def number_type_name(number_type: type) -> NumberTypeName:
    return "rational" if number_type is Fraction else "float"


def coerce(value: object, number_type: type) -> AnyNumber:
    """Convert ``value`` to ``number_type``.

    Accepts ints, floats, Fractions and strings such as ``"3"``, ``"0.25"``
    or ``"1/3"``. Floats are read through their shortest decimal form, so
    ``0.1`` becomes ``1/10`` in a rational game.
    """
    if isinstance(value, bool):
        raise GameError(f"Not a number: {value!r}")
    if isinstance(value, str):
        try:
            value = Fraction(value.strip())
        except (ValueError, ZeroDivisionError) as e:
            raise GameError(f"Not a number: {value!r}") from e
    if number_type is Fraction:
        if isinstance(value, float):
            if not math.isfinite(value):
                raise GameError(f"Not a finite number: {value!r}")
            return Fraction(repr(value))
        if isinstance(value, (int, Fraction)):
            return Fraction(value)
    elif number_type is float:
        if isinstance(value, (int, float, Fraction)):
            return float(value)
    else:
        raise GameError(f"Unsupported number type: {number_type!r}")
    raise GameError(f"Not a number: {value!r}")


def zero(number_type: type) -> AnyNumber:
    return number_type(0)


def sums_to_one(values: Iterable[AnyNumber], number_type: type) -> bool:
    """Exact check for rationals, tolerance check for floats."""
    total = sum(values, zero(number_type))
    if number_type is Fraction:
        return total == 1
    return math.isclose(total, 1.0, rel_tol=1e-9, abs_tol=1e-12)


def to_json_number(value: AnyNumber) -> float | str:
    """Render a number for JSON output.

    Floats stay numbers; Fractions become ``"p/q"`` (or ``"p"``) strings so
    no precision is lost.
    """
    if isinstance(value, Fraction):
        return str(value)
    return value
