"""Conversion between consumed-quantity text and reference-portion factors.

Quantities are free text written by coaches and students ("200g", "2x",
"1 unidade", "2 fatias") or plain numbers. They are resolved against the food's
reference portion into a scale factor, the number of reference portions eaten.

The leading quantity phrase follows a small grammar over tokens::

    phrase := ["x"] NUMBER ["-" NUMBER | NUMBER UNIT] [UNIT | "x"] rest*

A range ("2-3 fatias", "100-150g") keeps its lower bound. A second positive
number directly followed by a unit is a malformed concatenation ("2 100g") and
is multiplied into the amount.
"""

import math
import re
from dataclasses import dataclass

from nutrition_engine.domain.nutrition import ReferencePortion, to_float
from nutrition_engine.domain.quantities import (
    QuantityResolution,
    Resolved,
    Unresolved,
)
from nutrition_engine.services.portions import parse_portion

MIN_DISPLAY_FACTOR = 0.1
LARGE_BASE_AMOUNT = 20
MULTIPLIER_MARK = "x"
RANGE_MARK = "-"

MASS_UNITS = frozenset({"g", "gr", "grama", "gramas", "ml"})
DISCRETE_UNITS = frozenset(
    {
        "unidade",
        "unidades",
        "fatia",
        "fatias",
        "colher",
        "colheres",
        "scoop",
        "scoops",
        "copo",
        "copos",
        "xícara",
        "xícaras",
        "xicara",
        "xicaras",
    }
)

_TOKEN = re.compile(
    r"(?P<number>(?:(?<![\d.])-)?\d+(?:\.\d+)?)|(?P<word>[^\W\d_]+)|(?P<mark>\S)"
)
_SINGULAR_PLURAL_UNITS = (
    (re.compile(r"^unidades?$"), "unidade", "unidades"),
    (re.compile(r"^fatias?$"), "fatia", "fatias"),
)


@dataclass(frozen=True)
class _Token:
    kind: str
    text: str

    @property
    def value(self) -> float:
        return to_float(self.text, math.nan)

    def is_unit(self) -> bool:
        return self.kind == "word" and (
            self.text in MASS_UNITS or self.text in DISCRETE_UNITS
        )


def _tokenize(text: str) -> list[_Token]:
    return [
        _Token(kind=match.lastgroup or "mark", text=match.group())
        for match in _TOKEN.finditer(text)
    ]


def _resolve_number(value: float, text: str) -> QuantityResolution:
    if math.isfinite(value) and value > 0:
        return Resolved(float(value))
    return Unresolved(text=text, reason="amount must be a positive number")


def _per_base(amount: float, portion: ReferencePortion) -> float:
    if portion.base_amount > 0:
        return amount / portion.base_amount
    return amount


def resolve_quantity(
    quantity: object, portion_text: str | None = None
) -> QuantityResolution:
    """Resolve a consumed quantity into a number of reference portions."""
    if isinstance(quantity, Resolved):
        return _resolve_number(quantity.factor, str(quantity.factor))
    if isinstance(quantity, bool):
        return Unresolved(text=str(quantity), reason="unsupported quantity type")
    if isinstance(quantity, int | float):
        return _resolve_number(float(quantity), str(quantity))
    if not isinstance(quantity, str):
        return Unresolved(text=repr(quantity), reason="unsupported quantity type")

    text = quantity.replace(",", ".").strip().lower()
    if not text:
        return Unresolved(text=quantity, reason="empty quantity")

    tokens = _tokenize(text)
    start = next(
        (index for index, token in enumerate(tokens) if token.kind == "number"), None
    )
    if start is None:
        return Unresolved(text=quantity, reason="no amount found")

    amount = tokens[start].value
    cursor = start + 1
    if (
        cursor + 1 < len(tokens)
        and tokens[cursor].text == RANGE_MARK
        and tokens[cursor + 1].kind == "number"
    ):
        cursor += 2
    elif (
        cursor + 1 < len(tokens)
        and tokens[cursor].kind == "number"
        and tokens[cursor].value > 0
        and tokens[cursor + 1].is_unit()
    ):
        amount *= tokens[cursor].value
        cursor += 1

    if not (math.isfinite(amount) and amount > 0):
        return Unresolved(text=quantity, reason="amount must be a positive number")

    unit = tokens[cursor].text if cursor < len(tokens) else ""
    marked = start > 0 and tokens[start - 1].text == MULTIPLIER_MARK
    if marked or unit == MULTIPLIER_MARK:
        return Resolved(amount)

    portion = parse_portion(portion_text)
    if unit in MASS_UNITS:
        return Resolved(_per_base(amount, portion))
    if unit in DISCRETE_UNITS:
        return Resolved(amount)
    if portion.base_amount >= LARGE_BASE_AMOUNT:
        return Resolved(_per_base(amount, portion))
    return Resolved(amount)


def resolve_quantity_factor(quantity: object, portion_text: str | None = None) -> float:
    """Resolve a quantity into a factor, returning 0 when it cannot be resolved."""
    resolution = resolve_quantity(quantity, portion_text)
    if isinstance(resolution, Resolved):
        return resolution.factor
    return 0.0


def format_amount(value: float) -> str:
    """Format an amount with one decimal and a pt-BR decimal comma."""
    if not math.isfinite(value):
        return "0"
    rounded = math.floor(value * 10 + 0.5) / 10
    if rounded.is_integer():
        return str(int(rounded))
    return f"{rounded:.1f}".replace(".", ",")


def format_quantity_from_factor(factor: float, portion_text: str | None = None) -> str:
    """Render a factor as a human-readable quantity of the food's portion."""
    portion = parse_portion(portion_text)
    safe_factor = max(to_float(factor), MIN_DISPLAY_FACTOR)

    if not portion.has_numeric_base:
        label = (portion_text or "").strip() or "porção"
        return f"{format_amount(safe_factor)}x {label}"

    total = safe_factor * portion.base_amount
    unit = portion.unit.lower()
    for pattern, singular, plural in _SINGULAR_PLURAL_UNITS:
        if pattern.match(unit):
            label = singular if abs(total - 1) < 0.001 else plural
            return f"{format_amount(total)} {label}"
    return f"{format_amount(total)} {portion.unit}"
