"""Reference portion parsing."""

import re
import unicodedata
from functools import lru_cache

from nutrition_engine.domain.nutrition import ReferencePortion, to_float

DEFAULT_PORTION = "100g"
DEFAULT_UNIT = "unidade"

_PARENTHESIZED_AMOUNT = re.compile(r"\((\d+(?:\.\d+)?)\s*(g|ml)\)", re.IGNORECASE)
_LEADING_AMOUNT = re.compile(r"^(\d+(?:\.\d+)?)\s*(.*)$", re.DOTALL)


def normalize_food_name(name: str) -> str:
    """Strip accents, lowercase and trim a food name for comparisons."""
    decomposed = unicodedata.normalize("NFD", name)
    stripped = "".join(char for char in decomposed if not unicodedata.combining(char))
    return stripped.lower().strip()


def normalize_portion_text(text: str | None) -> str:
    """Return the portion text with decimal commas and blanks normalized."""
    raw = (text or "").strip()
    return raw.replace(",", ".") if raw else DEFAULT_PORTION


@lru_cache(maxsize=1024)
def _parse(raw: str) -> ReferencePortion:
    parenthesized = _PARENTHESIZED_AMOUNT.search(raw)
    if parenthesized:
        return ReferencePortion(
            base_amount=to_float(parenthesized.group(1), 1.0),
            unit=parenthesized.group(2).lower(),
            has_numeric_base=True,
        )

    leading = _LEADING_AMOUNT.match(raw)
    if leading:
        return ReferencePortion(
            base_amount=to_float(leading.group(1), 1.0),
            unit=leading.group(2).strip() or DEFAULT_UNIT,
            has_numeric_base=True,
        )

    return ReferencePortion(base_amount=1.0, unit=DEFAULT_UNIT, has_numeric_base=False)


def parse_portion(text: str | None) -> ReferencePortion:
    """Parse a reference portion such as ``100g`` or ``1 unidade (50g)``.

    A parenthesized mass or volume wins over a leading count. Text without a
    usable number yields one generic unit with ``has_numeric_base`` unset.
    """
    return _parse(normalize_portion_text(text))
