"""Domain models for resolved quantities."""

from dataclasses import dataclass

from nutrition_engine.domain.errors import UnparseableQuantityError


@dataclass(frozen=True)
class Resolved:
    """A quantity expressed as a number of reference portions."""

    factor: float


@dataclass(frozen=True)
class Unresolved:
    """A quantity text that could not be interpreted."""

    text: str
    reason: str


QuantityResolution = Resolved | Unresolved

ConsumedQuantity = float | int | str | Resolved


def require_factor(resolution: QuantityResolution) -> float:
    """Return the resolved factor or raise for unresolved text."""
    if isinstance(resolution, Resolved):
        return resolution.factor
    raise UnparseableQuantityError(resolution.text)
