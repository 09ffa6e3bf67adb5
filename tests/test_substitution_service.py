"""Tests for the substitution workflow."""

from uuid import uuid4

import pytest

from nutrition_engine.domain.errors import InvalidReplacementFoodError
from nutrition_engine.domain.nutrition import Provenance
from nutrition_engine.domain.quantities import Resolved
from nutrition_engine.domain.substitutions import OriginalFoodLine
from nutrition_engine.services.cache import InMemoryCache
from nutrition_engine.services.catalog import CatalogService
from nutrition_engine.services.matching import SubstitutionMatcher
from nutrition_engine.services.substitutions import SubstitutionService
from tests.conftest import (
    InMemoryFoodRepository,
    InMemorySubstitutionHistoryRepository,
    make_food,
)

RICE = make_food("Arroz branco cozido", 128, 2.5, 28.1, 0.2)


def _service(
    history: InMemorySubstitutionHistoryRepository,
    repository: InMemoryFoodRepository | None = None,
) -> SubstitutionService:
    catalog_service = CatalogService(
        repository=repository or InMemoryFoodRepository(),
        external_client=None,
        cache=InMemoryCache(),
    )
    return SubstitutionService(
        matcher=SubstitutionMatcher(),
        catalog_service=catalog_service,
        history_repository=history,
    )


def test_substitute_records_history() -> None:
    history = InMemorySubstitutionHistoryRepository()
    service = _service(history)
    student_id = uuid4()
    meal_id = uuid4()
    original = OriginalFoodLine(
        macros=RICE.macros, quantity="200g", portion_text="100g", name=RICE.name
    )
    replacement = make_food("Batata doce cozida", 77, 0.6, 18.4, 0.1)

    result = service.substitute(student_id, meal_id, original, replacement)

    assert len(history.entries) == 1
    entry = history.entries[0]
    assert entry.student_id == student_id
    assert entry.meal_id == meal_id
    assert entry.original_food == "Arroz branco cozido"
    assert entry.original_amount == "200g"
    assert entry.new_food == "Batata doce cozida"
    assert entry.new_amount == result.formatted_quantity
    assert entry.calories_diff == pytest.approx(result.deltas.calories)


def test_substitute_remembers_external_replacement() -> None:
    history = InMemorySubstitutionHistoryRepository()
    repository = InMemoryFoodRepository()
    service = _service(history, repository)
    replacement = make_food(
        "Cuscuz de milho", 112, 2.2, 25.3, 0.7, provenance=Provenance.EXTERNAL
    )

    service.substitute(
        uuid4(), uuid4(), OriginalFoodLine(macros=RICE.macros, quantity=1), replacement
    )

    assert [food.name for food in repository.foods] == ["Cuscuz de milho"]


def test_history_failure_does_not_abort_substitution() -> None:
    history = InMemorySubstitutionHistoryRepository(fail=True)
    service = _service(history)

    result = service.substitute(
        uuid4(),
        uuid4(),
        OriginalFoodLine(macros=RICE.macros, quantity=Resolved(1.0)),
        RICE,
    )

    assert result.factor == pytest.approx(1.0)
    assert history.entries == []


def test_invalid_replacement_is_not_logged() -> None:
    history = InMemorySubstitutionHistoryRepository()
    service = _service(history)
    water = make_food("Água", 0, 0, 0, 0, portion="200ml")

    with pytest.raises(InvalidReplacementFoodError):
        service.substitute(
            uuid4(), uuid4(), OriginalFoodLine(macros=RICE.macros, quantity=1), water
        )

    assert history.entries == []


def test_history_amount_describes_resolved_quantity() -> None:
    history = InMemorySubstitutionHistoryRepository()
    service = _service(history)

    service.substitute(
        uuid4(),
        uuid4(),
        OriginalFoodLine(macros=RICE.macros, quantity=Resolved(1.5)),
        RICE,
    )

    assert history.entries[0].original_amount == "1,5x"
    assert history.entries[0].original_food == "Alimento original"


def test_catalog_failure_does_not_abort_substitution() -> None:
    history = InMemorySubstitutionHistoryRepository()
    repository = InMemoryFoodRepository(fail_create=True)
    service = _service(history, repository)
    replacement = make_food(
        "Cuscuz de milho", 112, 2.2, 25.3, 0.7, provenance=Provenance.EXTERNAL
    )

    result = service.substitute(
        uuid4(), uuid4(), OriginalFoodLine(macros=RICE.macros, quantity=1), replacement
    )

    assert result.factor > 0
    assert repository.foods == []
    assert len(history.entries) == 1
    assert history.entries[0].new_food == "Cuscuz de milho"
