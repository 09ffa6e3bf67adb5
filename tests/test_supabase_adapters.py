"""Tests for Supabase adapter implementations."""

from dataclasses import dataclass, field
from uuid import uuid4

import pytest

from nutrition_engine.adapters.supabase_food_repository import SupabaseFoodRepository
from nutrition_engine.adapters.supabase_substitution_history_repository import (
    SupabaseSubstitutionHistoryRepository,
)
from nutrition_engine.domain.nutrition import MacroProfile, Provenance
from nutrition_engine.domain.substitutions import SubstitutionHistoryEntry
from tests.conftest import make_food


@dataclass
class FakeResponse:
    data: list[dict[str, object]] | None


@dataclass
class FakeTable:
    name: str
    response_queue: dict[str, list[list[dict[str, object]]]] = field(
        default_factory=lambda: {"select": [], "insert": []}
    )
    last_payload: object | None = None
    last_filters: list[tuple[str, object]] = field(default_factory=list)

    def queue(self, action: str, data: list[dict[str, object]]) -> None:
        self.response_queue[action].append(data)

    def select(self, *_args) -> "FakeTable":
        self._action = "select"
        return self

    def insert(self, payload) -> "FakeTable":  # type: ignore[no-untyped-def]
        self._action = "insert"
        self.last_payload = payload
        return self

    def ilike(self, column: str, value) -> "FakeTable":  # type: ignore[no-untyped-def]
        self.last_filters.append((column, value))
        return self

    def limit(self, _count: int) -> "FakeTable":
        return self

    def execute(self) -> FakeResponse:
        action = getattr(self, "_action", "select")
        queue = self.response_queue.get(action, [])
        data = queue.pop(0) if queue else []
        return FakeResponse(data=data)


@dataclass
class FakeSupabaseClient:
    tables: dict[str, FakeTable] = field(default_factory=dict)

    def table(self, name: str) -> FakeTable:
        if name not in self.tables:
            self.tables[name] = FakeTable(name=name)
        return self.tables[name]


def test_supabase_food_repository_search() -> None:
    client = FakeSupabaseClient()
    foods_table = client.table("foods")
    foods_table.queue(
        "select",
        [
            {
                "id": "food-1",
                "name": "Arroz branco cozido",
                "portion": "100g",
                "calories": 128,
                "protein": "2.5",
                "carbs": 28.1,
                "fat": None,
            }
        ],
    )

    repository = SupabaseFoodRepository(client)
    foods = repository.search_foods("arroz", limit=5)

    assert foods_table.last_filters == [("name", "%arroz%")]
    assert len(foods) == 1
    assert foods[0].food_id == "food-1"
    assert foods[0].provenance == Provenance.LOCAL
    assert foods[0].macros == MacroProfile(128.0, 2.5, 28.1, 0.0)


def test_supabase_food_repository_create() -> None:
    client = FakeSupabaseClient()
    foods_table = client.table("foods")
    foods_table.queue(
        "insert",
        [
            {
                "id": "food-2",
                "name": "Tapioca",
                "portion": "100g",
                "calories": 350,
                "protein": 0.5,
                "carbs": 86,
                "fat": 0.2,
            }
        ],
    )
    user_id = uuid4()
    external = make_food(
        "Tapioca", 350.004, 0.5, 86, 0.2, provenance=Provenance.EXTERNAL
    )

    created = SupabaseFoodRepository(client).create_food(external, created_by=user_id)

    assert created.food_id == "food-2"
    assert created.provenance == Provenance.LOCAL
    assert foods_table.last_payload["calories"] == 350.0
    assert foods_table.last_payload["created_by_id"] == str(user_id)
    assert foods_table.last_payload["is_system"] is False


def test_supabase_food_repository_create_failure() -> None:
    client = FakeSupabaseClient()
    food = make_food("Tapioca", 350, 0.5, 86, 0.2)

    with pytest.raises(RuntimeError):
        SupabaseFoodRepository(client).create_food(food, created_by=None)


def test_supabase_substitution_history_repository() -> None:
    client = FakeSupabaseClient()
    repository = SupabaseSubstitutionHistoryRepository(client)
    student_id = uuid4()
    meal_id = uuid4()

    repository.create_entry(
        SubstitutionHistoryEntry(
            student_id=student_id,
            meal_id=meal_id,
            original_food="Arroz",
            original_amount="200g",
            new_food="Batata doce",
            new_amount="330 g",
            calories_diff=-1.9,
        )
    )

    payload = client.table("food_substitution_history").last_payload
    assert payload["student_id"] == str(student_id)
    assert payload["meal_id"] == str(meal_id)
    assert payload["new_amount"] == "330 g"
    assert payload["calories_diff"] == -1.9
