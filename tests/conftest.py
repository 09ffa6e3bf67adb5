"""Shared test fixtures."""

from dataclasses import dataclass, field
from uuid import UUID, uuid4

import pytest

from nutrition_engine.adapters.openfoodfacts_client import OpenFoodFactsClient
from nutrition_engine.config import Settings
from nutrition_engine.domain.nutrition import FoodNutrition, MacroProfile, Provenance
from nutrition_engine.domain.substitutions import SubstitutionHistoryEntry
from nutrition_engine.services.catalog import FoodRepository
from nutrition_engine.services.substitutions import SubstitutionHistoryRepository


def make_food(  # noqa: PLR0913
    name: str,
    calories: float,
    protein_g: float,
    carbs_g: float,
    fat_g: float,
    portion: str = "100g",
    provenance: Provenance = Provenance.LOCAL,
) -> FoodNutrition:
    return FoodNutrition(
        name=name,
        reference_portion_text=portion,
        macros=MacroProfile(
            calories=calories, protein_g=protein_g, carbs_g=carbs_g, fat_g=fat_g
        ),
        provenance=provenance,
        food_id=name.lower().replace(" ", "-"),
    )


@dataclass
class InMemoryFoodRepository(FoodRepository):
    """In-memory food repository for tests."""

    foods: list[FoodNutrition] = field(default_factory=list)
    created: list[tuple[FoodNutrition, UUID | None]] = field(default_factory=list)
    search_calls: int = 0
    fail_create: bool = False

    def search_foods(self, query: str, limit: int) -> list[FoodNutrition]:
        self.search_calls += 1
        query_lower = query.lower()
        return [food for food in self.foods if query_lower in food.name.lower()][
            :limit
        ]

    def create_food(
        self, food: FoodNutrition, created_by: UUID | None
    ) -> FoodNutrition:
        if self.fail_create:
            raise RuntimeError("Failed to create food entry")
        stored = FoodNutrition(
            name=food.name,
            reference_portion_text=food.reference_portion_text,
            macros=food.macros,
            provenance=Provenance.LOCAL,
            food_id=str(uuid4()),
        )
        self.foods.append(stored)
        self.created.append((food, created_by))
        return stored


@dataclass
class InMemorySubstitutionHistoryRepository(SubstitutionHistoryRepository):
    """In-memory substitution history repository for tests."""

    entries: list[SubstitutionHistoryEntry] = field(default_factory=list)
    fail: bool = False

    def create_entry(self, entry: SubstitutionHistoryEntry) -> None:
        if self.fail:
            raise RuntimeError("history store unavailable")
        self.entries.append(entry)


@dataclass
class FakeOpenFoodFactsClient(OpenFoodFactsClient):
    """Fake Open Food Facts client with an in-memory payload."""

    payload: dict[str, object] = field(
        default_factory=lambda: {
            "products": [
                {
                    "code": "789",
                    "product_name": "Tapioca Granulada",
                    "nutriments": {
                        "energy-kcal_100g": 350,
                        "proteins_100g": 0.5,
                        "carbohydrates_100g": 86,
                        "fat_100g": 0.2,
                    },
                },
                {
                    "code": "790",
                    "product_name": "Arroz Branco Cozido",
                    "nutriments": {
                        "energy-kcal_100g": 130,
                        "proteins_100g": 2.5,
                        "carbohydrates_100g": 28,
                        "fat_100g": 0.3,
                    },
                },
            ]
        }
    )
    failures: int = 0
    calls: int = 0

    async def search_products(
        self, query: str, page_size: int = 25
    ) -> dict[str, object]:
        self.calls += 1
        if self.calls <= self.failures:
            raise RuntimeError("service unavailable")
        return self.payload


@pytest.fixture
def settings() -> Settings:
    return Settings(
        supabase_url="https://example.supabase.co",
        supabase_service_key="header.payload.signature",
    )


@pytest.fixture
def catalog() -> list[FoodNutrition]:
    return [
        make_food("Ovo cozido", 78, 6.3, 0.6, 5.3, portion="1 unidade (50g)"),
        make_food("Aveia em flocos", 394, 13.9, 66.6, 8.5),
        make_food("Banana prata", 98, 1.3, 26.0, 0.1, portion="1 unidade"),
        make_food("Pão francês", 150, 4.0, 29.0, 1.5, portion="1 unidade (50g)"),
        make_food("Iogurte natural", 63, 4.1, 7.0, 3.0),
        make_food("Queijo minas", 264, 17.4, 3.2, 20.2),
        make_food("Arroz branco cozido", 128, 2.5, 28.1, 0.2),
        make_food("Feijão carioca cozido", 76, 4.8, 13.6, 0.5),
        make_food("Frango grelhado", 159, 32.0, 0.0, 2.5),
        make_food("Carne moída", 212, 26.7, 0.0, 10.9),
        make_food("Batata doce cozida", 77, 0.6, 18.4, 0.1),
        make_food("Brócolis cozido", 25, 2.1, 4.4, 0.5),
        make_food("Peixe assado", 120, 24.0, 0.0, 2.0),
        make_food("Amendoim torrado", 606, 27.2, 20.3, 49.0),
        make_food("Whey protein", 120, 24.0, 3.0, 1.5, portion="1 scoop (30g)"),
        make_food("Maçã", 56, 0.3, 15.2, 0.0, portion="1 unidade"),
    ]
