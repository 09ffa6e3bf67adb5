"""Open Food Facts search API client."""

from dataclasses import dataclass
from typing import Protocol

import httpx

from nutrition_engine.domain.nutrition import (
    FoodNutrition,
    MacroProfile,
    Provenance,
    to_float,
)

OFF_PORTION = "100g"


class OpenFoodFactsClient(Protocol):
    """Interface for Open Food Facts product search."""

    async def search_products(
        self, query: str, page_size: int = 25
    ) -> dict[str, object]:
        """Search products by text and return raw API data."""


@dataclass
class HttpxOpenFoodFactsClient(OpenFoodFactsClient):
    """HTTPX-backed Open Food Facts client."""

    base_url: str
    http_client: httpx.AsyncClient
    timeout_seconds: float = 7.0

    @classmethod
    def create(
        cls, base_url: str, timeout_seconds: float = 7.0
    ) -> "HttpxOpenFoodFactsClient":
        """Create a client with a managed httpx session."""
        return cls(
            base_url=base_url,
            http_client=httpx.AsyncClient(),
            timeout_seconds=timeout_seconds,
        )

    async def search_products(
        self, query: str, page_size: int = 25
    ) -> dict[str, object]:
        """Search products by text."""
        url = f"{self.base_url}/cgi/search.pl"
        response = await self.http_client.get(
            url,
            params={
                "search_terms": query,
                "search_simple": 1,
                "action": "process",
                "json": 1,
                "page_size": page_size,
            },
            timeout=self.timeout_seconds,
        )
        response.raise_for_status()
        return response.json()

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()


def parse_products(payload: dict[str, object]) -> list[FoodNutrition]:
    """Map Open Food Facts products to foods per 100g."""
    products = payload.get("products")
    if not isinstance(products, list):
        return []
    foods: list[FoodNutrition] = []
    for product in products:
        if not isinstance(product, dict):
            continue
        name = str(product.get("product_name") or "").strip()
        nutriments = product.get("nutriments")
        if not name or not isinstance(nutriments, dict):
            continue
        macros = MacroProfile(
            calories=to_float(nutriments.get("energy-kcal_100g")),
            protein_g=to_float(nutriments.get("proteins_100g")),
            carbs_g=to_float(nutriments.get("carbohydrates_100g")),
            fat_g=to_float(nutriments.get("fat_100g")),
        )
        if macros == MacroProfile.zero():
            continue
        code = product.get("code")
        foods.append(
            FoodNutrition(
                name=name,
                reference_portion_text=OFF_PORTION,
                macros=macros,
                provenance=Provenance.EXTERNAL,
                food_id=f"off_{code}" if code else None,
            )
        )
    return foods
