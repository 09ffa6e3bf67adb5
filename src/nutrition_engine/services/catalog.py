"""Food catalog lookup merging the local store with Open Food Facts."""

import asyncio
import logging
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Protocol
from uuid import UUID

from nutrition_engine.adapters.openfoodfacts_client import (
    OpenFoodFactsClient,
    parse_products,
)
from nutrition_engine.domain.nutrition import FoodNutrition, Provenance
from nutrition_engine.services.cache import Cache
from nutrition_engine.services.portions import normalize_food_name

_logger = logging.getLogger(__name__)

MIN_QUERY_LENGTH = 2
CACHE_PREFIX = "catalog:search:"

STAPLE_TERMS = (
    "arroz",
    "feijao",
    "frango",
    "ovo",
    "banana",
    "aveia",
    "tapioca",
    "batata",
    "batata doce",
    "mandioca",
    "macaxeira",
    "aipim",
    "carne",
    "peixe",
    "salmao",
    "brocolis",
    "abobora",
    "pao integral",
    "iogurte",
    "queijo cottage",
    "azeite",
)

DEPRIORITIZED_TERMS = (
    "biscoito",
    "cookie",
    "chocolate",
    "barra",
    "cereal",
    "salgadinho",
    "recheado",
    "wafer",
    "nuggets",
    "sorvete",
    "doce",
    "achocolatado",
)


class FoodRepository(Protocol):
    """Persistence interface for the local food catalog."""

    def search_foods(self, query: str, limit: int) -> list[FoodNutrition]:
        """Search foods by name."""

    def create_food(
        self, food: FoodNutrition, created_by: UUID | None
    ) -> FoodNutrition:
        """Create a food entry and return it."""


def score_food(food: FoodNutrition, query: str) -> int:
    """Relevance of a food for a query, favoring staples and local foods."""
    name = normalize_food_name(food.name)
    normalized_query = normalize_food_name(query)
    score = 0
    if name == normalized_query:
        score += 200
    if name.startswith(normalized_query):
        score += 120
    if normalized_query in name:
        score += 60
    if any(term in name for term in STAPLE_TERMS):
        score += 80
    if any(term in name for term in DEPRIORITIZED_TERMS):
        score -= 90
    if food.provenance == Provenance.LOCAL:
        score += 40
    return score


def merge_unique(*groups: Iterable[FoodNutrition]) -> list[FoodNutrition]:
    """Concatenate foods, keeping the first food for each normalized name."""
    seen: set[str] = set()
    merged: list[FoodNutrition] = []
    for group in groups:
        for food in group:
            key = normalize_food_name(food.name)
            if not key or key in seen:
                continue
            seen.add(key)
            merged.append(food)
    return merged


@dataclass
class CatalogService:
    """Looks up foods for substitution and plan generation."""

    repository: FoodRepository
    external_client: OpenFoodFactsClient | None
    cache: Cache
    search_ttl_seconds: int = 3600
    local_limit: int = 20
    external_page_size: int = 25
    retry_attempts: int = 1
    retry_delay_seconds: float = 0.3
    debug: bool = False

    async def search(self, query: str, limit: int = 20) -> list[FoodNutrition]:
        """Search local and external foods, ranked by relevance."""
        cleaned = query.strip()
        if len(cleaned) < MIN_QUERY_LENGTH:
            return []
        cache_key = f"{CACHE_PREFIX}{normalize_food_name(cleaned)}:{limit}"
        cached = self.cache.get(cache_key)
        if isinstance(cached, list):
            return list(cached)

        local = self.repository.search_foods(cleaned, self.local_limit)
        external = await self._search_external(cleaned)
        merged = merge_unique(local, external)
        ranked = sorted(merged, key=lambda food: score_food(food, cleaned), reverse=True)
        results = ranked[:limit]
        self.cache.set(cache_key, list(results), ttl_seconds=self.search_ttl_seconds)
        if self.debug:
            _logger.info(
                "Catalog search: query=%s local=%s external=%s results=%s",
                cleaned,
                len(local),
                len(external),
                len(results),
            )
        return results

    async def load_catalog(
        self, terms: Iterable[str], limit_per_term: int = 25
    ) -> list[FoodNutrition]:
        """Collect foods for several terms, deduplicated by normalized name."""
        groups = [await self.search(term, limit=limit_per_term) for term in terms]
        return merge_unique(*groups)

    def remember_external(
        self, food: FoodNutrition, created_by: UUID | None = None
    ) -> FoodNutrition | None:
        """Store an external food locally unless an equally named one exists."""
        if food.provenance != Provenance.EXTERNAL:
            return None
        name = food.name.strip()
        if not name:
            return None
        normalized = normalize_food_name(name)
        existing = self.repository.search_foods(name, self.local_limit)
        if any(normalize_food_name(item.name) == normalized for item in existing):
            return None
        created = self.repository.create_food(food, created_by)
        self.cache.invalidate(CACHE_PREFIX)
        return created

    async def _search_external(self, query: str) -> list[FoodNutrition]:
        if self.external_client is None:
            return []
        attempt = 0
        while True:
            try:
                payload = await self.external_client.search_products(
                    query, page_size=self.external_page_size
                )
                return parse_products(payload)
            except Exception as exc:
                attempt += 1
                if attempt > self.retry_attempts:
                    _logger.warning(
                        "External food search failed for %s after %s attempts: %s",
                        query,
                        attempt,
                        exc,
                    )
                    return []
                await asyncio.sleep(self.retry_delay_seconds)
