"""Dependency container wiring for the application."""

import random
from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from nutrition_engine.adapters.openfoodfacts_client import HttpxOpenFoodFactsClient
from nutrition_engine.adapters.supabase_food_repository import SupabaseFoodRepository
from nutrition_engine.adapters.supabase_substitution_history_repository import (
    SupabaseSubstitutionHistoryRepository,
)
from nutrition_engine.app_logging import configure_logging
from nutrition_engine.config import Settings
from nutrition_engine.services.cache import InMemoryCache
from nutrition_engine.services.catalog import CatalogService
from nutrition_engine.services.diet_plans import DietPlanGenerator
from nutrition_engine.services.matching import SubstitutionMatcher
from nutrition_engine.services.substitutions import SubstitutionService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    catalog_service: CatalogService
    substitution_matcher: SubstitutionMatcher
    substitution_service: SubstitutionService
    diet_plan_generator: DietPlanGenerator
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    configure_logging()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    food_repository = SupabaseFoodRepository(supabase_client)
    history_repository = SupabaseSubstitutionHistoryRepository(supabase_client)
    off_client = (
        HttpxOpenFoodFactsClient.create(
            base_url=resolved_settings.off_base_url,
            timeout_seconds=resolved_settings.off_timeout_seconds,
        )
        if resolved_settings.external_search_enabled
        else None
    )
    catalog_service = CatalogService(
        repository=food_repository,
        external_client=off_client,
        cache=InMemoryCache(),
        search_ttl_seconds=resolved_settings.catalog_cache_ttl_seconds,
        external_page_size=resolved_settings.off_page_size,
        retry_attempts=resolved_settings.catalog_retry_attempts,
        debug=resolved_settings.debug,
    )
    matcher = SubstitutionMatcher()
    substitution_service = SubstitutionService(
        matcher=matcher,
        catalog_service=catalog_service,
        history_repository=history_repository,
    )
    diet_plan_generator = DietPlanGenerator(
        rng=random.Random(resolved_settings.diet_plan_seed),
        debug=resolved_settings.debug,
    )

    async def close_resources() -> None:
        if off_client is not None:
            await off_client.close()

    return AppContainer(
        settings=resolved_settings,
        catalog_service=catalog_service,
        substitution_matcher=matcher,
        substitution_service=substitution_service,
        diet_plan_generator=diet_plan_generator,
        close_resources=close_resources,
    )
