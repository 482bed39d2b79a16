"""
                        Services Module

Business logic services shared by the API and scripts.

Services:
    - catalog: read-only drink catalog (DrinkCatalogService)
    - orders: order orchestration and sales analytics (OrderService)
"""

import logging
from functools import lru_cache

from cafe.core.config import get_settings
from cafe.repositories import get_order_repository
from cafe.services.catalog import CatalogConfig, DrinkCatalogService
from cafe.services.orders import OrderService, SalesSummary

logger = logging.getLogger(__name__)


@lru_cache()
def get_catalog_service() -> DrinkCatalogService:
    """Get the catalog service built from the configured catalog source."""
    settings = get_settings()

    if settings.catalog_file:
        logger.info(f"Catalog Service: Using catalog file {settings.catalog_file}")
        config = CatalogConfig.from_file(settings.catalog_file)
    else:
        logger.info("Catalog Service: Using built-in catalog")
        config = CatalogConfig.default()

    return DrinkCatalogService(config)


@lru_cache()
def get_order_service() -> OrderService:
    """Get the order service bound to the configured repository."""
    return OrderService(get_order_repository())


def reset_services() -> None:
    """Clear cached service instances."""
    get_catalog_service.cache_clear()
    get_order_service.cache_clear()


__all__ = [
    "get_catalog_service",
    "get_order_service",
    "reset_services",
    "CatalogConfig",
    "DrinkCatalogService",
    "OrderService",
    "SalesSummary",
]
