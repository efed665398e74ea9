"""Networked data access.

There is no upstream catalogue service yet, so every request fails fast with
NOT_IMPLEMENTED instead of quietly serving mock data.
"""

import logging
from typing import Any, Dict, List, Optional

from api_base import CategoryAPI, ProductAPI, VendorAPI
from envelope import UpstreamUnavailable, api_call
from schemas import (
    Category,
    PaginatedResponse,
    Product,
    ProductFilter,
    Vendor,
    VendorFilter,
    VendorStats,
)

logger = logging.getLogger(__name__)


def filter_params(filter: Optional[ProductFilter]) -> Dict[str, Any]:
    """Query parameters for a product filter, using the upstream's camelCase names."""
    if filter is None:
        return {}
    params = filter.model_dump(by_alias=True, exclude_none=True, exclude_defaults=True)
    if filter.query:
        params.pop("searchQuery", None)
        params["search"] = filter.query
    return params


class _HttpBase:
    def __init__(self, base_url: str):
        self.base_url = base_url.rstrip("/")

    async def _fetch(self, endpoint: str, params: Optional[Dict[str, Any]] = None):
        url = f"{self.base_url}{endpoint}"
        logger.warning(f"HTTP data access requested for {url} but no upstream is implemented")
        raise UpstreamUnavailable(
            "Networked API is not implemented",
            code="NOT_IMPLEMENTED",
            details={"endpoint": endpoint, "params": params or {}},
        )


class HttpProductAPI(_HttpBase, ProductAPI):
    @api_call("Failed to fetch products", "FETCH_ERROR")
    async def get_products(self, filter: Optional[ProductFilter] = None) -> PaginatedResponse[Product]:
        return await self._fetch("/api/products", filter_params(filter))

    @api_call("Failed to fetch product", "FETCH_ERROR")
    async def get_product_by_id(self, product_id: str) -> Product:
        return await self._fetch(f"/api/products/{product_id}")

    @api_call("Failed to fetch featured products", "FETCH_ERROR")
    async def get_featured_products(self, limit: int = 8) -> List[Product]:
        return await self._fetch("/api/products", {"featured": True, "limit": limit})

    @api_call("Failed to fetch related products", "FETCH_ERROR")
    async def get_related_products(self, product_id: str, limit: int = 4) -> List[Product]:
        return await self._fetch(f"/api/products/{product_id}/related", {"limit": limit})


class HttpCategoryAPI(_HttpBase, CategoryAPI):
    @api_call("Failed to fetch categories", "FETCH_ERROR")
    async def get_categories(self) -> List[Category]:
        return await self._fetch("/api/categories")

    @api_call("Failed to fetch category", "FETCH_ERROR")
    async def get_category_by_slug(self, slug: str) -> Category:
        return await self._fetch(f"/api/categories/{slug}")

    @api_call("Failed to fetch category", "FETCH_ERROR")
    async def get_category_by_id(self, category_id: str) -> Category:
        return await self._fetch("/api/categories", {"id": category_id})

    @api_call("Failed to fetch subcategories", "FETCH_ERROR")
    async def get_subcategories(self, parent_slug: str) -> List[Category]:
        return await self._fetch(f"/api/categories/{parent_slug}/subcategories")

    @api_call("Failed to fetch featured categories", "FETCH_ERROR")
    async def get_featured_categories(self) -> List[Category]:
        return await self._fetch("/api/categories/featured")


class HttpVendorAPI(_HttpBase, VendorAPI):
    @api_call("Failed to fetch vendors", "FETCH_ERROR")
    async def get_vendors(self, filter: Optional[VendorFilter] = None) -> PaginatedResponse[Vendor]:
        params = filter.model_dump(by_alias=True, exclude_none=True, exclude_defaults=True) if filter else {}
        return await self._fetch("/api/vendors", params)

    @api_call("Failed to fetch vendor", "FETCH_ERROR")
    async def get_vendor_by_id(self, vendor_id: str) -> Vendor:
        return await self._fetch(f"/api/vendors/{vendor_id}")

    @api_call("Failed to fetch vendor", "FETCH_ERROR")
    async def get_vendor_by_slug(self, slug: str) -> Vendor:
        return await self._fetch(f"/api/vendors/{slug}")

    @api_call("Failed to fetch vendor products", "FETCH_ERROR")
    async def get_vendor_products(self, vendor_id: str,
                                  filter: Optional[ProductFilter] = None) -> PaginatedResponse[Product]:
        return await self._fetch(f"/api/vendors/{vendor_id}/products", filter_params(filter))

    @api_call("Failed to fetch vendor statistics", "FETCH_ERROR")
    async def get_vendor_stats(self, vendor_id: str) -> VendorStats:
        return await self._fetch(f"/api/vendors/{vendor_id}/stats")
