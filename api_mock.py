"""In-memory data access backed by the static catalogue in mock_data."""

import asyncio
import logging
from collections import Counter
from typing import List, Optional, Sequence

import mock_data
from api_base import CategoryAPI, ProductAPI, VendorAPI
from envelope import NotFound, api_call
from query_utils import parse_timestamp, query_products, query_vendors
from schemas import (
    Category,
    PaginatedResponse,
    Product,
    ProductFilter,
    StatsInventory,
    StatsOverview,
    StatsPerformance,
    Vendor,
    VendorFilter,
    VendorStats,
)

logger = logging.getLogger(__name__)


class _MockBase:
    def __init__(self, latency_ms: int = 0):
        self.latency_ms = latency_ms

    async def _simulate_latency(self):
        # Always yield to the loop so callers never see synchronous completion.
        await asyncio.sleep(self.latency_ms / 1000)


class MockProductAPI(_MockBase, ProductAPI):
    def __init__(self, products: Sequence[Product] = mock_data.PRODUCTS, latency_ms: int = 0):
        super().__init__(latency_ms)
        self.products = products

    @api_call("Failed to fetch products", "MOCK_ERROR")
    async def get_products(self, filter: Optional[ProductFilter] = None) -> PaginatedResponse[Product]:
        await self._simulate_latency()
        return query_products(self.products, filter or ProductFilter())

    @api_call("Failed to fetch product", "MOCK_ERROR")
    async def get_product_by_id(self, product_id: str) -> Product:
        await self._simulate_latency()
        for product in self.products:
            if product.id == product_id:
                return product
        raise NotFound("Product not found")

    @api_call("Failed to fetch featured products", "MOCK_ERROR")
    async def get_featured_products(self, limit: int = 8) -> List[Product]:
        await self._simulate_latency()
        return [p for p in self.products if p.featured][:limit]

    @api_call("Failed to fetch related products", "MOCK_ERROR")
    async def get_related_products(self, product_id: str, limit: int = 4) -> List[Product]:
        await self._simulate_latency()
        source = next((p for p in self.products if p.id == product_id), None)
        if source is None:
            return []
        related = [p for p in self.products if p.id != product_id and p.category_slug == source.category_slug]
        return related[:limit]


class MockCategoryAPI(_MockBase, CategoryAPI):
    def __init__(self, categories: Sequence[Category] = mock_data.CATEGORIES, latency_ms: int = 0):
        super().__init__(latency_ms)
        self.categories = categories

    @api_call("Failed to fetch categories", "MOCK_ERROR")
    async def get_categories(self) -> List[Category]:
        await self._simulate_latency()
        return sorted(self.categories, key=lambda c: c.order)

    @api_call("Failed to fetch category", "MOCK_ERROR")
    async def get_category_by_slug(self, slug: str) -> Category:
        await self._simulate_latency()
        return self._find(lambda c: c.slug == slug)

    @api_call("Failed to fetch category", "MOCK_ERROR")
    async def get_category_by_id(self, category_id: str) -> Category:
        await self._simulate_latency()
        return self._find(lambda c: c.id == category_id)

    @api_call("Failed to fetch subcategories", "MOCK_ERROR")
    async def get_subcategories(self, parent_slug: str) -> List[Category]:
        await self._simulate_latency()
        return sorted((c for c in self.categories if c.parent == parent_slug), key=lambda c: c.order)

    @api_call("Failed to fetch featured categories", "MOCK_ERROR")
    async def get_featured_categories(self) -> List[Category]:
        await self._simulate_latency()
        return [c for c in self.categories if c.featured]

    def _find(self, predicate) -> Category:
        for category in self.categories:
            if predicate(category):
                return category
        raise NotFound("Category not found")


class MockVendorAPI(_MockBase, VendorAPI):
    def __init__(self, vendors: Sequence[Vendor] = mock_data.VENDORS,
                 products: Sequence[Product] = mock_data.PRODUCTS, latency_ms: int = 0):
        super().__init__(latency_ms)
        self.vendors = vendors
        self.products = products

    @api_call("Failed to fetch vendors", "MOCK_ERROR")
    async def get_vendors(self, filter: Optional[VendorFilter] = None) -> PaginatedResponse[Vendor]:
        await self._simulate_latency()
        page = query_vendors(self.vendors, filter or VendorFilter())
        logger.debug(f"get_vendors: {page.total} matched, returning {len(page.data)}")
        return page

    @api_call("Failed to fetch vendor", "MOCK_ERROR")
    async def get_vendor_by_id(self, vendor_id: str) -> Vendor:
        await self._simulate_latency()
        return self._find(vendor_id=vendor_id)

    @api_call("Failed to fetch vendor", "MOCK_ERROR")
    async def get_vendor_by_slug(self, slug: str) -> Vendor:
        await self._simulate_latency()
        return self._find(slug=slug)

    @api_call("Failed to fetch vendor products", "MOCK_ERROR")
    async def get_vendor_products(self, vendor_id: str,
                                  filter: Optional[ProductFilter] = None) -> PaginatedResponse[Product]:
        await self._simulate_latency()
        return query_products(self.products, (filter or ProductFilter()).merged(vendor_id=vendor_id))

    @api_call("Failed to fetch vendor statistics", "MOCK_ERROR")
    async def get_vendor_stats(self, vendor_id: str) -> VendorStats:
        await self._simulate_latency()
        self._find(vendor_id=vendor_id)
        return build_vendor_stats(vendor_id, [p for p in self.products if p.vendor_id == vendor_id])

    def _find(self, vendor_id: Optional[str] = None, slug: Optional[str] = None) -> Vendor:
        for vendor in self.vendors:
            if (vendor_id is not None and vendor.id == vendor_id) or (slug is not None and vendor.slug == slug):
                return vendor
        raise NotFound("Vendor not found")


def build_vendor_stats(vendor_id: str, products: Sequence[Product]) -> VendorStats:
    """Aggregate one vendor's catalogue into dashboard statistics."""
    stats = VendorStats(vendor_id=vendor_id)
    if not products:
        return stats

    prices = [p.price for p in products]
    rated = [p.rating for p in products if p.rating]
    stats.overview = StatsOverview(
        total_products=len(products),
        active_listings=sum(1 for p in products if p.stock > 0),
        out_of_stock=sum(1 for p in products if p.stock == 0),
        featured_products=sum(1 for p in products if p.featured),
    )
    stats.inventory = StatsInventory(
        total_items=sum(p.stock for p in products),
        total_value=round(sum(p.price * p.stock for p in products), 2),
        average_price=round(sum(prices) / len(prices), 2),
        highest_price=max(prices),
        lowest_price=min(prices),
    )
    stats.performance = StatsPerformance(
        total_views=sum(p.views for p in products),
        average_rating=round(sum(rated) / len(rated), 2) if rated else 0,
        total_reviews=sum(p.review_count for p in products),
    )
    stats.categories = dict(Counter(p.category_slug for p in products))
    stats.top_products = sorted(products, key=lambda p: p.views, reverse=True)[:5]
    stats.recent_listings = sorted(products, key=lambda p: parse_timestamp(p.created_at), reverse=True)[:5]
    return stats
