"""Interfaces of the data access layer.

Every method is a coroutine returning an ApiResponse envelope; none of them
raise.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import List, Optional

from schemas import (
    ApiResponse,
    Category,
    PaginatedResponse,
    Product,
    ProductFilter,
    Vendor,
    VendorFilter,
    VendorStats,
)


class ProductAPI(ABC):
    @abstractmethod
    async def get_products(self, filter: Optional[ProductFilter] = None) -> ApiResponse[PaginatedResponse[Product]]:
        ...

    @abstractmethod
    async def get_product_by_id(self, product_id: str) -> ApiResponse[Product]:
        ...

    async def get_products_by_category(
        self, category_slug: str, filter: Optional[ProductFilter] = None
    ) -> ApiResponse[PaginatedResponse[Product]]:
        return await self.get_products((filter or ProductFilter()).merged(category=category_slug))

    @abstractmethod
    async def get_featured_products(self, limit: int = 8) -> ApiResponse[List[Product]]:
        ...

    @abstractmethod
    async def get_related_products(self, product_id: str, limit: int = 4) -> ApiResponse[List[Product]]:
        ...

    async def search_products(
        self, query: str, filter: Optional[ProductFilter] = None
    ) -> ApiResponse[PaginatedResponse[Product]]:
        return await self.get_products((filter or ProductFilter()).merged(search=query))


class CategoryAPI(ABC):
    @abstractmethod
    async def get_categories(self) -> ApiResponse[List[Category]]:
        ...

    @abstractmethod
    async def get_category_by_slug(self, slug: str) -> ApiResponse[Category]:
        ...

    @abstractmethod
    async def get_category_by_id(self, category_id: str) -> ApiResponse[Category]:
        ...

    @abstractmethod
    async def get_subcategories(self, parent_slug: str) -> ApiResponse[List[Category]]:
        ...

    @abstractmethod
    async def get_featured_categories(self) -> ApiResponse[List[Category]]:
        ...


class VendorAPI(ABC):
    @abstractmethod
    async def get_vendors(self, filter: Optional[VendorFilter] = None) -> ApiResponse[PaginatedResponse[Vendor]]:
        ...

    @abstractmethod
    async def get_vendor_by_id(self, vendor_id: str) -> ApiResponse[Vendor]:
        ...

    @abstractmethod
    async def get_vendor_by_slug(self, slug: str) -> ApiResponse[Vendor]:
        ...

    @abstractmethod
    async def get_vendor_products(
        self, vendor_id: str, filter: Optional[ProductFilter] = None
    ) -> ApiResponse[PaginatedResponse[Product]]:
        ...

    @abstractmethod
    async def get_vendor_stats(self, vendor_id: str) -> ApiResponse[VendorStats]:
        ...


class APIFactory(ABC):
    @abstractmethod
    def create_product_api(self) -> ProductAPI:
        ...

    @abstractmethod
    def create_category_api(self) -> CategoryAPI:
        ...

    @abstractmethod
    def create_vendor_api(self) -> VendorAPI:
        ...
