"""API factory: the one place that decides between mock and networked data access.

`get_api_factory()` chooses once per process from the USE_REAL_API flag and
hands back the same factory afterwards. Code that wants explicit wiring
builds its own with `build_api_factory(settings)` and passes it around.
"""

import logging
from typing import Optional

from api_base import APIFactory, CategoryAPI, ProductAPI, VendorAPI
from api_http import HttpCategoryAPI, HttpProductAPI, HttpVendorAPI
from api_mock import MockCategoryAPI, MockProductAPI, MockVendorAPI
from config import Settings

logger = logging.getLogger(__name__)


class MockAPIFactory(APIFactory):
    """Serves the static catalogue from memory."""

    def __init__(self, latency_ms: int = 0):
        self.latency_ms = latency_ms
        self._product_api = None
        self._category_api = None
        self._vendor_api = None

    def create_product_api(self) -> ProductAPI:
        if self._product_api is None:
            self._product_api = MockProductAPI(latency_ms=self.latency_ms)
        return self._product_api

    def create_category_api(self) -> CategoryAPI:
        if self._category_api is None:
            self._category_api = MockCategoryAPI(latency_ms=self.latency_ms)
        return self._category_api

    def create_vendor_api(self) -> VendorAPI:
        if self._vendor_api is None:
            self._vendor_api = MockVendorAPI(latency_ms=self.latency_ms)
        return self._vendor_api


class HttpAPIFactory(APIFactory):
    """Talks to the upstream catalogue service at base_url."""

    def __init__(self, base_url: str):
        self.base_url = base_url
        self._product_api = None
        self._category_api = None
        self._vendor_api = None

    def create_product_api(self) -> ProductAPI:
        if self._product_api is None:
            self._product_api = HttpProductAPI(self.base_url)
        return self._product_api

    def create_category_api(self) -> CategoryAPI:
        if self._category_api is None:
            self._category_api = HttpCategoryAPI(self.base_url)
        return self._category_api

    def create_vendor_api(self) -> VendorAPI:
        if self._vendor_api is None:
            self._vendor_api = HttpVendorAPI(self.base_url)
        return self._vendor_api


def build_api_factory(settings: Optional[Settings] = None) -> APIFactory:
    settings = settings or Settings.from_env()
    if settings.use_real_api:
        logger.info(f"Using HTTP API implementation at {settings.api_base_url}")
        return HttpAPIFactory(settings.api_base_url)
    logger.info("Using mock API implementation with static data")
    return MockAPIFactory(latency_ms=settings.mock_latency_ms)


_factory: Optional[APIFactory] = None


def get_api_factory() -> APIFactory:
    global _factory
    if _factory is None:
        _factory = build_api_factory()
    return _factory


def reset_api_factory():
    """Forget the process-wide factory so the next call re-reads the environment."""
    global _factory
    _factory = None


def get_product_api() -> ProductAPI:
    return get_api_factory().create_product_api()


def get_category_api() -> CategoryAPI:
    return get_api_factory().create_category_api()


def get_vendor_api() -> VendorAPI:
    return get_api_factory().create_vendor_api()
