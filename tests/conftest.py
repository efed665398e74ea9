import asyncio

import pytest
from fastapi.testclient import TestClient

import main
from api_client import MockAPIFactory, reset_api_factory
from schemas import Product
from storage import MemoryStore
from vendor_dashboard import InventoryRegistry


def run(coro):
    return asyncio.run(coro)


def make_product(id, price=10.0, **kwargs) -> Product:
    fields = dict(
        name=f"Product {id}",
        slug=f"product-{id}",
        description="",
        category="Trading Cards",
        category_slug="trading-cards",
        vendor="Vendor One",
        vendor_id="vendor-1",
        stock=1,
    )
    fields.update(kwargs)
    return Product(id=id, price=price, **fields)


@pytest.fixture(autouse=True)
def _fresh_factory():
    reset_api_factory()
    yield
    reset_api_factory()


@pytest.fixture
def store():
    return MemoryStore()


@pytest.fixture
def client(store):
    main.app.dependency_overrides[main.get_factory] = lambda: MockAPIFactory()
    main.app.dependency_overrides[main.get_store] = lambda: store
    inventories = InventoryRegistry()
    main.app.dependency_overrides[main.get_inventories] = lambda: inventories
    with TestClient(main.app) as c:
        yield c
    main.app.dependency_overrides.clear()


VENDOR = {"X-User-Id": "vendor-1", "X-User-Role": "vendor"}
COLLECTOR = {"X-User-Id": "user-42", "X-User-Role": "collector"}
ADMIN = {"X-User-Id": "admin-1", "X-User-Role": "admin"}
