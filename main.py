import logging
import os
from typing import Any, Dict, Optional

from fastapi import Depends, FastAPI, HTTPException, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field, ValidationError

import user_state
from api_base import APIFactory
from api_client import get_api_factory
from auth_gate import AuthState, AuthUser, GateState, Role, evaluate_gate
from config import FEATURED_LIMIT, LOG_LEVEL, RELATED_LIMIT, STORAGE_BACKEND, USE_REAL_API
from database import db
from schemas import ApiFailure, ProductFilter, VendorFilter
from storage import KeyValueStore, build_store
from vendor_dashboard import STATUS_FILTERS, InventoryRegistry, VendorInventory

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="Collectibles Marketplace API", version="1.0.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ---------- Dependencies ----------

def get_factory() -> APIFactory:
    return get_api_factory()

_store: Optional[KeyValueStore] = None
_inventories = InventoryRegistry()

def get_store() -> KeyValueStore:
    global _store
    if _store is None:
        _store = build_store(STORAGE_BACKEND)
    return _store

def get_inventories() -> InventoryRegistry:
    return _inventories

def current_auth(request: Request) -> AuthState:
    """Auth state as forwarded by the identity provider in request headers."""
    user_id = request.headers.get("x-user-id")
    if not user_id:
        return AuthState(is_loaded=True, is_signed_in=False)
    user = AuthUser(
        id=user_id,
        role=Role.parse(request.headers.get("x-user-role")),
        email=request.headers.get("x-user-email"),
    )
    return AuthState(is_loaded=True, is_signed_in=True, user=user)

def require(role: Optional[Role] = None):
    """Dependency guarding a route with the access gate; yields the signed-in user."""

    def guard(request: Request, auth: AuthState = Depends(current_auth)) -> AuthUser:
        path = request.url.path
        if request.url.query:
            path = f"{path}?{request.url.query}"
        decision = evaluate_gate(auth, required_role=role, current_path=path)
        if decision.state is GateState.RESOLVING:
            raise HTTPException(status_code=503, detail="Authentication state is still loading")
        if decision.state is GateState.REDIRECTING:
            raise HTTPException(status_code=307, detail="Redirecting", headers={"Location": decision.redirect_to})
        return auth.user

    return guard

# ---------- Helpers ----------

def respond(result):
    """Send an envelope, mirroring a failure's status on the HTTP response."""
    if isinstance(result, ApiFailure):
        return JSONResponse(status_code=result.error.status or 500, content=result.model_dump())
    return result

def operation(result: user_state.OperationResult):
    body = {"success": result.success, "message": result.message, "data": result.data}
    if not result.success:
        return JSONResponse(status_code=400, content=body)
    return body

def product_filter(request: Request) -> ProductFilter:
    params: Dict[str, Any] = dict(request.query_params)
    params.pop("q", None)
    conditions = request.query_params.getlist("conditions")
    if conditions:
        params["conditions"] = conditions
    return ProductFilter.model_validate(params)

def vendor_filter(request: Request) -> VendorFilter:
    return VendorFilter.model_validate(dict(request.query_params))

# ---------- Health ----------

@app.get("/")
def root():
    return {"message": "Collectibles Marketplace API running"}

@app.get("/test")
def test_database():
    resp = {
        "backend": "✅ Running",
        "data_source": "http" if USE_REAL_API else "mock",
        "database": "❌ Not Available",
        "database_url": "✅ Set" if os.getenv("DATABASE_URL") else "❌ Not Set",
        "database_name": "✅ Set" if os.getenv("DATABASE_NAME") else "❌ Not Set",
        "collections": []
    }
    try:
        if db is not None:
            resp["database"] = "✅ Connected"
            resp["collections"] = db.list_collection_names()
    except Exception as e:
        resp["database"] = f"⚠️ {str(e)[:80]}"
    return resp

# ---------- Products ----------

@app.get("/api/products")
async def list_products(filter: ProductFilter = Depends(product_filter), factory: APIFactory = Depends(get_factory)):
    return respond(await factory.create_product_api().get_products(filter))

@app.get("/api/products/featured")
async def featured_products(limit: int = Query(FEATURED_LIMIT, ge=1, le=100),
                            factory: APIFactory = Depends(get_factory)):
    return respond(await factory.create_product_api().get_featured_products(limit))

@app.get("/api/products/{product_id}")
async def get_product(product_id: str, factory: APIFactory = Depends(get_factory)):
    return respond(await factory.create_product_api().get_product_by_id(product_id))

@app.get("/api/products/{product_id}/related")
async def related_products(product_id: str, limit: int = Query(RELATED_LIMIT, ge=1, le=50),
                           factory: APIFactory = Depends(get_factory)):
    return respond(await factory.create_product_api().get_related_products(product_id, limit))

@app.get("/api/search")
async def search_products(q: str = Query(""), filter: ProductFilter = Depends(product_filter),
                          factory: APIFactory = Depends(get_factory)):
    return respond(await factory.create_product_api().search_products(q, filter))

# ---------- Categories ----------

@app.get("/api/categories")
async def list_categories(factory: APIFactory = Depends(get_factory)):
    return respond(await factory.create_category_api().get_categories())

@app.get("/api/categories/featured")
async def featured_categories(factory: APIFactory = Depends(get_factory)):
    return respond(await factory.create_category_api().get_featured_categories())

@app.get("/api/categories/{slug}")
async def get_category(slug: str, factory: APIFactory = Depends(get_factory)):
    return respond(await factory.create_category_api().get_category_by_slug(slug))

@app.get("/api/categories/{slug}/subcategories")
async def subcategories(slug: str, factory: APIFactory = Depends(get_factory)):
    return respond(await factory.create_category_api().get_subcategories(slug))

@app.get("/api/categories/{slug}/products")
async def category_products(slug: str, filter: ProductFilter = Depends(product_filter),
                            factory: APIFactory = Depends(get_factory)):
    return respond(await factory.create_product_api().get_products_by_category(slug, filter))

# ---------- Vendors ----------

@app.get("/api/vendors")
async def list_vendors(filter: VendorFilter = Depends(vendor_filter), factory: APIFactory = Depends(get_factory)):
    return respond(await factory.create_vendor_api().get_vendors(filter))

@app.get("/api/vendors/{vendor_id}")
async def get_vendor(vendor_id: str, factory: APIFactory = Depends(get_factory)):
    api = factory.create_vendor_api()
    result = await api.get_vendor_by_id(vendor_id)
    if isinstance(result, ApiFailure) and result.error.code == "NOT_FOUND":
        result = await api.get_vendor_by_slug(vendor_id)
    return respond(result)

@app.get("/api/vendors/{vendor_id}/products")
async def vendor_products(vendor_id: str, filter: ProductFilter = Depends(product_filter),
                          factory: APIFactory = Depends(get_factory)):
    return respond(await factory.create_vendor_api().get_vendor_products(vendor_id, filter))

@app.get("/api/vendors/{vendor_id}/stats")
async def vendor_stats(vendor_id: str, factory: APIFactory = Depends(get_factory)):
    return respond(await factory.create_vendor_api().get_vendor_stats(vendor_id))

# ---------- Vendor dashboard ----------

def vendor_inventory(user: AuthUser = Depends(require(Role.VENDOR)),
                     inventories: InventoryRegistry = Depends(get_inventories)) -> VendorInventory:
    inventory = inventories.for_vendor(user.id)
    if inventory is None:
        raise HTTPException(status_code=404, detail="Vendor not found")
    return inventory

@app.get("/api/vendor/products")
def dashboard_products(status: str = Query("all"), q: Optional[str] = None,
                       inventory: VendorInventory = Depends(vendor_inventory)):
    if status not in STATUS_FILTERS:
        raise HTTPException(status_code=400, detail=f"Unknown status filter: {status}")
    return inventory.page(status=status, search=q)

@app.post("/api/vendor/products/{product_id}/duplicate")
def duplicate_listing(product_id: str, inventory: VendorInventory = Depends(vendor_inventory)):
    return respond(inventory.duplicate(product_id))

@app.delete("/api/vendor/products/{product_id}")
def delete_listing(product_id: str, inventory: VendorInventory = Depends(vendor_inventory)):
    return respond(inventory.delete(product_id))

# ---------- Cart ----------

class CartRequest(BaseModel):
    product_id: str
    quantity: int = 1

class QuantityRequest(BaseModel):
    quantity: int = Field(..., ge=0)

@app.get("/api/me/cart")
def get_cart(user: AuthUser = Depends(require()), store: KeyValueStore = Depends(get_store)):
    cart = user_state.get_cart(store, user.id)
    return {"items": cart, **user_state.cart_totals(cart)}

@app.post("/api/me/cart")
async def cart_add(req: CartRequest, user: AuthUser = Depends(require()),
                   store: KeyValueStore = Depends(get_store), factory: APIFactory = Depends(get_factory)):
    found = await factory.create_product_api().get_product_by_id(req.product_id)
    if isinstance(found, ApiFailure):
        return respond(found)
    return operation(user_state.add_to_cart(store, user.id, found.data, req.quantity))

@app.post("/api/me/cart/merge")
def cart_merge(user: AuthUser = Depends(require()), store: KeyValueStore = Depends(get_store)):
    cart = user_state.merge_guest_cart(store, user.id)
    return {"items": cart, **user_state.cart_totals(cart)}

@app.put("/api/me/cart/{product_id}")
def cart_update(product_id: str, req: QuantityRequest, user: AuthUser = Depends(require()),
                store: KeyValueStore = Depends(get_store)):
    return operation(user_state.update_quantity(store, user.id, product_id, req.quantity))

@app.delete("/api/me/cart/{product_id}")
def cart_remove(product_id: str, user: AuthUser = Depends(require()), store: KeyValueStore = Depends(get_store)):
    return operation(user_state.remove_from_cart(store, user.id, product_id))

@app.delete("/api/me/cart")
def cart_clear(user: AuthUser = Depends(require()), store: KeyValueStore = Depends(get_store)):
    return operation(user_state.clear_cart(store, user.id))

# ---------- Wishlist ----------

class WishlistRequest(BaseModel):
    product_id: str

@app.get("/api/me/wishlist")
def get_wishlist(user: AuthUser = Depends(require()), store: KeyValueStore = Depends(get_store)):
    return {"items": user_state.get_wishlist(store, user.id)}

@app.post("/api/me/wishlist")
async def wishlist_add(req: WishlistRequest, user: AuthUser = Depends(require()),
                       store: KeyValueStore = Depends(get_store), factory: APIFactory = Depends(get_factory)):
    found = await factory.create_product_api().get_product_by_id(req.product_id)
    if isinstance(found, ApiFailure):
        return respond(found)
    return operation(user_state.add_to_wishlist(store, user.id, found.data))

@app.delete("/api/me/wishlist/{product_id}")
def wishlist_remove(product_id: str, user: AuthUser = Depends(require()),
                    store: KeyValueStore = Depends(get_store)):
    return operation(user_state.remove_from_wishlist(store, user.id, product_id))

@app.delete("/api/me/wishlist")
def wishlist_clear(user: AuthUser = Depends(require()), store: KeyValueStore = Depends(get_store)):
    return operation(user_state.clear_wishlist(store, user.id))

# ---------- Settings ----------

@app.get("/api/me/settings")
def get_settings(user: AuthUser = Depends(require()), store: KeyValueStore = Depends(get_store)):
    return user_state.get_settings(store, user.id)

@app.patch("/api/me/settings")
def update_settings(patch: Dict[str, Any], user: AuthUser = Depends(require()),
                    store: KeyValueStore = Depends(get_store)):
    try:
        return user_state.update_settings(store, user.id, patch)
    except ValidationError as e:
        raise HTTPException(422, e.errors(include_url=False, include_context=False))

# ---------- Admin ----------

class RoleRequest(BaseModel):
    role: Any = None

@app.patch("/api/admin/users/{user_id}/role")
def update_user_role(user_id: str, req: RoleRequest, admin: AuthUser = Depends(require(Role.ADMIN)),
                     store: KeyValueStore = Depends(get_store)):
    logger.info(f"Admin {admin.id} assigning role {req.role!r} to {user_id}")
    return operation(user_state.set_user_role(store, user_id, req.role))


if __name__ == "__main__":
    import uvicorn
    port = int(os.getenv("PORT", 8000))
    uvicorn.run(app, host="0.0.0.0", port=port)
