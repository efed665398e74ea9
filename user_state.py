"""Cart, wishlist, settings and role assignment rules over the key-value store."""

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from auth_gate import Role
from schemas import CartItem, Product, UserSettings, WishlistItem
from storage import KeyValueStore, load_snapshot, save_snapshot, storage_key

logger = logging.getLogger(__name__)


@dataclass
class OperationResult:
    success: bool
    message: str
    data: Any = None


# ---------- Cart ----------

def get_cart(store: KeyValueStore, user_id: Optional[str]) -> List[CartItem]:
    raw = load_snapshot(store, storage_key("cart", user_id), [])
    try:
        return [CartItem.model_validate(item) for item in raw]
    except (TypeError, ValidationError) as e:
        logger.warning(f"Ignoring unreadable cart for {user_id}: {e}")
        return []


def _save_cart(store: KeyValueStore, user_id: Optional[str], cart: List[CartItem]):
    save_snapshot(store, storage_key("cart", user_id), [item.model_dump() for item in cart])


def add_to_cart(store: KeyValueStore, user_id: Optional[str], product: Product,
                quantity: int = 1) -> OperationResult:
    if quantity <= 0:
        return OperationResult(False, "Invalid quantity")
    if quantity > product.stock:
        return OperationResult(False, "Not enough stock")

    cart = get_cart(store, user_id)
    for i, item in enumerate(cart):
        if item.product_id == product.id:
            new_quantity = item.quantity + quantity
            if new_quantity > product.stock:
                return OperationResult(False, "Not enough stock")
            cart[i] = item.model_copy(update={"quantity": new_quantity, "stock": product.stock})
            _save_cart(store, user_id, cart)
            return OperationResult(True, "Quantity updated", cart[i])

    item = CartItem(
        product_id=product.id,
        name=product.name,
        price=product.price,
        image=product.image,
        vendor_id=product.vendor_id,
        stock=product.stock,
        quantity=quantity,
    )
    cart.append(item)
    _save_cart(store, user_id, cart)
    return OperationResult(True, "Added to cart", item)


def remove_from_cart(store: KeyValueStore, user_id: Optional[str], product_id: str) -> OperationResult:
    cart = get_cart(store, user_id)
    if not cart:
        return OperationResult(False, "Cart is empty")
    remaining = [item for item in cart if item.product_id != product_id]
    if len(remaining) == len(cart):
        return OperationResult(False, "Product not in cart")
    _save_cart(store, user_id, remaining)
    return OperationResult(True, "Removed from cart")


def update_quantity(store: KeyValueStore, user_id: Optional[str], product_id: str,
                    quantity: int) -> OperationResult:
    if quantity < 0:
        return OperationResult(False, "Invalid quantity")

    cart = get_cart(store, user_id)
    index = next((i for i, item in enumerate(cart) if item.product_id == product_id), None)
    if index is None:
        return OperationResult(False, "Product not in cart")
    if quantity == 0:
        return remove_from_cart(store, user_id, product_id)
    if quantity > cart[index].stock:
        return OperationResult(False, "Not enough stock")

    cart[index] = cart[index].model_copy(update={"quantity": quantity})
    _save_cart(store, user_id, cart)
    return OperationResult(True, "Quantity updated", cart[index])


def clear_cart(store: KeyValueStore, user_id: Optional[str]) -> OperationResult:
    store.delete(storage_key("cart", user_id))
    return OperationResult(True, "Cart cleared")


def cart_totals(cart: List[CartItem]) -> Dict[str, float]:
    return {
        "item_count": sum(item.quantity for item in cart),
        "subtotal": round(sum(item.price * item.quantity for item in cart), 2),
    }


def merge_guest_cart(store: KeyValueStore, user_id: str) -> List[CartItem]:
    """Fold the guest cart into the user's cart after sign-in.

    Quantities add up, capped at the stock recorded on the item. The guest
    snapshot is removed afterwards.
    """
    guest = get_cart(store, None)
    if not guest:
        return get_cart(store, user_id)

    cart = get_cart(store, user_id)
    by_id = {item.product_id: i for i, item in enumerate(cart)}
    for item in guest:
        if item.product_id in by_id:
            i = by_id[item.product_id]
            stock = max(cart[i].stock, item.stock)
            cart[i] = cart[i].model_copy(update={
                "quantity": min(cart[i].quantity + item.quantity, stock),
                "stock": stock,
            })
        else:
            by_id[item.product_id] = len(cart)
            cart.append(item)
    _save_cart(store, user_id, cart)
    store.delete(storage_key("cart", None))
    return cart


# ---------- Wishlist ----------

def get_wishlist(store: KeyValueStore, user_id: Optional[str]) -> List[WishlistItem]:
    raw = load_snapshot(store, storage_key("wishlist", user_id), [])
    try:
        return [WishlistItem.model_validate(item) for item in raw]
    except (TypeError, ValidationError) as e:
        logger.warning(f"Ignoring unreadable wishlist for {user_id}: {e}")
        return []


def add_to_wishlist(store: KeyValueStore, user_id: Optional[str], product: Product) -> OperationResult:
    items = get_wishlist(store, user_id)
    if any(item.product_id == product.id for item in items):
        return OperationResult(False, "Item already in wishlist")
    item = WishlistItem(product_id=product.id, name=product.name, price=product.price, image=product.image)
    items.append(item)
    save_snapshot(store, storage_key("wishlist", user_id), [i.model_dump() for i in items])
    return OperationResult(True, "Added to wishlist", item)


def remove_from_wishlist(store: KeyValueStore, user_id: Optional[str], product_id: str) -> OperationResult:
    items = get_wishlist(store, user_id)
    remaining = [i for i in items if i.product_id != product_id]
    if len(remaining) == len(items):
        return OperationResult(False, "Product not in wishlist")
    save_snapshot(store, storage_key("wishlist", user_id), [i.model_dump() for i in remaining])
    return OperationResult(True, "Removed from wishlist")


def is_in_wishlist(store: KeyValueStore, user_id: Optional[str], product_id: str) -> bool:
    return any(i.product_id == product_id for i in get_wishlist(store, user_id))


def clear_wishlist(store: KeyValueStore, user_id: Optional[str]) -> OperationResult:
    save_snapshot(store, storage_key("wishlist", user_id), [])
    return OperationResult(True, "Wishlist cleared")


# ---------- Settings ----------

def _deep_merge(base: Dict[str, Any], patch: Dict[str, Any]) -> Dict[str, Any]:
    merged = dict(base)
    for key, value in patch.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def get_settings(store: KeyValueStore, user_id: str) -> UserSettings:
    """Stored settings layered over the defaults."""
    raw = load_snapshot(store, storage_key("settings", user_id), {})
    try:
        return UserSettings.model_validate(_deep_merge(UserSettings().model_dump(), raw))
    except (TypeError, AttributeError, ValidationError) as e:
        logger.warning(f"Ignoring unreadable settings for {user_id}: {e}")
        return UserSettings()


def update_settings(store: KeyValueStore, user_id: str, patch: Dict[str, Any]) -> UserSettings:
    """Merge a partial update into the stored settings; raises ValidationError on bad values."""
    current = get_settings(store, user_id)
    updated = UserSettings.model_validate(_deep_merge(current.model_dump(), patch))
    save_snapshot(store, storage_key("settings", user_id), updated.model_dump())
    return updated


# ---------- Role assignment ----------

ASSIGNABLE_ROLES = (Role.COLLECTOR, Role.VENDOR, Role.ADMIN)


def get_user_role(store: KeyValueStore, user_id: str) -> Optional[Role]:
    return Role.parse(load_snapshot(store, storage_key("role", user_id), None))


def set_user_role(store: KeyValueStore, user_id: str, role: Any) -> OperationResult:
    """Record a role assignment; only exact collector/vendor/admin values are accepted."""
    parsed = Role.parse(role)
    if parsed not in ASSIGNABLE_ROLES:
        return OperationResult(False, "Invalid role. Must be collector, vendor, or admin")
    save_snapshot(store, storage_key("role", user_id), parsed.value)
    logger.info(f"Role of {user_id} set to {parsed.value}")
    return OperationResult(True, f"User role updated to {parsed.value}", parsed.value)
