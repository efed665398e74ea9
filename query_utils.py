"""In-memory filtering, sorting and pagination over catalogue sequences."""

from datetime import datetime, timezone
from typing import Callable, Dict, Iterable, List, Optional, Sequence, TypeVar

from schemas import PaginatedResponse, Product, ProductFilter, Vendor, VendorFilter

T = TypeVar("T")

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def parse_timestamp(value: Optional[str]) -> datetime:
    """Parse an ISO-8601 date or datetime; missing or bad values sort as the epoch."""
    if not value:
        return _EPOCH
    try:
        ts = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return _EPOCH
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=timezone.utc)
    return ts


def matches_search(query: str, *fields: Optional[str], tags: Iterable[str] = ()) -> bool:
    q = query.casefold()
    if any(f and q in f.casefold() for f in fields):
        return True
    return any(q in tag.casefold() for tag in tags)


def product_matches(product: Product, f: ProductFilter) -> bool:
    if f.category and product.category_slug != f.category:
        return False
    if f.vendor_id and product.vendor_id != f.vendor_id:
        return False
    if f.min_price is not None and product.price < f.min_price:
        return False
    if f.max_price is not None and product.price > f.max_price:
        return False
    if f.condition and product.condition != f.condition:
        return False
    if f.conditions and (product.condition or "") not in f.conditions:
        return False
    if f.in_stock and product.stock == 0:
        return False
    if f.featured is not None and product.featured != f.featured:
        return False
    query = f.query
    if query and not matches_search(query, product.name, product.description, tags=product.tags):
        return False
    return True


def filter_products(products: Sequence[Product], f: ProductFilter) -> List[Product]:
    return [p for p in products if product_matches(p, f)]


# sorted() is stable, reverse=True included, so ties keep input order.
_PRODUCT_SORTS: Dict[str, Callable[[List[Product]], List[Product]]] = {
    "newest": lambda items: sorted(items, key=lambda p: parse_timestamp(p.created_at), reverse=True),
    "price-asc": lambda items: sorted(items, key=lambda p: p.price),
    "price-desc": lambda items: sorted(items, key=lambda p: p.price, reverse=True),
    "rating": lambda items: sorted(items, key=lambda p: p.rating or 0, reverse=True),
    "popular": lambda items: sorted(items, key=lambda p: p.views or 0, reverse=True),
    "name": lambda items: sorted(items, key=lambda p: p.name.casefold()),
    "featured": lambda items: sorted(items, key=lambda p: p.featured, reverse=True),
}


def sort_products(products: Sequence[Product], sort_by: Optional[str]) -> List[Product]:
    """Sort by one of the product sort keys; unknown or empty keys keep input order."""
    sorter = _PRODUCT_SORTS.get(sort_by or "")
    return sorter(list(products)) if sorter else list(products)


def vendor_matches(vendor: Vendor, f: VendorFilter) -> bool:
    if f.featured is not None and vendor.featured != f.featured:
        return False
    if f.verified is not None and vendor.verified != f.verified:
        return False
    if f.search and not matches_search(f.search, vendor.name, vendor.description, tags=vendor.specialties):
        return False
    return True


_VENDOR_SORTS: Dict[str, Callable[[List[Vendor]], List[Vendor]]] = {
    "rating": lambda items: sorted(items, key=lambda v: v.rating, reverse=True),
    "name": lambda items: sorted(items, key=lambda v: v.name.casefold()),
    "newest": lambda items: sorted(items, key=lambda v: parse_timestamp(v.joined_date), reverse=True),
    "popular": lambda items: sorted(items, key=lambda v: v.total_sales, reverse=True),
}


def query_vendors(vendors: Sequence[Vendor], f: VendorFilter) -> PaginatedResponse[Vendor]:
    matched = [v for v in vendors if vendor_matches(v, f)]
    sorter = _VENDOR_SORTS.get(f.sort_by or "")
    if sorter:
        matched = sorter(matched)
    return paginate(matched, f.page, f.limit)


def query_products(products: Sequence[Product], f: ProductFilter) -> PaginatedResponse[Product]:
    """Filter, then sort, then paginate."""
    return paginate(sort_products(filter_products(products, f), f.sort_by), f.page, f.limit)


def paginate(items: Sequence[T], page: int, page_size: int) -> PaginatedResponse[T]:
    start = (page - 1) * page_size
    end = start + page_size
    return PaginatedResponse(
        data=list(items[start:end]),
        total=len(items),
        page=page,
        page_size=page_size,
        has_next=end < len(items),
        has_previous=page > 1,
    )
