"""Vendor dashboard inventory: listings with a publication status.

Writes never touch the current tuple of listings; they build a new one and
swap it in, so a reader holding the old tuple keeps a consistent view.
"""

from __future__ import annotations

import logging
import time
from typing import Dict, Iterable, Optional, Sequence, Tuple

import mock_data
from envelope import fail, ok
from query_utils import matches_search
from schemas import ApiResponse, Product, StatusCounts, Vendor, VendorInventoryPage, VendorListing

logger = logging.getLogger(__name__)

STATUS_FILTERS = ("all", "active", "draft", "sold", "out_of_stock")


def status_counts(listings: Iterable[VendorListing]) -> StatusCounts:
    counts = StatusCounts()
    for listing in listings:
        counts.all += 1
        if listing.status == "active":
            counts.active += 1
            if listing.stock == 0:
                counts.out_of_stock += 1
        elif listing.status == "draft":
            counts.draft += 1
        elif listing.status == "sold":
            counts.sold += 1
            counts.total_revenue += listing.price
    return counts


def filter_listings(listings: Sequence[VendorListing], status: str = "all",
                    search: Optional[str] = None) -> list:
    if status == "out_of_stock":
        selected = [item for item in listings if item.status == "active" and item.stock == 0]
    elif status in ("active", "draft", "sold"):
        selected = [item for item in listings if item.status == status]
    else:
        selected = list(listings)
    if search:
        selected = [item for item in selected if matches_search(search, item.name, item.description, tags=item.tags)]
    return selected


class VendorInventory:
    def __init__(self, vendor_id: str, listings: Sequence[VendorListing] = ()):
        self.vendor_id = vendor_id
        self._listings: Tuple[VendorListing, ...] = tuple(listings)

    @classmethod
    def from_products(cls, vendor_id: str, products: Iterable[Product],
                      statuses: Optional[Dict[str, str]] = None) -> "VendorInventory":
        statuses = statuses or {}
        listings = [
            VendorListing(**p.model_dump(), status=statuses.get(p.id, "active"))
            for p in products if p.vendor_id == vendor_id
        ]
        return cls(vendor_id, listings)

    @property
    def listings(self) -> Tuple[VendorListing, ...]:
        return self._listings

    def page(self, status: str = "all", search: Optional[str] = None) -> VendorInventoryPage:
        snapshot = self._listings
        return VendorInventoryPage(counts=status_counts(snapshot), listings=filter_listings(snapshot, status, search))

    def duplicate(self, listing_id: str, now_ms: Optional[int] = None) -> ApiResponse[VendorListing]:
        source = self._get(listing_id)
        if source is None:
            return fail("Product not found", code="NOT_FOUND", status=404)
        stamp = now_ms if now_ms is not None else int(time.time() * 1000)
        copy = source.model_copy(update={
            "id": f"{listing_id}-copy-{stamp}",
            "name": f"{source.name} (Copy)",
            "status": "draft",
        })
        self._listings = (copy,) + self._listings
        logger.info(f"[{self.vendor_id}] Duplicated {listing_id} as {copy.id}")
        return ok(copy)

    def delete(self, listing_id: str) -> ApiResponse[str]:
        if self._get(listing_id) is None:
            return fail("Product not found", code="NOT_FOUND", status=404)
        self._listings = tuple(item for item in self._listings if item.id != listing_id)
        logger.info(f"[{self.vendor_id}] Deleted {listing_id}")
        return ok(listing_id)

    def _get(self, listing_id: str) -> Optional[VendorListing]:
        return next((item for item in self._listings if item.id == listing_id), None)


class InventoryRegistry:
    """Lazily builds one inventory per known vendor from the catalogue."""

    def __init__(self, products: Sequence[Product] = mock_data.PRODUCTS,
                 statuses: Optional[Dict[str, str]] = None,
                 vendors: Iterable[Vendor] = mock_data.VENDORS):
        self.products = products
        self.statuses = mock_data.LISTING_STATUS if statuses is None else statuses
        self.vendor_ids = frozenset(vendor.id for vendor in vendors)
        self._inventories: Dict[str, VendorInventory] = {}

    def for_vendor(self, vendor_id: str) -> Optional[VendorInventory]:
        """The vendor's inventory, or None for an id outside the vendor catalogue."""
        if vendor_id not in self.vendor_ids:
            return None
        if vendor_id not in self._inventories:
            self._inventories[vendor_id] = VendorInventory.from_products(vendor_id, self.products, self.statuses)
        return self._inventories[vendor_id]
