"""
Marketplace Schemas

Pydantic models for the collectibles marketplace: catalogue entities
(products, categories, vendors), query filters, paginated pages and the
success/error envelope every data access call returns.
"""
from typing import Any, Dict, Generic, List, Literal, Optional, TypeVar, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from config import DEFAULT_PAGE, DEFAULT_PAGE_SIZE

T = TypeVar("T")

# ---------- Vocabularies ----------

ProductState = Literal["sealed", "open"]
ListingStatus = Literal["active", "draft", "sold"]

PRODUCT_SORTS = ("newest", "price-asc", "price-desc", "rating", "popular", "name", "featured")
VENDOR_SORTS = ("rating", "name", "newest", "popular")

# ---------- Catalogue ----------

class Grading(BaseModel):
    company: str = Field(..., description="Grading authority, e.g. PSA, CGC, BGS")
    grade: str
    certificate: Optional[str] = None

class Product(BaseModel):
    id: str
    name: str
    slug: str
    description: str = ""
    price: float = Field(..., ge=0)
    original_price: Optional[float] = Field(None, ge=0, description="Compare-at price")
    image: Optional[str] = None
    images: List[str] = Field(default_factory=list)
    category: str = Field(..., description="Category display name")
    category_slug: str
    vendor: str = Field(..., description="Vendor display name")
    vendor_id: str
    stock: int = Field(0, ge=0)
    state: ProductState = "sealed"
    condition: Optional[str] = None
    grading: Optional[Grading] = None
    card_number: Optional[str] = None
    views: int = Field(0, ge=0)
    likes: int = Field(0, ge=0)
    sales: int = Field(0, ge=0)
    rating: float = Field(0, ge=0, le=5)
    review_count: int = Field(0, ge=0)
    year: Optional[int] = None
    manufacturer: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    featured: bool = False
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

class Category(BaseModel):
    id: str
    name: str
    slug: str = Field(..., description="URL-friendly id, unique within its parent")
    description: str = ""
    image: Optional[str] = None
    icon: Optional[str] = None
    parent: Optional[str] = Field(None, description="Parent category slug")
    product_count: int = Field(0, ge=0)
    featured: bool = False
    order: int = 0

class VendorLocation(BaseModel):
    city: Optional[str] = None
    state: Optional[str] = None
    country: Optional[str] = None

class VendorContact(BaseModel):
    email: Optional[str] = None
    phone: Optional[str] = None
    website: Optional[str] = None

class VendorSocialMedia(BaseModel):
    facebook: Optional[str] = None
    twitter: Optional[str] = None
    instagram: Optional[str] = None

class VendorPolicies(BaseModel):
    shipping: str
    returns: str
    authenticity: str

class Vendor(BaseModel):
    id: str
    slug: str
    name: str
    description: str = ""
    avatar: Optional[str] = None
    logo: Optional[str] = None
    banner: Optional[str] = None
    rating: float = Field(0, ge=0, le=5)
    total_sales: int = Field(0, ge=0)
    product_count: int = Field(0, ge=0)
    review_count: int = Field(0, ge=0)
    response_time: Optional[str] = None
    verified: bool = False
    featured: bool = False
    joined_date: str
    location: Optional[VendorLocation] = None
    contact: Optional[VendorContact] = None
    social_media: Optional[VendorSocialMedia] = None
    specialties: List[str] = Field(default_factory=list)
    policies: Optional[VendorPolicies] = None

class VendorListing(Product):
    """A product as its vendor sees it on the dashboard."""
    status: ListingStatus = "active"

# ---------- Filters ----------

def _lenient_float(v):
    if v is None or v == "":
        return None
    try:
        return float(v)
    except (TypeError, ValueError):
        return None

def _lenient_bool(v):
    if v is None or isinstance(v, bool):
        return v
    text = str(v).strip().lower()
    if text in ("true", "1", "yes", "on"):
        return True
    if text in ("false", "0", "no", "off"):
        return False
    return None

def _lenient_positive_int(v, default):
    try:
        n = int(v)
    except (TypeError, ValueError):
        return default
    return n if n >= 1 else default

class _PageFilter(BaseModel):
    """Paging options shared by every list filter.

    Malformed values are coerced to the default instead of rejected.
    """
    model_config = ConfigDict(populate_by_name=True)

    page: int = DEFAULT_PAGE
    limit: int = DEFAULT_PAGE_SIZE

    @field_validator("page", mode="before")
    @classmethod
    def _coerce_page(cls, v):
        return _lenient_positive_int(v, DEFAULT_PAGE)

    @field_validator("limit", mode="before")
    @classmethod
    def _coerce_limit(cls, v):
        return _lenient_positive_int(v, DEFAULT_PAGE_SIZE)

class ProductFilter(_PageFilter):
    category: Optional[str] = Field(None, description="Category slug")
    vendor_id: Optional[str] = Field(None, alias="vendorId")
    min_price: Optional[float] = Field(None, alias="minPrice")
    max_price: Optional[float] = Field(None, alias="maxPrice")
    condition: Optional[str] = None
    conditions: List[str] = Field(default_factory=list)
    in_stock: Optional[bool] = Field(None, alias="inStock")
    featured: Optional[bool] = None
    search: Optional[str] = None
    search_query: Optional[str] = Field(None, alias="searchQuery")
    sort_by: Optional[str] = Field(None, alias="sortBy")

    @field_validator("min_price", "max_price", mode="before")
    @classmethod
    def _coerce_price(cls, v):
        return _lenient_float(v)

    @field_validator("in_stock", "featured", mode="before")
    @classmethod
    def _coerce_flag(cls, v):
        return _lenient_bool(v)

    @field_validator("conditions", mode="before")
    @classmethod
    def _split_conditions(cls, v):
        if v is None:
            return []
        if isinstance(v, str):
            v = [v]
        return [c.strip() for item in v for c in str(item).split(",") if c.strip()]

    @field_validator("sort_by", mode="before")
    @classmethod
    def _known_sort(cls, v):
        return v if v in PRODUCT_SORTS else None

    @property
    def query(self) -> Optional[str]:
        return self.search or self.search_query or None

    def merged(self, **overrides) -> "ProductFilter":
        """Return a copy with the given options replaced."""
        return self.model_copy(update=overrides)

class VendorFilter(_PageFilter):
    featured: Optional[bool] = None
    verified: Optional[bool] = None
    search: Optional[str] = None
    sort_by: Optional[str] = Field(None, alias="sortBy")

    @field_validator("featured", "verified", mode="before")
    @classmethod
    def _coerce_flag(cls, v):
        return _lenient_bool(v)

    @field_validator("sort_by", mode="before")
    @classmethod
    def _known_sort(cls, v):
        return v if v in VENDOR_SORTS else None

# ---------- Pages & envelope ----------

class PaginatedResponse(BaseModel, Generic[T]):
    data: List[T]
    total: int
    page: int
    page_size: int
    has_next: bool
    has_previous: bool

class ApiError(BaseModel):
    message: str
    code: Optional[str] = None
    status: Optional[int] = None
    details: Optional[Any] = None

class ApiSuccess(BaseModel, Generic[T]):
    success: Literal[True] = True
    data: T

class ApiFailure(BaseModel):
    success: Literal[False] = False
    error: ApiError

ApiResponse = Union[ApiSuccess[T], ApiFailure]

# ---------- Vendor stats ----------

class StatsOverview(BaseModel):
    total_products: int = 0
    active_listings: int = 0
    out_of_stock: int = 0
    featured_products: int = 0

class StatsInventory(BaseModel):
    total_items: int = 0
    total_value: float = 0
    average_price: float = 0
    highest_price: float = 0
    lowest_price: float = 0

class StatsPerformance(BaseModel):
    total_views: int = 0
    average_rating: float = 0
    total_reviews: int = 0

class VendorStats(BaseModel):
    vendor_id: str
    overview: StatsOverview = Field(default_factory=StatsOverview)
    inventory: StatsInventory = Field(default_factory=StatsInventory)
    performance: StatsPerformance = Field(default_factory=StatsPerformance)
    categories: Dict[str, int] = Field(default_factory=dict)
    top_products: List[Product] = Field(default_factory=list)
    recent_listings: List[Product] = Field(default_factory=list)

class StatusCounts(BaseModel):
    all: int = 0
    active: int = 0
    draft: int = 0
    sold: int = 0
    out_of_stock: int = 0
    total_revenue: float = 0

class VendorInventoryPage(BaseModel):
    counts: StatusCounts
    listings: List[VendorListing]

# ---------- User state ----------

class CartItem(BaseModel):
    product_id: str
    name: str
    price: float = Field(..., ge=0)
    image: Optional[str] = None
    vendor_id: Optional[str] = None
    stock: int = Field(0, ge=0)
    quantity: int = Field(1, ge=1)

class WishlistItem(BaseModel):
    product_id: str
    name: str
    price: float = Field(..., ge=0)
    image: Optional[str] = None

class NotificationSettings(BaseModel):
    email_orders: bool = True
    email_promotions: bool = False
    price_alerts: bool = True
    new_listings: bool = False

class PrivacySettings(BaseModel):
    show_profile: bool = True
    show_collection: bool = False

class PreferenceSettings(BaseModel):
    currency: str = "AED"
    language: str = "en"
    theme: Literal["light", "dark", "system"] = "system"

class UserSettings(BaseModel):
    display_name: Optional[str] = None
    notifications: NotificationSettings = Field(default_factory=NotificationSettings)
    privacy: PrivacySettings = Field(default_factory=PrivacySettings)
    preferences: PreferenceSettings = Field(default_factory=PreferenceSettings)
