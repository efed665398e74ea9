"""Static catalogue backing the in-memory API.

Tuples, so the shared source data cannot be mutated in place.
"""

import re

from schemas import (
    Category,
    Grading,
    Product,
    Vendor,
    VendorContact,
    VendorLocation,
    VendorPolicies,
    VendorSocialMedia,
)

CATEGORIES = (
    Category(
        id="cat-1",
        name="Trading Cards",
        slug="trading-cards",
        description="Rare and collectible trading cards including Pokémon, sports cards, and gaming cards",
        image="https://images.unsplash.com/photo-1578662996442-48f60103fc96?w=500&h=300&fit=crop",
        icon="🃏",
        product_count=5,
        featured=True,
        order=1,
    ),
    Category(
        id="cat-2",
        name="Comics",
        slug="comics",
        description="Rare comics, graphic novels, and manga from around the world",
        image="https://images.unsplash.com/photo-1578663287732-a3985e772b6b?w=500&h=300&fit=crop",
        icon="📚",
        product_count=3,
        featured=True,
        order=2,
    ),
    Category(
        id="cat-3",
        name="Figures",
        slug="figures",
        description="Scale figures, statues and sealed collectible toys",
        icon="🗿",
        product_count=2,
        featured=False,
        order=3,
    ),
    Category(
        id="cat-4",
        name="Pokémon",
        slug="pokemon",
        description="Pokémon TCG singles, graded slabs and sealed product",
        parent="trading-cards",
        product_count=3,
        order=1,
    ),
    Category(
        id="cat-5",
        name="Sports Cards",
        slug="sports-cards",
        description="Football, basketball and cricket cards",
        parent="trading-cards",
        product_count=1,
        order=2,
    ),
)

VENDORS = (
    Vendor(
        id="vendor-1",
        slug="emirates-card-exchange",
        name="Emirates Card Exchange",
        description=(
            "Dubai's premier destination for rare and authentic trading cards. Specializing in "
            "Pokémon, sports cards, and gaming collectibles."
        ),
        rating=4.8,
        total_sales=1250,
        product_count=4,
        review_count=89,
        response_time="Within 2 hours",
        verified=True,
        featured=True,
        joined_date="2019-03-15",
        location=VendorLocation(city="Dubai", state="Dubai", country="United Arab Emirates"),
        contact=VendorContact(email="info@emiratescards.ae", phone="+971-4-555-0123",
                              website="https://emiratescards.ae"),
        social_media=VendorSocialMedia(instagram="https://instagram.com/emiratescardexchange"),
        specialties=["Trading Cards", "Pokémon", "Sports Cards", "Gaming Cards"],
        policies=VendorPolicies(
            shipping="We ship across the UAE within 24-48 hours. Free shipping for orders above 200 AED.",
            returns="30-day return policy. Items must be in original condition with authentication certificates.",
            authenticity="All cards are verified by our in-house experts and come with certificates of authenticity.",
        ),
    ),
    Vendor(
        id="vendor-2",
        slug="dubai-comic-vault",
        name="Dubai Comic Vault",
        description=(
            "The UAE's leading comic book store and collectibles hub. From vintage Marvel and DC "
            "comics to rare manga and graphic novels."
        ),
        rating=4.9,
        total_sales=890,
        product_count=3,
        review_count=67,
        response_time="Within 3 hours",
        verified=True,
        featured=True,
        joined_date="2015-08-20",
        location=VendorLocation(city="Dubai", state="Dubai", country="United Arab Emirates"),
        contact=VendorContact(email="collectors@dubaicomicvault.ae", website="https://dubaicomicvault.ae"),
        specialties=["Comics", "Marvel", "DC Comics", "Manga", "Graphic Novels"],
        policies=VendorPolicies(
            shipping="Express delivery across UAE within 24 hours.",
            returns="14-day return policy for collectible items.",
            authenticity="Every key issue is CGC graded or inspected in store.",
        ),
    ),
    Vendor(
        id="vendor-3",
        slug="abu-dhabi-figure-house",
        name="Abu Dhabi Figure House",
        description="Scale figures and sealed toys, imported directly from Japan.",
        rating=4.3,
        total_sales=210,
        product_count=3,
        review_count=18,
        response_time="Within 1 day",
        verified=False,
        featured=False,
        joined_date="2022-01-10",
        location=VendorLocation(city="Abu Dhabi", country="United Arab Emirates"),
        specialties=["Figures", "Anime", "Statues"],
    ),
)

_VENDOR_NAMES = {v.id: v.name for v in VENDORS}
_CATEGORY_NAMES = {c.slug: c.name for c in CATEGORIES}


def _product(id, name, category_slug, vendor_id, price, **kwargs) -> Product:
    return Product(
        id=id,
        name=name,
        slug=re.sub(r"[^a-z0-9]+", "-", name.lower()).strip("-"),
        category=_CATEGORY_NAMES[category_slug],
        category_slug=category_slug,
        vendor=_VENDOR_NAMES[vendor_id],
        vendor_id=vendor_id,
        price=price,
        **kwargs,
    )


PRODUCTS = (
    _product(
        "1", "Charizard Base Set Holo", "pokemon", "vendor-1", 4500.0,
        original_price=5200.0,
        description="1999 Base Set Charizard, unlimited print, PSA graded.",
        stock=1, state="open", condition="near-mint",
        grading=Grading(company="PSA", grade="8", certificate="PSA-44120987"),
        card_number="4/102", views=1520, likes=230, sales=3, rating=4.9, review_count=12,
        year=1999, manufacturer="Wizards of the Coast",
        tags=["pokemon", "holo", "vintage", "graded"], featured=True,
        created_at="2024-01-15T10:00:00Z", updated_at="2024-03-01T09:00:00Z",
    ),
    _product(
        "2", "Pikachu Illustrator Promo Reprint", "pokemon", "vendor-1", 350.0,
        description="Authorised reprint of the Illustrator promo, sealed sleeve.",
        stock=4, state="sealed", condition="mint",
        views=640, likes=80, sales=11, rating=4.5, review_count=7,
        year=2021, manufacturer="The Pokémon Company",
        tags=["pokemon", "promo"], featured=False,
        created_at="2024-02-20T08:30:00Z", updated_at="2024-02-20T08:30:00Z",
    ),
    _product(
        "3", "Scarlet & Violet Booster Box", "pokemon", "vendor-1", 520.0,
        description="Factory sealed booster box, 36 packs.",
        stock=0, state="sealed", condition="mint",
        views=410, likes=35, sales=20, rating=4.7, review_count=15,
        year=2023, manufacturer="The Pokémon Company",
        tags=["pokemon", "sealed", "booster"], featured=True,
        created_at="2023-11-05T12:00:00Z", updated_at="2024-01-02T12:00:00Z",
    ),
    _product(
        "4", "Messi Rookie Card 2004", "sports-cards", "vendor-1", 2800.0,
        description="Panini Mega Cracks rookie card, BGS graded.",
        stock=1, state="open", condition="excellent",
        grading=Grading(company="BGS", grade="9"),
        views=980, likes=150, sales=1, rating=4.8, review_count=4,
        year=2004, manufacturer="Panini",
        tags=["football", "rookie", "graded"], featured=False,
        created_at="2024-03-10T16:45:00Z", updated_at="2024-03-10T16:45:00Z",
    ),
    _product(
        "5", "Amazing Spider-Man #300", "comics", "vendor-2", 1900.0,
        original_price=2100.0,
        description="First full appearance of Venom. CGC graded, white pages.",
        stock=2, state="open", condition="near-mint",
        grading=Grading(company="CGC", grade="9.4", certificate="CGC-3948201"),
        views=1210, likes=190, sales=5, rating=5.0, review_count=9,
        year=1988, manufacturer="Marvel",
        tags=["marvel", "venom", "key issue", "graded"], featured=True,
        created_at="2024-01-28T11:20:00Z", updated_at="2024-02-14T11:20:00Z",
    ),
    _product(
        "6", "Batman: The Killing Joke First Print", "comics", "vendor-2", 650.0,
        description="1988 first printing of Alan Moore's classic.",
        stock=3, state="open", condition="very-fine",
        views=530, likes=60, sales=8, rating=4.6, review_count=6,
        year=1988, manufacturer="DC Comics",
        tags=["dc", "batman", "joker"], featured=False,
        created_at="2023-12-01T09:00:00Z", updated_at="2023-12-01T09:00:00Z",
    ),
    _product(
        "7", "Akira Volume 1 Japanese Edition", "comics", "vendor-2", 650.0,
        description="Kodansha first edition tankobon, light shelf wear.",
        stock=1, state="open", condition="good",
        views=300, likes=41, sales=2, rating=4.4, review_count=3,
        year=1984, manufacturer="Kodansha",
        tags=["manga", "akira", "japanese"], featured=False,
        created_at="2024-02-02T14:00:00Z", updated_at="2024-02-02T14:00:00Z",
    ),
    _product(
        "8", "Evangelion Unit-01 1/7 Scale Figure", "figures", "vendor-3", 980.0,
        description="Sealed 1/7 scale PVC figure with display base.",
        stock=5, state="sealed", condition="mint",
        views=720, likes=95, sales=14, rating=4.2, review_count=10,
        year=2022, manufacturer="Good Smile Company",
        tags=["anime", "evangelion", "scale figure"], featured=True,
        created_at="2024-03-18T07:15:00Z", updated_at="2024-03-18T07:15:00Z",
    ),
    _product(
        "9", "Gundam RX-78-2 Master Grade", "figures", "vendor-3", 240.0,
        description="Master Grade model kit, unassembled in original box.",
        stock=0, state="sealed", condition="mint",
        views=260, likes=22, sales=30, rating=4.0, review_count=21,
        year=2020, manufacturer="Bandai",
        tags=["gundam", "model kit"], featured=False,
        created_at="2023-10-09T10:10:00Z", updated_at="2023-10-09T10:10:00Z",
    ),
    _product(
        "10", "Blue-Eyes White Dragon LOB 1st Edition", "trading-cards", "vendor-3", 1350.0,
        description="Legend of Blue Eyes first edition, raw, light edge wear.",
        stock=1, state="open", condition="excellent",
        views=890, likes=110, sales=0, rating=4.3, review_count=2,
        year=2002, manufacturer="Konami",
        tags=["yugioh", "1st edition", "vintage"], featured=False,
        created_at="2024-02-25T19:00:00Z", updated_at="2024-02-25T19:00:00Z",
    ),
)

# Dashboard status of each vendor listing; products not listed here are active.
LISTING_STATUS = {
    "3": "sold",
    "4": "draft",
    "9": "sold",
}
