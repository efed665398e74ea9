"""
Query utility tests

Filtering, sorting and pagination over in-memory product sequences,
including the lenient parsing of filter options.
"""

import pytest

import mock_data
from conftest import make_product
from query_utils import filter_products, paginate, parse_timestamp, query_products, sort_products
from schemas import ProductFilter


def ids(products):
    return [p.id for p in products]


# =============================================================================
# Pagination
# =============================================================================


class TestPaginate:
    """Tests for paginate()."""

    @pytest.mark.parametrize(
        "total,page,page_size",
        [(0, 1, 20), (5, 1, 20), (20, 1, 20), (21, 1, 20), (21, 2, 20), (45, 3, 20), (10, 4, 3), (3, 5, 2)],
    )
    def test_page_flags_and_slice_length(self, total, page, page_size):
        """has_next/has_previous and slice length follow the page arithmetic."""
        result = paginate(list(range(total)), page, page_size)

        assert result.total == total
        assert result.page == page
        assert result.page_size == page_size
        assert result.has_next == (page * page_size < total)
        assert result.has_previous == (page > 1)
        assert len(result.data) == min(page_size, max(0, total - (page - 1) * page_size))

    def test_second_page_contents(self):
        """The second page starts right after the first."""
        result = paginate(list("abcdefg"), 2, 3)
        assert result.data == ["d", "e", "f"]


# =============================================================================
# Filtering
# =============================================================================


class TestFilterProducts:
    """Tests for filter_products()."""

    def test_empty_filter_keeps_everything(self):
        assert len(filter_products(mock_data.PRODUCTS, ProductFilter())) == len(mock_data.PRODUCTS)

    def test_category_is_exact_slug_match(self):
        assert ids(filter_products(mock_data.PRODUCTS, ProductFilter(category="comics"))) == ["5", "6", "7"]

    def test_price_bounds_are_inclusive(self):
        result = filter_products(mock_data.PRODUCTS, ProductFilter(min_price=650, max_price=980))
        assert ids(result) == ["6", "7", "8"]

    def test_in_stock_excludes_zero_stock(self):
        result = filter_products(mock_data.PRODUCTS, ProductFilter(in_stock=True))
        assert "3" not in ids(result)
        assert "9" not in ids(result)
        assert len(result) == 8

    def test_featured_exact_match_both_ways(self):
        assert ids(filter_products(mock_data.PRODUCTS, ProductFilter(featured=True))) == ["1", "3", "5", "8"]
        assert "1" not in ids(filter_products(mock_data.PRODUCTS, ProductFilter(featured=False)))

    def test_condition_and_conditions(self):
        assert ids(filter_products(mock_data.PRODUCTS, ProductFilter(condition="excellent"))) == ["4", "10"]
        result = filter_products(mock_data.PRODUCTS, ProductFilter(conditions=["good", "near-mint"]))
        assert ids(result) == ["1", "5", "7"]

    def test_empty_conditions_list_is_ignored(self):
        result = filter_products(mock_data.PRODUCTS, ProductFilter(conditions=[]))
        assert len(result) == len(mock_data.PRODUCTS)

    def test_filters_compose_as_intersection(self):
        """Two filters together give exactly the intersection of each alone."""
        f1 = {"vendor_id": "vendor-1"}
        f2 = {"in_stock": True}
        alone_1 = set(ids(filter_products(mock_data.PRODUCTS, ProductFilter(**f1))))
        alone_2 = set(ids(filter_products(mock_data.PRODUCTS, ProductFilter(**f2))))
        both = set(ids(filter_products(mock_data.PRODUCTS, ProductFilter(**f1, **f2))))
        assert both == alone_1 & alone_2 == {"1", "2", "4"}


class TestSearch:
    """Search is a case-insensitive substring match on name, description or tags."""

    def test_matches_name(self):
        products = [make_product("a", name="Shiny ABC Card"), make_product("b")]
        assert ids(filter_products(products, ProductFilter(search="abc"))) == ["a"]

    def test_matches_description(self):
        products = [make_product("a", description="contains aBc here"), make_product("b")]
        assert ids(filter_products(products, ProductFilter(search="ABC"))) == ["a"]

    def test_matches_any_tag(self):
        products = [make_product("a", tags=["foo", "xABCx"]), make_product("b", tags=["foo"])]
        assert ids(filter_products(products, ProductFilter(search="abc"))) == ["a"]

    def test_search_query_alias(self):
        result = filter_products(mock_data.PRODUCTS, ProductFilter(searchQuery="venom"))
        assert ids(result) == ["5"]

    def test_search_over_catalogue(self):
        assert ids(filter_products(mock_data.PRODUCTS, ProductFilter(search="POKEMON"))) == ["1", "2", "3"]


# =============================================================================
# Sorting
# =============================================================================


class TestSortProducts:
    """Tests for sort_products()."""

    def test_ties_keep_input_order_ascending(self):
        products = [make_product("x", price=5), make_product("a", price=5), make_product("m", price=1)]
        assert ids(sort_products(products, "price-asc")) == ["m", "x", "a"]

    def test_ties_keep_input_order_descending(self):
        products = [make_product("x", price=5), make_product("a", price=5), make_product("m", price=9)]
        assert ids(sort_products(products, "price-desc")) == ["m", "x", "a"]

    def test_newest_first(self):
        assert ids(sort_products(mock_data.PRODUCTS, "newest"))[:3] == ["8", "4", "10"]

    def test_name_ascending(self):
        assert ids(sort_products(mock_data.PRODUCTS, "name"))[:4] == ["7", "5", "6", "10"]

    def test_popular_and_rating(self):
        assert ids(sort_products(mock_data.PRODUCTS, "popular"))[:2] == ["1", "5"]
        assert ids(sort_products(mock_data.PRODUCTS, "rating"))[:2] == ["5", "1"]

    def test_featured_first_keeps_order_within_groups(self):
        assert ids(sort_products(mock_data.PRODUCTS, "featured")) == ["1", "3", "5", "8", "2", "4", "6", "7", "9", "10"]

    def test_unknown_sort_keeps_order(self):
        assert ids(sort_products(mock_data.PRODUCTS, "cheapest")) == ids(mock_data.PRODUCTS)

    def test_does_not_mutate_source(self):
        source = [make_product("b", price=2), make_product("a", price=1)]
        sort_products(source, "price-asc")
        assert ids(source) == ["b", "a"]


class TestQueryProducts:
    """Filter, then sort, then paginate."""

    def test_pipeline_order(self):
        f = ProductFilter(category="comics", sort_by="price-desc", page=1, limit=2)
        result = query_products(mock_data.PRODUCTS, f)
        assert ids(result.data) == ["5", "6"]
        assert result.total == 3
        assert result.has_next is True

    def test_default_page_size(self):
        result = query_products(mock_data.PRODUCTS, ProductFilter())
        assert result.page == 1
        assert result.page_size == 20


# =============================================================================
# Lenient filter parsing
# =============================================================================


class TestFilterCoercion:
    """Malformed filter values are ignored rather than rejected."""

    def test_unparseable_price_is_dropped(self):
        f = ProductFilter.model_validate({"minPrice": "cheap", "maxPrice": "100"})
        assert f.min_price is None
        assert f.max_price == 100.0

    def test_bad_page_and_limit_fall_back_to_defaults(self):
        f = ProductFilter.model_validate({"page": "0", "limit": "lots"})
        assert f.page == 1
        assert f.limit == 20

    def test_unknown_sort_is_dropped(self):
        assert ProductFilter(sortBy="random").sort_by is None

    def test_flag_strings(self):
        assert ProductFilter.model_validate({"inStock": "true"}).in_stock is True
        assert ProductFilter.model_validate({"featured": "maybe"}).featured is None

    def test_comma_separated_conditions(self):
        assert ProductFilter.model_validate({"conditions": "mint,good"}).conditions == ["mint", "good"]


def test_parse_timestamp_handles_missing_and_bad_values():
    assert parse_timestamp(None) == parse_timestamp("not a date")
    assert parse_timestamp("2024-01-02") < parse_timestamp("2024-01-02T10:00:00Z")
