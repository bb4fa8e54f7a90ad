"""
Tests for Query Construction

Tests for URL building, parameter ordering and validation.
"""

import pytest
import sys
from pathlib import Path

import httpx

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from fdc_client.api.query import (
    DataType,
    SearchField,
    SearchQuery,
    SortOrder,
    build_url,
    food_id_items,
    redact_url,
)
from fdc_client.exceptions import InvalidParameterError, URLConstructionError


def query_pairs(url):
    """Split a URL's query string into ordered (name, value) pairs."""
    return list(httpx.URL(url).params.multi_items())


class TestBuildURL:
    """Tests for build_url."""

    def test_base_url_and_path(self):
        """Test that the URL starts with the fixed scheme and host."""
        url = build_url("KEY", "fdc/v1/foods", [("fdcIds", "1")])

        assert url == "https://api.nal.usda.gov/fdc/v1/foods?api_key=KEY&fdcIds=1"

    def test_leading_slash_is_normalized(self):
        """Test that paths with and without a leading slash match."""
        items = [("query", "apple"), ("pageSize", "5")]

        assert build_url("KEY", "fdc/v1/foods/search", items) == \
            build_url("KEY", "/fdc/v1/foods/search", items)

    def test_api_key_only(self):
        """Test a URL with no extra parameters."""
        url = build_url("KEY", "/fdc/v1/foods")

        assert query_pairs(url) == [("api_key", "KEY")]

    def test_api_key_is_first_and_unique(self):
        """Test that api_key appears exactly once, before other parameters."""
        items = SearchQuery("apple", data_type="Branded", page_size=3).query_items()
        pairs = query_pairs(build_url("KEY", "fdc/v1/foods/search", items))

        names = [name for name, _ in pairs]
        assert names[0] == "api_key"
        assert names.count("api_key") == 1

    def test_values_are_escaped(self):
        """Test that spaces and reserved characters survive as one value."""
        url = build_url("KEY", "fdc/v1/foods/search", [("brandOwner", "Ben & Jerry's")])

        assert " " not in url
        assert query_pairs(url) == [("api_key", "KEY"), ("brandOwner", "Ben & Jerry's")]

    def test_unicode_values_are_encoded(self):
        """Test that non-ASCII values survive encoding."""
        url = build_url("KEY", "fdc/v1/foods/search", [("query", "crème brûlée")])

        assert query_pairs(url)[1] == ("query", "crème brûlée")

    def test_unencodable_value_raises(self):
        """Test that an unencodable value is reported, not dropped."""
        with pytest.raises(URLConstructionError) as exc_info:
            build_url("KEY", "fdc/v1/foods/search", [("query", "bad\ud800")])

        assert exc_info.value.parameter == "query"

    def test_unencodable_api_key_raises(self):
        """Test that an unencodable API key is reported."""
        with pytest.raises(URLConstructionError):
            build_url("\udcff", "fdc/v1/foods")


class TestSearchQuery:
    """Tests for SearchQuery serialization."""

    def test_search_terms_only(self):
        """Test that omitted optional parameters never appear."""
        items = SearchQuery("cheddar cheese").query_items()

        assert items == [("query", "cheddar cheese")]

    def test_full_parameter_order(self):
        """Test the fixed order of every optional parameter."""
        query = SearchQuery(
            "cheddar cheese",
            data_type=DataType.BRANDED,
            page_size=25,
            page_number=2,
            sort_by=SearchField.SCORE,
            sort_order=SortOrder.DESCENDING,
            brand_owner="Kraft"
        )

        assert query.query_items() == [
            ("query", "cheddar cheese"),
            ("dataType", "Branded"),
            ("pageSize", "25"),
            ("pageNumber", "2"),
            ("sortBy", "score"),
            ("sortOrder", "desc"),
            ("brandOwner", "Kraft"),
        ]

    def test_sort_parameters_are_adjacent(self):
        """Test that score/desc serialize as sortBy=score&sortOrder=desc."""
        query = SearchQuery("apple", page_size=10, sort_by="score", sort_order="desc", brand_owner="X")
        url = build_url("KEY", "fdc/v1/foods/search", query.query_items())

        assert "sortBy=score&sortOrder=desc" in url
        assert url.index("pageSize=10") < url.index("sortBy=score")
        assert url.index("sortOrder=desc") < url.index("brandOwner=X")

    def test_partial_parameters_keep_order(self):
        """Test that gaps in optional parameters are skipped cleanly."""
        items = SearchQuery("apple", page_number=0, sort_order=SortOrder.ASCENDING).query_items()

        assert items == [("query", "apple"), ("pageNumber", "0"), ("sortOrder", "asc")]

    def test_string_codes_are_coerced_to_enums(self):
        """Test that literal enum codes are accepted."""
        query = SearchQuery("apple", sort_by="publishedDate", sort_order="asc")

        assert query.sort_by is SearchField.PUBLISHED_DATE
        assert query.sort_order is SortOrder.ASCENDING

    def test_data_type_accepts_free_text(self):
        """Test that data types outside the documented set pass through."""
        items = SearchQuery("apple", data_type="Survey (FNDDS)").query_items()

        assert ("dataType", "Survey (FNDDS)") in items

    @pytest.mark.parametrize("field", list(SearchField))
    def test_every_sort_field_serializes(self, field):
        """Test that each sort field renders as its literal code."""
        items = SearchQuery("apple", sort_by=field).query_items()

        assert items[-1] == ("sortBy", field.value)


class TestSearchQueryValidation:
    """Tests for parameter validation at construction."""

    def test_invalid_sort_field_rejected(self):
        """Test that unknown sort fields are rejected."""
        with pytest.raises(InvalidParameterError) as exc_info:
            SearchQuery("apple", sort_by="calories")

        assert exc_info.value.name == "sort_by"

    def test_invalid_sort_order_rejected(self):
        """Test that sort orders outside asc/desc are rejected."""
        with pytest.raises(InvalidParameterError):
            SearchQuery("apple", sort_order="ascending")

    def test_sort_order_in_sort_field_slot_rejected(self):
        """Test that a member of the wrong enum is rejected."""
        with pytest.raises(InvalidParameterError):
            SearchQuery("apple", sort_by=SortOrder.DESCENDING)

    @pytest.mark.parametrize("kwargs", [
        {"data_type": SortOrder.DESCENDING},
        {"data_type": SearchField.SCORE},
        {"search_terms": DataType.BRANDED},
        {"brand_owner": SortOrder.ASCENDING},
    ])
    def test_foreign_enum_members_rejected(self, kwargs):
        """Test that members of unrelated option sets are not sent as text."""
        params = {"search_terms": "apple", **kwargs}

        with pytest.raises(InvalidParameterError):
            SearchQuery(**params)

    @pytest.mark.parametrize("kwargs", [
        {"data_type": ""},
        {"brand_owner": ""},
    ])
    def test_empty_optional_values_rejected(self, kwargs):
        """Test that supplied optional values must not be empty."""
        with pytest.raises(InvalidParameterError):
            SearchQuery("apple", **kwargs)

    def test_empty_search_terms_rejected(self):
        """Test that the search term is required."""
        with pytest.raises(InvalidParameterError):
            SearchQuery("")

    @pytest.mark.parametrize("kwargs", [
        {"page_size": 0},
        {"page_size": -5},
        {"page_number": -1},
        {"page_size": "10"},
        {"page_number": True},
        {"page_size": 2.5},
    ])
    def test_invalid_paging_rejected(self, kwargs):
        """Test that paging values must be non-negative integers."""
        with pytest.raises(InvalidParameterError):
            SearchQuery("apple", **kwargs)

    def test_invalid_parameter_is_value_error(self):
        """Test that validation errors can be caught as ValueError."""
        with pytest.raises(ValueError):
            SearchQuery("apple", sort_order="sideways")


class TestFoodIdItems:
    """Tests for batch lookup identifiers."""

    def test_one_item_per_identifier_in_order(self):
        """Test that N identifiers produce N fdcIds items in input order."""
        ids = ["534358", "373052", "616350", "373052"]
        items = food_id_items(ids)

        assert items == [("fdcIds", fdc_id) for fdc_id in ids]

    def test_url_contains_each_identifier(self):
        """Test the identifiers as they appear in the URL."""
        url = build_url("KEY", "fdc/v1/foods", food_id_items(["3", "1", "2"]))

        assert url.endswith("?api_key=KEY&fdcIds=3&fdcIds=1&fdcIds=2")

    def test_integer_identifiers_rendered_as_decimal(self):
        """Test that integer IDs are accepted."""
        assert food_id_items([534358]) == [("fdcIds", "534358")]

    def test_generator_input(self):
        """Test that any iterable is accepted."""
        items = food_id_items(str(n) for n in range(3))

        assert [value for _, value in items] == ["0", "1", "2"]

    def test_empty_sequence_rejected(self):
        """Test that a lookup needs at least one identifier."""
        with pytest.raises(InvalidParameterError):
            food_id_items([])

    def test_empty_identifier_rejected(self):
        """Test that blank identifiers are rejected."""
        with pytest.raises(InvalidParameterError):
            food_id_items(["1", ""])

    def test_bare_string_rejected(self):
        """Test that a single string is not split into characters."""
        with pytest.raises(InvalidParameterError):
            food_id_items("534358")


class TestRedactURL:
    """Tests for API key redaction in logs."""

    def test_api_key_masked(self):
        """Test that the key value is hidden."""
        url = build_url("SECRET", "fdc/v1/foods", [("fdcIds", "1")])

        redacted = redact_url(url)

        assert "SECRET" not in redacted
        assert query_pairs(redacted) == [("api_key", "***"), ("fdcIds", "1")]

    def test_url_without_query_unchanged(self):
        """Test that URLs without a query are returned as-is."""
        assert redact_url("https://api.nal.usda.gov/fdc/v1") == "https://api.nal.usda.gov/fdc/v1"


if __name__ == "__main__":
    pytest.main([__file__, "-v", "-s"])
