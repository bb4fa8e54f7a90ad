"""
Query Construction Module

Enumerations for the closed option sets of the FoodData Central search
endpoint, the SearchQuery parameter object, and URL construction.

Every value is validated and encoded here, before any request is made.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List, Optional, Sequence, Tuple, Union

import httpx

from ..config import config
from ..exceptions import InvalidParameterError, URLConstructionError


QueryItem = Tuple[str, str]


class SearchField(str, Enum):
    """Fields the search endpoint can sort by."""
    FDC_ID = "fdcId"
    DESCRIPTION = "description"
    COMMON_NAMES = "commonNames"
    ADDITIONAL_DESCRIPTIONS = "additionalDescriptions"
    DATA_TYPE = "dataType"
    FOOD_CODE = "foodCode"
    PUBLISHED_DATE = "publishedDate"
    ALL_HIGHLIGHTED_FIELDS = "allHighlightedFields"
    SCORE = "score"


class SortOrder(str, Enum):
    """Sort direction for search results."""
    ASCENDING = "asc"
    DESCENDING = "desc"


class DataType(str, Enum):
    """
    Known food record sources.

    The dataType filter is an open string on the server side; these are
    only the documented values.
    """
    FOUNDATION = "Foundation"
    SR_LEGACY = "SR Legacy"
    BRANDED = "Branded"
    EXPERIMENTAL = "Experimental"
    SURVEY = "Survey (FNDDS)"


def _coerce_enum(enum_cls, name: str, value):
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except (ValueError, TypeError):
        allowed = ", ".join(member.value for member in enum_cls)
        raise InvalidParameterError(name, value, f"expected one of: {allowed}") from None


def _require_text(name: str, value) -> str:
    # str-mixin enums from other option sets are not free text
    if isinstance(value, Enum) or not isinstance(value, str):
        raise InvalidParameterError(name, value, "expected a string")
    if not value:
        raise InvalidParameterError(name, value, "must not be empty")
    return value


def _data_type_value(value) -> str:
    if isinstance(value, DataType):
        return value.value
    return _require_text("data_type", value)


def _require_int(name: str, value, minimum: int) -> int:
    # bool is an int subclass but never a meaningful page value
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidParameterError(name, value, "expected an integer")
    if value < minimum:
        raise InvalidParameterError(name, value, f"must be >= {minimum}")
    return value


@dataclass(frozen=True)
class SearchQuery:
    """
    Parameters for one call to the search endpoint.

    Optional fields left as None are omitted from the URL entirely.
    Values are validated on construction.
    """
    search_terms: str
    data_type: Optional[Union[DataType, str]] = None
    page_size: Optional[int] = None
    page_number: Optional[int] = None
    sort_by: Optional[Union[SearchField, str]] = None
    sort_order: Optional[Union[SortOrder, str]] = None
    brand_owner: Optional[str] = None

    def __post_init__(self):
        _require_text("search_terms", self.search_terms)
        if self.data_type is not None:
            _data_type_value(self.data_type)
        if self.page_size is not None:
            _require_int("page_size", self.page_size, minimum=1)
        if self.page_number is not None:
            _require_int("page_number", self.page_number, minimum=0)
        if self.sort_by is not None:
            object.__setattr__(self, "sort_by", _coerce_enum(SearchField, "sort_by", self.sort_by))
        if self.sort_order is not None:
            object.__setattr__(self, "sort_order", _coerce_enum(SortOrder, "sort_order", self.sort_order))
        if self.brand_owner is not None:
            _require_text("brand_owner", self.brand_owner)

    def query_items(self) -> List[QueryItem]:
        """
        Serialize the query into ordered (name, value) pairs.

        The search term comes first, followed by the optional filters in
        a fixed order: dataType, pageSize, pageNumber, sortBy, sortOrder,
        brandOwner.
        """
        items: List[QueryItem] = [("query", self.search_terms)]
        if self.data_type is not None:
            items.append(("dataType", _data_type_value(self.data_type)))
        if self.page_size is not None:
            items.append(("pageSize", str(self.page_size)))
        if self.page_number is not None:
            items.append(("pageNumber", str(self.page_number)))
        if self.sort_by is not None:
            items.append(("sortBy", self.sort_by.value))
        if self.sort_order is not None:
            items.append(("sortOrder", self.sort_order.value))
        if self.brand_owner is not None:
            items.append(("brandOwner", self.brand_owner))
        return items


def food_id_items(fdc_ids: Iterable[Union[str, int]]) -> List[QueryItem]:
    """
    Build one fdcIds item per identifier, preserving input order.

    Identifiers are opaque; ints are rendered as decimal strings.
    """
    if isinstance(fdc_ids, (str, bytes)):
        raise InvalidParameterError("fdc_ids", fdc_ids, "expected a sequence of identifiers, not a single string")

    items: List[QueryItem] = []
    for fdc_id in fdc_ids:
        if isinstance(fdc_id, int) and not isinstance(fdc_id, bool):
            fdc_id = str(fdc_id)
        items.append(("fdcIds", _require_text("fdc_ids", fdc_id)))

    if not items:
        raise InvalidParameterError("fdc_ids", [], "at least one identifier is required")
    return items


def _unencodable(value: str) -> bool:
    try:
        value.encode("utf-8")
    except UnicodeEncodeError:
        return True
    return False


def build_url(
    api_key: str,
    path: str,
    query_items: Sequence[QueryItem] = ()
) -> str:
    """
    Build a full request URL.

    Args:
        api_key: The FDC API key; always emitted as the first query parameter.
        path: Endpoint path, with or without a leading slash.
        query_items: Ordered (name, value) pairs appended after the key.

    Returns:
        The absolute URL as a string.

    Raises:
        URLConstructionError: If the path or any value cannot be encoded.
    """
    if not path.startswith("/"):
        path = "/" + path

    pairs = [("api_key", api_key), *query_items]
    try:
        url = httpx.URL(f"{config.api.base_url}{path}", params=pairs)
    except (UnicodeEncodeError, httpx.InvalidURL) as e:
        parameter = next((name for name, value in pairs if _unencodable(value)), None)
        target = f"value for {parameter!r}" if parameter else f"path {path!r}"
        raise URLConstructionError(
            f"Cannot encode {target} into a URL: {e}",
            parameter=parameter
        ) from e
    return str(url)


def redact_url(url: str) -> str:
    """Return the URL with the api_key value masked, for logging."""
    parsed = httpx.URL(url)
    if "api_key" not in parsed.params:
        return url
    return str(parsed.copy_set_param("api_key", "***"))
