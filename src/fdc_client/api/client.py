"""
API Client Module

Asynchronous HTTP client for the USDA FoodData Central API.

Builds query URLs for the search and batch lookup endpoints, issues one
GET per call on a shared connection pool and hands back the raw status
code and body. Response bodies are not decoded.
"""

import logging
import time
from dataclasses import dataclass
from typing import Callable, Iterable, Optional, Union

import httpx

from ..config import config
from ..exceptions import ConfigurationError
from .query import (
    DataType,
    SearchField,
    SearchQuery,
    SortOrder,
    build_url,
    food_id_items,
    redact_url,
)


logger = logging.getLogger(__name__)


@dataclass
class FoodDataResponse:
    """
    Outcome of a single request.

    Either status_code and body are set (the server answered, whatever the
    status) or error is set (the transport failed). Never both.
    """
    url: str
    status_code: Optional[int] = None
    body: Optional[str] = None
    error: Optional[Exception] = None
    elapsed_ms: float = 0.0

    @property
    def ok(self) -> bool:
        """True if the server produced a response."""
        return self.error is None

    @property
    def is_success(self) -> bool:
        """True if the server produced a 2xx response."""
        return self.ok and 200 <= self.status_code < 300


ResponseCallback = Callable[[FoodDataResponse], None]


class FoodDataClient:
    """
    Client for the FoodData Central search and food lookup endpoints.

    Features:
    - Validated, ordered query parameters
    - One shared httpx.AsyncClient per instance
    - Transport failures reported on the response, never retried

    Use as an async context manager, or call aclose() when done.
    """

    def __init__(
        self,
        api_key: str,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        """
        Initialize the client.

        Args:
            api_key: FoodData Central API key.
            transport: Optional httpx transport, mainly for tests.

        Raises:
            ConfigurationError: If api_key is missing or empty.
        """
        if not isinstance(api_key, str) or not api_key:
            raise ConfigurationError("A FoodData Central API key is required")

        self._api_key = api_key
        self._transport = transport
        self._http: Optional[httpx.AsyncClient] = None
        logger.info(f"FoodDataClient initialized (base_url: {config.api.base_url})")

    @classmethod
    def from_env(cls, transport: Optional[httpx.AsyncBaseTransport] = None) -> "FoodDataClient":
        """Create a client using the key from the configured environment variable."""
        api_key = config.api.get_api_key()
        if not api_key:
            raise ConfigurationError(
                f"API key not found in environment variable {config.api.api_key_env}"
            )
        return cls(api_key, transport=transport)

    @property
    def api_key(self) -> str:
        return self._api_key

    async def __aenter__(self) -> "FoodDataClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the shared connection pool, if one was opened."""
        if self._http is not None:
            await self._http.aclose()
            self._http = None
            logger.debug("HTTP connection pool closed")

    def search_url(
        self,
        search_terms: str,
        data_type: Optional[Union[DataType, str]] = None,
        page_size: Optional[int] = None,
        page_number: Optional[int] = None,
        sort_by: Optional[Union[SearchField, str]] = None,
        sort_order: Optional[Union[SortOrder, str]] = None,
        brand_owner: Optional[str] = None
    ) -> str:
        """Build the search URL without sending a request."""
        query = SearchQuery(
            search_terms=search_terms,
            data_type=data_type,
            page_size=page_size,
            page_number=page_number,
            sort_by=sort_by,
            sort_order=sort_order,
            brand_owner=brand_owner
        )
        return build_url(self._api_key, config.api.search_path, query.query_items())

    def foods_url(self, fdc_ids: Iterable[Union[str, int]]) -> str:
        """Build the batch lookup URL without sending a request."""
        return build_url(self._api_key, config.api.foods_path, food_id_items(fdc_ids))

    async def search(
        self,
        search_terms: str,
        data_type: Optional[Union[DataType, str]] = None,
        page_size: Optional[int] = None,
        page_number: Optional[int] = None,
        sort_by: Optional[Union[SearchField, str]] = None,
        sort_order: Optional[Union[SortOrder, str]] = None,
        brand_owner: Optional[str] = None,
        callback: Optional[ResponseCallback] = None
    ) -> FoodDataResponse:
        """
        Search the FoodData Central database.

        Args:
            search_terms: What to search for (e.g. "cheddar cheese").
            data_type: Optional. Foundation, SR Legacy, Branded, Experimental.
            page_size: Optional. Results per page.
            page_number: Optional. Page to retrieve; offset is page_number * page_size.
            sort_by: Optional. A SearchField or its code.
            sort_order: Optional. A SortOrder or "asc"/"desc".
            brand_owner: Optional. Brand filter, only meaningful for Branded foods.
            callback: Optional. Called once with the response when the request completes.

        Returns:
            FoodDataResponse with the raw status and body, or the transport error.

        Raises:
            InvalidParameterError: If a parameter is outside its allowed values.
            URLConstructionError: If a value cannot be encoded into the URL.
        """
        url = self.search_url(
            search_terms,
            data_type=data_type,
            page_size=page_size,
            page_number=page_number,
            sort_by=sort_by,
            sort_order=sort_order,
            brand_owner=brand_owner
        )
        return await self._get(url, callback)

    async def search_query(
        self,
        query: SearchQuery,
        callback: Optional[ResponseCallback] = None
    ) -> FoodDataResponse:
        """Search using a prebuilt SearchQuery."""
        url = build_url(self._api_key, config.api.search_path, query.query_items())
        return await self._get(url, callback)

    async def get_foods(
        self,
        fdc_ids: Iterable[Union[str, int]],
        callback: Optional[ResponseCallback] = None
    ) -> FoodDataResponse:
        """
        Fetch several foods by FDC ID in one request.

        Args:
            fdc_ids: Identifiers to look up, sent in the given order.
            callback: Optional. Called once with the response when the request completes.

        Returns:
            FoodDataResponse with the raw status and body, or the transport error.

        Raises:
            InvalidParameterError: If the sequence is empty or holds an empty identifier.
            URLConstructionError: If an identifier cannot be encoded into the URL.
        """
        return await self._get(self.foods_url(fdc_ids), callback)

    def _get_http(self) -> httpx.AsyncClient:
        if self._http is None:
            self._http = httpx.AsyncClient(
                timeout=config.api.timeout_seconds,
                transport=self._transport
            )
        return self._http

    async def _get(
        self,
        url: str,
        callback: Optional[ResponseCallback]
    ) -> FoodDataResponse:
        """Issue one GET and package the outcome."""
        safe_url = redact_url(url)
        logger.info(f"GET {safe_url}")

        start_time = time.monotonic()
        try:
            response = await self._get_http().get(url)
            result = FoodDataResponse(
                url=safe_url,
                status_code=response.status_code,
                body=response.text,
                elapsed_ms=(time.monotonic() - start_time) * 1000
            )
            logger.info(f"GET {safe_url} -> {response.status_code} ({result.elapsed_ms:.0f}ms)")

        except httpx.HTTPError as e:
            result = FoodDataResponse(
                url=safe_url,
                error=e,
                elapsed_ms=(time.monotonic() - start_time) * 1000
            )
            logger.warning(f"GET {safe_url} failed: {e!r}")

        if callback is not None:
            callback(result)
        return result
