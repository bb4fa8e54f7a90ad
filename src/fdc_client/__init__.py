"""
FoodData Central Client

Minimal asynchronous client for the USDA FoodData Central API:
keyword search and batch lookup by FDC ID, returning raw responses.
"""

from .api import (
    DataType,
    FoodDataClient,
    FoodDataResponse,
    SearchField,
    SearchQuery,
    SortOrder,
    build_url,
)
from .exceptions import (
    ConfigurationError,
    FoodDataError,
    InvalidParameterError,
    URLConstructionError,
)

__version__ = "0.1.0"

__all__ = [
    "DataType",
    "FoodDataClient",
    "FoodDataResponse",
    "SearchField",
    "SearchQuery",
    "SortOrder",
    "build_url",
    "ConfigurationError",
    "FoodDataError",
    "InvalidParameterError",
    "URLConstructionError",
]
