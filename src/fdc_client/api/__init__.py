"""
API Client Module

Provides the asynchronous FoodData Central client and query building.
"""

from .client import FoodDataClient, FoodDataResponse
from .query import DataType, SearchField, SearchQuery, SortOrder, build_url

__all__ = [
    "FoodDataClient",
    "FoodDataResponse",
    "DataType",
    "SearchField",
    "SearchQuery",
    "SortOrder",
    "build_url",
]
