"""
Exceptions raised by the FoodData Central client.

Only caller mistakes are raised. Transport failures are reported on the
returned FoodDataResponse and HTTP error statuses are plain data.
"""


class FoodDataError(Exception):
    """Base class for all client errors."""


class ConfigurationError(FoodDataError):
    """The client is missing required configuration, such as the API key."""


class InvalidParameterError(FoodDataError, ValueError):
    """A request parameter is outside its allowed values."""

    def __init__(self, name: str, value, reason: str):
        self.name = name
        self.value = value
        self.reason = reason
        super().__init__(f"Invalid value for {name!r}: {value!r} ({reason})")


class URLConstructionError(FoodDataError):
    """A request URL could not be built from the given parameters."""

    def __init__(self, message: str, parameter: str = None):
        self.parameter = parameter
        super().__init__(message)
