"""
Configuration constants for the FoodData Central client.

This module centralizes the API endpoint layout and logging parameters
so the client can be pointed at a different host or tuned per environment.
"""

import os
from pathlib import Path
from dataclasses import dataclass, field
from typing import Optional


@dataclass
class APIConfig:
    """API configuration settings."""
    scheme: str = "https"
    host: str = "api.nal.usda.gov"
    search_path: str = "fdc/v1/foods/search"
    foods_path: str = "fdc/v1/foods"

    # Environment variable holding the key (NOT the key itself)
    api_key_env: str = "FDC_API_KEY"

    # None disables httpx timeouts; requests run until completion or transport failure
    timeout_seconds: Optional[float] = None

    @property
    def base_url(self) -> str:
        """Scheme and host without a trailing slash."""
        return f"{self.scheme}://{self.host}"

    def get_api_key(self) -> Optional[str]:
        """Read the API key from the environment, if set."""
        return os.getenv(self.api_key_env) or None


@dataclass
class LogConfig:
    """Logging configuration."""
    log_directory: Path = field(default_factory=lambda: Path("logs"))
    log_filename: str = "fdc_client.log"
    log_level: str = "INFO"
    log_format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    console_format: str = "%(asctime)s | %(levelname)-8s | %(message)s"
    console_date_format: str = "%H:%M:%S"

    @property
    def log_file_path(self) -> Path:
        """Get full path to the log file."""
        return self.log_directory / self.log_filename


@dataclass
class Config:
    """Master configuration combining all sub-configurations."""
    api: APIConfig = field(default_factory=APIConfig)
    log: LogConfig = field(default_factory=LogConfig)


# Global configuration instance
config = Config()
