"""
Configuration settings for the census population extract.

Uses Pydantic Settings to load environment variables for the Census Data API
endpoint, HTTP behaviour, output location and logging.
"""
from __future__ import annotations

from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_API_BASE_URL = "https://api.census.gov/data/2021/acs/acs5"
DEFAULT_POPULATION_VARIABLE = "B01003_001E"
DEFAULT_OUTPUT_PATH = "census_population.csv"


class Settings(BaseSettings):
    # Source API
    api_base_url: str = Field(DEFAULT_API_BASE_URL, alias="CENSUS_API_BASE_URL")
    api_key: Optional[str] = Field(None, alias="CENSUS_API_KEY")
    population_variable: str = Field(
        DEFAULT_POPULATION_VARIABLE, alias="CENSUS_POPULATION_VARIABLE"
    )
    # None keeps requests blocking until the server answers.
    request_timeout_seconds: Optional[float] = Field(None, alias="CENSUS_REQUEST_TIMEOUT")

    # Output
    output_path: str = Field(DEFAULT_OUTPUT_PATH, alias="OUTPUT_PATH")

    # Application
    log_level: str = Field("INFO", alias="LOG_LEVEL")
    json_logs: bool = Field(False, alias="JSON_LOGS")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Retrieve a cached instance of Settings to avoid repeated env parsing.
    """
    return Settings()


__all__ = ["Settings", "get_settings"]
