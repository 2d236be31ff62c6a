from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Nearby businesses served by the combined feed
RETAIL_CATEGORIES = (
    # Core retail formats
    "supermarket",
    "department_store",
    "variety_store",
    "mall",
    "marketplace",
    "general",
    # In-store departments
    "clothes",
    "shoes",
    "fashion_accessories",
    "electronics",
    "computer",
    "mobile_phone",
    "furniture",
    "houseware",
    "kitchen",
    "toys",
    "books",
    "music",
    "video_games",
    "bakery",
    "confectionery",
    "pharmacy",
    "cosmetics",
    "beauty",
    "health_food",
    # Extended retail
    "gift",
    "hardware",
    "greengrocer",
    "pet",
    "stationery",
    "sports",
)


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    app_name: str = Field(default="Store Network API")
    database_url: str = Field(
        default="sqlite:///./store_network.db",
        description="SQLAlchemy URL of the retail database, e.g. mssql+pyodbc://...",
    )
    api_prefix: str = "/api"
    overpass_url: str = "https://overpass-api.de/api/interpreter"
    nearby_radius_m: int = 500
    overpass_throttle_s: float = 1.0
    overpass_timeout_s: float = 60.0


@lru_cache()
def get_settings() -> Settings:
    return Settings()
