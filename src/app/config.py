"""Configuration management using Pydantic settings."""

from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "Porto do Itaqui Stakeholder Map"
    debug: bool = False

    # Server
    host: str = "0.0.0.0"
    port: int = 8000

    # Local key-value store for custom layers
    layers_store_path: Path = Path("./data/layers.json")
    layers_store_key: str = "custom-map-layers"

    # Upload limit in bytes
    max_upload_bytes: int = 50 * 1024 * 1024

    # Initial map view
    map_center_lat: float = -2.570
    map_center_lng: float = -44.370
    map_zoom: int = 14

    # Hosted language model (assistant chat)
    gemini_api_key: str = ""
    gemini_model: str = "gemini-3-flash-preview"
    gemini_base_url: str = "https://generativelanguage.googleapis.com/v1beta"
    gemini_timeout: float = 60.0


settings = Settings()
