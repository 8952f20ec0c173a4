"""Configuration management using pydantic-settings."""
from pathlib import Path

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Storage
    database_url: str = "sqlite:///./design.db"
    db_timeout_seconds: int = 10
    table_prefix: str = "ph7_"

    # Cache settings
    cache_enabled: bool = True
    cache_backend: str = "memory"  # "memory" or "file"
    cache_directory: Path = Path("./cache")
    cache_static_group: str = "db/design/static"
    cache_ttl_seconds: int = 172800  # 48 hours

    # Site
    admin_module: str = "admin123"
    ads_enabled: bool = True
    ad_click_param: str = "ad_click"
    url_root: str = "http://localhost:8000/"
    url_static: str = "http://localhost:8000/static/"
    img_dir: str = "img/"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


settings = Settings()
