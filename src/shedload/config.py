"""Application configuration."""

from pathlib import Path

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Application
    app_name: str = "Shed Load Overseas"
    debug: bool = False
    log_level: str = "INFO"

    # Demo mode keeps sessions and shipments in local storage only
    demo_mode: bool = True

    # Database (local storage)
    database_url: str = "sqlite+aiosqlite:///./data/shedload.db"

    # Remote courier API
    api_base_url: str = "https://www.server.shedloadoverseas.com"
    api_timeout_seconds: float = 30.0

    # Admin
    admin_page_size: int = 10
    demo_admin_emails: list[str] = []

    # Paths
    base_dir: Path = Path(__file__).parent.parent.parent
    data_dir: Path = base_dir / "data"
    company_file: Path = Path(__file__).parent / "company.yaml"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        env_prefix = "SHEDLOAD_"


settings = Settings()

# Ensure data directory exists
settings.data_dir.mkdir(parents=True, exist_ok=True)
