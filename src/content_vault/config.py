"""Configuration management for the content vault."""

import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

# Load .env file from config directory or project root
config_env = Path(__file__).parent.parent.parent / "config" / ".env"
if config_env.exists():
    load_dotenv(config_env)
else:
    # Fallback to project root .env
    load_dotenv()


class Config:
    """Application configuration."""

    def __init__(self) -> None:
        """Initialize configuration from environment variables."""
        # Delivery API settings
        self.space_id = os.getenv("CONTENT_VAULT_SPACE_ID", "")
        self.access_token = os.getenv("CONTENT_VAULT_ACCESS_TOKEN", "")
        self.environment = os.getenv("CONTENT_VAULT_ENVIRONMENT", "master")
        self.api_url = os.getenv("CONTENT_VAULT_API_URL", "https://cdn.contentful.com")
        self.timeout = float(os.getenv("CONTENT_VAULT_TIMEOUT", "30"))

        # Sync settings, empty locale means each resource's default locale
        self.locale: Optional[str] = os.getenv("CONTENT_VAULT_LOCALE") or None

        # Database settings
        default_db_path = str(Path.home() / ".content-vault" / "vault.db")
        self.database_path = Path(
            os.getenv("CONTENT_VAULT_DATABASE_PATH", default_db_path)
        )

        # Locally modeled content types
        models_file = os.getenv("CONTENT_VAULT_MODELS_FILE")
        self.models_file: Optional[Path] = Path(models_file) if models_file else None

        # Ensure directories exist
        self._ensure_directories()

    def _ensure_directories(self) -> None:
        """Ensure required directories exist."""
        self.database_path.parent.mkdir(parents=True, exist_ok=True)