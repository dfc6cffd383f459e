"""
Configuration management for the article server and reconciler.
Loads environment variables and provides access to configuration settings.
"""
import logging
import os
from typing import Optional
from dotenv import load_dotenv

# Configure logging
logger = logging.getLogger(__name__)


class Config:
    """Configuration settings loaded from environment variables."""

    def __init__(self):
        """Initialize configuration by loading environment variables."""
        load_dotenv()

    def get(self, key: str, default: Optional[str] = None) -> Optional[str]:
        """
        Get a configuration value by key.

        Args:
            key: Configuration key name
            default: Default value if key not found

        Returns:
            Configuration value or default
        """
        return os.getenv(key, default)

    @property
    def server_url(self) -> str:
        """Get the base URL of the article server used by the reconciler."""
        return os.getenv("HTTP_SERVER_URL", "http://localhost:9999")

    @property
    def server_host(self) -> str:
        """Get article server bind host."""
        return os.getenv("ARTICLE_SERVER_HOST", "0.0.0.0")

    @property
    def server_port(self) -> int:
        """Get article server port."""
        return int(os.getenv("ARTICLE_SERVER_PORT", "9999"))

    @property
    def request_timeout(self) -> float:
        """Get the timeout in seconds for requests to the article server."""
        return float(os.getenv("ARTICLE_REQUEST_TIMEOUT", "30"))

    @property
    def seed_articles(self) -> bool:
        """Check if the server should start with the demo articles."""
        value = os.getenv("ARTICLE_SEED", "false").lower()
        return value in ["true", "1", "yes"]

    @property
    def state_file(self) -> str:
        """Get the path of the declared state file written by main.py."""
        return os.getenv("ARTICLE_STATE_FILE", os.path.join("state", "article_state.json"))
