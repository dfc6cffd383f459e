"""
Provider configuration for managed articles.
Turns the configured server URL into an ArticleAPI and builds resources on it.
"""
import logging
from typing import Dict, Optional, Type

from src.article_api import ArticleAPI
from src.article_resource import ArticleResource
from src.config import Config
from src.errors import ValidationError

# Configure logging
logger = logging.getLogger(__name__)

RESOURCES: Dict[str, Type[ArticleResource]] = {
    "article": ArticleResource,
}


def configure(url: Optional[str] = None, config: Optional[Config] = None) -> ArticleAPI:
    """
    Build the API client for the article server.

    Args:
        url: Server base URL; defaults to HTTP_SERVER_URL from the config
        config: Configuration to read defaults from

    Returns:
        Configured ArticleAPI

    Raises:
        ValidationError: If the URL is empty
    """
    config = config or Config()
    if url is None:
        url = config.server_url
    if not url:
        raise ValidationError("API URL is required")

    logger.info("Configured API URL: %s", url)
    return ArticleAPI(base_url=url, timeout=config.request_timeout)


def resource(name: str, api: ArticleAPI) -> ArticleResource:
    """
    Create a resource handler by type name.

    Raises:
        ValidationError: If the resource type is unknown
    """
    try:
        resource_cls = RESOURCES[name]
    except KeyError:
        raise ValidationError(f"unknown resource type: {name}") from None
    return resource_cls(api)
