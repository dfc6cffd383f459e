"""
HTTP client for the article server.
Builds article URLs and sends single requests; status codes are left to the caller.
"""
import logging
from typing import Any, Optional
from urllib.parse import urlencode

import requests

from src.errors import TransportError

# Configure logging
logger = logging.getLogger(__name__)

ARTICLE_PATH = "/api/v1/article"


class ArticleAPI:
    """Thin wrapper around requests for the article endpoint."""

    def __init__(self, base_url: str, timeout: float = 30.0):
        """
        Initialize the article API client.

        Args:
            base_url: Server base URL, e.g. http://localhost:9999
            timeout: Seconds to wait for the server before giving up
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    def article_url(self, article_id: Optional[Any] = None) -> str:
        """
        Build the article endpoint URL.

        Args:
            article_id: Optional id added as the `id` query parameter

        Returns:
            Absolute URL
        """
        url = f"{self.base_url}{ARTICLE_PATH}"
        if article_id is not None:
            url = f"{url}?{urlencode({'id': article_id})}"
        return url

    def send_request(self, method: str, url: str, data: Optional[Any] = None) -> requests.Response:
        """
        Send one HTTP request.

        Args:
            method: HTTP verb
            url: Absolute URL
            data: Optional payload, sent as a JSON body when given

        Returns:
            The raw response, whatever its status code

        Raises:
            TransportError: If the request could not be completed
        """
        kwargs = {"timeout": self.timeout}
        if data is not None:
            # requests sets Content-Type: application/json for json=
            kwargs["json"] = data

        logger.debug("Sending %s request to %s", method, url)
        try:
            return requests.request(method, url, **kwargs)
        except requests.exceptions.RequestException as exc:
            logger.error("%s %s failed: %s", method, url, exc)
            raise TransportError(str(exc)) from exc
