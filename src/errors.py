"""
Error types shared by the article server, client and reconciler.

Every failure is raised to the immediate caller; nothing here retries.
"""
from typing import Any, Optional


class ArticleError(Exception):
    """Base class for all article errors."""


class ValidationError(ArticleError):
    """Malformed input shape (bad JSON, tags not a string list, bad id)."""


class TransportError(ArticleError):
    """The remote article server could not be reached."""


class StoreFullError(ArticleError):
    """Every id in the store's id range is taken."""


class UnexpectedStatusError(ArticleError):
    """The remote server answered with a status outside the expected set."""

    def __init__(self, status_code: int, detail: str = "", action: str = "request"):
        """
        Initialize the error.

        Args:
            status_code: HTTP status returned by the server
            detail: Error detail extracted from the response body
            action: Lifecycle step that failed (e.g. "create article")
        """
        self.status_code = status_code
        self.detail = detail
        self.action = action
        message = f"failed to {action}: HTTP {status_code}"
        if detail:
            message = f"{message} ({detail})"
        super().__init__(message)


class NotFoundError(UnexpectedStatusError):
    """The targeted article id does not exist."""


def _extract_detail(response) -> str:
    """Pull a readable message out of a FastAPI-style error body."""
    try:
        body: Any = response.json()
    except ValueError:
        return (response.text or "").strip()

    if isinstance(body, dict) and "detail" in body:
        return str(body["detail"])
    return str(body)


def error_from_response(response, action: str) -> ArticleError:
    """
    Build the error matching a failed `requests.Response`.

    Args:
        response: Response with a status code the caller did not expect
        action: Lifecycle step that failed, used in the message

    Returns:
        NotFoundError for 404, ValidationError for 400,
        UnexpectedStatusError otherwise
    """
    status_code = response.status_code
    detail = _extract_detail(response)

    if status_code == 404:
        return NotFoundError(status_code, detail, action)
    if status_code == 400:
        message: Optional[str] = detail or "bad request"
        return ValidationError(f"failed to {action}: {message}")
    return UnexpectedStatusError(status_code, detail, action)
