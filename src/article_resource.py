"""
Lifecycle of a managed article.

An orchestrator holds one ArticleState per declared article and drives it
through create/read/update/delete. Each call converges the remote server
toward the declared fields and records the result in the state object.
"""
import logging

from src.article_api import ArticleAPI
from src.errors import ValidationError, error_from_response
from src.models import ArticleState, parse_tags

# Configure logging
logger = logging.getLogger(__name__)


class ArticleResource:
    """Create/Read/Update/Delete for articles on a remote article server."""

    def __init__(self, api: ArticleAPI):
        """
        Initialize the resource.

        Args:
            api: Configured client for the article server
        """
        self.api = api

    @staticmethod
    def _require_bound(state: ArticleState, action: str) -> str:
        if not state.is_bound:
            raise ValidationError(f"cannot {action}: no article id recorded")
        return state.id

    def create(self, state: ArticleState) -> str:
        """
        Create the remote article described by `state`.

        On success the new identifier is recorded in `state` and the fields
        are refreshed from the server.

        Args:
            state: Declared state, normally unbound

        Returns:
            The identifier assigned by the server

        Raises:
            ValidationError: If the declared fields are malformed
            TransportError: If the server cannot be reached
            UnexpectedStatusError: If the server does not answer 201
        """
        state.validate()
        logger.info("Received tags: %s", state.tags)

        url = self.api.article_url()
        payload = state.to_payload()
        logger.info("Sending article data to %s: %s", url, payload)

        response = self.api.send_request("POST", url, payload)
        if response.status_code != 201:
            raise error_from_response(response, "create article")

        try:
            created = response.json()
            article_id = str(created["id"])
        except (ValueError, KeyError, TypeError) as exc:
            raise ValidationError(f"create article returned a malformed body: {exc}") from exc

        state.id = article_id
        logger.info("Article created with ID %s", article_id)
        self.read(state)
        return article_id

    def read(self, state: ArticleState) -> ArticleState:
        """
        Refresh `state` from the server.

        Every declared field is overwritten with the observed value; drift is
        accepted here and left for the orchestrator to diff. If the server no
        longer has the article, the state becomes unbound.

        Returns:
            The same state object
        """
        article_id = self._require_bound(state, "read article")

        response = self.api.send_request("GET", self.api.article_url(article_id))
        if response.status_code == 404:
            logger.warning("Article %s no longer exists, marking it absent", article_id)
            state.id = None
            return state
        if response.status_code != 200:
            raise error_from_response(response, "read article")

        try:
            observed = response.json()
            observed_state = ArticleState(
                heading=observed["heading"],
                description=observed["description"],
                tags=parse_tags(observed.get("tags")),
                id=article_id,
            )
            observed_state.validate()
        except (ValidationError, ValueError, KeyError, TypeError) as exc:
            raise ValidationError(f"read article returned a malformed body: {exc}") from exc

        if not state.matches(observed_state):
            logger.debug("Article %s drifted from declared state", article_id)

        state.heading = observed_state.heading
        state.description = observed_state.description
        state.tags = observed_state.tags
        return state

    def update(self, state: ArticleState, desired: ArticleState) -> None:
        """
        Push the desired fields to the bound article, then refresh `state`.

        `state` is left untouched if the update fails.
        """
        article_id = self._require_bound(state, "update article")
        desired.validate()

        response = self.api.send_request("PUT", self.api.article_url(article_id), desired.to_payload())
        if response.status_code != 200:
            raise error_from_response(response, "update article")

        logger.info("Article updated with ID %s", article_id)
        self.read(state)

    def delete(self, state: ArticleState) -> None:
        """
        Delete the bound article and clear the identifier.

        A 404 means the article is already gone and counts as success.
        """
        article_id = self._require_bound(state, "delete article")

        response = self.api.send_request("DELETE", self.api.article_url(article_id))
        if response.status_code == 404:
            logger.warning("Article %s was already deleted", article_id)
        elif response.status_code != 204:
            raise error_from_response(response, "delete article")

        state.id = None
        logger.info("Article deleted with ID %s", article_id)
