"""
Local orchestrator for managed articles.

Reads the declared articles, keeps their state in a JSON file and drives
ArticleResource to converge the server toward the declaration. All
functions mutate the state mapping in place, so whatever was achieved
before a failure can still be saved.
"""
import logging
from typing import Dict, List, Tuple

from src.article_resource import ArticleResource
from src.errors import ValidationError
from src.file_utils import load_json_object, utc_timestamp, write_json_object
from src.models import ArticleState

# Configure logging
logger = logging.getLogger(__name__)

StateMap = Dict[str, ArticleState]
Change = Tuple[str, str]


def load_desired(filepath: str) -> StateMap:
    """
    Load declared articles from a JSON file.

    Expected shape: {"articles": {"<name>": {"heading", "description", "tags"}}}

    Raises:
        ValidationError: If the file is missing, not a JSON object, or a
            block is malformed
    """
    data = load_json_object(filepath)
    if data is None:
        raise ValidationError(f"declaration file not found: {filepath}")

    articles = data.get("articles", {})
    if not isinstance(articles, dict):
        raise ValidationError(f"{filepath}: declaration must contain an 'articles' mapping")

    desired = {}
    for name, block in articles.items():
        try:
            desired[name] = ArticleState.from_config(block)
        except ValidationError as exc:
            raise ValidationError(f"article '{name}': {exc}") from exc
    return desired


def load_state(filepath: str) -> StateMap:
    """
    Load recorded state; a missing file means nothing is managed yet.

    Raises:
        ValidationError: If the file is not a JSON object or a record is malformed
    """
    data = load_json_object(filepath, {"version": "1.0", "articles": {}})
    records = data.get("articles", {})
    if not isinstance(records, dict):
        raise ValidationError(f"{filepath}: state must contain an 'articles' mapping")

    state = {}
    for name, record in records.items():
        if not isinstance(record, dict):
            raise ValidationError(f"{filepath}: record '{name}' must be a mapping")
        article_id = record.get("id")
        try:
            state[name] = ArticleState.from_config(
                record, article_id=str(article_id) if article_id is not None else None
            )
        except ValidationError as exc:
            raise ValidationError(f"{filepath}: record '{name}': {exc}") from exc
    return state


def save_state(filepath: str, state: StateMap) -> None:
    """Write the state mapping to disk."""
    write_json_object(filepath, {
        "version": "1.0",
        "updated_at": utc_timestamp(),
        "articles": {name: record.to_dict() for name, record in state.items()},
    })


def apply(resource: ArticleResource, desired: StateMap, state: StateMap) -> List[Change]:
    """
    Converge the server toward `desired`.

    Articles recorded but no longer declared are deleted first. Each declared
    article is then refreshed, created when absent, or updated when it
    drifted.

    Returns:
        List of (action, name) pairs for every change made
    """
    changes: List[Change] = []

    for name in sorted(set(state) - set(desired)):
        record = state[name]
        if record.is_bound:
            resource.delete(record)
            changes.append(("delete", name))
        del state[name]

    for name, wanted in desired.items():
        current = state.get(name)
        if current is not None and current.is_bound:
            resource.read(current)

        if current is None or not current.is_bound:
            current = ArticleState(
                heading=wanted.heading,
                description=wanted.description,
                tags=list(wanted.tags),
            )
            state[name] = current
            resource.create(current)
            changes.append(("create", name))
        elif not current.matches(wanted):
            resource.update(current, wanted)
            changes.append(("update", name))

    for action, name in changes:
        logger.info("%s: %s", name, action)
    return changes


def refresh(resource: ArticleResource, state: StateMap) -> List[str]:
    """
    Read every recorded article from the server.

    Returns:
        Names dropped because the server no longer has them
    """
    dropped = []
    for name in list(state):
        record = state[name]
        if record.is_bound:
            resource.read(record)
        if not record.is_bound:
            del state[name]
            dropped.append(name)
    return dropped


def destroy(resource: ArticleResource, state: StateMap) -> List[str]:
    """
    Delete every recorded article.

    Returns:
        Names that were deleted
    """
    deleted = []
    for name in list(state):
        record = state[name]
        if record.is_bound:
            resource.delete(record)
            deleted.append(name)
        del state[name]
    return deleted
