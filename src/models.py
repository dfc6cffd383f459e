"""
Article records shared by the server and the reconciler.

`Article` is what the store holds and what travels over the wire.
`ArticleState` is the declared state an orchestrator keeps for one managed
article, with an optional identifier bound after a successful create.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from src.errors import ValidationError


def parse_tags(value: Any, required: bool = False) -> List[str]:
    """
    Validate a tags value and return a fresh list of strings.

    Args:
        value: Decoded JSON / configuration value
        required: Whether a missing (None) value is an error

    Returns:
        List of tag strings
    """
    if value is None:
        if required:
            raise ValidationError("tags must be a list of strings")
        return []
    if not isinstance(value, (list, tuple)):
        raise ValidationError(f"tags should be a list of strings, but got {type(value).__name__}")
    for tag in value:
        if not isinstance(tag, str):
            raise ValidationError(f"each tag must be a string, but got {type(tag).__name__}")
    return list(value)


def _parse_heading(value: Any) -> str:
    if not isinstance(value, str) or not value:
        raise ValidationError("heading must be a non-empty string")
    return value


def _parse_description(value: Any) -> str:
    if not isinstance(value, str):
        raise ValidationError("description must be a string")
    return value


@dataclass
class Article:
    """A blog article held by the article server."""

    heading: str
    description: str = ""
    tags: List[str] = field(default_factory=list)
    id: Optional[int] = None  # pylint: disable=invalid-name

    @classmethod
    def from_payload(cls, payload: Any) -> "Article":
        """
        Parse a decoded JSON request body.

        Any `id` in the body is ignored; the store assigns ids.

        Raises:
            ValidationError: If the payload does not have the article shape
        """
        if not isinstance(payload, dict):
            raise ValidationError("article body must be a JSON object")
        return cls(
            heading=_parse_heading(payload.get("heading")),
            description=_parse_description(payload.get("description", "")),
            tags=parse_tags(payload.get("tags")),
        )

    def copy(self) -> "Article":
        """Return a copy that shares no mutable state with this article."""
        return Article(
            heading=self.heading,
            description=self.description,
            tags=list(self.tags),
            id=self.id,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to the wire format."""
        return {
            "id": self.id,
            "heading": self.heading,
            "description": self.description,
            "tags": list(self.tags),
        }


@dataclass
class ArticleState:
    """
    Declared state of one managed article.

    `id` is the identifier returned by the server, kept as a string the way
    an orchestrator stores it. `None` means the article is absent.
    """

    heading: str
    description: str
    tags: List[str] = field(default_factory=list)
    id: Optional[str] = None  # pylint: disable=invalid-name

    @classmethod
    def from_config(cls, config: Dict[str, Any], article_id: Optional[str] = None) -> "ArticleState":
        """
        Validate a declared configuration block.

        Args:
            config: Mapping with heading, description and tags
            article_id: Identifier to bind, if already known

        Raises:
            ValidationError: If a field has the wrong shape
        """
        if not isinstance(config, dict):
            raise ValidationError("article configuration must be a mapping")
        return cls(
            heading=_parse_heading(config.get("heading")),
            description=_parse_description(config.get("description")),
            tags=parse_tags(config.get("tags"), required=True),
            id=article_id,
        )

    @property
    def is_bound(self) -> bool:
        """Whether a remote article is recorded for this state."""
        return self.id is not None

    def validate(self) -> None:
        """Re-check field shapes before they reach the network."""
        _parse_heading(self.heading)
        _parse_description(self.description)
        parse_tags(self.tags, required=True)

    def to_payload(self) -> Dict[str, Any]:
        """Request body for create/update."""
        return {
            "heading": self.heading,
            "description": self.description,
            "tags": list(self.tags),
        }

    def matches(self, other: "ArticleState") -> bool:
        """Compare declared fields, ignoring the identifier."""
        return self.to_payload() == other.to_payload()

    def to_dict(self) -> Dict[str, Any]:
        """Serialize for the orchestrator's state file."""
        data = self.to_payload()
        data["id"] = self.id
        return data
