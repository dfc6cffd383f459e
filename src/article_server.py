"""
HTTP service for the in-memory article store.

Exposes create/read/update/delete on a single resource path, selecting the
operation by HTTP verb and the optional `id` query parameter.
"""
import logging
import re
from typing import Optional

from fastapi import FastAPI, HTTPException, Query, Request, Response
from fastapi.responses import JSONResponse

from src.article_store import ArticleStore
from src.errors import StoreFullError, ValidationError
from src.models import Article

ARTICLE_PATH = "/api/v1/article"
ARTICLE_ID_PATTERN = re.compile(r"[+-]?[0-9]+")

# Configure server logger
logger = logging.getLogger('article_server')
logger.setLevel(logging.INFO)

# Add console handler if not already present
if not logger.handlers:
    console_handler = logging.StreamHandler()
    console_handler.setLevel(logging.INFO)
    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)


def sanitize_log_input(value) -> str:
    """
    Sanitize request data for logging to prevent log injection.

    Args:
        value: The value to sanitize

    Returns:
        Sanitized string safe for logging
    """
    if not isinstance(value, str):
        value = str(value)
    sanitized = value.replace('\n', '_').replace('\r', '_').replace('\t', '_')
    return sanitized[:200]


def log_request(request: Request) -> None:
    """Log method, path and caller address of an incoming request."""
    path = request.url.path
    if request.url.query:
        path = f"{path}?{request.url.query}"
    caller = f"{request.client.host}:{request.client.port}" if request.client else "unknown"
    logger.info(
        "Received %s request for %s from %s",
        request.method, sanitize_log_input(path), sanitize_log_input(caller)
    )


def parse_article_id(raw_id: Optional[str]) -> int:
    """
    Parse the `id` query parameter.

    Raises:
        HTTPException: 400 if the id is missing or not an integer
    """
    # int() alone would also take "1_0", " 5" and non-ASCII digits
    if raw_id is None or not ARTICLE_ID_PATTERN.fullmatch(raw_id):
        logger.warning("Invalid ID: %s", sanitize_log_input(raw_id))
        raise HTTPException(status_code=400, detail="Invalid ID")
    return int(raw_id)


async def read_article_body(request: Request) -> Article:
    """
    Decode and validate the JSON body of a create/update request.

    Raises:
        HTTPException: 400 if the body is not JSON or not an article
    """
    try:
        payload = await request.json()
    except ValueError as exc:
        logger.warning("Error decoding JSON: %s", exc)
        raise HTTPException(status_code=400, detail="Invalid JSON") from None

    try:
        return Article.from_payload(payload)
    except ValidationError as exc:
        logger.warning("Invalid article body: %s", exc)
        raise HTTPException(status_code=400, detail=f"Invalid JSON: {exc}") from None


def seed_articles(store: ArticleStore) -> None:
    """Insert the demo articles with ids 1-3."""
    store.put(Article(
        id=1, heading="Go Concurrency",
        description="Learn about goroutines and channels in Go.",
        tags=["Go", "Concurrency"],
    ))
    store.put(Article(
        id=2, heading="REST API Design",
        description="Best practices for designing RESTful APIs.",
        tags=["API", "REST"],
    ))
    store.put(Article(
        id=3, heading="Microservices Architecture",
        description="An introduction to microservices.",
        tags=["Microservices", "Architecture"],
    ))
    logger.info("Seeded initial articles")


def create_article_app(store: Optional[ArticleStore] = None) -> FastAPI:
    """
    Create the article FastAPI application.

    Args:
        store: Article store to serve (defaults to a new empty store)

    Returns:
        FastAPI application instance
    """
    app = FastAPI()  # pylint: disable=redefined-outer-name

    if store is None:
        store = ArticleStore()
    app.state.store = store

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        """Log every request before dispatch."""
        log_request(request)
        return await call_next(request)

    @app.post(ARTICLE_PATH)
    async def create_article(request: Request):
        """Create a new article with a server-assigned id."""
        article = await read_article_body(request)
        try:
            article.id = store.put(article)
        except StoreFullError as exc:
            logger.error("Cannot create article: %s", exc)
            raise HTTPException(status_code=500, detail=str(exc)) from None

        logger.info("Article created with ID %d", article.id)
        return JSONResponse(status_code=201, content=article.to_dict())

    @app.get(ARTICLE_PATH)
    async def get_article(article_id: Optional[str] = Query(None, alias="id")):
        """Retrieve one article by id, or all articles without an id."""
        if article_id is None:
            articles = [article.to_dict() for article in store.get_all()]
            logger.info("All articles retrieved, count: %d", len(articles))
            return JSONResponse(content=articles)

        parsed_id = parse_article_id(article_id)
        article = store.get(parsed_id)
        if article is None:
            logger.warning("Article with ID %d not found", parsed_id)
            raise HTTPException(status_code=404, detail="Article not found")

        logger.info("Article retrieved with ID %d", parsed_id)
        return JSONResponse(content=article.to_dict())

    @app.put(ARTICLE_PATH)
    async def update_article(request: Request, article_id: Optional[str] = Query(None, alias="id")):
        """Replace an existing article; the id always comes from the query."""
        parsed_id = parse_article_id(article_id)
        article = await read_article_body(request)

        updated = store.update(parsed_id, article)
        if updated is None:
            logger.warning("Article with ID %d not found for update", parsed_id)
            raise HTTPException(status_code=404, detail="Article not found")

        logger.info("Article updated with ID %d", parsed_id)
        return JSONResponse(content=updated.to_dict())

    @app.delete(ARTICLE_PATH)
    async def delete_article(article_id: Optional[str] = Query(None, alias="id")):
        """Delete an article by id."""
        parsed_id = parse_article_id(article_id)
        if not store.delete(parsed_id):
            logger.warning("Article with ID %d not found for deletion", parsed_id)
            raise HTTPException(status_code=404, detail="Article not found")

        logger.info("Article deleted with ID %d", parsed_id)
        return Response(status_code=204)

    return app
