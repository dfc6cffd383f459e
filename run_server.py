#!/usr/bin/env python
"""
Run the article server.
"""
import uvicorn
from src.article_server import create_article_app, seed_articles
from src.article_store import ArticleStore
from src.config import Config


def main():
    """Run the article server."""
    # Load configuration
    config = Config()

    store = ArticleStore()
    if config.seed_articles:
        seed_articles(store)

    app = create_article_app(store)

    print(f"Article server listening on http://{config.server_host}:{config.server_port}")

    # Run uvicorn server
    uvicorn.run(
        app,
        host=config.server_host,
        port=config.server_port,
        log_level="info"
    )


if __name__ == "__main__":
    main()
