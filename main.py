#!/usr/bin/env python
"""
Command line entry point for managing articles declaratively.

Usage:
    python main.py apply [articles.json]
    python main.py refresh
    python main.py destroy
"""
import logging
import sys

from src.config import Config
from src.errors import ArticleError
from src.orchestrator import apply, destroy, load_desired, load_state, refresh, save_state
from src.provider import configure, resource

USAGE = "Usage: python main.py <apply|refresh|destroy> [articles.json]"


def run(command: str, desired_file: str, config: Config) -> int:
    """Run one orchestrator command and persist the resulting state."""
    article_resource = resource("article", configure(config=config))
    state = load_state(config.state_file)

    try:
        if command == "apply":
            desired = load_desired(desired_file)
            changes = apply(article_resource, desired, state)
            print(f"Apply complete: {len(changes)} change(s)")
            for action, name in changes:
                print(f"  {action} {name}")
        elif command == "refresh":
            dropped = refresh(article_resource, state)
            print(f"Refresh complete: {len(state)} article(s) tracked, {len(dropped)} dropped")
        else:
            deleted = destroy(article_resource, state)
            print(f"Destroy complete: {len(deleted)} article(s) deleted")
    finally:
        save_state(config.state_file, state)
    return 0


def main(argv=None) -> int:
    """Main entry point for the article orchestrator."""
    argv = sys.argv[1:] if argv is None else argv
    if not argv or argv[0] not in ("apply", "refresh", "destroy"):
        print(USAGE)
        return 2

    logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")
    desired_file = argv[1] if len(argv) > 1 else "articles.json"

    try:
        return run(argv[0], desired_file, Config())
    except ArticleError as exc:
        print(f"Error: {exc}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
