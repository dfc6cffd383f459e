"""
In-memory article storage.

All access to the article map goes through one lock. Callers always receive
copies, so nothing they hold changes after the lock is released.
"""
import random
import threading
from typing import Dict, List, Optional

from src.errors import StoreFullError
from src.models import Article

DEFAULT_ID_RANGE = 1_000_000


class ArticleStore:
    """Thread-safe mapping from integer id to Article."""

    def __init__(self, id_range: int = DEFAULT_ID_RANGE, rng: Optional[random.Random] = None):
        """
        Initialize an empty store.

        Args:
            id_range: Generated ids are drawn from [0, id_range)
            rng: Random source for id generation (defaults to a new Random)
        """
        self.id_range = id_range
        self._rng = rng or random.Random()
        self._articles: Dict[int, Article] = {}
        self._lock = threading.Lock()

    def _next_id(self) -> int:
        # Caller holds the lock.
        if len(self._articles) >= self.id_range:
            raise StoreFullError(f"all {self.id_range} article ids are in use")
        while True:
            candidate = self._rng.randrange(self.id_range)
            if candidate not in self._articles:
                return candidate

    def put(self, article: Article) -> int:
        """
        Store an article.

        Without an id a fresh one is generated; with an id the article is
        stored (or overwritten) at that id.

        Returns:
            The id the article is stored under
        """
        stored = article.copy()
        with self._lock:
            if stored.id is None:
                stored.id = self._next_id()
            self._articles[stored.id] = stored
        return stored.id

    def update(self, article_id: int, article: Article) -> Optional[Article]:
        """
        Replace an existing article.

        Returns:
            The stored copy with its id forced to `article_id`, or None if
            no article has that id (nothing is inserted)
        """
        stored = article.copy()
        stored.id = article_id
        with self._lock:
            if article_id not in self._articles:
                return None
            self._articles[article_id] = stored
        return stored.copy()

    def get(self, article_id: int) -> Optional[Article]:
        """Return a copy of the article, or None if absent."""
        with self._lock:
            article = self._articles.get(article_id)
            return article.copy() if article is not None else None

    def get_all(self) -> List[Article]:
        """Snapshot of every stored article, in no particular order."""
        with self._lock:
            return [article.copy() for article in self._articles.values()]

    def delete(self, article_id: int) -> bool:
        """Remove an article; False if it was not stored."""
        with self._lock:
            return self._articles.pop(article_id, None) is not None

    def __len__(self) -> int:
        with self._lock:
            return len(self._articles)
