"""
Reader comments and likes, kept in an injected key-value store.
"""

import datetime
import json
import logging
import uuid
from typing import Callable, List

from nashra.messages import DEFAULT_LANGUAGE, message
from nashra.models import Comment
from nashra.services.storage import KeyValueStore

logger = logging.getLogger(__name__)


class CommentService:
    """Loads, adds and deletes per-article comments, newest first."""

    def __init__(
        self,
        store: KeyValueStore,
        language: str = DEFAULT_LANGUAGE,
        now: Callable[[], datetime.datetime] = datetime.datetime.now,
    ):
        self.store = store
        self.language = language
        self.now = now

    def get_key(self, article_id: str) -> str:
        return f"nashra_comments_{article_id}"

    def load(self, article_id: str) -> List[Comment]:
        raw = self.store.get(self.get_key(article_id))
        if not raw:
            return []
        try:
            comments = json.loads(raw)
        except json.JSONDecodeError as e:
            logger.error("Failed to parse comments for %s: %s", article_id, e)
            return []
        if not isinstance(comments, list):
            logger.error("Stored comments for %s are not a list.", article_id)
            return []
        return comments

    def _save(self, article_id: str, comments: List[Comment]) -> None:
        self.store.set(self.get_key(article_id), json.dumps(comments, ensure_ascii=False))

    def add(self, article_id: str, text: str, user_name: str = "") -> List[Comment]:
        """Prepends a comment. Blank text is ignored."""
        comments = self.load(article_id)
        if not text.strip():
            return comments

        comment = Comment(
            id=uuid.uuid4().hex,
            userName=user_name.strip() or message("anonymous_reader", self.language),
            text=text.strip(),
            date=self.now().strftime("%Y-%m-%d"),
        )
        comments = [comment] + comments
        self._save(article_id, comments)
        logger.info("Saved comment %s on article %s.", comment["id"], article_id)
        return comments

    def delete(self, article_id: str, comment_id: str) -> List[Comment]:
        comments = self.load(article_id)
        remaining = [c for c in comments if c.get("id") != comment_id]
        if len(remaining) != len(comments):
            self._save(article_id, remaining)
        return remaining


class LikeService:
    """Per-article liked flag."""

    def __init__(self, store: KeyValueStore):
        self.store = store

    def get_key(self, article_id: str) -> str:
        return f"nashra_liked_{article_id}"

    def is_liked(self, article_id: str) -> bool:
        return self.store.get(self.get_key(article_id)) == "1"

    def toggle(self, article_id: str) -> bool:
        """Flips the flag and returns the new value."""
        if self.is_liked(article_id):
            self.store.delete(self.get_key(article_id))
            return False
        self.store.set(self.get_key(article_id), "1")
        return True
