"""
Static article collection and the pure filters used by the reader views.
"""

import json
import logging
import math
import os
from typing import Any, Dict, List, Optional, Sequence, Tuple, cast

from nashra.messages import DEFAULT_LANGUAGE, message
from nashra.models import Article, Category

logger = logging.getLogger(__name__)

WORDS_PER_MINUTE = 200
CHARS_PER_MINUTE = 500
RELATED_LIMIT = 3


def _to_article(raw: Dict[str, Any]) -> Article:
    article = dict(raw)
    article["category"] = Category[raw["category"]]
    return cast(Article, article)


def load_articles(filename: str = "articles.json") -> Tuple[Article, ...]:
    """Loads the seeded articles bundled with the package."""
    base_dir = os.path.dirname(os.path.abspath(__file__))
    path = os.path.join(base_dir, filename)
    with open(path, "r", encoding="utf-8") as f:
        articles = tuple(_to_article(raw) for raw in json.load(f))
    logger.debug("Loaded %d articles from %s.", len(articles), path)
    return articles


def find_article(articles: Sequence[Article], article_id: str) -> Optional[Article]:
    for article in articles:
        if article["id"] == article_id:
            return article
    return None


def filter_by_category(
    articles: Sequence[Article], category: Category
) -> List[Article]:
    if category is Category.ALL:
        return list(articles)
    return [a for a in articles if a["category"] is category]


def search(articles: Sequence[Article], query: str) -> List[Article]:
    """Case-insensitive match on title or excerpt. Blank queries match nothing."""
    needle = query.strip().lower()
    if not needle:
        return []
    return [
        a
        for a in articles
        if needle in a["title"].lower() or needle in a["excerpt"].lower()
    ]


def related(
    articles: Sequence[Article], article: Article, limit: int = RELATED_LIMIT
) -> List[Article]:
    """Other articles of the same category."""
    return [
        a
        for a in articles
        if a["category"] is article["category"] and a["id"] != article["id"]
    ][:limit]


def featured(articles: Sequence[Article], limit: int = 3) -> List[Article]:
    return [a for a in articles if a.get("isFeatured")][:limit]


def reading_time(article: Article, language: str = DEFAULT_LANGUAGE) -> str:
    """Reading time for the article page: precomputed, or estimated from the word count."""
    if article.get("readingTime"):
        return str(article["readingTime"])
    words = len(article["content"].split())
    minutes = max(1, math.ceil(words / WORDS_PER_MINUTE))
    return message("minutes_read", language, minutes=minutes)


def card_reading_time(article: Article, language: str = DEFAULT_LANGUAGE) -> str:
    """Shorter estimate shown on teasers, from the character count."""
    if article.get("readingTime"):
        return str(article["readingTime"])
    minutes = max(1, math.ceil(len(article["content"]) / CHARS_PER_MINUTE))
    return message("minutes", language, minutes=minutes)
