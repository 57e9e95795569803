"""
Data models for the Nashra reader.
"""

from enum import Enum
from typing import TypedDict, List, Optional


class Category(str, Enum):
    """Fixed article section labels."""

    ALL = "الكل"
    TECH = "تقنية"
    STARTUPS = "شركات ناشئة"
    BUSINESS = "ريادة أعمال"
    AI = "ذكاء اصطناعي"
    CRYPTO = "عملات رقمية"
    SPACE = "فضاء"
    GREEN = "تقنية خضراء"


class _ArticleBase(TypedDict):
    id: str
    title: str
    excerpt: str
    content: str
    category: Category
    author: str
    date: str
    imageUrl: str


class Article(_ArticleBase, total=False):
    """Type definition for a seeded article."""

    isFeatured: bool
    tags: List[str]
    readingTime: Optional[str]


class BriefingResult(TypedDict):
    """Structured answer of a topic analysis request."""

    title: str
    summary: str
    keyPoints: List[str]
    outlook: str


class Comment(TypedDict):
    """A reader comment kept in local storage."""

    id: str
    userName: str
    text: str
    date: str
