"""
Reader view state.

Navigator holds the current view and the derived list of visible articles.
ArticleCard and SmartAnalyst own the request state of their AI calls through
a RequestTracker, so a subject that already succeeded is never fetched again.
"""

import logging
from typing import Dict, List, NamedTuple, Optional, Sequence

from nashra import catalog
from nashra.messages import DEFAULT_LANGUAGE
from nashra.models import Article, BriefingResult, Category, Comment
from nashra.services.comments import CommentService, LikeService
from nashra.services.llm import LLMService
from nashra.services.state import IDLE, RequestState, RequestTracker

logger = logging.getLogger(__name__)

VIEW_HOME = "home"
VIEW_ARTICLE = "article"
VIEW_ANALYST = "analyst"

CATEGORY_VIEWS: Dict[str, Category] = {
    "tech": Category.TECH,
    "business": Category.BUSINESS,
    "startups": Category.STARTUPS,
    "ai": Category.AI,
}


class HomeLayout(NamedTuple):
    main_featured: Optional[Article]
    side_hero: List[Article]
    feed: List[Article]
    featured_stories: List[Article]


class Navigator:
    """Current view selector over a fixed article collection."""

    def __init__(self, articles: Sequence[Article]):
        self.articles = tuple(articles)
        self.current_view = VIEW_HOME
        self.selected_article: Optional[Article] = None
        self.visible_articles: List[Article] = list(self.articles)

    def navigate(self, view: str) -> None:
        self.current_view = view
        self.selected_article = None
        if view == VIEW_HOME:
            self.visible_articles = list(self.articles)
        elif view in CATEGORY_VIEWS:
            self.visible_articles = catalog.filter_by_category(
                self.articles, CATEGORY_VIEWS[view]
            )
        logger.debug("View %s: %d articles visible.", view, len(self.visible_articles))

    def open_article(self, article: Article) -> None:
        self.selected_article = article
        self.current_view = VIEW_ARTICLE

    def back(self) -> None:
        self.navigate(VIEW_HOME)

    def home_layout(self) -> HomeLayout:
        """Splits the visible articles into the sections of the front page."""
        visible = self.visible_articles
        main = next((a for a in visible if a.get("isFeatured")), None)
        if main is None and visible:
            main = visible[0]
        others = [a for a in visible if main is None or a["id"] != main["id"]]
        return HomeLayout(
            main_featured=main,
            side_hero=others[:2],
            feed=others[2:],
            featured_stories=catalog.featured(self.articles),
        )


class ArticleCard:
    """An article teaser with an on-demand AI summary."""

    def __init__(
        self,
        article: Article,
        llm: LLMService,
        tracker: Optional[RequestTracker[str]] = None,
    ):
        self.article = article
        self.llm = llm
        self.tracker: RequestTracker[str] = tracker or RequestTracker(llm.language)
        self.is_summary_open = False

    @property
    def subject(self) -> str:
        return self.article["id"]

    @property
    def summary_state(self) -> RequestState:
        return self.tracker.state(self.subject)

    def _fetch(self):
        return self.llm.summarize(self.article["title"], self.article["content"])

    async def open_summary(self) -> RequestState:
        """Opens the summary panel, fetching the summary on first use."""
        self.is_summary_open = True
        return await self.tracker.request(self.subject, self._fetch)

    async def retry_summary(self) -> RequestState:
        return await self.tracker.retry(self.subject, self._fetch)

    def close_summary(self) -> None:
        self.is_summary_open = False


class SmartAnalyst:
    """Topic briefing panel."""

    def __init__(
        self,
        llm: LLMService,
        suggested_topics: Sequence[str] = (),
        tracker: Optional[RequestTracker[BriefingResult]] = None,
    ):
        self.llm = llm
        self.suggested_topics = list(suggested_topics)
        self.tracker: RequestTracker[BriefingResult] = tracker or RequestTracker(
            llm.language
        )
        self.topic = ""
        self.subject: Optional[str] = None

    @property
    def state(self) -> RequestState:
        if self.subject is None:
            return IDLE
        return self.tracker.state(self.subject)

    def select_suggestion(self, suggestion: str) -> None:
        self.topic = suggestion

    def _fetch(self, subject: str):
        return lambda: self.llm.brief(subject)

    async def submit(self, topic: Optional[str] = None) -> RequestState:
        """Requests a briefing for the current topic. Blank topics are ignored."""
        if topic is not None:
            self.topic = topic
        subject = self.topic.strip()
        if not subject:
            return self.state
        if self.subject is not None and self.subject != subject:
            # Moving to a new topic drops the previous one, in flight or not.
            self.tracker.reset(self.subject)
        self.subject = subject
        return await self.tracker.request(subject, self._fetch(subject))

    async def retry(self) -> RequestState:
        if self.subject is None:
            return self.state
        return await self.tracker.retry(self.subject, self._fetch(self.subject))

    def new_analysis(self) -> None:
        """Drops the shown briefing and returns the panel to its input form."""
        if self.subject is not None:
            self.tracker.reset(self.subject)
        self.subject = None


class ArticleDetail:
    """Full article page: reading time, related articles, comments and likes."""

    def __init__(
        self,
        article: Article,
        articles: Sequence[Article],
        comments: CommentService,
        likes: LikeService,
        language: str = DEFAULT_LANGUAGE,
    ):
        self.article = article
        self.articles = articles
        self.comment_service = comments
        self.like_service = likes
        self.language = language
        self.comments: List[Comment] = comments.load(article["id"])

    @property
    def reading_time(self) -> str:
        return catalog.reading_time(self.article, self.language)

    @property
    def related_articles(self) -> List[Article]:
        return catalog.related(self.articles, self.article)

    @property
    def liked(self) -> bool:
        return self.like_service.is_liked(self.article["id"])

    def toggle_like(self) -> bool:
        return self.like_service.toggle(self.article["id"])

    def add_comment(self, text: str, user_name: str = "") -> List[Comment]:
        self.comments = self.comment_service.add(self.article["id"], text, user_name)
        return self.comments

    def delete_comment(self, comment_id: str) -> List[Comment]:
        self.comments = self.comment_service.delete(self.article["id"], comment_id)
        return self.comments
