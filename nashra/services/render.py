"""
Plain-text rendering for the command line reader.

This module provides the TextRenderer class which handles:
- Article lists, search results and the article page
- Summary and briefing panels in each request state
"""

from typing import List, Optional, Sequence

from nashra import catalog
from nashra.messages import DEFAULT_LANGUAGE, message
from nashra.models import Article, BriefingResult, Comment
from nashra.services.state import RequestState, RequestStatus


class TextRenderer:
    """Formats reader content for a terminal."""

    _MARKERS = {
        "rule": "-" * 60,
        "heading": "== {} ==",
        "featured": "*",
        "spinner": "...",
    }

    def __init__(self, language: str = DEFAULT_LANGUAGE):
        self.language = language

    def msg(self, key: str, **params: object) -> str:
        return message(key, self.language, **params)

    def _heading(self, text: str) -> str:
        return self._MARKERS["heading"].format(text)

    def render_teaser(self, article: Article) -> str:
        flag = self._MARKERS["featured"] if article.get("isFeatured") else " "
        return (
            f"{flag} [{article['id']}] {article['title']}\n"
            f"      {article['category'].value} | {article['author']} | {article['date']}"
            f" | {catalog.card_reading_time(article, self.language)}"
        )

    def render_list(self, articles: Sequence[Article], title: Optional[str] = None) -> str:
        lines: List[str] = []
        if title:
            lines.append(self._heading(title))
        lines.extend(self.render_teaser(a) for a in articles)
        return "\n".join(lines)

    def render_search(self, query: str, results: Sequence[Article]) -> str:
        if not results:
            return self.msg("no_results", query=query)
        return self.render_list(results, self.msg("search_results", count=len(results)))

    def render_comments(self, comments: Sequence[Comment]) -> str:
        lines = [self._heading(self.msg("comments_heading", count=len(comments)))]
        for comment in comments:
            lines.append(f"{comment['userName']} ({comment['date']}) [{comment['id']}]")
            lines.append(f"    {comment['text']}")
        return "\n".join(lines)

    def render_article(
        self,
        article: Article,
        related: Sequence[Article] = (),
        comments: Sequence[Comment] = (),
        liked: bool = False,
    ) -> str:
        like_mark = " <3" if liked else ""
        sections = [
            self._heading(article["title"]) + like_mark,
            f"{article['category'].value} | {article['author']} | {article['date']}"
            f" | {catalog.reading_time(article, self.language)}",
            self._MARKERS["rule"],
            article["content"],
        ]
        if article.get("tags"):
            sections.append(" ".join(f"#{t}" for t in article["tags"]))
        if related:
            sections.append(self._MARKERS["rule"])
            sections.append(self.render_list(related))
        sections.append(self._MARKERS["rule"])
        sections.append(self.render_comments(comments))
        return "\n".join(sections)

    def _render_error(self, state: RequestState) -> str:
        text = f"! {state.error}"
        if state.retry_available:
            text += f"\n[{self.msg('retry')}]"
        return text

    def render_summary(self, title: str, state: RequestState) -> str:
        if state.status is RequestStatus.LOADING:
            return self._MARKERS["spinner"]
        if state.status is RequestStatus.ERROR:
            return self._render_error(state)
        if state.status is RequestStatus.SUCCESS:
            return f"{self._heading(title)}\n{state.result}"
        return ""

    def render_briefing(self, topic: str, state: RequestState) -> str:
        if state.status is RequestStatus.LOADING:
            return self.msg("loading_briefing", topic=topic)
        if state.status is RequestStatus.ERROR:
            return self._render_error(state)
        if state.status is not RequestStatus.SUCCESS:
            return ""

        briefing: BriefingResult = state.result
        lines = [
            self._heading(briefing["title"]),
            "",
            self.msg("summary_heading") + ":",
            briefing["summary"],
            "",
            self.msg("key_points_heading") + ":",
        ]
        lines.extend(
            f"  {idx}. {point}" for idx, point in enumerate(briefing["keyPoints"], 1)
        )
        lines.extend(
            [
                "",
                self.msg("outlook_heading") + ":",
                briefing["outlook"],
                "",
                self.msg("generated_by"),
            ]
        )
        return "\n".join(lines)
