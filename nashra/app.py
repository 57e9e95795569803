"""
Nashra command line reader.

Browses the seeded article collection, keeps local comments and likes, and
asks Google Gemini for article summaries and topic briefings.
"""

import argparse
import asyncio
import logging
import os
import sys
from typing import Any, Dict, List, Optional

from nashra import catalog
from nashra.config import get_api_key, load_config
from nashra.models import Article
from nashra.services.comments import CommentService, LikeService
from nashra.services.llm import LLMService
from nashra.services.render import TextRenderer
from nashra.services.state import RequestState, RequestStatus
from nashra.services.storage import JsonFileStore, KeyValueStore
from nashra.views import (
    CATEGORY_VIEWS,
    VIEW_HOME,
    ArticleCard,
    ArticleDetail,
    Navigator,
    SmartAnalyst,
)

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(levelname)s - %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger(__name__)

DEFAULT_STORE_PATH = os.path.join(os.path.expanduser("~"), ".nashra", "local_storage.json")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="nashra", description="Entrepreneur NASHRA reader with AI summaries."
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    parser.add_argument("--lang", help="Output language (ar or en)")
    sub = parser.add_subparsers(dest="command", required=True)

    list_cmd = sub.add_parser("list", help="List articles")
    list_cmd.add_argument(
        "--category", choices=sorted(CATEGORY_VIEWS), help="Only show one section"
    )
    list_cmd.add_argument("--home", action="store_true", help="Show the front page layout")

    search_cmd = sub.add_parser("search", help="Search titles and excerpts")
    search_cmd.add_argument("query")

    show_cmd = sub.add_parser("show", help="Show an article")
    show_cmd.add_argument("article_id")

    summarize_cmd = sub.add_parser("summarize", help="AI summary of an article")
    summarize_cmd.add_argument("article_id")

    brief_cmd = sub.add_parser("brief", help="AI briefing on a topic")
    brief_cmd.add_argument("topic", nargs="?", default="")
    brief_cmd.add_argument(
        "--suggestion", type=int, help="Use the Nth suggested topic (1-based)"
    )

    comment_cmd = sub.add_parser("comment", help="Add or delete a comment")
    comment_cmd.add_argument("article_id")
    comment_cmd.add_argument("text", nargs="?", default="")
    comment_cmd.add_argument("--name", default="", help="Display name")
    comment_cmd.add_argument("--delete", metavar="COMMENT_ID", help="Delete a comment")

    like_cmd = sub.add_parser("like", help="Toggle the like flag of an article")
    like_cmd.add_argument("article_id")
    return parser


def open_store(config: Dict[str, Any]) -> KeyValueStore:
    path = os.environ.get("NASHRA_STORE_PATH") or config.get("store_path") or DEFAULT_STORE_PATH
    return JsonFileStore(path)


def build_llm(config: Dict[str, Any], language: str) -> LLMService:
    return LLMService(
        get_api_key(),
        model=config["model"],
        summary_char_budget=int(config["summary_char_budget"]),
        language=language,
    )


def _can_prompt() -> bool:
    return sys.stdin is not None and sys.stdin.isatty()


def _offer_retry(renderer: TextRenderer) -> bool:
    """Asks the reader whether to retry a failed request."""
    if not _can_prompt():
        return False
    answer = input(f"{renderer.msg('retry')}? [y/N] ")
    return answer.strip().lower() in ("y", "yes", "نعم")


async def run_summarize(card: ArticleCard, renderer: TextRenderer) -> RequestState:
    state = await card.open_summary()
    print(renderer.render_summary(card.article["title"], state))
    while state.retry_available and _offer_retry(renderer):
        state = await card.retry_summary()
        print(renderer.render_summary(card.article["title"], state))
    return state


async def run_brief(
    analyst: SmartAnalyst, topic: str, renderer: TextRenderer
) -> RequestState:
    def show_loading(subject: str, state: RequestState) -> None:
        if state.status is RequestStatus.LOADING:
            print(renderer.render_briefing(subject, state))

    analyst.tracker.subscribe(show_loading)
    state = await analyst.submit(topic)
    print(renderer.render_briefing(topic, state))
    while state.retry_available and _offer_retry(renderer):
        state = await analyst.retry()
        print(renderer.render_briefing(topic, state))
    return state


def _require_article(articles: List[Article], article_id: str) -> Optional[Article]:
    article = catalog.find_article(articles, article_id)
    if article is None:
        logger.error("Article %s not found.", article_id)
    return article


def main(argv: Optional[List[str]] = None) -> int:
    """Main execution entry point."""
    args = build_parser().parse_args(argv)
    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    config = load_config()
    language = args.lang or config["language"]
    renderer = TextRenderer(language)
    articles = list(catalog.load_articles())
    navigator = Navigator(articles)

    if args.command == "list":
        navigator.navigate(args.category or VIEW_HOME)
        if args.home and not args.category:
            layout = navigator.home_layout()
            if layout.main_featured:
                print(renderer.render_list([layout.main_featured]))
            print(renderer.render_list(layout.side_hero))
            print(renderer.render_list(layout.feed))
            if layout.featured_stories:
                print(
                    renderer.render_list(
                        layout.featured_stories, renderer.msg("featured_stories")
                    )
                )
            return 0
        print(renderer.render_list(navigator.visible_articles))
        return 0

    if args.command == "search":
        print(renderer.render_search(args.query, catalog.search(articles, args.query)))
        return 0

    if args.command == "brief":
        topic = args.topic
        suggestions = config.get("suggested_topics", [])
        analyst = SmartAnalyst(build_llm(config, language), suggestions)
        if args.suggestion:
            if not 1 <= args.suggestion <= len(suggestions):
                logger.error("No suggested topic #%d.", args.suggestion)
                return 2
            analyst.select_suggestion(suggestions[args.suggestion - 1])
            topic = analyst.topic
        if not topic.strip():
            print("\n".join(f"{i}. {t}" for i, t in enumerate(suggestions, 1)))
            return 0
        state = asyncio.run(run_brief(analyst, topic, renderer))
        return 0 if state.status is RequestStatus.SUCCESS else 1

    article = _require_article(articles, args.article_id)
    if article is None:
        return 2

    if args.command == "summarize":
        card = ArticleCard(article, build_llm(config, language))
        state = asyncio.run(run_summarize(card, renderer))
        return 0 if state.status is RequestStatus.SUCCESS else 1

    store = open_store(config)
    detail = ArticleDetail(
        article,
        articles,
        CommentService(store, language),
        LikeService(store),
        language,
    )

    if args.command == "comment":
        if args.delete:
            detail.delete_comment(args.delete)
        else:
            detail.add_comment(args.text, args.name)
        print(renderer.render_comments(detail.comments))
        return 0

    if args.command == "like":
        detail.toggle_like()

    print(
        renderer.render_article(
            article, detail.related_articles, detail.comments, detail.liked
        )
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
