"""Unit tests for the reader views."""

import asyncio
import json
import unittest
from unittest.mock import AsyncMock, MagicMock, patch

from nashra import catalog
from nashra.messages import message
from nashra.models import Category
from nashra.services.comments import CommentService, LikeService
from nashra.services.llm import LLMService
from nashra.services.state import IDLE, RequestStatus
from nashra.services.storage import MemoryStore
from nashra.views import (
    VIEW_ANALYST,
    VIEW_ARTICLE,
    VIEW_HOME,
    ArticleCard,
    ArticleDetail,
    Navigator,
    SmartAnalyst,
)

BRIEFING = {
    "title": "AI",
    "summary": "Summary",
    "keyPoints": ["One", "Two", "Three"],
    "outlook": "Bright",
}


class TestNavigator(unittest.TestCase):
    def setUp(self):
        self.articles = catalog.load_articles()
        self.nav = Navigator(self.articles)

    def test_home_shows_everything(self):
        self.assertEqual(self.nav.current_view, VIEW_HOME)
        self.assertEqual(len(self.nav.visible_articles), len(self.articles))

    def test_category_view_filters(self):
        self.nav.navigate("ai")
        self.assertTrue(self.nav.visible_articles)
        for article in self.nav.visible_articles:
            self.assertIs(article["category"], Category.AI)

    def test_non_category_view_keeps_previous_list(self):
        self.nav.navigate("tech")
        tech = list(self.nav.visible_articles)
        self.nav.navigate(VIEW_ANALYST)
        self.assertEqual(self.nav.visible_articles, tech)
        self.nav.back()
        self.assertEqual(len(self.nav.visible_articles), len(self.articles))

    def test_open_article_and_back(self):
        article = self.articles[1]
        self.nav.open_article(article)
        self.assertEqual(self.nav.current_view, VIEW_ARTICLE)
        self.assertIs(self.nav.selected_article, article)
        self.nav.back()
        self.assertEqual(self.nav.current_view, VIEW_HOME)
        self.assertIsNone(self.nav.selected_article)

    def test_home_layout(self):
        layout = self.nav.home_layout()
        self.assertTrue(layout.main_featured.get("isFeatured"))
        self.assertEqual(len(layout.side_hero), 2)
        ids = [a["id"] for a in [layout.main_featured] + layout.side_hero + layout.feed]
        self.assertEqual(sorted(ids), sorted(a["id"] for a in self.articles))
        self.assertLessEqual(len(layout.featured_stories), 3)

    def test_home_layout_without_featured_uses_first(self):
        plain = [dict(a, isFeatured=False) for a in self.articles[:3]]
        layout = Navigator(plain).home_layout()
        self.assertEqual(layout.main_featured["id"], plain[0]["id"])
        self.assertEqual(layout.feed, [])

    def test_empty_collection(self):
        layout = Navigator([]).home_layout()
        self.assertIsNone(layout.main_featured)
        self.assertEqual(layout.side_hero, [])


class TestArticleCard(unittest.IsolatedAsyncioTestCase):
    def setUp(self):
        patcher = patch("nashra.services.llm.genai.Client")
        mock_client_cls = patcher.start()
        self.addCleanup(patcher.stop)
        response = MagicMock()
        response.text = "- a\n- b"
        self.generate = AsyncMock(return_value=response)
        mock_client_cls.return_value.aio.models.generate_content = self.generate
        self.article = catalog.load_articles()[0]

    async def test_summary_fetched_once_per_article(self):
        card = ArticleCard(self.article, LLMService("fake_key"))
        first = await card.open_summary()
        card.close_summary()
        second = await card.open_summary()

        self.assertTrue(card.is_summary_open)
        self.assertEqual(first.result, "- a\n- b")
        self.assertIs(second, first)
        self.generate.assert_awaited_once()

    async def test_missing_key_shows_error_without_network(self):
        card = ArticleCard(self.article, LLMService(None))
        state = await card.open_summary()
        self.assertEqual(state.status, RequestStatus.ERROR)
        self.assertEqual(state.error, message("missing_api_key"))
        self.generate.assert_not_awaited()

    async def test_retry_after_failure(self):
        self.generate.side_effect = [ConnectionError("down"), self.generate.return_value]
        card = ArticleCard(self.article, LLMService("fake_key"))
        failed = await card.open_summary()
        self.assertEqual(failed.error, message("summary_failed"))
        recovered = await card.retry_summary()
        self.assertEqual(recovered.status, RequestStatus.SUCCESS)
        self.assertEqual(self.generate.await_count, 2)


class TestSmartAnalyst(unittest.IsolatedAsyncioTestCase):
    def setUp(self):
        patcher = patch("nashra.services.llm.genai.Client")
        mock_client_cls = patcher.start()
        self.addCleanup(patcher.stop)
        response = MagicMock()
        response.text = json.dumps(BRIEFING)
        self.response = response
        self.generate = AsyncMock(return_value=response)
        mock_client_cls.return_value.aio.models.generate_content = self.generate
        self.analyst = SmartAnalyst(LLMService("fake_key"), ["AI", "Fintech"])
        self.transitions = []
        self.analyst.tracker.subscribe(
            lambda subject, state: self.transitions.append(state.status)
        )

    async def test_network_failure_then_retry(self):
        self.generate.side_effect = [ConnectionError("offline"), self.response]
        self.assertEqual(self.analyst.state.status, RequestStatus.IDLE)

        state = await self.analyst.submit("AI")
        self.assertEqual(state.status, RequestStatus.ERROR)
        self.assertTrue(state.retry_available)
        self.assertEqual(self.transitions, [RequestStatus.LOADING, RequestStatus.ERROR])

        state = await self.analyst.retry()
        self.assertEqual(self.transitions[2], RequestStatus.LOADING)
        self.assertEqual(state.result, BRIEFING)

    async def test_blank_topic_is_ignored(self):
        state = await self.analyst.submit("   ")
        self.assertEqual(state.status, RequestStatus.IDLE)
        self.generate.assert_not_awaited()

    async def test_same_topic_reuses_briefing(self):
        await self.analyst.submit("AI")
        await self.analyst.submit(" AI ")
        self.generate.assert_awaited_once()

    async def test_new_analysis_resets(self):
        await self.analyst.submit("AI")
        self.analyst.new_analysis()
        self.assertEqual(self.analyst.state.status, RequestStatus.IDLE)
        await self.analyst.submit("AI")
        self.assertEqual(self.generate.await_count, 2)

    async def test_suggestion_fills_topic(self):
        self.analyst.select_suggestion("Fintech")
        state = await self.analyst.submit()
        self.assertEqual(self.analyst.subject, "Fintech")
        self.assertEqual(state.status, RequestStatus.SUCCESS)

    async def test_new_topic_drops_previous_briefing(self):
        await self.analyst.submit("AI")
        await self.analyst.submit("Fintech")
        self.assertIs(self.analyst.tracker.state("AI"), IDLE)
        self.assertEqual(self.analyst.subject, "Fintech")

        await self.analyst.submit("AI")
        self.assertEqual(self.generate.await_count, 3)

    async def test_late_result_for_previous_topic_is_ignored(self):
        gate = asyncio.Event()

        async def generate(**kwargs):
            if '"AI"' in kwargs["contents"]:
                await gate.wait()
            return self.response

        self.generate.side_effect = generate
        seen = []
        self.analyst.tracker.subscribe(
            lambda subject, state: seen.append((subject, state.status))
        )

        pending = asyncio.ensure_future(self.analyst.submit("AI"))
        for _ in range(3):
            await asyncio.sleep(0)
        self.assertIn(("AI", RequestStatus.LOADING), seen)

        state = await self.analyst.submit("Fintech")
        self.assertEqual(state.result, BRIEFING)
        gate.set()
        await pending

        self.assertNotIn(("AI", RequestStatus.SUCCESS), seen)
        self.assertIs(self.analyst.tracker.state("AI"), IDLE)
        self.assertEqual(self.analyst.subject, "Fintech")
        self.assertEqual(self.analyst.state.result, BRIEFING)

    async def test_partial_briefing_is_an_error(self):
        self.response.text = json.dumps({"title": "Only a title"})
        state = await self.analyst.submit("AI")
        self.assertEqual(state.status, RequestStatus.ERROR)
        self.assertIsNone(state.result)


class TestArticleDetail(unittest.TestCase):
    def setUp(self):
        self.articles = catalog.load_articles()
        store = MemoryStore()
        self.detail = ArticleDetail(
            self.articles[0],
            self.articles,
            CommentService(store),
            LikeService(store),
        )

    def test_related_excludes_itself(self):
        related = self.detail.related_articles
        self.assertNotIn(self.articles[0]["id"], [a["id"] for a in related])
        for article in related:
            self.assertIs(article["category"], self.articles[0]["category"])

    def test_comments_and_likes(self):
        self.assertEqual(self.detail.comments, [])
        self.detail.add_comment("Great read", "Huda")
        self.assertEqual(self.detail.comments[0]["userName"], "Huda")
        comment_id = self.detail.comments[0]["id"]
        self.detail.delete_comment(comment_id)
        self.assertEqual(self.detail.comments, [])

        self.assertFalse(self.detail.liked)
        self.assertTrue(self.detail.toggle_like())
        self.assertTrue(self.detail.liked)

    def test_reading_time(self):
        self.assertIn("1", self.detail.reading_time)


if __name__ == "__main__":
    unittest.main()
