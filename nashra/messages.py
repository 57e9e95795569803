"""
User-facing message catalog.

Messages are looked up by key; unknown languages fall back to Arabic, the
publication's default.
"""

import logging
from typing import Dict

logger = logging.getLogger(__name__)

DEFAULT_LANGUAGE = "ar"

MESSAGES: Dict[str, Dict[str, str]] = {
    "ar": {
        "missing_api_key": "مفتاح API غير متوفر",
        "briefing_failed": "حدث خطأ أثناء توليد التحليل. يرجى المحاولة لاحقاً.",
        "summary_failed": "عذراً، فشل توليد الملخص الذكي.",
        "unexpected_error": "حدث خطأ غير متوقع",
        "retry": "حاول مرة أخرى",
        "anonymous_reader": "قارئ مجهول",
        "minutes_read": "{minutes} دقيقة للقراءة",
        "minutes": "{minutes} دقيقة",
        "featured_stories": "قصص مميزة",
        "no_results": 'لا توجد نتائج مطابقة لـ "{query}"',
        "search_results": "نتائج البحث ({count})",
        "summary_heading": "الملخص التنفيذي",
        "key_points_heading": "الرؤى الرئيسية",
        "outlook_heading": "النظرة المستقبلية",
        "generated_by": "تم التوليد بواسطة Gemini AI",
        "comments_heading": "تعليقات القراء ({count})",
        "loading_briefing": 'يقوم Gemini بتحليل البيانات وبناء الرؤى حول "{topic}"...',
    },
    "en": {
        "missing_api_key": "API key is not available",
        "briefing_failed": "Something went wrong while generating the analysis. Please try again later.",
        "summary_failed": "Sorry, the smart summary could not be generated.",
        "unexpected_error": "An unexpected error occurred",
        "retry": "Try again",
        "anonymous_reader": "Anonymous reader",
        "minutes_read": "{minutes} min read",
        "minutes": "{minutes} min",
        "featured_stories": "Featured stories",
        "no_results": 'No results match "{query}"',
        "search_results": "Search results ({count})",
        "summary_heading": "Executive summary",
        "key_points_heading": "Key insights",
        "outlook_heading": "Outlook",
        "generated_by": "Generated by Gemini AI",
        "comments_heading": "Reader comments ({count})",
        "loading_briefing": 'Gemini is analysing "{topic}"...',
    },
}


def message(key: str, language: str = DEFAULT_LANGUAGE, **params: object) -> str:
    """Returns the localized text for a message key."""
    catalog = MESSAGES.get(language)
    if catalog is None:
        logger.debug("Unknown language %r, using %s.", language, DEFAULT_LANGUAGE)
        catalog = MESSAGES[DEFAULT_LANGUAGE]
    text = catalog.get(key) or MESSAGES[DEFAULT_LANGUAGE].get(key) or key
    return text.format(**params) if params else text
