"""
Configuration loading for the Nashra reader.

Settings live in a JSON file next to the package; secrets are read from the
environment only.
"""

import json
import logging
import os
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)

DEFAULT_CONFIG: Dict[str, Any] = {
    "model": "gemini-3-flash-preview",
    "summary_char_budget": 2000,
    "language": "ar",
    "store_path": None,
    "suggested_topics": [],
}

API_KEY_ENV_VARS = ("GEMINI_API_KEY", "API_KEY")


def load_config(config_filename: str = "config.json") -> Dict[str, Any]:
    """Loads configuration from a JSON file, filling in defaults."""
    # Build absolute path relative to this module
    base_dir = os.path.dirname(os.path.abspath(__file__))
    config_path = os.path.join(base_dir, config_filename)

    config = dict(DEFAULT_CONFIG)
    try:
        with open(config_path, "r", encoding="utf-8") as f:
            config.update(json.load(f))
    except FileNotFoundError:
        logger.warning("Config file not found at %s. Using defaults.", config_path)
    return config


def get_api_key() -> Optional[str]:
    """Returns the Gemini credential from the environment, if any."""
    for name in API_KEY_ENV_VARS:
        value = os.environ.get(name, "").strip()
        if value:
            return value
    return None
