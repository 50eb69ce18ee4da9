"""Internationalization support — key-based translations for zh_CN, en_US, ja_JP."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from loguru import logger

_FALLBACK = "zh_CN"
_current_lang: str = _FALLBACK
_SUPPORTED = ("zh_CN", "en_US", "ja_JP")
_I18N_DIR = Path(__file__).parent

# Lazy-loaded translation cache: lang → dict
_cache: dict[str, dict[str, str]] = {}


def _load(lang: str) -> dict[str, str]:
    """Load and cache a language JSON file."""
    if lang not in _cache:
        fp = _I18N_DIR / f"{lang}.json"
        try:
            with open(fp, "r", encoding="utf-8") as f:
                _cache[lang] = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"Translations for {lang} unavailable: {e}")
            _cache[lang] = {}
    return _cache[lang]


def set_language(lang: str) -> None:
    """Set the active language.  Falls back to zh_CN if unsupported."""
    global _current_lang
    _current_lang = lang if lang in _SUPPORTED else _FALLBACK


def current_language() -> str:
    return _current_lang


def supported_languages() -> tuple[str, ...]:
    return _SUPPORTED


def t(key: str, **kwargs: Any) -> str:
    """Translate *key* to the current language.

    Supports ``{name}``-style placeholders via keyword arguments::

        t("summary.total_export_failed", failed_count=2)
        # → "2 个游戏导出失败" (zh_CN)
        # → "2 game(s) failed to export" (en_US)
    """
    text = _load(_current_lang).get(key)
    if text is None:
        # Fall back to zh_CN, then raw key
        text = _load(_FALLBACK).get(key, key)
    if kwargs:
        try:
            text = text.format(**kwargs)
        except (KeyError, IndexError):
            pass
    return text
