"""Centralized configuration for the Revue de Presse build."""

import os
import json
import logging
from typing import Dict
from zoneinfo import ZoneInfo

from presse.models import SentimentEntry, ThemeConfig, UrlCacheEntry

log = logging.getLogger("presse.config")

# =========================
# File paths
# =========================
DATA_DIR: str = os.getenv("PRESSE_DATA_DIR", "2025")
OUTPUT_DIR: str = os.getenv("PRESSE_OUTPUT_DIR", "dist")
URL_CACHE_FILE: str = os.getenv("URL_CACHE_FILE", "scripts/url-cache-drission.json")
TOPICS_FILE: str = os.getenv("TOPICS_FILE", "topics.json")
SENTIMENT_FILE: str = os.getenv("SENTIMENT_FILE", "sentiment.json")
TEMPLATE_FILE: str = os.getenv("TEMPLATE_FILE", "course-des-themes.html")
SW_TEMPLATE_FILE: str = os.getenv("SW_TEMPLATE_FILE", "sw.template.js")
COMBINED_FILE: str = os.getenv("COMBINED_FILE", "data-combined.json")

# =========================
# Text
# =========================
TEXT_TRUNCATE_AT: int = int(os.getenv("TEXT_TRUNCATE_AT", "197"))

# =========================
# Aggregation
# =========================
TOP_THEMES_PER_WEEK: int = int(os.getenv("TOP_THEMES_PER_WEEK", "5"))
FALLBACK_THEME: str = os.getenv("FALLBACK_THEME", "Autres")
TZ: ZoneInfo = ZoneInfo(os.getenv("BUILD_TIMEZONE", "Europe/Paris"))

# =========================
# Logging
# =========================
LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

DEFAULT_THEMES: Dict[str, list] = {
    "Trump / USA": ["trump", "etats-unis", "usa", "americain", "washington"],
    "Ukraine / Russie": ["ukraine", "russie", "poutine", "zelensky"],
    "Gaza / Palestine": ["gaza", "palestine", "israel", "hamas"],
    "Climat / Environnement": ["climat", "climatique", "environnement", "ecologie"],
    "Autres": [],
}


def _read_json(path: str):
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def default_theme_config(fallback: str = FALLBACK_THEME) -> ThemeConfig:
    return ThemeConfig.from_mapping(DEFAULT_THEMES, fallback=fallback)


def load_url_cache(path: str = URL_CACHE_FILE) -> Dict[str, UrlCacheEntry]:
    """Load the URL unfurling cache. Missing or invalid cache -> empty."""
    try:
        data = _read_json(path)
        if not isinstance(data, dict):
            raise ValueError("le cache d'URL doit etre un dict")
    except FileNotFoundError:
        log.info("Cache d'URL %s absent, resolution desactivee.", path)
        return {}
    except (json.JSONDecodeError, ValueError) as e:
        log.warning("Cache d'URL %s illisible: %s", path, e)
        return {}

    out: Dict[str, UrlCacheEntry] = {}
    for url, entry in data.items():
        if not isinstance(entry, dict):
            continue
        try:
            status = int(entry.get("status") or 0)
        except (TypeError, ValueError):
            status = 0
        out[str(url)] = UrlCacheEntry(resolved=str(entry.get("resolved") or ""), status=status)
    log.info("Cache d'URL charge: %d entrees.", len(out))
    return out


def load_theme_config(path: str = TOPICS_FILE, fallback: str = FALLBACK_THEME) -> ThemeConfig:
    """Load topics.json (topic_config -> keywords/color) or the hardcoded themes."""
    try:
        data = _read_json(path)
        topic_config = data.get("topic_config") if isinstance(data, dict) else None
        if not isinstance(topic_config, dict):
            raise ValueError("topic_config manquant ou invalide")
    except FileNotFoundError:
        log.info("Fichier %s introuvable, themes par defaut.", path)
        return default_theme_config(fallback)
    except (json.JSONDecodeError, ValueError) as e:
        log.error("Erreur lecture %s: %s", path, e)
        return default_theme_config(fallback)

    themes: Dict[str, list] = {}
    colors: Dict[str, str] = {}
    for name, cfg in topic_config.items():
        if not isinstance(cfg, dict):
            continue
        themes[name] = [kw for kw in (cfg.get("keywords") or []) if isinstance(kw, str)]
        if cfg.get("color"):
            colors[name] = str(cfg["color"])

    if not themes:
        log.warning("Aucun theme dans %s, themes par defaut.", path)
        return default_theme_config(fallback)

    log.info("%d themes dynamiques charges depuis %s.", len(themes), path)
    return ThemeConfig.from_mapping(themes, fallback=fallback, colors=colors)


def load_sentiment(path: str = SENTIMENT_FILE) -> Dict[str, SentimentEntry]:
    """Load weekly_sentiment from sentiment.json, keyed by week key."""
    try:
        data = _read_json(path)
        weekly = data.get("weekly_sentiment", {}) if isinstance(data, dict) else None
        if not isinstance(weekly, dict):
            raise ValueError("weekly_sentiment invalide")
    except FileNotFoundError:
        log.info("Fichier %s introuvable, pas de sentiment.", path)
        return {}
    except (json.JSONDecodeError, ValueError) as e:
        log.error("Erreur lecture %s: %s", path, e)
        return {}

    out: Dict[str, SentimentEntry] = {}
    for week_key, entry in weekly.items():
        if not isinstance(entry, dict) or not entry.get("category"):
            continue
        try:
            score = float(entry.get("average_score") or 0)
        except (TypeError, ValueError):
            score = 0.0
        out[str(week_key)] = SentimentEntry(
            category=str(entry["category"]),
            average_score=score,
            emoji=str(entry.get("emoji") or ""),
        )
    log.info("Sentiment charge pour %d semaines.", len(out))
    return out
