"""Zen mode ("Semainier"): week navigation, sentiment filter, theme bars, top quote."""

from typing import Any, Dict, List, Mapping, Optional

from presse.models import CleanedArticle, SentimentEntry, ThemeConfig
from presse.text import add_ellipsis_if_truncated
from renderers.base import RenderContext, Renderer
from renderers.bluesky import post_url, profile_url

# Meteorological seasons, by ISO week number (data runs March-December).
SEASONS = [
    ("Printemps", "🌸", range(10, 23)),
    ("Été", "☀️", range(23, 36)),
    ("Automne", "🍂", range(36, 49)),
    ("Hiver", "❄️", None),  # everything else
]

SENTIMENT_CONFIG = {
    "negative": {"emoji": "😠", "label": "Négatif"},
    "slightly_negative": {"emoji": "😟", "label": "Légèrement négatif"},
    "neutral": {"emoji": "😐", "label": "Neutre"},
    "slightly_positive": {"emoji": "🙂", "label": "Légèrement positif"},
    "positive": {"emoji": "😊", "label": "Positif"},
}

# Colour-blind friendly fills, shared with the main chart.
PATTERNS = ["stripe", "dots", "cross", "diagonal", "zigzag", "horizontal", "vertical"]
FALLBACK_PATTERN = "dots"


def week_number(week_key: str) -> int:
    return int(week_key.split("-S")[1])


def build_seasons(week_keys: List[str]) -> List[Dict[str, Any]]:
    seasons = [{"name": name, "emoji": emoji, "weeks": []} for name, emoji, _ in SEASONS]
    for index, key in enumerate(week_keys):
        num = week_number(key)
        slot = len(SEASONS) - 1
        for i, (_, _, weeks) in enumerate(SEASONS):
            if weeks is not None and num in weeks:
                slot = i
                break
        seasons[slot]["weeks"].append({"num": index + 1, "key": key})
    return [s for s in seasons if s["weeks"]]


def theme_patterns(themes: ThemeConfig) -> Dict[str, str]:
    ordered = sorted(t for t in themes.names() if t != themes.fallback)
    mapping = {theme: PATTERNS[i % len(PATTERNS)] for i, theme in enumerate(ordered)}
    mapping[themes.fallback] = FALLBACK_PATTERN
    return mapping


def format_score(value: float) -> str:
    """Signed score, integers without a trailing ``.0``."""
    sign = "+" if value >= 0 else ""
    number = int(value) if float(value).is_integer() else value
    return f"{sign}{number}"


def sentiment_title(entry: Optional[SentimentEntry]) -> str:
    if not entry or not entry.category:
        return ""
    label = entry.category.replace("_", " ", 1)
    return f"Tonalité\u00a0: {label} (score\u00a0: {format_score(entry.average_score)})"


def sentiment_filters(week_keys: List[str], sentiment: Mapping[str, SentimentEntry]) -> List[Dict[str, Any]]:
    counts: Dict[str, int] = {}
    for key in week_keys:
        entry = sentiment.get(key)
        category = entry.category if entry else "unknown"
        counts[category] = counts.get(category, 0) + 1
    return [
        {"category": category, "count": counts[category], **cfg}
        for category, cfg in SENTIMENT_CONFIG.items()
        if counts.get(category, 0) > 0
    ]


def build_quote(article: CleanedArticle) -> Dict[str, Any]:
    return {
        "text": add_ellipsis_if_truncated(article.text),
        "screen_name": article.screen_name,
        "avatar_url": article.avatar_url,
        "profile_url": profile_url(article.publication_id),
        "post_url": post_url(article.publication_id),
        "article_url": article.urls[0] if article.urls else None,
    }


class ZenRenderer(Renderer):
    name = "zen"
    template_name = "zen.html.j2"

    def build_context(self, ctx: RenderContext) -> Dict[str, Any]:
        keys = [bucket.key for bucket in ctx.weeks]
        patterns = theme_patterns(ctx.themes)

        weeks = []
        for index, bucket in enumerate(ctx.weeks):
            ranked = bucket.top_themes(ctx.top_themes)
            max_score = ranked[0][1] if ranked and ranked[0][1] else 1
            entry = ctx.sentiment.get(bucket.key)
            weeks.append({
                "key": bucket.key,
                "num": index + 1,
                "article_count": len(bucket.articles),
                "total_engagement": bucket.total_engagement,
                "sentiment_category": entry.category if entry else "unknown",
                "sentiment_emoji": entry.emoji if entry else "",
                "sentiment_title": sentiment_title(entry),
                "bars": [
                    {
                        "theme": theme,
                        "score": score,
                        "width": int(score / max_score * 100 + 0.5),
                        "color": ctx.themes.color(theme),
                        "pattern": patterns.get(theme, PATTERNS[0]),
                    }
                    for theme, score in ranked
                ],
                "quote": build_quote(bucket.top_article) if bucket.top_article else None,
            })

        return {
            "seasons": build_seasons(keys),
            "sentiment_filters": sentiment_filters(keys, ctx.sentiment),
            "week_count": len(keys),
            "weeks": weeks,
        }
