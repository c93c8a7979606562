"""Weekly buckets: per-theme engagement scores and top article per week."""

import logging
from datetime import date, datetime
from typing import Dict, Iterable, List, Optional, Union

from presse.classify import classify
from presse.models import CleanedArticle, ThemeConfig, WeekBucket
from presse.monitoring import CLASSIFY_FAILURE, BuildMonitor

log = logging.getLogger("presse.aggregate")


def week_key(d: Union[date, datetime]) -> str:
    """ISO-8601 week key, e.g. ``2025-S11``. The year is the ISO year."""
    if isinstance(d, datetime):
        d = d.date()
    iso_year, iso_week, _ = d.isocalendar()
    return f"{iso_year}-S{iso_week:02d}"


def _safe_classify(article: CleanedArticle, themes: ThemeConfig,
                   monitor: Optional[BuildMonitor]) -> List[str]:
    try:
        return classify(article.text, themes)
    except Exception as e:
        if monitor is not None:
            monitor.record(CLASSIFY_FAILURE, f"{article.screen_name} {article.date}: {e}")
        else:
            log.warning("Classification impossible (%s): %s", article.date, e)
        return [themes.fallback]


def aggregate(articles: Iterable[CleanedArticle], themes: ThemeConfig,
              monitor: Optional[BuildMonitor] = None) -> Dict[str, WeekBucket]:
    """Bucket articles by week in input order. Buckets exist only for weeks with articles."""
    weeks: Dict[str, WeekBucket] = {}
    for article in articles:
        key = week_key(article.published_at)
        bucket = weeks.get(key)
        if bucket is None:
            bucket = weeks[key] = WeekBucket(key=key)
        bucket.add(article, _safe_classify(article, themes, monitor))
    return weeks


def sorted_weeks(weeks: Dict[str, WeekBucket]) -> List[WeekBucket]:
    return [weeks[k] for k in sorted(weeks)]
