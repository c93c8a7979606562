"""Loading daily JSON files and turning raw records into cleaned articles."""

import os
import json
import logging
from dataclasses import dataclass
from datetime import datetime, tzinfo
from typing import Any, Dict, List, Mapping, Optional, Tuple

from presse.models import Article, CleanedArticle
from presse.monitoring import (
    BAD_DATE, CLEAN_FAILURE, INVALID_RECORD, SKIPPED_FILE, BuildMonitor,
)
from presse.text import clean_for_display
from presse.urls import extract_urls

log = logging.getLogger("presse.corpus")


class CorpusError(RuntimeError):
    """The corpus itself is unusable (e.g. missing data directory)."""


@dataclass
class CorpusReport:
    files: int = 0
    skipped_files: int = 0
    records: int = 0

    @property
    def processed_files(self) -> int:
        return self.files - self.skipped_files


def _coerce_string(value: Any) -> str:
    if value is None or isinstance(value, bool):
        return ""
    if isinstance(value, str):
        return value.strip()
    return str(value).strip()


def _coerce_count(value: Any) -> int:
    if isinstance(value, bool):
        return 0
    try:
        n = int(value or 0)
    except (TypeError, ValueError):
        return 0
    return max(0, n)


def parse_date(value: Any, tz: tzinfo) -> Optional[datetime]:
    """Parse an ISO date or instant. Aware values are moved to ``tz``; naive ones are taken as local."""
    text = _coerce_string(value)
    if not text:
        return None
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    try:
        dt = datetime.fromisoformat(text)
    except ValueError:
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=tz)
    return dt.astimezone(tz)


def load_corpus(data_dir: str, monitor: Optional[BuildMonitor] = None) -> Tuple[List[Dict[str, Any]], CorpusReport]:
    """Concatenate every ``*.json`` array in data_dir (name order)."""
    if not os.path.isdir(data_dir):
        raise CorpusError(f"Dossier de donnees introuvable: {data_dir}")

    monitor = monitor or BuildMonitor()
    report = CorpusReport()
    records: List[Dict[str, Any]] = []

    files = sorted(f for f in os.listdir(data_dir) if f.endswith(".json"))
    report.files = len(files)
    log.info("%d fichiers trouves dans %s", len(files), data_dir)

    for name in files:
        path = os.path.join(data_dir, name)
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
            if not isinstance(data, list):
                raise ValueError("le contenu n'est pas un tableau")
        except (OSError, UnicodeDecodeError, json.JSONDecodeError, ValueError) as e:
            report.skipped_files += 1
            monitor.record(SKIPPED_FILE, f"{name}: {e}")
            continue
        records.extend(data)

    report.records = len(records)
    log.info(
        "%d articles, %d fichiers traites, %d erreurs",
        report.records, report.processed_files, report.skipped_files,
    )
    return records, report


def parse_article(record: Any, tz: tzinfo, monitor: Optional[BuildMonitor] = None) -> Optional[Article]:
    """Raw record -> Article, or None when the record cannot be dated."""
    monitor = monitor or BuildMonitor()
    if not isinstance(record, dict):
        monitor.record(INVALID_RECORD, f"type {type(record).__name__}")
        return None

    raw_date = _coerce_string(record.get("date"))
    published_at = parse_date(raw_date, tz)
    if published_at is None:
        monitor.record(BAD_DATE, f"{record.get('screen_name', '?')}: {raw_date!r}")
        return None

    text = record.get("text")
    return Article(
        date=raw_date,
        published_at=published_at,
        screen_name=_coerce_string(record.get("screen_name")),
        text=text if isinstance(text, str) else _coerce_string(text),
        likes=_coerce_count(record.get("likes")),
        reposts=_coerce_count(record.get("reposts")),
        avatar_url=_coerce_string(record.get("avatar_url")),
        publication_id=_coerce_string(record.get("publication_id")),
    )


def clean_article(article: Article, url_cache: Optional[Mapping[str, Any]] = None,
                  limit: int = 197, monitor: Optional[BuildMonitor] = None) -> CleanedArticle:
    """Links come from the raw text, before truncation can cut them."""
    monitor = monitor or BuildMonitor()
    try:
        urls = tuple(extract_urls(article.text, url_cache))
    except Exception as e:
        monitor.record(CLEAN_FAILURE, f"urls {article.date}: {e}")
        urls = ()
    try:
        text = clean_for_display(article.text, limit)
    except Exception as e:
        monitor.record(CLEAN_FAILURE, f"texte {article.date}: {e}")
        text = ""

    return CleanedArticle(
        date=article.date,
        published_at=article.published_at,
        screen_name=article.screen_name,
        text=text,
        likes=article.likes,
        reposts=article.reposts,
        avatar_url=article.avatar_url,
        publication_id=article.publication_id,
        urls=urls,
    )


def build_corpus(records: List[Any], tz: tzinfo,
                 url_cache: Optional[Mapping[str, Any]] = None,
                 limit: int = 197,
                 monitor: Optional[BuildMonitor] = None) -> List[CleanedArticle]:
    """Parse, clean and sort (stable, by date) the pooled records."""
    monitor = monitor or BuildMonitor()
    cleaned: List[CleanedArticle] = []
    for record in records:
        article = parse_article(record, tz, monitor)
        if article is None:
            continue
        cleaned.append(clean_article(article, url_cache, limit, monitor))
    cleaned.sort(key=lambda a: a.published_at)
    return cleaned


def sort_raw_records(records: List[Any], tz: tzinfo,
                     monitor: Optional[BuildMonitor] = None) -> List[Dict[str, Any]]:
    """Raw records ordered by date; undatable records are dropped."""
    monitor = monitor or BuildMonitor()
    dated = []
    for record in records:
        if not isinstance(record, dict):
            monitor.record(INVALID_RECORD, f"type {type(record).__name__}")
            continue
        when = parse_date(record.get("date"), tz)
        if when is None:
            monitor.record(BAD_DATE, f"{record.get('screen_name', '?')}: {record.get('date')!r}")
            continue
        dated.append((when, record))
    dated.sort(key=lambda pair: pair[0])
    return [record for _, record in dated]
