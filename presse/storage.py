import os
import json
import logging
from dataclasses import dataclass
from typing import Any, Dict, List

from presse.models import CleanedArticle

log = logging.getLogger("presse.storage")


@dataclass(frozen=True)
class ShardInfo:
    month: str
    filename: str
    size: int
    count: int


def dumps_minified(data: Any) -> str:
    return json.dumps(data, ensure_ascii=False, separators=(",", ":"))


def _atomic_write_text(path: str, text: str) -> None:
    tmp = f"{path}.tmp"
    with open(tmp, "w", encoding="utf-8") as f:
        f.write(text)
    os.replace(tmp, path)


def write_text(path: str, text: str) -> int:
    """Atomic write; returns the size in bytes."""
    _atomic_write_text(path, text)
    return os.path.getsize(path)


def write_json(path: str, data: Any, minify: bool = True) -> int:
    if minify:
        payload = dumps_minified(data)
    else:
        payload = json.dumps(data, ensure_ascii=False, indent=2)
    return write_text(path, payload)


def shard_by_month(articles: List[CleanedArticle]) -> Dict[str, List[CleanedArticle]]:
    """``YYYY-MM`` -> articles, months in ascending order, article order kept."""
    by_month: Dict[str, List[CleanedArticle]] = {}
    for article in articles:
        by_month.setdefault(article.month, []).append(article)
    return {m: by_month[m] for m in sorted(by_month)}


def shard_filename(month: str) -> str:
    return f"data-{month}.json"


def write_month_shards(out_dir: str, shards: Dict[str, List[CleanedArticle]]) -> List[ShardInfo]:
    written: List[ShardInfo] = []
    for month, articles in shards.items():
        filename = shard_filename(month)
        size = write_json(os.path.join(out_dir, filename), [a.to_dict() for a in articles])
        written.append(ShardInfo(month=month, filename=filename, size=size, count=len(articles)))
        log.info("   %s: %.1f KB (%d articles)", filename, size / 1024, len(articles))
    return written


def write_combined(out_dir: str, articles: List[CleanedArticle], filename: str = "data.json") -> int:
    size = write_json(os.path.join(out_dir, filename), [a.to_dict() for a in articles])
    log.info("   %s: %.1f KB", filename, size / 1024)
    return size


def log_size_reduction(raw_records: List[Any], articles: List[CleanedArticle]) -> float:
    """Log and return the size reduction (percent) of the optimized dataset."""
    original = len(dumps_minified(raw_records))
    optimized = len(dumps_minified([a.to_dict() for a in articles]))
    reduction = (1 - optimized / original) * 100 if original else 0.0
    log.info("   Original: %.1f KB", original / 1024)
    log.info("   Optimized: %.1f KB", optimized / 1024)
    log.info("   Reduction: %.1f%%", reduction)
    return reduction
