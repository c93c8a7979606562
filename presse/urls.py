"""Link extraction from raw article text, cache unfurling, tracking cleanup."""

import re
import logging
from typing import Any, List, Mapping, Optional
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

log = logging.getLogger("presse.urls")

URL_PATTERN = re.compile(r"https?://[^\s<>\"'\\]+")

# "source", "ref" and "Echobox" are dropped on every site, even where they
# might carry meaning.
TRACKING_PARAMS = (
    "utm_source", "utm_medium", "utm_campaign", "utm_content", "utm_term",
    "fbclid", "gclid",
    "at_platform", "at_campaign", "at_medium", "at_format", "at_account",
    "xtor", "ref", "source", "Echobox",
    "Reseaux sociaux ", "Reseaux+sociaux+",
)
_TRACKING_KEYS = frozenset(TRACKING_PARAMS)

TRAILING_ARTIFACTS = [
    re.compile(p) for p in (
        "[\"'“”‘’]+$",
        "…+$",
        r"\.{3,}$",
        "%22$",
        "%27$",
        "%E2%80%A6$",
        r"[.,;:!?)>\]]+$",
        r"\\n.*$",
        r"\\+$",
    )
]


def strip_trailing_artifacts(url: str) -> str:
    """Drop quotes, ellipses, punctuation and escaped newlines glued to a URL."""
    while True:
        cleaned = url
        for pattern in TRAILING_ARTIFACTS:
            cleaned = pattern.sub("", cleaned)
        if cleaned == url:
            return cleaned
        url = cleaned


def _strip_params(qs: str) -> str:
    pairs = parse_qsl(qs, keep_blank_values=True)
    kept = [(k, v) for k, v in pairs if k not in _TRACKING_KEYS]
    if len(kept) == len(pairs):
        return qs
    return urlencode(kept)


def strip_tracking_params(url: str) -> str:
    """Remove tracking parameters from the query and, if polluted, the fragment."""
    try:
        # ?=%3Fxtor=... style query strings
        candidate = url.replace("?=%3F", "?").replace("%3D", "=").replace("%26", "&")
        u = urlsplit(candidate)
        if u.scheme not in ("http", "https") or not u.netloc:
            return url
        query = _strip_params(u.query) if u.query else ""
        fragment = u.fragment
        if fragment and any(p in fragment for p in TRACKING_PARAMS):
            fragment = _strip_params(fragment)
        # empty query/fragment: urlunsplit drops the trailing ? / #
        return urlunsplit((u.scheme, u.netloc, u.path, query, fragment))
    except ValueError as e:
        log.debug("URL invalide %r: %s", url, e)
        return url


def _cached_target(entry: Any) -> Optional[str]:
    if entry is None:
        return None
    if isinstance(entry, Mapping):
        resolved, status = entry.get("resolved"), entry.get("status")
    else:
        resolved, status = getattr(entry, "resolved", None), getattr(entry, "status", None)
    if resolved and "%22" not in resolved and status == 200:
        return str(resolved)
    return None


def resolve_url(url: str, cache: Optional[Mapping[str, Any]] = None) -> str:
    """Unfurl through the cache when the entry is usable; always strip tracking."""
    cleaned = strip_trailing_artifacts(url)
    target = _cached_target((cache or {}).get(cleaned))
    return strip_tracking_params(target or cleaned)


def extract_urls(raw_text: str, cache: Optional[Mapping[str, Any]] = None) -> List[str]:
    """Canonical URLs found in raw text, deduplicated, in first-seen order."""
    if not raw_text:
        return []
    resolved = (resolve_url(m, cache) for m in URL_PATTERN.findall(raw_text))
    return list(dict.fromkeys(u for u in resolved if u))
