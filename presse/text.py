"""Text pipeline: encoding repair, escapes, cleanup, French typography.

Each phase is an ordered list of (pattern, replacement) rules applied in
sequence. Order is significant inside a phase and between phases.
"""

import re
from typing import List, Pattern, Tuple

from presse.encoding import repair_encoding

NBSP = "\u00a0"
ELLIPSIS = "\u2026"

RegexRule = Tuple[Pattern[str], str]


def _rules(*pairs: Tuple[str, str]) -> List[RegexRule]:
    return [(re.compile(p), r) for p, r in pairs]


def _apply(rules: List[RegexRule], text: str) -> str:
    for pattern, replacement in rules:
        text = pattern.sub(replacement, text)
    return text


# Serialized strings: escapes first, then the wrapper quotes they may expose.
ESCAPE_RULES = _rules(
    (r"\\n", " "),
    (r"\\'", "'"),
    (r'\\"', '"'),
    (r"\\\\", ""),  # doubled backslashes carry nothing in this corpus
)
_WRAPPER_QUOTES = re.compile(r'^"(.*)"$', re.DOTALL)
_WHITESPACE = re.compile(r"\s+")

CLEANUP_RULES = _rules(
    # invisible characters
    ("[\u200b\u200c\u200d\ufeff]", ""),
    # nbsp comes back with the French spacing pass
    (NBSP, " "),
    # straighten quotes so apostrophes are normalised once, below
    ("[\u2018\u2019]", "'"),
    ("[\u201c\u201d]", '"'),
    (r"«\s*", "« "),
    (r"\s*»", " »"),
    ("[\u2013\u2014]", " \u2013 "),
    ("--", " – "),
    # percent-encoded leftovers from pasted links
    ("%22", '"'),
    ("%27", "'"),
    ("%5C", ""),
    ("%20", " "),
    # JSON escapes that survived serialization
    (r"\\xa0", " "),
    (r"\\u00a0", " "),
    (r"\\u[0-9a-fA-F]{4}", ""),
    ('"{2,}', '"'),
    ('^"+', ""),
    ('"+$', ""),
)

TYPOGRAPHY_RULES = _rules(
    (r"\.{3,}", ELLIPSIS),
    ("'", "’"),
    (r"\s-\s", " – "),
    (r"«\s*", "« "),
    (r"\s*»", " »"),
)

FRENCH_SPACING_RULES = _rules(
    ('"', ""),
    (" {2,}", " "),
    (" :", NBSP + ":"),
    (" ;", NBSP + ";"),
    (" !", NBSP + "!"),
    (r" \?", NBSP + "?"),
    (" »", NBSP + "»"),
    ("« ", "«" + NBSP),
    # glued double punctuation gets its space too
    (r"([^\s]):", "\\1" + NBSP + ":"),
    (r"([^\s]);", "\\1" + NBSP + ";"),
    # URL schemes keep their colon
    ("http" + NBSP + ":", "http:"),
    ("https" + NBSP + ":", "https:"),
    (r"\.\.\.", ELLIPSIS),
)

# A fixed point is normally reached after one pass; the extra passes catch
# sequences that only appear once a neighbour was removed.
MAX_CLEAN_PASSES = 3


def unescape(text: str) -> str:
    if not text:
        return ""
    text = _apply(ESCAPE_RULES, text)
    text = _WRAPPER_QUOTES.sub(r"\1", text)
    return _WHITESPACE.sub(" ", text).strip()


def cleanup(text: str) -> str:
    """Strip invisible characters, stray escapes and quote debris."""
    if not text:
        return ""
    text = _apply(CLEANUP_RULES, text)
    return _WHITESPACE.sub(" ", text).strip()


def normalize_typography(text: str) -> str:
    if not text:
        return text or ""
    return _apply(TYPOGRAPHY_RULES, text)


def apply_french_spacing(text: str) -> str:
    """Non-breaking spaces before : ; ! ? » and after «, outside URL schemes."""
    if not text:
        return text or ""
    return _apply(FRENCH_SPACING_RULES, text).strip(" ")


def _clean_once(text: str) -> str:
    text = repair_encoding(text)
    text = unescape(text)
    text = cleanup(text)
    text = normalize_typography(text)
    return apply_french_spacing(text)


def clean_text(raw: str) -> str:
    """Full cleaning pipeline, without truncation."""
    if not raw:
        return ""
    text = raw
    for _ in range(MAX_CLEAN_PASSES):
        cleaned = _clean_once(text)
        if cleaned == text:
            break
        text = cleaned
    return text


def is_truncated(text: str) -> bool:
    """True when text stops mid-sentence (no terminal punctuation, no ellipsis)."""
    if not text:
        return False
    if text.endswith("...") or text.endswith(ELLIPSIS):
        return False
    return re.search(r'[.!?»"]$', text) is None


def add_ellipsis_if_truncated(text: str) -> str:
    if not text:
        return text or ""
    text = text.strip()
    if is_truncated(text):
        return text + ELLIPSIS
    return text


def truncate_text(text: str, limit: int = 197) -> str:
    """Cut to ``limit`` chars; ellipsis if cut or if the text looks incomplete."""
    text = (text or "").strip()
    if len(text) > limit:
        return text[:limit].strip() + ELLIPSIS
    return add_ellipsis_if_truncated(text)


def clean_for_display(raw: str, limit: int = 197) -> str:
    """Clean first, then truncate: mojibake is never split mid-sequence."""
    return truncate_text(clean_text(raw), limit)
