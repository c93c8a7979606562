import unicodedata
from typing import List

from presse.models import ThemeConfig


def normalize_for_match(text: str) -> str:
    """Lower-case and strip diacritics (NFD, combining marks removed)."""
    decomposed = unicodedata.normalize("NFD", (text or "").lower())
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


def classify(text: str, themes: ThemeConfig) -> List[str]:
    """Themes whose keywords appear in text; [fallback] when none match."""
    haystack = normalize_for_match(text)
    matches: List[str] = []
    for theme, keywords in themes.themes.items():
        if theme == themes.fallback:
            continue
        for kw in keywords:
            needle = normalize_for_match(kw)
            if needle and needle in haystack:
                matches.append(theme)
                break
    return matches or [themes.fallback]
