"""Mojibake repair: ordered substring replacements.

Two corruption families show up in the corpus:

* UTF-8 bytes decoded as Latin-1/cp1252 (``Ã©`` for ``é``);
* the same text pushed once more through Mac Roman (``√É¬©`` for ``é``,
  or ``√©`` when only the Mac Roman step happened).

Rules run in list order. A rule whose pattern is a prefix of another must
come after it, so longer sequences go first.
"""

from typing import List, Tuple

Rule = Tuple[str, str]

# UTF-8 read as Latin-1 (or cp1252), then re-encoded.
LATIN1_RULES: List[Rule] = [
    ("Ã©", "é"),
    ("Ã¨", "è"),
    ("Ã\u00a0", "à"),  # 0xA0 survives as nbsp
    ("Ã ", "à"),  # ... or was already flattened to a space
    ("Ã´", "ô"),
    ("Ã®", "î"),
    ("Ã¢", "â"),
    ("cÃ§", "ç"),  # "franc" + mojibake: "cç" never occurs in French
    ("Ã§", "ç"),
    ("Ã¹", "ù"),
    ("Ãª", "ê"),
    ("Ã«", "ë"),
    ("Ã¯", "ï"),
    ("Ã»", "û"),
    ("Ã¼", "ü"),
    ("Ã‰", "É"),
    ("Å“", "œ"),  # cp1252 0x93
    ('Å"', "œ"),  # same, after quote straightening
    ("â€™", "’"),
    ("â€“", "–"),  # cp1252 0x96
    ('â€"', "–"),
    ("â€œ", "“"),
    ("â€¦", "…"),
    # bare prefix of every rule above: must stay last of the â€ family
    ("â€", "”"),
    ("Â\u00a0", " "),
    ("Â ", " "),
]

# Characters whose UTF-8 bytes, read as Mac Roman, leave a recognisable trail.
_MAC_ROMAN_TARGETS = "éèàôîâçùêëïûüÉœ’–“”…«»"


def _as_mac_roman(text: str) -> str:
    return text.encode("utf-8").decode("mac_roman")


def _build_rules() -> List[Rule]:
    rules: List[Rule] = []
    # Latin-1 mojibake seen through Mac Roman: the longest sequences.
    for pattern, target in LATIN1_RULES:
        rules.append((_as_mac_roman(pattern), target))
    # Single Mac Roman step.
    rules.append(("c" + _as_mac_roman("ç"), "ç"))
    for ch in _MAC_ROMAN_TARGETS:
        rules.append((_as_mac_roman(ch), ch))
    rules.append((_as_mac_roman("\u00a0"), " "))
    rules.extend(LATIN1_RULES)
    return rules


REPAIR_RULES: List[Rule] = _build_rules()


def repair_encoding(text: str) -> str:
    """Best-effort mojibake repair. Unknown sequences are left untouched."""
    if not text:
        return text or ""
    for pattern, replacement in REPAIR_RULES:
        if pattern in text:
            text = text.replace(pattern, replacement)
    return text
