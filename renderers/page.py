"""Assemble index.html from the visualisation template and rendered fragments."""

import hashlib
import logging
from typing import List, Tuple

log = logging.getLogger("renderers.page")

SEMAINIER_PLACEHOLDER = '<div id="semainierPlaceholder"></div>'
MONTHS_PLACEHOLDER = "{{MONTHS}}"
BUILD_HASH_PLACEHOLDER = "{{BUILD_HASH}}"
TITLE_ANCHOR = "<title>Revue de Presse"

META_TAGS = """
    <meta name="description" content="Visualisation animee des tendances mediatiques francaises en 2025 - Revue de Presse">
    <meta property="og:title" content="Revue de Presse 2025">
    <meta property="og:description" content="Articles de la presse francaise parmi les plus relayes sur Bluesky">
    <meta property="og:type" content="website">
    <meta name="twitter:card" content="summary_large_image">
"""


def month_manifest(months: List[str]) -> str:
    """``"2025-03","2025-04"`` - spliced into the lazy loader's MONTHS array."""
    return ",".join(f'"{m}"' for m in months)


def compute_build_hash(html: str) -> str:
    """Content-derived, so identical inputs give identical hashes."""
    return hashlib.md5(html.encode("utf-8")).hexdigest()[:8]


def assemble_page(template_html: str, zen_html: str, noscript_html: str,
                  months: List[str]) -> Tuple[str, str]:
    """Returns (html, build_hash)."""
    html = template_html
    if SEMAINIER_PLACEHOLDER in html:
        html = html.replace(SEMAINIER_PLACEHOLDER, zen_html, 1)
    else:
        log.warning("Placeholder du semainier absent du template.")

    if "</body>" in html:
        html = html.replace("</body>", f"{noscript_html}</body>", 1)
    else:
        log.warning("Balise </body> absente: pas de fallback noscript.")

    if MONTHS_PLACEHOLDER in html:
        html = html.replace(MONTHS_PLACEHOLDER, month_manifest(months))
    else:
        log.warning("Placeholder %s absent du template: liste des mois non injectee.", MONTHS_PLACEHOLDER)
    html = html.replace(TITLE_ANCHOR, f"{META_TAGS}    {TITLE_ANCHOR}", 1)

    build_hash = compute_build_hash(html)
    html = html.replace(BUILD_HASH_PLACEHOLDER, build_hash)
    return html, build_hash
