"""Bluesky web links derived from a post's AT URI (publication_id)."""

import logging
from typing import Optional

from atproto import AtUri

log = logging.getLogger("renderers.bluesky")

BSKY_WEB = "https://bsky.app"
POST_COLLECTION = "app.bsky.feed.post"


def _parse(publication_id: str) -> Optional[AtUri]:
    if not publication_id:
        return None
    try:
        uri = AtUri.from_str(publication_id)
    except Exception as e:
        log.debug("publication_id invalide %r: %s", publication_id, e)
        return None
    if not uri.host.startswith("did:"):
        return None
    return uri


def profile_url(publication_id: str) -> Optional[str]:
    uri = _parse(publication_id)
    return f"{BSKY_WEB}/profile/{uri.host}" if uri else None


def post_url(publication_id: str) -> Optional[str]:
    uri = _parse(publication_id)
    if not uri or uri.collection != POST_COLLECTION or not uri.rkey:
        return None
    return f"{BSKY_WEB}/profile/{uri.host}/post/{uri.rkey}"
