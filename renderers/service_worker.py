import json
from typing import List

from presse.storage import shard_filename

CACHE_PREFIX = "revue-presse-"


def static_assets(months: List[str]) -> List[str]:
    """Files the service worker precaches: shell, combined data, month shards."""
    assets = ["./", "./index.html", "./manifest.json", "./data.json"]
    assets.extend(f"./{shard_filename(m)}" for m in months)
    return assets


def render_service_worker(template: str, build_hash: str, months: List[str]) -> str:
    sw = template.replace("{{BUILD_HASH}}", build_hash)
    return sw.replace("{{STATIC_ASSETS}}", json.dumps(static_assets(months), indent=2))


def cache_name(build_hash: str) -> str:
    return f"{CACHE_PREFIX}{build_hash}"
