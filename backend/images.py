import logging
import os
from typing import Optional

import requests

from backend.config import CACHE_DIR, IMAGE_TIMEOUT_SECONDS

logger = logging.getLogger(__name__)


def cache_key(group_id: int, slot: str) -> str:
    return f"group_{group_id}_{slot}"


def cache_image(url: str, key: str, cache_dir: str = CACHE_DIR) -> Optional[str]:
    """Download and cache a round image locally.

    Returns absolute file path if successful, None otherwise.
    Existing cache files are reused without downloading again.
    """
    os.makedirs(cache_dir, exist_ok=True)
    cache_file = os.path.join(cache_dir, f"{key}.jpg")

    if os.path.exists(cache_file):
        return cache_file

    try:
        resp = requests.get(url, timeout=IMAGE_TIMEOUT_SECONDS)
    except requests.RequestException as e:
        logger.warning("Error caching image %s from %s: %s", key, url, e)
        return None

    if resp.status_code == 200 and resp.headers.get("content-type", "").startswith("image"):
        with open(cache_file, "wb") as f:
            f.write(resp.content)
        logger.info("Cached: %s", key)
        return cache_file

    logger.warning("Failed to cache %s: HTTP %s", key, resp.status_code)
    return None


def list_cache_files(cache_dir: str = CACHE_DIR) -> list:
    if not os.path.isdir(cache_dir):
        return []
    return sorted(f for f in os.listdir(cache_dir) if os.path.isfile(os.path.join(cache_dir, f)))
