"""Round definitions and round images, as served by the catalog backend."""

import logging
import os
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

import requests

from frontend.config import API_TIMEOUT_SECONDS, BACKEND_URL, IMAGE_TIMEOUT_SECONDS
from frontend.geo import Coordinate

logger = logging.getLogger(__name__)


class ImageSlot(Enum):
    MALE = "male"
    FEMALE = "female"


class ImageLoadError(Exception):
    """A round image could not be fetched or is not an image."""


@dataclass(frozen=True)
class RoundDefinition:
    name: str
    image_male: str
    image_female: str
    reference_location: Coordinate
    image_male_error: Optional[str] = None
    image_female_error: Optional[str] = None

    def image(self, which: ImageSlot) -> str:
        return self.image_male if which is ImageSlot.MALE else self.image_female

    def image_error(self, which: ImageSlot) -> Optional[str]:
        return self.image_male_error if which is ImageSlot.MALE else self.image_female_error

    @classmethod
    def from_api(cls, item: dict, backend_url: str = BACKEND_URL) -> "RoundDefinition":
        try:
            return cls(
                name=item["name"],
                image_male=get_image_url(item["image_male_url"], backend_url),
                image_female=get_image_url(item["image_female_url"], backend_url),
                reference_location=Coordinate(float(item["lat"]), float(item["lng"])),
                image_male_error=item.get("image_male_error"),
                image_female_error=item.get("image_female_error"),
            )
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            raise ValueError(f"Malformed round definition {item!r}: {e}") from e


def get_image_url(image_path: str, backend_url: str = BACKEND_URL) -> str:
    """Convert backend image path to a proper HTTP URL for serving.

    The backend returns either:
    - An absolute file path inside its image cache
    - An HTTP URL (starts with http), when the image could not be cached

    This function converts local paths to backend-served URLs.
    """
    if not image_path:
        return ""

    # Already an HTTP URL - return as-is
    if image_path.startswith("http"):
        return image_path

    filename = os.path.basename(image_path)
    return f"{backend_url}/cache/{filename}"


def fetch_rounds(backend_url: str = BACKEND_URL) -> Tuple[RoundDefinition, ...]:
    """Load the ordered round sequence from the catalog backend.

    Raises requests.RequestException when the backend is unreachable and
    ValueError when it returns no usable rounds.
    """
    resp = requests.get(f"{backend_url}/rounds", timeout=API_TIMEOUT_SECONDS)
    resp.raise_for_status()
    items = sorted(resp.json(), key=lambda item: item.get("round_number", 0))
    rounds = tuple(RoundDefinition.from_api(item, backend_url) for item in items)
    if not rounds:
        raise ValueError("Catalog backend returned no rounds")
    logger.info("Loaded %d rounds from %s", len(rounds), backend_url)
    return rounds


def fetch_image(url: str, timeout: float = IMAGE_TIMEOUT_SECONDS) -> bytes:
    if not url:
        raise ImageLoadError("No image URL")
    try:
        resp = requests.get(url, timeout=timeout)
        resp.raise_for_status()
    except requests.RequestException as e:
        raise ImageLoadError(f"Failed to fetch {url}: {e}") from e
    content_type = resp.headers.get("content-type", "")
    if not content_type.startswith("image"):
        raise ImageLoadError(f"{url} returned {content_type or 'no content type'}, not an image")
    return resp.content
