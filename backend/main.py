import logging
import os
from typing import List, Optional

from fastapi import BackgroundTasks, Depends, FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from pydantic import BaseModel
from sqlalchemy.orm import Session

from backend.config import CACHE_DIR, LOG_FORMAT, LOG_LEVEL
from backend.database import EthnicGroup, SessionLocal, get_db, seed_groups_if_needed
from backend.images import cache_image, cache_key, list_cache_files

logging.basicConfig(level=LOG_LEVEL, format=LOG_FORMAT)
logger = logging.getLogger("ethnoguessr.backend")

os.makedirs(CACHE_DIR, exist_ok=True)


# --------------------
# Pydantic schemas
# --------------------


class RoundResponse(BaseModel):
    round_number: int
    name: str
    lat: float
    lng: float
    image_male_url: str
    image_female_url: str
    image_male_error: Optional[str] = None
    image_female_error: Optional[str] = None


app = FastAPI(title="EthnoGuessr Catalog API")
app.mount("/cache", StaticFiles(directory=CACHE_DIR), name="cache")


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})


IMAGE_SLOTS = ("male", "female")
DOWNLOAD_ERROR = "Failed to download image"


def resolve_image(group: EthnicGroup, slot: str):
    """Return (image_url, image_error) for one image slot without downloading.

    image_url is the cached file path when available, otherwise the source URL
    together with the error left by the last failed download, if any.
    """
    cached_path = getattr(group, f"image_{slot}_path")
    if cached_path and os.path.exists(cached_path):
        return cached_path, None
    return getattr(group, f"image_{slot}_source"), getattr(group, f"image_{slot}_error")


def uncached_slots(group: EthnicGroup) -> List[str]:
    # Failed slots stay uncached and are retried on the next request
    slots = []
    for slot in IMAGE_SLOTS:
        cached_path = getattr(group, f"image_{slot}_path")
        if not (cached_path and os.path.exists(cached_path)):
            slots.append(slot)
    return slots


def cache_group_images(group_id: int, slots: List[str]):
    """Background task: download and cache the given image slots of one group."""
    db = SessionLocal()
    try:
        group = db.get(EthnicGroup, group_id)
        if group is None:
            return
        for slot in slots:
            logger.info("Downloading %s image for %s...", slot, group.name)
            cached_path = cache_image(getattr(group, f"image_{slot}_source"), cache_key(group.id, slot))
            setattr(group, f"image_{slot}_path", cached_path)
            setattr(group, f"image_{slot}_error", None if cached_path else DOWNLOAD_ERROR)
        db.commit()
    finally:
        db.close()


def to_round_response(group: EthnicGroup, background_tasks: BackgroundTasks) -> RoundResponse:
    slots = uncached_slots(group)
    if slots:
        background_tasks.add_task(cache_group_images, group.id, slots)

    male_url, male_error = resolve_image(group, "male")
    female_url, female_error = resolve_image(group, "female")
    return RoundResponse(
        round_number=group.position,
        name=group.name,
        lat=group.lat,
        lng=group.lng,
        image_male_url=male_url,
        image_female_url=female_url,
        image_male_error=male_error,
        image_female_error=female_error,
    )


@app.get("/rounds", response_model=List[RoundResponse])
def list_rounds(background_tasks: BackgroundTasks, db: Session = Depends(get_db)):
    # Rounds in play order; uncached images are downloaded after the response is sent
    groups = db.query(EthnicGroup).order_by(EthnicGroup.position).all()
    return [to_round_response(g, background_tasks) for g in groups]


@app.get("/rounds/{round_number}", response_model=RoundResponse)
def get_round(round_number: int, background_tasks: BackgroundTasks, db: Session = Depends(get_db)):
    group = db.query(EthnicGroup).filter(EthnicGroup.position == round_number).first()
    if not group:
        raise HTTPException(status_code=404, detail=f"Round {round_number} not found")
    return to_round_response(group, background_tasks)


@app.get("/debug")
def debug_info():
    # Return the image cache contents
    return {"cache_files": list_cache_files(CACHE_DIR)}


def seed_on_startup():
    db = SessionLocal()
    try:
        seed_groups_if_needed(db)
    finally:
        db.close()


# Seed on import so the catalog is ready before the first request
seed_on_startup()


if __name__ == "__main__":
    print("Run this app with: uvicorn backend.main:app --reload --host 0.0.0.0 --port 8000")
