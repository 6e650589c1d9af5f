import logging

from sqlalchemy import Column, Float, Integer, String, create_engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from backend.catalog import ETHNIC_GROUPS
from backend.config import DATABASE_URL

logger = logging.getLogger(__name__)

# --------------------
# Database setup
# --------------------
if DATABASE_URL.startswith("sqlite"):
    # A single shared connection keeps an in-memory database alive across sessions
    engine = create_engine(DATABASE_URL, connect_args={"check_same_thread": False}, poolclass=StaticPool)
else:
    engine = create_engine(DATABASE_URL)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base = declarative_base()


class EthnicGroup(Base):
    __tablename__ = "ethnic_groups"
    id = Column(Integer, primary_key=True, index=True)
    position = Column(Integer, unique=True, nullable=False)  # 1-based round number
    name = Column(String, nullable=False)
    lat = Column(Float, nullable=False)
    lng = Column(Float, nullable=False)
    image_male_source = Column(String, nullable=False)
    image_female_source = Column(String, nullable=False)
    image_male_path = Column(String, nullable=True)  # cached file, once downloaded
    image_female_path = Column(String, nullable=True)
    image_male_error = Column(String, nullable=True)  # last failed download, if any
    image_female_error = Column(String, nullable=True)


Base.metadata.create_all(bind=engine)


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def seed_groups_if_needed(db: Session) -> int:
    """Populate the ethnic_groups table from the catalog.

    Images are cached in the background after rounds are first requested.
    Returns the number of rows inserted.
    """
    count = db.query(EthnicGroup).count()
    if count > 0:
        logger.info("Ethnic groups already populated with %d records; skipping seed", count)
        return 0

    for position, (name, image_male, image_female, lat, lng) in enumerate(ETHNIC_GROUPS, 1):
        db.add(
            EthnicGroup(
                position=position,
                name=name,
                lat=lat,
                lng=lng,
                image_male_source=image_male,
                image_female_source=image_female,
            )
        )
    db.commit()
    logger.info("Seeded %d ethnic groups", len(ETHNIC_GROUPS))
    return len(ETHNIC_GROUPS)
