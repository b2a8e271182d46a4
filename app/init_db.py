import logging

from sqlalchemy.orm import Session

from app.config import settings
from app.crud import crud_category
from app.database import Base, SessionLocal, engine
import app.models  # registers every model on Base.metadata

logger = logging.getLogger(__name__)


def seed_initial_categories(db: Session) -> int:
    """Create the initial categories when the catalog is empty; returns how many were added."""
    if crud_category.get_all_ordered(db):
        logger.info("Existing categories found, skipping initial category creation")
        return 0
    for name in settings.INITIAL_CATEGORIES:
        crud_category.create_category(db, name=name)
    logger.info(f"Initial categories created: {settings.INITIAL_CATEGORIES}")
    return len(settings.INITIAL_CATEGORIES)


def main():
    logging.basicConfig(level=settings.LOG_LEVEL)
    Base.metadata.create_all(bind=engine)
    print("✅ Tables created successfully")
    db = SessionLocal()
    try:
        seed_initial_categories(db)
    finally:
        db.close()

if __name__ == "__main__":
    main()
