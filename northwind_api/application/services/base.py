from datetime import datetime, timezone

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from northwind_api.core.logging_config import get_logger

logger = get_logger(__name__)


def utc_now() -> datetime:
    """Naive UTC, the way timestamps are stored."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class BaseService:
    default_page_size = 10

    def __init__(self, db: Session):
        self.db = db

    def _commit(self) -> None:
        """Commit the unit of work; on failure nothing from it is left behind."""
        try:
            self.db.commit()
        except SQLAlchemyError:
            logger.error("Commit failed, rolling back", exc_info=True)
            self.db.rollback()
            raise


def as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)
