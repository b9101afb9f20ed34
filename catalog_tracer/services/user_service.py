"""Staff account lookups."""

from sqlalchemy.orm import Session

from catalog_tracer.models.actor import User


def get_user_by_id(db: Session, user_id: str) -> User | None:
    return db.get(User, user_id)
