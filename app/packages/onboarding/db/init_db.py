"""Database bootstrapping utilities."""

from __future__ import annotations

from sqlalchemy.orm import Session

from app.packages.onboarding.core.config import get_settings
from app.packages.onboarding.core.enums import ManagerRoleEnum
from app.packages.onboarding.core.logger import logger
from app.packages.onboarding.core.security import get_password_hash
from app.packages.onboarding.crud.onboarding_manager import onboarding_manager_crud
from app.packages.onboarding.db import session as db_session
from app.packages.onboarding.models import Base


def init_db() -> None:
    """Create all database tables if they do not exist and seed the default administrator."""
    Base.metadata.create_all(bind=db_session.engine)

    session = db_session.SessionLocal()
    try:
        _seed_default_admin(session)
        session.commit()
    except Exception:
        session.rollback()
        logger.exception("Failed to seed default data during database initialization")
        raise
    finally:
        session.close()


def _seed_default_admin(db: Session) -> None:
    settings = get_settings()
    email = settings.default_admin_email.strip().lower()
    if onboarding_manager_crud.get_by_email(db, email) is not None:
        return
    onboarding_manager_crud.create(
        db,
        {
            "email": email,
            "name": settings.default_admin_name,
            "hashed_password": get_password_hash(settings.default_admin_password),
            "role": ManagerRoleEnum.ADMIN.value,
            "is_active": True,
        },
        auto_commit=False,
    )
    db.flush()
    logger.info("Seeded default onboarding manager %s", email)
