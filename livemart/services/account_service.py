"""Account provisioning helpers."""

from __future__ import annotations

import logging

from sqlalchemy import select
from sqlalchemy.orm import Session

from livemart.core.config import settings
from livemart.core.security import get_password_hash
from livemart.models import User
from livemart.services.user_service import create_user

logger = logging.getLogger(__name__)


def ensure_default_admin(db: Session) -> bool:
    """Ensure the configured admin account exists and is active.

    Returns:
        bool: True when the admin existed before this call. Nothing is created
        when ``ADMIN_PASSWORD`` is not set.
    """
    existing_admin = db.scalar(select(User).where(User.email == settings.admin_email).limit(1))
    if existing_admin is not None:
        if not existing_admin.is_active:
            existing_admin.is_active = True
            db.commit()
            logger.info("[BOOTSTRAP] Admin exists but was inactive; account re-activated.")
        if existing_admin.role != "ADMIN":
            logger.warning("[BOOTSTRAP] Account %s is not an admin (role=%s).", settings.admin_email, existing_admin.role)
        return True

    if not settings.admin_password:
        logger.info("[BOOTSTRAP] ADMIN_PASSWORD not set; skipping default admin creation.")
        return False

    create_user(
        db=db,
        email=settings.admin_email,
        hashed_password=get_password_hash(settings.admin_password),
        role="ADMIN",
        username="admin",
    )
    logger.warning("[SECURITY] Default admin account created for %s.", settings.admin_email)
    return False
