"""
Admin seeding script using SQLAlchemy and bcrypt.
Inserts the first ADMIN account so users can be managed from the API.

Usage:
    python seed_admin.py

Environment variables (optional):
    ADMIN_USERNAME: Username for admin account (default: admin)
    ADMIN_PASSWORD: Password for admin account (default: Tally2026!)
"""

import logging
import os
import sys

from core.database import SessionLocal, engine, Base
from models.user import User
from services.auth_service import AuthService

log = logging.getLogger(__name__)


def seed_admin() -> bool:
    """Seed an ADMIN account, resetting its password if it already exists."""
    admin_username = os.getenv("ADMIN_USERNAME", "admin")
    admin_password = os.getenv("ADMIN_PASSWORD", "Tally2026!")

    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        admin = db.query(User).filter(User.username == admin_username).first()  # type: ignore
        if admin:
            admin.hashed_password = AuthService.get_password_hash(admin_password)  # type: ignore
            admin.is_active = True  # type: ignore
            log.info("Admin %s already exists, password reset", admin_username)
        else:
            admin = User(
                username=admin_username,
                name="Administrator",
                hashed_password=AuthService.get_password_hash(admin_password),
                role="ADMIN",
                is_active=True,
                department="Văn phòng",
            )
            db.add(admin)
            log.info("Admin %s created", admin_username)
        db.commit()
        return True
    except Exception as e:
        db.rollback()
        log.error("Error seeding admin: %s", e, exc_info=True)
        return False
    finally:
        db.close()


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    sys.exit(0 if seed_admin() else 1)
