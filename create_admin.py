#!/usr/bin/env python3
"""Create the single admin account from ADMIN_USERNAME / ADMIN_PASSWORD"""

import sys
import os
sys.path.append(os.path.dirname(os.path.abspath(__file__)))

from sqlalchemy.orm import Session

from mams import crud
from mams.core.config import settings
from mams.db.database import SessionLocal, transaction
from mams.models.user import User, UserRole


def create_admin(db: Session, username: str, password: str) -> bool:
    """Returns False when an admin already exists."""
    with transaction(db):
        existing_admin = db.query(User).filter(User.role == UserRole.ADMIN).first()
        if existing_admin:
            return False

        crud.user.create(
            db,
            obj_in={
                "username": username,
                "password": password,
                "role": UserRole.ADMIN,
                "base_id": None,
            },
        )
    return True


if __name__ == "__main__":
    if not settings.ADMIN_PASSWORD:
        print("ADMIN_PASSWORD is not set")
        sys.exit(1)

    db = SessionLocal()
    try:
        if create_admin(db, settings.ADMIN_USERNAME, settings.ADMIN_PASSWORD):
            print(f"Admin created: {settings.ADMIN_USERNAME}")
        else:
            print("Admin already exists")
    finally:
        db.close()
