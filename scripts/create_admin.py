#!/usr/bin/env python3
"""Create the initial administrator and seed the known sites.

Safe to run repeatedly: an existing user is promoted rather than recreated,
and sites that already exist are left alone.

Usage:
    ADMIN_USERNAME=ops-admin ADMIN_PASSWORD=change-me-now \
        python scripts/create_admin.py
"""

import os
import sys

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from sqlalchemy.orm import Session  # noqa: E402

from pob_tracker.database import connection_manager, init_db  # noqa: E402
from pob_tracker.models import User  # noqa: E402
from pob_tracker.services.auth import create_user, get_user_by_username  # noqa: E402
from pob_tracker.services.site_service import SiteService  # noqa: E402

DEFAULT_USERNAME = "admin"


def create_admin(session: Session, username: str, password: str) -> tuple[User, bool]:
    """Ensure an admin account exists. Returns (user, created)."""
    existing = get_user_by_username(session, username)
    if existing:
        if not existing.is_admin:
            existing.is_admin = True
            session.commit()
        return existing, False

    user = create_user(
        session,
        username=username,
        password=password,
        first_name="System",
        last_name="Administrator",
        is_admin=True,
    )
    return user, True


def main() -> None:
    password = os.getenv("ADMIN_PASSWORD")
    if not password or len(password) < 8:
        print("ADMIN_PASSWORD must be set to at least 8 characters")
        sys.exit(1)
    username = os.getenv("ADMIN_USERNAME", DEFAULT_USERNAME)

    init_db()
    session = connection_manager.session()
    try:
        user, created = create_admin(session, username, password)
        if created:
            print(f"Created admin user: id={user.id}, username={user.username}")
        else:
            print(f"Admin user already exists: id={user.id}, username={user.username}")

        created_sites, existing_sites = SiteService(session).initialize()
        print(f"Sites: {created_sites} created, {existing_sites} already present")
    except Exception as e:
        session.rollback()
        print(f"Error creating admin: {e}")
        raise
    finally:
        session.close()


if __name__ == "__main__":
    main()
