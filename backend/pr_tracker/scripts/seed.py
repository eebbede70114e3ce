"""
Create tables and make sure an active admin exists.

    python -m pr_tracker.scripts.seed                 # admin from SEED_ADMIN_* env
    python -m pr_tracker.scripts.seed --activate x@y.z
"""
import argparse
import logging
import os
from contextlib import contextmanager

from pr_tracker.core.db import SessionLocal, init_db
from pr_tracker.core.errors import DuplicateEmail
from pr_tracker.services import auth_service

logger = logging.getLogger(__name__)

# ---------- small helpers ----------

@contextmanager
def session_scope(factory=SessionLocal):
    """One-shot session (rollback on error)."""
    db = factory()
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()

# ---------- seed data ----------

def seed_admin(db, *, name: str, email: str, password: str, role: str = "superadmin"):
    """Register (if missing) and activate. Safe to run repeatedly."""
    try:
        auth_service.register(db, name=name, email=email, password=password, role=role)
        created = True
    except DuplicateEmail:
        created = False
    user = auth_service.activate_user(db, email)
    return user, created


def main(argv=None) -> None:
    parser = argparse.ArgumentParser(description="Seed the purchase request tracker database.")
    parser.add_argument("--activate", metavar="EMAIL", help="activate an existing account and exit")
    args = parser.parse_args(argv)

    logging.basicConfig(level=os.getenv("LOG_LEVEL", "INFO").upper())
    init_db()

    with session_scope() as db:
        if args.activate:
            user = auth_service.activate_user(db, args.activate)
            print(f"activated: {user.email}")
            return

        email = os.getenv("SEED_ADMIN_EMAIL")
        password = os.getenv("SEED_ADMIN_PASSWORD")
        if not email or not password:
            raise SystemExit("SEED_ADMIN_EMAIL and SEED_ADMIN_PASSWORD must be set.")
        user, created = seed_admin(
            db,
            name=os.getenv("SEED_ADMIN_NAME", "Administrator"),
            email=email,
            password=password,
        )
        print(f"{'created' if created else 'exists'}: {user.email} (role={user.role}, active={user.isActive})")


if __name__ == "__main__":
    main()
