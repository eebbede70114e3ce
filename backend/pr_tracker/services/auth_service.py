# backend/pr_tracker/services/auth_service.py
from __future__ import annotations
from typing import Optional, Tuple
import logging
import re

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from pr_tracker.core.errors import (
    InvalidInput, DuplicateEmail, InvalidCredentials, AccountInactive, NotFound, StorageUnavailable,
)
from pr_tracker.core.security import hash_password, verify_password, create_access_token
from pr_tracker.domain.constants import USER_ROLES, USER_ROLE_DEFAULT
from pr_tracker.models import AppUser

logger = logging.getLogger(__name__)

EMAIL_RE = re.compile(r"^\S+@\S+\.\S+$")
MIN_PASSWORD_LENGTH = 6


def normalize_email(email: Optional[str]) -> str:
    return (email or "").strip().lower()


def validate_registration(name, email, password, role) -> Tuple[str, str, str, str]:
    """Returns the cleaned (name, email, password, role) or raises InvalidInput."""
    name = (name or "").strip() if isinstance(name, str) else ""
    email = normalize_email(email) if isinstance(email, str) else ""
    if not name or not email or not password:
        raise InvalidInput("Name, email, and password are required.")
    if not EMAIL_RE.match(email):
        raise InvalidInput("Invalid email address.")
    if not isinstance(password, str) or len(password) < MIN_PASSWORD_LENGTH:
        raise InvalidInput(f"Password must be at least {MIN_PASSWORD_LENGTH} characters.")

    role = (role or USER_ROLE_DEFAULT).strip().lower()
    if role not in USER_ROLES:
        raise InvalidInput(f"Invalid role '{role}'. Allowed roles: {list(USER_ROLES)}")
    return name, email, password, role


def get_user_by_email(db: Session, email: str) -> Optional[AppUser]:
    try:
        return db.query(AppUser).filter(AppUser.email == normalize_email(email)).first()
    except SQLAlchemyError as e:
        logger.exception("user lookup failed")
        raise StorageUnavailable(f"Error reading users: {type(e).__name__}")


def register(db: Session, *, name, email, password, role=None) -> AppUser:
    """New accounts start inactive; an admin has to activate them."""
    name, email, password, role = validate_registration(name, email, password, role)

    if get_user_by_email(db, email):
        raise DuplicateEmail()

    user = AppUser(
        name=name,
        email=email,
        passwordHash=hash_password(password),
        role=role,
        isActive=False,
    )
    try:
        db.add(user)
        db.commit()
        db.refresh(user)
    except IntegrityError:
        # lost a race against another registration with the same email
        db.rollback()
        raise DuplicateEmail()
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception("register error (email=%s)", email)
        raise StorageUnavailable(f"Error registering user: {type(e).__name__}")

    logger.info("user registered: %s (role=%s, inactive)", user.email, user.role)
    return user


def login(db: Session, *, email, password) -> Tuple[str, AppUser]:
    user = get_user_by_email(db, email) if isinstance(email, str) else None
    if not user:
        raise InvalidCredentials()

    # inactive wins over a wrong password
    if not user.isActive:
        raise AccountInactive()

    if not isinstance(password, str) or not verify_password(password, user.passwordHash):
        raise InvalidCredentials()

    token = create_access_token(user_id=user.id, email=user.email, role=user.role)
    return token, user


def get_user(db: Session, user_id: str) -> AppUser:
    try:
        user = db.get(AppUser, user_id)
    except SQLAlchemyError as e:
        logger.exception("get_user error (id=%s)", user_id)
        raise StorageUnavailable(f"Error reading users: {type(e).__name__}")
    if not user:
        raise NotFound("User not found.")
    return user


def activate_user(db: Session, email: str) -> AppUser:
    """Out-of-band admin action (see scripts/seed.py)."""
    user = get_user_by_email(db, email)
    if not user:
        raise NotFound("User not found.")
    if not user.isActive:
        user.isActive = True
        try:
            db.commit()
            db.refresh(user)
        except SQLAlchemyError as e:
            db.rollback()
            logger.exception("activate_user error (email=%s)", email)
            raise StorageUnavailable(f"Error activating user: {type(e).__name__}")
        logger.info("user activated: %s", user.email)
    return user
