#!/usr/bin/env python3
# scripts/create_admin_user.py
"""
Ensure a login-ready ADMIN account exists.
Safe to run many times (idempotent): an existing account is left alone unless
--reset-password is given.

Examples:
  python -m scripts.create_admin_user --username admin --password "Admin@12345"

  # credentials from env (ADMIN_USERNAME / ADMIN_PASSWORD)
  python -m scripts.create_admin_user
"""

from __future__ import annotations

import argparse
import logging
import os

from sqlalchemy.orm import Session

from app.core.database import SessionLocal
from app.core.logging_config import configure_logging
from app.core.security import get_password_hash
from app.models.user import RoleName, User

logger = logging.getLogger("scripts.create_admin_user")


def ensure_admin_user(
    db: Session,
    *,
    username: str,
    password: str,
    name: str = "Administrator",
    email: str | None = None,
    reset_password: bool = False,
) -> User:
    existing = db.query(User).filter(User.username == username).first()

    if existing:
        existing.role = RoleName.ADMIN.value
        existing.is_active = True
        if reset_password:
            existing.hashed_password = get_password_hash(password)
        db.commit()
        logger.info("Admin user %s already exists (password %s)", username, "reset" if reset_password else "kept")
        return existing

    user = User(
        username=username,
        hashed_password=get_password_hash(password),
        role=RoleName.ADMIN.value,
        name=name,
        email=email,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info("Admin user %s created", username)
    return user


def parse_args() -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Create the HMS admin account")
    p.add_argument("--username", type=str, help="Admin username (or use env ADMIN_USERNAME)")
    p.add_argument("--password", type=str, help="Admin password (or use env ADMIN_PASSWORD)")
    p.add_argument("--name", type=str, default="Administrator")
    p.add_argument("--email", type=str, default=None)
    p.add_argument("--reset-password", action="store_true", help="Rotate the password of an existing admin")
    return p.parse_args()


def main() -> None:
    configure_logging()
    args = parse_args()

    # CLI args take precedence, then env
    username = args.username or os.getenv("ADMIN_USERNAME", "admin")
    password = args.password or os.getenv("ADMIN_PASSWORD")
    if not password:
        raise SystemExit("Admin password missing. Provide --password or set env ADMIN_PASSWORD.")
    if len(password) < 6:
        raise SystemExit("Admin password must be at least 6 characters.")

    db: Session = SessionLocal()
    try:
        ensure_admin_user(
            db,
            username=username,
            password=password,
            name=args.name,
            email=args.email,
            reset_password=args.reset_password,
        )
    except Exception:
        db.rollback()
        logger.exception("Admin user setup failed")
        raise
    finally:
        db.close()


if __name__ == "__main__":
    main()
