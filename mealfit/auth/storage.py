# -*- coding: utf-8 -*-
"""Auth — identity store (SQLite)."""

from __future__ import annotations

import logging
import sqlite3
from pathlib import Path
from typing import List, Optional, Tuple

from ..app_db import db_conn
from ..config import settings
from ..dates import utc_now_iso
from ..errors import DatabaseError
from ..identifiers import IdentityId
from .models import Identity, UserRole

logger = logging.getLogger(__name__)


def normalize_email(email: str) -> str:
    return email.strip().lower()


def _clean(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


def upsert_identity(
    *,
    email: str,
    name: Optional[str] = None,
    image: Optional[str] = None,
    provider: Optional[str] = None,
    super_admin_email: Optional[str] = None,
    db_path: Path | None = None,
) -> Tuple[Identity, bool]:
    """Create or update the identity for `email`. Returns (identity, created).

    Profile fields are only overwritten with non-empty values. The super-admin
    address is forced to SUPER_ADMIN + approved; everyone else keeps their stored
    role and approval (new identities start as unapproved MEMBERs).
    """
    email_norm = normalize_email(email)
    admin_email = normalize_email(super_admin_email if super_admin_email is not None else settings.super_admin_email)
    is_admin = bool(admin_email) and email_norm == admin_email
    name = _clean(name)
    image = _clean(image)
    provider = (_clean(provider) or "").lower() or None
    now = utc_now_iso()

    try:
        with db_conn(db_path or settings.db_path) as conn:
            row = conn.execute("SELECT * FROM users WHERE email = ?", (email_norm,)).fetchone()
            created = row is None
            if created:
                user_id = IdentityId.new()
                conn.execute(
                    """
                    INSERT INTO users (id, email, name, image, provider, role, approved, created_at, updated_at)
                    VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
                    """,
                    (
                        user_id.value,
                        email_norm,
                        name,
                        image,
                        provider,
                        (UserRole.SUPER_ADMIN if is_admin else UserRole.MEMBER).value,
                        1 if is_admin else 0,
                        now,
                        now,
                    ),
                )
            else:
                user_id = IdentityId.parse(row["id"])
                conn.execute(
                    """
                    UPDATE users
                    SET name = COALESCE(?, name),
                        image = COALESCE(?, image),
                        provider = COALESCE(?, provider),
                        updated_at = ?
                    WHERE id = ?
                    """,
                    (name, image, provider, now, user_id.value),
                )
            if is_admin:
                conn.execute(
                    "UPDATE users SET role = ?, approved = 1 WHERE id = ?",
                    (UserRole.SUPER_ADMIN.value, user_id.value),
                )
            stored = conn.execute("SELECT * FROM users WHERE id = ?", (user_id.value,)).fetchone()
    except sqlite3.Error as exc:
        logger.exception("Identity upsert failed for %s", email_norm)
        raise DatabaseError("Failed to create or update user.") from exc

    identity = Identity.from_row(stored)
    if created:
        logger.info("Created identity %s (%s, role=%s)", identity.id, identity.email, identity.role.value)
    if is_admin:
        logger.info("Identity %s holds the super-admin email; role=SUPER_ADMIN approved=true", identity.id)
    return identity, created


def get_identity_by_email(email: str, *, db_path: Path | None = None) -> Optional[Identity]:
    try:
        with db_conn(db_path or settings.db_path) as conn:
            row = conn.execute("SELECT * FROM users WHERE email = ?", (normalize_email(email),)).fetchone()
    except sqlite3.Error as exc:
        logger.exception("Identity lookup by email failed")
        raise DatabaseError() from exc
    return Identity.from_row(row) if row else None


def get_identity_by_id(user_id: IdentityId, *, db_path: Path | None = None) -> Optional[Identity]:
    try:
        with db_conn(db_path or settings.db_path) as conn:
            row = conn.execute("SELECT * FROM users WHERE id = ?", (user_id.value,)).fetchone()
    except sqlite3.Error as exc:
        logger.exception("Identity lookup failed for %s", user_id)
        raise DatabaseError() from exc
    return Identity.from_row(row) if row else None


def list_unapproved_identities(*, db_path: Path | None = None) -> List[Identity]:
    try:
        with db_conn(db_path or settings.db_path) as conn:
            rows = conn.execute(
                """
                SELECT * FROM users
                WHERE approved = 0
                ORDER BY created_at DESC, rowid DESC
                """
            ).fetchall()
    except sqlite3.Error as exc:
        logger.exception("Listing unapproved identities failed")
        raise DatabaseError("Failed to fetch unapproved users. Please try again.") from exc
    return [Identity.from_row(r) for r in rows]


def approve_identity(user_id: IdentityId, *, db_path: Path | None = None) -> Optional[Identity]:
    """Flip `approved` to true. Returns None when the identity does not exist."""
    try:
        with db_conn(db_path or settings.db_path) as conn:
            cur = conn.execute(
                "UPDATE users SET approved = 1, updated_at = ? WHERE id = ?",
                (utc_now_iso(), user_id.value),
            )
            if cur.rowcount == 0:
                return None
            row = conn.execute("SELECT * FROM users WHERE id = ?", (user_id.value,)).fetchone()
    except sqlite3.Error as exc:
        logger.exception("Approving identity %s failed", user_id)
        raise DatabaseError("Failed to approve user. Please try again.") from exc
    return Identity.from_row(row)
