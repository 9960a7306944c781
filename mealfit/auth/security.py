# -*- coding: utf-8 -*-
"""Auth — signed session tokens, per-request session resolution and FastAPI guards."""

from __future__ import annotations

import base64
import hashlib
import hmac
import json
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any, Dict, Optional

from fastapi import Depends, Request, Response

from ..config import settings
from ..errors import ForbiddenError, SignInDenied, UnauthorizedError, ValidationError
from ..identifiers import IdentityId
from .models import Identity, SessionPublic, SignInProfile, UserRole
from .storage import get_identity_by_id, upsert_identity

logger = logging.getLogger(__name__)

TOKEN_COOKIE_NAME = "mealfit_session"


@dataclass(frozen=True)
class Session:
    """Claims for the current request, always read back from the identity store."""

    id: IdentityId
    email: str
    role: UserRole
    approved: bool
    name: Optional[str] = None
    image: Optional[str] = None
    # True when the presented token carried different role/approval claims.
    stale: bool = False

    @property
    def is_super_admin(self) -> bool:
        return self.role is UserRole.SUPER_ADMIN

    @classmethod
    def from_identity(cls, identity: Identity, *, stale: bool = False) -> "Session":
        return cls(
            id=IdentityId.parse(identity.id),
            email=identity.email,
            role=identity.role,
            approved=identity.approved,
            name=identity.name,
            image=identity.image,
            stale=stale,
        )

    def fresh_token(self) -> str:
        return create_session_token(user_id=self.id.value, email=self.email, role=self.role, approved=self.approved)

    def public(self) -> SessionPublic:
        return SessionPublic(
            id=self.id.value,
            email=self.email,
            name=self.name,
            image=self.image,
            role=self.role,
            approved=self.approved,
        )


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def create_session_token(*, user_id: str, email: str, role: UserRole, approved: bool) -> str:
    now = _utc_now()
    exp = now + timedelta(days=int(settings.session_ttl_days))
    payload = {
        "sub": user_id,
        "email": email,
        "role": role.value,
        "approved": bool(approved),
        "iat": int(now.timestamp()),
        "exp": int(exp.timestamp()),
    }
    return _jwt_encode(payload, settings.session_secret)


def decode_token(token: str) -> Dict[str, Any]:
    try:
        payload = _jwt_decode(token, settings.session_secret)
    except Exception as exc:
        raise UnauthorizedError("Invalid session token") from exc
    exp = int(payload.get("exp") or 0)
    if exp and exp < int(_utc_now().timestamp()):
        raise UnauthorizedError("Session expired. Please sign in again.")
    return payload


def _b64url_encode(data: bytes) -> str:
    return base64.urlsafe_b64encode(data).decode("ascii").rstrip("=")


def _b64url_decode(data: str) -> bytes:
    pad = "=" * (-len(data) % 4)
    return base64.urlsafe_b64decode((data + pad).encode("ascii"))


def _jwt_encode(payload: Dict[str, Any], secret: str) -> str:
    header = {"alg": "HS256", "typ": "JWT"}
    header_b64 = _b64url_encode(json.dumps(header, separators=(",", ":")).encode("utf-8"))
    payload_b64 = _b64url_encode(json.dumps(payload, separators=(",", ":"), ensure_ascii=False).encode("utf-8"))
    signing_input = f"{header_b64}.{payload_b64}".encode("ascii")
    sig = hmac.new(secret.encode("utf-8"), signing_input, hashlib.sha256).digest()
    return f"{header_b64}.{payload_b64}.{_b64url_encode(sig)}"


def _jwt_decode(token: str, secret: str) -> Dict[str, Any]:
    parts = token.split(".")
    if len(parts) != 3:
        raise ValueError("invalid token")
    header_b64, payload_b64, sig_b64 = parts
    signing_input = f"{header_b64}.{payload_b64}".encode("ascii")
    expected_sig = hmac.new(secret.encode("utf-8"), signing_input, hashlib.sha256).digest()
    if not hmac.compare_digest(expected_sig, _b64url_decode(sig_b64)):
        raise ValueError("bad signature")
    payload = json.loads(_b64url_decode(payload_b64).decode("utf-8"))
    if not isinstance(payload, dict):
        raise ValueError("bad payload")
    return payload


def get_token_from_request(request: Request) -> Optional[str]:
    auth = request.headers.get("authorization") or ""
    if auth.lower().startswith("bearer "):
        token = auth.split(" ", 1)[1].strip()
        return token or None
    return request.cookies.get(TOKEN_COOKIE_NAME) or None


def rehydrate_session(payload: Dict[str, Any], *, db_path: Path | None = None) -> Session:
    """Turn decoded token claims into a Session using the identity's current stored state."""
    try:
        user_id = IdentityId.parse(payload.get("sub"))
    except ValidationError as exc:
        raise UnauthorizedError("Invalid session token") from exc

    identity = get_identity_by_id(user_id, db_path=db_path)
    if identity is None:
        raise UnauthorizedError("User not found. Please sign in again.")

    stale = payload.get("role") != identity.role.value or bool(payload.get("approved")) != identity.approved
    if stale:
        logger.debug(
            "Rehydrated stale claims for %s: token role=%s approved=%s, stored role=%s approved=%s",
            identity.id,
            payload.get("role"),
            payload.get("approved"),
            identity.role.value,
            identity.approved,
        )
    return Session.from_identity(identity, stale=stale)


def resolve_session(request: Request) -> Optional[Session]:
    """Session for this request, or None when no token was presented.

    Cached on `request.state` so the gate middleware and route guards share one lookup.
    """
    if getattr(request.state, "session_resolved", False):
        return request.state.session

    token = get_token_from_request(request)
    session = rehydrate_session(decode_token(token)) if token else None
    request.state.session = session
    request.state.session_resolved = True
    return session


def get_session(request: Request) -> Session:
    session = resolve_session(request)
    if session is None:
        raise UnauthorizedError()
    return session


def require_approved(session: Session = Depends(get_session)) -> Session:
    if not session.approved:
        raise ForbiddenError("Your account is pending approval.")
    return session


def require_super_admin(session: Session = Depends(get_session)) -> Session:
    if not session.is_super_admin:
        raise ForbiddenError("Forbidden. Only administrators can access this resource.")
    return session


def set_session_cookie(resp: Response, token: str) -> None:
    resp.set_cookie(
        TOKEN_COOKIE_NAME,
        token,
        httponly=True,
        secure=bool(settings.cookie_secure),
        samesite="lax",
        max_age=int(settings.session_ttl_days) * 24 * 60 * 60,
        path="/",
    )


def clear_session_cookie(resp: Response) -> None:
    resp.delete_cookie(TOKEN_COOKIE_NAME, path="/")


def complete_sign_in(profile: SignInProfile, *, db_path: Path | None = None) -> tuple[Identity, str]:
    """Sign-in callback: upsert the identity and mint a session token for it.

    Every sign-in writes (profile fields, and role/approval for the super-admin).
    """
    if not profile.email or not profile.email.strip():
        raise SignInDenied("Sign-in denied: the provider did not return an email address.")

    identity, _created = upsert_identity(
        email=profile.email,
        name=profile.name,
        image=profile.image,
        provider=profile.provider,
        db_path=db_path,
    )
    logger.info("Sign-in for %s (role=%s approved=%s)", identity.email, identity.role.value, identity.approved)
    token = create_session_token(
        user_id=identity.id, email=identity.email, role=identity.role, approved=identity.approved
    )
    return identity, token
