# -*- coding: utf-8 -*-
"""Auth — API endpoints (Google sign-in, sign-out, current session)."""

from __future__ import annotations

import base64
import binascii
import logging
import secrets
from typing import Optional, Tuple
from urllib.parse import quote

from fastapi import APIRouter, Depends, Query, Request, Response
from fastapi.responses import RedirectResponse

from ..config import settings
from ..errors import AppError, success_envelope
from . import oauth
from .security import Session, clear_session_cookie, complete_sign_in, get_session, set_session_cookie

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["Auth"])

STATE_COOKIE_NAME = "mealfit_oauth_state"
DEFAULT_LANDING = "/meals"
SIGNIN_PAGE = "/auth/signin"


def safe_callback_url(raw: Optional[str]) -> str:
    """Only same-site relative paths are allowed as post-sign-in targets."""
    if not raw or not raw.startswith("/") or raw.startswith("//") or "\\" in raw:
        return DEFAULT_LANDING
    return raw


def _encode_state(state: str, callback_url: str) -> str:
    encoded = base64.urlsafe_b64encode(callback_url.encode("utf-8")).decode("ascii").rstrip("=")
    return f"{state}:{encoded}"


def _decode_state(raw: Optional[str]) -> Tuple[str, Optional[str]]:
    if not raw or ":" not in raw:
        return "", None
    state, encoded = raw.split(":", 1)
    try:
        callback_url = base64.urlsafe_b64decode(encoded + "=" * (-len(encoded) % 4)).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError):
        return state, None
    return state, callback_url


def _signin_error(error: str) -> RedirectResponse:
    resp = RedirectResponse(f"{SIGNIN_PAGE}?error={quote(error)}", status_code=303)
    resp.delete_cookie(STATE_COOKIE_NAME, path="/")
    return resp


@router.get("/signin/google", summary="Start Google sign-in")
def signin_google(callback_url: Optional[str] = Query(default=None, alias="callbackUrl")):
    if not oauth.is_configured():
        logger.error("Google sign-in requested but GOOGLE_CLIENT_ID/GOOGLE_CLIENT_SECRET are not set")
        return _signin_error("Configuration")

    state = secrets.token_urlsafe(24)
    resp = RedirectResponse(oauth.build_authorization_url(state), status_code=303)
    resp.set_cookie(
        STATE_COOKIE_NAME,
        _encode_state(state, safe_callback_url(callback_url)),
        httponly=True,
        secure=bool(settings.cookie_secure),
        samesite="lax",
        max_age=10 * 60,
        path="/",
    )
    return resp


@router.get("/callback/google", summary="Google sign-in callback")
def callback_google(
    request: Request,
    code: Optional[str] = Query(default=None),
    state: Optional[str] = Query(default=None),
    error: Optional[str] = Query(default=None),
):
    if error:
        logger.warning("Google sign-in returned error=%s", error)
        return _signin_error("AccessDenied")

    expected_state, stored_callback = _decode_state(request.cookies.get(STATE_COOKIE_NAME))
    if not code or not state or not expected_state or not secrets.compare_digest(expected_state.encode("utf-8"), state.encode("utf-8")):
        logger.warning("Google sign-in callback with missing code or mismatched state")
        return _signin_error("OAuthCallback")

    try:
        profile = oauth.exchange_code_for_profile(code)
        identity, token = complete_sign_in(profile)
    except oauth.OAuthError as exc:
        logger.warning("Google sign-in failed: %s", exc)
        return _signin_error("AccessDenied")
    except AppError as exc:
        logger.warning("Sign-in rejected: %s", exc.message)
        return _signin_error("AccessDenied")

    target = safe_callback_url(stored_callback)
    if not identity.approved:
        target = "/access-pending"
    resp = RedirectResponse(target, status_code=303)
    resp.delete_cookie(STATE_COOKIE_NAME, path="/")
    set_session_cookie(resp, token)
    return resp


@router.post("/signout", summary="Sign out")
def signout(response: Response):
    clear_session_cookie(response)
    return success_envelope({"status": "ok"})


@router.get("/me", summary="Current session")
def me(session: Session = Depends(get_session)):
    return success_envelope(session.public().model_dump(mode="json"))
