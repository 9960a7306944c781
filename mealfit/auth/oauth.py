# -*- coding: utf-8 -*-
"""Google OAuth 2.0 helpers (authorization-code flow)."""

from __future__ import annotations

from typing import Any, Dict, Optional
from urllib.parse import urlencode

import httpx
import pydantic

from ..config import settings
from .models import SignInProfile

AUTHORIZE_URL = "https://accounts.google.com/o/oauth2/v2/auth"
TOKEN_URL = "https://oauth2.googleapis.com/token"
USERINFO_URL = "https://openidconnect.googleapis.com/v1/userinfo"
PROVIDER = "google"


class OAuthError(Exception):
    """The provider rejected the exchange or returned something unusable."""


def is_configured() -> bool:
    return bool(settings.google_client_id and settings.google_client_secret)


def redirect_uri() -> str:
    return f"{settings.base_url}/api/auth/callback/{PROVIDER}"


def build_authorization_url(state: str) -> str:
    query = {
        "client_id": settings.google_client_id or "",
        "redirect_uri": redirect_uri(),
        "response_type": "code",
        "scope": "openid email profile",
        "state": state,
        "prompt": "select_account",
    }
    return f"{AUTHORIZE_URL}?{urlencode(query)}"


def _profile_from_userinfo(data: Dict[str, Any]) -> SignInProfile:
    try:
        return SignInProfile(
            email=(str(data.get("email") or "").strip() or None),
            name=(str(data.get("name") or "").strip() or None),
            image=(str(data.get("picture") or "").strip() or None),
            provider=PROVIDER,
        )
    except pydantic.ValidationError as exc:
        raise OAuthError(f"userinfo payload rejected: {exc.error_count()} invalid field(s)") from exc


def exchange_code_for_profile(code: str, *, transport: Optional[httpx.BaseTransport] = None) -> SignInProfile:
    """Trade an authorization code for the signed-in user's profile."""
    with httpx.Client(timeout=settings.oauth_timeout, transport=transport) as client:
        try:
            resp = client.post(
                TOKEN_URL,
                data={
                    "code": code,
                    "client_id": settings.google_client_id or "",
                    "client_secret": settings.google_client_secret or "",
                    "redirect_uri": redirect_uri(),
                    "grant_type": "authorization_code",
                },
                headers={"Accept": "application/json"},
            )
            resp.raise_for_status()
            access_token = str(resp.json().get("access_token") or "")
            if not access_token:
                raise OAuthError("token endpoint returned no access_token")

            info = client.get(USERINFO_URL, headers={"Authorization": f"Bearer {access_token}"})
            info.raise_for_status()
            data = info.json()
        except httpx.HTTPStatusError as exc:
            raise OAuthError(f"{exc.request.url} returned HTTP {exc.response.status_code}") from exc
        except httpx.HTTPError as exc:
            raise OAuthError(f"provider request failed: {exc}") from exc
        except ValueError as exc:
            raise OAuthError("provider returned invalid JSON") from exc

    if not isinstance(data, dict):
        raise OAuthError("userinfo payload is not an object")
    if data.get("email_verified") is False:
        raise OAuthError("email address is not verified")
    return _profile_from_userinfo(data)
