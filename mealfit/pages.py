# -*- coding: utf-8 -*-
"""Page routes.

The real UI is a separate frontend; these pages exist so the route gate in
`mealfit.api` has concrete targets (sign-in, pending access, landing, admin).
"""

from __future__ import annotations

from html import escape
from typing import Optional
from urllib.parse import quote, urlencode

from fastapi import APIRouter, Query, Request
from fastapi.responses import HTMLResponse, RedirectResponse

from .auth.api import DEFAULT_LANDING, safe_callback_url

router = APIRouter(include_in_schema=False)

_SIGNIN_ERRORS = {
    "AccessDenied": "Sign-in was denied. Please try again with a Google account that has an email address.",
    "Configuration": "Sign-in is not configured on this server.",
    "OAuthCallback": "The sign-in response could not be verified. Please try again.",
}


def _page(title: str, body: str) -> HTMLResponse:
    return HTMLResponse(
        f"""<!doctype html>
<html>
<head>
  <meta charset="utf-8"/>
  <title>{escape(title)} · mealfit</title>
  <style>
    body {{ font-family: Arial, sans-serif; margin: 20px; }}
    nav a {{ margin-right: 12px; }}
    .error {{ color: #b00020; }}
  </style>
</head>
<body>
{body}
</body>
</html>"""
    )


def _nav(request: Request) -> str:
    session = getattr(request.state, "session", None)
    links = ['<a href="/meals">Meals</a>', '<a href="/dashboard">Dashboard</a>']
    if session is not None and session.is_super_admin:
        links.append('<a href="/approval">Approvals</a>')
    who = escape(session.name or session.email) if session is not None else ""
    return f"<nav>{''.join(links)} <span>{who}</span></nav>"


@router.get("/")
def root():
    return RedirectResponse(DEFAULT_LANDING, status_code=303)


@router.get("/auth/signin")
def signin_page(
    callback_url: Optional[str] = Query(default=None, alias="callbackUrl"),
    error: Optional[str] = Query(default=None),
):
    target = "/api/auth/signin/google?" + urlencode({"callbackUrl": safe_callback_url(callback_url)})
    message = ""
    if error:
        message = f'<p class="error">{escape(_SIGNIN_ERRORS.get(error, "Sign-in failed. Please try again."))}</p>'
    return _page("Sign in", f'<h2>Sign in</h2>{message}<p><a href="{escape(target)}">Continue with Google</a></p>')


@router.get("/access-pending")
def access_pending_page():
    return _page(
        "Access pending",
        "<h2>Access pending</h2>"
        "<p>Your account has been created and is waiting for an administrator to approve it.</p>"
        f'<p><a href="{quote(DEFAULT_LANDING)}">Check again</a></p>',
    )


@router.get("/meals")
def meals_page(request: Request):
    return _page("Meals", _nav(request) + "<h2>Daily log</h2><div id=\"app\" data-api=\"/api/meals\"></div>")


@router.get("/dashboard")
def dashboard_page(request: Request):
    return _page("Dashboard", _nav(request) + "<h2>Dashboard</h2><div id=\"app\" data-api=\"/api/meals/range\"></div>")


@router.get("/approval")
def approval_page(request: Request):
    return _page("Approvals", _nav(request) + "<h2>Pending approvals</h2><div id=\"app\" data-api=\"/api/approvals/pending\"></div>")
