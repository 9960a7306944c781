# -*- coding: utf-8 -*-
"""
mealfit API

Daily meal and workout log behind Google sign-in, with admin approval of new accounts.
"""

from __future__ import annotations

import logging
import os
from typing import Optional
from urllib.parse import urlencode

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, RedirectResponse

from .app_db import init_app_db
from .approvals.api import router as approvals_router
from .auth.api import DEFAULT_LANDING, SIGNIN_PAGE
from .auth.api import router as auth_router
from .auth.security import TOKEN_COOKIE_NAME, Session, clear_session_cookie, resolve_session, set_session_cookie
from .config import settings
from .errors import AppError, UnauthorizedError, ValidationError, error_envelope
from .meals.api import router as meals_router
from .pages import router as pages_router
from .workouts.api import router as workouts_router

logger = logging.getLogger(__name__)

PENDING_PAGE = "/access-pending"

_API_EXEMPT_PREFIXES = (
    "/api/auth/",
    "/api/health",
    "/api/docs",
    "/api/redoc",
    "/api/openapi.json",
)

_PAGE_EXEMPT_PREFIXES = (
    SIGNIN_PAGE,
    "/favicon.ico",
    "/static/",
)


def configure_logging(level: Optional[str] = None) -> None:
    logging.basicConfig(
        level=(level or settings.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def page_redirect(path: str, session: Optional[Session]) -> Optional[str]:
    """Where a page request must be sent instead, or None to let it through."""
    if session is None:
        return f"{SIGNIN_PAGE}?{urlencode({'callbackUrl': path})}"
    if path == PENDING_PAGE:
        return None
    if not session.approved:
        return PENDING_PAGE
    if path.startswith("/approval") and not session.is_super_admin:
        return DEFAULT_LANDING
    return None


app = FastAPI(
    title="mealfit",
    description="Daily meal and workout log with approval-gated Google sign-in",
    version="0.1.0",
    docs_url="/api/docs",
    redoc_url="/api/redoc",
    openapi_url="/api/openapi.json",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.on_event("startup")
def _startup_init_db() -> None:
    init_app_db(settings.db_path)


# Ensure the app DB exists even when lifespan events are not triggered (e.g. some test clients).
init_app_db(settings.db_path)


@app.middleware("http")
async def _session_gate(request: Request, call_next):
    path = request.url.path
    is_api = path.startswith("/api")
    exempt = any(path.startswith(p) for p in (_API_EXEMPT_PREFIXES if is_api else _PAGE_EXEMPT_PREFIXES))
    if exempt:
        return await call_next(request)

    try:
        session = resolve_session(request)
    except AppError as exc:
        if is_api or not isinstance(exc, UnauthorizedError):
            return JSONResponse(status_code=exc.status_code, content=error_envelope(exc))
        logger.info("Dropping unusable session cookie on %s: %s", path, exc.message)
        resp = RedirectResponse(page_redirect(path, None), status_code=303)
        clear_session_cookie(resp)
        return resp

    if is_api:
        if session is None:
            return JSONResponse(status_code=401, content=error_envelope(UnauthorizedError()))
        response = await call_next(request)
    else:
        target = page_redirect(path, session)
        response = RedirectResponse(target, status_code=303) if target else await call_next(request)

    # Role/approval changed since the token was minted: hand out a fresh one.
    if session is not None and session.stale and request.cookies.get(TOKEN_COOKIE_NAME):
        set_session_cookie(response, session.fresh_token())
    return response


@app.exception_handler(AppError)
async def _app_error_handler(request: Request, exc: AppError):
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content=error_envelope(exc))


@app.exception_handler(RequestValidationError)
async def _request_validation_handler(request: Request, exc: RequestValidationError):
    details = [
        {
            "field": ".".join(str(part) for part in err.get("loc", ())),
            "message": err.get("msg", "Invalid value"),
            "type": err.get("type", "value_error"),
        }
        for err in exc.errors()
    ]
    return JSONResponse(status_code=400, content=error_envelope(ValidationError(details=details)))


@app.exception_handler(Exception)
async def _unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=500,
        content={"success": False, "error": "An unexpected error occurred. Please try again."},
    )


@app.get("/api/health")
def health() -> dict:
    return {"ok": True}


app.include_router(auth_router)
app.include_router(meals_router)
app.include_router(workouts_router)
app.include_router(approvals_router)
app.include_router(pages_router)


def run() -> None:
    """Console entry point (used by pyproject [project.scripts])."""
    import uvicorn

    configure_logging()
    host = os.environ.get("MEALFIT_HOST") or os.environ.get("HOST") or "127.0.0.1"
    port_raw = os.environ.get("MEALFIT_PORT") or os.environ.get("PORT") or "8000"
    try:
        port = int(port_raw)
    except ValueError:
        port = 8000

    uvicorn.run("mealfit.api:app", host=host, port=port, reload=False)
