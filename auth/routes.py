"""
Auth API routes — register, login.

Route prefix: ``config.auth_route_prefix`` (empty by default).
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Coroutine, Dict, Union

from fastapi import APIRouter, Depends, Request, Response, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.routing import APIRoute
from pydantic import BaseModel
from starlette.concurrency import run_in_threadpool

from auth.dependencies import get_credential_store
from auth.errors import PersistenceError, UsernameTakenError
from auth.password import hash_password
from auth.store import CredentialStore

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid username or password"


# ── Request / response schemas ─────────────────────────────────────────


class RegisterRequest(BaseModel):
    username: str
    password: str


class LoginRequest(BaseModel):
    username: str
    password: str


class AuthResponse(BaseModel):
    message: str
    user_id: int


class ErrorResponse(BaseModel):
    error: str


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(error=message).model_dump(),
    )


def _describe_validation_error(exc: RequestValidationError) -> str:
    problems = []
    for error in exc.errors():
        field = ".".join(str(loc) for loc in error["loc"][1:]) or "body"
        problems.append(f"{field}: {error['msg']}")
    return "Invalid request: " + "; ".join(problems)


class AuthRoute(APIRoute):
    """Route class that reports body validation failures as ``{"error": ...}``."""

    def get_route_handler(self) -> Callable[[Request], Coroutine[Any, Any, Response]]:
        handler = super().get_route_handler()

        async def auth_route_handler(request: Request) -> Response:
            try:
                return await handler(request)
            except RequestValidationError as exc:
                return _error(422, _describe_validation_error(exc))

        return auth_route_handler


router = APIRouter(tags=["auth"], route_class=AuthRoute)


# ── Endpoints ──────────────────────────────────────────────────────────


@router.post(
    "/register",
    response_model=AuthResponse,
    responses={
        409: {"model": ErrorResponse},
        422: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)
async def register(
    req: RegisterRequest,
    store: CredentialStore = Depends(get_credential_store),
) -> Union[Dict[str, Any], JSONResponse]:
    """Register a new user."""
    password_hash = await run_in_threadpool(hash_password, req.password, store.bcrypt_rounds)

    try:
        user_id = await store.create_user(req.username, password_hash)
    except UsernameTakenError as exc:
        logger.info("Registration rejected, username %r taken", req.username)
        return _error(status.HTTP_409_CONFLICT, f"Failed to register user: {exc}")
    except PersistenceError as exc:
        logger.exception("Registration failed for %r", req.username)
        return _error(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            f"Failed to register user: {exc}",
        )

    logger.info("Registered user %s (%s)", req.username, user_id)
    return {"message": "User registered successfully", "user_id": user_id}


@router.post(
    "/login",
    response_model=AuthResponse,
    responses={
        401: {"model": ErrorResponse},
        422: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)
async def login(
    req: LoginRequest,
    store: CredentialStore = Depends(get_credential_store),
) -> Union[Dict[str, Any], JSONResponse]:
    """Login with username + password."""
    try:
        user = await store.find_user(req.username, req.password)
    except PersistenceError as exc:
        logger.exception("Login lookup failed for %r", req.username)
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, f"Failed to login: {exc}")

    if user is None:
        logger.info("Failed login for %r", req.username)
        return _error(status.HTTP_401_UNAUTHORIZED, INVALID_CREDENTIALS)

    logger.info("Login: %s (%s)", user.username, user.id)
    return {"message": "Login successful", "user_id": user.id}
