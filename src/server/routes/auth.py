"""Authentication endpoints."""

from __future__ import annotations

import asyncio
import logging

from fastapi import Depends, FastAPI, HTTPException

from src.accounts import AuthenticatedUser
from src.worklog.exceptions import DuplicateUserError, InvalidCredentialsError

from ..dependencies import get_credential_store, get_current_user
from ..schemas import AuthResponse, CredentialsRequest, MeResponse

logger = logging.getLogger(__name__)


def register_auth_routes(app: FastAPI) -> None:
    """Register register/login endpoints."""

    @app.post("/api/auth/register", response_model=AuthResponse)
    async def register(request: CredentialsRequest) -> AuthResponse:
        """Create an account and return a token bound to it."""
        store = get_credential_store()
        try:
            issued = await asyncio.to_thread(store.register, request.username, request.password)
            return AuthResponse(token=issued.token, username=issued.username)
        except (DuplicateUserError, InvalidCredentialsError) as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc
        except Exception as exc:
            logger.exception("Failed to register user: %s", exc)
            raise HTTPException(status_code=500, detail="Registration failed") from exc

    @app.post("/api/auth/login", response_model=AuthResponse)
    async def login(request: CredentialsRequest) -> AuthResponse:
        """Exchange username/password for a token."""
        store = get_credential_store()
        try:
            issued = await asyncio.to_thread(store.login, request.username, request.password)
            return AuthResponse(token=issued.token, username=issued.username)
        except InvalidCredentialsError as exc:
            raise HTTPException(status_code=401, detail=str(exc)) from exc
        except Exception as exc:
            logger.exception("Failed to log in: %s", exc)
            raise HTTPException(status_code=500, detail="Login failed") from exc

    @app.get("/api/auth/me", response_model=MeResponse)
    async def me(user: AuthenticatedUser = Depends(get_current_user)) -> MeResponse:
        """Identity of the current token."""
        return MeResponse(id=user.id, username=user.username)
