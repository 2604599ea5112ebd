"""Dependency helpers shared across FastAPI routes."""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path
from typing import Optional

from fastapi import Header, HTTPException

from src.accounts import (
    AuthenticatedUser,
    CredentialStore,
    SessionGate,
    TokenSigner,
    UserRepository,
)
from src.entries import EntryRepository, SeriesRepository
from src.worklog.config import Config
from src.worklog.exceptions import UnauthorizedError
from src.worklog.logger import setup_logger
from src.worklog.ollama_client import OllamaClient

config = Config.load()
setup_logger(log_level=config.log_level, log_file=config.log_file)


def _db_path() -> Optional[Path]:
    """Environment wins over the config file so tests can point at tmp dirs."""
    value = os.getenv("WORKLOG_DB_PATH") or config.db_path
    return Path(value) if value else None


@lru_cache(maxsize=1)
def get_user_repository() -> UserRepository:
    """Singleton UserRepository."""
    return UserRepository(db_path=_db_path())


@lru_cache(maxsize=1)
def get_entry_repository() -> EntryRepository:
    """Singleton EntryRepository."""
    return EntryRepository(db_path=_db_path())


@lru_cache(maxsize=1)
def get_series_repository() -> SeriesRepository:
    """Singleton SeriesRepository."""
    return SeriesRepository(db_path=_db_path())


@lru_cache(maxsize=1)
def get_token_signer() -> TokenSigner:
    """Singleton TokenSigner."""
    secret = os.getenv("WORKLOG_SECRET_KEY") or config.auth.secret_key
    return TokenSigner(secret, ttl_days=config.auth.token_ttl_days)


@lru_cache(maxsize=1)
def get_credential_store() -> CredentialStore:
    """Singleton CredentialStore."""
    return CredentialStore(get_user_repository(), get_token_signer())


@lru_cache(maxsize=1)
def get_session_gate() -> SessionGate:
    """Singleton SessionGate."""
    return SessionGate(get_user_repository(), get_token_signer())


@lru_cache(maxsize=1)
def get_ollama_client() -> OllamaClient:
    """Lazily create a singleton OllamaClient."""
    return OllamaClient(
        host=config.ollama.host,
        model=config.ollama.model,
        temperature=config.temperature,
        max_tokens=config.max_tokens,
    )


def clear_caches() -> None:
    """Drop all singletons (used by tests after changing the environment)."""
    for factory in (
        get_user_repository,
        get_entry_repository,
        get_series_repository,
        get_token_signer,
        get_credential_store,
        get_session_gate,
        get_ollama_client,
    ):
        factory.cache_clear()


def get_current_user(authorization: Optional[str] = Header(default=None)) -> AuthenticatedUser:
    """Session gate as a FastAPI dependency: 401 unless the bearer token resolves."""
    try:
        return get_session_gate().authenticate(authorization)
    except UnauthorizedError as exc:
        raise HTTPException(
            status_code=401,
            detail=str(exc),
            headers={"WWW-Authenticate": "Bearer"},
        ) from exc
