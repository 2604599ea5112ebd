"""Shared configuration, logging, errors and the LLM client for worklog."""

from .config import AuthConfig, Config, OllamaConfig, ServerConfig
from .exceptions import (
    ApiError,
    AuthError,
    ConfigurationError,
    DuplicateUserError,
    GenerationError,
    GenerationFailedError,
    InvalidCredentialsError,
    NoContentError,
    NotFoundError,
    UnauthorizedError,
    WorklogError,
)
from .logger import setup_logger

__all__ = [
    "ApiError",
    "AuthConfig",
    "AuthError",
    "Config",
    "ConfigurationError",
    "DuplicateUserError",
    "GenerationError",
    "GenerationFailedError",
    "InvalidCredentialsError",
    "NoContentError",
    "NotFoundError",
    "OllamaConfig",
    "ServerConfig",
    "UnauthorizedError",
    "WorklogError",
    "setup_logger",
]
