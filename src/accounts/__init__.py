"""Users, credentials and per-request token verification."""

from .credentials import CredentialStore, TokenSigner, hash_password, verify_password
from .models import AuthenticatedUser, AuthToken, TokenClaims, User
from .repository import UserRepository
from .session_gate import SessionGate

__all__ = [
    "AuthToken",
    "AuthenticatedUser",
    "CredentialStore",
    "SessionGate",
    "TokenClaims",
    "TokenSigner",
    "User",
    "UserRepository",
    "hash_password",
    "verify_password",
]
