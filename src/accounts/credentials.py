"""Credential Store

パスワードのソルト付きハッシュ化と、ユーザーIDを埋め込んだ
署名付きトークンの発行・検証を行う。

トークン形式: base64url(JSONペイロード) + "." + base64url(HMAC-SHA256署名)
ペイロード: {"sub": ユーザーID, "usr": ユーザー名, "exp": 失効UNIX秒}
リフレッシュ機構は無く、失効後は再ログインが必要。
"""

from __future__ import annotations

import base64
import hashlib
import hmac
import json
import logging
import secrets
import time
from typing import Optional

from src.worklog.exceptions import (
    DuplicateUserError,
    InvalidCredentialsError,
    UnauthorizedError,
)

from .models import AuthToken, TokenClaims, User
from .repository import UserRepository

logger = logging.getLogger(__name__)

PBKDF2_ALGORITHM = "pbkdf2_sha256"
PBKDF2_ITERATIONS = 200_000
DEFAULT_TOKEN_TTL_DAYS = 30


def hash_password(password: str, *, salt: Optional[str] = None, iterations: int = PBKDF2_ITERATIONS) -> str:
    """PBKDF2-SHA256でハッシュ化し `algorithm$iterations$salt$hash` 形式で返す。"""
    salt = salt or secrets.token_hex(16)
    digest = hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt.encode("utf-8"), iterations)
    return f"{PBKDF2_ALGORITHM}${iterations}${salt}${digest.hex()}"


def verify_password(password: str, encoded: str) -> bool:
    try:
        algorithm, iterations, salt, expected = encoded.split("$", 3)
    except ValueError:
        logger.warning("Malformed password hash in storage")
        return False
    if algorithm != PBKDF2_ALGORITHM:
        return False
    candidate = hash_password(password, salt=salt, iterations=int(iterations))
    return hmac.compare_digest(candidate.rsplit("$", 1)[1], expected)


def _b64encode(raw: bytes) -> str:
    return base64.urlsafe_b64encode(raw).rstrip(b"=").decode("ascii")


def _b64decode(text: str) -> bytes:
    padding = "=" * (-len(text) % 4)
    return base64.urlsafe_b64decode(text + padding)


class TokenSigner:
    """HMAC-SHA256による署名付きトークンの発行・検証。"""

    def __init__(self, secret_key: str, ttl_days: int = DEFAULT_TOKEN_TTL_DAYS):
        self._key = secret_key.encode("utf-8")
        self.ttl_seconds = ttl_days * 24 * 60 * 60

    def _sign(self, payload: str) -> str:
        return _b64encode(hmac.new(self._key, payload.encode("utf-8"), hashlib.sha256).digest())

    def issue(self, user_id: int, username: str, *, now: Optional[float] = None) -> str:
        issued = int(now if now is not None else time.time())
        claims = {"sub": user_id, "usr": username, "exp": issued + self.ttl_seconds}
        payload = _b64encode(json.dumps(claims, separators=(",", ":")).encode("utf-8"))
        return f"{payload}.{self._sign(payload)}"

    def decode(self, token: str, *, now: Optional[float] = None) -> TokenClaims:
        """署名と有効期限を検証してクレームを返す

        Raises:
            UnauthorizedError: 形式不正・署名不一致・期限切れの場合
        """
        if not token:
            raise UnauthorizedError("Authorization token is required")
        try:
            payload, signature = token.split(".")
        except ValueError as exc:
            raise UnauthorizedError("Malformed token") from exc

        try:
            valid = hmac.compare_digest(signature.encode("utf-8"), self._sign(payload).encode("ascii"))
        except (UnicodeError, TypeError) as exc:
            raise UnauthorizedError("Malformed token") from exc
        if not valid:
            raise UnauthorizedError("Invalid token signature")

        try:
            claims = json.loads(_b64decode(payload))
            result = TokenClaims(
                user_id=int(claims["sub"]),
                username=str(claims["usr"]),
                expires_at=int(claims["exp"]),
            )
        except (ValueError, KeyError, TypeError) as exc:
            raise UnauthorizedError("Malformed token payload") from exc

        current = now if now is not None else time.time()
        if result.expires_at <= current:
            raise UnauthorizedError("Token has expired")
        return result


class CredentialStore:
    """ユーザー登録・ログインとトークン発行。"""

    def __init__(self, users: UserRepository, signer: TokenSigner):
        self.users = users
        self.signer = signer

    def register(self, username: str, password: str) -> AuthToken:
        """新規登録してトークンを返す

        Raises:
            DuplicateUserError: ユーザー名が既に存在する場合
            InvalidCredentialsError: ユーザー名またはパスワードが空の場合
        """
        username = (username or "").strip()
        if not username or not password:
            raise InvalidCredentialsError("Username and password are required")
        if self.users.get_by_username(username):
            raise DuplicateUserError(f"User already exists: {username}")

        user = self.users.create(username, hash_password(password))
        logger.info(f"Registered user {user.username} (id={user.id})")
        return self._issue(user)

    def login(self, username: str, password: str) -> AuthToken:
        """ログインしてトークンを返す

        Raises:
            InvalidCredentialsError: ユーザーが存在しない、またはパスワード不一致
        """
        user = self.users.get_by_username((username or "").strip())
        if user is None or not verify_password(password or "", user.password_hash):
            logger.info(f"Failed login attempt for {username!r}")
            raise InvalidCredentialsError("Invalid username or password")
        return self._issue(user)

    def change_password(self, username: str, old_password: str, new_password: str) -> AuthToken:
        """パスワード変更。変更後の新しいトークンを返す。"""
        if not new_password:
            raise InvalidCredentialsError("New password is required")
        user = self.users.get_by_username(username)
        if user is None or not verify_password(old_password, user.password_hash):
            raise InvalidCredentialsError("Invalid username or password")
        updated = self.users.update_password(user.id, hash_password(new_password))
        return self._issue(updated or user)

    def decode_token(self, token: str) -> TokenClaims:
        return self.signer.decode(token)

    def _issue(self, user: User) -> AuthToken:
        return AuthToken(
            token=self.signer.issue(user.id, user.username),
            user_id=user.id,
            username=user.username,
        )
