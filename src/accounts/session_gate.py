"""Session Gate

データ系リクエストごとにトークンを検証し、ユーザーIDに解決する。
副作用は無い（読み取りのみ）。
"""

from __future__ import annotations

from typing import Optional

from src.worklog.exceptions import UnauthorizedError

from .credentials import TokenSigner
from .models import AuthenticatedUser
from .repository import UserRepository

BEARER_PREFIX = "Bearer "


class SessionGate:
    """トークン → ユーザーの解決。"""

    def __init__(self, users: UserRepository, signer: TokenSigner):
        self.users = users
        self.signer = signer

    @staticmethod
    def extract_token(authorization: Optional[str]) -> str:
        """`Bearer <token>` ヘッダー値または生のトークンからトークンを取り出す。"""
        value = (authorization or "").strip()
        if value.startswith(BEARER_PREFIX):
            value = value[len(BEARER_PREFIX):].strip()
        return value

    def authenticate(self, token: Optional[str]) -> AuthenticatedUser:
        """
        Raises:
            UnauthorizedError: トークンが無い・不正・期限切れ、またはユーザーが消えている場合
        """
        raw = self.extract_token(token)
        if not raw:
            raise UnauthorizedError("Authorization token is required")

        claims = self.signer.decode(raw)
        user = self.users.get(claims.user_id)
        if user is None:
            raise UnauthorizedError("User no longer exists")
        return AuthenticatedUser(id=user.id, username=user.username)
