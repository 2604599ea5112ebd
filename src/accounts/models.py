from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True)
class User:
    """登録済みユーザー。パスワード以外は不変。"""

    id: int
    username: str
    password_hash: str
    created_at: str
    updated_at: str


@dataclass(slots=True, frozen=True)
class TokenClaims:
    """署名済みトークンから取り出した内容。"""

    user_id: int
    username: str
    expires_at: int  # UNIX秒


@dataclass(slots=True, frozen=True)
class AuthToken:
    """register/loginの結果。"""

    token: str
    user_id: int
    username: str


@dataclass(slots=True, frozen=True)
class AuthenticatedUser:
    """Session Gateを通過したリクエストのユーザー。"""

    id: int
    username: str
