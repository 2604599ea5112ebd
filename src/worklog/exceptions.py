"""worklogのカスタム例外定義

認証・リポジトリ・AI生成・クライアント通信で使用される
例外クラスを定義します。サーバー側ではHTTPステータスへ変換されます。
"""

from typing import Optional


class WorklogError(Exception):
    """worklog基底例外"""

    pass


class AuthError(WorklogError):
    """認証関連のエラー"""

    pass


class UnauthorizedError(AuthError):
    """トークンが無い・不正・期限切れ、またはユーザーが存在しない"""

    pass


class DuplicateUserError(AuthError):
    """既に登録済みのユーザー名"""

    pass


class InvalidCredentialsError(AuthError):
    """ユーザー名またはパスワードが一致しない"""

    pass


class NotFoundError(WorklogError):
    """レコードが見つからない"""

    pass


class GenerationError(WorklogError):
    """AI生成関連のエラー"""

    pass


class GenerationFailedError(GenerationError):
    """生成エンドポイントのエラー・到達不能・非成功ステータス"""

    pass


class NoContentError(GenerationError):
    """入力が空のため生成を行わない"""

    pass


class ApiError(WorklogError):
    """クライアント側で受け取ったHTTPエラー"""

    def __init__(self, status_code: Optional[int], message: str):
        super().__init__(message)
        self.status_code = status_code
        self.message = message

    def __str__(self) -> str:
        if self.status_code is None:
            return self.message
        return f"[{self.status_code}] {self.message}"


class ConfigurationError(WorklogError):
    """設定エラー"""

    pass
