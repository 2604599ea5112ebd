"""
設定管理モジュール

関連クラス:
  - ollama_client.OllamaClient: Ollama API設定を使用
  - accounts.credentials.CredentialStore: トークン署名設定を使用
  - server.dependencies: サーバー起動時にこの設定を読み込む
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from .exceptions import ConfigurationError

logger = logging.getLogger(__name__)

# 開発用の既定シークレット（本番では必ず上書きすること）
DEV_SECRET_KEY = "worklog-dev-secret-change-me"


@dataclass
class OllamaConfig:
    """Ollama API設定"""

    host: str = "http://localhost:11434"
    model: str = "qwen3:8b"


@dataclass
class AuthConfig:
    """認証トークン設定"""

    secret_key: str = DEV_SECRET_KEY
    token_ttl_days: int = 30


@dataclass
class ServerConfig:
    """HTTPサーバー設定"""

    host: str = "0.0.0.0"
    port: int = 4000


@dataclass
class Config:
    """アプリケーション設定クラス"""

    # Ollama設定
    ollama: OllamaConfig = None  # type: ignore

    # 認証設定
    auth: AuthConfig = None  # type: ignore

    # サーバー設定
    server: ServerConfig = None  # type: ignore

    # ログ設定
    log_level: str = "INFO"
    log_file: str = "logs/worklog.log"

    # DB設定（Noneの場合はリポジトリ既定パス）
    db_path: Optional[str] = None

    # AI生成設定
    max_tokens: int = 4096
    temperature: float = 0.7

    def __post_init__(self):
        """デフォルト値の初期化"""
        if self.ollama is None:
            self.ollama = OllamaConfig()
        if self.auth is None:
            self.auth = AuthConfig()
        if self.server is None:
            self.server = ServerConfig()
        if self.auth.secret_key == DEV_SECRET_KEY:
            logger.warning("WORKLOG_SECRET_KEY is not set; using development secret")
        if self.auth.token_ttl_days <= 0:
            raise ConfigurationError(
                f"token_ttl_daysは正の整数である必要があります: {self.auth.token_ttl_days}"
            )

    @staticmethod
    def default_path() -> Path:
        """既定の設定ファイルパス（config/app_config.yaml）"""
        project_root = Path(__file__).parent.parent.parent
        return project_root / "config" / "app_config.yaml"

    @classmethod
    def load(cls, config_path: Optional[Path] = None) -> "Config":
        """YAMLファイルがあればそれを、なければ環境変数を使って設定を読み込む"""
        path = Path(config_path) if config_path else cls.default_path()
        if path.exists():
            return cls.from_yaml(path)
        logger.info(f"Config file not found ({path}); falling back to environment")
        return cls.from_env()

    @classmethod
    def from_yaml(cls, config_path: Optional[Path] = None) -> "Config":
        """YAMLファイルから設定を読み込む

        環境変数 WORKLOG_DB_PATH / WORKLOG_SECRET_KEY / OLLAMA_HOST / OLLAMA_MODEL /
        LOG_LEVEL / LOG_FILE が設定されている場合はYAMLの値より優先する。

        Args:
            config_path: 設定ファイルパス（省略時はconfig/app_config.yamlを使用）

        Returns:
            Config: 設定インスタンス

        Raises:
            ConfigurationError: YAMLの読み込みに失敗した場合
        """
        if config_path is None:
            config_path = cls.default_path()

        try:
            with open(config_path, "r", encoding="utf-8") as f:
                yaml_data: Dict[str, Any] = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            raise ConfigurationError(f"設定ファイルの読み込みに失敗しました: {e}") from e

        # YAML構造から設定を抽出
        ollama_data = yaml_data.get("ollama", {})
        auth_data = yaml_data.get("auth", {})
        server_data = yaml_data.get("server", {})
        log_data = yaml_data.get("log", {})
        ai_data = yaml_data.get("ai", {})
        storage_data = yaml_data.get("storage", {})

        return cls(
            ollama=OllamaConfig(
                host=os.getenv("OLLAMA_HOST", ollama_data.get("host", "http://localhost:11434")),
                model=os.getenv("OLLAMA_MODEL", ollama_data.get("model", "qwen3:8b")),
            ),
            auth=AuthConfig(
                secret_key=os.getenv(
                    "WORKLOG_SECRET_KEY", auth_data.get("secret_key") or DEV_SECRET_KEY
                ),
                token_ttl_days=int(auth_data.get("token_ttl_days", 30)),
            ),
            server=ServerConfig(
                host=server_data.get("host", "0.0.0.0"),
                port=int(server_data.get("port", 4000)),
            ),
            log_level=os.getenv("LOG_LEVEL", log_data.get("level", "INFO")),
            log_file=os.getenv("LOG_FILE", log_data.get("file", "logs/worklog.log")),
            db_path=os.getenv("WORKLOG_DB_PATH", storage_data.get("db_path")),
            max_tokens=ai_data.get("max_tokens", 4096),
            temperature=ai_data.get("temperature", 0.7),
        )

    @classmethod
    def from_env(cls) -> "Config":
        """環境変数から設定を読み込む"""
        return cls(
            ollama=OllamaConfig(
                host=os.getenv("OLLAMA_HOST", "http://localhost:11434"),
                model=os.getenv("OLLAMA_MODEL", "qwen3:8b"),
            ),
            auth=AuthConfig(
                secret_key=os.getenv("WORKLOG_SECRET_KEY", DEV_SECRET_KEY),
                token_ttl_days=int(os.getenv("WORKLOG_TOKEN_TTL_DAYS", "30")),
            ),
            server=ServerConfig(
                host=os.getenv("WORKLOG_HOST", "0.0.0.0"),
                port=int(os.getenv("PORT", "4000")),
            ),
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            log_file=os.getenv("LOG_FILE", "logs/worklog.log"),
            db_path=os.getenv("WORKLOG_DB_PATH"),
            max_tokens=int(os.getenv("MAX_TOKENS", "4096")),
            temperature=float(os.getenv("TEMPERATURE", "0.7")),
        )
