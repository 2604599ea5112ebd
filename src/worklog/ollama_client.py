"""
Ollama APIクライアントモジュール

関連クラス:
  - config.Config: Ollama設定を提供
  - journal.summarizer.SummaryRequester: generate_text() を生成バックエンドとして使用
  - server.routes.generate: /api/generate のプロキシ先

注意: 週報・専題まとめはMarkdownテキストをそのまま返すため、
generate_text() は常にテキスト形式で呼び出します
"""

import json
import logging
from typing import Any, Dict, Optional, Union

import ollama

from .exceptions import GenerationFailedError


class OllamaClient:
    """Ollama APIクライアント"""

    def __init__(
        self,
        host: str = "http://localhost:11434",
        model: str = "qwen3:8b",
        temperature: float = 0.7,
        max_tokens: int = 4096,
    ):
        """
        初期化

        Args:
            host: OllamaサーバーのURL
            model: 既定のモデル名
            temperature: 生成温度（0.0-1.0）
            max_tokens: 最大トークン数
        """
        self.host = host
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.logger = logging.getLogger(__name__)

        # Ollamaクライアントの設定
        self.client = ollama.Client(host=host)

    def generate(
        self,
        prompt: str,
        system: Optional[str] = None,
        model: Optional[str] = None,
        return_json: bool = False,
    ) -> Union[Dict[str, Any], str]:
        """
        プロンプトから生成

        Args:
            prompt: 入力プロンプト
            system: システムプロンプト
            model: 使用するモデル名（Noneの場合は既定モデル）
            return_json: JSON形式でレスポンスを返すか

        Returns:
            JSON形式の辞書オブジェクト（return_json=Trueの場合）
            またはテキスト文字列（return_json=Falseの場合）

        Raises:
            GenerationFailedError: Ollamaへの接続失敗・応答エラー・JSON不正の場合
        """
        try:
            response = self.client.generate(
                model=model or self.model,
                prompt=prompt,
                system=system,
                stream=False,
                format="json" if return_json else "",
                options={
                    "temperature": self.temperature,
                    "num_predict": self.max_tokens,
                },
            )
            content = response["response"]
            if return_json:
                return json.loads(content)
            return content

        except json.JSONDecodeError as e:
            self.logger.error(f"JSON decode error: {e}")
            raise GenerationFailedError(f"Ollamaからの応答がJSON形式ではありません: {e}") from e
        except Exception as e:
            self.logger.error(f"Ollama generate error: {e}")
            raise GenerationFailedError(f"Ollamaでの生成に失敗しました: {e}") from e

    def generate_text(self, prompt: str, model: Optional[str] = None) -> str:
        """テキスト生成（SummaryRequesterの生成バックエンドインターフェース）"""
        return self.generate(prompt, model=model, return_json=False)  # type: ignore[return-value]
