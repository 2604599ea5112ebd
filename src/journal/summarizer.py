"""
SummaryRequester: LLMベースの週報・専題まとめ・自動分類

設計方針:
- 既に読み込み済みのワークアイテムのスナップショットだけを入力にする
- 1回の生成呼び出しで完結（リトライ・ストリーミング・タイムアウト設定なし）
- 生成バックエンドは generate_text(prompt, model=None) -> str を持つ任意のオブジェクト
  （サーバー側: OllamaClient / クライアント側: WorklogApiClient）

関連:
- src/worklog/ollama_client.py: LLM推論
- src/client/api_client.py: /api/generate 経由のプロキシ呼び出し
"""

import logging
import re
from datetime import date, datetime
from typing import Any, Optional, Sequence, Union

from src.entries.models import Category, Series, WorkItem
from src.worklog.exceptions import GenerationFailedError, NoContentError

logger = logging.getLogger(__name__)

DateLike = Union[date, datetime, str]

WEEKLY_REPORT_TEMPLATE = """あなたはプロの「個人ナレッジ管理・生活アシスタント」です。
以下はユーザーの今週（{start} - {end}）の記録です。これをもとに、日本語の週次振り返りレポートを作成してください。

**記録:**
{items}

**構成（Markdown）:**
1. **🌟 今週のハイライト**: 今週の状態を一文でまとめる。
2. **📝 知識とアウトプット**: 文章・ノート・学習カテゴリの成果を重点的に分析する。専題に属する内容があれば進捗を特に指摘する。
3. **💡 ひらめきと考察**: 価値のあるアイデアを抽出する。
4. **🌿 生活の状態**: 生活のバランスを簡潔に述べる。
5. **📊 来週への提案**: 短い行動提案。
"""

SERIES_CONCLUSION_TEMPLATE = """ユーザーは「{title}」という長期の専題・目標を完了しました。
説明: {description}

以下は、その過程でユーザーが記録したすべてのメモの断片です。
あなたは**プロの編集者**として、これらの断片をつなぎ合わせ、**まとめ記事**または**読後感**として整理してください。

**メモ素材:**
{items}

**生成要件:**
1. **タイトル**: 魅力的なタイトルを付ける。
2. **一貫性**: メモを羅列せず、論理的に一つの文章としてつなげる。
3. **深さ**: メモに表れた核心的な観点と考えの変化を抽出する。
4. **構成**: 導入・核心的な観点（箇条書き）・印象的な抜粋（あれば）・結びを含める。
5. **形式**: Markdown。
"""

SUGGEST_CATEGORY_TEMPLATE = """以下の内容を次のカテゴリのいずれか一つに分類してください: {categories}。
内容: "{text}"
カテゴリの英語名だけを返してください。
"""


def _format_date(value: DateLike) -> str:
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    return datetime.fromisoformat(value.replace("Z", "+00:00")).date().isoformat()


def format_report_line(item: WorkItem) -> str:
    """週報用の1行表現（分類・日付・タイトル・本文・時間）"""
    title_part = f"[タイトル: {item.title}] " if item.title else ""
    return (
        f"- [{item.category.value}] {_format_date(item.date)}: "
        f"{title_part}{item.content} ({item.duration_minutes} min)"
    )


def format_series_line(item: WorkItem) -> str:
    """専題まとめ用の1行表現（日付・タイトル・本文）"""
    title_part = f"[タイトル: {item.title}] " if item.title else ""
    return f"- {_format_date(item.date)}: {title_part}{item.content}"


def parse_category(text: Optional[str]) -> Category:
    """LLMの応答からカテゴリ名を1つ取り出す。見つからなければOTHER。"""
    if not text:
        return Category.OTHER
    for token in re.findall(r"[A-Za-z]+", text):
        category = Category.parse(token)
        if category is not Category.OTHER or token.lower() == "other":
            return category
    return Category.OTHER


class SummaryRequester:
    """LLMベースの要約・分類リクエスト"""

    def __init__(self, generator: Optional[Any] = None, model: Optional[str] = None):
        """
        初期化

        Args:
            generator: 生成バックエンド（テスト用にDI可能、省略時はOllamaClient）
            model: 使用するモデル名（Noneの場合はバックエンド既定）
        """
        if generator is None:
            from src.worklog.ollama_client import OllamaClient

            generator = OllamaClient()
        self.generator = generator
        self.model = model

    def _generate(self, prompt: str) -> str:
        try:
            text = self.generator.generate_text(prompt, model=self.model)
        except Exception as e:
            logger.error(f"Generation request failed: {e}")
            raise GenerationFailedError("AIサービスに接続できません。") from e

        if not text or not text.strip():
            raise GenerationFailedError("AIサービスから空の応答が返されました。")
        return text

    def build_weekly_prompt(self, items: Sequence[WorkItem], start_date: DateLike, end_date: DateLike) -> str:
        lines = "\n".join(format_report_line(item) for item in items)
        return WEEKLY_REPORT_TEMPLATE.format(
            start=_format_date(start_date), end=_format_date(end_date), items=lines
        )

    def build_series_prompt(self, series: Series, items: Sequence[WorkItem]) -> str:
        ordered = sorted(items, key=lambda item: item.timestamp)
        lines = "\n".join(format_series_line(item) for item in ordered)
        return SERIES_CONCLUSION_TEMPLATE.format(
            title=series.title, description=series.description, items=lines
        )

    def weekly_report(self, items: Sequence[WorkItem], start_date: DateLike, end_date: DateLike) -> str:
        """
        週次振り返りレポート生成

        Args:
            items: 対象期間のワークアイテム
            start_date: 期間の開始日
            end_date: 期間の終了日

        Returns:
            生成されたMarkdownテキスト

        Raises:
            NoContentError: itemsが空の場合（生成呼び出しは行わない）
            GenerationFailedError: 生成に失敗した場合
        """
        if not items:
            raise NoContentError("この期間には記録がありません。")
        logger.info(f"Generating weekly report for {len(items)} items")
        return self._generate(self.build_weekly_prompt(items, start_date, end_date))

    def series_conclusion(self, series: Series, items: Sequence[WorkItem]) -> str:
        """
        専題のまとめ記事生成（アイテムは日付昇順で時系列に並べる）

        Raises:
            NoContentError: itemsが空の場合
            GenerationFailedError: 生成に失敗した場合
        """
        if not items:
            raise NoContentError("この専題にはまだ記録がありません。")
        logger.info(f"Generating conclusion for series {series.id} ({len(items)} items)")
        return self._generate(self.build_series_prompt(series, items))

    def suggest_category(self, text: str) -> Category:
        """
        自動分類。失敗しても例外は投げずOTHERを返す。

        Args:
            text: 分類対象テキスト（タイトル + 本文）

        Returns:
            推定されたカテゴリ
        """
        if not text or not text.strip():
            return Category.OTHER

        categories = ", ".join(f"{c.value} ({c.label})" for c in Category)
        prompt = SUGGEST_CATEGORY_TEMPLATE.format(categories=categories, text=text.strip())
        try:
            response = self.generator.generate_text(prompt, model=self.model)
            return parse_category(response)
        except Exception as e:
            logger.warning(f"Category suggestion failed, falling back to Other: {e}")
            return Category.OTHER


def suggest_text(title: Optional[str], content: str) -> str:
    """自動分類に渡すテキスト（タイトルがあれば先頭に付ける）"""
    return f"{title}\n{content}" if title else content
