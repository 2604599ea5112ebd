#!/usr/bin/env python3
"""
ワークログ管理CLI - ローカルDBに対してエントリと専題を操作する

Usage:
    python -m src.entries add-user --username NAME --password PASS
    python -m src.entries --user NAME list [--series-id ID] [--format json|text]
    python -m src.entries --user NAME add --content "本文" [--title "タイトル"] [--category Work] [--duration 30] [--series-id ID]
    python -m src.entries --user NAME delete --id ID
    python -m src.entries --user NAME series-list [--format json|text]
    python -m src.entries --user NAME series-add --title "タイトル" [--description "説明"]
    python -m src.entries --user NAME series-complete --id ID
    python -m src.entries --user NAME series-delete --id ID
    python -m src.entries --user NAME stats [--format json|text]
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Optional

from src.accounts import UserRepository, hash_password
from src.stats import compute_stats
from src.worklog.exceptions import DuplicateUserError

from .models import Category, Series, WorkItem, complete_series
from .repository import EntryRepository, SeriesRepository


def format_item_text(item: WorkItem) -> str:
    """アイテムをテキスト形式で整形"""
    title = item.title or "タイトルなし"
    series = f" | 専題: {item.series_id}" if item.series_id else ""
    return (
        f"[{item.id}] {item.date[:10]} | {item.category.value} | "
        f"{item.duration_minutes}分 | {title} | {item.content.strip()}{series}"
    )


def format_series_text(series: Series) -> str:
    """専題をテキスト形式で整形"""
    done = f" (完了: {series.completed_at[:10]})" if series.completed_at else ""
    return f"[{series.id}] {series.status.value} | {series.title} | {series.description}{done}"


def _print_json(data) -> None:
    print(json.dumps(data, ensure_ascii=False))


def cmd_add_user(users: UserRepository, username: str, password: str) -> int:
    """ユーザーを登録"""
    username = username.strip()
    if not username or not password:
        print("Error: ユーザー名とパスワードは必須です。", file=sys.stderr)
        return 1
    try:
        user = users.create(username, hash_password(password))
    except DuplicateUserError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    print(f"登録しました: {user.username} (id={user.id})")
    return 0


def cmd_list(repo: EntryRepository, user_id: int, series_id: Optional[str], output_format: str) -> int:
    """アイテム一覧を表示"""
    items = repo.list_by_series(user_id, series_id) if series_id else repo.list(user_id)
    if output_format == "json":
        _print_json([item.to_dict() for item in items])
    elif not items:
        print("記録はありません。")
    else:
        for item in items:
            print(format_item_text(item))
    return 0


def cmd_add(
    repo: EntryRepository,
    user_id: int,
    content: str,
    title: Optional[str],
    category: str,
    duration: int,
    series_id: Optional[str],
    date: Optional[str],
    output_format: str,
) -> int:
    """アイテムを追加"""
    if not content.strip() and not (title or "").strip():
        print("Error: 本文またはタイトルが必要です。", file=sys.stderr)
        return 1
    if duration < 0:
        print("Error: --duration は0以上で指定してください。", file=sys.stderr)
        return 1

    try:
        item = WorkItem.create(
            content,
            Category.parse(category),
            title=(title or "").strip() or None,
            duration_minutes=duration,
            series_id=series_id,
            date=date,
        )
    except ValueError as exc:
        print(f"Error: 不正な入力です: {exc}", file=sys.stderr)
        return 1

    saved = repo.upsert(user_id, item)
    if output_format == "json":
        _print_json(saved.to_dict())
    else:
        print(f"追加しました: {format_item_text(saved)}")
    return 0


def cmd_delete(repo: EntryRepository, user_id: int, item_id: str, output_format: str) -> int:
    """アイテムを削除（存在しなくても成功扱い）"""
    deleted = repo.delete(user_id, item_id)
    if output_format == "json":
        _print_json({"deleted": deleted, "id": item_id})
    else:
        print(f"削除しました: ID {item_id}" if deleted else f"ID {item_id} は存在しません（変更なし）")
    return 0


def cmd_series_list(repo: SeriesRepository, user_id: int, output_format: str) -> int:
    """専題一覧を表示"""
    series_list = repo.list(user_id)
    if output_format == "json":
        _print_json([s.to_dict() for s in series_list])
    elif not series_list:
        print("専題はありません。")
    else:
        for series in series_list:
            print(format_series_text(series))
    return 0


def cmd_series_add(
    repo: SeriesRepository, user_id: int, title: str, description: str, output_format: str
) -> int:
    """専題を追加"""
    if not title.strip():
        print("Error: タイトルは必須です。", file=sys.stderr)
        return 1
    saved = repo.upsert(user_id, Series.create(title.strip(), description.strip()))
    if output_format == "json":
        _print_json(saved.to_dict())
    else:
        print(f"追加しました: {format_series_text(saved)}")
    return 0


def cmd_series_complete(repo: SeriesRepository, user_id: int, series_id: str, output_format: str) -> int:
    """専題を完了状態にする"""
    series = repo.get(user_id, series_id)
    if series is None:
        print(f"Error: ID {series_id} の専題が見つかりません。", file=sys.stderr)
        return 1
    saved = repo.upsert(user_id, complete_series(series))
    if output_format == "json":
        _print_json(saved.to_dict())
    else:
        print(f"完了しました: {format_series_text(saved)}")
    return 0


def cmd_series_delete(repo: SeriesRepository, user_id: int, series_id: str, output_format: str) -> int:
    """専題を削除（アイテムは残る）"""
    deleted = repo.delete(user_id, series_id)
    if output_format == "json":
        _print_json({"deleted": deleted, "id": series_id})
    else:
        print(f"削除しました: ID {series_id}" if deleted else f"ID {series_id} は存在しません（変更なし）")
    return 0


def cmd_stats(repo: EntryRepository, user_id: int, output_format: str) -> int:
    """統計を表示"""
    stats = compute_stats(repo.list(user_id))
    if output_format == "json":
        _print_json(stats.to_dict())
        return 0

    total = stats.total_minutes
    print(f"合計: {total // 60}時間{total % 60}分")
    for bucket in stats.category_distribution:
        print(f"  {bucket['label']}: {bucket['value']}分")
    print("曜日別: " + " ".join(f"{b['name']}={b['minutes']}" for b in stats.daily_distribution))
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="ワークログ管理CLI - ローカルDBのエントリと専題を操作する",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--db-path",
        type=str,
        help="SQLiteデータベースファイルのパス（デフォルト: data/worklog.db）",
    )
    parser.add_argument("--user", help="操作対象のユーザー名")

    subparsers = parser.add_subparsers(dest="command", help="実行するコマンド", required=True)

    def add_format(sub: argparse.ArgumentParser) -> None:
        sub.add_argument(
            "--format",
            choices=["json", "text"],
            default="text",
            help="出力フォーマット（デフォルト: text）",
        )

    parser_user = subparsers.add_parser("add-user", help="ユーザーを登録")
    parser_user.add_argument("--username", required=True)
    parser_user.add_argument("--password", required=True)

    parser_list = subparsers.add_parser("list", help="記録一覧を表示")
    parser_list.add_argument("--series-id", help="専題IDで絞り込み")
    add_format(parser_list)

    parser_add = subparsers.add_parser("add", help="記録を追加")
    parser_add.add_argument("--content", default="", help="本文")
    parser_add.add_argument("--title", help="タイトル")
    parser_add.add_argument(
        "--category",
        default=Category.OTHER.value,
        help="分類（" + "/".join(c.value for c in Category) + "）",
    )
    parser_add.add_argument("--duration", type=int, default=0, help="所要時間（分）")
    parser_add.add_argument("--series-id", help="紐づける専題ID")
    parser_add.add_argument("--date", help="日時（ISO8601、省略時は現在）")
    add_format(parser_add)

    parser_delete = subparsers.add_parser("delete", help="記録を削除")
    parser_delete.add_argument("--id", required=True, help="削除する記録のID")
    add_format(parser_delete)

    parser_series_list = subparsers.add_parser("series-list", help="専題一覧を表示")
    add_format(parser_series_list)

    parser_series_add = subparsers.add_parser("series-add", help="専題を追加")
    parser_series_add.add_argument("--title", required=True)
    parser_series_add.add_argument("--description", default="")
    add_format(parser_series_add)

    parser_series_complete = subparsers.add_parser("series-complete", help="専題を完了にする")
    parser_series_complete.add_argument("--id", required=True)
    add_format(parser_series_complete)

    parser_series_delete = subparsers.add_parser("series-delete", help="専題を削除")
    parser_series_delete.add_argument("--id", required=True)
    add_format(parser_series_delete)

    parser_stats = subparsers.add_parser("stats", help="統計を表示")
    add_format(parser_stats)

    return parser


def main(argv: Optional[list[str]] = None) -> int:
    """CLIエントリポイント"""
    args = build_parser().parse_args(argv)
    db_path = Path(args.db_path) if args.db_path else None

    users = UserRepository(db_path=db_path)
    if args.command == "add-user":
        return cmd_add_user(users, args.username, args.password)

    if not args.user:
        print("Error: --user を指定してください。", file=sys.stderr)
        return 1
    user = users.get_by_username(args.user)
    if user is None:
        print(f"Error: ユーザー {args.user} が見つかりません。", file=sys.stderr)
        return 1

    entries = EntryRepository(db_path=db_path)
    series_repo = SeriesRepository(db_path=db_path)

    if args.command == "list":
        return cmd_list(entries, user.id, args.series_id, args.format)
    if args.command == "add":
        return cmd_add(
            entries,
            user.id,
            args.content,
            args.title,
            args.category,
            args.duration,
            args.series_id,
            args.date,
            args.format,
        )
    if args.command == "delete":
        return cmd_delete(entries, user.id, args.id, args.format)
    if args.command == "series-list":
        return cmd_series_list(series_repo, user.id, args.format)
    if args.command == "series-add":
        return cmd_series_add(series_repo, user.id, args.title, args.description, args.format)
    if args.command == "series-complete":
        return cmd_series_complete(series_repo, user.id, args.id, args.format)
    if args.command == "series-delete":
        return cmd_series_delete(series_repo, user.id, args.id, args.format)
    if args.command == "stats":
        return cmd_stats(entries, user.id, args.format)

    print(f"Error: 未知のコマンド: {args.command}", file=sys.stderr)
    return 1


if __name__ == "__main__":
    sys.exit(main())
