"""ワークログCLI の動作テスト"""

import json
import subprocess
import sys
from pathlib import Path


def run_cli(args: list[str], db_path: Path) -> subprocess.CompletedProcess:
    """CLI実行ヘルパー"""
    cmd = [sys.executable, "-m", "src.entries", "--db-path", str(db_path)] + args
    return subprocess.run(
        cmd,
        capture_output=True,
        text=True,
        cwd=Path(__file__).parent.parent,
    )


def test_cli_requires_existing_user(tmp_path):
    db_path = tmp_path / "cli.db"
    result = run_cli(["--user", "ghost", "list"], db_path)
    assert result.returncode == 1
    assert "ghost" in result.stderr


def test_cli_item_and_series_flow(tmp_path):
    db_path = tmp_path / "cli.db"

    result = run_cli(["add-user", "--username", "alice", "--password", "pw"], db_path)
    assert result.returncode == 0

    result = run_cli(["--user", "alice", "list", "--format", "json"], db_path)
    assert result.returncode == 0
    assert json.loads(result.stdout) == []

    result = run_cli(
        ["--user", "alice", "series-add", "--title", "読書", "--format", "json"], db_path
    )
    assert result.returncode == 0
    series = json.loads(result.stdout)
    assert series["status"] == "active"

    result = run_cli(
        [
            "--user", "alice", "add",
            "--content", "第1章を読んだ",
            "--category", "learning",
            "--duration", "40",
            "--series-id", series["id"],
            "--format", "json",
        ],
        db_path,
    )
    assert result.returncode == 0
    item = json.loads(result.stdout)
    assert item["category"] == "Learning"
    assert item["durationMinutes"] == 40

    result = run_cli(["--user", "alice", "stats", "--format", "json"], db_path)
    stats = json.loads(result.stdout)
    assert stats["totalMinutes"] == 40

    result = run_cli(["--user", "alice", "series-complete", "--id", series["id"], "--format", "json"], db_path)
    assert json.loads(result.stdout)["status"] == "completed"

    result = run_cli(["--user", "alice", "series-delete", "--id", series["id"]], db_path)
    assert result.returncode == 0

    result = run_cli(["--user", "alice", "list", "--format", "json"], db_path)
    assert json.loads(result.stdout)[0]["seriesId"] == series["id"]

    result = run_cli(["--user", "alice", "delete", "--id", item["id"], "--format", "json"], db_path)
    assert json.loads(result.stdout) == {"deleted": True, "id": item["id"]}

    result = run_cli(["--user", "alice", "delete", "--id", item["id"], "--format", "json"], db_path)
    assert result.returncode == 0
    assert json.loads(result.stdout)["deleted"] is False


def test_cli_rejects_negative_duration(tmp_path):
    db_path = tmp_path / "cli.db"
    run_cli(["add-user", "--username", "alice", "--password", "pw"], db_path)
    result = run_cli(["--user", "alice", "add", "--content", "x", "--duration", "-1"], db_path)
    assert result.returncode == 1


def test_cli_add_user_rejects_duplicates_without_config_noise(tmp_path):
    db_path = tmp_path / "cli.db"

    result = run_cli(["add-user", "--username", "alice", "--password", "pw"], db_path)
    assert result.returncode == 0
    assert "alice" in result.stdout
    assert result.stderr == ""

    result = run_cli(["add-user", "--username", "alice", "--password", "other"], db_path)
    assert result.returncode == 1
    assert "alice" in result.stderr
