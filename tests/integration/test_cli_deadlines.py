import json
from pathlib import Path

from typer.testing import CliRunner

from admitdesk.cli.app import app
from admitdesk.db.repositories import Repository
from admitdesk.db.session import SessionLocal

runner = CliRunner()


def _write_rows(path: Path, rows: list[dict]) -> Path:
    path.write_text(json.dumps(rows), encoding="utf-8")
    return path


def _deadline_count() -> int:
    with SessionLocal() as db:
        return len(Repository(db).fetch_deadlines())


def test_import_upserts_valid_rows(tmp_path: Path) -> None:
    before = _deadline_count()
    file = _write_rows(
        tmp_path / "deadlines.json",
        [
            {"school_name": "Oxford Said", "round_name": "Round 1", "deadline_date": "2026-09-04"},
            {"school_name": "Wharton", "round_name": "Round 1", "deadline_date": "2026-09-10"},
        ],
    )

    result = runner.invoke(app, ["deadlines", "import", "--file", str(file)])

    assert result.exit_code == 0, result.output
    assert '"imported": 2' in result.output
    assert _deadline_count() == before + 1


def test_import_rejects_bad_rows_before_writing_any(tmp_path: Path) -> None:
    before = _deadline_count()
    file = _write_rows(
        tmp_path / "deadlines.json",
        [
            {"school_name": "Oxford Said", "round_name": "Round 1", "deadline_date": "2026-09-04"},
            {"school_name": "Cambridge Judge", "round_name": "Round 1", "deadline_date": "04/09/2026"},
            {"school_name": "IE Business School"},
        ],
    )

    result = runner.invoke(app, ["deadlines", "import", "--file", str(file)])

    assert result.exit_code == 2
    assert _deadline_count() == before
    with SessionLocal() as db:
        rows = Repository(db).fetch_deadlines()
    assert all(row.school_name != "Oxford Said" for row in rows)


def test_import_rejects_non_list_payload(tmp_path: Path) -> None:
    file = tmp_path / "deadlines.json"
    file.write_text('{"school_name": "Wharton"}', encoding="utf-8")

    result = runner.invoke(app, ["deadlines", "import", "--file", str(file)])

    assert result.exit_code == 2
