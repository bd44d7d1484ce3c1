from __future__ import annotations

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from kinship.cli import app


@pytest.fixture()
def seeded_db(tmp_path: Path) -> Path:
    db = tmp_path / "kinship.db"
    result = CliRunner().invoke(app, ["seed", "--db", str(db)], catch_exceptions=False)
    assert result.exit_code == 0
    return db


def test_seed_reports_counts(tmp_path: Path) -> None:
    runner = CliRunner()
    db = tmp_path / "family.db"

    result = runner.invoke(app, ["seed", "--db", str(db), "--couples", "2", "--generations", "2"])

    assert result.exit_code == 0
    assert "Seeded 8 persons" in result.stdout
    assert db.exists()


def test_seed_refuses_populated_db(seeded_db: Path) -> None:
    result = CliRunner().invoke(app, ["seed", "--db", str(seeded_db)])
    assert result.exit_code == 1


def test_relatives_json(seeded_db: Path) -> None:
    result = CliRunner().invoke(app, ["relatives", "1", "--db", str(seeded_db), "--json"], catch_exceptions=False)

    assert result.exit_code == 0
    data = json.loads(result.stdout)
    assert data["person_id"] == 1
    assert data["count"] == 32
    assert data["relatives"]["1"]["type"] == "self"
    assert data["relatives"]["2"]["type"] == "spouse"


def test_relatives_max_degree(seeded_db: Path) -> None:
    result = CliRunner().invoke(
        app, ["relatives", "1", "--db", str(seeded_db), "--max-degree", "1", "--json"]
    )

    assert result.exit_code == 0
    data = json.loads(result.stdout)
    assert data["max_degree"] == 1
    assert {info["degree"] for info in data["relatives"].values()} == {0, 1}


def test_relatives_table(seeded_db: Path) -> None:
    result = CliRunner().invoke(app, ["relatives", "1", "--db", str(seeded_db)])

    assert result.exit_code == 0
    assert "Relatives of" in result.stdout


def test_unknown_person(seeded_db: Path) -> None:
    result = CliRunner().invoke(app, ["relatives", "999", "--db", str(seeded_db)])

    assert result.exit_code == 1
    assert "Person not found: 999" in result.stdout


def test_path_json(seeded_db: Path) -> None:
    result = CliRunner().invoke(app, ["path", "1", "2", "--db", str(seeded_db), "--json"])

    assert result.exit_code == 0
    data = json.loads(result.stdout)
    assert data["path"] == [1, 2]
    assert data["length"] == 1


def test_path_between_unrelated(tmp_path: Path) -> None:
    runner = CliRunner()
    db = tmp_path / "two.db"
    runner.invoke(app, ["seed", "--db", str(db), "--couples", "2", "--generations", "1"])

    as_json = runner.invoke(app, ["path", "1", "3", "--db", str(db), "--json"])
    as_text = runner.invoke(app, ["path", "1", "3", "--db", str(db)])

    assert json.loads(as_json.stdout) is None
    assert "No path found" in as_text.stdout


def test_relation_json(seeded_db: Path) -> None:
    result = CliRunner().invoke(app, ["relation", "1", "2", "--db", str(seeded_db), "--json"])

    assert result.exit_code == 0
    data = json.loads(result.stdout)
    assert data["type"] == "spouse"
    assert data["degree"] == 1
    assert data["description"] == "Spouse"


def test_relation_locale_from_env(seeded_db: Path) -> None:
    result = CliRunner().invoke(
        app,
        ["relation", "1", "2", "--db", str(seeded_db), "--json"],
        env={"KINSHIP_LOCALE": "ru"},
    )

    assert result.exit_code == 0
    assert json.loads(result.stdout)["description"] == "Супруг(а)"
