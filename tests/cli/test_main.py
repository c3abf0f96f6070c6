"""Tests for the assetmanager CLI."""

import os
import tempfile

import pytest
from typer.testing import CliRunner

from assetmanager.cli.main import app
from assetmanager.db.database import Database
from assetmanager.db.version import current_version, version_history
from assetmanager.models import AssetType

runner = CliRunner()


@pytest.fixture
def cli_db():
    with tempfile.TemporaryDirectory() as tmp:
        yield os.path.join(tmp, "data", "assets.sqlite3")


def _invoke(cli_db, *args):
    return runner.invoke(app, ["--db", cli_db, *args])


# ── init / status / history ─────────────────────────────────────

def test_init_creates_and_upgrades(cli_db):
    result = _invoke(cli_db, "init")
    assert result.exit_code == 0, result.output
    assert "Schema version" in result.output

    with Database.open(cli_db) as db:
        assert current_version(db) == 1


def test_init_twice_adds_no_versions(cli_db):
    _invoke(cli_db, "init")
    result = _invoke(cli_db, "init")
    assert result.exit_code == 0, result.output
    assert "none" in result.output

    with Database.open(cli_db) as db:
        assert len(version_history(db)) == 1


def test_status_without_database_fails(cli_db):
    result = _invoke(cli_db, "status")
    assert result.exit_code == 1
    assert not os.path.exists(cli_db)


def test_status_after_init(cli_db):
    _invoke(cli_db, "init")
    result = _invoke(cli_db, "status")
    assert result.exit_code == 0, result.output
    assert "up to date" in result.output


def test_history(cli_db):
    result = _invoke(cli_db, "history")
    assert result.exit_code == 0, result.output
    assert "Schema versions" in result.output


def test_corrupt_database_fails(cli_db):
    os.makedirs(os.path.dirname(cli_db))
    with open(cli_db, "wb") as f:
        f.write(b"not sqlite at all " * 100)

    result = _invoke(cli_db, "init")
    assert result.exit_code == 1
    assert "Error" in result.output


# ── asset-type ──────────────────────────────────────────────────

def test_asset_type_add_and_list(cli_db):
    assert _invoke(cli_db, "asset-type", "add", "stocks").exit_code == 0
    assert _invoke(cli_db, "asset-type", "add", "bonds").exit_code == 0

    result = _invoke(cli_db, "asset-type", "list")
    assert result.exit_code == 0, result.output
    assert "stocks" in result.output
    assert "bonds" in result.output


def test_asset_type_list_empty(cli_db):
    result = _invoke(cli_db, "asset-type", "list")
    assert result.exit_code == 0, result.output
    assert "No asset types yet" in result.output


def test_asset_type_rename(cli_db):
    _invoke(cli_db, "asset-type", "add", "currncy")
    result = _invoke(cli_db, "asset-type", "rename", "1", "currency")
    assert result.exit_code == 0, result.output

    with Database.open(cli_db) as db:
        assert AssetType.read(1, db).name == "currency"


def test_asset_type_remove(cli_db):
    _invoke(cli_db, "asset-type", "add", "gold")
    result = _invoke(cli_db, "asset-type", "remove", "1")
    assert result.exit_code == 0, result.output

    with Database.open(cli_db) as db:
        assert AssetType.read_all(db) == []


def test_asset_type_missing_id_fails(cli_db):
    assert _invoke(cli_db, "asset-type", "rename", "42", "x").exit_code == 1
    assert _invoke(cli_db, "asset-type", "remove", "42").exit_code == 1


def test_asset_type_huge_id_fails_cleanly(cli_db):
    result = _invoke(cli_db, "asset-type", "rename", str(2 ** 64), "x")
    assert result.exit_code == 1
    assert "Error" in result.output
    assert not isinstance(result.exception, OverflowError)


# ── settings ────────────────────────────────────────────────────

def test_db_path_from_environment(monkeypatch, cli_db):
    from assetmanager.config import AssetManagerSettings
    from assetmanager.cli import context

    monkeypatch.setenv("ASSETMANAGER_DB_PATH", cli_db)
    monkeypatch.setattr(context, "settings", AssetManagerSettings())

    result = runner.invoke(app, ["init"])
    assert result.exit_code == 0, result.output
    assert os.path.exists(cli_db)
