"""Tests for the schema version store."""

import datetime

import pytest

from assetmanager.db.version import (
    VersionRecord,
    current_version,
    has_version_table,
    set_version,
    version_history,
)
from assetmanager.exceptions import InvalidArgumentError, QueryError, StatementError


@pytest.fixture
def version_db(db):
    db.execute("CREATE TABLE db_version (version INTEGER NOT NULL, date TEXT NOT NULL)")
    return db


def _row_count(db) -> int:
    return db.query_scalar("SELECT count(*) FROM db_version")


# ── current_version ─────────────────────────────────────────────

def test_fresh_database_is_version_zero(db):
    assert not has_version_table(db)
    assert current_version(db) == 0


def test_empty_table_is_version_zero(version_db):
    assert has_version_table(version_db)
    assert current_version(version_db) == 0


def test_latest_date_wins(version_db):
    set_version(version_db, 5, "2020-01-01")
    set_version(version_db, 2, "2021-06-30")
    assert current_version(version_db) == 2


def test_same_date_highest_version_wins(version_db):
    set_version(version_db, 3, "1997-08-20")
    set_version(version_db, 5, "1997-08-20")
    set_version(version_db, 4, "1997-08-20")
    assert current_version(version_db) == 5


def test_tie_break_only_among_latest_date(version_db):
    set_version(version_db, 9, "2019-01-01")
    set_version(version_db, 1, "2022-03-01")
    set_version(version_db, 2, "2022-03-01")
    assert current_version(version_db) == 2


# ── set_version ─────────────────────────────────────────────────

def test_set_version_defaults_to_today(version_db):
    set_version(version_db, 1)

    row = version_db.query_row("SELECT version, date FROM db_version")
    assert row["version"] == 1
    assert row["date"] == datetime.date.today().isoformat()


def test_set_version_accepts_date_objects(version_db):
    set_version(version_db, 1, datetime.date(1997, 8, 20))
    set_version(version_db, 2, datetime.datetime(1998, 1, 2, 13, 45))

    dates = [r.date for r in version_history(version_db)]
    assert dates == [datetime.date(1997, 8, 20), datetime.date(1998, 1, 2)]


def test_set_version_appends(version_db):
    set_version(version_db, 1, "2020-01-01")
    set_version(version_db, 1, "2020-01-01")
    assert _row_count(version_db) == 2


@pytest.mark.parametrize("version", [0, -1, -100])
def test_set_version_below_one_rejected(version_db, version):
    with pytest.raises(InvalidArgumentError):
        set_version(version_db, version)
    assert _row_count(version_db) == 0


@pytest.mark.parametrize("version", ["2", 1.5, True, None])
def test_set_version_non_integer_rejected(version_db, version):
    with pytest.raises(InvalidArgumentError):
        set_version(version_db, version)
    assert _row_count(version_db) == 0


@pytest.mark.parametrize("date", ["20-08-1997", "1997/08/20", "2023-02-30", "yesterday"])
def test_set_version_bad_date_rejected(version_db, date):
    with pytest.raises(InvalidArgumentError):
        set_version(version_db, 1, date)
    assert _row_count(version_db) == 0


def test_invalid_argument_is_value_error():
    assert issubclass(InvalidArgumentError, ValueError)


def test_set_version_without_table_propagates(db):
    with pytest.raises(StatementError):
        set_version(db, 1)


# ── version_history ─────────────────────────────────────────────

def test_history_without_table_is_empty(db):
    assert version_history(db) == []


def test_history_oldest_first(version_db):
    set_version(version_db, 2, "2021-01-01")
    set_version(version_db, 1, "2020-01-01")

    history = version_history(version_db)
    assert history == [
        VersionRecord(version=1, date=datetime.date(2020, 1, 1)),
        VersionRecord(version=2, date=datetime.date(2021, 1, 1)),
    ]


# ── malformed stored rows ───────────────────────────────────────

def test_non_integer_stored_version_is_query_error(version_db):
    version_db.execute("INSERT INTO db_version VALUES ('abc', '2999-01-01')")
    with pytest.raises(QueryError):
        current_version(version_db)


@pytest.mark.parametrize("row", [("abc", "2020-01-01"), (0, "2020-01-01"), (1, "last week")])
def test_malformed_history_row_is_query_error(version_db, row):
    version_db.execute(
        "INSERT INTO db_version (version, date) VALUES (:v, :d)", {"v": row[0], "d": row[1]},
    )
    with pytest.raises(QueryError):
        version_history(version_db)
