"""Shared test fixtures — throwaway database files."""

from __future__ import annotations

import os
import tempfile

import pytest

from assetmanager.db.database import Database
from assetmanager.migrations.runner import upgrade


@pytest.fixture
def db_path():
    fd, path = tempfile.mkstemp(suffix=".sqlite3")
    os.close(fd)
    yield path
    os.unlink(path)


@pytest.fixture
def db(db_path):
    database = Database.open(db_path)
    yield database
    database.close()


@pytest.fixture
def upgraded_db(db):
    assert upgrade(db)
    return db
