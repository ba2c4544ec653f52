# Copyright (C) 2024 Storefront Contributors
# SPDX-License-Identifier: GPL-3.0-or-later

"""Alembic revisions describe the same schema as the models."""

import importlib.util
from pathlib import Path

from sqlalchemy import UniqueConstraint

from storefront_server.models import User

VERSIONS = Path(__file__).resolve().parent.parent / "alembic" / "versions"


class RecordingOp:
    """Stands in for ``alembic.op`` and records schema operations."""

    def __init__(self):
        self.tables: dict[str, dict] = {}
        self.indexes: dict[str, dict] = {}

    def create_table(self, name, *columns):
        self.tables[name] = {c.name: c for c in columns}

    def create_index(self, name, table, columns, unique=False):
        self.indexes[name] = {"table": table, "columns": columns, "unique": unique}


def _load(filename: str):
    spec = importlib.util.spec_from_file_location(filename[:-3], VERSIONS / filename)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


def test_users_email_uniqueness_comes_from_index_only(monkeypatch):
    migration = _load("0001_initial_accounts.py")
    recorder = RecordingOp()
    monkeypatch.setattr(migration, "op", recorder)
    migration.upgrade()

    email = recorder.tables["users"]["email"]
    assert not email.unique
    assert recorder.indexes["ix_users_email"] == {"table": "users", "columns": ["email"], "unique": True}

    model_email = User.__table__.c.email
    assert model_email.unique and model_email.index
    model_indexes = {ix.name: ix.unique for ix in User.__table__.indexes}
    assert model_indexes["ix_users_email"] is True
    unique_constraints = [c for c in User.__table__.constraints if isinstance(c, UniqueConstraint)]
    assert not any("email" in c.columns for c in unique_constraints)
