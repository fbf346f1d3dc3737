"""Tests for the SQLAlchemy-backed blob store."""

from __future__ import annotations

import logging

import pytest
from sqlalchemy.orm import sessionmaker

from lifestream.infrastructure.database import build_engine, initialize_database
from lifestream.infrastructure.models import BlobModel
from lifestream.infrastructure.storage import SqlBlobStore


@pytest.fixture
def engine():
    engine = build_engine("sqlite://")
    initialize_database(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def sql_store(engine):
    return SqlBlobStore(sessionmaker(bind=engine))


def test_missing_key_returns_default(sql_store):
    assert sql_store.load("nothing", default=[]) == []


def test_saved_value_is_loaded_back(sql_store):
    assert sql_store.save("lifestream_events", [{"id": "a", "title": "Café"}]) is True
    assert sql_store.save("lifestream_events", [{"id": "b"}]) is True

    assert sql_store.load("lifestream_events") == [{"id": "b"}]


def test_corrupt_blob_falls_back_to_default(engine, sql_store, caplog):
    with sessionmaker(bind=engine)() as session:
        session.add(BlobModel(key="lifestream_events", value="{not json"))
        session.commit()

    with caplog.at_level(logging.ERROR):
        assert sql_store.load("lifestream_events", default=[]) == []
    assert "not valid JSON" in caplog.text


def test_unserializable_value_is_not_saved(sql_store, caplog):
    with caplog.at_level(logging.ERROR):
        assert sql_store.save("bad", {"value": object()}) is False

    assert sql_store.load("bad") is None


def test_database_errors_are_logged_not_raised(caplog):
    engine = build_engine("sqlite://")
    store = SqlBlobStore(sessionmaker(bind=engine))

    with caplog.at_level(logging.ERROR):
        assert store.load("lifestream_events", default=[]) == []
        assert store.save("lifestream_events", []) is False

    assert "Failed to load blob" in caplog.text
    assert "Failed to save blob" in caplog.text
