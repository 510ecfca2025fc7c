# tests/conftest.py
from collections.abc import Iterator
from datetime import datetime, timedelta

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import Session
from sqlalchemy.pool import StaticPool

from sorting.core.config import settings
from sorting.query import Query
from tests.factories.models import Base, Widget
from tests.factories.things import Thing, make_things, shuffled_things


@pytest.fixture
def things() -> Query[Thing]:
    return Query(make_things(100))


@pytest.fixture
def shuffled() -> Query[Thing]:
    return Query(shuffled_things(100))


@pytest.fixture(autouse=True)
def _default_policy(monkeypatch):
    # tests that need another policy patch it explicitly
    monkeypatch.setattr(settings, "duplicate_policy", "drop")
    monkeypatch.setattr(settings, "sort_param", "sort")


@pytest.fixture
def session() -> Iterator[Session]:
    engine = create_engine(
        "sqlite+pysqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    base = datetime(2024, 1, 1)
    with Session(engine) as s:
        s.add_all(
            [
                Widget(id=i, name=f"w{(i % 3)}", created_at=base + timedelta(days=i % 5))
                for i in range(1, 21)
            ]
        )
        s.commit()
        yield s
    engine.dispose()
