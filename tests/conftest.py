from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from app.db.base import init_db
from app.db.stable_map import StableOrderedMap
from app.schemas.post import Post


def make_session_factory(db_path):
    """
    Open-or-create a stable region in a SQLite file.
    Calling it twice on the same path simulates a process restart.
    """
    engine = create_engine(
        f"sqlite:///{db_path}",
        future=True,
        connect_args={"check_same_thread": False},
    )
    init_db(bind=engine)
    return sessionmaker(bind=engine, autoflush=False, autocommit=False)


@pytest.fixture
def db_path(tmp_path):
    return tmp_path / "posts.db"


@pytest.fixture
def session_factory(db_path):
    return make_session_factory(db_path)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def posts_map(db):
    return StableOrderedMap(db, Post)


def make_post(post_id: str, **overrides) -> Post:
    fields = {
        "id": post_id,
        "title": f"title {post_id}",
        "body": f"body {post_id}",
        "author": "ted",
        "createdAt": datetime(2024, 1, 1, tzinfo=timezone.utc),
    }
    fields.update(overrides)
    return Post(**fields)


class FakeClock:
    """
    Deterministic clock; each call advances by `step`.
    """

    def __init__(self, start=None, step=timedelta(seconds=1)):
        self.now = start or datetime(2024, 1, 1, tzinfo=timezone.utc)
        self.step = step
        self.calls = 0

    def __call__(self):
        current = self.now
        self.now = self.now + self.step
        self.calls += 1
        return current


class SequentialIds:
    def __init__(self, ids):
        self.ids = list(ids)

    def __call__(self):
        return self.ids.pop(0)


class FakePostsService:
    """
    Minimal posts service stand-in for router tests.
    """

    def __init__(self, list_posts_return=None, get_post_return=None):
        self._list_posts_return = list_posts_return or []
        self._get_post_return = get_post_return

    def create_post(self, payload):
        return self._get_post_return

    def list_posts(self):
        return self._list_posts_return

    def get_post(self, post_id: str):
        return self._get_post_return

    def update_post(self, post_id: str, payload):
        return self._get_post_return

    def delete_post(self, post_id: str):
        return self._get_post_return
