from __future__ import annotations

from collections.abc import Callable, Iterator
from contextlib import contextmanager
from pathlib import Path

import pytest
from sqlalchemy import create_engine, event
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session, sessionmaker

import portfolio_cms.data.db as app_db
import portfolio_cms.data.models  # noqa: F401
from portfolio_cms.data.db import Base, init_db
from portfolio_cms.services import ContentStore


@pytest.fixture
def tmp_db(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Iterator[None]:
    """Point the application at a fresh temporary SQLite database."""
    db_path = tmp_path / "cms.db"
    monkeypatch.setenv("DB_URL", f"sqlite:///{db_path.as_posix()}")
    app_db.reset_engine()
    init_db()
    yield
    # Dispose engine to release connections
    app_db.reset_engine()


@pytest.fixture
def api_db(tmp_db: None) -> None:
    """Use a temporary SQLite DB for API tests."""


@pytest.fixture
def fail_updates() -> Iterator[Callable[..., None]]:
    """Make flushes of selected rows fail like a broken store.

    Call the returned function with a mapped class and an optional predicate
    on the row; every matching UPDATE raises ``OperationalError`` until the
    test ends.
    """
    installed: list[tuple[type, Callable]] = []

    def install(model: type, when: Callable[[object], bool] | None = None) -> None:
        def before_update(mapper, connection, target) -> None:
            if when is None or when(target):
                raise OperationalError("UPDATE", {}, Exception("simulated store failure"))

        event.listen(model, "before_update", before_update)
        installed.append((model, before_update))

    yield install

    for model, listener in installed:
        event.remove(model, "before_update", listener)


@pytest.fixture(autouse=True)
def _auto_api_db(request: pytest.FixtureRequest) -> None:
    """Automatically use the api_db fixture for tests in API test files."""
    # Check if test file name contains "api" (case-insensitive)
    test_file_path = Path(str(request.node.fspath))
    if "api" in test_file_path.stem.lower():
        request.getfixturevalue("api_db")


@pytest.fixture
def other_store(tmp_path: Path) -> Iterator[ContentStore]:
    """A content store bound to a second, separate SQLite database."""
    other_engine = create_engine(f"sqlite:///{(tmp_path / 'other.db').as_posix()}", future=True)
    Base.metadata.create_all(bind=other_engine)
    factory = sessionmaker(bind=other_engine, autoflush=False, expire_on_commit=False)

    @contextmanager
    def scope() -> Iterator[Session]:
        session = factory()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    yield ContentStore(session_scope=scope)
    other_engine.dispose()
