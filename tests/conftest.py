import os
from pathlib import Path

import pytest
from fastapi.testclient import TestClient
from alembic import command
from alembic.config import Config
from sqlalchemy.orm import sessionmaker

from app.main import create_app
from app.sitescope.core.metrics import metrics
from app.sitescope.db.session import build_engine, get_db
from tests.db_utils import ScratchPostgresDatabase


def _run_migrations(database_url: str):
    config = Config("alembic.ini")
    config.set_main_option("sqlalchemy.url", database_url)
    command.upgrade(config, "head")


@pytest.fixture()
def database_url(tmp_path: Path):
    database_url = os.getenv("DATABASE_URL", "")
    scratch = None

    if database_url.startswith("postgres"):
        scratch = ScratchPostgresDatabase(database_url)
        database_url = scratch.create()
    else:
        db_path = tmp_path / "test.db"
        database_url = f"sqlite+pysqlite:///{db_path}"

    _run_migrations(database_url)
    yield database_url

    if scratch is not None:
        scratch.drop()


@pytest.fixture()
def session_factory(database_url: str):
    engine = build_engine(database_url)
    yield sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)
    engine.dispose()


@pytest.fixture()
def client(session_factory):
    metrics.reset()
    app = create_app()

    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as client:
        yield client


@pytest.fixture()
def db_session(session_factory):
    db = session_factory()
    try:
        yield db
    finally:
        db.close()
