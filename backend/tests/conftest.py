import json
import os
from pathlib import Path

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

PROJECT_ROOT = Path(__file__).resolve().parents[2]
os.environ.setdefault("BRIJ_DATABASE_URL", "sqlite://")

from brij.db import Base, get_db
from brij.main import app


@pytest.fixture()
def db_session(tmp_path):
    db_path = tmp_path / "test.db"
    engine = create_engine(
        f"sqlite:///{db_path}",
        connect_args={"check_same_thread": False},
    )
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    Base.metadata.create_all(bind=engine)

    def _get_db():
        db = TestingSessionLocal()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = _get_db
    try:
        yield TestingSessionLocal()
    finally:
        app.dependency_overrides.clear()


@pytest.fixture()
def client(db_session):
    return TestClient(app)


@pytest.fixture()
def example_path():
    return PROJECT_ROOT / "rule_set.example.json"


@pytest.fixture()
def example_text(example_path):
    return example_path.read_text(encoding="utf-8")


@pytest.fixture()
def example_document(example_text):
    return json.loads(example_text)
