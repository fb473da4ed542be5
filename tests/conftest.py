import os
import tempfile

# db.py reads DATABASE_URL at import time
_DB_DIR = tempfile.mkdtemp(prefix="catalog-tests-")
os.environ.setdefault("DATABASE_URL", f"sqlite:///{os.path.join(_DB_DIR, 'catalog.db')}")

import pytest
from fastapi.testclient import TestClient

from catalog_service.db import Base, SessionLocal, engine
from catalog_service.main import app
from catalog_service.repository import ProductRepository
from catalog_service.service import ProductService


@pytest.fixture
def db():
    """Fresh tables for every test."""
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    yield session
    session.close()
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def repository(db):
    return ProductRepository(db)


@pytest.fixture
def service(repository):
    return ProductService(repository)


@pytest.fixture
def client(db):
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()

