# tests/conftest.py
"""Shared fixtures: in-memory SQLite session and a few seeded authorities."""

import sys
import os
import tempfile
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

# Must be set before app.config is imported anywhere
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("PHOTO_DIR", tempfile.mkdtemp(prefix="gate_photos_"))
for _var in ("VISITOR_WEBHOOK_URL", "BUS_WEBHOOK_URL", "GOOGLE_SHEETS_API_KEY",
             "SUPABASE_URL", "SUPABASE_SERVICE_KEY", "API_KEY"):
    os.environ.pop(_var, None)

import pytest
from datetime import datetime
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.database import Base, create_tables
from app.models.authority import Authority


@pytest.fixture
def engine():
    engine = create_engine("sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool)
    create_tables(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db(engine):
    session = sessionmaker(autocommit=False, autoflush=False, bind=engine)()
    try:
        yield session
    finally:
        session.close()


def make_authority(db, name, designation="Staff", role="authority", is_active=True):
    authority = Authority(name=name, designation=designation, role=role,
                          is_active=is_active, created_at=datetime.utcnow())
    db.add(authority)
    db.commit()
    db.refresh(authority)
    return authority


@pytest.fixture
def staff(db):
    return make_authority(db, "Ravi Kumar", "Staff")


@pytest.fixture
def admin(db):
    return make_authority(db, "Principal Office", "Principal", role="admin")
