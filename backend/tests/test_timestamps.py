import os
import time

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")
os.environ.setdefault("SKIP_MIGRATIONS", "1")

from app import models  # noqa: E402,F401
from app.core.db import Base  # noqa: E402
from app.core.time import utcnow  # noqa: E402
from app.crud.affiliates import create_affiliate  # noqa: E402


@pytest.fixture
def db_session(tmp_path):
    db_url = f"sqlite:///{tmp_path}/timestamps_test.db"
    engine = create_engine(db_url, future=True)
    TestingSessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)
    Base.metadata.create_all(bind=engine)
    with TestingSessionLocal() as session:
        yield session


def test_utcnow_is_naive():
    assert utcnow().tzinfo is None


def test_created_at_set_on_insert(db_session):
    affiliate = create_affiliate(
        db_session,
        name="Priya Styles",
        referral_code="PRIYA10",
        commission_type="percentage",
        commission_value=5,
    )
    assert affiliate.created_at is not None
    assert affiliate.updated_at is not None


def test_updated_at_changes_on_update(db_session):
    affiliate = create_affiliate(
        db_session,
        name="Priya Styles",
        referral_code="PRIYA10",
        commission_type="percentage",
        commission_value=5,
    )
    original = affiliate.updated_at
    time.sleep(0.01)
    affiliate.status = "inactive"
    db_session.commit()
    db_session.refresh(affiliate)
    assert affiliate.updated_at > original
