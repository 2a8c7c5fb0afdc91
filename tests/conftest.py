"""Pytest fixtures for testing"""

import pytest
from datetime import date
from decimal import Decimal
from typing import Generator
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from murabaha_gateway.api.main import create_app
from murabaha_gateway.api.dependencies import get_notary_client
from murabaha_gateway.infrastructure.clients.notary import NotaryClient
from murabaha_gateway.infrastructure.database.models import Base
from murabaha_gateway.infrastructure.database.session import get_db
from murabaha_gateway.domain.models import DealParameters


# Test database
TEST_DATABASE_URL = "sqlite:///./test.db"
engine = create_engine(TEST_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db() -> Generator[Session, None, None]:
    """Create test database and session"""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db: Session) -> TestClient:
    """Create FastAPI test client with test database and notarization disabled"""
    app = create_app()

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_notary_client] = lambda: NotaryClient(notary_url="")
    return TestClient(app)


@pytest.fixture
def scenario_a() -> DealParameters:
    """100k asset, 5% p.a., 12 months, 20% down, no deposit"""
    return DealParameters(
        asset_price=100000,
        annual_profit_rate=Decimal("0.05"),
        duration_months=12,
        down_payment_percentage=Decimal("0.20"),
        security_deposit=0,
    )


@pytest.fixture
def start_date() -> date:
    return date(2024, 1, 15)


@pytest.fixture
def deal_payload() -> dict:
    """Wire body for calculator and contract endpoints"""
    return {
        "asset_price": 100000,
        "annual_profit_rate": 0.05,
        "duration_months": 12,
        "down_payment_percentage": 0.20,
        "security_deposit": 0,
    }
