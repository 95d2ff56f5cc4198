"""Shared fixtures: a file-backed SQLite database per test and small factories."""

from collections.abc import Callable, Generator
from decimal import Decimal
from pathlib import Path

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

import livemart.main as main_module
from livemart.core.security import get_password_hash
from livemart.db import session as db_session
from livemart.db.base import Base
from livemart.main import app
from livemart.models import DeliveryPartner, Product, User


def _build_test_engine(db_file: Path) -> Engine:
    return create_engine(
        f"sqlite:///{db_file}",
        connect_args={"check_same_thread": False},
    )


@pytest.fixture
def session_local(tmp_path: Path) -> sessionmaker:
    engine = _build_test_engine(tmp_path / "livemart_test.db")
    Base.metadata.create_all(bind=engine)
    yield sessionmaker(autocommit=False, autoflush=False, bind=engine)
    engine.dispose()


@pytest.fixture
def db(session_local: sessionmaker) -> Generator[Session, None, None]:
    session: Session = session_local()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(session_local: sessionmaker, monkeypatch) -> Generator[TestClient, None, None]:
    engine = session_local.kw["bind"]
    monkeypatch.setattr(db_session, "engine", engine)
    monkeypatch.setattr(db_session, "SessionLocal", session_local)
    monkeypatch.setattr(main_module, "engine", engine)
    monkeypatch.setattr(main_module, "SessionLocal", session_local)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def make_user(db: Session) -> Callable[..., User]:
    def _make(email: str, role: str = "CUSTOMER", password: str = "secret123") -> User:
        user = User(
            username=email,
            email=email,
            password_hash=get_password_hash(password),
            role=role,
            is_active=True,
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    return _make


@pytest.fixture
def make_product(db: Session) -> Callable[..., Product]:
    def _make(name: str = "Rice 5kg", price: str = "100.00", stock: int = 10) -> Product:
        product = Product(name=name, price=Decimal(price), stock=stock, is_active=True)
        db.add(product)
        db.commit()
        db.refresh(product)
        return product

    return _make


@pytest.fixture
def make_partner(db: Session) -> Callable[..., DeliveryPartner]:
    def _make(name: str = "Ravi", is_available: bool = True, user: User | None = None) -> DeliveryPartner:
        partner = DeliveryPartner(
            user_id=user.id if user is not None else None,
            name=name,
            phone="9000000000",
            vehicle_type="bike",
            is_available=is_available,
        )
        db.add(partner)
        db.commit()
        db.refresh(partner)
        return partner

    return _make
