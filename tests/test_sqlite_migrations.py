"""Tests for lightweight SQLite schema migrations."""

from pathlib import Path

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine

from livemart.db.migrations import ensure_sqlite_schema


def _build_test_engine(db_file: Path) -> Engine:
    return create_engine(
        f"sqlite:///{db_file}",
        connect_args={"check_same_thread": False},
    )


def _create_legacy_tables(engine: Engine) -> None:
    with engine.begin() as connection:
        connection.execute(
            text(
                """
                CREATE TABLE delivery_partners (
                    id INTEGER NOT NULL PRIMARY KEY,
                    name VARCHAR(255) NOT NULL,
                    phone VARCHAR(32) NOT NULL,
                    vehicle_type VARCHAR(16) NOT NULL
                )
                """
            )
        )
        connection.execute(
            text(
                """
                CREATE TABLE products (
                    id INTEGER NOT NULL PRIMARY KEY,
                    name VARCHAR(255) NOT NULL,
                    price NUMERIC(10, 2) NOT NULL,
                    stock INTEGER NOT NULL
                )
                """
            )
        )
        connection.execute(
            text(
                """
                CREATE TABLE orders (
                    id INTEGER NOT NULL PRIMARY KEY,
                    customer_id INTEGER NOT NULL,
                    total_price NUMERIC(10, 2) NOT NULL,
                    status VARCHAR(32) NOT NULL
                )
                """
            )
        )
        connection.execute(text("INSERT INTO orders (id, customer_id, total_price, status) VALUES (1, 1, 10, 'pending')"))
        connection.execute(text("INSERT INTO orders (id, customer_id, total_price, status) VALUES (2, 1, 20, 'delivered')"))
        connection.execute(text("INSERT INTO delivery_partners (id, name, phone, vehicle_type) VALUES (1, 'Ravi', '9', 'bike')"))


def _column_names(engine: Engine, table_name: str) -> set[str]:
    with engine.begin() as connection:
        rows = connection.execute(text(f"PRAGMA table_info({table_name});"))
        return {str(row[1]) for row in rows}


def test_ensure_sqlite_schema_adds_order_delivery_columns(tmp_path: Path) -> None:
    engine = _build_test_engine(tmp_path / "legacy_orders.db")
    _create_legacy_tables(engine)

    ensure_sqlite_schema(engine)

    columns = _column_names(engine, "orders")
    assert {"delivery_status", "delivery_partner_id", "confirmed_at", "delivered_at", "cancelled_at"} <= columns
    with engine.begin() as connection:
        rows = connection.execute(text("SELECT id, delivery_status FROM orders ORDER BY id")).all()
        index_rows = connection.execute(text("PRAGMA index_list(orders);")).mappings().all()
    assert [(row[0], row[1]) for row in rows] == [(1, "pending"), (2, "delivered")]
    assert "ix_orders_delivery_status" in {str(row["name"]) for row in index_rows}


def test_ensure_sqlite_schema_adds_partner_and_product_flags(tmp_path: Path) -> None:
    engine = _build_test_engine(tmp_path / "legacy_flags.db")
    _create_legacy_tables(engine)

    ensure_sqlite_schema(engine)

    assert "is_available" in _column_names(engine, "delivery_partners")
    assert {"deleted_at", "is_active"} <= _column_names(engine, "products")
    with engine.begin() as connection:
        available = connection.execute(text("SELECT is_available FROM delivery_partners WHERE id = 1")).scalar_one()
    assert available == 1


def test_ensure_sqlite_schema_is_idempotent(tmp_path: Path) -> None:
    engine = _build_test_engine(tmp_path / "legacy_twice.db")
    _create_legacy_tables(engine)

    ensure_sqlite_schema(engine)
    ensure_sqlite_schema(engine)

    assert "delivery_status" in _column_names(engine, "orders")


def test_ensure_sqlite_schema_skips_missing_tables(tmp_path: Path) -> None:
    engine = _build_test_engine(tmp_path / "empty.db")

    ensure_sqlite_schema(engine)

    assert _column_names(engine, "orders") == set()
