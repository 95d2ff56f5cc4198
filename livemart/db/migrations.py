"""Lightweight schema migrations for SQLite databases."""

from __future__ import annotations

from sqlalchemy import text
from sqlalchemy.engine import Connection, Engine

ORDER_COLUMNS: dict[str, str] = {
    "delivery_status": "VARCHAR(32) NOT NULL DEFAULT 'pending'",
    "delivery_partner_id": "INTEGER NULL REFERENCES delivery_partners(id)",
    "coupon_code": "VARCHAR(32) NULL",
    "discount_amount": "NUMERIC(10, 2) NOT NULL DEFAULT 0",
    "status_updated_at": "DATETIME NULL",
    "confirmed_at": "DATETIME NULL",
    "preparing_at": "DATETIME NULL",
    "dispatched_at": "DATETIME NULL",
    "delivered_at": "DATETIME NULL",
    "cancelled_at": "DATETIME NULL",
}


def _sqlite_column_names(connection: Connection, table_name: str) -> set[str]:
    """Return column names for a SQLite table using PRAGMA table_info."""
    rows = connection.execute(text(f"PRAGMA table_info({table_name});")).mappings().all()
    return {str(row["name"]) for row in rows}


def _sqlite_index_names(connection: Connection, table_name: str) -> set[str]:
    """Return index names for a SQLite table using PRAGMA index_list."""
    rows = connection.execute(text(f"PRAGMA index_list({table_name});")).mappings().all()
    return {str(row["name"]) for row in rows}


def ensure_sqlite_schema(engine: Engine) -> None:
    """Apply lightweight schema updates for legacy SQLite databases."""
    if engine.dialect.name != "sqlite":
        return

    with engine.begin() as connection:
        table_rows = connection.execute(text("SELECT name FROM sqlite_master WHERE type='table';")).all()
        table_names: set[str] = {str(row[0]) for row in table_rows}

        if "orders" in table_names:
            orders_columns = _sqlite_column_names(connection, "orders")
            added_delivery_status = "delivery_status" not in orders_columns
            for column_name, ddl in ORDER_COLUMNS.items():
                if column_name not in orders_columns:
                    connection.execute(text(f"ALTER TABLE orders ADD COLUMN {column_name} {ddl}"))
            if added_delivery_status:
                # Legacy rows only tracked the commercial status.
                connection.execute(
                    text("UPDATE orders SET delivery_status = 'delivered' WHERE status = 'delivered'")
                )

            index_names = _sqlite_index_names(connection, "orders")
            if "ix_orders_delivery_status" not in index_names:
                connection.execute(
                    text("CREATE INDEX IF NOT EXISTS ix_orders_delivery_status ON orders(delivery_status)")
                )

        if "delivery_partners" in table_names:
            partner_columns = _sqlite_column_names(connection, "delivery_partners")
            if "is_available" not in partner_columns:
                connection.execute(
                    text("ALTER TABLE delivery_partners ADD COLUMN is_available BOOLEAN NOT NULL DEFAULT 1")
                )

        if "products" in table_names:
            product_columns = _sqlite_column_names(connection, "products")
            if "deleted_at" not in product_columns:
                connection.execute(text("ALTER TABLE products ADD COLUMN deleted_at DATETIME NULL"))
            if "is_active" not in product_columns:
                connection.execute(text("ALTER TABLE products ADD COLUMN is_active BOOLEAN NOT NULL DEFAULT 1"))
