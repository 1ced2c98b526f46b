"""Lightweight column backfill for databases created by older releases."""

from __future__ import annotations

import logging

from sqlalchemy import inspect, text
from sqlalchemy.engine import Engine

logger = logging.getLogger(__name__)

# table -> [(column, DDL fragment)]
LEGACY_COLUMNS: dict[str, list[tuple[str, str]]] = {
    "orders": [
        ("shipping_cost", "NUMERIC(10, 2) NOT NULL DEFAULT 5.00"),
        ("address_id", "INTEGER NULL REFERENCES addresses(id) ON DELETE SET NULL"),
    ],
    "order_items": [
        ("product_name", "VARCHAR(255) NULL"),
    ],
}


def ensure_legacy_columns(engine: Engine) -> list[str]:
    """Add order columns missing from tables created before addresses and shipping existed.

    Returns the ``table.column`` names that were added.
    """
    inspector = inspect(engine)
    table_names = set(inspector.get_table_names())
    added: list[str] = []

    with engine.begin() as connection:
        for table_name, columns in LEGACY_COLUMNS.items():
            if table_name not in table_names:
                continue
            existing = {column["name"] for column in inspector.get_columns(table_name)}
            for column_name, ddl in columns:
                if column_name in existing:
                    continue
                connection.execute(text(f"ALTER TABLE {table_name} ADD COLUMN {column_name} {ddl}"))
                added.append(f"{table_name}.{column_name}")
                logger.info("[DB] Added legacy column %s.%s", table_name, column_name)
    return added
