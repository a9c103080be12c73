"""Helper utilities for tests."""

from datetime import datetime, timezone
from decimal import Decimal
from pathlib import Path
import sqlite3
import time
from typing import Callable, Optional

from models.transaction import Transaction


def run_migrations(conn: sqlite3.Connection, migrations_dir: Path) -> None:
    """Run all SQL migrations in order.

    Args:
        conn: SQLite connection to run migrations against.
        migrations_dir: Path to directory containing .sql migration files.
    """
    for migration_file in sorted(migrations_dir.glob("*.sql")):
        conn.executescript(migration_file.read_text())
    conn.commit()


def make_transaction(
    amount="10.00",
    type: str = "expense",
    description: str = "Coffee",
    category: Optional[str] = None,
    date: Optional[datetime] = None,
    owner_id: str = "alice",
) -> Transaction:
    """Build an in-memory Transaction with sensible defaults.

    Naive dates are taken as local time, matching how the calendar reads them.
    """
    if category is None:
        category = "general" if type == "expense" else "salary"
    return Transaction.create(
        owner_id=owner_id,
        amount=Decimal(str(amount)),
        description=description,
        category=category,
        type=type,
        date=date or datetime(2025, 1, 15, 12, 0, tzinfo=timezone.utc),
    )


def wait_for(condition: Callable[[], bool], timeout: float = 5.0) -> bool:
    """Poll condition until it holds or timeout seconds pass."""
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if condition():
            return True
        time.sleep(0.02)
    return condition()
