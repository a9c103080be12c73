"""Transaction service for database operations."""

import threading
from datetime import timezone
from decimal import Decimal, InvalidOperation
from typing import Dict, List, Optional

from pydantic import ValidationError

from logger import get_logger
from models.category import DEFAULT_CATEGORIES, TRANSACTION_TYPES, categories_for
from models.document import parse_document, parse_documents
from models.transaction import Transaction
from services.subscriptions import Subscription

logger = get_logger("services.transactions")

# SQL Query Constants
_TRANSACTION_FIELDS = "id, owner_id, amount, description, category, transaction_type, date"

# Automatically generate placeholders from field count
_TRANSACTION_INSERT_PLACEHOLDERS = (
    f"({', '.join(['?'] * len(_TRANSACTION_FIELDS.split(',')))})"
)


class TransactionService:
    """Service for managing an owner's transactions.

    Every query and mutation is scoped to an owner. Subscribers receive a
    full snapshot of the owner's transactions after each create or delete.
    """

    def __init__(self, db_manager):
        """Initialize the transaction service.

        Args:
            db_manager: Database manager instance for database operations.
        """
        self.db_manager = db_manager
        self._subscriptions: List[Subscription] = []
        self._subscriptions_lock = threading.Lock()
        self._publish_locks: Dict[str, threading.Lock] = {}

    def create(
        self,
        owner_id: str,
        amount,
        description: str,
        category: Optional[str] = None,
        type: str = "expense",
    ) -> Transaction:
        """Record a new transaction for an owner.

        Args:
            owner_id: Owner creating the transaction.
            amount: Positive amount (Decimal, int, float or numeric string).
            description: Non-empty label.
            category: Category from the set for the type. Defaults to
                "general" for expenses and "other" for income.
            type: "income" or "expense".

        Returns:
            The created Transaction, with its new ID and creation time.

        Raises:
            ValueError: If any field is invalid.
        """
        if not owner_id:
            raise ValueError("owner_id cannot be empty")

        if type not in TRANSACTION_TYPES:
            raise ValueError(
                f"Invalid transaction type: {type}. "
                f"Expected one of {', '.join(TRANSACTION_TYPES)}"
            )

        try:
            amount = Decimal(str(amount))
        except InvalidOperation:
            raise ValueError(f"Invalid amount: {amount}")
        if not amount.is_finite() or amount <= 0:
            raise ValueError(f"Amount must be a positive number, got {amount}")

        description = (description or "").strip()
        if not description:
            raise ValueError("Description cannot be empty")

        if category is None:
            category = DEFAULT_CATEGORIES[type]
        allowed = categories_for(type)
        if category not in allowed:
            raise ValueError(
                f"Invalid {type} category: {category}. "
                f"Expected one of {', '.join(allowed)}"
            )

        transaction = Transaction.create(
            owner_id=owner_id,
            amount=amount,
            description=description,
            category=category,
            type=type,
        )

        with self.db_manager.connect() as conn:
            conn.execute(
                f"""
                INSERT INTO transactions ({_TRANSACTION_FIELDS})
                VALUES {_TRANSACTION_INSERT_PLACEHOLDERS}
                """,
                self._transaction_to_row(transaction),
            )
            conn.commit()

        logger.debug(f"Created {type} transaction {transaction.id} for {owner_id}")
        self.publish(owner_id)
        return transaction

    def bulk_create(self, transactions: List[Transaction]) -> int:
        """Insert already-built transactions in a single database transaction.

        Transactions whose ID already exists are skipped.

        Args:
            transactions: List of Transaction objects to insert.

        Returns:
            Number of transactions inserted.
        """
        if not transactions:
            return 0

        with self.db_manager.connect() as conn:
            before = conn.total_changes
            conn.executemany(
                f"""
                INSERT OR IGNORE INTO transactions ({_TRANSACTION_FIELDS})
                VALUES {_TRANSACTION_INSERT_PLACEHOLDERS}
                """,
                [self._transaction_to_row(t) for t in transactions],
            )
            conn.commit()
            inserted = conn.total_changes - before

        for owner_id in sorted({t.owner_id for t in transactions}):
            self.publish(owner_id)

        return inserted

    def delete(self, transaction_id: str, owner_id: str) -> bool:
        """Delete one of an owner's transactions.

        Args:
            transaction_id: ID of the transaction to delete.
            owner_id: Owner the transaction must belong to.

        Returns:
            True if a transaction was deleted, False if none matched.
        """
        with self.db_manager.connect() as conn:
            cursor = conn.execute(
                "DELETE FROM transactions WHERE id = ? AND owner_id = ?",
                (transaction_id, owner_id),
            )
            conn.commit()
            deleted = cursor.rowcount > 0

        if deleted:
            logger.debug(f"Deleted transaction {transaction_id} for {owner_id}")
            self.publish(owner_id)
        return deleted

    def find(self, transaction_id: str) -> Optional[Transaction]:
        """Get a single transaction by ID.

        Returns:
            Transaction object if found and well-formed, None otherwise.
        """
        with self.db_manager.connect() as conn:
            cursor = conn.execute(
                f"SELECT {_TRANSACTION_FIELDS} FROM transactions WHERE id = ?",
                (transaction_id,),
            )
            row = cursor.fetchone()

        if not row:
            return None

        try:
            return parse_document(self._row_to_document(row))
        except ValidationError as e:
            logger.error(f"Stored transaction {transaction_id} is malformed: {e}")
            return None

    def find_by_owner(self, owner_id: str) -> List[Transaction]:
        """Get all transactions for an owner.

        Malformed rows are logged and skipped.

        Returns:
            List of Transaction objects ordered by date (newest first).
        """
        with self.db_manager.connect() as conn:
            cursor = conn.execute(
                f"""
                SELECT {_TRANSACTION_FIELDS}
                FROM transactions
                WHERE owner_id = ?
                ORDER BY date DESC, id
                """,
                (owner_id,),
            )
            rows = cursor.fetchall()

        return parse_documents(self._row_to_document(row) for row in rows)

    def subscribe(self, owner_id: str) -> Subscription:
        """Open a live snapshot feed for an owner.

        The current snapshot is queued immediately. The caller must cancel
        the subscription when done with it.
        """
        subscription = Subscription(owner_id, on_cancel=self._detach)

        with self._owner_lock(owner_id):
            with self._subscriptions_lock:
                self._subscriptions.append(subscription)

            snapshot = self._load_snapshot(owner_id)
            if snapshot is not None:
                subscription.deliver(snapshot)
        return subscription

    def publish(self, owner_id: str) -> int:
        """Push the owner's current snapshot to their subscriptions.

        Subscriptions that already hold an identical snapshot are skipped.
        Publishes for the same owner are serialized, so a snapshot loaded
        earlier is never delivered after one loaded later.

        Returns:
            Number of subscriptions that received a new snapshot.
        """
        with self._owner_lock(owner_id):
            with self._subscriptions_lock:
                subscriptions = [
                    s for s in self._subscriptions if s.owner_id == owner_id
                ]
            if not subscriptions:
                return 0

            snapshot = self._load_snapshot(owner_id)
            if snapshot is None:
                return 0

            return sum(1 for s in subscriptions if s.deliver(snapshot))

    def cancel_subscriptions(self, owner_id: Optional[str] = None) -> int:
        """Cancel active subscriptions, optionally only those of one owner.

        Returns:
            Number of subscriptions cancelled.
        """
        with self._subscriptions_lock:
            subscriptions = [
                s
                for s in self._subscriptions
                if owner_id is None or s.owner_id == owner_id
            ]
        for subscription in subscriptions:
            subscription.cancel()
        return len(subscriptions)

    def subscription_count(self, owner_id: Optional[str] = None) -> int:
        """Count active subscriptions, optionally for a single owner."""
        with self._subscriptions_lock:
            return len(
                [
                    s
                    for s in self._subscriptions
                    if owner_id is None or s.owner_id == owner_id
                ]
            )

    def _owner_lock(self, owner_id: str) -> threading.Lock:
        with self._subscriptions_lock:
            if owner_id not in self._publish_locks:
                self._publish_locks[owner_id] = threading.Lock()
            return self._publish_locks[owner_id]

    def _detach(self, subscription: Subscription) -> None:
        with self._subscriptions_lock:
            if subscription in self._subscriptions:
                self._subscriptions.remove(subscription)

    def _load_snapshot(self, owner_id: str) -> Optional[List[Transaction]]:
        # Never raises; a failed load is logged and yields None
        try:
            return self.find_by_owner(owner_id)
        except Exception as e:
            logger.error(f"Failed to load transaction snapshot for {owner_id}: {e}")
            return None

    def _transaction_to_row(self, transaction: Transaction) -> tuple:
        return (
            transaction.id,
            transaction.owner_id,
            str(transaction.amount),
            transaction.description,
            transaction.category,
            transaction.type,
            transaction.date.astimezone(timezone.utc).isoformat(),
        )

    def _row_to_document(self, row) -> dict:
        """Convert a database row to the stored document shape."""
        return {
            "id": row["id"],
            "userId": row["owner_id"],
            "amount": str(row["amount"]),
            "description": row["description"],
            "category": row["category"],
            "date": row["date"],
            "type": row["transaction_type"],
        }
