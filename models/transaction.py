from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import Decimal
from typing import Optional
import uuid


@dataclass
class Transaction:
    id: str  # assigned by the store on creation
    owner_id: str
    amount: Decimal  # always positive
    description: str
    category: str
    date: datetime  # creation instant, timezone-aware
    type: str  # 'income' or 'expense'

    @classmethod
    def create(
        cls,
        owner_id: str,
        amount: Decimal,
        description: str,
        category: str,
        type: str,
        date: Optional[datetime] = None,
    ) -> "Transaction":
        """Create a Transaction with a fresh ID, stamped with the current time."""
        return cls(
            id=uuid.uuid4().hex,
            owner_id=owner_id,
            amount=amount,
            description=description,
            category=category,
            date=date or datetime.now(timezone.utc),
            type=type,
        )

    @property
    def is_income(self) -> bool:
        return self.type == "income"

    @property
    def is_expense(self) -> bool:
        return self.type == "expense"

    def to_dict(self) -> dict:
        """Convert transaction to its stored document shape."""
        return {
            "id": self.id,
            "userId": self.owner_id,
            "amount": float(self.amount),
            "description": self.description,
            "category": self.category,
            "date": self.date.isoformat(),
            "type": self.type,
        }
