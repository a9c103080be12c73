"""Boundary parsing of raw transaction documents.

Documents arrive from the record store or from JSON imports as loosely-typed
mappings in the stored shape (see Transaction.to_dict). They are validated
here before any of them reach the aggregation tools.
"""

from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Iterable, List, Literal, Mapping

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from logger import get_logger
from models.category import is_valid_category
from models.transaction import Transaction

logger = get_logger("models.document")


class TransactionDocument(BaseModel):
    """A stored transaction document."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    owner_id: str = Field(alias="userId", min_length=1)
    amount: Decimal = Field(gt=0)
    description: str
    category: str
    date: datetime
    type: Literal["income", "expense"]

    @field_validator("description")
    @classmethod
    def description_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("description cannot be empty")
        return value

    @field_validator("date")
    @classmethod
    def date_is_aware(cls, value: datetime) -> datetime:
        # Naive timestamps are UTC
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value

    def to_transaction(self) -> Transaction:
        return Transaction(
            id=self.id,
            owner_id=self.owner_id,
            amount=self.amount,
            description=self.description,
            category=self.category,
            date=self.date,
            type=self.type,
        )


def parse_document(data: Mapping[str, Any]) -> Transaction:
    """Validate a single raw document into a Transaction.

    A category outside the set for the document's type is logged and kept.

    Args:
        data: Mapping in the stored document shape.

    Returns:
        Validated Transaction.

    Raises:
        ValidationError: If a required field is missing or invalid.
    """
    document = TransactionDocument.model_validate(data)
    if not is_valid_category(document.type, document.category):
        logger.warning(
            f"Transaction {document.id} has category '{document.category}' "
            f"which is not a known {document.type} category"
        )
    return document.to_transaction()


def parse_documents(documents: Iterable[Mapping[str, Any]]) -> List[Transaction]:
    """Validate a batch of raw documents, skipping malformed ones.

    Args:
        documents: Raw documents in the stored shape.

    Returns:
        List of valid Transactions, in input order.
    """
    transactions = []
    for index, data in enumerate(documents):
        try:
            transactions.append(parse_document(data))
        except ValidationError as e:
            doc_id = data.get("id") if isinstance(data, Mapping) else None
            logger.error(
                f"Skipping malformed transaction document #{index} "
                f"(id={doc_id}): {e.error_count()} validation error(s)"
            )
            logger.debug(str(e))
    return transactions
