"""Base services container for dependency injection."""

from config import Config
from db.manager import DatabaseManager


class Services:
    """Container for all application services.

    Args:
        config: Application configuration object.
        db_manager: Optional database manager for testing. If provided, config
            is not used to open the database.
    """

    def __init__(self, config: Config, db_manager=None):
        self.config = config
        self.db_manager = db_manager or DatabaseManager(config)

        # Lazy import to avoid circular dependencies
        from services.transactions import TransactionService

        self.transactions = TransactionService(self.db_manager)

    def resolve_owner(self, owner_id=None) -> str:
        """Get the owner to act as: the given one, or the configured default."""
        return owner_id or self.config.owner_id
