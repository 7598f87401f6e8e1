"""Abstract database interface."""

from abc import ABC, abstractmethod
from typing import Optional
from datetime import date
from decimal import Decimal

# Import domain modules directly to avoid circular import through domain/__init__.py
from budgetledger.domain.entities import (
    Account,
    AccountType,
    BucketKind,
    BudgetBucket,
    BudgetModel,
    StatementTransaction,
)
from budgetledger.domain.ledger_book import LedgerBook
from budgetledger.domain.ledger_bucket import BucketAssignment
from budgetledger.domain.ledger_line import AutoMatchStamp, CommittedReconciliationLine
from budgetledger.domain.tasks import ToDoTask


class Database(ABC):
    """Abstract database interface for budgetledger."""

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        pass

    # Account operations
    @abstractmethod
    def create_account(
        self, name: str, account_type: AccountType, is_salary_account: bool = False
    ) -> int:
        """Create a new account. Returns account ID."""
        pass

    @abstractmethod
    def get_account(self, name: str) -> Optional[Account]:
        """Get account by name."""
        pass

    @abstractmethod
    def list_accounts(self) -> list[Account]:
        """List all accounts."""
        pass

    # Budget operations
    @abstractmethod
    def create_bucket(self, code: str, description: str, kind: BucketKind) -> int:
        """Create a budget bucket. Returns bucket ID."""
        pass

    @abstractmethod
    def get_bucket(self, code: str) -> Optional[BudgetBucket]:
        """Get budget bucket by code."""
        pass

    @abstractmethod
    def list_buckets(self) -> list[BudgetBucket]:
        """List all budget buckets."""
        pass

    @abstractmethod
    def set_bucket_active(self, code: str, active: bool) -> None:
        """Enable or disable a budget bucket."""
        pass

    @abstractmethod
    def set_budget(self, name: str, effective_from: date) -> None:
        """Create or rename the budget."""
        pass

    @abstractmethod
    def set_budget_expense(self, code: str, amount: Decimal) -> None:
        """Set the budgeted monthly amount for a bucket."""
        pass

    @abstractmethod
    def remove_budget_expense(self, code: str) -> None:
        """Stop budgeting for a bucket."""
        pass

    @abstractmethod
    def get_budget(self) -> Optional[BudgetModel]:
        """Get the budget, or None if no budget has been set."""
        pass

    # Statement operations
    @abstractmethod
    def add_statement_transaction(self, transaction: StatementTransaction) -> int:
        """Store a statement transaction. Returns row ID."""
        pass

    @abstractmethod
    def list_statement_transactions(
        self,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> list[StatementTransaction]:
        """List statement transactions ordered by date.

        Args:
            start_date: Optional inclusive start date filter
            end_date: Optional exclusive end date filter
        """
        pass

    # Ledger book operations
    @abstractmethod
    def add_bucket_assignment(self, assignment: BucketAssignment) -> None:
        """Store a ledger bucket funding assignment."""
        pass

    @abstractmethod
    def add_bucket_retirement(self, bucket_code: str, retired_on: date) -> None:
        """Record that a ledger bucket is no longer tracked."""
        pass

    @abstractmethod
    def load_ledger_book(self, name: str) -> LedgerBook:
        """Load the fully hydrated ledger book."""
        pass

    @abstractmethod
    def save_reconciliation(
        self, line: CommittedReconciliationLine, stamps: list[AutoMatchStamp]
    ) -> int:
        """Store a committed line and stamp matched transfers on the previous line.

        Both changes are written in one transaction. Returns line ID.
        """
        pass

    # Task operations
    @abstractmethod
    def add_task(self, task: ToDoTask) -> int:
        """Store a task. Returns task ID."""
        pass

    @abstractmethod
    def list_tasks(self) -> list[tuple[int, ToDoTask]]:
        """List tasks with their IDs in creation order."""
        pass

    @abstractmethod
    def get_task(self, task_id: int) -> Optional[ToDoTask]:
        """Get task by ID."""
        pass

    @abstractmethod
    def delete_task(self, task_id: int) -> None:
        """Delete a task."""
        pass
