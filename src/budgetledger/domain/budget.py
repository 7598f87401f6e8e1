"""Budget domain service."""

from datetime import date
from decimal import Decimal
from typing import Optional

from budgetledger.database.base import Database
from budgetledger.domain.entities import BucketKind, BudgetBucket, BudgetModel
from budgetledger.domain.errors import (
    ConflictError,
    NotFoundError,
    ValidationError,
    bucket_not_found,
)

DEFAULT_BUDGET_NAME = "Budget"


class BudgetService:
    """Service for managing budget buckets and budgeted amounts."""

    def __init__(self, db: Database):
        """Initialize budget service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_bucket(
        self, code: str, description: str = "", kind: BucketKind = BucketKind.SPENT_MONTHLY
    ) -> int:
        """Create a budget bucket.

        Args:
            code: Bucket code, e.g. "POWER". Codes are case-sensitive.
            description: Optional description
            kind: Bucket kind

        Returns:
            Bucket ID

        Raises:
            ValidationError: If code is blank
            ConflictError: If code already exists
        """
        if not code or not code.strip():
            raise ValidationError("Bucket code cannot be empty")
        if self.db.get_bucket(code) is not None:
            raise ConflictError(f"Budget bucket '{code}' already exists")
        return self.db.create_bucket(code=code, description=description, kind=kind)

    def require_bucket(self, code: str) -> BudgetBucket:
        bucket = self.db.get_bucket(code)
        if bucket is None:
            raise NotFoundError(bucket_not_found(code))
        return bucket

    def list_buckets(self) -> list[BudgetBucket]:
        return self.db.list_buckets()

    def set_bucket_active(self, code: str, active: bool) -> None:
        """Enable or disable a bucket. Disabled buckets are allocated nothing."""
        self.require_bucket(code)
        self.db.set_bucket_active(code, active)

    def set_expense(self, code: str, amount: Decimal) -> None:
        """Set the monthly budgeted amount for a bucket.

        Creates a default budget effective today if none exists.

        Raises:
            NotFoundError: If the bucket does not exist
            ValidationError: If amount is negative
        """
        self.require_bucket(code)
        if amount < 0:
            raise ValidationError(f"Budgeted amount cannot be negative: {amount}")
        if self.db.get_budget() is None:
            self.db.set_budget(DEFAULT_BUDGET_NAME, date.today())
        self.db.set_budget_expense(code, amount)

    def remove_expense(self, code: str) -> None:
        self.require_bucket(code)
        self.db.remove_budget_expense(code)

    def set_budget(self, name: str, effective_from: date) -> None:
        self.db.set_budget(name, effective_from)

    def get_budget(self) -> Optional[BudgetModel]:
        return self.db.get_budget()
