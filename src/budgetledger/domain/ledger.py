"""Ledger book domain service."""

from datetime import date
from decimal import Decimal

from budgetledger.database.base import Database
from budgetledger.domain.errors import NotFoundError, account_not_found, bucket_not_found
from budgetledger.domain.ledger_book import LedgerBook
from budgetledger.domain.ledger_bucket import BucketAssignment

DEFAULT_BOOK_NAME = "Ledger Book"


class LedgerBookService:
    """Service for the ledger book and the buckets it tracks."""

    def __init__(self, db: Database, book_name: str = DEFAULT_BOOK_NAME):
        """Initialize ledger book service.

        Args:
            db: Database instance
            book_name: Display name of the ledger book
        """
        self.db = db
        self.book_name = book_name

    def load_book(self) -> LedgerBook:
        return self.db.load_ledger_book(self.book_name)

    def track_bucket(
        self,
        bucket_code: str,
        account_name: str,
        effective_from: date,
        opening_balance: Decimal = Decimal("0"),
    ) -> BucketAssignment:
        """Start tracking a budget bucket in the ledger book.

        Args:
            bucket_code: Budget bucket code
            account_name: Account the bucket's funds are kept in
            effective_from: Date tracking starts
            opening_balance: Funds already set aside for the bucket

        Returns:
            The new bucket assignment

        Raises:
            NotFoundError: If the bucket or account doesn't exist
            ConflictError: If the bucket is already tracked
        """
        account = self._require_account(account_name)
        if self.db.get_bucket(bucket_code) is None:
            raise NotFoundError(bucket_not_found(bucket_code))

        book = self.load_book()
        assignment = book.track_bucket(bucket_code, account, effective_from, opening_balance)
        self.db.add_bucket_assignment(assignment)
        return assignment

    def move_bucket(self, bucket_code: str, account_name: str, effective_from: date) -> BucketAssignment:
        """Keep a tracked bucket's funds in a different account from a date onwards."""
        account = self._require_account(account_name)
        book = self.load_book()
        assignment = book.move_bucket(bucket_code, account, effective_from)
        self.db.add_bucket_assignment(assignment)
        return assignment

    def retire_bucket(self, bucket_code: str, retired_on: date) -> None:
        """Stop tracking a bucket in future reconciliations."""
        book = self.load_book()
        book.retire_bucket(bucket_code, retired_on)
        self.db.add_bucket_retirement(bucket_code, retired_on)

    def validate(self) -> list[str]:
        """Validate the stored ledger book. Returns a list of problems, empty if valid."""
        messages: list[str] = []
        self.load_book().validate(messages)
        return messages

    def _require_account(self, account_name: str):
        account = self.db.get_account(account_name)
        if account is None:
            raise NotFoundError(account_not_found(account_name))
        return account
