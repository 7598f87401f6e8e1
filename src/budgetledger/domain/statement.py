"""Statement domain service."""

from datetime import date
from decimal import Decimal
from typing import Optional

from budgetledger.database.base import Database
from budgetledger.domain.entities import StatementModel, StatementTransaction
from budgetledger.domain.errors import NotFoundError, account_not_found, bucket_not_found


class StatementService:
    """Service for recording bank statement transactions."""

    def __init__(self, db: Database):
        """Initialize statement service.

        Args:
            db: Database instance
        """
        self.db = db

    def add_transaction(
        self,
        account_name: str,
        date: date,
        amount: Decimal,
        bucket_code: Optional[str] = None,
        description: Optional[str] = None,
        transaction_type: Optional[str] = None,
        reference1: Optional[str] = None,
        reference2: Optional[str] = None,
        reference3: Optional[str] = None,
    ) -> StatementTransaction:
        """Record a statement transaction.

        Args:
            account_name: Account the transaction was charged to
            date: Transaction date
            amount: Signed amount, debits negative
            bucket_code: Optional budget bucket the transaction belongs to
            description: Optional description
            transaction_type: Optional bank transaction type, used as the
                narrative when there is no description
            reference1: Optional reference field
            reference2: Optional reference field
            reference3: Optional reference field

        Returns:
            The stored statement transaction

        Raises:
            NotFoundError: If account or bucket doesn't exist
        """
        account = self.db.get_account(account_name)
        if account is None:
            raise NotFoundError(account_not_found(account_name))

        bucket = None
        if bucket_code is not None:
            bucket = self.db.get_bucket(bucket_code)
            if bucket is None:
                raise NotFoundError(bucket_not_found(bucket_code))

        transaction = StatementTransaction(
            date=date,
            amount=amount,
            account=account,
            bucket=bucket,
            description=description,
            transaction_type=transaction_type,
            reference1=reference1,
            reference2=reference2,
            reference3=reference3,
        )
        self.db.add_statement_transaction(transaction)
        return transaction

    def list_transactions(
        self, start_date: Optional[date] = None, end_date: Optional[date] = None
    ) -> list[StatementTransaction]:
        """List statement transactions in [start_date, end_date)."""
        return self.db.list_statement_transactions(start_date=start_date, end_date=end_date)

    def get_statement(self) -> StatementModel:
        """Return every stored transaction as a statement model."""
        return StatementModel(transactions=tuple(self.db.list_statement_transactions()))
