"""Domain model entities for budgetledger.

These are pure data classes representing the inputs of a reconciliation,
independent of database schema: accounts and their balances, the budget,
and the bank statement.
"""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Optional
from uuid import UUID, uuid4


class AccountType(str, Enum):
    """Kind of bank account."""

    CHEQUE = "cheque"
    SAVINGS = "savings"
    CREDIT_CARD = "credit_card"


class BucketKind(str, Enum):
    """Kind of budget bucket."""

    SPENT_MONTHLY = "spent_monthly"
    SAVED_UP_FOR = "saved_up_for"
    INCOME = "income"
    SURPLUS = "surplus"
    JOURNAL = "journal"


# Buckets whose statement transactions never represent real money leaving an account.
NON_SPENDING_KINDS = frozenset({BucketKind.SURPLUS, BucketKind.JOURNAL})


@dataclass(frozen=True)
class Account:
    """Bank account domain entity. Identity is the account name."""

    name: str
    account_type: AccountType = AccountType.CHEQUE
    is_salary_account: bool = False

    @property
    def is_credit_card(self) -> bool:
        return self.account_type == AccountType.CREDIT_CARD

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class BankBalance:
    """Balance of one bank account at a point in time."""

    account: Account
    balance: Decimal


@dataclass(frozen=True)
class BudgetBucket:
    """Budget bucket domain entity. Identity is the case-sensitive code."""

    code: str
    description: str = ""
    kind: BucketKind = BucketKind.SPENT_MONTHLY
    active: bool = True


@dataclass(frozen=True)
class Expense:
    """Budgeted monthly amount for one bucket."""

    bucket: BudgetBucket
    amount: Decimal


@dataclass(frozen=True)
class BudgetModel:
    """Budget domain entity."""

    name: str
    effective_from: date
    expenses: tuple[Expense, ...] = ()

    def expense_for(self, bucket_code: str) -> Optional[Expense]:
        """Return the expense for a bucket code, or None if not budgeted."""
        for expense in self.expenses:
            if expense.bucket.code == bucket_code:
                return expense
        return None


@dataclass(frozen=True)
class StatementTransaction:
    """Bank statement transaction domain entity."""

    date: date
    amount: Decimal
    account: Account
    bucket: Optional[BudgetBucket] = None
    description: Optional[str] = None
    transaction_type: Optional[str] = None
    reference1: Optional[str] = None
    reference2: Optional[str] = None
    reference3: Optional[str] = None
    id: UUID = field(default_factory=uuid4)

    @property
    def bucket_code(self) -> Optional[str]:
        return self.bucket.code if self.bucket is not None else None

    @property
    def references(self) -> tuple[Optional[str], Optional[str], Optional[str]]:
        return (self.reference1, self.reference2, self.reference3)


@dataclass(frozen=True)
class StatementModel:
    """An imported bank statement: every transaction across all accounts."""

    transactions: tuple[StatementTransaction, ...] = ()

    @property
    def all_transactions(self) -> tuple[StatementTransaction, ...]:
        return self.transactions

    def filter_by_date(
        self, start_date: date, end_date_excl: date
    ) -> list[StatementTransaction]:
        """Return transactions dated in the half-open range [start_date, end_date_excl)."""
        return [t for t in self.transactions if start_date <= t.date < end_date_excl]
