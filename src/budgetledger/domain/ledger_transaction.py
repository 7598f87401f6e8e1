"""Ledger transactions: one monetary movement inside a bucket for one period.

A ledger transaction is a tagged record. ``kind`` says which variant it is and
every rule that depends on the variant switches on it explicitly.
"""

from dataclasses import dataclass, field, replace
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Optional
from uuid import UUID, uuid4

from budgetledger.domain.entities import Account
from budgetledger.domain.errors import ValidationError, invalid_amount_for_kind

BUDGETED_AMOUNT_NARRATIVE = "Budgeted Amount"
TRANSFER_REQUIRED_NARRATIVE = (
    "Budget amount must be transferred into this account with a bank transfer, "
    "use the reference number for the transfer."
)
DISABLED_BUCKET_NARRATIVE = "Warning! Bucket has been disabled."
OPENING_BALANCE_NARRATIVE = "Opening balance"


class LedgerTransactionKind(str, Enum):
    """Variant tag for ledger transactions."""

    OPENING_BALANCE = "opening_balance"
    STATEMENT_CREDIT = "statement_credit"
    STATEMENT_DEBIT = "statement_debit"
    BUDGET_ALLOCATION = "budget_allocation"
    BUDGET_ALLOCATION_WITH_TRANSFER = "budget_allocation_with_transfer"
    BALANCE_ADJUSTMENT = "balance_adjustment"


@dataclass(frozen=True)
class LedgerTransaction:
    """Ledger transaction domain entity.

    Amounts are signed: credits are positive and debits are negative.
    """

    kind: LedgerTransactionKind
    amount: Decimal
    narrative: str = ""
    date: Optional[date] = None
    auto_match_reference: Optional[str] = None
    account: Optional[Account] = None
    id: UUID = field(default_factory=uuid4)

    def __post_init__(self):
        problem = sign_problem(self)
        if problem is not None:
            raise ValidationError(problem)

    @property
    def credit(self) -> Decimal:
        """Credit magnitude, zero for debits."""
        return self.amount if self.amount > 0 else Decimal("0")

    @property
    def debit(self) -> Decimal:
        """Debit magnitude as a positive number, zero for credits."""
        return -self.amount if self.amount < 0 else Decimal("0")

    @property
    def is_carry(self) -> bool:
        """True for balances carried in rather than activity in the period."""
        return self.kind == LedgerTransactionKind.OPENING_BALANCE

    def __str__(self) -> str:
        return (
            f"{self.kind.value} ({self.amount:,.2f} {self.narrative} "
            f"{self.auto_match_reference or ''} {self.id})"
        )


def sign_problem(txn: LedgerTransaction) -> Optional[str]:
    """Return a message if the amount does not suit the variant, else None."""
    kind = txn.kind
    amount = txn.amount
    if kind == LedgerTransactionKind.OPENING_BALANCE:
        ok = True
    elif kind == LedgerTransactionKind.STATEMENT_CREDIT:
        ok = amount >= 0
    elif kind == LedgerTransactionKind.STATEMENT_DEBIT:
        ok = amount < 0
    elif kind == LedgerTransactionKind.BUDGET_ALLOCATION:
        ok = amount >= 0
    elif kind == LedgerTransactionKind.BUDGET_ALLOCATION_WITH_TRANSFER:
        if not txn.auto_match_reference or not txn.auto_match_reference.strip():
            return "A budget allocation requiring a transfer must carry an auto-match reference"
        ok = amount >= 0
    elif kind == LedgerTransactionKind.BALANCE_ADJUSTMENT:
        if amount == 0:
            return "The balance adjustment amount cannot be zero."
        ok = True
    else:
        raise ValueError(f"Unknown ledger transaction kind: {kind!r}")

    if not ok:
        return invalid_amount_for_kind(kind.value, amount)
    return None


def opening_balance(amount: Decimal, when: date) -> LedgerTransaction:
    """Create a carried-in starting balance for a newly tracked bucket."""
    return LedgerTransaction(
        kind=LedgerTransactionKind.OPENING_BALANCE,
        amount=amount,
        narrative=OPENING_BALANCE_NARRATIVE,
        date=when,
    )


def from_statement(
    transaction_id: UUID, amount: Decimal, narrative: str, when: date
) -> LedgerTransaction:
    """Create a ledger transaction mirroring a statement transaction."""
    kind = (
        LedgerTransactionKind.STATEMENT_DEBIT
        if amount < 0
        else LedgerTransactionKind.STATEMENT_CREDIT
    )
    return LedgerTransaction(
        kind=kind, amount=amount, narrative=narrative, date=when, id=transaction_id
    )


def budget_allocation(
    amount: Decimal,
    when: date,
    narrative: str = BUDGETED_AMOUNT_NARRATIVE,
    auto_match_reference: Optional[str] = None,
) -> LedgerTransaction:
    """Create a budgeted allocation, with a transfer reference when one is given."""
    kind = (
        LedgerTransactionKind.BUDGET_ALLOCATION_WITH_TRANSFER
        if auto_match_reference
        else LedgerTransactionKind.BUDGET_ALLOCATION
    )
    return LedgerTransaction(
        kind=kind,
        amount=amount,
        narrative=narrative,
        date=when,
        auto_match_reference=auto_match_reference,
    )


def balance_adjustment(
    amount: Decimal, narrative: str, account: Optional[Account] = None
) -> LedgerTransaction:
    """Create a manual correction to a line's bank balances."""
    return LedgerTransaction(
        kind=LedgerTransactionKind.BALANCE_ADJUSTMENT,
        amount=amount,
        narrative=narrative,
        account=account,
    )


def manual_transaction(amount: Decimal, narrative: str, when: date) -> LedgerTransaction:
    """Create a user-entered credit or debit against a ledger bucket."""
    kind = (
        LedgerTransactionKind.STATEMENT_DEBIT
        if amount < 0
        else LedgerTransactionKind.STATEMENT_CREDIT
    )
    return LedgerTransaction(kind=kind, amount=amount, narrative=narrative, date=when)


def stamped(txn: LedgerTransaction, new_id: UUID, reference: str) -> LedgerTransaction:
    """Return a copy of txn with a new id and auto-match reference."""
    return replace(txn, id=new_id, auto_match_reference=reference)
