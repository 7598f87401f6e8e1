"""Reconciliation lines: the dated snapshots that make up a ledger book.

A line starts life as a ``DraftReconciliationLine`` produced by the
reconciliation builder. The user may adjust it until it is committed, after
which only the immutable ``CommittedReconciliationLine`` exists.
"""

from dataclasses import dataclass, field, replace
from datetime import date
from decimal import Decimal
from typing import Iterable, Optional, Sequence
from uuid import UUID

from budgetledger.domain.entities import Account, BankBalance
from budgetledger.domain.errors import (
    InvalidStateError,
    NotFoundError,
    bucket_not_tracked,
    line_is_sealed,
)
from budgetledger.domain.ledger_entry import LedgerEntry
from budgetledger.domain.ledger_transaction import (
    LedgerTransaction,
    balance_adjustment,
    manual_transaction,
    stamped,
)
from budgetledger.logging_config import get_logger

logger = get_logger("ledger_line")

ZERO = Decimal("0")


@dataclass(frozen=True)
class AutoMatchStamp:
    """Update owed to a previous line once one of its transfers has been seen."""

    bucket_code: str
    ledger_transaction_id: UUID
    statement_transaction_id: UUID
    reference: str


class _LineFigures:
    """Derived figures shared by draft and committed lines."""

    date: date
    bank_balances: Sequence[BankBalance]
    balance_adjustments: Sequence[LedgerTransaction]
    entries: Sequence[LedgerEntry]

    @property
    def total_bank_balance(self) -> Decimal:
        return sum((b.balance for b in self.bank_balances), ZERO)

    @property
    def total_balance_adjustments(self) -> Decimal:
        return sum((a.amount for a in self.balance_adjustments), ZERO)

    @property
    def ledger_balance(self) -> Decimal:
        return self.total_bank_balance + self.total_balance_adjustments

    @property
    def calculated_surplus(self) -> Decimal:
        """Money left over after every tracked bucket has been funded."""
        return self.ledger_balance - sum((e.balance for e in self.entries), ZERO)

    @property
    def surplus_balances(self) -> list[BankBalance]:
        """Surplus per bank account. These add up to the calculated surplus
        whenever every entry is funded from an account with a bank balance."""
        results = []
        for bank_balance in self.bank_balances:
            account = bank_balance.account
            adjusted = bank_balance.balance + self.adjustments_for_account(account)
            funded = sum(
                (e.balance for e in self.entries if e.bucket.stored_in_account == account),
                ZERO,
            )
            results.append(BankBalance(account=account, balance=adjusted - funded))
        return results

    def adjustments_for_account(self, account: Account) -> Decimal:
        return sum(
            (a.amount for a in self.balance_adjustments if a.account == account), ZERO
        )

    def entry_for(self, bucket_code: str) -> Optional[LedgerEntry]:
        for entry in self.entries:
            if entry.bucket_code == bucket_code:
                return entry
        return None

    def validate(self, messages: list[str]) -> bool:
        """Validate the line and every entry. Problems are appended to messages."""
        valid = True
        if not self.entries:
            messages.append(
                "The reconciliation line does not contain any entries, either delete it or add entries."
            )
            valid = False

        for entry in self.entries:
            if not entry.validate(messages):
                messages.append(f"Ledger entry with balance {entry.balance:,.2f} is invalid.")
                valid = False
        return valid


@dataclass(frozen=True)
class CommittedReconciliationLine(_LineFigures):
    """A reconciliation line stored in the ledger book's history."""

    date: date
    bank_balances: tuple[BankBalance, ...] = ()
    balance_adjustments: tuple[LedgerTransaction, ...] = ()
    entries: tuple[LedgerEntry, ...] = ()
    remarks: str = ""

    def apply_stamps(self, stamps: Iterable[AutoMatchStamp]) -> "CommittedReconciliationLine":
        """Return a copy with matched transfers re-identified and marked as matched."""
        entries = list(self.entries)
        for stamp in stamps:
            for index, entry in enumerate(entries):
                if entry.bucket_code != stamp.bucket_code:
                    continue
                txn = entry.find_transaction(stamp.ledger_transaction_id)
                if txn is None:
                    continue
                updated = stamped(txn, stamp.statement_transaction_id, stamp.reference)
                entries[index] = entry.with_transactions(
                    updated if t.id == txn.id else t for t in entry.transactions
                )
                logger.info(
                    "Stamped %s on %s ledger transaction of line %s",
                    stamp.reference,
                    stamp.bucket_code,
                    self.date,
                )
        return replace(self, entries=tuple(entries))


@dataclass
class DraftReconciliationLine(_LineFigures):
    """A newly built reconciliation line that the user may still adjust."""

    date: date
    bank_balances: list[BankBalance] = field(default_factory=list)
    balance_adjustments: list[LedgerTransaction] = field(default_factory=list)
    entries: list[LedgerEntry] = field(default_factory=list)
    remarks: str = ""
    auto_match_stamps: list[AutoMatchStamp] = field(default_factory=list)
    sealed: bool = False

    def balance_adjustment(
        self, amount: Decimal, narrative: str, account: Optional[Account] = None
    ) -> LedgerTransaction:
        """Add an adjustment to the bank balances.

        Raises:
            InvalidStateError: If the line has been committed
            ValidationError: If amount is zero
        """
        self._require_unsealed()
        adjustment = balance_adjustment(amount, narrative, account)
        self.balance_adjustments.append(adjustment)
        return adjustment

    def cancel_balance_adjustment(self, transaction_id: UUID) -> None:
        """Remove an adjustment. Unknown ids are ignored."""
        self._require_unsealed()
        self.balance_adjustments = [
            a for a in self.balance_adjustments if a.id != transaction_id
        ]

    def update_bank_balances(self, bank_balances: Iterable[BankBalance]) -> None:
        self._require_unsealed()
        self.bank_balances = list(bank_balances)

    def update_remarks(self, remarks: str) -> None:
        self._require_unsealed()
        self.remarks = remarks

    def add_entry_transaction(
        self, bucket_code: str, amount: Decimal, narrative: str
    ) -> LedgerTransaction:
        """Add a manual credit or debit to one of the line's entries."""
        self._require_unsealed()
        index = self._entry_index(bucket_code)
        txn = manual_transaction(amount, narrative, self.date)
        self.entries[index] = self.entries[index].with_transaction(txn)
        return txn

    def remove_entry_transaction(self, bucket_code: str, transaction_id: UUID) -> None:
        """Remove a transaction from one of the line's entries. Unknown ids are ignored."""
        self._require_unsealed()
        index = self._entry_index(bucket_code)
        self.entries[index] = self.entries[index].without_transaction(transaction_id)

    def set_entries(self, entries: Iterable[LedgerEntry]) -> None:
        self._require_unsealed()
        self.entries = list(entries)

    def commit(self) -> CommittedReconciliationLine:
        """Seal the draft and return its committed form."""
        self._require_unsealed()
        self.sealed = True
        return CommittedReconciliationLine(
            date=self.date,
            bank_balances=tuple(self.bank_balances),
            balance_adjustments=tuple(self.balance_adjustments),
            entries=tuple(self.entries),
            remarks=self.remarks,
        )

    def _entry_index(self, bucket_code: str) -> int:
        for index, entry in enumerate(self.entries):
            if entry.bucket_code == bucket_code:
                return index
        raise NotFoundError(bucket_not_tracked(bucket_code))

    def _require_unsealed(self) -> None:
        if self.sealed:
            raise InvalidStateError(line_is_sealed(self.date))
