"""Per-bucket state for one reconciliation line."""

from dataclasses import dataclass, replace
from decimal import Decimal
from typing import Optional
from uuid import UUID

from budgetledger.domain.ledger_bucket import LedgerBucket
from budgetledger.domain.ledger_transaction import LedgerTransaction


@dataclass(frozen=True)
class LedgerEntry:
    """Opening balance, period transactions and closing balance of one bucket.

    ``recorded_balance`` is the closing balance as persisted; it is None for
    entries built in memory and is only used by validation.
    """

    bucket: LedgerBucket
    opening_balance: Decimal = Decimal("0")
    transactions: tuple[LedgerTransaction, ...] = ()
    recorded_balance: Optional[Decimal] = None

    @property
    def bucket_code(self) -> str:
        return self.bucket.bucket_code

    @property
    def balance(self) -> Decimal:
        """Closing balance: opening balance plus every transaction."""
        return self.opening_balance + sum(
            (t.amount for t in self.transactions), Decimal("0")
        )

    @property
    def net_amount(self) -> Decimal:
        """Movement in the period, excluding carried-in balances."""
        return sum(
            (t.amount for t in self.transactions if not t.is_carry), Decimal("0")
        )

    def find_transaction(self, transaction_id: UUID) -> Optional[LedgerTransaction]:
        for txn in self.transactions:
            if txn.id == transaction_id:
                return txn
        return None

    def with_transaction(self, txn: LedgerTransaction) -> "LedgerEntry":
        return replace(self, transactions=self.transactions + (txn,))

    def without_transaction(self, transaction_id: UUID) -> "LedgerEntry":
        return replace(
            self,
            transactions=tuple(t for t in self.transactions if t.id != transaction_id),
        )

    def with_transactions(self, transactions) -> "LedgerEntry":
        return replace(self, transactions=tuple(transactions))

    def validate(self, messages: list[str]) -> bool:
        """Check the entry is internally consistent.

        Args:
            messages: List that receives a message per problem found

        Returns:
            True if the entry is valid
        """
        valid = True
        seen: set[UUID] = set()
        for txn in self.transactions:
            if txn.id in seen:
                messages.append(
                    f"Ledger entry for {self.bucket_code} contains transaction {txn.id} more than once."
                )
                valid = False
            seen.add(txn.id)

        if self.recorded_balance is not None and self.recorded_balance != self.balance:
            messages.append(
                f"Ledger entry for {self.bucket_code} records a balance of "
                f"{self.recorded_balance:,.2f} but its transactions total {self.balance:,.2f}."
            )
            valid = False
        return valid
