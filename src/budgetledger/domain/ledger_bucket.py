"""Ledger buckets and the history of which account funds each bucket."""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Optional

from budgetledger.domain.entities import Account
from budgetledger.domain.errors import (
    ConflictError,
    NotFoundError,
    ValidationError,
    bucket_not_tracked,
)


@dataclass(frozen=True)
class LedgerBucket:
    """Binds a budget bucket code to the bank account currently funding it."""

    bucket_code: str
    stored_in_account: Account

    def __str__(self) -> str:
        return f"{self.bucket_code} ({self.stored_in_account})"


@dataclass(frozen=True)
class BucketAssignment:
    """One entry in a bucket's funding history."""

    bucket_code: str
    account: Account
    effective_from: date
    opening_balance: Decimal = Decimal("0")

    def to_ledger_bucket(self) -> LedgerBucket:
        return LedgerBucket(bucket_code=self.bucket_code, stored_in_account=self.account)


class BucketDefinitionLog:
    """Time-ordered funding account assignments per bucket code.

    The current definition of a bucket is a lookup by date, so moving a
    bucket to a new account never rewrites history.
    """

    def __init__(self):
        self._assignments: dict[str, list[BucketAssignment]] = {}
        self._retired: dict[str, date] = {}

    def track(
        self,
        bucket_code: str,
        account: Account,
        effective_from: date,
        opening_balance: Decimal = Decimal("0"),
    ) -> BucketAssignment:
        """Start tracking a bucket.

        Raises:
            ConflictError: If the bucket is already tracked and not retired
        """
        if bucket_code in self._assignments and bucket_code not in self._retired:
            raise ConflictError(f"Budget bucket '{bucket_code}' is already tracked")
        self._retired.pop(bucket_code, None)
        assignment = BucketAssignment(
            bucket_code=bucket_code,
            account=account,
            effective_from=effective_from,
            opening_balance=opening_balance,
        )
        self._insert(assignment)
        return assignment

    def move(self, bucket_code: str, account: Account, effective_from: date) -> BucketAssignment:
        """Fund a tracked bucket from a different account from a date onwards.

        The starting balance given when tracking began stays with the bucket.
        """
        history = self._require(bucket_code)
        if effective_from < history[-1].effective_from:
            raise ValidationError(
                f"Budget bucket '{bucket_code}' already has an assignment dated "
                f"{history[-1].effective_from}"
            )
        assignment = BucketAssignment(
            bucket_code=bucket_code,
            account=account,
            effective_from=effective_from,
            opening_balance=history[-1].opening_balance,
        )
        self._insert(assignment)
        return assignment

    def retire(self, bucket_code: str, retired_on: date) -> None:
        """Stop tracking a bucket. Its history is kept."""
        self._require(bucket_code)
        self._retired[bucket_code] = retired_on

    def restore(self, assignment: BucketAssignment) -> None:
        """Load a stored assignment without the tracking checks."""
        self._insert(assignment)

    def restore_retirement(self, bucket_code: str, retired_on: date) -> None:
        self._retired[bucket_code] = retired_on

    def current(self, bucket_code: str) -> Optional[LedgerBucket]:
        """Return the newest definition of a tracked bucket, or None."""
        history = self._assignments.get(bucket_code)
        if not history or bucket_code in self._retired:
            return None
        return history[-1].to_ledger_bucket()

    def as_of(self, bucket_code: str, when: date) -> Optional[LedgerBucket]:
        """Return the definition in force on a date, or None if none applies yet.

        Dates before the first assignment resolve to the first assignment, so
        history recorded before tracking started still has an owner.
        """
        history = self._assignments.get(bucket_code)
        if not history:
            return None
        chosen = history[0]
        for assignment in history:
            if assignment.effective_from <= when:
                chosen = assignment
        return chosen.to_ledger_bucket()

    def current_assignment(self, bucket_code: str) -> Optional[BucketAssignment]:
        history = self._assignments.get(bucket_code)
        if not history or bucket_code in self._retired:
            return None
        return history[-1]

    def current_buckets(self) -> list[LedgerBucket]:
        """Return the current definition of every tracked bucket, ordered by code."""
        buckets = []
        for code in sorted(self._assignments):
            bucket = self.current(code)
            if bucket is not None:
                buckets.append(bucket)
        return buckets

    def assignments(self) -> list[BucketAssignment]:
        """Return every assignment, ordered by code then date."""
        return [a for code in sorted(self._assignments) for a in self._assignments[code]]

    def retirements(self) -> dict[str, date]:
        return dict(self._retired)

    def knows(self, bucket_code: str) -> bool:
        """True if the code was ever tracked, including retired buckets."""
        return bucket_code in self._assignments

    def is_retired(self, bucket_code: str) -> bool:
        return bucket_code in self._retired

    def _require(self, bucket_code: str) -> list[BucketAssignment]:
        history = self._assignments.get(bucket_code)
        if not history or bucket_code in self._retired:
            raise NotFoundError(bucket_not_tracked(bucket_code))
        return history

    def _insert(self, assignment: BucketAssignment) -> None:
        history = self._assignments.setdefault(assignment.bucket_code, [])
        history.append(assignment)
        history.sort(key=lambda a: a.effective_from)
