"""The ledger book: reconciliation history plus tracked bucket definitions."""

from datetime import date
from decimal import Decimal
from typing import Iterable, Optional

from budgetledger.domain.entities import Account
from budgetledger.domain.errors import PreconditionError, reconciliation_not_newer
from budgetledger.domain.ledger_bucket import (
    BucketAssignment,
    BucketDefinitionLog,
    LedgerBucket,
)
from budgetledger.domain.ledger_line import (
    CommittedReconciliationLine,
    DraftReconciliationLine,
)
from budgetledger.logging_config import get_logger

logger = get_logger("ledger_book")


class LedgerBook:
    """Append-only history of reconciliation lines, newest first."""

    def __init__(
        self,
        name: str,
        lines: Iterable[CommittedReconciliationLine] = (),
        bucket_log: Optional[BucketDefinitionLog] = None,
    ):
        self.name = name
        self.bucket_log = bucket_log if bucket_log is not None else BucketDefinitionLog()
        self._lines: list[CommittedReconciliationLine] = sorted(
            lines, key=lambda line: line.date, reverse=True
        )

    @property
    def reconciliations(self) -> tuple[CommittedReconciliationLine, ...]:
        """Committed lines, newest first."""
        return tuple(self._lines)

    @property
    def latest_line(self) -> Optional[CommittedReconciliationLine]:
        return self._lines[0] if self._lines else None

    @property
    def ledger_buckets(self) -> list[LedgerBucket]:
        """Current definition of every tracked bucket."""
        return self.bucket_log.current_buckets()

    def track_bucket(
        self,
        bucket_code: str,
        account: Account,
        effective_from: date,
        opening_balance: Decimal = Decimal("0"),
    ) -> BucketAssignment:
        return self.bucket_log.track(bucket_code, account, effective_from, opening_balance)

    def move_bucket(self, bucket_code: str, account: Account, effective_from: date) -> BucketAssignment:
        return self.bucket_log.move(bucket_code, account, effective_from)

    def retire_bucket(self, bucket_code: str, retired_on: date) -> None:
        self.bucket_log.retire(bucket_code, retired_on)

    def require_newer_than_latest(self, when: date) -> None:
        """Raise PreconditionError unless a line dated 'when' would be the newest."""
        latest = self.latest_line
        if latest is not None and when <= latest.date:
            raise PreconditionError(reconciliation_not_newer(when, latest.date))

    def add_reconciliation(self, draft: DraftReconciliationLine) -> CommittedReconciliationLine:
        """Commit a draft line and append it as the newest line.

        Auto-match stamps carried by the draft are applied to the previous line
        so its matched transfers are not matched again.

        Raises:
            PreconditionError: If the draft is not newer than every existing line
        """
        self.require_newer_than_latest(draft.date)
        latest = self.latest_line

        stamps = list(draft.auto_match_stamps)
        committed = draft.commit()
        if latest is not None and stamps:
            self._lines[0] = latest.apply_stamps(stamps)
        self._lines.insert(0, committed)
        logger.info("Added reconciliation dated %s to ledger book %s", committed.date, self.name)
        return committed

    def validate(self, messages: list[str]) -> bool:
        """Validate history ordering, bucket tracking and every line."""
        valid = True
        for newer, older in zip(self._lines, self._lines[1:]):
            if newer.date <= older.date:
                messages.append(
                    f"Reconciliation dated {newer.date} is not newer than {older.date}."
                )
                valid = False

        for line in self._lines:
            for entry in line.entries:
                if not self.bucket_log.knows(entry.bucket_code):
                    messages.append(
                        f"Reconciliation dated {line.date} uses bucket {entry.bucket_code} "
                        "which is not tracked by the ledger book."
                    )
                    valid = False
            if not line.validate(messages):
                valid = False
        return valid
