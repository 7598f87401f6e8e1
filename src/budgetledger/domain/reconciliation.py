"""Monthly reconciliation of a ledger book against a budget and bank statement."""

from concurrent.futures import ThreadPoolExecutor
from datetime import date, timedelta
from decimal import Decimal
from typing import Iterable, Optional

from dateutil.relativedelta import relativedelta

from budgetledger.domain.entities import (
    NON_SPENDING_KINDS,
    Account,
    BankBalance,
    BudgetModel,
    StatementModel,
    StatementTransaction,
)
from budgetledger.domain.errors import PreconditionError
from budgetledger.domain.ledger_book import LedgerBook
from budgetledger.domain.ledger_bucket import LedgerBucket
from budgetledger.domain.ledger_entry import LedgerEntry
from budgetledger.domain.ledger_line import AutoMatchStamp, DraftReconciliationLine
from budgetledger.domain.ledger_transaction import (
    DISABLED_BUCKET_NARRATIVE,
    TRANSFER_REQUIRED_NARRATIVE,
    LedgerTransaction,
    budget_allocation,
    from_statement,
    opening_balance,
)
from budgetledger.domain.references import (
    is_awaiting_match,
    issue_reference,
    mark_matched,
    matches_reference,
)
from budgetledger.domain.tasks import TaskPriority, ToDoCollection, ToDoTask, TransferTask
from budgetledger.logging_config import get_logger

logger = get_logger("reconciliation")

ZERO = Decimal("0")


def calculate_date_for_reconcile(ledger_book: LedgerBook, reconciliation_date: date) -> date:
    """Return the inclusive start of the statement window for a new reconciliation.

    This is the date of the most recent line, or one month before the
    reconciliation date when the book has no lines yet.
    """
    latest = ledger_book.latest_line
    if latest is not None:
        return latest.date
    return reconciliation_date - relativedelta(months=1)


def transactions_to_auto_match(
    transactions: Iterable[StatementTransaction], auto_matching_reference: str
) -> list[StatementTransaction]:
    """Return statement transactions quoting a reference, smallest amount first."""
    found = [
        t for t in transactions if matches_reference(t.references, auto_matching_reference)
    ]
    return sorted(found, key=lambda t: t.amount)


def extract_narrative(transaction: StatementTransaction) -> str:
    if transaction.description and transaction.description.strip():
        return transaction.description
    if transaction.transaction_type:
        return transaction.transaction_type
    return ""


class ReconciliationBuilder:
    """Builds the next reconciliation line for a ledger book.

    The book must be attached before calling
    :meth:`create_new_monthly_reconciliation`. The builder never modifies the
    book; the caller appends the returned line with
    :meth:`LedgerBook.add_reconciliation`.
    """

    def __init__(self, ledger_book: Optional[LedgerBook] = None, max_workers: Optional[int] = None):
        """Initialize reconciliation builder.

        Args:
            ledger_book: The ledger book to reconcile
            max_workers: Thread count for the cross-account payment scan
        """
        self.ledger_book = ledger_book
        self.max_workers = max_workers

    def create_new_monthly_reconciliation(
        self,
        reconciliation_date: date,
        bank_balances: Iterable[BankBalance],
        budget: BudgetModel,
        statement: Optional[StatementModel],
        todo_list: ToDoCollection,
    ) -> DraftReconciliationLine:
        """Create a new reconciliation line.

        Args:
            reconciliation_date: Date of the new line. Statement transactions
                dated on or after this date belong to the next period.
            bank_balances: Current balance of every tracked bank account
            budget: The budget in force
            statement: Statement covering the period, or None
            todo_list: Receives the follow-up tasks for the user

        Returns:
            The new draft line

        Raises:
            PreconditionError: If a required input or the ledger book is missing
        """
        if bank_balances is None:
            raise PreconditionError("Bank balances are required for a reconciliation")
        if budget is None:
            raise PreconditionError("A budget is required for a reconciliation")
        if todo_list is None:
            raise PreconditionError("A task list is required for a reconciliation")
        if self.ledger_book is None:
            raise PreconditionError(
                "The ledger book must be attached to the builder before reconciling"
            )

        line = DraftReconciliationLine(date=reconciliation_date, bank_balances=list(bank_balances))
        run = _ReconciliationRun(self.ledger_book, line, todo_list, self.max_workers)
        run.add_new(
            budget,
            statement,
            calculate_date_for_reconcile(self.ledger_book, reconciliation_date),
        )
        run.create_todo_for_overdrawn_surplus_balances()
        return line


class _ReconciliationRun:
    """Working state for a single reconciliation."""

    def __init__(
        self,
        ledger_book: LedgerBook,
        line: DraftReconciliationLine,
        todo_list: ToDoCollection,
        max_workers: Optional[int],
    ):
        self.ledger_book = ledger_book
        self.line = line
        self.todo_list = todo_list
        self.max_workers = max_workers
        self.issued_transfers: list[TransferTask] = []
        self.claimed_statement_ids: set = set()

    @property
    def reconciliation_date(self) -> date:
        return self.line.date

    def add_new(
        self, budget: BudgetModel, statement: Optional[StatementModel], start_date: date
    ) -> None:
        # The window includes the previous line's date and excludes this line's date,
        # so consecutive periods neither overlap nor leave a gap.
        window = (
            statement.filter_by_date(start_date, self.reconciliation_date)
            if statement is not None
            else []
        )
        logger.info(
            "Reconciling %s: %d statement transactions from %s",
            self.reconciliation_date,
            len(window),
            start_date,
        )

        previous_line = self.ledger_book.latest_line
        entries = []
        for current_bucket in self.ledger_book.ledger_buckets:
            code = current_bucket.bucket_code
            ledger_bucket = (
                self.ledger_book.bucket_log.as_of(code, self.reconciliation_date) or current_bucket
            )
            previous_entry = previous_line.entry_for(code) if previous_line is not None else None

            transactions: list[LedgerTransaction] = []
            if previous_entry is None:
                opening = ZERO
                transactions.extend(self._include_starting_balance(code))
            else:
                opening = previous_entry.balance
                if previous_entry.bucket.stored_in_account != ledger_bucket.stored_in_account:
                    logger.info(
                        "Ledger %s has moved from %s to %s",
                        code,
                        previous_entry.bucket.stored_in_account,
                        ledger_bucket.stored_in_account,
                    )

            transactions.extend(self._include_budgeted_amount(budget, ledger_bucket))
            transactions.extend(include_statement_transactions(ledger_bucket, window))
            if previous_entry is not None:
                self._auto_match_transactions_already_in_previous_period(
                    window, previous_entry, transactions
                )

            entries.append(
                LedgerEntry(
                    bucket=ledger_bucket,
                    opening_balance=opening,
                    transactions=tuple(transactions),
                )
            )

        self.line.set_entries(entries)

        self._create_balance_adjustments_for_transfers()
        if statement is not None:
            self._add_balance_adjustments_for_future_transactions(statement)
        self._create_tasks_to_transfer_funds_if_paid_from_different_account(window)

    def create_todo_for_overdrawn_surplus_balances(self) -> None:
        """An overdrawn surplus means one or more buckets have been overspent
        and the user probably needs to make a transfer."""
        for surplus in self.line.surplus_balances:
            if surplus.balance >= 0:
                continue
            logger.warning(
                "Surplus balance of %s is overdrawn: %s", surplus.account, surplus.balance
            )
            self.todo_list.add(
                ToDoTask(
                    description=(
                        f"{surplus.account} has a negative surplus balance "
                        f"{surplus.balance:,.2f}, there must be one or more transfers to action."
                    ),
                    system_generated=True,
                    priority=TaskPriority.HIGH,
                )
            )

    def _include_starting_balance(self, bucket_code: str) -> list[LedgerTransaction]:
        assignment = self.ledger_book.bucket_log.current_assignment(bucket_code)
        if assignment is None or assignment.opening_balance == 0:
            return []
        return [opening_balance(assignment.opening_balance, self.reconciliation_date)]

    def _include_budgeted_amount(
        self, budget: BudgetModel, ledger_bucket: LedgerBucket
    ) -> list[LedgerTransaction]:
        expense = budget.expense_for(ledger_bucket.bucket_code)
        if expense is None:
            return []

        if not expense.bucket.active:
            # Still shown so the user can see the bucket is disabled.
            return [budget_allocation(ZERO, self.reconciliation_date, DISABLED_BUCKET_NARRATIVE)]

        account = ledger_bucket.stored_in_account
        if account.is_salary_account or expense.amount == 0:
            return [budget_allocation(expense.amount, self.reconciliation_date)]

        reference = issue_reference()
        allocation = budget_allocation(
            expense.amount,
            self.reconciliation_date,
            TRANSFER_REQUIRED_NARRATIVE,
            auto_match_reference=reference,
        )
        salary_account = self._salary_account()
        task = TransferTask(
            description=(
                f"Budgeted Amount for {ledger_bucket.bucket_code} transfer "
                f"{expense.amount:,.2f} from Salary Account to {account} "
                f"with auto-matching reference: {reference}"
            ),
            system_generated=True,
            amount=expense.amount,
            source_account=salary_account,
            destination_account=account,
            bucket_code=ledger_bucket.bucket_code,
            reference=reference,
        )
        self.todo_list.add(task)
        self.issued_transfers.append(task)
        return [allocation]

    def _salary_account(self) -> Account:
        for bank_balance in self.line.bank_balances:
            if bank_balance.account.is_salary_account:
                return bank_balance.account
        raise PreconditionError(
            "No salary account found in the bank balances; budgeted amounts cannot be transferred"
        )

    def _auto_match_transactions_already_in_previous_period(
        self,
        window: list[StatementTransaction],
        previous_entry: LedgerEntry,
        new_transactions: list[LedgerTransaction],
    ) -> None:
        """Match statement transactions quoting a reference issued last period."""
        awaiting = [
            t for t in previous_entry.transactions if is_awaiting_match(t.auto_match_reference)
        ]
        if not awaiting:
            return

        logger.info(
            "AutoMatching - Found %d %s ledger transactions that require matching.",
            len(awaiting),
            previous_entry.bucket_code,
        )
        unmatched = []
        for ledger_txn in awaiting:
            candidates = [
                t
                for t in transactions_to_auto_match(window, ledger_txn.auto_match_reference)
                if t.id not in self.claimed_statement_ids
            ]
            if not candidates:
                unmatched.append(ledger_txn)
                continue

            # A transfer appears once per account; the smallest amount takes the stamp.
            match = candidates[0]
            logger.info("AutoMatching - Matched %s ==> %s", ledger_txn, match.id)
            self.line.auto_match_stamps.append(
                AutoMatchStamp(
                    bucket_code=previous_entry.bucket_code,
                    ledger_transaction_id=ledger_txn.id,
                    statement_transaction_id=match.id,
                    reference=mark_matched(ledger_txn.auto_match_reference),
                )
            )

            # Every side was already accounted for by last period's allocation.
            matched_ids = {t.id for t in candidates}
            self.claimed_statement_ids.update(matched_ids)
            for txn in [t for t in new_transactions if t.id in matched_ids]:
                logger.info("Removing duplicate ledger transaction after auto-matching: %s", txn)
                new_transactions.remove(txn)

        if unmatched:
            logger.warning(
                "%d ledger transactions appear to be waiting to be automatched, "
                "but no statement transactions were found. %s",
                len(unmatched),
                unmatched[0].auto_match_reference,
            )
        for txn in unmatched:
            self.todo_list.add(
                ToDoTask(
                    description=(
                        f"WARNING: Missing auto-match transaction. Transfer {txn.amount:,.2f} "
                        f"with reference {txn.auto_match_reference} Dated "
                        f"{self.reconciliation_date - timedelta(days=1)} to "
                        f"{previous_entry.bucket.stored_in_account}. See log for more details."
                    ),
                    system_generated=True,
                )
            )

    def _create_balance_adjustments_for_transfers(self) -> None:
        """Move budgeted amounts between accounts now rather than waiting for the transfer."""
        from_source: dict[Account, Decimal] = {}
        to_destination: dict[Account, Decimal] = {}
        for task in self.issued_transfers:
            from_source[task.source_account] = from_source.get(task.source_account, ZERO) + task.amount
            to_destination[task.destination_account] = (
                to_destination.get(task.destination_account, ZERO) + task.amount
            )

        for account, total in from_source.items():
            if total != 0:
                self.line.balance_adjustment(
                    -total, "Adjustment for moving budgeted amounts from income account.", account
                )
        for account, total in to_destination.items():
            if total != 0:
                self.line.balance_adjustment(
                    total, "Adjustment for moving budgeted amounts to destination account.", account
                )

    def _add_balance_adjustments_for_future_transactions(self, statement: StatementModel) -> None:
        adjustments_made = False
        for txn in statement.all_transactions:
            if txn.date < self.reconciliation_date or txn.account.is_credit_card:
                continue
            if txn.bucket is not None and txn.bucket.kind in NON_SPENDING_KINDS:
                continue
            if txn.amount == 0:
                continue
            adjustments_made = True
            logger.warning("Removing future transaction %s dated %s", txn.id, txn.date)
            self.line.balance_adjustment(
                -txn.amount, f"Remove future transaction for {txn.date}", txn.account
            )

        if adjustments_made:
            self.todo_list.add(
                ToDoTask(
                    description="Check auto-generated balance adjustments for future transactions.",
                    system_generated=True,
                )
            )

    def _create_tasks_to_transfer_funds_if_paid_from_different_account(
        self, window: list[StatementTransaction]
    ) -> None:
        """Propose a transfer for each payment made from an account other than
        the one its bucket is funded from."""
        funding_accounts = {e.bucket_code: e.bucket.stored_in_account for e in self.line.entries}
        debit_account_transactions = [t for t in window if not t.account.is_credit_card]
        payments = [t for t in debit_account_transactions if t.amount < 0]
        if not payments:
            return

        def propose(payment: StatementTransaction) -> Optional[tuple[StatementTransaction, TransferTask]]:
            ledger_account = funding_accounts.get(payment.bucket_code)
            if ledger_account is None or payment.account == ledger_account:
                return None
            reference = issue_reference()
            return (
                payment,
                TransferTask(
                    description=(
                        f"A {payment.bucket_code} payment for {payment.amount:,.2f} on the "
                        f"{payment.date} has been made from {payment.account}, but funds are "
                        f"stored in {ledger_account}. Use reference {reference}"
                    ),
                    system_generated=True,
                    amount=-payment.amount,
                    source_account=ledger_account,
                    destination_account=payment.account,
                    bucket_code=payment.bucket_code,
                    reference=reference,
                ),
            )

        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            proposals = [p for p in executor.map(propose, payments) if p is not None]

        # A payment with an opposite twin in another account is one side of a manual transfer.
        for payment, task in proposals:
            if _is_one_side_of_transfer(payment, debit_account_transactions):
                logger.info("Payment %s is one side of a transfer, no task needed", payment.id)
                continue
            self.todo_list.add(task)


def include_statement_transactions(
    ledger_bucket: LedgerBucket, window: list[StatementTransaction]
) -> list[LedgerTransaction]:
    """Map the window's transactions for a bucket to ledger transactions."""
    return [
        from_statement(t.id, t.amount, extract_narrative(t), t.date)
        for t in window
        if t.bucket_code == ledger_bucket.bucket_code
    ]


def _is_one_side_of_transfer(
    payment: StatementTransaction, transactions: list[StatementTransaction]
) -> bool:
    for other in transactions:
        if (
            other.amount == -payment.amount
            and other.date == payment.date
            and other.bucket_code == payment.bucket_code
            and other.account != payment.account
            and other.reference1 == payment.reference1
        ):
            return True
    return False
