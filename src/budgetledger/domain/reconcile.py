"""Reconciliation domain service."""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Optional

from budgetledger.database.base import Database
from budgetledger.domain.entities import BankBalance
from budgetledger.domain.errors import NotFoundError, PreconditionError, account_not_found
from budgetledger.domain.ledger import DEFAULT_BOOK_NAME
from budgetledger.domain.ledger_line import CommittedReconciliationLine, DraftReconciliationLine
from budgetledger.domain.reconciliation import ReconciliationBuilder
from budgetledger.domain.statement import StatementService
from budgetledger.domain.tasks import ToDoCollection, ToDoTask
from budgetledger.logging_config import get_logger

logger = get_logger("reconcile")


@dataclass
class ReconciliationResult:
    """Outcome of a reconciliation run."""

    draft: DraftReconciliationLine
    tasks: list[ToDoTask] = field(default_factory=list)
    messages: list[str] = field(default_factory=list)
    line: Optional[CommittedReconciliationLine] = None

    @property
    def saved(self) -> bool:
        return self.line is not None


class ReconciliationService:
    """Service that reconciles the stored ledger book and saves the result."""

    def __init__(self, db: Database, book_name: str = DEFAULT_BOOK_NAME):
        """Initialize reconciliation service.

        Args:
            db: Database instance
            book_name: Display name of the ledger book
        """
        self.db = db
        self.book_name = book_name

    def reconcile(
        self,
        reconciliation_date: date,
        balances: dict[str, Decimal],
        remarks: str = "",
        save: bool = True,
    ) -> ReconciliationResult:
        """Build the next reconciliation line and, if valid, save it with its tasks.

        Args:
            reconciliation_date: Date of the new line (exclusive end of the period)
            balances: Current bank balance per account name
            remarks: Optional remarks for the line
            save: If False, build and validate only

        Returns:
            ReconciliationResult. ``messages`` lists validation problems; the
            line is only saved when there are none.

        Raises:
            NotFoundError: If a balance names an unknown account
            PreconditionError: If no budget has been set, or the date is not
                after the newest reconciliation
        """
        bank_balances = []
        for name, balance in balances.items():
            account = self.db.get_account(name)
            if account is None:
                raise NotFoundError(account_not_found(name))
            bank_balances.append(BankBalance(account=account, balance=balance))

        budget = self.db.get_budget()
        if budget is None:
            raise PreconditionError("No budget has been set; add budgeted amounts first")

        book = self.db.load_ledger_book(self.book_name)
        book.require_newer_than_latest(reconciliation_date)
        statement = StatementService(self.db).get_statement()
        todo_list = ToDoCollection()

        builder = ReconciliationBuilder(ledger_book=book)
        draft = builder.create_new_monthly_reconciliation(
            reconciliation_date, bank_balances, budget, statement, todo_list
        )
        if remarks:
            draft.update_remarks(remarks)

        result = ReconciliationResult(draft=draft, tasks=list(todo_list))
        if not draft.validate(result.messages):
            logger.warning("Reconciliation dated %s is invalid: %s", reconciliation_date, result.messages)
            return result
        if not save:
            return result

        stamps = list(draft.auto_match_stamps)
        result.line = book.add_reconciliation(draft)
        self.db.save_reconciliation(result.line, stamps)
        for task in result.tasks:
            self.db.add_task(task)
        logger.info(
            "Saved reconciliation dated %s with %d tasks", reconciliation_date, len(result.tasks)
        )
        return result
