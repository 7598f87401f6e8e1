"""Mapper functions to convert between domain models and SQLAlchemy models.

This layer isolates the conversion logic, so the reconciliation engine never
sees ORM rows.
"""

from decimal import Decimal
from typing import Iterable, Optional
from uuid import UUID

from budgetledger.domain import entities as domain
from budgetledger.domain.ledger_bucket import BucketAssignment, LedgerBucket
from budgetledger.domain.ledger_entry import LedgerEntry
from budgetledger.domain.ledger_line import CommittedReconciliationLine
from budgetledger.domain.ledger_transaction import LedgerTransaction, LedgerTransactionKind
from budgetledger.domain.tasks import TaskPriority, ToDoTask, TransferTask
from budgetledger.database.models import (
    Account as ORMAccount,
    BudgetBucket as ORMBudgetBucket,
    StatementTransaction as ORMStatementTransaction,
    BucketAssignment as ORMBucketAssignment,
    LedgerLine as ORMLedgerLine,
    LedgerEntry as ORMLedgerEntry,
    LedgerTransaction as ORMLedgerTransaction,
    Task as ORMTask,
)


def _decimal(value) -> Decimal:
    return value if isinstance(value, Decimal) else Decimal(str(value))


def account_to_domain(orm_account: ORMAccount) -> domain.Account:
    """Convert SQLAlchemy Account model to domain Account entity."""
    return domain.Account(
        name=orm_account.name,
        account_type=domain.AccountType(orm_account.account_type),
        is_salary_account=orm_account.is_salary_account,
    )


def bucket_to_domain(orm_bucket: ORMBudgetBucket) -> domain.BudgetBucket:
    """Convert SQLAlchemy BudgetBucket model to domain BudgetBucket entity."""
    return domain.BudgetBucket(
        code=orm_bucket.code,
        description=orm_bucket.description,
        kind=domain.BucketKind(orm_bucket.kind),
        active=orm_bucket.active,
    )


def statement_transaction_to_domain(
    orm_txn: ORMStatementTransaction,
) -> domain.StatementTransaction:
    """Convert SQLAlchemy StatementTransaction model to domain entity."""
    return domain.StatementTransaction(
        id=UUID(orm_txn.uuid),
        date=orm_txn.date,
        amount=_decimal(orm_txn.amount),
        account=account_to_domain(orm_txn.account),
        bucket=bucket_to_domain(orm_txn.bucket) if orm_txn.bucket is not None else None,
        description=orm_txn.description,
        transaction_type=orm_txn.transaction_type,
        reference1=orm_txn.reference1,
        reference2=orm_txn.reference2,
        reference3=orm_txn.reference3,
    )


def bucket_assignment_to_domain(orm_assignment: ORMBucketAssignment) -> BucketAssignment:
    """Convert SQLAlchemy BucketAssignment model to domain BucketAssignment."""
    return BucketAssignment(
        bucket_code=orm_assignment.bucket_code,
        account=account_to_domain(orm_assignment.account),
        effective_from=orm_assignment.effective_from,
        opening_balance=_decimal(orm_assignment.opening_balance),
    )


def ledger_transaction_to_domain(orm_txn: ORMLedgerTransaction) -> LedgerTransaction:
    """Convert SQLAlchemy LedgerTransaction model to domain LedgerTransaction."""
    return LedgerTransaction(
        id=UUID(orm_txn.uuid),
        kind=LedgerTransactionKind(orm_txn.kind),
        amount=_decimal(orm_txn.amount),
        narrative=orm_txn.narrative,
        date=orm_txn.date,
        auto_match_reference=orm_txn.auto_match_reference,
        account=account_to_domain(orm_txn.account) if orm_txn.account is not None else None,
    )


def ledger_entry_to_domain(orm_entry: ORMLedgerEntry) -> LedgerEntry:
    """Convert SQLAlchemy LedgerEntry model to domain LedgerEntry.

    The stored closing balance is kept as ``recorded_balance`` so validation
    can detect rows that no longer add up.
    """
    return LedgerEntry(
        bucket=LedgerBucket(
            bucket_code=orm_entry.bucket_code,
            stored_in_account=account_to_domain(orm_entry.account),
        ),
        opening_balance=_decimal(orm_entry.opening_balance),
        transactions=tuple(ledger_transaction_to_domain(t) for t in orm_entry.transactions),
        recorded_balance=_decimal(orm_entry.balance),
    )


def ledger_line_to_domain(
    orm_line: ORMLedgerLine, adjustments: Iterable[ORMLedgerTransaction]
) -> CommittedReconciliationLine:
    """Convert SQLAlchemy LedgerLine model and its adjustment rows to a committed line."""
    return CommittedReconciliationLine(
        date=orm_line.date,
        bank_balances=tuple(
            domain.BankBalance(account=account_to_domain(b.account), balance=_decimal(b.balance))
            for b in orm_line.bank_balances
        ),
        balance_adjustments=tuple(ledger_transaction_to_domain(a) for a in adjustments),
        entries=tuple(ledger_entry_to_domain(e) for e in orm_line.entries),
        remarks=orm_line.remarks,
    )


def task_to_domain(orm_task: ORMTask) -> ToDoTask:
    """Convert SQLAlchemy Task model to domain ToDoTask or TransferTask."""
    priority = TaskPriority(orm_task.priority)
    if not orm_task.is_transfer:
        return ToDoTask(
            description=orm_task.description,
            system_generated=orm_task.system_generated,
            can_delete=orm_task.can_delete,
            priority=priority,
        )
    return TransferTask(
        description=orm_task.description,
        system_generated=orm_task.system_generated,
        can_delete=orm_task.can_delete,
        priority=priority,
        amount=_decimal(orm_task.amount),
        source_account=_optional_account(orm_task.source_account),
        destination_account=_optional_account(orm_task.destination_account),
        bucket_code=orm_task.bucket_code,
        reference=orm_task.reference,
    )


def _optional_account(orm_account: Optional[ORMAccount]) -> Optional[domain.Account]:
    return account_to_domain(orm_account) if orm_account is not None else None
