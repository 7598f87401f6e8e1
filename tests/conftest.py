"""Shared pytest fixtures for budgetledger tests."""

import os
import tempfile
from datetime import date
from decimal import Decimal

import pytest

from budgetledger.database.factories import create_sqlite_database
from budgetledger.domain.account import AccountService
from budgetledger.domain.budget import BudgetService
from budgetledger.domain.entities import Account, AccountType, BudgetBucket
from budgetledger.domain.ledger import LedgerBookService
from budgetledger.domain.reconcile import ReconciliationService
from budgetledger.domain.statement import StatementService
from budgetledger.domain.todo import TaskService
from budgetledger.logging_config import reset_logging


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    db = create_sqlite_database(database_path=db_path)
    # Store the path for CLI tests
    db.database_path = db_path
    db.connect()
    db.initialize_schema()

    yield db

    db.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def account_service(temp_db):
    return AccountService(temp_db)


@pytest.fixture
def budget_service(temp_db):
    return BudgetService(temp_db)


@pytest.fixture
def statement_service(temp_db):
    return StatementService(temp_db)


@pytest.fixture
def ledger_service(temp_db):
    return LedgerBookService(temp_db)


@pytest.fixture
def reconciliation_service(temp_db):
    return ReconciliationService(temp_db)


@pytest.fixture
def task_service(temp_db):
    return TaskService(temp_db)


@pytest.fixture
def cheque():
    """Salary account used by in-memory reconciliation tests."""
    return Account(name="Cheque", is_salary_account=True)


@pytest.fixture
def savings():
    return Account(name="Savings", account_type=AccountType.SAVINGS)


@pytest.fixture
def visa():
    return Account(name="Visa", account_type=AccountType.CREDIT_CARD)


@pytest.fixture
def power():
    return BudgetBucket(code="POWER", description="Electricity")


@pytest.fixture
def hair():
    return BudgetBucket(code="HAIR", description="Haircuts")


@pytest.fixture
def seeded_db(temp_db, account_service, budget_service, ledger_service):
    """Database with a salary account, a savings account and two tracked buckets."""
    account_service.create_account("Cheque", is_salary_account=True)
    account_service.create_account("Savings", account_type=AccountType.SAVINGS)
    budget_service.create_bucket("POWER", "Electricity")
    budget_service.create_bucket("HAIR", "Haircuts")
    budget_service.set_budget("Budget", date(2013, 1, 1))
    budget_service.set_expense("POWER", Decimal("175.00"))
    budget_service.set_expense("HAIR", Decimal("55.00"))
    ledger_service.track_bucket("POWER", "Cheque", date(2013, 1, 1))
    ledger_service.track_bucket("HAIR", "Savings", date(2013, 1, 1))
    return temp_db


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()


@pytest.fixture(autouse=True)
def _reset_logging():
    """CLI runs install a handler bound to the runner's stream; drop it after each test."""
    yield
    reset_logging()
