"""SQLAlchemy models for budgetledger database."""

from datetime import datetime, UTC
from sqlalchemy import (
    Column,
    Integer,
    String,
    ForeignKey,
    DateTime,
    Date,
    Numeric,
    Boolean,
    UniqueConstraint,
    create_engine,
)
from sqlalchemy.orm import declarative_base, relationship, sessionmaker, Session

Base = declarative_base()


class Account(Base):
    """Bank account model."""

    __tablename__ = "accounts"

    id = Column(Integer, primary_key=True)
    name = Column(String, unique=True, nullable=False)
    account_type = Column(String, nullable=False, default="cheque")
    is_salary_account = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)


class BudgetBucket(Base):
    """Budget bucket model."""

    __tablename__ = "budget_buckets"

    id = Column(Integer, primary_key=True)
    code = Column(String, unique=True, nullable=False)
    description = Column(String, nullable=False, default="")
    kind = Column(String, nullable=False, default="spent_monthly")
    active = Column(Boolean, default=True, nullable=False)

    expense = relationship(
        "BudgetExpense", back_populates="bucket", uselist=False, cascade="all, delete-orphan"
    )


class Budget(Base):
    """Budget header model. A database holds a single budget."""

    __tablename__ = "budgets"

    id = Column(Integer, primary_key=True)
    name = Column(String, nullable=False)
    effective_from = Column(Date, nullable=False)


class BudgetExpense(Base):
    """Budgeted monthly amount for a bucket."""

    __tablename__ = "budget_expenses"

    id = Column(Integer, primary_key=True)
    bucket_id = Column(Integer, ForeignKey("budget_buckets.id"), unique=True, nullable=False)
    amount = Column(Numeric(10, 2), nullable=False)

    bucket = relationship("BudgetBucket", back_populates="expense")


class StatementTransaction(Base):
    """Bank statement transaction model."""

    __tablename__ = "statement_transactions"

    id = Column(Integer, primary_key=True)
    uuid = Column(String(36), unique=True, nullable=False)
    account_id = Column(Integer, ForeignKey("accounts.id"), nullable=False)
    bucket_id = Column(Integer, ForeignKey("budget_buckets.id"), nullable=True)
    date = Column(Date, nullable=False)
    amount = Column(Numeric(10, 2), nullable=False)
    description = Column(String, nullable=True)
    transaction_type = Column(String, nullable=True)
    reference1 = Column(String, nullable=True)
    reference2 = Column(String, nullable=True)
    reference3 = Column(String, nullable=True)
    imported_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    account = relationship("Account")
    bucket = relationship("BudgetBucket")


class BucketAssignment(Base):
    """Funding account assignment of a ledger bucket from a date onwards."""

    __tablename__ = "bucket_assignments"

    id = Column(Integer, primary_key=True)
    bucket_code = Column(String, nullable=False)
    account_id = Column(Integer, ForeignKey("accounts.id"), nullable=False)
    effective_from = Column(Date, nullable=False)
    opening_balance = Column(Numeric(10, 2), nullable=False, default=0)

    account = relationship("Account")


class BucketRetirement(Base):
    """Date a ledger bucket stopped being tracked."""

    __tablename__ = "bucket_retirements"

    id = Column(Integer, primary_key=True)
    bucket_code = Column(String, unique=True, nullable=False)
    retired_on = Column(Date, nullable=False)


class LedgerLine(Base):
    """Committed reconciliation line model."""

    __tablename__ = "ledger_lines"

    id = Column(Integer, primary_key=True)
    date = Column(Date, unique=True, nullable=False)
    remarks = Column(String, nullable=False, default="")
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    bank_balances = relationship(
        "LedgerBankBalance", back_populates="line", cascade="all, delete-orphan"
    )
    entries = relationship(
        "LedgerEntry",
        back_populates="line",
        cascade="all, delete-orphan",
        order_by="LedgerEntry.id",
    )


class LedgerBankBalance(Base):
    """Bank balance snapshot for a reconciliation line."""

    __tablename__ = "ledger_bank_balances"

    id = Column(Integer, primary_key=True)
    line_id = Column(Integer, ForeignKey("ledger_lines.id"), nullable=False)
    account_id = Column(Integer, ForeignKey("accounts.id"), nullable=False)
    balance = Column(Numeric(10, 2), nullable=False)

    line = relationship("LedgerLine", back_populates="bank_balances")
    account = relationship("Account")


class LedgerEntry(Base):
    """Per-bucket entry of a reconciliation line."""

    __tablename__ = "ledger_entries"

    id = Column(Integer, primary_key=True)
    line_id = Column(Integer, ForeignKey("ledger_lines.id"), nullable=False)
    bucket_code = Column(String, nullable=False)
    account_id = Column(Integer, ForeignKey("accounts.id"), nullable=False)
    opening_balance = Column(Numeric(10, 2), nullable=False)
    balance = Column(Numeric(10, 2), nullable=False)

    __table_args__ = (UniqueConstraint("line_id", "bucket_code", name="uq_line_bucket"),)

    line = relationship("LedgerLine", back_populates="entries")
    account = relationship("Account")
    transactions = relationship(
        "LedgerTransaction",
        back_populates="entry",
        order_by="LedgerTransaction.position",
    )


class LedgerTransaction(Base):
    """Ledger transaction model. Rows without an entry are balance adjustments."""

    __tablename__ = "ledger_transactions"

    id = Column(Integer, primary_key=True)
    uuid = Column(String(36), nullable=False)
    line_id = Column(Integer, ForeignKey("ledger_lines.id"), nullable=False)
    entry_id = Column(Integer, ForeignKey("ledger_entries.id"), nullable=True)
    position = Column(Integer, nullable=False, default=0)
    kind = Column(String, nullable=False)
    amount = Column(Numeric(10, 2), nullable=False)
    narrative = Column(String, nullable=False, default="")
    date = Column(Date, nullable=True)
    auto_match_reference = Column(String, nullable=True)
    account_id = Column(Integer, ForeignKey("accounts.id"), nullable=True)

    entry = relationship("LedgerEntry", back_populates="transactions")
    account = relationship("Account")


class Task(Base):
    """Follow-up task model. Transfer tasks fill the transfer columns."""

    __tablename__ = "tasks"

    id = Column(Integer, primary_key=True)
    description = Column(String, nullable=False)
    system_generated = Column(Boolean, default=False, nullable=False)
    can_delete = Column(Boolean, default=True, nullable=False)
    priority = Column(String, nullable=False, default="normal")
    is_transfer = Column(Boolean, default=False, nullable=False)
    amount = Column(Numeric(10, 2), nullable=True)
    source_account_id = Column(Integer, ForeignKey("accounts.id"), nullable=True)
    destination_account_id = Column(Integer, ForeignKey("accounts.id"), nullable=True)
    bucket_code = Column(String, nullable=True)
    reference = Column(String, nullable=True)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    source_account = relationship("Account", foreign_keys=[source_account_id])
    destination_account = relationship("Account", foreign_keys=[destination_account_id])


def create_session_factory(database_url: str) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory."""
    engine = create_engine(database_url, echo=False)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)
