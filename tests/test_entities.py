"""Tests for domain entities."""

import pytest
from dataclasses import FrozenInstanceError
from datetime import date
from decimal import Decimal

from budgetledger.domain.entities import (
    Account,
    AccountType,
    BudgetModel,
    Expense,
    StatementModel,
    StatementTransaction,
)


class TestAccount:
    def test_identity_is_name(self):
        assert Account("Cheque") == Account("Cheque")
        assert Account("Cheque") != Account("Savings")
        assert str(Account("Cheque")) == "Cheque"

    def test_credit_card(self):
        assert Account("Visa", AccountType.CREDIT_CARD).is_credit_card
        assert not Account("Cheque").is_credit_card

    def test_immutability(self):
        account = Account("Cheque")
        with pytest.raises(FrozenInstanceError):
            account.name = "Other"


class TestBudgetModel:
    def test_expense_for(self, power, hair):
        budget = BudgetModel(
            name="Budget",
            effective_from=date(2013, 1, 1),
            expenses=(Expense(power, Decimal("175")), Expense(hair, Decimal("55"))),
        )
        assert budget.expense_for("HAIR").amount == Decimal("55")
        assert budget.expense_for("CAR") is None

    def test_bucket_codes_are_case_sensitive(self, power):
        budget = BudgetModel("Budget", date(2013, 1, 1), (Expense(power, Decimal("1")),))
        assert budget.expense_for("power") is None


class TestStatement:
    def test_bucket_code_and_references(self, cheque, power):
        txn = StatementTransaction(
            date=date(2013, 7, 20),
            amount=Decimal("-10"),
            account=cheque,
            bucket=power,
            reference2="AB12345",
        )
        assert txn.bucket_code == "POWER"
        assert txn.references == (None, "AB12345", None)

    def test_unbucketed_transaction(self, cheque):
        txn = StatementTransaction(date=date(2013, 7, 20), amount=Decimal("1"), account=cheque)
        assert txn.bucket_code is None

    def test_filter_by_date_is_half_open(self, cheque):
        dates = [date(2013, 7, 14), date(2013, 7, 15), date(2013, 8, 14), date(2013, 8, 15)]
        statement = StatementModel(
            transactions=tuple(
                StatementTransaction(date=d, amount=Decimal("1"), account=cheque) for d in dates
            )
        )
        window = statement.filter_by_date(date(2013, 7, 15), date(2013, 8, 15))
        assert [t.date for t in window] == [date(2013, 7, 15), date(2013, 8, 14)]

    def test_transactions_get_distinct_ids(self, cheque):
        a = StatementTransaction(date=date(2013, 7, 1), amount=Decimal("1"), account=cheque)
        b = StatementTransaction(date=date(2013, 7, 1), amount=Decimal("1"), account=cheque)
        assert a.id != b.id
