"""Tests for building monthly reconciliation lines."""

from datetime import date
from decimal import Decimal

import pytest

from budgetledger.domain.entities import (
    BankBalance,
    BucketKind,
    BudgetBucket,
    BudgetModel,
    Expense,
    StatementModel,
    StatementTransaction,
)
from budgetledger.domain.errors import PreconditionError
from budgetledger.domain.ledger_book import LedgerBook
from budgetledger.domain.ledger_bucket import BucketDefinitionLog, LedgerBucket
from budgetledger.domain.ledger_entry import LedgerEntry
from budgetledger.domain.ledger_line import CommittedReconciliationLine
from budgetledger.domain.ledger_transaction import (
    DISABLED_BUCKET_NARRATIVE,
    LedgerTransactionKind,
    budget_allocation,
)
from budgetledger.domain.reconciliation import (
    ReconciliationBuilder,
    calculate_date_for_reconcile,
    transactions_to_auto_match,
)
from budgetledger.domain.tasks import TaskPriority, ToDoCollection, TransferTask

PREVIOUS = date(2013, 7, 15)
RECONCILE = date(2013, 8, 15)


def make_book(*tracked, previous_entries=None):
    """Book tracking (code, account) pairs, with an optional line dated PREVIOUS."""
    log = BucketDefinitionLog()
    for code, account in tracked:
        log.track(code, account, date(2013, 1, 1))
    lines = []
    if previous_entries is not None:
        lines.append(CommittedReconciliationLine(date=PREVIOUS, entries=tuple(previous_entries)))
    return LedgerBook("Test", lines=lines, bucket_log=log)


def make_budget(*expenses):
    return BudgetModel("Budget", date(2013, 1, 1), tuple(Expense(b, Decimal(a)) for b, a in expenses))


def reconcile(book, balances, budget=None, transactions=(), todo=None, max_workers=None):
    todo = todo if todo is not None else ToDoCollection()
    builder = ReconciliationBuilder(ledger_book=book, max_workers=max_workers)
    line = builder.create_new_monthly_reconciliation(
        RECONCILE,
        [BankBalance(account, Decimal(amount)) for account, amount in balances],
        budget if budget is not None else make_budget(),
        StatementModel(transactions=tuple(transactions)),
        todo,
    )
    return line, todo


def statement_txn(when, amount, account, bucket=None, **kwargs):
    return StatementTransaction(date=when, amount=Decimal(amount), account=account, bucket=bucket, **kwargs)


class TestWindow:
    def test_window_starts_at_previous_line(self, cheque):
        book = make_book(("HAIR", cheque), previous_entries=[])
        assert calculate_date_for_reconcile(book, RECONCILE) == PREVIOUS

    def test_window_for_empty_book_is_one_month(self, cheque):
        assert calculate_date_for_reconcile(make_book(), RECONCILE) == PREVIOUS

    def test_window_is_half_open(self, cheque, hair):
        book = make_book(
            ("HAIR", cheque), previous_entries=[LedgerEntry(LedgerBucket("HAIR", cheque))]
        )
        included = statement_txn(PREVIOUS, "10", cheque, hair)
        last_day = statement_txn(date(2013, 8, 14), "5", cheque, hair)
        too_early = statement_txn(date(2013, 7, 14), "7", cheque, hair)
        next_period = statement_txn(RECONCILE, "3", cheque, hair)

        line, _ = reconcile(
            book, [(cheque, "100")], transactions=[included, last_day, too_early, next_period]
        )

        ids = {t.id for t in line.entry_for("HAIR").transactions}
        assert ids == {included.id, last_day.id}

    def test_empty_book_uses_month_before_reconciliation(self, cheque, hair):
        book = make_book(("HAIR", cheque))
        inside = statement_txn(PREVIOUS, "-10", cheque, hair)
        outside = statement_txn(date(2013, 7, 14), "-20", cheque, hair)

        line, _ = reconcile(book, [(cheque, "100")], transactions=[inside, outside])

        entry = line.entry_for("HAIR")
        assert entry.opening_balance == 0
        assert [t.id for t in entry.transactions] == [inside.id]


class TestCarryForward:
    def test_closing_balance_becomes_opening_balance(self, cheque, hair):
        book = make_book(
            ("HAIR", cheque),
            previous_entries=[LedgerEntry(LedgerBucket("HAIR", cheque), Decimal("55.00"))],
        )

        line, _ = reconcile(book, [(cheque, "1000")], make_budget((hair, "55")))

        entry = line.entry_for("HAIR")
        assert entry.opening_balance == Decimal("55.00")
        (allocation,) = entry.transactions
        assert allocation.kind == LedgerTransactionKind.BUDGET_ALLOCATION
        assert allocation.date == RECONCILE
        assert entry.balance == Decimal("110.00")
        assert line.auto_match_stamps == []

    def test_unbudgeted_bucket_still_gets_an_entry(self, cheque):
        book = make_book(("HAIR", cheque))

        line, _ = reconcile(book, [(cheque, "1000")])

        entry = line.entry_for("HAIR")
        assert entry.transactions == ()
        assert entry.balance == 0

    def test_building_does_not_change_the_book(self, cheque, hair):
        book = make_book(
            ("HAIR", cheque),
            previous_entries=[LedgerEntry(LedgerBucket("HAIR", cheque), Decimal("55.00"))],
        )
        budget = make_budget((hair, "20"))

        first, _ = reconcile(book, [(cheque, "1000")], budget)
        second, _ = reconcile(book, [(cheque, "1000")], budget)

        assert len(book.reconciliations) == 1
        assert first.entry_for("HAIR").balance == second.entry_for("HAIR").balance == Decimal("75.00")

    def test_new_bucket_with_opening_balance(self, cheque):
        log = BucketDefinitionLog()
        log.track("CAR", cheque, date(2013, 8, 1), Decimal("350"))
        book = LedgerBook("Test", bucket_log=log)

        line, _ = reconcile(book, [(cheque, "1000")])

        entry = line.entry_for("CAR")
        assert entry.opening_balance == 0
        assert entry.transactions[0].kind == LedgerTransactionKind.OPENING_BALANCE
        assert entry.balance == Decimal("350")
        assert entry.net_amount == 0

    def test_new_bucket_moved_before_first_reconciliation_keeps_opening_balance(
        self, cheque, savings
    ):
        log = BucketDefinitionLog()
        log.track("CAR", cheque, date(2013, 7, 1), Decimal("300"))
        log.move("CAR", savings, date(2013, 7, 10))
        book = LedgerBook("Test", bucket_log=log)

        line, _ = reconcile(book, [(cheque, "1000"), (savings, "300")])

        entry = line.entry_for("CAR")
        assert entry.bucket.stored_in_account == savings
        (starting,) = entry.transactions
        assert starting.kind == LedgerTransactionKind.OPENING_BALANCE
        assert entry.balance == Decimal("300")

    def test_move_dated_after_reconciliation_keeps_opening_balance(self, cheque, savings):
        log = BucketDefinitionLog()
        log.track("CAR", cheque, date(2013, 7, 1), Decimal("300"))
        log.move("CAR", savings, date(2013, 9, 1))
        book = LedgerBook("Test", bucket_log=log)

        line, _ = reconcile(book, [(cheque, "1000")])

        assert line.entry_for("CAR").balance == Decimal("300")

    def test_moved_bucket_uses_new_account(self, cheque, savings, power):
        book = make_book(
            ("POWER", cheque),
            previous_entries=[LedgerEntry(LedgerBucket("POWER", cheque), Decimal("10"))],
        )
        book.move_bucket("POWER", savings, date(2013, 8, 1))

        line, todo = reconcile(book, [(cheque, "1000"), (savings, "100")], make_budget((power, "175")))

        entry = line.entry_for("POWER")
        assert entry.bucket.stored_in_account == savings
        assert entry.opening_balance == Decimal("10")
        assert [t.destination_account for t in todo.transfer_tasks()] == [savings]

    def test_retired_bucket_gets_no_entry(self, cheque):
        book = make_book(
            ("HAIR", cheque), ("POWER", cheque),
            previous_entries=[
                LedgerEntry(LedgerBucket("HAIR", cheque), Decimal("5")),
                LedgerEntry(LedgerBucket("POWER", cheque), Decimal("5")),
            ],
        )
        book.retire_bucket("HAIR", date(2013, 8, 1))

        line, _ = reconcile(book, [(cheque, "100")])

        assert [e.bucket_code for e in line.entries] == ["POWER"]


class TestBudgetedAmounts:
    def test_salary_account_bucket_needs_no_transfer(self, cheque, power):
        book = make_book(("POWER", cheque))

        line, todo = reconcile(book, [(cheque, "1000")], make_budget((power, "175")))

        txn = line.entry_for("POWER").transactions[0]
        assert txn.kind == LedgerTransactionKind.BUDGET_ALLOCATION
        assert txn.amount == Decimal("175")
        assert len(todo) == 0
        assert line.balance_adjustments == []

    def test_other_account_bucket_issues_transfer(self, cheque, savings, hair):
        book = make_book(("HAIR", savings))

        line, todo = reconcile(book, [(cheque, "1000"), (savings, "100")], make_budget((hair, "55")))

        txn = line.entry_for("HAIR").transactions[0]
        assert txn.kind == LedgerTransactionKind.BUDGET_ALLOCATION_WITH_TRANSFER
        task = todo.transfer_tasks()[0]
        assert task.amount == Decimal("55")
        assert task.source_account == cheque
        assert task.destination_account == savings
        assert task.reference == txn.auto_match_reference
        assert task.reference in task.description

        adjustments = {a.account: a.amount for a in line.balance_adjustments}
        assert adjustments == {cheque: Decimal("-55"), savings: Decimal("55")}
        assert line.total_balance_adjustments == 0

    def test_transfers_are_summed_per_account(self, cheque, savings, hair, power):
        book = make_book(("HAIR", savings), ("POWER", savings))

        line, todo = reconcile(
            book,
            [(cheque, "1000"), (savings, "500")],
            make_budget((hair, "55"), (power, "175")),
        )

        assert len(todo.transfer_tasks()) == 2
        adjustments = {a.account: a.amount for a in line.balance_adjustments}
        assert adjustments == {cheque: Decimal("-230"), savings: Decimal("230")}

    def test_disabled_bucket_allocates_nothing(self, cheque, savings):
        disabled = BudgetBucket("HAIR", kind=BucketKind.SAVED_UP_FOR, active=False)
        book = make_book(("HAIR", savings))

        line, todo = reconcile(book, [(cheque, "1000"), (savings, "100")], make_budget((disabled, "55")))

        txn = line.entry_for("HAIR").transactions[0]
        assert txn.amount == 0
        assert txn.narrative == DISABLED_BUCKET_NARRATIVE
        assert txn.auto_match_reference is None
        assert len(todo) == 0

    def test_transfer_without_salary_account_fails(self, savings, hair):
        book = make_book(("HAIR", savings))
        with pytest.raises(PreconditionError, match="salary account"):
            reconcile(book, [(savings, "100")], make_budget((hair, "55")))


class TestAutoMatching:
    @pytest.fixture
    def transfer(self):
        return budget_allocation(Decimal("55"), PREVIOUS, "Transfer", auto_match_reference="AB12345")

    @pytest.fixture
    def book(self, savings, transfer):
        return make_book(
            ("HAIR", savings),
            previous_entries=[
                LedgerEntry(LedgerBucket("HAIR", savings), transactions=(transfer,))
            ],
        )

    def test_candidates_sorted_by_amount(self, savings):
        a = statement_txn(PREVIOUS, "75", savings, reference1="AB12345")
        b = statement_txn(PREVIOUS, "50", savings, reference3="AB12345 ")
        c = statement_txn(PREVIOUS, "10", savings, reference1="ZZ")
        assert transactions_to_auto_match([a, b, c], "AB12345") == [b, a]

    def test_smallest_candidate_is_matched(self, book, cheque, savings, hair, transfer):
        larger = statement_txn(date(2013, 7, 20), "75", savings, hair, reference1="AB12345")
        smaller = statement_txn(date(2013, 7, 21), "50", savings, hair, reference1="AB12345")

        line, todo = reconcile(book, [(cheque, "1000"), (savings, "200")], transactions=[larger, smaller])

        (stamp,) = line.auto_match_stamps
        assert stamp.ledger_transaction_id == transfer.id
        assert stamp.statement_transaction_id == smaller.id
        assert stamp.reference == "Matched AB12345"

        assert line.entry_for("HAIR").transactions == ()
        assert len(todo) == 0

        book.add_reconciliation(line)
        matched = book.reconciliations[1].entry_for("HAIR").transactions[0]
        assert matched.id == smaller.id
        assert matched.auto_match_reference == "Matched AB12345"

    def test_matched_reference_is_not_matched_again(self, cheque, savings, hair):
        done = budget_allocation(Decimal("55"), PREVIOUS, "Transfer", auto_match_reference="Matched AB12345")
        book = make_book(
            ("HAIR", savings),
            previous_entries=[LedgerEntry(LedgerBucket("HAIR", savings), transactions=(done,))],
        )
        quoted = statement_txn(date(2013, 7, 20), "55", savings, hair, reference1="AB12345")

        line, todo = reconcile(book, [(cheque, "1000"), (savings, "200")], transactions=[quoted])

        assert line.auto_match_stamps == []
        assert [t.id for t in line.entry_for("HAIR").transactions] == [quoted.id]
        assert len(todo) == 0

    def test_missing_match_raises_warning_task(self, book, cheque, savings):
        line, todo = reconcile(book, [(cheque, "1000"), (savings, "200")])

        assert line.auto_match_stamps == []
        (task,) = list(todo)
        assert task.description.startswith("WARNING: Missing auto-match transaction.")
        assert "AB12345" in task.description
        assert "2013-08-14" in task.description
        assert "Savings" in task.description
        assert task.system_generated


class TestCrossAccountPayments:
    def test_payment_from_other_account_needs_transfer(self, cheque, savings, power):
        book = make_book(("POWER", cheque))
        payment = statement_txn(date(2013, 7, 20), "-120", savings, power)

        line, todo = reconcile(book, [(cheque, "1000"), (savings, "500")], transactions=[payment])

        (task,) = todo.transfer_tasks()
        assert task.amount == Decimal("120")
        assert task.source_account == cheque
        assert task.destination_account == savings
        assert task.bucket_code == "POWER"
        assert task.reference in task.description

    def test_manual_transfer_needs_no_task(self, cheque, savings, power):
        book = make_book(("POWER", cheque))
        payment = statement_txn(date(2013, 7, 20), "-120", savings, power)
        twin = statement_txn(date(2013, 7, 20), "120", cheque, power)

        _, todo = reconcile(book, [(cheque, "1000"), (savings, "500")], transactions=[payment, twin])

        assert todo.transfer_tasks() == []

    def test_credit_card_payments_are_ignored(self, cheque, visa, power):
        book = make_book(("POWER", cheque))
        payment = statement_txn(date(2013, 7, 20), "-120", visa, power)

        _, todo = reconcile(book, [(cheque, "1000")], transactions=[payment])

        assert todo.transfer_tasks() == []

    def test_tasks_follow_statement_order_with_many_workers(self, cheque, savings):
        buckets = [BudgetBucket(f"B{i:02d}") for i in range(20)]
        book = make_book(*[(b.code, cheque) for b in buckets])
        payments = [
            statement_txn(date(2013, 7, 16 + i % 10), f"-{i + 1}", savings, b)
            for i, b in enumerate(buckets)
        ]

        _, todo = reconcile(
            book, [(cheque, "5000"), (savings, "500")], transactions=payments, max_workers=8
        )

        assert [t.bucket_code for t in todo.transfer_tasks()] == [b.code for b in buckets]


class TestFutureTransactions:
    def test_future_transactions_are_reversed(self, cheque, visa, power):
        book = make_book(("POWER", cheque))
        surplus_bucket = BudgetBucket("SURPLUS", kind=BucketKind.SURPLUS)
        future = statement_txn(date(2013, 8, 20), "-40", cheque, power)
        card = statement_txn(date(2013, 8, 20), "-15", visa, power)
        journal = statement_txn(date(2013, 8, 21), "-5", cheque, surplus_bucket)

        line, todo = reconcile(book, [(cheque, "1000")], transactions=[future, card, journal])

        (adjustment,) = line.balance_adjustments
        assert adjustment.amount == Decimal("40")
        assert adjustment.account == cheque
        assert "2013-08-20" in adjustment.narrative
        assert [t.description for t in todo] == [
            "Check auto-generated balance adjustments for future transactions."
        ]

    def test_no_review_task_without_future_transactions(self, cheque):
        book = make_book(("POWER", cheque))
        _, todo = reconcile(book, [(cheque, "1000")])
        assert len(todo) == 0


class TestSurplus:
    def test_overdrawn_surplus_raises_high_priority_task(self, cheque, power):
        book = make_book(("POWER", cheque))

        line, todo = reconcile(book, [(cheque, "100")], make_budget((power, "175")))

        assert line.calculated_surplus == Decimal("-75")
        (task,) = list(todo)
        assert task.priority == TaskPriority.HIGH
        assert task.description == (
            "Cheque has a negative surplus balance -75.00, there must be one or more transfers to action."
        )
        assert not isinstance(task, TransferTask)

    def test_surplus_per_account(self, cheque, savings, hair):
        book = make_book(("HAIR", savings))

        line, _ = reconcile(book, [(cheque, "1000"), (savings, "100")], make_budget((hair, "55")))

        surplus = {b.account: b.balance for b in line.surplus_balances}
        # The 55 transfer is already reflected through balance adjustments.
        assert surplus == {cheque: Decimal("945"), savings: Decimal("100")}
        assert line.calculated_surplus == Decimal("1045")


class TestPreconditions:
    def test_book_must_be_attached(self, cheque):
        builder = ReconciliationBuilder()
        with pytest.raises(PreconditionError, match="ledger book"):
            builder.create_new_monthly_reconciliation(
                RECONCILE, [BankBalance(cheque, Decimal("1"))], make_budget(), None, ToDoCollection()
            )

    @pytest.mark.parametrize("missing", ["bank_balances", "budget", "todo_list"])
    def test_inputs_are_required(self, cheque, missing):
        args = {
            "reconciliation_date": RECONCILE,
            "bank_balances": [BankBalance(cheque, Decimal("1"))],
            "budget": make_budget(),
            "statement": None,
            "todo_list": ToDoCollection(),
        }
        args[missing] = None
        builder = ReconciliationBuilder(ledger_book=make_book(("POWER", cheque)))
        with pytest.raises(PreconditionError):
            builder.create_new_monthly_reconciliation(**args)

    def test_statement_is_optional(self, cheque):
        builder = ReconciliationBuilder(ledger_book=make_book(("POWER", cheque)))
        line = builder.create_new_monthly_reconciliation(
            RECONCILE, [BankBalance(cheque, Decimal("1"))], make_budget(), None, ToDoCollection()
        )
        assert [e.bucket_code for e in line.entries] == ["POWER"]
