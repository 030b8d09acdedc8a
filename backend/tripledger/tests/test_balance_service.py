"""
Tests for end-to-end balance computation.
"""
from decimal import Decimal
from tripledger.core.config import SplitScope
from tripledger.schemas import DiagnosticCode, Expense, ExpenseSplit, Participant, RecordType, Repayment
from tripledger.services.balance_service import compute_balances, report


def by_id(balance_report):
    return {b.participant_id: b for b in balance_report.balances}


def repayment(repayment_id, paid_by, paid_to, amount, **kwargs):
    return Repayment(id=repayment_id, paid_by=paid_by, paid_to=paid_to, amount=Decimal(amount), **kwargs)


def test_single_expense_equal_split(two_participants, dinner_expense, make_snapshot):
    result = compute_balances(make_snapshot(two_participants, [dinner_expense]))
    balances = by_id(result)

    assert balances[1].net_balance == Decimal("50.00")
    assert balances[2].net_balance == Decimal("-50.00")
    assert balances[2].owes_to_others == {1: Decimal("50.00")}
    assert balances[1].owed_by_others == {2: Decimal("50.00")}
    assert balances[1].owes_to_others == {}
    assert result.total_expenses == Decimal("100.00")
    assert result.currency == "USD"
    assert result.is_trusted


def test_repayment_reduces_debt_but_not_net(two_participants, dinner_expense, make_snapshot):
    snapshot = make_snapshot(two_participants, [dinner_expense], [repayment(1, 2, 1, "20.00")])
    balances = by_id(compute_balances(snapshot))

    assert balances[2].owes_to_others == {1: Decimal("30.00")}
    assert balances[1].owed_by_others == {2: Decimal("30.00")}
    assert balances[1].net_balance == Decimal("50.00")
    assert balances[2].net_balance == Decimal("-50.00")


def test_three_way_split_rounding(three_participants, dinner_expense, make_snapshot):
    result = compute_balances(make_snapshot(three_participants, [dinner_expense]))
    balances = by_id(result)

    assert [balances[pid].total_owed for pid in (1, 2, 3)] == [
        Decimal("33.34"), Decimal("33.33"), Decimal("33.33")
    ]
    assert sum(b.total_owed for b in result.balances) == Decimal("100.00")
    assert balances[1].net_balance == Decimal("66.66")


def test_split_mismatch_only_rejects_that_expense(two_participants, make_snapshot):
    good = Expense(id=1, payer_id=1, amount=Decimal("60.00"))
    bad = Expense(
        id=2, payer_id=2, amount=Decimal("100.00"),
        splits=[
            ExpenseSplit(participant_id=1, share_amount=Decimal("50.00")),
            ExpenseSplit(participant_id=2, share_amount=Decimal("49.98")),
        ]
    )
    result = compute_balances(make_snapshot(two_participants, [good, bad]))

    assert [(e.code, e.record_id) for e in result.errors] == [(DiagnosticCode.SPLIT_MISMATCH, 2)]
    assert not result.is_trusted
    balances = by_id(result)
    assert balances[1].net_balance == Decimal("30.00")
    assert balances[2].owes_to_others == {1: Decimal("30.00")}


def test_overpayment_floors_debt(two_participants, make_snapshot):
    expense = Expense(id=1, payer_id=1, amount=Decimal("60.00"))
    result = compute_balances(make_snapshot(two_participants, [expense], [repayment(5, 2, 1, "50.00")]))
    balances = by_id(result)

    assert balances[2].owes_to_others == {}
    assert balances[1].owed_by_others == {}
    assert [(w.code, w.record_id) for w in result.warnings] == [(DiagnosticCode.OVERPAYMENT, 5)]


def test_net_balances_sum_to_zero(make_snapshot):
    participants = [Participant(id=i, name=f"P{i}") for i in range(1, 6)]
    expenses = [
        Expense(id=1, payer_id=1, amount=Decimal("100.00")),
        Expense(id=2, payer_id=2, amount=Decimal("17.35")),
        Expense(id=3, payer_id=3, amount=Decimal("0.07")),
        Expense(
            id=4, payer_id=4, amount=Decimal("250.00"),
            splits=[
                ExpenseSplit(participant_id=1, share_amount=Decimal("125.00")),
                ExpenseSplit(participant_id=5, share_amount=Decimal("125.00")),
            ]
        ),
        Expense(id=5, payer_id=5, amount=Decimal("33.33")),
    ]
    repayments = [repayment(1, 2, 1, "10.00"), repayment(2, 5, 4, "200.00")]
    result = compute_balances(make_snapshot(participants, expenses, repayments))

    assert abs(sum(b.net_balance for b in result.balances)) <= Decimal("0.01")
    for balance in result.balances:
        assert all(amount > 0 for amount in balance.owes_to_others.values())


def test_recomputing_gives_identical_output(three_participants, dinner_expense, make_snapshot):
    snapshot = make_snapshot(three_participants, [dinner_expense], [repayment(1, 3, 1, "5.00")])
    assert compute_balances(snapshot).model_dump() == compute_balances(snapshot).model_dump()


def test_idle_participant_gets_zero_balance(three_participants, make_snapshot):
    expense = Expense(
        id=1, payer_id=1, amount=Decimal("10.00"),
        splits=[
            ExpenseSplit(participant_id=1, share_amount=Decimal("5.00")),
            ExpenseSplit(participant_id=2, share_amount=Decimal("5.00")),
        ]
    )
    balances = by_id(compute_balances(make_snapshot(three_participants, [expense])))

    carol = balances[3]
    assert carol.participant_name == "Carol"
    assert carol.total_paid == Decimal(0)
    assert carol.total_owed == Decimal(0)
    assert carol.is_settled
    assert carol.owes_to_others == {} and carol.owed_by_others == {}


def test_balances_follow_participant_order(three_participants, dinner_expense, make_snapshot):
    reordered = [three_participants[2], three_participants[0], three_participants[1]]
    result = compute_balances(make_snapshot(reordered, [dinner_expense]))
    assert [b.participant_id for b in result.balances] == [3, 1, 2]


def test_split_scope_override(three_participants, dinner_expense, make_snapshot):
    result = compute_balances(make_snapshot(three_participants, [dinner_expense]), SplitScope.EXCLUDE_PAYER)
    balances = by_id(result)

    assert balances[1].total_owed == Decimal(0)
    assert balances[2].owes_to_others == {1: Decimal("50.00")}


def test_invalid_records_are_reported(two_participants, make_snapshot):
    expenses = [
        Expense(id=1, payer_id=1, amount=Decimal("0")),
        Expense(id=2, payer_id=1, amount=Decimal("10.00"), currency="EUR"),
        Expense(id=3, payer_id=1, amount=Decimal("10.00"), currency="usd"),
        Expense(id=4, payer_id=7, amount=Decimal("10.00")),
    ]
    repayments = [
        repayment(1, 2, 1, "-1.00"),
        repayment(2, 2, 2, "1.00"),
        repayment(3, 8, 1, "1.00"),
        repayment(4, 2, 1, "1.00", currency="GBP"),
    ]
    result = compute_balances(make_snapshot(two_participants, expenses, repayments, currency="USD"))

    assert [(e.code, e.record_type, e.record_id) for e in result.errors] == [
        (DiagnosticCode.INVALID_AMOUNT, RecordType.EXPENSE, 1),
        (DiagnosticCode.CURRENCY_MISMATCH, RecordType.EXPENSE, 2),
        (DiagnosticCode.INVALID_AMOUNT, RecordType.REPAYMENT, 1),
        (DiagnosticCode.CURRENCY_MISMATCH, RecordType.REPAYMENT, 4),
    ]
    assert [(w.code, w.record_id) for w in result.warnings] == [
        (DiagnosticCode.DANGLING_REFERENCE, 4),
        (DiagnosticCode.SELF_REPAYMENT, 2),
        (DiagnosticCode.DANGLING_REFERENCE, 3),
    ]
    balances = by_id(result)
    assert balances[2].owes_to_others == {1: Decimal("5.00")}
    assert result.total_expenses == Decimal("10.00")


def test_currency_defaults_to_first_expense(two_participants, make_snapshot):
    expenses = [
        Expense(id=1, payer_id=1, amount=Decimal("10.00"), currency="jpy"),
        Expense(id=2, payer_id=2, amount=Decimal("10.00"), currency="USD"),
    ]
    result = compute_balances(make_snapshot(two_participants, expenses))
    assert result.currency == "JPY"
    assert [e.record_id for e in result.errors] == [2]


def test_empty_trip(two_participants, make_snapshot):
    result = compute_balances(make_snapshot(two_participants))
    assert result.currency is None
    assert result.total_expenses == Decimal(0)
    assert all(b.is_settled for b in result.balances)


def test_report_quantizes_amounts(two_participants):
    balances = report(
        two_participants,
        {1: Decimal("10.005"), 2: Decimal(0)},
        {1: Decimal("5.0025"), 2: Decimal("5.0025")},
        {2: {1: Decimal("5.0025")}}
    )
    assert balances[0].total_paid == Decimal("10.01")
    assert balances[1].owes_to_others == {1: Decimal("5.00")}


def test_net_balances_sum_to_zero_with_tolerated_splits(two_participants, make_snapshot):
    """Custom splits a cent short on every expense still balance out."""
    expenses = [
        Expense(
            id=i, payer_id=1, amount=Decimal("100.00"),
            splits=[
                ExpenseSplit(participant_id=1, share_amount=Decimal("50.00")),
                ExpenseSplit(participant_id=2, share_amount=Decimal("49.99")),
            ]
        )
        for i in range(1, 6)
    ]
    result = compute_balances(make_snapshot(two_participants, expenses))
    balances = by_id(result)

    assert result.errors == []
    assert sum(b.net_balance for b in result.balances) == Decimal(0)
    assert balances[1].total_owed == Decimal("250.05")
    assert balances[2].owes_to_others == {1: Decimal("249.95")}


def test_currency_skips_invalid_first_expense(two_participants, make_snapshot):
    """A rejected first expense doesn't decide the reporting currency."""
    expenses = [
        Expense(id=1, payer_id=1, amount=Decimal("0"), currency="EUR"),
        Expense(id=2, payer_id=1, amount=Decimal("100.00"), currency="USD"),
    ]
    result = compute_balances(make_snapshot(two_participants, expenses))

    assert result.currency == "USD"
    assert [(e.code, e.record_id) for e in result.errors] == [(DiagnosticCode.INVALID_AMOUNT, 1)]
    assert by_id(result)[2].owes_to_others == {1: Decimal("50.00")}


def test_duplicate_participants_get_one_row(dinner_expense, make_snapshot):
    participants = [
        Participant(id=1, name="Alice"),
        Participant(id=2, name="Bob"),
        Participant(id=1, name="Alice again"),
    ]
    result = compute_balances(make_snapshot(participants, [dinner_expense]))

    assert [b.participant_id for b in result.balances] == [1, 2]
    assert result.balances[0].participant_name == "Alice"
    assert sum(b.net_balance for b in result.balances) == Decimal(0)


def test_report_ignores_repeated_participant(two_participants):
    balances = report(
        two_participants + [Participant(id=2, name="Bob")],
        {1: Decimal("10.00"), 2: Decimal(0)},
        {1: Decimal("5.00"), 2: Decimal("5.00")},
        {2: {1: Decimal("5.00")}}
    )
    assert [b.participant_id for b in balances] == [1, 2]
