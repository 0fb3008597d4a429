from decimal import Decimal

from app.repository import earnings, expenses, inventory
from app.services.summary import compute_summary, summary_to_json


def add_expense(db, amount, day):
    expenses.create(db, {"description": "x", "amount": amount, "category": "Ops", "date": day})


def add_earning(db, amount, day):
    earnings.create(db, {"description": "x", "amount": amount, "source": "Shop", "date": day})


def test_empty_database_gives_zeroes(db_session):
    summary = compute_summary(db_session)

    assert summary == {
        "totalExpenses": Decimal("0.00"),
        "totalEarnings": Decimal("0.00"),
        "netProfit": Decimal("0.00"),
        "totalInventoryValue": Decimal("0.00"),
        "monthlyExpenses": [],
        "monthlyEarnings": [],
    }


def test_monthly_expenses_are_grouped_and_sorted(db_session):
    add_expense(db_session, 10, "2024-02-01")
    add_expense(db_session, 50, "2024-01-15")
    add_expense(db_session, 30, "2024-01-20")

    summary = compute_summary(db_session)

    assert summary["monthlyExpenses"] == [
        {"month": "2024-01", "total": Decimal("80.00")},
        {"month": "2024-02", "total": Decimal("10.00")},
    ]
    assert summary["totalExpenses"] == Decimal("90.00")


def test_net_profit_and_independent_series(db_session):
    add_expense(db_session, "100.25", "2024-01-10")
    add_earning(db_session, "300.50", "2024-03-05")

    summary = compute_summary(db_session)

    assert summary["totalEarnings"] == Decimal("300.50")
    assert summary["netProfit"] == Decimal("200.25")
    assert [m["month"] for m in summary["monthlyExpenses"]] == ["2024-01"]
    assert [m["month"] for m in summary["monthlyEarnings"]] == ["2024-03"]


def test_inventory_value_is_exact(db_session):
    inventory.create(db_session, {"name": "Tea", "quantity": 100, "cost_price": "10.50", "selling_price": "19.99"})
    inventory.create(db_session, {"name": "Cups", "quantity": 3, "cost_price": "0.10", "selling_price": "1"})

    for _ in range(5):
        assert compute_summary(db_session)["totalInventoryValue"] == Decimal("1050.30")


def test_summary_reflects_latest_writes(db_session):
    add_expense(db_session, 5, "2024-05-05")
    assert compute_summary(db_session)["totalExpenses"] == Decimal("5.00")

    add_expense(db_session, 7, "2024-05-06")
    assert compute_summary(db_session)["totalExpenses"] == Decimal("12.00")


def test_json_shape_uses_numbers():
    payload = summary_to_json(
        {
            "totalExpenses": Decimal("90.00"),
            "totalEarnings": Decimal("0.00"),
            "netProfit": Decimal("-90.00"),
            "totalInventoryValue": Decimal("1050.00"),
            "monthlyExpenses": [{"month": "2024-01", "total": Decimal("80.00")}],
            "monthlyEarnings": [],
        }
    )

    assert payload["netProfit"] == -90
    assert payload["totalInventoryValue"] == 1050
    assert payload["monthlyExpenses"] == [{"month": "2024-01", "total": 80}]


def test_large_totals_do_not_drift(db_session):
    expenses.create_many(
        db_session,
        [{"description": "x", "amount": "9999999999.99", "category": "Ops", "date": "2024-01-01"}] * 2000,
    )

    summary = compute_summary(db_session)

    assert summary["totalExpenses"] == Decimal("19999999999980.00")
    assert summary["monthlyExpenses"] == [{"month": "2024-01", "total": Decimal("19999999999980.00")}]
