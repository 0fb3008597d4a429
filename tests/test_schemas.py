from datetime import date
from decimal import Decimal

import pytest

from app.errors import ValidationError
from app.schemas import EXPENSE_SCHEMA, EARNING_SCHEMA, INVENTORY_SCHEMA, to_money


def expense(**overrides):
    data = {"description": "Paper", "amount": "50.00", "category": "Office", "date": "2024-01-15"}
    data.update(overrides)
    return data


def test_expense_is_coerced_to_storage_types():
    clean = EXPENSE_SCHEMA.validate(expense(amount=12.5))

    assert clean == {
        "description": "Paper",
        "amount": Decimal("12.50"),
        "category": "Office",
        "date": date(2024, 1, 15),
    }


def test_text_is_stripped_and_unknown_keys_ignored():
    clean = EXPENSE_SCHEMA.validate(expense(description="  Paper  ", id=99, created_at="x"))

    assert clean["description"] == "Paper"
    assert "id" not in clean


@pytest.mark.parametrize("amount", ["abc", "", None, "NaN", "Infinity", True, [], "1.234", "-5"])
def test_bad_amounts_are_rejected(amount):
    with pytest.raises(ValidationError) as exc:
        EXPENSE_SCHEMA.validate(expense(amount=amount))
    assert exc.value.message.startswith("Amount")


def test_zero_amount_is_allowed():
    assert EXPENSE_SCHEMA.validate(expense(amount=0))["amount"] == Decimal("0.00")


def test_iso_timestamp_date_is_accepted():
    clean = EARNING_SCHEMA.validate(
        {"description": "Sale", "amount": 1200, "source": "TGS", "date": "2024-02-01T00:00:00.000Z"}
    )
    assert clean["date"] == date(2024, 2, 1)


@pytest.mark.parametrize("value", ["2024-13-01", "15/01/2024", "yesterday", 20240115])
def test_bad_dates_are_rejected(value):
    with pytest.raises(ValidationError):
        EXPENSE_SCHEMA.validate(expense(date=value))


def test_all_field_errors_are_reported_together():
    with pytest.raises(ValidationError) as exc:
        EXPENSE_SCHEMA.validate({"amount": "abc"})

    message = exc.value.message
    assert "Description is required." in message
    assert "Amount must be a valid number." in message
    assert "Category is required." in message
    assert "Date is required." in message


def test_non_object_payload_is_rejected():
    with pytest.raises(ValidationError):
        EXPENSE_SCHEMA.validate(["not", "a", "dict"])


def test_inventory_quantity_must_be_whole_and_present():
    base = {"name": "Tea", "quantity": "100", "cost_price": "10.50", "selling_price": "19.99"}
    assert INVENTORY_SCHEMA.validate(base)["quantity"] == 100

    for bad in (None, "10.5", "ten", -1):
        with pytest.raises(ValidationError):
            INVENTORY_SCHEMA.validate({**base, "quantity": bad})


def test_inventory_supplier_is_optional():
    clean = INVENTORY_SCHEMA.validate(
        {"name": "Tea", "quantity": 1, "cost_price": 1, "selling_price": 2, "supplier": "  "}
    )
    assert clean["supplier"] is None


def test_describe_lists_fields_and_columns():
    described = INVENTORY_SCHEMA.describe()

    assert described["resource"] == "inventory"
    assert [f["name"] for f in described["fields"]] == [
        "name", "quantity", "cost_price", "selling_price", "supplier",
    ]
    assert described["fields"][-1]["required"] is False
    assert described["fields"][2]["step"] == "0.01"
    assert described["fields"][1]["step"] == "1"
    assert described["fields"][0]["step"] is None
    assert described["columns"][0] == {"key": "name", "label": "Item Name"}


def test_to_money():
    assert to_money(None) == Decimal("0.00")
    assert to_money(1050.0) == Decimal("1050.00")
    assert to_money(Decimal("80")) == Decimal("80.00")
