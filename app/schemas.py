# app/schemas.py
# Role: Declarative field schemas for every resource.
#       One ResourceSchema per table drives validation/coercion before writes,
#       JSON shaping of stored rows, and the form/table descriptor served to clients.

"""
Resource schemas.

A FieldSpec knows how to turn one raw JSON value into the Python value stored
in the database (parse) and back into a JSON-friendly value (dump).
A ResourceSchema groups the fields of one resource and validates whole
submissions, collecting every field error into a single ValidationError.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, List, Optional, Tuple

from app.errors import ValidationError

CENT = Decimal("0.01")

# Numeric(12, 2) leaves ten digits before the decimal point
MAX_MONEY = Decimal("9999999999.99")
MAX_INTEGER = 2**31 - 1

# Accepts "2024-01-15" and ISO timestamps such as "2024-01-15T00:00:00.000Z"
DATE_PREFIX_RE = re.compile(r"^(\d{4}-\d{2}-\d{2})(?:[T ].*)?$")

TEXT = "text"
MONEY = "money"
INTEGER = "integer"
DATE = "date"


class FieldError(ValueError):
    pass


def _is_blank(raw: Any) -> bool:
    return raw is None or (isinstance(raw, str) and raw.strip() == "")


def _to_decimal(raw: Any) -> Decimal:
    # bool is an int subclass; True must not become 1
    if isinstance(raw, bool):
        raise FieldError("must be a valid number.")
    if isinstance(raw, int):
        return Decimal(raw)
    if isinstance(raw, float):
        value = Decimal(repr(raw))
    elif isinstance(raw, str):
        try:
            value = Decimal(raw.strip())
        except InvalidOperation:
            raise FieldError("must be a valid number.")
    else:
        raise FieldError("must be a valid number.")

    if not value.is_finite():
        raise FieldError("must be a valid number.")
    return value


def to_money(value: Any) -> Decimal:
    """
    Normalize an aggregate / stored amount to a two-place Decimal.
    None (e.g. SUM over no rows) becomes 0.00.
    """
    if value is None:
        return Decimal("0.00")
    if not isinstance(value, Decimal):
        value = Decimal(str(value))
    return value.quantize(CENT)


def money_to_json(value: Optional[Decimal]) -> Optional[float]:
    if value is None:
        return None
    return float(to_money(value))


@dataclass(frozen=True)
class FieldSpec:
    name: str
    kind: str
    label: str
    required: bool = True
    max_length: int = 255
    placeholder: Optional[str] = None

    def parse(self, raw: Any) -> Any:
        """
        Convert one raw submitted value. Raises FieldError with a
        label-less reason; ResourceSchema.validate prefixes the label.
        """
        if _is_blank(raw):
            if self.required:
                raise FieldError("is required.")
            return None

        if self.kind == TEXT:
            return self._parse_text(raw)
        if self.kind == MONEY:
            return self._parse_money(raw)
        if self.kind == INTEGER:
            return self._parse_integer(raw)
        if self.kind == DATE:
            return self._parse_date(raw)
        raise FieldError(f"has an unknown type {self.kind!r}.")

    def _parse_text(self, raw: Any) -> str:
        if not isinstance(raw, str):
            raise FieldError("must be text.")
        value = raw.strip()
        if len(value) > self.max_length:
            raise FieldError(f"must be at most {self.max_length} characters.")
        return value

    def _parse_money(self, raw: Any) -> Decimal:
        value = _to_decimal(raw)
        if value < 0:
            raise FieldError("must not be negative.")
        if value > MAX_MONEY:
            raise FieldError("is too large.")
        if value != value.quantize(CENT):
            raise FieldError("must have at most 2 decimal places.")
        return value.quantize(CENT)

    def _parse_integer(self, raw: Any) -> int:
        value = _to_decimal(raw)
        if value != value.to_integral_value():
            raise FieldError("must be a whole number.")
        if value < 0:
            raise FieldError("must not be negative.")
        if value > MAX_INTEGER:
            raise FieldError("is too large.")
        return int(value)

    def _parse_date(self, raw: Any) -> date:
        if isinstance(raw, datetime):
            return raw.date()
        if isinstance(raw, date):
            return raw
        if isinstance(raw, str):
            match = DATE_PREFIX_RE.match(raw.strip())
            if match:
                try:
                    return date.fromisoformat(match.group(1))
                except ValueError:
                    pass
        raise FieldError("must be a date in YYYY-MM-DD format.")

    def dump(self, value: Any) -> Any:
        if value is None:
            return None
        if self.kind == MONEY:
            return money_to_json(value)
        if self.kind == DATE:
            return value.isoformat()
        return value

    def describe(self) -> Dict[str, Any]:
        # Form input type as a browser understands it
        input_type = {TEXT: "text", MONEY: "number", INTEGER: "number", DATE: "date"}[self.kind]
        return {
            "name": self.name,
            "label": self.label,
            "type": input_type,
            "kind": self.kind,
            "required": self.required,
            "placeholder": self.placeholder,
            # smallest accepted increment for number inputs
            "step": {MONEY: "0.01", INTEGER: "1"}.get(self.kind),
        }


@dataclass(frozen=True)
class ResourceSchema:
    # URL segment and table-ish name, e.g. "expenses"
    name: str
    # Singular display name, e.g. "Expense"
    item_name: str
    # Plural used in messages, e.g. "inventory items"
    plural_label: str
    fields: Tuple[FieldSpec, ...]
    # Field names shown as list columns, in order
    columns: Tuple[str, ...] = field(default_factory=tuple)

    @property
    def field_names(self) -> List[str]:
        return [f.name for f in self.fields]

    @property
    def singular_label(self) -> str:
        return self.item_name.lower()

    def validate(self, payload: Any) -> Dict[str, Any]:
        """
        Validate a full submission and return the values to store.

        Every declared field is read (absent optional fields become None, so
        updates fully replace the row). Keys outside the schema, such as id,
        are ignored.
        """
        if not isinstance(payload, dict):
            raise ValidationError("Request body must be a JSON object.")

        clean: Dict[str, Any] = {}
        problems: List[str] = []

        for spec in self.fields:
            try:
                clean[spec.name] = spec.parse(payload.get(spec.name))
            except FieldError as e:
                problems.append(f"{spec.label} {e}")

        if problems:
            raise ValidationError(" ".join(problems))
        return clean

    def dump(self, obj: Any) -> Dict[str, Any]:
        out: Dict[str, Any] = {"id": obj.id}
        for spec in self.fields:
            out[spec.name] = spec.dump(getattr(obj, spec.name))
        return out

    def describe(self) -> Dict[str, Any]:
        labels = {f.name: f.label for f in self.fields}
        return {
            "resource": self.name,
            "itemName": self.item_name,
            "fields": [f.describe() for f in self.fields],
            "columns": [{"key": c, "label": labels[c]} for c in self.columns],
        }


# -------------------------------------------------------------------
# Resource definitions
# -------------------------------------------------------------------

EXPENSE_SCHEMA = ResourceSchema(
    name="expenses",
    item_name="Expense",
    plural_label="expenses",
    fields=(
        FieldSpec("description", TEXT, "Description", placeholder="e.g., TGS Supplies"),
        FieldSpec("amount", MONEY, "Amount", placeholder="e.g., 50.00"),
        FieldSpec("category", TEXT, "Category", placeholder="e.g., Operations"),
        FieldSpec("date", DATE, "Date"),
    ),
    columns=("date", "description", "category", "amount"),
)

EARNING_SCHEMA = ResourceSchema(
    name="earnings",
    item_name="Earning",
    plural_label="earnings",
    fields=(
        FieldSpec("description", TEXT, "Description", placeholder="e.g., Client / Product"),
        FieldSpec("amount", MONEY, "Amount", placeholder="e.g., 1200"),
        FieldSpec("source", TEXT, "Source", placeholder="e.g., TGS / ToF / JN"),
        FieldSpec("date", DATE, "Date"),
    ),
    columns=("date", "description", "source", "amount"),
)

INVENTORY_SCHEMA = ResourceSchema(
    name="inventory",
    item_name="Inventory item",
    plural_label="inventory items",
    fields=(
        FieldSpec("name", TEXT, "Item Name", placeholder="e.g., Product A"),
        FieldSpec("quantity", INTEGER, "Quantity", placeholder="e.g., 100"),
        FieldSpec("cost_price", MONEY, "Cost Price", placeholder="e.g., 10.50"),
        FieldSpec("selling_price", MONEY, "Selling Price", placeholder="e.g., 19.99"),
        FieldSpec("supplier", TEXT, "Supplier", required=False, placeholder="e.g., Supplier Inc."),
    ),
    columns=("name", "quantity", "cost_price", "selling_price", "supplier"),
)

SCHEMAS = {s.name: s for s in (EXPENSE_SCHEMA, EARNING_SCHEMA, INVENTORY_SCHEMA)}
