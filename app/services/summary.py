# app/services/summary.py
#
# Summary Aggregator
# Computes dashboard totals and per-month series straight from the three tables.
# Nothing is cached: every call re-reads the current committed state.

from decimal import Decimal
from typing import Any, Dict, List

import structlog
from sqlalchemy import func, literal_column
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from models import Expense, Earning, InventoryItem, MONEY
from app.errors import StorageError
from app.schemas import to_money, money_to_json

logger = structlog.get_logger(__name__)


# ---- SQL helpers ----

def month_key(column, dialect_name: str):
    """
    SQL expression turning a DATE column into its 'YYYY-MM' key.

    The format is rendered as a literal (not a bind parameter) so the
    SELECT and GROUP BY expressions compile identically on PostgreSQL.
    """
    if dialect_name == "postgresql":
        return func.to_char(column, literal_column("'YYYY-MM'"))
    return func.strftime(literal_column("'%Y-%m'"), column)


def _begin_snapshot(db: Session) -> None:
    # One REPEATABLE READ transaction keeps all six figures consistent
    if db.get_bind().dialect.name == "postgresql" and not db.in_transaction():
        db.connection(execution_options={"isolation_level": "REPEATABLE READ"})


def _total(db: Session, expr) -> Decimal:
    # MONEY decodes the sum exactly (integer cents on SQLite)
    return to_money(db.query(func.sum(expr, type_=MONEY)).scalar())


def _monthly_totals(db: Session, model) -> List[Dict[str, Any]]:
    key = month_key(model.date, db.get_bind().dialect.name).label("month")

    rows = (
        db.query(key, func.sum(model.amount, type_=MONEY).label("total"))
        .group_by(key)
        .order_by(key)
        .all()
    )
    return [{"month": r.month, "total": to_money(r.total)} for r in rows]


# ---- Public API ----

def compute_summary(db: Session) -> Dict[str, Any]:
    """
    Returns the SummarySnapshot as Decimals:
        totalExpenses, totalEarnings, netProfit, totalInventoryValue,
        monthlyExpenses, monthlyEarnings ([{month, total}], ascending)
    """
    try:
        _begin_snapshot(db)

        total_expenses = _total(db, Expense.amount)
        total_earnings = _total(db, Earning.amount)
        inventory_value = _total(db, InventoryItem.quantity * InventoryItem.cost_price)

        monthly_expenses = _monthly_totals(db, Expense)
        monthly_earnings = _monthly_totals(db, Earning)

        # Read-only; end the snapshot transaction
        db.rollback()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error("summary_failed", error=repr(exc), exc_info=True)
        raise StorageError("Failed to fetch summary data") from exc

    return {
        "totalExpenses": total_expenses,
        "totalEarnings": total_earnings,
        "netProfit": total_earnings - total_expenses,
        "totalInventoryValue": inventory_value,
        "monthlyExpenses": monthly_expenses,
        "monthlyEarnings": monthly_earnings,
    }


def summary_to_json(summary: Dict[str, Any]) -> Dict[str, Any]:
    """
    Money values as JSON numbers; month keys stay strings.
    """
    def series(rows):
        return [{"month": r["month"], "total": money_to_json(r["total"])} for r in rows]

    return {
        "totalExpenses": money_to_json(summary["totalExpenses"]),
        "totalEarnings": money_to_json(summary["totalEarnings"]),
        "netProfit": money_to_json(summary["netProfit"]),
        "totalInventoryValue": money_to_json(summary["totalInventoryValue"]),
        "monthlyExpenses": series(summary["monthlyExpenses"]),
        "monthlyEarnings": series(summary["monthlyEarnings"]),
    }
