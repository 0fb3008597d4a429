# models.py
# Role: SQLAlchemy ORM models for the business dashboard.
#       Three independent flat tables: expenses, earnings and inventory.
#       No foreign keys between them.

from decimal import Decimal

from sqlalchemy import Column, BigInteger, Integer, String, Date, Numeric
from sqlalchemy.types import TypeDecorator
from db import Base

CENT = Decimal("0.01")


class Money(TypeDecorator):
    """
    Exact two-place amounts.

    NUMERIC(12, 2) where the database has a real decimal type; SQLite has
    none (NUMERIC there is stored as REAL), so it keeps integer cents and
    SUM() stays exact.
    """

    impl = Numeric(12, 2)
    cache_ok = True

    def load_dialect_impl(self, dialect):
        if dialect.name == "sqlite":
            return dialect.type_descriptor(BigInteger())
        return dialect.type_descriptor(Numeric(12, 2))

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        if not isinstance(value, Decimal):
            value = Decimal(str(value))
        value = value.quantize(CENT)
        if dialect.name == "sqlite":
            return int(value * 100)
        return value

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        if dialect.name == "sqlite":
            return (Decimal(int(value)) / 100).quantize(CENT)
        if not isinstance(value, Decimal):
            value = Decimal(str(value))
        return value.quantize(CENT)


# Money columns: exact decimals with two places, never binary floats
MONEY = Money()


class Expense(Base):
    """
    One business expense.
    """

    __tablename__ = "expenses"
    # Ids are never handed out twice, even after the newest row is deleted
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True, index=True)

    description = Column(String(255), nullable=False)

    amount = Column(MONEY, nullable=False)

    # Free-text bucket, e.g. "Operations"
    category = Column(String(255), nullable=False)

    date = Column(Date, nullable=False, index=True)


class Earning(Base):
    """
    One business earning (sale, fee, client payment).
    """

    __tablename__ = "earnings"
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True, index=True)

    description = Column(String(255), nullable=False)

    amount = Column(MONEY, nullable=False)

    # Who paid, e.g. a client or a product line
    source = Column(String(255), nullable=False)

    date = Column(Date, nullable=False, index=True)


class InventoryItem(Base):
    """
    One stocked item. Its book value is quantity * cost_price.
    """

    __tablename__ = "inventory"
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True, index=True)

    name = Column(String(255), nullable=False, index=True)

    quantity = Column(Integer, nullable=False)

    cost_price = Column(MONEY, nullable=False)

    selling_price = Column(MONEY, nullable=False)

    supplier = Column(String(255), nullable=True)
