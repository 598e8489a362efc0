"""Domain type definitions for cashflow.

These types mirror the persisted state layout:
- Money: Amount in currency units (decimal, non-negative for records)
- CategoryName: Name of an income or expense category
- TransactionType / Frequency: closed vocabularies used by records

Every record converts to and from the camelCase JSON shape used by the
state file and by exports.
"""

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Any, NewType

from cashflow.dates import parse_date
from cashflow.domain.validation import coerce_amount, coerce_int

# Money amounts are plain decimals in currency units (e.g. 12.5 == $12.50)
Money = NewType("Money", float)

# Category name for income and expense categories
CategoryName = NewType("CategoryName", str)

UNCATEGORIZED = CategoryName("Uncategorized")


class TransactionType(str, Enum):
    """Direction of a transaction."""

    INCOME = "income"
    EXPENSE = "expense"


class Frequency(str, Enum):
    """Cadence of a recurring transaction."""

    WEEKLY = "weekly"
    BI_WEEKLY = "bi-weekly"
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    YEARLY = "yearly"


def _parse_type(value: Any) -> TransactionType:
    try:
        return TransactionType(value)
    except ValueError:
        return TransactionType.EXPENSE


@dataclass(frozen=True)
class Transaction:
    """Immutable dated transaction."""

    id: int
    date: date
    type: TransactionType
    category: CategoryName
    amount: Money
    description: str = ""
    recurring: bool = False
    recurring_id: int | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Transaction":
        """Build a transaction from its persisted shape.

        Raises:
            ValueError: If the date cannot be parsed.
        """
        recurring_id = data.get("recurringId")
        return cls(
            id=coerce_int(data.get("id")),
            date=parse_date(str(data.get("date", ""))),
            type=_parse_type(data.get("type")),
            category=CategoryName(str(data.get("category") or "")),
            amount=Money(coerce_amount(data.get("amount"))),
            description=str(data.get("description") or ""),
            recurring=bool(data.get("recurring", False)),
            recurring_id=coerce_int(recurring_id) if recurring_id is not None else None,
        )

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "id": self.id,
            "date": self.date.isoformat(),
            "type": self.type.value,
            "category": self.category,
            "amount": self.amount,
            "description": self.description,
            "recurring": self.recurring,
        }
        if self.recurring_id is not None:
            data["recurringId"] = self.recurring_id
        return data


@dataclass(frozen=True)
class RecurringTransaction:
    """Immutable template for generating transactions at a fixed cadence."""

    id: int
    name: str
    type: TransactionType
    category: CategoryName
    amount: Money
    frequency: Frequency
    start_date: date | None = None
    is_active: bool = True
    description: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RecurringTransaction":
        raw_start = data.get("startDate")
        try:
            frequency = Frequency(data.get("frequency"))
        except ValueError:
            frequency = Frequency.MONTHLY
        return cls(
            id=coerce_int(data.get("id")),
            name=str(data.get("name") or ""),
            type=_parse_type(data.get("type")),
            category=CategoryName(str(data.get("category") or "")),
            amount=Money(coerce_amount(data.get("amount"))),
            frequency=frequency,
            start_date=parse_date(str(raw_start)) if raw_start else None,
            is_active=bool(data.get("isActive", True)),
            description=str(data.get("description") or ""),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "type": self.type.value,
            "category": self.category,
            "amount": self.amount,
            "frequency": self.frequency.value,
            "startDate": self.start_date.isoformat() if self.start_date else "",
            "isActive": self.is_active,
            "description": self.description,
        }


@dataclass(frozen=True)
class ExpenseCategory:
    """Immutable expense category; spent is derived from transactions."""

    name: CategoryName
    budgeted: Money = Money(0.0)
    spent: Money = Money(0.0)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ExpenseCategory":
        return cls(
            name=CategoryName(str(data.get("name") or "")),
            budgeted=Money(coerce_amount(data.get("budgeted"))),
            spent=Money(coerce_amount(data.get("spent"))),
        )

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "budgeted": self.budgeted, "spent": self.spent}


@dataclass(frozen=True)
class IncomeCategory:
    """Immutable income category; actual is derived from transactions."""

    name: CategoryName
    budgeted: Money = Money(0.0)
    actual: Money = Money(0.0)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "IncomeCategory":
        return cls(
            name=CategoryName(str(data.get("name") or "")),
            budgeted=Money(coerce_amount(data.get("budgeted"))),
            actual=Money(coerce_amount(data.get("actual"))),
        )

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "budgeted": self.budgeted, "actual": self.actual}


Category = ExpenseCategory | IncomeCategory


@dataclass(frozen=True)
class MonthEntry:
    """Immutable row of the legacy fixed-plus-variable monthly view."""

    month: str
    variable_income: Money = Money(0.0)
    variable_expenses: Money = Money(0.0)
    comments: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "MonthEntry":
        return cls(
            month=str(data.get("month") or ""),
            variable_income=Money(coerce_amount(data.get("variableIncome"))),
            variable_expenses=Money(coerce_amount(data.get("variableExpenses"))),
            comments=str(data.get("comments") or ""),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "month": self.month,
            "variableIncome": self.variable_income,
            "variableExpenses": self.variable_expenses,
            "comments": self.comments,
        }


MONTH_NAMES = [
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
]


def default_months() -> list[MonthEntry]:
    """Twelve empty legacy month rows, January to December."""
    return [MonthEntry(month=name) for name in MONTH_NAMES]


def default_expense_categories() -> list[ExpenseCategory]:
    return [
        ExpenseCategory(CategoryName("Housing")),
        ExpenseCategory(CategoryName("Food & Dining")),
        ExpenseCategory(CategoryName("Transportation")),
    ]


def default_income_categories() -> list[IncomeCategory]:
    return [
        IncomeCategory(CategoryName("Salary")),
        IncomeCategory(CategoryName("Freelance")),
    ]


@dataclass(frozen=True)
class AppState:
    """Immutable snapshot of everything the application persists.

    Commands load a snapshot, derive a new one with dataclasses.replace and
    save it back; the aggregator only ever reads from it.
    """

    fixed_income: Money = Money(0.0)
    fixed_expenses: Money = Money(0.0)
    months: list[MonthEntry] = field(default_factory=default_months)
    transactions: list[Transaction] = field(default_factory=list)
    recurring_transactions: list[RecurringTransaction] = field(default_factory=list)
    expense_categories: list[ExpenseCategory] = field(default_factory=default_expense_categories)
    income_categories: list[IncomeCategory] = field(default_factory=default_income_categories)
    current_year: int = field(default_factory=lambda: date.today().year)
    theme: str = "light"

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "AppState":
        """Build state from the persisted shape, filling missing keys with defaults.

        Raises:
            ValueError: If a transaction date cannot be parsed.
        """
        defaults = cls()
        months = data.get("months")
        expense_categories = data.get("expenseCategories")
        income_categories = data.get("incomeCategories")
        return cls(
            fixed_income=Money(coerce_amount(data.get("fixedIncome"))),
            fixed_expenses=Money(coerce_amount(data.get("fixedExpenses"))),
            months=[MonthEntry.from_dict(m) for m in months] if months is not None else defaults.months,
            transactions=[Transaction.from_dict(t) for t in data.get("transactions") or []],
            recurring_transactions=[
                RecurringTransaction.from_dict(r) for r in data.get("recurringTransactions") or []
            ],
            expense_categories=(
                [ExpenseCategory.from_dict(c) for c in expense_categories]
                if expense_categories is not None
                else defaults.expense_categories
            ),
            income_categories=(
                [IncomeCategory.from_dict(c) for c in income_categories]
                if income_categories is not None
                else defaults.income_categories
            ),
            current_year=coerce_int(data.get("currentYear"), defaults.current_year),
            theme=str(data.get("theme") or defaults.theme),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "fixedIncome": self.fixed_income,
            "fixedExpenses": self.fixed_expenses,
            "months": [m.to_dict() for m in self.months],
            "transactions": [t.to_dict() for t in self.transactions],
            "recurringTransactions": [r.to_dict() for r in self.recurring_transactions],
            "expenseCategories": [c.to_dict() for c in self.expense_categories],
            "incomeCategories": [c.to_dict() for c in self.income_categories],
            "currentYear": self.current_year,
            "theme": self.theme,
        }

    def next_transaction_id(self) -> int:
        """Smallest id greater than every existing transaction id."""
        return max((t.id for t in self.transactions), default=0) + 1

    def next_recurring_id(self) -> int:
        return max((r.id for r in self.recurring_transactions), default=0) + 1
