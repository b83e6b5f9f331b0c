import datetime as dt
import re
from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from models import GoalTransactionType, TransactionType, WalletType
from money import parse_amount, to_minor_units


def _coerce_amount(value: object) -> object:
    if value is None or isinstance(value, bool):
        return value
    if isinstance(value, str):
        if re.match(r"^\D*-", value):
            raise ValueError("Amount must not be negative")
        return parse_amount(value)
    if isinstance(value, (int, float)):
        return to_minor_units(value)
    return value


class AmountModel(BaseModel):
    """Rounds every ``*amount``/``*balance``/``*limit`` field to minor units."""

    @field_validator("*", mode="before")
    @classmethod
    def _round_amounts(cls, value: object, info) -> object:
        name = info.field_name or ""
        if name.endswith(("amount", "balance", "limit")):
            return _coerce_amount(value)
        return value


class WalletIn(AmountModel):
    name: str = Field(..., min_length=1, max_length=100)
    type: WalletType = WalletType.cash
    icon: str = Field(default="💰", max_length=16)
    color: str = Field(default="#10B981", max_length=9)
    initial_balance: int = Field(default=0, ge=0)


class WalletUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    type: Optional[WalletType] = None
    icon: Optional[str] = Field(default=None, max_length=16)
    color: Optional[str] = Field(default=None, max_length=9)


class TransferIn(AmountModel):
    from_wallet_id: str
    to_wallet_id: str
    amount: int = Field(..., gt=0)
    note: Optional[str] = Field(default=None, max_length=200)
    date: Optional[dt.date] = None

    @model_validator(mode="after")
    def _distinct_wallets(self) -> "TransferIn":
        if self.from_wallet_id == self.to_wallet_id:
            raise ValueError("Cannot transfer to the same wallet")
        return self


class TransactionIn(AmountModel):
    date: date
    type: TransactionType
    category: str = Field(..., min_length=1, max_length=100)
    amount: int = Field(..., ge=0)
    note: Optional[str] = Field(default=None, max_length=200)
    wallet_id: Optional[str] = None


class TransactionUpdate(AmountModel):
    date: Optional[dt.date] = None
    type: Optional[TransactionType] = None
    category: Optional[str] = Field(default=None, min_length=1, max_length=100)
    amount: Optional[int] = Field(default=None, ge=0)
    note: Optional[str] = Field(default=None, max_length=200)
    wallet_id: Optional[str] = None


class GoalIn(AmountModel):
    name: str = Field(..., min_length=1, max_length=100)
    target_amount: int = Field(..., ge=0)
    deadline: Optional[date] = None
    icon: str = Field(default="🎯", max_length=16)
    color: str = Field(default="#10B981", max_length=9)


class GoalUpdate(AmountModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    target_amount: Optional[int] = Field(default=None, ge=0)
    deadline: Optional[date] = None
    icon: Optional[str] = Field(default=None, max_length=16)
    color: Optional[str] = Field(default=None, max_length=9)


class GoalTransactionIn(AmountModel):
    amount: int = Field(..., gt=0)
    note: Optional[str] = Field(default=None, max_length=200)
    wallet_id: Optional[str] = None


class GoalTransactionUpdate(AmountModel):
    amount: Optional[int] = Field(default=None, ge=0)
    note: Optional[str] = Field(default=None, max_length=200)


class BudgetIn(AmountModel):
    category: str = Field(..., min_length=1, max_length=100)
    monthly_limit: int = Field(..., ge=0)


class WalletOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    type: WalletType
    icon: str
    color: str
    created_at: datetime
    current_balance: int


class TransactionOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    date: date
    type: TransactionType
    category: str
    amount: int
    note: Optional[str]
    wallet_id: Optional[str]
    created_at: datetime


class GoalOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    target_amount: int
    deadline: Optional[date]
    icon: str
    color: str
    created_at: datetime
    current_amount: int
    percentage: int
    days_remaining: Optional[int]


class GoalTransactionOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    goal_id: str
    transaction_id: Optional[str]
    type: GoalTransactionType
    amount: int
    note: Optional[str]
    wallet_id: Optional[str]
    created_at: datetime


class BudgetOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    category: str
    monthly_limit: int
    spent: int
    remaining: int
    percentage: int
    raw_percentage: int
    over_budget: bool


class CategorySliceOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    label: str
    value: int
    color: str


class DashboardOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    balance: int
    total_income: int
    total_expense: int
    savings_rate: int
    budget_overview: list[BudgetOut]
    category_breakdown: list[CategorySliceOut]
    recent_transactions: list[TransactionOut]


class MonthlyReportOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    month: int
    year: int
    total_income: int
    total_expense: int
    net: int
    daily_expenses: list[int]
    category_breakdown: list[CategorySliceOut]


class GoalSummaryOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    total_saved: int
    total_target: int
