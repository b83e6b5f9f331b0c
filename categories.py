from typing import Optional


class SystemCategory:
    """Category names the ledger writes on its own behalf."""

    savings = "Savings"
    savings_withdrawal = "Savings Withdrawal"
    initial_balance = "Initial Balance"
    transfer_out = "Transfer Out"
    transfer_in = "Transfer In"


SAVINGS_CATEGORIES = frozenset(
    {SystemCategory.savings, SystemCategory.savings_withdrawal}
)

EXPENSE_CATEGORIES = [
    "Food & Drinks",
    "Transportation",
    "Shopping",
    "Bills & Utilities",
    "Entertainment",
    "Health",
    SystemCategory.savings,
    "Other",
]

INCOME_CATEGORIES = [
    "Salary",
    "Freelance / Side Job",
    "Bonus",
    "Investment",
    SystemCategory.savings_withdrawal,
    SystemCategory.initial_balance,
    "Other",
]

CATEGORY_COLORS = {
    "Food & Drinks": "#10B981",
    "Transportation": "#3B82F6",
    "Shopping": "#8B5CF6",
    "Bills & Utilities": "#F59E0B",
    "Entertainment": "#EC4899",
    "Health": "#06B6D4",
    SystemCategory.savings: "#6366F1",
    "Other": "#6B7280",
}
FALLBACK_COLOR = "#6B7280"

DEFAULT_WALLETS = [
    {"id": "WALLET-CASH", "name": "Cash", "type": "cash", "icon": "💵", "color": "#10B981"},
    {"id": "WALLET-BANK", "name": "Bank Account", "type": "bank", "icon": "🏦", "color": "#3B82F6"},
    {"id": "WALLET-EWALLET", "name": "E-Wallet", "type": "ewallet", "icon": "📱", "color": "#8B5CF6"},
]

DEFAULT_BUDGETS = [
    ("Food & Drinks", 2_000_000),
    ("Transportation", 1_000_000),
    ("Shopping", 1_500_000),
    ("Bills & Utilities", 1_000_000),
    ("Entertainment", 500_000),
    ("Health", 500_000),
    ("Other", 500_000),
]


def color_for(category: str) -> str:
    return CATEGORY_COLORS.get(category, FALLBACK_COLOR)


def is_savings_category(category: Optional[str]) -> bool:
    return category in SAVINGS_CATEGORIES
