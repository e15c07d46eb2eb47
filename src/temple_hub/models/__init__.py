"""SQLAlchemy models for the Temple Hub application."""

from .activity import Event, Task
from .application import Application, ApplicationStatus
from .community import Community, Membership
from .finance import BudgetCategory, Donation, Expense, Transaction
from .puja import PujaSeries

__all__ = [
    "Application", "ApplicationStatus",
    "BudgetCategory", "Donation", "Expense", "Transaction",
    "Community", "Membership",
    "Event", "Task",
    "PujaSeries",
]
