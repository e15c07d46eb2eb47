"""Business logic services for the Temple Hub application."""

from .application_workflow import ApplicationWorkflow, ReconcileReport
from .finance import donation_stats, summarize_transactions

__all__ = [
    "ApplicationWorkflow",
    "ReconcileReport",
    "donation_stats",
    "summarize_transactions",
]
