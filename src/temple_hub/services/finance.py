"""Ledger and donation aggregates."""

from __future__ import annotations

from collections import defaultdict

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from temple_hub.models.finance import (
    TRANSACTION_TYPE_EXPENSE,
    TRANSACTION_TYPE_INCOME,
    Donation,
    Expense,
    Transaction,
)


def summarize_transactions(db: Session) -> dict[str, float | int]:
    """Return income, expense and net totals across all transactions."""
    rows = db.execute(
        select(Transaction.type, func.coalesce(func.sum(Transaction.amount), 0), func.count())
        .group_by(Transaction.type)
    ).all()

    totals: dict[str, float] = defaultdict(float)
    count = 0
    for entry_type, amount, rows_of_type in rows:
        totals[entry_type] += float(amount or 0)
        count += int(rows_of_type or 0)

    income = totals[TRANSACTION_TYPE_INCOME]
    expenses = totals[TRANSACTION_TYPE_EXPENSE]
    return {
        "totalIncome": income,
        "totalExpenses": expenses,
        "netAmount": income - expenses,
        "transactionCount": count,
    }


def donation_stats(db: Session) -> dict[str, object]:
    """Return donation counts and totals, broken down by source and payment method."""
    count, gross, net = db.execute(
        select(
            func.count(Donation.id),
            func.coalesce(func.sum(Donation.gross_amount), 0),
            func.coalesce(func.sum(Donation.net_amount), 0),
        )
    ).one()

    by_source = {
        source: float(total or 0)
        for source, total in db.execute(
            select(Donation.source, func.sum(Donation.net_amount)).group_by(Donation.source)
        ).all()
    }
    by_method = {
        method: float(total or 0)
        for method, total in db.execute(
            select(Donation.payment_method, func.sum(Donation.net_amount)).group_by(Donation.payment_method)
        ).all()
    }
    return {
        "count": int(count or 0),
        "total_gross": float(gross or 0),
        "total_net": float(net or 0),
        "by_source": by_source,
        "by_payment_method": by_method,
    }


def expense_stats(db: Session) -> dict[str, object]:
    """Return expense count and total, with amounts broken down by status and category."""
    count, total = db.execute(
        select(func.count(Expense.id), func.coalesce(func.sum(Expense.amount), 0))
    ).one()

    by_status = {
        state: float(amount or 0)
        for state, amount in db.execute(
            select(Expense.status, func.sum(Expense.amount)).group_by(Expense.status)
        ).all()
    }
    by_category = {
        category: float(amount or 0)
        for category, amount in db.execute(
            select(Expense.category, func.sum(Expense.amount)).group_by(Expense.category)
        ).all()
    }
    return {
        "count": int(count or 0),
        "total_amount": float(total or 0),
        "by_status": by_status,
        "by_category": by_category,
    }
