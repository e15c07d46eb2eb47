"""Expense bill endpoints with a pending -> approved/rejected review step."""

from __future__ import annotations

import logging

from fastapi import APIRouter, status
from sqlalchemy import desc
from sqlalchemy.orm import Session

from temple_hub.core.errors import InvalidTransitionError, NotFoundError, ensure_identifier
from temple_hub.db.time import utcnow
from temple_hub.models import Expense
from temple_hub.models.finance import (
    EXPENSE_STATUS_APPROVED,
    EXPENSE_STATUS_PENDING,
    EXPENSE_STATUS_REJECTED,
)
from temple_hub.schemas.common import Envelope, MessageEnvelope, listing, ok
from temple_hub.schemas.finance import (
    ExpenseApproval,
    ExpenseCreate,
    ExpenseRejection,
    ExpenseResponse,
    ExpenseStats,
)
from temple_hub.services.finance import expense_stats

from ..dependencies import SessionDep

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/expenses", tags=["expenses"])


def _get_expense(db: Session, expense_id: str) -> Expense:
    expense_id = ensure_identifier(expense_id, label="expense ID")
    expense = db.get(Expense, expense_id)
    if expense is None:
        raise NotFoundError("Expense not found", meta={"expense_id": expense_id})
    return expense


def _require_pending(expense: Expense, target: str) -> None:
    if expense.status != EXPENSE_STATUS_PENDING:
        raise InvalidTransitionError(
            expense.status,
            target,
            subject="Expense",
            code="expense.invalid_transition",
        )


@router.get("/", response_model=Envelope[list[ExpenseResponse]])
async def list_expenses(
    db: SessionDep,
    status: str | None = None,
    category: str | None = None,
    community_id: str | None = None,
) -> dict[str, object]:
    """List expenses by expense date, newest first; ``all`` disables a filter."""
    query = db.query(Expense)
    if status and status != "all":
        query = query.filter(Expense.status == status)
    if category and category != "all":
        query = query.filter(Expense.category == category)
    if community_id and community_id != "all":
        query = query.filter(Expense.community_id == community_id)
    return listing(query.order_by(desc(Expense.expense_date), desc(Expense.created_at)).all())


@router.get("/stats", response_model=Envelope[ExpenseStats])
async def get_expense_stats(db: SessionDep) -> dict[str, object]:
    """Return expense totals by status and category."""
    return ok(expense_stats(db))


@router.get("/{expense_id}", response_model=Envelope[ExpenseResponse])
async def get_expense(expense_id: str, db: SessionDep) -> dict[str, object]:
    """Get an expense by ID."""
    return ok(_get_expense(db, expense_id))


@router.post(
    "/",
    response_model=Envelope[ExpenseResponse],
    status_code=status.HTTP_201_CREATED,
)
async def create_expense(payload: ExpenseCreate, db: SessionDep) -> dict[str, object]:
    """Record an expense; new expenses wait for approval."""
    expense = Expense(**payload.model_dump(), status=EXPENSE_STATUS_PENDING)
    db.add(expense)
    db.commit()
    db.refresh(expense)
    return ok(expense, "Expense created successfully")


@router.put("/{expense_id}", response_model=Envelope[ExpenseResponse])
async def update_expense(expense_id: str, payload: ExpenseCreate, db: SessionDep) -> dict[str, object]:
    """Replace an expense's details. The review status is left as it is."""
    expense = _get_expense(db, expense_id)
    for key, value in payload.model_dump().items():
        setattr(expense, key, value)
    db.commit()
    db.refresh(expense)
    return ok(expense, "Expense updated successfully")


@router.post("/{expense_id}/approve", response_model=Envelope[ExpenseResponse])
async def approve_expense(
    expense_id: str,
    db: SessionDep,
    payload: ExpenseApproval | None = None,
) -> dict[str, object]:
    """Approve a pending expense."""
    expense = _get_expense(db, expense_id)
    _require_pending(expense, EXPENSE_STATUS_APPROVED)
    payload = payload or ExpenseApproval()
    expense.status = EXPENSE_STATUS_APPROVED
    expense.approved_by = payload.approved_by
    expense.approved_at = utcnow()
    if payload.notes:
        expense.notes = payload.notes
    db.commit()
    db.refresh(expense)
    logger.info("Expense %s approved by %s", expense.id, payload.approved_by or "unknown reviewer")
    return ok(expense, "Expense approved successfully")


@router.post("/{expense_id}/reject", response_model=Envelope[ExpenseResponse])
async def reject_expense(
    expense_id: str,
    db: SessionDep,
    payload: ExpenseRejection | None = None,
) -> dict[str, object]:
    """Reject a pending expense, keeping the reason."""
    expense = _get_expense(db, expense_id)
    _require_pending(expense, EXPENSE_STATUS_REJECTED)
    payload = payload or ExpenseRejection()
    expense.status = EXPENSE_STATUS_REJECTED
    expense.approved_by = payload.rejected_by
    expense.approved_at = utcnow()
    expense.rejection_reason = payload.reason
    db.commit()
    db.refresh(expense)
    logger.info("Expense %s rejected by %s", expense.id, payload.rejected_by or "unknown reviewer")
    return ok(expense, "Expense rejected successfully")


@router.delete("/{expense_id}", response_model=MessageEnvelope)
async def delete_expense(expense_id: str, db: SessionDep) -> dict[str, object]:
    """Delete an expense."""
    expense = _get_expense(db, expense_id)
    db.delete(expense)
    db.commit()
    return {"success": True, "message": "Expense deleted successfully"}
