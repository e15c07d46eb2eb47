"""Budget category, transaction and summary endpoints."""

from __future__ import annotations

from fastapi import APIRouter, status
from sqlalchemy import desc
from sqlalchemy.orm import Session

from temple_hub.core.errors import NotFoundError, ValidationError, ensure_identifier
from temple_hub.models import BudgetCategory, Transaction
from temple_hub.schemas.common import Envelope, MessageEnvelope, listing, ok
from temple_hub.schemas.finance import (
    CategoryCreate,
    CategoryResponse,
    FinanceSummary,
    TransactionCreate,
    TransactionResponse,
    TransactionUpdate,
)
from temple_hub.services.finance import summarize_transactions

from ..dependencies import SessionDep

router = APIRouter(prefix="/finance", tags=["finance"])


def _get_transaction(db: Session, transaction_id: str) -> Transaction:
    transaction_id = ensure_identifier(transaction_id, label="transaction ID")
    transaction = db.get(Transaction, transaction_id)
    if transaction is None:
        raise NotFoundError("Transaction not found", meta={"transaction_id": transaction_id})
    return transaction


def _check_category(db: Session, category_id: str | None) -> None:
    if category_id is not None and db.get(BudgetCategory, category_id) is None:
        raise ValidationError("Unknown budget category", meta={"category_id": category_id})


@router.get("/categories", response_model=Envelope[list[CategoryResponse]])
async def list_categories(db: SessionDep) -> dict[str, object]:
    """List budget categories, newest first."""
    return listing(db.query(BudgetCategory).order_by(desc(BudgetCategory.created_at)).all())


@router.post(
    "/categories",
    response_model=Envelope[CategoryResponse],
    status_code=status.HTTP_201_CREATED,
)
async def create_category(payload: CategoryCreate, db: SessionDep) -> dict[str, object]:
    """Create a budget category."""
    category = BudgetCategory(**payload.model_dump())
    db.add(category)
    db.commit()
    db.refresh(category)
    return ok(category, "Budget category created successfully")


@router.get("/transactions", response_model=Envelope[list[TransactionResponse]])
async def list_transactions(db: SessionDep, type: str | None = None) -> dict[str, object]:
    """List transactions with their category, newest first."""
    query = db.query(Transaction)
    if type and type != "all":
        query = query.filter(Transaction.type == type)
    return listing(query.order_by(desc(Transaction.created_at)).all())


@router.post(
    "/transactions",
    response_model=Envelope[TransactionResponse],
    status_code=status.HTTP_201_CREATED,
)
async def create_transaction(payload: TransactionCreate, db: SessionDep) -> dict[str, object]:
    """Record an income or expense."""
    _check_category(db, payload.category_id)
    transaction = Transaction(**payload.model_dump())
    db.add(transaction)
    db.commit()
    db.refresh(transaction)
    return ok(transaction, "Transaction created successfully")


@router.put("/transactions/{transaction_id}", response_model=Envelope[TransactionResponse])
async def update_transaction(
    transaction_id: str,
    changes: TransactionUpdate,
    db: SessionDep,
) -> dict[str, object]:
    """Update a transaction."""
    transaction = _get_transaction(db, transaction_id)
    update_data = changes.changes()
    if "category_id" in update_data:
        _check_category(db, update_data["category_id"])
    for key, value in update_data.items():
        setattr(transaction, key, value)
    db.commit()
    db.refresh(transaction)
    return ok(transaction, "Transaction updated successfully")


@router.delete("/transactions/{transaction_id}", response_model=MessageEnvelope)
async def delete_transaction(transaction_id: str, db: SessionDep) -> dict[str, object]:
    """Delete a transaction."""
    transaction = _get_transaction(db, transaction_id)
    db.delete(transaction)
    db.commit()
    return {"success": True, "message": "Transaction deleted successfully"}


@router.get("/summary", response_model=Envelope[FinanceSummary])
async def get_summary(db: SessionDep) -> dict[str, object]:
    """Return income, expense and net totals."""
    return ok(summarize_transactions(db))
