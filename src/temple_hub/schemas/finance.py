"""Finance and donation schemas."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from .common import PartialUpdate

EntryType = Literal["income", "expense"]
DonationSource = Literal["web", "hundi", "in-temple", "bank-transfer"]
DonationProvider = Literal["stripe", "razorpay", "manual", "other"]
PaymentMethod = Literal["card", "upi", "netbanking", "wallet", "cash", "cheque"]


class CategoryCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    category_type: EntryType
    description: str | None = None
    budget_amount: float | None = Field(None, ge=0)


class CategoryResponse(BaseModel):
    id: str
    name: str
    category_type: str
    description: str | None
    budget_amount: float | None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class CategorySummary(BaseModel):
    id: str
    name: str
    category_type: str

    model_config = ConfigDict(from_attributes=True)


class TransactionCreate(BaseModel):
    type: EntryType
    amount: float = Field(..., ge=0)
    category_id: str | None = None
    description: str | None = None
    transaction_date: datetime | None = None


class TransactionUpdate(PartialUpdate):
    required_fields = frozenset({"type", "amount"})

    type: EntryType | None = None
    amount: float | None = Field(None, ge=0)
    category_id: str | None = None
    description: str | None = None
    transaction_date: datetime | None = None


class TransactionResponse(BaseModel):
    id: str
    type: str
    amount: float
    category_id: str | None
    description: str | None
    transaction_date: datetime | None
    created_at: datetime
    category: CategorySummary | None = None

    model_config = ConfigDict(from_attributes=True)


class FinanceSummary(BaseModel):
    """Aggregate ledger totals; keys keep the camelCase the dashboard reads."""

    totalIncome: float
    totalExpenses: float
    netAmount: float
    transactionCount: int


class DonationCreate(BaseModel):
    """Donation receipt. Used for both create and full replacement."""

    receipt_number: str = Field(..., min_length=1)
    transaction_id: str = Field(..., min_length=1)
    gross_amount: float = Field(..., ge=0)
    net_amount: float = Field(..., ge=0)
    source: DonationSource
    provider: DonationProvider
    payment_method: PaymentMethod
    donor_name: str | None = None
    donor_email: EmailStr | None = None
    donor_phone: str | None = None

    @field_validator("receipt_number", "transaction_id", "donor_name", "donor_email", "donor_phone", mode="before")
    @classmethod
    def strip_text(cls, v: object) -> object:
        # Stripped before length checks so whitespace-only receipts are rejected.
        if isinstance(v, str):
            return v.strip()
        return v

    @field_validator("donor_email")
    @classmethod
    def normalize_donor_email(cls, v: str | None) -> str | None:
        return v.lower() if v else v


class DonationResponse(BaseModel):
    id: str
    receipt_number: str
    transaction_id: str
    gross_amount: float
    net_amount: float
    source: str
    provider: str
    payment_method: str
    donor_name: str | None
    donor_email: str | None
    donor_phone: str | None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class DonationStats(BaseModel):
    count: int
    total_gross: float
    total_net: float
    by_source: dict[str, float]
    by_payment_method: dict[str, float]


ExpenseCategory = Literal["maintenance", "utilities", "salaries", "materials", "events", "other"]


class ExpenseCreate(BaseModel):
    """Expense bill. Used for both create and full replacement."""

    description: str = Field(..., min_length=1, max_length=500)
    vendor_name: str = Field(..., min_length=1, max_length=200)
    receipt_number: str = Field(..., min_length=1, max_length=100)
    amount: float = Field(..., ge=0)
    category: ExpenseCategory
    expense_date: datetime
    notes: str | None = None
    community_id: str | None = None
    created_by: str | None = None

    @field_validator("description", "vendor_name", "receipt_number", mode="before")
    @classmethod
    def strip_text(cls, v: object) -> object:
        if isinstance(v, str):
            return v.strip()
        return v


class ExpenseApproval(BaseModel):
    approved_by: str | None = None
    notes: str | None = None


class ExpenseRejection(BaseModel):
    rejected_by: str | None = None
    reason: str | None = None


class ExpenseResponse(BaseModel):
    id: str
    community_id: str | None
    description: str
    vendor_name: str
    receipt_number: str
    amount: float
    category: str
    expense_date: datetime
    status: str
    notes: str | None
    approved_by: str | None
    approved_at: datetime | None
    rejection_reason: str | None
    created_by: str | None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ExpenseStats(BaseModel):
    count: int
    total_amount: float
    by_status: dict[str, float]
    by_category: dict[str, float]
