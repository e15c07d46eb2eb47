"""
Pydantic schemas for API request/response models.

These schemas define the structure of API data for serialization and validation.
"""

from .activity import EventCreate, EventResponse, EventUpdate, TaskCreate, TaskResponse, TaskUpdate
from .application import (
    ApplicationApproval,
    ApplicationCreate,
    ApplicationRejection,
    ApplicationResponse,
    ReconcileResponse,
)
from .common import Envelope, MessageEnvelope, PagedEnvelope, PartialUpdate
from .community import CommunityCreate, CommunityResponse, CommunityUpdate
from .finance import (
    CategoryCreate,
    CategoryResponse,
    DonationCreate,
    DonationResponse,
    DonationStats,
    ExpenseApproval,
    ExpenseCreate,
    ExpenseRejection,
    ExpenseResponse,
    ExpenseStats,
    FinanceSummary,
    TransactionCreate,
    TransactionResponse,
    TransactionUpdate,
)
from .membership import MemberCreate, MemberResponse, MemberUpdate
from .puja import PujaSeriesCreate, PujaSeriesResponse

__all__ = [
    "ApplicationApproval", "ApplicationCreate", "ApplicationRejection",
    "ApplicationResponse", "ReconcileResponse",
    "CategoryCreate", "CategoryResponse",
    "CommunityCreate", "CommunityResponse", "CommunityUpdate",
    "DonationCreate", "DonationResponse", "DonationStats",
    "Envelope", "MessageEnvelope", "PagedEnvelope", "PartialUpdate",
    "EventCreate", "EventResponse", "EventUpdate",
    "ExpenseApproval", "ExpenseCreate", "ExpenseRejection", "ExpenseResponse", "ExpenseStats",
    "FinanceSummary",
    "MemberCreate", "MemberResponse", "MemberUpdate",
    "PujaSeriesCreate", "PujaSeriesResponse",
    "TaskCreate", "TaskResponse", "TaskUpdate",
    "TransactionCreate", "TransactionResponse", "TransactionUpdate",
]
