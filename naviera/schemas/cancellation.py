from pydantic import BaseModel, validator
from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from naviera.enums.cancellation_type import CancellationType
from naviera.schemas.sale import SaleDetail


class CancellationRequest(BaseModel):
    reason: str = ""
    notes: Optional[str] = None
    cancellation_type: CancellationType = CancellationType.VOID
    refund_amount: Optional[Decimal] = None

    @validator("reason")
    def validate_reason(cls, v):
        if v and len(v) > 500:
            raise ValueError("El motivo no puede tener más de 500 caracteres")
        return v

    @validator("notes")
    def validate_notes(cls, v):
        if v and len(v) > 500:
            raise ValueError("Las observaciones no pueden exceder 500 caracteres")
        return v


class CancellationCreate(CancellationRequest):
    sale_id: int


class CancellationUser(BaseModel):
    id: int
    name: str
    last_name: str
    username: str

    class Config:
        from_attributes = True


class CancellationResponse(BaseModel):
    id: int
    sale_id: int
    reason: str
    notes: Optional[str] = None
    user_id: int
    seats_released: int
    refund_amount: Optional[Decimal] = None
    cancellation_type: CancellationType
    cancelled_at: datetime
    user: CancellationUser

    class Config:
        from_attributes = True


class CancellationDetail(CancellationResponse):
    sale: SaleDetail


class CancellationResult(BaseModel):
    success: bool
    cancellation: CancellationResponse
    sale: SaleDetail
    seats_released: int
    message: str


class Pagination(BaseModel):
    current_page: int
    total_pages: int
    total: int
    has_next: bool
    has_prev: bool


class CancellationListResponse(BaseModel):
    cancellations: List[CancellationDetail]
    pagination: Pagination


class ReasonCount(BaseModel):
    reason: str
    count: int


class CancellationStats(BaseModel):
    total_cancellations: int
    cancellations_today: int
    total_refunds: int
    total_refunded_amount: Decimal
    total_seats_released: int
    common_reasons: List[ReasonCount]
    period: str
