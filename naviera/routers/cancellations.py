from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session
from typing import Optional
from datetime import date
import logging

from naviera.database import get_db
from naviera.crud import cancellation as crud
from naviera.crud import sale as sale_crud
from naviera.schemas.cancellation import (
    CancellationCreate,
    CancellationResult,
    CancellationListResponse,
    CancellationStats,
)
from naviera.enums.cancellation_type import CancellationType
from naviera.enums.user_role import UserRole
from naviera.models.user import User
from naviera.services.auth import get_current_user
from naviera.utils.sale_cancellation import cancel_sale
from naviera.utils.date_utils import now_local
from naviera.utils.errors import to_http_exception

router = APIRouter()
logger = logging.getLogger(__name__)

PERIODS = ("dia", "semana", "mes", "anio")


def _visible_user_id(user: User) -> Optional[int]:
    if user.role == UserRole.OPERATOR:
        raise HTTPException(status_code=403, detail="No tiene acceso a anulaciones")
    # Un vendedor solo ve las anulaciones que registró
    return user.id if user.role == UserRole.SELLER else None


@router.get("/", response_model=CancellationListResponse)
def read_cancellations(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    cancellation_type: Optional[CancellationType] = None,
    user_id: Optional[int] = None,
    search: Optional[str] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    visible_user_id = _visible_user_id(current_user)
    return crud.get_cancellations(
        db,
        page=page,
        limit=limit,
        start_date=start_date,
        end_date=end_date,
        cancellation_type=cancellation_type,
        user_id=visible_user_id or user_id,
        search=search,
    )


@router.get("/stats", response_model=CancellationStats)
def read_cancellation_stats(
    period: str = Query("mes", description="dia, semana, mes o anio"),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    if period not in PERIODS:
        raise HTTPException(
            status_code=400, detail="Período inválido. Use dia, semana, mes o anio"
        )
    return crud.get_cancellation_stats(
        db, now=now_local(), period=period, user_id=_visible_user_id(current_user)
    )


@router.post("/", response_model=CancellationResult, status_code=201)
def create_cancellation(
    request: CancellationCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    _visible_user_id(current_user)
    db_sale = sale_crud.get_sale(db, request.sale_id)
    if db_sale is None:
        raise HTTPException(status_code=404, detail="Venta no encontrada")

    try:
        return cancel_sale(
            db,
            db_sale,
            current_user,
            reason=request.reason,
            cancellation_type=request.cancellation_type,
            refund_amount=request.refund_amount,
            notes=request.notes,
            now=now_local(),
        )
    except (ValueError, PermissionError) as e:
        logger.warning(f"Anulación rechazada venta {request.sale_id}: {e}")
        raise to_http_exception(e)
