from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session
from typing import List, Optional
from datetime import date
import logging

from naviera.database import get_db
from naviera.crud import sale as crud
from naviera.crud import client as client_crud
from naviera.crud import route as route_crud
from naviera.schemas.sale import (
    SaleCreate,
    SaleDetail,
    SaleListResponse,
    AvailabilityRequest,
    AvailabilityResponse,
)
from naviera.schemas.client import ClientWithSales, ClientSaleSummary
from naviera.schemas.route import ActiveRouteResponse, VesselRouteResponse
from naviera.schemas.cancellation import CancellationRequest, CancellationResult
from naviera.enums.sale_status import SaleStatus
from naviera.enums.user_role import UserRole
from naviera.models.user import User
from naviera.services.auth import get_current_user
from naviera.utils.availability import verify_availability
from naviera.utils.sale_utils import create_sale
from naviera.utils.sale_cancellation import cancel_sale
from naviera.utils.date_utils import now_local, today_local
from naviera.utils.errors import ConflictError, to_http_exception

router = APIRouter()
logger = logging.getLogger(__name__)


def _require_sales_user(user: User) -> None:
    if user.role == UserRole.OPERATOR:
        raise HTTPException(
            status_code=403, detail="Los operadores de embarcación no pueden vender"
        )


@router.post("/availability", response_model=AvailabilityResponse)
def check_seat_availability(
    request: AvailabilityRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    try:
        return verify_availability(
            db,
            vessel_id=request.vessel_id,
            route_id=request.route_id,
            travel_date=request.travel_date,
            departure_time=request.departure_time,
            requested=request.requested,
            today=today_local(),
        )
    except ValueError as e:
        raise to_http_exception(e)


@router.post("/", response_model=SaleDetail, status_code=201)
def create_new_sale(
    sale: SaleCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    _require_sales_user(current_user)
    try:
        db_sale = create_sale(db, sale, seller=current_user, now=now_local())
    except (ValueError, ConflictError) as e:
        logger.warning(f"Venta rechazada ({current_user.username}): {e}")
        raise to_http_exception(e)
    return crud.get_sale(db, db_sale.id)


@router.get("/", response_model=SaleListResponse)
def read_sales(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    status: Optional[SaleStatus] = None,
    client_id: Optional[int] = None,
    route_id: Optional[int] = None,
    search: Optional[str] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    _require_sales_user(current_user)
    # Un vendedor solo ve sus propias ventas
    seller_id = current_user.id if current_user.role == UserRole.SELLER else None
    return crud.get_sales(
        db,
        page=page,
        limit=limit,
        start_date=start_date,
        end_date=end_date,
        status=status,
        client_id=client_id,
        route_id=route_id,
        seller_id=seller_id,
        search=search,
    )


@router.get("/stats")
def read_sales_stats(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    _require_sales_user(current_user)
    seller_id = current_user.id if current_user.role == UserRole.SELLER else None
    return crud.get_sales_stats(db, now=now_local(), seller_id=seller_id)


@router.get("/routes/active", response_model=List[ActiveRouteResponse])
def read_active_routes(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return route_crud.get_active_routes(db)


@router.get("/routes/{route_id}/vessels", response_model=List[VesselRouteResponse])
def read_route_vessels(
    route_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    route = route_crud.get_route(db, route_id)
    if route is None:
        raise HTTPException(status_code=404, detail="Ruta no encontrada")
    return route_crud.get_route_vessels(db, route_id)


@router.get("/clients/{document_number}", response_model=ClientWithSales)
def read_client_by_document(
    document_number: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    client = client_crud.get_client_by_document(db, document_number.strip())
    if client is None:
        raise HTTPException(status_code=404, detail="Cliente no encontrado")

    recent_sales = [
        ClientSaleSummary(
            id=s.id,
            sale_number=s.sale_number,
            travel_date=s.travel_date,
            departure_time=s.departure_time,
            passenger_count=s.passenger_count,
            total=s.total,
            status=s.status.value,
            route_name=s.route.name if s.route else None,
        )
        for s in client_crud.get_recent_sales(db, client.id)
    ]
    response = ClientWithSales.model_validate(client)
    response.recent_sales = recent_sales
    return response


@router.get("/{sale_id}", response_model=SaleDetail)
def read_sale(
    sale_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    _require_sales_user(current_user)
    db_sale = crud.get_sale(db, sale_id)
    if db_sale is None:
        raise HTTPException(status_code=404, detail="Venta no encontrada")
    if current_user.role == UserRole.SELLER and db_sale.seller_id != current_user.id:
        raise HTTPException(status_code=403, detail="No tiene acceso a esta venta")
    return db_sale


@router.post("/{sale_id}/cancel", response_model=CancellationResult)
def cancel_existing_sale(
    sale_id: int,
    request: CancellationRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    _require_sales_user(current_user)
    db_sale = crud.get_sale(db, sale_id)
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
        logger.warning(f"Anulación rechazada venta {sale_id}: {e}")
        raise to_http_exception(e)
