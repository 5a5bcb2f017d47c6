from sqlalchemy.orm import Session, joinedload
from sqlalchemy import func, or_
from datetime import datetime, date, time, timedelta
from decimal import Decimal
from typing import Optional
import math

from naviera.models.sale import Sale
from naviera.models.client import Client
from naviera.enums.sale_status import SaleStatus


def get_sale(db: Session, sale_id: int) -> Optional[Sale]:
    return (
        db.query(Sale)
        .options(
            joinedload(Sale.client),
            joinedload(Sale.route),
            joinedload(Sale.vessel),
            joinedload(Sale.seller),
            joinedload(Sale.cancellation),
        )
        .filter(Sale.id == sale_id)
        .first()
    )


def get_sales(
    db: Session,
    page: int = 1,
    limit: int = 10,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    status: Optional[SaleStatus] = None,
    client_id: Optional[int] = None,
    route_id: Optional[int] = None,
    seller_id: Optional[int] = None,
    search: Optional[str] = None,
) -> dict:
    page = max(page, 1)
    limit = max(limit, 1)
    query = db.query(Sale).join(Client, Sale.client_id == Client.id)

    # Rango sobre la fecha de venta, días completos
    if start_date:
        query = query.filter(Sale.sold_at >= datetime.combine(start_date, time.min))
    if end_date:
        query = query.filter(
            Sale.sold_at < datetime.combine(end_date + timedelta(days=1), time.min)
        )
    if status:
        query = query.filter(Sale.status == status)
    if client_id:
        query = query.filter(Sale.client_id == client_id)
    if route_id:
        query = query.filter(Sale.route_id == route_id)
    if seller_id:
        query = query.filter(Sale.seller_id == seller_id)
    if search:
        pattern = f"%{search.strip()}%"
        query = query.filter(
            or_(
                Sale.sale_number.ilike(pattern),
                Client.first_name.ilike(pattern),
                Client.last_name.ilike(pattern),
                Client.document_number.ilike(pattern),
            )
        )

    total = query.count()
    sales = (
        query.options(
            joinedload(Sale.client),
            joinedload(Sale.route),
            joinedload(Sale.vessel),
            joinedload(Sale.seller),
        )
        .order_by(Sale.sold_at.desc())
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )

    return {
        "sales": sales,
        "total": total,
        "total_pages": math.ceil(total / limit),
        "current_page": page,
    }


def _confirmed_summary(db: Session, start: datetime, end: datetime, seller_id=None):
    query = db.query(
        func.count(Sale.id),
        func.coalesce(func.sum(Sale.total), 0),
        func.coalesce(func.sum(Sale.passenger_count), 0),
    ).filter(
        Sale.status == SaleStatus.CONFIRMED,
        Sale.sold_at >= start,
        Sale.sold_at < end,
    )
    if seller_id:
        query = query.filter(Sale.seller_id == seller_id)
    count, amount, passengers = query.one()
    return {
        "sales": int(count or 0),
        "amount": Decimal(str(amount or 0)),
        "passengers": int(passengers or 0),
    }


def get_sales_stats(db: Session, now: datetime, seller_id: Optional[int] = None) -> dict:
    """Resumen de ventas confirmadas del día y del mes en curso."""
    start_of_day = datetime.combine(now.date(), time.min)
    start_of_month = datetime(now.year, now.month, 1)
    end = start_of_day + timedelta(days=1)

    status_query = db.query(Sale.status, func.count(Sale.id)).group_by(Sale.status)
    if seller_id:
        status_query = status_query.filter(Sale.seller_id == seller_id)
    by_status = {status.value: count for status, count in status_query.all()}

    return {
        "today": _confirmed_summary(db, start_of_day, end, seller_id),
        "month": _confirmed_summary(db, start_of_month, end, seller_id),
        "by_status": {s.value: by_status.get(s.value, 0) for s in SaleStatus},
    }
