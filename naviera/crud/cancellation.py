from sqlalchemy.orm import Session, joinedload
from sqlalchemy import func, or_
from datetime import datetime, date, time, timedelta
from decimal import Decimal
from typing import Optional
import math

from naviera.models.cancellation import Cancellation
from naviera.models.sale import Sale
from naviera.models.client import Client
from naviera.enums.cancellation_type import CancellationType
from naviera.utils.date_utils import period_start


def get_cancellations(
    db: Session,
    page: int = 1,
    limit: int = 10,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    cancellation_type: Optional[CancellationType] = None,
    user_id: Optional[int] = None,
    search: Optional[str] = None,
) -> dict:
    page = max(page, 1)
    limit = max(limit, 1)
    query = (
        db.query(Cancellation)
        .join(Sale, Cancellation.sale_id == Sale.id)
        .join(Client, Sale.client_id == Client.id)
    )

    if start_date:
        query = query.filter(
            Cancellation.cancelled_at >= datetime.combine(start_date, time.min)
        )
    if end_date:
        query = query.filter(
            Cancellation.cancelled_at
            < datetime.combine(end_date + timedelta(days=1), time.min)
        )
    if cancellation_type:
        query = query.filter(Cancellation.cancellation_type == cancellation_type)
    if user_id:
        query = query.filter(Cancellation.user_id == user_id)
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
    cancellations = (
        query.options(
            joinedload(Cancellation.user),
            joinedload(Cancellation.sale).joinedload(Sale.client),
            joinedload(Cancellation.sale).joinedload(Sale.route),
            joinedload(Cancellation.sale).joinedload(Sale.vessel),
            joinedload(Cancellation.sale).joinedload(Sale.seller),
        )
        .order_by(Cancellation.cancelled_at.desc())
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )

    total_pages = math.ceil(total / limit)
    return {
        "cancellations": cancellations,
        "pagination": {
            "current_page": page,
            "total_pages": total_pages,
            "total": total,
            "has_next": page < total_pages,
            "has_prev": page > 1,
        },
    }


def get_cancellation_stats(
    db: Session,
    now: datetime,
    period: str = "mes",
    user_id: Optional[int] = None,
) -> dict:
    """
    Estadísticas de anulaciones del período ("dia", "semana", "mes", "anio").
    """
    start = period_start(period, now)
    start_of_day = datetime.combine(now.date(), time.min)

    def base_query(*columns):
        query = db.query(*columns).filter(
            Cancellation.cancelled_at >= start,
            Cancellation.cancelled_at <= now,
        )
        if user_id:
            query = query.filter(Cancellation.user_id == user_id)
        return query

    total = base_query(func.count(Cancellation.id)).scalar() or 0
    today = (
        base_query(func.count(Cancellation.id))
        .filter(Cancellation.cancelled_at >= start_of_day)
        .scalar()
        or 0
    )
    refunds = (
        base_query(func.count(Cancellation.id))
        .filter(Cancellation.cancellation_type == CancellationType.REFUND)
        .scalar()
        or 0
    )
    refunded_amount, seats_released = base_query(
        func.coalesce(func.sum(Cancellation.refund_amount), 0),
        func.coalesce(func.sum(Cancellation.seats_released), 0),
    ).one()

    reasons = (
        base_query(Cancellation.reason, func.count(Cancellation.id).label("count"))
        .group_by(Cancellation.reason)
        .order_by(func.count(Cancellation.id).desc())
        .limit(5)
        .all()
    )

    return {
        "total_cancellations": total,
        "cancellations_today": today,
        "total_refunds": refunds,
        "total_refunded_amount": Decimal(str(refunded_amount or 0)),
        "total_seats_released": int(seats_released or 0),
        "common_reasons": [
            {"reason": reason, "count": count} for reason, count in reasons
        ],
        "period": period,
    }
