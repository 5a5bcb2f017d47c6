from sqlalchemy.orm import Session, joinedload
from datetime import date
from typing import List, Optional
import logging

from naviera.models.boarding_control import BoardingControl
from naviera.models.sale import Sale
from naviera.models.vessel import Vessel
from naviera.models.user import User
from naviera.enums.sale_status import SaleStatus
from naviera.enums.boarding_status import BoardingStatus, BoardingRecordType

logger = logging.getLogger(__name__)


def get_boarding_control(db: Session, control_id: int) -> Optional[BoardingControl]:
    return (
        db.query(BoardingControl)
        .options(joinedload(BoardingControl.sale).joinedload(Sale.client))
        .filter(BoardingControl.id == control_id)
        .first()
    )


def _trip_sales(db: Session, vessel_id: int, travel_date: date, departure_time: str):
    return (
        db.query(Sale)
        .options(
            joinedload(Sale.client),
            joinedload(Sale.route),
            joinedload(Sale.boarding_port),
            joinedload(Sale.boarding_control),
        )
        .filter(
            Sale.vessel_id == vessel_id,
            Sale.travel_date == travel_date,
            Sale.departure_time == departure_time,
            Sale.status == SaleStatus.CONFIRMED,
        )
        .order_by(Sale.sale_number)
        .all()
    )


def get_operator_trips(db: Session, operator: User, today: date) -> List[dict]:
    """
    Viajes de la embarcación del operador desde hoy, agrupados por fecha y
    hora de salida, con pasajeros por estado de embarque.
    """
    sales = (
        db.query(Sale)
        .options(joinedload(Sale.route), joinedload(Sale.boarding_control))
        .filter(
            Sale.vessel_id == operator.assigned_vessel_id,
            Sale.travel_date >= today,
            Sale.status == SaleStatus.CONFIRMED,
        )
        .order_by(Sale.travel_date, Sale.departure_time)
        .all()
    )

    trips = {}
    for sale in sales:
        key = (sale.travel_date, sale.departure_time)
        if key not in trips:
            trips[key] = {
                "travel_date": sale.travel_date,
                "departure_time": sale.departure_time,
                "total": 0,
                "boarded": 0,
                "pending": 0,
                "not_boarded": 0,
                "route": sale.route,
            }
        trip = trips[key]
        trip["total"] += sale.passenger_count

        status = (
            sale.boarding_control.boarding_status
            if sale.boarding_control
            else BoardingStatus.PENDING
        )
        if status == BoardingStatus.BOARDED:
            trip["boarded"] += sale.passenger_count
        elif status == BoardingStatus.NOT_BOARDED:
            trip["not_boarded"] += sale.passenger_count
        else:
            trip["pending"] += sale.passenger_count

    return list(trips.values())


def get_trip_passengers(
    db: Session, operator: User, travel_date: date, departure_time: str
) -> List[Sale]:
    """
    Ventas confirmadas del viaje. Crea los registros PENDIENTE que falten
    para que cada venta tenga su control de embarque.
    """
    vessel_id = operator.assigned_vessel_id
    sales = _trip_sales(db, vessel_id, travel_date, departure_time)

    missing = [sale for sale in sales if sale.boarding_control is None]
    if missing:
        for sale in missing:
            db.add(
                BoardingControl(
                    sale_id=sale.id,
                    operator_id=operator.id,
                    vessel_id=vessel_id,
                    route_id=sale.route_id,
                    travel_date=travel_date,
                    departure_time=departure_time,
                    boarding_status=BoardingStatus.PENDING,
                    record_type=BoardingRecordType.BOARDING,
                )
            )
        db.commit()
        logger.info(
            f"Creados {len(missing)} registros de embarque para "
            f"{travel_date.isoformat()} {departure_time}"
        )
        db.expire_all()
        sales = _trip_sales(db, vessel_id, travel_date, departure_time)

    return sales


def get_trip_stats(
    db: Session, operator: User, travel_date: date, departure_time: str
) -> dict:
    vessel = db.query(Vessel).filter(Vessel.id == operator.assigned_vessel_id).first()
    if not vessel:
        raise LookupError("Embarcación no encontrada")

    statuses = [
        status
        for (status,) in db.query(BoardingControl.boarding_status).filter(
            BoardingControl.vessel_id == vessel.id,
            BoardingControl.travel_date == travel_date,
            BoardingControl.departure_time == departure_time,
        )
    ]

    total = len(statuses)
    boarded = statuses.count(BoardingStatus.BOARDED)
    return {
        "total": total,
        "boarded": boarded,
        "pending": statuses.count(BoardingStatus.PENDING),
        "not_boarded": statuses.count(BoardingStatus.NOT_BOARDED),
        "boarded_percentage": round(boarded / total * 100) if total else 0,
        "available_capacity": vessel.capacity - boarded,
        "vessel": vessel.name,
        "total_capacity": vessel.capacity,
    }
