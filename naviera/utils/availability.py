"""
Disponibilidad de asientos por viaje.

Un viaje queda identificado por (embarcación, ruta, fecha de viaje, hora de
salida). Solo las ventas CONFIRMADAS ocupan asientos: al anular o
reembolsar una venta sus asientos vuelven a estar disponibles.
"""

from datetime import date
from typing import Optional
import logging

from sqlalchemy import func
from sqlalchemy.orm import Session

from naviera.models.sale import Sale
from naviera.models.vessel import Vessel, VesselRoute
from naviera.models.route import Route
from naviera.enums.sale_status import SaleStatus
from naviera.enums.vessel_status import VesselStatus
from naviera.utils.date_utils import (
    weekday_name,
    normalize_day_name,
    today_local,
)

logger = logging.getLogger(__name__)


def count_sold_seats(
    db: Session,
    vessel_id: int,
    route_id: int,
    travel_date: date,
    departure_time: str,
) -> int:
    """Suma de pasajes de las ventas confirmadas para el viaje."""
    total = (
        db.query(func.coalesce(func.sum(Sale.passenger_count), 0))
        .filter(
            Sale.vessel_id == vessel_id,
            Sale.route_id == route_id,
            Sale.travel_date == travel_date,
            Sale.departure_time == departure_time,
            Sale.status == SaleStatus.CONFIRMED,
        )
        .scalar()
    )
    return int(total or 0)


def check_availability(
    db: Session,
    vessel_id: int,
    route_id: int,
    travel_date: date,
    departure_time: str,
    requested: int,
    lock: bool = False,
) -> dict:
    """
    Verifica si quedan asientos suficientes para un viaje.

    Args:
        db: Sesión de base de datos
        vessel_id: ID de la embarcación
        route_id: ID de la ruta
        travel_date: Fecha del viaje
        departure_time: Hora de salida "HH:MM"
        requested: Cantidad de pasajes solicitados
        lock: Bloquea la fila de la embarcación (SELECT ... FOR UPDATE) hasta
            el fin de la transacción, para que dos ventas simultáneas del
            mismo viaje no lean el mismo conteo

    Returns:
        dict: total_capacity, sold, available, can_sell
    """
    query = db.query(Vessel).filter(Vessel.id == vessel_id)
    if lock:
        query = query.with_for_update()
    vessel = query.first()
    if not vessel:
        raise ValueError("Embarcación no encontrada")

    sold = count_sold_seats(db, vessel_id, route_id, travel_date, departure_time)
    available = vessel.capacity - sold

    return {
        "total_capacity": vessel.capacity,
        "sold": sold,
        "available": available,
        "can_sell": available >= requested,
    }


def get_active_assignment(
    db: Session, vessel_id: int, route_id: int
) -> Optional[VesselRoute]:
    return (
        db.query(VesselRoute)
        .filter(
            VesselRoute.vessel_id == vessel_id,
            VesselRoute.route_id == route_id,
            VesselRoute.is_active == True,
        )
        .first()
    )


def validate_operating_day(
    db: Session, vessel_id: int, route_id: int, travel_date: date
) -> dict:
    """
    Valida que la embarcación opere la ruta el día de la semana del viaje.

    Returns:
        dict: valid, message, operating_days
    """
    assignment = get_active_assignment(db, vessel_id, route_id)
    if not assignment:
        return {
            "valid": False,
            "message": "La embarcación no opera en esta ruta",
            "operating_days": [],
        }

    operating_days = list(assignment.operating_days or [])
    day = weekday_name(travel_date)
    normalized_days = {normalize_day_name(d) for d in operating_days}

    if normalize_day_name(day) not in normalized_days:
        return {
            "valid": False,
            "message": (
                f"La embarcación no opera los días {day}. "
                f"Días de operación: {', '.join(operating_days)}"
            ),
            "operating_days": operating_days,
        }

    return {"valid": True, "message": None, "operating_days": operating_days}


def ensure_trip_is_sellable(
    db: Session,
    vessel_id: int,
    route_id: int,
    travel_date: date,
    today: Optional[date] = None,
) -> None:
    """
    Reglas previas a la venta: ruta y embarcación activas y fecha no pasada.
    Lanza ValueError con el motivo.
    """
    route = db.query(Route).filter(Route.id == route_id).first()
    if not route:
        raise ValueError("Ruta no encontrada")
    if not route.is_active:
        raise ValueError(f"La ruta {route.name} no está activa")

    vessel = db.query(Vessel).filter(Vessel.id == vessel_id).first()
    if not vessel:
        raise ValueError("Embarcación no encontrada")
    if vessel.status != VesselStatus.ACTIVE:
        raise ValueError(
            f"La embarcación {vessel.name} no está activa (estado: {vessel.status.value})"
        )

    if travel_date < (today or today_local()):
        raise ValueError("La fecha de viaje no puede ser anterior a hoy")


def verify_availability(
    db: Session,
    vessel_id: Optional[int],
    route_id: Optional[int],
    travel_date: Optional[date],
    departure_time: Optional[str],
    requested: Optional[int],
    today: Optional[date] = None,
) -> dict:
    """
    Consulta de disponibilidad previa a la venta: valida parámetros, fecha,
    día de operación y estado de ruta y embarcación antes de contar asientos.
    """
    if not vessel_id or not route_id or not travel_date or not departure_time:
        raise ValueError("Parámetros faltantes para verificar disponibilidad")
    if not requested or requested <= 0:
        raise ValueError("La cantidad solicitada debe ser un número mayor a cero")

    ensure_trip_is_sellable(db, vessel_id, route_id, travel_date, today=today)

    operating_day = validate_operating_day(db, vessel_id, route_id, travel_date)
    if not operating_day["valid"]:
        raise ValueError(operating_day["message"])

    result = check_availability(
        db, vessel_id, route_id, travel_date, departure_time, requested
    )
    logger.debug(
        f"Disponibilidad embarcación={vessel_id} ruta={route_id} "
        f"{travel_date.isoformat()} {departure_time}: {result}"
    )
    result["operating_days"] = operating_day["operating_days"]
    return result
