"""
Control de embarque de pasajeros.

Solo un operador de embarcación activo, con embarcación asignada, puede
consultar y marcar pasajeros. Cada venta confirmada tiene (a lo sumo) un
registro de embarque, que nace PENDIENTE y se marca EMBARCADO o
NO_EMBARCADO una vez llegada la hora de salida del viaje.
"""

from datetime import datetime, time
from typing import Optional
import logging

from sqlalchemy.orm import Session

from naviera.models.boarding_control import BoardingControl
from naviera.models.user import User
from naviera.enums.boarding_status import BoardingStatus
from naviera.enums.user_role import UserRole, OperatorStatus
from naviera.utils.date_utils import now_local, trip_datetime

logger = logging.getLogger(__name__)

# Estados que puede fijar el operador (PENDIENTE solo se recupera al eliminar el registro)
MARKABLE_STATUSES = {BoardingStatus.BOARDED, BoardingStatus.NOT_BOARDED}


def require_active_operator(user: User) -> User:
    """Lanza PermissionError si el usuario no puede controlar embarques."""
    if user.role != UserRole.OPERATOR:
        raise PermissionError("Usuario no es operador")
    if user.operator_status != OperatorStatus.ACTIVE:
        raise PermissionError("Operador inactivo")
    if not user.assigned_vessel_id:
        raise PermissionError("Operador sin embarcación asignada")
    return user


def validate_boarding_window(
    control: BoardingControl, operator: User, now: datetime
) -> None:
    """
    Reglas comunes para modificar un registro de embarque:
    embarcación del operador, viaje no pasado y hora de salida alcanzada.
    """
    if control.vessel_id != operator.assigned_vessel_id:
        raise PermissionError("No tiene permisos para esta embarcación")

    end_of_trip_day = datetime.combine(control.travel_date, time.max)
    if end_of_trip_day < now:
        raise ValueError("No se puede modificar un viaje pasado")

    if now < trip_datetime(control.travel_date, control.departure_time):
        raise ValueError(
            f"El embarque estará disponible a partir de las {control.departure_time}"
        )


def update_boarding_status(
    db: Session,
    control: BoardingControl,
    operator: User,
    new_status: BoardingStatus,
    notes: Optional[str] = None,
    now: Optional[datetime] = None,
) -> BoardingControl:
    """Marca al pasajero como EMBARCADO o NO_EMBARCADO."""
    now = now or now_local()
    require_active_operator(operator)

    if new_status not in MARKABLE_STATUSES:
        raise ValueError("Estado de embarque inválido")

    validate_boarding_window(control, operator, now)

    if control.boarding_status == new_status:
        raise ValueError(f"El pasajero ya está marcado como {new_status.value}")

    control.boarding_status = new_status
    control.registered_at = now
    control.notes = notes.strip() if notes and notes.strip() else None
    control.operator_id = operator.id
    db.commit()
    db.refresh(control)

    logger.info(
        f"Embarque {control.id} (venta {control.sale_id}) -> {new_status.value} "
        f"| operador={operator.username}"
    )
    return control


def reset_boarding_status(
    db: Session,
    control: BoardingControl,
    operator: User,
    now: Optional[datetime] = None,
) -> BoardingControl:
    """Elimina la marca del operador: el pasajero vuelve a PENDIENTE."""
    now = now or now_local()
    require_active_operator(operator)
    validate_boarding_window(control, operator, now)

    if control.boarding_status == BoardingStatus.PENDING:
        raise ValueError("El pasajero ya está en estado PENDIENTE")

    control.boarding_status = BoardingStatus.PENDING
    control.registered_at = None
    control.notes = None
    db.commit()
    db.refresh(control)

    logger.info(
        f"Embarque {control.id} (venta {control.sale_id}) vuelve a PENDIENTE "
        f"| operador={operator.username}"
    )
    return control
