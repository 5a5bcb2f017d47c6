from sqlalchemy.orm import Session
from decimal import Decimal
from datetime import datetime
from typing import Optional
import logging

from naviera.models.sale import Sale
from naviera.models.cancellation import Cancellation
from naviera.models.user import User
from naviera.enums.sale_status import SaleStatus
from naviera.enums.cancellation_type import CancellationType
from naviera.enums.user_role import UserRole
from naviera.utils.date_utils import now_local, trip_datetime

logger = logging.getLogger(__name__)

MIN_REASON_LENGTH = 3

# Estado final de la venta según el tipo de anulación
STATUS_BY_TYPE = {
    CancellationType.VOID: SaleStatus.VOIDED,
    CancellationType.REFUND: SaleStatus.REFUNDED,
}


def validate_cancellation(
    sale: Sale,
    user: User,
    reason: Optional[str],
    cancellation_type: CancellationType,
    refund_amount: Optional[Decimal],
    now: datetime,
) -> None:
    """
    Reglas para anular o reembolsar una venta. Lanza ValueError (o
    PermissionError si el vendedor no es el dueño de la venta).
    """
    if not reason or len(reason.strip()) < MIN_REASON_LENGTH:
        raise ValueError("El motivo debe tener al menos 3 caracteres")

    if sale.status != SaleStatus.CONFIRMED:
        raise ValueError(
            f"No se puede anular una venta con estado: {sale.status.value}"
        )

    if sale.cancellation is not None:
        raise ValueError("Esta venta ya ha sido anulada anteriormente")

    if user.role == UserRole.SELLER and sale.seller_id != user.id:
        raise PermissionError("Solo puedes anular tus propias ventas")

    departure = trip_datetime(sale.travel_date, sale.departure_time)
    if now >= departure:
        raise ValueError(
            "No se puede anular esta venta porque ya pasó la fecha y hora del "
            f"viaje programado ({sale.travel_date.strftime('%d/%m/%Y')} a las "
            f"{sale.departure_time}). Contacte al administrador del sistema."
        )

    if cancellation_type == CancellationType.REFUND:
        if refund_amount is None or refund_amount <= 0:
            raise ValueError("Debe especificar un monto de reembolso válido")
        if Decimal(str(refund_amount)) > Decimal(str(sale.total)):
            raise ValueError(
                "El monto de reembolso no puede ser mayor al total de la venta"
            )


def cancel_sale(
    db: Session,
    sale: Sale,
    user: User,
    reason: str,
    cancellation_type: CancellationType = CancellationType.VOID,
    refund_amount: Optional[Decimal] = None,
    notes: Optional[str] = None,
    now: Optional[datetime] = None,
) -> dict:
    """
    Anula (ANULACION) o reembolsa (REEMBOLSO) una venta confirmada.

    Args:
        db: Sesión de base de datos
        sale: Venta a anular
        user: Usuario que registra la anulación
        reason: Motivo (mínimo 3 caracteres)
        cancellation_type: ANULACION o REEMBOLSO
        refund_amount: Monto a devolver, solo para REEMBOLSO
        notes: Observaciones adicionales
        now: Momento de la anulación (hora local del negocio)

    Returns:
        dict: cancellation, sale, seats_released y mensaje
    """
    now = now or now_local()
    validate_cancellation(sale, user, reason, cancellation_type, refund_amount, now)

    reason = reason.strip()
    notes = notes.strip() if notes else None
    new_status = STATUS_BY_TYPE[cancellation_type]

    try:
        cancellation = Cancellation(
            sale_id=sale.id,
            reason=reason,
            notes=notes,
            user_id=user.id,
            seats_released=sale.passenger_count,
            refund_amount=(
                refund_amount if cancellation_type == CancellationType.REFUND else None
            ),
            cancellation_type=cancellation_type,
            cancelled_at=now,
        )
        db.add(cancellation)

        # La venta deja de ser CONFIRMADA y sus asientos dejan de contarse
        sale.status = new_status
        sale.notes = "\n".join(
            line
            for line in [
                sale.notes,
                f"[{new_status.value}] {reason}",
                f"Observaciones: {notes}" if notes else None,
            ]
            if line
        )
        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(cancellation)
    db.refresh(sale)

    logger.info(
        f"Venta {sale.sale_number} {cancellation_type.value.lower()} | "
        f"usuario={user.username} | asientos liberados={sale.passenger_count} | "
        f"total=S/ {sale.total}"
    )
    if cancellation_type == CancellationType.REFUND:
        logger.info(f"Reembolso venta {sale.sale_number}: S/ {refund_amount}")
        message = (
            f"Venta {sale.sale_number} reembolsada exitosamente. "
            f"{sale.passenger_count} asiento(s) liberado(s). "
            f"Monto a reembolsar: S/ {refund_amount}"
        )
    else:
        message = (
            f"Venta {sale.sale_number} anulada exitosamente. "
            f"{sale.passenger_count} asiento(s) liberado(s)."
        )

    return {
        "success": True,
        "cancellation": cancellation,
        "sale": sale,
        "seats_released": sale.passenger_count,
        "message": message,
    }
