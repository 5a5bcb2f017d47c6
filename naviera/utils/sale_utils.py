"""
Confirmación de ventas de pasajes.

Flujo de una venta:
1. Validar datos del cliente, del viaje y del pago
2. Buscar o crear el cliente por DNI
3. Validar que el total del pago híbrido coincida con el total de la venta
4. Verificar disponibilidad (con la embarcación bloqueada) y registrar la
   venta como CONFIRMADA con un número correlativo del día
"""

from datetime import datetime, time, timedelta
from decimal import Decimal, ROUND_HALF_UP
from typing import List, Optional
import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from naviera.models.sale import Sale
from naviera.models.route import Route
from naviera.models.boarding_port import BoardingPort
from naviera.models.user import User
from naviera.schemas.sale import SaleCreate, PaymentMethodItem
from naviera.enums.sale_status import SaleStatus, PaymentType
from naviera.crud.client import find_or_create_client
from naviera.utils.availability import check_availability, ensure_trip_is_sellable
from naviera.utils.date_utils import is_valid_time_string, now_local
from naviera.utils.errors import ConflictError

logger = logging.getLogger(__name__)

# Diferencia máxima permitida por redondeo entre el pago híbrido y el total
PAYMENT_TOLERANCE = Decimal("0.01")
DEFAULT_PAYMENT_METHOD = "EFECTIVO"
HYBRID_PAYMENT_METHOD = "HIBRIDO"
PAYMENT_TYPES = tuple(t.value for t in PaymentType)
# Intentos de INSERT cuando el número de venta choca con otra venta simultánea
SALE_NUMBER_ATTEMPTS = 2
CENTS = Decimal("0.01")


def _money(value) -> Decimal:
    return Decimal(str(value)).quantize(CENTS, rounding=ROUND_HALF_UP)


def validate_sale_request(sale: SaleCreate) -> None:
    """Validaciones de formulario. Lanza ValueError con el primer error."""
    client = sale.client
    if not client.document_number or not client.first_name or not client.last_name:
        raise ValueError("Datos del cliente incompletos")

    if (
        not sale.route_id
        or not sale.vessel_id
        or not sale.boarding_port_id
        or not sale.travel_date
        or not sale.departure_time
        or not sale.boarding_time
    ):
        raise ValueError("Datos del viaje incompletos")

    if not is_valid_time_string(sale.departure_time) or not is_valid_time_string(
        sale.boarding_time
    ):
        raise ValueError("Formato de hora inválido. Use HH:MM")

    if not sale.passenger_count or sale.passenger_count < 1:
        raise ValueError("Cantidad de pasajes inválida")

    if sale.payment_type not in PAYMENT_TYPES:
        raise ValueError("Tipo de pago inválido")

    if sale.payment_type == PaymentType.SINGLE and not sale.payment_method:
        raise ValueError("Método de pago requerido para pago único")

    if sale.payment_type == PaymentType.HYBRID:
        if not sale.payment_methods:
            raise ValueError("Métodos de pago requeridos para pago híbrido")
        for method in sale.payment_methods:
            if not method.type or not method.amount or method.amount <= 0:
                raise ValueError("Datos incompletos en métodos de pago")

    if sale.final_price is None or sale.final_price <= 0:
        raise ValueError("Precio final inválido")


def validate_hybrid_payment(
    payment_methods: List[PaymentMethodItem], expected_total: Decimal
) -> Decimal:
    """
    El total pagado entre todos los medios debe coincidir con el total de
    la venta (tolerancia de 0.01). Devuelve el total pagado.
    """
    paid = sum((Decimal(str(m.amount)) for m in payment_methods), Decimal("0"))
    if abs(paid - expected_total) > PAYMENT_TOLERANCE:
        raise ValueError(
            f"El total de los métodos de pago (S/ {_money(paid)}) no coincide "
            f"con el total de la venta (S/ {_money(expected_total)})"
        )
    return paid


def calculate_totals(unit_price: Decimal, passenger_count: int) -> dict:
    subtotal = _money(Decimal(str(unit_price)) * passenger_count)
    taxes = _money(0)  # Por ahora no se aplica IGV a los pasajes
    return {
        "unit_price": _money(unit_price),
        "subtotal": subtotal,
        "taxes": taxes,
        "total": subtotal + taxes,
    }


def generate_sale_number(db: Session, now: Optional[datetime] = None) -> str:
    """
    Número de venta legible: V{AA}{MM}{DD}-{NNN}, donde NNN es la cantidad
    de ventas registradas hoy + 1.
    """
    now = now or now_local()
    start_of_day = datetime.combine(now.date(), time.min)
    end_of_day = start_of_day + timedelta(days=1)

    sales_today = (
        db.query(Sale)
        .filter(Sale.sold_at >= start_of_day, Sale.sold_at < end_of_day)
        .count()
    )
    return f"V{now.strftime('%y%m%d')}-{sales_today + 1:03d}"


def _insert_sale(
    db: Session,
    sale: SaleCreate,
    seller: User,
    route: Route,
    port: BoardingPort,
    now: datetime,
) -> Sale:
    """Pasos de la venta que van dentro de la transacción. Hace commit."""
    ensure_trip_is_sellable(
        db, sale.vessel_id, sale.route_id, sale.travel_date, today=now.date()
    )

    client = find_or_create_client(db, sale.client, commit=False)

    availability = check_availability(
        db,
        sale.vessel_id,
        sale.route_id,
        sale.travel_date,
        sale.departure_time,
        sale.passenger_count,
        lock=True,
    )
    if not availability["can_sell"]:
        raise ValueError(
            f"Solo hay {availability['available']} asientos disponibles"
        )

    totals = calculate_totals(sale.final_price, sale.passenger_count)
    is_hybrid = sale.payment_type == PaymentType.HYBRID

    db_sale = Sale(
        sale_number=generate_sale_number(db, now),
        client_id=client.id,
        route_id=route.id,
        vessel_id=sale.vessel_id,
        seller_id=seller.id,
        boarding_port_id=port.id,
        travel_date=sale.travel_date,
        boarding_time=sale.boarding_time,
        departure_time=sale.departure_time,
        passenger_count=sale.passenger_count,
        origin_port=sale.selected_origin or route.origin_port,
        destination_port=sale.selected_destination or route.destination_port,
        payment_type=PaymentType(sale.payment_type),
        payment_method=(
            HYBRID_PAYMENT_METHOD
            if is_hybrid
            else sale.payment_method or DEFAULT_PAYMENT_METHOD
        ),
        payment_methods=(
            [
                {"type": m.type, "amount": float(_money(m.amount))}
                for m in sale.payment_methods
            ]
            if is_hybrid
            else None
        ),
        status=SaleStatus.CONFIRMED,
        notes=sale.notes,
        sold_at=now,
        **totals,
    )
    db.add(db_sale)
    db.commit()
    return db_sale


def create_sale(
    db: Session,
    sale: SaleCreate,
    seller: User,
    now: Optional[datetime] = None,
) -> Sale:
    """
    Registra una venta confirmada.

    La verificación de disponibilidad, la numeración y el INSERT se hacen
    en la misma transacción con la embarcación bloqueada; si algo falla se
    hace rollback y no queda ningún cambio (tampoco del cliente).

    El bloqueo es por embarcación, así que dos ventas simultáneas en
    embarcaciones distintas pueden calcular el mismo número. En ese caso
    el índice único rechaza el INSERT y la venta se reintenta una vez.

    Raises:
        ValueError: Datos inválidos, ruta/puerto inexistentes, embarcación
            o ruta inactivas, o asientos insuficientes
        ConflictError: El número de venta volvió a chocar en el reintento
    """
    validate_sale_request(sale)
    now = now or now_local()

    route = db.query(Route).filter(Route.id == sale.route_id).first()
    if not route:
        raise ValueError("Ruta no encontrada")

    port = db.query(BoardingPort).filter(BoardingPort.id == sale.boarding_port_id).first()
    if not port:
        raise ValueError("Puerto de embarque no encontrado")

    expected_total = _money(Decimal(str(sale.final_price)) * sale.passenger_count)
    if sale.payment_type == PaymentType.HYBRID:
        validate_hybrid_payment(sale.payment_methods, expected_total)

    for attempt in range(1, SALE_NUMBER_ATTEMPTS + 1):
        try:
            db_sale = _insert_sale(db, sale, seller, route, port, now)
            break
        except IntegrityError as e:
            db.rollback()
            logger.warning(
                f"Venta rechazada por registro duplicado (intento {attempt}): {e.orig}"
            )
            if attempt == SALE_NUMBER_ATTEMPTS:
                raise ConflictError(
                    "No se pudo registrar la venta por otra venta simultánea. Reintente"
                )
        except Exception:
            db.rollback()
            raise

    db.refresh(db_sale)
    logger.info(
        f"Venta {db_sale.sale_number} confirmada | vendedor={seller.username} "
        f"| pasajes={db_sale.passenger_count} | total=S/ {db_sale.total}"
    )
    return db_sale
