"""
Tests de confirmación de ventas: validaciones, pago híbrido, numeración
y control de sobreventa
"""
import pytest
from datetime import date, datetime
from decimal import Decimal
from fastapi import HTTPException

from naviera.models.client import Client
from naviera.models.sale import Sale
from naviera.enums.sale_status import SaleStatus, PaymentType
from naviera.enums.user_role import UserRole
from naviera.enums.vessel_status import VesselStatus
from naviera.schemas.client import ClientData
from naviera.schemas.sale import SaleCreate, PaymentMethodItem
from naviera.crud.client import find_or_create_client
from naviera.utils.sale_utils import (
    create_sale,
    calculate_totals,
    generate_sale_number,
    validate_hybrid_payment,
)
from naviera.routers.sales import create_new_sale
from naviera.utils import sale_utils
from naviera.utils.errors import ConflictError, to_http_exception

NOW = datetime(2026, 10, 19, 8, 0)
TRAVEL_DATE = date(2026, 10, 20)


@pytest.fixture
def sale_request(route, vessel, vessel_route, port):
    """Formulario de venta válido, pago único en efectivo"""

    def _sale_request(**overrides):
        data = {
            "client": ClientData(
                document_number="87654321",
                first_name="María",
                last_name="Gómez",
            ),
            "route_id": route.id,
            "vessel_id": vessel.id,
            "boarding_port_id": port.id,
            "travel_date": TRAVEL_DATE,
            "departure_time": "14:00",
            "boarding_time": "13:30",
            "passenger_count": 2,
            "payment_type": PaymentType.SINGLE,
            "payment_method": "YAPE",
            "final_price": Decimal("75.00"),
        }
        data.update(overrides)
        return SaleCreate(**data)

    return _sale_request


def test_create_sale_single_payment(db, seller, route, sale_request):
    sale = create_sale(db, sale_request(), seller, now=NOW)

    assert sale.id is not None
    assert sale.sale_number == "V261019-001"
    assert sale.status == SaleStatus.CONFIRMED
    assert sale.unit_price == Decimal("75.00")
    assert sale.subtotal == Decimal("150.00")
    assert sale.taxes == Decimal("0.00")
    assert sale.total == Decimal("150.00")
    assert sale.payment_method == "YAPE"
    assert sale.payment_methods is None
    assert sale.origin_port == route.origin_port
    assert sale.destination_port == route.destination_port
    assert sale.seller_id == seller.id
    assert sale.sold_at == NOW


def test_create_sale_creates_client_with_default_nationality(db, seller, sale_request):
    sale = create_sale(db, sale_request(), seller, now=NOW)

    client = db.query(Client).filter(Client.document_number == "87654321").first()
    assert client is not None
    assert client.nationality == "Peruana"
    assert sale.client_id == client.id


def test_create_sale_uses_selected_ports(db, seller, sale_request):
    sale = create_sale(
        db,
        sale_request(selected_origin="Nauta", selected_destination="Lagunas"),
        seller,
        now=NOW,
    )

    assert sale.origin_port == "Nauta"
    assert sale.destination_port == "Lagunas"


def test_sale_numbers_are_sequential_per_day(db, seller, sale_request):
    first = create_sale(db, sale_request(passenger_count=1), seller, now=NOW)
    second = create_sale(db, sale_request(passenger_count=1), seller, now=NOW)
    next_day = create_sale(
        db,
        sale_request(passenger_count=1),
        seller,
        now=datetime(2026, 10, 20, 7, 0),
    )

    assert first.sale_number == "V261019-001"
    assert second.sale_number == "V261019-002"
    assert next_day.sale_number == "V261020-001"


def test_generate_sale_number_without_sales(db):
    assert generate_sale_number(db, now=datetime(2026, 1, 5, 10, 0)) == "V260105-001"


def test_create_sale_hybrid_payment(db, seller, sale_request):
    request = sale_request(
        payment_type=PaymentType.HYBRID,
        payment_method=None,
        payment_methods=[
            PaymentMethodItem(type="EFECTIVO", amount=Decimal("100.00")),
            PaymentMethodItem(type="YAPE", amount=Decimal("50.00")),
        ],
    )

    sale = create_sale(db, request, seller, now=NOW)

    assert sale.payment_type == PaymentType.HYBRID
    assert sale.payment_method == "HIBRIDO"
    assert sale.payment_methods == [
        {"type": "EFECTIVO", "amount": 100.0},
        {"type": "YAPE", "amount": 50.0},
    ]


def test_create_sale_hybrid_payment_mismatch(db, seller, sale_request):
    request = sale_request(
        payment_type=PaymentType.HYBRID,
        payment_methods=[
            PaymentMethodItem(type="EFECTIVO", amount=Decimal("100.00")),
            PaymentMethodItem(type="YAPE", amount=Decimal("40.00")),
        ],
    )

    with pytest.raises(ValueError) as exc_info:
        create_sale(db, request, seller, now=NOW)

    message = str(exc_info.value)
    assert "S/ 140.00" in message
    assert "S/ 150.00" in message
    assert db.query(Sale).count() == 0


def test_hybrid_payment_tolerance():
    methods = [
        PaymentMethodItem(type="EFECTIVO", amount=Decimal("33.33")),
        PaymentMethodItem(type="PLIN", amount=Decimal("66.66")),
    ]

    assert validate_hybrid_payment(methods, Decimal("100.00")) == Decimal("99.99")

    with pytest.raises(ValueError):
        validate_hybrid_payment(methods, Decimal("100.01"))


def test_calculate_totals():
    totals = calculate_totals(Decimal("35.50"), 3)

    assert totals["subtotal"] == Decimal("106.50")
    assert totals["taxes"] == Decimal("0.00")
    assert totals["total"] == Decimal("106.50")


@pytest.mark.parametrize(
    "overrides, message",
    [
        ({"client": ClientData(document_number="", first_name="A", last_name="B")}, "cliente incompletos"),
        ({"boarding_port_id": None}, "viaje incompletos"),
        ({"departure_time": "2pm"}, "Formato de hora"),
        ({"passenger_count": 0}, "Cantidad de pasajes"),
        ({"payment_type": None}, "Tipo de pago"),
        ({"payment_type": "CHEQUE"}, "Tipo de pago"),
        ({"payment_method": None}, "pago único"),
        ({"payment_type": PaymentType.HYBRID, "payment_methods": []}, "pago híbrido"),
        (
            {
                "payment_type": PaymentType.HYBRID,
                "payment_methods": [PaymentMethodItem(type="", amount=Decimal("150"))],
            },
            "Datos incompletos en métodos de pago",
        ),
        ({"final_price": Decimal("0")}, "Precio final"),
    ],
)
def test_create_sale_validation_errors(db, seller, sale_request, overrides, message):
    with pytest.raises(ValueError) as exc_info:
        create_sale(db, sale_request(**overrides), seller, now=NOW)

    assert message in str(exc_info.value)


def test_create_sale_unknown_route(db, seller, sale_request):
    with pytest.raises(ValueError) as exc_info:
        create_sale(db, sale_request(route_id=999), seller, now=NOW)

    assert "Ruta no encontrada" in str(exc_info.value)
    # La ruta se valida antes de registrar al cliente
    assert db.query(Client).count() == 0


def test_create_sale_past_travel_date(db, seller, sale_request):
    with pytest.raises(ValueError) as exc_info:
        create_sale(db, sale_request(travel_date=date(2026, 10, 18)), seller, now=NOW)

    assert "anterior a hoy" in str(exc_info.value)


def test_create_sale_inactive_vessel(db, seller, vessel, sale_request):
    vessel.status = VesselStatus.INACTIVE
    db.commit()

    with pytest.raises(ValueError) as exc_info:
        create_sale(db, sale_request(), seller, now=NOW)

    assert "no está activa" in str(exc_info.value)


def test_create_sale_overbooking_is_rejected(db, seller, sale_request, make_sale):
    make_sale(passenger_count=9)

    with pytest.raises(ValueError) as exc_info:
        create_sale(db, sale_request(passenger_count=2), seller, now=NOW)

    assert str(exc_info.value) == "Solo hay 1 asientos disponibles"
    # Rollback completo: ni venta nueva ni cliente nuevo
    assert db.query(Sale).count() == 1
    assert (
        db.query(Client).filter(Client.document_number == "87654321").first() is None
    )


def test_create_sale_fills_last_seats(db, seller, sale_request, make_sale):
    make_sale(passenger_count=8)

    sale = create_sale(db, sale_request(passenger_count=2), seller, now=NOW)

    assert sale.status == SaleStatus.CONFIRMED


def test_voided_sales_free_seats_for_new_sales(db, seller, sale_request, make_sale):
    make_sale(passenger_count=10, status=SaleStatus.VOIDED)

    sale = create_sale(db, sale_request(passenger_count=10), seller, now=NOW)

    assert sale.passenger_count == 10


def test_find_or_create_client_updates_contact(db, client):
    data = ClientData(
        document_number=client.document_number,
        first_name="Juan Carlos",
        last_name="Pérez",
        phone="911222333",
    )

    updated = find_or_create_client(db, data)

    assert updated.id == client.id
    assert updated.phone == "911222333"
    assert updated.email == "juan@example.com"
    assert updated.first_name == "Juan Carlos"
    assert db.query(Client).count() == 1


def test_find_or_create_client_without_contact_keeps_data(db, client):
    data = ClientData(
        document_number=client.document_number,
        first_name="Otro",
        last_name="Nombre",
    )

    found = find_or_create_client(db, data)

    assert found.first_name == "Juan"


def test_client_document_number_keeps_digits_only():
    data = ClientData(document_number=" 12.345-678 ", first_name="A", last_name="B")

    assert data.document_number == "12345678"


def test_sales_endpoint_rejects_operators(db, seller, sale_request):
    operator = seller
    operator.role = UserRole.OPERATOR
    db.commit()

    with pytest.raises(HTTPException) as exc_info:
        create_new_sale(sale_request(), db=db, current_user=operator)

    assert exc_info.value.status_code == 403


def test_sales_endpoint_unknown_payment_type_is_bad_request(db, seller, sale_request):
    with pytest.raises(HTTPException) as exc_info:
        create_new_sale(sale_request(payment_type="CHEQUE"), db=db, current_user=seller)

    assert exc_info.value.status_code == 400
    assert exc_info.value.detail == "Tipo de pago inválido"
    assert db.query(Sale).count() == 0


def test_duplicate_sale_number_is_retried(db, seller, sale_request, monkeypatch):
    first = create_sale(db, sale_request(passenger_count=1), seller, now=NOW)
    # Otra venta simultánea (en otra embarcación) ya tomó el mismo número
    numbers = iter([first.sale_number, "V261019-002"])
    monkeypatch.setattr(sale_utils, "generate_sale_number", lambda db, now=None: next(numbers))

    second = create_sale(db, sale_request(passenger_count=1), seller, now=NOW)

    assert second.sale_number == "V261019-002"
    assert db.query(Sale).count() == 2


def test_duplicate_sale_number_twice_is_a_conflict(db, seller, sale_request, monkeypatch):
    taken = create_sale(db, sale_request(passenger_count=1), seller, now=NOW).sale_number
    monkeypatch.setattr(sale_utils, "generate_sale_number", lambda db, now=None: taken)

    with pytest.raises(ConflictError) as exc_info:
        create_sale(
            db,
            sale_request(
                passenger_count=1,
                client=ClientData(document_number="11223344", first_name="Ana", last_name="Ríos"),
            ),
            seller,
            now=NOW,
        )

    assert to_http_exception(exc_info.value).status_code == 409
    assert db.query(Sale).count() == 1
    # El cliente nuevo también se deshace
    assert db.query(Client).filter(Client.document_number == "11223344").count() == 0
