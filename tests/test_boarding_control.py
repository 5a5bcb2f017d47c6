"""
Tests del control de embarque de operadores
"""
import pytest
from datetime import date, datetime
from fastapi import HTTPException
from pydantic import ValidationError

from naviera.models.boarding_control import BoardingControl
from naviera.models.vessel import Vessel
from naviera.enums.boarding_status import BoardingStatus, BoardingRecordType
from naviera.enums.sale_status import SaleStatus
from naviera.enums.user_role import OperatorStatus
from naviera.schemas.boarding import BoardingStatusUpdate
from naviera.crud.boarding_control import (
    get_operator_trips,
    get_trip_passengers,
    get_trip_stats,
)
from naviera.utils.boarding_utils import (
    require_active_operator,
    update_boarding_status,
    reset_boarding_status,
)
from naviera.routers.boarding import get_current_operator, read_trip_passengers

TODAY = date(2026, 10, 20)
# Hora de salida de los viajes de prueba: 14:00
BEFORE_DEPARTURE = datetime(2026, 10, 20, 13, 0)
AFTER_DEPARTURE = datetime(2026, 10, 20, 14, 5)


@pytest.fixture
def trip_controls(db, operator, make_sale):
    """Dos ventas del viaje del 20/10 14:00 con sus registros PENDIENTE"""
    make_sale(passenger_count=2, travel_date=TODAY)
    make_sale(passenger_count=1, travel_date=TODAY)
    get_trip_passengers(db, operator, TODAY, "14:00")
    return db.query(BoardingControl).order_by(BoardingControl.id).all()


def test_require_active_operator(operator):
    assert require_active_operator(operator) is operator


def test_seller_is_not_operator(seller):
    with pytest.raises(PermissionError) as exc_info:
        require_active_operator(seller)

    assert str(exc_info.value) == "Usuario no es operador"


def test_inactive_operator_is_rejected(db, operator):
    operator.operator_status = OperatorStatus.INACTIVE
    db.commit()

    with pytest.raises(PermissionError) as exc_info:
        require_active_operator(operator)

    assert str(exc_info.value) == "Operador inactivo"


def test_operator_without_vessel_is_rejected(db, operator):
    operator.assigned_vessel_id = None
    db.commit()

    with pytest.raises(PermissionError) as exc_info:
        require_active_operator(operator)

    assert "sin embarcación asignada" in str(exc_info.value)


def test_operator_dependency_maps_to_403(seller):
    with pytest.raises(HTTPException) as exc_info:
        get_current_operator(current_user=seller)

    assert exc_info.value.status_code == 403


def test_trips_grouped_by_date_and_time(db, operator, make_sale):
    make_sale(passenger_count=2, travel_date=TODAY, departure_time="06:00")
    make_sale(passenger_count=3, travel_date=TODAY, departure_time="14:00")
    make_sale(passenger_count=1, travel_date=TODAY, departure_time="14:00")
    make_sale(passenger_count=4, travel_date=TODAY, status=SaleStatus.VOIDED)
    make_sale(passenger_count=5, travel_date=date(2026, 10, 19))

    trips = get_operator_trips(db, operator, today=TODAY)

    assert [(t["travel_date"], t["departure_time"]) for t in trips] == [
        (TODAY, "06:00"),
        (TODAY, "14:00"),
    ]
    assert trips[1]["total"] == 4
    assert trips[1]["pending"] == 4
    assert trips[1]["boarded"] == 0
    assert trips[1]["route"].name == "Iquitos - Yurimaguas"


def test_trips_count_passengers_by_status(db, operator, trip_controls):
    trip_controls[0].boarding_status = BoardingStatus.BOARDED
    trip_controls[1].boarding_status = BoardingStatus.NOT_BOARDED
    db.commit()

    trip = get_operator_trips(db, operator, today=TODAY)[0]

    assert trip["total"] == 3
    assert trip["boarded"] == 2
    assert trip["not_boarded"] == 1
    assert trip["pending"] == 0


def test_trips_only_for_assigned_vessel(db, operator, make_sale):
    make_sale(travel_date=TODAY)
    other = Vessel(name="Otra", capacity=20)
    db.add(other)
    db.commit()
    operator.assigned_vessel_id = other.id
    db.commit()

    assert get_operator_trips(db, operator, today=TODAY) == []


def test_passenger_list_creates_pending_records(db, operator, vessel, make_sale):
    first = make_sale(passenger_count=2, travel_date=TODAY)
    make_sale(passenger_count=1, travel_date=TODAY, status=SaleStatus.VOIDED)

    passengers = get_trip_passengers(db, operator, TODAY, "14:00")

    assert [p.id for p in passengers] == [first.id]
    control = passengers[0].boarding_control
    assert control.boarding_status == BoardingStatus.PENDING
    assert control.record_type == BoardingRecordType.BOARDING
    assert control.vessel_id == vessel.id
    assert control.operator_id == operator.id


def test_passenger_list_does_not_duplicate_records(db, operator, trip_controls):
    get_trip_passengers(db, operator, TODAY, "14:00")

    assert db.query(BoardingControl).count() == len(trip_controls) == 2


def test_trip_stats(db, operator, trip_controls):
    trip_controls[0].boarding_status = BoardingStatus.BOARDED
    db.commit()

    stats = get_trip_stats(db, operator, TODAY, "14:00")

    assert stats["total"] == 2
    assert stats["boarded"] == 1
    assert stats["pending"] == 1
    assert stats["not_boarded"] == 0
    assert stats["boarded_percentage"] == 50
    assert stats["available_capacity"] == 9
    assert stats["total_capacity"] == 10


def test_trip_stats_without_records(db, operator):
    stats = get_trip_stats(db, operator, TODAY, "14:00")

    assert stats["total"] == 0
    assert stats["boarded_percentage"] == 0
    assert stats["available_capacity"] == 10


def test_mark_boarded_after_departure(db, operator, trip_controls):
    control = update_boarding_status(
        db,
        trip_controls[0],
        operator,
        BoardingStatus.BOARDED,
        notes="Con equipaje",
        now=AFTER_DEPARTURE,
    )

    assert control.boarding_status == BoardingStatus.BOARDED
    assert control.registered_at == AFTER_DEPARTURE
    assert control.notes == "Con equipaje"


def test_cannot_mark_before_departure_time(db, operator, trip_controls):
    with pytest.raises(ValueError) as exc_info:
        update_boarding_status(
            db, trip_controls[0], operator, BoardingStatus.BOARDED, now=BEFORE_DEPARTURE
        )

    assert "a partir de las 14:00" in str(exc_info.value)


def test_cannot_modify_past_trip(db, operator, trip_controls):
    with pytest.raises(ValueError) as exc_info:
        update_boarding_status(
            db,
            trip_controls[0],
            operator,
            BoardingStatus.BOARDED,
            now=datetime(2026, 10, 21, 0, 1),
        )

    assert "viaje pasado" in str(exc_info.value)


def test_late_night_same_day_is_allowed(db, operator, trip_controls):
    control = update_boarding_status(
        db,
        trip_controls[0],
        operator,
        BoardingStatus.NOT_BOARDED,
        now=datetime(2026, 10, 20, 23, 59),
    )

    assert control.boarding_status == BoardingStatus.NOT_BOARDED


def test_cannot_repeat_same_status(db, operator, trip_controls):
    update_boarding_status(
        db, trip_controls[0], operator, BoardingStatus.BOARDED, now=AFTER_DEPARTURE
    )

    with pytest.raises(ValueError) as exc_info:
        update_boarding_status(
            db, trip_controls[0], operator, BoardingStatus.BOARDED, now=AFTER_DEPARTURE
        )

    assert "ya está marcado como EMBARCADO" in str(exc_info.value)


def test_cannot_set_pending_directly(db, operator, trip_controls):
    with pytest.raises(ValueError):
        update_boarding_status(
            db, trip_controls[0], operator, BoardingStatus.PENDING, now=AFTER_DEPARTURE
        )


def test_status_update_schema_rejects_pending():
    with pytest.raises(ValidationError):
        BoardingStatusUpdate(boarding_status=BoardingStatus.PENDING)

    update = BoardingStatusUpdate(boarding_status="EMBARCADO")
    assert update.boarding_status == BoardingStatus.BOARDED


def test_operator_of_other_vessel_cannot_modify(db, operator, trip_controls):
    other = Vessel(name="Otra", capacity=20)
    db.add(other)
    db.commit()
    operator.assigned_vessel_id = other.id
    db.commit()

    with pytest.raises(PermissionError):
        update_boarding_status(
            db, trip_controls[0], operator, BoardingStatus.BOARDED, now=AFTER_DEPARTURE
        )


def test_reset_to_pending(db, operator, trip_controls):
    update_boarding_status(
        db,
        trip_controls[0],
        operator,
        BoardingStatus.BOARDED,
        notes="Nota",
        now=AFTER_DEPARTURE,
    )

    control = reset_boarding_status(db, trip_controls[0], operator, now=AFTER_DEPARTURE)

    assert control.boarding_status == BoardingStatus.PENDING
    assert control.registered_at is None
    assert control.notes is None


def test_reset_already_pending(db, operator, trip_controls):
    with pytest.raises(ValueError) as exc_info:
        reset_boarding_status(db, trip_controls[0], operator, now=AFTER_DEPARTURE)

    assert "ya está en estado PENDIENTE" in str(exc_info.value)


def test_passengers_endpoint_rejects_bad_time(db, operator):
    with pytest.raises(HTTPException) as exc_info:
        read_trip_passengers("2026-10-20", "2pm", db=db, operator=operator)

    assert exc_info.value.status_code == 400
    assert "HH:MM" in exc_info.value.detail


def test_passengers_endpoint_rejects_bad_date(db, operator):
    with pytest.raises(HTTPException) as exc_info:
        read_trip_passengers("20-10-2026", "14:00", db=db, operator=operator)

    assert exc_info.value.status_code == 400
    assert "YYYY-MM-DD" in exc_info.value.detail
