from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from typing import List

from naviera.database import get_db
from naviera.crud import boarding_control as crud
from naviera.schemas.boarding import (
    BoardingStatusUpdate,
    BoardingResult,
    OperatorTrip,
    TripPassenger,
    TripStats,
)
from naviera.models.user import User
from naviera.services.auth import get_current_user
from naviera.utils.boarding_utils import (
    require_active_operator,
    update_boarding_status,
    reset_boarding_status,
)
from naviera.utils.date_utils import now_local, today_local, parse_travel_date, parse_time
from naviera.utils.errors import to_http_exception

router = APIRouter()


def get_current_operator(current_user: User = Depends(get_current_user)) -> User:
    try:
        return require_active_operator(current_user)
    except PermissionError as e:
        raise to_http_exception(e)


def _parse_trip(travel_date: str, departure_time: str):
    try:
        parse_time(departure_time)
        return parse_travel_date(travel_date)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.get("/trips", response_model=List[OperatorTrip])
def read_operator_trips(
    db: Session = Depends(get_db),
    operator: User = Depends(get_current_operator),
):
    return crud.get_operator_trips(db, operator, today=today_local())


@router.get(
    "/trips/{travel_date}/{departure_time}/passengers",
    response_model=List[TripPassenger],
)
def read_trip_passengers(
    travel_date: str,
    departure_time: str,
    db: Session = Depends(get_db),
    operator: User = Depends(get_current_operator),
):
    trip_date = _parse_trip(travel_date, departure_time)
    return crud.get_trip_passengers(db, operator, trip_date, departure_time)


@router.get("/trips/{travel_date}/{departure_time}/stats", response_model=TripStats)
def read_trip_stats(
    travel_date: str,
    departure_time: str,
    db: Session = Depends(get_db),
    operator: User = Depends(get_current_operator),
):
    trip_date = _parse_trip(travel_date, departure_time)
    try:
        return crud.get_trip_stats(db, operator, trip_date, departure_time)
    except LookupError as e:
        raise to_http_exception(e)


@router.put("/{control_id}/status", response_model=BoardingResult)
def update_status(
    control_id: int,
    update: BoardingStatusUpdate,
    db: Session = Depends(get_db),
    operator: User = Depends(get_current_operator),
):
    control = crud.get_boarding_control(db, control_id)
    if control is None:
        raise HTTPException(status_code=404, detail="Registro de embarque no encontrado")

    try:
        control = update_boarding_status(
            db, control, operator, update.boarding_status, update.notes, now=now_local()
        )
    except (ValueError, PermissionError) as e:
        raise to_http_exception(e)

    return {
        "success": True,
        "data": control,
        "message": f"Estado actualizado a {control.boarding_status.value}",
    }


@router.delete("/{control_id}/status", response_model=BoardingResult)
def delete_status(
    control_id: int,
    db: Session = Depends(get_db),
    operator: User = Depends(get_current_operator),
):
    control = crud.get_boarding_control(db, control_id)
    if control is None:
        raise HTTPException(status_code=404, detail="Registro de embarque no encontrado")

    try:
        control = reset_boarding_status(db, control, operator, now=now_local())
    except (ValueError, PermissionError) as e:
        raise to_http_exception(e)

    return {
        "success": True,
        "data": control,
        "message": "Registro eliminado. Pasajero volvió a estado PENDIENTE",
    }
