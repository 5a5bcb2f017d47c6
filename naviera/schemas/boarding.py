from pydantic import BaseModel, validator
from datetime import datetime, date
from typing import List, Optional

from naviera.enums.boarding_status import BoardingStatus, BoardingRecordType
from naviera.schemas.route import RouteSummary


class BoardingStatusUpdate(BaseModel):
    boarding_status: BoardingStatus
    notes: Optional[str] = None

    @validator("boarding_status")
    def validate_status(cls, v):
        if v == BoardingStatus.PENDING:
            raise ValueError("El estado debe ser EMBARCADO o NO_EMBARCADO")
        return v

    @validator("notes")
    def validate_notes(cls, v):
        if v and len(v) > 500:
            raise ValueError("Las observaciones no pueden exceder 500 caracteres")
        return v


class BoardingOperator(BaseModel):
    id: int
    name: str
    last_name: str

    class Config:
        from_attributes = True


class BoardingControlResponse(BaseModel):
    id: int
    sale_id: int
    vessel_id: int
    route_id: int
    travel_date: date
    departure_time: str
    boarding_status: BoardingStatus
    record_type: BoardingRecordType
    registered_at: Optional[datetime] = None
    notes: Optional[str] = None
    operator: Optional[BoardingOperator] = None

    class Config:
        from_attributes = True


class BoardingResult(BaseModel):
    success: bool
    data: BoardingControlResponse
    message: str


class PassengerClient(BaseModel):
    id: int
    document_number: str
    first_name: str
    last_name: str
    phone: Optional[str] = None

    class Config:
        from_attributes = True


class PassengerPort(BaseModel):
    id: int
    name: str

    class Config:
        from_attributes = True


class TripPassenger(BaseModel):
    id: int
    sale_number: str
    passenger_count: int
    client: PassengerClient
    boarding_port: Optional[PassengerPort] = None
    route: RouteSummary
    boarding_control: Optional[BoardingControlResponse] = None

    class Config:
        from_attributes = True


class OperatorTrip(BaseModel):
    travel_date: date
    departure_time: str
    total: int
    boarded: int
    pending: int
    not_boarded: int
    route: Optional[RouteSummary] = None


class TripStats(BaseModel):
    total: int
    boarded: int
    pending: int
    not_boarded: int
    boarded_percentage: int
    available_capacity: int
    vessel: str
    total_capacity: int
