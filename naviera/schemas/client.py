from pydantic import BaseModel, validator
from typing import Optional, List
from datetime import datetime, date
from decimal import Decimal


class ClientData(BaseModel):
    """Datos del cliente tal como llegan en el formulario de venta"""

    document_number: str = ""
    first_name: str = ""
    last_name: str = ""
    phone: Optional[str] = None
    email: Optional[str] = None
    nationality: Optional[str] = None

    @validator("document_number")
    def sanitize_document_number(cls, v):
        # El DNI solo admite dígitos
        return "".join(c for c in (v or "") if c.isdigit())

    @validator("first_name", "last_name")
    def strip_names(cls, v):
        return (v or "").strip()

    @validator("phone", "email", "nationality")
    def empty_to_none(cls, v):
        if v is None:
            return None
        v = v.strip()
        return v or None


class ClientResponse(BaseModel):
    id: int
    document_number: str
    first_name: str
    last_name: str
    phone: Optional[str] = None
    email: Optional[str] = None
    nationality: Optional[str] = None
    address: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True


class ClientSaleSummary(BaseModel):
    id: int
    sale_number: str
    travel_date: date
    departure_time: str
    passenger_count: int
    total: Decimal
    status: str
    route_name: Optional[str] = None


class ClientWithSales(ClientResponse):
    recent_sales: List[ClientSaleSummary] = []
