from pydantic import BaseModel, validator
from datetime import datetime, date
from decimal import Decimal
from typing import List, Optional

from naviera.enums.sale_status import SaleStatus, PaymentType
from naviera.schemas.client import ClientData, ClientResponse
from naviera.schemas.route import RouteSummary, VesselSummary


class PaymentMethodItem(BaseModel):
    """Un medio de pago dentro de un pago híbrido (ej: efectivo + Yape)"""

    type: str = ""
    amount: Decimal = Decimal("0")


class SaleCreate(BaseModel):
    client: ClientData
    route_id: Optional[int] = None
    vessel_id: Optional[int] = None
    boarding_port_id: Optional[int] = None
    travel_date: Optional[date] = None
    departure_time: Optional[str] = None  # "HH:MM"
    boarding_time: Optional[str] = None  # "HH:MM"
    passenger_count: int = 0
    payment_type: Optional[str] = None  # UNICO o HIBRIDO
    payment_method: Optional[str] = None  # Solo pago único
    payment_methods: Optional[List[PaymentMethodItem]] = None  # Solo pago híbrido
    final_price: Optional[Decimal] = None  # Precio unitario pactado con el cliente
    selected_origin: Optional[str] = None
    selected_destination: Optional[str] = None
    notes: Optional[str] = None

    @validator("notes")
    def validate_notes(cls, v):
        if v and len(v) > 500:
            raise ValueError("Las observaciones no pueden exceder 500 caracteres")
        return v.strip() if v else v


class AvailabilityRequest(BaseModel):
    vessel_id: Optional[int] = None
    route_id: Optional[int] = None
    travel_date: Optional[date] = None
    departure_time: Optional[str] = None
    requested: Optional[int] = None


class AvailabilityResponse(BaseModel):
    total_capacity: int
    sold: int
    available: int
    can_sell: bool
    operating_days: List[str] = []


class SellerSummary(BaseModel):
    id: int
    name: str
    last_name: str

    class Config:
        from_attributes = True


class SaleResponse(BaseModel):
    id: int
    sale_number: str
    client_id: int
    route_id: int
    vessel_id: int
    seller_id: int
    boarding_port_id: Optional[int] = None
    travel_date: date
    boarding_time: str
    departure_time: str
    passenger_count: int
    origin_port: str
    destination_port: str
    unit_price: Decimal
    subtotal: Decimal
    taxes: Decimal
    total: Decimal
    payment_type: PaymentType
    payment_method: Optional[str] = None
    payment_methods: Optional[List[PaymentMethodItem]] = None
    status: SaleStatus
    notes: Optional[str] = None
    sold_at: datetime

    class Config:
        from_attributes = True


class SaleDetail(SaleResponse):
    client: ClientResponse
    route: RouteSummary
    vessel: VesselSummary
    seller: SellerSummary


class SaleListResponse(BaseModel):
    sales: List[SaleDetail]
    total: int
    total_pages: int
    current_page: int
