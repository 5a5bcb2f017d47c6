from pydantic import BaseModel
from typing import List, Optional
from decimal import Decimal

from naviera.enums.vessel_status import VesselStatus


class RouteSummary(BaseModel):
    id: int
    name: str
    origin_port: str
    destination_port: str
    price: Decimal

    class Config:
        from_attributes = True


class VesselSummary(BaseModel):
    id: int
    name: str
    capacity: int
    status: VesselStatus
    vessel_type: Optional[str] = None

    class Config:
        from_attributes = True


class VesselRouteResponse(BaseModel):
    id: int
    vessel_id: int
    route_id: int
    departure_times: List[str]
    operating_days: List[str]
    is_active: bool
    vessel: VesselSummary

    class Config:
        from_attributes = True


class ActiveRouteResponse(RouteSummary):
    is_active: bool
    vessel_routes: List[VesselRouteResponse] = []
