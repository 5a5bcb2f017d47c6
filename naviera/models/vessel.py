from sqlalchemy import (
    Column,
    Integer,
    String,
    Boolean,
    DateTime,
    ForeignKey,
    Enum,
    JSON,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship
from datetime import datetime

from naviera.database import Base
from naviera.enums.vessel_status import VesselStatus


class Vessel(Base):
    __tablename__ = "vessels"
    __table_args__ = {"extend_existing": True}

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, unique=True, nullable=False)
    capacity = Column(Integer, nullable=False)  # Asientos totales (1-500)
    status = Column(
        Enum(VesselStatus, values_callable=lambda e: [m.value for m in e]),
        default=VesselStatus.ACTIVE,
        nullable=False,
    )
    vessel_type = Column(String, nullable=True)  # Ferry, Lancha, etc.
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    vessel_routes = relationship(
        "naviera.models.vessel.VesselRoute", back_populates="vessel"
    )


class VesselRoute(Base):
    """Asignación de una embarcación a una ruta con sus horarios de salida"""

    __tablename__ = "vessel_routes"
    __table_args__ = (
        UniqueConstraint("vessel_id", "route_id", name="uq_vessel_route"),
        {"extend_existing": True},
    )

    id = Column(Integer, primary_key=True, index=True)
    vessel_id = Column(Integer, ForeignKey("vessels.id"), nullable=False)
    route_id = Column(Integer, ForeignKey("routes.id"), nullable=False)
    departure_times = Column(JSON, nullable=False, default=list)  # ["06:00", "14:00"]
    operating_days = Column(JSON, nullable=False, default=list)  # ["lunes", "miércoles"]
    is_active = Column(Boolean, default=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    vessel = relationship("naviera.models.vessel.Vessel", back_populates="vessel_routes")
    route = relationship("naviera.models.route.Route", back_populates="vessel_routes")
