from sqlalchemy import Column, Integer, String, Boolean, DateTime, Numeric
from sqlalchemy.orm import relationship
from datetime import datetime

from naviera.database import Base


class Route(Base):
    __tablename__ = "routes"
    __table_args__ = {"extend_existing": True}

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, unique=True, nullable=False)  # ej: "Iquitos - Yurimaguas"
    origin_port = Column(String, nullable=False)
    destination_port = Column(String, nullable=False)
    price = Column(Numeric(10, 2), nullable=False)  # Precio base en soles
    is_active = Column(Boolean, default=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    vessel_routes = relationship(
        "naviera.models.vessel.VesselRoute", back_populates="route"
    )
