from sqlalchemy import Column, Integer, String, Boolean, DateTime
from datetime import datetime

from naviera.database import Base


class BoardingPort(Base):
    __tablename__ = "boarding_ports"
    __table_args__ = {"extend_existing": True}

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, unique=True, nullable=False)
    description = Column(String, nullable=True)
    address = Column(String, nullable=True)
    order = Column(Integer, default=0)  # Orden de aparición en el formulario de venta
    is_active = Column(Boolean, default=True)
    created_at = Column(DateTime, default=datetime.utcnow)
