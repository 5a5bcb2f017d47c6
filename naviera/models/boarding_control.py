from sqlalchemy import Column, Integer, String, Date, DateTime, ForeignKey, Enum, Text
from sqlalchemy.orm import relationship
from datetime import datetime

from naviera.database import Base
from naviera.enums.boarding_status import BoardingStatus, BoardingRecordType


class BoardingControl(Base):
    __tablename__ = "boarding_controls"
    __table_args__ = {"extend_existing": True}

    id = Column(Integer, primary_key=True, index=True)
    sale_id = Column(Integer, ForeignKey("sales.id"), unique=True, nullable=False)
    operator_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    vessel_id = Column(Integer, ForeignKey("vessels.id"), nullable=False)
    route_id = Column(Integer, ForeignKey("routes.id"), nullable=False)
    travel_date = Column(Date, nullable=False)
    departure_time = Column(String, nullable=False)  # "HH:MM"
    boarding_status = Column(
        Enum(BoardingStatus, values_callable=lambda e: [m.value for m in e]),
        default=BoardingStatus.PENDING,
        nullable=False,
    )
    record_type = Column(
        Enum(BoardingRecordType, values_callable=lambda e: [m.value for m in e]),
        default=BoardingRecordType.BOARDING,
        nullable=False,
    )
    registered_at = Column(DateTime, nullable=True)  # Hora en que se marcó el estado
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    sale = relationship("naviera.models.sale.Sale", back_populates="boarding_control")
    operator = relationship("naviera.models.user.User")
    vessel = relationship("naviera.models.vessel.Vessel")
