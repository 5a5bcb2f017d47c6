from sqlalchemy import (
    Column,
    Integer,
    String,
    Date,
    DateTime,
    ForeignKey,
    Enum,
    Numeric,
    JSON,
    Text,
    Index,
)
from sqlalchemy.orm import relationship
from datetime import datetime

from naviera.database import Base
from naviera.enums.sale_status import SaleStatus, PaymentType
from naviera.utils.date_utils import now_local


class Sale(Base):
    __tablename__ = "sales"
    __table_args__ = (
        # Consulta de disponibilidad: (embarcación, ruta, fecha, hora)
        Index(
            "ix_sales_trip",
            "vessel_id",
            "route_id",
            "travel_date",
            "departure_time",
        ),
        {"extend_existing": True},
    )

    id = Column(Integer, primary_key=True, index=True)
    sale_number = Column(String, unique=True, index=True, nullable=False)  # V251018-001
    client_id = Column(Integer, ForeignKey("clients.id"), nullable=False)
    route_id = Column(Integer, ForeignKey("routes.id"), nullable=False)
    vessel_id = Column(Integer, ForeignKey("vessels.id"), nullable=False)
    seller_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    boarding_port_id = Column(Integer, ForeignKey("boarding_ports.id"), nullable=True)

    travel_date = Column(Date, nullable=False)
    boarding_time = Column(String, nullable=False)  # "HH:MM"
    departure_time = Column(String, nullable=False)  # "HH:MM"
    passenger_count = Column(Integer, nullable=False)
    origin_port = Column(String, nullable=False)
    destination_port = Column(String, nullable=False)

    unit_price = Column(Numeric(10, 2), nullable=False)
    subtotal = Column(Numeric(10, 2), nullable=False)
    taxes = Column(Numeric(10, 2), nullable=False, default=0)
    total = Column(Numeric(10, 2), nullable=False)

    payment_type = Column(
        Enum(PaymentType, values_callable=lambda e: [m.value for m in e]),
        default=PaymentType.SINGLE,
        nullable=False,
    )
    payment_method = Column(String, default="EFECTIVO")  # "HIBRIDO" en pago híbrido
    payment_methods = Column(JSON, nullable=True)  # [{"type": "YAPE", "amount": 20.0}]

    status = Column(
        Enum(SaleStatus, values_callable=lambda e: [m.value for m in e]),
        default=SaleStatus.CONFIRMED,
        nullable=False,
    )
    notes = Column(Text, nullable=True)

    sold_at = Column(DateTime, default=now_local, index=True)  # Hora local del negocio
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    client = relationship("naviera.models.client.Client", back_populates="sales")
    route = relationship("naviera.models.route.Route")
    vessel = relationship("naviera.models.vessel.Vessel")
    seller = relationship("naviera.models.user.User", back_populates="sales")
    boarding_port = relationship("naviera.models.boarding_port.BoardingPort")
    cancellation = relationship(
        "naviera.models.cancellation.Cancellation",
        back_populates="sale",
        uselist=False,
    )
    boarding_control = relationship(
        "naviera.models.boarding_control.BoardingControl",
        back_populates="sale",
        uselist=False,
    )
