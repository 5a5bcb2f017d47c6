from sqlalchemy import Column, Integer, String, Boolean, DateTime, ForeignKey, Enum
from sqlalchemy.orm import relationship
from datetime import datetime

from naviera.database import Base
from naviera.enums.user_role import UserRole, OperatorStatus


class User(Base):
    __tablename__ = "users"
    __table_args__ = {"extend_existing": True}

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    last_name = Column(String, nullable=False)
    username = Column(String, unique=True, index=True, nullable=False)
    email = Column(String, unique=True, index=True, nullable=False)
    hashed_password = Column(String)
    role = Column(
        Enum(UserRole, values_callable=lambda e: [m.value for m in e]),
        default=UserRole.SELLER,
        nullable=False,
    )
    is_active = Column(Boolean, default=True)

    # Solo aplica a operadores de embarcación
    operator_status = Column(
        Enum(OperatorStatus, values_callable=lambda e: [m.value for m in e]),
        nullable=True,
    )
    assigned_vessel_id = Column(Integer, ForeignKey("vessels.id"), nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    assigned_vessel = relationship("naviera.models.vessel.Vessel")
    sales = relationship("naviera.models.sale.Sale", back_populates="seller")

    @property
    def full_name(self) -> str:
        return f"{self.name} {self.last_name}".strip()
