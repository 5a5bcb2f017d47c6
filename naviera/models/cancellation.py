from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Enum, Numeric, Text
from sqlalchemy.orm import relationship

from naviera.database import Base
from naviera.enums.cancellation_type import CancellationType
from naviera.utils.date_utils import now_local


class Cancellation(Base):
    __tablename__ = "cancellations"
    __table_args__ = {"extend_existing": True}

    id = Column(Integer, primary_key=True, index=True)
    sale_id = Column(Integer, ForeignKey("sales.id"), unique=True, nullable=False)
    reason = Column(String, nullable=False)
    notes = Column(Text, nullable=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    seats_released = Column(Integer, nullable=False)
    refund_amount = Column(Numeric(10, 2), nullable=True)  # Solo para REEMBOLSO
    cancellation_type = Column(
        Enum(CancellationType, values_callable=lambda e: [m.value for m in e]),
        default=CancellationType.VOID,
        nullable=False,
    )
    cancelled_at = Column(DateTime, default=now_local, index=True)

    # Relationships
    sale = relationship("naviera.models.sale.Sale", back_populates="cancellation")
    user = relationship("naviera.models.user.User")
