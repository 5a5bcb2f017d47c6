from enum import Enum


class SaleStatus(str, Enum):
    """Estados de una venta de pasajes"""

    CONFIRMED = "CONFIRMADA"
    VOIDED = "ANULADA"
    REFUNDED = "REEMBOLSADA"


class PaymentType(str, Enum):
    SINGLE = "UNICO"
    HYBRID = "HIBRIDO"
