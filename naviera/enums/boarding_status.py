from enum import Enum


class BoardingStatus(str, Enum):
    """Estado de embarque de un pasajero"""

    PENDING = "PENDIENTE"
    BOARDED = "EMBARCADO"
    NOT_BOARDED = "NO_EMBARCADO"


class BoardingRecordType(str, Enum):
    BOARDING = "EMBARQUE"
    DISEMBARKING = "DESEMBARQUE"
