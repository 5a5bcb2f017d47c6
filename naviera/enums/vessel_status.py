from enum import Enum


class VesselStatus(str, Enum):
    ACTIVE = "ACTIVA"
    MAINTENANCE = "MANTENIMIENTO"
    INACTIVE = "INACTIVA"
