from enum import Enum


class UserRole(str, Enum):
    ADMIN = "ADMINISTRADOR"
    SELLER = "VENDEDOR"
    OPERATOR = "OPERADOR_EMBARCACION"


class OperatorStatus(str, Enum):
    ACTIVE = "ACTIVO"
    INACTIVE = "INACTIVO"
