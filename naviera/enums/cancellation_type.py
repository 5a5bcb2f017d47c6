from enum import Enum


class CancellationType(str, Enum):
    VOID = "ANULACION"
    REFUND = "REEMBOLSO"
