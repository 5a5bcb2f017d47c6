"""
Utilidades de fechas y horas del negocio.
Todas las validaciones de viajes se hacen en la hora local de la empresa
(por defecto America/Lima), no en la hora del servidor.
"""

import os
import re
import unicodedata
from datetime import datetime, date, time, timedelta
from typing import Optional
from zoneinfo import ZoneInfo

from dotenv import load_dotenv

load_dotenv()

BUSINESS_TIMEZONE = os.getenv("BUSINESS_TIMEZONE", "America/Lima")

# Índice = date.weekday() (lunes = 0)
WEEKDAY_NAMES = [
    "lunes",
    "martes",
    "miércoles",
    "jueves",
    "viernes",
    "sábado",
    "domingo",
]

_TIME_PATTERN = re.compile(r"^\d{2}:\d{2}$")


def now_local() -> datetime:
    """Fecha y hora actual en la zona horaria del negocio (naive)."""
    return datetime.now(ZoneInfo(BUSINESS_TIMEZONE)).replace(tzinfo=None)


def today_local() -> date:
    return now_local().date()


def is_valid_time_string(value: Optional[str]) -> bool:
    """Valida el formato "HH:MM" (00:00 - 23:59)."""
    if not value or not _TIME_PATTERN.match(value):
        return False
    hours, minutes = value.split(":")
    return int(hours) < 24 and int(minutes) < 60


def parse_time(value: str) -> time:
    if not is_valid_time_string(value):
        raise ValueError("Formato de hora inválido. Use HH:MM")
    hours, minutes = value.split(":")
    return time(int(hours), int(minutes))


def parse_travel_date(value: str) -> date:
    """Convierte "YYYY-MM-DD" en date sin pasar por UTC."""
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except (TypeError, ValueError):
        raise ValueError("Formato de fecha inválido. Use YYYY-MM-DD")


def trip_datetime(travel_date: date, departure_time: str) -> datetime:
    """Fecha y hora completa de salida de un viaje."""
    return datetime.combine(travel_date, parse_time(departure_time))


def weekday_name(value: date) -> str:
    return WEEKDAY_NAMES[value.weekday()]


def normalize_day_name(value: str) -> str:
    """"Miércoles" -> "miercoles". Permite comparar días con o sin tilde."""
    decomposed = unicodedata.normalize("NFKD", value.strip().lower())
    return "".join(c for c in decomposed if not unicodedata.combining(c))


def period_start(period: str, now: datetime) -> datetime:
    """
    Inicio del período para estadísticas.

    Args:
        period: "dia", "semana", "mes" o "anio" (cualquier otro valor = "mes")
        now: Momento de referencia
    """
    if period == "dia":
        return datetime.combine(now.date(), time.min)
    if period == "semana":
        return now - timedelta(days=7)
    if period == "anio":
        return datetime(now.year, 1, 1)
    return datetime(now.year, now.month, 1)
