"""
Configuración compartida para tests pytest
"""
import os

# La app no debe intentar conectarse a PostgreSQL durante los tests
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")

import pytest
from datetime import date, datetime
from decimal import Decimal
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from naviera.database import Base
from naviera.models.user import User
from naviera.models.client import Client
from naviera.models.route import Route
from naviera.models.vessel import Vessel, VesselRoute
from naviera.models.boarding_port import BoardingPort
from naviera.models.sale import Sale
from naviera.enums.user_role import UserRole, OperatorStatus
from naviera.enums.vessel_status import VesselStatus
from naviera.enums.sale_status import SaleStatus, PaymentType


# Base de datos en memoria para tests
SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Lunes 19/10/2026 08:00, hora de Lima
NOW = datetime(2026, 10, 19, 8, 0)
# Martes
TRAVEL_DATE = date(2026, 10, 20)
WEEKDAYS = ["lunes", "martes", "miércoles", "jueves", "viernes"]


@pytest.fixture
def db():
    """Crear base de datos de test y limpiarla después"""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


def _user(db, **kwargs):
    user = User(hashed_password="hashed", is_active=True, **kwargs)
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture
def admin(db):
    return _user(
        db,
        name="Ana",
        last_name="Admin",
        username="admin",
        email="admin@naviera.com",
        role=UserRole.ADMIN,
    )


@pytest.fixture
def seller(db):
    return _user(
        db,
        name="Victor",
        last_name="Ventas",
        username="vendedor",
        email="vendedor@naviera.com",
        role=UserRole.SELLER,
    )


@pytest.fixture
def other_seller(db):
    return _user(
        db,
        name="Rosa",
        last_name="Ramos",
        username="vendedor2",
        email="vendedor2@naviera.com",
        role=UserRole.SELLER,
    )


@pytest.fixture
def route(db):
    route = Route(
        name="Iquitos - Yurimaguas",
        origin_port="Iquitos",
        destination_port="Yurimaguas",
        price=Decimal("80.00"),
        is_active=True,
    )
    db.add(route)
    db.commit()
    db.refresh(route)
    return route


@pytest.fixture
def vessel(db):
    vessel = Vessel(
        name="Eduardo I",
        capacity=10,
        status=VesselStatus.ACTIVE,
        vessel_type="Lancha",
    )
    db.add(vessel)
    db.commit()
    db.refresh(vessel)
    return vessel


@pytest.fixture
def vessel_route(db, vessel, route):
    assignment = VesselRoute(
        vessel_id=vessel.id,
        route_id=route.id,
        departure_times=["06:00", "14:00"],
        operating_days=WEEKDAYS,
        is_active=True,
    )
    db.add(assignment)
    db.commit()
    db.refresh(assignment)
    return assignment


@pytest.fixture
def port(db):
    port = BoardingPort(name="Puerto Henry", address="Av. La Marina", order=1)
    db.add(port)
    db.commit()
    db.refresh(port)
    return port


@pytest.fixture
def operator(db, vessel):
    return _user(
        db,
        name="Oscar",
        last_name="Operador",
        username="operador",
        email="operador@naviera.com",
        role=UserRole.OPERATOR,
        operator_status=OperatorStatus.ACTIVE,
        assigned_vessel_id=vessel.id,
    )


@pytest.fixture
def client(db):
    client = Client(
        document_number="12345678",
        first_name="Juan",
        last_name="Pérez",
        phone="999888777",
        email="juan@example.com",
    )
    db.add(client)
    db.commit()
    db.refresh(client)
    return client


@pytest.fixture
def make_sale(db, client, route, vessel, port, seller):
    """Inserta ventas directamente, sin pasar por las validaciones de venta"""
    counter = {"n": 0}

    def _make_sale(
        passenger_count=2,
        status=SaleStatus.CONFIRMED,
        travel_date=TRAVEL_DATE,
        departure_time="14:00",
        sold_at=NOW,
        sale_seller=None,
        sale_client=None,
        unit_price=Decimal("80.00"),
    ):
        counter["n"] += 1
        total = unit_price * passenger_count
        sale = Sale(
            sale_number=f"T{counter['n']:04d}",
            client_id=(sale_client or client).id,
            route_id=route.id,
            vessel_id=vessel.id,
            seller_id=(sale_seller or seller).id,
            boarding_port_id=port.id,
            travel_date=travel_date,
            boarding_time="13:30",
            departure_time=departure_time,
            passenger_count=passenger_count,
            origin_port=route.origin_port,
            destination_port=route.destination_port,
            unit_price=unit_price,
            subtotal=total,
            taxes=Decimal("0.00"),
            total=total,
            payment_type=PaymentType.SINGLE,
            payment_method="EFECTIVO",
            status=status,
            sold_at=sold_at,
        )
        db.add(sale)
        db.commit()
        db.refresh(sale)
        return sale

    return _make_sale

