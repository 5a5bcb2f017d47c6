from sqlalchemy.orm import Session
from naviera.models.user import User
from naviera.models.route import Route
from naviera.models.vessel import Vessel, VesselRoute
from naviera.models.boarding_port import BoardingPort
from naviera.enums.user_role import UserRole
from naviera.services.auth import get_password_hash
import logging
import os
from decimal import Decimal

logger = logging.getLogger(__name__)


def create_initial_users(db: Session):
    """
    Crea el administrador y un vendedor iniciales si la tabla está vacía.
    Las contraseñas se pueden definir con INITIAL_ADMIN_PASSWORD e
    INITIAL_SELLER_PASSWORD.
    """
    if db.query(User).count() > 0:
        logger.info("Ya existen usuarios, no se crean usuarios iniciales.")
        return

    users_data = [
        {
            "name": "Administrador",
            "last_name": "Sistema",
            "username": "admin",
            "email": "admin@naviera.com",
            "password": os.getenv("INITIAL_ADMIN_PASSWORD", "admin123"),
            "role": UserRole.ADMIN,
        },
        {
            "name": "Vendedor",
            "last_name": "Principal",
            "username": "vendedor",
            "email": "vendedor@naviera.com",
            "password": os.getenv("INITIAL_SELLER_PASSWORD", "vendedor123"),
            "role": UserRole.SELLER,
        },
    ]

    for user in users_data:
        db_user = User(
            name=user["name"],
            last_name=user["last_name"],
            username=user["username"],
            email=user["email"],
            hashed_password=get_password_hash(user["password"]),
            role=user["role"],
            is_active=True,
        )
        db.add(db_user)
        logger.info(f"Usuario inicial creado: {user['username']} ({user['role'].value})")

    db.commit()


def create_initial_catalog(db: Session):
    """
    Crea puertos, rutas, embarcaciones y sus asignaciones de ejemplo si
    todavía no hay rutas cargadas.
    """
    if db.query(Route).count() > 0:
        logger.info("Ya existen rutas, no se crea el catálogo inicial.")
        return

    ports = [
        ("Puerto Principal - Malecón", "Puerto principal de la ciudad", "Malecón Tarapacá"),
        ("Embarcadero Bella Vista", "Embarcadero en zona Bellavista", "Av. La Marina - Bellavista"),
        ("Puerto Mercado", "Puerto cerca al mercado central", "Jr. Próspero"),
        ("Embarcadero Nuevo", "Puerto de reciente construcción", "Carretera Iquitos-Nauta"),
    ]
    for order, (name, description, address) in enumerate(ports, start=1):
        db.add(
            BoardingPort(
                name=name, description=description, address=address, order=order
            )
        )

    routes = {
        "Iquitos - Yurimaguas": Route(
            name="Iquitos - Yurimaguas",
            origin_port="Puerto de Iquitos",
            destination_port="Puerto de Yurimaguas",
            price=Decimal("45.00"),
        ),
        "Iquitos - Pucallpa": Route(
            name="Iquitos - Pucallpa",
            origin_port="Puerto de Iquitos",
            destination_port="Puerto de Pucallpa",
            price=Decimal("65.00"),
        ),
        "Yurimaguas - Tarapoto": Route(
            name="Yurimaguas - Tarapoto",
            origin_port="Puerto de Yurimaguas",
            destination_port="Puerto de Tarapoto",
            price=Decimal("25.00"),
        ),
    }
    vessels = {
        "Amazonas Express": Vessel(name="Amazonas Express", capacity=50, vessel_type="Ferry"),
        "Rio Veloz": Vessel(name="Rio Veloz", capacity=30, vessel_type="Lancha"),
        "Ucayali Navigator": Vessel(name="Ucayali Navigator", capacity=80, vessel_type="Ferry"),
    }
    db.add_all(list(routes.values()) + list(vessels.values()))
    db.flush()

    assignments = [
        ("Amazonas Express", "Iquitos - Yurimaguas", ["06:00", "14:00"],
         ["lunes", "miércoles", "viernes", "domingo"]),
        ("Rio Veloz", "Yurimaguas - Tarapoto", ["08:00", "15:00"],
         ["lunes", "martes", "miércoles", "jueves", "viernes"]),
        ("Ucayali Navigator", "Iquitos - Pucallpa", ["07:00"], ["sábado", "domingo"]),
    ]
    for vessel_name, route_name, departure_times, operating_days in assignments:
        db.add(
            VesselRoute(
                vessel_id=vessels[vessel_name].id,
                route_id=routes[route_name].id,
                departure_times=departure_times,
                operating_days=operating_days,
            )
        )

    db.commit()
    logger.info(
        f"Catálogo inicial creado: {len(ports)} puertos, {len(routes)} rutas, "
        f"{len(vessels)} embarcaciones"
    )
