from sqlalchemy.orm import Session, joinedload
from typing import List, Optional

from naviera.models.route import Route
from naviera.models.vessel import Vessel, VesselRoute
from naviera.enums.vessel_status import VesselStatus


def get_route(db: Session, route_id: int) -> Optional[Route]:
    return db.query(Route).filter(Route.id == route_id).first()


def get_active_routes(db: Session) -> List[Route]:
    """Rutas activas con sus asignaciones de embarcación activas."""
    return (
        db.query(Route)
        .options(
            joinedload(
                Route.vessel_routes.and_(VesselRoute.is_active == True)
            ).joinedload(VesselRoute.vessel)
        )
        .filter(
            Route.is_active == True,
            Route.vessel_routes.any(VesselRoute.is_active == True),
        )
        .order_by(Route.name)
        .populate_existing()
        .all()
    )


def get_route_vessels(db: Session, route_id: int) -> List[VesselRoute]:
    """Asignaciones activas de la ruta cuya embarcación está ACTIVA."""
    return (
        db.query(VesselRoute)
        .join(Vessel, VesselRoute.vessel_id == Vessel.id)
        .options(joinedload(VesselRoute.vessel))
        .filter(
            VesselRoute.route_id == route_id,
            VesselRoute.is_active == True,
            Vessel.status == VesselStatus.ACTIVE,
        )
        .order_by(Vessel.name)
        .all()
    )
