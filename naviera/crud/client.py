from sqlalchemy.orm import Session
from typing import Optional
import logging

from naviera.models.client import Client
from naviera.models.sale import Sale
from naviera.schemas.client import ClientData

logger = logging.getLogger(__name__)

DEFAULT_NATIONALITY = "Peruana"


def get_client_by_document(db: Session, document_number: str) -> Optional[Client]:
    return db.query(Client).filter(Client.document_number == document_number).first()


def get_recent_sales(db: Session, client_id: int, limit: int = 5):
    return (
        db.query(Sale)
        .filter(Sale.client_id == client_id)
        .order_by(Sale.sold_at.desc())
        .limit(limit)
        .all()
    )


def find_or_create_client(
    db: Session, client_data: ClientData, commit: bool = True
) -> Client:
    """
    Busca el cliente por DNI. Si no existe lo crea; si existe y llegan
    teléfono o email, actualiza sus datos de contacto y nombres.
    """
    client = get_client_by_document(db, client_data.document_number)

    if not client:
        client = Client(
            document_number=client_data.document_number,
            first_name=client_data.first_name,
            last_name=client_data.last_name,
            phone=client_data.phone or "",
            email=client_data.email or "",
            nationality=client_data.nationality or DEFAULT_NATIONALITY,
        )
        db.add(client)
        logger.info(f"Cliente creado: DNI {client_data.document_number}")
    elif client_data.phone or client_data.email:
        client.phone = client_data.phone or client.phone
        client.email = client_data.email or client.email
        client.first_name = client_data.first_name
        client.last_name = client_data.last_name

    if commit:
        db.commit()
        db.refresh(client)
    else:
        db.flush()
    return client
