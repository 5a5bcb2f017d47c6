"""Create initial tables

Revision ID: 5b1e7c2d9a40
Revises:
Create Date: 2026-10-18 10:12:04.215377

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "5b1e7c2d9a40"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

ENUM_NAMES = [
    "vesselstatus",
    "userrole",
    "operatorstatus",
    "paymenttype",
    "salestatus",
    "cancellationtype",
    "boardingstatus",
    "boardingrecordtype",
]


def upgrade() -> None:
    """Upgrade schema."""
    # Embarcaciones primero: users.assigned_vessel_id apunta a vessels
    op.create_table(
        "vessels",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("capacity", sa.Integer(), nullable=False),
        sa.Column(
            "status",
            sa.Enum("ACTIVA", "MANTENIMIENTO", "INACTIVA", name="vesselstatus"),
            nullable=False,
        ),
        sa.Column("vessel_type", sa.String(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=True),
        sa.Column("updated_at", sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("name"),
    )
    op.create_index(op.f("ix_vessels_id"), "vessels", ["id"], unique=False)

    op.create_table(
        "routes",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("origin_port", sa.String(), nullable=False),
        sa.Column("destination_port", sa.String(), nullable=False),
        sa.Column("price", sa.Numeric(10, 2), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=True),
        sa.Column("updated_at", sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("name"),
    )
    op.create_index(op.f("ix_routes_id"), "routes", ["id"], unique=False)

    op.create_table(
        "vessel_routes",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("vessel_id", sa.Integer(), nullable=False),
        sa.Column("route_id", sa.Integer(), nullable=False),
        sa.Column("departure_times", sa.JSON(), nullable=False),
        sa.Column("operating_days", sa.JSON(), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=True),
        sa.Column("updated_at", sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(["vessel_id"], ["vessels.id"]),
        sa.ForeignKeyConstraint(["route_id"], ["routes.id"]),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("vessel_id", "route_id", name="uq_vessel_route"),
    )
    op.create_index(op.f("ix_vessel_routes_id"), "vessel_routes", ["id"], unique=False)

    op.create_table(
        "boarding_ports",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("description", sa.String(), nullable=True),
        sa.Column("address", sa.String(), nullable=True),
        sa.Column("order", sa.Integer(), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("name"),
    )
    op.create_index(
        op.f("ix_boarding_ports_id"), "boarding_ports", ["id"], unique=False
    )

    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("last_name", sa.String(), nullable=False),
        sa.Column("username", sa.String(), nullable=False),
        sa.Column("email", sa.String(), nullable=False),
        sa.Column("hashed_password", sa.String(), nullable=True),
        sa.Column(
            "role",
            sa.Enum(
                "ADMINISTRADOR", "VENDEDOR", "OPERADOR_EMBARCACION", name="userrole"
            ),
            nullable=False,
        ),
        sa.Column("is_active", sa.Boolean(), nullable=True),
        sa.Column(
            "operator_status",
            sa.Enum("ACTIVO", "INACTIVO", name="operatorstatus"),
            nullable=True,
        ),
        sa.Column("assigned_vessel_id", sa.Integer(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=True),
        sa.Column("updated_at", sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(["assigned_vessel_id"], ["vessels.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_users_id"), "users", ["id"], unique=False)
    op.create_index(op.f("ix_users_username"), "users", ["username"], unique=True)
    op.create_index(op.f("ix_users_email"), "users", ["email"], unique=True)

    op.create_table(
        "clients",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("document_number", sa.String(), nullable=False),
        sa.Column("first_name", sa.String(), nullable=False),
        sa.Column("last_name", sa.String(), nullable=False),
        sa.Column("phone", sa.String(), nullable=True),
        sa.Column("email", sa.String(), nullable=True),
        sa.Column("nationality", sa.String(), nullable=True),
        sa.Column("address", sa.String(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=True),
        sa.Column("updated_at", sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_clients_id"), "clients", ["id"], unique=False)
    op.create_index(
        op.f("ix_clients_document_number"), "clients", ["document_number"], unique=True
    )

    op.create_table(
        "sales",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("sale_number", sa.String(), nullable=False),
        sa.Column("client_id", sa.Integer(), nullable=False),
        sa.Column("route_id", sa.Integer(), nullable=False),
        sa.Column("vessel_id", sa.Integer(), nullable=False),
        sa.Column("seller_id", sa.Integer(), nullable=False),
        sa.Column("boarding_port_id", sa.Integer(), nullable=True),
        sa.Column("travel_date", sa.Date(), nullable=False),
        sa.Column("boarding_time", sa.String(), nullable=False),
        sa.Column("departure_time", sa.String(), nullable=False),
        sa.Column("passenger_count", sa.Integer(), nullable=False),
        sa.Column("origin_port", sa.String(), nullable=False),
        sa.Column("destination_port", sa.String(), nullable=False),
        sa.Column("unit_price", sa.Numeric(10, 2), nullable=False),
        sa.Column("subtotal", sa.Numeric(10, 2), nullable=False),
        sa.Column("taxes", sa.Numeric(10, 2), nullable=False),
        sa.Column("total", sa.Numeric(10, 2), nullable=False),
        sa.Column(
            "payment_type",
            sa.Enum("UNICO", "HIBRIDO", name="paymenttype"),
            nullable=False,
        ),
        sa.Column("payment_method", sa.String(), nullable=True),
        sa.Column("payment_methods", sa.JSON(), nullable=True),
        sa.Column(
            "status",
            sa.Enum("CONFIRMADA", "ANULADA", "REEMBOLSADA", name="salestatus"),
            nullable=False,
        ),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("sold_at", sa.DateTime(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=True),
        sa.Column("updated_at", sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(["client_id"], ["clients.id"]),
        sa.ForeignKeyConstraint(["route_id"], ["routes.id"]),
        sa.ForeignKeyConstraint(["vessel_id"], ["vessels.id"]),
        sa.ForeignKeyConstraint(["seller_id"], ["users.id"]),
        sa.ForeignKeyConstraint(["boarding_port_id"], ["boarding_ports.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_sales_id"), "sales", ["id"], unique=False)
    op.create_index(op.f("ix_sales_sale_number"), "sales", ["sale_number"], unique=True)
    op.create_index(op.f("ix_sales_sold_at"), "sales", ["sold_at"], unique=False)
    # Consulta de disponibilidad por viaje
    op.create_index(
        "ix_sales_trip",
        "sales",
        ["vessel_id", "route_id", "travel_date", "departure_time"],
        unique=False,
    )

    op.create_table(
        "cancellations",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("sale_id", sa.Integer(), nullable=False),
        sa.Column("reason", sa.String(), nullable=False),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("seats_released", sa.Integer(), nullable=False),
        sa.Column("refund_amount", sa.Numeric(10, 2), nullable=True),
        sa.Column(
            "cancellation_type",
            sa.Enum("ANULACION", "REEMBOLSO", name="cancellationtype"),
            nullable=False,
        ),
        sa.Column("cancelled_at", sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(["sale_id"], ["sales.id"]),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"]),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("sale_id"),
    )
    op.create_index(op.f("ix_cancellations_id"), "cancellations", ["id"], unique=False)
    op.create_index(
        op.f("ix_cancellations_cancelled_at"),
        "cancellations",
        ["cancelled_at"],
        unique=False,
    )

    op.create_table(
        "boarding_controls",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("sale_id", sa.Integer(), nullable=False),
        sa.Column("operator_id", sa.Integer(), nullable=False),
        sa.Column("vessel_id", sa.Integer(), nullable=False),
        sa.Column("route_id", sa.Integer(), nullable=False),
        sa.Column("travel_date", sa.Date(), nullable=False),
        sa.Column("departure_time", sa.String(), nullable=False),
        sa.Column(
            "boarding_status",
            sa.Enum("PENDIENTE", "EMBARCADO", "NO_EMBARCADO", name="boardingstatus"),
            nullable=False,
        ),
        sa.Column(
            "record_type",
            sa.Enum("EMBARQUE", "DESEMBARQUE", name="boardingrecordtype"),
            nullable=False,
        ),
        sa.Column("registered_at", sa.DateTime(), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=True),
        sa.Column("updated_at", sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(["sale_id"], ["sales.id"]),
        sa.ForeignKeyConstraint(["operator_id"], ["users.id"]),
        sa.ForeignKeyConstraint(["vessel_id"], ["vessels.id"]),
        sa.ForeignKeyConstraint(["route_id"], ["routes.id"]),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("sale_id"),
    )
    op.create_index(
        op.f("ix_boarding_controls_id"), "boarding_controls", ["id"], unique=False
    )


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_table("boarding_controls")
    op.drop_table("cancellations")
    op.drop_table("sales")
    op.drop_table("clients")
    op.drop_table("users")
    op.drop_table("boarding_ports")
    op.drop_table("vessel_routes")
    op.drop_table("routes")
    op.drop_table("vessels")

    bind = op.get_bind()
    for name in ENUM_NAMES:
        sa.Enum(name=name).drop(bind, checkfirst=True)
