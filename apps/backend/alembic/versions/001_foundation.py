"""
============================================================
TARJETA CRC (Class / Responsibilities / Collaborators)
============================================================
Class: 001_foundation (Alembic Migration)

Responsibilities:
  - Crear el esquema completo de la tienda desde cero.
  - Tablas: users, products, transactions, orders, site_settings.
  - Colecciones anidadas (ítems, historiales, cliente, dirección) en JSONB.

Collaborators:
  - PostgreSQL 16+
  - Alembic (framework de migraciones)
  - infrastructure.repositories.postgres (usa este esquema como contrato)

Policy:
  - Esta es una migración BASELINE. Downgrade NO soportado.
  - Convención de nombres (constraints / indexes):
      pk_<tabla>                         - Primary keys
      uq_<tabla>_<col>                   - Unique constraints
      ix_<tabla>_<col>                   - Indexes
      fk_<tabla>_<col>__<ref_tabla>      - Foreign keys
============================================================
"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

revision: str = "001_foundation"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
    ]


def upgrade() -> None:
    """
    Crea el esquema fundacional.

    Orden:
      1) Identity (users)
      2) Catálogo (products)
      3) Ledger (transactions)
      4) Pedidos (orders)
      5) Configuración del sitio (site_settings)
    """

    # =========================================================
    # 1) IDENTITY (users)
    # =========================================================
    op.create_table(
        "users",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("email", sa.String(320), nullable=False),
        sa.Column("password_hash", sa.Text, nullable=False),
        sa.Column(
            "role",
            sa.String(20),
            nullable=False,
            server_default=sa.text("'user'"),
        ),
        sa.Column("name", sa.String(200), nullable=True),
        sa.Column("phone", sa.String(50), nullable=True),
        # {street, number, city, postalCode}
        sa.Column("address", postgresql.JSONB, nullable=True),
        # Solo el hash SHA-256 del token de recuperación.
        sa.Column("reset_token_hash", sa.String(64), nullable=True),
        sa.Column("reset_token_expires_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id", name="pk_users"),
        sa.UniqueConstraint("email", name="uq_users_email"),
        sa.CheckConstraint(
            "role IN ('user','admin','developer')",
            name="ck_users_role",
        ),
    )
    op.create_index("ix_users_reset_token_hash", "users", ["reset_token_hash"])
    op.create_index("ix_users_created_at", "users", ["created_at"])

    # =========================================================
    # 2) CATÁLOGO (products)
    # =========================================================
    op.create_table(
        "products",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("name", sa.String(300), nullable=False),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("price", sa.Numeric(12, 2), nullable=False),
        sa.Column("image", sa.Text, nullable=False),
        sa.Column("brand", sa.String(32), nullable=False),
        sa.Column(
            "category",
            sa.String(32),
            nullable=False,
            server_default=sa.text("'otros'"),
        ),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name="pk_products"),
        sa.CheckConstraint("price >= 0", name="ck_products_price_non_negative"),
    )
    op.create_index("ix_products_brand", "products", ["brand"])
    op.create_index("ix_products_created_at", "products", ["created_at"])

    # =========================================================
    # 3) LEDGER (transactions)
    # =========================================================
    op.create_table(
        "transactions",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("transaction_id", sa.String(200), nullable=False),
        sa.Column("payment_id", sa.String(200), nullable=True),
        # Sin FK: un webhook puede llegar sin usuario asociado.
        sa.Column("user_id", postgresql.UUID(as_uuid=True), nullable=True),
        # {email, name, phone}
        sa.Column(
            "customer",
            postgresql.JSONB,
            nullable=False,
            server_default=sa.text("'{}'::jsonb"),
        ),
        sa.Column(
            "items",
            postgresql.JSONB,
            nullable=False,
            server_default=sa.text("'[]'::jsonb"),
        ),
        sa.Column("amount", sa.Numeric(14, 2), nullable=False),
        sa.Column("status", sa.String(20), nullable=False),
        # status + status_history se actualizan en un único UPDATE.
        sa.Column(
            "status_history",
            postgresql.JSONB,
            nullable=False,
            server_default=sa.text("'[]'::jsonb"),
        ),
        sa.Column("payment_method", sa.String(64), nullable=True),
        sa.Column("payment_type", sa.String(64), nullable=True),
        sa.Column("notes", sa.Text, nullable=True),
        sa.Column("webhook_data", postgresql.JSONB, nullable=True),
        sa.Column("shipping_status", sa.String(20), nullable=True),
        sa.Column("tracking_number", sa.String(200), nullable=True),
        sa.Column(
            "shipping_history",
            postgresql.JSONB,
            nullable=False,
            server_default=sa.text("'[]'::jsonb"),
        ),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name="pk_transactions"),
        # Red de seguridad ante webhooks duplicados concurrentes.
        sa.UniqueConstraint("transaction_id", name="uq_transactions_transaction_id"),
        sa.CheckConstraint(
            "status IN ('pending','approved','rejected','cancelled','refunded','in_process')",
            name="ck_transactions_status",
        ),
    )
    op.create_index("ix_transactions_payment_id", "transactions", ["payment_id"])
    op.create_index("ix_transactions_user_id", "transactions", ["user_id"])
    op.create_index("ix_transactions_status", "transactions", ["status"])
    op.create_index("ix_transactions_created_at", "transactions", ["created_at"])
    # "Mis pedidos" también matchea por email del cliente.
    op.execute(
        "CREATE INDEX ix_transactions_customer_email "
        "ON transactions ((customer->>'email'))"
    )

    # =========================================================
    # 4) PEDIDOS (orders)
    # =========================================================
    op.create_table(
        "orders",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("user_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("user_email", sa.String(320), nullable=False),
        sa.Column("user_name", sa.String(200), nullable=False),
        sa.Column(
            "items",
            postgresql.JSONB,
            nullable=False,
            server_default=sa.text("'[]'::jsonb"),
        ),
        sa.Column("total", sa.Numeric(14, 2), nullable=False),
        sa.Column("status", sa.String(20), nullable=False),
        sa.Column(
            "status_history",
            postgresql.JSONB,
            nullable=False,
            server_default=sa.text("'[]'::jsonb"),
        ),
        sa.Column("payment_id", sa.String(200), nullable=False),
        sa.Column("payment_status", sa.String(32), nullable=False),
        sa.Column("payment_method", sa.String(64), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name="pk_orders"),
        sa.ForeignKeyConstraint(
            ["user_id"],
            ["users.id"],
            name="fk_orders_user_id__users",
        ),
    )
    op.create_index("ix_orders_status", "orders", ["status"])
    op.create_index("ix_orders_created_at", "orders", ["created_at"])

    # =========================================================
    # 5) CONFIGURACIÓN DEL SITIO (site_settings)
    # =========================================================
    op.create_table(
        "site_settings",
        sa.Column("key", sa.String(64), nullable=False),
        sa.Column("value", postgresql.JSONB, nullable=False),
        sa.Column("updated_by", postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("key", name="pk_site_settings"),
    )


def downgrade() -> None:
    raise NotImplementedError("Baseline migration: downgrade no soportado.")
