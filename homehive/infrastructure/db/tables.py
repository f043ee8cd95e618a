from sqlalchemy import (
    JSON,
    Column,
    Date,
    DateTime,
    Index,
    Integer,
    MetaData,
    Numeric,
    String,
    Table,
    UniqueConstraint,
)

metadata = MetaData()

reservations = Table(
    "reservations",
    metadata,
    Column("id", String(64), primary_key=True),
    Column("property_id", String(64), nullable=False),
    Column("host_id", String(64), nullable=False, index=True),
    Column("user_id", String(64), nullable=False, index=True),
    Column("check_in", Date, nullable=False),
    Column("check_out", Date, nullable=False),
    Column("guests", Integer, nullable=False),
    Column("total_amount", Numeric(12, 2), nullable=False),
    Column("currency_code", String(3), nullable=False),
    Column("status", String(32), nullable=False),
    Column("payment_status", String(32), nullable=False),
    Column("payment_intent_id", String(128), unique=True),
    Column("lock_version", Integer, nullable=False, default=0),
    Column("created_at", DateTime(timezone=True)),
    Column("updated_at", DateTime(timezone=True)),
    Column("confirmed_at", DateTime(timezone=True)),
    Index("ix_reservations_property_dates", "property_id", "check_in", "check_out"),
)

properties = Table(
    "properties",
    metadata,
    Column("id", String(64), primary_key=True),
    Column("host_id", String(64), nullable=False),
    Column("capacity", Integer, nullable=False, default=1),
)

# One row per property; updating it holds the row lock until commit and
# serializes check-then-write sequences for that property.
property_locks = Table(
    "property_locks",
    metadata,
    Column("property_id", String(64), primary_key=True),
    Column("version", Integer, nullable=False, default=0),
)

idempotency_keys = Table(
    "idempotency_keys",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("scope", String(32), nullable=False),
    Column("idem_key", String(128), nullable=False),
    Column("request_hash", String(64), nullable=False),
    Column("result", JSON, nullable=False),
    Column("reservation_id", String(64)),
    UniqueConstraint("scope", "idem_key", name="uq_idempotency_scope_key"),
)
