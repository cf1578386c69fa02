"""SQLAlchemy ORM models for the coffre ledger.

These map to existing tables created by Alembic migrations.
DO NOT add/remove columns here without a corresponding migration.
"""

from datetime import datetime
from decimal import Decimal

from sqlalchemy import BigInteger, DateTime, ForeignKey, Integer, Numeric, String, func
from sqlalchemy.orm import Mapped, mapped_column

from src.cf_common.database import Base


class CoffreORM(Base):
    __tablename__ = "coffres"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    name: Mapped[str] = mapped_column(String(128), nullable=False)
    description: Mapped[str | None] = mapped_column(String(500), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )


class CoffreMemberORM(Base):
    __tablename__ = "coffre_members"

    user_id: Mapped[str] = mapped_column(String(64), primary_key=True)
    coffre_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("coffres.id", ondelete="CASCADE"), primary_key=True
    )
    role: Mapped[str] = mapped_column(String(16), nullable=False, default="MEMBER")
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )


class MovementORM(Base):
    __tablename__ = "movements"

    id: Mapped[int] = mapped_column(BigInteger, primary_key=True)
    coffre_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("coffres.id", ondelete="CASCADE"), nullable=False
    )
    user_id: Mapped[str] = mapped_column(String(64), nullable=False)
    type: Mapped[str] = mapped_column(String(8), nullable=False)
    amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    description: Mapped[str | None] = mapped_column(String(500), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
    # Soft delete only: a non-NULL deleted_at removes the row from every balance
    deleted_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)


class MovementDetailORM(Base):
    __tablename__ = "movement_details"

    movement_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("movements.id", ondelete="CASCADE"), primary_key=True
    )
    denomination_cents: Mapped[int] = mapped_column(Integer, primary_key=True)
    quantity: Mapped[int] = mapped_column(Integer, nullable=False)


class InventoryORM(Base):
    __tablename__ = "inventories"

    id: Mapped[int] = mapped_column(BigInteger, primary_key=True)
    # BIGSERIAL: breaks created_at ties when picking the latest inventory
    seq: Mapped[int] = mapped_column(BigInteger, nullable=False, unique=True)
    coffre_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("coffres.id", ondelete="CASCADE"), nullable=False
    )
    user_id: Mapped[str] = mapped_column(String(64), nullable=False)
    total_amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    notes: Mapped[str | None] = mapped_column(String(500), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
    # NOTE: No updated_at / deleted_at; inventories are append-only snapshots


class InventoryDetailORM(Base):
    __tablename__ = "inventory_details"

    inventory_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("inventories.id", ondelete="CASCADE"), primary_key=True
    )
    denomination_cents: Mapped[int] = mapped_column(Integer, primary_key=True)
    quantity: Mapped[int] = mapped_column(Integer, nullable=False)
