# app/models/medicine.py
import uuid
from datetime import date, datetime
from decimal import Decimal

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
    UniqueConstraint,
    Uuid,
    text,
)
from sqlalchemy.orm import Mapped, mapped_column

from app.models.base import Base
from app.utils.datetime_utils import utc_now


class Medicine(Base):
    """
    One batch of a medicine in the pharmacy inventory.

    `quantity` is the on-hand count. It is only ever decremented through a
    conditional UPDATE (see services.medicine_service.decrement_stock) and the
    CHECK constraint keeps it from going negative even if a caller forgets.
    """

    __tablename__ = "medicines"
    __table_args__ = (
        UniqueConstraint("medicine_name", "batch_number", name="uq_medicines_name_batch"),
        CheckConstraint("quantity >= 0", name="ck_medicines_quantity_non_negative"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )

    medicine_name: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    batch_number: Mapped[str] = mapped_column(String(100), nullable=False)

    quantity: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
        server_default=text("0"),
    )
    units: Mapped[str] = mapped_column(
        String(50),
        nullable=False,
        default="tablets",
        doc="e.g., tablets, ml, bottle, vial, etc.",
    )
    mrp: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)

    manufacture_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    expiry_date: Mapped[date] = mapped_column(Date, nullable=False)
    manufacturer: Mapped[str | None] = mapped_column(String(255), nullable=True)
    category: Mapped[str] = mapped_column(String(50), nullable=False, default="tablets")
    description: Mapped[str | None] = mapped_column(Text, nullable=True)

    is_active: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=True,
        server_default=text("true"),
    )

    created_by: Mapped[uuid.UUID | None] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utc_now,
        server_default=text("CURRENT_TIMESTAMP"),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utc_now,
        server_default=text("CURRENT_TIMESTAMP"),
        onupdate=utc_now,
    )
