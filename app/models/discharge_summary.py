import uuid
from datetime import datetime

from sqlalchemy import (
    DateTime,
    ForeignKey,
    String,
    Text,
    Uuid,
    text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.models.base import Base
from app.models.patient import Patient
from app.utils.datetime_utils import utc_now


class DischargeSummary(Base):
    __tablename__ = "discharge_summaries"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )

    patient_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("patients.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    primary_diagnosis: Mapped[str] = mapped_column(Text, nullable=False)
    secondary_diagnosis: Mapped[str | None] = mapped_column(Text, nullable=True)
    treatment_summary: Mapped[str] = mapped_column(Text, nullable=False)
    medications: Mapped[str | None] = mapped_column(Text, nullable=True)
    followup_instructions: Mapped[str | None] = mapped_column(Text, nullable=True)

    admission_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    discharge_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    attending_physician: Mapped[str] = mapped_column(String(200), nullable=False)

    created_by: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("users.id"),
        nullable=False,
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utc_now,
        server_default=text("CURRENT_TIMESTAMP"),
    )

    patient: Mapped["Patient"] = relationship("Patient")
