# app/models/surgical_case_sheet.py
import uuid
from datetime import datetime

from sqlalchemy import (
    JSON,
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


class SurgicalCaseSheet(Base):
    """
    Surgical case sheet for one operation.

    case_number is scoped to the owning patient:
    SCS<last 4 hex of patient id>-<per-patient sequence>.

    Investigation and on-examination findings are free-form lab/vitals strings
    kept as JSON objects (see schemas.surgical_case_sheet for the field list).
    """

    __tablename__ = "surgical_case_sheets"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )

    case_number: Mapped[str] = mapped_column(String(32), nullable=False, unique=True)

    patient_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("patients.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    # Patient particulars as written on the sheet
    patient_name: Mapped[str] = mapped_column(String(200), nullable=False)
    husband_father_name: Mapped[str | None] = mapped_column(String(200), nullable=True)
    religion: Mapped[str | None] = mapped_column(String(50), nullable=True)
    nationality: Mapped[str | None] = mapped_column(String(50), nullable=True)
    address: Mapped[str | None] = mapped_column(Text, nullable=True)
    village: Mapped[str | None] = mapped_column(String(100), nullable=True)
    district: Mapped[str | None] = mapped_column(String(100), nullable=True)
    age: Mapped[str | None] = mapped_column(String(20), nullable=True)
    sex: Mapped[str | None] = mapped_column(String(20), nullable=True)

    # Operation
    diagnosis: Mapped[str | None] = mapped_column(Text, nullable=True)
    nature_of_operation: Mapped[str | None] = mapped_column(Text, nullable=True)
    date_of_admission: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    date_of_operation: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    date_of_discharge: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    complaints_and_duration: Mapped[str | None] = mapped_column(Text, nullable=True)
    history_of_present_illness: Mapped[str | None] = mapped_column(Text, nullable=True)

    investigations: Mapped[dict | None] = mapped_column(JSON, nullable=True)
    examination: Mapped[dict | None] = mapped_column(JSON, nullable=True)

    # Obstetric cases
    lp_no: Mapped[str | None] = mapped_column(String(50), nullable=True)
    edd: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

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
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utc_now,
        server_default=text("CURRENT_TIMESTAMP"),
        onupdate=utc_now,
    )

    patient: Mapped["Patient"] = relationship("Patient")
