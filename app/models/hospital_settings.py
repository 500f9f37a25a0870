import uuid
from datetime import datetime

from sqlalchemy import (
    DateTime,
    String,
    Text,
    Uuid,
    text,
)
from sqlalchemy.orm import Mapped, mapped_column

from app.models.base import Base
from app.utils.datetime_utils import utc_now

# Singleton row id
HOSPITAL_SETTINGS_ID = uuid.UUID("00000000-0000-0000-0000-000000000001")


class HospitalSettings(Base):
    """
    Letterhead details printed on bills, case sheets and discharge summaries.
    """

    __tablename__ = "hospital_settings"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=lambda: HOSPITAL_SETTINGS_ID,
    )

    hospital_name: Mapped[str] = mapped_column(String(255), nullable=False)
    hospital_subtitle: Mapped[str | None] = mapped_column(String(255), nullable=True)
    address: Mapped[str | None] = mapped_column(Text, nullable=True)
    phone: Mapped[str | None] = mapped_column(String(50), nullable=True)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    accreditation: Mapped[str | None] = mapped_column(String(255), nullable=True)

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utc_now,
        server_default=text("CURRENT_TIMESTAMP"),
        onupdate=utc_now,
    )
