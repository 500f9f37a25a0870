from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from app.models.base import Base


class IdentifierCounter(Base):
    """
    Sequence source for human-readable identifiers.

    One row per scope, keyed by the identifier prefix, e.g. "PH-2025" for the
    2025 bill numbers or "SCS1A2B" for one patient's case sheets. `value` is the
    last sequence number handed out.
    """

    __tablename__ = "identifier_counters"

    key: Mapped[str] = mapped_column(String(64), primary_key=True)
    value: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
