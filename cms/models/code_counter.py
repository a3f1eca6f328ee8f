from __future__ import annotations

from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from cms.db.base import Base


class CodeCounter(Base):
    """Last sequence number handed out per record collection. Only ever increases."""

    __tablename__ = "code_counters"

    collection: Mapped[str] = mapped_column(String(32), primary_key=True)
    last_value: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
