"""Key-value blob model backing the persistence gateway."""

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import String, LargeBinary, DateTime
from sqlalchemy.orm import Mapped, mapped_column

from formbuilder.database import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class KeyValueBlob(Base):
    """
    A single serialized value stored under a string key.

    The form store keeps the whole saved form collection in one row,
    replacing the blob atomically on every write.
    """

    __tablename__ = "kv_blobs"

    key: Mapped[str] = mapped_column(String(255), primary_key=True)
    value: Mapped[bytes] = mapped_column(LargeBinary, nullable=False)

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow)
    updated_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        onupdate=_utcnow,
        nullable=True
    )

    def __repr__(self) -> str:
        return f"<KeyValueBlob(key='{self.key}', size={len(self.value or b'')})>"
