from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Integer, String
from sqlalchemy.orm import relationship

from store_sales.database.base import Base


class Store(Base):
    __tablename__ = "stores"

    id = Column(Integer, primary_key=True)
    name = Column(String, nullable=False)
    location = Column(String, nullable=False)

    manager = Column(String)
    phone = Column(String)
    email = Column(String)

    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    sales = relationship(
        "Sale",
        back_populates="store",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )


__all__ = ["Store"]
