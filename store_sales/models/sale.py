from datetime import datetime, timezone

from sqlalchemy import CheckConstraint, Column, Date, DateTime, Float, ForeignKey, Index, Integer, String
from sqlalchemy.orm import relationship

from store_sales.database.base import Base


class Sale(Base):
    __tablename__ = "sales"

    id = Column(Integer, primary_key=True)
    store_id = Column(Integer, ForeignKey("stores.id", ondelete="CASCADE"), nullable=False)

    item_name = Column(String, nullable=False)
    # always the first day of the month
    month = Column(Date, nullable=False)
    quantity = Column(Integer, nullable=False)
    price = Column(Float, nullable=False)

    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    store = relationship("Store", back_populates="sales")

    __table_args__ = (
        CheckConstraint("quantity > 0", name="ck_sales_quantity_positive"),
        CheckConstraint("price > 0", name="ck_sales_price_positive"),
        Index("idx_sales_store_month", "store_id", "month"),
        Index("idx_sales_month", "month"),
    )


__all__ = ["Sale"]
