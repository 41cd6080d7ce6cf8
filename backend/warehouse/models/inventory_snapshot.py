from datetime import datetime

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Integer, UniqueConstraint, func
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base


class InventorySnapshot(Base):
    """Per-product stock movement totals for one calendar month."""

    __tablename__ = "inventory_snapshots"
    __table_args__ = (
        UniqueConstraint(
            "product_id", "year", "month", name="uq_inventory_snapshots_product_id_year_month"
        ),
        CheckConstraint("month BETWEEN 1 AND 12", name="valid_month"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    product_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("products.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    year: Mapped[int] = mapped_column(Integer, nullable=False)
    month: Mapped[int] = mapped_column(Integer, nullable=False)
    opening_quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    stock_in_quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    stock_out_quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    closing_quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    computed_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
