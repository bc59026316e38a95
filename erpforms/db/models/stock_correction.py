"""Stock correction models.

A stock correction adjusts the counted quantity of items in a warehouse;
each line carries a signed quantity delta.
"""

import uuid
from datetime import datetime
from sqlalchemy import Column, String, DateTime, ForeignKey, Text, Numeric, Uuid
from sqlalchemy.orm import relationship

from erpforms.db.base import Base
from erpforms.db.models.mixins import FormableMixin


class StockCorrection(FormableMixin, Base):
    __tablename__ = "stock_corrections"
    __formable_type__ = "StockCorrection"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    warehouse_id = Column(Uuid(as_uuid=True), ForeignKey("warehouses.id"), nullable=False, index=True)
    created_at = Column(DateTime, default=datetime.utcnow)

    warehouse = relationship("Warehouse")
    items = relationship(
        "StockCorrectionItem",
        back_populates="stock_correction",
        cascade="all, delete-orphan",
    )

    def __repr__(self) -> str:
        return f"<StockCorrection {self.id}>"


class StockCorrectionItem(Base):
    __tablename__ = "stock_correction_items"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    stock_correction_id = Column(
        Uuid(as_uuid=True), ForeignKey("stock_corrections.id", ondelete="CASCADE"), nullable=False, index=True
    )
    item_id = Column(Uuid(as_uuid=True), ForeignKey("items.id"), nullable=False)
    allocation_id = Column(Uuid(as_uuid=True), ForeignKey("allocations.id", ondelete="SET NULL"), nullable=True)
    quantity = Column(Numeric(20, 4), nullable=False)
    unit = Column(String(50), nullable=True)
    converter = Column(Numeric(20, 4), nullable=False, default=1)
    notes = Column(Text, nullable=True)

    stock_correction = relationship("StockCorrection", back_populates="items")
    item = relationship("Item")
    allocation = relationship("Allocation")
