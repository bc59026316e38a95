import uuid
from datetime import datetime
from sqlalchemy import Column, String, DateTime, ForeignKey, Numeric, Uuid
from sqlalchemy.orm import relationship

from erpforms.db.base import Base
from erpforms.db.models.mixins import FormableMixin


class DeliveryNote(FormableMixin, Base):
    """Goods delivered to a customer; invoiced later by a sales invoice."""
    __tablename__ = "delivery_notes"
    __formable_type__ = "DeliveryNote"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    customer_id = Column(Uuid(as_uuid=True), ForeignKey("customers.id"), nullable=False, index=True)
    warehouse_id = Column(Uuid(as_uuid=True), ForeignKey("warehouses.id"), nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)

    customer = relationship("Customer")
    warehouse = relationship("Warehouse")
    items = relationship("DeliveryNoteItem", back_populates="delivery_note", cascade="all, delete-orphan")


class DeliveryNoteItem(Base):
    __tablename__ = "delivery_note_items"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    delivery_note_id = Column(
        Uuid(as_uuid=True), ForeignKey("delivery_notes.id", ondelete="CASCADE"), nullable=False, index=True
    )
    item_id = Column(Uuid(as_uuid=True), ForeignKey("items.id"), nullable=False)
    quantity = Column(Numeric(20, 4), nullable=False)
    unit = Column(String(50), nullable=True)
    price = Column(Numeric(20, 4), nullable=False, default=0)

    delivery_note = relationship("DeliveryNote", back_populates="items")
    item = relationship("Item")
