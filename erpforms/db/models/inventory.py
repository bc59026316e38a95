import uuid
from datetime import datetime
from sqlalchemy import Column, String, DateTime, ForeignKey, Numeric, Uuid
from sqlalchemy.orm import relationship

from erpforms.db.base import Base


class Inventory(Base):
    """Stock movement of one item in one warehouse, posted by a form."""
    __tablename__ = "inventories"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    form_id = Column(Uuid(as_uuid=True), ForeignKey("forms.id", ondelete="CASCADE"), nullable=False, index=True)
    warehouse_id = Column(Uuid(as_uuid=True), ForeignKey("warehouses.id"), nullable=False, index=True)
    item_id = Column(Uuid(as_uuid=True), ForeignKey("items.id"), nullable=False, index=True)
    quantity = Column(Numeric(20, 4), nullable=False)  # positive in, negative out
    unit = Column(String(50), nullable=True)
    converter = Column(Numeric(20, 4), nullable=False, default=1)
    price = Column(Numeric(20, 4), nullable=False, default=0)
    created_at = Column(DateTime, default=datetime.utcnow)

    form = relationship("Form")
    warehouse = relationship("Warehouse")
    item = relationship("Item")
