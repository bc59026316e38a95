"""Sales invoice models."""

import uuid
from datetime import datetime
from decimal import Decimal
from sqlalchemy import Column, String, DateTime, ForeignKey, Text, Numeric, Boolean, Uuid
from sqlalchemy.orm import relationship

from erpforms.db.base import Base
from erpforms.db.models.mixins import FormableMixin


class SalesInvoice(FormableMixin, Base):
    """
    Invoice billed to a customer.

    ``referenceable_type``/``referenceable_id`` point at the transaction the
    invoice was created from (a delivery note), if any.
    """
    __tablename__ = "sales_invoices"
    __formable_type__ = "SalesInvoice"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    customer_id = Column(Uuid(as_uuid=True), ForeignKey("customers.id"), nullable=False, index=True)
    customer_name = Column(String(255), nullable=True)
    warehouse_id = Column(Uuid(as_uuid=True), ForeignKey("warehouses.id"), nullable=True)
    referenceable_type = Column(String(100), nullable=True)
    referenceable_id = Column(Uuid(as_uuid=True), nullable=True, index=True)
    due_date = Column(DateTime, nullable=True)
    discount_percent = Column(Numeric(20, 4), nullable=False, default=0)
    discount_value = Column(Numeric(20, 4), nullable=False, default=0)
    type_of_tax = Column(String(20), nullable=False, default="exclude")  # include / exclude / non
    tax_base = Column(Numeric(20, 4), nullable=False, default=0)
    tax = Column(Numeric(20, 4), nullable=False, default=0)
    amount = Column(Numeric(20, 4), nullable=False, default=0)
    created_at = Column(DateTime, default=datetime.utcnow)

    customer = relationship("Customer")
    warehouse = relationship("Warehouse")
    items = relationship(
        "SalesInvoiceItem",
        back_populates="sales_invoice",
        cascade="all, delete-orphan",
    )

    def __repr__(self) -> str:
        return f"<SalesInvoice {self.id} {self.amount}>"


class SalesInvoiceItem(Base):
    __tablename__ = "sales_invoice_items"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    sales_invoice_id = Column(
        Uuid(as_uuid=True), ForeignKey("sales_invoices.id", ondelete="CASCADE"), nullable=False, index=True
    )
    item_id = Column(Uuid(as_uuid=True), ForeignKey("items.id"), nullable=False)
    allocation_id = Column(Uuid(as_uuid=True), ForeignKey("allocations.id", ondelete="SET NULL"), nullable=True)
    item_name = Column(String(255), nullable=True)
    quantity = Column(Numeric(20, 4), nullable=False)
    unit = Column(String(50), nullable=True)
    converter = Column(Numeric(20, 4), nullable=False, default=1)
    price = Column(Numeric(20, 4), nullable=False)
    discount_percent = Column(Numeric(20, 4), nullable=False, default=0)
    discount_value = Column(Numeric(20, 4), nullable=False, default=0)
    taxable = Column(Boolean, nullable=False, default=True)
    notes = Column(Text, nullable=True)

    sales_invoice = relationship("SalesInvoice", back_populates="items")
    item = relationship("Item")
    allocation = relationship("Allocation")

    @property
    def total(self) -> Decimal:
        """Line value after discount."""
        return (Decimal(self.quantity) * (Decimal(self.price) - Decimal(self.discount_value or 0)))
