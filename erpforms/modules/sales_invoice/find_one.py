from sqlalchemy.orm import Session, joinedload, selectinload

from erpforms.core.errors import NotFoundError
from erpforms.db.models import Form, SalesInvoice, SalesInvoiceItem
from erpforms.services.formable import load_formable
from erpforms.services.handler import coerce_id

from .base import LABEL


class FindOne:
    """
    Load a sales invoice for display.

    Includes its lines with allocations, its form with the creator and both
    routing users, and its customer. The transaction the invoice was created
    from is attached as ``sales_invoice.referenceable`` (not persisted).
    """

    def __init__(self, db: Session, sales_invoice_id):
        self.db = db
        self.sales_invoice_id = sales_invoice_id

    def call(self) -> SalesInvoice:
        sales_invoice_id = coerce_id(self.sales_invoice_id)
        sales_invoice = None
        if sales_invoice_id is not None:
            sales_invoice = self.db.query(SalesInvoice).options(
                selectinload(SalesInvoice.items).joinedload(SalesInvoiceItem.allocation),
                joinedload(SalesInvoice.form).joinedload(Form.request_approval_to_user),
                joinedload(SalesInvoice.form).joinedload(Form.request_cancellation_to_user),
                joinedload(SalesInvoice.form).joinedload(Form.created_by_user),
                joinedload(SalesInvoice.customer),
            ).filter(SalesInvoice.id == sales_invoice_id).first()
        if sales_invoice is None:
            raise NotFoundError(f"{LABEL} is not exist")

        referenceable = None
        if sales_invoice.referenceable_type:
            reference = load_formable(self.db, sales_invoice.referenceable_type, sales_invoice.referenceable_id)
            referenceable = reference.aggregate if reference else None
        sales_invoice.referenceable = referenceable

        return sales_invoice
