from erpforms.core.approval import FormTransition

from .base import SalesInvoiceHandler


class FormApprove(SalesInvoiceHandler):
    """Approve a sales invoice, posting its receivable, revenue and cost of sales."""

    transition = FormTransition.APPROVE
