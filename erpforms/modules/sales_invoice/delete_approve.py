from erpforms.core.approval import FormTransition

from .base import SalesInvoiceHandler


class DeleteFormApprove(SalesInvoiceHandler):
    """
    Approve a pending delete request.

    Voids the invoice postings, releases the referenced delivery note and
    deletes the invoice with its lines.
    """

    transition = FormTransition.APPROVE_CANCELLATION
