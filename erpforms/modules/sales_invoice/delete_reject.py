from erpforms.core.approval import FormTransition

from .base import SalesInvoiceHandler


class DeleteFormReject(SalesInvoiceHandler):
    transition = FormTransition.REJECT_CANCELLATION
