from erpforms.core.approval import FormTransition

from .base import SalesInvoiceHandler


class FormReject(SalesInvoiceHandler):
    transition = FormTransition.REJECT
