from erpforms.core.approval import FormTransition

from .base import SalesInvoiceHandler


class DeleteFormRequest(SalesInvoiceHandler):
    """Request deletion of a sales invoice; see the stock correction counterpart for the payload."""

    transition = FormTransition.REQUEST_CANCELLATION
    actor_field = "maker"
