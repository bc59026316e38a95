from erpforms.core.approval import FormTransition

from .base import StockCorrectionHandler


class DeleteFormRequest(StockCorrectionHandler):
    """
    Request deletion of a stock correction.

    Payload:
        maker: user filing the request (the form creator or a super admin)
        stock_correction_id: target id
        reason: why the document should be deleted
        request_cancellation_to: approver id, defaults to the form's approver
    """

    transition = FormTransition.REQUEST_CANCELLATION
    actor_field = "maker"
