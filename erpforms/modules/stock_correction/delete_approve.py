from erpforms.core.approval import FormTransition

from .base import StockCorrectionHandler


class DeleteFormApprove(StockCorrectionHandler):
    """
    Approve a pending delete request.

    Marks the form cancellation approved, reverses any postings and deletes
    the stock correction with its lines. The form row is kept as the record
    of the cancelled document.
    """

    transition = FormTransition.APPROVE_CANCELLATION
