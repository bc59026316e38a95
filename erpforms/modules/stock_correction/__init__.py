"""Stock correction use cases."""

from . import effects  # noqa: F401  registers side effects
from .base import LABEL, FEATURE
from .create import CreateFormRequest
from .approve import FormApprove
from .reject import FormReject
from .delete_request import DeleteFormRequest
from .delete_approve import DeleteFormApprove
from .delete_reject import DeleteFormReject
from .find_one import FindOne


__all__ = [
    "CreateFormRequest",
    "FormApprove",
    "FormReject",
    "DeleteFormRequest",
    "DeleteFormApprove",
    "DeleteFormReject",
    "FindOne",
]
