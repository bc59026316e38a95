"""Approval and cancellation workflow for forms.

Implements the form status state machine, approver resolution and the
transition guard shared by every business transaction handler.
"""

from .states import (
    ApprovalStatus,
    CancellationStatus,
    FormTransition,
    RoutingField,
    TransitionRule,
    get_transition_rule,
)
from .authorization import Actor, resolve
from .guard import TransitionGuard, GuardDecision

__all__ = [
    "ApprovalStatus",
    "CancellationStatus",
    "FormTransition",
    "RoutingField",
    "TransitionRule",
    "get_transition_rule",
    "Actor",
    "resolve",
    "TransitionGuard",
    "GuardDecision",
]
