"""Form workflow states and transitions.

State Machine Diagram (both sub-flows share the same shape):

    approval_status                  cancellation_status

    ┌──────────┐                     ┌──────────┐
    │  UNSET   │                     │  UNSET   │ ← never requested
    └────┬─────┘                     └────┬─────┘
         │ create                         │ request_cancellation
    ┌────▼─────┐                     ┌────▼─────┐
    │ PENDING  │                     │ PENDING  │
    └────┬─────┘                     └────┬─────┘
         │                                │
    ┌────┴──────┐                    ┌────┴──────┐
    │           │                    │           │
┌───▼────┐ ┌────▼───┐           ┌────▼───┐ ┌─────▼──┐
│APPROVED│ │REJECTED│           │APPROVED│ │REJECTED│
└────────┘ └────────┘           └────────┘ └────────┘

Persisted codes: NULL = UNSET, 0 = PENDING, 1 = APPROVED, 2 = REJECTED.
"""

from enum import Enum, IntEnum
from typing import Dict, Optional, NamedTuple, Union


class _FormStatus(IntEnum):
    """Shared status codes. ``UNSET`` is stored as NULL."""


class ApprovalStatus(_FormStatus):
    """Status of the form approval sub-flow."""

    UNSET = -1
    PENDING = 0
    APPROVED = 1
    REJECTED = 2


class CancellationStatus(_FormStatus):
    """Status of the form cancellation (delete request) sub-flow."""

    UNSET = -1
    PENDING = 0
    APPROVED = 1
    REJECTED = 2


FormStatus = Union[ApprovalStatus, CancellationStatus]


class RoutingField(str, Enum):
    """Form attribute holding the user allowed to resolve a transition."""

    REQUEST_APPROVAL_TO = "request_approval_to"
    REQUEST_CANCELLATION_TO = "request_cancellation_to"


class FormTransition(str, Enum):
    """Actions that trigger form status transitions."""

    REQUEST_APPROVAL = "request_approval"            # approval UNSET → PENDING
    APPROVE = "approve"                              # approval PENDING → APPROVED
    REJECT = "reject"                                # approval PENDING → REJECTED
    REQUEST_CANCELLATION = "request_cancellation"    # cancellation UNSET → PENDING
    APPROVE_CANCELLATION = "approve_cancellation"    # cancellation PENDING → APPROVED
    REJECT_CANCELLATION = "reject_cancellation"      # cancellation PENDING → REJECTED


class TransitionRule(NamedTuple):
    """Defines a valid status transition."""
    transition: FormTransition
    status_field: str
    from_state: FormStatus
    to_state: FormStatus
    routing_field: Optional[RoutingField] = None
    destructive: bool = False
    blocked_when_done: bool = False


TRANSITION_RULES: list[TransitionRule] = [
    TransitionRule(
        FormTransition.REQUEST_APPROVAL, "approval_status",
        ApprovalStatus.UNSET, ApprovalStatus.PENDING,
    ),
    TransitionRule(
        FormTransition.APPROVE, "approval_status",
        ApprovalStatus.PENDING, ApprovalStatus.APPROVED,
        RoutingField.REQUEST_APPROVAL_TO,
    ),
    TransitionRule(
        FormTransition.REJECT, "approval_status",
        ApprovalStatus.PENDING, ApprovalStatus.REJECTED,
        RoutingField.REQUEST_APPROVAL_TO,
    ),
    TransitionRule(
        FormTransition.REQUEST_CANCELLATION, "cancellation_status",
        CancellationStatus.UNSET, CancellationStatus.PENDING,
        blocked_when_done=True,
    ),
    TransitionRule(
        FormTransition.APPROVE_CANCELLATION, "cancellation_status",
        CancellationStatus.PENDING, CancellationStatus.APPROVED,
        RoutingField.REQUEST_CANCELLATION_TO,
        destructive=True,
        blocked_when_done=True,
    ),
    TransitionRule(
        FormTransition.REJECT_CANCELLATION, "cancellation_status",
        CancellationStatus.PENDING, CancellationStatus.REJECTED,
        RoutingField.REQUEST_CANCELLATION_TO,
    ),
]

TRANSITION_TARGETS: Dict[FormTransition, TransitionRule] = {
    rule.transition: rule for rule in TRANSITION_RULES
}


def get_transition_rule(transition: FormTransition) -> TransitionRule:
    """Get the rule for a transition."""
    return TRANSITION_TARGETS[transition]


def can_transition(current: FormStatus, transition: FormTransition) -> bool:
    """Check if a transition is valid from the given status."""
    return get_transition_rule(transition).from_state == current
