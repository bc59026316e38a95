"""Transition guard.

Pure decision logic over a form's status fields. The guard never mutates the
form; ``check`` raises the error a handler surfaces to its caller.
"""

from typing import NamedTuple, Optional

from erpforms.core.errors import InvalidStateError

from .states import (
    ApprovalStatus,
    CancellationStatus,
    FormTransition,
    TransitionRule,
    can_transition,
    get_transition_rule,
)


class GuardDecision(NamedTuple):
    """Outcome of evaluating a transition against a form."""
    allowed: bool
    rule: TransitionRule
    reason: Optional[str] = None


class TransitionGuard:
    """
    Decides whether a form may take a transition.

    Checks run in two stages so handlers can authorize the actor in between:
    the status check first, then the finalization checks (pending
    cancellation, ``done``). Failure messages are phrased with the aggregate
    label, e.g. ``"Stock correction is not requested to be delete"``.
    """

    def __init__(self, label: str):
        """
        Args:
            label: Capitalized aggregate label ("Stock correction", "Sales invoice")
        """
        self.label = label

    def evaluate(self, form, transition: FormTransition) -> GuardDecision:
        """Evaluate every check without raising."""
        rule = get_transition_rule(transition)
        reason = self.state_reason(form, rule) or self.finalization_reason(form, rule)
        return GuardDecision(allowed=reason is None, rule=rule, reason=reason)

    def state_reason(self, form, rule: TransitionRule) -> Optional[str]:
        """Reason the current status forbids the transition, if any."""
        current = getattr(form, rule.status_field)
        if can_transition(current, rule.transition):
            return None

        transition = rule.transition
        if transition in (FormTransition.APPROVE_CANCELLATION, FormTransition.REJECT_CANCELLATION):
            # Never requested and already resolved share one message
            return f"{self.label} is not requested to be delete"
        if transition == FormTransition.REQUEST_CANCELLATION:
            return f"{self.label} is already requested to be delete"
        if current == ApprovalStatus.APPROVED:
            return f"{self.label} is already approved"
        if current == ApprovalStatus.REJECTED:
            return f"{self.label} is already rejected"
        if transition == FormTransition.REQUEST_APPROVAL:
            return f"{self.label} is already requested to be approve"
        return f"{self.label} is not requested to be approve"

    def finalization_reason(self, form, rule: TransitionRule) -> Optional[str]:
        """Reason a finalized or cancelling form forbids the transition, if any."""
        if rule.transition in (FormTransition.APPROVE, FormTransition.REJECT) \
                and form.cancellation_status == CancellationStatus.PENDING:
            return f"Can not {rule.transition.value} {self.label.lower()} requested to be delete"
        if rule.blocked_when_done and form.done:
            return f"Can not delete already referenced {self.label.lower()}"
        return None

    def check_state(self, form, transition: FormTransition) -> TransitionRule:
        """
        Validate the form status only.

        Raises:
            InvalidStateError: If the status does not allow the transition
        """
        rule = get_transition_rule(transition)
        reason = self.state_reason(form, rule)
        if reason:
            raise InvalidStateError(reason)
        return rule

    def check(self, form, transition: FormTransition) -> TransitionRule:
        """
        Validate a transition.

        Returns:
            The transition rule to apply

        Raises:
            InvalidStateError: If the form is not in a state that allows the transition
        """
        decision = self.evaluate(form, transition)
        if not decision.allowed:
            raise InvalidStateError(decision.reason)
        return decision.rule
