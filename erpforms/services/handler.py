"""Base class for form transition use cases.

A handler is constructed with a database session and the use-case payload,
then ``call()`` runs load, authorize, guard, mutate and side effects as one
unit of work.
"""

import logging
from datetime import datetime
from typing import Any, Dict, Optional
from uuid import UUID

from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from erpforms.core.approval import (
    Actor,
    FormTransition,
    TransitionGuard,
    TransitionRule,
    get_transition_rule,
    resolve,
)
from erpforms.core.errors import ConcurrencyConflictError, ForbiddenError, NotFoundError
from erpforms.db.models import FormHistory
from erpforms.db.session import unit_of_work

from .formable import FormableKind, load_form_for_update, model_for
from .side_effects import dispatcher as default_dispatcher

logger = logging.getLogger(__name__)


def coerce_id(value) -> Optional[UUID]:
    """Parse an aggregate id; malformed ids resolve to None."""
    if isinstance(value, UUID):
        return value
    try:
        return UUID(str(value))
    except (TypeError, ValueError):
        return None


class FormTransitionHandler:
    """
    Runs one status transition of an aggregate's form.

    Subclasses set:
        kind: aggregate kind the handler operates on
        label: capitalized aggregate label used in messages
        transition: the transition performed
        id_field: payload key holding the aggregate id
        actor_field: payload key holding the acting user

    Usage:
        DeleteFormApprove(db, approver=user, stock_correction_id=sc.id).call()
    """

    kind: FormableKind
    label: str
    transition: FormTransition
    id_field: str
    actor_field: str = "approver"

    def __init__(self, db: Session, **payload: Any):
        self.db = db
        self.actor = Actor.from_user(payload.pop(self.actor_field))
        self.aggregate_id = payload.pop(self.id_field, None)
        self.payload: Dict[str, Any] = payload
        self.guard = TransitionGuard(self.label)
        self.dispatcher = payload.pop("dispatcher", default_dispatcher)
        self.form = None

    @property
    def not_found_message(self) -> str:
        return f"{self.label} is not exist"

    def call(self):
        """
        Perform the transition.

        Returns:
            The aggregate after the transition (as it stood before deletion
            for destructive transitions)

        Raises:
            NotFoundError: If the aggregate or its form does not exist
            ForbiddenError: If the actor may not perform the transition
            InvalidStateError: If the form status does not allow it
            ConfigurationMissingError: If a side effect lacks a journal mapping
            ConcurrencyConflictError: If the form changed concurrently
        """
        rule = get_transition_rule(self.transition)
        try:
            with unit_of_work(self.db):
                aggregate, form = self.load()
                self.form = form
                from_status = getattr(form, rule.status_field)

                self.guard.check_state(form, self.transition)
                self.authorize(form, rule)
                self.guard.check(form, self.transition)

                self.apply(form, rule)
                self.record_history(form, rule, from_status)
                self.dispatcher.dispatch(self.kind, self.transition, self.db, aggregate, form, self.actor)
                self.finish(aggregate, form, rule)
                self.db.flush()
        except StaleDataError as e:
            raise ConcurrencyConflictError() from e

        logger.info(
            f"{form.number} {self.transition.value} by {self.actor.id} "
            f"({rule.status_field}: {from_status.name} -> {rule.to_state.name})"
        )
        return aggregate

    def load(self):
        """Load the aggregate and lock its form row."""
        aggregate_id = coerce_id(self.aggregate_id)
        aggregate = self.db.get(model_for(self.kind), aggregate_id) if aggregate_id else None
        if aggregate is None:
            raise NotFoundError(self.not_found_message)
        form = load_form_for_update(self.db, self.kind, aggregate.id)
        if form is None:
            raise NotFoundError(self.not_found_message)
        return aggregate, form

    def authorize(self, form, rule: TransitionRule) -> None:
        """Require the actor to be the approver selected on the rule's routing field.

        Delete requests have no approver yet; only the form maker or a super
        admin may file one.
        """
        if rule.routing_field is None:
            if rule.transition == FormTransition.REQUEST_CANCELLATION \
                    and not self.actor.is_super_admin and form.created_by != self.actor.id:
                raise ForbiddenError("Forbidden - Only maker can request delete")
            return
        if not resolve(self.actor, form, rule.routing_field):
            logger.warning(
                f"{self.actor.id} is not the selected approver of {form.number} "
                f"for {self.transition.value}"
            )
            raise ForbiddenError()

    def apply(self, form, rule: TransitionRule) -> None:
        """Set the new status and stamp who did it."""
        now = datetime.utcnow()
        reason = self.payload.get("reason")
        setattr(form, rule.status_field, rule.to_state)
        form.updated_by = self.actor.id

        if rule.transition in (FormTransition.APPROVE, FormTransition.REJECT):
            form.approval_by = self.actor.id
            form.approval_at = now
            form.approval_reason = reason
        elif rule.transition == FormTransition.REQUEST_CANCELLATION:
            form.request_cancellation_to = coerce_id(self.payload.get("request_cancellation_to")) \
                or form.request_approval_to
            form.request_cancellation_by = self.actor.id
            form.request_cancellation_at = now
            form.request_cancellation_reason = reason
        elif rule.transition in (FormTransition.APPROVE_CANCELLATION, FormTransition.REJECT_CANCELLATION):
            form.cancellation_approval_by = self.actor.id
            form.cancellation_approval_at = now
            form.cancellation_approval_reason = reason

    def record_history(self, form, rule: TransitionRule, from_status) -> FormHistory:
        history = FormHistory(
            form_id=form.id,
            transition=rule.transition.value,
            from_status=None if from_status == type(from_status).UNSET else int(from_status),
            to_status=int(rule.to_state),
            user_id=self.actor.id,
            reason=self.payload.get("reason"),
            extra_data={"formable_type": self.kind.value},
        )
        self.db.add(history)
        return history

    def finish(self, aggregate, form, rule: TransitionRule) -> None:
        """Terminal action of the transition; deletes the aggregate when destructive."""
        if rule.destructive:
            self.db.delete(aggregate)
