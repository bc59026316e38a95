"""Side-effect dispatch for successful form transitions.

Effects run inside the handler's unit of work. Unlike notification hooks,
an effect that raises aborts the whole transition.
"""

import logging
from typing import Callable, Dict, List, Tuple

from erpforms.core.approval.states import FormTransition

from .formable import FormableKind

logger = logging.getLogger(__name__)

SideEffect = Callable[..., None]


class SideEffectDispatcher:
    """Registry of effects keyed by aggregate kind and transition."""

    def __init__(self):
        self._effects: Dict[Tuple[FormableKind, FormTransition], List[SideEffect]] = {}

    def register(self, kind: FormableKind, transition: FormTransition) -> Callable[[SideEffect], SideEffect]:
        """
        Decorator registering an effect.

        Usage:
            @dispatcher.register(FormableKind.STOCK_CORRECTION, FormTransition.APPROVE)
            def post_stock(db, aggregate, form, actor):
                ...
        """
        def decorator(effect: SideEffect) -> SideEffect:
            self._effects.setdefault((kind, transition), []).append(effect)
            return effect
        return decorator

    def effects_for(self, kind: FormableKind, transition: FormTransition) -> List[SideEffect]:
        return list(self._effects.get((kind, transition), []))

    def dispatch(self, kind: FormableKind, transition: FormTransition, db, aggregate, form, actor) -> int:
        """
        Run every effect registered for ``(kind, transition)`` in order.

        Returns:
            Number of effects run
        """
        effects = self.effects_for(kind, transition)
        for effect in effects:
            logger.debug(f"Running {effect.__name__} for {form.number} {transition.value}")
            effect(db, aggregate, form, actor)
        return len(effects)


dispatcher = SideEffectDispatcher()
