"""Tests for the side-effect dispatcher."""

from types import SimpleNamespace

import pytest

from erpforms.core.approval import FormTransition
from erpforms.services.formable import FormableKind
from erpforms.services.side_effects import SideEffectDispatcher, dispatcher


class TestSideEffectDispatcher:

    def test_effects_run_in_registration_order(self):
        calls = []
        local = SideEffectDispatcher()

        @local.register(FormableKind.STOCK_CORRECTION, FormTransition.APPROVE)
        def first(db, aggregate, form, actor):
            calls.append("first")

        @local.register(FormableKind.STOCK_CORRECTION, FormTransition.APPROVE)
        def second(db, aggregate, form, actor):
            calls.append("second")

        form = SimpleNamespace(number="SC2101001")
        assert local.dispatch(FormableKind.STOCK_CORRECTION, FormTransition.APPROVE, None, None, form, None) == 2
        assert calls == ["first", "second"]

    def test_unregistered_transition_runs_nothing(self):
        local = SideEffectDispatcher()
        form = SimpleNamespace(number="SC2101001")
        assert local.dispatch(FormableKind.SALES_INVOICE, FormTransition.REJECT, None, None, form, None) == 0

    def test_effect_errors_propagate(self):
        local = SideEffectDispatcher()

        @local.register(FormableKind.SALES_INVOICE, FormTransition.APPROVE)
        def broken(db, aggregate, form, actor):
            raise RuntimeError("boom")

        with pytest.raises(RuntimeError):
            local.dispatch(
                FormableKind.SALES_INVOICE, FormTransition.APPROVE, None, None, SimpleNamespace(number="x"), None
            )

    def test_module_effects_are_registered(self):
        for kind in (FormableKind.STOCK_CORRECTION, FormableKind.SALES_INVOICE):
            assert dispatcher.effects_for(kind, FormTransition.APPROVE)
            assert dispatcher.effects_for(kind, FormTransition.APPROVE_CANCELLATION)
