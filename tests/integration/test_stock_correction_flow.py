"""Integration tests for the stock correction workflow.

Covers creation, approval with its inventory and journal postings, and the
delete request flow through to the removal of the document.
"""

from decimal import Decimal
from uuid import uuid4

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import Session

from erpforms.core.approval import Actor, ApprovalStatus, CancellationStatus, FormTransition
from erpforms.core.errors import (
    ConcurrencyConflictError,
    ConfigurationMissingError,
    ForbiddenError,
    InvalidStateError,
    NotFoundError,
)
from erpforms.db.base import Base
from erpforms.db.models import Form, FormHistory, Inventory, Journal, StockCorrection, StockCorrectionItem
from erpforms.modules import stock_correction
from erpforms.services.side_effects import SideEffectDispatcher

from tests.factories import (
    create_item,
    create_stock_correction,
    create_super_admin,
    create_user,
    create_warehouse,
)


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture()
def maker(db_session):
    return create_user(db_session, name="Maker")


@pytest.fixture()
def approver(db_session):
    return create_user(db_session, name="Approver")


@pytest.fixture()
def item(db_session):
    return create_item(db_session, name="Paper", stock=100, cogs=2)


@pytest.fixture()
def requested(db_session, maker, approver, item):
    """An approved stock correction with a pending delete request."""
    return create_stock_correction(
        db_session,
        maker=maker,
        approver=approver,
        lines=[(item, 5)],
        approval_status=ApprovalStatus.APPROVED,
        cancellation_status=CancellationStatus.PENDING,
        number="SC2101001",
    )


def form_of(db_session, stock_correction_id):
    return db_session.query(Form).filter(
        Form.formable_type == "StockCorrection",
        Form.formable_id == stock_correction_id,
    ).one()


# ---------------------------------------------------------------------------
# Create
# ---------------------------------------------------------------------------

class TestCreateStockCorrection:

    def test_create_requests_approval(self, db_session, maker, approver, item):
        warehouse = create_warehouse(db_session)

        created = stock_correction.CreateFormRequest(
            db_session,
            maker=maker,
            warehouse_id=warehouse.id,
            request_approval_to=approver.id,
            items=[{"item_id": item.id, "quantity": "-3", "notes": "broken"}],
        ).call()

        form = form_of(db_session, created.id)
        assert form.approval_status == ApprovalStatus.PENDING
        assert form.cancellation_status == CancellationStatus.UNSET
        assert form.created_by == maker.id
        assert form.number.startswith("SC")
        assert created.items[0].quantity == Decimal("-3")
        assert created.items[0].unit == "pcs"
        history = db_session.query(FormHistory).filter(FormHistory.form_id == form.id).all()
        assert [h.transition for h in history] == [FormTransition.REQUEST_APPROVAL.value]

    def test_create_does_not_touch_stock(self, db_session, maker, approver, item):
        warehouse = create_warehouse(db_session)
        stock_correction.CreateFormRequest(
            db_session,
            maker=maker,
            warehouse_id=warehouse.id,
            request_approval_to=approver.id,
            items=[{"item_id": item.id, "quantity": 3}],
        ).call()
        assert item.stock == Decimal("100")

    @pytest.mark.parametrize("payload,message", [
        ({"warehouse_id": uuid4()}, "Warehouse is not exist"),
        ({"request_approval_to": uuid4()}, "Approver is not exist"),
        ({"items": [{"item_id": uuid4(), "quantity": 1}]}, "Item is not exist"),
    ])
    def test_missing_references(self, db_session, maker, approver, item, payload, message):
        data = {
            "warehouse_id": create_warehouse(db_session).id,
            "request_approval_to": approver.id,
            "items": [{"item_id": item.id, "quantity": 1}],
        }
        data.update(payload)
        with pytest.raises(NotFoundError) as exc_info:
            stock_correction.CreateFormRequest(db_session, maker=maker, **data).call()
        assert exc_info.value.message == message

    def test_empty_items(self, db_session, maker, approver):
        with pytest.raises(InvalidStateError) as exc_info:
            stock_correction.CreateFormRequest(
                db_session,
                maker=maker,
                warehouse_id=create_warehouse(db_session).id,
                request_approval_to=approver.id,
                items=[],
            ).call()
        assert exc_info.value.message == "Stock correction items can not be empty"


# ---------------------------------------------------------------------------
# Approve / reject
# ---------------------------------------------------------------------------

class TestApproveStockCorrection:

    def test_approve_posts_inventory_and_journal(self, db_session, maker, approver, item, stock_correction_journal):
        sc = create_stock_correction(db_session, maker=maker, approver=approver, lines=[(item, 5)])

        stock_correction.FormApprove(db_session, approver=approver, stock_correction_id=sc.id).call()

        form = form_of(db_session, sc.id)
        assert form.approval_status == ApprovalStatus.APPROVED
        assert form.approval_by == approver.id
        assert item.stock == Decimal("105")

        journals = db_session.query(Journal).filter(Journal.form_id == form.id).all()
        assert sum(j.debit for j in journals) == sum(j.credit for j in journals) == Decimal("10")
        debit = next(j for j in journals if j.debit)
        assert debit.chart_of_account_id == item.chart_of_account_id
        credit = next(j for j in journals if j.credit)
        assert credit.chart_of_account_id == stock_correction_journal.chart_of_account_id

    def test_negative_correction_credits_inventory(self, db_session, approver, item, stock_correction_journal):
        sc = create_stock_correction(db_session, approver=approver, lines=[(item, -5)])

        stock_correction.FormApprove(db_session, approver=approver, stock_correction_id=sc.id).call()

        form = form_of(db_session, sc.id)
        credit = db_session.query(Journal).filter(Journal.form_id == form.id, Journal.credit > 0).one()
        assert credit.chart_of_account_id == item.chart_of_account_id
        assert item.stock == Decimal("95")

    def test_approve_without_journal_setting_rolls_back(self, db_session, approver, item):
        sc = create_stock_correction(db_session, approver=approver, lines=[(item, 5)])

        with pytest.raises(ConfigurationMissingError) as exc_info:
            stock_correction.FormApprove(db_session, approver=approver, stock_correction_id=sc.id).call()

        assert exc_info.value.message == (
            "Journal stock correction account - difference stock expenses not found"
        )
        form = form_of(db_session, sc.id)
        assert form.approval_status == ApprovalStatus.PENDING
        assert db_session.query(FormHistory).filter(FormHistory.form_id == form.id).count() == 0

    def test_approve_by_other_user(self, db_session, approver, stock_correction_journal):
        sc = create_stock_correction(db_session, approver=approver)
        stranger = create_user(db_session)

        with pytest.raises(ForbiddenError) as exc_info:
            stock_correction.FormApprove(db_session, approver=stranger, stock_correction_id=sc.id).call()
        assert exc_info.value.message == "Forbidden - You are not selected approver"

    def test_approve_twice(self, db_session, approver, stock_correction_journal):
        sc = create_stock_correction(db_session, approver=approver)
        stock_correction.FormApprove(db_session, approver=approver, stock_correction_id=sc.id).call()

        with pytest.raises(InvalidStateError) as exc_info:
            stock_correction.FormApprove(db_session, approver=approver, stock_correction_id=sc.id).call()
        assert exc_info.value.message == "Stock correction is already approved"

    def test_reject_has_no_postings(self, db_session, approver, item):
        sc = create_stock_correction(db_session, approver=approver, lines=[(item, 5)])

        stock_correction.FormReject(
            db_session, approver=approver, stock_correction_id=sc.id, reason="wrong count"
        ).call()

        form = form_of(db_session, sc.id)
        assert form.approval_status == ApprovalStatus.REJECTED
        assert form.approval_reason == "wrong count"
        assert item.stock == Decimal("100")
        assert db_session.query(Inventory).filter(Inventory.form_id == form.id).count() == 0


# ---------------------------------------------------------------------------
# Delete request / reject
# ---------------------------------------------------------------------------

class TestDeleteRequest:

    def test_maker_requests_delete(self, db_session, maker, approver):
        sc = create_stock_correction(
            db_session, maker=maker, approver=approver,
            approval_status=ApprovalStatus.APPROVED, cancellation_approver=None,
        )

        stock_correction.DeleteFormRequest(
            db_session, maker=maker, stock_correction_id=sc.id, reason="duplicate"
        ).call()

        form = form_of(db_session, sc.id)
        assert form.cancellation_status == CancellationStatus.PENDING
        assert form.request_cancellation_by == maker.id
        assert form.request_cancellation_reason == "duplicate"
        assert form.request_cancellation_to == approver.id

    def test_request_routes_to_given_approver(self, db_session, maker):
        sc = create_stock_correction(db_session, maker=maker)
        other = create_user(db_session)

        stock_correction.DeleteFormRequest(
            db_session, maker=maker, stock_correction_id=sc.id, reason="x", request_cancellation_to=other.id
        ).call()

        assert form_of(db_session, sc.id).request_cancellation_to == other.id

    def test_only_maker_can_request(self, db_session, maker):
        sc = create_stock_correction(db_session, maker=maker)

        with pytest.raises(ForbiddenError) as exc_info:
            stock_correction.DeleteFormRequest(
                db_session, maker=create_user(db_session), stock_correction_id=sc.id, reason="x"
            ).call()
        assert exc_info.value.message == "Forbidden - Only maker can request delete"

    def test_request_twice(self, db_session, requested, maker):
        with pytest.raises(InvalidStateError) as exc_info:
            stock_correction.DeleteFormRequest(
                db_session, maker=maker, stock_correction_id=requested.id, reason="x"
            ).call()
        assert exc_info.value.message == "Stock correction is already requested to be delete"

    def test_reject_delete_request_keeps_document(self, db_session, requested, approver, item):
        stock_correction.DeleteFormReject(
            db_session, approver=approver, stock_correction_id=requested.id, reason="still needed"
        ).call()

        form = form_of(db_session, requested.id)
        assert form.cancellation_status == CancellationStatus.REJECTED
        assert form.cancellation_approval_reason == "still needed"
        assert db_session.get(StockCorrection, requested.id) is not None

    def test_rejected_request_can_not_be_approved(self, db_session, requested, approver):
        stock_correction.DeleteFormReject(db_session, approver=approver, stock_correction_id=requested.id).call()

        with pytest.raises(InvalidStateError) as exc_info:
            stock_correction.DeleteFormApprove(db_session, approver=approver, stock_correction_id=requested.id).call()
        assert exc_info.value.message == "Stock correction is not requested to be delete"


# ---------------------------------------------------------------------------
# Delete approve
# ---------------------------------------------------------------------------

class TestDeleteFormApprove:
    """Approval of a pending delete request."""

    def test_approve_deletes_stock_correction(self, db_session, requested, approver):
        line_ids = [line.id for line in requested.items]

        result = stock_correction.DeleteFormApprove(
            db_session, approver=approver, stock_correction_id=requested.id
        ).call()

        assert result.id == requested.id
        form = form_of(db_session, requested.id)
        assert form.cancellation_status == CancellationStatus.APPROVED
        assert form.cancellation_approval_by == approver.id
        assert form.cancellation_approval_at is not None
        assert db_session.get(StockCorrection, requested.id) is None
        assert db_session.query(StockCorrectionItem).filter(StockCorrectionItem.id.in_(line_ids)).count() == 0

        saved = db_session.query(Form).filter(Form.number == "SC2101001").one()
        db_session.refresh(saved)
        assert int(saved.cancellation_status) == 1

    def test_approve_records_history(self, db_session, requested, approver):
        stock_correction.DeleteFormApprove(db_session, approver=approver, stock_correction_id=requested.id).call()

        form = form_of(db_session, requested.id)
        history = db_session.query(FormHistory).filter(FormHistory.form_id == form.id).one()
        assert history.transition == FormTransition.APPROVE_CANCELLATION.value
        assert history.from_status == int(CancellationStatus.PENDING)
        assert history.to_status == int(CancellationStatus.APPROVED)
        assert history.user_id == approver.id

    def test_approve_reverses_postings(self, db_session, maker, approver, item, stock_correction_journal):
        sc = create_stock_correction(db_session, maker=maker, approver=approver, lines=[(item, 5)])
        stock_correction.FormApprove(db_session, approver=approver, stock_correction_id=sc.id).call()
        stock_correction.DeleteFormRequest(db_session, maker=maker, stock_correction_id=sc.id, reason="x").call()
        assert item.stock == Decimal("105")

        stock_correction.DeleteFormApprove(db_session, approver=approver, stock_correction_id=sc.id).call()

        form = form_of(db_session, sc.id)
        assert item.stock == Decimal("100")
        assert db_session.query(Journal).filter(Journal.form_id == form.id).count() == 0
        assert db_session.query(Inventory).filter(Inventory.form_id == form.id).count() == 0

    @pytest.mark.parametrize("stock_correction_id", [None, "invalid-id", uuid4()])
    def test_missing_stock_correction(self, db_session, approver, stock_correction_id):
        with pytest.raises(NotFoundError) as exc_info:
            stock_correction.DeleteFormApprove(
                db_session, approver=approver, stock_correction_id=stock_correction_id
            ).call()
        assert exc_info.value.message == "Stock correction is not exist"
        assert exc_info.value.status_code == 404

    def test_not_selected_approver(self, db_session, requested):
        stranger = create_user(db_session)

        with pytest.raises(ForbiddenError) as exc_info:
            stock_correction.DeleteFormApprove(db_session, approver=stranger, stock_correction_id=requested.id).call()

        assert exc_info.value.status_code == 403
        assert exc_info.value.message == "Forbidden - You are not selected approver"
        assert form_of(db_session, requested.id).cancellation_status == CancellationStatus.PENDING

    def test_super_admin_may_approve(self, db_session, requested):
        admin = create_super_admin(db_session)

        stock_correction.DeleteFormApprove(db_session, approver=admin, stock_correction_id=requested.id).call()

        form = form_of(db_session, requested.id)
        assert form.cancellation_status == CancellationStatus.APPROVED
        assert form.cancellation_approval_by == admin.id

    def test_not_requested(self, db_session, approver):
        sc = create_stock_correction(db_session, approver=approver, approval_status=ApprovalStatus.APPROVED)

        with pytest.raises(InvalidStateError) as exc_info:
            stock_correction.DeleteFormApprove(db_session, approver=approver, stock_correction_id=sc.id).call()

        assert exc_info.value.status_code == 422
        assert exc_info.value.message == "Stock correction is not requested to be delete"
        assert db_session.get(StockCorrection, sc.id) is not None

    def test_state_is_checked_before_approver(self, db_session, approver):
        sc = create_stock_correction(db_session, approver=approver)

        with pytest.raises(InvalidStateError):
            stock_correction.DeleteFormApprove(
                db_session, approver=create_user(db_session), stock_correction_id=sc.id
            ).call()

    def test_referenced_stock_correction(self, db_session, approver):
        sc = create_stock_correction(
            db_session,
            approver=approver,
            approval_status=ApprovalStatus.APPROVED,
            cancellation_status=CancellationStatus.PENDING,
            done=True,
        )

        with pytest.raises(InvalidStateError) as exc_info:
            stock_correction.DeleteFormApprove(db_session, approver=approver, stock_correction_id=sc.id).call()

        assert exc_info.value.message == "Can not delete already referenced stock correction"
        form = form_of(db_session, sc.id)
        assert form.cancellation_status == CancellationStatus.PENDING
        assert db_session.get(StockCorrection, sc.id) is not None

    def test_second_approval_finds_nothing(self, db_session, requested, approver, item):
        stock_correction.DeleteFormApprove(db_session, approver=approver, stock_correction_id=requested.id).call()

        with pytest.raises(NotFoundError):
            stock_correction.DeleteFormApprove(db_session, approver=approver, stock_correction_id=requested.id).call()
        assert item.stock == Decimal("100")

    def test_failing_effect_rolls_back(self, db_session, requested, approver):
        failing = SideEffectDispatcher()

        @failing.register(stock_correction.DeleteFormApprove.kind, FormTransition.APPROVE_CANCELLATION)
        def fail(db, aggregate, form, actor):
            raise ConfigurationMissingError("stock correction", "difference stock expenses")

        with pytest.raises(ConfigurationMissingError):
            stock_correction.DeleteFormApprove(
                db_session, approver=approver, stock_correction_id=requested.id, dispatcher=failing
            ).call()

        form = form_of(db_session, requested.id)
        assert form.cancellation_status == CancellationStatus.PENDING
        assert db_session.get(StockCorrection, requested.id) is not None
        assert db_session.query(FormHistory).filter(FormHistory.form_id == form.id).count() == 0


# ---------------------------------------------------------------------------
# Concurrent transitions
# ---------------------------------------------------------------------------

@pytest.fixture()
def file_engine(tmp_path):
    """A file backed database so two sessions hold separate connections."""
    engine = create_engine(f"sqlite:///{tmp_path / 'forms.db'}")
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


class TestConcurrentTransitions:

    def test_form_changed_by_another_session(self, file_engine):
        with Session(file_engine, expire_on_commit=False) as setup:
            approver = create_user(setup, name="Approver")
            sc = create_stock_correction(setup, approver=approver)
            setup.commit()
        actor = Actor(id=approver.id)

        racing = SideEffectDispatcher()

        @racing.register(stock_correction.FormReject.kind, FormTransition.REJECT)
        def approve_elsewhere(db, aggregate, form, actor):
            with Session(file_engine, autoflush=False, expire_on_commit=False) as other:
                stock_correction.FormApprove(
                    other, approver=actor, stock_correction_id=aggregate.id, dispatcher=SideEffectDispatcher()
                ).call()

        with Session(file_engine, autoflush=False, expire_on_commit=False) as session:
            with pytest.raises(ConcurrencyConflictError) as exc_info:
                stock_correction.FormReject(
                    session, approver=actor, stock_correction_id=sc.id, dispatcher=racing
                ).call()

        assert exc_info.value.status_code == 409
        with Session(file_engine) as check:
            form = form_of(check, sc.id)
            assert form.approval_status == ApprovalStatus.APPROVED
            transitions = [h.transition for h in check.query(FormHistory).filter(FormHistory.form_id == form.id)]
            assert transitions == [FormTransition.APPROVE.value]


class TestFindOneStockCorrection:

    def test_find_one(self, db_session, requested, item):
        found = stock_correction.FindOne(db_session, requested.id).call()
        assert found.id == requested.id
        assert found.items[0].item.name == "Paper"
        assert found.form.cancellation_status == CancellationStatus.PENDING

    def test_find_missing(self, db_session):
        with pytest.raises(NotFoundError) as exc_info:
            stock_correction.FindOne(db_session, "invalid-id").call()
        assert exc_info.value.message == "Stock correction is not exist"
