"""Tests for journal postings."""

from decimal import Decimal

import pytest

from erpforms.core.errors import ConfigurationMissingError, InvalidStateError
from erpforms.db.models import Journal
from erpforms.services.journal import JournalLine, JournalService, double_entry

from tests.factories import create_chart_of_account, create_setting_journal, create_stock_correction


class TestDoubleEntry:

    def test_positive_amount(self):
        debit, credit = double_entry("inventory", "difference", Decimal("50"))
        assert (debit.chart_of_account_id, debit.debit, debit.credit) == ("inventory", Decimal("50"), 0)
        assert (credit.chart_of_account_id, credit.debit, credit.credit) == ("difference", 0, Decimal("50"))

    def test_negative_amount_swaps_sides(self):
        debit, credit = double_entry("inventory", "difference", Decimal("-20"))
        assert debit.chart_of_account_id == "difference"
        assert debit.debit == Decimal("20")
        assert credit.chart_of_account_id == "inventory"
        assert credit.credit == Decimal("20")

    def test_extra_fields(self):
        lines = double_entry("a", "b", 1, journalable_type="Item", notes="x")
        assert all(line.journalable_type == "Item" and line.notes == "x" for line in lines)


class TestJournalService:

    def test_account_id(self, db_session):
        setting = create_setting_journal(db_session, feature="sales", name="sales income")
        assert JournalService(db_session).account_id("sales", "sales income") == setting.chart_of_account_id

    def test_missing_account(self, db_session):
        with pytest.raises(ConfigurationMissingError) as exc_info:
            JournalService(db_session).account_id("sales", "cost of sales")
        assert exc_info.value.message == "Journal sales account - cost of sales not found"

    def test_post_and_void(self, db_session):
        form = create_stock_correction(db_session).form
        debit_account = create_chart_of_account(db_session)
        credit_account = create_chart_of_account(db_session, position="CREDIT")
        service = JournalService(db_session)

        lines = double_entry(debit_account.id, credit_account.id, 30)
        lines.append(JournalLine(debit_account.id))
        journals = service.post(form, lines)
        db_session.flush()

        assert len(journals) == 2
        assert db_session.query(Journal).filter(Journal.form_id == form.id).count() == 2

        assert service.void(form) == 2
        assert db_session.query(Journal).filter(Journal.form_id == form.id).count() == 0

    def test_unbalanced_entry(self, db_session):
        form = create_stock_correction(db_session).form
        account = create_chart_of_account(db_session)
        with pytest.raises(InvalidStateError):
            JournalService(db_session).post(form, [JournalLine(account.id, debit=Decimal("1"))])
