"""Ledger journal postings made on behalf of forms."""

import logging
from decimal import Decimal
from typing import Iterable, List, NamedTuple, Optional
from uuid import UUID

from sqlalchemy.orm import Session

from erpforms.core.errors import ConfigurationMissingError, InvalidStateError
from erpforms.db.models import Form, Journal, SettingJournal

logger = logging.getLogger(__name__)


class JournalLine(NamedTuple):
    """One debit or credit of a journal entry."""
    chart_of_account_id: UUID
    debit: Decimal = Decimal(0)
    credit: Decimal = Decimal(0)
    journalable_type: Optional[str] = None
    journalable_id: Optional[UUID] = None
    notes: Optional[str] = None


class JournalService:
    """Looks up journal settings and posts or voids balanced journal entries."""

    def __init__(self, db: Session):
        self.db = db

    def account_id(self, feature: str, name: str) -> UUID:
        """
        Get the chart of account mapped to a feature's journal line.

        Raises:
            ConfigurationMissingError: If no mapping is configured
        """
        setting = self.db.query(SettingJournal).filter(
            SettingJournal.feature == feature,
            SettingJournal.name == name,
        ).first()
        if setting is None:
            raise ConfigurationMissingError(feature, name)
        return setting.chart_of_account_id

    def post(self, form: Form, lines: Iterable[JournalLine]) -> List[Journal]:
        """
        Post a journal entry for ``form``.

        Zero lines are skipped. Debits and credits must balance.

        Raises:
            InvalidStateError: If the entry does not balance
        """
        lines = [line for line in lines if line.debit or line.credit]
        total_debit = sum((Decimal(line.debit) for line in lines), Decimal(0))
        total_credit = sum((Decimal(line.credit) for line in lines), Decimal(0))
        if total_debit != total_credit:
            raise InvalidStateError(
                f"Journal of {form.number} is not balanced ({total_debit} != {total_credit})"
            )

        journals = []
        for line in lines:
            journal = Journal(
                form_id=form.id,
                chart_of_account_id=line.chart_of_account_id,
                debit=Decimal(line.debit),
                credit=Decimal(line.credit),
                journalable_type=line.journalable_type,
                journalable_id=line.journalable_id,
                notes=line.notes,
            )
            self.db.add(journal)
            journals.append(journal)
        return journals

    def void(self, form: Form) -> int:
        """
        Remove every journal line posted by ``form``.

        Returns:
            Number of lines removed
        """
        count = self.db.query(Journal).filter(Journal.form_id == form.id).delete(synchronize_session="fetch")
        if count:
            logger.info(f"Voided {count} journal lines of form {form.number}")
        return count


def double_entry(debit_account: UUID, credit_account: UUID, amount, **kwargs) -> List[JournalLine]:
    """Build a debit/credit pair; a negative amount swaps the sides."""
    amount = Decimal(amount)
    if amount < 0:
        debit_account, credit_account, amount = credit_account, debit_account, -amount
    return [
        JournalLine(debit_account, debit=amount, **kwargs),
        JournalLine(credit_account, credit=amount, **kwargs),
    ]
