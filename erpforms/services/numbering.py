"""Form document numbers.

Numbers are ``<PREFIX><yy><mm><increment>``: ``SC2101001`` is the first stock
correction of January 2021.
"""

from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session

from erpforms.core.config import get_settings
from erpforms.db.models import Form


def next_form_number(db: Session, prefix: str, date: Optional[datetime] = None) -> str:
    """Generate the next unused number for ``prefix`` in the month of ``date``."""
    date = date or datetime.utcnow()
    digits = get_settings().form_number_increment_digits
    period = f"{prefix}{date:%y%m}"

    last = db.query(Form.number).filter(
        Form.number.like(f"{period}%")
    ).order_by(Form.number.desc()).first()

    increment = 1
    if last is not None:
        tail = last[0][len(period):]
        if tail.isdigit():
            increment = int(tail) + 1
    return f"{period}{increment:0{digits}d}"
