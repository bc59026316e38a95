from sqlalchemy import and_
from sqlalchemy.orm import declared_attr, foreign, relationship


class FormableMixin:
    """Gives a transaction aggregate its one-to-one ``form`` relationship.

    Subclasses set ``__formable_type__`` to the value stored in
    ``Form.formable_type``.
    """

    __formable_type__: str

    @declared_attr
    def form(cls):
        from erpforms.db.models.form import Form

        return relationship(
            Form,
            primaryjoin=lambda: and_(
                foreign(Form.formable_id) == cls.id,
                Form.formable_type == cls.__formable_type__,
            ),
            uselist=False,
            viewonly=True,
        )
