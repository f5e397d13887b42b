from checklist import db
from checklist.data.core.user_created_base import UserCreatedBase


class Equipment(UserCreatedBase):
    """
    Equipment on the cleaning checklist.

    periodicity is the cleaning interval in days. last_cleaning is a calendar
    date with no time component.
    """
    __tablename__ = 'equipment'

    name = db.Column(db.String(150), nullable=False)
    sector = db.Column(db.String(100), nullable=False, index=True)
    responsible = db.Column(db.String(120), nullable=False, index=True)
    periodicity = db.Column(db.Integer, nullable=False, default=1)
    last_cleaning = db.Column(db.Date, nullable=False)

    cleanings = db.relationship(
        'CleaningHistory',
        back_populates='equipment',
        cascade='all, delete-orphan',
        order_by='CleaningHistory.cleaning_date.desc()',
    )

    def __repr__(self):
        return f'<Equipment {self.name} ({self.sector})>'
