from checklist import db
from datetime import datetime
from checklist.buisness.core.data_insertion_mixin import DataInsertionMixin


class CleaningHistory(db.Model, DataInsertionMixin):
    """
    Append-only record of a cleaning.

    Rows are only ever inserted by EquipmentContext.mark_cleaned and removed
    together with their equipment.
    """
    __tablename__ = 'cleaning_history'

    id = db.Column(db.Integer, primary_key=True)
    equipment_id = db.Column(
        db.Integer,
        db.ForeignKey('equipment.id', ondelete='CASCADE'),
        nullable=False,
        index=True,
    )
    cleaning_date = db.Column(db.Date, nullable=False)
    responsible_by = db.Column(db.String(120), nullable=False)
    created_by_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    equipment = db.relationship('Equipment', back_populates='cleanings')
    created_by = db.relationship('User', foreign_keys=[created_by_id])

    def __repr__(self):
        return f'<CleaningHistory equipment={self.equipment_id} date={self.cleaning_date}>'
