from checklist import db
from datetime import datetime
from checklist.buisness.core.data_insertion_mixin import DataInsertionMixin


class StockWithdrawal(db.Model, DataInsertionMixin):
    """
    Audit trail of stock movements.

    Conventions:
    - `quantity_delta` is negative for withdrawals and positive for restocks.
    - Rows are append-only and disappear only with their stock item.
    """
    __tablename__ = 'stock_withdrawals'

    id = db.Column(db.Integer, primary_key=True)
    stock_item_id = db.Column(
        db.Integer,
        db.ForeignKey('stock_items.id', ondelete='CASCADE'),
        nullable=False,
        index=True,
    )
    quantity_delta = db.Column(db.Integer, nullable=False)
    reason = db.Column(db.Text, nullable=False)
    responsible_by = db.Column(db.String(120), nullable=False)
    created_by_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    stock_item = db.relationship('StockItem', back_populates='withdrawals')
    created_by = db.relationship('User', foreign_keys=[created_by_id])

    @property
    def quantity(self):
        """Withdrawn amount as a positive number."""
        return abs(self.quantity_delta)

    def __repr__(self):
        return f'<StockWithdrawal item={self.stock_item_id} delta={self.quantity_delta}>'
