from checklist import db
from checklist.data.core.user_created_base import UserCreatedBase


class StockItem(UserCreatedBase):
    """
    Consumable or asset kept in stock.

    parent_item_id groups items one level deep: a parent is never itself a
    child. A parent with children is displayed as the sum of its children,
    so its own current_quantity/maintenance_status are not shown.
    """
    __tablename__ = 'stock_items'

    name = db.Column(db.String(150), nullable=False)
    category = db.Column(db.String(100), nullable=False, default='', index=True)
    current_quantity = db.Column(db.Integer, nullable=False, default=0)
    minimum_stock = db.Column(db.Integer, nullable=False, default=0)
    location = db.Column(db.String(120), nullable=False, default='', index=True)
    asset_number = db.Column(db.String(80), nullable=True)
    maintenance_status = db.Column(db.String(20), nullable=False, default='in_stock')
    parent_item_id = db.Column(
        db.Integer,
        db.ForeignKey('stock_items.id', ondelete='CASCADE'),
        nullable=True,
        index=True,
    )

    parent = db.relationship('StockItem', remote_side='StockItem.id', back_populates='children')
    children = db.relationship(
        'StockItem',
        back_populates='parent',
        cascade='all, delete',
        order_by='StockItem.name',
    )
    withdrawals = db.relationship(
        'StockWithdrawal',
        back_populates='stock_item',
        cascade='all, delete-orphan',
        order_by='StockWithdrawal.created_at.desc()',
    )

    __table_args__ = (
        db.CheckConstraint('current_quantity >= 0', name='ck_stock_items_quantity_non_negative'),
        db.CheckConstraint('minimum_stock >= 0', name='ck_stock_items_minimum_non_negative'),
    )

    def __repr__(self):
        return f'<StockItem {self.name} qty={self.current_quantity}>'
