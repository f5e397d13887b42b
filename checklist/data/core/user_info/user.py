from checklist import db, login_manager
from werkzeug.security import generate_password_hash, check_password_hash
from flask_login import UserMixin
from datetime import datetime
from checklist.buisness.core.data_insertion_mixin import DataInsertionMixin
from checklist.buisness.core.permissions import PERMISSION_FIELDS, PermissionSet

ROLE_USER = 'user'
ROLE_SUPERUSER = 'superuser'
ROLES = (ROLE_USER, ROLE_SUPERUSER)


class User(UserMixin, DataInsertionMixin, db.Model):
    __tablename__ = 'users'

    id = db.Column(db.Integer, primary_key=True)
    username = db.Column(db.String(80), unique=True, nullable=False)
    email = db.Column(db.String(120), unique=True, nullable=False)
    full_name = db.Column(db.String(120), nullable=True)
    password_hash = db.Column(db.String(255), nullable=False)
    is_active = db.Column(db.Boolean, default=True)
    role = db.Column(db.String(20), nullable=False, default=ROLE_USER)

    # Capability flags
    can_add = db.Column(db.Boolean, nullable=False, default=False)
    can_edit = db.Column(db.Boolean, nullable=False, default=False)
    can_delete = db.Column(db.Boolean, nullable=False, default=False)
    can_view = db.Column(db.Boolean, nullable=False, default=True)
    can_mark_cleaned = db.Column(db.Boolean, nullable=False, default=False)
    can_manage_users = db.Column(db.Boolean, nullable=False, default=False)
    can_manage_stock = db.Column(db.Boolean, nullable=False, default=False)

    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def set_password(self, password):
        self.password_hash = generate_password_hash(password)

    def check_password(self, password):
        return check_password_hash(self.password_hash, password)

    @property
    def is_superuser(self):
        return self.role == ROLE_SUPERUSER

    @property
    def display_name(self):
        return self.full_name or self.username

    @property
    def permissions(self) -> PermissionSet:
        """Stored capability flags, exactly as edited on the user management page."""
        return PermissionSet.from_source(self)

    def set_permissions(self, permissions: PermissionSet):
        for name in PERMISSION_FIELDS:
            setattr(self, name, getattr(permissions, name))

    def has_permission(self, capability):
        """Superusers hold every capability; everyone else needs the flag."""
        if not self.is_active:
            return False
        if self.is_superuser:
            return True
        return self.permissions.allows(capability)

    def __repr__(self):
        return f'<User {self.username}>'


@login_manager.user_loader
def load_user(user_id):
    return db.session.get(User, int(user_id))
