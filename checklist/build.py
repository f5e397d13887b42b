#!/usr/bin/env python3
"""
Database build for the cleaning checklist
Creates tables, guarantees the admin account and optionally loads demo data
"""

from checklist import create_app, db
from pathlib import Path
from datetime import timedelta
import json
import os
from checklist.logger import get_logger

logger = get_logger("checklist.build")

DEBUG_DATA_FILE = Path(__file__).parent / 'debug' / 'debug_data.json'


def ensure_admin_user():
    """
    Make sure the superuser named by ADMIN_USERNAME exists.

    Called on every build regardless of flags. An existing account is left
    untouched; a missing one needs ADMIN_PASSWORD.

    Returns:
        User: the admin account

    Raises:
        RuntimeError: the account is missing and ADMIN_PASSWORD is not set
    """
    from checklist.buisness.core.permissions import PermissionSet
    from checklist.data.core.user_info.user import ROLE_SUPERUSER, User

    username = os.environ.get('ADMIN_USERNAME', 'admin')
    admin = User.query.filter_by(username=username).first()
    if admin is not None:
        logger.info(f"Admin user '{username}' already present")
        return admin

    password = os.environ.get('ADMIN_PASSWORD')
    if not password:
        logger.critical("ADMIN_PASSWORD not set and no admin user exists")
        raise RuntimeError("ADMIN_PASSWORD environment variable is required to create the admin user")

    admin = User.from_dict({
        'username': username,
        'email': os.environ.get('ADMIN_EMAIL', f'{username}@localhost'),
        'full_name': 'Administrator',
        'role': ROLE_SUPERUSER,
        'password': password,
    })
    admin.set_permissions(PermissionSet.full())
    try:
        db.session.add(admin)
        db.session.commit()
    except Exception as e:
        db.session.rollback()
        logger.error(f"Admin user creation failed: {e}")
        raise

    logger.info(f"Created admin user '{username}' (ID: {admin.id})")
    return admin


def insert_debug_data(admin, data_file=DEBUG_DATA_FILE):
    """
    Load demo equipment and stock items. Records whose name already exists
    are skipped, so the build can run repeatedly.

    Equipment dates are given as days before today so the demo always shows
    a mix of statuses.
    """
    from checklist.buisness.equipment.equipment_context import EquipmentContext
    from checklist.buisness.stock.stock_manager import StockManager
    from checklist.data.equipment.cleaning_history import CleaningHistory
    from checklist.data.equipment.equipment import Equipment
    from checklist.data.stock.stock_item import StockItem
    from checklist.utils.dates import local_today

    if not data_file.exists():
        logger.warning(f"Debug data file not found: {data_file}")
        return

    with open(data_file, 'r') as f:
        debug_data = json.load(f)

    today = local_today()
    created = 0
    for entry in debug_data.get('Equipment', []):
        if Equipment.query.filter_by(name=entry['name']).first():
            continue
        fields = {key: value for key, value in entry.items() if key != 'days_since_cleaning'}
        fields['last_cleaning'] = today - timedelta(days=entry.get('days_since_cleaning', 0))
        context = EquipmentContext.create(admin, **fields)
        CleaningHistory.create_from_dict({
            'equipment_id': context.equipment_id,
            'cleaning_date': fields['last_cleaning'],
            'responsible_by': context.equipment.responsible,
        }, user_id=admin.id)
        created += 1
    logger.info(f"Inserted {created} debug equipment record(s)")

    manager = StockManager()
    created = 0
    # Parents first so children can be linked by name
    entries = sorted(debug_data.get('Stock', []), key=lambda entry: 'parent' in entry)
    for entry in entries:
        if StockItem.query.filter_by(name=entry['name']).first():
            continue
        fields = {key: value for key, value in entry.items() if key != 'parent'}
        if entry.get('parent'):
            parent = StockItem.query.filter_by(name=entry['parent']).first()
            if parent is None:
                logger.warning(f"Debug stock item {entry['name']} skipped: parent {entry['parent']} missing")
                continue
            fields['parent_item_id'] = parent.id
        manager.create_item(admin, **fields)
        created += 1
    logger.info(f"Inserted {created} debug stock item(s)")


def build_database(enable_debug_data=True, app=None):
    """
    Create all tables, ensure the admin account and optionally seed demo data.

    Args:
        enable_debug_data (bool): Whether to insert debug data (default: True).
            The admin account is ALWAYS checked regardless of this flag.
        app: Application to build against; a new one is created when omitted
    """
    app = app or create_app()

    with app.app_context():
        logger.info(f"Starting database build (debug data: {enable_debug_data})")
        db.create_all()
        logger.info("Tables created")

        admin = ensure_admin_user()

        if enable_debug_data:
            insert_debug_data(admin)

        logger.info("Database build complete")
