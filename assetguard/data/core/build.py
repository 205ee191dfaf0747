"""
Core models build module
Handles creating the entity tables and the one-time demo seed
"""

import json
from pathlib import Path

from assetguard import db
from assetguard.logger import get_logger

logger = get_logger("assetguard.data.build")

DEMO_DATA_FILE = Path(__file__).parent / 'build_data_demo.json'

# Insertion order for the seed file sections
SEED_SECTIONS = (
    ('assets', 'assetguard.data.core.asset', 'AssetRow'),
    ('employees', 'assetguard.data.core.employee', 'EmployeeRow'),
    ('assignments', 'assetguard.data.core.assignment', 'AssignmentRow'),
    ('maintenance_logs', 'assetguard.data.core.maintenance_log', 'MaintenanceLogRow'),
    ('requests', 'assetguard.data.core.asset_request', 'AssetRequestRow'),
)


def build_models():
    """
    Register the entity models with SQLAlchemy and create any missing tables.
    Existing tables are left as they are.
    """
    import assetguard.data.core.asset
    import assetguard.data.core.employee
    import assetguard.data.core.assignment
    import assetguard.data.core.maintenance_log
    import assetguard.data.core.asset_request

    db.create_all()
    logger.info("Core models build completed")


def load_demo_data(path=DEMO_DATA_FILE):
    """
    Load the demo dataset JSON file

    Raises:
        FileNotFoundError: If the file does not exist
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Demo data file not found: {path}")
    with open(path, 'r', encoding='utf-8') as f:
        return json.load(f)


def seed_demo_data(path=DEMO_DATA_FILE):
    """
    Insert the demonstration dataset. Callers decide whether seeding is due;
    PersistentStore.initialize() only calls this when there are no assets.

    Returns:
        dict: Number of rows inserted per section
    """
    import importlib

    data = load_demo_data(path)
    logger.info("Seeding demo data...")
    summary = {}
    for section, module_name, class_name in SEED_SECTIONS:
        model = getattr(importlib.import_module(module_name), class_name)
        rows = data.get(section, [])
        model.bulk_create_from_rows(rows, commit=False)
        summary[section] = len(rows)
    try:
        db.session.commit()
    except Exception as e:
        db.session.rollback()
        logger.error(f"Failed to seed demo data: {e}")
        raise
    logger.info(f"Demo data inserted: {summary}")
    return summary
