"""
Persistent Store Adapter
Durable table storage for the five entity kinds.

Per kind:
- get_all(): every row as a record
- save(record): upsert by primary key, full-field overwrite
- delete(id): assets only

All methods use the Flask-SQLAlchemy session and therefore require an
application context. The adapter has no authority of its own: it mirrors
whatever the engine last wrote.
"""

from typing import Any, Dict, List

from assetguard import db
from assetguard.buisness.core.errors import UnsupportedOperationError
from assetguard.buisness.core.entity_repository import (
    ASSETS, ASSIGNMENTS, EMPLOYEES, KINDS, MAINTENANCE_LOGS, RECORD_TYPES, REQUESTS,
)
from assetguard.data.core.asset import AssetRow
from assetguard.data.core.asset_request import AssetRequestRow
from assetguard.data.core.assignment import AssignmentRow
from assetguard.data.core.employee import EmployeeRow
from assetguard.data.core.maintenance_log import MaintenanceLogRow
from assetguard.logger import get_logger

logger = get_logger("assetguard.data.store")

ROW_MODELS = {
    ASSETS: AssetRow,
    EMPLOYEES: EmployeeRow,
    ASSIGNMENTS: AssignmentRow,
    MAINTENANCE_LOGS: MaintenanceLogRow,
    REQUESTS: AssetRequestRow,
}


class EntityTable:
    """Read/write gateway for one entity kind."""

    def __init__(self, kind: str, deletable: bool = False):
        self.kind = kind
        self.model = ROW_MODELS[kind]
        self.record_type = RECORD_TYPES[kind]
        self.deletable = deletable

    def get_all(self) -> List[Any]:
        rows = db.session.execute(db.select(self.model)).scalars().all()
        return [self.record_type.from_row(row.to_row()) for row in rows]

    def save(self, record) -> None:
        # merge() inserts when the primary key is absent and overwrites every column otherwise
        try:
            db.session.merge(self.model.from_row(record.to_row()))
            db.session.commit()
        except Exception:
            db.session.rollback()
            raise

    def delete(self, entity_id: str) -> None:
        if not self.deletable:
            raise UnsupportedOperationError(self.kind, 'delete')
        try:
            db.session.execute(db.delete(self.model).where(self.model.id == entity_id))
            db.session.commit()
        except Exception:
            db.session.rollback()
            raise

    def count(self) -> int:
        return db.session.execute(db.select(db.func.count()).select_from(self.model)).scalar_one()


class PersistentStore:
    """
    Table-backed store for every entity kind.

    Usage:
        store = PersistentStore()
        store.table('assets').save(asset)
    """

    def __init__(self):
        self._tables: Dict[str, EntityTable] = {
            kind: EntityTable(kind, deletable=(kind == ASSETS)) for kind in KINDS
        }

    def table(self, kind: str) -> EntityTable:
        return self._tables[kind]

    def initialize(self, seed_demo_data: bool = True) -> bool:
        """
        Create any missing tables and seed the demonstration dataset when the
        assets table is empty.

        Returns:
            bool: True if demo data was inserted
        """
        from assetguard.data.core.build import build_models, seed_demo_data as seed

        build_models()
        if not seed_demo_data:
            return False
        if self.table(ASSETS).count() > 0:
            logger.info("Assets table already populated, skipping demo data")
            return False
        seed()
        return True
