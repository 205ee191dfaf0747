from assetguard.data.core.tracked_row_base import TrackedRowBase
from assetguard import db


class MaintenanceLogRow(TrackedRowBase):
    __tablename__ = 'maintenance_logs'

    asset_id = db.Column('assetId', db.String(64), index=True)
    description = db.Column(db.Text)
    vendor = db.Column(db.String(200))
    cost = db.Column(db.Float)
    date = db.Column(db.String(10))
    status = db.Column(db.String(30))
