from assetguard.data.core.tracked_row_base import TrackedRowBase
from assetguard import db


class AssetRequestRow(TrackedRowBase):
    __tablename__ = 'requests'

    employee_id = db.Column('employeeId', db.String(64), index=True)
    category = db.Column(db.String(100))
    reason = db.Column(db.Text)
    status = db.Column(db.String(20))
    request_date = db.Column('requestDate', db.String(10))
