from assetguard.data.core.tracked_row_base import TrackedRowBase
from assetguard import db


class AssignmentRow(TrackedRowBase):
    __tablename__ = 'assignments'

    # No foreign keys: deleting an asset leaves its history rows in place
    asset_id = db.Column('assetId', db.String(64), index=True)
    employee_id = db.Column('employeeId', db.String(64), index=True)
    borrow_date = db.Column('borrowDate', db.String(10))
    expected_return_date = db.Column('expectedReturnDate', db.String(10), nullable=True)
    returned_date = db.Column('returnedDate', db.String(10), nullable=True)
    notes = db.Column(db.Text, nullable=True)
    is_active = db.Column('isActive', db.Boolean, default=True)
