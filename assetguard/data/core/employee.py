from assetguard.data.core.tracked_row_base import TrackedRowBase
from assetguard import db


class EmployeeRow(TrackedRowBase):
    __tablename__ = 'employees'

    name = db.Column(db.String(200))
    email = db.Column(db.String(200))
    department = db.Column(db.String(100))
    role = db.Column(db.String(100))
    join_date = db.Column('joinDate', db.String(10))
    avatar = db.Column(db.Text, nullable=True)
