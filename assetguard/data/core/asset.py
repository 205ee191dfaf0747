from assetguard.data.core.tracked_row_base import TrackedRowBase
from assetguard import db


class AssetRow(TrackedRowBase):
    __tablename__ = 'assets'

    tag = db.Column(db.String(64))
    name = db.Column(db.String(200))
    serial_number = db.Column('serialNumber', db.String(128))
    category = db.Column(db.String(100))
    vendor = db.Column(db.String(200))
    purchase_date = db.Column('purchaseDate', db.String(10))
    cost = db.Column(db.Float)
    status = db.Column(db.String(20))
    condition = db.Column(db.String(50))
    location = db.Column(db.String(200))
    assigned_to = db.Column('assignedTo', db.String(64), nullable=True)
    image = db.Column(db.Text, nullable=True)

    def __repr__(self):
        return f'<AssetRow {self.id} {self.name} ({self.status})>'
