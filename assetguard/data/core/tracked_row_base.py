from assetguard import db
from assetguard.buisness.core.data_insertion_mixin import DataInsertionMixin


class TrackedRowBase(db.Model, DataInsertionMixin):
    """Abstract base class for the five persisted entity tables.

    Primary keys are caller-assigned string tokens, never autoincrement.
    """

    __abstract__ = True

    id = db.Column(db.String(64), primary_key=True)

    def __repr__(self):
        return f'<{self.__class__.__name__} {self.id}>'
