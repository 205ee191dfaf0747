"""
Request Service
Splits requests into the pending queue and the decided history.
"""

from typing import Dict, List

from assetguard.buisness.core.entity_repository import Snapshot
from assetguard.buisness.core.records import AssetRequest, RequestStatus


class RequestService:

    @staticmethod
    def pending(snapshot: Snapshot) -> List[AssetRequest]:
        return [r for r in snapshot.requests if r.status == RequestStatus.PENDING]

    @staticmethod
    def history(snapshot: Snapshot) -> List[AssetRequest]:
        return [r for r in snapshot.requests if r.status != RequestStatus.PENDING]

    @classmethod
    def split(cls, snapshot: Snapshot) -> Dict[str, List[AssetRequest]]:
        return {'pending': cls.pending(snapshot), 'history': cls.history(snapshot)}
