"""
Asset Service
Presentation service for asset list and dashboard data.

Handles:
- Filtering the asset list by status, category and free text
- Dashboard counts per status, open maintenance and pending requests
"""

from typing import Dict, List, Optional

from assetguard.buisness.core.entity_repository import Snapshot
from assetguard.buisness.core.records import Asset, AssetStatus, MaintenanceStatus, RequestStatus


class AssetService:
    """
    Service for asset presentation data.

    Works on a repository Snapshot, never on the store.
    """

    @staticmethod
    def filter_assets(
        snapshot: Snapshot,
        status: Optional[str] = None,
        category: Optional[str] = None,
        search: Optional[str] = None,
    ) -> List[Asset]:
        """
        Filter the asset list.

        Args:
            snapshot: Repository snapshot
            status: Exact status match
            category: Category match, case-insensitive
            search: Partial match on name, tag or serial number, case-insensitive

        Returns:
            List of assets in repository order
        """
        assets = list(snapshot.assets)

        if status:
            assets = [asset for asset in assets if asset.status == status]

        if category:
            category = category.lower()
            assets = [asset for asset in assets if asset.category.lower() == category]

        if search:
            term = search.lower()
            assets = [
                asset for asset in assets
                if term in asset.name.lower()
                or term in asset.tag.lower()
                or term in asset.serial_number.lower()
            ]

        return assets

    @staticmethod
    def dashboard_counts(snapshot: Snapshot) -> Dict[str, int]:
        counts = {status: 0 for status in AssetStatus.ALL}
        for asset in snapshot.assets:
            counts[asset.status] = counts.get(asset.status, 0) + 1

        return {
            'total_assets': len(snapshot.assets),
            'available': counts[AssetStatus.AVAILABLE],
            'assigned': counts[AssetStatus.ASSIGNED],
            'in_repair': counts[AssetStatus.IN_REPAIR],
            'employees': len(snapshot.employees),
            'active_assignments': sum(1 for a in snapshot.assignments if a.is_active),
            'open_maintenance': sum(1 for log in snapshot.maintenance_logs if log.status != MaintenanceStatus.COMPLETED),
            'pending_requests': sum(1 for r in snapshot.requests if r.status == RequestStatus.PENDING),
            'total_value': round(sum(asset.cost for asset in snapshot.assets), 2),
        }
