"""
Entity Repository
The authoritative runtime view of the five entity kinds.

Handles:
- One combined startup load, the five reads running in parallel
- The composite `loading` flag
- Ordered id-keyed collections with synchronous snapshot reads
- The asset id -> active assignment id index
- Snapshot listeners notified after every mutation

The repository never talks to the store itself; the caller hands it one
reader callable per kind. Only the lifecycle engine mutates it.
"""

from __future__ import annotations

import threading
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Tuple

from assetguard.buisness.core.records import Asset, AssetRequest, Assignment, Employee, MaintenanceLog
from assetguard.logger import get_logger

logger = get_logger("assetguard.buisness.core.repository")

ASSETS = 'assets'
EMPLOYEES = 'employees'
ASSIGNMENTS = 'assignments'
MAINTENANCE_LOGS = 'maintenance_logs'
REQUESTS = 'requests'

KINDS = (ASSETS, EMPLOYEES, ASSIGNMENTS, MAINTENANCE_LOGS, REQUESTS)

RECORD_TYPES = {
    ASSETS: Asset,
    EMPLOYEES: Employee,
    ASSIGNMENTS: Assignment,
    MAINTENANCE_LOGS: MaintenanceLog,
    REQUESTS: AssetRequest,
}


@dataclass(frozen=True)
class Snapshot:
    """Full contents of the repository at one point in time."""
    assets: Tuple[Asset, ...]
    employees: Tuple[Employee, ...]
    assignments: Tuple[Assignment, ...]
    maintenance_logs: Tuple[MaintenanceLog, ...]
    requests: Tuple[AssetRequest, ...]
    loading: bool

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            kind: [record.to_row() for record in getattr(self, kind)]
            for kind in KINDS
        }
        data['loading'] = self.loading
        return data


class EntityRepository:
    """
    In-memory store for assets, employees, assignments, maintenance logs and requests.

    Collections are dicts keyed by id; Python dicts keep insertion order, and
    replacing a value keeps its position, which matches "replace the matching
    entry" semantics.
    """

    def __init__(self):
        self._collections: Dict[str, Dict[str, Any]] = {kind: {} for kind in KINDS}
        self._active_assignments: Dict[str, str] = {}
        self._loading = True
        self._failed_kinds: set = set()
        self._listeners: List[Callable[[Snapshot], None]] = []
        self._lock = threading.RLock()

    @property
    def lock(self) -> threading.RLock:
        """Guards every read-compute-apply sequence of the engine."""
        return self._lock

    @property
    def loading(self) -> bool:
        return self._loading

    @property
    def failed_kinds(self) -> frozenset:
        """Kinds whose startup read failed and therefore started empty."""
        return frozenset(self._failed_kinds)

    # ========== Loading ==========

    def load(self, readers: Mapping[str, Callable[[], Iterable[Any]]]) -> Dict[str, int]:
        """
        Load every kind from its reader, all five reads in parallel.

        A failing read is logged and leaves that kind empty; the other kinds
        still load. `loading` stays true until every read has settled.

        Args:
            readers: Mapping of kind name to a zero-argument callable returning records

        Returns:
            dict: Number of records loaded per kind
        """
        self._loading = True
        loaded: Dict[str, List[Any]] = {}
        failed = set()

        with ThreadPoolExecutor(max_workers=len(KINDS), thread_name_prefix='repository-load') as pool:
            futures = {kind: pool.submit(readers[kind]) for kind in KINDS}
            for kind, future in futures.items():
                try:
                    loaded[kind] = list(future.result())
                except Exception as e:
                    logger.error(f"Failed to load {kind}, starting with an empty collection: {e}", exc_info=True)
                    loaded[kind] = []
                    failed.add(kind)

        with self._lock:
            for kind in KINDS:
                self._collections[kind] = {record.id: record for record in loaded[kind]}
            self._failed_kinds = failed
            self._rebuild_active_index()
            self._loading = False

        counts = {kind: len(loaded[kind]) for kind in KINDS}
        logger.info(f"Repository loaded: {counts}")
        self.notify()
        return counts

    def adopt(self, kind: str, records: Iterable[Any]) -> List[str]:
        """
        Add records for ids not yet in memory, leaving existing ids untouched.

        Used to repair a kind whose startup read failed. Returns adopted ids.
        """
        adopted = []
        with self._lock:
            collection = self._collections[kind]
            for record in records:
                if record.id not in collection:
                    collection[record.id] = record
                    adopted.append(record.id)
            if kind == ASSIGNMENTS and adopted:
                self._rebuild_active_index()
            self._failed_kinds.discard(kind)
        return adopted

    def _rebuild_active_index(self) -> None:
        self._active_assignments = {}
        for assignment in self._collections[ASSIGNMENTS].values():
            if not assignment.is_active:
                continue
            previous = self._active_assignments.get(assignment.asset_id)
            if previous is not None:
                logger.warning(
                    f"Asset {assignment.asset_id} has more than one active assignment "
                    f"({previous}, {assignment.id}); indexing the latest"
                )
            self._active_assignments[assignment.asset_id] = assignment.id

    # ========== Reads ==========

    def get(self, kind: str, entity_id: Optional[str]) -> Optional[Any]:
        if entity_id is None:
            return None
        with self._lock:
            return self._collections[kind].get(entity_id)

    def contains(self, kind: str, entity_id: Optional[str]) -> bool:
        return self.get(kind, entity_id) is not None

    def all(self, kind: str) -> Tuple[Any, ...]:
        with self._lock:
            return tuple(self._collections[kind].values())

    def active_assignment_for(self, asset_id: str) -> Optional[Assignment]:
        """Return the active assignment of an asset, if any."""
        with self._lock:
            assignment_id = self._active_assignments.get(asset_id)
            if assignment_id is None:
                return None
            return self._collections[ASSIGNMENTS].get(assignment_id)

    def snapshot(self) -> Snapshot:
        with self._lock:
            return Snapshot(
                assets=tuple(self._collections[ASSETS].values()),
                employees=tuple(self._collections[EMPLOYEES].values()),
                assignments=tuple(self._collections[ASSIGNMENTS].values()),
                maintenance_logs=tuple(self._collections[MAINTENANCE_LOGS].values()),
                requests=tuple(self._collections[REQUESTS].values()),
                loading=self._loading,
            )

    # ========== Mutations (engine only) ==========

    def put(self, kind: str, record: Any) -> None:
        """Insert a record, or replace the one with the same id in place."""
        with self._lock:
            self._collections[kind][record.id] = record
            if kind == ASSIGNMENTS:
                self._index_assignment(record)

    def remove(self, kind: str, entity_id: str) -> Optional[Any]:
        with self._lock:
            return self._collections[kind].pop(entity_id, None)

    def _index_assignment(self, assignment: Assignment) -> None:
        if assignment.is_active:
            self._active_assignments[assignment.asset_id] = assignment.id
        elif self._active_assignments.get(assignment.asset_id) == assignment.id:
            del self._active_assignments[assignment.asset_id]

    # ========== Listeners ==========

    def subscribe(self, listener: Callable[[Snapshot], None]) -> Callable[[], None]:
        """
        Register a callable invoked with the new snapshot after every mutation.

        Returns:
            callable: Unsubscribe function
        """
        with self._lock:
            self._listeners.append(listener)

        def unsubscribe():
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe

    def notify(self) -> None:
        with self._lock:
            listeners = list(self._listeners)
        if not listeners:
            return
        snapshot = self.snapshot()
        for listener in listeners:
            try:
                listener(snapshot)
            except Exception as e:
                logger.error(f"Snapshot listener {listener!r} failed: {e}", exc_info=True)
