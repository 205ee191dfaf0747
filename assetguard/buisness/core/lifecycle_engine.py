"""
Lifecycle Consistency Engine
Applies the business operations over the entity repository and mirrors them to the store.

Every operation follows the same shape:
1. Look up every entity the operation touches
2. Compute the next records and apply them to the repository (immediately visible)
3. Queue the durable writes on the DurableWriter; the caller never waits on them

Steps 1-3 run under the repository lock and never wait on the store. A
failed durable write does NOT roll back the in-memory transition: memory is
authoritative for the life of the process and the failure is reported on the
writer's error channel. This favours responsiveness over strict durability;
reconcile() is the on-demand repair path.

Referential misses (an id that is not in the repository) are not errors.
The missing side is skipped and reported on the OperationResult while every
found entity is still updated.
"""

from __future__ import annotations

import time
from dataclasses import replace
from datetime import date
from functools import partial
from typing import Any, Callable, List, Optional, Tuple, Union

from assetguard.buisness.core.durable_writer import DurableWriter, WriteFailure
from assetguard.buisness.core.entity_repository import (
    ASSETS, ASSIGNMENTS, EMPLOYEES, KINDS, MAINTENANCE_LOGS, RECORD_TYPES, REQUESTS,
    EntityRepository, Snapshot,
)
from assetguard.buisness.core.records import (
    Asset, AssetRequest, AssetStatus, Assignment, Employee, MaintenanceLog,
    MaintenanceStatus, RequestStatus, parse_date,
)
from assetguard.buisness.core.results import (
    DanglingReference, EntityRef, OperationResult, ReconcileReport, StatusChange,
)
from assetguard.buisness.core.state_machine import AssetStatusMachine, RequestStateMachine
from assetguard.data.core.persistent_store import PersistentStore
from assetguard.logger import get_logger

logger = get_logger("assetguard.buisness.lifecycle")


def _ref(record) -> EntityRef:
    return EntityRef(record.ENTITY_TYPE, record.id)


def _append_note(existing: Optional[str], note: str) -> str:
    return f"{existing} | {note}" if existing else note


def _is_candidate(request: AssetRequest, asset: Optional[Asset]) -> bool:
    return (
        asset is not None
        and asset.status == AssetStatus.AVAILABLE
        and asset.category.lower() == request.category.lower()
    )


class _Transition:
    """Result and queued writes of one operation."""

    def __init__(self, operation: str):
        self.result = OperationResult(operation)
        self.writes: List[Tuple[str, str, Any]] = []

    def save(self, kind: str, record) -> None:
        self.writes.append(('save', kind, record))

    def delete(self, kind: str, entity_id: str) -> None:
        self.writes.append(('delete', kind, entity_id))


class AssetTracker:
    """
    Application-scoped lifecycle engine.

    One instance is created per Flask app by create_app() and reached through
    assetguard.get_tracker(). It owns the EntityRepository (the runtime view)
    and the DurableWriter (the mirror to the PersistentStore).

    Args:
        app: Flask application used for store access app contexts
        store: PersistentStore (default: a new one)
        repository: EntityRepository (default: a new, still-loading one)
        writer: DurableWriter (default: one bound to app and store)
        today: Callable returning the current date
        clock_ms: Callable returning epoch milliseconds, used for assignment ids
    """

    def __init__(
        self,
        app,
        store: Optional[PersistentStore] = None,
        repository: Optional[EntityRepository] = None,
        writer: Optional[DurableWriter] = None,
        today: Optional[Callable[[], date]] = None,
        clock_ms: Optional[Callable[[], int]] = None,
    ):
        self._app = app
        self._store = store or PersistentStore()
        self._repository = repository or EntityRepository()
        self._writer = writer or DurableWriter(app, self._store)
        self._today = today or date.today
        self._clock_ms = clock_ms or (lambda: time.time_ns() // 1_000_000)

    # ========== Lifetime ==========

    @property
    def repository(self) -> EntityRepository:
        return self._repository

    @property
    def store(self) -> PersistentStore:
        return self._store

    @property
    def writer(self) -> DurableWriter:
        return self._writer

    @property
    def loading(self) -> bool:
        return self._repository.loading

    @property
    def write_failures(self) -> List[WriteFailure]:
        return self._writer.failures

    def load(self):
        """Load the repository from the store; see EntityRepository.load()."""
        readers = {kind: partial(self._read_all, kind) for kind in KINDS}
        return self._repository.load(readers)

    def _read_all(self, kind: str) -> List[Any]:
        with self._app.app_context():
            return self._store.table(kind).get_all()

    def drain(self, timeout: Optional[float] = None) -> bool:
        return self._writer.drain(timeout)

    def shutdown(self) -> None:
        self._writer.shutdown(wait_for_pending=True)

    # ========== Reads ==========

    def snapshot(self) -> Snapshot:
        return self._repository.snapshot()

    def subscribe(self, listener: Callable[[Snapshot], None]) -> Callable[[], None]:
        return self._repository.subscribe(listener)

    def candidate_assets(self, request_id: str) -> List[Asset]:
        """
        Assets an operator may pick when approving a request: Available, with a
        category equal to the request's, compared case-insensitively.
        """
        request = self._repository.get(REQUESTS, request_id)
        if request is None:
            return []
        return [asset for asset in self._repository.all(ASSETS) if _is_candidate(request, asset)]

    def find_dangling_references(self) -> List[DanglingReference]:
        """
        Report rows whose asset/employee ids no longer resolve.

        Deleting an asset never cascades, so history rows can point at
        missing ids. They are treated as absent at read time.
        """
        snapshot = self.snapshot()
        asset_ids = {asset.id for asset in snapshot.assets}
        employee_ids = {employee.id for employee in snapshot.employees}
        dangling: List[DanglingReference] = []

        def check(record, field_name, value, known):
            if value is not None and value not in known:
                dangling.append(DanglingReference(record.ENTITY_TYPE, record.id, field_name, value))

        for asset in snapshot.assets:
            check(asset, 'assignedTo', asset.assigned_to, employee_ids)
        for assignment in snapshot.assignments:
            check(assignment, 'assetId', assignment.asset_id, asset_ids)
            check(assignment, 'employeeId', assignment.employee_id, employee_ids)
        for log in snapshot.maintenance_logs:
            check(log, 'assetId', log.asset_id, asset_ids)
        for request in snapshot.requests:
            check(request, 'employeeId', request.employee_id, employee_ids)
        return dangling

    # ========== Asset and Employee Operations ==========

    def create_asset(self, asset: Asset) -> OperationResult:
        tx = _Transition('create_asset')
        with self._repository.lock:
            self._insert(tx, ASSETS, asset)
            self._submit(tx)
        return self._finish(tx)

    def update_asset(self, asset: Asset) -> OperationResult:
        """
        Replace the asset with the same id. An unknown id leaves memory
        untouched, but the write is still issued.
        """
        tx = _Transition('update_asset')
        with self._repository.lock:
            current = self._repository.get(ASSETS, asset.id)
            if current is None:
                tx.result.skip('asset', asset.id, 'asset_missing')
                tx.save(ASSETS, asset)
            else:
                self._apply_asset(tx, current, asset)
            self._submit(tx)
        return self._finish(tx)

    def delete_asset(self, asset_id: str) -> OperationResult:
        """Remove the asset. Assignments, logs and requests that reference it are kept."""
        tx = _Transition('delete_asset')
        with self._repository.lock:
            removed = self._repository.remove(ASSETS, asset_id)
            if removed is None:
                tx.result.skip('asset', asset_id, 'asset_missing')
            else:
                tx.result.deleted.append(_ref(removed))
            tx.delete(ASSETS, asset_id)
            self._submit(tx)
        return self._finish(tx)

    def create_employee(self, employee: Employee) -> OperationResult:
        tx = _Transition('create_employee')
        with self._repository.lock:
            self._insert(tx, EMPLOYEES, employee)
            self._submit(tx)
        return self._finish(tx)

    # ========== Assignment Operations ==========

    def assign_asset(
        self,
        asset_id: str,
        employee_id: str,
        expected_return_date: Union[date, str, None] = None,
    ) -> OperationResult:
        """
        Lend an asset to an employee.

        The Assignment is always created. The asset side is skipped when the
        asset id is unknown. An asset that is already out on loan has that
        loan closed first, so it never has two active assignments.
        """
        tx = _Transition('assign_asset')
        with self._repository.lock:
            self._assign(tx, asset_id, employee_id, expected_return_date)
            self._submit(tx)
        return self._finish(tx)

    def return_asset(self, asset_id: str, notes: Optional[str] = None) -> OperationResult:
        tx = _Transition('return_asset')
        with self._repository.lock:
            today = self._today()
            asset = self._repository.get(ASSETS, asset_id)
            active = self._repository.active_assignment_for(asset_id)

            if active is None:
                tx.result.skip('assignment', None, 'no_active_assignment')
            else:
                closed = replace(
                    active,
                    is_active=False,
                    returned_date=today,
                    notes=notes if notes is not None else active.notes,
                )
                self._replace(tx, ASSIGNMENTS, closed)

            if asset is None:
                tx.result.skip('asset', asset_id, 'asset_missing')
            else:
                self._apply_asset(tx, asset, replace(asset, status=AssetStatus.AVAILABLE, assigned_to=None))
            self._submit(tx)
        return self._finish(tx)

    # ========== Maintenance Operations ==========

    def add_maintenance_log(self, log: MaintenanceLog) -> OperationResult:
        """
        Record a service event and put the asset In Repair, whatever its
        previous status. An open assignment is left as it is.
        """
        tx = _Transition('add_maintenance_log')
        with self._repository.lock:
            asset = self._repository.get(ASSETS, log.asset_id)
            self._insert(tx, MAINTENANCE_LOGS, log)
            if asset is None:
                tx.result.skip('asset', log.asset_id, 'asset_missing')
            else:
                self._apply_asset(tx, asset, replace(asset, status=AssetStatus.IN_REPAIR, assigned_to=None))
            self._submit(tx)
        return self._finish(tx)

    def update_maintenance_log(self, log_id: str, status: str) -> OperationResult:
        """
        Set a log's status. Completing a log makes the asset Available, even if
        it was Assigned before the maintenance began.
        """
        tx = _Transition('update_maintenance_log')
        with self._repository.lock:
            log = self._repository.get(MAINTENANCE_LOGS, log_id)
            if log is None:
                tx.result.skip('maintenance_log', log_id, 'log_missing')
            else:
                asset = self._repository.get(ASSETS, log.asset_id)
                updated = replace(log, status=status)
                self._replace(tx, MAINTENANCE_LOGS, updated)
                if log.status != status:
                    tx.result.changes.append(StatusChange('maintenance_log', log.id, log.status, status))

                if status == MaintenanceStatus.COMPLETED:
                    if asset is None:
                        tx.result.skip('asset', log.asset_id, 'asset_missing')
                    else:
                        self._apply_asset(tx, asset, replace(asset, status=AssetStatus.AVAILABLE, assigned_to=None))
            self._submit(tx)
        return self._finish(tx)

    # ========== Request Operations ==========

    def create_request(self, request: AssetRequest) -> OperationResult:
        tx = _Transition('create_request')
        with self._repository.lock:
            self._insert(tx, REQUESTS, request)
            self._submit(tx)
        return self._finish(tx)

    def approve_request(self, request_id: str, asset_id: str) -> OperationResult:
        """
        Approve a pending request and lend the chosen asset to the requester.

        An unknown request id, a request that is no longer Pending, or an asset
        that is not one of candidate_assets() makes the whole operation a no-op.
        """
        tx = _Transition('approve_request')
        with self._repository.lock:
            request = self._check_pending(tx, request_id, RequestStatus.APPROVED)
            if request is not None and not _is_candidate(request, self._repository.get(ASSETS, asset_id)):
                tx.result.skip('asset', asset_id, 'asset_not_candidate')
            elif request is not None:
                approved = replace(request, status=RequestStatus.APPROVED)
                self._replace(tx, REQUESTS, approved, status_from=request.status)
                self._assign(tx, asset_id, request.employee_id)
            self._submit(tx)
        return self._finish(tx)

    def reject_request(self, request_id: str) -> OperationResult:
        tx = _Transition('reject_request')
        with self._repository.lock:
            request = self._check_pending(tx, request_id, RequestStatus.REJECTED)
            if request is not None:
                rejected = replace(request, status=RequestStatus.REJECTED)
                self._replace(tx, REQUESTS, rejected, status_from=request.status)
            self._submit(tx)
        return self._finish(tx)

    # ========== Consistency Repair ==========

    def reconcile(self) -> ReconcileReport:
        """
        Re-read the store and repair it from memory.

        - Records that differ from (or are missing in) the store are saved again
        - Persisted assets no longer in memory are deleted
        - Persisted rows of other kinds no longer in memory are reported as orphaned
        - Kinds whose startup read failed adopt the persisted rows they lack
        """
        self._writer.drain()
        persisted = {kind: {record.id: record for record in self._read_all(kind)} for kind in KINDS}

        report = ReconcileReport()
        tx = _Transition('reconcile')
        with self._repository.lock:
            failed = self._repository.failed_kinds
            for kind in KINDS:
                entity_type = RECORD_TYPES[kind].ENTITY_TYPE
                stored = persisted[kind]
                if kind in failed:
                    adopted = self._repository.adopt(kind, stored.values())
                    report.adopted.extend(EntityRef(entity_type, entity_id) for entity_id in adopted)

                in_memory = {record.id: record for record in self._repository.all(kind)}
                for entity_id, record in in_memory.items():
                    if stored.get(entity_id) != record:
                        tx.save(kind, record)
                        report.resaved.append(EntityRef(entity_type, entity_id))
                for entity_id in stored:
                    if entity_id in in_memory:
                        continue
                    if kind == ASSETS:
                        tx.delete(kind, entity_id)
                        report.deleted.append(EntityRef(entity_type, entity_id))
                    else:
                        report.orphaned.append(EntityRef(entity_type, entity_id))
            self._submit(tx)

        if report.adopted:
            self._repository.notify()
        logger.info(
            f"Reconcile: {len(report.resaved)} resaved, {len(report.deleted)} deleted, "
            f"{len(report.adopted)} adopted, {len(report.orphaned)} orphaned"
        )
        return report

    # ========== Internals ==========

    def _assign(self, tx: _Transition, asset_id: str, employee_id: str, expected_return_date=None) -> None:
        # Parsed before any put so a bad date leaves the repository untouched
        if expected_return_date is not None:
            expected_return_date = parse_date('assignment', 'expectedReturnDate', expected_return_date)
        today = self._today()
        asset = self._repository.get(ASSETS, asset_id)
        previous = self._repository.active_assignment_for(asset_id)
        if not self._repository.contains(EMPLOYEES, employee_id):
            tx.result.unresolved.append(EntityRef('employee', employee_id))

        if previous is not None:
            handed_over = replace(
                previous,
                is_active=False,
                returned_date=today,
                notes=_append_note(previous.notes, f"Reassigned to {employee_id}"),
            )
            self._replace(tx, ASSIGNMENTS, handed_over)

        assignment = Assignment(
            id=self._new_assignment_id(),
            asset_id=asset_id,
            employee_id=employee_id,
            borrow_date=today,
            is_active=True,
            expected_return_date=expected_return_date,
        )
        self._insert(tx, ASSIGNMENTS, assignment)

        if asset is None:
            tx.result.skip('asset', asset_id, 'asset_missing')
        else:
            self._apply_asset(tx, asset, replace(asset, status=AssetStatus.ASSIGNED, assigned_to=employee_id))

    def _check_pending(self, tx: _Transition, request_id: str, to_status: str) -> Optional[AssetRequest]:
        request = self._repository.get(REQUESTS, request_id)
        if request is None:
            tx.result.skip('request', request_id, 'request_missing')
            return None
        if not RequestStateMachine.can_transition(request.status, to_status):
            tx.result.skip('request', request_id, 'request_not_pending')
            return None
        return request

    def _new_assignment_id(self) -> str:
        stamp = self._clock_ms()
        while self._repository.contains(ASSIGNMENTS, f"ASG-{stamp}"):
            stamp += 1
        return f"ASG-{stamp}"

    def _insert(self, tx: _Transition, kind: str, record) -> None:
        if self._repository.contains(kind, record.id):
            logger.warning(f"{record.ENTITY_TYPE} {record.id} already exists; replacing it")
            tx.result.updated.append(_ref(record))
        else:
            tx.result.created.append(_ref(record))
        self._repository.put(kind, record)
        tx.save(kind, record)

    def _replace(self, tx: _Transition, kind: str, record, status_from: Optional[str] = None) -> None:
        self._repository.put(kind, record)
        tx.result.updated.append(_ref(record))
        if status_from is not None and status_from != record.status:
            tx.result.changes.append(StatusChange(record.ENTITY_TYPE, record.id, status_from, record.status))
        tx.save(kind, record)

    def _apply_asset(self, tx: _Transition, before: Asset, after: Asset) -> None:
        if not AssetStatusMachine.is_documented(before.status, after.status):
            logger.warning(f"Asset {after.id} moved {before.status} -> {after.status}, an undocumented transition")
        self._replace(tx, ASSETS, after, status_from=before.status)

    def _submit(self, tx: _Transition) -> None:
        # Called with the repository lock held so writes for one id are queued in transition order
        for action, kind, payload in tx.writes:
            if action == 'save':
                self._writer.save(kind, payload)
            else:
                self._writer.delete(kind, payload)

    def _finish(self, tx: _Transition) -> OperationResult:
        result = tx.result
        if result.skipped:
            logger.info(f"{result.operation}: skipped {[(s.entity_type, s.entity_id, s.reason) for s in result.skipped]}")
        logger.debug(
            f"{result.operation}: created={len(result.created)} updated={len(result.updated)} "
            f"deleted={len(result.deleted)} writes={len(tx.writes)}"
        )
        if result.applied:
            self._repository.notify()
        return result
