"""
Lifecycle engine operations against the demo dataset
"""
from dataclasses import replace
from datetime import date

import pytest

from assetguard.buisness.core.entity_repository import (
    ASSETS, ASSIGNMENTS, EMPLOYEES, MAINTENANCE_LOGS, REQUESTS,
)
from assetguard.buisness.core.errors import FieldFormatError
from assetguard.buisness.core.records import (
    Asset, AssetRequest, AssetStatus, Employee, MaintenanceLog, MaintenanceStatus, RequestStatus,
)
from assetguard.test.conftest import TODAY, check_assignment_invariants


def _asset(engine, asset_id):
    return engine.repository.get(ASSETS, asset_id)


def _active_for(engine, asset_id):
    return [a for a in engine.repository.all(ASSIGNMENTS) if a.asset_id == asset_id and a.is_active]


def test_demo_data_is_consistent(engine):
    check_assignment_invariants(engine.snapshot())
    assert not engine.loading


def test_assign_available_asset(engine):
    result = engine.assign_asset('A2', 'E1')

    asset = _asset(engine, 'A2')
    assert asset.status == AssetStatus.ASSIGNED
    assert asset.assigned_to == 'E1'

    [assignment] = _active_for(engine, 'A2')
    assert assignment.employee_id == 'E1'
    assert assignment.borrow_date == TODAY
    assert assignment.returned_date is None
    assert assignment.id.startswith('ASG-')

    assert result.complete
    assert [ref.entity_type for ref in result.created] == ['assignment']
    assert [(c.from_status, c.to_status) for c in result.changes] == [
        (AssetStatus.AVAILABLE, AssetStatus.ASSIGNED)
    ]
    check_assignment_invariants(engine.snapshot())


def test_assign_with_expected_return_date_string(engine):
    engine.assign_asset('A3', 'E2', expected_return_date='2024-07-01')
    [assignment] = _active_for(engine, 'A3')
    assert assignment.expected_return_date == date(2024, 7, 1)


def test_return_after_assign(engine):
    engine.assign_asset('A2', 'E1')
    [assignment] = _active_for(engine, 'A2')

    result = engine.return_asset('A2', notes='Screen fine')

    asset = _asset(engine, 'A2')
    assert asset.status == AssetStatus.AVAILABLE
    assert asset.assigned_to is None

    closed = engine.repository.get(ASSIGNMENTS, assignment.id)
    assert closed.is_active is False
    assert closed.returned_date == TODAY
    assert closed.notes == 'Screen fine'
    assert engine.repository.active_assignment_for('A2') is None
    assert result.complete
    check_assignment_invariants(engine.snapshot())


def test_return_without_active_assignment_still_frees_asset(engine):
    result = engine.return_asset('A3')

    assert _asset(engine, 'A3').status == AssetStatus.AVAILABLE
    assert [(s.entity_type, s.reason) for s in result.skipped] == [('assignment', 'no_active_assignment')]


def test_reassign_hands_over_active_assignment(engine):
    result = engine.assign_asset('A1', 'E2')

    active = _active_for(engine, 'A1')
    assert len(active) == 1
    assert active[0].employee_id == 'E2'

    previous = engine.repository.get(ASSIGNMENTS, 'ASG-1001')
    assert previous.is_active is False
    assert previous.returned_date == TODAY
    assert previous.notes == 'Reassigned to E2'
    assert _asset(engine, 'A1').assigned_to == 'E2'
    assert {ref.entity_id for ref in result.updated} == {'ASG-1001', 'A1'}
    check_assignment_invariants(engine.snapshot())


def test_assign_missing_asset_creates_assignment_only(engine):
    before = engine.snapshot().assets
    result = engine.assign_asset('NOPE', 'E1')

    assert engine.snapshot().assets == before
    assert len(_active_for(engine, 'NOPE')) == 1
    assert [(s.entity_type, s.entity_id) for s in result.skipped] == [('asset', 'NOPE')]
    assert not result.complete


def test_assign_to_unknown_employee_is_reported(engine):
    result = engine.assign_asset('A2', 'E404')
    assert _asset(engine, 'A2').assigned_to == 'E404'
    assert [ref.entity_id for ref in result.unresolved] == ['E404']


def test_assignment_ids_are_unique(engine):
    engine.assign_asset('A2', 'E1')
    engine.return_asset('A2')
    engine.assign_asset('A2', 'E2')
    ids = [a.id for a in engine.repository.all(ASSIGNMENTS)]
    assert len(ids) == len(set(ids))


def test_maintenance_then_complete(engine):
    log = MaintenanceLog(
        id='M-9001', asset_id='A3', description='Backlight flicker', vendor='Dell Support',
        cost=120.0, date=TODAY, status=MaintenanceStatus.IN_PROGRESS,
    )
    engine.add_maintenance_log(log)
    assert _asset(engine, 'A3').status == AssetStatus.IN_REPAIR

    result = engine.update_maintenance_log('M-9001', MaintenanceStatus.COMPLETED)

    assert _asset(engine, 'A3').status == AssetStatus.AVAILABLE
    assert engine.repository.get(MAINTENANCE_LOGS, 'M-9001').status == MaintenanceStatus.COMPLETED
    assert ('maintenance_log', MaintenanceStatus.IN_PROGRESS, MaintenanceStatus.COMPLETED) in [
        (c.entity_type, c.from_status, c.to_status) for c in result.changes
    ]


def test_maintenance_on_assigned_asset_keeps_assignment_open(engine):
    log = MaintenanceLog(
        id='M-9002', asset_id='A1', description='Keyboard replacement', vendor='Apple',
        cost=250.0, date=TODAY, status=MaintenanceStatus.IN_PROGRESS,
    )
    engine.add_maintenance_log(log)

    asset = _asset(engine, 'A1')
    assert asset.status == AssetStatus.IN_REPAIR
    assert asset.assigned_to is None
    assert engine.repository.active_assignment_for('A1').id == 'ASG-1001'

    engine.update_maintenance_log('M-9002', MaintenanceStatus.COMPLETED)
    # Completion does not restore the previous holder
    assert _asset(engine, 'A1').status == AssetStatus.AVAILABLE
    assert _asset(engine, 'A1').assigned_to is None


def test_update_unknown_log_is_noop(engine):
    before = engine.snapshot()
    result = engine.update_maintenance_log('M-0000', MaintenanceStatus.COMPLETED)
    assert engine.snapshot() == before
    assert not result.applied


def test_non_completed_status_leaves_asset_alone(engine):
    engine.update_maintenance_log('M-2001', 'Waiting for parts')
    assert _asset(engine, 'A5').status == AssetStatus.IN_REPAIR
    assert engine.repository.get(MAINTENANCE_LOGS, 'M-2001').status == 'Waiting for parts'


def test_create_and_approve_request(engine):
    request = AssetRequest(
        id='R-9001', employee_id='E2', category='Laptop', reason='New starter',
        request_date=TODAY, status=RequestStatus.PENDING,
    )
    engine.create_request(request)

    result = engine.approve_request('R-9001', 'A2')

    assert engine.repository.get(REQUESTS, 'R-9001').status == RequestStatus.APPROVED
    asset = _asset(engine, 'A2')
    assert asset.status == AssetStatus.ASSIGNED
    assert asset.assigned_to == 'E2'
    [assignment] = _active_for(engine, 'A2')
    assert assignment.employee_id == 'E2'
    assert result.complete
    check_assignment_invariants(engine.snapshot())


def test_reject_request_touches_nothing_else(engine):
    before = engine.snapshot()
    engine.reject_request('R-3002')
    after = engine.snapshot()

    assert engine.repository.get(REQUESTS, 'R-3002').status == RequestStatus.REJECTED
    assert after.assets == before.assets
    assert after.assignments == before.assignments


def test_approve_unknown_request_changes_nothing(engine):
    before = engine.snapshot()
    result = engine.approve_request('R-0000', 'A2')

    assert engine.snapshot() == before
    assert not result.applied
    assert [s.reason for s in result.skipped] == ['request_missing']


def test_decided_request_cannot_be_approved_again(engine):
    engine.reject_request('R-3001')
    before = engine.snapshot()

    result = engine.approve_request('R-3001', 'A2')

    assert engine.snapshot() == before
    assert [s.reason for s in result.skipped] == ['request_not_pending']


def test_candidate_assets_match_category_case_insensitively(engine):
    candidates = engine.candidate_assets('R-3001')
    assert [asset.id for asset in candidates] == ['A2', 'A6']
    assert engine.candidate_assets('R-0000') == []


def test_update_asset_is_idempotent(engine):
    updated = replace(_asset(engine, 'A3'), location='Lab 4', condition='Fair')
    engine.update_asset(updated)
    once = engine.snapshot()
    engine.update_asset(updated)
    assert engine.snapshot() == once


def test_update_unknown_asset_leaves_memory_but_writes(engine, reload_snapshot):
    ghost = replace(_asset(engine, 'A3'), id='A-GHOST')
    before = engine.snapshot()
    result = engine.update_asset(ghost)
    assert engine.snapshot() == before
    assert [(s.entity_type, s.reason) for s in result.skipped] == [('asset', 'asset_missing')]

    persisted = {a.id: a for a in reload_snapshot(engine).assets}
    assert persisted['A-GHOST'] == ghost
    assert engine.repository.get(ASSETS, 'A-GHOST') is None


def test_delete_unknown_asset_still_issues_delete(engine, reload_snapshot):
    before = engine.snapshot()
    result = engine.delete_asset('A-NONE')

    assert engine.snapshot() == before
    assert [(s.entity_type, s.reason) for s in result.skipped] == [('asset', 'asset_missing')]
    assert engine.drain(timeout=10)
    assert engine.write_failures == []
    assert {a.id for a in reload_snapshot(engine).assets} == {a.id for a in before.assets}


def test_delete_asset_leaves_history_dangling(engine):
    result = engine.delete_asset('A1')

    assert engine.repository.get(ASSETS, 'A1') is None
    assert engine.repository.get(ASSIGNMENTS, 'ASG-1001') is not None
    assert [ref.entity_id for ref in result.deleted] == ['A1']

    dangling = engine.find_dangling_references()
    assert ('assignment', 'ASG-1001', 'assetId', 'A1') in [
        (d.entity_type, d.entity_id, d.field, d.missing_id) for d in dangling
    ]


def test_create_employee_and_asset(engine):
    employee = Employee(
        id='E9', name='Dana Scully', email='dana.scully@example.com',
        department='Research', role='Analyst', join_date=TODAY,
    )
    asset = Asset(
        id='A9', tag='AG-0009', name='Surface Pro', serial_number='SP9-001', category='Tablet',
        vendor='Microsoft', purchase_date=TODAY, cost=1099.0, status=AssetStatus.AVAILABLE,
        condition='New', location='IT Storage',
    )
    engine.create_employee(employee)
    result = engine.create_asset(asset)

    assert engine.repository.get(EMPLOYEES, 'E9') == employee
    assert engine.repository.get(ASSETS, 'A9') == asset
    assert [ref.entity_id for ref in result.created] == ['A9']


def test_listeners_see_each_applied_operation(engine):
    seen = []
    unsubscribe = engine.subscribe(seen.append)
    engine.assign_asset('A2', 'E1')
    engine.approve_request('R-0000', 'A2')
    unsubscribe()
    engine.return_asset('A2')

    assert len(seen) == 1
    assert seen[0].assets != ()


def test_bad_expected_return_date_leaves_reassignment_unapplied(engine, reload_snapshot):
    before = engine.snapshot()

    with pytest.raises(FieldFormatError):
        engine.assign_asset('A1', 'E2', expected_return_date='not-a-date')

    assert engine.snapshot() == before
    assert engine.repository.active_assignment_for('A1').id == 'ASG-1001'
    check_assignment_invariants(engine.snapshot())
    persisted = {a.id: a for a in reload_snapshot(engine).assignments}
    assert persisted['ASG-1001'].is_active is True


def _pending_request(engine, request_id, category):
    engine.create_request(AssetRequest(
        id=request_id, employee_id='E2', category=category, reason='Needed for project',
        request_date=TODAY, status=RequestStatus.PENDING,
    ))


@pytest.mark.parametrize('request_category, asset_id', [
    ('Printer', 'A5'),   # In Repair
    ('Laptop', 'A1'),    # already lent to E1
    ('Laptop', 'A3'),    # a Monitor
    ('Laptop', 'A-NONE'),
])
def test_approve_with_non_candidate_asset_is_noop(engine, request_category, asset_id):
    _pending_request(engine, 'R-9100', request_category)
    before = engine.snapshot()

    result = engine.approve_request('R-9100', asset_id)

    assert engine.snapshot() == before
    assert engine.repository.get(REQUESTS, 'R-9100').status == RequestStatus.PENDING
    assert not result.applied
    assert [(s.entity_type, s.entity_id, s.reason) for s in result.skipped] == [
        ('asset', asset_id, 'asset_not_candidate')
    ]


def test_approve_matches_category_case_insensitively(engine):
    _pending_request(engine, 'R-9101', 'LAPTOP')
    result = engine.approve_request('R-9101', 'A6')
    assert result.complete
    assert _asset(engine, 'A6').assigned_to == 'E2'
