"""
Entity repository loading, indexing and listeners
"""
from datetime import date

import pytest

from assetguard.buisness.core.entity_repository import (
    ASSETS, ASSIGNMENTS, EMPLOYEES, KINDS, MAINTENANCE_LOGS, REQUESTS, EntityRepository,
)
from assetguard.buisness.core.records import Assignment, Employee

E1 = Employee(id='E1', name='Sarah Connor', email='sarah@example.com', department='Engineering',
              role='Developer', join_date=date(2020, 3, 1))


def _assignment(assignment_id, asset_id, active=True):
    return Assignment(id=assignment_id, asset_id=asset_id, employee_id='E1',
                      borrow_date=date(2024, 1, 1), is_active=active)


def _readers(**overrides):
    readers = {kind: (lambda: []) for kind in KINDS}
    readers.update(overrides)
    return readers


def test_loading_until_load_completes():
    repository = EntityRepository()
    assert repository.loading
    repository.load(_readers())
    assert not repository.loading
    assert not repository.snapshot().loading


def test_one_failed_read_leaves_other_kinds_loaded():
    def broken():
        raise ConnectionError("employees table unreadable")

    repository = EntityRepository()
    counts = repository.load(_readers(
        employees=broken,
        assignments=lambda: [_assignment('ASG-1', 'A1')],
    ))

    assert not repository.loading
    assert counts[EMPLOYEES] == 0
    assert counts[ASSIGNMENTS] == 1
    assert repository.failed_kinds == frozenset({EMPLOYEES})
    assert repository.active_assignment_for('A1').id == 'ASG-1'


def test_adopt_repairs_failed_kind():
    def broken():
        raise OSError("boom")

    repository = EntityRepository()
    repository.load(_readers(employees=broken))

    adopted = repository.adopt(EMPLOYEES, [E1])

    assert adopted == ['E1']
    assert repository.get(EMPLOYEES, 'E1') == E1
    assert repository.failed_kinds == frozenset()


def test_active_index_follows_put():
    repository = EntityRepository()
    repository.load(_readers())

    repository.put(ASSIGNMENTS, _assignment('ASG-1', 'A1'))
    assert repository.active_assignment_for('A1').id == 'ASG-1'

    repository.put(ASSIGNMENTS, _assignment('ASG-1', 'A1', active=False))
    assert repository.active_assignment_for('A1') is None


def test_put_replaces_in_place():
    repository = EntityRepository()
    repository.load(_readers(assignments=lambda: [_assignment('ASG-1', 'A1'), _assignment('ASG-2', 'A2')]))

    repository.put(ASSIGNMENTS, _assignment('ASG-1', 'A1', active=False))

    assert [a.id for a in repository.all(ASSIGNMENTS)] == ['ASG-1', 'ASG-2']


def test_remove_unknown_returns_none():
    repository = EntityRepository()
    repository.load(_readers())
    assert repository.remove(ASSETS, 'missing') is None


def test_failing_listener_does_not_stop_others():
    repository = EntityRepository()
    seen = []

    def broken(snapshot):
        raise ValueError("listener bug")

    repository.subscribe(broken)
    repository.subscribe(seen.append)
    repository.load(_readers(requests=lambda: []))

    assert len(seen) == 1
    assert seen[0].requests == ()


@pytest.mark.parametrize('kind', [MAINTENANCE_LOGS, REQUESTS])
def test_get_none_id(kind):
    repository = EntityRepository()
    assert repository.get(kind, None) is None
