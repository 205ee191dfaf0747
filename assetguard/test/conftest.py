"""
Pytest configuration and fixtures
"""
import itertools
import os
import tempfile
from datetime import date

import pytest

# Keep test logs out of the working tree; must be set before the logger is first created
os.environ.setdefault('LOG_DIR', tempfile.mkdtemp(prefix='assetguard-logs-'))
os.environ.setdefault('LOG_LEVEL', 'WARNING')

from assetguard import create_app, db as _db  # noqa: E402
from assetguard.buisness.core.lifecycle_engine import AssetTracker  # noqa: E402
from assetguard.buisness.core.records import AssetStatus  # noqa: E402

TODAY = date(2024, 6, 1)


def _make_app(tmp_path, seed_demo_data=True):
    return create_app({
        'TESTING': True,
        'SQLALCHEMY_DATABASE_URI': f"sqlite:///{tmp_path / 'assetguard-test.db'}",
        'SEED_DEMO_DATA': seed_demo_data,
        'LOAD_ON_STARTUP': True,
    })


def _teardown(app):
    app.extensions['asset_tracker'].shutdown()
    with app.app_context():
        _db.engine.dispose()


@pytest.fixture(scope='function')
def app(tmp_path):
    """Flask application on a fresh SQLite file, seeded with the demo data"""
    app = _make_app(tmp_path)
    yield app
    _teardown(app)


@pytest.fixture(scope='function')
def empty_app(tmp_path):
    """Flask application on a fresh SQLite file with no demo data"""
    app = _make_app(tmp_path, seed_demo_data=False)
    yield app
    _teardown(app)


@pytest.fixture(scope='function')
def client(app):
    """Create Flask test client"""
    return app.test_client()


@pytest.fixture(scope='function')
def tracker(app):
    """The app's own tracker, loaded from the demo data"""
    return app.extensions['asset_tracker']


@pytest.fixture(scope='function')
def engine(app):
    """A loaded tracker with a fixed date and a deterministic id clock"""
    clock = itertools.count(1717200000000)
    tracker = AssetTracker(app, today=lambda: TODAY, clock_ms=lambda: next(clock))
    tracker.load()
    yield tracker
    tracker.shutdown()


@pytest.fixture(scope='function')
def reload_snapshot(app):
    """Return a function that drains pending writes and reloads a snapshot from the store"""
    def reload(source=None):
        if source is not None:
            assert source.drain(timeout=10), "durable writes did not finish"
        fresh = AssetTracker(app)
        fresh.load()
        fresh.shutdown()
        return fresh.snapshot()
    return reload


def check_assignment_invariants(snapshot):
    """Assigned <=> exactly one active assignment, and assignedTo matches it"""
    for asset in snapshot.assets:
        active = [a for a in snapshot.assignments if a.asset_id == asset.id and a.is_active]
        if asset.status == AssetStatus.ASSIGNED:
            assert len(active) == 1, f"{asset.id} is Assigned with {len(active)} active assignments"
            assert asset.assigned_to == active[0].employee_id
        else:
            assert not active, f"{asset.id} is {asset.status} but has an active assignment"
            assert asset.assigned_to is None
