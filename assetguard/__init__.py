from flask import Flask, current_app, has_app_context
from flask_sqlalchemy import SQLAlchemy
import os
from assetguard.logger import get_logger

# Initialize extensions
db = SQLAlchemy()

TRACKER_EXTENSION = 'asset_tracker'


def _env_flag(name, default):
    return os.environ.get(name, default).lower() in ('true', '1', 'yes', 'on')


def create_app(config_overrides=None):
    """
    Build the Flask application.

    Configuration comes from the environment (see generate_env.py), then from
    config_overrides. With LOAD_ON_STARTUP the tables are created, the demo
    data seeded when the store is empty and the tracker loaded before the
    app is returned.
    """
    from pathlib import Path

    app = Flask(__name__)

    logger = get_logger("assetguard")
    logger.info("Initializing Flask application")

    # Prefer an explicit DATABASE_URL env var; otherwise keep the SQLite file in instance/
    database_url = os.environ.get('DATABASE_URL')
    if not database_url:
        instance_dir = Path(__file__).parent.parent / 'instance'
        instance_dir.mkdir(parents=True, exist_ok=True)
        database_url = f"sqlite:///{str((instance_dir / 'assetguard.db').resolve())}"

    app.config['SQLALCHEMY_DATABASE_URI'] = database_url
    app.config['SQLALCHEMY_TRACK_MODIFICATIONS'] = False
    app.config['SEED_DEMO_DATA'] = _env_flag('SEED_DEMO_DATA', 'True')
    app.config['LOAD_ON_STARTUP'] = _env_flag('LOAD_ON_STARTUP', 'True')
    if config_overrides:
        app.config.update(config_overrides)

    logger.debug(f"Database configured: {app.config['SQLALCHEMY_DATABASE_URI'].split(':', 1)[0]}")

    db.init_app(app)

    from assetguard.buisness.core.lifecycle_engine import AssetTracker

    tracker = AssetTracker(app)
    app.extensions[TRACKER_EXTENSION] = tracker

    from assetguard.presentation.routes import api
    app.register_blueprint(api)

    if app.config['LOAD_ON_STARTUP']:
        from assetguard.build import build_database
        with app.app_context():
            build_database(seed_demo_data=app.config['SEED_DEMO_DATA'])
        counts = tracker.load()
        logger.info(f"Tracker loaded: {counts}")

    logger.info("Flask application initialization complete")
    return app


def get_tracker():
    """
    Return the AssetTracker of the current application.

    Raises:
        RuntimeError: Outside an application context, or if the app was not
            built by create_app()
    """
    if not has_app_context():
        raise RuntimeError("get_tracker() requires an application context")
    tracker = current_app.extensions.get(TRACKER_EXTENSION)
    if tracker is None:
        raise RuntimeError("No asset tracker registered on this application; use create_app()")
    return tracker
