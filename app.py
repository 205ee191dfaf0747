#!/usr/bin/env python3
"""
Run script for AssetGuard
"""

import argparse
import os
import sys

from dotenv import load_dotenv

# Load environment variables from .env file before the app reads them
load_dotenv()

from assetguard import create_app, get_tracker  # noqa: E402
from assetguard.build import build_database  # noqa: E402
from assetguard.logger import get_logger  # noqa: E402

logger = get_logger("assetguard.run")


def parse_arguments():
    parser = argparse.ArgumentParser(description='AssetGuard asset lifecycle tracker')
    parser.add_argument('--build-only', action='store_true',
                        help='Create tables (and seed demo data unless disabled), then exit')
    parser.add_argument('--no-demo-data', action='store_false', dest='seed_demo_data',
                        default=os.environ.get('SEED_DEMO_DATA', 'True').lower() in ('true', '1', 'yes', 'on'),
                        help='Do not seed the demonstration dataset into an empty store')
    return parser.parse_args()


if __name__ == '__main__':
    args = parse_arguments()

    if args.build_only:
        app = create_app({'LOAD_ON_STARTUP': False})
        with app.app_context():
            build_database(seed_demo_data=args.seed_demo_data)
        logger.info("Build completed. Exiting without starting web server.")
        sys.exit(0)

    app = create_app({'SEED_DEMO_DATA': args.seed_demo_data})

    debug_mode = os.environ.get('FLASK_DEBUG', 'False').lower() in ('true', '1', 'yes', 'on')
    use_reloader = os.environ.get('USE_RELOADER', 'False').lower() in ('true', '1', 'yes', 'on')
    host = os.environ.get('FLASK_HOST', '127.0.0.1')
    port = int(os.environ.get('FLASK_PORT', '5000'))

    if debug_mode:
        logger.warning("DEBUG MODE ENABLED - Do not use in production!")

    logger.info(f"Starting server on {host}:{port} (debug={debug_mode}, reloader={use_reloader})")
    try:
        app.run(debug=debug_mode, host=host, port=port, use_reloader=use_reloader)
    finally:
        with app.app_context():
            get_tracker().shutdown()
