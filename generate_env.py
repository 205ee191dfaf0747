#!/usr/bin/env python3
"""
Environment Configuration Generator for AssetGuard

Writes a starter .env file with the database, startup and logging settings
read by assetguard.create_app() and app.py.

Usage:
    python generate_env.py              # Interactive mode
    python generate_env.py --force      # Overwrite existing .env
    python generate_env.py --dev        # Development mode (debug on, verbose logs)
"""

import argparse
import os
import shutil
import sys
from datetime import datetime
from pathlib import Path


class EnvGenerator:
    """Generate the .env configuration"""

    def __init__(self, dev_mode=False):
        self.dev_mode = dev_mode
        self.env_file = Path(__file__).parent / '.env'

    def _get_timestamp(self):
        return datetime.now().strftime("%Y-%m-%d %H:%M:%S")

    def generate_database_url(self):
        instance_db = (Path(__file__).parent / 'instance' / 'assetguard.db').resolve()
        return f"sqlite:///{instance_db}"

    def create_env_content(self):
        """
        Build the .env file content

        Returns:
            tuple: (content, settings) where settings holds the notable values
        """
        settings = {
            'database_url': self.generate_database_url(),
            'flask_debug': 'True' if self.dev_mode else 'False',
            'log_level': 'DEBUG' if self.dev_mode else 'INFO',
        }

        content = f"""# AssetGuard Environment Configuration
# Generated: {self._get_timestamp()}

# ============================================================================
# Flask Configuration
# ============================================================================

# WARNING: NEVER set FLASK_DEBUG to True in production!
FLASK_DEBUG={settings['flask_debug']}
USE_RELOADER=False

# Server host (0.0.0.0 = all interfaces, 127.0.0.1 = localhost only)
FLASK_HOST=127.0.0.1
FLASK_PORT=5000

# ============================================================================
# Storage and Startup
# ============================================================================

# SQLite (default) or any SQLAlchemy URL
DATABASE_URL={settings['database_url']}

# Seed the demonstration dataset when the assets table is empty
SEED_DEMO_DATA=True

# Build tables and load the tracker when the app is created
LOAD_ON_STARTUP=True

# ============================================================================
# Logging
# ============================================================================

LOG_DIR=logs
LOG_LEVEL={settings['log_level']}
"""
        return content, settings

    def file_exists(self):
        return self.env_file.exists()

    def create_backup(self):
        """Create backup of existing .env file"""
        if not self.file_exists():
            return None
        backup_path = self.env_file.parent / f'.env.backup.{self._get_timestamp().replace(":", "-").replace(" ", "_")}'
        shutil.copy2(self.env_file, backup_path)
        return backup_path

    def write_env_file(self, content):
        with open(self.env_file, 'w') as f:
            f.write(content)
        os.chmod(self.env_file, 0o600)

    def generate(self, force=False):
        """
        Generate .env file

        Args:
            force: Overwrite existing .env file without prompting
        """
        if self.file_exists() and not force:
            print(f"\nFile {self.env_file} already exists!")
            response = input("Do you want to overwrite it? (yes/no): ").lower().strip()
            if response not in ['yes', 'y']:
                print("Aborted. Existing .env file was not modified.")
                return False
            backup_path = self.create_backup()
            if backup_path:
                print(f"Backup created: {backup_path}")

        content, settings = self.create_env_content()
        self.write_env_file(content)
        print(f"Created: {self.env_file}")
        print(f"   Database: {settings['database_url']}")
        print(f"   Debug: {settings['flask_debug']}, log level: {settings['log_level']}")
        print("\nNext: python app.py")
        return True


def main():
    parser = argparse.ArgumentParser(description='Generate .env configuration for AssetGuard')
    parser.add_argument('--force', '-f', action='store_true',
                        help='Overwrite existing .env file without prompting')
    parser.add_argument('--dev', '-d', action='store_true',
                        help='Development mode: debug server and DEBUG log level')
    args = parser.parse_args()

    generator = EnvGenerator(dev_mode=args.dev)
    sys.exit(0 if generator.generate(force=args.force) else 1)


if __name__ == '__main__':
    main()
