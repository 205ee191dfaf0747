#!/usr/bin/env python3
"""
Build orchestrator for AssetGuard
Creates the entity tables and seeds the demo dataset on an empty store
"""

from assetguard.data.core.persistent_store import PersistentStore
from assetguard.logger import get_logger

logger = get_logger("assetguard.build")


def build_database(seed_demo_data=True):
    """
    Create missing tables and, when asked, seed the demo data into an empty store.
    Must run inside an application context.

    Args:
        seed_demo_data (bool): Seed the demonstration dataset if no assets exist

    Returns:
        bool: True if demo data was inserted
    """
    logger.info(f"Building database (seed_demo_data={seed_demo_data})")
    seeded = PersistentStore().initialize(seed_demo_data=seed_demo_data)
    if seeded:
        logger.info("Database built with demo data")
    else:
        logger.info("Database built; existing data left untouched")
    return seeded
