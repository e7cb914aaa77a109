"""Move a guest's device data into their account after sign-in."""

from __future__ import annotations

import logging

from ancure.storage.base import CycleConfigurationStore
from ancure.storage.errors import StorageError

logger = logging.getLogger("ancure.storage.migration")


async def migrate_local_to_cloud(
    local: CycleConfigurationStore,
    cloud: CycleConfigurationStore,
    device_key: str,
    user_key: str,
) -> bool:
    """Copy the device configuration to the account, then clear the device copy.

    The device copy is only removed after the cloud write succeeded, so a
    failed migration loses nothing.  Failing to remove it afterwards does
    not undo the migration.

    Returns:
        True if a configuration was migrated, False if the device had none
        or the cloud write failed.
    """
    configuration = await local.load(device_key)
    if configuration is None:
        return False

    try:
        await cloud.save(user_key, configuration)
    except StorageError as exc:
        logger.warning("Migration to %s store deferred for user %s: %s", cloud.name, user_key, exc)
        return False

    logger.info("Migrated device cycle data to %s store for user %s", cloud.name, user_key)
    try:
        await local.delete(device_key)
    except StorageError as exc:
        # The account already holds the data
        logger.warning("Could not clear migrated device copy for user %s: %s", user_key, exc)
    return True
