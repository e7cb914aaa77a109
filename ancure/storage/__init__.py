"""Persistence for cycle configurations (device-local and account-scoped) and logs."""

from ancure.storage.base import CycleConfigurationStore, CycleLogStore
from ancure.storage.cloud import CloudCycleLogStore, CloudCycleStore
from ancure.storage.errors import StorageError, StorageUnavailableError
from ancure.storage.local import LocalCycleStore
from ancure.storage.migration import migrate_local_to_cloud

__all__ = [
    "CloudCycleLogStore",
    "CloudCycleStore",
    "CycleConfigurationStore",
    "CycleLogStore",
    "LocalCycleStore",
    "StorageError",
    "StorageUnavailableError",
    "migrate_local_to_cloud",
]
