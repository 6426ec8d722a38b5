# ABOUTME: Highlight-to-note synchronization package.
# ABOUTME: Exports the synchronizer, its modes and report, and the file-store abstraction.

from bookrise.sync.synchronizer import BookFailure, NoteSynchronizer, SyncMode, SyncReport
from bookrise.sync.vault import FileStore, LocalVault, VaultEntry

__all__ = [
    "BookFailure",
    "FileStore",
    "LocalVault",
    "NoteSynchronizer",
    "SyncMode",
    "SyncReport",
    "VaultEntry",
]
