class StorageError(Exception):
    """Raised when the backing table fails (connectivity, locking, bad SQL)."""
