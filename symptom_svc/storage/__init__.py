"""
Local storage layer.
"""
from symptom_svc.storage.local_cache import (
    CURRENT_USER_KEY,
    RECORDS_KEY_PREFIX,
    LocalCache,
    records_key,
)

__all__ = [
    "CURRENT_USER_KEY",
    "RECORDS_KEY_PREFIX",
    "LocalCache",
    "records_key",
]
