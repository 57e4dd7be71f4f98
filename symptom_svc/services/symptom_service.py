"""
Service layer for symptom records: the persistence gateway.

Mediates every read and write between the in-memory record list, the remote
store and the local cache under one policy: the remote store is authoritative
when reachable, the local cache is the fallback, and every successful remote
read or write is mirrored to the cache before control returns to the caller.

Architecture:
    API Layer (routers) → SymptomService → SupabaseClient (remote)
                                         → LocalCache (mirror)

Dependency Injection:
    SymptomService receives its store client and cache via constructor
    injection. One instance lives for the whole application lifetime; use
    core.dependencies.get_symptom_service() in routers with Depends().
"""
import json
import logging
from typing import Any, Dict, List, Mapping, Optional

from pydantic import ValidationError

from symptom_svc.core.datetime_utils import (
    format_iso_millis,
    local_time_hhmm,
    local_today,
    utc_now,
)
from symptom_svc.core.exceptions import (
    CONNECTION_FAILED,
    DELETE_FAILED,
    LOAD_FAILED,
    SAVE_FAILED,
    USER_SETUP_FAILED,
    CacheCorruptError,
    CacheUnavailableError,
    ErrorCondition,
    RecordValidationError,
    RemoteUnavailableError,
    SymptomTrackerError,
)
from symptom_svc.schemas.session import ConnectionStatus
from symptom_svc.schemas.symptom import (
    BOOLEAN_FIELD,
    INTEGER_FIELDS,
    STRING_FIELDS,
    SymptomRecord,
)
from symptom_svc.services.sanitizer import sanitize_record
from symptom_svc.storage.local_cache import CURRENT_USER_KEY, records_key

logger = logging.getLogger(__name__)

SOURCE_REMOTE = "remote"
SOURCE_CACHE = "cache"
SOURCE_NONE = "none"


class SymptomService:
    """
    Persistence gateway for one user's symptom records.

    State:
        records: In-memory list, most recent first.
        user_name: Currently bound user, or None.
        connection_status: testing → connected/offline, then either way on re-probe.
        error: Current user-visible ErrorCondition, or None.
    """

    def __init__(self, store_client, local_cache):
        """
        Initialize the gateway.

        Args:
            store_client: Remote store client (SupabaseClient or compatible).
            local_cache: Key-value cache with get/set/remove (LocalCache or compatible).
        """
        self._store = store_client
        self._cache = local_cache

        self.records: List[Dict[str, Any]] = []
        self.user_name: Optional[str] = None
        self.connection_status = ConnectionStatus.testing
        self.error: Optional[ErrorCondition] = None
        self.last_load_source = SOURCE_NONE

    # =========================================================================
    # CACHE ACCESS (failures degrade to no-ops)
    # =========================================================================

    def _cache_get(self, key: str) -> Optional[str]:
        try:
            return self._cache.get(key)
        except CacheUnavailableError as e:
            logger.warning(f"Local cache read failed, ignoring: {e.detail}")
            return None

    def _cache_set(self, key: str, value: str) -> None:
        try:
            self._cache.set(key, value)
        except CacheUnavailableError as e:
            logger.warning(f"Local cache write failed, ignoring: {e.detail}")

    def _cache_remove(self, key: str) -> None:
        try:
            self._cache.remove(key)
        except CacheUnavailableError as e:
            logger.warning(f"Local cache remove failed, ignoring: {e.detail}")

    def _mirror(self, user_name: str, records: List[Dict[str, Any]]) -> None:
        """Overwrite the cache entry for a user with the given list."""
        self._cache_set(records_key(user_name), json.dumps(records, ensure_ascii=False))

    def _read_mirror(self, user_name: str) -> Optional[List[Dict[str, Any]]]:
        """Return the cached list for a user, or None when absent or corrupt."""
        raw = self._cache_get(records_key(user_name))
        if raw is None:
            return None
        try:
            return _parse_cached_records(raw)
        except CacheCorruptError as e:
            logger.warning(f"Ignoring cache entry for '{user_name}': {e.detail}")
            return None

    def _fail(self, exc: SymptomTrackerError) -> None:
        self.error = exc.to_condition()

    # =========================================================================
    # LIST / SAVE / DELETE
    # =========================================================================

    async def load_records(self, user_name: str) -> List[Dict[str, Any]]:
        """
        Load all records of a user, most recent first.

        Results are always mirrored to that user's own cache entry, but only
        a load for the bound user replaces the in-memory list. Loading some
        other user's records leaves the session untouched.

        On remote failure the error is recorded and the cache entry, if
        present and well-formed, is used instead. For the bound user with no
        usable cache entry the in-memory list is left as it was.

        Args:
            user_name: Non-empty user identifier.

        Returns:
            The loaded record list (the in-memory list for the bound user).

        Raises:
            RecordValidationError: If user_name is empty.
        """
        if not user_name:
            raise RecordValidationError(context=LOAD_FAILED, reason="user name is required")

        bound = user_name == self.user_name

        try:
            rows = await self._store.select_by_user(user_name)
        except RemoteUnavailableError as e:
            failure = RemoteUnavailableError(context=LOAD_FAILED, reason=e.reason)
            logger.warning(f"{failure.detail}; falling back to local cache for '{user_name}'")
            self._fail(failure)

            cached = self._read_mirror(user_name)
            if cached is None:
                self.last_load_source = SOURCE_NONE
                logger.warning(f"No usable cached records for '{user_name}'")
                return self.records if bound else []

            self.last_load_source = SOURCE_CACHE
            logger.info(f"Loaded {len(cached)} cached records for '{user_name}'")
            if bound:
                self.records = cached
            return cached

        records = list(rows)
        self.last_load_source = SOURCE_REMOTE
        self.error = None
        self._mirror(user_name, records)
        logger.info(f"Loaded {len(records)} records for '{user_name}'")
        if bound:
            self.records = records
        return records

    async def save_record(self, draft: Mapping[str, Any]) -> Dict[str, Any]:
        """
        Sanitize, stamp and insert a draft record.

        Args:
            draft: Loosely typed record as entered in the form.

        Returns:
            The stored record including its store-assigned id.

        Raises:
            RecordValidationError: If date/time are empty or no user is selected.
                No remote call is made.
            RemoteUnavailableError: If the insert fails. State is left unchanged.
        """
        if not draft.get("date") or not draft.get("time"):
            error = RecordValidationError(context=SAVE_FAILED, reason="date and time are required")
            self._fail(error)
            raise error
        if not self.user_name:
            error = RecordValidationError(context=SAVE_FAILED, reason="no user selected")
            self._fail(error)
            raise error

        record = sanitize_record(draft)
        record.pop("id", None)
        record["user_name"] = self.user_name
        record["created_at"] = format_iso_millis(utc_now())

        try:
            saved = await self._store.insert(record)
        except RemoteUnavailableError as e:
            error = RemoteUnavailableError(context=SAVE_FAILED, reason=e.reason)
            logger.error(error.detail)
            self._fail(error)
            raise error from e

        self.records = [saved, *self.records]
        self.error = None
        self._mirror(self.user_name, self.records)
        logger.info(f"Saved record {saved.get('id')} for '{self.user_name}'")
        return saved

    async def delete_record(self, record_id: Any) -> None:
        """
        Delete a record from the store, then from the list and the cache.

        Raises:
            RemoteUnavailableError: If the delete fails. State is left unchanged.
        """
        try:
            await self._store.delete(record_id)
        except RemoteUnavailableError as e:
            error = RemoteUnavailableError(context=DELETE_FAILED, reason=e.reason)
            logger.error(error.detail)
            self._fail(error)
            raise error from e

        target = str(record_id)
        self.records = [r for r in self.records if str(r.get("id")) != target]
        self.error = None
        if self.user_name:
            self._mirror(self.user_name, self.records)
        logger.info(f"Deleted record {record_id}")

    # =========================================================================
    # CONNECTION STATUS
    # =========================================================================

    async def test_connection(self) -> ConnectionStatus:
        """
        Probe the remote store and update connection_status.

        Returns:
            ConnectionStatus.connected or ConnectionStatus.offline.
        """
        try:
            await self._store.probe()
        except RemoteUnavailableError as e:
            failure = RemoteUnavailableError(context=CONNECTION_FAILED, reason=e.reason)
            logger.warning(failure.detail)
            self.connection_status = ConnectionStatus.offline
            self._fail(failure)
            return self.connection_status

        if self.error is not None and self.error.context == CONNECTION_FAILED:
            self.error = None
        self.connection_status = ConnectionStatus.connected
        logger.info("Remote store reachable")
        return self.connection_status

    async def check_store(self) -> ConnectionStatus:
        """Check the remote store without touching connection_status or error."""
        try:
            await self._store.probe()
        except RemoteUnavailableError as e:
            logger.warning(f"Readiness check failed: {e.detail}")
            return ConnectionStatus.offline
        return ConnectionStatus.connected

    # =========================================================================
    # SESSION
    # =========================================================================

    async def restore_user(self) -> Optional[str]:
        """Bind the user remembered in the cache, if any, and load their records."""
        saved_user = self._cache_get(CURRENT_USER_KEY)
        if not saved_user:
            return None
        self.user_name = saved_user
        await self.load_records(saved_user)
        return saved_user

    async def set_user(self, user_name: str) -> List[Dict[str, Any]]:
        """
        Select the user to log symptoms under and load their records.

        Raises:
            RecordValidationError: If the trimmed name is empty.
        """
        name = (user_name or "").strip()
        if not name:
            error = RecordValidationError(context=USER_SETUP_FAILED, reason="user name is required")
            self._fail(error)
            raise error

        self._cache_set(CURRENT_USER_KEY, name)
        self.user_name = name
        self.records = []
        return await self.load_records(name)

    def change_user(self) -> None:
        """Forget the selected user; the cached record mirrors are kept."""
        self._cache_remove(CURRENT_USER_KEY)
        self.user_name = None
        self.records = []
        self.error = None
        self.last_load_source = SOURCE_NONE

    def dismiss_error(self) -> None:
        self.error = None

    @staticmethod
    def new_draft() -> Dict[str, Any]:
        """Blank draft for a new episode, dated now."""
        draft: Dict[str, Any] = {"date": local_today(), "time": local_time_hhmm()}
        draft.update({field: "" for field in STRING_FIELDS})
        draft.update({field: None for field in INTEGER_FIELDS})
        draft[BOOLEAN_FIELD] = False
        return draft


def _parse_cached_records(raw: str) -> List[Dict[str, Any]]:
    """
    Parse a cached record mirror.

    Every item must sanitize into a valid SymptomRecord; one bad item makes
    the whole entry corrupt.

    Raises:
        CacheCorruptError: If the value is not a JSON list of well-formed records.
    """
    try:
        data = json.loads(raw)
    except ValueError as e:
        raise CacheCorruptError(reason=f"invalid JSON: {e}") from e
    if not isinstance(data, list) or not all(isinstance(item, dict) for item in data):
        raise CacheCorruptError(reason="expected a list of records")
    for index, item in enumerate(data):
        try:
            SymptomRecord.model_validate(sanitize_record(item))
        except ValidationError as e:
            raise CacheCorruptError(
                reason=f"record {index}: {e.error_count()} invalid field(s)"
            ) from e
    return data
