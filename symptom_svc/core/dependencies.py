"""
FastAPI Dependency Injection configuration for the Symptom Tracker service.

Architecture Flow:
    API Layer (Routers)
         ↓ Depends()
    SymptomService (persistence gateway, one per application lifetime)
         ↓ Injected
    SupabaseClient (remote store)  +  LocalCache (SQLite mirror)

Usage in Routers:
    from symptom_svc.core.dependencies import get_symptom_service

    @router.post("/symptoms")
    async def create_symptom(
        draft: SymptomDraft,
        service: SymptomService = Depends(get_symptom_service)
    ):
        return await service.save_record(...)

Testing:
    app.dependency_overrides[get_symptom_service] = lambda: test_service
"""
import logging
from typing import Optional

from symptom_svc.core.config import settings

logger = logging.getLogger(__name__)

_local_cache_instance: Optional["LocalCache"] = None
_store_client_instance: Optional["SupabaseClient"] = None
_symptom_service_instance: Optional["SymptomService"] = None


def get_local_cache() -> "LocalCache":
    """
    Get the local cache instance (created once, on first use).

    Returns:
        LocalCache: SQLite-backed key-value cache at settings.cache_path.
    """
    global _local_cache_instance

    if _local_cache_instance is None:
        from symptom_svc.storage import LocalCache

        logger.info(f"Initializing local cache: {settings.cache_path}")
        _local_cache_instance = LocalCache(
            db_path=settings.cache_path,
            busy_timeout=settings.symptom_svc_cache_busy_timeout
        )

    return _local_cache_instance


def get_store_client() -> "SupabaseClient":
    """
    Get the remote store client.

    Returns:
        SupabaseClient: Client for the configured Supabase table.
    """
    global _store_client_instance

    if _store_client_instance is None:
        from symptom_svc.clients import SupabaseClient

        _store_client_instance = SupabaseClient(
            base_url=settings.supabase_url,
            api_key=settings.supabase_anon_key,
            table=settings.supabase_table,
            timeout=settings.supabase_timeout,
            probe_timeout=settings.connection_probe_timeout
        )

    return _store_client_instance


def get_symptom_service() -> "SymptomService":
    """
    Get the persistence gateway.

    The gateway holds the in-memory record list and the selected user, so a
    single instance is shared from application startup to shutdown.

    Returns:
        SymptomService: Gateway wired to the store client and local cache.
    """
    global _symptom_service_instance

    if _symptom_service_instance is None:
        from symptom_svc.services import SymptomService

        _symptom_service_instance = SymptomService(
            store_client=get_store_client(),
            local_cache=get_local_cache()
        )

    return _symptom_service_instance


def reset_dependencies() -> None:
    """
    Drop all cached instances (for testing only).
    """
    global _local_cache_instance, _store_client_instance, _symptom_service_instance
    _local_cache_instance = None
    _store_client_instance = None
    _symptom_service_instance = None
