"""
Clients for external services.
"""
from symptom_svc.clients.supabase_client import SupabaseClient

__all__ = ["SupabaseClient"]
