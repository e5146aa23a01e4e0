"""Database access for MediConnect."""

from mediconnect.db.client import DatabaseClient, create_supabase_client

__all__ = ["DatabaseClient", "create_supabase_client"]
