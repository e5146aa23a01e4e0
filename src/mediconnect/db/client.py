"""Supabase database client for platform records."""

import logging
import time
from typing import Any

from supabase import create_client, Client

from mediconnect.config import get_settings

logger = logging.getLogger(__name__)


def create_supabase_client() -> Client:
    """Create a Supabase client from settings."""
    settings = get_settings()
    return create_client(settings.supabase_url, settings.supabase_key)


class DatabaseClient:
    """Client for Supabase table operations."""

    def __init__(self, client: Client | None = None) -> None:
        self.client: Client = client if client is not None else create_supabase_client()

    # -------------------------------------------------------------------------
    # Admin back-office
    # -------------------------------------------------------------------------

    async def list_profiles(self) -> list[dict[str, Any]]:
        """List all user profiles."""
        result = self.client.table("profiles").select("*").execute()
        return result.data or []

    async def list_doctors(self) -> list[dict[str, Any]]:
        """List all doctors."""
        result = self.client.table("doctors").select("*").execute()
        return result.data or []

    async def list_appointments(self) -> list[dict[str, Any]]:
        """List appointments ordered by date."""
        result = self.client.table("appointments").select("*").order("date").execute()
        return result.data or []

    async def insert_profile(self, data: dict[str, Any]) -> dict[str, Any] | None:
        """Insert a profile row and return it."""
        result = self.client.table("profiles").insert(data).execute()
        if result.data:
            logger.debug(f"Added profile {result.data[0].get('id')}")
            return result.data[0]
        return None

    async def update_profile(self, user_id: str, data: dict[str, Any]) -> None:
        """Update fields of a profile row."""
        self.client.table("profiles").update(data).eq("id", user_id).execute()
        logger.debug(f"Updated profile {user_id}: {sorted(data)}")

    async def delete_profile(self, user_id: str) -> None:
        """Delete a profile row."""
        self.client.table("profiles").delete().eq("id", user_id).execute()
        logger.debug(f"Deleted profile {user_id}")

    # -------------------------------------------------------------------------
    # Patient records
    # -------------------------------------------------------------------------

    async def list_patient_appointments(self, patient_id: str) -> list[dict[str, Any]]:
        """List a patient's appointments ordered by date."""
        result = (
            self.client.table("appointments")
            .select("*")
            .eq("patient_id", patient_id)
            .order("date")
            .execute()
        )
        return result.data or []

    # -------------------------------------------------------------------------
    # Blood donation
    # -------------------------------------------------------------------------

    async def insert_blood_donor(self, data: dict[str, Any]) -> dict[str, Any] | None:
        """Insert a donor row and return it."""
        result = self.client.table("blood_donors").insert(data).execute()
        logger.debug(f"Registered blood donor for user {data.get('user_id')}")
        if result.data:
            return result.data[0]
        return None

    async def get_blood_donor_by_user(self, user_id: str) -> dict[str, Any] | None:
        """Get the donor row for a user, if registered."""
        result = (
            self.client.table("blood_donors")
            .select("id")
            .eq("user_id", user_id)
            .limit(1)
            .execute()
        )
        if result.data:
            return result.data[0]
        return None

    async def insert_blood_donation(self, data: dict[str, Any]) -> None:
        """Insert a scheduled donation."""
        self.client.table("blood_donations").insert(data).execute()
        logger.debug(
            f"Scheduled donation for user {data.get('user_id')} on {data.get('date')}"
        )

    async def list_blood_donations(self, user_id: str) -> list[dict[str, Any]]:
        """List a user's scheduled donations, soonest first."""
        result = (
            self.client.table("blood_donations")
            .select("*")
            .eq("user_id", user_id)
            .order("date")
            .execute()
        )
        return result.data or []

    # -------------------------------------------------------------------------
    # Health
    # -------------------------------------------------------------------------

    async def health_check(self) -> dict[str, Any]:
        """Check database connectivity and return health status.

        Returns:
            Dict with:
                - healthy: bool - whether the database is reachable
                - latency_ms: float - query latency in milliseconds
                - error: str | None - error message if unhealthy
        """
        start = time.perf_counter()
        try:
            self.client.table("profiles").select("id").limit(1).execute()
            latency_ms = (time.perf_counter() - start) * 1000
            return {
                "healthy": True,
                "latency_ms": round(latency_ms, 2),
                "error": None,
            }
        except Exception as e:
            latency_ms = (time.perf_counter() - start) * 1000
            logger.error(f"Database health check failed: {e}")
            return {
                "healthy": False,
                "latency_ms": round(latency_ms, 2),
                "error": str(e),
            }
