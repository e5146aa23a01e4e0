"""Admin back-office data."""

import logging

from mediconnect.db.client import DatabaseClient
from mediconnect.models.records import (
    AdminOverview,
    AnalyticsData,
    Appointment,
    UserCreate,
    UserRecord,
    UserUpdate,
)
from mediconnect.services.notifier import Notifier, failure, success

logger = logging.getLogger(__name__)


class AdminDataService:
    """Aggregates users, doctors and appointments for the admin dashboard.

    User management reports every outcome as a notification; failures are
    logged and answered with ``None``/``False``.
    """

    def __init__(self, db: DatabaseClient, notifier: Notifier) -> None:
        self.db = db
        self._notify = notifier

    async def overview(self) -> AdminOverview:
        """Fetch dashboard counters and the annotated appointment list."""
        try:
            users = await self.db.list_profiles()
            doctors = await self.db.list_doctors()
            appointments = await self.db.list_appointments()
            doctor_names = {str(d["id"]): d.get("name") for d in doctors if "id" in d}
            annotated = [Appointment.from_row(row, doctor_names) for row in appointments]
        except Exception as e:
            logger.error(f"Error fetching admin data: {e}")
            self._notify(
                failure("Error", "An unexpected error occurred fetching admin data")
            )
            return AdminOverview()

        logger.debug(
            f"Admin overview: {len(users)} users, {len(doctors)} doctors, "
            f"{len(annotated)} appointments"
        )
        return AdminOverview(
            analytics=AnalyticsData(
                total_users=len(users),
                total_doctors=len(doctors),
                active_appointments=len(annotated),
            ),
            appointments=annotated,
        )

    # -------------------------------------------------------------------------
    # User management
    # -------------------------------------------------------------------------

    async def list_users(self) -> list[UserRecord]:
        try:
            rows = await self.db.list_profiles()
            return [UserRecord(**row) for row in rows]
        except Exception as e:
            logger.error(f"Error fetching users: {e}")
            self._notify(failure("Error", "An unexpected error occurred fetching users"))
            return []

    async def add_user(self, user: UserCreate) -> UserRecord | None:
        """Add a user profile.

        Returns:
            The stored user, or None if fields were missing or the insert failed
        """
        missing = user.missing_fields()
        if missing:
            logger.warning(f"Refusing to add user, missing: {', '.join(missing)}")
            self._notify(
                failure("Missing Information", "Please fill in all required fields")
            )
            return None

        try:
            row = await self.db.insert_profile(user.model_dump(mode="json"))
            if row is None:
                raise ValueError("insert returned no row")
            created = UserRecord(**row)
        except Exception as e:
            logger.error(f"Error adding user: {e}")
            self._notify(failure("Error", "An unexpected error occurred adding the user"))
            return None

        self._notify(success("Success", "User added successfully"))
        return created

    async def update_user(self, user_id: str, changes: UserUpdate) -> bool:
        """Write the fields set on ``changes`` to the user's profile."""
        data = changes.model_dump(mode="json", exclude_none=True)
        if not data:
            self._notify(failure("Missing Information", "Nothing to update"))
            return False

        try:
            await self.db.update_profile(user_id, data)
        except Exception as e:
            logger.error(f"Error updating user {user_id}: {e}")
            self._notify(
                failure("Error", "An unexpected error occurred updating the user")
            )
            return False

        self._notify(success("Success", "User updated successfully"))
        return True

    async def delete_user(self, user_id: str) -> bool:
        try:
            await self.db.delete_profile(user_id)
        except Exception as e:
            logger.error(f"Error deleting user {user_id}: {e}")
            self._notify(
                failure("Error", "An unexpected error occurred deleting the user")
            )
            return False

        self._notify(success("Success", "User deleted successfully"))
        return True
