"""Blood donation service: donor registration and donation scheduling."""

import logging

from mediconnect.db.client import DatabaseClient
from mediconnect.models.records import (
    BloodDonation,
    BloodDonationCreate,
    BloodDonor,
    BloodDonorCreate,
)
from mediconnect.services.notifier import Notifier, failure, success

logger = logging.getLogger(__name__)


class BloodDonationService:
    """Donor and donation operations for the signed-in user.

    Database failures are logged and answered with a neutral value so the
    page always renders.
    """

    def __init__(self, db: DatabaseClient, notifier: Notifier) -> None:
        self.db = db
        self._notify = notifier

    async def register_donor(self, user_id: str, donor: BloodDonorCreate) -> BloodDonor | None:
        """Register the user as a blood donor."""
        data = {"user_id": user_id, **donor.model_dump()}
        try:
            row = await self.db.insert_blood_donor(data)
        except Exception as e:
            logger.error(f"Error registering donor: {e}")
            self._notify(failure("Error", "Failed to register as donor"))
            return None

        if row is None:
            self._notify(failure("Error", "Failed to register as donor"))
            return None

        self._notify(success("Thank you!", "You are now registered as a blood donor."))
        return BloodDonor(**row)

    async def check_donor_status(self, user_id: str) -> bool:
        """Whether the user is already registered as a donor."""
        try:
            return await self.db.get_blood_donor_by_user(user_id) is not None
        except Exception as e:
            logger.error(f"Error checking donor status: {e}")
            return False

    async def schedule_donation(self, user_id: str, donation: BloodDonationCreate) -> bool:
        """Book a donation slot at a center."""
        data = {"user_id": user_id, **donation.model_dump()}
        try:
            await self.db.insert_blood_donation(data)
        except Exception as e:
            logger.error(f"Error scheduling donation: {e}")
            self._notify(failure("Error", "Failed to schedule donation"))
            return False

        self._notify(
            success(
                "Donation scheduled",
                f"See you at {donation.center_name} on {donation.date} at {donation.time}.",
            )
        )
        return True

    async def get_user_donations(self, user_id: str) -> list[BloodDonation]:
        """List the user's scheduled donations."""
        try:
            rows = await self.db.list_blood_donations(user_id)
        except Exception as e:
            logger.error(f"Error fetching user donations: {e}")
            return []
        return [BloodDonation(**row) for row in rows]
