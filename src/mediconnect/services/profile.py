"""Records shown on the signed-in user's profile page."""

import logging

from mediconnect.db.client import DatabaseClient
from mediconnect.models.records import Appointment, PatientRecords
from mediconnect.services.blood_donation import BloodDonationService

logger = logging.getLogger(__name__)


class ProfileService:
    """Collects a patient's appointments and, for donors, their donations."""

    def __init__(self, db: DatabaseClient, donations: BloodDonationService) -> None:
        self.db = db
        self.donations = donations

    async def get_appointments(self, user_id: str) -> list[Appointment]:
        try:
            rows = await self.db.list_patient_appointments(user_id)
            if not rows:
                return []
            doctors = await self.db.list_doctors()
            doctor_names = {str(d["id"]): d.get("name") for d in doctors if "id" in d}
            return [Appointment.from_row(row, doctor_names) for row in rows]
        except Exception as e:
            logger.error(f"Error fetching appointments for {user_id}: {e}")
            return []

    async def records(self, user_id: str) -> PatientRecords:
        """Appointments, plus donations when the user is a registered donor."""
        appointments = await self.get_appointments(user_id)
        is_donor = await self.donations.check_donor_status(user_id)
        donations = await self.donations.get_user_donations(user_id) if is_donor else []
        return PatientRecords(
            appointments=appointments,
            is_donor=is_donor,
            donations=donations,
        )
