"""Tests for blood donation and admin data services."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from mediconnect.models.records import (
    BloodDonationCreate,
    BloodDonorCreate,
    UserCreate,
    UserUpdate,
)
from mediconnect.services.admin import AdminDataService
from mediconnect.services.blood_donation import BloodDonationService
from mediconnect.services.notifier import ToastFeed
from mediconnect.services.profile import ProfileService


@pytest.fixture
def mock_db():
    """Create a mock DatabaseClient."""
    return MagicMock()


@pytest.fixture
def feed() -> ToastFeed:
    return ToastFeed()


@pytest.fixture
def donor() -> BloodDonorCreate:
    return BloodDonorCreate(
        name="Asha",
        blood_type="O+",
        dob="1990-04-12",
        phone="9876543210",
        address="12 MG Road, Pune",
    )


# ---------------------------------------------------------------------------
# TestBloodDonationService
# ---------------------------------------------------------------------------

class TestBloodDonationService:
    @pytest.mark.asyncio
    async def test_register_donor(self, mock_db, feed, donor):
        mock_db.insert_blood_donor = AsyncMock(
            return_value={"id": "d1", "user_id": "u1", **donor.model_dump()}
        )
        service = BloodDonationService(mock_db, feed)

        result = await service.register_donor("u1", donor)

        assert result.id == "d1"
        assert result.user_id == "u1"
        mock_db.insert_blood_donor.assert_called_once_with({"user_id": "u1", **donor.model_dump()})

    @pytest.mark.asyncio
    async def test_register_donor_failure(self, mock_db, feed, donor):
        mock_db.insert_blood_donor = AsyncMock(side_effect=RuntimeError("insert failed"))
        service = BloodDonationService(mock_db, feed)

        assert await service.register_donor("u1", donor) is None
        assert feed.peek()[-1].description == "Failed to register as donor"

    @pytest.mark.asyncio
    async def test_check_donor_status(self, mock_db, feed):
        mock_db.get_blood_donor_by_user = AsyncMock(return_value={"id": "d1"})
        service = BloodDonationService(mock_db, feed)

        assert await service.check_donor_status("u1") is True

        mock_db.get_blood_donor_by_user = AsyncMock(return_value=None)
        assert await service.check_donor_status("u1") is False

    @pytest.mark.asyncio
    async def test_check_donor_status_error_is_false(self, mock_db, feed):
        mock_db.get_blood_donor_by_user = AsyncMock(side_effect=RuntimeError("down"))
        service = BloodDonationService(mock_db, feed)

        assert await service.check_donor_status("u1") is False

    @pytest.mark.asyncio
    async def test_schedule_donation(self, mock_db, feed):
        mock_db.insert_blood_donation = AsyncMock()
        service = BloodDonationService(mock_db, feed)
        donation = BloodDonationCreate(
            center_id=3, center_name="City Blood Bank", date="2026-11-02", time="10:00"
        )

        assert await service.schedule_donation("u1", donation) is True
        assert feed.peek()[-1].title == "Donation scheduled"

    @pytest.mark.asyncio
    async def test_schedule_donation_failure(self, mock_db, feed):
        mock_db.insert_blood_donation = AsyncMock(side_effect=RuntimeError("down"))
        service = BloodDonationService(mock_db, feed)
        donation = BloodDonationCreate(
            center_id=3, center_name="City Blood Bank", date="2026-11-02", time="10:00"
        )

        assert await service.schedule_donation("u1", donation) is False
        assert feed.peek()[-1].is_failure

    @pytest.mark.asyncio
    async def test_get_user_donations(self, mock_db, feed):
        mock_db.list_blood_donations = AsyncMock(return_value=[
            {"id": "x1", "user_id": "u1", "center_id": 1, "center_name": "A",
             "date": "2026-11-02", "time": "10:00"},
        ])
        service = BloodDonationService(mock_db, feed)

        donations = await service.get_user_donations("u1")

        assert [d.id for d in donations] == ["x1"]

    @pytest.mark.asyncio
    async def test_get_user_donations_error_is_empty(self, mock_db, feed):
        mock_db.list_blood_donations = AsyncMock(side_effect=RuntimeError("down"))
        service = BloodDonationService(mock_db, feed)

        assert await service.get_user_donations("u1") == []


# ---------------------------------------------------------------------------
# TestAdminDataService
# ---------------------------------------------------------------------------

class TestAdminDataService:
    @pytest.mark.asyncio
    async def test_overview_counts_and_annotates(self, mock_db, feed):
        mock_db.list_profiles = AsyncMock(return_value=[{"id": "u1"}, {"id": "u2"}])
        mock_db.list_doctors = AsyncMock(return_value=[{"id": 7, "name": "Dr. Rao"}])
        mock_db.list_appointments = AsyncMock(return_value=[
            {"id": "a1", "doctor_id": 7, "patient_id": "u1", "date": "2026-11-01"},
            {"id": "a2", "doctor_id": 99, "patient_id": "u2", "date": "2026-11-03"},
        ])
        service = AdminDataService(mock_db, feed)

        overview = await service.overview()

        assert overview.analytics.total_users == 2
        assert overview.analytics.total_doctors == 1
        assert overview.analytics.active_appointments == 2
        assert overview.appointments[0].doctor_name == "Dr. Rao"
        assert overview.appointments[1].doctor_name == "Unknown Doctor"
        assert overview.appointments[0].patient_name == "Patient"

    @pytest.mark.asyncio
    async def test_overview_failure_is_empty(self, mock_db, feed):
        mock_db.list_profiles = AsyncMock(side_effect=RuntimeError("down"))
        service = AdminDataService(mock_db, feed)

        overview = await service.overview()

        assert overview.analytics.total_users == 0
        assert overview.appointments == []
        assert feed.peek()[-1].is_failure

    @pytest.mark.asyncio
    async def test_add_user(self, mock_db, feed):
        mock_db.insert_profile = AsyncMock(return_value={"id": 12, "name": "Kiran", "role": "doctor"})
        service = AdminDataService(mock_db, feed)

        created = await service.add_user(UserCreate(name="Kiran", role="doctor"))

        assert created.id == 12
        assert [n.title for n in feed.peek()] == ["Success"]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("user", [UserCreate(role="doctor"), UserCreate(name="Kiran", role=" ")])
    async def test_add_user_missing_information(self, mock_db, feed, user):
        mock_db.insert_profile = AsyncMock()
        service = AdminDataService(mock_db, feed)

        assert await service.add_user(user) is None
        mock_db.insert_profile.assert_not_awaited()
        [notification] = feed.peek()
        assert notification.title == "Missing Information"
        assert notification.is_failure

    @pytest.mark.asyncio
    async def test_add_user_failure(self, mock_db, feed):
        mock_db.insert_profile = AsyncMock(side_effect=RuntimeError("duplicate key"))
        service = AdminDataService(mock_db, feed)

        assert await service.add_user(UserCreate(name="Kiran")) is None
        assert feed.peek()[-1].description == "An unexpected error occurred adding the user"

    @pytest.mark.asyncio
    async def test_update_user_sends_only_set_fields(self, mock_db, feed):
        mock_db.update_profile = AsyncMock()
        service = AdminDataService(mock_db, feed)

        assert await service.update_user("u1", UserUpdate(role="admin")) is True
        mock_db.update_profile.assert_awaited_once_with("u1", {"role": "admin"})
        assert [n.title for n in feed.peek()] == ["Success"]

    @pytest.mark.asyncio
    async def test_update_user_failure(self, mock_db, feed):
        mock_db.update_profile = AsyncMock(side_effect=RuntimeError("down"))
        service = AdminDataService(mock_db, feed)

        assert await service.update_user("u1", UserUpdate(name="X")) is False
        assert feed.peek()[-1].title == "Error"

    @pytest.mark.asyncio
    async def test_delete_user(self, mock_db, feed):
        mock_db.delete_profile = AsyncMock()
        service = AdminDataService(mock_db, feed)

        assert await service.delete_user("u1") is True
        assert feed.peek()[-1].description == "User deleted successfully"

    @pytest.mark.asyncio
    async def test_delete_user_failure(self, mock_db, feed):
        mock_db.delete_profile = AsyncMock(side_effect=RuntimeError("down"))
        service = AdminDataService(mock_db, feed)

        assert await service.delete_user("u1") is False
        assert feed.peek()[-1].is_failure


# ---------------------------------------------------------------------------
# TestProfileService
# ---------------------------------------------------------------------------

class TestProfileService:
    @pytest.mark.asyncio
    async def test_records_for_donor(self, mock_db, feed):
        mock_db.list_patient_appointments = AsyncMock(return_value=[
            {"id": 4, "doctor_id": 7, "patient_id": "u1", "date": "2026-11-01"},
        ])
        mock_db.list_doctors = AsyncMock(return_value=[{"id": 7, "name": "Dr. Rao"}])
        mock_db.get_blood_donor_by_user = AsyncMock(return_value={"id": "d1"})
        mock_db.list_blood_donations = AsyncMock(return_value=[{
            "id": 1,
            "user_id": "u1",
            "center_id": 1,
            "center_name": "City Hospital",
            "date": "2026-11-05",
            "time": "10:00",
        }])
        service = ProfileService(mock_db, BloodDonationService(mock_db, feed))

        records = await service.records("u1")

        assert records.appointments[0].id == "4"
        assert records.appointments[0].doctor_name == "Dr. Rao"
        assert records.is_donor is True
        assert records.donations[0].center_name == "City Hospital"

    @pytest.mark.asyncio
    async def test_records_for_non_donor(self, mock_db, feed):
        mock_db.list_patient_appointments = AsyncMock(return_value=[])
        mock_db.get_blood_donor_by_user = AsyncMock(return_value=None)
        mock_db.list_blood_donations = AsyncMock()
        service = ProfileService(mock_db, BloodDonationService(mock_db, feed))

        records = await service.records("u1")

        assert records.appointments == []
        assert records.is_donor is False
        assert records.donations == []
        mock_db.list_blood_donations.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_appointment_errors_are_empty(self, mock_db, feed):
        mock_db.list_patient_appointments = AsyncMock(side_effect=RuntimeError("down"))
        service = ProfileService(mock_db, BloodDonationService(mock_db, feed))

        assert await service.get_appointments("u1") == []
