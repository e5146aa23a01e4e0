"""Data-service record models (users, appointments, blood donation)."""

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


class BloodDonor(BaseModel):
    """Registered blood donor."""

    id: str | int | None = None
    user_id: str
    name: str
    blood_type: str
    dob: str
    phone: str
    address: str
    created_at: datetime | None = None


class BloodDonorCreate(BaseModel):
    """Request to register as a donor (user_id comes from the session)."""

    name: str
    blood_type: str
    dob: str
    phone: str
    address: str


class BloodDonation(BaseModel):
    """A scheduled blood donation."""

    id: str | int | None = None
    user_id: str
    center_id: int
    center_name: str
    date: str
    time: str
    created_at: datetime | None = None


class BloodDonationCreate(BaseModel):
    """Request to schedule a donation."""

    center_id: int
    center_name: str
    date: str
    time: str


class Appointment(BaseModel):
    """Consultation appointment, annotated with display names for the admin view."""

    id: str
    doctor_id: str | None = None
    patient_id: str | None = None
    date: str | None = None
    time: str | None = None
    type: str | None = None
    status: str | None = None
    doctor_name: str = "Unknown Doctor"
    patient_name: str = "Patient"

    @classmethod
    def from_row(
        cls,
        row: dict[str, Any],
        doctor_names: dict[str, str | None] | None = None,
    ) -> "Appointment":
        """Build from a table row, attaching display names.

        Ids are stringified since tables mix int and uuid keys.
        """
        doctor_id = row.get("doctor_id")
        patient_id = row.get("patient_id")
        doctor_name = (doctor_names or {}).get(str(doctor_id))
        return cls(
            **{
                **row,
                "id": str(row["id"]),
                "doctor_id": str(doctor_id) if doctor_id is not None else None,
                "patient_id": str(patient_id) if patient_id is not None else None,
                "doctor_name": doctor_name or "Unknown Doctor",
                "patient_name": "Patient",
            }
        )


class AnalyticsData(BaseModel):
    """Admin dashboard counters."""

    total_users: int = 0
    total_doctors: int = 0
    active_appointments: int = 0


class AdminOverview(BaseModel):
    """Admin back-office landing data."""

    analytics: AnalyticsData = Field(default_factory=AnalyticsData)
    appointments: list[Appointment] = Field(default_factory=list)


class UserStatus(str, Enum):
    ACTIVE = "Active"
    INACTIVE = "Inactive"


class UserRecord(BaseModel):
    """A row of the profiles table as managed from the admin back office."""

    id: str | int
    name: str | None = None
    email: str | None = None
    role: str | None = None
    status: UserStatus = UserStatus.ACTIVE


class UserCreate(BaseModel):
    """Admin request to add a user. Name and role are required."""

    name: str = ""
    email: str = ""
    role: str = "patient"
    status: UserStatus = UserStatus.ACTIVE

    def missing_fields(self) -> list[str]:
        return [field for field in ("name", "role") if not getattr(self, field).strip()]


class UserUpdate(BaseModel):
    """Admin request to change a user; only the fields set are written."""

    name: str | None = None
    email: str | None = None
    role: str | None = None
    status: UserStatus | None = None


class PatientRecords(BaseModel):
    """Appointments and blood donations shown on the profile page."""

    appointments: list[Appointment] = Field(default_factory=list)
    is_donor: bool = False
    donations: list[BloodDonation] = Field(default_factory=list)
