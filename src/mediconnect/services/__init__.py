"""Services for MediConnect."""

from mediconnect.services.admin import AdminDataService
from mediconnect.services.blood_donation import BloodDonationService
from mediconnect.services.notifier import Notifier, ToastFeed
from mediconnect.services.profile import ProfileService

__all__ = [
    "AdminDataService",
    "BloodDonationService",
    "Notifier",
    "ProfileService",
    "ToastFeed",
]
