"""Notification (toast) models."""

from datetime import datetime, UTC
from enum import Enum

from pydantic import BaseModel, Field


class NotificationVariant(str, Enum):
    """Visual weight of a notification."""

    DEFAULT = "default"
    DESTRUCTIVE = "destructive"  # Failures


class Notification(BaseModel):
    """A user-visible notification."""

    title: str
    description: str | None = None
    variant: NotificationVariant = NotificationVariant.DEFAULT
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    @property
    def is_failure(self) -> bool:
        return self.variant == NotificationVariant.DESTRUCTIVE
