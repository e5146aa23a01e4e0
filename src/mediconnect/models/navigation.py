"""Navigation models."""

from typing import Literal

from pydantic import BaseModel, Field

from mediconnect.models.identity import Role


class NavEntry(BaseModel):
    """A single navigation link."""

    label: str
    path: str
    # Actions with side effects (logout) are submitted rather than followed
    method: Literal["GET", "POST"] = "GET"


class NavigationMenu(BaseModel):
    """Everything the navigation bar shows for the current user."""

    primary: list[NavEntry] = Field(default_factory=list)
    account: list[NavEntry] = Field(default_factory=list)

    # Account badge
    display_name: str
    email: str
    role: Role | None = None
