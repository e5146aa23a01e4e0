"""Tests for role-conditional navigation."""

import pytest

from mediconnect.auth.navigation import navigation_for
from mediconnect.models.identity import Identity, Role


def paths(entries) -> list[str]:
    return [entry.path for entry in entries]


class TestNavigationFor:
    def test_guest_menu(self):
        menu = navigation_for(None)

        assert "/doctor-registration" in paths(menu.primary)
        assert "/doctor-panel" not in paths(menu.primary)
        assert "/admin" not in paths(menu.primary)
        assert paths(menu.account) == ["/login"]
        assert menu.display_name == "Guest User"
        assert menu.email == "Not logged in"
        assert menu.role is None

    @pytest.mark.parametrize(
        "role, for_doctors, doctor_panel, admin",
        [
            (Role.PATIENT, True, False, False),
            (Role.DOCTOR, False, True, False),
            (Role.ADMIN, True, False, True),
        ],
    )
    def test_role_links(self, role, for_doctors, doctor_panel, admin):
        menu = navigation_for(Identity(id="u1", email="a@example.com", role=role))
        primary = paths(menu.primary)

        assert ("/doctor-registration" in primary) is for_doctors
        assert ("/doctor-panel" in primary) is doctor_panel
        assert ("/admin" in primary) is admin

    def test_public_links_always_present(self):
        for identity in (None, Identity(id="u1", role=Role.ADMIN)):
            primary = paths(navigation_for(identity).primary)
            assert primary[:4] == ["/consultation", "/pharmacy", "/blood-donation", "/community"]

    def test_signed_in_account_badge(self):
        menu = navigation_for(Identity(id="u1", email="a@example.com", name="Asha"))

        assert menu.display_name == "Asha"
        assert menu.email == "a@example.com"
        assert menu.role == Role.PATIENT
        assert paths(menu.account) == ["/profile", "/auth/logout"]

    def test_logout_is_a_post_action(self):
        menu = navigation_for(Identity(id="u1", email="a@example.com"))

        methods = {entry.path: entry.method for entry in menu.account}
        assert methods == {"/profile": "GET", "/auth/logout": "POST"}

    def test_nameless_user_shows_placeholder(self):
        menu = navigation_for(Identity(id="u1", email="a@example.com"))

        assert menu.display_name == "User"
