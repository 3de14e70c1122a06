"""Tests for the team profile service."""

import pytest

from scoresheet.exceptions import TeamValidationError
from scoresheet.services import InMemoryBackend, TeamService


@pytest.fixture
def service():
    return TeamService(InMemoryBackend())


def test_default_team_when_none_stored(service):
    team = service.get_team()
    assert team.name == "My Team"
    assert team.color == "#3b82f6"


def test_update_creates_then_updates(service):
    created = service.update_team(name="Shibuya FC", color="#EF4444")
    assert created.name == "Shibuya FC"
    assert created.color == "#ef4444"

    updated = service.update_team(color="#22c55e")
    assert updated.id == created.id
    assert updated.name == "Shibuya FC"
    assert service.get_team().color == "#22c55e"


def test_blank_name_falls_back_to_default(service):
    service.update_team(name="Shibuya FC")
    assert service.update_team(name="   ").name == "My Team"


@pytest.mark.parametrize("color", ["blue", "#12345", "#gggggg", ""])
def test_invalid_color_rejected(service, color):
    with pytest.raises(TeamValidationError):
        service.update_team(color=color)
