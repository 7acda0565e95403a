"""Tests for resource tracking and recharge."""

from __future__ import annotations

import pytest

from character_forge.core.exceptions import ValidationError
from character_forge.engine.resources import (
    can_use_resource,
    expected_resources,
    get_resource_uses,
    recharge_resources,
    recharges_on,
    refresh_resources,
    spend_resource,
)
from character_forge.models.character import AbilityScores, Character, ResourceTracker
from character_forge.models.enums import RechargeType


def _barbarian(level: int = 1, **kwargs) -> Character:
    character = Character(name="Grog", class_name="Barbarian", level=level, **kwargs)
    character.resources = refresh_resources(character)
    return character


class TestExpectedResources:
    """Tests for the expected tracker set."""

    def test_full_at_creation(self) -> None:
        trackers = expected_resources("Barbarian", 3, AbilityScores())

        assert [t.id for t in trackers] == ["rage"]
        assert trackers[0].max_uses == 3
        assert trackers[0].current_uses == 3

    def test_ability_scaled(self) -> None:
        trackers = expected_resources("Bard", 1, AbilityScores(charisma=16))
        assert trackers[0].max_uses == 3


class TestRefreshResources:
    """Tests for reconciling trackers with class and level."""

    def test_new_tracker_appended_full(self) -> None:
        character = _barbarian()
        assert get_resource_uses(character, "rage") == (2, 2)

    def test_existing_current_preserved(self) -> None:
        character = _barbarian(level=3)
        character.resources = [ResourceTracker(id="rage", name="Rage", max_uses=2, current_uses=1)]

        merged = refresh_resources(character)

        assert merged[0].max_uses == 3
        assert merged[0].current_uses == 1

    def test_current_clamped_to_new_max(self) -> None:
        """Losing a level clamps current uses to the lower maximum."""
        character = _barbarian(level=2)
        character.resources = [ResourceTracker(id="rage", name="Rage", max_uses=3, current_uses=3)]

        merged = refresh_resources(character)

        assert merged[0].max_uses == 2
        assert merged[0].current_uses == 2

    def test_unknown_trackers_kept(self) -> None:
        custom = ResourceTracker(id="lucky", name="Lucky", max_uses=3, current_uses=1)
        character = _barbarian(resources=[custom])

        merged = refresh_resources(character)

        assert [t.id for t in merged] == ["lucky", "rage"]
        assert merged[0].current_uses == 1

    def test_input_not_mutated(self) -> None:
        character = Character(name="Grog", class_name="Barbarian")
        refresh_resources(character)
        assert character.resources == []


class TestSpendResource:
    """Tests for spend_resource."""

    def test_spend(self) -> None:
        character = _barbarian()
        result = spend_resource(character, "rage")

        assert result.applied
        assert get_resource_uses(result.character, "rage") == (1, 2)
        assert get_resource_uses(character, "rage") == (2, 2)

    def test_exhausted_declined(self) -> None:
        character = spend_resource(spend_resource(_barbarian(), "rage").character, "rage").character

        result = spend_resource(character, "rage")

        assert not result.applied
        assert "Not enough uses" in result.reason
        assert get_resource_uses(result.character, "rage") == (0, 2)

    def test_missing_declined(self) -> None:
        result = spend_resource(_barbarian(), "ki")
        assert not result.applied

    def test_invalid_amount(self) -> None:
        with pytest.raises(ValidationError):
            spend_resource(_barbarian(), "rage", uses=0)

    def test_can_use(self) -> None:
        character = _barbarian()
        assert can_use_resource(character, "rage", 2)
        assert not can_use_resource(character, "rage", 3)
        assert not can_use_resource(character, "ki")


class TestRecharge:
    """Tests for recharge triggers."""

    def _fighter(self) -> Character:
        character = Character(name="Vex", class_name="Fighter", level=9)
        character.resources = [
            ResourceTracker(
                id="second-wind", name="Second Wind", max_uses=1, current_uses=0,
                recharge_type=RechargeType.SHORT_REST,
            ),
            ResourceTracker(
                id="indomitable", name="Indomitable", max_uses=1, current_uses=0,
                recharge_type=RechargeType.LONG_REST,
            ),
        ]
        return character

    def test_short_rest_only_short(self) -> None:
        result = recharge_resources(self._fighter(), RechargeType.SHORT_REST)

        assert get_resource_uses(result.character, "second-wind") == (1, 1)
        assert get_resource_uses(result.character, "indomitable") == (0, 1)

    def test_long_rest_restores_both(self) -> None:
        result = recharge_resources(self._fighter(), "long-rest")

        assert get_resource_uses(result.character, "second-wind") == (1, 1)
        assert get_resource_uses(result.character, "indomitable") == (1, 1)

    def test_recharges_on(self) -> None:
        tracker = ResourceTracker(
            id="x", name="X", max_uses=1, current_uses=0, recharge_type=RechargeType.NONE
        )
        assert not recharges_on(tracker, RechargeType.LONG_REST)

    @pytest.mark.parametrize("trigger", ["none", "dawn"])
    def test_invalid_trigger(self, trigger: str) -> None:
        with pytest.raises(ValidationError):
            recharge_resources(self._fighter(), trigger)
