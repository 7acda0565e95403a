"""Tests for the leveling state machine."""

from __future__ import annotations

import pytest

from character_forge.core.exceptions import ValidationError
from character_forge.engine.creation import create_character
from character_forge.engine.leveling import (
    apply_ability_score_improvement,
    choose_feat,
    choose_subclass,
    learn_cantrip,
    level_down,
    level_up,
    level_up_preview,
)
from character_forge.models.character import AbilityScores, Character, HitDice
from character_forge.models.enums import Ability, ChoiceType
from character_forge.models.progression import CLASS_HIT_DIE


def _fighter(level: int = 1, **kwargs) -> Character:
    return create_character(
        "Thorin",
        "Fighter",
        AbilityScores(strength=14, dexterity=16, constitution=14),
        level=level,
        **kwargs,
    )


def _choice_types(character: Character) -> list[ChoiceType]:
    return [choice.choice_type for choice in character.pending_choices]


class TestLevelUpPreview:
    """Tests for level_up_preview."""

    def test_next_level(self, sample_character: Character) -> None:
        plan = level_up_preview(sample_character)

        assert plan is not None
        assert plan.level == 2
        assert plan.features == ("Action Surge",)
        assert plan.hit_die == 10

    def test_none_at_max(self) -> None:
        assert level_up_preview(_fighter(level=20)) is None


class TestLevelUp:
    """Tests for level_up."""

    def test_average_hp(self, sample_character: Character) -> None:
        result = level_up(sample_character)
        character = result.character

        assert result.applied
        assert character.level == 2
        assert character.max_hit_points == 20
        assert character.hit_points == 20
        assert character.proficiency_bonus == 2
        assert (character.hit_dice.current, character.hit_dice.max, character.hit_dice.die_size) == (2, 2, 10)
        assert "Action Surge" in character.class_features
        assert character.get_resource("action-surge") is not None
        assert character.level_history[-1].hp_gained == 8
        assert "level 2" in result.reason

    def test_input_unchanged(self, sample_character: Character) -> None:
        level_up(sample_character)
        assert sample_character.level == 1
        assert sample_character.max_hit_points == 12

    def test_rolled_hp(self, sample_character: Character) -> None:
        character = level_up(sample_character, hp_roll=3).character

        assert character.max_hit_points == 17
        assert character.level_history[-1].hp_rolled == 3

    @pytest.mark.parametrize("hp_roll", [0, 11])
    def test_invalid_roll(self, sample_character: Character, hp_roll: int) -> None:
        with pytest.raises(ValidationError):
            level_up(sample_character, hp_roll=hp_roll)

    def test_heals_to_full(self, sample_character: Character) -> None:
        sample_character.hit_points = 3
        assert level_up(sample_character).character.hit_points == 20

    def test_spent_hit_dice_gain_one(self, sample_character: Character) -> None:
        sample_character.hit_dice = HitDice(current=0, max=1, die_size=10)
        character = level_up(sample_character).character

        assert (character.hit_dice.current, character.hit_dice.max) == (1, 2)

    def test_proficiency_bonus_step(self) -> None:
        character = level_up(_fighter(level=4)).character
        assert character.proficiency_bonus == 3

    def test_declined_at_max(self) -> None:
        character = _fighter(level=20)
        result = level_up(character)

        assert not result.applied
        assert not result
        assert "level 20" in result.reason
        assert result.character.id == character.id
        assert result.character.level == 20

    def test_asi_choice_surfaced(self) -> None:
        result = level_up(_fighter(level=3))

        assert [choice.choice_type for choice in result.pending_choices] == [
            ChoiceType.ABILITY_SCORE_IMPROVEMENT
        ]
        assert ChoiceType.ABILITY_SCORE_IMPROVEMENT in _choice_types(result.character)

    def test_subclass_choice_surfaced(self) -> None:
        result = level_up(_fighter(level=2))
        assert ChoiceType.SUBCLASS in _choice_types(result.character)

    def test_spell_slots_updated(self, sample_wizard: Character) -> None:
        character = level_up(sample_wizard).character
        assert character.spellcasting.spell_slots[:2] == [3, 0]

    def test_half_caster_slots_appear_at_two(self) -> None:
        paladin = create_character("Aria", "Paladin", AbilityScores(charisma=16))
        assert paladin.spellcasting.spell_slots == [0] * 9

        character = level_up(paladin).character

        assert character.spellcasting.ability == Ability.CHA
        assert character.spellcasting.spell_slots[0] == 2


class TestLevelingMonotonicity:
    """Max HP always rises and proficiency never falls on the way up."""

    @pytest.mark.parametrize("class_name", sorted(CLASS_HIT_DIE))
    def test_walk_to_twenty(self, class_name: str) -> None:
        character = create_character("Walker", class_name, AbilityScores(constitution=8))
        while character.level < 20:
            result = level_up(character)
            assert result.character.max_hit_points > character.max_hit_points
            assert result.character.proficiency_bonus >= character.proficiency_bonus
            character = result.character

        assert character.proficiency_bonus == 6
        assert character.hit_dice.max == 20


class TestLevelDown:
    """Tests for level_down."""

    @pytest.mark.parametrize("start", [1, 2, 5, 11, 19])
    def test_round_trip(self, start: int) -> None:
        before = _fighter(level=start)
        after = level_down(level_up(before, hp_roll=1).character).character

        assert after.level == before.level
        assert after.proficiency_bonus == before.proficiency_bonus
        assert after.max_hit_points == before.max_hit_points

    def test_round_trip_rolled_hp_wizard(self, sample_wizard: Character) -> None:
        up = level_up(sample_wizard, hp_roll=6).character
        down = level_down(up).character

        assert up.max_hit_points == sample_wizard.max_hit_points + 7
        assert down.max_hit_points == sample_wizard.max_hit_points

    def test_declined_at_one(self, sample_character: Character) -> None:
        result = level_down(sample_character)

        assert not result.applied
        assert "level 1" in result.reason
        assert result.character.level == 1

    def test_removes_features_of_abandoned_level(self) -> None:
        character = level_down(_fighter(level=2)).character

        assert "Action Surge" not in character.class_features
        assert "Second Wind" in character.class_features
        assert character.level_history == []

    def test_hit_dice_shrink(self) -> None:
        character = level_down(_fighter(level=3)).character
        assert (character.hit_dice.current, character.hit_dice.max) == (2, 2)

    def test_round_trip_with_spent_hit_dice(self) -> None:
        before = _fighter(level=3)
        before.hit_dice = HitDice(current=1, max=3, die_size=10)

        up = level_up(before).character
        down = level_down(up).character

        assert (up.hit_dice.current, up.hit_dice.max) == (2, 4)
        assert (down.hit_dice.current, down.hit_dice.max) == (1, 3)

    def test_no_hit_dice_left(self) -> None:
        character = _fighter(level=2)
        character.hit_dice = HitDice(current=0, max=2, die_size=10)

        reduced = level_down(character).character

        assert (reduced.hit_dice.current, reduced.hit_dice.max) == (0, 1)

    def test_legacy_character_without_history(self) -> None:
        character = Character(
            name="Old",
            class_name="Fighter",
            level=3,
            max_hit_points=28,
            hit_points=28,
            hit_dice=HitDice(current=3, max=3, die_size=10),
            class_features=["Second Wind", "Action Surge"],
        )

        result = level_down(character).character

        assert result.level == 2
        assert result.max_hit_points == 22
        assert result.hit_points == 22

    def test_hp_floor(self) -> None:
        character = Character(name="Frail", class_name="Barbarian", level=2, max_hit_points=3, hit_points=3)
        assert level_down(character).character.max_hit_points == 1

    def test_drops_pending_choices_above_new_level(self) -> None:
        character = _fighter(level=3)
        assert ChoiceType.SUBCLASS in _choice_types(character)

        reduced = level_down(character).character

        assert ChoiceType.SUBCLASS not in _choice_types(reduced)

    def test_clears_subclass_below_subclass_level(self) -> None:
        character = choose_subclass(_fighter(level=3), "Champion").character
        reduced = level_down(character).character

        assert reduced.subclass is None

    def test_spell_slots_and_used_clamped(self) -> None:
        wizard = create_character("Elara", "Wizard", AbilityScores(intelligence=16), level=4)
        wizard.spellcasting.used_spell_slots = [4, 3, 0, 0, 0, 0, 0, 0, 0]

        reduced = level_down(wizard).character

        assert reduced.spellcasting.spell_slots[:2] == [4, 2]
        assert reduced.spellcasting.used_spell_slots[:2] == [4, 2]


class TestAbilityScoreImprovement:
    """Tests for apply_ability_score_improvement."""

    def test_plus_two(self) -> None:
        result = apply_ability_score_improvement(_fighter(level=4), {Ability.STR: 2})

        assert result.applied
        assert result.character.abilities.strength == 16
        assert ChoiceType.ABILITY_SCORE_IMPROVEMENT not in _choice_types(result.character)
        assert "STR +2" in result.reason

    def test_split(self) -> None:
        character = apply_ability_score_improvement(
            _fighter(level=4), {Ability.STR: 1, Ability.CON: 1}
        ).character

        assert character.abilities.strength == 15
        assert character.abilities.constitution == 15

    @pytest.mark.parametrize(
        "increases",
        [{Ability.STR: 1}, {Ability.STR: 3}, {Ability.STR: 3, Ability.DEX: -1}],
    )
    def test_wrong_total(self, increases: dict[Ability, int]) -> None:
        with pytest.raises(ValidationError):
            apply_ability_score_improvement(_fighter(level=4), increases)

    def test_cap(self) -> None:
        character = _fighter(level=4)
        character.abilities.strength = 19

        with pytest.raises(ValidationError):
            apply_ability_score_improvement(character, {Ability.STR: 2})

    def test_declined_without_pending(self, sample_character: Character) -> None:
        result = apply_ability_score_improvement(sample_character, {Ability.STR: 2})

        assert not result.applied
        assert result.character.abilities.strength == 14

    def test_derived_stats_refreshed(self) -> None:
        character = apply_ability_score_improvement(_fighter(level=4), {Ability.DEX: 2}).character
        assert character.initiative == 4


class TestChooseFeat:
    """Tests for taking a feat in place of an ability score improvement."""

    def test_resolves_improvement(self) -> None:
        result = choose_feat(_fighter(level=4), "Great Weapon Master")
        character = result.character

        assert result.applied
        assert character.feats == ["Great Weapon Master"]
        assert character.feat_choices_by_level == {4: ["Great Weapon Master"]}
        assert ChoiceType.ABILITY_SCORE_IMPROVEMENT not in _choice_types(character)
        assert character.abilities.strength == 14

    def test_declined_without_pending(self, sample_character: Character) -> None:
        result = choose_feat(sample_character, "Alert")

        assert not result.applied
        assert result.character.feats == []

    def test_declined_when_already_taken(self) -> None:
        character = _fighter(level=6)
        character = choose_feat(character, "Alert").character

        result = choose_feat(character, "Alert")

        assert not result.applied
        assert "already has Alert" in result.reason

    @pytest.mark.parametrize("feat", ["", "   "])
    def test_blank(self, feat: str) -> None:
        with pytest.raises(ValidationError):
            choose_feat(_fighter(level=4), feat)

    def test_input_unchanged(self) -> None:
        character = _fighter(level=4)
        choose_feat(character, "Alert")

        assert character.feats == []
        assert ChoiceType.ABILITY_SCORE_IMPROVEMENT in _choice_types(character)

    def test_level_down_removes_feat(self) -> None:
        character = choose_feat(_fighter(level=4), "Tough").character

        reduced = level_down(character).character

        assert reduced.feats == []
        assert reduced.feat_choices_by_level == {}

    def test_level_down_keeps_earlier_feat(self) -> None:
        character = choose_feat(_fighter(level=4), "Tough").character
        character = level_up(level_up(character).character).character
        character = choose_feat(character, "Alert").character

        reduced = level_down(character).character

        assert reduced.feats == ["Tough"]
        assert reduced.feat_choices_by_level == {4: ["Tough"]}


class TestChooseSubclass:
    """Tests for choose_subclass."""

    def test_choose(self) -> None:
        result = choose_subclass(_fighter(level=3), "Champion")

        assert result.applied
        assert result.character.subclass == "Champion"
        assert ChoiceType.SUBCLASS not in _choice_types(result.character)

    def test_blank(self) -> None:
        with pytest.raises(ValidationError):
            choose_subclass(_fighter(level=3), "  ")

    def test_too_early(self, sample_character: Character) -> None:
        result = choose_subclass(sample_character, "Champion")

        assert not result.applied
        assert "level 3" in result.reason

    def test_already_chosen(self) -> None:
        character = choose_subclass(_fighter(level=3), "Champion").character
        assert not choose_subclass(character, "Battle Master").applied

    def test_legacy_edition_cleric_at_one(self) -> None:
        cleric = create_character("Brother", "Cleric", edition="2014")
        assert ChoiceType.SUBCLASS in _choice_types(cleric)

        assert choose_subclass(cleric, "Life Domain").applied

    def test_third_caster_gains_spellcasting(self) -> None:
        character = choose_subclass(_fighter(level=3), "Eldritch Knight").character

        assert character.spellcasting is not None
        assert character.spellcasting.ability == Ability.INT
        assert character.spellcasting.spell_slots[0] == 2

    def test_third_caster_loses_spellcasting_on_level_down(self) -> None:
        character = choose_subclass(_fighter(level=3), "Eldritch Knight").character
        reduced = level_down(character).character

        assert reduced.subclass is None
        assert reduced.spellcasting is None


class TestLearnCantrip:
    """Tests for learn_cantrip and its reversal."""

    def test_learn(self, sample_wizard: Character) -> None:
        result = learn_cantrip(sample_wizard, "Fire Bolt")
        spellcasting = result.character.spellcasting

        assert result.applied
        assert spellcasting.cantrips_known == ["Fire Bolt"]
        assert spellcasting.cantrip_choices_by_level == {1: ["Fire Bolt"]}
        assert result.character.pending_choices[0].count == 2

    def test_last_pick_resolves_choice(self, sample_wizard: Character) -> None:
        character = sample_wizard
        for cantrip in ("Fire Bolt", "Mage Hand", "Light"):
            character = learn_cantrip(character, cantrip).character

        assert ChoiceType.CANTRIP not in _choice_types(character)
        assert not learn_cantrip(character, "Prestidigitation").applied

    def test_duplicate_declined(self, sample_wizard: Character) -> None:
        character = learn_cantrip(sample_wizard, "Fire Bolt").character
        result = learn_cantrip(character, "Fire Bolt")

        assert not result.applied
        assert "already known" in result.reason

    def test_non_caster_declined(self, sample_character: Character) -> None:
        assert not learn_cantrip(sample_character, "Fire Bolt").applied

    def test_blank(self, sample_wizard: Character) -> None:
        with pytest.raises(ValidationError):
            learn_cantrip(sample_wizard, "")

    def test_level_down_reverses_cantrip_learned_at_that_level(self) -> None:
        wizard = create_character("Elara", "Wizard", AbilityScores(intelligence=16), level=4)
        for cantrip in ("Fire Bolt", "Mage Hand", "Prestidigitation", "Light"):
            wizard = learn_cantrip(wizard, cantrip).character
        assert wizard.spellcasting.cantrip_choices_by_level[4] == ["Light"]

        reduced = level_down(wizard).character

        assert reduced.spellcasting.cantrips_known == ["Fire Bolt", "Mage Hand", "Prestidigitation"]
        assert 4 not in reduced.spellcasting.cantrip_choices_by_level
        assert all(choice.level <= 3 for choice in reduced.pending_choices)
