import dataclasses

import pytest

from meal_prep.models import MealCategory, PantryData
from meal_prep.pantry import (
    exact_match,
    fuzzy_match,
    get_matcher,
    normalize_name,
    pantry_entries_for,
    parse_pantry_list,
    resolve_matcher,
    set_allow_add_ons,
    set_strict_pantry_mode,
    token_match,
    tokenize,
)


class TestPantryText:
    def test_parse_list(self):
        assert parse_pantry_list("oats,  , honey ") == ["oats", "honey"]
        assert parse_pantry_list(None) == []
        assert parse_pantry_list("") == []

    def test_snack_reads_snacks(self):
        pantry = PantryData(snacks="apple, almonds")
        assert pantry_entries_for(pantry, MealCategory.SNACK) == ["apple", "almonds"]
        assert pantry_entries_for(pantry, MealCategory.LUNCH) == []
        assert pantry_entries_for(None, MealCategory.LUNCH) == []

    def test_tokenize_folds_plurals_and_filler(self):
        assert tokenize("Fresh Chopped Tomatoes") == {"tomato"}
        assert tokenize("Mixed berries") == {"mixed", "berry"}
        assert normalize_name("Rice, brown") == "brown rice"


class TestMatchers:
    def test_token_containment(self):
        assert token_match("Greek yogurt", ["yogurt"])
        assert token_match("oats", ["rolled oats"])
        assert token_match("Eggs", ["egg"])
        assert not token_match("Chicken breast", ["beef"])
        assert not token_match("", ["rice"])

    def test_exact(self):
        assert exact_match("Rolled oats", ["oats rolled"])
        assert not exact_match("oats", ["rolled oats"])

    def test_fuzzy_catches_typos(self):
        assert fuzzy_match("Brocoli", ["broccoli"])
        assert not token_match("Brocoli", ["broccoli"])
        assert not fuzzy_match("Salmon", ["lemon"])

    def test_get_matcher(self):
        assert get_matcher("fuzzy") is fuzzy_match
        assert get_matcher(" Exact ") is exact_match
        assert get_matcher(None) is token_match

    def test_unknown_matcher(self):
        with pytest.raises(ValueError, match="Unknown pantry matcher"):
            get_matcher("psychic")

    def test_resolve_matcher(self):
        assert resolve_matcher({"pantry": {"matcher": "fuzzy"}}) is fuzzy_match
        assert resolve_matcher({"pantry": {"matcher": "fuzzy"}}, exact_match) is exact_match
        assert resolve_matcher(None) is token_match


class TestPantryPolicy:
    def test_strict_forces_add_ons_off(self, ai_draft):
        assert ai_draft.allow_add_ons is True
        strict = set_strict_pantry_mode(ai_draft, True)
        assert strict.strict_pantry_only is True
        assert strict.allow_add_ons is False
        assert ai_draft.strict_pantry_only is False

    def test_leaving_strict_keeps_add_ons_off(self, ai_draft):
        strict = set_strict_pantry_mode(ai_draft, True)
        relaxed = set_strict_pantry_mode(strict, False)
        assert relaxed.strict_pantry_only is False
        assert relaxed.allow_add_ons is False

    def test_strict_same_state_is_noop(self, ai_draft):
        assert set_strict_pantry_mode(ai_draft, False) is ai_draft

    def test_add_ons_rejected_while_strict(self, ai_draft):
        strict = set_strict_pantry_mode(ai_draft, True)
        assert set_allow_add_ons(strict, True) is strict

    def test_add_ons_toggle(self, ai_draft):
        off = set_allow_add_ons(ai_draft, False)
        assert off.allow_add_ons is False
        assert set_allow_add_ons(off, False) is off
        assert set_allow_add_ons(off, True).allow_add_ons is True

    def test_policy_edits_do_not_refresh(self, ai_draft):
        strict = set_strict_pantry_mode(ai_draft, True)
        assert strict.shopping is ai_draft.shopping
        assert dataclasses.replace(strict, strict_pantry_only=False, allow_add_ons=True) == ai_draft
