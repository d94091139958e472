"""Pantry text parsing, ingredient matching strategies, and pantry policy flags."""

from __future__ import annotations

import dataclasses
import logging
import re
from difflib import SequenceMatcher
from typing import Callable, Sequence

from meal_prep.models import MealCategory, MealPrepDraft, PantryData

logger = logging.getLogger(__name__)

# (ingredient name, pantry entries) -> is the ingredient on hand?
Matcher = Callable[[str, Sequence[str]], bool]

FUZZY_THRESHOLD = 0.8

_TOKEN_RE = re.compile(r"[a-z0-9]+")

# Words that describe an ingredient without identifying it.
_FILLER_WORDS = {
    "a", "an", "the", "of", "and", "with", "fresh", "dried", "chopped",
    "diced", "sliced", "minced", "large", "small", "medium", "whole",
    "raw", "cooked", "organic", "plain",
}


def parse_pantry_list(text: str | None) -> list[str]:
    """Split a free-text, comma-separated pantry field into entries."""
    if not text:
        return []
    return [part.strip() for part in text.split(",") if part.strip()]


def pantry_entries_for(pantry: PantryData | None, meal_type: MealCategory) -> list[str]:
    """Pantry entries listed for a meal category (snack reads the snacks field)."""
    if pantry is None:
        return []
    if meal_type == MealCategory.SNACK:
        return parse_pantry_list(pantry.snacks)
    return parse_pantry_list(getattr(pantry, meal_type.value))


def _fold(token: str) -> str:
    # berries -> berry, eggs -> egg, tomatoes -> tomato
    if len(token) > 4 and token.endswith("ies"):
        return token[:-3] + "y"
    if len(token) > 4 and token.endswith("oes"):
        return token[:-2]
    if len(token) > 3 and token.endswith("s") and not token.endswith("ss"):
        return token[:-1]
    return token


def tokenize(name: str) -> set[str]:
    """Lowercased, plural-folded word tokens without filler words."""
    tokens = {_fold(t) for t in _TOKEN_RE.findall(name.lower())}
    return {t for t in tokens if t not in _FILLER_WORDS}


def normalize_name(name: str) -> str:
    return " ".join(sorted(tokenize(name)))


def token_match(ingredient: str, entries: Sequence[str]) -> bool:
    """True when one side's tokens are contained in the other's.

    "greek yogurt" matches a pantry entry "yogurt", and "oats" matches
    "rolled oats".
    """
    ingredient_tokens = tokenize(ingredient)
    if not ingredient_tokens:
        return False
    for entry in entries:
        entry_tokens = tokenize(entry)
        if not entry_tokens:
            continue
        if entry_tokens <= ingredient_tokens or ingredient_tokens <= entry_tokens:
            return True
    return False


def exact_match(ingredient: str, entries: Sequence[str]) -> bool:
    target = normalize_name(ingredient)
    if not target:
        return False
    return any(normalize_name(entry) == target for entry in entries)


def fuzzy_match(ingredient: str, entries: Sequence[str]) -> bool:
    """Token containment, or a close character-level match for typos."""
    if token_match(ingredient, entries):
        return True
    target = normalize_name(ingredient)
    if not target:
        return False
    for entry in entries:
        candidate = normalize_name(entry)
        if candidate and SequenceMatcher(None, target, candidate).ratio() >= FUZZY_THRESHOLD:
            return True
    return False


MATCHERS: dict[str, Matcher] = {
    "token": token_match,
    "exact": exact_match,
    "fuzzy": fuzzy_match,
}


def get_matcher(name: str | None) -> Matcher:
    """Look up a matching strategy by its config name."""
    if name is None:
        return token_match
    key = name.strip().lower()
    if key not in MATCHERS:
        valid = ", ".join(sorted(MATCHERS))
        raise ValueError(f"Unknown pantry matcher '{name}'. Valid: {valid}")
    return MATCHERS[key]


def resolve_matcher(config: dict | None, matcher: Matcher | None = None) -> Matcher:
    """An explicit matcher wins over the one named in config."""
    if matcher is not None:
        return matcher
    if config is None:
        return token_match
    return get_matcher(config.get("pantry", {}).get("matcher"))


def set_strict_pantry_mode(draft: MealPrepDraft, strict: bool) -> MealPrepDraft:
    """Turn strict pantry mode on or off. Strict mode always disables add-ons."""
    allow_add_ons = False if strict else draft.allow_add_ons
    if draft.strict_pantry_only == strict and draft.allow_add_ons == allow_add_ons:
        return draft
    return dataclasses.replace(
        draft, strict_pantry_only=strict, allow_add_ons=allow_add_ons
    )


def set_allow_add_ons(draft: MealPrepDraft, allow: bool) -> MealPrepDraft:
    """Allow or forbid optional add-ons; ignored while strict pantry mode is on."""
    if draft.strict_pantry_only:
        logger.debug("Ignoring add-on toggle on draft %s: strict pantry mode", draft.id)
        return draft
    if draft.allow_add_ons == allow:
        return draft
    return dataclasses.replace(draft, allow_add_ons=allow)
