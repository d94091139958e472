"""Per-meal enable, lock, and option selection edits on a draft.

Every function returns a new draft, or the very same draft object when the
edit does not apply (unknown day, empty slot, locked meal, stale option id).
None of them rebuild the shopping list or prep blocks; callers run the
refresher afterwards.
"""

from __future__ import annotations

import copy
import logging
from typing import Callable

from meal_prep.models import MealCategory, MealPrepDraft, MealPrepMealDraft, MealPrepOption

logger = logging.getLogger(__name__)

MealUpdater = Callable[[MealPrepMealDraft], MealPrepMealDraft | None]


def get_selected_option(meal: MealPrepMealDraft | None) -> MealPrepOption | None:
    if meal is None:
        return None
    return meal.selected_option


def update_meal(
    draft: MealPrepDraft,
    day_id: str,
    meal_type: MealCategory,
    updater: MealUpdater,
) -> MealPrepDraft:
    """Apply `updater` to a copy of one meal; None from the updater means no change."""
    day = draft.find_day(day_id)
    if day is None:
        logger.debug("No day %s in draft %s", day_id, draft.id)
        return draft
    meal = day.meals.get(meal_type)
    if meal is None:
        logger.debug("No %s slot on %s", meal_type.value, day.label)
        return draft

    updated = updater(copy.deepcopy(meal))
    if updated is None:
        return draft

    result = copy.deepcopy(draft)
    target = result.find_day(day_id)
    target.meals[meal_type] = updated
    return result


def toggle_meal(draft: MealPrepDraft, day_id: str, meal_type: MealCategory) -> MealPrepDraft:
    def flip(meal: MealPrepMealDraft) -> MealPrepMealDraft | None:
        if meal.locked:
            return None
        meal.enabled = not meal.enabled
        return meal

    return update_meal(draft, day_id, meal_type, flip)


def toggle_lock(draft: MealPrepDraft, day_id: str, meal_type: MealCategory) -> MealPrepDraft:
    def flip(meal: MealPrepMealDraft) -> MealPrepMealDraft:
        meal.locked = not meal.locked
        return meal

    return update_meal(draft, day_id, meal_type, flip)


def cycle_option(draft: MealPrepDraft, day_id: str, meal_type: MealCategory) -> MealPrepDraft:
    """Advance to the next option, wrapping after the last one."""

    def advance(meal: MealPrepMealDraft) -> MealPrepMealDraft | None:
        if meal.locked or not meal.options:
            return None
        current = meal.option_index(meal.selected_option_id)
        # A stale id lands on index 0, the same as wrapping past the end.
        meal.selected_option_id = meal.options[(current + 1) % len(meal.options)].id
        return meal

    return update_meal(draft, day_id, meal_type, advance)


def select_option(
    draft: MealPrepDraft,
    day_id: str,
    meal_type: MealCategory,
    option_id: str,
) -> MealPrepDraft:
    def choose(meal: MealPrepMealDraft) -> MealPrepMealDraft | None:
        if meal.locked:
            return None
        if meal.option_index(option_id) < 0:
            logger.debug("Ignoring unknown option %s for %s", option_id, meal_type.value)
            return None
        if meal.selected_option_id == option_id:
            return None
        meal.selected_option_id = option_id
        return meal

    return update_meal(draft, day_id, meal_type, choose)
