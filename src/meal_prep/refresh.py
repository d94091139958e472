"""Recompute a draft's derived artifacts: shopping list, prep blocks, totals."""

from __future__ import annotations

import dataclasses
import logging
from datetime import datetime

from meal_prep.config import DEFAULTS
from meal_prep.models import DraftTotals, MealCategory, MealPrepDraft, PantryData, timestamp
from meal_prep.pantry import Matcher, resolve_matcher
from meal_prep.prep import build_prep_blocks
from meal_prep.shopping import build_shopping_list

logger = logging.getLogger(__name__)


def refresh_draft_artifacts(
    draft: MealPrepDraft,
    pantry: PantryData | None,
    config: dict | None = None,
    matcher: Matcher | None = None,
    now: datetime | None = None,
) -> MealPrepDraft:
    """Rebuild shopping and prep blocks from the draft's days.

    Run after every structural change. Shopping names and hand-set statuses,
    and completed prep tasks, survive by id. With no pantry given, the pantry
    the original plan was generated from is used.
    """
    config = config or DEFAULTS
    match = resolve_matcher(config, matcher)
    if pantry is None and draft.original_plan is not None:
        pantry = draft.original_plan.used_pantry

    shopping = build_shopping_list(draft, pantry, match, config)
    with_shopping = dataclasses.replace(draft, shopping=shopping)
    prep_blocks = build_prep_blocks(with_shopping, config)

    logger.debug(
        "Refreshed draft %s: %d shopping items, %d prep blocks",
        draft.id,
        len(shopping),
        len(prep_blocks),
    )
    return dataclasses.replace(
        with_shopping, prep_blocks=prep_blocks, updated_at=timestamp(now)
    )


def compute_draft_totals(draft: MealPrepDraft) -> DraftTotals:
    """Macros of the selected option of every enabled meal, across all days."""
    calories = protein = carbs = fat = 0.0
    meal_count = 0
    for day in draft.days:
        for meal_type in MealCategory:
            meal = day.meals.get(meal_type)
            if meal is None or not meal.enabled:
                continue
            selected = meal.selected_option
            if selected is None:
                continue
            calories += selected.calories
            protein += selected.protein
            carbs += selected.carbs
            fat += selected.fat
            meal_count += 1

    return DraftTotals(
        calories=round(calories),
        protein=round(protein),
        carbs=round(carbs),
        fat=round(fat),
        meal_count=meal_count,
    )
