"""Build a fresh meal-prep draft from a generated daily plan and pantry."""

from __future__ import annotations

import copy
import dataclasses
import logging
import uuid
from datetime import date, datetime, timedelta

from meal_prep.config import DEFAULTS
from meal_prep.models import (
    WEEKDAY_LABELS,
    DailyMealPlan,
    DraftMode,
    DraftSource,
    FoodItem,
    MealCategory,
    MealPrepDayDraft,
    MealPrepDraft,
    MealPrepMealDraft,
    MealPrepOption,
    OptionSource,
    PantryData,
    timestamp,
)
from meal_prep.pantry import Matcher, pantry_entries_for
from meal_prep.refresh import refresh_draft_artifacts

logger = logging.getLogger(__name__)


def new_id() -> str:
    return uuid.uuid4().hex


def parse_plan_date(value: str | None) -> date | None:
    if not value:
        return None
    try:
        return date.fromisoformat(value[:10])
    except ValueError:
        logger.warning("Unparseable plan date '%s'", value)
        return None


def build_option(label: str, source: OptionSource, items: list[FoodItem]) -> MealPrepOption:
    """Create an option whose macros are the sums of its items."""
    return MealPrepOption(
        id=new_id(),
        label=label,
        source=source,
        items=items,
        calories=sum(i.calories for i in items),
        protein=sum(i.protein for i in items),
        carbs=sum(i.carbs for i in items),
        fat=sum(i.fat for i in items),
    )


def pantry_rotation_items(base_items: list[FoodItem], pantry_foods: list[str]) -> list[FoodItem]:
    """Swap each plan item's name for a pantry food, cycling through the pantry."""
    return [
        FoodItem(
            id=new_id(),
            name=pantry_foods[i % len(pantry_foods)],
            weight_grams=item.weight_grams,
            calories=item.calories,
            protein=item.protein,
            carbs=item.carbs,
            fat=item.fat,
            emoji=item.emoji,
        )
        for i, item in enumerate(base_items)
    ]


def balanced_items(base_items: list[FoodItem], factors: dict) -> list[FoodItem]:
    """Rescale portions toward a higher-protein, slightly lighter meal."""
    return [
        FoodItem(
            id=new_id(),
            name=item.name,
            weight_grams=round(item.weight_grams * factors["weight"], 1),
            calories=max(factors["min_calories"], round(item.calories * factors["calories"])),
            protein=max(0.0, round(item.protein * factors["protein"], 1)),
            carbs=max(0.0, round(item.carbs * factors["carbs"], 1)),
            fat=max(0.0, round(item.fat * factors["fat"], 1)),
            emoji=item.emoji,
        )
        for item in base_items
    ]


def build_meal_options(
    meal_type: MealCategory,
    base_items: list[FoodItem],
    pantry: PantryData | None,
    source: DraftSource,
    strict_pantry_only: bool,
    config: dict,
) -> list[MealPrepOption]:
    """Options for one meal slot: the plan itself first, then alternates."""
    options = [build_option("Current plan", OptionSource.PLAN, copy.deepcopy(base_items))]

    if base_items and source == DraftSource.PANTRY:
        pantry_foods = pantry_entries_for(pantry, meal_type)
        if pantry_foods:
            options.append(
                build_option(
                    "Pantry rotation",
                    OptionSource.PANTRY,
                    pantry_rotation_items(base_items, pantry_foods),
                )
            )

    if base_items and not strict_pantry_only:
        options.append(
            build_option(
                "AI balanced",
                OptionSource.AI,
                balanced_items(base_items, config["factory"]["balanced"]),
            )
        )

    return options[: config["factory"]["max_options"]]


def build_day(
    label: str,
    date_iso: str | None,
    plan: DailyMealPlan,
    pantry: PantryData | None,
    source: DraftSource,
    strict_pantry_only: bool,
    config: dict,
) -> MealPrepDayDraft:
    meals: dict[MealCategory, MealPrepMealDraft | None] = {}
    for meal_type in MealCategory:
        section = plan.section(meal_type)
        if section is None:
            meals[meal_type] = None
            continue
        options = build_meal_options(
            meal_type, section.items, pantry, source, strict_pantry_only, config
        )
        meals[meal_type] = MealPrepMealDraft(
            meal_type=meal_type,
            options=options,
            selected_option_id=options[0].id if options else "",
            locked=False,
            enabled=True,
        )
    return MealPrepDayDraft(id=new_id(), label=label, date_iso=date_iso, meals=meals)


def expand_week(day: MealPrepDayDraft, start: date | None) -> list[MealPrepDayDraft]:
    """Seven copies of a day with fresh ids, labelled from the start date's weekday."""
    offset = start.weekday() if start else 0
    week = []
    for i in range(len(WEEKDAY_LABELS)):
        clone = copy.deepcopy(day)
        clone.id = new_id()
        clone.label = WEEKDAY_LABELS[(offset + i) % len(WEEKDAY_LABELS)]
        clone.date_iso = (start + timedelta(days=i)).isoformat() if start else None
        week.append(clone)
    return week


def create_meal_prep_draft(
    plan: DailyMealPlan,
    pantry: PantryData | None,
    source: DraftSource,
    mode: DraftMode,
    strict_pantry_only: bool = False,
    config: dict | None = None,
    matcher: Matcher | None = None,
    now: datetime | None = None,
) -> MealPrepDraft:
    """Build a draft from a plan, with shopping list and prep blocks already derived.

    The pantry falls back to the one the plan was generated from. Whichever
    pantry is used is kept on `original_plan` so later refreshes reuse it.
    """
    config = config or DEFAULTS
    if pantry is None:
        pantry = plan.used_pantry
    elif pantry is not plan.used_pantry:
        plan = dataclasses.replace(plan, used_pantry=pantry)

    plan_date = parse_plan_date(plan.date)
    day_label = WEEKDAY_LABELS[plan_date.weekday()] if plan_date else "Day 1"
    day = build_day(
        day_label,
        plan_date.isoformat() if plan_date else None,
        plan,
        pantry,
        source,
        strict_pantry_only,
        config,
    )
    days = expand_week(day, plan_date) if mode == DraftMode.WEEKLY else [day]

    stamp = timestamp(now)
    draft = MealPrepDraft(
        id=new_id(),
        source=source,
        mode=mode,
        created_at=stamp,
        updated_at=stamp,
        base_plan_id=plan.id,
        strict_pantry_only=strict_pantry_only,
        allow_add_ons=not strict_pantry_only,
        days=days,
        original_plan=plan,
    )
    logger.debug(
        "Created %s %s draft %s from plan %s", mode.value, source.value, draft.id, plan.id
    )
    return refresh_draft_artifacts(draft, pantry, config=config, matcher=matcher, now=now)
