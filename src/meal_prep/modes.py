"""Switch a draft between a single day and a seven-day week."""

from __future__ import annotations

import copy
import dataclasses
import logging
from typing import Callable

from meal_prep.factory import expand_week, parse_plan_date
from meal_prep.models import DraftMode, MealPrepDayDraft, MealPrepDraft

logger = logging.getLogger(__name__)

# Picks the day kept when a week collapses to a single day.
CollapsePolicy = Callable[[list[MealPrepDayDraft]], MealPrepDayDraft]


def first_day(days: list[MealPrepDayDraft]) -> MealPrepDayDraft:
    return days[0]


def switch_draft_mode(
    draft: MealPrepDraft,
    mode: DraftMode,
    collapse: CollapsePolicy = first_day,
) -> MealPrepDraft:
    """Expand daily -> weekly or collapse weekly -> daily.

    Expanding copies the single day into seven consecutive days with its
    locks and selections intact. Collapsing keeps one day (the first, by
    default) and drops the rest.
    """
    if draft.mode == mode or not draft.days:
        return draft

    if mode == DraftMode.WEEKLY:
        start = parse_plan_date(draft.days[0].date_iso)
        days = expand_week(draft.days[0], start)
    else:
        days = [copy.deepcopy(collapse(draft.days))]
        logger.debug("Collapsed %d days of draft %s to one", len(draft.days), draft.id)

    return dataclasses.replace(draft, mode=mode, days=days)
