"""Draft edit actions: parsing from CLI specs and applying them to a draft."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from meal_prep.models import (
    DraftMode,
    MealCategory,
    MealPrepDraft,
    PantryData,
    ShoppingStatus,
)
from meal_prep.modes import switch_draft_mode
from meal_prep.options import cycle_option, select_option, toggle_lock, toggle_meal
from meal_prep.pantry import Matcher, set_allow_add_ons, set_strict_pantry_mode
from meal_prep.prep import toggle_task
from meal_prep.refresh import refresh_draft_artifacts
from meal_prep.shopping import (
    remove_shopping_item,
    rename_shopping_item,
    set_shopping_status,
)

logger = logging.getLogger(__name__)


class ActionKind(Enum):
    TOGGLE_MEAL = "toggle"
    TOGGLE_LOCK = "lock"
    CYCLE_OPTION = "cycle"
    SELECT_OPTION = "select"
    SET_MODE = "mode"
    SET_STRICT = "strict"
    SET_ADD_ONS = "add-ons"
    TOGGLE_TASK = "task"
    SET_STATUS = "status"
    RENAME_ITEM = "rename"
    REMOVE_ITEM = "remove"


MEAL_ACTIONS = {
    ActionKind.TOGGLE_MEAL,
    ActionKind.TOGGLE_LOCK,
    ActionKind.CYCLE_OPTION,
    ActionKind.SELECT_OPTION,
}

# Actions that change days or pantry policy and so need a refresh.
STRUCTURAL_ACTIONS = MEAL_ACTIONS | {
    ActionKind.SET_MODE,
    ActionKind.SET_STRICT,
    ActionKind.SET_ADD_ONS,
}

ALL_DAYS = "all"

_SWITCH_VALUES = {"on": True, "true": True, "yes": True, "off": False, "false": False, "no": False}


@dataclass
class Action:
    """A parsed edit. `day` is a day selector, `target` a task/item/option id."""
    kind: ActionKind
    day: str | None = None
    meal_type: MealCategory | None = None
    target: str | None = None
    value: str | None = None


def _parse_switch(raw: str, spec: str) -> str:
    key = raw.strip().lower()
    if key not in _SWITCH_VALUES:
        raise ValueError(f"Expected on/off in action '{spec}', got '{raw}'")
    return "on" if _SWITCH_VALUES[key] else "off"


def _parse_meal(raw: str, spec: str) -> MealCategory:
    try:
        return MealCategory(raw.strip().lower())
    except ValueError:
        valid = ", ".join(m.value for m in MealCategory)
        raise ValueError(f"Unknown meal type '{raw}' in action '{spec}'. Valid: {valid}")


def parse_action(raw: str) -> Action:
    """Parse 'kind:args' into an Action.

    toggle|lock|cycle:<day>:<meal>, select:<day>:<meal>:<option>,
    mode:<daily|weekly>, strict:<on|off>, add-ons:<on|off>, task:<task id>,
    status:<item id>:<have|buy|optional>, rename:<item id>:<name>,
    remove:<item id>. <day> is a day label, a 1-based index, or 'all'.
    """
    kind_str, _, rest = raw.partition(":")
    try:
        kind = ActionKind(kind_str.strip().lower())
    except ValueError:
        valid = ", ".join(k.value for k in ActionKind)
        raise ValueError(f"Unknown action '{kind_str}' in '{raw}'. Valid: {valid}")

    if kind in MEAL_ACTIONS:
        maxsplit = 2 if kind == ActionKind.SELECT_OPTION else 1
        parts = rest.split(":", maxsplit=maxsplit)
        expected = 3 if kind == ActionKind.SELECT_OPTION else 2
        if len(parts) != expected or not all(p.strip() for p in parts):
            fmt = "select:<day>:<meal>:<option>" if expected == 3 else f"{kind.value}:<day>:<meal>"
            raise ValueError(f"Invalid action format: '{raw}'. Expected '{fmt}'")
        return Action(
            kind=kind,
            day=parts[0].strip(),
            meal_type=_parse_meal(parts[1], raw),
            target=parts[2].strip() if expected == 3 else None,
        )

    if not rest.strip():
        raise ValueError(f"Missing argument in action '{raw}'")

    if kind == ActionKind.SET_MODE:
        try:
            return Action(kind=kind, value=DraftMode(rest.strip().lower()).value)
        except ValueError:
            raise ValueError(f"Unknown mode '{rest}' in action '{raw}'. Valid: daily, weekly")
    if kind in (ActionKind.SET_STRICT, ActionKind.SET_ADD_ONS):
        return Action(kind=kind, value=_parse_switch(rest, raw))
    if kind in (ActionKind.TOGGLE_TASK, ActionKind.REMOVE_ITEM):
        return Action(kind=kind, target=rest.strip())

    item_id, _, value = rest.partition(":")
    if not item_id.strip():
        raise ValueError(f"Missing item id in action '{raw}'")
    if kind == ActionKind.SET_STATUS:
        try:
            status = ShoppingStatus(value.strip().lower())
        except ValueError:
            valid = ", ".join(s.value for s in ShoppingStatus)
            raise ValueError(f"Unknown status '{value}' in action '{raw}'. Valid: {valid}")
        return Action(kind=kind, target=item_id.strip(), value=status.value)
    # rename keeps the raw name; blank names are dropped by the engine
    return Action(kind=kind, target=item_id.strip(), value=value)


def resolve_day_ids(draft: MealPrepDraft, selector: str) -> list[str]:
    """Day ids for a selector: 'all', a 1-based index, a label, or an id."""
    key = selector.strip().lower()
    if key == ALL_DAYS:
        return [d.id for d in draft.days]
    if key.isdigit():
        idx = int(key) - 1
        return [draft.days[idx].id] if 0 <= idx < len(draft.days) else []
    return [d.id for d in draft.days if d.label.lower() == key or d.id == selector.strip()]


def _resolve_option_id(draft: MealPrepDraft, day_id: str, meal_type: MealCategory, ref: str) -> str:
    """Accept an option label as well as an id."""
    day = draft.find_day(day_id)
    meal = day.meals.get(meal_type) if day else None
    if meal is None:
        return ref
    for option in meal.options:
        if option.id == ref:
            return ref
    for option in meal.options:
        if option.label.lower() == ref.lower():
            return option.id
    return ref


def _apply_meal_action(draft: MealPrepDraft, action: Action) -> MealPrepDraft:
    day_ids = resolve_day_ids(draft, action.day or "")
    if not day_ids:
        logger.warning("No day matches '%s'; action %s skipped", action.day, action.kind.value)
        return draft

    for day_id in day_ids:
        if action.kind == ActionKind.TOGGLE_MEAL:
            draft = toggle_meal(draft, day_id, action.meal_type)
        elif action.kind == ActionKind.TOGGLE_LOCK:
            draft = toggle_lock(draft, day_id, action.meal_type)
        elif action.kind == ActionKind.CYCLE_OPTION:
            draft = cycle_option(draft, day_id, action.meal_type)
        else:
            option_id = _resolve_option_id(draft, day_id, action.meal_type, action.target or "")
            draft = select_option(draft, day_id, action.meal_type, option_id)
    return draft


def apply_action(
    draft: MealPrepDraft,
    action: Action,
    pantry: PantryData | None = None,
    config: dict | None = None,
    matcher: Matcher | None = None,
    now: datetime | None = None,
) -> MealPrepDraft:
    """Apply one action; structural actions are followed by an artifact refresh."""
    before = draft
    kind = action.kind

    if kind in MEAL_ACTIONS:
        draft = _apply_meal_action(draft, action)
    elif kind == ActionKind.SET_MODE:
        draft = switch_draft_mode(draft, DraftMode(action.value))
    elif kind == ActionKind.SET_STRICT:
        draft = set_strict_pantry_mode(draft, action.value == "on")
    elif kind == ActionKind.SET_ADD_ONS:
        draft = set_allow_add_ons(draft, action.value == "on")
    elif kind == ActionKind.TOGGLE_TASK:
        draft = toggle_task(draft, action.target)
    elif kind == ActionKind.SET_STATUS:
        draft = set_shopping_status(draft, action.target, ShoppingStatus(action.value))
    elif kind == ActionKind.RENAME_ITEM:
        draft = rename_shopping_item(draft, action.target, action.value or "")
    elif kind == ActionKind.REMOVE_ITEM:
        draft = remove_shopping_item(draft, action.target)

    if draft is before:
        logger.debug("Action %s left draft %s unchanged", kind.value, draft.id)
        return draft
    if kind in STRUCTURAL_ACTIONS:
        draft = refresh_draft_artifacts(draft, pantry, config=config, matcher=matcher, now=now)
    return draft


def apply_actions(
    draft: MealPrepDraft,
    actions: list[Action],
    pantry: PantryData | None = None,
    config: dict | None = None,
    matcher: Matcher | None = None,
    now: datetime | None = None,
) -> MealPrepDraft:
    for action in actions:
        draft = apply_action(draft, action, pantry, config, matcher, now)
    return draft
