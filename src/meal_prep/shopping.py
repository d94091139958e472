"""Shopping list synthesis from a draft, user edits, and hand-off to the shopping list."""

from __future__ import annotations

import copy
import hashlib
import logging
import uuid
from dataclasses import dataclass, field
from typing import Callable

from meal_prep.config import DEFAULTS
from meal_prep.models import (
    MealCategory,
    MealPrepDraft,
    MealPrepShoppingItem,
    PantryData,
    ShoppingCategory,
    ShoppingStatus,
)
from meal_prep.pantry import Matcher, normalize_name, pantry_entries_for, tokenize

logger = logging.getLogger(__name__)

DEFAULT_UNIT = "g"

# Category classification by keyword, checked in order
CATEGORY_KEYWORDS = {
    ShoppingCategory.PRODUCE: [
        "apple",
        "banana",
        "berry",
        "lettuce",
        "spinach",
        "kale",
        "broccoli",
        "carrot",
        "tomato",
        "pepper",
        "onion",
        "garlic",
        "cucumber",
        "zucchini",
        "eggplant",
        "mushroom",
        "potato",
        "avocado",
        "lemon",
        "lime",
        "orange",
        "vegetable",
        "salad",
    ],
    ShoppingCategory.DAIRY: [
        "milk",
        "cheese",
        "yogurt",
        "butter",
        "egg",
        "cream",
        "kefir",
    ],
    ShoppingCategory.MEAT: [
        "chicken",
        "beef",
        "pork",
        "fish",
        "salmon",
        "tuna",
        "shrimp",
        "turkey",
        "lamb",
        "tofu",
        "tempeh",
    ],
    ShoppingCategory.FROZEN: [
        "frozen",
        "ice",
    ],
    ShoppingCategory.PANTRY: [
        "rice",
        "oat",
        "bread",
        "pasta",
        "noodle",
        "oil",
        "flour",
        "bean",
        "lentil",
        "chickpea",
        "quinoa",
        "granola",
        "tortilla",
        "nut",
        "seed",
    ],
}

# Aggregated status precedence: one "buy" occurrence makes the item a buy.
_STATUS_RANK = {
    ShoppingStatus.HAVE: 0,
    ShoppingStatus.OPTIONAL: 1,
    ShoppingStatus.BUY: 2,
}


def classify_category(name: str) -> ShoppingCategory:
    """Classify an ingredient into a shopping category."""
    tokens = tokenize(name)
    for category, keywords in CATEGORY_KEYWORDS.items():
        for kw in keywords:
            if any(t.startswith(kw) for t in tokens):
                return category
    return ShoppingCategory.OTHER


def shopping_item_id(name: str, unit: str, category: ShoppingCategory) -> str:
    """Stable id from the item's identity key (name, unit, category)."""
    key = f"{normalize_name(name) or name.strip().lower()}|{unit}|{category.value}"
    return "shop-" + hashlib.sha1(key.encode("utf-8")).hexdigest()[:12]


def is_minor_ingredient(name: str, weight_grams: float, config: dict) -> bool:
    """Seasonings, sauces, and tiny quantities count as add-ons."""
    shopping_cfg = config["shopping"]
    if 0 < weight_grams <= shopping_cfg["minor_max_grams"]:
        return True
    tokens = tokenize(name)
    for keyword in shopping_cfg["add_on_keywords"]:
        keyword_tokens = tokenize(keyword)
        if keyword_tokens and keyword_tokens <= tokens:
            return True
    return False


def classify_status(
    name: str,
    weight_grams: float,
    meal_type: MealCategory,
    draft: MealPrepDraft,
    pantry: PantryData | None,
    matcher: Matcher,
    config: dict,
) -> ShoppingStatus:
    """Status of one ingredient occurrence in one meal.

    Strict pantry mode never marks a missing ingredient optional, so it
    always ends up on the buy list rather than being dropped.
    """
    if matcher(name, pantry_entries_for(pantry, meal_type)):
        return ShoppingStatus.HAVE
    if (
        draft.allow_add_ons
        and not draft.strict_pantry_only
        and is_minor_ingredient(name, weight_grams, config)
    ):
        return ShoppingStatus.OPTIONAL
    return ShoppingStatus.BUY


def build_shopping_list(
    draft: MealPrepDraft,
    pantry: PantryData | None,
    matcher: Matcher,
    config: dict | None = None,
) -> list[MealPrepShoppingItem]:
    """Aggregate the selected items of enabled meals into a shopping list.

    Items are merged by (name, unit). User renames and hand-set statuses on
    the draft's current list are carried over by item id.
    """
    config = config or DEFAULTS
    previous = {item.id: item for item in draft.shopping}
    merged: dict[tuple[str, str], MealPrepShoppingItem] = {}

    for day in draft.days:
        for meal_type in MealCategory:
            meal = day.meals.get(meal_type)
            if meal is None or not meal.enabled:
                continue
            selected = meal.selected_option
            if selected is None:
                continue
            source_meal = f"{day.label} {meal_type.value}"

            for food in selected.items:
                name = food.name.strip()
                if not name:
                    continue
                key = (normalize_name(name) or name.lower(), DEFAULT_UNIT)
                status = classify_status(
                    name, food.weight_grams, meal_type, draft, pantry, matcher, config
                )

                entry = merged.get(key)
                if entry is None:
                    category = classify_category(name)
                    merged[key] = MealPrepShoppingItem(
                        id=shopping_item_id(name, DEFAULT_UNIT, category),
                        name=name,
                        quantity=round(food.weight_grams, 1),
                        unit=DEFAULT_UNIT,
                        category=category,
                        source_meals=[source_meal],
                        status=status,
                    )
                    continue

                entry.quantity = round(entry.quantity + food.weight_grams, 1)
                if source_meal not in entry.source_meals:
                    entry.source_meals.append(source_meal)
                if _STATUS_RANK[status] > _STATUS_RANK[entry.status]:
                    entry.status = status

    items = list(merged.values())
    for item in items:
        old = previous.get(item.id)
        if old is None:
            continue
        item.name = old.name
        if old.status_edited:
            item.status = old.status
            item.status_edited = True

    items.sort(key=lambda i: (i.name.lower(), i.id))
    return items


# User edits. These touch only draft.shopping and never trigger a refresh.


def _edit_item(
    draft: MealPrepDraft,
    item_id: str,
    edit: Callable[[MealPrepShoppingItem], bool],
) -> MealPrepDraft:
    if draft.find_shopping_item(item_id) is None:
        logger.debug("No shopping item %s in draft %s", item_id, draft.id)
        return draft
    result = copy.deepcopy(draft)
    if not edit(result.find_shopping_item(item_id)):
        return draft
    return result


def set_shopping_status(
    draft: MealPrepDraft, item_id: str, status: ShoppingStatus
) -> MealPrepDraft:
    def apply(item: MealPrepShoppingItem) -> bool:
        item.status = status
        item.status_edited = True
        return True

    return _edit_item(draft, item_id, apply)


def rename_shopping_item(draft: MealPrepDraft, item_id: str, new_name: str) -> MealPrepDraft:
    """Rename an item; blank names are rejected and the old name kept."""
    cleaned = (new_name or "").strip()
    if not cleaned:
        logger.debug("Rejected blank name for shopping item %s", item_id)
        return draft

    def apply(item: MealPrepShoppingItem) -> bool:
        if item.name == cleaned:
            return False
        item.name = cleaned
        return True

    return _edit_item(draft, item_id, apply)


def remove_shopping_item(draft: MealPrepDraft, item_id: str) -> MealPrepDraft:
    if draft.find_shopping_item(item_id) is None:
        logger.debug("No shopping item %s to remove", item_id)
        return draft
    result = copy.deepcopy(draft)
    result.shopping = [item for item in result.shopping if item.id != item_id]
    return result


@dataclass
class ShoppingListItemEvent:
    """Creation request sent to the shopping list."""
    id: str
    name: str
    category: str
    amount: float
    unit: str
    checked: bool = False
    recipe_names: list[str] = field(default_factory=list)
    source_recipe_ids: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "category": self.category,
            "amount": self.amount,
            "unit": self.unit,
            "checked": self.checked,
            "recipeNames": list(self.recipe_names),
            "sourceRecipeIds": list(self.source_recipe_ids),
        }


@dataclass
class SyncResult:
    events: list[ShoppingListItemEvent]
    message: str

    @property
    def nothing_to_buy(self) -> bool:
        return not self.events


ShoppingListSink = Callable[[ShoppingListItemEvent], None]

NOTHING_TO_BUY = "Nothing to buy: everything is covered by your pantry."


def sync_to_shopping(draft: MealPrepDraft, sink: ShoppingListSink) -> SyncResult:
    """Send one creation event per "buy" item to the shopping list."""
    to_buy = [item for item in draft.shopping if item.status == ShoppingStatus.BUY]
    if not to_buy:
        logger.info(NOTHING_TO_BUY)
        return SyncResult(events=[], message=NOTHING_TO_BUY)

    events = []
    for item in to_buy:
        event = ShoppingListItemEvent(
            id=uuid.uuid4().hex,
            name=item.name,
            category=item.category.value,
            amount=item.quantity,
            unit=item.unit,
            checked=False,
            recipe_names=list(item.source_meals),
            source_recipe_ids=[],
        )
        sink(event)
        events.append(event)

    message = f"Synced {len(events)} items to Shopping."
    logger.info(message)
    return SyncResult(events=events, message=message)
