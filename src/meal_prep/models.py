"""Shared data models for the meal-prep draft engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum


class MealCategory(Enum):
    BREAKFAST = "breakfast"
    LUNCH = "lunch"
    DINNER = "dinner"
    SNACK = "snack"


class DraftSource(Enum):
    PANTRY = "pantry"
    AI = "ai"
    SAVED = "saved"


class OptionSource(Enum):
    PANTRY = "pantry"
    AI = "ai"
    SAVED = "saved"
    PLAN = "plan"


class DraftMode(Enum):
    DAILY = "daily"
    WEEKLY = "weekly"


class TaskCategory(Enum):
    CHOP = "chop"
    COOK = "cook"
    PORTION = "portion"
    STORE = "store"


class ShoppingStatus(Enum):
    HAVE = "have"
    BUY = "buy"
    OPTIONAL = "optional"


class ShoppingCategory(Enum):
    PRODUCE = "produce"
    DAIRY = "dairy"
    MEAT = "meat"
    FROZEN = "frozen"
    PANTRY = "pantry"
    OTHER = "other"


class PrepBucket(Enum):
    PRODUCE = "produce"
    PROTEIN = "protein"
    GRAINS = "grains"
    OTHER = "other"


WEEKDAY_LABELS = [
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
    "Sunday",
]


def timestamp(now: datetime | None = None) -> str:
    """Return an ISO-8601 UTC timestamp, using `now` when given."""
    moment = now or datetime.now(timezone.utc)
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc).isoformat(timespec="seconds")


# Upstream plan (produced by the plan generator)


@dataclass
class FoodItem:
    id: str
    name: str
    weight_grams: float = 0.0
    calories: float = 0.0
    protein: float = 0.0
    carbs: float = 0.0
    fat: float = 0.0
    emoji: str | None = None


@dataclass
class MealSection:
    type: MealCategory
    items: list[FoodItem] = field(default_factory=list)
    total_calories: float = 0.0
    total_protein: float = 0.0
    total_carbs: float = 0.0
    total_fat: float = 0.0
    time_estimate: str | None = None


@dataclass
class PantryData:
    """Free-text, comma-separated pantry lists per meal category."""
    breakfast: str = ""
    lunch: str = ""
    dinner: str = ""
    snacks: str = ""
    updated_at: str | None = None


@dataclass
class DailyMealPlan:
    id: str
    date: str  # YYYY-MM-DD
    target_calories: float = 0.0
    meals: list[MealSection] = field(default_factory=list)
    summary: str | None = None
    prep_tips: list[str] = field(default_factory=list)
    used_pantry: PantryData | None = None
    created_at: str | None = None

    def section(self, meal_type: MealCategory) -> MealSection | None:
        for meal in self.meals:
            if meal.type == meal_type:
                return meal
        return None


# Draft aggregate


@dataclass
class MealPrepOption:
    id: str
    label: str
    source: OptionSource
    items: list[FoodItem] = field(default_factory=list)
    calories: float = 0.0
    protein: float = 0.0
    carbs: float = 0.0
    fat: float = 0.0


@dataclass
class MealPrepMealDraft:
    meal_type: MealCategory
    options: list[MealPrepOption] = field(default_factory=list)
    selected_option_id: str = ""
    locked: bool = False
    enabled: bool = True

    @property
    def selected_option(self) -> MealPrepOption | None:
        for option in self.options:
            if option.id == self.selected_option_id:
                return option
        return self.options[0] if self.options else None

    def option_index(self, option_id: str) -> int:
        for i, option in enumerate(self.options):
            if option.id == option_id:
                return i
        return -1


@dataclass
class MealPrepDayDraft:
    id: str
    label: str
    date_iso: str | None = None
    meals: dict[MealCategory, MealPrepMealDraft | None] = field(
        default_factory=lambda: {m: None for m in MealCategory}
    )


@dataclass
class PrepTask:
    id: str
    category: TaskCategory
    title: str
    description: str
    duration_minutes: int
    completed: bool = False


@dataclass
class PrepBlock:
    id: str
    title: str
    subtitle: str
    total_minutes: int
    tasks: list[PrepTask] = field(default_factory=list)


@dataclass
class MealPrepShoppingItem:
    id: str
    name: str
    quantity: float
    unit: str
    category: ShoppingCategory
    source_meals: list[str] = field(default_factory=list)
    status: ShoppingStatus = ShoppingStatus.BUY
    # Set when the user picked the status by hand; only then does it
    # survive a refresh.
    status_edited: bool = False


@dataclass
class MealPrepDraft:
    id: str
    source: DraftSource
    mode: DraftMode
    created_at: str
    updated_at: str
    base_plan_id: str | None = None
    strict_pantry_only: bool = False
    allow_add_ons: bool = True
    days: list[MealPrepDayDraft] = field(default_factory=list)
    prep_blocks: list[PrepBlock] = field(default_factory=list)
    shopping: list[MealPrepShoppingItem] = field(default_factory=list)
    original_plan: DailyMealPlan | None = None

    def find_day(self, day_id: str) -> MealPrepDayDraft | None:
        for day in self.days:
            if day.id == day_id:
                return day
        return None

    def find_shopping_item(self, item_id: str) -> MealPrepShoppingItem | None:
        for item in self.shopping:
            if item.id == item_id:
                return item
        return None


@dataclass
class SavedMealPrepPlan:
    id: str
    name: str
    created_at: str
    updated_at: str
    draft: MealPrepDraft


@dataclass
class DraftTotals:
    calories: int = 0
    protein: int = 0
    carbs: int = 0
    fat: int = 0
    meal_count: int = 0
