import pytest
from datetime import datetime, timezone

from meal_prep.factory import create_meal_prep_draft
from meal_prep.models import (
    DailyMealPlan,
    DraftMode,
    DraftSource,
    FoodItem,
    MealCategory,
    MealPrepDraft,
    MealSection,
    PantryData,
)


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2024, 3, 3, 18, 0, tzinfo=timezone.utc)


@pytest.fixture
def sample_pantry() -> PantryData:
    return PantryData(
        breakfast="rolled oats, honey",
        lunch="brown rice",
        dinner="broccoli",
        snacks="",
    )


@pytest.fixture
def sample_plan() -> DailyMealPlan:
    """One day (Monday 2024-03-04) with all four meal slots filled."""
    return DailyMealPlan(
        id="plan-1",
        date="2024-03-04",
        target_calories=1800,
        meals=[
            MealSection(type=MealCategory.BREAKFAST, items=[
                FoodItem(id="f1", name="Rolled oats", weight_grams=60,
                         calories=230, protein=8, carbs=40, fat=4),
                FoodItem(id="f2", name="Greek yogurt", weight_grams=150,
                         calories=150, protein=15, carbs=6, fat=5),
                FoodItem(id="f3", name="Honey", weight_grams=8,
                         calories=25, protein=0, carbs=7, fat=0),
            ]),
            MealSection(type=MealCategory.LUNCH, items=[
                FoodItem(id="f4", name="Chicken breast", weight_grams=150,
                         calories=250, protein=45, carbs=0, fat=5),
                FoodItem(id="f5", name="Brown rice", weight_grams=150,
                         calories=170, protein=4, carbs=36, fat=1),
                FoodItem(id="f6", name="Olive oil", weight_grams=10,
                         calories=90, protein=0, carbs=0, fat=10),
            ]),
            MealSection(type=MealCategory.DINNER, items=[
                FoodItem(id="f7", name="Salmon fillet", weight_grams=140,
                         calories=280, protein=30, carbs=0, fat=18),
                FoodItem(id="f8", name="Broccoli", weight_grams=120,
                         calories=40, protein=3, carbs=8, fat=0),
                FoodItem(id="f9", name="Brown rice", weight_grams=100,
                         calories=110, protein=3, carbs=24, fat=1),
            ]),
            MealSection(type=MealCategory.SNACK, items=[
                FoodItem(id="f10", name="Apple", weight_grams=150,
                         calories=80, protein=0, carbs=21, fat=0),
            ]),
        ],
        prep_tips=["Cook the brown rice in one batch", "Marinate chicken overnight"],
    )


@pytest.fixture
def ai_draft(sample_plan, sample_pantry, fixed_now) -> MealPrepDraft:
    return create_meal_prep_draft(
        sample_plan, sample_pantry, DraftSource.AI, DraftMode.DAILY, now=fixed_now
    )


@pytest.fixture
def pantry_draft(sample_plan, sample_pantry, fixed_now) -> MealPrepDraft:
    return create_meal_prep_draft(
        sample_plan, sample_pantry, DraftSource.PANTRY, DraftMode.DAILY, now=fixed_now
    )


@pytest.fixture
def weekly_draft(sample_plan, sample_pantry, fixed_now) -> MealPrepDraft:
    return create_meal_prep_draft(
        sample_plan, sample_pantry, DraftSource.AI, DraftMode.WEEKLY, now=fixed_now
    )
