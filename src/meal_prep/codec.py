"""JSON wire format for plans, pantries, drafts, and saved plans (camelCase keys)."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import yaml

from meal_prep.models import (
    DailyMealPlan,
    DraftMode,
    DraftSource,
    FoodItem,
    MealCategory,
    MealPrepDayDraft,
    MealPrepDraft,
    MealPrepMealDraft,
    MealPrepOption,
    MealPrepShoppingItem,
    MealSection,
    OptionSource,
    PantryData,
    PrepBlock,
    PrepTask,
    SavedMealPrepPlan,
    ShoppingCategory,
    ShoppingStatus,
    TaskCategory,
)


def _enum(enum_cls, value, field_name: str):
    try:
        return enum_cls(value)
    except ValueError:
        valid = ", ".join(m.value for m in enum_cls)
        raise ValueError(f"Invalid {field_name} '{value}'. Valid: {valid}")


def _num(value: Any) -> float:
    return float(value) if value is not None else 0.0


# Plan input


def food_item_from_dict(data: dict) -> FoodItem:
    return FoodItem(
        id=str(data.get("id", "")),
        name=str(data.get("name", "")),
        weight_grams=_num(data.get("weightGrams")),
        calories=_num(data.get("calories")),
        protein=_num(data.get("protein")),
        carbs=_num(data.get("carbs")),
        fat=_num(data.get("fat")),
        emoji=data.get("emoji"),
    )


def food_item_to_dict(item: FoodItem) -> dict:
    data = {
        "id": item.id,
        "name": item.name,
        "weightGrams": item.weight_grams,
        "calories": item.calories,
        "protein": item.protein,
        "carbs": item.carbs,
        "fat": item.fat,
    }
    if item.emoji is not None:
        data["emoji"] = item.emoji
    return data


def pantry_from_dict(data: dict | None) -> PantryData | None:
    if data is None:
        return None
    return PantryData(
        breakfast=str(data.get("breakfast") or ""),
        lunch=str(data.get("lunch") or ""),
        dinner=str(data.get("dinner") or ""),
        snacks=str(data.get("snacks") or data.get("snack") or ""),
        updated_at=data.get("updatedAt"),
    )


def pantry_to_dict(pantry: PantryData) -> dict:
    data = {
        "breakfast": pantry.breakfast,
        "lunch": pantry.lunch,
        "dinner": pantry.dinner,
        "snacks": pantry.snacks,
    }
    if pantry.updated_at is not None:
        data["updatedAt"] = pantry.updated_at
    return data


def meal_section_from_dict(data: dict) -> MealSection:
    return MealSection(
        type=_enum(MealCategory, data.get("type"), "meal type"),
        items=[food_item_from_dict(i) for i in data.get("items", [])],
        total_calories=_num(data.get("totalCalories")),
        total_protein=_num(data.get("totalProtein")),
        total_carbs=_num(data.get("totalCarbs")),
        total_fat=_num(data.get("totalFat")),
        time_estimate=data.get("timeEstimate"),
    )


def meal_section_to_dict(section: MealSection) -> dict:
    return {
        "type": section.type.value,
        "items": [food_item_to_dict(i) for i in section.items],
        "totalCalories": section.total_calories,
        "totalProtein": section.total_protein,
        "totalCarbs": section.total_carbs,
        "totalFat": section.total_fat,
        "timeEstimate": section.time_estimate,
    }


def plan_from_dict(data: dict) -> DailyMealPlan:
    if not data.get("id") or not data.get("date"):
        raise ValueError("Meal plan needs an 'id' and a 'date'")
    return DailyMealPlan(
        id=str(data["id"]),
        date=str(data["date"]),
        target_calories=_num(data.get("targetCalories")),
        meals=[meal_section_from_dict(m) for m in data.get("meals", [])],
        summary=data.get("summary"),
        prep_tips=[str(t) for t in data.get("prepTips", [])],
        used_pantry=pantry_from_dict(data.get("usedPantry")),
        created_at=data.get("createdAt"),
    )


def plan_to_dict(plan: DailyMealPlan) -> dict:
    return {
        "id": plan.id,
        "date": plan.date,
        "targetCalories": plan.target_calories,
        "meals": [meal_section_to_dict(m) for m in plan.meals],
        "summary": plan.summary,
        "prepTips": list(plan.prep_tips),
        "usedPantry": pantry_to_dict(plan.used_pantry) if plan.used_pantry else None,
        "createdAt": plan.created_at,
    }


# Draft


def option_to_dict(option: MealPrepOption) -> dict:
    return {
        "id": option.id,
        "label": option.label,
        "source": option.source.value,
        "items": [food_item_to_dict(i) for i in option.items],
        "calories": option.calories,
        "protein": option.protein,
        "carbs": option.carbs,
        "fat": option.fat,
    }


def option_from_dict(data: dict) -> MealPrepOption:
    return MealPrepOption(
        id=str(data["id"]),
        label=str(data.get("label", "")),
        source=_enum(OptionSource, data.get("source"), "option source"),
        items=[food_item_from_dict(i) for i in data.get("items", [])],
        calories=_num(data.get("calories")),
        protein=_num(data.get("protein")),
        carbs=_num(data.get("carbs")),
        fat=_num(data.get("fat")),
    )


def meal_draft_to_dict(meal: MealPrepMealDraft) -> dict:
    return {
        "mealType": meal.meal_type.value,
        "options": [option_to_dict(o) for o in meal.options],
        "selectedOptionId": meal.selected_option_id,
        "locked": meal.locked,
        "enabled": meal.enabled,
    }


def meal_draft_from_dict(data: dict, meal_type: MealCategory) -> MealPrepMealDraft:
    return MealPrepMealDraft(
        meal_type=_enum(MealCategory, data.get("mealType", meal_type.value), "meal type"),
        options=[option_from_dict(o) for o in data.get("options", [])],
        selected_option_id=str(data.get("selectedOptionId", "")),
        locked=bool(data.get("locked", False)),
        enabled=bool(data.get("enabled", True)),
    )


def day_to_dict(day: MealPrepDayDraft) -> dict:
    data = {
        "id": day.id,
        "label": day.label,
        "meals": {
            m.value: meal_draft_to_dict(day.meals[m]) if day.meals.get(m) else None
            for m in MealCategory
        },
    }
    if day.date_iso is not None:
        data["dateIso"] = day.date_iso
    return data


def day_from_dict(data: dict) -> MealPrepDayDraft:
    raw_meals = data.get("meals") or {}
    meals = {}
    for m in MealCategory:
        raw = raw_meals.get(m.value)
        meals[m] = meal_draft_from_dict(raw, m) if raw else None
    return MealPrepDayDraft(
        id=str(data["id"]),
        label=str(data.get("label", "")),
        date_iso=data.get("dateIso"),
        meals=meals,
    )


def task_to_dict(task: PrepTask) -> dict:
    return {
        "id": task.id,
        "category": task.category.value,
        "title": task.title,
        "description": task.description,
        "durationMinutes": task.duration_minutes,
        "completed": task.completed,
    }


def task_from_dict(data: dict) -> PrepTask:
    return PrepTask(
        id=str(data["id"]),
        category=_enum(TaskCategory, data.get("category"), "task category"),
        title=str(data.get("title", "")),
        description=str(data.get("description", "")),
        duration_minutes=int(data.get("durationMinutes", 0)),
        completed=bool(data.get("completed", False)),
    )


def block_to_dict(block: PrepBlock) -> dict:
    return {
        "id": block.id,
        "title": block.title,
        "subtitle": block.subtitle,
        "totalMinutes": block.total_minutes,
        "tasks": [task_to_dict(t) for t in block.tasks],
    }


def block_from_dict(data: dict) -> PrepBlock:
    return PrepBlock(
        id=str(data["id"]),
        title=str(data.get("title", "")),
        subtitle=str(data.get("subtitle", "")),
        total_minutes=int(data.get("totalMinutes", 0)),
        tasks=[task_from_dict(t) for t in data.get("tasks", [])],
    )


def shopping_item_to_dict(item: MealPrepShoppingItem) -> dict:
    return {
        "id": item.id,
        "name": item.name,
        "quantity": item.quantity,
        "unit": item.unit,
        "category": item.category.value,
        "sourceMeals": list(item.source_meals),
        "status": item.status.value,
        "statusEdited": item.status_edited,
    }


def shopping_item_from_dict(data: dict) -> MealPrepShoppingItem:
    return MealPrepShoppingItem(
        id=str(data["id"]),
        name=str(data.get("name", "")),
        quantity=_num(data.get("quantity")),
        unit=str(data.get("unit", "")),
        category=_enum(ShoppingCategory, data.get("category", "other"), "shopping category"),
        source_meals=[str(s) for s in data.get("sourceMeals", [])],
        status=_enum(ShoppingStatus, data.get("status", "buy"), "shopping status"),
        status_edited=bool(data.get("statusEdited", False)),
    )


def draft_to_dict(draft: MealPrepDraft) -> dict:
    return {
        "id": draft.id,
        "source": draft.source.value,
        "mode": draft.mode.value,
        "createdAt": draft.created_at,
        "updatedAt": draft.updated_at,
        "basePlanId": draft.base_plan_id,
        "strictPantryOnly": draft.strict_pantry_only,
        "allowAddOns": draft.allow_add_ons,
        "days": [day_to_dict(d) for d in draft.days],
        "prepBlocks": [block_to_dict(b) for b in draft.prep_blocks],
        "shopping": [shopping_item_to_dict(s) for s in draft.shopping],
        "originalPlan": plan_to_dict(draft.original_plan) if draft.original_plan else None,
    }


def draft_from_dict(data: dict) -> MealPrepDraft:
    original = data.get("originalPlan")
    return MealPrepDraft(
        id=str(data["id"]),
        source=_enum(DraftSource, data.get("source"), "draft source"),
        mode=_enum(DraftMode, data.get("mode"), "mode"),
        created_at=str(data.get("createdAt", "")),
        updated_at=str(data.get("updatedAt", "")),
        base_plan_id=data.get("basePlanId"),
        strict_pantry_only=bool(data.get("strictPantryOnly", False)),
        allow_add_ons=bool(data.get("allowAddOns", True)),
        days=[day_from_dict(d) for d in data.get("days", [])],
        prep_blocks=[block_from_dict(b) for b in data.get("prepBlocks", [])],
        shopping=[shopping_item_from_dict(s) for s in data.get("shopping", [])],
        original_plan=plan_from_dict(original) if original else None,
    )


def saved_plan_to_dict(record: SavedMealPrepPlan) -> dict:
    return {
        "id": record.id,
        "name": record.name,
        "createdAt": record.created_at,
        "updatedAt": record.updated_at,
        "draft": draft_to_dict(record.draft),
    }


def saved_plan_from_dict(data: dict) -> SavedMealPrepPlan:
    return SavedMealPrepPlan(
        id=str(data["id"]),
        name=str(data.get("name", "")),
        created_at=str(data.get("createdAt", "")),
        updated_at=str(data.get("updatedAt", "")),
        draft=draft_from_dict(data["draft"]),
    )


# Files


def read_data_file(path: Path) -> Any:
    """Read a JSON or YAML file (YAML is a superset, so one loader serves both)."""
    with open(path) as f:
        return yaml.safe_load(f)


def dump_json(data: Any) -> str:
    return json.dumps(data, indent=2, ensure_ascii=False)


def load_draft(path: Path) -> MealPrepDraft:
    with open(path) as f:
        return draft_from_dict(json.load(f))


def save_draft(draft: MealPrepDraft, path: Path) -> None:
    path.write_text(dump_json(draft_to_dict(draft)) + "\n")
