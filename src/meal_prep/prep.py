"""Prep block and task synthesis from a draft's shopping list and plan tips."""

from __future__ import annotations

import copy
import logging

from meal_prep.config import DEFAULTS
from meal_prep.models import (
    MealPrepDraft,
    MealPrepShoppingItem,
    PrepBlock,
    PrepBucket,
    PrepTask,
    ShoppingCategory,
    TaskCategory,
)
from meal_prep.pantry import tokenize

logger = logging.getLogger(__name__)

BUCKET_FOR_CATEGORY = {
    ShoppingCategory.PRODUCE: PrepBucket.PRODUCE,
    ShoppingCategory.MEAT: PrepBucket.PROTEIN,
    ShoppingCategory.DAIRY: PrepBucket.PROTEIN,
    ShoppingCategory.PANTRY: PrepBucket.GRAINS,
    ShoppingCategory.FROZEN: PrepBucket.OTHER,
    ShoppingCategory.OTHER: PrepBucket.OTHER,
}

BUCKET_TITLES = {
    PrepBucket.PRODUCE: ("Produce prep", "Wash and cut fruit and vegetables"),
    PrepBucket.PROTEIN: ("Protein batch", "Cook proteins for flexible reuse"),
    PrepBucket.GRAINS: ("Grains & staples", "Batch-cook grains and starches"),
    PrepBucket.OTHER: ("Extras", "Snacks, sides and everything else"),
}

BUCKET_ACTIONS = {
    PrepBucket.PRODUCE: [TaskCategory.CHOP, TaskCategory.PORTION, TaskCategory.STORE],
    PrepBucket.PROTEIN: [TaskCategory.COOK, TaskCategory.PORTION, TaskCategory.STORE],
    PrepBucket.GRAINS: [TaskCategory.COOK, TaskCategory.PORTION, TaskCategory.STORE],
    PrepBucket.OTHER: [TaskCategory.PORTION, TaskCategory.STORE],
}

ACTION_TEXT = {
    TaskCategory.CHOP: ("Chop {bucket}", "Wash and chop: {names}."),
    TaskCategory.COOK: ("Cook {bucket}", "Batch-cook with minimal seasoning: {names}."),
    TaskCategory.PORTION: ("Portion {bucket}", "Split into meal-sized containers: {names}."),
    TaskCategory.STORE: ("Store {bucket}", "Label by day and meal, then refrigerate or freeze: {names}."),
}

# Tip words that place a tip in a bucket when no ingredient name matches.
TIP_KEYWORDS = {
    PrepBucket.PRODUCE: {"chop", "dice", "wash", "vegetable", "veggie", "fruit", "salad"},
    PrepBucket.PROTEIN: {"marinate", "protein", "meat", "chicken", "egg", "grill", "sear"},
    PrepBucket.GRAINS: {"rice", "grain", "oat", "pasta", "quinoa", "boil"},
}


def make_task_id(bucket: PrepBucket, action: TaskCategory) -> str:
    return f"task-{bucket.value}-{action.value}"


def make_block_id(bucket: PrepBucket) -> str:
    return f"block-{bucket.value}"


def estimate_minutes(action: TaskCategory, ingredient_count: int, config: dict) -> int:
    """Per-ingredient minutes for an action, clamped to the configured range."""
    rule = config["prep"]["durations"][action.value]
    return max(rule["min"], min(rule["max"], ingredient_count * rule["per_item"]))


def bucket_for_tip(
    tip: str, items_by_bucket: dict[PrepBucket, list[MealPrepShoppingItem]]
) -> PrepBucket:
    """Bucket whose ingredients the tip mentions, else by keyword, else other."""
    tip_tokens = tokenize(tip)
    for bucket in PrepBucket:
        for item in items_by_bucket.get(bucket, []):
            name_tokens = tokenize(item.name)
            if name_tokens and name_tokens <= tip_tokens:
                return bucket
    for bucket, keywords in TIP_KEYWORDS.items():
        if tip_tokens & keywords:
            return bucket
    return PrepBucket.OTHER


def build_tasks(
    bucket: PrepBucket,
    items: list[MealPrepShoppingItem],
    tips: list[str],
    config: dict,
) -> list[PrepTask]:
    label = bucket.value
    names = ", ".join(item.name for item in items) or "prepped components"
    tasks = []
    for i, action in enumerate(BUCKET_ACTIONS[bucket]):
        title_tpl, desc_tpl = ACTION_TEXT[action]
        description = desc_tpl.format(names=names)
        # Tips go on the first task of the block, where prep starts.
        if i == 0 and tips:
            description += " Tips: " + " ".join(tips)
        tasks.append(
            PrepTask(
                id=make_task_id(bucket, action),
                category=action,
                title=title_tpl.format(bucket=label),
                description=description,
                duration_minutes=estimate_minutes(action, len(items), config),
                completed=False,
            )
        )
    return tasks


def build_prep_blocks(draft: MealPrepDraft, config: dict | None = None) -> list[PrepBlock]:
    """One block per non-empty bucket, carrying over completed tasks by id.

    Reads the draft's shopping list, so call it after the list is rebuilt.
    """
    config = config or DEFAULTS
    completed = {
        task.id for block in draft.prep_blocks for task in block.tasks if task.completed
    }

    items_by_bucket: dict[PrepBucket, list[MealPrepShoppingItem]] = {}
    for item in draft.shopping:
        items_by_bucket.setdefault(BUCKET_FOR_CATEGORY[item.category], []).append(item)

    tips_by_bucket: dict[PrepBucket, list[str]] = {}
    plan_tips = draft.original_plan.prep_tips if draft.original_plan else []
    for tip in plan_tips:
        if tip and tip.strip():
            bucket = bucket_for_tip(tip, items_by_bucket)
            tips_by_bucket.setdefault(bucket, []).append(tip.strip())

    day_count = len(draft.days)
    blocks = []
    for bucket in PrepBucket:
        items = items_by_bucket.get(bucket, [])
        tips = tips_by_bucket.get(bucket, [])
        if not items and not tips:
            continue
        tasks = build_tasks(bucket, items, tips, config)
        for task in tasks:
            task.completed = task.id in completed
        title, subtitle = BUCKET_TITLES[bucket]
        day_note = "1 day" if day_count == 1 else f"{day_count} days"
        blocks.append(
            PrepBlock(
                id=make_block_id(bucket),
                title=title,
                subtitle=f"{subtitle} ({len(items)} ingredients, {day_note})",
                total_minutes=sum(t.duration_minutes for t in tasks),
                tasks=tasks,
            )
        )

    logger.debug("Built %d prep blocks for draft %s", len(blocks), draft.id)
    return blocks


def find_task(draft: MealPrepDraft, task_id: str) -> PrepTask | None:
    for block in draft.prep_blocks:
        for task in block.tasks:
            if task.id == task_id:
                return task
    return None


def toggle_task(draft: MealPrepDraft, task_id: str) -> MealPrepDraft:
    """Flip a task's completed flag. Unknown task ids leave the draft unchanged."""
    if find_task(draft, task_id) is None:
        logger.debug("No prep task %s in draft %s", task_id, draft.id)
        return draft

    result = copy.deepcopy(draft)
    task = find_task(result, task_id)
    task.completed = not task.completed
    return result
