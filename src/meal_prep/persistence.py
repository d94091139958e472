"""Saved meal-prep plan records and a JSON-file plan store."""

from __future__ import annotations

import copy
import json
import logging
import uuid
from datetime import datetime
from pathlib import Path
from typing import Protocol

from meal_prep.codec import dump_json, saved_plan_from_dict, saved_plan_to_dict
from meal_prep.models import DraftSource, MealPrepDraft, SavedMealPrepPlan, timestamp

logger = logging.getLogger(__name__)

SOURCE_NAMES = {
    DraftSource.PANTRY: "Pantry",
    DraftSource.AI: "AI",
    DraftSource.SAVED: "Saved",
}


class StalePlanError(ValueError):
    """The stored record changed since the caller last read it."""


def default_plan_name(draft: MealPrepDraft, now: datetime | None = None) -> str:
    stamp = timestamp(now)
    return f"{SOURCE_NAMES[draft.source]} meal prep {stamp[:10]}"


def create_saved_plan_record(
    draft: MealPrepDraft,
    name: str | None = None,
    now: datetime | None = None,
) -> SavedMealPrepPlan:
    """Wrap a snapshot of the draft in a new named, timestamped record."""
    stamp = timestamp(now)
    cleaned = (name or "").strip()
    return SavedMealPrepPlan(
        id=uuid.uuid4().hex,
        name=cleaned or default_plan_name(draft, now),
        created_at=stamp,
        updated_at=stamp,
        draft=copy.deepcopy(draft),
    )


def update_saved_plan_record(
    record: SavedMealPrepPlan,
    draft: MealPrepDraft,
    name: str | None = None,
    now: datetime | None = None,
) -> SavedMealPrepPlan:
    """Same id and creation time; the draft is replaced wholesale."""
    cleaned = (name or "").strip()
    return SavedMealPrepPlan(
        id=record.id,
        name=cleaned or record.name,
        created_at=record.created_at,
        updated_at=timestamp(now),
        draft=copy.deepcopy(draft),
    )


class PlanStore(Protocol):
    def save(
        self, record: SavedMealPrepPlan, expected_updated_at: str | None = None
    ) -> None: ...

    def get(self, plan_id: str) -> SavedMealPrepPlan | None: ...

    def delete(self, plan_id: str) -> bool: ...

    def list(self) -> list[SavedMealPrepPlan]: ...

    def latest(self) -> SavedMealPrepPlan | None: ...


class JsonPlanStore:
    """Saved plans kept as a JSON array in a single file.

    Writers serialize per plan id through `expected_updated_at`: a save that
    names the `updated_at` it last read fails if someone else saved since.
    """

    def __init__(self, path: Path):
        self.path = Path(path)

    def _read(self) -> list[SavedMealPrepPlan]:
        if not self.path.exists():
            return []
        with open(self.path) as f:
            raw = json.load(f)
        if not isinstance(raw, list):
            raise ValueError(f"Plan store {self.path} must contain a JSON array")
        return [saved_plan_from_dict(entry) for entry in raw]

    def _write(self, records: list[SavedMealPrepPlan]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_suffix(self.path.suffix + ".tmp")
        tmp.write_text(dump_json([saved_plan_to_dict(r) for r in records]) + "\n")
        tmp.replace(self.path)

    def save(
        self, record: SavedMealPrepPlan, expected_updated_at: str | None = None
    ) -> None:
        records = self._read()
        for i, existing in enumerate(records):
            if existing.id != record.id:
                continue
            if expected_updated_at is not None and existing.updated_at != expected_updated_at:
                raise StalePlanError(
                    f"Plan '{existing.name}' was updated at {existing.updated_at}, "
                    f"expected {expected_updated_at}"
                )
            records[i] = record
            logger.debug("Updated saved plan %s", record.id)
            break
        else:
            records.insert(0, record)
            logger.debug("Stored new saved plan %s", record.id)
        self._write(records)

    def get(self, plan_id: str) -> SavedMealPrepPlan | None:
        for record in self._read():
            if record.id == plan_id:
                return record
        return None

    def delete(self, plan_id: str) -> bool:
        records = self._read()
        kept = [r for r in records if r.id != plan_id]
        if len(kept) == len(records):
            return False
        self._write(kept)
        return True

    def list(self) -> list[SavedMealPrepPlan]:
        """Saved plans, most recently updated first."""
        return sorted(self._read(), key=lambda r: r.updated_at, reverse=True)

    def latest(self) -> SavedMealPrepPlan | None:
        plans = self.list()
        return plans[0] if plans else None
