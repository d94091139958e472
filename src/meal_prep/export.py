"""Portable exports of a draft: plain-text summary, shopping CSV, prep calendar."""

from __future__ import annotations

import csv
import io
import re
from datetime import date, datetime, timedelta, timezone

from meal_prep.config import DEFAULTS
from meal_prep.models import MealCategory, MealPrepDraft, ShoppingStatus
from meal_prep.refresh import compute_draft_totals

CSV_HEADER = ["name", "quantity", "unit", "category", "status", "sourceMeals"]

STATUS_ORDER = [ShoppingStatus.BUY, ShoppingStatus.HAVE, ShoppingStatus.OPTIONAL]

STATUS_LABELS = {
    ShoppingStatus.BUY: "To buy",
    ShoppingStatus.HAVE: "Already have",
    ShoppingStatus.OPTIONAL: "Optional add-ons",
}

ICS_LINE_LIMIT = 75


def format_quantity(qty: float) -> str:
    """Whole numbers without a decimal point, others to one decimal."""
    if qty == int(qty):
        return str(int(qty))
    return f"{qty:.1f}"


def _macros(calories: float, protein: float, carbs: float, fat: float) -> str:
    return f"{calories:.0f} kcal | P {protein:.0f}g | C {carbs:.0f}g | F {fat:.0f}g"


def draft_to_summary_text(draft: MealPrepDraft, title: str | None = None) -> str:
    """Plain-text report: title, per-day meals, totals, shopping by status."""
    totals = compute_draft_totals(draft)
    lines = [
        title or f"Meal Prep ({draft.mode.value})",
        f"Created: {draft.created_at}",
        f"Mode: {draft.mode.value}",
        "",
        "Schedule:",
    ]

    for day in draft.days:
        date_note = f" ({day.date_iso})" if day.date_iso else ""
        lines.append(f"- {day.label}{date_note}")
        for meal_type in MealCategory:
            meal = day.meals.get(meal_type)
            if meal is None:
                continue
            selected = meal.selected_option
            if not meal.enabled:
                lines.append(f"    {meal_type.value}: (skipped)")
            elif selected is None:
                lines.append(f"    {meal_type.value}: (no options)")
            else:
                lock_note = " [locked]" if meal.locked else ""
                lines.append(
                    f"    {meal_type.value}: {selected.label}{lock_note} - "
                    + _macros(selected.calories, selected.protein, selected.carbs, selected.fat)
                )

    lines.extend(
        [
            "",
            "Totals:",
            f"  Meals: {totals.meal_count}",
            f"  Calories: {totals.calories} kcal",
            f"  Macros: P {totals.protein}g | C {totals.carbs}g | F {totals.fat}g",
            "",
            "Shopping:",
        ]
    )

    if not any(item.status == ShoppingStatus.BUY for item in draft.shopping):
        lines.append("  No pending items.")
    for status in STATUS_ORDER:
        items = [item for item in draft.shopping if item.status == status]
        if not items:
            continue
        lines.append(f"  {STATUS_LABELS[status]} ({len(items)}):")
        for item in items:
            lines.append(f"    - {item.name}: {format_quantity(item.quantity)}{item.unit}")

    return "\n".join(lines) + "\n"


def draft_to_shopping_csv(draft: MealPrepDraft) -> str:
    """One row per shopping item under a fixed header."""
    buf = io.StringIO()
    writer = csv.writer(buf, lineterminator="\n")
    writer.writerow(CSV_HEADER)
    for item in draft.shopping:
        writer.writerow(
            [
                item.name,
                format_quantity(item.quantity),
                item.unit,
                item.category.value,
                item.status.value,
                ";".join(item.source_meals),
            ]
        )
    return buf.getvalue()


def escape_ics_text(value: str) -> str:
    """Escape a TEXT value (RFC 5545 section 3.3.11)."""
    return (
        value.replace("\\", "\\\\")
        .replace(";", "\\;")
        .replace(",", "\\,")
        .replace("\r\n", "\\n")
        .replace("\n", "\\n")
    )


def fold_ics_line(line: str) -> list[str]:
    """Split a content line into chunks of at most 75 octets."""
    encoded = line.encode("utf-8")
    if len(encoded) <= ICS_LINE_LIMIT:
        return [line]
    parts = []
    current = ""
    limit = ICS_LINE_LIMIT
    for ch in line:
        if len((current + ch).encode("utf-8")) > limit:
            parts.append(current)
            current = ""
            limit = ICS_LINE_LIMIT - 1  # continuation lines start with a space
        current += ch
    parts.append(current)
    return [parts[0]] + [" " + p for p in parts[1:]]


def _ics_stamp(value: datetime) -> str:
    return value.strftime("%Y%m%dT%H%M%S")


def _prep_start(draft: MealPrepDraft, start_time: str) -> datetime:
    """Prep day is the draft's first dated day, else the day it was created."""
    day_iso = next((d.date_iso for d in draft.days if d.date_iso), None)
    prep_day = None
    for candidate in (day_iso, draft.created_at):
        if candidate:
            try:
                prep_day = date.fromisoformat(candidate[:10])
                break
            except ValueError:
                continue
    if prep_day is None:
        prep_day = date.today()

    match = re.fullmatch(r"(\d{1,2}):(\d{2})", start_time.strip())
    if not match:
        raise ValueError(f"Invalid prep start time '{start_time}', expected HH:MM")
    return datetime.combine(prep_day, datetime.min.time()).replace(
        hour=int(match.group(1)), minute=int(match.group(2))
    )


def _dtstamp(draft: MealPrepDraft) -> str:
    """UTC stamp from the draft's last update, so output is stable per draft."""
    try:
        updated = datetime.fromisoformat(draft.updated_at)
    except ValueError:
        updated = datetime(1970, 1, 1)
    if updated.tzinfo is not None:
        updated = updated.astimezone(timezone.utc).replace(tzinfo=None)
    return _ics_stamp(updated) + "Z"


def draft_to_calendar_ics(draft: MealPrepDraft, config: dict | None = None) -> str:
    """A VCALENDAR with one VEVENT per prep block, scheduled back to back."""
    config = config or DEFAULTS
    export_cfg = config["export"]

    lines = [
        "BEGIN:VCALENDAR",
        "VERSION:2.0",
        f"PRODID:{export_cfg['prodid']}",
        "CALSCALE:GREGORIAN",
    ]

    start = _prep_start(draft, export_cfg["prep_start"]) if draft.prep_blocks else None
    stamp = _dtstamp(draft)
    for block in draft.prep_blocks:
        end = start + timedelta(minutes=block.total_minutes)
        description = "\n".join(task.title for task in block.tasks)
        lines.extend(
            [
                "BEGIN:VEVENT",
                f"UID:{draft.id}-{block.id}@meal-prep",
                f"DTSTAMP:{stamp}",
                f"DTSTART:{_ics_stamp(start)}",
                f"DTEND:{_ics_stamp(end)}",
                f"SUMMARY:{escape_ics_text(block.title)}",
                f"DESCRIPTION:{escape_ics_text(description)}",
                "END:VEVENT",
            ]
        )
        start = end

    lines.append("END:VCALENDAR")

    folded = []
    for line in lines:
        folded.extend(fold_ics_line(line))
    return "\r\n".join(folded) + "\r\n"


def export_filename(name: str, kind: str) -> str:
    """File name for an export: "Sunday Prep", "csv" -> "sunday-prep-shopping.csv"."""
    slug = re.sub(r"[^a-z0-9]+", "-", name.lower()).strip("-") or "meal-prep"
    suffixes = {"csv": "shopping.csv", "ics": "prep.ics", "text": "summary.txt"}
    if kind not in suffixes:
        raise ValueError(f"Unknown export kind '{kind}'")
    return f"{slug}-{suffixes[kind]}"
