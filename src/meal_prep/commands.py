"""CLI command implementations: file I/O around the pure draft engine."""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path

from meal_prep.codec import (
    draft_to_dict,
    dump_json,
    load_draft,
    pantry_from_dict,
    plan_from_dict,
    read_data_file,
    save_draft,
)
from meal_prep.log import notify
from meal_prep.models import (
    DraftMode,
    DraftSource,
    MealPrepDraft,
    PantryData,
    SavedMealPrepPlan,
)
from meal_prep.pantry import resolve_matcher
from meal_prep.persistence import (
    JsonPlanStore,
    PlanStore,
    create_saved_plan_record,
    update_saved_plan_record,
)

logger = logging.getLogger(__name__)


def open_store(config: dict) -> PlanStore:
    return JsonPlanStore(Path(config["store"]["path"]))


def load_pantry(pantry_file: str | None) -> PantryData | None:
    if not pantry_file:
        return None
    data = read_data_file(Path(pantry_file))
    if not isinstance(data, dict):
        raise ValueError(f"Pantry file {pantry_file} must contain a mapping")
    return pantry_from_dict(data)


def write_output(text: str, output: str | None) -> None:
    if output:
        Path(output).write_text(text)
        notify(f"Wrote {output}")
    else:
        sys.stdout.write(text)


def emit_draft(draft: MealPrepDraft, out: str | None) -> None:
    if out:
        save_draft(draft, Path(out))
        notify(f"Draft saved to {out}")
    else:
        print(dump_json(draft_to_dict(draft)))


def run_create(
    config: dict,
    plan_file: str,
    pantry_file: str | None = None,
    source: str = "ai",
    mode: str = "daily",
    strict: bool = False,
    out: str | None = None,
    save_name: str | None = None,
) -> MealPrepDraft:
    """CLI entry point for create command."""
    from meal_prep.factory import create_meal_prep_draft

    raw = read_data_file(Path(plan_file))
    if not isinstance(raw, dict):
        raise ValueError(f"Plan file {plan_file} must contain a JSON object")
    plan = plan_from_dict(raw)
    pantry = load_pantry(pantry_file)

    draft = create_meal_prep_draft(
        plan,
        pantry,
        DraftSource(source),
        DraftMode(mode),
        strict_pantry_only=strict,
        config=config,
        matcher=resolve_matcher(config),
    )
    logger.info(
        "Draft %s: %d days, %d shopping items, %d prep blocks",
        draft.id,
        len(draft.days),
        len(draft.shopping),
        len(draft.prep_blocks),
    )

    if save_name is not None:
        record = create_saved_plan_record(draft, None if save_name == "auto" else save_name)
        open_store(config).save(record)
        notify(f"Saved plan '{record.name}' ({record.id})")

    emit_draft(draft, out)
    return draft


def run_edit(
    config: dict,
    draft_file: str,
    action_specs: list[str],
    pantry_file: str | None = None,
    out: str | None = None,
) -> MealPrepDraft:
    """CLI entry point for edit command. Writes back in place unless --out is given."""
    from meal_prep.actions import apply_actions, parse_action

    actions = [parse_action(spec) for spec in action_specs]
    draft = load_draft(Path(draft_file))
    edited = apply_actions(
        draft,
        actions,
        pantry=load_pantry(pantry_file),
        config=config,
        matcher=resolve_matcher(config),
    )
    if edited is draft:
        logger.warning("No changes applied to draft %s", draft.id)

    save_draft(edited, Path(out or draft_file))
    notify(f"Draft saved to {out or draft_file}")
    return edited


def _draft_for_export(
    config: dict, draft_file: str | None, plan_id: str | None
) -> tuple[MealPrepDraft, str | None]:
    if plan_id:
        record = open_store(config).get(plan_id)
        if record is None:
            raise ValueError(f"No saved plan with id '{plan_id}'")
        return record.draft, record.name
    if not draft_file:
        raise ValueError("Give a draft file or --plan-id")
    return load_draft(Path(draft_file)), None


def run_export(
    config: dict,
    draft_file: str | None = None,
    plan_id: str | None = None,
    export_format: str = "text",
    output: str | None = None,
    output_dir: str | None = None,
) -> str:
    """CLI entry point for export command."""
    from meal_prep.export import (
        draft_to_calendar_ics,
        draft_to_shopping_csv,
        draft_to_summary_text,
        export_filename,
    )

    draft, name = _draft_for_export(config, draft_file, plan_id)

    if export_format == "csv":
        text = draft_to_shopping_csv(draft)
    elif export_format == "ics":
        text = draft_to_calendar_ics(draft, config)
    else:
        text = draft_to_summary_text(draft, title=name)

    if output_dir and not output:
        filename = export_filename(name or f"meal prep {draft.mode.value}", export_format)
        output = str(Path(output_dir) / filename)
    write_output(text, output)
    return text


def run_sync(config: dict, draft_file: str) -> int:
    """CLI entry point for sync command. Prints one JSON event per line."""
    from meal_prep.shopping import sync_to_shopping

    draft = load_draft(Path(draft_file))
    result = sync_to_shopping(draft, lambda event: print(json.dumps(event.to_dict())))
    notify(result.message, style="yellow" if result.nothing_to_buy else "green")
    return len(result.events)


def run_save(
    config: dict,
    draft_file: str,
    name: str | None = None,
    plan_id: str | None = None,
    expected_updated_at: str | None = None,
) -> None:
    """CLI entry point for save command: new record, or update of --plan-id."""
    store = open_store(config)
    draft = load_draft(Path(draft_file))

    if plan_id:
        existing = store.get(plan_id)
        if existing is None:
            raise ValueError(f"No saved plan with id '{plan_id}'")
        record = update_saved_plan_record(existing, draft, name)
        store.save(record, expected_updated_at=expected_updated_at)
        notify(f"Updated plan '{record.name}' ({record.id})")
        return

    record = create_saved_plan_record(draft, name)
    store.save(record)
    notify(f"Saved plan '{record.name}' ({record.id})")


def format_plans_table(plans: list[SavedMealPrepPlan]) -> str:
    """Saved plans as a fixed-width table."""
    from meal_prep.refresh import compute_draft_totals

    lines = []
    header = f"{'ID':<34} {'Mode':<7} {'Days':<5} {'Kcal':<7} {'Updated':<26} {'Name'}"
    lines.append(header)
    lines.append("-" * len(header))
    for record in plans:
        totals = compute_draft_totals(record.draft)
        lines.append(
            f"{record.id:<34} {record.draft.mode.value:<7} {len(record.draft.days):<5} "
            f"{totals.calories:<7} {record.updated_at:<26} {record.name}"
        )
    return "\n".join(lines)


def run_plans(config: dict, action: str, plan_id: str | None = None) -> None:
    """CLI entry point for plans command (list, show, delete).

    `show` without a plan id shows the most recently updated plan.
    """
    store = open_store(config)

    if action == "list":
        plans = store.list()
        if not plans:
            logger.warning("No saved plans yet")
            return
        print(format_plans_table(plans))
        return

    if action == "show":
        from meal_prep.export import draft_to_summary_text

        record = store.get(plan_id) if plan_id else store.latest()
        if record is None:
            raise ValueError(f"No saved plan with id '{plan_id}'" if plan_id else "No saved plans yet")
        sys.stdout.write(draft_to_summary_text(record.draft, title=record.name))
        return

    if not plan_id:
        raise ValueError(f"'plans {action}' needs a plan id")
    if store.delete(plan_id):
        notify(f"Deleted plan {plan_id}")
    else:
        logger.warning("No saved plan with id '%s'", plan_id)
