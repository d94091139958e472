"""CLI entry point for the meal-prep draft engine."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from meal_prep.config import DEFAULT_CONFIG_PATH

logger = logging.getLogger(__name__)


def get_config(args: argparse.Namespace) -> dict:
    from meal_prep.config import apply_cli_overrides, load_config

    config_path = Path(args.config) if args.config else None
    config = load_config(config_path)
    return apply_cli_overrides(
        config,
        store=args.store,
        matcher=getattr(args, "matcher", None),
        prep_start=getattr(args, "prep_start", None),
    )


def cmd_create(args: argparse.Namespace) -> None:
    from meal_prep.commands import run_create

    run_create(
        get_config(args),
        plan_file=args.plan,
        pantry_file=args.pantry,
        source=args.source,
        mode=args.mode,
        strict=args.strict,
        out=args.out,
        save_name=args.save,
    )


def cmd_edit(args: argparse.Namespace) -> None:
    from meal_prep.commands import run_edit

    run_edit(
        get_config(args),
        draft_file=args.draft,
        action_specs=args.action,
        pantry_file=args.pantry,
        out=args.out,
    )


def cmd_export(args: argparse.Namespace) -> None:
    from meal_prep.commands import run_export

    run_export(
        get_config(args),
        draft_file=args.draft,
        plan_id=args.plan_id,
        export_format=args.format,
        output=args.output,
        output_dir=args.output_dir,
    )


def cmd_sync(args: argparse.Namespace) -> None:
    from meal_prep.commands import run_sync

    run_sync(get_config(args), draft_file=args.draft)


def cmd_save(args: argparse.Namespace) -> None:
    from meal_prep.commands import run_save

    run_save(
        get_config(args),
        draft_file=args.draft,
        name=args.name,
        plan_id=args.plan_id,
        expected_updated_at=args.expect_updated_at,
    )


def cmd_plans(args: argparse.Namespace) -> None:
    from meal_prep.commands import run_plans

    run_plans(get_config(args), action=args.plans_action, plan_id=args.plan_id)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="meal-prep",
        description="Turn a daily meal plan and pantry into an editable meal-prep draft",
    )
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help=f"Path to YAML settings (default: {DEFAULT_CONFIG_PATH})",
    )
    parser.add_argument(
        "--store",
        type=str,
        default=None,
        help="Path to the saved-plans JSON file (overrides config store.path)",
    )
    parser.add_argument(
        "--log-level",
        choices=["debug", "info", "warning", "error"],
        default="info",
        help="Logging verbosity (default: info)",
    )
    parser.add_argument(
        "--log-file",
        type=str,
        default=None,
        help="Also write logs to this file",
    )

    sub = parser.add_subparsers(dest="command", required=True)

    # create
    p_create = sub.add_parser("create", help="Build a draft from a meal plan")
    p_create.add_argument("--plan", type=str, required=True, help="Path to plan JSON")
    p_create.add_argument(
        "--pantry", type=str, help="Pantry YAML/JSON (default: the plan's usedPantry)"
    )
    p_create.add_argument(
        "--source", type=str, choices=["pantry", "ai", "saved"], default="ai"
    )
    p_create.add_argument(
        "--mode", type=str, choices=["daily", "weekly"], default="daily"
    )
    p_create.add_argument(
        "--strict", action="store_true", help="Strict pantry mode (no add-ons)"
    )
    p_create.add_argument(
        "--matcher",
        type=str,
        choices=["token", "exact", "fuzzy"],
        help="Pantry matching strategy (overrides config pantry.matcher)",
    )
    p_create.add_argument("--out", type=str, help="Write the draft JSON here")
    p_create.add_argument(
        "--save",
        nargs="?",
        const="auto",
        default=None,
        help="Also store the draft as a saved plan. Optional name.",
    )
    p_create.set_defaults(func=cmd_create)

    # edit
    p_edit = sub.add_parser("edit", help="Apply edits to a draft file")
    p_edit.add_argument("draft", type=str, help="Path to draft JSON")
    p_edit.add_argument(
        "--action",
        action="append",
        default=[],
        required=True,
        help='Edit to apply, e.g. "cycle:monday:dinner", "lock:all:lunch", '
             '"select:1:breakfast:Pantry rotation", "mode:weekly", "strict:on", '
             '"add-ons:off", "task:<task id>", "status:<item id>:have", '
             '"rename:<item id>:New name", "remove:<item id>". Repeatable.',
    )
    p_edit.add_argument("--pantry", type=str, help="Pantry YAML/JSON to classify against")
    p_edit.add_argument(
        "--matcher", type=str, choices=["token", "exact", "fuzzy"]
    )
    p_edit.add_argument("--out", type=str, help="Write here instead of in place")
    p_edit.set_defaults(func=cmd_edit)

    # export
    p_export = sub.add_parser("export", help="Export a draft as text, CSV, or ICS")
    p_export.add_argument("draft", type=str, nargs="?", help="Path to draft JSON")
    p_export.add_argument("--plan-id", type=str, help="Export a saved plan instead")
    p_export.add_argument(
        "--format", type=str, choices=["text", "csv", "ics"], default="text"
    )
    p_export.add_argument("--prep-start", type=str, help="Calendar start time, HH:MM")
    p_export.add_argument("--output", type=str, help="Write to this file")
    p_export.add_argument(
        "--output-dir", type=str, help="Write to this directory with a generated name"
    )
    p_export.set_defaults(func=cmd_export)

    # sync
    p_sync = sub.add_parser("sync", help="Emit shopping-list events for items to buy")
    p_sync.add_argument("draft", type=str, help="Path to draft JSON")
    p_sync.set_defaults(func=cmd_sync)

    # save
    p_save = sub.add_parser("save", help="Store a draft as a saved plan")
    p_save.add_argument("draft", type=str, help="Path to draft JSON")
    p_save.add_argument("--name", type=str)
    p_save.add_argument("--plan-id", type=str, help="Update this saved plan")
    p_save.add_argument(
        "--expect-updated-at",
        type=str,
        help="Reject the update if the stored plan changed since this timestamp",
    )
    p_save.set_defaults(func=cmd_save)

    # plans
    p_plans = sub.add_parser("plans", help="List, show, or delete saved plans")
    p_plans.add_argument("plans_action", choices=["list", "show", "delete"])
    p_plans.add_argument(
        "plan_id", nargs="?", default=None, help="Plan id (show defaults to the latest plan)"
    )
    p_plans.set_defaults(func=cmd_plans)

    return parser


def main() -> None:
    from meal_prep.log import setup_logging

    parser = build_parser()
    args = parser.parse_args()

    log_file = Path(args.log_file) if args.log_file else None
    setup_logging(level=args.log_level, log_file=log_file)

    try:
        args.func(args)
    except (ValueError, OSError) as exc:
        logger.error("%s", exc)
        sys.exit(1)


if __name__ == "__main__":
    main()
