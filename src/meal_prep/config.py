"""Engine settings loading with defaults and CLI override merging."""

from __future__ import annotations

import copy
from pathlib import Path

import yaml

DEFAULT_CONFIG_PATH = Path.home() / ".config" / "meal-prep" / "config.yaml"

DEFAULTS = {
    "store": {
        "path": str(Path.home() / ".local" / "share" / "meal-prep" / "plans.json"),
    },
    "pantry": {
        "matcher": "token",
    },
    "factory": {
        "max_options": 4,
        "balanced": {
            "calories": 0.95,
            "min_calories": 40,
            "weight": 0.95,
            "protein": 1.05,
            "carbs": 0.95,
            "fat": 0.95,
        },
    },
    "shopping": {
        "minor_max_grams": 10,
        "add_on_keywords": [
            "salt",
            "black pepper",
            "spice",
            "seasoning",
            "herb",
            "sauce",
            "dressing",
            "oil",
            "vinegar",
            "syrup",
            "honey",
            "garnish",
            "sprinkle",
            "cinnamon",
        ],
    },
    "prep": {
        # minutes per ingredient, clamped to [min, max]
        "durations": {
            "chop": {"per_item": 3, "min": 10, "max": 45},
            "cook": {"per_item": 4, "min": 15, "max": 60},
            "portion": {"per_item": 2, "min": 5, "max": 20},
            "store": {"per_item": 1, "min": 5, "max": 10},
        },
    },
    "export": {
        "prep_start": "10:00",
        "prodid": "-//Meal Prep Drafts//Prep Calendar//EN",
    },
}


def deep_merge(base: dict, override: dict) -> dict:
    """Recursively merge override into base, returning a new dict."""
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def load_config(config_path: Path | None = None) -> dict:
    """Load engine settings from a YAML file, falling back to defaults."""
    path = config_path or DEFAULT_CONFIG_PATH

    if path.exists():
        with open(path) as f:
            user_config = yaml.safe_load(f) or {}
        if not isinstance(user_config, dict):
            raise ValueError(f"Config file {path} must contain a mapping")
        return deep_merge(copy.deepcopy(DEFAULTS), user_config)

    return copy.deepcopy(DEFAULTS)


def apply_cli_overrides(config: dict, **overrides: object) -> dict:
    """Apply CLI argument overrides to config.

    Supports flat keys that map into nested config:
      store -> store.path
      matcher -> pantry.matcher
      prep_start -> export.prep_start
    """
    if overrides.get("store") is not None:
        config["store"]["path"] = str(overrides["store"])
    if overrides.get("matcher") is not None:
        config["pantry"]["matcher"] = str(overrides["matcher"]).strip().lower()
    if overrides.get("prep_start") is not None:
        config["export"]["prep_start"] = str(overrides["prep_start"]).strip()

    return config
