import logging

import pytest

from meal_prep.config import DEFAULTS, apply_cli_overrides, deep_merge, load_config
from meal_prep.log import LOGGER_NAME, setup_logging


class TestLoadConfig:
    def test_defaults_when_missing(self, tmp_path):
        config = load_config(tmp_path / "absent.yaml")
        assert config == DEFAULTS
        assert config is not DEFAULTS

    def test_merges_user_file(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("pantry:\n  matcher: fuzzy\nexport:\n  prep_start: '08:15'\n")
        config = load_config(path)
        assert config["pantry"]["matcher"] == "fuzzy"
        assert config["export"]["prep_start"] == "08:15"
        assert config["export"]["prodid"] == DEFAULTS["export"]["prodid"]
        assert config["factory"]["max_options"] == 4

    def test_empty_file(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("")
        assert load_config(path) == DEFAULTS

    def test_non_mapping(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("- just\n- a list\n")
        with pytest.raises(ValueError, match="must contain a mapping"):
            load_config(path)

    def test_defaults_not_mutated(self, tmp_path):
        config = load_config(tmp_path / "absent.yaml")
        config["shopping"]["add_on_keywords"].append("ketchup")
        assert "ketchup" not in DEFAULTS["shopping"]["add_on_keywords"]


class TestOverrides:
    def test_apply(self, tmp_path):
        config = load_config(tmp_path / "absent.yaml")
        apply_cli_overrides(config, store=tmp_path / "p.json", matcher=" Exact", prep_start="09:00")
        assert config["store"]["path"] == str(tmp_path / "p.json")
        assert config["pantry"]["matcher"] == "exact"
        assert config["export"]["prep_start"] == "09:00"

    def test_none_leaves_defaults(self, tmp_path):
        config = load_config(tmp_path / "absent.yaml")
        apply_cli_overrides(config, store=None, matcher=None)
        assert config == DEFAULTS

    def test_deep_merge(self):
        merged = deep_merge({"a": {"b": 1, "c": 2}}, {"a": {"c": 3}, "d": 4})
        assert merged == {"a": {"b": 1, "c": 3}, "d": 4}


class TestLogging:
    def test_setup_logging(self, tmp_path):
        logger = setup_logging("warning", tmp_path / "run.log")
        assert logger.name == LOGGER_NAME
        assert logger.level == logging.DEBUG
        assert len(logger.handlers) == 2
        logger.debug("to file only")
        logger.handlers[1].flush()
        assert "to file only" in (tmp_path / "run.log").read_text()
        setup_logging("info")
        assert len(logging.getLogger(LOGGER_NAME).handlers) == 1
