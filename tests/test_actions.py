import pytest
from datetime import datetime, timezone

from meal_prep.actions import (
    ActionKind,
    apply_action,
    apply_actions,
    parse_action,
    resolve_day_ids,
)
from meal_prep.models import DraftMode, MealCategory, ShoppingStatus

LATER = datetime(2024, 3, 5, 9, 0, tzinfo=timezone.utc)


class TestParseAction:
    def test_meal_action(self):
        action = parse_action("cycle:monday:dinner")
        assert action.kind == ActionKind.CYCLE_OPTION
        assert action.day == "monday"
        assert action.meal_type == MealCategory.DINNER

    def test_select_keeps_colons_in_option(self):
        action = parse_action("select:1:breakfast:Option: two")
        assert action.kind == ActionKind.SELECT_OPTION
        assert action.target == "Option: two"

    def test_case_insensitive(self):
        action = parse_action("LOCK:All:LUNCH")
        assert action.kind == ActionKind.TOGGLE_LOCK
        assert action.meal_type == MealCategory.LUNCH

    def test_switches(self):
        assert parse_action("mode:Weekly").value == "weekly"
        assert parse_action("strict:on").value == "on"
        assert parse_action("add-ons:no").value == "off"

    def test_item_actions(self):
        status = parse_action("status:shop-abc:have")
        assert status.target == "shop-abc"
        assert status.value == "have"
        assert parse_action("rename:shop-abc:Gala apples").value == "Gala apples"
        assert parse_action("remove:shop-abc").target == "shop-abc"
        assert parse_action("task:task-produce-chop").target == "task-produce-chop"

    @pytest.mark.parametrize("raw,message", [
        ("bogus:x", "Unknown action"),
        ("cycle:monday", "Invalid action format"),
        ("select:1:breakfast", "Invalid action format"),
        ("cycle:monday:brunch", "Unknown meal type"),
        ("mode:", "Missing argument"),
        ("mode:monthly", "Unknown mode"),
        ("strict:maybe", "Expected on/off"),
        ("status:shop-abc:gone", "Unknown status"),
        ("status::have", "Missing item id"),
    ])
    def test_errors(self, raw, message):
        with pytest.raises(ValueError, match=message):
            parse_action(raw)


class TestResolveDays:
    def test_selectors(self, weekly_draft):
        ids = [d.id for d in weekly_draft.days]
        assert resolve_day_ids(weekly_draft, "all") == ids
        assert resolve_day_ids(weekly_draft, "1") == [ids[0]]
        assert resolve_day_ids(weekly_draft, "Sunday") == [ids[6]]
        assert resolve_day_ids(weekly_draft, ids[3]) == [ids[3]]
        assert resolve_day_ids(weekly_draft, "9") == []
        assert resolve_day_ids(weekly_draft, "someday") == []


class TestApplyAction:
    def test_structural_action_refreshes(self, ai_draft, sample_pantry):
        action = parse_action("toggle:monday:snack")
        result = apply_action(ai_draft, action, sample_pantry, now=LATER)
        assert result.days[0].meals[MealCategory.SNACK].enabled is False
        assert "Apple" not in [i.name for i in result.shopping]
        assert result.updated_at == "2024-03-05T09:00:00+00:00"

    def test_select_by_label(self, ai_draft, sample_pantry):
        result = apply_action(ai_draft, parse_action("select:1:breakfast:AI balanced"),
                              sample_pantry)
        assert result.days[0].meals[MealCategory.BREAKFAST].selected_option.label == "AI balanced"

    def test_noop_returns_same_draft(self, ai_draft, sample_pantry):
        assert apply_action(ai_draft, parse_action("cycle:friday:lunch"), sample_pantry) is ai_draft
        assert apply_action(ai_draft, parse_action("mode:daily"), sample_pantry) is ai_draft

    def test_task_toggle_skips_refresh(self, ai_draft):
        result = apply_action(ai_draft, parse_action("task:task-produce-chop"), now=LATER)
        assert result.updated_at == ai_draft.updated_at
        assert result.prep_blocks[0].tasks[0].completed is True

    def test_status_edit_skips_refresh(self, ai_draft):
        apple = next(i for i in ai_draft.shopping if i.name == "Apple")
        result = apply_action(ai_draft, parse_action(f"status:{apple.id}:have"), now=LATER)
        assert result.find_shopping_item(apple.id).status == ShoppingStatus.HAVE
        assert result.updated_at == ai_draft.updated_at

    def test_mode_switch_rebuilds_shopping(self, ai_draft, sample_pantry):
        result = apply_action(ai_draft, parse_action("mode:weekly"), sample_pantry)
        assert result.mode == DraftMode.WEEKLY
        rice = next(i for i in result.shopping if i.name == "Brown rice")
        assert rice.quantity == 1750

    def test_strict_reclassifies(self, ai_draft, sample_pantry):
        result = apply_action(ai_draft, parse_action("strict:on"), sample_pantry)
        assert result.allow_add_ons is False
        assert all(i.status != ShoppingStatus.OPTIONAL for i in result.shopping)

    def test_apply_actions_in_order(self, ai_draft, sample_pantry):
        actions = [
            parse_action("lock:1:dinner"),
            parse_action("cycle:1:dinner"),
            parse_action("lock:1:dinner"),
            parse_action("cycle:1:dinner"),
        ]
        result = apply_actions(ai_draft, actions, sample_pantry)
        dinner = result.days[0].meals[MealCategory.DINNER]
        assert dinner.locked is False
        assert dinner.selected_option.label == "AI balanced"
