import copy

from meal_prep.factory import create_meal_prep_draft
from meal_prep.models import WEEKDAY_LABELS, DraftMode, DraftSource, MealCategory
from meal_prep.modes import switch_draft_mode
from meal_prep.options import cycle_option, toggle_lock


class TestSwitchDraftMode:
    def test_daily_to_weekly(self, ai_draft):
        weekly = switch_draft_mode(ai_draft, DraftMode.WEEKLY)
        assert weekly.mode == DraftMode.WEEKLY
        assert len(weekly.days) == 7
        assert [d.label for d in weekly.days] == WEEKDAY_LABELS
        assert len({d.id for d in weekly.days}) == 7
        assert weekly.days[6].date_iso == "2024-03-10"

    def test_week_starts_on_day_weekday(self, sample_plan, sample_pantry):
        sample_plan.date = "2024-03-06"
        daily = create_meal_prep_draft(
            sample_plan, sample_pantry, DraftSource.AI, DraftMode.DAILY
        )
        assert daily.days[0].label == "Wednesday"

        weekly = switch_draft_mode(daily, DraftMode.WEEKLY)
        assert [d.label for d in weekly.days] == [
            "Wednesday", "Thursday", "Friday", "Saturday", "Sunday", "Monday", "Tuesday",
        ]
        assert weekly.days[6].date_iso == "2024-03-12"

    def test_expansion_copies_locks_and_selection(self, ai_draft):
        day_id = ai_draft.days[0].id
        draft = cycle_option(ai_draft, day_id, MealCategory.DINNER)
        draft = toggle_lock(draft, day_id, MealCategory.DINNER)
        selected = draft.days[0].meals[MealCategory.DINNER].selected_option_id

        weekly = switch_draft_mode(draft, DraftMode.WEEKLY)
        for day in weekly.days:
            meal = day.meals[MealCategory.DINNER]
            assert meal.locked
            assert meal.selected_option_id == selected

    def test_collapse_keeps_first_day(self, weekly_draft):
        first = copy.deepcopy(weekly_draft.days[0])
        daily = switch_draft_mode(weekly_draft, DraftMode.DAILY)
        assert daily.mode == DraftMode.DAILY
        assert len(daily.days) == 1
        assert daily.days[0] == first

    def test_round_trip_is_one_day(self, ai_draft):
        back = switch_draft_mode(switch_draft_mode(ai_draft, DraftMode.WEEKLY), DraftMode.DAILY)
        assert len(back.days) == 1
        assert back.days[0].label == "Monday"

    def test_custom_collapse_policy(self, weekly_draft):
        daily = switch_draft_mode(weekly_draft, DraftMode.DAILY, collapse=lambda days: days[-1])
        assert daily.days[0].label == "Sunday"

    def test_same_mode_is_noop(self, ai_draft):
        assert switch_draft_mode(ai_draft, DraftMode.DAILY) is ai_draft

    def test_empty_days_is_noop(self, ai_draft):
        draft = copy.deepcopy(ai_draft)
        draft.days = []
        assert switch_draft_mode(draft, DraftMode.WEEKLY) is draft

    def test_does_not_refresh(self, ai_draft):
        weekly = switch_draft_mode(ai_draft, DraftMode.WEEKLY)
        assert weekly.shopping == ai_draft.shopping
        assert weekly.updated_at == ai_draft.updated_at
