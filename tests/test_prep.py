from meal_prep.config import DEFAULTS
from meal_prep.models import PrepBucket, TaskCategory
from meal_prep.prep import build_prep_blocks, estimate_minutes, find_task, toggle_task


def _block(draft, block_id):
    return next(b for b in draft.prep_blocks if b.id == block_id)


class TestBuildPrepBlocks:
    def test_one_block_per_bucket(self, ai_draft):
        assert [b.id for b in ai_draft.prep_blocks] == [
            "block-produce", "block-protein", "block-grains", "block-other",
        ]

    def test_tasks_per_action(self, ai_draft):
        produce = _block(ai_draft, "block-produce")
        assert [t.id for t in produce.tasks] == [
            "task-produce-chop", "task-produce-portion", "task-produce-store",
        ]
        other = _block(ai_draft, "block-other")
        assert [t.category for t in other.tasks] == [TaskCategory.PORTION, TaskCategory.STORE]

    def test_total_is_task_sum(self, ai_draft):
        for block in ai_draft.prep_blocks:
            assert block.total_minutes == sum(t.duration_minutes for t in block.tasks)
        # two produce items: chop 10, portion 5, store 5
        assert _block(ai_draft, "block-produce").total_minutes == 20

    def test_subtitle_counts(self, ai_draft, weekly_draft):
        assert _block(ai_draft, "block-produce").subtitle.endswith("(2 ingredients, 1 day)")
        assert _block(weekly_draft, "block-protein").subtitle.endswith("(3 ingredients, 7 days)")

    def test_tips_land_on_matching_block(self, ai_draft):
        grains_first = _block(ai_draft, "block-grains").tasks[0]
        protein_first = _block(ai_draft, "block-protein").tasks[0]
        assert "Cook the brown rice in one batch" in grains_first.description
        assert "Marinate chicken overnight" in protein_first.description
        assert "Tips:" not in _block(ai_draft, "block-produce").tasks[0].description

    def test_empty_shopping_no_blocks(self, ai_draft):
        ai_draft.shopping = []
        ai_draft.original_plan.prep_tips = []
        assert build_prep_blocks(ai_draft) == []

    def test_tips_alone_make_a_block(self, ai_draft):
        ai_draft.shopping = []
        ai_draft.original_plan.prep_tips = ["Wash the salad greens"]
        [block] = build_prep_blocks(ai_draft)
        assert block.id == "block-produce"
        assert "(0 ingredients, 1 day)" in block.subtitle


class TestEstimateMinutes:
    def test_clamped(self):
        assert estimate_minutes(TaskCategory.CHOP, 1, DEFAULTS) == 10
        assert estimate_minutes(TaskCategory.CHOP, 5, DEFAULTS) == 15
        assert estimate_minutes(TaskCategory.CHOP, 100, DEFAULTS) == 45


class TestToggleTask:
    def test_flips(self, ai_draft):
        done = toggle_task(ai_draft, "task-grains-cook")
        assert find_task(done, "task-grains-cook").completed is True
        assert find_task(ai_draft, "task-grains-cook").completed is False
        undone = toggle_task(done, "task-grains-cook")
        assert find_task(undone, "task-grains-cook").completed is False

    def test_unknown_task(self, ai_draft):
        assert toggle_task(ai_draft, "task-nope") is ai_draft

    def test_bucket_values(self):
        assert [b.value for b in PrepBucket] == ["produce", "protein", "grains", "other"]
