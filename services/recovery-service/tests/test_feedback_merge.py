from factories import NOW, make_exercise, make_feedback, make_session

from recovery_service.schemas.feedback import Feeling
from recovery_service.services.aggregation import aggregate
from recovery_service.services.feedback_merge import latest_feedback_by_part, merge, snapshot


def test_latest_entry_wins_per_body_part():
    entries = [
        make_feedback(1, "hamstrings", Feeling.SORE, hours_ago=30),
        make_feedback(2, "hamstrings", Feeling.GOOD, hours_ago=2),
        make_feedback(3, "hamstrings", Feeling.TIGHT, hours_ago=10),
    ]

    latest = latest_feedback_by_part(entries)

    assert latest["hamstrings"].id == 2
    assert latest["hamstrings"].feeling is Feeling.GOOD


def test_same_timestamp_goes_to_higher_id():
    entries = [
        make_feedback(8, "chest", Feeling.GOOD, hours_ago=1),
        make_feedback(5, "chest", Feeling.SORE, hours_ago=1),
    ]
    assert latest_feedback_by_part(entries)["chest"].id == 8
    assert latest_feedback_by_part(list(reversed(entries)))["chest"].id == 8


def test_spelling_variants_merge_into_one_key():
    entries = [
        make_feedback(1, "Lower_Back", Feeling.INJURED, hours_ago=5),
        make_feedback(2, "lower-back", Feeling.TIGHT, hours_ago=1),
        make_feedback(3, "quads", Feeling.SORE, hours_ago=1),
    ]

    latest = latest_feedback_by_part(entries)

    assert set(latest) == {"lower back", "quadriceps"}
    assert latest["lower back"].id == 2


def test_blank_body_part_is_ignored():
    assert latest_feedback_by_part([make_feedback(1, "  ", Feeling.SORE)]) == {}


def test_merge_attaches_feedback_to_trained_part():
    aggregates = aggregate([make_session(1, hours_ago=10, exercises=[make_exercise("Chest")])], NOW)

    merged = merge(aggregates, [make_feedback(1, "chest", Feeling.TIGHT)])

    assert merged["chest"].feedback.id == 1
    assert merged["chest"].session_ids == {1}


def test_merge_creates_untrained_part_for_feedback_only():
    merged = merge({}, [make_feedback(4, "neck", Feeling.SORE, hours_ago=3)])

    neck = merged["neck"]
    assert neck.label == "Neck"
    assert neck.last_trained_at is None
    assert neck.session_ids == set()
    assert neck.average_sets == 0.0
    assert neck.feedback.id == 4


def test_snapshot_flags_negative_signal():
    good = snapshot(make_feedback(1, "upper back", Feeling.GOOD, intensity=2.0))
    tight = snapshot(make_feedback(2, "upper back", Feeling.TIGHT, note="stiff"))

    assert good.body_part == "Upper Back"
    assert good.has_negative_signal is False
    assert good.intensity == 2.0
    assert tight.has_negative_signal is True
    assert tight.note == "stiff"
    assert tight.created_at == NOW
