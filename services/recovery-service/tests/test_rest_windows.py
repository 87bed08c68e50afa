import json

import pytest

from recovery_service.config import Settings
from recovery_service.services.body_parts import FULL_BODY_KEY
from recovery_service.services.rest_windows import (
    DEFAULT_REST_WINDOW_HOURS,
    DEFAULT_REST_WINDOWS,
    InvalidRestWindowTableError,
    RestWindowPolicy,
    build_rest_window_policy,
)


def test_large_groups_rest_longer_than_small_ones():
    policy = RestWindowPolicy(DEFAULT_REST_WINDOWS)
    for large in ("quadriceps", "hamstrings", "glutes", "lower back"):
        for small in ("biceps", "triceps", "forearms", "abs", "core"):
            assert policy.rest_window_hours(large) > policy.rest_window_hours(small)


def test_lookup_normalizes_keys():
    policy = RestWindowPolicy(DEFAULT_REST_WINDOWS)
    assert policy.rest_window_hours("Lower_Back") == 72
    assert policy.rest_window_hours("quads") == 72
    assert policy.rest_window_hours(FULL_BODY_KEY) == 72


def test_unmapped_key_gets_default():
    policy = RestWindowPolicy(DEFAULT_REST_WINDOWS)
    assert policy.rest_window_hours("tibialis anterior") == DEFAULT_REST_WINDOW_HOURS
    assert RestWindowPolicy({}, default_hours=30).rest_window_hours("anything") == 30


def test_table_keys_are_normalized_at_load():
    policy = RestWindowPolicy({"Rear-Delts": 40, "QUADS": 80})
    assert policy.as_dict() == {"rear delts": 40.0, "quadriceps": 80.0}


@pytest.mark.parametrize("bad", [0, -5, "48", None, True])
def test_non_positive_or_non_numeric_windows_are_rejected(bad):
    with pytest.raises(InvalidRestWindowTableError):
        RestWindowPolicy({"chest": bad})


def test_non_positive_default_is_rejected():
    with pytest.raises(InvalidRestWindowTableError):
        RestWindowPolicy({}, default_hours=0)


def test_overrides_from_json_setting():
    settings = Settings(RECOVERY_REST_WINDOWS_JSON=json.dumps({"Chest": 60, "rotator cuff": 96}))
    policy = build_rest_window_policy(settings)
    assert policy.rest_window_hours("chest") == 60
    assert policy.rest_window_hours("Rotator-Cuff") == 96
    # untouched entries keep the default table
    assert policy.rest_window_hours("biceps") == 36


def test_overrides_from_file_and_default(tmp_path):
    path = tmp_path / "windows.json"
    path.write_text(json.dumps({"lower_back": 96}))
    settings = Settings(RECOVERY_REST_WINDOWS_PATH=str(path), RECOVERY_DEFAULT_REST_WINDOW_HOURS=40)
    policy = build_rest_window_policy(settings)
    assert policy.rest_window_hours("lower back") == 96
    assert policy.rest_window_hours("unknown part") == 40


def test_broken_override_sources_fail_loudly(tmp_path):
    with pytest.raises(InvalidRestWindowTableError):
        build_rest_window_policy(Settings(RECOVERY_REST_WINDOWS_JSON="{not json"))
    with pytest.raises(InvalidRestWindowTableError):
        build_rest_window_policy(Settings(RECOVERY_REST_WINDOWS_JSON="[1, 2]"))
    with pytest.raises(InvalidRestWindowTableError):
        build_rest_window_policy(Settings(RECOVERY_REST_WINDOWS_PATH=str(tmp_path / "missing.json")))
