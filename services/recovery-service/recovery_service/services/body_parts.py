import re

FULL_BODY_KEY = "fullbody"

_SEPARATORS = re.compile(r"[\s_\-]+")

# Alias targets must not themselves be alias keys, so normalization stays idempotent.
BODY_PART_ALIASES: dict[str, str] = {
    "quads": "quadriceps",
    "quad": "quadriceps",
    "hams": "hamstrings",
    "hamstring": "hamstrings",
    "glute": "glutes",
    "abdominals": "abs",
    "ab": "abs",
    "calf": "calves",
    "shoulder": "shoulders",
    "delts": "shoulders",
    "lats": "back",
    "lower body": "legs",
    "full body": FULL_BODY_KEY,
    "total body": FULL_BODY_KEY,
}

_LABEL_OVERRIDES: dict[str, str] = {
    FULL_BODY_KEY: "Full Body",
}


def _collapse(raw_name: str) -> str:
    return _SEPARATORS.sub(" ", raw_name.strip().lower()).strip()


def normalize_key(raw_name: str) -> str:
    """Canonical body-part key: lower case, single-space separated, aliases resolved.

    "Lower_Back", "lower-back" and " Lower  Back " all become "lower back".
    """
    collapsed = _collapse(raw_name)
    return BODY_PART_ALIASES.get(collapsed, collapsed)


def format_label(raw_name: str) -> str:
    key = normalize_key(raw_name)
    if not key:
        return "Unknown"
    if key in _LABEL_OVERRIDES:
        return _LABEL_OVERRIDES[key]
    return " ".join(word[:1].upper() + word[1:] for word in key.split(" "))


def exercise_body_parts(raw_names: list[str]) -> list[str]:
    """Canonical keys targeted by one exercise, in first-seen order.

    An exercise without any usable body-part tag loads the whole body.
    """
    keys: list[str] = []
    for raw in raw_names:
        key = normalize_key(raw)
        if key and key not in keys:
            keys.append(key)
    return keys or [FULL_BODY_KEY]
