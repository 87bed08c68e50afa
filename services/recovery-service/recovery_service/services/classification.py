from ..schemas.feedback import Feeling
from ..schemas.recovery import RecoveryStatus

CAUTION_FRACTION = 0.5


def classify_status(
    hours_since_last: float | None,
    rest_window_hours: float,
    feeling: Feeling | None = None,
) -> RecoveryStatus:
    """Readiness of one body part. First matching rule wins:

    1. SORE or INJURED feedback -> pain, regardless of timing.
    2. Never trained and no negative feedback -> ready.
    3. Rest window elapsed and no negative feedback -> ready.
    4. TIGHT feedback caps the result at caution: a part that would be
       ready on timing alone (or was never trained) is caution instead.
    5. At least half the rest window elapsed -> caution.
    6. Otherwise -> rest.
    """
    if feeling is not None and feeling.is_severe:
        return RecoveryStatus.pain

    tight = feeling is Feeling.TIGHT

    if hours_since_last is None:
        return RecoveryStatus.caution if tight else RecoveryStatus.ready

    if hours_since_last >= rest_window_hours:
        return RecoveryStatus.caution if tight else RecoveryStatus.ready

    if hours_since_last >= CAUTION_FRACTION * rest_window_hours:
        return RecoveryStatus.caution

    return RecoveryStatus.rest
