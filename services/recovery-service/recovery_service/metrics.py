from prometheus_client import Counter

READINESS_COMPUTATIONS_TOTAL = Counter(
    "recovery_readiness_computations_total",
    "Number of readiness reports computed in recovery-service",
)

FEEDBACK_ENTRIES_RECORDED_TOTAL = Counter(
    "recovery_feedback_entries_recorded_total",
    "Number of recovery feedback entries recorded",
    ["feeling"],  # GOOD | TIGHT | SORE | INJURED
)

FEEDBACK_ENTRIES_DELETED_TOTAL = Counter(
    "recovery_feedback_entries_deleted_total",
    "Number of recovery feedback entries deleted",
)

UPSTREAM_FAILURES_TOTAL = Counter(
    "recovery_upstream_failures_total",
    "Number of failed upstream loads while building a readiness report",
    ["source"],  # workouts-service | feedback-store
)
