from .feedback import Feeling, FeedbackCreate, FeedbackEntry
from .recovery import (
    BodyPartState,
    FeedbackSnapshot,
    NextEligible,
    RecentSession,
    RecoveryResponse,
    RecoveryStatus,
    RecoverySummary,
    TrendPoint,
)
from .sessions import SessionExercise, TrainingSession
