from fastapi import HTTPException, status


class NotFoundException(HTTPException):
    def __init__(self, detail: str = "Object not found"):
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


class FeedbackNotFoundException(NotFoundException):
    def __init__(self, feedback_id: int):
        super().__init__(detail=f"Recovery feedback with id={feedback_id} not found")


class FeedbackForbiddenException(HTTPException):
    def __init__(self, feedback_id: int):
        super().__init__(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=f"Recovery feedback with id={feedback_id} belongs to another user",
        )


class EmptyFeedbackBatchException(HTTPException):
    def __init__(self):
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail="No feedback provided")


class UpstreamUnavailableException(HTTPException):
    def __init__(self, source: str, detail: str | None = None, recorded_ids: list[int] | None = None):
        self.source = source
        # ids of feedback that was stored before the failure, if any
        self.recorded_ids = recorded_ids
        super().__init__(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=detail or f"{source} is unavailable",
        )
