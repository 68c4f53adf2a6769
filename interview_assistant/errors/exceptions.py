from fastapi import HTTPException
from starlette.status import HTTP_400_BAD_REQUEST, HTTP_500_INTERNAL_SERVER_ERROR, HTTP_409_CONFLICT

class BadRequest(HTTPException):
    def __init__(self, detail: str = "Bad request"):
        super().__init__(status_code=HTTP_400_BAD_REQUEST, detail=detail)

class InternalServerError(HTTPException):
    def __init__(self, detail: str = "Internal server error"):
        super().__init__(status_code=HTTP_500_INTERNAL_SERVER_ERROR, detail=detail)

class DuplicateRecordError(HTTPException):
    def __init__(self, detail: str):
        super().__init__(
            status_code=HTTP_409_CONFLICT,
            detail=detail
        )
class DuplicateSessionRecordError(DuplicateRecordError):
    def __init__(self, identifier: str = None):
        detail = f"Session record '{identifier}' already exists." if identifier else "Session record already exists."
        super().__init__(detail=detail)
class DuplicateCandidateError(DuplicateRecordError):
    def __init__(self, identifier: str = None):
        detail = f"Candidate '{identifier}' already exists." if identifier else "Candidate already exists."
        super().__init__(detail=detail)

# Interview session failures. These never reach an HTTP client from the
# orchestrator; it turns them into a degraded or terminal session state.
class InterviewError(Exception):
    def __init__(self, detail: str = "Interview error"):
        super().__init__(detail)
        self.detail = detail

class UploadFailure(InterviewError):
    def __init__(self, detail: str = "Failed to parse resume"):
        super().__init__(detail)

class GenerationFailure(InterviewError):
    def __init__(self, detail: str = "Failed to generate question"):
        super().__init__(detail)

class EvaluationFailure(InterviewError):
    def __init__(self, detail: str = "Failed to evaluate interview"):
        super().__init__(detail)

class AudioAnalysisFailure(InterviewError):
    def __init__(self, detail: str = "Failed to analyze audio"):
        super().__init__(detail)

class PermissionDenied(InterviewError):
    def __init__(self, detail: str = "Microphone access denied"):
        super().__init__(detail)

class RehydrationError(InterviewError):
    def __init__(self, detail: str = "Persisted session could not be restored"):
        super().__init__(detail)

class IllegalTransitionError(InterviewError):
    def __init__(self, current: str, target: str):
        super().__init__(f"Illegal status transition: {current} -> {target}")
        self.current = current
        self.target = target
