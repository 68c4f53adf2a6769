from fastapi import Request, HTTPException
from fastapi.responses import JSONResponse
from loguru import logger
from starlette.status import HTTP_500_INTERNAL_SERVER_ERROR
from sqlalchemy.exc import IntegrityError
from interview_assistant.errors.exceptions import DuplicateSessionRecordError, DuplicateCandidateError

def http_exception_handler(request: Request, exc: HTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail},
    )

def generic_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled error on {request.url.path}: {exc}")
    return JSONResponse(
        status_code=HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "An unexpected error occurred."},
    )
def database_integrity_handler(request: Request, exc: IntegrityError):
    """
    Handle SQLAlchemy integrity constraint violations.
    
    Converts database errors into user-friendly responses, with special
    handling for duplicate key violations.
    
    Args:
        request: FastAPI request instance
        exc: IntegrityError from SQLAlchemy
        
    Returns:
        JSONResponse with 400 status, or the 409 response of the matching duplicate error
    """
    error_msg = str(exc.orig).lower()
    
    if "duplicate key" in error_msg or "unique constraint" in error_msg:
        if "session_records" in error_msg:
            return http_exception_handler(request, DuplicateSessionRecordError())
        elif "candidate_records" in error_msg:
            return http_exception_handler(request, DuplicateCandidateError())
    
    return JSONResponse(
        status_code=400,
        content={
            "error": "Database error",
            "message": "Data constraint violation",
            "hint": "Please check your data and try again"
        }
    )
