import asyncio
import os
from dotenv import load_dotenv
from fastapi import FastAPI
from slowapi.errors import RateLimitExceeded
from contextlib import asynccontextmanager
from slowapi import _rate_limit_exceeded_handler
# Rate Limiter
from interview_assistant.core.route_limiters import limiter
# Routers
from interview_assistant.routes.health import router as health_router
from interview_assistant.routes.resume import router as resume_router
from interview_assistant.routes.questions import router as questions_router
from interview_assistant.routes.evaluation import router as evaluation_router
from interview_assistant.routes.audio_analysis import router as audio_analysis_router
from interview_assistant.routes.candidates import router as candidates_router
from interview_assistant.routes.interview_session import router as interview_session_router
# CORS Middleware
from interview_assistant.core.cors_middleware import add_cors_middleware
# Logger
from loguru import logger
# Database
from interview_assistant.database import create_tables
# Speech model
from interview_assistant.services.transcription.transcriber import load_whisper_model
# Error Handling
from fastapi.exceptions import RequestValidationError
from fastapi import HTTPException, Request
from fastapi.responses import JSONResponse
from starlette.status import HTTP_422_UNPROCESSABLE_ENTITY
from sqlalchemy.exc import IntegrityError

from interview_assistant.errors.handlers import http_exception_handler, generic_exception_handler, database_integrity_handler

# Load environment variables
load_dotenv()

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage application lifespan events."""
    try:
        create_tables()
        logger.info("Application startup completed successfully")
    except Exception as e:
        logger.error(f"Error during application startup: {e}")
        raise

    # Whisper loads in a worker thread; the event loop must never block on it
    if os.getenv("ENV") != "test" and os.getenv("WHISPER_PRELOAD", "true").lower() != "false":
        try:
            await asyncio.to_thread(load_whisper_model)
            logger.info("Whisper model loaded")
        except Exception as e:
            logger.error(f"Failed to preload whisper model, voice answers will load it on first use: {e}")
    
    yield
    
    logger.info("Application shutdown")

# Initialize FastAPI app
app = FastAPI(
    title="Interview Assistant API",
    description="Automated technical screening interviews: resume intake, timed AI questions, voice answers and scoring",
    version="0.1.0",
    lifespan=lifespan
)
# Add CORS middleware
add_cors_middleware(app)    

# Centralized error handlers
app.add_exception_handler(HTTPException, http_exception_handler)
app.add_exception_handler(Exception, generic_exception_handler)
app.add_exception_handler(IntegrityError, database_integrity_handler)

@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=HTTP_422_UNPROCESSABLE_ENTITY,
        content={"detail": exc.errors()},
    )

# Add rate limiter to the app
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

# Include routers
app.include_router(health_router)
app.include_router(resume_router)
app.include_router(questions_router)
app.include_router(evaluation_router)
app.include_router(audio_analysis_router)
app.include_router(candidates_router)
app.include_router(interview_session_router)
