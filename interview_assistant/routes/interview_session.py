"""
Description:
WebSocket route for candidate interview sessions.
The first message is {"clientId": ..., "voiceSupported": ...}; after that the client sends
candidate actions and receives state snapshots, notices, live transcripts and the resume prompt.

Dependencies:
- fastapi: For creating the FastAPI application and handling WebSocket connections.
- interview_assistant.services.interview_session.websocket_utils: For the connection lifecycle.
"""
from fastapi import APIRouter, Depends, WebSocket
from interview_assistant.services.interview_session.websocket_utils.handle_interview_connection import (
    OrchestratorFactory,
    get_orchestrator_factory,
    handle_interview_connection,
)

router = APIRouter(
    prefix="/api",
    tags=["interview-session"],
    responses={404: {"description": "Not found"}}
)

@router.websocket("/ws/interview")
async def interview_websocket(websocket: WebSocket, orchestrator_factory: OrchestratorFactory = Depends(get_orchestrator_factory)):
    await handle_interview_connection(websocket, orchestrator_factory)
