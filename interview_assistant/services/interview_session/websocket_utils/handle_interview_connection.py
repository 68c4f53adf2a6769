"""
Interview WebSocket Connection Handler Module

Runs the WebSocket conversation for one candidate: the first message names the
client, later messages are candidate actions forwarded to that client's
InterviewOrchestrator. Frames produced by the orchestrator are drained from its
outbox by a sender task, so the client receives them in order.

Dependencies:
- starlette.websockets: For WebSocket connection handling.
- pydantic: For validating client frames.
- loguru: For logging operations.
"""

import asyncio
import base64
import binascii
from typing import Callable, Dict

from loguru import logger
from pydantic import ValidationError
from starlette.websockets import WebSocket, WebSocketDisconnect

from interview_assistant.database import SessionLocal
from interview_assistant.schemas.websocket.websocket_message import (
    InterviewConnectionRequest,
    WebSocketClientEvent,
    WebSocketMessage,
)
from interview_assistant.services.collaborators import get_interview_collaborators
from interview_assistant.services.interview_session.interview_orchestrator import InterviewOrchestrator
from interview_assistant.services.interview_session.tools.session_persistence import SessionPersistence
from interview_assistant.services.persistence.candidate_repository import CandidateRepository
from interview_assistant.services.persistence.session_store import SqlSessionStore
from interview_assistant.services.voice_capture import select_voice_capability

OrchestratorFactory = Callable[[str, bool], InterviewOrchestrator]

# One live orchestrator per client; a reconnect replaces the previous one
_active_orchestrators: Dict[str, InterviewOrchestrator] = {}


def build_orchestrator(client_id: str, voice_supported: bool) -> InterviewOrchestrator:
    return InterviewOrchestrator(
        collaborators=get_interview_collaborators(),
        persistence=SessionPersistence(SqlSessionStore(SessionLocal, namespace=client_id)),
        voice_capability=select_voice_capability(voice_supported),
        candidate_repository=CandidateRepository(SessionLocal),
    )


def get_orchestrator_factory() -> OrchestratorFactory:
    """FastAPI dependency, overridden in tests."""
    return build_orchestrator


def error_message(content: str) -> WebSocketMessage:
    return WebSocketMessage(type="error", content=content)


def decode_payload(data: str) -> bytes:
    """Decode a base64 payload, raising ValueError if it is missing or malformed."""
    if not data:
        raise ValueError("Missing 'data' field")
    try:
        return base64.b64decode(data, validate=True)
    except binascii.Error as e:
        raise ValueError("Invalid base64 data") from e


async def pump_outbox(websocket: WebSocket, orchestrator: InterviewOrchestrator) -> None:
    """Send queued frames to the client until cancelled or the socket closes."""
    try:
        while True:
            message = await orchestrator.outbox.get()
            await websocket.send_json(message.model_dump())
    except WebSocketDisconnect:
        logger.info("WebSocket closed while sending")


def handle_client_event(orchestrator: InterviewOrchestrator, event: WebSocketClientEvent) -> None:
    """Forward one client frame to the orchestrator."""
    message_type = event.type

    if message_type in ("ping", "heartbeat"):
        orchestrator.publish(WebSocketMessage(type="heartbeat", content="pong"))
        return

    if message_type == "upload_resume":
        try:
            document = decode_payload(event.data)
        except ValueError as e:
            orchestrator.publish(error_message(f"{e} for resume upload"))
            return
        orchestrator.upload_resume(document, event.content or "resume.pdf")
        return

    if message_type == "message":
        orchestrator.send_message(event.content or "")
        return

    if message_type == "submit_answer":
        orchestrator.submit_answer(event.content or "")
        return

    if message_type == "voice_start":
        orchestrator.start_voice(event.permissionGranted)
        return

    if message_type == "audio_chunk":
        try:
            orchestrator.feed_audio(decode_payload(event.data))
        except ValueError as e:
            orchestrator.publish(error_message(f"{e} for audio chunk"))
        return

    if message_type == "voice_stop":
        orchestrator.stop_voice()
        return

    if message_type == "resume_session":
        orchestrator.resume()
        return

    if message_type == "start_over":
        orchestrator.start_over()
        return


async def handle_interview_connection(websocket: WebSocket, orchestrator_factory: OrchestratorFactory = build_orchestrator):
    """
    Full lifecycle of an interview WebSocket connection.
    """
    await websocket.accept()
    try:
        initial_message = await websocket.receive_json()
        connection = InterviewConnectionRequest.model_validate(initial_message)
    except WebSocketDisconnect:
        logger.info("WebSocket disconnected before the session started")
        return
    except (ValidationError, ValueError) as e:
        logger.warning(f"Invalid interview connection request: {e}")
        await websocket.send_json(error_message("First message must be {\"clientId\": ...}").model_dump())
        await websocket.close(code=1008)
        return

    client_id = connection.clientId
    previous = _active_orchestrators.pop(client_id, None)
    if previous is not None:
        logger.info(f"Replacing the live session of client {client_id}")
        await previous.close()

    orchestrator = orchestrator_factory(client_id, connection.voiceSupported)
    _active_orchestrators[client_id] = orchestrator
    sender = asyncio.create_task(pump_outbox(websocket, orchestrator), name=f"interview-sender-{client_id}")
    logger.info(f"Interview session started for client {client_id}")

    try:
        orchestrator.start()
        while True:
            raw_message = await websocket.receive_json()
            try:
                event = WebSocketClientEvent.model_validate(raw_message)
            except ValidationError:
                logger.warning(f"Unknown or malformed message: {raw_message.get('type') if isinstance(raw_message, dict) else raw_message}")
                orchestrator.publish(error_message("Unknown or malformed message"))
                continue
            handle_client_event(orchestrator, event)
    except WebSocketDisconnect:
        logger.info(f"WebSocket disconnected for client {client_id}")
    finally:
        if _active_orchestrators.get(client_id) is orchestrator:
            del _active_orchestrators[client_id]
        await orchestrator.close()
        sender.cancel()
        await asyncio.gather(sender, return_exceptions=True)
