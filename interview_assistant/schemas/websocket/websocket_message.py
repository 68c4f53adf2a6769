"""
Description: 
This module defines the schemas for WebSocket messages exchanged with an
interview client.

# WebSocketMessage is the base class for all messages sent to the client.
# WebSocketClientEvent is the schema for events the client sends.
# InterviewConnectionRequest is the first message of every connection.

Dependencies:
- pydantic: For data validation and settings management.
- typing: For type annotations.
"""

import time
from pydantic import BaseModel, Field
from typing import Any, Dict, Literal, Optional

def _timestamp() -> str:
    return str(int(time.time() * 1000))

# Base model for all websocket messages sent by the server
class WebSocketMessage(BaseModel):
    type: Literal["state", "resume_prompt", "notice", "transcript", "error", "heartbeat"]
    content: str = ""
    state: Optional[Dict[str, Any]] = None
    timestamp: str = Field(default_factory=_timestamp)

# Model for events sent by the client after the connection request
class WebSocketClientEvent(BaseModel):
    type: Literal[
        "ping", "heartbeat", "upload_resume", "message", "submit_answer",
        "voice_start", "audio_chunk", "voice_stop", "resume_session", "start_over",
    ]
    content: Optional[str] = None
    data: Optional[str] = Field(default=None, description="Base64 payload for upload_resume and audio_chunk")
    permissionGranted: bool = Field(default=True, description="Microphone permission reported by the client")

# First message of a connection
class InterviewConnectionRequest(BaseModel):
    clientId: str = Field(..., min_length=1, max_length=128, description="Stable id of the candidate's browser tab")
    voiceSupported: bool = Field(default=True, description="Whether the client can record audio")
